"""
Laycan evaluation: ETA at the load port versus the cargo's loading window.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional

INFEASIBLE = "infeasible"
EARLY = "early"
FEASIBLE = "feasible"

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class LaycanWindow:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class LaycanEvaluation:
    status: str
    eta: datetime
    waiting_days: float
    ballast_days: float


def parse_date(d: Any) -> Optional[datetime]:
    """YYYY-MM-DD string, date or datetime -> datetime; None when unparseable."""
    if d is None:
        return None
    if isinstance(d, datetime):
        return d
    if isinstance(d, date):
        return datetime(d.year, d.month, d.day)
    try:
        return datetime.strptime(str(d).strip(), "%Y-%m-%d")
    except ValueError:
        return None


def calculate_ballast_days(distance_nm: float, speed_kn: float) -> float:
    return distance_nm / speed_kn / 24.0 if speed_kn > 0 else 0.0


def evaluate_laycan(
    departure: datetime,
    ballast_nm: float,
    ballast_speed: float,
    laycan: LaycanWindow,
) -> LaycanEvaluation:
    """
    Classify the arrival at the load port:
      ETA after laycan end    -> infeasible
      ETA before laycan start -> early (waiting days until the window opens)
      otherwise               -> feasible
    """
    ballast_days = calculate_ballast_days(ballast_nm, ballast_speed)
    eta = departure + timedelta(days=ballast_days)

    if eta > laycan.end:
        return LaycanEvaluation(INFEASIBLE, eta, 0.0, ballast_days)

    if eta < laycan.start:
        waiting = (laycan.start - eta).total_seconds() / SECONDS_PER_DAY
        return LaycanEvaluation(EARLY, eta, waiting, ballast_days)

    return LaycanEvaluation(FEASIBLE, eta, 0.0, ballast_days)


def waiting_cost(
    evaluation: LaycanEvaluation,
    hire_rate: float,
    idle_ifo: float,
    idle_mdo: float,
    ifo_price: float,
    mdo_price: float,
) -> float:
    """Hire plus idle bunker burn for every day spent waiting for the laycan to open."""
    if evaluation.status != EARLY or evaluation.waiting_days <= 0:
        return 0.0
    daily = hire_rate + idle_ifo * ifo_price + idle_mdo * mdo_price
    return evaluation.waiting_days * daily
