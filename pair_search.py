"""
pair_search.py: best operating point for one vessel/cargo pair.

Grid: cargo quantity (1% steps across the contractual range)
    × ballast speed blend (0..1) × laden speed blend (0..1).

Enumeration order is quantity outer, ballast blend middle, laden blend
inner; the first point reaching the best adjusted profit is kept.

Pairs that can never work (non-positive freight, no laycan data, laycan
missed at the natural departure date) are excluded before the grid is
enumerated. The reason is kept on the PairEvaluation as an `issue` string.
"""

import logging
from collections import Counter
from dataclasses import dataclass, replace
from datetime import datetime
from multiprocessing import Pool
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional, Sequence

import numpy as np

from config import (
    BLEND_STEP,
    BUNKER_DAYS,
    DEFAULT_IFO_PRICE,
    DEFAULT_MDO_PRICE,
    MIN_QUANTITY_STEP,
    QUANTITY_STEP_FRACTION,
    QUANTITY_STEP_TOLERANCE,
)
from feasibility import check_quantity_range, check_weight, has_positive_freight
from freight_calculator import SpeedBlend, VoyageCosts, VoyageResult, compute_voyage, voyage_profit_grid
from laycan import INFEASIBLE, LaycanEvaluation, evaluate_laycan, parse_date, waiting_cost
from port_distances import DistanceLookup
from vessel_cargo_data import CargoContract, VesselProfile

logger = logging.getLogger(__name__)

ISSUE_NON_POSITIVE_FREIGHT = "non_positive_freight"
ISSUE_MISSING_LAYCAN = "missing_laycan"
ISSUE_MISSING_DEPARTURE = "missing_departure_date"
ISSUE_MISSED_LAYCAN = "missed_laycan"
ISSUE_NO_FEASIBLE_POINT = "no_feasible_grid_point"

ALL_ISSUES = [
    ISSUE_NON_POSITIVE_FREIGHT,
    ISSUE_MISSING_LAYCAN,
    ISSUE_MISSING_DEPARTURE,
    ISSUE_MISSED_LAYCAN,
    ISSUE_NO_FEASIBLE_POINT,
]

DistanceFn = Callable[[str, str], DistanceLookup]


# ============================================================================
# Scenario inputs
# ============================================================================

@dataclass(frozen=True)
class Scenario:
    ifo_price: float = DEFAULT_IFO_PRICE
    mdo_price: float = DEFAULT_MDO_PRICE
    port_delay_days: float = 0.0
    market_hire_rate: Optional[float] = None

    def costs(self, base: Optional[VoyageCosts] = None) -> VoyageCosts:
        return replace(base or VoyageCosts(), ifo_price=self.ifo_price, mdo_price=self.mdo_price)


def apply_scenario(vessels: Sequence[VesselProfile], cargos: Sequence[CargoContract], scenario: Scenario):
    """
    Returns (vessels, cargos) with the scenario folded in:
    market vessels re-hired at market_hire_rate, port delay added to idle days.
    """
    if scenario.market_hire_rate is not None:
        vessels = [
            replace(v, hire_rate=float(scenario.market_hire_rate)) if v.source == "market" else v
            for v in vessels
        ]
    if scenario.port_delay_days:
        cargos = [replace(c, port_idle_days=c.port_idle_days + scenario.port_delay_days) for c in cargos]
    return list(vessels), list(cargos)


def costs_for_cargo(cargo: CargoContract, base: VoyageCosts) -> VoyageCosts:
    """Port disbursements always come from the cargo's own port costs."""
    return replace(base, port_disb_load=cargo.port_cost_load, port_disb_dis=cargo.port_cost_discharge)


# ============================================================================
# Grid
# ============================================================================

class GridPoint(NamedTuple):
    quantity: float
    ballast_blend: float
    laden_blend: float


def blend_axis(step: float = BLEND_STEP) -> List[float]:
    """[0.0, step, 2*step, ..., 1.0]; 101 points at the default 0.01 step."""
    if not 0 < step <= 1:
        raise ValueError(f"blend step must be in (0, 1], got {step}")
    n = int(round(1.0 / step))
    return [i / n for i in range(n + 1)]


def quantity_axis(cargo: CargoContract) -> List[float]:
    """
    Without a contractual range: the base quantity only.
    With one: min -> max inclusive in steps of max(1% of base, 1 MT).
    """
    rng = cargo.quantity_range
    if rng is None:
        return [cargo.quantity]

    lo, hi = rng.lower, rng.upper
    step = max(cargo.quantity * QUANTITY_STEP_FRACTION, MIN_QUANTITY_STEP)
    values = []
    k = 0
    while lo + k * step <= hi + QUANTITY_STEP_TOLERANCE:
        values.append(min(lo + k * step, hi))
        k += 1
    return values


def iter_grid_points(quantities: Sequence[float], blends: Sequence[float]) -> Iterator[GridPoint]:
    for qty in quantities:
        for ballast in blends:
            for laden in blends:
                yield GridPoint(qty, ballast, laden)


def combination_count(quantity_steps: int, blend_points: int = 101) -> int:
    return quantity_steps * blend_points * blend_points


def pair_combination_count(cargo: CargoContract, blend_step: float = BLEND_STEP) -> int:
    return combination_count(len(quantity_axis(cargo)), len(blend_axis(blend_step)))


def fleet_combination_count(n_vessels: int, cargos: Sequence[CargoContract], blend_step: float = BLEND_STEP) -> int:
    """Size of the whole search space: every vessel against every cargo grid."""
    return n_vessels * sum(pair_combination_count(c, blend_step) for c in cargos)


# ============================================================================
# Results
# ============================================================================

@dataclass(frozen=True)
class PairResult:
    vessel: VesselProfile
    cargo: CargoContract
    voyage: VoyageResult
    cargo_qty: float
    speed_blend: SpeedBlend
    laycan: LaycanEvaluation
    waiting_cost: float
    adjusted_profit: float
    ballast: DistanceLookup
    laden: DistanceLookup

    @property
    def profit(self) -> float:
        return self.voyage.profit

    @property
    def tce(self) -> float:
        return self.voyage.tce


@dataclass(frozen=True)
class PairEvaluation:
    vessel: VesselProfile
    cargo: CargoContract
    result: Optional[PairResult]
    issue: Optional[str]
    combinations: int
    points_evaluated: int
    ballast: DistanceLookup
    laden: DistanceLookup
    laycan: Optional[LaycanEvaluation] = None

    @property
    def feasible(self) -> bool:
        return self.result is not None


# ============================================================================
# Search
# ============================================================================

def evaluate_pair(
    vessel: VesselProfile,
    cargo: CargoContract,
    distances: DistanceFn,
    reference_date: Any,
    costs: Optional[VoyageCosts] = None,
    blend_step: float = BLEND_STEP,
    bunker_days: float = BUNKER_DAYS,
) -> PairEvaluation:
    """
    Search the quantity × speed-blend grid for the best adjusted profit.

    Args:
        distances: (from_port, to_port) -> DistanceLookup
        reference_date: departure date for vessels without an ETD
        costs: bunker prices and voyage overheads; port costs come from the cargo
    """
    ballast = distances(vessel.current_port, cargo.load_port)
    laden = distances(cargo.load_port, cargo.discharge_port)

    quantities = quantity_axis(cargo)
    blends = blend_axis(blend_step)
    combos = combination_count(len(quantities), len(blends))

    def excluded(issue: str, laycan: Optional[LaycanEvaluation] = None) -> PairEvaluation:
        logger.debug("%s x %s excluded: %s", vessel.name, cargo.name, issue)
        return PairEvaluation(vessel, cargo, None, issue, combos, 0, ballast, laden, laycan)

    if not has_positive_freight(cargo.freight_rate):
        return excluded(ISSUE_NON_POSITIVE_FREIGHT)
    if cargo.laycan is None:
        return excluded(ISSUE_MISSING_LAYCAN)

    departure: Optional[datetime] = vessel.etd or parse_date(reference_date)
    if departure is None:
        return excluded(ISSUE_MISSING_DEPARTURE)

    # Only the departure date and ballast leg drive the ETA, so this is done once per pair
    laycan = evaluate_laycan(departure, ballast.distance_nm, vessel.economical.ballast_speed, cargo.laycan)
    if laycan.status == INFEASIBLE:
        return excluded(ISSUE_MISSED_LAYCAN, laycan)

    pair_costs = costs_for_cargo(cargo, costs or VoyageCosts())
    wait_cost = waiting_cost(
        laycan,
        vessel.hire_rate,
        vessel.port_idle.ifo,
        vessel.port_idle.mdo,
        pair_costs.ifo_price,
        pair_costs.mdo_price,
    )

    best: Optional[PairResult] = None
    evaluated = 0
    n_laden = len(blends)

    # One quantity plane at a time; argmax takes the first maximum in
    # (ballast, laden) row-major order, matching iter_grid_points.
    for qty in quantities:
        if not (
            check_quantity_range(qty, cargo.quantity_range).feasible
            and check_weight(qty, vessel.dwt).feasible
        ):
            continue

        profits = voyage_profit_grid(
            vessel, cargo, ballast.distance_nm, laden.distance_nm, pair_costs, blends, blends,
            bunker_days=bunker_days, cargo_qty=qty,
        )
        evaluated += profits.size
        adjusted = profits - wait_cost
        k = int(np.argmax(adjusted))
        if best is not None and not adjusted.flat[k] > best.adjusted_profit:
            continue

        blend = SpeedBlend(blends[k // n_laden], blends[k % n_laden])
        voyage = compute_voyage(
            vessel, cargo, ballast.distance_nm, laden.distance_nm, pair_costs, blend,
            bunker_days=bunker_days, cargo_qty=qty,
        )
        best = PairResult(
            vessel=vessel,
            cargo=cargo,
            voyage=voyage,
            cargo_qty=qty,
            speed_blend=blend,
            laycan=laycan,
            waiting_cost=wait_cost,
            adjusted_profit=voyage.profit - wait_cost,
            ballast=ballast,
            laden=laden,
        )

    if best is None:
        return PairEvaluation(vessel, cargo, None, ISSUE_NO_FEASIBLE_POINT, combos, evaluated, ballast, laden, laycan)

    logger.debug(
        "%s x %s: adjusted profit %.2f at qty=%.0f blend=(%.2f, %.2f), %d points",
        vessel.name, cargo.name, best.adjusted_profit, best.cargo_qty,
        best.speed_blend.ballast, best.speed_blend.laden, evaluated,
    )
    return PairEvaluation(vessel, cargo, best, None, combos, evaluated, ballast, laden, laycan)


def search_best_pair(
    vessel: VesselProfile,
    cargo: CargoContract,
    distances: DistanceFn,
    reference_date: Any,
    costs: Optional[VoyageCosts] = None,
    blend_step: float = BLEND_STEP,
    bunker_days: float = BUNKER_DAYS,
) -> Optional[PairResult]:
    """Best PairResult for the pair, or None when the pair is excluded."""
    return evaluate_pair(vessel, cargo, distances, reference_date, costs, blend_step, bunker_days).result


def build_pair_matrix(
    vessels: Sequence[VesselProfile],
    cargos: Sequence[CargoContract],
    distances: DistanceFn,
    reference_date: Any,
    costs: Optional[VoyageCosts] = None,
    blend_step: float = BLEND_STEP,
    bunker_days: float = BUNKER_DAYS,
    processes: Optional[int] = None,
) -> List[List[PairEvaluation]]:
    """
    evaluations[i][j] for vessel i and cargo j.

    processes > 1 spreads the independent pair searches over a process
    pool; `distances` must then be picklable (a DistanceTable is).
    """
    tasks = [
        (v, c, distances, reference_date, costs, blend_step, bunker_days)
        for v in vessels
        for c in cargos
    ]
    if processes and processes > 1 and len(tasks) > 1:
        with Pool(processes=processes) as pool:
            flat = pool.starmap(evaluate_pair, tasks)
    else:
        flat = [evaluate_pair(*t) for t in tasks]

    n_c = len(cargos)
    matrix = [flat[i * n_c:(i + 1) * n_c] for i in range(len(vessels))]

    summary = search_summary(matrix)
    logger.info(
        "Evaluated %d pairs: %d feasible, %d excluded, %d grid points of %d",
        summary["pairs_total"], summary["pairs_feasible"], summary["pairs_excluded"],
        summary["points_evaluated"], summary["combinations_total"],
    )
    return matrix


def result_matrix(evaluations: Sequence[Sequence[PairEvaluation]]) -> List[List[Optional[PairResult]]]:
    return [[e.result for e in row] for row in evaluations]


def search_summary(evaluations: Sequence[Sequence[PairEvaluation]]) -> Dict[str, Any]:
    """Counts for the audit trail, including pairs excluded per issue."""
    flat = [e for row in evaluations for e in row]
    issues = Counter(e.issue for e in flat if e.issue is not None)
    return {
        "pairs_total": len(flat),
        "pairs_feasible": sum(1 for e in flat if e.feasible),
        "pairs_excluded": sum(1 for e in flat if not e.feasible),
        "excluded_by_issue": {issue: issues.get(issue, 0) for issue in ALL_ISSUES},
        "combinations_total": sum(e.combinations for e in flat),
        "points_evaluated": sum(e.points_evaluated for e in flat),
        "fallback_legs": sum((not e.ballast.is_exact_match) + (not e.laden.is_exact_match) for e in flat),
    }
