"""
Cargill Ocean Transportation
Freight Calculator for Capesize Vessels

Voyage P&L for one vessel carrying one cargo at a given quantity and
speed blend. Everything here is a pure function of its arguments.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from config import (
    BUNKER_DAYS,
    DEFAULT_BUNKER_DA,
    DEFAULT_CEV,
    DEFAULT_ILHOC,
    DEFAULT_IFO_PRICE,
    DEFAULT_MDO_PRICE,
    DEFAULT_MISC_EXPENSE,
    DEFAULT_PORT_DISB_DIS,
    DEFAULT_PORT_DISB_LOAD,
)
from vessel_cargo_data import CargoContract, LegConsumption, SpeedProfile, VesselProfile


@dataclass(frozen=True)
class SpeedBlend:
    """0.0 = warranted profile, 1.0 = economical profile, per leg."""
    ballast: float
    laden: float


@dataclass(frozen=True)
class VoyageCosts:
    ifo_price: float = DEFAULT_IFO_PRICE
    mdo_price: float = DEFAULT_MDO_PRICE
    cev: float = DEFAULT_CEV
    ilhoc: float = DEFAULT_ILHOC
    bunker_da: float = DEFAULT_BUNKER_DA
    port_disb_load: float = DEFAULT_PORT_DISB_LOAD
    port_disb_dis: float = DEFAULT_PORT_DISB_DIS
    misc_expense: float = DEFAULT_MISC_EXPENSE


@dataclass(frozen=True)
class VoyageResult:
    loaded_qty: float
    ballast_days: float
    laden_days: float
    steaming_days: float
    loadport_days: float
    disport_days: float
    total_days: float
    freight_gross: float
    freight_commissions: float
    freight_net: float
    revenue_net: float
    hire_gross: float
    hire_commissions: float
    hire_net: float
    ifo_at_sea: float
    mdo_at_sea: float
    ifo_in_port: float
    mdo_in_port: float
    total_ifo: float
    total_mdo: float
    bunker_expense: float
    port_disbursements: float
    operating_expenses: float
    misc_expense: float
    misc_expense_total: float
    total_expenses: float
    profit: float
    tce: float


def _clamp01(x: float) -> float:
    return min(1.0, max(0.0, x))


def _lerp(warranted: float, economical: float, t: float) -> float:
    # endpoints returned as-is: w + (e - w) is not always bit-identical to e
    if t <= 0.0:
        return warranted
    if t >= 1.0:
        return economical
    return warranted + (economical - warranted) * t


def interpolate_profile(economical: SpeedProfile, warranted: SpeedProfile, blend: SpeedBlend) -> SpeedProfile:
    """
    Effective speed/consumption between the warranted (blend 0) and the
    economical (blend 1) profile. Blends outside [0, 1] are clamped.
    """
    ballast_t = _clamp01(blend.ballast)
    laden_t = _clamp01(blend.laden)
    return SpeedProfile(
        ballast_speed=_lerp(warranted.ballast_speed, economical.ballast_speed, ballast_t),
        laden_speed=_lerp(warranted.laden_speed, economical.laden_speed, laden_t),
        ballast=LegConsumption(
            ifo=_lerp(warranted.ballast.ifo, economical.ballast.ifo, ballast_t),
            mdo=_lerp(warranted.ballast.mdo, economical.ballast.mdo, ballast_t),
        ),
        laden=LegConsumption(
            ifo=_lerp(warranted.laden.ifo, economical.laden.ifo, laden_t),
            mdo=_lerp(warranted.laden.mdo, economical.laden.mdo, laden_t),
        ),
    )


def calculate_steaming_time(distance_nm: float, speed_kn: float) -> float:
    """Days at sea; a non-positive speed yields 0 rather than a division fault."""
    if speed_kn <= 0:
        return 0.0
    return distance_nm / speed_kn / 24.0


def _safe_div(a: float, b: float) -> float:
    return a / b if b > 0 else 0.0


def compute_voyage(
    vessel: VesselProfile,
    cargo: CargoContract,
    ballast_nm: float,
    laden_nm: float,
    costs: VoyageCosts,
    blend: SpeedBlend,
    bunker_days: float = BUNKER_DAYS,
    cargo_qty: Optional[float] = None,
) -> VoyageResult:
    """
    Full voyage P&L.

    Args:
        cargo_qty: quantity to lift; defaults to the cargo's base quantity
        bunker_days: fixed operational buffer added to the voyage duration
    """
    qty = cargo.quantity if cargo_qty is None else cargo_qty
    profile = interpolate_profile(vessel.economical, vessel.warranted, blend)

    # Durations
    ballast_days = calculate_steaming_time(ballast_nm, profile.ballast_speed)
    laden_days = calculate_steaming_time(laden_nm, profile.laden_speed)
    steaming_days = ballast_days + laden_days

    loadport_working = _safe_div(qty, cargo.load_rate)
    disport_working = _safe_div(qty, cargo.discharge_rate)
    loadport_days = loadport_working + cargo.load_tt + cargo.port_idle_days
    disport_days = disport_working + cargo.discharge_tt

    total_days = steaming_days + bunker_days + loadport_days + disport_days

    # Contractual, volumetric and weight limits
    volumetric_limit = vessel.capacity / cargo.stow_factor if cargo.stow_factor > 0 else float("inf")
    loaded_qty = min(qty, volumetric_limit, vessel.dwt)

    # Fuel
    ifo_at_sea = ballast_days * profile.ballast.ifo + laden_days * profile.laden.ifo
    mdo_at_sea = ballast_days * profile.ballast.mdo + laden_days * profile.laden.mdo

    port_working_days = loadport_working + disport_working
    ifo_in_port = port_working_days * vessel.port_working.ifo + cargo.port_idle_days * vessel.port_idle.ifo
    mdo_in_port = port_working_days * vessel.port_working.mdo + cargo.port_idle_days * vessel.port_idle.mdo

    total_ifo = ifo_at_sea + ifo_in_port
    total_mdo = mdo_at_sea + mdo_in_port
    bunker_expense = total_ifo * costs.ifo_price + total_mdo * costs.mdo_price

    # Hire
    hire_gross = vessel.hire_rate * total_days
    hire_commissions = hire_gross * vessel.address_commission
    hire_net = hire_gross - hire_commissions

    # Revenue
    freight_gross = loaded_qty * cargo.freight_rate
    freight_commissions = freight_gross * (cargo.address_commission + cargo.broker_commission)
    freight_net = freight_gross - freight_commissions
    revenue_net = freight_net + cargo.ballast_bonus

    # Other expenses
    port_disbursements = costs.port_disb_load + costs.port_disb_dis
    operating_expenses = costs.cev + costs.ilhoc + costs.bunker_da
    misc_expense_total = operating_expenses + port_disbursements + costs.misc_expense
    total_expenses = hire_net + bunker_expense + misc_expense_total

    profit = revenue_net - total_expenses
    tce = profit / total_days if total_days > 0 else 0.0

    return VoyageResult(
        loaded_qty=loaded_qty,
        ballast_days=ballast_days,
        laden_days=laden_days,
        steaming_days=steaming_days,
        loadport_days=loadport_days,
        disport_days=disport_days,
        total_days=total_days,
        freight_gross=freight_gross,
        freight_commissions=freight_commissions,
        freight_net=freight_net,
        revenue_net=revenue_net,
        hire_gross=hire_gross,
        hire_commissions=hire_commissions,
        hire_net=hire_net,
        ifo_at_sea=ifo_at_sea,
        mdo_at_sea=mdo_at_sea,
        ifo_in_port=ifo_in_port,
        mdo_in_port=mdo_in_port,
        total_ifo=total_ifo,
        total_mdo=total_mdo,
        bunker_expense=bunker_expense,
        port_disbursements=port_disbursements,
        operating_expenses=operating_expenses,
        misc_expense=costs.misc_expense,
        misc_expense_total=misc_expense_total,
        total_expenses=total_expenses,
        profit=profit,
        tce=tce,
    )


def _lerp_array(warranted: float, economical: float, t: np.ndarray) -> np.ndarray:
    return np.where(t <= 0.0, warranted, np.where(t >= 1.0, economical, warranted + (economical - warranted) * t))


def _steaming_days_array(distance_nm: float, speed_kn: np.ndarray) -> np.ndarray:
    safe = np.where(speed_kn > 0, speed_kn, 1.0)
    return np.where(speed_kn > 0, distance_nm / safe / 24.0, 0.0)


def voyage_profit_grid(
    vessel: VesselProfile,
    cargo: CargoContract,
    ballast_nm: float,
    laden_nm: float,
    costs: VoyageCosts,
    ballast_blends: Sequence[float],
    laden_blends: Sequence[float],
    bunker_days: float = BUNKER_DAYS,
    cargo_qty: Optional[float] = None,
) -> np.ndarray:
    """
    compute_voyage(...).profit for every (ballast blend, laden blend) at one quantity.

    Returns an array of shape (len(ballast_blends), len(laden_blends)); the
    arithmetic follows compute_voyage term by term so each cell matches it.
    """
    qty = cargo.quantity if cargo_qty is None else cargo_qty
    eco, war = vessel.economical, vessel.warranted
    tb = np.clip(np.asarray(ballast_blends, dtype=float), 0.0, 1.0)
    tl = np.clip(np.asarray(laden_blends, dtype=float), 0.0, 1.0)

    # Per-leg vectors
    ballast_days = _steaming_days_array(ballast_nm, _lerp_array(war.ballast_speed, eco.ballast_speed, tb))
    laden_days = _steaming_days_array(laden_nm, _lerp_array(war.laden_speed, eco.laden_speed, tl))
    ballast_ifo = ballast_days * _lerp_array(war.ballast.ifo, eco.ballast.ifo, tb)
    ballast_mdo = ballast_days * _lerp_array(war.ballast.mdo, eco.ballast.mdo, tb)
    laden_ifo = laden_days * _lerp_array(war.laden.ifo, eco.laden.ifo, tl)
    laden_mdo = laden_days * _lerp_array(war.laden.mdo, eco.laden.mdo, tl)

    # Blend-independent terms
    loadport_working = _safe_div(qty, cargo.load_rate)
    disport_working = _safe_div(qty, cargo.discharge_rate)
    loadport_days = loadport_working + cargo.load_tt + cargo.port_idle_days
    disport_days = disport_working + cargo.discharge_tt

    volumetric_limit = vessel.capacity / cargo.stow_factor if cargo.stow_factor > 0 else float("inf")
    loaded_qty = min(qty, volumetric_limit, vessel.dwt)

    port_working_days = loadport_working + disport_working
    ifo_in_port = port_working_days * vessel.port_working.ifo + cargo.port_idle_days * vessel.port_idle.ifo
    mdo_in_port = port_working_days * vessel.port_working.mdo + cargo.port_idle_days * vessel.port_idle.mdo

    freight_gross = loaded_qty * cargo.freight_rate
    freight_commissions = freight_gross * (cargo.address_commission + cargo.broker_commission)
    revenue_net = (freight_gross - freight_commissions) + cargo.ballast_bonus

    port_disbursements = costs.port_disb_load + costs.port_disb_dis
    operating_expenses = costs.cev + costs.ilhoc + costs.bunker_da
    misc_expense_total = operating_expenses + port_disbursements + costs.misc_expense

    # Grid
    steaming_days = ballast_days[:, None] + laden_days[None, :]
    total_days = steaming_days + bunker_days + loadport_days + disport_days
    total_ifo = (ballast_ifo[:, None] + laden_ifo[None, :]) + ifo_in_port
    total_mdo = (ballast_mdo[:, None] + laden_mdo[None, :]) + mdo_in_port
    bunker_expense = total_ifo * costs.ifo_price + total_mdo * costs.mdo_price

    hire_gross = vessel.hire_rate * total_days
    hire_net = hire_gross - hire_gross * vessel.address_commission
    total_expenses = hire_net + bunker_expense + misc_expense_total

    return revenue_net - total_expenses
