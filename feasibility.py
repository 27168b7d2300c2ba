"""
Feasibility filters applied before / during the grid search.

Each check returns a small result object rather than raising: a failed
check only removes a grid point (or a pair) from consideration.
"""

import math
from dataclasses import dataclass
from typing import Optional

from vessel_cargo_data import QuantityRange


@dataclass(frozen=True)
class WeightFeasibility:
    feasible: bool
    max_qty: float
    overage: float
    reason: Optional[str] = None


@dataclass(frozen=True)
class QuantityRangeFeasibility:
    feasible: bool
    min_qty: float
    max_qty: float
    underage: float
    overage: float
    reason: Optional[str] = None


def check_weight(cargo_qty: float, vessel_dwt: float) -> WeightFeasibility:
    """Feasible iff 0 < cargo_qty <= DWT; non-finite inputs never pass."""
    if not math.isfinite(cargo_qty) or not math.isfinite(vessel_dwt):
        max_qty = max(0.0, vessel_dwt) if math.isfinite(vessel_dwt) else 0.0
        return WeightFeasibility(False, max_qty, 0.0, "Invalid cargo quantity or vessel DWT.")

    max_qty = max(0.0, vessel_dwt)
    if max_qty <= 0:
        return WeightFeasibility(False, max_qty, max(0.0, cargo_qty), "Vessel DWT is missing or zero.")
    if cargo_qty <= 0:
        return WeightFeasibility(False, max_qty, 0.0, "Cargo quantity must be positive.")
    if cargo_qty > max_qty:
        return WeightFeasibility(
            False, max_qty, cargo_qty - max_qty,
            f"Cargo quantity ({cargo_qty:,.0f} MT) exceeds vessel DWT ({max_qty:,.0f} MT).",
        )
    return WeightFeasibility(True, max_qty, 0.0)


def check_quantity_range(cargo_qty: float, qty_range: Optional[QuantityRange]) -> QuantityRangeFeasibility:
    """Feasible iff no contractual range is given, or min <= qty <= max."""
    if qty_range is None:
        return QuantityRangeFeasibility(True, 0.0, 0.0, 0.0, 0.0)

    lo, hi = qty_range.lower, qty_range.upper
    if not math.isfinite(cargo_qty):
        return QuantityRangeFeasibility(False, lo, hi, 0.0, 0.0, "Invalid cargo quantity.")
    if cargo_qty < lo:
        return QuantityRangeFeasibility(
            False, lo, hi, lo - cargo_qty, 0.0,
            f"Cargo quantity ({cargo_qty:,.0f} MT) is below contract minimum ({lo:,.0f} MT).",
        )
    if cargo_qty > hi:
        return QuantityRangeFeasibility(
            False, lo, hi, 0.0, cargo_qty - hi,
            f"Cargo quantity ({cargo_qty:,.0f} MT) exceeds contract maximum ({hi:,.0f} MT).",
        )
    return QuantityRangeFeasibility(True, lo, hi, 0.0, 0.0)


def has_positive_freight(freight_rate: float) -> bool:
    return math.isfinite(freight_rate) and freight_rate > 0
