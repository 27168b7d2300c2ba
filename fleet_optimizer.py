"""
Fleet assignment on top of the precomputed pair matrix.

- hungarian(): exact minimum-cost assignment, rows <= columns
- solve_assignment(): one vessel -> at most one cargo, maximizing total adjusted profit
- solve_portfolio(): pick N vessels, carry every committed cargo, fill the
  rest of the selected fleet with market cargos
"""

import logging
import math
from dataclasses import dataclass, field
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

import numpy as np

from config import INFEASIBLE_COST_PENALTY
from pair_search import PairEvaluation, PairResult
from vessel_cargo_data import CargoContract, VesselProfile

logger = logging.getLogger(__name__)

ISSUE_NOT_ENOUGH_VESSELS = "not_enough_vessels"
ISSUE_NO_FEASIBLE_PORTFOLIO = "no_feasible_portfolio"


def hungarian(cost) -> List[int]:
    """
    Minimum-cost assignment of every row to a distinct column
    (shortest augmenting path with row/column potentials, O(n^2 m)).

    Args:
        cost: n x m matrix with n <= m, finite entries

    Returns:
        assignment[i] = column matched to row i
    """
    c = np.asarray(cost, dtype=float)
    if c.size == 0:
        return []
    if c.ndim != 2:
        raise ValueError(f"cost matrix must be 2-D, got shape {c.shape}")
    n, m = c.shape
    if n > m:
        raise ValueError(f"cost matrix has more rows than columns ({n} > {m})")
    if not np.isfinite(c).all():
        raise ValueError("cost matrix must contain only finite values")

    # index 0 is the virtual column/row of the augmenting search
    u = np.zeros(n + 1)
    v = np.zeros(m + 1)
    p = np.zeros(m + 1, dtype=int)
    way = np.zeros(m + 1, dtype=int)

    for i in range(1, n + 1):
        p[0] = i
        j0 = 0
        minv = np.full(m + 1, np.inf)
        used = np.zeros(m + 1, dtype=bool)

        while True:
            used[j0] = True
            i0 = p[j0]

            cols = np.flatnonzero(~used[1:]) + 1
            reduced = c[i0 - 1, cols - 1] - u[i0] - v[cols]
            better = reduced < minv[cols]
            minv[cols[better]] = reduced[better]
            way[cols[better]] = j0

            k = int(np.argmin(minv[cols]))
            j1 = int(cols[k])
            delta = minv[j1]

            used_cols = np.flatnonzero(used)
            u[p[used_cols]] += delta
            v[used_cols] -= delta
            minv[~used] -= delta

            j0 = j1
            if p[j0] == 0:
                break

        while True:
            j1 = way[j0]
            p[j0] = p[j1]
            j0 = j1
            if j0 == 0:
                break

    assignment = [-1] * n
    for j in range(1, m + 1):
        if p[j] > 0:
            assignment[p[j] - 1] = j - 1
    return assignment


@dataclass(frozen=True)
class Match:
    vessel: VesselProfile
    cargo: CargoContract
    pair: PairResult

    @property
    def adjusted_profit(self) -> float:
        return self.pair.adjusted_profit


@dataclass
class Assignment:
    matches: List[Match] = field(default_factory=list)
    unassigned_vessels: List[VesselProfile] = field(default_factory=list)
    unused_cargos: List[CargoContract] = field(default_factory=list)
    total_profit: float = 0.0

    @property
    def has_plan(self) -> bool:
        return bool(self.matches)


@dataclass
class PortfolioResult:
    feasible: bool
    vessel_count: int
    issue: Optional[str] = None
    selected_vessels: List[VesselProfile] = field(default_factory=list)
    assignment: Assignment = field(default_factory=Assignment)
    combinations_total: int = 0
    combinations_feasible: int = 0

    @property
    def total_profit(self) -> float:
        return self.assignment.total_profit if self.feasible else 0.0


def _as_result(item) -> Optional[PairResult]:
    if isinstance(item, PairEvaluation):
        return item.result
    return item


def _usable(pair: Optional[PairResult]) -> bool:
    return pair is not None and math.isfinite(pair.adjusted_profit) and pair.adjusted_profit > 0


def _max_profit(pairs: Sequence[Sequence[Optional[PairResult]]]) -> float:
    best = 0.0
    for row in pairs:
        for pair in row:
            if pair is not None and math.isfinite(pair.adjusted_profit) and pair.adjusted_profit > best:
                best = pair.adjusted_profit
    return best


def _match_optional(
    vessel_idx: Sequence[int],
    cargo_idx: Sequence[int],
    pairs: Sequence[Sequence[Optional[PairResult]]],
    max_profit: float,
) -> List[Tuple[int, int]]:
    """
    Each vessel gets at most one cargo; one dummy column per vessel means
    "leave it idle". Only pairs with positive finite adjusted profit are
    ever kept.
    """
    if not vessel_idx or not cargo_idx:
        return []

    n_c = len(cargo_idx)
    big = max_profit + INFEASIBLE_COST_PENALTY
    cost = np.full((len(vessel_idx), n_c + len(vessel_idx)), max_profit)
    for r, i in enumerate(vessel_idx):
        for col, j in enumerate(cargo_idx):
            pair = pairs[i][j]
            cost[r, col] = max_profit - pair.adjusted_profit if _usable(pair) else big

    matched = []
    for r, col in enumerate(hungarian(cost)):
        if 0 <= col < n_c and _usable(pairs[vessel_idx[r]][cargo_idx[col]]):
            matched.append((vessel_idx[r], cargo_idx[col]))
    return matched


def _build_assignment(
    vessels: Sequence[VesselProfile],
    cargos: Sequence[CargoContract],
    pairs: Sequence[Sequence[Optional[PairResult]]],
    vessel_idx: Sequence[int],
    matched: Sequence[Tuple[int, int]],
) -> Assignment:
    matched = sorted(matched)
    matches = [Match(vessels[i], cargos[j], pairs[i][j]) for i, j in matched]
    used_v = {i for i, _ in matched}
    used_c = {j for _, j in matched}
    total = 0.0
    for m in matches:
        total += m.adjusted_profit
    return Assignment(
        matches=matches,
        unassigned_vessels=[vessels[i] for i in vessel_idx if i not in used_v],
        unused_cargos=[c for j, c in enumerate(cargos) if j not in used_c],
        total_profit=total,
    )


def solve_assignment(
    vessels: Sequence[VesselProfile],
    cargos: Sequence[CargoContract],
    pair_results: Sequence[Sequence[Optional[PairResult]]],
) -> Assignment:
    """
    Maximum total adjusted profit with each vessel and each cargo used at most once.

    pair_results[i][j] is the PairResult (or PairEvaluation, or None) for
    vessel i and cargo j. Vessels without a profitable cargo stay unassigned.
    """
    if not vessels or not cargos:
        return Assignment(unassigned_vessels=list(vessels), unused_cargos=list(cargos))

    pairs = [[_as_result(x) for x in row] for row in pair_results]
    max_profit = _max_profit(pairs)
    vessel_idx = list(range(len(vessels)))
    matched = _match_optional(vessel_idx, list(range(len(cargos))), pairs, max_profit)
    assignment = _build_assignment(vessels, cargos, pairs, vessel_idx, matched)

    if assignment.has_plan:
        logger.info(
            "Assigned %d of %d vessels, total adjusted profit %.2f",
            len(assignment.matches), len(vessels), assignment.total_profit,
        )
    else:
        logger.warning("No profitable fleet plan: all %d vessels unassigned", len(vessels))
    return assignment


def solve_portfolio(
    vessels: Sequence[VesselProfile],
    cargos: Sequence[CargoContract],
    pair_results: Sequence[Sequence[Optional[PairResult]]],
    vessel_count: int,
) -> PortfolioResult:
    """
    Choose min(vessel_count, len(vessels)) vessels. Every committed cargo
    must be carried by one of them (even at a loss); the vessels left over
    take market cargos only where that adds profit.
    """
    if vessel_count < 1:
        raise ValueError(f"vessel_count must be >= 1, got {vessel_count}")

    pick = min(int(vessel_count), len(vessels))
    committed = [j for j, c in enumerate(cargos) if c.source == "committed"]
    market = [j for j, c in enumerate(cargos) if c.source != "committed"]

    if len(committed) > pick:
        logger.warning("Committed cargos (%d) exceed selectable vessels (%d)", len(committed), pick)
        return PortfolioResult(feasible=False, vessel_count=pick, issue=ISSUE_NOT_ENOUGH_VESSELS)

    pairs = [[_as_result(x) for x in row] for row in pair_results]
    max_profit = _max_profit(pairs)
    big = max_profit + INFEASIBLE_COST_PENALTY

    best: Optional[PortfolioResult] = None
    n_combos = 0
    n_feasible = 0

    for combo in combinations(range(len(vessels)), pick):
        n_combos += 1
        matched: List[Tuple[int, int]] = []
        feasible = True

        if committed:
            cost = np.full((len(committed), pick), big)
            for r, j in enumerate(committed):
                for col, i in enumerate(combo):
                    pair = pairs[i][j]
                    if pair is not None and math.isfinite(pair.adjusted_profit):
                        cost[r, col] = max_profit - pair.adjusted_profit
            for r, col in enumerate(hungarian(cost)):
                i, j = combo[col], committed[r]
                pair = pairs[i][j]
                if pair is None or not math.isfinite(pair.adjusted_profit):
                    feasible = False
                    break
                matched.append((i, j))

        if not feasible:
            continue
        n_feasible += 1

        busy = {i for i, _ in matched}
        remaining = [i for i in combo if i not in busy]
        matched.extend(_match_optional(remaining, market, pairs, max_profit))

        assignment = _build_assignment(vessels, cargos, pairs, combo, matched)
        if best is None or assignment.total_profit > best.assignment.total_profit:
            best = PortfolioResult(
                feasible=True,
                vessel_count=pick,
                selected_vessels=[vessels[i] for i in combo],
                assignment=assignment,
            )

    if best is None:
        logger.warning("No vessel selection of size %d can carry every committed cargo", pick)
        return PortfolioResult(
            feasible=False,
            vessel_count=pick,
            issue=ISSUE_NO_FEASIBLE_PORTFOLIO,
            combinations_total=n_combos,
            combinations_feasible=0,
        )

    best.combinations_total = n_combos
    best.combinations_feasible = n_feasible
    logger.info(
        "Portfolio: %d of %d selections feasible, best total adjusted profit %.2f",
        n_feasible, n_combos, best.total_profit,
    )
    return best
