"""
Hungarian solver, fleet assignment and the committed/market portfolio.

Pairs are stand-ins exposing only `adjusted_profit`, which is all the
optimizer reads.
"""
from itertools import permutations
from types import SimpleNamespace

import numpy as np
import pytest

from fleet_optimizer import (
    ISSUE_NO_FEASIBLE_PORTFOLIO,
    ISSUE_NOT_ENOUGH_VESSELS,
    hungarian,
    solve_assignment,
    solve_portfolio,
)


def _vessels(n):
    return [SimpleNamespace(name=f"V{i}", source="cargill") for i in range(n)]


def _cargos(n, source="market"):
    return [SimpleNamespace(name=f"C{j}", source=source) for j in range(n)]


def _pairs(profits):
    return [[None if p is None else SimpleNamespace(adjusted_profit=float(p)) for p in row] for row in profits]


def _brute_force_cost(cost):
    n, m = cost.shape
    return min(sum(cost[i, cols[i]] for i in range(n)) for cols in permutations(range(m), n))


def _brute_force_profit(profits):
    """Best total over every partial one-to-one matching of positive pairs."""
    n, m = len(profits), len(profits[0])
    best = 0.0
    for cols in permutations(list(range(m)) + [None] * n, n):
        total = 0.0
        for i, j in enumerate(cols):
            if j is not None and profits[i][j] is not None and profits[i][j] > 0:
                total += profits[i][j]
        best = max(best, total)
    return best


# ----------------------------------------------------------------------------
# hungarian
# ----------------------------------------------------------------------------

@pytest.mark.parametrize("shape", [(1, 1), (3, 3), (4, 4), (3, 5), (5, 6), (2, 6)])
def test_hungarian_matches_brute_force(shape):
    rng = np.random.RandomState(sum(shape))
    for _ in range(5):
        cost = rng.randint(0, 50, size=shape).astype(float)
        assignment = hungarian(cost)
        assert len(set(assignment)) == shape[0]
        assert all(0 <= j < shape[1] for j in assignment)
        total = sum(cost[i, j] for i, j in enumerate(assignment))
        assert total == pytest.approx(_brute_force_cost(cost))


def test_hungarian_known_case():
    cost = [[4, 1, 3], [2, 0, 5], [3, 2, 2]]
    assert hungarian(cost) == [1, 0, 2]


def test_hungarian_negative_costs():
    cost = np.array([[-5.0, -1.0], [-4.0, -6.0]])
    assert hungarian(cost) == [0, 1]


def test_hungarian_rejects_bad_shapes():
    assert hungarian([]) == []
    with pytest.raises(ValueError):
        hungarian([[1.0], [2.0]])
    with pytest.raises(ValueError):
        hungarian([[1.0, np.inf]])


# ----------------------------------------------------------------------------
# solve_assignment
# ----------------------------------------------------------------------------

def test_empty_inputs():
    a = solve_assignment([], _cargos(2), [])
    assert a.matches == [] and a.total_profit == 0.0
    b = solve_assignment(_vessels(2), [], [[], []])
    assert b.total_profit == 0.0
    assert [v.name for v in b.unassigned_vessels] == ["V0", "V1"]


def test_all_infeasible_leaves_everyone_unassigned():
    a = solve_assignment(_vessels(2), _cargos(2), _pairs([[None, -10], [None, 0]]))
    assert not a.has_plan
    assert a.total_profit == 0.0
    assert len(a.unassigned_vessels) == 2
    assert len(a.unused_cargos) == 2


def test_global_beats_greedy():
    # greedy takes V0-C0 (100) and then V1-C1 (1) = 101; optimum is 90 + 80
    profits = [[100, 90], [80, 1]]
    a = solve_assignment(_vessels(2), _cargos(2), _pairs(profits))
    assert a.total_profit == pytest.approx(170.0)
    assert [(m.vessel.name, m.cargo.name) for m in a.matches] == [("V0", "C1"), ("V1", "C0")]


def test_more_vessels_than_cargos():
    profits = [[10], [30], [20]]
    a = solve_assignment(_vessels(3), _cargos(1), _pairs(profits))
    assert [(m.vessel.name, m.cargo.name) for m in a.matches] == [("V1", "C0")]
    assert [v.name for v in a.unassigned_vessels] == ["V0", "V2"]


def test_more_cargos_than_vessels():
    profits = [[10, 50, 20, 5]]
    a = solve_assignment(_vessels(1), _cargos(4), _pairs(profits))
    assert a.total_profit == 50.0
    assert [c.name for c in a.unused_cargos] == ["C0", "C2", "C3"]


def test_unprofitable_pair_not_forced():
    # a square assignment would have to give V1 its only (losing) cargo
    profits = [[40, 30], [None, -5]]
    a = solve_assignment(_vessels(2), _cargos(2), _pairs(profits))
    assert [(m.vessel.name, m.cargo.name) for m in a.matches] == [("V0", "C0")]
    assert a.total_profit == 40.0


@pytest.mark.parametrize("seed", range(6))
def test_assignment_optimal_and_one_to_one(seed):
    rng = np.random.RandomState(seed)
    n, m = rng.randint(1, 5), rng.randint(1, 5)
    profits = [
        [None if rng.rand() < 0.2 else float(rng.randint(-20, 100)) for _ in range(m)]
        for _ in range(n)
    ]
    a = solve_assignment(_vessels(n), _cargos(m), _pairs(profits))

    vessels_used = [mt.vessel.name for mt in a.matches]
    cargos_used = [mt.cargo.name for mt in a.matches]
    assert len(vessels_used) == len(set(vessels_used))
    assert len(cargos_used) == len(set(cargos_used))
    assert all(mt.adjusted_profit > 0 for mt in a.matches)
    assert a.total_profit == pytest.approx(_brute_force_profit(profits))

    single_best = max([p for row in profits for p in row if p is not None and p > 0], default=0.0)
    assert a.total_profit >= single_best


# ----------------------------------------------------------------------------
# solve_portfolio
# ----------------------------------------------------------------------------

def _book():
    vessels = _vessels(3)
    cargos = _cargos(1, "committed") + [SimpleNamespace(name="M0", source="market")]
    return vessels, cargos


def test_portfolio_carries_committed_even_at_a_loss():
    vessels, cargos = _book()
    profits = [[-10, 50], [-20, 60], [None, 5]]
    p = solve_portfolio(vessels, cargos, _pairs(profits), vessel_count=2)
    assert p.feasible
    assert p.combinations_total == 3
    names = {(m.vessel.name, m.cargo.name) for m in p.assignment.matches}
    assert names == {("V0", "C0"), ("V1", "M0")}
    assert p.total_profit == pytest.approx(50.0)
    assert [v.name for v in p.selected_vessels] == ["V0", "V1"]


def test_portfolio_skips_selection_that_cannot_cover_committed():
    vessels, cargos = _book()
    profits = [[None, 50], [None, 60], [30, 5]]
    p = solve_portfolio(vessels, cargos, _pairs(profits), vessel_count=2)
    assert p.combinations_total == 3
    assert p.combinations_feasible == 2
    assert {(m.vessel.name, m.cargo.name) for m in p.assignment.matches} == {("V2", "C0"), ("V1", "M0")}


def test_portfolio_not_enough_vessels():
    vessels = _vessels(1)
    cargos = _cargos(2, "committed")
    p = solve_portfolio(vessels, cargos, _pairs([[10, 10]]), vessel_count=3)
    assert not p.feasible
    assert p.issue == ISSUE_NOT_ENOUGH_VESSELS
    assert p.total_profit == 0.0


def test_portfolio_no_feasible_selection():
    vessels, cargos = _book()
    profits = [[None, 50], [None, 60], [None, 5]]
    p = solve_portfolio(vessels, cargos, _pairs(profits), vessel_count=2)
    assert not p.feasible
    assert p.issue == ISSUE_NO_FEASIBLE_PORTFOLIO


def test_portfolio_rejects_zero_vessels():
    vessels, cargos = _book()
    with pytest.raises(ValueError):
        solve_portfolio(vessels, cargos, _pairs([[1, 1]] * 3), vessel_count=0)
