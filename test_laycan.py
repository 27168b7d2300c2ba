"""
Laycan evaluation and waiting cost.
"""
from datetime import date, datetime, timedelta

import pytest

from laycan import (
    EARLY,
    FEASIBLE,
    INFEASIBLE,
    LaycanWindow,
    evaluate_laycan,
    parse_date,
    waiting_cost,
)

DEPARTURE = datetime(2026, 3, 1)
WINDOW = LaycanWindow(datetime(2026, 3, 10), datetime(2026, 3, 15))


@pytest.mark.parametrize("nm, expected", [
    (14.0 * 24 * 5, EARLY),        # ETA 6 Mar
    (14.0 * 24 * 12, FEASIBLE),    # ETA 13 Mar
    (14.0 * 24 * 20, INFEASIBLE),  # ETA 21 Mar
])
def test_trichotomy_and_eta(nm, expected):
    ev = evaluate_laycan(DEPARTURE, nm, 14.0, WINDOW)
    assert ev.status == expected
    assert ev.eta == DEPARTURE + timedelta(days=nm / 14.0 / 24.0)


def test_early_waiting_days():
    ev = evaluate_laycan(DEPARTURE, 14.0 * 24 * 5, 14.0, WINDOW)
    assert ev.waiting_days == pytest.approx(4.0)


def test_window_edges_are_feasible():
    on_start = evaluate_laycan(DEPARTURE, 14.0 * 24 * 9, 14.0, WINDOW)
    on_end = evaluate_laycan(DEPARTURE, 14.0 * 24 * 14, 14.0, WINDOW)
    assert on_start.status == FEASIBLE
    assert on_end.status == FEASIBLE
    assert on_start.waiting_days == 0.0


def test_zero_speed_means_no_ballast_time():
    ev = evaluate_laycan(datetime(2026, 3, 12), 5000.0, 0.0, WINDOW)
    assert ev.ballast_days == 0.0
    assert ev.status == FEASIBLE


def test_waiting_cost_only_when_early():
    early = evaluate_laycan(DEPARTURE, 14.0 * 24 * 5, 14.0, WINDOW)
    cost = waiting_cost(early, hire_rate=15_000, idle_ifo=2.0, idle_mdo=0.1, ifo_price=440, mdo_price=850)
    assert cost == pytest.approx(4.0 * (15_000 + 2.0 * 440 + 0.1 * 850))

    ok = evaluate_laycan(DEPARTURE, 14.0 * 24 * 12, 14.0, WINDOW)
    assert waiting_cost(ok, 15_000, 2.0, 0.1, 440, 850) == 0.0


def test_parse_date():
    assert parse_date("2026-03-01") == datetime(2026, 3, 1)
    assert parse_date(date(2026, 3, 1)) == datetime(2026, 3, 1)
    assert parse_date(DEPARTURE) is DEPARTURE
    assert parse_date("1 March") is None
    assert parse_date(None) is None
