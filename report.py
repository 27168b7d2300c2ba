"""
Reporting layer: text recommendation, JSON-ready dict and flat DataFrames
over the pair evaluations and the solved assignment.
"""

from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from config import BLEND_STEP, DEFAULT_DISTANCE_NM
from fleet_optimizer import Assignment, Match, PortfolioResult
from laycan import EARLY
from pair_search import (
    PairEvaluation,
    Scenario,
    blend_axis,
    quantity_axis,
    search_summary,
)
from vessel_cargo_data import CargoContract

Plan = Union[Assignment, PortfolioResult]

FALLBACK_MARKER = " [FALLBACK]"


def _money(x: float) -> str:
    return f"${x:,.2f}"


def _num(x: float, digits: int = 0) -> str:
    return f"{x:,.{digits}f}"


def _assignment_of(plan: Plan) -> Assignment:
    return plan.assignment if isinstance(plan, PortfolioResult) else plan


def _cargo_list(evaluations: Sequence[Sequence[PairEvaluation]], cargos: Optional[Sequence[CargoContract]]):
    """The explicit cargo book; without one, the cargos of the first vessel row."""
    if cargos is not None:
        return list(cargos)
    if not evaluations or not evaluations[0]:
        return []
    return [e.cargo for e in evaluations[0]]


def _waiting_days(m: Match) -> float:
    return m.pair.laycan.waiting_days if m.pair.laycan.status == EARLY else 0.0


def _laycan_label(cargo) -> str:
    if cargo.laycan is None:
        return "--"
    return f"{cargo.laycan.start:%Y-%m-%d} to {cargo.laycan.end:%Y-%m-%d}"


def _match_lines(idx: int, m: Match) -> List[str]:
    pair = m.pair
    ballast_tag = "" if pair.ballast.is_exact_match else FALLBACK_MARKER
    laden_tag = "" if pair.laden.is_exact_match else FALLBACK_MARKER
    vessel_type = "Market charter-in vessel" if m.vessel.source == "market" else "Cargill-owned vessel"
    return [
        f"{idx}. {m.vessel.name} -> {m.cargo.name} ({m.cargo.source})",
        f"   Vessel type: {vessel_type}",
        f"   Route: {m.vessel.current_port} -> {m.cargo.load_port} -> {m.cargo.discharge_port}",
        f"   Distance: Ballast {_num(pair.ballast.distance_nm)} nm{ballast_tag} | "
        f"Laden {_num(pair.laden.distance_nm)} nm{laden_tag}",
        f"   Qty: {_num(pair.cargo_qty)} MT | TCE: {_money(pair.tce)}/day",
        f"   Profit: {_money(pair.profit)} | Waiting: {_money(pair.waiting_cost)} | "
        f"Adjusted: {_money(pair.adjusted_profit)}",
        f"   Laycan: {_laycan_label(m.cargo)} | Status: {pair.laycan.status} | "
        f"Waiting days: {_num(_waiting_days(m), 2)}",
        f"   Speed blend: ballast {pair.speed_blend.ballast:.2f}, laden {pair.speed_blend.laden:.2f}",
    ]


def render_report(
    evaluations: Sequence[Sequence[PairEvaluation]],
    plan: Plan,
    scenario: Optional[Scenario] = None,
    blend_step: float = BLEND_STEP,
    default_distance_nm: float = DEFAULT_DISTANCE_NM,
    cargos: Optional[Sequence[CargoContract]] = None,
) -> str:
    """Human-readable recommendation. Always lists the search totals, even when nothing is assigned."""
    scenario = scenario or Scenario()
    summary = search_summary(evaluations)
    assignment = _assignment_of(plan)
    n_blend = len(blend_axis(blend_step))
    cargos = _cargo_list(evaluations, cargos)

    lines = ["Fleet Recommendation", "=" * 80]
    lines.append(
        f"Inputs: IFO {_money(scenario.ifo_price)}/MT, MDO {_money(scenario.mdo_price)}/MT, "
        f"Port delay +{_num(scenario.port_delay_days, 1)} days"
    )
    if scenario.market_hire_rate is not None:
        lines.append(f"Market vessels chartered-in at {_money(scenario.market_hire_rate)}/day")

    lines += [
        "",
        "Search:",
        f"  Vessels: {len(evaluations)} | Cargos: {len(cargos)} | Pairs: {summary['pairs_total']}",
        f"  Combinations per pair: quantity steps x {n_blend} x {n_blend}",
    ]
    for c in cargos:
        steps = len(quantity_axis(c))
        lines.append(f"    {c.name}: {steps} x {n_blend} x {n_blend} = {_num(steps * n_blend * n_blend)}")
    lines += [
        f"  Total search space: {_num(summary['combinations_total'])} | "
        f"Grid points evaluated: {_num(summary['points_evaluated'])}",
        "  Filters: freight > 0, laycan data present, laycan reachable, "
        "quantity within contract range, quantity <= DWT",
        f"  Pairs feasible: {summary['pairs_feasible']} | Pairs excluded: {summary['pairs_excluded']}",
    ]
    for issue, count in summary["excluded_by_issue"].items():
        lines.append(f"    {issue}: {count}")

    if isinstance(plan, PortfolioResult):
        lines += [
            "",
            f"Portfolio: choose {plan.vessel_count} vessels, "
            f"selections tested {plan.combinations_total}, feasible {plan.combinations_feasible}",
        ]
        if not plan.feasible:
            lines.append(f"  Portfolio infeasible: {plan.issue}")
        else:
            lines.append("  Selected vessels: " + ", ".join(v.name for v in plan.selected_vessels))

    lines += ["", f"Best total adjusted profit: {_money(assignment.total_profit)}", "", "Assignments:"]
    if assignment.has_plan:
        for idx, m in enumerate(assignment.matches, start=1):
            lines += _match_lines(idx, m)
    else:
        lines.append("  No profitable fleet plan found with the current inputs.")

    unassigned = ", ".join(v.name for v in assignment.unassigned_vessels) or "NONE"
    unused = ", ".join(c.name for c in assignment.unused_cargos) or "NONE"
    lines += [
        "",
        f"Decision: not assigning vessel(s): {unassigned}",
        f"Unused cargos: {unused}",
        "",
        f"Notes: Distances fall back to {_num(default_distance_nm)} nm if missing from the distance table "
        f"({summary['fallback_legs']} legs).",
        f"Risk note: Legs marked{FALLBACK_MARKER} rely on the default distance; "
        "ETA, bunker and profit may be materially off.",
    ]
    return "\n".join(lines)


def _match_dict(m: Match) -> Dict[str, Any]:
    pair = m.pair
    return {
        "vessel": m.vessel.name,
        "vessel_source": m.vessel.source,
        "cargo": m.cargo.name,
        "cargo_source": m.cargo.source,
        "route": [m.vessel.current_port, m.cargo.load_port, m.cargo.discharge_port],
        "ballast_nm": pair.ballast.distance_nm,
        "ballast_exact": pair.ballast.is_exact_match,
        "laden_nm": pair.laden.distance_nm,
        "laden_exact": pair.laden.is_exact_match,
        "cargo_qty": pair.cargo_qty,
        "tce": pair.tce,
        "profit": pair.profit,
        "waiting_cost": pair.waiting_cost,
        "adjusted_profit": pair.adjusted_profit,
        "laycan_status": pair.laycan.status,
        "waiting_days": _waiting_days(m),
        "eta": pair.laycan.eta.isoformat(),
        "speed_blend": {"ballast": pair.speed_blend.ballast, "laden": pair.speed_blend.laden},
    }


def report_to_dict(
    evaluations: Sequence[Sequence[PairEvaluation]],
    plan: Plan,
    scenario: Optional[Scenario] = None,
    blend_step: float = BLEND_STEP,
    cargos: Optional[Sequence[CargoContract]] = None,
) -> Dict[str, Any]:
    scenario = scenario or Scenario()
    summary = search_summary(evaluations)
    assignment = _assignment_of(plan)
    n_blend = len(blend_axis(blend_step))
    cargos = _cargo_list(evaluations, cargos)

    data: Dict[str, Any] = {
        "summary": {
            "total_adjusted_profit": assignment.total_profit,
            "assigned_count": len(assignment.matches),
            "has_plan": assignment.has_plan,
        },
        "inputs": {
            "ifo_price": scenario.ifo_price,
            "mdo_price": scenario.mdo_price,
            "port_delay_days": scenario.port_delay_days,
            "market_hire_rate": scenario.market_hire_rate,
            "blend_step": blend_step,
        },
        "search": {
            **summary,
            "blend_points": n_blend,
            "vessel_count": len(evaluations),
            "cargo_count": len(cargos),
            "quantity_steps": {c.name: len(quantity_axis(c)) for c in cargos},
        },
        "assignments": [_match_dict(m) for m in assignment.matches],
        "unassigned_vessels": [v.name for v in assignment.unassigned_vessels],
        "unused_cargos": [c.name for c in assignment.unused_cargos],
    }
    if isinstance(plan, PortfolioResult):
        data["portfolio"] = {
            "feasible": plan.feasible,
            "issue": plan.issue,
            "vessel_count": plan.vessel_count,
            "selected_vessels": [v.name for v in plan.selected_vessels],
            "combinations_total": plan.combinations_total,
            "combinations_feasible": plan.combinations_feasible,
        }
    return data


def build_combinations_df(evaluations: Sequence[Sequence[PairEvaluation]]) -> pd.DataFrame:
    """
    One row per vessel-cargo pair, feasible or not.
    Excluded pairs carry their `issue` and no P&L columns.
    """
    rows: List[Dict[str, Any]] = []

    for row in evaluations:
        for e in row:
            base = {
                "vessel_name": e.vessel.name,
                "cargo_name": e.cargo.name,
                "feasible": e.feasible,
                "issue": e.issue,
                "ballast_nm": e.ballast.distance_nm,
                "ballast_exact": e.ballast.is_exact_match,
                "laden_nm": e.laden.distance_nm,
                "laden_exact": e.laden.is_exact_match,
                "laycan_status": e.laycan.status if e.laycan else None,
                "combinations": e.combinations,
                "points_evaluated": e.points_evaluated,
            }
            if e.result is not None:
                r = e.result
                base.update({
                    "qty": r.cargo_qty,
                    "ballast_blend": r.speed_blend.ballast,
                    "laden_blend": r.speed_blend.laden,
                    "total_days": r.voyage.total_days,
                    "tce": r.tce,
                    "voyage_profit": r.profit,
                    "waiting_days": r.laycan.waiting_days,
                    "waiting_cost": r.waiting_cost,
                    "adjusted_profit": r.adjusted_profit,
                    "net_revenue": r.voyage.revenue_net,
                    "bunker_cost": r.voyage.bunker_expense,
                    "hire_cost": r.voyage.hire_net,
                    "port_cost": r.voyage.port_disbursements,
                })
            rows.append(base)

    return pd.DataFrame(rows)


def build_assignment_df(plan: Plan) -> pd.DataFrame:
    assignment = _assignment_of(plan)
    rows = []
    for m in assignment.matches:
        d = _match_dict(m)
        d["route"] = " -> ".join(d["route"])
        blend = d.pop("speed_blend")
        d["ballast_blend"] = blend["ballast"]
        d["laden_blend"] = blend["laden"]
        rows.append(d)
    for v in assignment.unassigned_vessels:
        rows.append({"vessel": v.name, "vessel_source": v.source, "cargo": None, "adjusted_profit": 0.0})
    return pd.DataFrame(rows)
