"""
Main Analysis Script
- Searches the best quantity / speed blend for every vessel-cargo pair
- Optimizes the fleet: committed cargoes first, remaining vessels on market cargoes
- Missing port distances fall back to the default distance and are flagged [FALLBACK]

Usage:
    python main_analysis.py                          # sample data, 4 vessels
    python main_analysis.py --all-vessels            # plain assignment over the whole fleet
    python main_analysis.py --blend-step 0.05 -v     # coarse grid, debug logging
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from config import BLEND_STEP, DEFAULT_IFO_PRICE, DEFAULT_MDO_PRICE, DEFAULT_VESSEL_COUNT, LOG_FORMAT, OUTPUT_DIR
from fleet_optimizer import solve_assignment, solve_portfolio
from pair_search import Scenario, apply_scenario, build_pair_matrix
from port_distances import DistanceTable
from report import build_assignment_df, build_combinations_df, render_report, report_to_dict
from vessel_cargo_data import load_sample_fleet, sample_distances_df

logger = logging.getLogger("main_analysis")


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Voyage profitability and fleet assignment")
    parser.add_argument("--distances", default=None,
                        help="Port distance CSV (PORT_NAME_FROM, PORT_NAME_TO, DISTANCE); sample table if omitted")
    parser.add_argument("--reference-date", default=None,
                        help="Departure date (YYYY-MM-DD) for vessels without an ETD; defaults to today")
    parser.add_argument("--ifo-price", type=float, default=DEFAULT_IFO_PRICE, help="IFO price, USD/MT")
    parser.add_argument("--mdo-price", type=float, default=DEFAULT_MDO_PRICE, help="MDO price, USD/MT")
    parser.add_argument("--port-delay-days", type=float, default=0.0,
                        help="Extra idle days added at every load port")
    parser.add_argument("--market-hire-rate", type=float, default=None,
                        help="Daily hire applied to every market vessel")

    fleet = parser.add_mutually_exclusive_group()
    fleet.add_argument("--vessel-count", type=positive_int, default=DEFAULT_VESSEL_COUNT,
                       help="Vessels to select for the committed/market portfolio")
    fleet.add_argument("--all-vessels", action="store_true",
                       help="Assign across the whole fleet without committed-cargo coverage")

    parser.add_argument("--blend-step", type=float, default=BLEND_STEP, help="Speed blend grid step")
    parser.add_argument("--processes", type=int, default=None, help="Worker processes for the pair search")
    parser.add_argument("--output-dir", default=OUTPUT_DIR)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    logger.info("Freight Calculator - Main Analysis")

    # Load inputs
    if args.distances:
        distances = DistanceTable.from_csv(args.distances)
    else:
        distances = DistanceTable(sample_distances_df())
    logger.info("Loaded %d distance rows", len(distances.distance_dict))

    reference_date = args.reference_date or datetime.now().strftime("%Y-%m-%d")
    scenario = Scenario(
        ifo_price=args.ifo_price,
        mdo_price=args.mdo_price,
        port_delay_days=args.port_delay_days,
        market_hire_rate=args.market_hire_rate,
    )

    vessels, cargoes = load_sample_fleet()
    vessels, cargoes = apply_scenario(vessels, cargoes, scenario)
    logger.info("Fleet: %d vessels, %d cargoes", len(vessels), len(cargoes))

    # 1) Best operating point per pair
    evaluations = build_pair_matrix(
        vessels,
        cargoes,
        distances,
        reference_date,
        costs=scenario.costs(),
        blend_step=args.blend_step,
        processes=args.processes,
    )

    os.makedirs(args.output_dir, exist_ok=True)
    combos_df = build_combinations_df(evaluations)
    combos_df.to_csv(os.path.join(args.output_dir, "all_best_combinations.csv"), index=False)
    logger.info("Saved: all_best_combinations.csv (%d feasible / %d pairs)",
                int(combos_df["feasible"].sum()), len(combos_df))

    # 2) Optimize
    if args.all_vessels:
        plan = solve_assignment(vessels, cargoes, evaluations)
    else:
        plan = solve_portfolio(vessels, cargoes, evaluations, args.vessel_count)

    build_assignment_df(plan).to_csv(os.path.join(args.output_dir, "optimal_assignment.csv"), index=False)

    text = render_report(evaluations, plan, scenario, blend_step=args.blend_step,
                         default_distance_nm=distances.default_nm, cargos=cargoes)
    with open(os.path.join(args.output_dir, "recommendation.txt"), "w") as f:
        f.write(text + "\n")
    with open(os.path.join(args.output_dir, "recommendation.json"), "w") as f:
        json.dump(report_to_dict(evaluations, plan, scenario, blend_step=args.blend_step, cargos=cargoes), f, indent=2)
    logger.info("Saved: optimal_assignment.csv, recommendation.txt, recommendation.json")

    print(text)
    return combos_df, plan


if __name__ == "__main__":
    main()
