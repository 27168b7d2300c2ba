import json
import os

import pandas as pd
import pytest

from main_analysis import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.vessel_count == 4
    assert args.all_vessels is False
    assert args.blend_step == 0.01
    assert args.processes is None


def test_main_writes_outputs(tmp_path):
    out = str(tmp_path)
    combos_df, plan = main([
        "--blend-step", "0.5", "--reference-date", "2026-03-01",
        "--market-hire-rate", "16000", "--output-dir", out,
    ])

    assert len(combos_df) == 42
    for name in ("all_best_combinations.csv", "optimal_assignment.csv",
                 "recommendation.txt", "recommendation.json"):
        assert os.path.exists(os.path.join(out, name))

    saved = pd.read_csv(os.path.join(out, "all_best_combinations.csv"))
    assert len(saved) == 42

    with open(os.path.join(out, "recommendation.json")) as f:
        data = json.load(f)
    assert data["search"]["pairs_total"] == 42
    assert data["inputs"]["market_hire_rate"] == 16000.0
    assert data["portfolio"]["vessel_count"] == 4
    assert data["portfolio"]["combinations_total"] == 35

    with open(os.path.join(out, "recommendation.txt")) as f:
        text = f.read()
    assert "Best total adjusted profit" in text


def test_main_all_vessels(tmp_path):
    _, plan = main(["--blend-step", "0.5", "--all-vessels", "--output-dir", str(tmp_path)])
    assert len(plan.matches) + len(plan.unassigned_vessels) == 7


def test_vessel_count_must_be_positive(capsys):
    for bad in ("0", "-2", "four"):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--vessel-count", bad])
        assert exc.value.code == 2
    assert "--vessel-count" in capsys.readouterr().err
