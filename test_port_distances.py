import pandas as pd
import pytest

from port_distances import DistanceLookup, DistanceTable


def _table(**kwargs):
    df = pd.DataFrame(
        [
            ("QINGDAO, CHINA", "PORT HEDLAND", 3_520),
            ("KAMSAR", "QINGDAO, CHINA", 11_124),
            ("KAMSAR", "ROTTERDAM", "n/a"),
            ("KAMSAR", "PARADIP", 0),
        ],
        columns=["PORT_NAME_FROM", "PORT_NAME_TO", "DISTANCE"],
    )
    return DistanceTable(df, **kwargs)


def test_exact_lookup():
    assert _table().lookup("QINGDAO, CHINA", "PORT HEDLAND") == DistanceLookup(3_520.0, True)


def test_substring_and_case_resolution():
    assert _table()("qingdao", "Port Hedland") == DistanceLookup(3_520.0, True)


def test_reverse_direction():
    assert _table().lookup("PORT HEDLAND", "QINGDAO") == DistanceLookup(3_520.0, True)
    assert _table(allow_reverse=False).lookup("PORT HEDLAND", "QINGDAO").is_exact_match is False


def test_missing_leg_falls_back_to_3000():
    r = _table().lookup("TUBARAO", "QINGDAO")
    assert r.distance_nm == 3000.0
    assert r.is_exact_match is False


def test_invalid_rows_are_dropped():
    t = _table()
    assert t.lookup("KAMSAR", "ROTTERDAM").is_exact_match is False
    assert t.lookup("KAMSAR", "PARADIP").is_exact_match is False


def test_same_port_is_zero():
    assert _table().lookup("KAMSAR", "kamsar") == DistanceLookup(0.0, True)


def test_custom_default():
    assert _table(default_nm=4500).lookup("X", "Y") == DistanceLookup(4500.0, False)


def test_missing_columns_rejected():
    with pytest.raises(ValueError):
        DistanceTable(pd.DataFrame({"FROM": ["A"], "TO": ["B"], "DISTANCE": [1.0]}))


def test_from_csv(tmp_path):
    path = tmp_path / "distances.csv"
    path.write_text("PORT_NAME_FROM,PORT_NAME_TO,DISTANCE\nA,B,100\n")
    assert DistanceTable.from_csv(str(path)).lookup("B", "A") == DistanceLookup(100.0, True)
