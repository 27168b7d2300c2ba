"""
Test completeness of the bundled sample fleet, cargo book and distance table
"""
import pytest

from port_distances import DistanceTable
from vessel_cargo_data import *


def test_vessel_count():
    """Test that we have the correct number of vessels"""
    assert len(CARGILL_VESSELS) == 4, f"Expected 4 Cargill vessels, got {len(CARGILL_VESSELS)}"
    assert len(MARKET_VESSELS) == 3, f"Expected 3 market vessels, got {len(MARKET_VESSELS)}"
    assert len(get_all_vessels()) == 7, f"Expected 7 total vessels, got {len(get_all_vessels())}"


def test_cargo_count():
    """Test that we have the correct number of cargoes"""
    assert len(CARGILL_CARGOES) == 3, f"Expected 3 Cargill cargoes, got {len(CARGILL_CARGOES)}"
    assert len(MARKET_CARGOES) == 3, f"Expected 3 market cargoes, got {len(MARKET_CARGOES)}"
    assert len(get_all_cargoes()) == 6, f"Expected 6 total cargoes, got {len(get_all_cargoes())}"


def test_vessel_structure():
    """Test that all vessels have required fields and convert cleanly"""
    for vessel in get_all_vessels():
        for field in VESSEL_REQUIRED_FIELDS:
            assert field in vessel, f"{vessel['name']} missing {field}"

        assert vessel['hire_rate'] > 0, f"{vessel['name']} has invalid hire_rate: {vessel['hire_rate']}"

        profile = vessel_from_dict(vessel)
        assert profile.etd is not None, f"{vessel['name']} has unparseable etd"
        assert profile.economical.ballast_speed > profile.warranted.ballast_speed


def test_cargo_structure():
    """Test that all cargoes have required fields, a laycan and a quantity range"""
    for cargo in get_all_cargoes():
        for field in CARGO_REQUIRED_FIELDS:
            assert field in cargo, f"{cargo['name']} missing {field}"

        assert cargo['freight_rate'] > 0, f"{cargo['name']} has invalid freight_rate: {cargo['freight_rate']}"

        contract = cargo_from_dict(cargo)
        assert contract.laycan is not None, f"{cargo['name']} has unparseable laycan"
        assert contract.laycan.start <= contract.laycan.end
        assert contract.quantity_range.lower < contract.quantity < contract.quantity_range.upper


def test_sources():
    vessels, cargoes = load_sample_fleet()
    assert [v.source for v in vessels] == ["cargill"] * 4 + ["market"] * 3
    assert [c.source for c in cargoes] == ["committed"] * 3 + ["market"] * 3


def test_combinations():
    """Test that we can generate the expected number of combinations"""
    expected_combos = len(get_all_vessels()) * len(get_all_cargoes())
    assert expected_combos == 42, f"Expected 42 combinations (7×6), got {expected_combos}"


def test_hire_rates():
    """Test that all market vessels have reasonable hire rates"""
    for vessel in MARKET_VESSELS:
        hire = vessel['hire_rate']
        assert 10000 <= hire <= 25000, f"{vessel['name']} has unreasonable hire rate: ${hire}/day"


def test_freight_rates():
    """Test that all market cargoes have reasonable freight rates"""
    for cargo in MARKET_CARGOES:
        rate = cargo['freight_rate']
        assert 5 <= rate <= 30, f"{cargo['name']} has unreasonable freight rate: ${rate}/MT"


def test_distance_table_covers_sample_routes():
    """Every sample leg is in the table except the one deliberately left out"""
    table = DistanceTable(sample_distances_df())
    vessels, cargoes = load_sample_fleet()

    missing = []
    for c in cargoes:
        assert table.lookup(c.load_port, c.discharge_port).is_exact_match, c.name
        for v in vessels:
            if not table.lookup(v.current_port, c.load_port).is_exact_match:
                missing.append((v.current_port, c.load_port))
    assert missing == [("PORT TALBOT", "TUBARAO")]


def test_malformed_records_fail_fast():
    broken = dict(CARGILL_VESSELS[0])
    del broken['eco_ballast_speed']
    with pytest.raises(ValueError):
        vessel_from_dict(broken)

    bad_rate = dict(CARGILL_CARGOES[0], freight_rate="twenty")
    with pytest.raises(ValueError):
        cargo_from_dict(bad_rate)


def test_unparseable_laycan_becomes_none():
    cargo = dict(MARKET_CARGOES[0], laycan_start="mid-March")
    assert cargo_from_dict(cargo).laycan is None
