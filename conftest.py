"""
Shared builders for the test modules.
"""

from datetime import datetime

import pandas as pd
import pytest

from laycan import LaycanWindow
from port_distances import DistanceTable
from vessel_cargo_data import (
    CargoContract,
    LegConsumption,
    QuantityRange,
    SpeedProfile,
    VesselProfile,
)


def build_vessel(**overrides) -> VesselProfile:
    fields = dict(
        name="V1",
        current_port="A",
        etd=datetime(2026, 3, 1),
        dwt=180_000.0,
        economical=SpeedProfile(14.0, 13.0, LegConsumption(45.0, 0.1), LegConsumption(50.0, 0.1)),
        warranted=SpeedProfile(12.0, 11.5, LegConsumption(36.0, 0.1), LegConsumption(40.0, 0.1)),
        port_working=LegConsumption(3.0, 0.1),
        port_idle=LegConsumption(2.0, 0.1),
        hire_rate=15_000.0,
    )
    fields.update(overrides)
    return VesselProfile(**fields)


def build_cargo(**overrides) -> CargoContract:
    fields = dict(
        name="C1",
        quantity=150_000.0,
        load_port="A",
        discharge_port="D",
        freight_rate=22.0,
        load_rate=50_000.0,
        discharge_rate=50_000.0,
        quantity_range=QuantityRange(142_500.0, 157_500.0),
        laycan=LaycanWindow(datetime(2026, 3, 1), datetime(2026, 3, 5)),
        port_cost_load=20_000.0,
        port_cost_discharge=20_000.0,
    )
    fields.update(overrides)
    return CargoContract(**fields)


@pytest.fixture
def make_vessel():
    return build_vessel


@pytest.fixture
def make_cargo():
    return build_cargo


@pytest.fixture
def distances():
    """A-D laden leg, B far from A; C has no table entries at all."""
    df = pd.DataFrame(
        [
            ("A", "D", 5_000.0),
            ("B", "A", 8_000.0),
            ("B", "D", 6_000.0),
        ],
        columns=["PORT_NAME_FROM", "PORT_NAME_TO", "DISTANCE"],
    )
    return DistanceTable(df)
