"""
Vessel and cargo records for the fleet voyage optimizer.

Raw records are plain dicts (as delivered by the CSV/Excel loaders); they
are converted once into immutable profiles with `vessel_from_dict` and
`cargo_from_dict`, which fail fast on missing or non-numeric fields.

Bundled sample data: 4 Cargill vessels + 3 market vessels,
3 committed cargoes + 3 market cargoes, and a port distance table.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from config import (
    DEFAULT_ADDRESS_COMMISSION,
    DEFAULT_PORT_DISB_DIS,
    DEFAULT_PORT_DISB_LOAD,
    DEFAULT_PORT_IDLE_DAYS,
)
from laycan import LaycanWindow, parse_date


# ============================================================================
# Record types
# ============================================================================

@dataclass(frozen=True)
class LegConsumption:
    """Fuel burn in MT/day for the two tracked grades."""
    ifo: float
    mdo: float


@dataclass(frozen=True)
class SpeedProfile:
    ballast_speed: float
    laden_speed: float
    ballast: LegConsumption
    laden: LegConsumption


@dataclass(frozen=True)
class VesselProfile:
    name: str
    current_port: str
    etd: Optional[datetime]
    dwt: float
    economical: SpeedProfile
    warranted: SpeedProfile
    port_working: LegConsumption
    port_idle: LegConsumption
    hire_rate: float
    address_commission: float = DEFAULT_ADDRESS_COMMISSION
    grain_capacity: Optional[float] = None
    source: str = "cargill"

    @property
    def capacity(self) -> float:
        """Volumetric capacity; falls back to DWT when no grain figure is known."""
        return self.dwt if self.grain_capacity is None else self.grain_capacity


@dataclass(frozen=True)
class QuantityRange:
    min_qty: float
    max_qty: float

    @property
    def lower(self) -> float:
        return min(self.min_qty, self.max_qty)

    @property
    def upper(self) -> float:
        return max(self.min_qty, self.max_qty)


@dataclass(frozen=True)
class CargoContract:
    name: str
    quantity: float
    load_port: str
    discharge_port: str
    freight_rate: float
    load_rate: float
    discharge_rate: float
    quantity_range: Optional[QuantityRange] = None
    load_tt: float = 0.0
    discharge_tt: float = 0.0
    port_idle_days: float = DEFAULT_PORT_IDLE_DAYS
    address_commission: float = 0.0
    broker_commission: float = 0.0
    laycan: Optional[LaycanWindow] = None
    port_cost_load: float = DEFAULT_PORT_DISB_LOAD
    port_cost_discharge: float = DEFAULT_PORT_DISB_DIS
    ballast_bonus: float = 0.0
    stow_factor: float = 1.0
    customer: str = ""
    commodity: str = ""
    source: str = "committed"


# ============================================================================
# Converters (fail fast on malformed records)
# ============================================================================

VESSEL_REQUIRED_FIELDS = [
    "name", "dwt", "hire_rate", "current_port",
    "eco_ballast_speed", "eco_laden_speed",
    "eco_ballast_vlsf", "eco_ballast_mgo", "eco_laden_vlsf", "eco_laden_mgo",
    "war_ballast_speed", "war_laden_speed",
    "war_ballast_vlsf", "war_ballast_mgo", "war_laden_vlsf", "war_laden_mgo",
    "port_idle_vlsf", "port_idle_mgo", "port_working_vlsf", "port_working_mgo",
]

CARGO_REQUIRED_FIELDS = [
    "name", "quantity", "freight_rate", "load_port", "discharge_port",
    "load_rate", "discharge_rate",
]


def _require(record: Dict[str, Any], fields: List[str], kind: str) -> None:
    missing = [f for f in fields if record.get(f) is None or record.get(f) == ""]
    if missing:
        raise ValueError(f"{kind} {record.get('name', '?')!r} missing fields: {missing}")


def _num(record: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    value = record.get(key, default)
    if value is None:
        raise ValueError(f"{record.get('name', '?')!r}: field {key!r} is required")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{record.get('name', '?')!r}: field {key!r} must be numeric, got {value!r}")
    return float(value)


def _speed_profile(record: Dict[str, Any], prefix: str) -> SpeedProfile:
    return SpeedProfile(
        ballast_speed=_num(record, f"{prefix}_ballast_speed"),
        laden_speed=_num(record, f"{prefix}_laden_speed"),
        ballast=LegConsumption(
            ifo=_num(record, f"{prefix}_ballast_vlsf"),
            mdo=_num(record, f"{prefix}_ballast_mgo"),
        ),
        laden=LegConsumption(
            ifo=_num(record, f"{prefix}_laden_vlsf"),
            mdo=_num(record, f"{prefix}_laden_mgo"),
        ),
    )


def vessel_from_dict(record: Dict[str, Any]) -> VesselProfile:
    """Build a VesselProfile; raises ValueError when required fields are absent."""
    _require(record, VESSEL_REQUIRED_FIELDS, "vessel")

    grain = record.get("grain_capacity")
    return VesselProfile(
        name=str(record["name"]),
        current_port=str(record["current_port"]).upper().strip(),
        etd=parse_date(record.get("etd")),
        dwt=_num(record, "dwt"),
        economical=_speed_profile(record, "eco"),
        warranted=_speed_profile(record, "war"),
        port_working=LegConsumption(
            ifo=_num(record, "port_working_vlsf"),
            mdo=_num(record, "port_working_mgo"),
        ),
        port_idle=LegConsumption(
            ifo=_num(record, "port_idle_vlsf"),
            mdo=_num(record, "port_idle_mgo"),
        ),
        hire_rate=_num(record, "hire_rate"),
        address_commission=_num(record, "address_commission", DEFAULT_ADDRESS_COMMISSION),
        grain_capacity=None if grain is None else _num(record, "grain_capacity"),
        source=str(record.get("source", "cargill")),
    )


def _quantity_range(record: Dict[str, Any], base: float) -> Optional[QuantityRange]:
    """
    Explicit qty_min/qty_max wins; otherwise a qty_tolerance fraction
    (e.g. 0.10 for +/-10%) around the base quantity. No assumption otherwise.
    """
    if record.get("qty_min") is not None and record.get("qty_max") is not None:
        return QuantityRange(_num(record, "qty_min"), _num(record, "qty_max"))

    tol = record.get("qty_tolerance", record.get("quantity_tolerance"))
    if tol is None or base <= 0:
        return None
    tol = float(tol)
    if tol <= 0:
        return None
    return QuantityRange(base * (1.0 - tol), base * (1.0 + tol))


def _laycan(record: Dict[str, Any]) -> Optional[LaycanWindow]:
    start = parse_date(record.get("laycan_start"))
    end = parse_date(record.get("laycan_end"))
    if start is None or end is None:
        return None
    return LaycanWindow(start=start, end=end)


def cargo_from_dict(record: Dict[str, Any]) -> CargoContract:
    """Build a CargoContract; an unparseable laycan becomes None, not an error."""
    _require(record, CARGO_REQUIRED_FIELDS, "cargo")

    base = _num(record, "quantity")
    return CargoContract(
        name=str(record["name"]),
        quantity=base,
        load_port=str(record["load_port"]).upper().strip(),
        discharge_port=str(record["discharge_port"]).upper().strip(),
        freight_rate=_num(record, "freight_rate"),
        load_rate=_num(record, "load_rate"),
        discharge_rate=_num(record, "discharge_rate"),
        quantity_range=_quantity_range(record, base),
        load_tt=_num(record, "load_tt", 0.0),
        discharge_tt=_num(record, "discharge_tt", 0.0),
        port_idle_days=_num(record, "port_idle_days", DEFAULT_PORT_IDLE_DAYS),
        address_commission=_num(record, "address_commission", 0.0),
        broker_commission=_num(record, "broker_commission", 0.0),
        laycan=_laycan(record),
        port_cost_load=_num(record, "port_cost_load", DEFAULT_PORT_DISB_LOAD),
        port_cost_discharge=_num(record, "port_cost_discharge", DEFAULT_PORT_DISB_DIS),
        ballast_bonus=_num(record, "ballast_bonus", 0.0),
        stow_factor=_num(record, "stow_factor", 1.0),
        customer=str(record.get("customer", "")),
        commodity=str(record.get("commodity", "")),
        source=str(record.get("source", "committed")),
    )


# ============================================================================
# Sample data
# ============================================================================

CARGILL_VESSELS: List[Dict[str, Any]] = [
    {
        "name": "ANN BELL", "source": "cargill",
        "dwt": 180_803, "hire_rate": 11_750,
        "current_port": "QINGDAO", "etd": "2026-02-25",
        "eco_ballast_speed": 14.0, "eco_laden_speed": 13.5,
        "eco_ballast_vlsf": 48.0, "eco_ballast_mgo": 0.1,
        "eco_laden_vlsf": 52.0, "eco_laden_mgo": 0.1,
        "war_ballast_speed": 12.0, "war_laden_speed": 11.5,
        "war_ballast_vlsf": 38.0, "war_ballast_mgo": 0.1,
        "war_laden_vlsf": 42.0, "war_laden_mgo": 0.1,
        "port_idle_vlsf": 2.0, "port_idle_mgo": 0.1,
        "port_working_vlsf": 3.0, "port_working_mgo": 0.1,
    },
    {
        "name": "OCEAN HORIZON", "source": "cargill",
        "dwt": 181_550, "hire_rate": 15_750,
        "current_port": "SINGAPORE", "etd": "2026-03-01",
        "eco_ballast_speed": 13.8, "eco_laden_speed": 13.2,
        "eco_ballast_vlsf": 46.5, "eco_ballast_mgo": 0.1,
        "eco_laden_vlsf": 51.0, "eco_laden_mgo": 0.1,
        "war_ballast_speed": 12.2, "war_laden_speed": 11.6,
        "war_ballast_vlsf": 37.5, "war_ballast_mgo": 0.1,
        "war_laden_vlsf": 41.0, "war_laden_mgo": 0.1,
        "port_idle_vlsf": 1.8, "port_idle_mgo": 0.1,
        "port_working_vlsf": 3.2, "port_working_mgo": 0.1,
    },
    {
        "name": "PACIFIC GLORY", "source": "cargill",
        "dwt": 182_320, "hire_rate": 14_800,
        "current_port": "GWANGYANG", "etd": "2026-03-10",
        "eco_ballast_speed": 14.2, "eco_laden_speed": 13.4,
        "eco_ballast_vlsf": 49.0, "eco_ballast_mgo": 0.1,
        "eco_laden_vlsf": 53.5, "eco_laden_mgo": 0.1,
        "war_ballast_speed": 12.5, "war_laden_speed": 11.8,
        "war_ballast_vlsf": 39.0, "war_ballast_mgo": 0.1,
        "war_laden_vlsf": 43.0, "war_laden_mgo": 0.1,
        "port_idle_vlsf": 2.0, "port_idle_mgo": 0.1,
        "port_working_vlsf": 3.0, "port_working_mgo": 0.1,
    },
    {
        "name": "GOLDEN ASCENT", "source": "cargill",
        "dwt": 179_965, "hire_rate": 13_950,
        "current_port": "FANGCHENG", "etd": "2026-03-08",
        "eco_ballast_speed": 13.6, "eco_laden_speed": 13.0,
        "eco_ballast_vlsf": 45.0, "eco_ballast_mgo": 0.1,
        "eco_laden_vlsf": 50.0, "eco_laden_mgo": 0.1,
        "war_ballast_speed": 12.0, "war_laden_speed": 11.5,
        "war_ballast_vlsf": 36.0, "war_ballast_mgo": 0.1,
        "war_laden_vlsf": 40.5, "war_laden_mgo": 0.1,
        "port_idle_vlsf": 1.9, "port_idle_mgo": 0.1,
        "port_working_vlsf": 3.1, "port_working_mgo": 0.1,
    },
]

MARKET_VESSELS: List[Dict[str, Any]] = [
    {
        "name": "ATLANTIC FORTUNE", "source": "market",
        "dwt": 181_200, "hire_rate": 18_000,
        "current_port": "PARADIP", "etd": "2026-03-02",
        "eco_ballast_speed": 13.8, "eco_laden_speed": 13.2,
        "eco_ballast_vlsf": 47.0, "eco_ballast_mgo": 0.1,
        "eco_laden_vlsf": 51.5, "eco_laden_mgo": 0.1,
        "war_ballast_speed": 12.3, "war_laden_speed": 11.7,
        "war_ballast_vlsf": 38.0, "war_ballast_mgo": 0.1,
        "war_laden_vlsf": 42.0, "war_laden_mgo": 0.1,
        "port_idle_vlsf": 2.0, "port_idle_mgo": 0.1,
        "port_working_vlsf": 3.0, "port_working_mgo": 0.1,
    },
    {
        "name": "IRON CENTURY", "source": "market",
        "dwt": 182_100, "hire_rate": 18_000,
        "current_port": "PORT TALBOT", "etd": "2026-03-05",
        "eco_ballast_speed": 14.0, "eco_laden_speed": 13.3,
        "eco_ballast_vlsf": 48.5, "eco_ballast_mgo": 0.1,
        "eco_laden_vlsf": 52.0, "eco_laden_mgo": 0.1,
        "war_ballast_speed": 12.4, "war_laden_speed": 11.8,
        "war_ballast_vlsf": 38.5, "war_ballast_mgo": 0.1,
        "war_laden_vlsf": 42.5, "war_laden_mgo": 0.1,
        "port_idle_vlsf": 2.0, "port_idle_mgo": 0.1,
        "port_working_vlsf": 3.0, "port_working_mgo": 0.1,
    },
    {
        "name": "NAVIS PRIDE", "source": "market",
        "dwt": 180_500, "hire_rate": 18_000,
        "current_port": "ROTTERDAM", "etd": "2026-02-28",
        "eco_ballast_speed": 13.9, "eco_laden_speed": 13.1,
        "eco_ballast_vlsf": 47.5, "eco_ballast_mgo": 0.1,
        "eco_laden_vlsf": 51.0, "eco_laden_mgo": 0.1,
        "war_ballast_speed": 12.2, "war_laden_speed": 11.6,
        "war_ballast_vlsf": 37.5, "war_ballast_mgo": 0.1,
        "war_laden_vlsf": 41.5, "war_laden_mgo": 0.1,
        "port_idle_vlsf": 2.0, "port_idle_mgo": 0.1,
        "port_working_vlsf": 3.0, "port_working_mgo": 0.1,
    },
]

CARGILL_CARGOES: List[Dict[str, Any]] = [
    {
        "name": "EGA_BAUXITE_KAMSAR_QINGDAO", "source": "committed",
        "customer": "EGA", "commodity": "Bauxite",
        "quantity": 180_000, "qty_tolerance": 0.10, "freight_rate": 23.0,
        "load_port": "KAMSAR", "discharge_port": "QINGDAO",
        "load_rate": 30_000, "discharge_rate": 25_000,
        "load_tt": 0.5, "discharge_tt": 0.5,
        "port_cost_load": 0.0, "port_cost_discharge": 0.0,
        "address_commission": 0.0125,
        "laycan_start": "2026-04-02", "laycan_end": "2026-04-10",
    },
    {
        "name": "BHP_IRON_HEDLAND_LIANYUNGANG", "source": "committed",
        "customer": "BHP", "commodity": "Iron Ore",
        "quantity": 160_000, "qty_tolerance": 0.10, "freight_rate": 9.0,
        "load_port": "PORT HEDLAND", "discharge_port": "LIANYUNGANG",
        "load_rate": 80_000, "discharge_rate": 30_000,
        "load_tt": 0.5, "discharge_tt": 1.0,
        "port_cost_load": 260_000, "port_cost_discharge": 120_000,
        "broker_commission": 0.0375,
        "laycan_start": "2026-03-07", "laycan_end": "2026-03-14",
    },
    {
        "name": "CSN_IRON_ITAGUAI_QINGDAO", "source": "committed",
        "customer": "CSN", "commodity": "Iron Ore",
        "quantity": 180_000, "qty_tolerance": 0.10, "freight_rate": 22.30,
        "load_port": "ITAGUAI", "discharge_port": "QINGDAO",
        "load_rate": 60_000, "discharge_rate": 30_000,
        "load_tt": 0.25, "discharge_tt": 1.0,
        "port_cost_load": 75_000, "port_cost_discharge": 90_000,
        "broker_commission": 0.0375,
        "laycan_start": "2026-04-01", "laycan_end": "2026-04-08",
    },
]

MARKET_CARGOES: List[Dict[str, Any]] = [
    {
        "name": "RIO_IRON_DAMPIER_QINGDAO", "source": "market",
        "customer": "Rio Tinto", "commodity": "Iron Ore",
        "quantity": 170_000, "qty_tolerance": 0.10, "freight_rate": 9.5,
        "load_port": "DAMPIER", "discharge_port": "QINGDAO",
        "load_rate": 80_000, "discharge_rate": 30_000,
        "load_tt": 0.5, "discharge_tt": 1.0,
        "port_cost_load": 240_000, "port_cost_discharge": 110_000,
        "broker_commission": 0.0375,
        "laycan_start": "2026-03-12", "laycan_end": "2026-03-18",
    },
    {
        "name": "VALE_IRON_TUBARAO_ROTTERDAM", "source": "market",
        "customer": "Vale", "commodity": "Iron Ore",
        "quantity": 170_000, "qty_tolerance": 0.10, "freight_rate": 11.25,
        "load_port": "TUBARAO", "discharge_port": "ROTTERDAM",
        "load_rate": 60_000, "discharge_rate": 30_000,
        "load_tt": 0.5, "discharge_tt": 1.0,
        "port_cost_load": 80_000, "port_cost_discharge": 95_000,
        "broker_commission": 0.0375,
        "laycan_start": "2026-03-18", "laycan_end": "2026-03-28",
    },
    {
        "name": "ADARO_COAL_TABONEO_MUNDRA", "source": "market",
        "customer": "Adaro", "commodity": "Thermal Coal",
        "quantity": 150_000, "qty_tolerance": 0.10, "freight_rate": 10.0,
        "load_port": "TABONEO", "discharge_port": "MUNDRA",
        "load_rate": 25_000, "discharge_rate": 30_000,
        "load_tt": 0.5, "discharge_tt": 0.5,
        "port_cost_load": 70_000, "port_cost_discharge": 60_000,
        "broker_commission": 0.025,
        "laycan_start": "2026-03-10", "laycan_end": "2026-03-20",
    },
]

# Directed table rows; lookups also try the reverse direction.
# PORT TALBOT -> TUBARAO is deliberately absent (falls back to the default distance).
SAMPLE_PORT_DISTANCES: List[Tuple[str, str, float]] = [
    ("QINGDAO", "KAMSAR", 11_124.0),
    ("QINGDAO", "PORT HEDLAND", 3_520.0),
    ("QINGDAO", "ITAGUAI", 11_060.0),
    ("QINGDAO", "DAMPIER", 3_460.0),
    ("QINGDAO", "TUBARAO", 11_130.0),
    ("QINGDAO", "TABONEO", 2_620.0),
    ("SINGAPORE", "KAMSAR", 8_120.0),
    ("SINGAPORE", "PORT HEDLAND", 1_790.0),
    ("SINGAPORE", "ITAGUAI", 9_010.0),
    ("SINGAPORE", "DAMPIER", 1_720.0),
    ("SINGAPORE", "TUBARAO", 8_990.0),
    ("SINGAPORE", "TABONEO", 720.0),
    ("GWANGYANG", "KAMSAR", 11_350.0),
    ("GWANGYANG", "PORT HEDLAND", 3_490.0),
    ("GWANGYANG", "ITAGUAI", 11_280.0),
    ("GWANGYANG", "DAMPIER", 3_430.0),
    ("GWANGYANG", "TUBARAO", 11_350.0),
    ("GWANGYANG", "TABONEO", 2_450.0),
    ("FANGCHENG", "KAMSAR", 10_210.0),
    ("FANGCHENG", "PORT HEDLAND", 2_880.0),
    ("FANGCHENG", "ITAGUAI", 10_330.0),
    ("FANGCHENG", "DAMPIER", 2_810.0),
    ("FANGCHENG", "TUBARAO", 10_390.0),
    ("FANGCHENG", "TABONEO", 1_770.0),
    ("PARADIP", "KAMSAR", 7_480.0),
    ("PARADIP", "PORT HEDLAND", 3_160.0),
    ("PARADIP", "ITAGUAI", 8_470.0),
    ("PARADIP", "DAMPIER", 3_110.0),
    ("PARADIP", "TUBARAO", 8_430.0),
    ("PARADIP", "TABONEO", 2_440.0),
    ("PORT TALBOT", "KAMSAR", 2_840.0),
    ("PORT TALBOT", "PORT HEDLAND", 10_900.0),
    ("PORT TALBOT", "ITAGUAI", 5_200.0),
    ("PORT TALBOT", "DAMPIER", 10_820.0),
    ("PORT TALBOT", "TABONEO", 9_980.0),
    ("ROTTERDAM", "KAMSAR", 2_880.0),
    ("ROTTERDAM", "PORT HEDLAND", 11_060.0),
    ("ROTTERDAM", "ITAGUAI", 5_330.0),
    ("ROTTERDAM", "DAMPIER", 10_990.0),
    ("ROTTERDAM", "TUBARAO", 5_150.0),
    ("ROTTERDAM", "TABONEO", 9_950.0),
    ("KAMSAR", "QINGDAO", 11_124.0),
    ("PORT HEDLAND", "LIANYUNGANG", 3_610.0),
    ("ITAGUAI", "QINGDAO", 11_060.0),
    ("DAMPIER", "QINGDAO", 3_460.0),
    ("TUBARAO", "ROTTERDAM", 5_150.0),
    ("TABONEO", "MUNDRA", 4_150.0),
]


def get_all_vessels() -> List[Dict[str, Any]]:
    return CARGILL_VESSELS + MARKET_VESSELS


def get_all_cargoes() -> List[Dict[str, Any]]:
    return CARGILL_CARGOES + MARKET_CARGOES


def load_sample_fleet() -> Tuple[List[VesselProfile], List[CargoContract]]:
    """Converted sample vessels and cargoes (committed cargoes first)."""
    vessels = [vessel_from_dict(v) for v in get_all_vessels()]
    cargoes = [cargo_from_dict(c) for c in get_all_cargoes()]
    return vessels, cargoes


def sample_distances_df() -> pd.DataFrame:
    return pd.DataFrame(SAMPLE_PORT_DISTANCES, columns=["PORT_NAME_FROM", "PORT_NAME_TO", "DISTANCE"])
