"""
config.py: Central configuration for the fleet voyage optimizer.

All tuneable parameters live here so that sensitivity analysis
(e.g., a coarser speed grid or different bunker prices) requires
changes in ONE place only.
"""

# ─────────────────────────── SEARCH GRID ───────────────────────────
# Speed blend: 0.0 = warranted profile, 1.0 = economical profile
BLEND_STEP = 0.01                 # 101 points per leg at the default resolution

# Quantity axis: step = max(QUANTITY_STEP_FRACTION × base qty, MIN_QUANTITY_STEP)
QUANTITY_STEP_FRACTION = 0.01
MIN_QUANTITY_STEP = 1.0           # MT
QUANTITY_STEP_TOLERANCE = 1e-6    # keeps the max end of the range inclusive

# ─────────────────────────── DISTANCES ─────────────────────────────
DEFAULT_DISTANCE_NM = 3000.0      # used when the distance table has no entry

# ─────────────────────────── ASSIGNMENT ────────────────────────────
INFEASIBLE_COST_PENALTY = 1e9     # added on top of the best profit for missing pairs
DEFAULT_VESSEL_COUNT = 4          # vessels picked by the committed/market portfolio

# ──────────────────────── VOYAGE DEFAULTS ──────────────────────────
BUNKER_DAYS = 1.0                 # fixed operational buffer per voyage

DEFAULT_IFO_PRICE = 440.0         # USD/MT
DEFAULT_MDO_PRICE = 850.0         # USD/MT

# Standard voyage overheads (USD per voyage)
DEFAULT_CEV = 1_500.0             # communication / entertainment / victualling
DEFAULT_ILHOC = 5_000.0           # intermediate hold cleaning
DEFAULT_BUNKER_DA = 1_500.0       # bunker delivery agency fee
DEFAULT_PORT_DISB_LOAD = 20_000.0
DEFAULT_PORT_DISB_DIS = 20_000.0
DEFAULT_MISC_EXPENSE = 48_000.0

DEFAULT_PORT_IDLE_DAYS = 0.5
DEFAULT_ADDRESS_COMMISSION = 0.0375

# ───────────────────────────── CLI ─────────────────────────────────
OUTPUT_DIR = "output"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
