from typing import Literal
from .config import load_parameters_config, resolve_config_path

# ============================================================================
# SETTINGS
# ============================================================================

# Load configuration immediately (blocking)
# The packaged engine_parameters.csv is expected to be fully populated.
_config = load_parameters_config(resolve_config_path())


# Helper to fetch with strict error if missing
def _get(key):
    if key not in _config or _config[key] is None:
        raise KeyError(f"Missing required parameter '{key}' in engine parameter sheet")
    return _config[key]


# Computing (consuming) country
DEFAULT_COUNTRY_CODE = str(_get("DEFAULT_COUNTRY_CODE"))

# Origins
ROW_THRESHOLD = float(_get("ROW_THRESHOLD"))
SHARE_SUM_TOLERANCE = float(_get("SHARE_SUM_TOLERANCE"))

# Reporting
DECIMALS = int(_get("DECIMALS"))

# ============================================================================
# STRUCTURAL CONSTANTS (code constructs, not sheet parameters)
# ============================================================================

REST_OF_WORLD = "RoW"

# Vector lengths. Every vector of a given kind is index-aligned with these.
N_ENV_IMPACTS = 16
N_PROCESS_GHGS = 3      # CO2, CH4 fossil, N2O
N_PACKAGING_GHGS = 3    # CO2, CH4 fossil, CH4 biogenic
N_TRANSPORT_GHGS = 3    # CO2, CH4 fossil, N2O

ENV_IMPACT_LABELS = [
    "Carbon footprint, primary production (kg CO2e)",
    "Carbon dioxide, primary production (kg CO2)",
    "Methane, fossil, primary production (kg CH4)",
    "Methane, biogenic, primary production (kg CH4)",
    "Nitrous oxide, primary production (kg N2O)",
    "HFC, primary production (kg CO2e)",
    "Cropland (m2*year)",
    "New N input (kg N)",
    "New P input (kg P)",
    "Water (m3)",
    "Pesticides (g a.i.)",
    "Biodiversity (E/MSY)",
    "Ammonia (kg NH3)",
    "Labour (hours)",
    "Animal welfare (index)",
    "Antibiotics (index)",
]

# Energy carriers, in the column order of the process energy-demand table.
CARRIER_ORDER = [
    "Electricity",
    "Heating oil",
    "Natural gas",
    "Other fossil energy sources",
    "Bark and chips",
    "Pellets and briquettes",
    "Other renewable energy sources",
    "Diesel fuel",
    "District heating",
]

# Only electricity has country-specific GHG factors.
COUNTRY_DEPENDENT_CARRIERS = ["Electricity"]

# Global warming potentials (kg CO2e per kg gas)
CO2E_CONV_FACTORS = {
    "CO2": 1.0,
    "FCH4": 29.8,
    "BCH4": 27.0,
    "N2O": 273.0,
}

PROCESS_GHGS = ["CO2", "FCH4", "N2O"]
PACKAGING_GHGS = ["CO2", "FCH4", "BCH4"]
TRANSPORT_GHGS = ["CO2", "FCH4", "N2O"]

# Processes that add mass which is not transported (water uptake etc.)
TRANSPORTLESS_PROCESSES = [
    "F28.A07KD",
    "F28.A07KF",
    "F28.A07KG",
    "F28.A07KQ",
    "F28.A07LN",
    "F28.A07MF",
    "F28.A07MH",
    "F28.A0BZV",
    "F28.A0C00",
    "F28.A0C02",
    "F28.A0C04",
    "F28.A0C0B",
    "F28.A0C6E",
    "F28.NEW01",  # Protein isolate, plant-protein
    "F28.NEW02",  # Extrusion, plant-protein
]

# Polished rice: this exact combination is not transport-less.
TRANSPORTLESS_PROCESS_EXCEPTION = ["F28.A0BZV", "F28.A07GG"]

# Products without transport emissions (tap water)
TRANSPORT_EXCLUDED_PRODUCTS = ["A.15.01"]

# Sentinel used in source data for "no RPC"
NULL_RPC_CODE = "0"

PACKAGING_CODE_PREFIX = "P"

# ============================================================================
# OUTPUT CONTRACT
# ============================================================================

# Column-positional consumers depend on this order. Bump the version on change.
RESULTS_FORMAT_VERSION = "1.0"

AGGREGATE_HEADERS = [
    # Totals over raw materials, processes, packaging and transport
    "Carbon footprint, total (kg CO2e)",
    "Carbon dioxide, total (kg CO2)",
    "Methane, fossil, total (kg CH4)",
    "Methane, biogenic, total (kg CH4)",
    "Nitrous oxide, total (kg N2O)",
    # Raw materials
    *ENV_IMPACT_LABELS,
    # Processes
    "Processing (kg CO2e)",
    "Processing (kg CO2)",
    "Processing (kg CH4, fossil)",
    "Processing (kg N2O)",
    # Packaging
    "Packaging (kg CO2e)",
    "Packaging (kg CO2)",
    "Packaging (kg CH4, fossil)",
    "Packaging (kg CH4, biogenic)",
    # Transport
    "Transports (kg CO2e)",
    "Transports (kg CO2)",
    "Transports (kg CH4, fossil)",
    "Transports (kg N2O)",
]

# ============================================================================
# TYPES
# ============================================================================

GapKind = Literal[
    "missing_footprint",
    "missing_origin_waste",
    "origin_footprint_fallback",
    "missing_transport_factor",
    "missing_transport_origin",
    "missing_process_factor",
    "missing_packaging_factor",
    "missing_waste_category",
]
