import os
import pandas as pd
import logging
from typing import Dict, Any

logger = logging.getLogger(__name__)

# The default parameter sheet ships inside the package so an installed copy
# finds it without a project checkout.
PACKAGE_ROOT = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG_PATH = os.path.join(PACKAGE_ROOT, "data", "engine_parameters.csv")

# Optional override for the parameter sheet
CONFIG_ENV_VAR = "DIET_FOOTPRINTS_CONFIG"


def _coerce_value(val: Any) -> Any:
    """
    Convert numeric-looking strings to int/float; leave anything else untouched.
    """
    if not isinstance(val, str):
        if pd.isna(val):
            return None
        return val

    text = val.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def load_parameters_config(path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load engine parameters from a Key/Value sheet.
    Excel workbooks (.xlsx/.xls) are read with read_excel, anything else as CSV.
    Expected columns: Key, Value (Unit, Section, Description are informative only)
    Returns a dictionary of Key -> Value
    """
    config: Dict[str, Any] = {}
    if not os.path.exists(path):
        logger.warning(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        if path.lower().endswith((".xlsx", ".xls")):
            df = pd.read_excel(path, dtype=str)
        else:
            df = pd.read_csv(path, dtype=str)

        if "Key" in df.columns and "Value" in df.columns:
            for _, row in df.iterrows():
                if pd.isna(row["Key"]):
                    continue
                key = str(row["Key"]).strip()
                config[key] = _coerce_value(row["Value"])
            logger.debug(f"Loaded {len(config)} parameters from {path}")
        else:
            logger.warning(f"Parameter sheet {path} missing 'Key' or 'Value' columns.")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {path}: {e}")

    return config


def resolve_config_path() -> str:
    """Parameter sheet to use: the env override when set, else the packaged default."""
    return os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
