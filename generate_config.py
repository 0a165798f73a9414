"""
Write the engine parameter sheet (Key/Value/Unit/Section/Description) from
the values currently loaded by diet_footprints.constants.

    python generate_config.py [output.xlsx|output.csv]

Point DIET_FOOTPRINTS_CONFIG at the written file to use an edited copy.
"""
import sys

import pandas as pd

from diet_footprints import constants

PARAMETERS = [
    ("DEFAULT_COUNTRY_CODE", "Text", "1. Global Settings",
     "Country code of the consuming country; selects electricity and domestic transport factors."),
    ("DECIMALS", "Integer", "1. Global Settings", "Number of decimal places used when formatting reports."),
    ("ROW_THRESHOLD", "Fraction", "2. Origins",
     "Origins without footprint data and with a share below this value are folded into Rest of World."),
    ("SHARE_SUM_TOLERANCE", "Fraction", "2. Origins",
     "Allowed deviation from 1 when checking that origin shares sum to one."),
]


def build_parameter_sheet() -> pd.DataFrame:
    data = []
    for key, unit, section, description in PARAMETERS:
        data.append({
            "Key": key,
            "Value": getattr(constants, key),
            "Unit": unit,
            "Section": section,
            "Description": description,
        })
    return pd.DataFrame(data, columns=["Key", "Value", "Unit", "Section", "Description"])


def generate_parameter_sheet(output_file: str = "engine_parameters.xlsx"):
    df = build_parameter_sheet()
    print(f"Generating {output_file}...")
    if output_file.lower().endswith((".xlsx", ".xls")):
        df.to_excel(output_file, index=False)
    else:
        df.to_csv(output_file, index=False)
    print("Done.")


if __name__ == "__main__":
    generate_parameter_sheet(*sys.argv[1:2])
