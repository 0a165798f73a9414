import pandas as pd

from diet_footprints import constants
from diet_footprints.config import DEFAULT_CONFIG_PATH, load_parameters_config
from generate_config import build_parameter_sheet, generate_parameter_sheet


def test_packaged_parameters():
    config = load_parameters_config(DEFAULT_CONFIG_PATH)

    assert config["DEFAULT_COUNTRY_CODE"] == "SE"
    assert config["DECIMALS"] == 3
    assert config["ROW_THRESHOLD"] == 0.01
    assert config["SHARE_SUM_TOLERANCE"] == 0.001


def test_constants_come_from_parameter_sheet():
    assert constants.DEFAULT_COUNTRY_CODE == "SE"
    assert constants.ROW_THRESHOLD == 0.01
    assert isinstance(constants.DECIMALS, int)


def test_csv_parameters_are_coerced(tmp_path):
    path = tmp_path / "params.csv"
    pd.DataFrame({
        "Key": ["DEFAULT_COUNTRY_CODE", "DECIMALS", "ROW_THRESHOLD", None],
        "Value": ["FI", "2", "0.05", "ignored"],
        "Unit": ["-", "-", "fraction", "-"],
    }).to_csv(path, index=False)

    config = load_parameters_config(str(path))

    assert config == {"DEFAULT_COUNTRY_CODE": "FI", "DECIMALS": 2, "ROW_THRESHOLD": 0.05}


def test_excel_parameters(tmp_path):
    path = tmp_path / "params.xlsx"
    pd.DataFrame({"Key": ["ROW_THRESHOLD"], "Value": [0.02]}).to_excel(path, index=False)

    assert load_parameters_config(str(path)) == {"ROW_THRESHOLD": 0.02}


def test_missing_file_gives_empty_config(tmp_path):
    assert load_parameters_config(str(tmp_path / "nope.csv")) == {}


def test_sheet_without_key_value_columns(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame({"Name": ["x"], "Setting": [1]}).to_csv(path, index=False)

    assert load_parameters_config(str(path)) == {}


def test_generated_sheet_round_trips(tmp_path):
    df = build_parameter_sheet()
    assert list(df.columns) == ["Key", "Value", "Unit", "Section", "Description"]

    path = tmp_path / "engine_parameters.csv"
    generate_parameter_sheet(str(path))

    config = load_parameters_config(str(path))
    assert config["ROW_THRESHOLD"] == constants.ROW_THRESHOLD
    assert config["DEFAULT_COUNTRY_CODE"] == constants.DEFAULT_COUNTRY_CODE
