import numpy as np
import pandas as pd
import pytest

from conftest import make_tables
from diet_footprints.constants import AGGREGATE_HEADERS
from diet_footprints.reporting import (
    DIET_RESULTS_HEADER, compute_diet_footprints, diet_breakdown, format_report_dataframe,
    labeled_impacts
)


def test_labeled_impacts_row(engine):
    names = make_tables()["names"]
    impacts = engine.compute_impacts([("A.19.01.002", 100.0)])

    row = labeled_impacts("A.19.01.002", 100.0, impacts, names)

    assert row["Name"] == "Pizza"
    assert row["L1 Category"] == "Composite dishes"
    assert row["L2 Category"] == "Pizza and similar"
    assert row["Processes"].split("$") == ["F28.OVEN", "F28.BAKE", "F28.A07KD"]
    assert row["Packaging"] == "P3"
    assert row["RPCs with missing data"] == ""
    np.testing.assert_allclose([row[h] for h in AGGREGATE_HEADERS], engine.aggregate(impacts))


def test_labeled_impacts_marks_missing_data(engine):
    impacts = engine.compute_impacts([("A.19.01.002", 100.0), ("A.05.01.001", 1.0)])

    row = labeled_impacts("DIET", 101.0, impacts)

    assert all(row[h] == "NA" for h in AGGREGATE_HEADERS)
    assert row["RPCs with missing data"] == "A.05.01.001"
    assert row["Name"] == "NAME NOT FOUND"
    assert row["L1 Category"] == "NOT FOUND (DIET)"


def test_diet_footprints_rows(engine):
    names = make_tables()["names"]

    df = compute_diet_footprints([("A.19.01.002", 100.0)], engine, names)

    assert list(df.columns) == DIET_RESULTS_HEADER
    assert list(df["Food-product or ingredient"]) == ["Food-product", "Ingredient", "Ingredient"]
    assert list(df["Code"]) == ["A.19.01.002", "A.01.02.001", "A.02.01.001"]
    assert (df["Food-product Code"] == "A.19.01.002").all()

    # Ingredient rows carry raw materials and transport but no processing or packaging
    food_row, flour_row, tomato_row = df.to_dict("records")
    assert flour_row["Processing (kg CO2e)"] == 0
    assert food_row["Processing (kg CO2e)"] > 0
    assert food_row["Carbon footprint, primary production (kg CO2e)"] == pytest.approx(
        flour_row["Carbon footprint, primary production (kg CO2e)"]
        + tomato_row["Carbon footprint, primary production (kg CO2e)"]
    )


def test_diet_breakdown(engine):
    df = diet_breakdown([("A.19.01.002", 100.0)], engine, make_tables()["names"])

    assert list(df["RPC Code"]) == ["A.01.02.001", "A.02.01.001"]
    assert list(df["RPC Name"]) == ["Wheat flour", "Tomatoes"]
    assert df["RPC Amount (g)"].tolist() == pytest.approx([100 / 0.9 * 0.6, 100 / 0.9 * 0.8])


def test_dataframe_formatting():
    df = pd.DataFrame({
        "ExtraColumn": ["KeepMe", "KeepMe"],
        "Code": ["A.01", "A.02"],
        "Amount (g)": [10.123456, 5.0],
        "Carbon footprint, total (kg CO2e)": [1.23456789, "NA"],
    })

    formatted = format_report_dataframe(df)
    cols = list(formatted.columns)

    # Known columns in contract order, extras at the end
    assert cols.index("Code") < cols.index("Amount (g)") < cols.index("Carbon footprint, total (kg CO2e)")
    assert cols[-1] == "ExtraColumn"

    # Missing aggregate columns are added
    assert all(h in cols for h in AGGREGATE_HEADERS)
    assert (formatted["Transports (kg CO2e)"] == "NA").all()

    # Rounding
    assert formatted.loc[0, "Carbon footprint, total (kg CO2e)"] == 1.235
    assert formatted.loc[1, "Carbon footprint, total (kg CO2e)"] == "NA"
    assert formatted.loc[0, "Amount (g)"] == 10.123
