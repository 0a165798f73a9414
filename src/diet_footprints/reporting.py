"""
Report tables built from engine results, as pandas DataFrames.

Numeric aggregate columns hold floats, or "NA" for a row whose RPCs could not
all be costed; the RPCs responsible are listed in "RPCs with missing data".
"""
import logging
from typing import Dict, List, Mapping, Optional

import pandas as pd

from .constants import AGGREGATE_HEADERS, DECIMALS
from .engine import ResultsEngine
from .impacts import aggregate_impacts
from .models import Diet, ImpactsTuple, NestedVectors
from .utils.calculations import f3
from .utils.codes import get_code_subset

logger = logging.getLogger(__name__)

MISSING_VALUE = "NA"
LIST_SEPARATOR = "$"

DETAILED_RESULTS_HEADER = [
    "Code",
    "Name",
    "L1 Category",
    "L2 Category",
    "Amount (g)",
    *AGGREGATE_HEADERS,
    "Processes",
    "Packaging",
    "RPCs with missing data",
]

DIET_RESULTS_HEADER = [
    "Food-product Code",
    "Food-product Name",
    "Food-product or ingredient",
    *DETAILED_RESULTS_HEADER,
]

BREAKDOWN_RESULTS_HEADER = [
    "Food Code",
    "Food Name",
    "L1 Category",
    "L2 Category",
    "Food Amount (g)",
    "RPC Code",
    "RPC Name",
    "RPC Amount (g)",
]


def category_name(code: str, level: int, names: Mapping[str, str]) -> str:
    level_code = get_code_subset(code, level, normalize=True)
    return names.get(level_code) or f"NOT FOUND ({level_code})"


def list_all_processes(emissions: NestedVectors) -> List[str]:
    """Distinct process or packaging codes, in order of appearance."""
    codes: Dict[str, None] = {}
    for per_code in emissions.values():
        for code in per_code:
            codes[code] = None
    return list(codes)


def labeled_impacts(
    code: str,
    amount: float,
    impacts: ImpactsTuple,
    names: Optional[Mapping[str, str]] = None
) -> Dict[str, object]:
    """
    One report row (keys as DETAILED_RESULTS_HEADER) for a code and its impacts.
    """
    names = names or {}
    rpc_footprints, process_emissions, packaging_emissions, transport_emissions = impacts

    failing_rpcs = impacts.missing_rpcs
    if failing_rpcs:
        aggregated = [MISSING_VALUE] * len(AGGREGATE_HEADERS)
    else:
        aggregated = aggregate_impacts(
            rpc_footprints, process_emissions, packaging_emissions, transport_emissions
        ).tolist()

    row: Dict[str, object] = {
        "Code": code,
        "Name": names.get(code, "NAME NOT FOUND"),
        "L1 Category": category_name(code, 1, names),
        "L2 Category": category_name(code, 2, names),
        "Amount (g)": round(amount, 2),
    }
    row.update(zip(AGGREGATE_HEADERS, aggregated))
    row["Processes"] = LIST_SEPARATOR.join(list_all_processes(process_emissions))
    row["Packaging"] = LIST_SEPARATOR.join(list_all_processes(packaging_emissions))
    row["RPCs with missing data"] = LIST_SEPARATOR.join(failing_rpcs)
    return row


def compute_diet_footprints(
    diet: Diet,
    engine: ResultsEngine,
    names: Optional[Mapping[str, str]] = None,
    with_waste: bool = True
) -> pd.DataFrame:
    """
    Per diet item: a "Food-product" row with its total impacts (including
    processes and packaging), followed by one "Ingredient" row per RPC.

    Ingredient amounts are already gross, so their rows are computed without
    a second waste adjustment.
    """
    names = names or {}
    rows = []

    for code, amount in diet:
        rpc_amounts = engine.reduce_diet([(code, amount)], with_waste).rpc_amounts
        name = names.get(code, "NAME NOT FOUND")

        total = engine.compute_impacts([(code, amount)], with_waste)
        if total.is_complete:
            logger.debug(f"{code}: {f3(engine.aggregate(total)[0])} kg CO2e")
        else:
            logger.warning(f"{code}: missing data for {', '.join(total.missing_rpcs)}")
        rows.append({
            "Food-product Code": code,
            "Food-product Name": name,
            "Food-product or ingredient": "Food-product",
            **labeled_impacts(code, amount, total, names),
        })

        for rpc_code, rpc_amount in rpc_amounts:
            impacts = engine.compute_impacts([(rpc_code, rpc_amount)], with_waste=False)
            rows.append({
                "Food-product Code": code,
                "Food-product Name": name,
                "Food-product or ingredient": "Ingredient",
                **labeled_impacts(rpc_code, rpc_amount, impacts, names),
            })

    logger.info(f"Computed footprints for {len(diet)} diet items ({len(rows)} rows).")
    return pd.DataFrame(rows, columns=DIET_RESULTS_HEADER)


def diet_breakdown(
    diet: Diet,
    engine: ResultsEngine,
    names: Optional[Mapping[str, str]] = None,
    with_waste: bool = True
) -> pd.DataFrame:
    """One row per (diet item, RPC) with the RPC's gross amount."""
    names = names or {}
    rows = []
    for code, amount in diet:
        for rpc_code, rpc_amount in engine.reduce_diet([(code, amount)], with_waste).rpc_amounts:
            rows.append([
                code,
                names.get(code, "NAME NOT FOUND"),
                category_name(code, 1, names),
                category_name(code, 2, names),
                amount,
                rpc_code,
                names.get(rpc_code, "NAME NOT FOUND"),
                rpc_amount,
            ])
    return pd.DataFrame(rows, columns=BREAKDOWN_RESULTS_HEADER)


def format_report_dataframe(df: pd.DataFrame, decimals: int = DECIMALS) -> pd.DataFrame:
    """
    Tidy a report for export:
    - known columns first, in contract order; unknown columns kept at the end
    - aggregate columns missing from the input are added as "NA"
    - numeric values rounded to `decimals`
    """
    df = df.copy()

    known = [c for c in DIET_RESULTS_HEADER if c in df.columns or c in AGGREGATE_HEADERS]
    for col in known:
        if col not in df.columns:
            df[col] = MISSING_VALUE
    extra = [c for c in df.columns if c not in known]
    df = df[known + extra]

    def _round(value):
        if isinstance(value, float):
            return round(value, decimals)
        return value

    for col in AGGREGATE_HEADERS + ["Amount (g)"]:
        if col in df.columns:
            df[col] = df[col].map(_round)

    return df
