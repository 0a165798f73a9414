import argparse
import json
import logging
import sys
from typing import List, Optional

from .constants import DEFAULT_COUNTRY_CODE
from .engine import ResultsEngine, ResultsEngineBuilder
from .exceptions import FootprintEngineError
from .logging_conf import setup_logging
from .models import Diet
from .reporting import compute_diet_footprints, format_report_dataframe

logger = logging.getLogger(__name__)


def setup_argparse() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diet-footprints",
        description="Compute the environmental footprint of a diet, per food item.",
    )
    parser.add_argument("--tables", required=True, help="JSON file with the preprocessed reference tables")
    parser.add_argument("--diet", required=True, help="JSON file with the diet as [[code, grams], ...]")
    parser.add_argument("--out", required=True, help="Output CSV report")
    parser.add_argument("--country", default=DEFAULT_COUNTRY_CODE, help="Computing (consuming) country code")
    parser.add_argument("--no-waste", action="store_true", help="Skip retail and consumer waste adjustment")
    parser.add_argument("--log-file", default=None, help="Also write a detailed log to this file")
    parser.add_argument("--verbose", action="store_true", help="Show calculation steps (DEBUG)")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured console output")
    return parser


def load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_engine(tables: dict, country_code: str) -> ResultsEngine:
    """
    Build an engine from a JSON document holding one key per reference table
    (recipes, waste, rpc_origin_waste, footprints_by_origin, ...).
    """
    builder = ResultsEngineBuilder().set_settings(country_code=country_code)
    for name in [
        "recipes",
        "waste",
        "rpc_origin_waste",
        "footprints_by_origin",
        "process_energy_demands",
        "carrier_ghg_factors",
        "packaging_emission_factors",
        "transport_emission_factors",
        "preparation_processes",
        "packaging_codes",
    ]:
        if name in tables:
            getattr(builder, f"set_{name}")(tables[name])
    return builder.build()


def load_diet(raw) -> Diet:
    return [(str(code), float(amount)) for code, amount in raw]


def main(argv: Optional[List[str]] = None) -> int:
    args = setup_argparse().parse_args(argv)

    setup_logging(
        console_level=logging.DEBUG if args.verbose else logging.INFO,
        file_path=args.log_file,
        no_color=args.no_color,
    )

    try:
        tables = load_json(args.tables)
        diet = load_diet(load_json(args.diet))
    except (OSError, ValueError) as e:
        logger.error(f"Could not read input: {e}")
        return 1

    try:
        engine = build_engine(tables, args.country)
        report_df = compute_diet_footprints(diet, engine, tables.get("names", {}), with_waste=not args.no_waste)
    except FootprintEngineError as e:
        logger.error(f"Computation aborted: {e}")
        return 2

    report_df = format_report_dataframe(report_df)
    report_df.to_csv(args.out, index=False)
    logger.info(f"Report saved to: {args.out}")

    missing = report_df.loc[report_df["RPCs with missing data"] != "", "Code"].tolist()
    if missing:
        logger.warning(f"{len(missing)} rows have RPCs with missing data.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
