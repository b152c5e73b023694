"""
CLI entry point for the Vancouver crime report.
Pipeline: CSV -> CrimeTable -> checks -> recode type/month -> tallies -> charts.

Usage:
    crime-report --year 2013
    crime-report --file data/raw/crime_2013.csv --fig-dir figs
    crime-report --year 2013 --no-charts --split 3
"""
from __future__ import annotations
import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from .crime_table import CrimeTable, CrimeTableError
from .data_quality import audit_table, format_quality_report
from .validation import check_table

logger = logging.getLogger(__name__)

DEFAULT_YEAR = 2013


def run_report(
    source: Any,
    fig_dir: Path | str | None = None,
    split: Optional[int] = None,
) -> dict:
    """
    Run the full report over one source and return a structured response.
    source may be a CSV path/buffer or an already loaded CrimeTable.
    Checks run before recoding, so an out-of-range month is logged as a
    validation error before recode_month raises RecodeError.
    Core errors (LoadError, RecodeError, RangeError) propagate to the caller.
    """
    t0 = time.perf_counter()
    table = source if isinstance(source, CrimeTable) else CrimeTable.load(source)
    validation = check_table(table)
    table = table.recode_type().recode_month()
    low, high = table.split_by_type_rank(split)

    charts = []
    if fig_dir is not None:
        from .charts import save_report_charts
        charts = save_report_charts(table, fig_dir, split=split)

    response = {
        "table": table,
        "type_levels": table.type_levels,
        "complete_cases": table.complete_cases(),
        "tally_by_type": table.tally_by_type(),
        "tally_by_month": table.tally_by_month(),
        "low_frequency": low,
        "high_frequency": high,
        "validation": validation.to_dict(),
        "quality": audit_table(table),
        "charts": charts,
    }
    logger.info(
        "Report complete: rows=%d types=%d charts=%d time=%.2fs",
        len(table), len(response["type_levels"]), len(charts), time.perf_counter() - t0,
    )
    return response


def _print_section(title: str) -> None:
    print(f"\n--- {title} ---")


def print_report(response: dict) -> None:
    """Console exploration output: structure, sample rows, checks, tallies."""
    table = response["table"]
    rows, cols = table.shape

    _print_section("Columns")
    print(", ".join(table.columns))
    print(f"{rows:,} rows x {cols} columns")

    _print_section("First 10 rows")
    print(table.head(10).to_string(index=False))

    _print_section("Random sample")
    print(table.sample(10, random_state=0).to_string(index=False))

    _print_section("Checks")
    low, high = table.month_range()
    print(f"month range: {low}..{high}")
    print(f"years: {table.years()}")
    print(f"types: {table.type_values()}")
    print(f"complete cases: {response['complete_cases']:,}")
    for msg in response["validation"]["warnings"]:
        print(f"warning: {msg}")
    for msg in response["validation"]["errors"]:
        print(f"error: {msg}")

    _print_section("Tally by type")
    print(response["tally_by_type"].to_string(index=False))

    _print_section("Tally by month")
    print(response["tally_by_month"].to_string(index=False))

    _print_section("Type subsets")
    print("less frequent:", response["low_frequency"].type_values())
    print("more frequent:", response["high_frequency"].type_values())

    print()
    print(format_quality_report(response["quality"]))

    if response["charts"]:
        _print_section("Charts")
        for path in response["charts"]:
            print(path)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Vancouver crime incidents: one-year exploratory report")
    parser.add_argument("--year", type=int, default=DEFAULT_YEAR, help="Year of crime_<year>.csv to load")
    parser.add_argument("--file", type=Path, default=None, help="Explicit CSV path (overrides --year)")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory holding crime_<year>.csv")
    parser.add_argument("--fig-dir", type=Path, default=Path("figs"), help="Where to write chart PNGs")
    parser.add_argument("--split", type=int, default=None, help="Number of least frequent types in the low subset")
    parser.add_argument("--no-charts", action="store_true", help="Skip chart rendering")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    pd.set_option("display.width", 120)

    try:
        if args.file is not None:
            table = CrimeTable.load(args.file)
        else:
            table = CrimeTable.load_year(args.year, args.data_dir)
        response = run_report(
            table,
            fig_dir=None if args.no_charts else args.fig_dir,
            split=args.split,
        )
    except CrimeTableError as exc:
        logger.error("Report failed: %s", exc)
        return 1

    print_report(response)
    return 0


if __name__ == "__main__":
    sys.exit(main())
