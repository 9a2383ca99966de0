"""
Command-line entry point: build a loss development triangle from a folder of claim listings.

Run: claims-triangle data/raw --value paid --output triangle.xlsx
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pandas as pd

from core.config import TriangleConfig
from core.schema import SchemaError
from pipeline.runner import run_pipeline
from triangle.builder import export_triangle
from triangle.development import MaturityError

logger = logging.getLogger(__name__)

AGGREGATIONS = ("sum", "mean", "median", "min", "max", "count")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claims-triangle",
        description="Merge claim listing spreadsheets and pivot them into a loss development triangle.",
    )
    parser.add_argument("directory", type=Path, help="Folder holding the claim listing files")
    parser.add_argument("--value", default="paid", help="Column to aggregate into cells (default: paid)")
    parser.add_argument("--agg", default="sum", choices=AGGREGATIONS, help="Cell aggregation (default: sum)")
    parser.add_argument(
        "--months-per-period", type=int, default=12,
        help="Months per year of difference between file and accident year (default: 12)",
    )
    parser.add_argument("--sheet", default="0", help="Sheet name or index for spreadsheets (default: 0)")
    parser.add_argument("--strict", action="store_true", help="Abort on a file missing a required column")
    parser.add_argument("--incremental", action="store_true", help="Show incremental rather than cumulative cells")
    parser.add_argument("--workers", type=int, default=1, help="Parallel file reads (default: 1)")
    parser.add_argument("-o", "--output", type=Path, help="Write the triangle to .xlsx or .csv instead of printing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def format_triangle(frame: pd.DataFrame) -> str:
    """Plain-text matrix with blank cells for undeveloped ages."""
    return frame.to_string(na_rep="", float_format=lambda v: f"{v:,.2f}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    sheet = int(args.sheet) if args.sheet.isdigit() else args.sheet
    try:
        config = TriangleConfig(
            required_columns=tuple(dict.fromkeys(["file_year", "accident_year", args.value])),
            value_column=args.value,
            aggregation_function=args.agg,
            months_per_period=args.months_per_period,
            sheet_name=sheet,
            on_schema_error="raise" if args.strict else "skip",
            max_workers=args.workers,
        )
    except ValueError as e:
        logger.error("Invalid options: %s", e)
        return 2

    try:
        result = run_pipeline(args.directory, config)
    except (FileNotFoundError, SchemaError, MaturityError) as e:
        logger.error("%s", e)
        return 1

    if not result.rows_per_file:
        logger.error("No claim files could be loaded from %s", args.directory)
        return 1

    triangle = result.triangle.to_incremental() if args.incremental else result.triangle
    if args.output is not None:
        try:
            path = export_triangle(triangle, args.output)
        except ValueError as e:
            logger.error("%s", e)
            return 2
        logger.info("Wrote %s", path)
    else:
        print(format_triangle(triangle.to_frame()))

    for f in result.failures:
        print(f"skipped {Path(f.path).name}: {f.message}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
