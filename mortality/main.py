"""
Mortality pipeline driver: load the NCHS leading-causes table, derive the
regional summaries, wide tables, correlation matrix and coverage ratios,
and export them as CSV files.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .config import (
    DEFAULT_ANOMALY_ENTITY,
    DEFAULT_CORRELATION_EXCLUDE,
    DEFAULT_SEP,
    DEFAULT_TOP_N,
    EXPORT_TABLES,
    MORTALITY_SOURCE,
)
from .data_manager import export_payload
from .pipeline import run_pipeline


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Derive regional summaries, wide tables, cause correlations and "
            "sub-cause coverage from the NCHS leading causes of death data."
        )
    )
    parser.add_argument(
        "--source",
        default=MORTALITY_SOURCE,
        help="Path or URL to the mortality CSV (default: data.cdc.gov export).",
    )
    parser.add_argument(
        "--sep",
        default=DEFAULT_SEP,
        help=f"Delimiter used in the source file (default: '{DEFAULT_SEP}').",
    )
    parser.add_argument(
        "--year-min",
        type=int,
        default=None,
        help="Lower bound year to keep (default: all years).",
    )
    parser.add_argument(
        "--year-max",
        type=int,
        default=None,
        help="Upper bound year to keep (default: all years).",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=DEFAULT_TOP_N,
        help=f"Number of leading causes to rank (default: {DEFAULT_TOP_N}).",
    )
    parser.add_argument(
        "--entity",
        default=DEFAULT_ANOMALY_ENTITY,
        help=f"Entity for the coverage check (default: '{DEFAULT_ANOMALY_ENTITY}').",
    )
    parser.add_argument(
        "--correlation-exclude",
        nargs="*",
        default=list(DEFAULT_CORRELATION_EXCLUDE),
        help=(
            "Identifier columns left out of the correlation matrix "
            f"(default: {' '.join(DEFAULT_CORRELATION_EXCLUDE)})."
        ),
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the CSV outputs (default: $MORTALITY_OUTPUT_DIR or ./data).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    payload = run_pipeline(
        source=args.source,
        sep=args.sep,
        year_min=args.year_min,
        year_max=args.year_max,
        n=args.top_n,
        anomaly_entity=args.entity,
        correlation_exclude=args.correlation_exclude,
    )
    written = export_payload(payload, args.output_dir)

    print("\n--- MORTALITY PIPELINE COMPLETE ---")
    print(
        f"Years: {payload['year_min']}–{payload['year_max']} | "
        f"Records: {len(payload['long'])} | Wide rows: {len(payload['wide'])}"
    )
    print("\nSaved outputs:")
    for name, path in written.items():
        print(f"  - {path.name}: {EXPORT_TABLES[name]}")
    print(f"\nLeading causes ({args.top_n}):")
    print(payload["leading_causes"])
    print(f"\nCoverage for {args.entity}:")
    print(payload["coverage"])


if __name__ == "__main__":
    main()
