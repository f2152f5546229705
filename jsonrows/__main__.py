"""CLI entry point for extracting rows from JSON records.

Usage:
    python -m jsonrows tables/events.yaml data/events.jsonl
    python -m jsonrows tables/events.yaml data/events.jsonl --output events.parquet
    python -m jsonrows tables/events.yaml --check
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from jsonrows.lib.arrow import rows_to_pandas, write_parquet
from jsonrows.lib.config_loader import TableDefinition, load_table
from jsonrows.lib.errors import CoercionError, JsonRowsError
from jsonrows.lib.observability import setup_logging
from jsonrows.lib.reader import read_rows

logger = logging.getLogger("jsonrows")

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_COERCION_ERROR = 2


def describe_table(definition: TableDefinition) -> None:
    """Print the bound columns of a table."""
    print(f"Table: {definition.name or '(unnamed)'}")
    print(f"On coercion error: {definition.on_coercion_error.value}")
    print("Columns:")
    for column in definition.schema:
        print(f"  {column.name:<24} {column.declared_type.value:<8} {column.path.raw}")


def write_output(definition: TableDefinition, rows: List[list], output: Optional[str]) -> None:
    """Write rows to Parquet or CSV by extension, or print them."""
    if output and output.endswith(".parquet"):
        write_parquet(definition.schema, rows, output)
        return

    frame = rows_to_pandas(definition.schema, rows)
    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(output, index=False)
        logger.info("Wrote %d rows to %s", len(frame), output)
    else:
        print(frame.to_string(index=False))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Extract typed rows from newline-delimited JSON records",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Print extracted rows
    python -m jsonrows tables/events.yaml data/events.jsonl

    # Write Parquet (or CSV with a .csv extension)
    python -m jsonrows tables/events.yaml data/events.jsonl --output out/events.parquet

    # Validate the table definition only
    python -m jsonrows tables/events.yaml --check
        """,
    )
    parser.add_argument("table", help="Table definition YAML file")
    parser.add_argument("input", nargs="?", help="Input file, one JSON document per line")
    parser.add_argument("--output", "-o", help="Output file (.parquet or .csv)")
    parser.add_argument("--limit", type=int, help="Stop after this many rows")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Bind the table definition and print its columns without reading input",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print extraction counters as JSON when done",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument(
        "--json-log",
        action="store_true",
        help="Output logs in JSON format (for log aggregation systems)",
    )
    parser.add_argument("--log-file", help="Write logs to a file in addition to console")
    parser.add_argument(
        "--record-log-level",
        choices=["debug", "info", "warning", "error"],
        help="Level for per-record messages such as dropped records and nulled values",
    )

    args = parser.parse_args(argv)

    setup_logging(
        verbose=args.verbose,
        json_format=args.json_log,
        log_file=args.log_file,
        record_level=args.record_log_level,
    )

    try:
        definition = load_table(args.table)
    except JsonRowsError as e:
        logger.error("Invalid table definition: %s", e.message, extra={"error": e.to_dict()})
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.check:
        describe_table(definition)
        return EXIT_OK

    if not args.input:
        parser.error("input is required unless --check is given")
    if not Path(args.input).exists():
        print(f"\nError: input file not found: {args.input}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    extractor = definition.create_extractor()
    try:
        result = read_rows(extractor, args.input, limit=args.limit)
    except CoercionError as e:
        logger.error("Extraction stopped: %s", e.message, extra={"error": e.to_dict()})
        print(f"\nError: {e}", file=sys.stderr)
        return EXIT_COERCION_ERROR

    write_output(definition, result.rows, args.output)
    result.stats.log_summary(logger)
    if args.stats:
        print(json.dumps(result.stats.to_dict(), indent=2))

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
