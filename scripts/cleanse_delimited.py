#!/usr/bin/env python3
"""Clean up delimited data so line-oriented tools can consume it.

For each field in each record:

  1. Replace the delimiter inside quoted fields with a space
  2. Replace newlines inside quoted fields with a space
  3. Replace invalid UTF-8 byte sequences with U+FFFD

Every repaired field is logged to stderr as
"Record number N, field number M: [Kind, ...]".

Usage:
    python scripts/cleanse_delimited.py [-d DELIM] -o OUTPUT FILE

Use "-" for FILE to read stdin and "-" for OUTPUT to write stdout.

Environment variables:
    CLEANSE_LOG_LEVEL  Default log level when --log-level is not specified.
"""

from __future__ import annotations

import argparse
import contextlib
import csv
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
from cleanse.audit import AuditReporter
from cleanse.dialect import Dialect
from cleanse.errors import CleanseError, DialectError
from cleanse.pipeline import cleanse

logger = logging.getLogger("cleanse")

# Large enough for any single field; the csv module's default is 128 KiB.
DEFAULT_FIELD_SIZE_LIMIT = 2**31 - 1

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "file",
        metavar="FILE",
        help='Input file to read from, "-" to read from stdin.',
    )
    parser.add_argument(
        "-o",
        "--output",
        required=True,
        metavar="PATH",
        help='Output path to write to, "-" to write to stdout.',
    )
    parser.add_argument(
        "-d",
        "--delimiter",
        default="\t",
        help="Delimiter to use for parsing the file, must be a single byte "
        '(default: tab; "\\t" and "tab" are accepted).',
    )
    parser.add_argument(
        "--quotechar",
        default='"',
        help='Quote character of the input dialect (default: ").',
    )
    parser.add_argument(
        "--escapechar",
        default=None,
        help="Escape character of the input dialect (default: none).",
    )
    parser.add_argument(
        "--no-doublequote",
        dest="doublequote",
        action="store_false",
        default=True,
        help="Quotes inside quoted fields are escaped with --escapechar "
        "instead of being doubled.",
    )
    parser.add_argument(
        "--quote-all",
        action="store_true",
        default=False,
        help="Quote every output field instead of only those that need it.",
    )
    parser.add_argument(
        "--start-index",
        type=int,
        default=1,
        metavar="N",
        help="Number of the first record and first field in audit lines (default: 1).",
    )
    parser.add_argument(
        "--field-size-limit",
        type=int,
        default=DEFAULT_FIELD_SIZE_LIMIT,
        metavar="BYTES",
        help="Largest field the parser accepts before failing.",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("CLEANSE_LOG_LEVEL", "INFO"),
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level; WARNING silences audit lines "
        "(default: CLEANSE_LOG_LEVEL env var or INFO).",
    )

    args = parser.parse_args(argv)

    try:
        args.dialect = Dialect.from_options(
            delimiter=args.delimiter,
            quotechar=args.quotechar,
            escapechar=args.escapechar,
            doublequote=args.doublequote,
            quote_all=args.quote_all,
        )
    except DialectError as e:
        parser.error(str(e))

    if args.field_size_limit <= 0:
        parser.error("--field-size-limit must be positive")

    # argparse does not check choices against a default taken from the environment.
    if args.log_level not in LOG_LEVELS:
        parser.error(
            f"invalid log level {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})"
        )

    return args


def open_input(path: str):
    """Return a binary input stream; stdin is not closed by the caller's context."""
    if path == "-":
        return contextlib.nullcontext(sys.stdin.buffer)
    return open(path, "rb")


def open_output(path: str):
    """Return a binary output stream; stdout is not closed by the caller's context."""
    if path == "-":
        return contextlib.nullcontext(sys.stdout.buffer)
    return open(path, "wb")


def run(args: argparse.Namespace) -> int:
    """Run the cleanse and return the process exit status."""
    csv.field_size_limit(args.field_size_limit)
    reporter = AuditReporter()

    try:
        with open_input(args.file) as source, open_output(args.output) as sink:
            stats = cleanse(source, sink, args.dialect, reporter=reporter, start=args.start_index)
    except BrokenPipeError:
        # Downstream stopped reading (e.g. `| head`); that is not a failure.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return 0
    except (CleanseError, OSError) as e:
        logger.error(f"Cleanse failed: {e}")
        return 1

    logger.info(
        f"Done: {stats.records:,} records, {stats.fields:,} fields, "
        f"{stats.repaired_fields:,} repaired"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
