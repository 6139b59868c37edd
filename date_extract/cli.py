"""
Date Extract CLI

Pull dates out of free text from the command line.

Usage:
    python -m date_extract.cli "Let's meet next Friday"          # First date found
    python -m date_extract.cli --returns all "..."               # Every date, in text order
    echo "..." | python -m date_extract.cli --output iso          # Read text from stdin
    python -m date_extract.cli --csv notes.csv --column body      # Batch over a CSV column

Exit status: 0 when a date was found, 1 when none, 2 on invalid options.
"""

import logging
import sys
from argparse import ArgumentParser
from pathlib import Path
from typing import List, Optional

from date_extract.config import Config
from date_extract.errors import InvalidConfiguration
from date_extract.extractor import DateExtractor
from date_extract.pipeline.batch_pipeline import BatchExtractionPipeline
from date_extract.validation.options_validator import OutputFormat, PrefersMode, ReturnsMode

# Configure logging for CLI
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format=Config.LOG_FORMAT,
    datefmt=Config.LOG_DATE_FORMAT
)
logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    """Build the argument parser"""
    parser = ArgumentParser(description="Extract dates from arbitrary text")
    parser.add_argument(
        "text",
        nargs="*",
        help="Text to scan (read from stdin when omitted)"
    )
    parser.add_argument(
        "--returns",
        choices=[mode.value for mode in ReturnsMode],
        default=None,
        help=f"Which dates to return (default: {Config.DEFAULT_RETURNS})"
    )
    parser.add_argument(
        "--prefers",
        choices=[mode.value for mode in PrefersMode],
        default=None,
        help=f"How to pin ambiguous dates (default: {Config.DEFAULT_PREFERS})"
    )
    parser.add_argument(
        "--time-zone",
        default=None,
        help=f"IANA time zone or 'floating' (default: {Config.DEFAULT_TIME_ZONE})"
    )
    parser.add_argument(
        "--output",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.ISO.value,
        help="Output presentation (default: iso)"
    )
    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="CSV file to process in batch mode"
    )
    parser.add_argument(
        "--column",
        default="text",
        help="Text column for --csv (default: text)"
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Print the configuration summary and exit"
    )
    return parser


def run_batch(extractor: DateExtractor, csv_path: Path, column: str) -> int:
    """Process a CSV file and print the result table"""
    pipeline = BatchExtractionPipeline(extractor=extractor)
    try:
        df, metadata = pipeline.process_csv(csv_path, column)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(df.to_csv(index=False), end="")
    logger.info(f"Batch complete: {metadata['total_dates']} dates in {metadata['total_rows']} rows")
    return 0 if metadata['total_dates'] else 1


def run_text(extractor: DateExtractor, text: str) -> int:
    """Extract from one block of text and print one result per line"""
    results = extractor.extract_all(text)
    for value in results:
        print(value)
    return 0 if results else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI"""
    args = build_parser().parse_args(argv)

    if args.show_config:
        Config.print_config_summary()
        return 0

    try:
        extractor = DateExtractor(
            returns=args.returns,
            prefers=args.prefers,
            time_zone=args.time_zone,
            output=args.output,
        )
    except InvalidConfiguration as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.csv is not None:
        return run_batch(extractor, args.csv, args.column)

    text = " ".join(args.text) if args.text else sys.stdin.read()
    return run_text(extractor, text)


if __name__ == '__main__':
    sys.exit(main())
