"""Payments engine command-line interface.

Usage:
  payments transactions.csv > accounts.csv

Reads ``type, client, tx, amount`` rows, applies them to client accounts in
order and prints ``client, available, held, total, locked`` for every client
seen. Log events go to stderr.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

import structlog

from config import Settings, get_settings, get_settings_for_environment
from parsing import open_transactions
from reporting import write_report
from repositories import get_account_repository
from services import ProcessingSummary, get_transaction_service

logger = structlog.get_logger()


def configure_logging(settings: Settings) -> None:
    """Configure structured logging on stderr, keeping stdout for the report."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    logging.getLogger().setLevel(level)

    if settings.log_format == "text":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def csv_path(value: str) -> Path:
    """argparse type for the input file: anything with a .csv extension."""
    path = Path(value)
    if path.suffix != ".csv":
        raise argparse.ArgumentTypeError(f"expected a .csv file, got {value!r}")
    return path


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="payments",
        description="Apply a CSV stream of client transactions and print the resulting account balances",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {settings.app_version}")
    parser.add_argument("file", type=csv_path, help="Transactions file (.csv)")
    parser.add_argument("--environment", choices=["development", "production", "testing"],
                        help="Load environment-specific settings")
    parser.add_argument("--log-level", dest="log_level", help="Override the configured log level")
    parser.add_argument("--log-format", dest="log_format", choices=["json", "text"],
                        help="Override the configured log format")
    parser.add_argument("--strict-amounts", action="store_true", dest="strict_amounts",
                        help="Reject amounts with more than 4 decimal places instead of rounding them")
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    settings = get_settings_for_environment(args.environment) if args.environment else get_settings()

    overrides = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    if args.strict_amounts:
        overrides["strict_amount_precision"] = True

    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


def run(path: Path, settings: Settings, out: TextIO) -> ProcessingSummary:
    """Process one transactions file and write the account report to ``out``."""
    repository = get_account_repository()
    service = get_transaction_service(repository, detailed_logging=settings.enable_detailed_logging)

    summary = service.process_transactions(open_transactions(path, settings))
    write_report(service.build_report(), out)
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = resolve_settings(args)
    configure_logging(settings)

    logger.info("Starting payments engine", file=str(args.file), version=settings.app_version)

    try:
        summary = run(args.file, settings, sys.stdout)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error("Cannot read transactions file", file=str(args.file), error=str(e))
        return 1

    logger.info(
        "Finished payments engine",
        file=str(args.file),
        applied=summary.applied,
        rejected=summary.rejected
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
