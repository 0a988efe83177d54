"""Reading ``type, client, tx, amount`` CSV rows into transactions.

Malformed rows are logged and dropped here, so the ledger only ever sees
well-formed transactions.
"""

import csv
from pathlib import Path
from typing import Iterator, List, Optional, TextIO, Union

from pydantic import ValidationError
import structlog

from config import Settings, get_settings
from models import Transaction, TransactionRow

logger = structlog.get_logger()

FIELDS = ("type", "client", "tx", "amount")


def parse_row(fields: List[str], strict_amounts: bool = False) -> Transaction:
    """Validate one split CSV row. Raises ValidationError or ValueError."""
    if not 3 <= len(fields) <= 4:
        raise ValueError(f"expected 3 or 4 columns, got {len(fields)}")

    data = dict(zip(FIELDS, fields))
    row = TransactionRow.model_validate(data, context={"strict_amounts": strict_amounts})
    return row.to_transaction()


def _describe(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'row'}: {err['msg']}"
            for err in error.errors()
        )
    return str(error)


def _rows(reader) -> Iterator[List[str]]:
    """Iterate reader rows, logging and skipping lines the csv module cannot split."""
    while True:
        try:
            fields = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            logger.warning(
                "Skipping malformed row",
                line=reader.line_num,
                row=None,
                error=str(e)
            )
            continue
        yield fields


def read_transactions(stream: TextIO, settings: Optional[Settings] = None) -> Iterator[Transaction]:
    """Yield transactions from a CSV stream, skipping rows that fail to parse."""
    settings = settings or get_settings()
    reader = csv.reader(stream, delimiter=settings.csv_delimiter, skipinitialspace=True)
    rows = _rows(reader)

    if settings.csv_has_headers:
        header = next(rows, None)
        logger.debug("CSV header read", header=header)

    for fields in rows:
        if not any(field.strip() for field in fields):
            continue

        try:
            transaction = parse_row(fields, strict_amounts=settings.strict_amount_precision)
        except (ValidationError, ValueError) as e:
            logger.warning(
                "Skipping malformed row",
                line=reader.line_num,
                row=fields,
                error=_describe(e)
            )
            continue

        yield transaction


def open_transactions(path: Union[str, Path], settings: Optional[Settings] = None) -> Iterator[Transaction]:
    """Stream transactions from a CSV file on disk."""
    with open(path, newline="", encoding="utf-8") as stream:
        yield from read_transactions(stream, settings)
