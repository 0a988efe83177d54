from typing import Iterable, Iterator, TextIO

from models import AccountReport

REPORT_HEADER = "client, available, held, total, locked"


def format_report_row(row: AccountReport) -> str:
    return f"{row.client}, {row.available}, {row.held}, {row.total}, {str(row.locked).lower()}"


def render_report(rows: Iterable[AccountReport]) -> Iterator[str]:
    yield REPORT_HEADER
    for row in rows:
        yield format_report_row(row)


def write_report(rows: Iterable[AccountReport], stream: TextIO) -> None:
    for line in render_report(rows):
        stream.write(line + "\n")
