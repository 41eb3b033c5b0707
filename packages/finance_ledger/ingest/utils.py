"""CSV import dispatch shared by the controller and the CLI.

Dialects are tried in a fixed priority order. Each adapter's ``parse``
returns a :class:`ParsedBatch` when the text is its dialect and ``None``
otherwise; the first batch wins and dialects are never combined. The ledger
format comes last because it accepts any header.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..errors import ImportFormatError, NothingImportedError
from ..logging_setup import get_logger
from .adapters import bank_statement_csv, ledger_csv
from .common import ParsedBatch, non_blank_lines

_logger = get_logger("finance_ledger.ingest")


@dataclass(frozen=True, slots=True)
class Dialect:
    name: str
    parse: Callable[..., ParsedBatch | None]


DIALECTS: tuple[Dialect, ...] = (
    Dialect(bank_statement_csv.NAME, bank_statement_csv.parse),
    Dialect(ledger_csv.NAME, ledger_csv.parse),
)


def parse_csv(text: str, *, existing_ids: set[str] | frozenset[str] = frozenset()) -> ParsedBatch:
    """Parse ``text`` with the first matching dialect.

    Raises
    ------
    ImportFormatError
        Fewer than two non-blank lines, or a header no dialect accepts.
    NothingImportedError
        The dialect was recognized but every data row was skipped.
    """

    if len(non_blank_lines(text)) < 2:
        raise ImportFormatError("The CSV contains no data")

    ids = set(existing_ids)
    for dialect in DIALECTS:
        batch = dialect.parse(text, existing_ids=ids)
        if batch is None:
            continue
        _logger.info(
            "Parsed %d row(s) as %s (%d skipped)",
            len(batch.transactions),
            dialect.name,
            batch.skipped,
        )
        if not batch.transactions:
            raise NothingImportedError(f"No transactions could be imported ({dialect.name} format)")
        return batch

    raise ImportFormatError("Unrecognized CSV format")


__all__ = ["DIALECTS", "Dialect", "parse_csv"]
