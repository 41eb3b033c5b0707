"""Adapter for semicolon-delimited bank statement exports (Spanish/Catalan).

Header (column order varies; only these three columns are used):
``Concepto|Concepte ; Fecha|Data ; Importe|Import`` plus e.g. ``Saldo disponible``.

Cell conventions:
- ``Importe``: signed amount in Spanish notation, possibly with a currency
  symbol and thousands separators (``-1.234,56 €``). Negative = expense.
- ``Fecha``: ``DD/MM/YYYY``; ISO ``YYYY-MM-DD`` is accepted as well.
- ``Concepto``: free text; becomes the note and feeds category inference.

Rows with an empty, zero or unparseable amount, or an unparseable date, are
skipped and counted.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from decimal import Decimal

from dateutil import parser as date_parser
from pydantic import ValidationError

from ...categorization import infer_category
from ...errors import ImportFormatError
from ...logging_setup import get_logger
from ...models import Transaction, TransactionType, new_id
from ..common import ParsedBatch, non_blank_lines, parse_leading_decimal

NAME = "bank_statement"
DELIMITER = ";"

CONCEPT_HEADERS = ("concepto", "concepte")
DATE_HEADERS = ("fecha", "data")
AMOUNT_HEADERS = ("importe", "import")

_DMY_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_QUOTED_RE = re.compile(r'^"(.*)"$', re.DOTALL)
_NON_NUMERIC_RE = re.compile(r"[^\d,.\-]")

_logger = get_logger("finance_ledger.ingest.bank_statement")


def detect(header_line: str) -> bool:
    """Loose check on the raw header text: one token of each kind must appear."""

    h = header_line.lower()
    return (
        any(tok in h for tok in CONCEPT_HEADERS)
        and any(tok in h for tok in DATE_HEADERS)
        and any(tok in h for tok in AMOUNT_HEADERS)
    )


def _unquote(cell: str) -> str:
    return _QUOTED_RE.sub(r"\1", cell.strip())


def parse_amount(raw: str) -> tuple[TransactionType, Decimal] | None:
    """``"-1.234,56 €"`` -> ``("expense", Decimal("1234.56"))``; zero/garbage -> ``None``."""

    numeric = _NON_NUMERIC_RE.sub("", raw)
    if not numeric:
        return None
    # Periods group thousands; the (first) comma is the decimal separator.
    normalized = numeric.replace(".", "").replace(",", ".", 1)
    value = parse_leading_decimal(normalized)
    if value is None or value == 0:
        return None
    return ("expense" if value < 0 else "income"), abs(value)


def to_iso_date(raw: str) -> str | None:
    """Normalize a statement date to ``YYYY-MM-DD``; ``None`` when unparseable."""

    s = raw.strip()
    if not s:
        return None
    m = _DMY_RE.match(s)
    if m:
        day, month, year = m.groups()
        return f"{year}-{month}-{day}"
    if _ISO_RE.match(s):
        return s
    try:
        return date_parser.parse(s, dayfirst=True).date().isoformat()
    except (ValueError, OverflowError):
        return None


def _column(cells: Sequence[str], names: Sequence[str]) -> int:
    for pos, cell in enumerate(cells):
        if cell in names:
            return pos
    return -1


def parse(text: str, *, existing_ids: set[str]) -> ParsedBatch | None:
    """Parse a statement export; ``None`` when ``text`` is not this dialect.

    ``existing_ids`` is unused: every accepted row gets a fresh id.
    """

    lines = non_blank_lines(text)
    if not lines or not detect(lines[0]):
        return None

    header = [_unquote(c).lower() for c in lines[0].split(DELIMITER)]
    idx_concept = _column(header, CONCEPT_HEADERS)
    idx_date = _column(header, DATE_HEADERS)
    idx_amount = _column(header, AMOUNT_HEADERS)
    if min(idx_concept, idx_date, idx_amount) == -1:
        raise ImportFormatError(
            "Bank statement header is missing a column: expected Concepto, Fecha and Importe"
        )
    width = max(idx_concept, idx_date, idx_amount)

    batch = ParsedBatch(dialect=NAME)
    for lineno, line in enumerate(lines[1:], start=2):
        cells = line.strip().split(DELIMITER)
        if len(cells) <= width:
            batch.skipped += 1
            continue

        concept = _unquote(cells[idx_concept])
        raw_date = _unquote(cells[idx_date])
        raw_amount = _unquote(cells[idx_amount])
        if not raw_amount or not raw_date:
            batch.skipped += 1
            continue

        parsed = parse_amount(raw_amount)
        iso_date = to_iso_date(raw_date)
        if parsed is None or iso_date is None:
            _logger.debug("Skipping line %d: amount=%r date=%r", lineno, raw_amount, raw_date)
            batch.skipped += 1
            continue
        tx_type, amount = parsed

        try:
            tx = Transaction(
                id=new_id(),
                type=tx_type,
                amount=amount,
                category=infer_category(concept, amount, tx_type),
                date=iso_date,
                note=concept,
            )
        except ValidationError as e:
            _logger.debug("Skipping line %d: %s", lineno, e)
            batch.skipped += 1
            continue
        batch.transactions.append(tx)

    return batch


__all__ = ["NAME", "detect", "parse", "parse_amount", "to_iso_date"]
