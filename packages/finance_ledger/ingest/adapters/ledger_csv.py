"""The ledger's own CSV format: export and (generic) import.

Header: ``id,type,amount,category,date,note``. Parsing and writing follow RFC
4180 via the stdlib :mod:`csv` module (quoted fields with embedded commas,
quotes and newlines; doubled quotes). On import the header is matched
case-insensitively in any order; ``id`` and ``note`` are optional, so
hand-made spreadsheets with just ``type,amount,category,date`` work too.

Import policies:
- ``type`` is ``expense`` only when the cell is exactly ``"expense"``; any
  other value is imported as ``income``.
- A provided ``id`` is kept unless it is already taken (by the store or by an
  earlier row of the same file); then a fresh id is generated. Re-importing
  an export is therefore additive, never overwriting.
- The whole text goes through one reader so quoted notes may span lines. A
  quote that is never closed therefore runs to the end of the file: every
  later line ends up in that row's note instead of becoming its own row.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from datetime import date

from pydantic import ValidationError

from ...errors import ImportFormatError
from ...logging_setup import get_logger
from ...models import Transaction, format_amount, new_id
from ..common import ParsedBatch, parse_leading_decimal

NAME = "ledger"

HEADER: tuple[str, ...] = ("id", "type", "amount", "category", "date", "note")
REQUIRED_COLUMNS: tuple[str, ...] = ("type", "amount", "category", "date")

_logger = get_logger("finance_ledger.ingest.ledger_csv")


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def export_csv(transactions: Iterable[Transaction]) -> str:
    """Serialize ``transactions`` (in the given order) to the ledger CSV format."""

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for t in transactions:
        writer.writerow([t.id, t.type, format_amount(t.amount), t.category, t.date, t.note])
    return buf.getvalue()


def export_filename(today: date | None = None) -> str:
    d = today or date.today()
    return f"ledger-{d:%Y%m%d}.csv"


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def _cell(row: Sequence[str], pos: int) -> str:
    if pos < 0 or pos >= len(row):
        return ""
    return row[pos].strip()


def parse(text: str, *, existing_ids: set[str]) -> ParsedBatch | None:
    """Parse ledger-format CSV text.

    This dialect is the catch-all: any header reaches it, so a header without
    the required columns raises :class:`ImportFormatError` instead of
    returning ``None``.
    """

    try:
        rows = [r for r in csv.reader(io.StringIO(text)) if any(c.strip() for c in r)]
    except csv.Error as e:
        raise ImportFormatError(f"Failed to parse CSV: {e}") from e
    if not rows:
        return None

    header = [h.strip().lower() for h in rows[0]]
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        raise ImportFormatError(
            "CSV must have columns type, amount, category, date "
            f"(or be a bank statement); missing: {', '.join(missing)}"
        )
    pos = {name: (header.index(name) if name in header else -1) for name in HEADER}

    taken = set(existing_ids)
    batch = ParsedBatch(dialect=NAME)
    for lineno, row in enumerate(rows[1:], start=2):
        raw_type = _cell(row, pos["type"])
        raw_amount = _cell(row, pos["amount"])
        category = _cell(row, pos["category"])
        iso_date = _cell(row, pos["date"])
        note = _cell(row, pos["note"])
        if not raw_type or not raw_amount or not category or not iso_date:
            batch.skipped += 1
            continue

        amount = parse_leading_decimal(raw_amount.replace(",", ".", 1))
        if amount is None or amount <= 0:
            batch.skipped += 1
            continue

        tx_id = _cell(row, pos["id"])
        if not tx_id or tx_id in taken:
            tx_id = new_id()

        try:
            tx = Transaction(
                id=tx_id,
                type="expense" if raw_type == "expense" else "income",
                amount=amount,
                category=category,
                date=iso_date,
                note=note,
            )
        except ValidationError as e:
            _logger.debug("Skipping row %d: %s", lineno, e)
            batch.skipped += 1
            continue
        taken.add(tx.id)
        batch.transactions.append(tx)

    return batch


__all__ = ["HEADER", "NAME", "export_csv", "export_filename", "parse"]
