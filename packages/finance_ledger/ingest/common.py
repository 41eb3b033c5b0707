"""Shared pieces of the CSV dialect adapters."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from ..models import Transaction

# Leading number, read the way a lenient float parser does: trailing junk is
# ignored ("12.5abc" -> 12.5) but a missing number is an error.
_LEADING_NUMBER_RE = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(slots=True)
class ParsedBatch:
    """Rows accepted by one dialect, not yet committed to the store."""

    dialect: str
    transactions: list[Transaction] = field(default_factory=list)
    skipped: int = 0


def parse_leading_decimal(text: str) -> Decimal | None:
    m = _LEADING_NUMBER_RE.match(text)
    if not m:
        return None
    try:
        return Decimal(m.group(1))
    except InvalidOperation:
        return None


def non_blank_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.strip()]


__all__ = ["ParsedBatch", "non_blank_lines", "parse_leading_decimal"]
