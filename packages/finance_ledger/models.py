"""Data models and value objects for ``finance_ledger``.

``Transaction`` is a frozen pydantic model: every instance that exists has
passed validation, so the store never holds a non-positive amount, a
malformed date or an empty category. Filter and aggregation inputs/outputs
are plain frozen dataclasses.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import date as _date
from decimal import Decimal
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

TransactionType = Literal["income", "expense"]

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Bounds on amounts so their plain-text rendering stays short.
MAX_INTEGER_DIGITS = 15
MAX_DECIMAL_PLACES = 20


def new_id() -> str:
    """Return a fresh opaque transaction id."""

    return str(uuid.uuid4())


def is_iso_date(value: str) -> bool:
    """True when ``value`` is a real calendar date written as ``YYYY-MM-DD``."""

    if not _ISO_DATE_RE.fullmatch(value):
        return False
    try:
        _date.fromisoformat(value)
    except ValueError:
        return False
    return True


def amount_within_bounds(amount: Decimal) -> bool:
    """At most ``MAX_INTEGER_DIGITS`` integer digits and ``MAX_DECIMAL_PLACES`` decimals."""

    exponent = amount.as_tuple().exponent
    if not isinstance(exponent, int):
        return False
    return amount.adjusted() < MAX_INTEGER_DIGITS and exponent >= -MAX_DECIMAL_PLACES


def format_amount(amount: Decimal) -> str:
    """Plain, locale-independent decimal text (period separator, no exponent)."""

    return format(amount, "f")


class Transaction(BaseModel):
    """One recorded income or expense event.

    The sign lives in ``type``; ``amount`` is always strictly positive. An
    empty ``id`` means "not yet assigned" and is filled in by the store.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    id: str = ""
    type: TransactionType
    amount: Decimal
    category: str
    date: str
    note: str = ""

    @field_validator("amount")
    @classmethod
    def _amount_positive(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v <= 0:
            raise ValueError("amount must be greater than 0")
        if not amount_within_bounds(v):
            raise ValueError("amount is out of range")
        return v

    @field_validator("category")
    @classmethod
    def _category_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("category must be non-empty")
        return v

    @field_validator("date")
    @classmethod
    def _date_iso(cls, v: str) -> str:
        if not is_iso_date(v):
            raise ValueError(f"date must be YYYY-MM-DD, got {v!r}")
        return v

    @field_validator("note", mode="before")
    @classmethod
    def _note_default(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def month(self) -> str:
        """``YYYY-MM`` bucket of the transaction date."""

        return self.date[:7]

    def to_record(self) -> dict[str, Any]:
        """JSON-ready mapping used by persistence (amount as plain decimal text)."""

        return {
            "id": self.id,
            "type": self.type,
            "amount": format_amount(self.amount),
            "category": self.category,
            "date": self.date,
            "note": self.note,
        }


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class DateRangePreset(StrEnum):
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    YEAR_TO_DATE = "ytd"
    ALL = "all"


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """What the presentation layer wants to see.

    ``FilterSpec()`` lets everything through. ``type`` and ``category`` use the
    literal ``"all"`` for pass-through; ``from_date``/``to_date`` are inclusive
    ISO bounds and may be omitted independently.
    """

    date_range: DateRangePreset = DateRangePreset.ALL
    type: Literal["all", "income", "expense"] = "all"
    category: str = "all"
    from_date: str | None = None
    to_date: str | None = None
    search_text: str = ""

    @classmethod
    def reset(cls) -> FilterSpec:
        """State of the filter controls after "clear filters": last 30 days only."""

        return cls(date_range=DateRangePreset.LAST_30_DAYS)


# ---------------------------------------------------------------------------
# Aggregation results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Summary:
    income_total: Decimal
    expense_total: Decimal
    balance: Decimal
    count: int


@dataclass(frozen=True, slots=True)
class MonthTotals:
    month: str
    income_total: Decimal
    expense_total: Decimal


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of a committed CSV import."""

    dialect: str
    imported: int
    skipped: int


__all__ = [
    "DateRangePreset",
    "FilterSpec",
    "ImportResult",
    "MonthTotals",
    "Summary",
    "Transaction",
    "MAX_DECIMAL_PLACES",
    "MAX_INTEGER_DIGITS",
    "TransactionType",
    "amount_within_bounds",
    "format_amount",
    "is_iso_date",
    "new_id",
]
