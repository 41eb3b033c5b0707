"""Table ordering for transaction lists."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from .categories import sort_key
from .models import Transaction

SortField = Literal["date", "amount", "category", "note"]
SortDirection = Literal["asc", "desc"]

SORT_FIELDS: tuple[str, ...] = ("date", "amount", "category", "note")


@dataclass(frozen=True, slots=True)
class SortState:
    field: SortField = "date"
    direction: SortDirection = "desc"

    def toggle(self, field: SortField) -> SortState:
        """State after clicking ``field``'s column header.

        The active column flips direction; a new column starts descending for
        dates (newest first) and ascending for everything else.
        """

        if field == self.field:
            return SortState(field, "asc" if self.direction == "desc" else "desc")
        return SortState(field, "desc" if field == "date" else "asc")


def _primary_key(t: Transaction, field: SortField):
    if field == "amount":
        return t.amount
    if field == "category":
        return sort_key(t.category)
    if field == "note":
        return sort_key(t.note)
    return t.date


def sort_transactions(
    transactions: Iterable[Transaction],
    field: SortField = "date",
    direction: SortDirection = "desc",
) -> list[Transaction]:
    """Return a new list ordered by ``field``; ties put the newest date first."""

    # Two stable passes: tie-break first, then the primary key.
    ordered = sorted(transactions, key=lambda t: t.date, reverse=True)
    return sorted(ordered, key=lambda t: _primary_key(t, field), reverse=direction == "desc")


__all__ = ["SORT_FIELDS", "SortDirection", "SortField", "SortState", "sort_transactions"]
