"""Aggregations over a (filtered) sequence of transactions.

All totals are exact ``Decimal`` sums of ``amount``; the sign of a
transaction comes from its ``type``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

from .models import MonthTotals, Summary, Transaction

_ZERO = Decimal("0")


def summarize(transactions: Sequence[Transaction]) -> Summary:
    income = sum((t.amount for t in transactions if t.type == "income"), _ZERO)
    expense = sum((t.amount for t in transactions if t.type == "expense"), _ZERO)
    return Summary(
        income_total=income,
        expense_total=expense,
        balance=income - expense,
        count=len(transactions),
    )


def by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Expense totals per category, in order of first appearance."""

    totals: dict[str, Decimal] = {}
    for t in transactions:
        if t.type != "expense":
            continue
        totals[t.category] = totals.get(t.category, _ZERO) + t.amount
    return totals


def has_category_breakdown(breakdown: Mapping[str, Decimal]) -> bool:
    """A category chart only says something with at least two categories."""

    return len(breakdown) >= 2


def category_shares(breakdown: Mapping[str, Decimal]) -> dict[str, Decimal]:
    """Percentage of the expense total per category (0 when the total is 0)."""

    total = sum(breakdown.values(), _ZERO)
    if not total:
        return {name: _ZERO for name in breakdown}
    return {name: value * 100 / total for name, value in breakdown.items()}


def by_month(transactions: Iterable[Transaction]) -> list[MonthTotals]:
    """Income and expense totals per ``YYYY-MM``, oldest month first.

    Only months with at least one transaction appear; the other type is
    reported as zero.
    """

    income: dict[str, Decimal] = {}
    expense: dict[str, Decimal] = {}
    for t in transactions:
        bucket = income if t.type == "income" else expense
        bucket[t.month] = bucket.get(t.month, _ZERO) + t.amount

    months = sorted(income.keys() | expense.keys())
    return [
        MonthTotals(
            month=m,
            income_total=income.get(m, _ZERO),
            expense_total=expense.get(m, _ZERO),
        )
        for m in months
    ]


__all__ = ["by_category", "by_month", "category_shares", "has_category_breakdown", "summarize"]
