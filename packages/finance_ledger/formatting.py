"""Display formatting (Spanish locale conventions, euros)."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def format_currency(value: Decimal) -> str:
    """``Decimal("-1234.5")`` -> ``"-1.234,50 €"``."""

    q = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    # Format with ASCII separators first, then swap them.
    text = f"{q:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text} €"


def format_date(iso_date: str) -> str:
    """``"2024-03-05"`` -> ``"05/03/2024"``; empty input stays empty."""

    if not iso_date:
        return ""
    year, month, day = iso_date.split("-")
    return f"{day}/{month}/{year}"


__all__ = ["format_currency", "format_date"]
