"""Filter engine: derive the visible subset of transactions from a ``FilterSpec``.

``apply_filters`` is a pure function. It keeps the input order and only
removes items; every predicate must pass for a transaction to be kept.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime, time, timedelta

from .models import DateRangePreset, FilterSpec, Transaction

_PRESET_DAYS = {
    DateRangePreset.LAST_7_DAYS: 7,
    DateRangePreset.LAST_30_DAYS: 30,
}


def _as_utc_midnight(iso_date: str) -> datetime:
    return datetime.combine(date.fromisoformat(iso_date), time(), tzinfo=UTC)


def _preset_predicate(preset: DateRangePreset, now: datetime):
    if preset == DateRangePreset.ALL:
        return None
    if preset in _PRESET_DAYS:
        threshold = now - timedelta(days=_PRESET_DAYS[preset])
        return lambda t: _as_utc_midnight(t.date) >= threshold
    year_start = date(now.year, 1, 1).isoformat()
    return lambda t: t.date >= year_start


def matches(t: Transaction, spec: FilterSpec, search: str) -> bool:
    """Non-preset predicates; ``search`` must already be trimmed and lowercased."""

    if spec.type != "all" and t.type != spec.type:
        return False
    if spec.category != "all" and t.category != spec.category:
        return False
    # Fixed-width ISO dates compare correctly as strings.
    if spec.from_date and t.date < spec.from_date:
        return False
    if spec.to_date and t.date > spec.to_date:
        return False
    if search:
        haystack = f"{t.category} {t.note}".lower()
        if search not in haystack:
            return False
    return True


def apply_filters(
    transactions: Iterable[Transaction],
    spec: FilterSpec,
    *,
    now: datetime | None = None,
) -> list[Transaction]:
    """Return the transactions of ``transactions`` that satisfy ``spec``.

    Parameters
    ----------
    transactions:
        Source sequence; it is not modified.
    spec:
        Filter values chosen by the user.
    now:
        Reference time for the relative presets. Defaults to the current
        wall-clock time (UTC); naive values are taken as UTC.
    """

    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)

    in_preset = _preset_predicate(DateRangePreset(spec.date_range), now)
    search = spec.search_text.strip().lower()

    result: list[Transaction] = []
    for t in transactions:
        if in_preset is not None and not in_preset(t):
            continue
        if matches(t, spec, search):
            result.append(t)
    return result


__all__ = ["apply_filters", "matches"]
