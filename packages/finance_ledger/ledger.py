"""Application controller: the single owner of the ledger's state.

``LedgerState`` groups the transaction store, the category registry and the
preferences. ``Ledger`` takes user actions (entry form, delete, import,
filter changes...) and applies them to that state, keeping the registry in
sync and persisting every record through one key-value backend. Front ends
hold a ``Ledger`` and never touch the components directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from pydantic import ValidationError

from .aggregation import by_category, by_month, summarize
from .categories import CategoryRegistry
from .errors import EntryValidationError, PersistenceError
from .filters import apply_filters
from .ingest import export_csv, parse_csv
from .ingest.common import parse_leading_decimal
from .logging_setup import get_logger
from .models import (
    FilterSpec,
    ImportResult,
    MonthTotals,
    Summary,
    Transaction,
    amount_within_bounds,
    is_iso_date,
)
from .persistence import CATEGORIES_KEY, PREFS_KEY, KeyValueStore
from .prefs import Preferences
from .sorting import SortState, sort_transactions
from .store import TransactionStore

_logger = get_logger("finance_ledger.ledger")


def parse_entry(
    *,
    type_: str,
    amount: str | Decimal | float | None,
    category: str | None,
    date: str | None,
    note: str | None = "",
) -> Transaction:
    """Validate manual-entry input and build an (id-less) transaction.

    The amount accepts a comma as decimal separator. Anything other than
    ``"expense"`` as type is taken as income.

    Raises
    ------
    EntryValidationError
        Missing date, missing category, an amount that is not > 0, or an
        amount with too many digits.
    """

    date_s = (date or "").strip()
    category_s = (category or "").strip()
    if not date_s:
        raise EntryValidationError("A date is required")
    if not is_iso_date(date_s):
        raise EntryValidationError(f"Date must be YYYY-MM-DD, got {date_s!r}")
    if not category_s:
        raise EntryValidationError("A category is required")

    if isinstance(amount, (Decimal, int, float)):
        value: Decimal | None = Decimal(str(amount))
    else:
        value = parse_leading_decimal((amount or "").strip().replace(",", ".", 1))
    if value is None or not value.is_finite() or value <= 0:
        raise EntryValidationError("Amount must be greater than 0")
    if not amount_within_bounds(value):
        raise EntryValidationError("Amount is too large or has too many decimals")

    try:
        return Transaction(
            type="expense" if type_ == "expense" else "income",
            amount=value,
            category=category_s,
            date=date_s,
            note=(note or "").strip(),
        )
    except ValidationError as e:
        raise EntryValidationError(str(e)) from e


@dataclass(slots=True)
class LedgerState:
    store: TransactionStore = field(default_factory=TransactionStore)
    categories: CategoryRegistry = field(default_factory=CategoryRegistry)
    preferences: Preferences = field(default_factory=Preferences)


class Ledger:
    """Controller over a :class:`LedgerState` and its persistence backend."""

    def __init__(self, state: LedgerState | None = None, backend: KeyValueStore | None = None):
        self.state = state or LedgerState(store=TransactionStore(backend))
        self.backend = backend

    @classmethod
    def open(cls, backend: KeyValueStore) -> Ledger:
        """Load all records from ``backend``; missing or broken ones fall back to defaults."""

        store = TransactionStore(backend)
        store.load()
        state = LedgerState(
            store=store,
            categories=CategoryRegistry.loads(cls._read(backend, CATEGORIES_KEY)),
            preferences=Preferences.loads(cls._read(backend, PREFS_KEY)),
        )
        ledger = cls(state, backend)
        ledger._sync_categories()
        return ledger

    @staticmethod
    def _read(backend: KeyValueStore, key: str) -> str | None:
        try:
            return backend.get(key)
        except PersistenceError as e:
            _logger.warning("Could not read %s, using defaults: %s", key, e)
            return None

    def _write(self, key: str, value: str) -> None:
        if self.backend is None:
            return
        try:
            self.backend.set(key, value)
        except PersistenceError as e:
            _logger.warning("Could not save %s: %s", key, e)

    def _sync_categories(self) -> None:
        if self.state.categories.sync_from(self.state.store.categories()):
            self._write(CATEGORIES_KEY, self.state.categories.dumps())

    # ---- Convenience accessors ----------------------------------------------

    @property
    def store(self) -> TransactionStore:
        return self.state.store

    @property
    def categories(self) -> CategoryRegistry:
        return self.state.categories

    @property
    def preferences(self) -> Preferences:
        return self.state.preferences

    # ---- User actions -------------------------------------------------------

    def submit_entry(
        self,
        *,
        type_: str,
        amount: str | Decimal | float | None,
        category: str | None,
        date: str | None,
        note: str | None = "",
        editing_id: str | None = None,
    ) -> Transaction | None:
        """Create a transaction, or replace ``editing_id``'s fields.

        Returns the stored transaction; ``None`` when ``editing_id`` no longer
        exists (nothing changes in that case).
        """

        draft = parse_entry(type_=type_, amount=amount, category=category, date=date, note=note)
        if editing_id:
            stored = self.store.update(editing_id, draft.model_dump(exclude={"id"}))
        else:
            stored = self.store.add(draft)
        self._sync_categories()
        return stored

    def delete(self, tx_id: str) -> bool:
        return self.store.remove(tx_id)

    def clear(self) -> int:
        """Delete every transaction; return how many were removed."""

        n = len(self.store)
        if n:
            self.store.clear()
        return n

    def add_category(self, name: str) -> bool:
        changed = self.categories.add(name)
        if changed:
            self._write(CATEGORIES_KEY, self.categories.dumps())
        return changed

    def import_csv(self, text: str) -> ImportResult:
        """Parse ``text`` and commit every accepted row in one go.

        On any :class:`~finance_ledger.errors.ImportFormatError` the store is
        left untouched.
        """

        batch = parse_csv(text, existing_ids=self.store.ids())
        committed = self.store.extend(batch.transactions)
        self._sync_categories()
        _logger.info("Imported %d transaction(s) from %s CSV", len(committed), batch.dialect)
        return ImportResult(dialect=batch.dialect, imported=len(committed), skipped=batch.skipped)

    def export_csv(self) -> str:
        return export_csv(self.store.all())

    def toggle_theme(self) -> Preferences:
        self.state.preferences = self.preferences.toggled_theme()
        self._write(PREFS_KEY, self.preferences.dumps())
        return self.preferences

    # ---- Views --------------------------------------------------------------

    def filtered(self, spec: FilterSpec, *, now: datetime | None = None) -> list[Transaction]:
        return apply_filters(self.store.all(), spec, now=now)

    def view(
        self,
        spec: FilterSpec,
        sort: SortState | None = None,
        *,
        now: datetime | None = None,
    ) -> list[Transaction]:
        """Filtered transactions in table order."""

        sort = sort or SortState()
        return sort_transactions(self.filtered(spec, now=now), sort.field, sort.direction)

    def summary(self, spec: FilterSpec, *, now: datetime | None = None) -> Summary:
        return summarize(self.filtered(spec, now=now))

    def category_breakdown(
        self, spec: FilterSpec, *, now: datetime | None = None
    ) -> dict[str, Decimal]:
        return by_category(self.filtered(spec, now=now))

    def monthly(self, spec: FilterSpec, *, now: datetime | None = None) -> list[MonthTotals]:
        return by_month(self.filtered(spec, now=now))


__all__ = ["Ledger", "LedgerState", "parse_entry"]
