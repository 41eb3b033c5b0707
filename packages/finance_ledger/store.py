"""In-memory transaction store with best-effort persistence.

The store exclusively owns the transaction collection and keeps it in
insertion order. Every mutation writes the whole collection to the
key-value backend before returning. Backend failures are logged and
swallowed: the in-memory state stays authoritative for the session.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from .errors import PersistenceError
from .logging_setup import get_logger
from .models import Transaction, new_id
from .persistence import TRANSACTIONS_KEY, KeyValueStore

_logger = get_logger("finance_ledger.store")

# Fields an edit may replace; ``id`` is never among them.
_EDITABLE_FIELDS = ("type", "amount", "category", "date", "note")


def parse_transactions(raw: str | bytes | None) -> list[Transaction]:
    """Decode the persisted JSON array; absent or corrupt data yields ``[]``.

    Individual records that fail validation are dropped so one bad entry does
    not hide the rest of the ledger.
    """

    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError:
        _logger.warning("Ignoring corrupt transactions record")
        return []
    if not isinstance(data, list):
        _logger.warning("Ignoring transactions record that is not a list")
        return []

    out: list[Transaction] = []
    seen: set[str] = set()
    for item in data:
        if not isinstance(item, Mapping):
            continue
        try:
            tx = Transaction.model_validate(item)
        except ValidationError as e:
            _logger.warning("Dropping invalid stored transaction %r: %s", item.get("id"), e)
            continue
        if not tx.id or tx.id in seen:
            tx = tx.model_copy(update={"id": new_id()})
        seen.add(tx.id)
        out.append(tx)
    return out


class TransactionStore:
    """Authoritative, ordered collection of :class:`Transaction` objects."""

    def __init__(self, backend: KeyValueStore | None = None) -> None:
        self._backend = backend
        self._items: list[Transaction] = []

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    # ---- Reads --------------------------------------------------------------

    def all(self) -> tuple[Transaction, ...]:
        return tuple(self._items)

    def ids(self) -> set[str]:
        return {t.id for t in self._items}

    def get(self, tx_id: str) -> Transaction | None:
        for t in self._items:
            if t.id == tx_id:
                return t
        return None

    def categories(self) -> list[str]:
        return [t.category for t in self._items]

    # ---- Mutations ----------------------------------------------------------

    def _with_id(self, tx: Transaction, taken: set[str]) -> Transaction:
        if not tx.id:
            return tx.model_copy(update={"id": new_id()})
        if tx.id in taken:
            raise ValueError(f"transaction id already exists: {tx.id!r}")
        return tx

    def add(self, tx: Transaction) -> Transaction:
        """Append ``tx`` (assigning an id when empty) and persist."""

        tx = self._with_id(tx, self.ids())
        self._items.append(tx)
        self.persist()
        return tx

    def extend(self, txs: Iterable[Transaction]) -> list[Transaction]:
        """Append a batch atomically: either every item is added or none is."""

        taken = self.ids()
        batch: list[Transaction] = []
        for tx in txs:
            tx = self._with_id(tx, taken)
            taken.add(tx.id)
            batch.append(tx)
        self._items.extend(batch)
        if batch:
            self.persist()
        return batch

    def update(self, tx_id: str, fields: Mapping[str, Any]) -> Transaction | None:
        """Replace every editable field of ``tx_id``.

        Returns the new transaction, or ``None`` (logged, not raised) when the
        id is unknown. Raises ``pydantic.ValidationError`` when the new values
        are invalid; the stored transaction is left untouched in that case.
        """

        for pos, current in enumerate(self._items):
            if current.id != tx_id:
                continue
            values = {k: fields[k] for k in _EDITABLE_FIELDS if k in fields}
            replaced = Transaction.model_validate({**current.model_dump(), **values, "id": tx_id})
            self._items[pos] = replaced
            self.persist()
            return replaced
        _logger.info("Edit ignored: no transaction with id %r", tx_id)
        return None

    def remove(self, tx_id: str) -> bool:
        before = len(self._items)
        self._items = [t for t in self._items if t.id != tx_id]
        if len(self._items) == before:
            return False
        self.persist()
        return True

    def clear(self) -> None:
        self._items = []
        self.persist()

    # ---- Persistence --------------------------------------------------------

    def dumps(self) -> str:
        return json.dumps([t.to_record() for t in self._items], ensure_ascii=False)

    def load_from(self, raw: str | bytes | None) -> None:
        """Replace the in-memory collection with the decoded record (no write-back)."""

        self._items = parse_transactions(raw)

    def load(self) -> None:
        """Read the transactions record from the backend, if any."""

        if self._backend is None:
            return
        try:
            raw = self._backend.get(TRANSACTIONS_KEY)
        except PersistenceError as e:
            _logger.warning("Could not read transactions, starting empty: %s", e)
            raw = None
        self.load_from(raw)

    def persist(self) -> None:
        if self._backend is None:
            return
        try:
            self._backend.set(TRANSACTIONS_KEY, self.dumps())
        except PersistenceError as e:
            _logger.warning("Could not save transactions: %s", e)


__all__ = ["TransactionStore", "parse_transactions"]
