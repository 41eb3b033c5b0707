# ruff: noqa: I001
"""Key-value persistence backends for the ledger.

The ledger keeps three logical records, each a JSON document stored under a
fixed key:

- ``TRANSACTIONS_KEY``: JSON array of transactions.
- ``CATEGORIES_KEY``: JSON array of user-added category names.
- ``PREFS_KEY``: JSON object with UI preferences.

Backends implement :class:`KeyValueStore` and raise
:class:`~finance_ledger.errors.PersistenceError` on failure. Callers (the
store and the controller) decide whether such failures are fatal; for the
ledger they never are.
"""

from __future__ import annotations

from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ledger_db.client import session_scope
from ledger_db.models.ledger import LedgerRecord
from .errors import PersistenceError

TRANSACTIONS_KEY = "ledger.transactions.v1"
CATEGORIES_KEY = "ledger.categories.v1"
PREFS_KEY = "ledger.prefs.v1"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Dictionary-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlKeyValueStore:
    """Records kept in the ``ledger_kv`` table of a SQLAlchemy database.

    Each ``set`` runs in its own short transaction so a write is durable as
    soon as the call returns.
    """

    def __init__(self, database_url: str | None = None) -> None:
        self.database_url = database_url

    def get(self, key: str) -> str | None:
        try:
            with session_scope(database_url_override=self.database_url) as session:
                return session.execute(
                    select(LedgerRecord.value).where(LedgerRecord.key == key)
                ).scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"failed to read record {key!r}: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            with session_scope(database_url_override=self.database_url) as session:
                row = session.get(LedgerRecord, key)
                if row is None:
                    session.add(LedgerRecord(key=key, value=value))
                else:
                    row.value = value
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"failed to write record {key!r}: {e}") from e


__all__ = [
    "CATEGORIES_KEY",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "PREFS_KEY",
    "SqlKeyValueStore",
    "TRANSACTIONS_KEY",
]
