"""Exception types raised by ``finance_ledger``.

Every failure a user can trigger derives from :class:`LedgerError` so front
ends can catch a single type and report it. Per-row import problems are not
exceptions: the dialect parsers skip such rows and only count them.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for user-facing ledger failures."""


class EntryValidationError(LedgerError, ValueError):
    """Manual entry input was rejected (missing date/category, non-positive amount)."""


class ImportFormatError(LedgerError):
    """A CSV file could not be imported as a whole (no data, unknown header)."""


class NothingImportedError(ImportFormatError):
    """A CSV file was understood but none of its rows were acceptable."""


class PersistenceError(LedgerError):
    """The key-value backend failed to read or write a record."""


__all__ = [
    "EntryValidationError",
    "ImportFormatError",
    "LedgerError",
    "NothingImportedError",
    "PersistenceError",
]
