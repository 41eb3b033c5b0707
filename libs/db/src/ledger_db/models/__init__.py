"""Shared SQLAlchemy models registry for the ledger database.

Currently includes the key-value record table used by ``finance_ledger``.
"""

from .ledger import Base, LedgerRecord

__all__ = [
    "Base",
    "LedgerRecord",
]
