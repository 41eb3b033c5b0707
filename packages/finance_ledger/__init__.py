"""Public interface for the ``finance_ledger`` package.

Symbol re-exports only: the controller, the core components and the models
that front ends need.
"""

from .aggregation import by_category, by_month, category_shares, has_category_breakdown, summarize
from .categories import CategoryRegistry, color_for_category
from .categorization import AUTO_CATEGORY_RULES, CategoryRule, infer_category
from .errors import (
    EntryValidationError,
    ImportFormatError,
    LedgerError,
    NothingImportedError,
    PersistenceError,
)
from .filters import apply_filters
from .ingest import export_csv, parse_csv
from .ledger import Ledger, LedgerState
from .models import (
    DateRangePreset,
    FilterSpec,
    ImportResult,
    MonthTotals,
    Summary,
    Transaction,
)
from .persistence import InMemoryKeyValueStore, KeyValueStore, SqlKeyValueStore
from .sorting import SortState, sort_transactions
from .store import TransactionStore

__all__ = [
    # Controller
    "Ledger",
    "LedgerState",
    # Components
    "TransactionStore",
    "CategoryRegistry",
    "apply_filters",
    "sort_transactions",
    "summarize",
    "by_category",
    "by_month",
    "category_shares",
    "has_category_breakdown",
    "export_csv",
    "parse_csv",
    "infer_category",
    "color_for_category",
    "AUTO_CATEGORY_RULES",
    "CategoryRule",
    # Persistence
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SqlKeyValueStore",
    # Models
    "Transaction",
    "FilterSpec",
    "DateRangePreset",
    "SortState",
    "Summary",
    "MonthTotals",
    "ImportResult",
    # Errors
    "LedgerError",
    "EntryValidationError",
    "ImportFormatError",
    "NothingImportedError",
    "PersistenceError",
]
