"""CSV import/export for the ledger (own format and bank statements)."""

from .adapters.ledger_csv import export_csv, export_filename
from .common import ParsedBatch
from .utils import DIALECTS, parse_csv

__all__ = ["DIALECTS", "ParsedBatch", "export_csv", "export_filename", "parse_csv"]
