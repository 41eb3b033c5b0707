from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from typer.testing import CliRunner

from finance_ledger import FilterSpec, Ledger, SqlKeyValueStore
from finance_ledger.cli import app


def test_e2e_statement_import_export_and_reimport(tmp_path: Path, _isolate_database: str):
    runner = CliRunner()

    # -------------------------
    # Input (fixture file path)
    # -------------------------
    csv_path = Path(__file__).resolve().parents[1] / "data/bank_statement_march_2024.csv"

    # -------------------------
    # Import the bank statement through the CLI
    # -------------------------
    result = runner.invoke(app, ["import", str(csv_path)])
    assert result.exit_code == 0, result.output
    assert "Imported 7 transaction(s) from the bank statement CSV." in result.output
    assert "1 row(s) skipped." in result.output

    # -------------------------
    # Expected categories (note -> (type, amount, category))
    # -------------------------
    expected = {
        "BIZUM DE LAURA CENA": ("income", Decimal("25.00"), "Bizum"),
        "MERCADONA VALENCIA": ("expense", Decimal("64.37"), "Supermercado"),
        "UBER *TRIP": ("expense", Decimal("11.20"), "Transporte"),
        "NETFLIX.COM": ("expense", Decimal("12.99"), "Suscripciones"),
        "FARMACIA CENTRAL": ("expense", Decimal("8.45"), "Salud"),
        "TRANSFERENCIA NOMINA ACME SL": ("income", Decimal("2100.00"), "Nómina"),
        "COMPRA TIENDA XYZ": ("expense", Decimal("5.00"), "Otros"),
    }
    ledger = Ledger.open(SqlKeyValueStore())
    got = {t.note: (t.type, t.amount, t.category) for t in ledger.store.all()}
    assert got == expected

    summary = ledger.summary(FilterSpec())
    assert summary.balance == Decimal("2022.99")

    # -------------------------
    # Export, then import the export into a fresh database
    # -------------------------
    export_path = tmp_path / "export.csv"
    result = runner.invoke(app, ["export", str(export_path)])
    assert result.exit_code == 0, result.output

    other_url = f"sqlite+pysqlite:///{tmp_path / 'other.db'}"
    result = runner.invoke(app, ["--database-url", other_url, "import", str(export_path)])
    assert result.exit_code == 0, result.output
    assert "from the ledger CSV" in result.output

    copy = Ledger.open(SqlKeyValueStore(other_url))
    assert copy.store.all() == ledger.store.all()

    # -------------------------
    # Re-importing into the original database is additive
    # -------------------------
    result = runner.invoke(app, ["import", str(export_path)])
    assert result.exit_code == 0, result.output
    again = Ledger.open(SqlKeyValueStore(_isolate_database))
    assert len(again.store) == 14
    assert len(again.store.ids()) == 14
