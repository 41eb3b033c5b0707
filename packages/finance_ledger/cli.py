# ruff: noqa: I001
"""Command-line front end for the ledger.

A Typer application over :class:`finance_ledger.ledger.Ledger`. The root
callback loads ``.env`` from the working directory (without overriding
variables already set), configures logging once, and remembers the database
URL; each command opens the ledger from the SQL key-value backend, performs
one user action and renders the result with rich.

Errors the user can cause (:class:`~finance_ledger.errors.LedgerError`) are
written to stderr and end the command with exit code 1.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .aggregation import category_shares, has_category_breakdown
from .errors import LedgerError
from .formatting import format_currency, format_date
from .ingest import export_filename
from .ledger import Ledger
from .logging_setup import configure_logging
from .models import DateRangePreset, FilterSpec, Transaction, is_iso_date
from .persistence import SqlKeyValueStore
from .sorting import SORT_FIELDS, SortState

app = typer.Typer(
    name="ledger",
    help="Personal finance ledger: record, filter, summarize, import and export transactions.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


# ---- Small module-level helpers used by commands ------------------------------


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def _open_ledger(ctx: typer.Context) -> Ledger:
    obj = ctx.ensure_object(dict)
    ledger = obj.get("ledger")
    if ledger is None:
        ledger = Ledger.open(SqlKeyValueStore(obj.get("database_url")))
        obj["ledger"] = ledger
    return ledger


def _check_date(value: str | None, option: str) -> str | None:
    if value is None or value == "":
        return None
    if not is_iso_date(value):
        raise typer.BadParameter(f"{option} must be YYYY-MM-DD, got {value!r}")
    return value


def _filter_spec(
    date_range: DateRangePreset,
    type_: str,
    category: str,
    from_date: str | None,
    to_date: str | None,
    search: str,
) -> FilterSpec:
    if type_ not in {"all", "income", "expense"}:
        raise typer.BadParameter("--type must be one of: all, income, expense")
    return FilterSpec(
        date_range=date_range,
        type=type_,  # type: ignore[arg-type]
        category=category,
        from_date=_check_date(from_date, "--from"),
        to_date=_check_date(to_date, "--to"),
        search_text=search,
    )


def _transactions_table(rows: list[Transaction], ledger: Ledger) -> Table:
    table = Table(show_lines=False)
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    table.add_column("Note")
    table.add_column("ID", overflow="fold")
    for t in rows:
        color = ledger.categories.color(t.category)
        sign = "-" if t.type == "expense" else "+"
        style = "red" if t.type == "expense" else "green"
        table.add_row(
            format_date(t.date),
            t.type,
            f"[{color}]■[/] {escape(t.category)}",
            f"[{style}]{sign}{format_currency(t.amount)}[/]",
            escape(t.note),
            t.id,
        )
    return table


# Filter options shared by ``list`` and ``summary``.
RangeOption = Annotated[
    DateRangePreset, typer.Option("--range", help="Preset window: 7d, 30d, ytd or all.")
]
TypeFilterOption = Annotated[str, typer.Option("--type", help="all, income or expense.")]
CategoryFilterOption = Annotated[str, typer.Option("--category", help="Exact category.")]
FromOption = Annotated[str | None, typer.Option("--from", help="Earliest date (YYYY-MM-DD).")]
ToOption = Annotated[str | None, typer.Option("--to", help="Latest date (YYYY-MM-DD).")]
SearchOption = Annotated[str, typer.Option("--search", help="Text in category or note.")]


# ---- Entry commands ------------------------------------------------------------


@app.command("add")
def add_cmd(
    ctx: typer.Context,
    amount: Annotated[str, typer.Option(help="Positive amount; comma decimals accepted.")],
    category: Annotated[str, typer.Option(help="Category name (new names are registered).")],
    type_: Annotated[str, typer.Option("--type", help="income or expense.")] = "expense",
    on: Annotated[str | None, typer.Option("--date", help="YYYY-MM-DD (default: today).")] = None,
    note: Annotated[str, typer.Option(help="Free-text note.")] = "",
) -> None:
    """Record a new transaction."""

    ledger = _open_ledger(ctx)
    try:
        tx = ledger.submit_entry(
            type_=type_,
            amount=amount,
            category=category,
            date=on or date.today().isoformat(),
            note=note,
        )
    except LedgerError as e:
        raise _fail(str(e)) from e
    assert tx is not None
    console.print(
        f"Added {tx.type} {format_currency(tx.amount)} ({escape(tx.category)}) [dim]{tx.id}[/dim]"
    )


@app.command("edit")
def edit_cmd(
    ctx: typer.Context,
    tx_id: Annotated[str, typer.Argument(help="Id of the transaction to edit.")],
    amount: Annotated[str | None, typer.Option(help="New amount.")] = None,
    category: Annotated[str | None, typer.Option(help="New category.")] = None,
    type_: Annotated[str | None, typer.Option("--type", help="income or expense.")] = None,
    on: Annotated[str | None, typer.Option("--date", help="New date (YYYY-MM-DD).")] = None,
    note: Annotated[str | None, typer.Option(help="New note.")] = None,
) -> None:
    """Replace the fields of an existing transaction; omitted options keep their value."""

    ledger = _open_ledger(ctx)
    current = ledger.store.get(tx_id)
    if current is None:
        raise _fail(f"No transaction with id {tx_id}")
    try:
        tx = ledger.submit_entry(
            type_=type_ or current.type,
            amount=amount if amount is not None else current.amount,
            category=category if category is not None else current.category,
            date=on or current.date,
            note=note if note is not None else current.note,
            editing_id=tx_id,
        )
    except LedgerError as e:
        raise _fail(str(e)) from e
    if tx is None:
        raise _fail(f"No transaction with id {tx_id}")
    console.print(f"Updated {tx.id}")


@app.command("delete")
def delete_cmd(
    ctx: typer.Context,
    tx_id: Annotated[str, typer.Argument(help="Id of the transaction to delete.")],
) -> None:
    """Delete one transaction."""

    if not _open_ledger(ctx).delete(tx_id):
        raise _fail(f"No transaction with id {tx_id}")
    console.print(f"Deleted {tx_id}")


@app.command("clear")
def clear_cmd(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
) -> None:
    """Delete every transaction."""

    ledger = _open_ledger(ctx)
    if not len(ledger.store):
        raise _fail("There is nothing to delete")
    if not yes and not typer.confirm("Delete all transactions?"):
        raise typer.Exit(1)
    n = ledger.clear()
    console.print(f"Deleted {n} transaction(s)")


# ---- Views ---------------------------------------------------------------------


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    date_range: RangeOption = DateRangePreset.ALL,
    type_: TypeFilterOption = "all",
    category: CategoryFilterOption = "all",
    from_date: FromOption = None,
    to_date: ToOption = None,
    search: SearchOption = "",
    sort: Annotated[str, typer.Option(help="date, amount, category or note.")] = "date",
    asc: Annotated[bool | None, typer.Option("--asc/--desc", help="Sort direction.")] = None,
) -> None:
    """Show the filtered transactions as a table."""

    if sort not in SORT_FIELDS:
        raise typer.BadParameter(f"--sort must be one of: {', '.join(SORT_FIELDS)}")
    spec = _filter_spec(date_range, type_, category, from_date, to_date, search)
    state = SortState(sort, "desc" if sort == "date" else "asc")  # type: ignore[arg-type]
    if asc is not None:
        state = SortState(state.field, "asc" if asc else "desc")

    ledger = _open_ledger(ctx)
    rows = ledger.view(spec, state)
    if not rows:
        console.print("No transactions match the current filters.")
        return
    console.print(_transactions_table(rows, ledger))


@app.command("summary")
def summary_cmd(
    ctx: typer.Context,
    date_range: RangeOption = DateRangePreset.ALL,
    type_: TypeFilterOption = "all",
    category: CategoryFilterOption = "all",
    from_date: FromOption = None,
    to_date: ToOption = None,
    search: SearchOption = "",
) -> None:
    """Totals, expense breakdown by category and month-by-month figures."""

    spec = _filter_spec(date_range, type_, category, from_date, to_date, search)
    ledger = _open_ledger(ctx)

    s = ledger.summary(spec)
    totals = Table(title="Summary")
    totals.add_column("Income", justify="right", style="green")
    totals.add_column("Expenses", justify="right", style="red")
    totals.add_column("Balance", justify="right")
    totals.add_column("Transactions", justify="right")
    totals.add_row(
        format_currency(s.income_total),
        format_currency(s.expense_total),
        format_currency(s.balance),
        str(s.count),
    )
    console.print(totals)

    breakdown = ledger.category_breakdown(spec)
    if not breakdown:
        console.print("No expenses match the current filters.")
    elif not has_category_breakdown(breakdown):
        console.print("At least two categories are needed for an expense breakdown.")
    else:
        shares = category_shares(breakdown)
        by_cat = Table(title="Expenses by category")
        by_cat.add_column("Category")
        by_cat.add_column("Amount", justify="right")
        by_cat.add_column("%", justify="right")
        for name, value in breakdown.items():
            color = ledger.categories.color(name)
            by_cat.add_row(
                f"[{color}]■[/] {escape(name)}", format_currency(value), f"{shares[name]:.1f}"
            )
        console.print(by_cat)

    months = ledger.monthly(spec)
    if months:
        by_month_table = Table(title="By month")
        by_month_table.add_column("Month")
        by_month_table.add_column("Income", justify="right", style="green")
        by_month_table.add_column("Expenses", justify="right", style="red")
        for m in months:
            by_month_table.add_row(
                m.month, format_currency(m.income_total), format_currency(m.expense_total)
            )
        console.print(by_month_table)


# ---- CSV -----------------------------------------------------------------------


def _read_csv_text(path: Path) -> str:
    data = path.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Bank portals still hand out Windows-1252/Latin-1 files.
        return data.decode("latin-1")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    csv_path: Annotated[Path, typer.Argument(help="Ledger export or bank statement CSV.")],
) -> None:
    """Import transactions from a CSV file."""

    try:
        text = _read_csv_text(csv_path)
    except FileNotFoundError as e:
        raise _fail(f"File not found: {csv_path}") from e
    except PermissionError as e:
        raise _fail(f"Permission denied: {csv_path}") from e

    try:
        result = _open_ledger(ctx).import_csv(text)
    except LedgerError as e:
        raise _fail(str(e)) from e
    label = "bank statement" if result.dialect == "bank_statement" else "ledger"
    console.print(f"Imported {result.imported} transaction(s) from the {label} CSV.")
    if result.skipped:
        console.print(f"[dim]{result.skipped} row(s) skipped.[/dim]")


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    csv_path: Annotated[
        Path | None, typer.Argument(help="Destination (default: ledger-YYYYMMDD.csv).")
    ] = None,
    stdout: Annotated[bool, typer.Option("--stdout", help="Print instead of writing a file.")] = False,
) -> None:
    """Export every transaction to the ledger CSV format."""

    ledger = _open_ledger(ctx)
    if not len(ledger.store):
        raise _fail("There is no data to export")
    text = ledger.export_csv()
    if stdout:
        typer.echo(text, nl=False)
        return
    target = csv_path or Path.cwd() / export_filename()
    try:
        target.write_text(text, encoding="utf-8")
    except OSError as e:
        raise _fail(f"Could not write {target}: {e}") from e
    console.print(f"Exported {len(ledger.store)} transaction(s) to {target}")


# ---- Categories & preferences --------------------------------------------------


@app.command("categories")
def categories_cmd(ctx: typer.Context) -> None:
    """List known categories and their colors."""

    ledger = _open_ledger(ctx)
    table = Table()
    table.add_column("Category")
    table.add_column("Color")
    for name in ledger.categories:
        color = ledger.categories.color(name)
        table.add_row(f"[{color}]■[/] {escape(name)}", color)
    console.print(table)


@app.command("add-category")
def add_category_cmd(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="New category name.")],
) -> None:
    """Register a category without creating a transaction."""

    if not name.strip():
        raise _fail("Category name cannot be empty")
    if _open_ledger(ctx).add_category(name):
        console.print(f"Added category {escape(name.strip())}")
    else:
        console.print(f"Category {escape(name.strip())} already exists")


@app.command("theme")
def theme_cmd(ctx: typer.Context) -> None:
    """Switch between the light and dark theme preference."""

    prefs = _open_ledger(ctx).toggle_theme()
    console.print(f"Theme: {prefs.theme}")


@app.callback()
def _root(
    ctx: typer.Context,
    database_url: Annotated[
        str | None,
        typer.Option(help="Override LEDGER_DATABASE_URL (default: ./.ledger/ledger.db)."),
    ] = None,
    log_level: Annotated[
        str | None, typer.Option(help="Logging level (falls back to LEDGER_LOG_LEVEL).")
    ] = None,
) -> None:
    """Root command: environment, logging and shared options."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)
    ctx.obj = {"database_url": database_url}


def main() -> None:  # pragma: no cover - console script entry
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
