"""Ledger commands (list, add, edit, copy, delete, summary)."""

import sqlite3
from datetime import datetime

from rich.table import Table

from ledgerdesk.commands.common import console, fail, parse_date_option, parse_entry_time, short_id
from ledgerdesk.config import load_settings
from ledgerdesk.dates import next_entry_slot, today
from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.ledger import (
    add_entry,
    delete_entry,
    derive_view,
    edit_entry,
    entry_amount,
    find_entry,
    format_money,
    format_time,
    make_entry,
    summarize,
)
from ledgerdesk.domain.models import EXPENSE, INCOME, EntryKind
from ledgerdesk.domain.sheets import Sheet, SheetBook, active_sheet, find_sheet, replace_entries
from ledgerdesk.domain.undo import entry_removed, push
from ledgerdesk.logging_setup import get_logger
from ledgerdesk.store import (
    load_book,
    load_ledger_cursor,
    load_undo,
    open_store,
    save_book,
    save_ledger_cursor,
    save_undo,
)

logger = get_logger("ledgerdesk.commands.ledger")

KIND_NAMES: dict[str, EntryKind] = {
    "income": INCOME,
    "in": INCOME,
    "수입": INCOME,
    "expense": EXPENSE,
    "out": EXPENSE,
    "지출": EXPENSE,
}


def parse_kind(value: str) -> EntryKind:
    """Parse a kind name such as "income", "expense", "수입" or "지출".

    Raises:
        ValidationError: If the name is not recognized.
    """
    kind = KIND_NAMES.get(value.strip().lower())
    if kind is None:
        raise ValidationError(f"Unknown kind '{value}' (use income or expense)")
    return kind


def resolve_sheet(book: SheetBook, ref: str | None) -> Sheet:
    return find_sheet(book, ref) if ref else active_sheet(book)


def render_ledger(sheet: Sheet) -> None:
    """Render a sheet's chronological view with running balance."""
    view = derive_view(sheet.entries)
    summary = summarize(view)

    if not view:
        console.print(f"[yellow]No entries in sheet '{sheet.name}'[/yellow]")
        return

    table = Table(title=f"{sheet.name} ({len(view)} entries)")
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Time", style="cyan")
    table.add_column("Kind", justify="center")
    table.add_column("Label", style="yellow")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expense", justify="right", style="red")
    table.add_column("Balance", justify="right", style="bold cyan")

    for row in view:
        entry = row.entry
        kind_display = "[green]Income[/green]" if entry.kind == INCOME else "[red]Expense[/red]"
        table.add_row(
            short_id(entry.id),
            entry.date,
            format_time(entry.hour, entry.minute),
            kind_display,
            entry.label,
            format_money(entry.income_amount) if entry.income_amount else "-",
            format_money(entry.expense_amount) if entry.expense_amount else "-",
            format_money(row.balance),
        )

    console.print(table)
    console.print(
        f"Total income [green]+{format_money(summary.total_income)}[/green]  "
        f"Total expense [red]-{format_money(summary.total_expense)}[/red]  "
        f"Balance [bold cyan]{format_money(summary.net_balance)}[/bold cyan]"
    )


def list_command(sheet_ref: str | None = None) -> None:
    """Show a sheet's entries with running balance."""
    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
        render_ledger(resolve_sheet(book, sheet_ref))
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")


def summary_command(all_sheets: bool = False) -> None:
    """Show total income, expense and balance."""
    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    sheets = book.sheets if all_sheets else (active_sheet(book),)

    table = Table(title="Ledger summary")
    table.add_column("Sheet", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expense", justify="right", style="red")
    table.add_column("Balance", justify="right", style="bold cyan")

    for sheet in sheets:
        summary = summarize(derive_view(sheet.entries))
        marker = " *" if sheet.id == book.active_id else ""
        table.add_row(
            f"{sheet.name}{marker}",
            str(len(sheet.entries)),
            f"+{format_money(summary.total_income)}",
            f"-{format_money(summary.total_expense)}",
            format_money(summary.net_balance),
        )

    console.print(table)


def add_command(
    label: str,
    amount: int,
    kind: str = "income",
    entry_date: str | None = None,
    entry_time: str | None = None,
    sheet_ref: str | None = None,
) -> None:
    """Add an entry to a sheet.

    When the date or time is omitted, the suggested slot (one hour after the
    previously saved entry) is used, falling back to today at the current hour.
    """
    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
        sheet = resolve_sheet(book, sheet_ref)

        cursor = load_ledger_cursor(store)
        now = datetime.now()
        default_date, default_hour, default_minute = cursor or (today(), now.hour, 0)

        date_value = parse_date_option(entry_date) if entry_date else default_date
        hour, minute = parse_entry_time(entry_time) if entry_time else (default_hour, default_minute)

        entry = make_entry(date_value, hour, minute, parse_kind(kind), label, amount)
        book = replace_entries(book, sheet.id, add_entry(sheet.entries, entry))

        save_book(store, book)
        save_ledger_cursor(store, next_entry_slot(entry.date, entry.hour, entry.minute))
        logger.info("added entry %s to sheet %s", entry.id, sheet.id)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Entry added to '{sheet.name}':")
    console.print(f"  {entry.date} {format_time(entry.hour, entry.minute)}  {entry.kind}  {entry.label}")
    console.print(f"  Amount: {format_money(entry_amount(entry))}")
    console.print(f"  [dim]ID: {short_id(entry.id)}[/dim]")


def edit_command(
    entry_id: str,
    label: str | None = None,
    amount: int | None = None,
    kind: str | None = None,
    entry_date: str | None = None,
    entry_time: str | None = None,
    sheet_ref: str | None = None,
) -> None:
    """Edit an entry; omitted fields keep their current values."""
    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
        sheet = resolve_sheet(book, sheet_ref)

        current = find_entry(sheet.entries, entry_id)
        if current is None:
            raise ValidationError(f"Entry not found in '{sheet.name}': {entry_id}")

        hour, minute = parse_entry_time(entry_time) if entry_time else (current.hour, current.minute)
        entries = edit_entry(
            sheet.entries,
            current.id,
            date=parse_date_option(entry_date) if entry_date else current.date,
            hour=hour,
            minute=minute,
            kind=parse_kind(kind) if kind else current.kind,
            label=label if label is not None else current.label,
            amount=amount if amount is not None else entry_amount(current),
        )
        save_book(store, replace_entries(book, sheet.id, entries))
        logger.info("edited entry %s in sheet %s", current.id, sheet.id)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Entry {short_id(current.id)} updated")


def copy_command(
    entry_id: str,
    entry_date: str | None = None,
    entry_time: str | None = None,
    sheet_ref: str | None = None,
) -> None:
    """Add a new entry with the same kind, label and amount as an existing one."""
    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
        sheet = resolve_sheet(book, sheet_ref)

        source = find_entry(sheet.entries, entry_id)
        if source is None:
            raise ValidationError(f"Entry not found in '{sheet.name}': {entry_id}")

        hour, minute = parse_entry_time(entry_time) if entry_time else (source.hour, source.minute)
        entry = make_entry(
            parse_date_option(entry_date) if entry_date else source.date,
            hour,
            minute,
            source.kind,
            source.label,
            entry_amount(source),
        )
        save_book(store, replace_entries(book, sheet.id, add_entry(sheet.entries, entry)))
        save_ledger_cursor(store, next_entry_slot(entry.date, entry.hour, entry.minute))
        logger.info("copied entry %s to %s", source.id, entry.id)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Copied '{entry.label}' to {entry.date} {format_time(entry.hour, entry.minute)}")


def delete_command(entry_id: str, sheet_ref: str | None = None) -> None:
    """Delete an entry. The deletion can be reverted with 'ledgerdesk undo'."""
    try:
        store = open_store()
        settings = load_settings()
        book = load_book(store, settings["default_sheet_name"])
        sheet = resolve_sheet(book, sheet_ref)

        entries, removed = delete_entry(sheet.entries, entry_id)
        history = push(load_undo(store), entry_removed(sheet.id, removed), settings["undo"]["depth"])

        save_book(store, replace_entries(book, sheet.id, entries))
        save_undo(store, history)
        logger.info("deleted entry %s from sheet %s", removed.id, sheet.id)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Deleted '{removed.label}' ({format_money(entry_amount(removed))})")
    console.print("[dim]Use 'ledgerdesk undo' to restore it[/dim]")
