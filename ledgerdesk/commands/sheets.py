"""Sheet management commands (list, new, rename, delete, use)."""

import sqlite3

import typer
from rich.table import Table

from ledgerdesk.commands.common import console, fail, short_id
from ledgerdesk.config import load_settings
from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.ledger import derive_view, format_money, summarize
from ledgerdesk.domain.sheets import create_sheet, delete_sheet, find_sheet, rename_sheet, set_active
from ledgerdesk.domain.undo import push, sheet_removed
from ledgerdesk.logging_setup import get_logger
from ledgerdesk.store import load_book, load_undo, open_store, save_book, save_undo

logger = get_logger("ledgerdesk.commands.sheets")


def list_command() -> None:
    """List sheets, marking the active one."""
    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    table = Table(title="Sheets")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Entries", justify="right")
    table.add_column("Balance", justify="right", style="bold cyan")
    table.add_column("Active", justify="center")

    for idx, sheet in enumerate(book.sheets, 1):
        balance = summarize(derive_view(sheet.entries)).net_balance
        table.add_row(
            str(idx),
            short_id(sheet.id),
            sheet.name,
            str(len(sheet.entries)),
            format_money(balance),
            "✓" if sheet.id == book.active_id else "",
        )

    console.print(table)


def new_command(name: str) -> None:
    """Create a sheet and make it active."""
    try:
        store = open_store()
        book = create_sheet(load_book(store, load_settings()["default_sheet_name"]), name)
        save_book(store, book)
        logger.info("created sheet %s", book.active_id)
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Created sheet '{name}' (now active)")


def rename_command(sheet_ref: str, new_name: str) -> None:
    """Rename a sheet. Blank names are refused."""
    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
        sheet = find_sheet(book, sheet_ref)
        save_book(store, rename_sheet(book, sheet.id, new_name))
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Renamed '{sheet.name}' to '{new_name}'")


def delete_command(sheet_ref: str, yes: bool = False) -> None:
    """Delete a sheet with all of its entries. The last sheet cannot be deleted."""
    try:
        store = open_store()
        settings = load_settings()
        book = load_book(store, settings["default_sheet_name"])
        sheet = find_sheet(book, sheet_ref)

        if len(book.sheets) <= 1:
            raise ValidationError("At least one sheet is required")

        if not yes and not typer.confirm(f"Delete sheet '{sheet.name}' and its {len(sheet.entries)} entries?"):
            console.print("[dim]Cancelled[/dim]")
            return

        book, removed = delete_sheet(book, sheet.id)
        save_book(store, book)
        save_undo(store, push(load_undo(store), sheet_removed(removed), settings["undo"]["depth"]))
        logger.info("deleted sheet %s", removed.id)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    active = find_sheet(book, book.active_id)
    console.print(f"[green]✓[/green] Deleted sheet '{removed.name}'")
    console.print(f"[dim]Active sheet is now '{active.name}'. Use 'ledgerdesk undo' to restore.[/dim]")


def use_command(sheet_ref: str) -> None:
    """Make a sheet active."""
    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
        sheet = find_sheet(book, sheet_ref)
        save_book(store, set_active(book, sheet.id))
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Active sheet: {sheet.name}")
