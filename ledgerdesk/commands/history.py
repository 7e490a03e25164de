"""Undo command: restores whatever the most recent deletion removed."""

import sqlite3

from rich.table import Table

from ledgerdesk.commands.common import console, fail
from ledgerdesk.config import load_settings
from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.undo import pop, undo_ledger, undo_schedules
from ledgerdesk.logging_setup import get_logger
from ledgerdesk.store import load_book, load_schedules, load_undo, open_store, save_book, save_schedules, save_undo

logger = get_logger("ledgerdesk.commands.history")


def undo_command() -> None:
    """Revert the most recent deletion (entry, sheet, schedule or day)."""
    try:
        store = open_store()
        history, record = pop(load_undo(store))

        if record is None:
            console.print("[yellow]Nothing to undo[/yellow]")
            return

        if record.kind == "schedule":
            save_schedules(store, undo_schedules(load_schedules(store), record))
        else:
            book = load_book(store, load_settings()["default_sheet_name"])
            save_book(store, undo_ledger(book, record))

        save_undo(store, history)
        logger.info("undid %s", record.description)

    except ValidationError as e:
        fail(f"Cannot undo: {e}")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Undone: {record.description}")
    if history:
        console.print(f"[dim]{len(history)} more step(s) can be undone[/dim]")


def history_command() -> None:
    """List the deletions that can still be undone, most recent first."""
    try:
        history = load_undo(open_store())
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if not history:
        console.print("[yellow]Nothing to undo[/yellow]")
        return

    table = Table(title="Undo history")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Area", style="cyan")
    table.add_column("Action")

    for idx, record in enumerate(reversed(history), 1):
        area = "calendar" if record.kind == "schedule" else "ledger"
        table.add_row(str(idx), area, record.description)

    console.print(table)
