"""Spreadsheet import and export for the ledger and the calendar."""

import sqlite3
from pathlib import Path

import typer

from ledgerdesk.commands.common import console, fail
from ledgerdesk.config import load_settings
from ledgerdesk.dates import today
from ledgerdesk.domain.errors import ImportFormatError, ValidationError
from ledgerdesk.domain.ledger import derive_view
from ledgerdesk.domain.sheets import active_sheet, find_sheet, replace_entries
from ledgerdesk.domain.tabular import (
    LEDGER_HEADERS,
    SCHEDULE_HEADERS,
    HeaderStyle,
    ledger_to_rows,
    merge_entries,
    rows_to_entries,
    rows_to_events,
    schedules_to_rows,
)
from ledgerdesk.logging_setup import get_logger
from ledgerdesk.spreadsheet import read_table, write_tables
from ledgerdesk.store import load_book, load_schedules, open_store, save_book, save_schedules

logger = get_logger("ledgerdesk.commands.transfer")


def header_style(settings: dict) -> HeaderStyle:
    """Configured export header language, falling back to Korean."""
    style = settings["export"]["headers"]
    return style if style in LEDGER_HEADERS else "ko"


def export_ledger_command(path: str, all_sheets: bool = False, sheet_ref: str | None = None) -> None:
    """Write a sheet (or every sheet, one tab each) with running balance."""
    output = Path(path).expanduser()

    try:
        store = open_store()
        settings = load_settings()
        book = load_book(store, settings["default_sheet_name"])
        headers = header_style(settings)

        if all_sheets:
            sheets = book.sheets
        else:
            sheets = (find_sheet(book, sheet_ref) if sheet_ref else active_sheet(book),)

        tables = [(sheet.name, ledger_to_rows(derive_view(sheet.entries), headers)) for sheet in sheets]
        write_tables(output, tables, LEDGER_HEADERS[headers])

    except ValueError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except OSError as e:
        fail(f"Export failed: {e}")

    rows = sum(len(s.entries) for s in sheets)
    console.print(f"[green]✓[/green] Exported {rows} entries from {len(sheets)} sheet(s) to {output}")


def import_ledger_command(path: str, mode: str | None = None, sheet_ref: str | None = None) -> None:
    """Read entries from a spreadsheet into a sheet.

    With no mode given, asks whether to overwrite the sheet or append to it.
    Kinds are derived from the amounts; any balance column is ignored.
    """
    source = Path(path).expanduser()

    try:
        store = open_store()
        book = load_book(store, load_settings()["default_sheet_name"])
        sheet = find_sheet(book, sheet_ref) if sheet_ref else active_sheet(book)

        imported = rows_to_entries(read_table(source), today())

        if mode is None:
            overwrite = typer.confirm(
                f"Overwrite the {len(sheet.entries)} entries in '{sheet.name}'? (No appends)", default=False
            )
            mode = "overwrite" if overwrite else "append"

        entries = merge_entries(sheet.entries, imported, mode)
        save_book(store, replace_entries(book, sheet.id, entries))
        logger.info("imported %d entries into sheet %s (%s)", len(imported), sheet.id, mode)

    except ImportFormatError as e:
        logger.debug("import of %s failed: %s", source, e.detail)
        fail(str(e))
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Imported {len(imported)} entries into '{sheet.name}' ({mode})")


def export_schedules_command(path: str) -> None:
    """Write every schedule event, ordered by date and start time."""
    output = Path(path).expanduser()

    try:
        store = open_store()
        headers = header_style(load_settings())
        schedules = load_schedules(store)
        write_tables(output, [("일정", schedules_to_rows(schedules, headers))], SCHEDULE_HEADERS[headers])
    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except OSError as e:
        fail(f"Export failed: {e}")

    console.print(f"[green]✓[/green] Exported {len(schedules)} schedules to {output}")


def import_schedules_command(path: str) -> None:
    """Add events from a spreadsheet, skipping rows that do not fit the calendar."""
    source = Path(path).expanduser()

    try:
        store = open_store()
        schedules = load_schedules(store)
        accepted, skipped = rows_to_events(read_table(source), schedules)
        save_schedules(store, [*schedules, *accepted])
        logger.info("imported %d schedules, skipped %d", len(accepted), skipped)

    except ImportFormatError as e:
        logger.debug("import of %s failed: %s", source, e.detail)
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Imported {len(accepted)} schedules")
    if skipped:
        console.print(f"[yellow]Skipped {skipped} rows (missing date, bad time, or overlap)[/yellow]")
