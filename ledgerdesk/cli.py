"""CLI entry point for ledgerdesk."""

import typer

from ledgerdesk.commands import admin, history, ledger, roster, schedule, sheets, transfer
from ledgerdesk.config import load_settings
from ledgerdesk.logging_setup import configure_logging

app = typer.Typer(
    name="ledgerdesk",
    help="Ledger sheets with running balance, a schedule calendar, and a member roster",
    add_completion=False,
)
sheet_app = typer.Typer(help="Manage ledger sheets", no_args_is_help=True)
ledger_app = typer.Typer(help="Record income and expenses", no_args_is_help=True)
schedule_app = typer.Typer(help="Plan the calendar", no_args_is_help=True)
member_app = typer.Typer(help="Manage the member roster", no_args_is_help=True)
note_app = typer.Typer(help="Keep short notes", no_args_is_help=True)
config_app = typer.Typer(help="Show or change settings", no_args_is_help=True)

app.add_typer(sheet_app, name="sheet")
app.add_typer(ledger_app, name="ledger")
app.add_typer(schedule_app, name="schedule")
app.add_typer(member_app, name="member")
app.add_typer(note_app, name="note")
app.add_typer(config_app, name="config")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diagnostics to stderr"),
) -> None:
    """Ledger sheets with running balance, a schedule calendar, and a member roster."""
    configure_logging("DEBUG" if verbose else None, default=load_settings()["logging"]["level"])


# Admin


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Recreate the database and config"),
) -> None:
    """Initialize the ledgerdesk database and configuration."""
    admin.init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.ledgerdesk/backups)"),
) -> None:
    """Backup your database and configuration files."""
    admin.backup_command(output_dir)


@config_app.command(name="show")
def config_show() -> None:
    """Show effective settings."""
    admin.config_show_command()


@config_app.command(name="set")
def config_set(key: str, value: str) -> None:
    """Set a value such as 'export.headers en' or 'undo.depth 50'."""
    admin.config_set_command(key, value)


@app.command(name="undo")
def undo() -> None:
    """Undo the most recent deletion (entry, sheet, schedule or day)."""
    history.undo_command()


@app.command(name="history")
def undo_history() -> None:
    """List deletions that can be undone."""
    history.history_command()


@app.command(name="title")
def title(
    which: str = typer.Argument("app", help="'app' or 'note'"),
    new_title: str = typer.Option(None, "--set", help="New title"),
) -> None:
    """Show or change the application or note-list title."""
    roster.title_command(which, new_title)


# Sheets


@sheet_app.command(name="list")
def sheet_list() -> None:
    """List sheets with their balances."""
    sheets.list_command()


@sheet_app.command(name="new")
def sheet_new(name: str) -> None:
    """Create a sheet and make it active."""
    sheets.new_command(name)


@sheet_app.command(name="rename")
def sheet_rename(sheet: str, new_name: str) -> None:
    """Rename a sheet (by name, index, or ID)."""
    sheets.rename_command(sheet, new_name)


@sheet_app.command(name="delete")
def sheet_delete(
    sheet: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete a sheet and its entries."""
    sheets.delete_command(sheet, yes)


@sheet_app.command(name="use")
def sheet_use(sheet: str) -> None:
    """Switch the active sheet."""
    sheets.use_command(sheet)


# Ledger


@ledger_app.command(name="list")
def ledger_list(
    sheet: str = typer.Option(None, "--sheet", "-s", help="Sheet (default: active)"),
) -> None:
    """Show entries with running balance."""
    ledger.list_command(sheet)


@ledger_app.command(name="summary")
def ledger_summary(
    all_sheets: bool = typer.Option(False, "--all", "-a", help="Summarize every sheet"),
) -> None:
    """Show total income, expense and balance."""
    ledger.summary_command(all_sheets)


@ledger_app.command(name="add")
def ledger_add(
    label: str,
    amount: int,
    kind: str = typer.Option("income", "--kind", "-k", help="income or expense"),
    entry_date: str = typer.Option(None, "--date", "-d", help="Date (default: suggested slot)"),
    entry_time: str = typer.Option(None, "--time", "-t", help="Time HH:MM, minutes in steps of 10"),
    sheet: str = typer.Option(None, "--sheet", "-s", help="Sheet (default: active)"),
) -> None:
    """Add an income or expense entry."""
    ledger.add_command(label, amount, kind, entry_date, entry_time, sheet)


@ledger_app.command(name="edit")
def ledger_edit(
    entry_id: str,
    label: str = typer.Option(None, "--label", "-l", help="New label"),
    amount: int = typer.Option(None, "--amount", "-a", help="New amount"),
    kind: str = typer.Option(None, "--kind", "-k", help="income or expense"),
    entry_date: str = typer.Option(None, "--date", "-d", help="New date"),
    entry_time: str = typer.Option(None, "--time", "-t", help="New time HH:MM"),
    sheet: str = typer.Option(None, "--sheet", "-s", help="Sheet (default: active)"),
) -> None:
    """Edit an entry."""
    ledger.edit_command(entry_id, label, amount, kind, entry_date, entry_time, sheet)


@ledger_app.command(name="copy")
def ledger_copy(
    entry_id: str,
    entry_date: str = typer.Option(None, "--date", "-d", help="Date of the copy"),
    entry_time: str = typer.Option(None, "--time", "-t", help="Time of the copy HH:MM"),
    sheet: str = typer.Option(None, "--sheet", "-s", help="Sheet (default: active)"),
) -> None:
    """Add a copy of an entry."""
    ledger.copy_command(entry_id, entry_date, entry_time, sheet)


@ledger_app.command(name="delete")
def ledger_delete(
    entry_id: str,
    sheet: str = typer.Option(None, "--sheet", "-s", help="Sheet (default: active)"),
) -> None:
    """Delete an entry."""
    ledger.delete_command(entry_id, sheet)


@ledger_app.command(name="export")
def ledger_export(
    path: str,
    all_sheets: bool = typer.Option(False, "--all", "-a", help="Export every sheet, one tab each"),
    sheet: str = typer.Option(None, "--sheet", "-s", help="Sheet (default: active)"),
) -> None:
    """Export entries to .xlsx or .csv."""
    transfer.export_ledger_command(path, all_sheets, sheet)


@ledger_app.command(name="import")
def ledger_import(
    path: str,
    mode: str = typer.Option(None, "--mode", "-m", help="overwrite or append (asks when omitted)"),
    sheet: str = typer.Option(None, "--sheet", "-s", help="Sheet (default: active)"),
) -> None:
    """Import entries from .xlsx or .csv."""
    transfer.import_ledger_command(path, mode, sheet)


# Schedule


@schedule_app.command(name="day")
def schedule_day(day: str = typer.Argument("today", help="Date")) -> None:
    """Show the schedules on a date."""
    schedule.day_command(day)


@schedule_app.command(name="month")
def schedule_month(month: str = typer.Argument(None, help="Month (YYYY-MM, default: current)")) -> None:
    """Show a month calendar."""
    schedule.month_command(month)


@schedule_app.command(name="add")
def schedule_add(
    day: str,
    title: str = typer.Option("", "--title", "-t", help="Title"),
    start_time: str = typer.Option(None, "--start", help="Start HH:MM (default: after the latest schedule)"),
    end_time: str = typer.Option(None, "--end", help="End HH:MM (default: start + 1h, 00:00 = midnight)"),
) -> None:
    """Add a schedule to a date."""
    schedule.add_command(day, title, start_time, end_time)


@schedule_app.command(name="edit")
def schedule_edit(
    event_id: str,
    start_time: str = typer.Option(None, "--start", help="New start HH:MM (resets end to start + 1h)"),
    end_time: str = typer.Option(None, "--end", help="New end HH:MM"),
    title: str = typer.Option(None, "--title", "-t", help="New title"),
) -> None:
    """Edit a schedule."""
    schedule.edit_command(event_id, start_time, end_time, title)


@schedule_app.command(name="delete")
def schedule_delete(event_id: str) -> None:
    """Delete a schedule."""
    schedule.delete_command(event_id)


@schedule_app.command(name="copy")
def schedule_copy(day: str) -> None:
    """Copy a day's schedules, or paste them onto an empty day."""
    schedule.copy_command(day)


@schedule_app.command(name="clear")
def schedule_clear(
    day: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every schedule on a date."""
    schedule.clear_command(day, yes)


@schedule_app.command(name="export")
def schedule_export(path: str) -> None:
    """Export all schedules to .xlsx or .csv."""
    transfer.export_schedules_command(path)


@schedule_app.command(name="import")
def schedule_import(path: str) -> None:
    """Import schedules from .xlsx or .csv."""
    transfer.import_schedules_command(path)


# Members and notes


@member_app.command(name="list")
def member_list(search: str = typer.Option(None, "--search", help="Filter by name or branch")) -> None:
    """List members."""
    roster.list_members_command(search)


@member_app.command(name="add")
def member_add(
    name: str,
    branch: str = typer.Option(None, "--branch"),
    position: str = typer.Option(None, "--position"),
    phone: str = typer.Option(None, "--phone"),
    address: str = typer.Option(None, "--address"),
    joined: str = typer.Option(None, "--joined", help="Join date"),
    car_number: str = typer.Option(None, "--car"),
    memo: str = typer.Option(None, "--memo"),
) -> None:
    """Add a member."""
    roster.add_member_command(
        name,
        branch=branch,
        position=position,
        phone=phone,
        address=address,
        joined=joined,
        car_number=car_number,
        memo=memo,
    )


@member_app.command(name="edit")
def member_edit(
    member: str,
    name: str = typer.Option(None, "--name"),
    branch: str = typer.Option(None, "--branch"),
    position: str = typer.Option(None, "--position"),
    phone: str = typer.Option(None, "--phone"),
    address: str = typer.Option(None, "--address"),
    joined: str = typer.Option(None, "--joined", help="Join date"),
    car_number: str = typer.Option(None, "--car"),
    memo: str = typer.Option(None, "--memo"),
) -> None:
    """Edit a member (by serial number or ID)."""
    roster.edit_member_command(
        member,
        name,
        branch=branch,
        position=position,
        phone=phone,
        address=address,
        joined=joined,
        car_number=car_number,
        memo=memo,
    )


@member_app.command(name="toggle")
def member_toggle(
    member: str,
    flag: str = typer.Argument(..., help="'fee' or 'attendance'"),
) -> None:
    """Flip a member's fee or attendance check."""
    roster.toggle_member_command(member, flag)


@member_app.command(name="delete")
def member_delete(member: str) -> None:
    """Delete a member."""
    roster.delete_member_command(member)


@note_app.command(name="list")
def note_list() -> None:
    """List notes, newest first."""
    roster.list_notes_command()


@note_app.command(name="add")
def note_add(content: str) -> None:
    """Add a note."""
    roster.add_note_command(content)


@note_app.command(name="edit")
def note_edit(note_id: str, content: str) -> None:
    """Replace a note's content."""
    roster.edit_note_command(note_id, content)


@note_app.command(name="delete")
def note_delete(note_id: str) -> None:
    """Delete a note."""
    roster.delete_note_command(note_id)


if __name__ == "__main__":
    app()
