"""Calendar commands (day, month, add, edit, delete, copy, clear)."""

import sqlite3

import typer
from rich.table import Table

from ledgerdesk.commands.common import console, fail, parse_date_option, short_id
from ledgerdesk.config import load_settings
from ledgerdesk.dates import current_month, month_range
from ledgerdesk.domain.calendar_days import (
    copy_or_paste_day,
    delete_day,
    events_by_date,
    holiday_label,
    in_month,
    is_red_day,
    month_grid,
)
from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.models import Month
from ledgerdesk.domain.schedule import DayEditor, ScheduleEvent, events_on, find_event
from ledgerdesk.domain.undo import events_removed, push
from ledgerdesk.logging_setup import get_logger
from ledgerdesk.store import (
    load_clipboard,
    load_schedules,
    load_undo,
    open_store,
    save_clipboard,
    save_schedules,
    save_undo,
)

logger = get_logger("ledgerdesk.commands.schedule")

WEEKDAY_HEADERS = ("일", "월", "화", "수", "목", "금", "토")


def describe(event: ScheduleEvent) -> str:
    return f"{event.start_time}-{event.end_time} {event.title or '(untitled)'}"


def render_day(day: str, events: list[ScheduleEvent]) -> None:
    label = holiday_label(day)
    title = f"{day} ({label})" if label else day

    if not events:
        console.print(f"[yellow]No schedules on {title}[/yellow]")
        return

    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Title", style="yellow")

    for event in events:
        table.add_row(short_id(event.id), event.start_time, event.end_time, event.title)

    console.print(table)


def day_command(day: str) -> None:
    """Show the schedules on a date."""
    try:
        day_value = parse_date_option(day)
        schedules = load_schedules(open_store())
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    render_day(day_value, events_on(schedules, day_value))


def month_command(month: str | None = None) -> None:
    """Show a month grid with holidays and schedule counts."""
    target = Month(month or current_month())

    try:
        _, _, label = month_range(target)
        schedules = load_schedules(open_store())
    except ValueError:
        fail(f"Invalid month '{month}' (use YYYY-MM)")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    weeks = month_grid(target)
    counts = events_by_date(schedules, [day for week in weeks for day in week])

    table = Table(title=label, show_lines=True)
    for idx, name in enumerate(WEEKDAY_HEADERS):
        table.add_column(name, justify="left", style="red" if idx == 0 else None, min_width=8)

    for week in weeks:
        cells = []
        for day in week:
            if not in_month(day, target):
                cells.append("")
                continue
            number = str(int(day[8:]))
            text = f"[bold red]{number}[/bold red]" if is_red_day(day) else f"[bold]{number}[/bold]"
            holiday = holiday_label(day)
            if holiday:
                text += f"\n[red]{holiday}[/red]"
            if counts[day]:
                text += f"\n[cyan]{len(counts[day])}건[/cyan]"
            cells.append(text)
        table.add_row(*cells)

    console.print(table)


def add_command(
    day: str,
    title: str = "",
    start_time: str | None = None,
    end_time: str | None = None,
) -> None:
    """Add a schedule to a date.

    Without a start time, the new schedule begins where the latest one on
    that date ends (or at the configured default start). The end defaults
    to one hour after the start.
    """
    try:
        day_value = parse_date_option(day)
        store = open_store()
        editor = DayEditor(load_schedules(store), day_value, load_settings()["default_start_time"])

        event = editor.add_event(title)
        if start_time:
            event = editor.change_start(event.id, start_time)
        if end_time:
            event = editor.change_end(event.id, end_time)

        save_schedules(store, editor.confirm(event.id))
        logger.info("added schedule %s on %s", event.id, day_value)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Added {day_value} {describe(event)}")
    console.print(f"  [dim]ID: {short_id(event.id)}[/dim]")


def edit_command(
    event_id: str,
    start_time: str | None = None,
    end_time: str | None = None,
    title: str | None = None,
) -> None:
    """Change a schedule's times or title.

    A new start time resets the end to one hour later, then an explicit end
    time is applied on top.
    """
    try:
        store = open_store()
        schedules = load_schedules(store)
        current = find_event(schedules, event_id)

        editor = DayEditor(schedules, current.date, load_settings()["default_start_time"])
        event = editor.begin_edit(current.id)
        if start_time:
            event = editor.change_start(event.id, start_time)
        if end_time:
            event = editor.change_end(event.id, end_time)
        if title is not None:
            event = editor.change_title(event.id, title)

        save_schedules(store, editor.confirm(event.id))
        logger.info("edited schedule %s", event.id)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Updated {event.date} {describe(event)}")


def delete_command(event_id: str) -> None:
    """Delete a schedule. The deletion can be reverted with 'ledgerdesk undo'."""
    try:
        store = open_store()
        settings = load_settings()
        schedules = load_schedules(store)
        current = find_event(schedules, event_id)

        editor = DayEditor(schedules, current.date, settings["default_start_time"])
        remaining, removed = editor.remove_event(current.id)

        record = events_removed([removed], f"delete schedule '{removed.title or removed.start_time}'")
        save_schedules(store, remaining)
        save_undo(store, push(load_undo(store), record, settings["undo"]["depth"]))
        logger.info("deleted schedule %s", removed.id)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Deleted {removed.date} {describe(removed)}")
    console.print("[dim]Use 'ledgerdesk undo' to restore it[/dim]")


def copy_command(day: str) -> None:
    """Copy a day's schedules, or paste the copied ones onto an empty day."""
    try:
        day_value = parse_date_option(day)
        store = open_store()
        schedules, clipboard, action = copy_or_paste_day(load_schedules(store), load_clipboard(store), day_value)

        if action == "copied":
            save_clipboard(store, clipboard)
        elif action == "pasted":
            save_schedules(store, schedules)
        logger.info("calendar %s on %s", action, day_value)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if action == "copied":
        console.print(f"[green]✓[/green] Copied {len(clipboard)} schedules from {day_value}")
    elif action == "pasted":
        console.print(f"[green]✓[/green] Pasted {len(clipboard)} schedules onto {day_value}")
    else:
        console.print(f"[yellow]{day_value} is empty and nothing has been copied[/yellow]")


def clear_command(day: str, yes: bool = False) -> None:
    """Delete every schedule on a date."""
    try:
        day_value = parse_date_option(day)
        store = open_store()
        settings = load_settings()
        remaining, removed = delete_day(load_schedules(store), day_value)

        if not removed:
            console.print(f"[yellow]No schedules on {day_value}[/yellow]")
            return

        if not yes and not typer.confirm(f"Delete all {len(removed)} schedules on {day_value}?"):
            console.print("[dim]Cancelled[/dim]")
            return

        save_schedules(store, remaining)
        record = events_removed(removed, f"clear {day_value}")
        save_undo(store, push(load_undo(store), record, settings["undo"]["depth"]))
        logger.info("cleared %d schedules on %s", len(removed), day_value)

    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Deleted {len(removed)} schedules on {day_value}")
    console.print("[dim]Use 'ledgerdesk undo' to restore them[/dim]")
