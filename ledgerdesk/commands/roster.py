"""Member roster, note and title commands."""

import sqlite3
from datetime import datetime
from typing import Any

from rich.table import Table

from ledgerdesk.commands.common import console, fail, parse_date_option, short_id
from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.roster import (
    add_member,
    add_note,
    delete_member,
    delete_note,
    notes_newest_first,
    toggle_member_flag,
    update_member,
    update_note,
)
from ledgerdesk.logging_setup import get_logger
from ledgerdesk.store import load_members, load_notes, load_title, open_store, save_members, save_notes, save_title
from ledgerdesk.store.workspace import APP_TITLE_KEY, NOTE_TITLE_KEY

logger = get_logger("ledgerdesk.commands.roster")

TITLE_KEYS = {"app": APP_TITLE_KEY, "note": NOTE_TITLE_KEY}


def member_details(
    branch: str | None = None,
    position: str | None = None,
    phone: str | None = None,
    address: str | None = None,
    joined: str | None = None,
    car_number: str | None = None,
    memo: str | None = None,
) -> dict[str, Any]:
    """Collect the member options that were actually given."""
    details = {
        "branch": branch,
        "position": position,
        "phone": phone,
        "address": address,
        "joined": parse_date_option(joined) if joined else None,
        "car_number": car_number,
        "memo": memo,
    }
    return {key: value for key, value in details.items() if value is not None}


def list_members_command(search: str | None = None) -> None:
    """List members ordered by serial number."""
    try:
        members = load_members(open_store())
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if search:
        needle = search.lower()
        members = [m for m in members if needle in m.name.lower() or needle in m.branch.lower()]

    if not members:
        console.print("[yellow]No members found[/yellow]")
        return

    table = Table(title=f"Members ({len(members)})")
    table.add_column("SN", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Branch")
    table.add_column("Position")
    table.add_column("Phone")
    table.add_column("Joined", style="dim")
    table.add_column("Fee", justify="center")
    table.add_column("Attend", justify="center")
    table.add_column("Memo", style="dim")

    for member in sorted(members, key=lambda m: m.sn):
        table.add_row(
            str(member.sn),
            member.name,
            member.branch,
            member.position,
            member.phone,
            member.joined,
            "✓" if member.fee else "○",
            "✓" if member.attendance else "○",
            member.memo,
        )

    console.print(table)


def add_member_command(name: str, **options: str | None) -> None:
    """Add a member with the next serial number."""
    try:
        details = member_details(**options)
        store = open_store()
        members, member = add_member(load_members(store), name, **details)
        save_members(store, members)
        logger.info("added member %s", member.id)
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Added member #{member.sn} {member.name}")


def edit_member_command(ref: str, name: str | None = None, **options: str | None) -> None:
    """Change a member's fields; omitted fields are kept."""
    try:
        changes = member_details(**options)
        if name is not None:
            changes["name"] = name
        if not changes:
            raise ValidationError("Nothing to change")

        store = open_store()
        members, member = update_member(load_members(store), ref, changes)
        save_members(store, members)
        logger.info("updated member %s: %s", member.id, ", ".join(sorted(changes)))
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Updated member #{member.sn} {member.name}")


def toggle_member_command(ref: str, flag: str) -> None:
    """Flip a member's fee or attendance check."""
    try:
        store = open_store()
        members, member = toggle_member_flag(load_members(store), ref, flag)
        save_members(store, members)
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    state = "✓" if getattr(member, flag) else "○"
    console.print(f"[green]✓[/green] #{member.sn} {member.name} {flag}: {state}")


def delete_member_command(ref: str) -> None:
    try:
        store = open_store()
        members, member = delete_member(load_members(store), ref)
        save_members(store, members)
        logger.info("deleted member %s", member.id)
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Deleted member #{member.sn} {member.name}")


def list_notes_command() -> None:
    """List notes, newest first."""
    try:
        store = open_store()
        notes = notes_newest_first(load_notes(store))
        heading = load_title(store, NOTE_TITLE_KEY)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if not notes:
        console.print(f"[yellow]No notes in {heading}[/yellow]")
        return

    table = Table(title=heading)
    table.add_column("ID", style="dim")
    table.add_column("Created", style="cyan")
    table.add_column("Content")

    for note in notes:
        table.add_row(short_id(note.id), note.created_at, note.content)

    console.print(table)


def add_note_command(content: str) -> None:
    try:
        store = open_store()
        notes, note = add_note(load_notes(store), content, datetime.now())
        save_notes(store, notes)
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Note saved ({note.created_at})")
    console.print(f"  [dim]ID: {short_id(note.id)}[/dim]")


def edit_note_command(ref: str, content: str) -> None:
    try:
        store = open_store()
        notes, note = update_note(load_notes(store), ref, content)
        save_notes(store, notes)
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Note {short_id(note.id)} updated")


def delete_note_command(ref: str) -> None:
    try:
        store = open_store()
        notes, note = delete_note(load_notes(store), ref)
        save_notes(store, notes)
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓[/green] Note {short_id(note.id)} deleted")


def title_command(which: str, new_title: str | None = None) -> None:
    """Show or change the application or note-list title."""
    key = TITLE_KEYS.get(which)
    if key is None:
        fail(f"Unknown title '{which}' (use app or note)")

    try:
        store = open_store()
        if new_title is not None:
            if not new_title.strip():
                raise ValidationError("Title cannot be blank")
            save_title(store, key, new_title.strip())
        current = load_title(store, key)
    except ValidationError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"{which} title: [cyan]{current}[/cyan]")
