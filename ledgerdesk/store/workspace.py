"""Typed load/save helpers over a BlobStore.

One key per domain collection. Missing keys load as empty collections (or
a fresh single-sheet book), so a brand new database needs no seeding.
"""

from typing import Any

from ledgerdesk.domain.models import IsoDate
from ledgerdesk.domain.roster import Member, Note
from ledgerdesk.domain.schedule import ScheduleEvent
from ledgerdesk.domain.sheets import DEFAULT_SHEET_NAME, SheetBook, restore_book
from ledgerdesk.domain.undo import UndoRecord
from ledgerdesk.store.blobs import BlobStore
from ledgerdesk.store.codec import (
    event_from_dict,
    event_to_dict,
    member_from_dict,
    member_to_dict,
    note_from_dict,
    note_to_dict,
    sheet_from_dict,
    sheet_to_dict,
    undo_from_dict,
    undo_to_dict,
)

SCHEDULES_KEY = "schedules"
MEMBERS_KEY = "members"
NOTES_KEY = "notes"
SHEETS_KEY = "accounting_sheets"
ACTIVE_SHEET_KEY = "active_sheet"
APP_TITLE_KEY = "app_title"
NOTE_TITLE_KEY = "note_title"
LEDGER_CURSOR_KEY = "ledger_cursor"
CLIPBOARD_KEY = "calendar_clipboard"
UNDO_KEY = "undo"

DEFAULT_APP_TITLE = "Smart Workspace"
DEFAULT_NOTE_TITLE = "Standard Note"


def _load_list(store: BlobStore, key: str) -> list[dict[str, Any]]:
    value = store.load(key)
    return value if isinstance(value, list) else []


def load_book(store: BlobStore, default_name: str = DEFAULT_SHEET_NAME) -> SheetBook:
    sheets = [sheet_from_dict(item) for item in _load_list(store, SHEETS_KEY)]
    return restore_book(sheets, store.load(ACTIVE_SHEET_KEY), default_name)


def save_book(store: BlobStore, book: SheetBook) -> None:
    store.save(SHEETS_KEY, [sheet_to_dict(sheet) for sheet in book.sheets])
    store.save(ACTIVE_SHEET_KEY, book.active_id)


def load_schedules(store: BlobStore) -> list[ScheduleEvent]:
    return [event_from_dict(item) for item in _load_list(store, SCHEDULES_KEY)]


def save_schedules(store: BlobStore, schedules: list[ScheduleEvent]) -> None:
    store.save(SCHEDULES_KEY, [event_to_dict(event) for event in schedules])


def load_members(store: BlobStore) -> list[Member]:
    return [member_from_dict(item) for item in _load_list(store, MEMBERS_KEY)]


def save_members(store: BlobStore, members: list[Member]) -> None:
    store.save(MEMBERS_KEY, [member_to_dict(member) for member in members])


def load_notes(store: BlobStore) -> list[Note]:
    return [note_from_dict(item) for item in _load_list(store, NOTES_KEY)]


def save_notes(store: BlobStore, notes: list[Note]) -> None:
    store.save(NOTES_KEY, [note_to_dict(note) for note in notes])


def load_clipboard(store: BlobStore) -> list[ScheduleEvent]:
    return [event_from_dict(item) for item in _load_list(store, CLIPBOARD_KEY)]


def save_clipboard(store: BlobStore, clipboard: list[ScheduleEvent]) -> None:
    store.save(CLIPBOARD_KEY, [event_to_dict(event) for event in clipboard])


def load_undo(store: BlobStore) -> tuple[UndoRecord, ...]:
    return tuple(undo_from_dict(item) for item in _load_list(store, UNDO_KEY))


def save_undo(store: BlobStore, history: tuple[UndoRecord, ...]) -> None:
    store.save(UNDO_KEY, [undo_to_dict(record) for record in history])


def load_title(store: BlobStore, key: str) -> str:
    value = store.load(key)
    if isinstance(value, str) and value:
        return value
    return DEFAULT_NOTE_TITLE if key == NOTE_TITLE_KEY else DEFAULT_APP_TITLE


def save_title(store: BlobStore, key: str, title: str) -> None:
    store.save(key, title)


def load_ledger_cursor(store: BlobStore) -> tuple[IsoDate, int, int] | None:
    """Suggested date/hour/minute for the next ledger entry, if any."""
    value = store.load(LEDGER_CURSOR_KEY)
    if not isinstance(value, dict):
        return None
    return IsoDate(value["date"]), int(value["hour"]), int(value["minute"])


def save_ledger_cursor(store: BlobStore, cursor: tuple[str, int, int]) -> None:
    entry_date, hour, minute = cursor
    store.save(LEDGER_CURSOR_KEY, {"date": entry_date, "hour": hour, "minute": minute})
