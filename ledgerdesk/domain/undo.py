"""Undo history shared by the ledger and the calendar.

Every destructive operation (deleting a ledger entry, a sheet, a schedule
event, or a whole calendar day) pushes an UndoRecord holding what it
removed. Undoing pops the most recent record and puts the removed data
back. The history is bounded; the oldest records fall off first.
"""

from dataclasses import dataclass, replace
from typing import Literal

from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.ledger import LedgerEntry, restore_entries
from ledgerdesk.domain.schedule import ScheduleEvent, validate_event
from ledgerdesk.domain.sheets import Sheet, SheetBook, get_sheet, replace_entries

UndoKind = Literal["entry", "sheet", "schedule"]

DEFAULT_DEPTH = 20


@dataclass(frozen=True)
class UndoRecord:
    """Immutable record of one destructive operation."""

    kind: UndoKind
    description: str
    sheet_id: str | None = None
    sheet: Sheet | None = None
    entries: tuple[LedgerEntry, ...] = ()
    events: tuple[ScheduleEvent, ...] = ()


def entry_removed(sheet_id: str, entry: LedgerEntry) -> UndoRecord:
    return UndoRecord(
        kind="entry",
        description=f"delete entry '{entry.label}'",
        sheet_id=sheet_id,
        entries=(entry,),
    )


def sheet_removed(sheet: Sheet) -> UndoRecord:
    return UndoRecord(kind="sheet", description=f"delete sheet '{sheet.name}'", sheet_id=sheet.id, sheet=sheet)


def events_removed(events: list[ScheduleEvent], description: str) -> UndoRecord:
    return UndoRecord(kind="schedule", description=description, events=tuple(events))


def push(history: tuple[UndoRecord, ...], record: UndoRecord, depth: int = DEFAULT_DEPTH) -> tuple[UndoRecord, ...]:
    """Push a record, dropping the oldest beyond the depth limit."""
    history = (*history, record)
    if depth > 0 and len(history) > depth:
        history = history[-depth:]
    return history


def pop(history: tuple[UndoRecord, ...]) -> tuple[tuple[UndoRecord, ...], UndoRecord | None]:
    """Pop the most recent record.

    Returns:
        Tuple of (remaining_history, record), record is None when empty.
    """
    if not history:
        return history, None
    return history[:-1], history[-1]


def undo_ledger(book: SheetBook, record: UndoRecord) -> SheetBook:
    """Restore removed ledger data into a sheet book.

    Raises:
        ValidationError: If the entry's sheet no longer exists.
    """
    if record.kind == "sheet" and record.sheet is not None:
        if any(sheet.id == record.sheet.id for sheet in book.sheets):
            return book
        return replace(book, sheets=(*book.sheets, record.sheet), active_id=record.sheet.id)

    if record.sheet_id is None:
        raise ValidationError("Nothing to restore")

    sheet = get_sheet(book, record.sheet_id)
    return replace_entries(book, sheet.id, restore_entries(sheet.entries, list(record.entries)))


def undo_schedules(schedules: list[ScheduleEvent], record: UndoRecord) -> list[ScheduleEvent]:
    """Restore removed events, skipping ids that are already present.

    Each restored event is checked against the current schedules and the
    events restored before it.

    Raises:
        ValidationError: If a restored event would overlap another one; the
            schedules are left as they were.
    """
    present = {event.id for event in schedules}
    restored = list(schedules)

    for event in record.events:
        if event.id in present:
            continue
        is_valid, error = validate_event(event, restored)
        if not is_valid:
            raise ValidationError(f"{event.date} {event.start_time}-{event.end_time}: {error}")
        restored.append(event)

    return restored
