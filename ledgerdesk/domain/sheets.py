"""Pure functions for managing named ledger sheets.

A SheetBook always holds at least one sheet and names one of them as
active. Every operation returns a new book; the input is never mutated.
"""

from dataclasses import dataclass, replace

from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.ledger import LedgerEntry
from ledgerdesk.domain.models import new_id

DEFAULT_SHEET_NAME = "운영비"


@dataclass(frozen=True)
class Sheet:
    """Immutable named ledger."""

    id: str
    name: str
    entries: tuple[LedgerEntry, ...] = ()


@dataclass(frozen=True)
class SheetBook:
    """Immutable collection of sheets with an active selection."""

    sheets: tuple[Sheet, ...]
    active_id: str


def new_book(default_name: str = DEFAULT_SHEET_NAME) -> SheetBook:
    """Create a book holding a single empty sheet."""
    sheet = Sheet(id=new_id(), name=default_name)
    return SheetBook(sheets=(sheet,), active_id=sheet.id)


def restore_book(sheets: list[Sheet], active_id: str | None, default_name: str = DEFAULT_SHEET_NAME) -> SheetBook:
    """Rebuild a book from persisted sheets.

    Falls back to a fresh book when nothing was persisted, and to the first
    sheet when the stored active id no longer exists.
    """
    if not sheets:
        return new_book(default_name)

    ids = {sheet.id for sheet in sheets}
    if active_id not in ids:
        active_id = sheets[0].id
    return SheetBook(sheets=tuple(sheets), active_id=active_id)


def get_sheet(book: SheetBook, sheet_id: str) -> Sheet:
    """Return the sheet with the given id.

    Raises:
        ValidationError: If no sheet has that id.
    """
    for sheet in book.sheets:
        if sheet.id == sheet_id:
            return sheet
    raise ValidationError(f"Sheet not found: {sheet_id}")


def active_sheet(book: SheetBook) -> Sheet:
    """Return the active sheet."""
    return get_sheet(book, book.active_id)


def find_sheet(book: SheetBook, ref: str) -> Sheet:
    """Resolve a sheet by id, exact name, or 1-based index.

    Args:
        book: Sheet book to search.
        ref: Sheet id (or unique id prefix), name, or position.

    Returns:
        The matching sheet.

    Raises:
        ValidationError: If nothing matches.
    """
    for sheet in book.sheets:
        if sheet.id == ref or sheet.name == ref:
            return sheet

    if ref.isdigit():
        index = int(ref) - 1
        if 0 <= index < len(book.sheets):
            return book.sheets[index]

    prefixed = [sheet for sheet in book.sheets if sheet.id.startswith(ref)]
    if len(prefixed) == 1:
        return prefixed[0]

    raise ValidationError(f"Sheet not found: {ref}")


def create_sheet(book: SheetBook, name: str) -> SheetBook:
    """Append a new empty sheet and make it active.

    Raises:
        ValidationError: If the name is blank.
    """
    if not name.strip():
        raise ValidationError("Sheet name is required")

    sheet = Sheet(id=new_id(), name=name)
    return SheetBook(sheets=(*book.sheets, sheet), active_id=sheet.id)


def rename_sheet(book: SheetBook, sheet_id: str, new_name: str) -> SheetBook:
    """Rename a sheet.

    Raises:
        ValidationError: If the name is blank or the sheet is unknown.
    """
    if not new_name.strip():
        raise ValidationError("Sheet name cannot be blank")

    target = get_sheet(book, sheet_id)
    sheets = tuple(replace(sheet, name=new_name) if sheet.id == target.id else sheet for sheet in book.sheets)
    return replace(book, sheets=sheets)


def delete_sheet(book: SheetBook, sheet_id: str) -> tuple[SheetBook, Sheet]:
    """Delete a sheet and all of its entries.

    The first remaining sheet becomes active.

    Returns:
        Tuple of (new_book, removed_sheet).

    Raises:
        ValidationError: If this is the last sheet or the sheet is unknown.
    """
    target = get_sheet(book, sheet_id)
    if len(book.sheets) <= 1:
        raise ValidationError("At least one sheet is required")

    remaining = tuple(sheet for sheet in book.sheets if sheet.id != target.id)
    return SheetBook(sheets=remaining, active_id=remaining[0].id), target


def set_active(book: SheetBook, sheet_id: str) -> SheetBook:
    """Make a sheet active.

    Raises:
        ValidationError: If the sheet is unknown.
    """
    target = get_sheet(book, sheet_id)
    return replace(book, active_id=target.id)


def replace_entries(book: SheetBook, sheet_id: str, entries: tuple[LedgerEntry, ...]) -> SheetBook:
    """Swap in a new entry collection for one sheet.

    Raises:
        ValidationError: If the sheet is unknown.
    """
    target = get_sheet(book, sheet_id)
    sheets = tuple(replace(sheet, entries=entries) if sheet.id == target.id else sheet for sheet in book.sheets)
    return replace(book, sheets=sheets)
