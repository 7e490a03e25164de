"""Tests for ledgerdesk.domain.sheets pure functions."""

import pytest

from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.ledger import derive_view, make_entry
from ledgerdesk.domain.models import EXPENSE, INCOME
from ledgerdesk.domain.sheets import (
    DEFAULT_SHEET_NAME,
    Sheet,
    active_sheet,
    create_sheet,
    delete_sheet,
    find_sheet,
    new_book,
    rename_sheet,
    replace_entries,
    restore_book,
    set_active,
)


class TestNewBook:
    """Tests for new_book and restore_book."""

    def test_single_default_sheet(self) -> None:
        """Should start with one active sheet under the default name."""
        book = new_book()

        assert len(book.sheets) == 1
        assert active_sheet(book).name == DEFAULT_SHEET_NAME
        assert active_sheet(book).entries == ()

    def test_restore_empty_makes_default(self) -> None:
        """Should fall back to a fresh book when nothing was stored."""
        book = restore_book([], None, "General")

        assert [s.name for s in book.sheets] == ["General"]

    def test_restore_unknown_active_picks_first(self) -> None:
        """Should activate the first sheet when the stored id is stale."""
        sheets = [Sheet(id="a", name="A"), Sheet(id="b", name="B")]

        book = restore_book(sheets, "gone")

        assert book.active_id == "a"

    def test_restore_keeps_active(self) -> None:
        sheets = [Sheet(id="a", name="A"), Sheet(id="b", name="B")]

        assert restore_book(sheets, "b").active_id == "b"


class TestCreateAndRename:
    """Tests for create_sheet and rename_sheet."""

    def test_create_makes_active(self) -> None:
        """Should append an empty sheet and switch to it."""
        book = create_sheet(new_book(), "Events")

        assert [s.name for s in book.sheets] == [DEFAULT_SHEET_NAME, "Events"]
        assert active_sheet(book).name == "Events"

    def test_create_blank_rejected(self) -> None:
        with pytest.raises(ValidationError):
            create_sheet(new_book(), "  ")

    def test_rename(self) -> None:
        """Should change only the target sheet's name."""
        book = create_sheet(new_book(), "Events")
        target = book.sheets[0]

        renamed = rename_sheet(book, target.id, "Operations")

        assert [s.name for s in renamed.sheets] == ["Operations", "Events"]
        assert renamed.active_id == book.active_id

    def test_rename_blank_leaves_book(self) -> None:
        """Should refuse a blank name and leave the input untouched."""
        book = new_book()
        original = book.sheets[0].name

        with pytest.raises(ValidationError, match="cannot be blank"):
            rename_sheet(book, book.active_id, "   ")

        assert book.sheets[0].name == original


class TestDeleteSheet:
    """Tests for delete_sheet."""

    def test_last_sheet_cannot_be_deleted(self) -> None:
        """Should always keep at least one sheet."""
        book = new_book()

        with pytest.raises(ValidationError, match="At least one sheet"):
            delete_sheet(book, book.active_id)

        assert len(book.sheets) == 1

    def test_delete_activates_first_remaining(self) -> None:
        """Should move the active selection to the first sheet left."""
        book = create_sheet(create_sheet(new_book(), "B"), "C")
        b = find_sheet(book, "B")

        book, removed = delete_sheet(book, book.active_id)

        assert removed.name == "C"
        assert [s.name for s in book.sheets] == [DEFAULT_SHEET_NAME, "B"]
        assert book.active_id == book.sheets[0].id
        assert b in book.sheets

    def test_delete_removes_entries_with_sheet(self) -> None:
        """Should hand back the sheet together with its entries."""
        book = create_sheet(new_book(), "Events")
        entry = make_entry("2026-03-01", 9, 0, INCOME, "Dues", 1000)
        book = replace_entries(book, book.active_id, (entry,))

        _, removed = delete_sheet(book, book.active_id)

        assert removed.entries == (entry,)


class TestFindAndActivate:
    """Tests for find_sheet and set_active."""

    def test_find_by_name_index_and_prefix(self) -> None:
        book = create_sheet(new_book(), "Events")
        events = book.sheets[1]

        assert find_sheet(book, "Events") == events
        assert find_sheet(book, "2") == events
        assert find_sheet(book, events.id[:8]) == events

    def test_find_unknown(self) -> None:
        with pytest.raises(ValidationError, match="Sheet not found"):
            find_sheet(new_book(), "Nope")

    def test_set_active(self) -> None:
        book = create_sheet(new_book(), "Events")
        first = book.sheets[0]

        assert set_active(book, first.id).active_id == first.id


class TestSheetIsolation:
    """Balances are computed per sheet."""

    def test_entries_do_not_leak_between_sheets(self) -> None:
        """Should keep each sheet's running balance independent."""
        book = create_sheet(new_book(), "Events")
        first, second = book.sheets
        book = replace_entries(book, first.id, (make_entry("2026-03-01", 9, 0, INCOME, "Dues", 1000),))
        book = replace_entries(book, second.id, (make_entry("2026-03-01", 9, 0, EXPENSE, "Hall", 300),))

        first, second = book.sheets

        assert derive_view(first.entries)[-1].balance == 1000
        assert derive_view(second.entries)[-1].balance == -300
