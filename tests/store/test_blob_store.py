"""Tests for the blob stores and the typed workspace helpers."""

import sqlite3
from datetime import datetime
from pathlib import Path

import pytest

from ledgerdesk.domain.ledger import make_entry
from ledgerdesk.domain.models import EXPENSE, INCOME
from ledgerdesk.domain.roster import add_member, add_note
from ledgerdesk.domain.schedule import ScheduleEvent
from ledgerdesk.domain.sheets import active_sheet, create_sheet, new_book, replace_entries
from ledgerdesk.domain.undo import entry_removed, events_removed, push
from ledgerdesk.store import (
    MemoryBlobStore,
    load_book,
    load_clipboard,
    load_ledger_cursor,
    load_members,
    load_notes,
    load_schedules,
    load_title,
    load_undo,
    open_store,
    save_book,
    save_clipboard,
    save_ledger_cursor,
    save_members,
    save_notes,
    save_schedules,
    save_title,
    save_undo,
)
from ledgerdesk.store.workspace import APP_TITLE_KEY, DEFAULT_NOTE_TITLE, NOTE_TITLE_KEY, SHEETS_KEY


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        return MemoryBlobStore()
    return open_store(tmp_path / "ledgerdesk.db")


class TestBlobStore:
    """Tests shared by both adapters."""

    def test_missing_key(self, store) -> None:
        assert store.load("nothing") is None

    def test_save_replaces(self, store) -> None:
        store.save("k", {"a": 1})
        store.save("k", ["한글", 2])

        assert store.load("k") == ["한글", 2]

    def test_keys(self, store) -> None:
        store.save("b", 1)
        store.save("a", 2)

        assert store.keys() == ["a", "b"]


class TestSqliteBlobStore:
    """Tests specific to the on-disk adapter."""

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        db_path = tmp_path / "data" / "ledgerdesk.db"

        open_store(db_path).save("schedules", [{"id": "a"}])

        assert open_store(db_path).load("schedules") == [{"id": "a"}]

    def test_migrates_old_table(self, tmp_path: Path) -> None:
        """Should add the updated_at column to a database without it."""
        db_path = tmp_path / "old.db"
        conn = sqlite3.connect(db_path)
        conn.execute("CREATE TABLE blobs (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
        conn.execute("INSERT INTO blobs (key, value) VALUES ('notes', '[]')")
        conn.commit()
        conn.close()

        store = open_store(db_path)
        store.save("notes", [{"id": "n"}])

        conn = sqlite3.connect(db_path)
        columns = [row[1] for row in conn.execute("PRAGMA table_info(blobs)")]
        conn.close()
        assert "updated_at" in columns
        assert store.load("notes") == [{"id": "n"}]


class TestWorkspace:
    """Tests for the typed load/save helpers."""

    def test_empty_store_has_default_sheet(self, store) -> None:
        book = load_book(store, "General")

        assert [s.name for s in book.sheets] == ["General"]
        assert load_schedules(store) == []
        assert load_members(store) == []
        assert load_undo(store) == ()
        assert load_ledger_cursor(store) is None

    def test_book_round_trip(self, store) -> None:
        book = create_sheet(new_book(), "Events")
        book = replace_entries(
            book,
            book.active_id,
            (
                make_entry("2026-03-01", 9, 10, INCOME, "Dues", 1000),
                make_entry("2026-03-01", 9, 20, EXPENSE, "Lunch", 400),
            ),
        )

        save_book(store, book)

        assert load_book(store) == book

    def test_balance_is_not_persisted(self, store) -> None:
        book = new_book()
        book = replace_entries(book, book.active_id, (make_entry("2026-03-01", 9, 0, INCOME, "Dues", 1000),))

        save_book(store, book)
        stored_entry = store.load(SHEETS_KEY)[0]["entries"][0]

        assert "balance" not in stored_entry
        assert stored_entry["incomeAmount"] == 1000

    def test_legacy_entry_fields(self, store) -> None:
        """Should read entries written with "item" and Korean kinds."""
        store.save(
            SHEETS_KEY,
            [
                {
                    "id": "s1",
                    "name": "운영비",
                    "entries": [
                        {
                            "id": "e1",
                            "date": "2026-03-01",
                            "hour": 9,
                            "minute": 0,
                            "type": "지출",
                            "item": "Lunch",
                            "incomeAmount": 0,
                            "expenseAmount": 400,
                        },
                    ],
                }
            ],
        )

        entry = active_sheet(load_book(store)).entries[0]

        assert entry.kind == EXPENSE
        assert entry.label == "Lunch"

    def test_entry_without_kind_follows_amounts(self, store) -> None:
        """Should read an entry with no kind field as income when it has income."""
        entries = [
            {"id": "e1", "date": "2026-03-01", "item": "Dues", "incomeAmount": 1000, "expenseAmount": 0},
            {"id": "e2", "date": "2026-03-01", "item": "Lunch", "incomeAmount": 0, "expenseAmount": 400},
        ]
        store.save(SHEETS_KEY, [{"id": "s1", "name": "운영비", "entries": entries}])

        kinds = [e.kind for e in active_sheet(load_book(store)).entries]

        assert kinds == [INCOME, EXPENSE]

    def test_schedules_and_clipboard(self, store) -> None:
        events = [ScheduleEvent(id="a", date="2026-03-10", start_time="23:00", end_time="00:00", title="Late")]

        save_schedules(store, events)
        save_clipboard(store, events)

        assert load_schedules(store) == events
        assert load_clipboard(store) == events
        assert store.load("schedules")[0]["startTime"] == "23:00"

    def test_members_and_notes(self, store) -> None:
        members, _ = add_member([], "Kim", phone="010", car_number="12가3456")
        notes, _ = add_note([], "hello", datetime(2026, 3, 1, 9, 0, 0))

        save_members(store, members)
        save_notes(store, notes)

        assert load_members(store) == members
        assert load_notes(store) == notes

    def test_undo_round_trip(self, store) -> None:
        book = new_book()
        entry = make_entry("2026-03-01", 9, 0, INCOME, "Dues", 1000)
        event = ScheduleEvent(id="a", date="2026-03-10", start_time="09:00", end_time="10:00")
        history = push(push((), entry_removed(book.active_id, entry)), events_removed([event], "clear"))

        save_undo(store, history)

        assert load_undo(store) == history

    def test_titles_default(self, store) -> None:
        assert load_title(store, NOTE_TITLE_KEY) == DEFAULT_NOTE_TITLE

        save_title(store, APP_TITLE_KEY, "Club Desk")

        assert load_title(store, APP_TITLE_KEY) == "Club Desk"

    def test_ledger_cursor(self, store) -> None:
        save_ledger_cursor(store, ("2026-03-01", 10, 0))

        assert load_ledger_cursor(store) == ("2026-03-01", 10, 0)
