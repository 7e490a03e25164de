"""End-to-end tests for the ledgerdesk CLI against a temporary workspace."""

from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from ledgerdesk.cli import app
from ledgerdesk.config import load_settings
from ledgerdesk.domain.ledger import derive_view
from ledgerdesk.domain.sheets import active_sheet, find_sheet
from ledgerdesk.store import load_book, load_members, load_notes, load_schedules, load_undo, open_store

runner = CliRunner()


@pytest.fixture(autouse=True)
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path


def invoke(*args: str):
    return runner.invoke(app, list(args))


def store():
    return open_store()


class TestInit:
    """Tests for init and config."""

    def test_init_creates_database_and_config(self, workspace: Path) -> None:
        result = invoke("init")

        assert result.exit_code == 0
        assert (workspace / "data" / "ledgerdesk" / "ledgerdesk.db").exists()
        assert (workspace / "config" / "ledgerdesk" / "config.toml").exists()

    def test_config_set_and_show(self) -> None:
        assert invoke("config", "set", "export.headers", "en").exit_code == 0

        result = invoke("config", "show")

        assert result.exit_code == 0
        assert "export.headers" in result.output
        assert "en" in result.output

    def test_config_set_unknown_key(self) -> None:
        result = invoke("config", "set", "colour", "blue")

        assert result.exit_code == 1

    def test_config_set_rejects_bad_start_time(self) -> None:
        result = invoke("config", "set", "default_start_time", "abc")

        assert result.exit_code == 1
        assert "Invalid time" in result.output
        assert load_settings()["default_start_time"] == "09:00"

    def test_config_set_normalizes_start_time(self) -> None:
        assert invoke("config", "set", "default_start_time", "8:00").exit_code == 0

        invoke("schedule", "add", "2026-03-10")

        assert load_schedules(store())[0].start_time == "08:00"

    def test_hand_edited_start_time_fails_cleanly(self, workspace: Path) -> None:
        """Should report a bad default start time instead of crashing."""
        config_path = workspace / "config" / "ledgerdesk" / "config.toml"
        config_path.parent.mkdir(parents=True)
        config_path.write_text('default_start_time = "25:99"\n', encoding="utf-8")

        result = invoke("schedule", "add", "2026-03-02")

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid default start time" in result.output
        assert load_schedules(store()) == []


class TestLedger:
    """Tests for ledger commands."""

    def test_running_balance(self) -> None:
        result = invoke("ledger", "add", "Lunch", "400", "--kind", "expense", "--date", "2026-03-02", "--time", "12:00")
        assert result.exit_code == 0
        assert invoke("ledger", "add", "Dues", "1000", "--date", "2026-03-01", "--time", "09:00").exit_code == 0

        view = derive_view(active_sheet(load_book(store())).entries)

        assert [row.entry.label for row in view] == ["Dues", "Lunch"]
        assert [row.balance for row in view] == [1000, 600]

        result = invoke("ledger", "list")
        assert result.exit_code == 0
        assert "600" in result.output

    def test_zero_amount_rejected(self) -> None:
        result = invoke("ledger", "add", "Nothing", "0", "--date", "2026-03-01", "--time", "09:00")

        assert result.exit_code == 1
        assert "Amount is required" in result.output
        assert active_sheet(load_book(store())).entries == ()

    def test_off_grid_minute_rejected(self) -> None:
        result = invoke("ledger", "add", "Dues", "10", "--time", "09:15")

        assert result.exit_code == 1

    def test_next_entry_defaults_to_following_hour(self) -> None:
        invoke("ledger", "add", "Dues", "1000", "--date", "2026-03-01", "--time", "23:40")
        invoke("ledger", "add", "Snack", "50", "--kind", "expense")

        entries = active_sheet(load_book(store())).entries

        assert (entries[1].date, entries[1].hour, entries[1].minute) == ("2026-03-02", 0, 0)

    def test_edit(self) -> None:
        invoke("ledger", "add", "Dues", "1000", "--date", "2026-03-01", "--time", "09:00")
        entry = active_sheet(load_book(store())).entries[0]

        result = invoke("ledger", "edit", entry.id[:8], "--amount", "1500", "--kind", "expense")

        edited = active_sheet(load_book(store())).entries[0]
        assert result.exit_code == 0
        assert (edited.id, edited.expense_amount, edited.income_amount) == (entry.id, 1500, 0)

    def test_delete_and_undo(self) -> None:
        invoke("ledger", "add", "Dues", "1000", "--date", "2026-03-01", "--time", "09:00")
        entry = active_sheet(load_book(store())).entries[0]

        assert invoke("ledger", "delete", entry.id[:8]).exit_code == 0
        assert active_sheet(load_book(store())).entries == ()
        assert len(load_undo(store())) == 1

        result = invoke("undo")

        assert result.exit_code == 0
        assert active_sheet(load_book(store())).entries == (entry,)
        assert load_undo(store()) == ()

    def test_undo_with_empty_history(self) -> None:
        result = invoke("undo")

        assert result.exit_code == 0
        assert "Nothing to undo" in result.output


class TestSheets:
    """Tests for sheet commands."""

    def test_sheets_are_independent(self) -> None:
        invoke("ledger", "add", "Dues", "1000", "--date", "2026-03-01", "--time", "09:00")
        assert invoke("sheet", "new", "Events").exit_code == 0
        invoke("ledger", "add", "Hall", "300", "--kind", "expense", "--date", "2026-03-01", "--time", "09:00")

        book = load_book(store())

        assert active_sheet(book).name == "Events"
        assert derive_view(find_sheet(book, "1").entries)[-1].balance == 1000
        assert derive_view(find_sheet(book, "Events").entries)[-1].balance == -300

    def test_cannot_delete_last_sheet(self) -> None:
        result = invoke("sheet", "delete", "1", "--yes")

        assert result.exit_code == 1
        assert "At least one sheet" in result.output

    def test_blank_rename_rejected(self) -> None:
        invoke("sheet", "new", "Events")

        result = invoke("sheet", "rename", "Events", "  ")

        assert result.exit_code == 1
        assert find_sheet(load_book(store()), "Events").name == "Events"

    def test_delete_sheet_and_undo(self) -> None:
        invoke("sheet", "new", "Events")
        invoke("ledger", "add", "Ticket", "500", "--date", "2026-03-01", "--time", "09:00")

        assert invoke("sheet", "delete", "Events", "--yes").exit_code == 0
        assert [s.name for s in load_book(store()).sheets] == ["운영비"]

        assert invoke("undo").exit_code == 0
        book = load_book(store())
        assert active_sheet(book).name == "Events"
        assert len(active_sheet(book).entries) == 1

    def test_use(self) -> None:
        invoke("sheet", "new", "Events")

        assert invoke("sheet", "use", "1").exit_code == 0
        assert active_sheet(load_book(store())).name == "운영비"


class TestSchedule:
    """Tests for schedule commands."""

    def test_add_uses_suggested_times(self) -> None:
        invoke("schedule", "add", "2026-03-10", "--title", "Standup")
        invoke("schedule", "add", "2026-03-10", "--title", "Review")

        events = load_schedules(store())

        assert [(e.start_time, e.end_time) for e in events] == [("09:00", "10:00"), ("10:00", "11:00")]

    def test_overlap_rejected(self) -> None:
        invoke("schedule", "add", "2026-03-10", "--start", "09:00", "--end", "11:00")

        result = invoke("schedule", "add", "2026-03-10", "--start", "10:00")

        assert result.exit_code == 1
        assert "overlaps" in result.output
        assert len(load_schedules(store())) == 1

    def test_end_before_start_rejected(self) -> None:
        result = invoke("schedule", "add", "2026-03-10", "--start", "10:00", "--end", "09:00")

        assert result.exit_code == 1
        assert load_schedules(store()) == []

    def test_midnight_end_accepted(self) -> None:
        result = invoke("schedule", "add", "2026-03-10", "--start", "23:00")

        assert result.exit_code == 0
        assert load_schedules(store())[0].end_time == "00:00"

    def test_edit_start_resets_end(self) -> None:
        invoke("schedule", "add", "2026-03-10", "--start", "09:00", "--end", "12:00")
        event = load_schedules(store())[0]

        assert invoke("schedule", "edit", event.id[:8], "--start", "14:00").exit_code == 0
        assert (load_schedules(store())[0].start_time, load_schedules(store())[0].end_time) == ("14:00", "15:00")

    def test_failed_edit_keeps_stored_event(self) -> None:
        invoke("schedule", "add", "2026-03-10", "--start", "09:00")
        invoke("schedule", "add", "2026-03-10", "--start", "11:00")
        second = load_schedules(store())[1]

        result = invoke("schedule", "edit", second.id[:8], "--start", "09:30")

        assert result.exit_code == 1
        assert load_schedules(store())[1] == second

    def test_copy_paste_and_clear_with_undo(self) -> None:
        invoke("schedule", "add", "2026-03-10", "--start", "09:00", "--title", "A")
        invoke("schedule", "add", "2026-03-10", "--start", "13:00", "--title", "B")

        assert "Copied 2" in invoke("schedule", "copy", "2026-03-10").output
        assert "Pasted 2" in invoke("schedule", "copy", "2026-03-12").output
        assert sorted(e.title for e in load_schedules(store()) if e.date == "2026-03-12") == ["A", "B"]

        assert invoke("schedule", "clear", "2026-03-10", "--yes").exit_code == 0
        assert {e.date for e in load_schedules(store())} == {"2026-03-12"}

        assert invoke("undo").exit_code == 0
        assert len(load_schedules(store())) == 4

    def test_undo_refused_when_slot_taken(self) -> None:
        """Should keep the history entry when restoring would overlap."""
        invoke("schedule", "add", "2026-03-10", "--start", "09:00", "--title", "A")
        first = load_schedules(store())[0]
        invoke("schedule", "delete", first.id[:8])
        invoke("schedule", "add", "2026-03-10", "--start", "09:30", "--title", "B")

        result = invoke("undo")

        assert result.exit_code == 1
        assert "Cannot undo" in result.output
        assert [e.title for e in load_schedules(store())] == ["B"]
        assert len(load_undo(store())) == 1

    def test_month_view(self) -> None:
        invoke("schedule", "add", "2026-10-09", "--title", "Holiday event")

        result = invoke("schedule", "month", "2026-10")

        assert result.exit_code == 0
        assert "2026년 10월" in result.output


class TestTransfer:
    """Tests for spreadsheet import and export."""

    def test_csv_export_and_import(self, workspace: Path) -> None:
        invoke("ledger", "add", "Dues", "1000", "--date", "2026-03-01", "--time", "09:00")
        invoke("ledger", "add", "Lunch", "400", "--kind", "expense", "--date", "2026-03-01", "--time", "12:00")
        out = workspace / "ledger.csv"

        assert invoke("ledger", "export", str(out)).exit_code == 0
        assert "누계" in out.read_text(encoding="utf-8-sig").splitlines()[0]

        invoke("sheet", "new", "Copy")
        result = invoke("ledger", "import", str(out), "--mode", "overwrite")

        assert result.exit_code == 0
        view = derive_view(find_sheet(load_book(store()), "Copy").entries)
        assert [(r.entry.label, r.balance) for r in view] == [("Dues", 1000), ("Lunch", 600)]

    def test_xlsx_export_all_sheets(self, workspace: Path) -> None:
        """Should write every sheet to its own tab with its own rows."""
        invoke("ledger", "add", "Dues", "1000", "--date", "2026-03-01", "--time", "09:00")
        invoke("sheet", "new", "Events")
        invoke("ledger", "add", "Hall", "300", "--kind", "expense", "--date", "2026-03-02", "--time", "09:00")
        out = workspace / "all.xlsx"

        result = invoke("ledger", "export", str(out), "--all")

        tabs = pd.read_excel(out, sheet_name=None, dtype=str)
        assert result.exit_code == 0
        assert list(tabs) == ["운영비", "Events"]
        assert list(tabs["운영비"]["내역"]) == ["Dues"]
        assert list(tabs["Events"]["내역"]) == ["Hall"]

    def test_xlsx_export_keeps_sheets_with_the_same_name(self, workspace: Path) -> None:
        invoke("sheet", "rename", "1", "Fund")
        invoke("ledger", "add", "A", "100", "--date", "2026-03-01", "--time", "09:00")
        invoke("sheet", "new", "Fund")
        invoke("ledger", "add", "B", "200", "--date", "2026-03-01", "--time", "10:00")
        out = workspace / "fund.xlsx"

        result = invoke("ledger", "export", str(out), "--all")

        tabs = pd.read_excel(out, sheet_name=None, dtype=str)
        assert result.exit_code == 0
        assert list(tabs) == ["Fund", "Fund_2"]
        assert sorted(label for tab in tabs.values() for label in tab["내역"]) == ["A", "B"]

    def test_import_append_keeps_existing(self, workspace: Path) -> None:
        source = workspace / "in.csv"
        source.write_text("날짜,시간,내역,수입금액,지출금액\n2026-03-05,10:00,Gift,,-20\n", encoding="utf-8")
        invoke("ledger", "add", "Dues", "1000", "--date", "2026-03-01", "--time", "09:00")

        result = invoke("ledger", "import", str(source), "--mode", "append")

        entries = active_sheet(load_book(store())).entries
        assert result.exit_code == 0
        assert [e.label for e in entries] == ["Dues", "Gift"]
        assert (entries[1].income_amount, entries[1].expense_amount) == (0, 0)

    def test_unreadable_file_is_format_error(self, workspace: Path) -> None:
        source = workspace / "notes.txt"
        source.write_text("hello", encoding="utf-8")

        result = invoke("ledger", "import", str(source), "--mode", "append")

        assert result.exit_code == 1
        assert "format error" in result.output

    def test_schedule_import_skips_overlaps(self, workspace: Path) -> None:
        invoke("schedule", "add", "2026-03-10", "--start", "09:00")
        source = workspace / "schedules.csv"
        source.write_text(
            "날짜,시작,종료,제목\n2026-03-10,09:30,10:30,Clash\n2026-03-10,10:00,11:00,Fits\n",
            encoding="utf-8",
        )

        result = invoke("schedule", "import", str(source))

        assert result.exit_code == 0
        assert sorted(e.title for e in load_schedules(store())) == ["", "Fits"]


class TestRoster:
    """Tests for member, note and title commands."""

    def test_members(self) -> None:
        assert invoke("member", "add", "Kim", "--branch", "Seoul").exit_code == 0
        assert invoke("member", "add", "Lee").exit_code == 0
        assert invoke("member", "toggle", "2", "attendance").exit_code == 0

        members = load_members(store())

        assert [(m.sn, m.name, m.attendance) for m in members] == [(1, "Kim", False), (2, "Lee", True)]

    def test_member_edit_unknown(self) -> None:
        result = invoke("member", "edit", "9", "--phone", "010")

        assert result.exit_code == 1

    def test_notes(self) -> None:
        invoke("note", "add", "first")
        invoke("note", "add", "second")

        notes = load_notes(store())

        assert [n.content for n in notes] == ["second", "first"]

    def test_title(self) -> None:
        assert "Smart Workspace" in invoke("title").output

        invoke("title", "app", "--set", "Club Desk")

        assert "Club Desk" in invoke("title", "app").output
