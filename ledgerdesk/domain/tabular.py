"""Pure mapping between tabular rows and ledger/schedule records.

Rows are plain dicts keyed by column header, as read from a spreadsheet.
Each imported field is described by an ordered tuple of header aliases and
a converter; the first alias holding a non-blank value wins. Cells that
cannot be converted degrade to 0 (numbers) or "" (text) instead of failing
the whole import.
"""

import math
import re
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, Literal

from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.ledger import LedgerEntry, LedgerRow, format_time
from ledgerdesk.domain.models import EXPENSE, INCOME, ClockTime, EntryKind, IsoDate, Money, new_id
from ledgerdesk.domain.schedule import ScheduleEvent, parse_clock, validate_event

HeaderStyle = Literal["ko", "en"]
MergeMode = Literal["overwrite", "append"]

LEDGER_HEADERS: dict[HeaderStyle, tuple[str, ...]] = {
    "ko": ("날짜", "시간", "구분", "내역", "수입금액", "지출금액", "누계"),
    "en": ("date", "time", "kind", "label", "income_amount", "expense_amount", "balance"),
}

SCHEDULE_HEADERS: dict[HeaderStyle, tuple[str, ...]] = {
    "ko": ("날짜", "시작", "종료", "제목"),
    "en": ("date", "start_time", "end_time", "title"),
}

KIND_LABELS: dict[HeaderStyle, dict[EntryKind, str]] = {
    "ko": {INCOME: "수입", EXPENSE: "지출"},
    "en": {INCOME: INCOME, EXPENSE: EXPENSE},
}

_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DATE_FORMATS = ("%Y.%m.%d", "%Y/%m/%d", "%Y%m%d", "%Y. %m. %d")


def is_blank(value: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def to_text(value: Any) -> str:
    """Coerce a cell to stripped text, blank cells to ""."""
    if is_blank(value):
        return ""
    return str(value).strip()


def to_amount(value: Any) -> int:
    """Coerce a cell to a non-negative whole amount, 0 when unparseable."""
    if is_blank(value):
        return 0
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = re.sub(r"[,\s₩원$£]", "", str(value))
        try:
            number = float(cleaned)
        except ValueError:
            return 0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0
    return int(round(number))


def to_iso_date(value: Any) -> str:
    """Coerce a cell to YYYY-MM-DD, "" when it is not a recognizable date."""
    text = to_text(value)
    if not text:
        return ""
    if _ISO_PREFIX.match(text):
        return text[:10]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue
    return ""


def to_hour_minute(value: Any) -> tuple[int, int]:
    """Parse "H:MM" (seconds ignored) into an hour and a 10-minute slot.

    Unparseable parts become 0; minutes are snapped down to the grid.
    """
    parts = to_text(value).split(":")
    try:
        hour = int(parts[0])
    except ValueError:
        hour = 0
    try:
        minute = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        minute = 0

    if not 0 <= hour <= 23:
        hour = 0
    if not 0 <= minute <= 59:
        minute = 0
    return hour, minute - minute % 10


Converter = Callable[[Any], Any]

LEDGER_FIELDS: dict[str, tuple[tuple[str, ...], Converter]] = {
    "date": (("날짜", "일자", "date", "Date"), to_iso_date),
    "time": (("시간", "time", "Time"), to_hour_minute),
    "label": (("내역", "항목", "적요", "label", "item", "Label", "Item", "description"), to_text),
    "income_amount": (("수입금액", "수입", "income_amount", "incomeAmount", "income", "Income"), to_amount),
    "expense_amount": (("지출금액", "지출", "expense_amount", "expenseAmount", "expense", "Expense"), to_amount),
}

SCHEDULE_FIELDS: dict[str, tuple[tuple[str, ...], Converter]] = {
    "date": (("날짜", "일자", "date", "Date"), to_iso_date),
    "start_time": (("시작", "시작시간", "start_time", "startTime", "start", "Start"), to_text),
    "end_time": (("종료", "종료시간", "end_time", "endTime", "end", "End"), to_text),
    "title": (("제목", "일정", "title", "Title"), to_text),
}


def extract_field(row: Mapping[str, Any], aliases: tuple[str, ...], converter: Converter) -> Any:
    """Convert the first non-blank aliased cell of a row."""
    for alias in aliases:
        if alias in row and not is_blank(row[alias]):
            return converter(row[alias])
    return converter(None)


def extract_fields(row: Mapping[str, Any], table: dict[str, tuple[tuple[str, ...], Converter]]) -> dict[str, Any]:
    return {name: extract_field(row, aliases, converter) for name, (aliases, converter) in table.items()}


def infer_kind(income_amount: int) -> EntryKind:
    """Imported kind is derived from the amounts, never read from the file."""
    return INCOME if income_amount > 0 else EXPENSE


def row_to_entry(row: Mapping[str, Any], fallback_date: str) -> LedgerEntry:
    """Map one spreadsheet row to a ledger entry with a fresh id.

    Args:
        row: Row keyed by column header.
        fallback_date: Date used when the row has none.

    Returns:
        LedgerEntry. The balance column, if any, is ignored.
    """
    values = extract_fields(row, LEDGER_FIELDS)
    hour, minute = values["time"]
    return LedgerEntry(
        id=new_id(),
        date=IsoDate(values["date"] or fallback_date),
        hour=hour,
        minute=minute,
        kind=infer_kind(values["income_amount"]),
        label=values["label"],
        income_amount=Money(values["income_amount"]),
        expense_amount=Money(values["expense_amount"]),
    )


def rows_to_entries(rows: Iterable[Mapping[str, Any]], fallback_date: str) -> list[LedgerEntry]:
    """Map spreadsheet rows to ledger entries, skipping fully blank rows."""
    return [row_to_entry(row, fallback_date) for row in rows if not all(is_blank(v) for v in row.values())]


def merge_entries(
    existing: tuple[LedgerEntry, ...],
    imported: list[LedgerEntry],
    mode: MergeMode,
) -> tuple[LedgerEntry, ...]:
    """Combine imported entries with a sheet's current entries.

    Args:
        existing: Current entries of the target sheet.
        imported: Freshly imported entries.
        mode: "overwrite" replaces the sheet's entries, "append" keeps them.

    Returns:
        New entry tuple for the sheet.

    Raises:
        ValidationError: If the mode is unknown.
    """
    if mode == "overwrite":
        return tuple(imported)
    if mode == "append":
        return (*existing, *imported)
    raise ValidationError(f"Unknown import mode: {mode}")


def ledger_to_rows(view: list[LedgerRow], headers: HeaderStyle = "ko") -> list[dict[str, Any]]:
    """Map a derived ledger view to export rows, balance included."""
    date_h, time_h, kind_h, label_h, income_h, expense_h, balance_h = LEDGER_HEADERS[headers]
    kinds = KIND_LABELS[headers]
    return [
        {
            date_h: row.entry.date,
            time_h: format_time(row.entry.hour, row.entry.minute),
            kind_h: kinds[row.entry.kind],
            label_h: row.entry.label,
            income_h: row.entry.income_amount,
            expense_h: row.entry.expense_amount,
            balance_h: row.balance,
        }
        for row in view
    ]


def schedules_to_rows(events: list[ScheduleEvent], headers: HeaderStyle = "ko") -> list[dict[str, Any]]:
    """Map events to export rows ordered by date and start time."""
    date_h, start_h, end_h, title_h = SCHEDULE_HEADERS[headers]
    ordered = sorted(events, key=lambda e: (e.date, e.start_time))
    return [{date_h: e.date, start_h: e.start_time, end_h: e.end_time, title_h: e.title} for e in ordered]


def rows_to_events(
    rows: Iterable[Mapping[str, Any]],
    existing: list[ScheduleEvent],
) -> tuple[list[ScheduleEvent], int]:
    """Map spreadsheet rows to new events that fit the existing calendar.

    Rows without a date, with malformed times, or whose range is inverted
    or overlaps an existing or previously accepted event are skipped.

    Returns:
        Tuple of (accepted_events, skipped_count).
    """
    accepted: list[ScheduleEvent] = []
    skipped = 0

    for row in rows:
        values = extract_fields(row, SCHEDULE_FIELDS)
        if not values["date"]:
            skipped += 1
            continue
        try:
            start = parse_clock(values["start_time"])
            end = parse_clock(values["end_time"])
        except ValidationError:
            skipped += 1
            continue

        event = ScheduleEvent(
            id=new_id(),
            date=IsoDate(values["date"]),
            start_time=ClockTime(start),
            end_time=ClockTime(end),
            title=values["title"],
        )
        is_valid, _ = validate_event(event, [*existing, *accepted])
        if not is_valid:
            skipped += 1
            continue
        accepted.append(event)

    return accepted, skipped
