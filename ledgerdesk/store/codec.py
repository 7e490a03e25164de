"""JSON encoding of domain records.

Field names follow the persisted document shape (camelCase). Decoding is
lenient about documents written by the browser version of the workspace,
which used "item" for the label and Korean kind names.
"""

from typing import Any

from ledgerdesk.domain.ledger import LedgerEntry
from ledgerdesk.domain.models import EXPENSE, INCOME, ClockTime, EntryKind, IsoDate, Money
from ledgerdesk.domain.roster import Member, Note
from ledgerdesk.domain.schedule import ScheduleEvent
from ledgerdesk.domain.sheets import Sheet
from ledgerdesk.domain.tabular import infer_kind
from ledgerdesk.domain.undo import UndoRecord

_KIND_ALIASES: dict[str, EntryKind] = {
    INCOME: INCOME,
    EXPENSE: EXPENSE,
    "수입": INCOME,
    "지출": EXPENSE,
}


def entry_to_dict(entry: LedgerEntry) -> dict[str, Any]:
    # Balance is derived on read, never stored
    return {
        "id": entry.id,
        "date": entry.date,
        "hour": entry.hour,
        "minute": entry.minute,
        "kind": entry.kind,
        "label": entry.label,
        "incomeAmount": entry.income_amount,
        "expenseAmount": entry.expense_amount,
    }


def entry_from_dict(data: dict[str, Any]) -> LedgerEntry:
    income = Money(int(data.get("incomeAmount", 0)))
    kind = _KIND_ALIASES.get(data.get("kind") or data.get("type") or "") or infer_kind(income)
    return LedgerEntry(
        id=data["id"],
        date=IsoDate(data["date"]),
        hour=int(data.get("hour", 0)),
        minute=int(data.get("minute", 0)),
        kind=kind,
        label=data.get("label", data.get("item", "")),
        income_amount=income,
        expense_amount=Money(int(data.get("expenseAmount", 0))),
    )


def sheet_to_dict(sheet: Sheet) -> dict[str, Any]:
    return {"id": sheet.id, "name": sheet.name, "entries": [entry_to_dict(e) for e in sheet.entries]}


def sheet_from_dict(data: dict[str, Any]) -> Sheet:
    return Sheet(
        id=data["id"],
        name=data.get("name", ""),
        entries=tuple(entry_from_dict(e) for e in data.get("entries", [])),
    )


def event_to_dict(event: ScheduleEvent) -> dict[str, Any]:
    return {
        "id": event.id,
        "date": event.date,
        "startTime": event.start_time,
        "endTime": event.end_time,
        "title": event.title,
    }


def event_from_dict(data: dict[str, Any]) -> ScheduleEvent:
    return ScheduleEvent(
        id=data["id"],
        date=IsoDate(data["date"]),
        start_time=ClockTime(data["startTime"]),
        end_time=ClockTime(data["endTime"]),
        title=data.get("title", ""),
    )


def member_to_dict(member: Member) -> dict[str, Any]:
    return {
        "id": member.id,
        "sn": member.sn,
        "branch": member.branch,
        "name": member.name,
        "position": member.position,
        "phone": member.phone,
        "address": member.address,
        "joined": member.joined,
        "fee": member.fee,
        "attendance": member.attendance,
        "carNumber": member.car_number,
        "memo": member.memo,
    }


def member_from_dict(data: dict[str, Any]) -> Member:
    return Member(
        id=data["id"],
        sn=int(data.get("sn", 0)),
        name=data.get("name", ""),
        branch=data.get("branch", ""),
        position=data.get("position", ""),
        phone=data.get("phone", ""),
        address=data.get("address", ""),
        joined=str(data.get("joined", "")),
        fee=bool(data.get("fee", False)),
        attendance=bool(data.get("attendance", False)),
        car_number=str(data.get("carNumber", "")),
        memo=data.get("memo") or "",
    )


def note_to_dict(note: Note) -> dict[str, Any]:
    return {"id": note.id, "content": note.content, "createdAt": note.created_at}


def note_from_dict(data: dict[str, Any]) -> Note:
    return Note(id=data["id"], content=data.get("content", ""), created_at=data.get("createdAt", ""))


def undo_to_dict(record: UndoRecord) -> dict[str, Any]:
    return {
        "kind": record.kind,
        "description": record.description,
        "sheetId": record.sheet_id,
        "sheet": sheet_to_dict(record.sheet) if record.sheet is not None else None,
        "entries": [entry_to_dict(e) for e in record.entries],
        "events": [event_to_dict(e) for e in record.events],
    }


def undo_from_dict(data: dict[str, Any]) -> UndoRecord:
    sheet = data.get("sheet")
    return UndoRecord(
        kind=data["kind"],
        description=data.get("description", ""),
        sheet_id=data.get("sheetId"),
        sheet=sheet_from_dict(sheet) if sheet else None,
        entries=tuple(entry_from_dict(e) for e in data.get("entries", [])),
        events=tuple(event_from_dict(e) for e in data.get("events", [])),
    )
