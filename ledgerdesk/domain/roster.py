"""Pure functions for the member roster and the note list.

These are flat records without derived values. Members keep a serial
number (sn) assigned on creation; notes carry their creation timestamp.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, Literal

from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.models import new_id

MemberFlag = Literal["fee", "attendance"]

NOTE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class Member:
    """Immutable roster record."""

    id: str
    sn: int
    name: str
    branch: str = ""
    position: str = "회원"
    phone: str = ""
    address: str = ""
    joined: str = ""
    fee: bool = False
    attendance: bool = False
    car_number: str = ""
    memo: str = ""


@dataclass(frozen=True)
class Note:
    """Immutable free-form note."""

    id: str
    content: str
    created_at: str


EDITABLE_MEMBER_FIELDS = frozenset(f.name for f in fields(Member)) - {"id", "sn"}


def next_serial(members: list[Member]) -> int:
    """Serial number for the next member (max + 1, starting at 1)."""
    return max((m.sn for m in members), default=0) + 1


def find_member(members: list[Member], ref: str) -> Member:
    """Find a member by id, unique id prefix, or serial number.

    Raises:
        ValidationError: If nothing matches.
    """
    for member in members:
        if member.id == ref or (ref.isdigit() and member.sn == int(ref)):
            return member

    matches = [m for m in members if m.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    raise ValidationError(f"Member not found: {ref}")


def add_member(members: list[Member], name: str, **details: Any) -> tuple[list[Member], Member]:
    """Append a member with the next serial number.

    Raises:
        ValidationError: If the name is blank or an unknown field is given.
    """
    if not name.strip():
        raise ValidationError("Member name is required")

    unknown = set(details) - EDITABLE_MEMBER_FIELDS
    if unknown:
        raise ValidationError(f"Unknown member fields: {', '.join(sorted(unknown))}")

    member = Member(id=new_id(), sn=next_serial(members), name=name.strip(), **details)
    return [*members, member], member


def update_member(members: list[Member], ref: str, changes: dict[str, Any]) -> tuple[list[Member], Member]:
    """Apply field changes to a member.

    Raises:
        ValidationError: If the member is unknown, a field is not editable,
            or the name would become blank.
    """
    target = find_member(members, ref)

    unknown = set(changes) - EDITABLE_MEMBER_FIELDS
    if unknown:
        raise ValidationError(f"Unknown member fields: {', '.join(sorted(unknown))}")

    if "name" in changes and not str(changes["name"]).strip():
        raise ValidationError("Member name is required")

    updated = replace(target, **changes)
    return [updated if m.id == target.id else m for m in members], updated


def toggle_member_flag(members: list[Member], ref: str, flag: MemberFlag) -> tuple[list[Member], Member]:
    """Flip the fee or attendance flag of a member."""
    if flag not in ("fee", "attendance"):
        raise ValidationError(f"Unknown flag: {flag}")

    target = find_member(members, ref)
    return update_member(members, target.id, {flag: not getattr(target, flag)})


def delete_member(members: list[Member], ref: str) -> tuple[list[Member], Member]:
    target = find_member(members, ref)
    return [m for m in members if m.id != target.id], target


def find_note(notes: list[Note], ref: str) -> Note:
    """Find a note by id or unique id prefix.

    Raises:
        ValidationError: If nothing matches.
    """
    for note in notes:
        if note.id == ref:
            return note

    matches = [n for n in notes if n.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    raise ValidationError(f"Note not found: {ref}")


def add_note(notes: list[Note], content: str, now: datetime) -> tuple[list[Note], Note]:
    """Prepend a note stamped with the given time.

    Raises:
        ValidationError: If the content is blank.
    """
    if not content.strip():
        raise ValidationError("Note content is required")

    note = Note(id=new_id(), content=content, created_at=now.strftime(NOTE_TIMESTAMP_FORMAT))
    return [note, *notes], note


def update_note(notes: list[Note], ref: str, content: str) -> tuple[list[Note], Note]:
    if not content.strip():
        raise ValidationError("Note content is required")

    target = find_note(notes, ref)
    updated = replace(target, content=content)
    return [updated if n.id == target.id else n for n in notes], updated


def delete_note(notes: list[Note], ref: str) -> tuple[list[Note], Note]:
    target = find_note(notes, ref)
    return [n for n in notes if n.id != target.id], target


def notes_newest_first(notes: list[Note]) -> list[Note]:
    return sorted(notes, key=lambda n: n.created_at, reverse=True)
