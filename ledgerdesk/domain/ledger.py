"""Pure functions for the accounting ledger.

This module contains the functional core for ledger operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Entries are stored in insertion order. The chronological view and the
running balance are derived on every read and never persisted.
"""

from dataclasses import dataclass
from datetime import datetime

from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.models import EXPENSE, INCOME, MINUTE_STEPS, EntryKind, IsoDate, Money, new_id


@dataclass(frozen=True)
class LedgerEntry:
    """Immutable ledger entry as stored."""

    id: str
    date: IsoDate
    hour: int
    minute: int
    kind: EntryKind
    label: str
    income_amount: Money
    expense_amount: Money


@dataclass(frozen=True)
class LedgerRow:
    """Immutable entry paired with its running balance."""

    entry: LedgerEntry
    balance: Money


@dataclass(frozen=True)
class LedgerSummary:
    """Immutable totals over a whole sheet."""

    total_income: Money
    total_expense: Money
    net_balance: Money


def sort_key(entry: LedgerEntry) -> tuple[str, int, int]:
    """Chronological sort key for an entry."""
    return (entry.date, entry.hour, entry.minute)


def derive_view(entries: tuple[LedgerEntry, ...] | list[LedgerEntry]) -> list[LedgerRow]:
    """Derive the chronological view with running balances.

    Entries are ordered by (date, hour, minute). The sort is stable, so
    entries sharing a timestamp keep their insertion order.

    Args:
        entries: Entries in insertion order.

    Returns:
        List of LedgerRow in chronological order.
    """
    balance = 0
    rows: list[LedgerRow] = []
    for entry in sorted(entries, key=sort_key):
        balance += entry.income_amount - entry.expense_amount
        rows.append(LedgerRow(entry=entry, balance=Money(balance)))
    return rows


def summarize(rows: list[LedgerRow]) -> LedgerSummary:
    """Total income, expense and net balance over a derived view.

    Args:
        rows: Derived ledger view.

    Returns:
        LedgerSummary for the whole view.
    """
    total_income = sum(row.entry.income_amount for row in rows)
    total_expense = sum(row.entry.expense_amount for row in rows)
    return LedgerSummary(
        total_income=Money(total_income),
        total_expense=Money(total_expense),
        net_balance=Money(total_income - total_expense),
    )


def entry_amount(entry: LedgerEntry) -> Money:
    """Return the non-zero side of an entry."""
    return entry.income_amount if entry.kind == INCOME else entry.expense_amount


def format_time(hour: int, minute: int) -> str:
    """Format an hour and minute as HH:mm."""
    return f"{hour:02d}:{minute:02d}"


def format_money(amount: int, include_sign: bool = False) -> str:
    """Format an amount with thousands separators.

    Args:
        amount: Amount in whole units.
        include_sign: Whether to prefix + for positive amounts.

    Returns:
        Formatted string (e.g., "1,000", "-400" or "+1,000").
    """
    formatted = f"{amount:,}"
    if include_sign and amount > 0:
        return f"+{formatted}"
    return formatted


def validate_entry_fields(
    date: str,
    hour: int,
    minute: int,
    kind: str,
    label: str,
    amount: int | None,
) -> tuple[bool, str | None]:
    """Validate the user-editable fields of an entry.

    Args:
        date: Entry date (YYYY-MM-DD).
        hour: Hour of day (0-23).
        minute: Minute, one of 0, 10, ..., 50.
        kind: "Income" or "Expense".
        label: Entry description.
        amount: Amount in whole units.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not label.strip():
        return False, "Label is required"

    if not amount:
        return False, "Amount is required"

    if amount < 0:
        return False, "Amount must be positive"

    if kind not in (INCOME, EXPENSE):
        return False, f"Unknown kind: {kind}"

    try:
        datetime.strptime(date, "%Y-%m-%d")
    except ValueError:
        return False, f"Invalid date: {date}"

    if not 0 <= hour <= 23:
        return False, "Hour must be between 0 and 23"

    if minute not in MINUTE_STEPS:
        return False, "Minute must be one of 00, 10, 20, 30, 40, 50"

    return True, None


def make_entry(
    date: str,
    hour: int,
    minute: int,
    kind: EntryKind,
    label: str,
    amount: int,
    entry_id: str | None = None,
) -> LedgerEntry:
    """Build a validated entry, routing the amount by kind.

    Raises:
        ValidationError: If any field is invalid.
    """
    is_valid, error = validate_entry_fields(date, hour, minute, kind, label, amount)
    if not is_valid:
        raise ValidationError(error)

    return LedgerEntry(
        id=entry_id or new_id(),
        date=IsoDate(date),
        hour=hour,
        minute=minute,
        kind=kind,
        label=label,
        income_amount=Money(amount if kind == INCOME else 0),
        expense_amount=Money(amount if kind == EXPENSE else 0),
    )


def find_entry(entries: tuple[LedgerEntry, ...], entry_id: str) -> LedgerEntry | None:
    """Find an entry by id, accepting a unique id prefix."""
    for entry in entries:
        if entry.id == entry_id:
            return entry

    matches = [entry for entry in entries if entry.id.startswith(entry_id)]
    if len(matches) == 1:
        return matches[0]
    return None


def add_entry(entries: tuple[LedgerEntry, ...], entry: LedgerEntry) -> tuple[LedgerEntry, ...]:
    """Append an entry. Balances are recomputed on the next view."""
    return (*entries, entry)


def edit_entry(
    entries: tuple[LedgerEntry, ...],
    entry_id: str,
    date: str,
    hour: int,
    minute: int,
    kind: EntryKind,
    label: str,
    amount: int,
) -> tuple[LedgerEntry, ...]:
    """Replace an entry's fields in place, keeping its id and position.

    Raises:
        ValidationError: If the entry is unknown or a field is invalid.
    """
    target = find_entry(entries, entry_id)
    if target is None:
        raise ValidationError(f"Entry not found: {entry_id}")

    updated = make_entry(date, hour, minute, kind, label, amount, entry_id=target.id)
    return tuple(updated if entry.id == target.id else entry for entry in entries)


def delete_entry(entries: tuple[LedgerEntry, ...], entry_id: str) -> tuple[tuple[LedgerEntry, ...], LedgerEntry]:
    """Remove an entry by id.

    Returns:
        Tuple of (remaining_entries, removed_entry).

    Raises:
        ValidationError: If the entry is unknown.
    """
    target = find_entry(entries, entry_id)
    if target is None:
        raise ValidationError(f"Entry not found: {entry_id}")

    return tuple(entry for entry in entries if entry.id != target.id), target


def restore_entries(entries: tuple[LedgerEntry, ...], restored: list[LedgerEntry]) -> tuple[LedgerEntry, ...]:
    """Append previously removed entries, skipping ids already present."""
    present = {entry.id for entry in entries}
    return (*entries, *(entry for entry in restored if entry.id not in present))

