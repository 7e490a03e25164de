"""Domain type definitions for ledgerdesk.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in whole currency units (no minor units, e.g. won)
- IsoDate: Calendar date in YYYY-MM-DD format
- ClockTime: Time of day in HH:mm format (24 hour clock)
- Month: Month in YYYY-MM format
- EntryKind: Direction of a ledger entry
"""

import uuid
from typing import Literal, NewType

# Amounts are whole units; the ledger never deals in fractions
Money = NewType("Money", int)

# Dates are always ISO formatted so lexicographic order is chronological
IsoDate = NewType("IsoDate", str)

# Times are always zero padded "HH:mm"
ClockTime = NewType("ClockTime", str)

# Month is always in YYYY-MM format (e.g., "2026-01")
Month = NewType("Month", str)

EntryKind = Literal["Income", "Expense"]

INCOME: EntryKind = "Income"
EXPENSE: EntryKind = "Expense"

# Minutes selectable for a ledger entry
MINUTE_STEPS = (0, 10, 20, 30, 40, 50)


def new_id() -> str:
    """Generate a fresh unique identifier for a record."""
    return str(uuid.uuid4())
