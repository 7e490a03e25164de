"""Domain models and types for ledgerdesk.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from ledgerdesk.domain.errors import ImportFormatError, ValidationError
from ledgerdesk.domain.models import EXPENSE, INCOME, ClockTime, EntryKind, IsoDate, Money, Month

__all__ = [
    "EXPENSE",
    "INCOME",
    "ClockTime",
    "EntryKind",
    "ImportFormatError",
    "IsoDate",
    "Money",
    "Month",
    "ValidationError",
]
