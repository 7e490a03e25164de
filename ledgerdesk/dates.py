"""Date utilities for ledgerdesk.

Pure functions for date range calculations and formatting, plus the
single impure "what is today" helper used by the commands.
"""

from datetime import date, datetime, timedelta

from ledgerdesk.domain.models import IsoDate, Month


def month_range(month: Month) -> tuple[str, str, str]:
    """Calculate date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (since_date, until_date, label) where:
        - since_date: First day of month (YYYY-MM-DD)
        - until_date: First day of next month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "2026년 1월")
    """
    dt = datetime.strptime(month, "%Y-%m")
    since = dt.strftime("%Y-%m-01")
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1)
    until = next_month.strftime("%Y-%m-%d")
    label = f"{dt.year}년 {dt.month}월"
    return since, until, label


def shift_month(month: Month, offset: int) -> Month:
    """Move a YYYY-MM month forwards or backwards."""
    dt = datetime.strptime(month, "%Y-%m")
    index = dt.year * 12 + (dt.month - 1) + offset
    return Month(f"{index // 12:04d}-{index % 12 + 1:02d}")


def next_entry_slot(entry_date: str, hour: int, minute: int) -> tuple[IsoDate, int, int]:
    """Suggested timestamp for the entry after one saved at the given time.

    One hour later, minute reset to 0. Rolls over to the next day.
    """
    current = datetime.strptime(f"{entry_date} {hour}:{minute}", "%Y-%m-%d %H:%M")
    following = current + timedelta(hours=1)
    return IsoDate(following.strftime("%Y-%m-%d")), following.hour, 0


def today() -> IsoDate:
    return IsoDate(date.today().isoformat())


def current_month() -> Month:
    return Month(date.today().strftime("%Y-%m"))
