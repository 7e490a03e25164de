"""Pure functions for whole-day calendar operations.

Covers the month grid, copying a day's events onto another day, and
clearing a day. Removed events are returned so callers can record them
for undo.
"""

import calendar
from dataclasses import replace
from datetime import datetime
from typing import Literal

from ledgerdesk.domain.models import IsoDate, Month, new_id
from ledgerdesk.domain.schedule import ScheduleEvent, events_on

ClipboardAction = Literal["copied", "pasted", "none"]

HOLIDAY_LABELS_2026: dict[str, str] = {
    "2026-01-01": "신정",
    "2026-02-17": "설날",
    "2026-03-01": "삼일절",
    "2026-05-05": "어린이날",
    "2026-05-24": "석가탄신일",
    "2026-06-06": "현충일",
    "2026-08-15": "광복절",
    "2026-09-25": "추석",
    "2026-10-03": "개천절",
    "2026-10-09": "한글날",
    "2026-12-25": "성탄절",
}

# Public holidays including substitute and bridging days
RED_DAYS_2026 = frozenset(
    {
        "2026-01-01",
        "2026-02-16",
        "2026-02-17",
        "2026-02-18",
        "2026-03-01",
        "2026-03-02",
        "2026-05-05",
        "2026-05-24",
        "2026-05-25",
        "2026-06-06",
        "2026-08-15",
        "2026-08-17",
        "2026-09-24",
        "2026-09-25",
        "2026-09-26",
        "2026-10-03",
        "2026-10-05",
        "2026-10-09",
        "2026-12-25",
    }
)


def holiday_label(day: str) -> str | None:
    """Name of the public holiday on a date, if any."""
    return HOLIDAY_LABELS_2026.get(day)


def is_red_day(day: str) -> bool:
    """True for Sundays and public holidays."""
    if day in RED_DAYS_2026:
        return True
    return datetime.strptime(day, "%Y-%m-%d").weekday() == 6


def month_grid(month: Month) -> list[list[IsoDate]]:
    """Weeks covering a month, Sunday first, padded with adjacent days.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        List of weeks, each a list of seven ISO dates.
    """
    dt = datetime.strptime(month, "%Y-%m")
    weeks = calendar.Calendar(firstweekday=6).monthdatescalendar(dt.year, dt.month)
    return [[IsoDate(day.isoformat()) for day in week] for week in weeks]


def in_month(day: str, month: Month) -> bool:
    return day.startswith(f"{month}-")


def events_by_date(schedules: list[ScheduleEvent], days: list[IsoDate]) -> dict[IsoDate, list[ScheduleEvent]]:
    """Group events for the given days, each list ordered by start time."""
    return {day: events_on(schedules, day) for day in days}


def copy_or_paste_day(
    schedules: list[ScheduleEvent],
    clipboard: list[ScheduleEvent],
    day: str,
) -> tuple[list[ScheduleEvent], list[ScheduleEvent], ClipboardAction]:
    """Copy a day's events, or paste the clipboard onto an empty day.

    A day with events replaces the clipboard. An empty day receives copies
    of the clipboard events under fresh ids.

    Returns:
        Tuple of (schedules, clipboard, action).
    """
    day_events = [s for s in schedules if s.date == day]
    if day_events:
        return schedules, day_events, "copied"

    if clipboard:
        pasted = [replace(s, id=new_id(), date=IsoDate(day)) for s in clipboard]
        return [*schedules, *pasted], clipboard, "pasted"

    return schedules, clipboard, "none"


def delete_day(schedules: list[ScheduleEvent], day: str) -> tuple[list[ScheduleEvent], list[ScheduleEvent]]:
    """Remove every event on a date.

    Returns:
        Tuple of (remaining_schedules, removed_events).
    """
    removed = [s for s in schedules if s.date == day]
    remaining = [s for s in schedules if s.date != day]
    return remaining, removed
