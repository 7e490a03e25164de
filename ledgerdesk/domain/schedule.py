"""Schedule events, time-range validation and the per-day editor.

Times are "HH:mm" strings. An end time of "00:00" means the end of the day
(minute 1440) for every comparison, so a range like 23:00-00:00 is valid.
"""

import re
from dataclasses import dataclass, replace
from typing import Literal

from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.models import ClockTime, IsoDate, new_id

MINUTES_PER_DAY = 1440
DEFAULT_START = ClockTime("09:00")
DEFAULT_DURATION = 60

END_BEFORE_START = "End time must be later than start time"
OVERLAPS = "Time overlaps another schedule"

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

EditState = Literal["viewing", "editing", "error"]


@dataclass(frozen=True)
class ScheduleEvent:
    """Immutable dated time range."""

    id: str
    date: IsoDate
    start_time: ClockTime
    end_time: ClockTime
    title: str = ""


def parse_clock(value: str) -> ClockTime:
    """Normalize user input such as "9:30" to "09:30".

    Raises:
        ValidationError: If the value is not a valid time of day.
    """
    match = _CLOCK_RE.match(value.strip())
    if not match:
        raise ValidationError(f"Invalid time: {value}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(f"Invalid time: {value}")
    return ClockTime(f"{hour:02d}:{minute:02d}")


def to_minutes(value: str) -> int:
    """Minutes since midnight for an "HH:mm" string."""
    hour, minute = value.split(":")
    return int(hour) * 60 + int(minute)


def end_minutes(value: str) -> int:
    """Minutes since midnight for an end time, reading 00:00 as 1440."""
    minutes = to_minutes(value)
    return MINUTES_PER_DAY if minutes == 0 else minutes


def from_minutes(total: int) -> ClockTime:
    """Format minutes since midnight, wrapping the end of day to 00:00."""
    if total >= MINUTES_PER_DAY:
        return ClockTime("00:00")
    return ClockTime(f"{total // 60:02d}:{total % 60:02d}")


def default_end(start_time: str) -> ClockTime:
    """End time one hour after the given start."""
    return from_minutes(to_minutes(start_time) + DEFAULT_DURATION)


def validate_event(event: ScheduleEvent, others: list[ScheduleEvent]) -> tuple[bool, str | None]:
    """Check an event's time range against the rest of its day.

    Args:
        event: Event being confirmed.
        others: Other events; those on different dates are ignored.

    Returns:
        Tuple of (is_valid, error_message).
    """
    start = to_minutes(event.start_time)
    end = end_minutes(event.end_time)

    if start >= end:
        return False, END_BEFORE_START

    for other in others:
        if other.id == event.id or other.date != event.date:
            continue
        if start < end_minutes(other.end_time) and end > to_minutes(other.start_time):
            return False, OVERLAPS

    return True, None


def events_on(schedules: list[ScheduleEvent], date: str) -> list[ScheduleEvent]:
    """Events on a date ordered by start time."""
    return sorted((s for s in schedules if s.date == date), key=lambda s: to_minutes(s.start_time))


def suggest_new_times(
    day_events: list[ScheduleEvent], default_start: str = DEFAULT_START
) -> tuple[ClockTime, ClockTime]:
    """Suggest start and end times for a new event on a day.

    The new event starts where the latest existing event ends. When the day
    is empty, or its latest event runs to midnight, the default start is
    used instead. The end is always one hour after the start.
    """
    start = ClockTime(default_start)
    if day_events:
        latest = max(day_events, key=lambda s: end_minutes(s.end_time))
        if latest.end_time != "00:00":
            start = latest.end_time
    return start, default_end(start)


class DayEditor:
    """Editing session for the events of a single date.

    Each event is either viewing, editing, or showing an error. Edits are
    staged locally; confirming an event validates it against the staged
    values of the other events on the date and, when it passes, commits it.
    """

    def __init__(self, schedules: list[ScheduleEvent], date: str, default_start: str = DEFAULT_START) -> None:
        self.date = IsoDate(date)
        try:
            self.default_start = parse_clock(str(default_start))
        except ValidationError:
            raise ValidationError(f"Invalid default start time: {default_start}") from None
        self._other_days = [s for s in schedules if s.date != date]
        self._committed: dict[str, ScheduleEvent] = {s.id: s for s in schedules if s.date == date}
        self.events: list[ScheduleEvent] = list(self._committed.values())
        self.states: dict[str, EditState] = {s.id: "viewing" for s in self.events}
        self.errors: dict[str, str] = {}

    def get(self, event_id: str) -> ScheduleEvent:
        """Return the staged event with the given id.

        Raises:
            ValidationError: If the event is not on this date.
        """
        for event in self.events:
            if event.id == event_id:
                return event
        raise ValidationError(f"Schedule not found: {event_id}")

    def _stage(self, updated: ScheduleEvent) -> None:
        self.events = [updated if e.id == updated.id else e for e in self.events]
        self.states[updated.id] = "editing"
        self.errors.pop(updated.id, None)

    def add_event(self, title: str = "") -> ScheduleEvent:
        """Stage a new event with suggested times and start editing it."""
        start, end = suggest_new_times(self.events, self.default_start)
        event = ScheduleEvent(id=new_id(), date=self.date, start_time=start, end_time=end, title=title)
        self.events.append(event)
        self.states[event.id] = "editing"
        return event

    def begin_edit(self, event_id: str) -> ScheduleEvent:
        event = self.get(event_id)
        self.states[event.id] = "editing"
        return event

    def change_start(self, event_id: str, start_time: str) -> ScheduleEvent:
        """Set a new start time; the end time is always reset to start + 1h."""
        start = parse_clock(start_time)
        updated = replace(self.get(event_id), start_time=start, end_time=default_end(start))
        self._stage(updated)
        return updated

    def change_end(self, event_id: str, end_time: str) -> ScheduleEvent:
        updated = replace(self.get(event_id), end_time=parse_clock(end_time))
        self._stage(updated)
        return updated

    def change_title(self, event_id: str, title: str) -> ScheduleEvent:
        updated = replace(self.get(event_id), title=title)
        self._stage(updated)
        return updated

    def committed_schedules(self) -> list[ScheduleEvent]:
        """Full schedule list as last committed, other dates included."""
        day = [self._committed[e.id] for e in self.events if e.id in self._committed]
        return [*self._other_days, *day]

    def confirm(self, event_id: str) -> list[ScheduleEvent]:
        """Validate and commit one event.

        Returns:
            The full committed schedule list.

        Raises:
            ValidationError: If the range is inverted or overlaps another
                event; the event stays in the error state.
        """
        event = self.get(event_id)
        is_valid, error = validate_event(event, self.events)
        if not is_valid:
            self.states[event.id] = "error"
            self.errors[event.id] = error or ""
            raise ValidationError(error)

        self._committed[event.id] = event
        self.states[event.id] = "viewing"
        self.errors.pop(event.id, None)
        return self.committed_schedules()

    def remove_event(self, event_id: str) -> tuple[list[ScheduleEvent], ScheduleEvent]:
        """Delete an event from the day and commit the removal.

        Returns:
            Tuple of (full_committed_schedules, removed_event).
        """
        event = self.get(event_id)
        self.events = [e for e in self.events if e.id != event.id]
        self._committed.pop(event.id, None)
        self.states.pop(event.id, None)
        self.errors.pop(event.id, None)
        return self.committed_schedules(), event


def find_event(schedules: list[ScheduleEvent], event_id: str) -> ScheduleEvent:
    """Find an event by id or unique id prefix.

    Raises:
        ValidationError: If nothing matches.
    """
    for event in schedules:
        if event.id == event_id:
            return event

    matches = [event for event in schedules if event.id.startswith(event_id)]
    if len(matches) == 1:
        return matches[0]
    raise ValidationError(f"Schedule not found: {event_id}")
