"""Helpers shared by the command modules: console output and input parsing."""

import sys
from datetime import datetime
from typing import NoReturn

import pandas as pd
from rich.console import Console

from ledgerdesk.domain.errors import ValidationError
from ledgerdesk.domain.models import IsoDate

console = Console()


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def short_id(record_id: str) -> str:
    return record_id[:8]


def parse_date_option(value: str) -> IsoDate:
    """Normalize a user-entered date to YYYY-MM-DD.

    Uses pandas.to_datetime so "2026-3-5", "2026/03/05" and "today" all work.

    Raises:
        ValidationError: If the date cannot be parsed.
    """
    try:
        return IsoDate(pd.to_datetime(value).strftime("%Y-%m-%d"))
    except (ValueError, pd.errors.ParserError) as e:
        raise ValidationError(f"Invalid date '{value}'") from e


def parse_entry_time(value: str) -> tuple[int, int]:
    """Parse "HH:MM" into hour and minute.

    Raises:
        ValidationError: If the value is not a time.
    """
    try:
        parsed = datetime.strptime(value.strip(), "%H:%M")
    except ValueError as e:
        raise ValidationError(f"Invalid time '{value}' (use HH:MM)") from e
    return parsed.hour, parsed.minute
