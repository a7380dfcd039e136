from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Union

from ..core.exceptions import InvalidDateError, ValidationError

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise InvalidDateError(f"Invalid date: {value!r}") from None


def coerce_date(value: DateLike) -> date:
    """Normalize a calendar day.

    Accepts ``date``, ``datetime`` (time part dropped), ``YYYY-MM-DD`` and full
    ISO-8601 timestamps as stored by browsers (``2026-01-05T00:00:00.000Z``).
    Anything else raises InvalidDateError instead of being guessed.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(f"Invalid date: {value!r}")

    text = value.strip()
    if len(text) == 10:
        return parse_iso_date(text)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidDateError(f"Invalid date: {value!r}") from None


def parse_hhmm(value: Union[str, time]) -> time:
    """Parse "HH:MM" (or "HH:MM:SS") into time."""
    if isinstance(value, time):
        return value
    try:
        parts = [int(p) for p in str(value).strip().split(":")]
        if len(parts) == 2:
            return time(parts[0], parts[1])
        if len(parts) == 3:
            return time(parts[0], parts[1], parts[2])
    except ValueError:
        pass
    raise ValidationError(f"Invalid time: {value!r}")


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
