from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import Weekday


@dataclass(frozen=True)
class Holiday:
    """A single calendar day with no classes."""

    holiday_date: date
    reason: str = ""


@dataclass(frozen=True)
class OffDay:
    """A weekday that never has classes (e.g. every Sunday)."""

    day_of_week: Weekday
