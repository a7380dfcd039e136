from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.constants import DEFAULT_CLASS_TYPE
from ..core.enums import Weekday


@dataclass(frozen=True)
class ScheduleSlot:
    """One weekly class occurrence (subject + weekday + time range)."""

    slot_id: str
    day_of_week: Weekday
    subject_key: str
    start_time: time
    end_time: time
    class_type: str = DEFAULT_CLASS_TYPE
    subject_name: Optional[str] = None


@dataclass(frozen=True)
class AcademicPeriod:
    """The running term; bounds backfill and auto-marking."""

    semester: str
    start_date: date
    end_date: date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
