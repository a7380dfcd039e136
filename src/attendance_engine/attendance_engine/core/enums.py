from __future__ import annotations

from enum import Enum, IntEnum

from .exceptions import ValidationError


class AttendanceStatus(str, Enum):
    """Attendance decision for a single class."""

    PRESENT = "present"
    ABSENT = "absent"

    @classmethod
    def parse(cls, value: "str | AttendanceStatus") -> "AttendanceStatus":
        if isinstance(value, AttendanceStatus):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {value!r}") from None


class Weekday(IntEnum):
    """Day of week, numbered like ``date.weekday()`` (Monday == 0)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: "str | int | Weekday") -> "Weekday":
        if isinstance(value, Weekday):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ValidationError(f"Invalid weekday number: {value!r}") from None
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValidationError(f"Invalid weekday name: {value!r}") from None

    @property
    def label(self) -> str:
        return self.name.capitalize()


class SchedulerState(str, Enum):
    """Lifecycle of the auto-mark scheduler."""

    DISABLED = "disabled"
    ENABLED = "enabled"


class ProjectionMode(str, Enum):
    """Scenario simulated by the projector."""

    WHOLE_DAY = "whole-day"
    PER_SUBJECT = "per-subject"
    ABSENCE_PLAN = "absence-plan"
