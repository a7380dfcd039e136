from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Tuple

from ..attendance.model import AttendanceKey, AttendanceRecord
from ..common.datetime_utils import coerce_date
from ..core.constants import DEFAULT_CLASS_TYPE
from ..core.enums import AttendanceStatus
from ..schedules.model import ScheduleSlot


@dataclass(frozen=True)
class PendingAttendance:
    """A staged decision, detected automatically and not yet persisted."""

    subject_key: str
    class_date: date
    status: AttendanceStatus
    schedule_slot_id: str
    start_time: str
    end_time: str
    class_type: str = DEFAULT_CLASS_TYPE

    @classmethod
    def from_slot(cls, slot: ScheduleSlot, day: date) -> "PendingAttendance":
        return cls(
            subject_key=slot.subject_key,
            class_date=day,
            status=AttendanceStatus.PRESENT,
            schedule_slot_id=slot.slot_id,
            start_time=slot.start_time.strftime("%H:%M"),
            end_time=slot.end_time.strftime("%H:%M"),
            class_type=slot.class_type,
        )

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(self.subject_key, self.class_date, self.schedule_slot_id or None)

    def with_status(self, status: AttendanceStatus) -> "PendingAttendance":
        return replace(self, status=status)

    def to_record(self) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=None,
            class_date=self.class_date,
            subject_key=self.subject_key,
            status=self.status,
            class_type=self.class_type,
            schedule_slot_id=self.schedule_slot_id or None,
            is_auto_marked=True,
        )

    def to_dict(self) -> dict:
        return {
            "subject_key": self.subject_key,
            "date": self.class_date.isoformat(),
            "status": self.status.value,
            "schedule_slot_id": self.schedule_slot_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "class_type": self.class_type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PendingAttendance":
        return cls(
            subject_key=str(data["subject_key"]),
            class_date=coerce_date(data["date"]),
            status=AttendanceStatus.parse(data.get("status", "present")),
            schedule_slot_id=str(data.get("schedule_slot_id") or ""),
            start_time=str(data.get("start_time") or ""),
            end_time=str(data.get("end_time") or ""),
            class_type=data.get("class_type") or DEFAULT_CLASS_TYPE,
        )


@dataclass(frozen=True)
class PendingChange:
    """Change-set published to subscribers after each cache mutation."""

    added: Tuple[AttendanceKey, ...] = ()
    updated: Tuple[AttendanceKey, ...] = ()
    removed: Tuple[AttendanceKey, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.removed)


@dataclass(frozen=True)
class FlushResult:
    uploaded: int
    skipped: int
    upload_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "uploaded": self.uploaded,
            "skipped": self.skipped,
            "upload_date": self.upload_date.isoformat() if self.upload_date else None,
        }
