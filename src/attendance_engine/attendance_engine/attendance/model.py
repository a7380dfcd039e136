from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import NamedTuple, Optional, Tuple

from ..core.constants import DEFAULT_CLASS_TYPE
from ..core.enums import AttendanceStatus


class AttendanceKey(NamedTuple):
    """Uniqueness key: at most one record per (subject, date, slot)."""

    subject_key: str
    class_date: date
    schedule_slot_id: Optional[str]


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance decision for one class."""

    record_id: Optional[int]
    class_date: date
    subject_key: str
    status: AttendanceStatus
    class_type: str = DEFAULT_CLASS_TYPE
    schedule_slot_id: Optional[str] = None
    is_auto_marked: bool = False

    @property
    def key(self) -> AttendanceKey:
        return AttendanceKey(self.subject_key, self.class_date, self.schedule_slot_id or None)

    @property
    def is_present(self) -> bool:
        return self.status == AttendanceStatus.PRESENT


@dataclass(frozen=True)
class ClassTypeStats:
    class_type: str
    present: int
    total: int


@dataclass(frozen=True)
class SubjectStats:
    subject_key: str
    present: int
    absent: int
    total: int
    percentage: int
    class_types: Tuple[ClassTypeStats, ...] = ()


@dataclass(frozen=True)
class OverallStats:
    present: int
    absent: int
    total: int
    percentage: int


@dataclass(frozen=True)
class AttendanceStats:
    """Derived read-model, recomputed on demand and never stored."""

    overall: OverallStats
    subjects: Tuple[SubjectStats, ...] = field(default_factory=tuple)

    def subject(self, subject_key: str) -> Optional[SubjectStats]:
        for s in self.subjects:
            if s.subject_key == subject_key:
                return s
        return None

    def to_dict(self) -> dict:
        return {
            "overall": {
                "present": self.overall.present,
                "absent": self.overall.absent,
                "total": self.overall.total,
                "percentage": self.overall.percentage,
            },
            "subjects": [
                {
                    "subject_key": s.subject_key,
                    "present": s.present,
                    "absent": s.absent,
                    "total": s.total,
                    "percentage": s.percentage,
                    "class_types": {c.class_type: {"present": c.present, "total": c.total} for c in s.class_types},
                }
                for s in self.subjects
            ],
        }


EMPTY_STATS = AttendanceStats(overall=OverallStats(present=0, absent=0, total=0, percentage=0))
