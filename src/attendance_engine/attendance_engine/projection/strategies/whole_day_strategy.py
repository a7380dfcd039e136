from __future__ import annotations

from typing import List, Optional

from ...calendar_rules.resolver import CalendarExclusionResolver
from ...common.datetime_utils import DateLike, coerce_date
from ...core.enums import AttendanceStatus
from ...core.exceptions import ComputationSkipped, InvalidDateError
from ...schedules.index import ScheduleIndex
from ..model import SimulatedClass
from .base import ProjectionStrategy


class WholeDayAbsenceStrategy(ProjectionStrategy):
    """Absent for a whole day: every subject scheduled that day gets one absence.

    ``earliest`` is normally today; earlier days are already part of the
    baseline and cannot be skipped again.
    """

    def __init__(self, absent_date: DateLike, *, earliest: Optional[DateLike] = None):
        self.absent_date = coerce_date(absent_date)
        if earliest is not None and self.absent_date < coerce_date(earliest):
            raise InvalidDateError(f"{self.absent_date.isoformat()} is in the past")

    def simulate(self, *, schedule: ScheduleIndex, resolver: CalendarExclusionResolver) -> List[SimulatedClass]:
        day = self.absent_date
        if resolver.is_holiday(day):
            reason = resolver.holiday_reason(day)
            raise ComputationSkipped(f"{day.isoformat()} is a holiday" + (f" ({reason})" if reason else ""))
        if resolver.is_excluded(day):
            raise ComputationSkipped(f"{day.isoformat()} is an off-day")

        slots = schedule.slots_for(day)
        if not slots:
            raise ComputationSkipped(f"No classes scheduled on {day.isoformat()}")

        out: List[SimulatedClass] = []
        seen = set()
        for slot in slots:
            if slot.subject_key in seen:
                continue
            seen.add(slot.subject_key)
            out.append(
                SimulatedClass(
                    class_date=day,
                    subject_key=slot.subject_key,
                    status=AttendanceStatus.ABSENT,
                    class_type=slot.class_type,
                )
            )
        return out
