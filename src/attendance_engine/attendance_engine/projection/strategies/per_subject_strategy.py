from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from ...calendar_rules.resolver import CalendarExclusionResolver
from ...common.datetime_utils import DateLike, coerce_date
from ...core.enums import AttendanceStatus, Weekday
from ...core.exceptions import ComputationSkipped, InconsistentScheduleError, InvalidDateError
from ...schedules.index import ScheduleIndex
from ..model import SimulatedClass
from .base import ProjectionStrategy


class PerSubjectAbsenceStrategy(ProjectionStrategy):
    """Absent for chosen subjects on chosen dates.

    Each (date, subject) pair adds one absence to that subject. Holidays and
    off-days in the selection are dropped silently.
    """

    def __init__(self, selection: Mapping[DateLike, Iterable[str]], *, earliest: Optional[DateLike] = None):
        self.selection = {coerce_date(d): sorted(set(subjects)) for d, subjects in selection.items()}
        if earliest is not None and self.selection and min(self.selection) < coerce_date(earliest):
            raise InvalidDateError(f"{min(self.selection).isoformat()} is in the past")

    def simulate(self, *, schedule: ScheduleIndex, resolver: CalendarExclusionResolver) -> List[SimulatedClass]:
        out: List[SimulatedClass] = []
        for day in sorted(self.selection):
            if resolver.is_excluded(day):
                continue

            slots_by_subject = {}
            for slot in schedule.slots_for(day):
                slots_by_subject.setdefault(slot.subject_key, slot)

            for subject_key in self.selection[day]:
                slot = slots_by_subject.get(subject_key)
                if slot is None:
                    raise InconsistentScheduleError(
                        f"{subject_key!r} has no class scheduled on {Weekday(day.weekday()).label} ({day.isoformat()})"
                    )
                out.append(
                    SimulatedClass(
                        class_date=day,
                        subject_key=subject_key,
                        status=AttendanceStatus.ABSENT,
                        class_type=slot.class_type,
                    )
                )

        if not out:
            raise ComputationSkipped("No eligible classes in the selection")
        return out
