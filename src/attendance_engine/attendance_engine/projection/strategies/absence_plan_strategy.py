from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Tuple

from ...calendar_rules.resolver import CalendarExclusionResolver
from ...common.datetime_utils import DateLike, coerce_date, iter_dates
from ...core.enums import AttendanceStatus
from ...core.exceptions import ComputationSkipped, InvalidDateError
from ...schedules.index import ScheduleIndex
from ..model import SimulatedClass
from .base import ProjectionStrategy


class AbsencePlanStrategy(ProjectionStrategy):
    """Walk every class day from start up to the last planned absence.

    Planned absence dates count every slot as absent, the days in between as
    present. ``overrides`` maps (date, slot_id) to a status and wins over both.
    """

    def __init__(
        self,
        absent_dates: Iterable[DateLike],
        *,
        start_date: DateLike,
        skip_start_date: bool = False,
        overrides: Optional[Mapping[Tuple[DateLike, str], str]] = None,
        earliest: Optional[DateLike] = None,
    ):
        self.absent_dates = frozenset(coerce_date(d) for d in absent_dates)
        self.start_date = coerce_date(start_date)
        self.skip_start_date = bool(skip_start_date)
        self.overrides = {
            (coerce_date(d), str(slot_id)): AttendanceStatus.parse(status)
            for (d, slot_id), status in (overrides or {}).items()
        }
        if self.absent_dates and min(self.absent_dates) < self.start_date:
            raise InvalidDateError("Planned absences must not be before the start date")
        if earliest is not None and self.start_date < coerce_date(earliest):
            raise InvalidDateError(f"Start date {self.start_date.isoformat()} is in the past")

    def simulate(self, *, schedule: ScheduleIndex, resolver: CalendarExclusionResolver) -> List[SimulatedClass]:
        if not self.absent_dates:
            raise ComputationSkipped("No absence dates selected")

        out: List[SimulatedClass] = []
        for day in iter_dates(self.start_date, max(self.absent_dates)):
            if resolver.is_excluded(day):
                continue
            if self.skip_start_date and day == self.start_date:
                continue

            default = AttendanceStatus.ABSENT if day in self.absent_dates else AttendanceStatus.PRESENT
            for slot in schedule.slots_for(day):
                out.append(
                    SimulatedClass(
                        class_date=day,
                        subject_key=slot.subject_key,
                        status=self.overrides.get((day, slot.slot_id), default),
                        class_type=slot.class_type,
                    )
                )

        if not out:
            raise ComputationSkipped("No classes between the start date and the last absence")
        return out
