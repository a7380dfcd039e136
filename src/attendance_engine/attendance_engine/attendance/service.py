from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from ..calendar_rules.model import Holiday
from ..calendar_rules.repository import HolidayRepository
from ..calendar_rules.resolver import CalendarExclusionResolver
from ..common.clock import Clock, SystemClock
from ..common.concurrency import fetch_all
from ..common.datetime_utils import DateLike, coerce_date
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_CLASS_TYPE, DEFAULT_FETCH_WORKERS
from ..core.enums import AttendanceStatus, Weekday
from ..core.exceptions import InconsistentScheduleError, ValidationError
from ..schedules.index import ScheduleIndex
from ..schedules.model import AcademicPeriod, ScheduleSlot
from ..schedules.repository import ScheduleRepository
from .aggregator import AttendanceAggregator, is_day_fully_recorded
from .model import AttendanceKey, AttendanceRecord, AttendanceStats
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

PendingSource = Callable[[int], Iterable[AttendanceRecord]]


@dataclass(frozen=True)
class AttendanceContext:
    """Consistent snapshot of everything the calculators read for one user."""

    records: Sequence[AttendanceRecord]
    slots: Sequence[ScheduleSlot]
    off_days: Sequence[Weekday]
    holidays: Sequence[Holiday]
    period: Optional[AcademicPeriod] = None

    @property
    def schedule(self) -> ScheduleIndex:
        return ScheduleIndex(self.slots)

    @property
    def resolver(self) -> CalendarExclusionResolver:
        return CalendarExclusionResolver(self.holidays, self.off_days)

    @property
    def aggregator(self) -> AttendanceAggregator:
        return AttendanceAggregator(self.schedule, self.resolver)

    @property
    def term_start(self) -> Optional[date]:
        return self.period.start_date if self.period else None

    @property
    def term_end(self) -> Optional[date]:
        return self.period.end_date if self.period else None


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        holidays: HolidayRepository,
        *,
        clock: Optional[Clock] = None,
        fetch_workers: int = DEFAULT_FETCH_WORKERS,
        pending_source: Optional[PendingSource] = None,
    ):
        self._attendance = attendance
        self._pending_source = pending_source
        self._schedules = schedules
        self._holidays = holidays
        self._clock = clock or SystemClock()
        self._fetch_workers = int(fetch_workers)

    def load_context(self, user_id: int) -> AttendanceContext:
        """Fetch records, schedule, off-days, holidays and period concurrently."""

        data = fetch_all(
            {
                "records": lambda: self._attendance.list_for_user(user_id=user_id),
                "slots": lambda: self._schedules.list_slots(user_id=user_id),
                "off_days": lambda: self._schedules.list_off_days(user_id=user_id),
                "holidays": lambda: self._holidays.list_holidays(user_id=user_id),
                "period": lambda: self._schedules.get_current_period(user_id=user_id),
            },
            max_workers=self._fetch_workers,
        )
        return AttendanceContext(
            records=tuple(data["records"]),
            slots=tuple(data["slots"]),
            off_days=tuple(data["off_days"]),
            holidays=tuple(data["holidays"]),
            period=data["period"],
        )

    def get_stats(
        self,
        user_id: int,
        *,
        as_of: Optional[DateLike] = None,
        pending: Optional[Iterable[AttendanceRecord]] = None,
        context: Optional[AttendanceContext] = None,
    ) -> AttendanceStats:
        """Current stats. Staged (pending) decisions count as explicit records.

        When ``pending`` is omitted it is read from the configured pending source.
        """

        ctx = context or self.load_context(user_id)
        if pending is None:
            pending = self._pending_source(user_id) if self._pending_source else ()
        as_of_day = coerce_date(as_of) if as_of is not None else self._clock.now().date()
        records = list(ctx.records) + list(pending)
        return ctx.aggregator.compute_stats(
            records, as_of=as_of_day, term_start=ctx.term_start, term_end=ctx.term_end
        )

    def record(
        self,
        user_id: int,
        *,
        subject_key: str,
        class_date: DateLike,
        status: str | AttendanceStatus,
        class_type: Optional[str] = None,
        schedule_slot_id: Optional[str] = None,
    ) -> int:
        """Explicit user decision for one class. Refuses duplicates."""

        subject_key = require_non_empty(subject_key, "subject_key")
        day = coerce_date(class_date)
        status = AttendanceStatus.parse(status)

        if schedule_slot_id:
            slot = ScheduleIndex(self._schedules.list_slots(user_id=user_id)).get(schedule_slot_id)
            if slot is None or slot.subject_key != subject_key:
                raise InconsistentScheduleError(f"Slot {schedule_slot_id!r} is not a {subject_key!r} class")
            if slot.day_of_week != Weekday(day.weekday()):
                raise ValidationError(f"Slot {schedule_slot_id!r} is not scheduled on {day.isoformat()}")
            class_type = class_type or slot.class_type

        key = AttendanceKey(subject_key, day, schedule_slot_id or None)
        if self._attendance.exists(user_id=user_id, key=key):
            raise ValidationError(f"Attendance already recorded for {subject_key} on {day.isoformat()}")

        record_id = self._attendance.create(
            user_id=user_id,
            record=AttendanceRecord(
                record_id=None,
                class_date=day,
                subject_key=subject_key,
                status=status,
                class_type=class_type or DEFAULT_CLASS_TYPE,
                schedule_slot_id=schedule_slot_id or None,
            ),
        )
        logger.info("Recorded %s for user=%s subject=%s date=%s", status.value, user_id, subject_key, day)
        return record_id

    def is_today_fully_recorded(self, user_id: int, *, context: Optional[AttendanceContext] = None) -> bool:
        ctx = context or self.load_context(user_id)
        today = self._clock.now().date()
        todays = [r for r in ctx.records if coerce_date(r.class_date) == today]
        return is_day_fully_recorded(today, ctx.schedule, todays)
