"""Greedy target solver.

Walks future class days in date order, attending only as many classes as
needed each day (capped by what is scheduled), until the running ratio
reaches the target or the horizon ends.
"""

from __future__ import annotations

import math
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..calendar_rules.model import Holiday
from ..calendar_rules.resolver import CalendarExclusionResolver
from ..common.datetime_utils import DateLike, coerce_date, iter_dates
from ..common.percent import percentage, percentage_1dp
from ..common.validators import require_non_negative, require_percentage
from ..core.exceptions import InconsistentScheduleError, InvalidDateError, ValidationError
from ..schedules.index import ScheduleIndex
from ..schedules.model import ScheduleSlot
from .model import TargetResult


class TargetSolver:
    def __init__(self, schedule: ScheduleIndex, resolver: CalendarExclusionResolver):
        self._schedule = schedule
        self._resolver = resolver

    def classes_on(self, day: date, *, subject_key: Optional[str] = None) -> int:
        if self._resolver.is_excluded(day):
            return 0
        return self._schedule.class_count(day, subject_key=subject_key)

    def solve(
        self,
        *,
        current_attended: int,
        current_total: int,
        target_pct: float,
        start_date: DateLike,
        end_date: DateLike,
        subject_key: Optional[str] = None,
    ) -> TargetResult:
        attended = require_non_negative(current_attended, "current_attended")
        total = require_non_negative(current_total, "current_total")
        if attended > total:
            raise ValidationError("current_attended cannot exceed current_total")
        target_pct = require_percentage(target_pct)
        start = coerce_date(start_date)
        end = coerce_date(end_date)
        if start > end:
            raise InvalidDateError(f"start_date {start.isoformat()} is after end_date {end.isoformat()}")
        if subject_key is not None and not self._schedule.has_subject(subject_key):
            raise InconsistentScheduleError(f"{subject_key!r} is not in the weekly schedule")

        current_pct = percentage(attended, total)
        if current_pct >= target_pct:
            return TargetResult(
                days_needed=0,
                attended_added=0,
                classes_added=0,
                final_pct=percentage_1dp(attended, total),
                achieved=True,
                current_pct=current_pct,
                target_pct=target_pct,
            )

        target = Decimal(str(target_pct))
        run_attended, run_total, days = attended, total, 0
        for day in iter_dates(start, end):
            count = self.classes_on(day, subject_key=subject_key)
            if count == 0:
                continue

            run_total += count
            needed = math.ceil(target * run_total / 100 - run_attended)
            run_attended += max(0, min(needed, count))
            days += 1

            if run_attended * 100 >= target * run_total:
                return self._result(attended, total, run_attended, run_total, days, current_pct, target_pct, day)

        return self._result(attended, total, run_attended, run_total, days, current_pct, target_pct, None)

    @staticmethod
    def _result(attended, total, run_attended, run_total, days, current_pct, target_pct, reached_on) -> TargetResult:
        return TargetResult(
            days_needed=days,
            attended_added=run_attended - attended,
            classes_added=run_total - total,
            final_pct=percentage_1dp(run_attended, run_total),
            achieved=reached_on is not None,
            current_pct=current_pct,
            target_pct=target_pct,
            reached_on=reached_on,
        )


def solve(
    current_attended: int,
    current_total: int,
    target_pct: float,
    start_date: DateLike,
    end_date: DateLike,
    slots: Iterable[ScheduleSlot],
    *,
    holidays: Iterable[Holiday] = (),
    off_days: Iterable = (),
    subject_key: Optional[str] = None,
) -> TargetResult:
    """Functional entry point over raw schedule and calendar data."""

    solver = TargetSolver(ScheduleIndex(slots), CalendarExclusionResolver(holidays, off_days))
    return solver.solve(
        current_attended=current_attended,
        current_total=current_total,
        target_pct=target_pct,
        start_date=start_date,
        end_date=end_date,
        subject_key=subject_key,
    )
