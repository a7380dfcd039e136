from __future__ import annotations

from datetime import timedelta
from typing import Optional

from ..attendance.service import AttendanceService
from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import DateLike, coerce_date
from ..core.exceptions import ComputationSkipped, ValidationError
from .model import TargetResult
from .solver import TargetSolver


class TargetService:
    """Use case: "how many days must I attend to reach X% by the end of term?"."""

    def __init__(self, attendance: AttendanceService, *, clock: Optional[Clock] = None):
        self._attendance = attendance
        self._clock = clock or SystemClock()

    def solve(
        self,
        user_id: int,
        *,
        target_pct: float,
        end_date: Optional[DateLike] = None,
        start_date: Optional[DateLike] = None,
        subject_key: Optional[str] = None,
    ) -> TargetResult:
        ctx = self._attendance.load_context(user_id)
        if len(ctx.schedule) == 0:
            raise ComputationSkipped("No weekly schedule to project over")

        if end_date is None:
            if ctx.period is None:
                raise ValidationError("end_date is required when no academic period is set")
            end_date = ctx.period.end_date

        if start_date is None:
            start_date = self.default_start_date(user_id, context=ctx)

        stats = self._attendance.get_stats(user_id, context=ctx)
        if subject_key is None:
            attended, total = stats.overall.present, stats.overall.total
        else:
            subject = stats.subject(subject_key)
            attended, total = (subject.present, subject.total) if subject else (0, 0)

        return TargetSolver(ctx.schedule, ctx.resolver).solve(
            current_attended=attended,
            current_total=total,
            target_pct=target_pct,
            start_date=coerce_date(start_date),
            end_date=coerce_date(end_date),
            subject_key=subject_key,
        )

    def default_start_date(self, user_id: int, *, context=None):
        """Today, or tomorrow when today's classes are already all recorded."""

        today = self._clock.now().date()
        if self._attendance.is_today_fully_recorded(user_id, context=context):
            return today + timedelta(days=1)
        return today
