from __future__ import annotations

from typing import Dict, Optional

from ..attendance.aggregator import build_stats
from ..attendance.model import AttendanceStats
from ..attendance.service import AttendanceContext, AttendanceService
from ..calendar_rules.resolver import CalendarExclusionResolver
from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import coerce_date
from ..core.enums import AttendanceStatus, ProjectionMode
from ..schedules.index import ScheduleIndex
from .factory import ProjectionStrategyFactory
from .model import ProjectionResult
from .strategies.base import ProjectionStrategy


class ScenarioProjector:
    """Applies a scenario's simulated classes on top of current stats."""

    def __init__(self, schedule: ScheduleIndex, resolver: CalendarExclusionResolver):
        self._schedule = schedule
        self._resolver = resolver

    def project(self, baseline: AttendanceStats, strategy: ProjectionStrategy) -> ProjectionResult:
        simulated = strategy.simulate(schedule=self._schedule, resolver=self._resolver)

        counts: Dict[str, list] = {}
        for s in baseline.subjects:
            by_type = {c.class_type: [c.present, c.total] for c in s.class_types}
            counts[s.subject_key] = [s.present, s.total, by_type]

        for c in simulated:
            entry = counts.setdefault(c.subject_key, [0, 0, {}])
            hit = 1 if c.status == AttendanceStatus.PRESENT else 0
            entry[0] += hit
            entry[1] += 1
            per_type = entry[2].setdefault(c.class_type, [0, 0])
            per_type[0] += hit
            per_type[1] += 1

        projected = build_stats({k: tuple(v) for k, v in counts.items()})
        return ProjectionResult(baseline=baseline, projected=projected, simulated=tuple(simulated))


class ProjectionService:
    """Use case: "what happens to my attendance if I skip ...?"."""

    def __init__(
        self,
        attendance: AttendanceService,
        *,
        strategy_factory: Optional[ProjectionStrategyFactory] = None,
        clock: Optional[Clock] = None,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or ProjectionStrategyFactory()
        self._clock = clock or SystemClock()

    def project(self, user_id: int, mode: str, payload: dict) -> ProjectionResult:
        ctx = self._attendance.load_context(user_id)
        today = self._clock.now().date()
        payload = dict(payload)
        if mode == ProjectionMode.ABSENCE_PLAN.value:
            payload.setdefault("start_date", today)
            if "skip_start_date" not in payload:
                payload["skip_start_date"] = self._start_day_already_recorded(user_id, ctx, payload["start_date"])

        strategy = self._factory.for_request(mode, payload, today=today)
        return self.project_with(user_id, strategy, context=ctx)

    def project_with(
        self, user_id: int, strategy: ProjectionStrategy, *, context: Optional[AttendanceContext] = None
    ) -> ProjectionResult:
        ctx = context or self._attendance.load_context(user_id)
        baseline = self._attendance.get_stats(user_id, context=ctx)
        return ScenarioProjector(ctx.schedule, ctx.resolver).project(baseline, strategy)

    def _start_day_already_recorded(self, user_id: int, ctx: AttendanceContext, start) -> bool:
        if coerce_date(start) != self._clock.now().date():
            return False
        return self._attendance.is_today_fully_recorded(user_id, context=ctx)
