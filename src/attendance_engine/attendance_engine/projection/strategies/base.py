from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from ...calendar_rules.resolver import CalendarExclusionResolver
from ...schedules.index import ScheduleIndex
from ..model import SimulatedClass


class ProjectionStrategy(ABC):
    """Strategy Pattern: encapsulate which hypothetical classes a scenario adds."""

    @abstractmethod
    def simulate(self, *, schedule: ScheduleIndex, resolver: CalendarExclusionResolver) -> List[SimulatedClass]:
        raise NotImplementedError
