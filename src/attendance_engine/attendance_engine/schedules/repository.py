from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import AcademicPeriod, ScheduleSlot


class ScheduleRepository(Protocol):
    def list_slots(self, *, user_id: int) -> Sequence[ScheduleSlot]:
        raise NotImplementedError

    def list_off_days(self, *, user_id: int) -> Sequence[Weekday]:
        raise NotImplementedError

    def get_current_period(self, *, user_id: int) -> Optional[AcademicPeriod]:
        """The academic period the weekly schedule belongs to, if one is set."""

        raise NotImplementedError
