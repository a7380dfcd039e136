from __future__ import annotations

from typing import Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def list_holidays(self, *, user_id: int) -> Sequence[Holiday]:
        raise NotImplementedError
