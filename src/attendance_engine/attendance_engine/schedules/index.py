from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..core.enums import Weekday
from .model import ScheduleSlot


class ScheduleIndex:
    """Read-only lookup of the weekly schedule by day of week."""

    def __init__(self, slots: Iterable[ScheduleSlot]):
        by_day: Dict[Weekday, List[ScheduleSlot]] = defaultdict(list)
        self._by_id: Dict[str, ScheduleSlot] = {}
        for slot in slots:
            by_day[Weekday(slot.day_of_week)].append(slot)
            self._by_id[slot.slot_id] = slot

        self._by_day = {
            day: tuple(sorted(items, key=lambda s: (s.start_time, s.end_time, s.slot_id)))
            for day, items in by_day.items()
        }
        self._subjects = frozenset(s.subject_key for s in self._by_id.values())

    def slots_for(self, day: Union[Weekday, date]) -> Sequence[ScheduleSlot]:
        if isinstance(day, date):
            day = Weekday(day.weekday())
        return self._by_day.get(day, ())

    def class_count(self, day: Union[Weekday, date], *, subject_key: Optional[str] = None) -> int:
        slots = self.slots_for(day)
        if subject_key is None:
            return len(slots)
        return sum(1 for s in slots if s.subject_key == subject_key)

    def subjects_on(self, day: Union[Weekday, date]) -> List[str]:
        """Distinct subjects scheduled that day, in first-slot order."""
        seen: Dict[str, None] = {}
        for slot in self.slots_for(day):
            seen.setdefault(slot.subject_key, None)
        return list(seen)

    def get(self, slot_id: str) -> Optional[ScheduleSlot]:
        return self._by_id.get(slot_id)

    def has_subject(self, subject_key: str) -> bool:
        return subject_key in self._subjects

    @property
    def subjects(self) -> frozenset:
        return self._subjects

    def __len__(self) -> int:
        return len(self._by_id)
