from __future__ import annotations

from datetime import date, time
from itertools import chain
from typing import Collection, List, Sequence

from ..attendance.aggregator import slot_key, unclaimed
from ..attendance.model import AttendanceKey
from ..schedules.model import ScheduleSlot
from .model import PendingAttendance


def find_unmarked_slots(
    slots: Sequence[ScheduleSlot],
    *,
    day: date,
    now_time: time,
    pending_keys: Collection[AttendanceKey],
    persisted_keys: Collection[AttendanceKey],
    force: bool = False,
) -> List[PendingAttendance]:
    """Slots of ``day`` to stage as present.

    A slot qualifies when its end time has passed (or ``force`` is set, used at
    the end-of-day cutoff) and no pending or persisted decision covers it. A
    decision recorded without a slot covers the earliest slot of its subject
    that day, the same way stats count it.
    """

    decided = [k for k in chain(pending_keys, persisted_keys) if k.class_date == day]
    return [
        PendingAttendance.from_slot(slot, day)
        for slot in unclaimed(slots, decided, key=slot_key(day))
        if force or slot.end_time <= now_time
    ]
