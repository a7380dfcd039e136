"""Attendance aggregation.

Turns the explicit record stream plus the weekly schedule and calendar
exceptions into present/absent/total counts. Unmarked past classes are
counted as attended: see ``AttendanceAggregator.backfill_auto_present``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from ..calendar_rules.model import Holiday
from ..calendar_rules.resolver import CalendarExclusionResolver
from ..common.datetime_utils import DateLike, coerce_date, iter_dates
from ..common.percent import percentage
from ..core.enums import AttendanceStatus
from ..schedules.index import ScheduleIndex
from ..schedules.model import ScheduleSlot
from .model import (
    EMPTY_STATS,
    AttendanceKey,
    AttendanceRecord,
    AttendanceStats,
    ClassTypeStats,
    OverallStats,
    SubjectStats,
)

T = TypeVar("T")


@dataclass
class _Tally:
    present: int = 0
    total: int = 0
    by_type: Dict[str, List[int]] = field(default_factory=dict)

    def add(self, record: AttendanceRecord) -> None:
        hit = 1 if record.is_present else 0
        self.present += hit
        self.total += 1
        counts = self.by_type.setdefault(record.class_type, [0, 0])
        counts[0] += hit
        counts[1] += 1


class AttendanceAggregator:
    def __init__(self, schedule: ScheduleIndex, resolver: CalendarExclusionResolver):
        self._schedule = schedule
        self._resolver = resolver

    def explicit_records(self, records: Iterable[AttendanceRecord]) -> Dict[AttendanceKey, AttendanceRecord]:
        """Step 1: explicit records keyed by (subject, date, slot).

        Dates given as strings are parsed strictly. If the stream repeats a key,
        the first record wins.
        """

        out: Dict[AttendanceKey, AttendanceRecord] = {}
        for r in records:
            if type(r.class_date) is not date:
                r = replace(r, class_date=coerce_date(r.class_date))
            out.setdefault(r.key, r)
        return out

    def backfill_auto_present(
        self,
        explicit: Dict[AttendanceKey, AttendanceRecord],
        *,
        as_of: date,
        term_start: Optional[date] = None,
        term_end: Optional[date] = None,
    ) -> List[AttendanceRecord]:
        """Step 2: synthesize "present" for every unmarked past class.

        Covers each non-excluded date from ``term_start`` (or the earliest
        explicit record) up to the day before ``as_of``, and never past
        ``term_end``. A slot already covered by an explicit record is never
        synthesized. A slotless explicit record covers the earliest unclaimed
        slot of its subject on that date.
        """

        start = term_start
        if start is None:
            if not explicit:
                return []
            start = min(k.class_date for k in explicit)

        end = as_of - timedelta(days=1)
        if term_end is not None:
            end = min(end, term_end)

        by_date: Dict[date, List[AttendanceKey]] = defaultdict(list)
        for k in explicit:
            by_date[k.class_date].append(k)

        synthesized: List[AttendanceRecord] = []
        for day in iter_dates(start, end):
            if self._resolver.is_excluded(day):
                continue
            slots = self._schedule.slots_for(day)
            if not slots:
                continue

            for slot in unclaimed(slots, by_date.get(day, ()), key=slot_key(day)):
                synthesized.append(
                    AttendanceRecord(
                        record_id=None,
                        class_date=day,
                        subject_key=slot.subject_key,
                        status=AttendanceStatus.PRESENT,
                        class_type=slot.class_type,
                        schedule_slot_id=slot.slot_id,
                        is_auto_marked=True,
                    )
                )
        return synthesized

    def fold(self, records: Iterable[AttendanceRecord]) -> AttendanceStats:
        """Step 3/4: group by subject and count, skipping excluded dates."""

        tallies: Dict[str, _Tally] = {}
        for r in records:
            if self._resolver.is_excluded(r.class_date):
                continue
            tallies.setdefault(r.subject_key, _Tally()).add(r)

        if not tallies:
            return EMPTY_STATS

        return build_stats({k: (t.present, t.total, t.by_type) for k, t in tallies.items()})

    def compute_stats(
        self,
        records: Iterable[AttendanceRecord],
        *,
        as_of: DateLike,
        term_start: Optional[DateLike] = None,
        term_end: Optional[DateLike] = None,
    ) -> AttendanceStats:
        as_of = coerce_date(as_of)
        term_start = coerce_date(term_start) if term_start is not None else None
        term_end = coerce_date(term_end) if term_end is not None else None

        explicit = self.explicit_records(records)
        synthesized = self.backfill_auto_present(explicit, as_of=as_of, term_start=term_start, term_end=term_end)
        return self.fold(list(explicit.values()) + synthesized)


def build_stats(counts: Dict[str, tuple]) -> AttendanceStats:
    """Build stats from {subject: (present, total[, by_type])}.

    Subjects with zero total are left out of the subject list.
    """

    subjects: List[SubjectStats] = []
    present_sum = 0
    total_sum = 0
    for subject_key in sorted(counts):
        present, total, *rest = counts[subject_key]
        if total <= 0:
            continue
        by_type = rest[0] if rest else {}
        present_sum += present
        total_sum += total
        subjects.append(
            SubjectStats(
                subject_key=subject_key,
                present=present,
                absent=total - present,
                total=total,
                percentage=percentage(present, total),
                class_types=tuple(
                    ClassTypeStats(class_type=ct, present=p, total=t) for ct, (p, t) in sorted(by_type.items())
                ),
            )
        )

    overall = OverallStats(
        present=present_sum,
        absent=total_sum - present_sum,
        total=total_sum,
        percentage=percentage(present_sum, total_sum),
    )
    return AttendanceStats(overall=overall, subjects=tuple(subjects))


def compute_stats(
    records: Iterable[AttendanceRecord],
    slots: Iterable[ScheduleSlot],
    *,
    as_of: DateLike,
    holidays: Iterable[Holiday] = (),
    off_days: Iterable = (),
    term_start: Optional[DateLike] = None,
    term_end: Optional[DateLike] = None,
) -> AttendanceStats:
    """Functional entry point: stats from raw inputs."""

    aggregator = AttendanceAggregator(ScheduleIndex(slots), CalendarExclusionResolver(holidays, off_days))
    return aggregator.compute_stats(records, as_of=as_of, term_start=term_start, term_end=term_end)


def is_day_fully_recorded(day: date, schedule: ScheduleIndex, records: Iterable[AttendanceRecord]) -> bool:
    """True when the day has classes and at least as many records as slots."""

    scheduled = schedule.class_count(day)
    if scheduled == 0:
        return False
    recorded = sum(1 for r in records if coerce_date(r.class_date) == day)
    return recorded >= scheduled


def slot_key(day: date) -> Callable[[ScheduleSlot], AttendanceKey]:
    return lambda slot: AttendanceKey(slot.subject_key, day, slot.slot_id)


def unclaimed(items: Sequence[T], keys: Iterable[AttendanceKey], *, key: Callable[[T], AttendanceKey]) -> List[T]:
    """Items (slots or staged classes, in start-time order) no decision covers yet.

    A key with a slot id covers exactly that slot. A slotless key covers the
    earliest remaining slot of its subject on its date.
    """

    claimed = set()
    slotless: Dict[tuple, int] = defaultdict(int)
    for k in keys:
        if k.schedule_slot_id:
            claimed.add(k)
        else:
            slotless[(k.subject_key, k.class_date)] += 1

    remaining: List[T] = []
    for item in items:
        k = key(item)
        if k in claimed:
            continue
        bucket = (k.subject_key, k.class_date)
        if slotless.get(bucket, 0) > 0:
            slotless[bucket] -= 1
            continue
        remaining.append(item)
    return remaining
