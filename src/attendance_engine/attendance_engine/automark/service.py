"""Auto-mark service.

Detects elapsed classes the user has not decided on, stages them as
"present" in the per-user staging cache and uploads the cache in one batch.
Every read-modify-write of the pending map happens under one lock, so a scan
and a flush never interleave.
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from operator import attrgetter
from typing import Callable, List, Optional

from ..attendance.aggregator import unclaimed
from ..attendance.model import AttendanceKey, AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..calendar_rules.repository import HolidayRepository
from ..calendar_rules.resolver import CalendarExclusionResolver
from ..common.clock import Clock, SystemClock
from ..common.concurrency import fetch_all
from ..common.datetime_utils import DateLike, coerce_date
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_FETCH_WORKERS
from ..core.enums import AttendanceStatus, SchedulerState
from ..core.exceptions import UploadFailure, ValidationError
from ..schedules.index import ScheduleIndex
from ..schedules.repository import ScheduleRepository
from .cache import StagingCache
from .model import FlushResult, PendingAttendance, PendingChange
from .scanner import find_unmarked_slots

logger = logging.getLogger(__name__)

Subscriber = Callable[[PendingChange], None]


class AutoMarkService:
    def __init__(
        self,
        user_id: int,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        holidays: HolidayRepository,
        cache: StagingCache,
        *,
        clock: Optional[Clock] = None,
        fetch_workers: int = DEFAULT_FETCH_WORKERS,
    ):
        self._user_id = int(user_id)
        self._attendance = attendance
        self._schedules = schedules
        self._holidays = holidays
        self._cache = cache
        self._clock = clock or SystemClock()
        self._fetch_workers = int(fetch_workers)
        self._lock = threading.RLock()
        self._subscribers: List[Subscriber] = []

    @property
    def user_id(self) -> int:
        return self._user_id

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.ENABLED if self._cache.is_enabled() else SchedulerState.DISABLED

    @property
    def last_upload(self) -> Optional[date]:
        return self._cache.get_last_upload()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change observer. Returns the unsubscribe function."""

        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, change: PendingChange) -> None:
        if change.is_empty:
            return
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(change)

    def snapshot(self) -> List[PendingAttendance]:
        with self._lock:
            pending = self._cache.load_pending()
        return sorted(pending.values(), key=lambda p: (p.class_date, p.start_time, p.subject_key))

    def pending_records(self) -> List[AttendanceRecord]:
        """Staged entries as records, so stats can count them as explicit."""

        return [p.to_record() for p in self.snapshot()]

    def scan(self, *, force: bool = False) -> List[PendingAttendance]:
        """Stage today's elapsed, undecided classes as present. No-op while disabled.

        ``force`` stages every remaining class of the day regardless of its end
        time. Used at the end-of-day cutoff.
        """

        if self.state != SchedulerState.ENABLED:
            logger.debug("Auto-mark scan ignored for user=%s: disabled", self._user_id)
            return []

        now = self._clock.now()
        today = now.date()
        data = fetch_all(
            {
                "slots": lambda: self._schedules.list_slots(user_id=self._user_id),
                "off_days": lambda: self._schedules.list_off_days(user_id=self._user_id),
                "holidays": lambda: self._holidays.list_holidays(user_id=self._user_id),
                "period": lambda: self._schedules.get_current_period(user_id=self._user_id),
                "persisted": lambda: self._attendance.list_range(user_id=self._user_id, start=today, end=today),
            },
            max_workers=self._fetch_workers,
        )

        period = data["period"]
        if period is not None and not period.contains(today):
            logger.info("Auto-mark idle for user=%s: %s is outside %s", self._user_id, today, period.semester)
            return []
        if CalendarExclusionResolver(data["holidays"], data["off_days"]).is_excluded(today):
            return []

        slots = ScheduleIndex(data["slots"]).slots_for(today)
        persisted = {r.key for r in data["persisted"]}

        with self._lock:
            pending = self._cache.load_pending()
            staged = find_unmarked_slots(
                slots,
                day=today,
                now_time=now.time(),
                pending_keys=pending.keys(),
                persisted_keys=persisted,
                force=force,
            )
            if staged:
                pending.update({p.key: p for p in staged})
                self._cache.save_pending(pending)

        if staged:
            logger.info("Auto-mark staged %d class(es) for user=%s on %s", len(staged), self._user_id, today)
            self._notify(PendingChange(added=tuple(p.key for p in staged)))
        return staged

    def flush(self) -> FlushResult:
        """Upload the whole pending cache as one batch.

        Entries already covered by a persisted record are skipped. On failure the cache is kept
        untouched and ``UploadFailure`` is raised.
        """

        with self._lock:
            pending = self._cache.load_pending()
            if not pending:
                return FlushResult(uploaded=0, skipped=0)

            days = [k.class_date for k in pending]
            ordered = sorted(pending.values(), key=lambda p: (p.class_date, p.start_time, p.subject_key))
            try:
                persisted = [
                    r.key
                    for r in self._attendance.list_range(user_id=self._user_id, start=min(days), end=max(days))
                ]
                to_upload = [p.to_record() for p in unclaimed(ordered, persisted, key=attrgetter("key"))]
                uploaded = self._attendance.bulk_create(user_id=self._user_id, records=to_upload)
            except Exception as exc:
                logger.warning(
                    "Auto-mark upload failed for user=%s, keeping %d pending: %s", self._user_id, len(pending), exc
                )
                raise UploadFailure(f"Upload failed: {exc}", pending_count=len(pending)) from exc

            today = self._clock.now().date()
            self._cache.save_pending({})
            self._cache.set_last_upload(today)

        skipped = len(pending) - len(to_upload)
        logger.info("Auto-mark uploaded %d record(s) for user=%s (skipped %d)", uploaded, self._user_id, skipped)
        self._notify(PendingChange(removed=tuple(pending)))
        return FlushResult(uploaded=uploaded, skipped=skipped, upload_date=today)

    def end_of_day(self) -> FlushResult:
        self.scan(force=True)
        return self.flush()

    def resume(self) -> Optional[FlushResult]:
        """Upload leftovers from earlier days, e.g. after the app was closed at cutoff."""

        today = self._clock.now().date()
        if not any(p.class_date < today for p in self.snapshot()):
            return None
        logger.info("Auto-mark resuming leftover uploads for user=%s", self._user_id)
        return self.flush()

    def enable(self) -> List[PendingAttendance]:
        self._cache.set_enabled(True)
        logger.info("Auto-mark enabled for user=%s", self._user_id)
        return self.scan()

    def disable(self) -> Optional[FlushResult]:
        """Flush whatever is staged, then turn auto-marking off."""

        try:
            return self.flush() if self.snapshot() else None
        finally:
            self._cache.set_enabled(False)
            logger.info("Auto-mark disabled for user=%s", self._user_id)

    def update_pending(
        self,
        *,
        subject_key: str,
        class_date: DateLike,
        schedule_slot_id: Optional[str],
        status: str | AttendanceStatus,
    ) -> PendingAttendance:
        """Manual override of a staged entry. Does not trigger a scan."""

        key = self._key(subject_key, class_date, schedule_slot_id)
        status = AttendanceStatus.parse(status)
        with self._lock:
            pending = self._cache.load_pending()
            if key not in pending:
                raise ValidationError(f"No pending attendance for {subject_key} on {key.class_date.isoformat()}")
            entry = pending[key].with_status(status)
            pending[key] = entry
            self._cache.save_pending(pending)

        self._notify(PendingChange(updated=(key,)))
        return entry

    def remove_pending(self, *, subject_key: str, class_date: DateLike, schedule_slot_id: Optional[str]) -> bool:
        key = self._key(subject_key, class_date, schedule_slot_id)
        with self._lock:
            pending = self._cache.load_pending()
            if pending.pop(key, None) is None:
                return False
            self._cache.save_pending(pending)

        self._notify(PendingChange(removed=(key,)))
        return True

    @staticmethod
    def _key(subject_key: str, class_date: DateLike, schedule_slot_id: Optional[str]) -> AttendanceKey:
        return AttendanceKey(require_non_empty(subject_key, "subject_key"), coerce_date(class_date), schedule_slot_id or None)
