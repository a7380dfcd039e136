from __future__ import annotations

import logging
import threading
from datetime import datetime, time, timedelta
from typing import Any, Callable, Dict, List, Optional

from ..common.clock import Clock, SystemClock
from ..core.constants import DEFAULT_CUTOFF_TIME, DEFAULT_SCAN_INTERVAL_SECONDS
from ..core.enums import SchedulerState
from ..core.exceptions import UploadFailure
from .model import FlushResult, PendingAttendance
from .service import AutoMarkService

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], Any]


def daemon_timer(delay: float, fn: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, fn)
    timer.daemon = True
    return timer


class AutoMarkScheduler:
    """Drives one user's ``AutoMarkService`` on a timer.

    Two cancellable timers run while enabled: a periodic scan and the
    end-of-day cutoff, which force-stages and uploads, then re-arms for the
    next day.
    """

    def __init__(
        self,
        service: AutoMarkService,
        *,
        scan_interval_seconds: float = DEFAULT_SCAN_INTERVAL_SECONDS,
        cutoff: time = DEFAULT_CUTOFF_TIME,
        clock: Optional[Clock] = None,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self._service = service
        self._interval = float(scan_interval_seconds)
        self._cutoff = cutoff
        self._clock = clock or SystemClock()
        self._timer_factory = timer_factory or daemon_timer
        self._lock = threading.Lock()
        self._scan_timer = None
        self._cutoff_timer = None
        self._running = False

    @property
    def service(self) -> AutoMarkService:
        return self._service

    @property
    def state(self) -> SchedulerState:
        return self._service.state

    @property
    def running(self) -> bool:
        return self._running

    def seconds_until_cutoff(self, now: Optional[datetime] = None) -> float:
        now = now or self._clock.now()
        target = datetime.combine(now.date(), self._cutoff, tzinfo=now.tzinfo)
        if target <= now:
            target += timedelta(days=1)
        return (target - now).total_seconds()

    def start(self) -> None:
        """Restore a previously enabled scheduler (app start-up)."""

        if self.state != SchedulerState.ENABLED:
            return
        try:
            self._service.resume()
        except UploadFailure:
            logger.warning("Leftover upload failed for user=%s; will retry at cutoff", self._service.user_id)
        self._arm()

    def enable(self) -> List[PendingAttendance]:
        staged = self._service.enable()
        self._arm()
        return staged

    def disable(self) -> Optional[FlushResult]:
        self.stop()
        return self._service.disable()

    def stop(self) -> None:
        """Cancel the timers without touching the persisted enabled flag."""

        with self._lock:
            self._running = False
            for timer in (self._scan_timer, self._cutoff_timer):
                if timer is not None:
                    timer.cancel()
            self._scan_timer = None
            self._cutoff_timer = None

    def _arm(self) -> None:
        self.stop()
        with self._lock:
            self._running = True
            self._scan_timer = self._start_timer(self._interval, self._on_scan)
            self._cutoff_timer = self._start_timer(self.seconds_until_cutoff(), self._on_cutoff)

    def _start_timer(self, delay: float, fn: Callable[[], None]):
        timer = self._timer_factory(delay, fn)
        timer.start()
        return timer

    def _on_scan(self) -> None:
        try:
            self._service.scan()
        except Exception:
            logger.exception("Auto-mark scan failed for user=%s; retrying next cycle", self._service.user_id)
        finally:
            with self._lock:
                if self._running:
                    self._scan_timer = self._start_timer(self._interval, self._on_scan)

    def _on_cutoff(self) -> None:
        try:
            self._service.end_of_day()
        except UploadFailure as exc:
            logger.warning("End-of-day upload failed for user=%s: %s", self._service.user_id, exc)
        except Exception:
            logger.exception("End-of-day run failed for user=%s", self._service.user_id)
        finally:
            with self._lock:
                if self._running:
                    # Past today's cutoff, so this lands on tomorrow's.
                    self._cutoff_timer = self._start_timer(self.seconds_until_cutoff(), self._on_cutoff)


class AutoMarkRegistry:
    """Lazily builds and starts one scheduler per user."""

    def __init__(self, factory: Callable[[int], AutoMarkScheduler]):
        self._factory = factory
        self._schedulers: Dict[int, AutoMarkScheduler] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> AutoMarkScheduler:
        user_id = int(user_id)
        with self._lock:
            scheduler = self._schedulers.get(user_id)
            if scheduler is None:
                scheduler = self._factory(user_id)
                self._schedulers[user_id] = scheduler
                scheduler.start()
            return scheduler

    def shutdown(self) -> None:
        with self._lock:
            schedulers = list(self._schedulers.values())
            self._schedulers.clear()
        for scheduler in schedulers:
            scheduler.stop()
