from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from pathlib import Path
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .automark.cache import JsonFileStagingCache
from .automark.scheduler import AutoMarkRegistry, AutoMarkScheduler
from .automark.service import AutoMarkService
from .calendar_rules.mysql_holiday_repository import MySQLHolidayRepository
from .common.clock import Clock, SystemClock
from .core.constants import (
    DEFAULT_CUTOFF_TIME,
    DEFAULT_FETCH_WORKERS,
    DEFAULT_SCAN_INTERVAL_SECONDS,
    DEFAULT_TARGET_PERCENTAGE,
)
from .database.connection import DBConfig, DatabaseConnection
from .projection.factory import ProjectionStrategyFactory
from .projection.service import ProjectionService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .target.service import TargetService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_repo: MySQLAttendanceRepository
    schedules_repo: MySQLScheduleRepository
    holidays_repo: MySQLHolidayRepository

    attendance_service: AttendanceService
    projection_service: ProjectionService
    target_service: TargetService
    automark: AutoMarkRegistry

    default_target_pct: float = DEFAULT_TARGET_PERCENTAGE


def build_container(
    *,
    db_config: dict,
    staging_dir: str | Path = "instance/staging",
    scan_interval_seconds: float = DEFAULT_SCAN_INTERVAL_SECONDS,
    cutoff: time = DEFAULT_CUTOFF_TIME,
    fetch_workers: int = DEFAULT_FETCH_WORKERS,
    default_target_pct: float = DEFAULT_TARGET_PERCENTAGE,
    clock: Optional[Clock] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    clock = clock or SystemClock()
    staging_dir = Path(staging_dir)

    attendance_repo = MySQLAttendanceRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)

    def make_scheduler(user_id: int) -> AutoMarkScheduler:
        service = AutoMarkService(
            user_id,
            attendance_repo,
            schedules_repo,
            holidays_repo,
            JsonFileStagingCache(staging_dir / f"user-{user_id}.json"),
            clock=clock,
            fetch_workers=fetch_workers,
        )
        return AutoMarkScheduler(service, scan_interval_seconds=scan_interval_seconds, cutoff=cutoff, clock=clock)

    automark = AutoMarkRegistry(make_scheduler)

    attendance_service = AttendanceService(
        attendance_repo,
        schedules_repo,
        holidays_repo,
        clock=clock,
        fetch_workers=fetch_workers,
        pending_source=lambda user_id: automark.get(user_id).service.pending_records(),
    )
    projection_service = ProjectionService(
        attendance_service,
        strategy_factory=ProjectionStrategyFactory(),
        clock=clock,
    )
    target_service = TargetService(attendance_service, clock=clock)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        holidays_repo=holidays_repo,
        attendance_service=attendance_service,
        projection_service=projection_service,
        target_service=target_service,
        automark=automark,
        default_target_pct=float(default_target_pct),
    )
