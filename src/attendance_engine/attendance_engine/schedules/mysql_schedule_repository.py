from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, to_date
from .model import AcademicPeriod, ScheduleSlot
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_slots(self, *, user_id: int) -> Sequence[ScheduleSlot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT slot_id, day_of_week, subject_key, subject_name, class_type, start_time, end_time
                FROM schedule_slots
                WHERE user_id=%s
                ORDER BY day_of_week ASC, start_time ASC
                """,
                (int(user_id),),
            )
            rows = fetchall(cur)
            return [
                ScheduleSlot(
                    slot_id=str(r["slot_id"]),
                    day_of_week=Weekday(int(r["day_of_week"])),
                    subject_key=str(r["subject_key"]),
                    subject_name=r.get("subject_name"),
                    class_type=r.get("class_type") or "none",
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                )
                for r in rows
            ]

    def list_off_days(self, *, user_id: int) -> Sequence[Weekday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT day_of_week FROM off_days WHERE user_id=%s", (int(user_id),))
            return [Weekday(int(r["day_of_week"])) for r in fetchall(cur)]

    def get_current_period(self, *, user_id: int) -> Optional[AcademicPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT semester, start_date, end_date
                FROM academic_periods
                WHERE user_id=%s AND is_completed=0
                ORDER BY start_date DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AcademicPeriod(
                semester=str(r["semester"]),
                start_date=to_date(r["start_date"]),
                end_date=to_date(r["end_date"]),
            )
