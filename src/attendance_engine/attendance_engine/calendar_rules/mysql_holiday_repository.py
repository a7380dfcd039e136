from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, to_date
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_holidays(self, *, user_id: int) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_date, reason
                FROM holidays
                WHERE user_id=%s
                ORDER BY holiday_date ASC
                """,
                (int(user_id),),
            )
            rows = fetchall(cur)
            return [Holiday(holiday_date=to_date(r["holiday_date"]), reason=r.get("reason") or "") for r in rows]
