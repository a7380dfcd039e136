from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date
from .model import AttendanceKey, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, subject_key, class_date, status, class_type, schedule_slot_id, is_auto_marked"

_INSERT = """
    INSERT INTO attendance_records(user_id, subject_key, class_date, status, class_type, schedule_slot_id, is_auto_marked)
    VALUES(%s,%s,%s,%s,%s,%s,%s)
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        class_date=to_date(r["class_date"]),
        subject_key=str(r["subject_key"]),
        status=AttendanceStatus(r["status"]),
        class_type=r.get("class_type") or "none",
        schedule_slot_id=r.get("schedule_slot_id") or None,
        is_auto_marked=bool(r.get("is_auto_marked")),
    )


def _params(user_id: int, record: AttendanceRecord) -> tuple:
    return (
        int(user_id),
        record.subject_key,
        record.class_date,
        AttendanceStatus.parse(record.status).value,
        record.class_type,
        record.schedule_slot_id or "",
        1 if record.is_auto_marked else 0,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, *, user_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s ORDER BY class_date ASC",
                (int(user_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_range(self, *, user_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND class_date BETWEEN %s AND %s
                ORDER BY class_date ASC
                """,
                (int(user_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def exists(self, *, user_id: int, key: AttendanceKey) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS hit FROM attendance_records
                WHERE user_id=%s AND subject_key=%s AND class_date=%s AND schedule_slot_id=%s
                LIMIT 1
                """,
                (int(user_id), key.subject_key, key.class_date, key.schedule_slot_id or ""),
            )
            return fetchone(cur) is not None

    def create(self, *, user_id: int, record: AttendanceRecord) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT, _params(user_id, record))
            return int(cur.lastrowid)

    def bulk_create(self, *, user_id: int, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0
        # Single transaction; db_cursor rolls back the whole batch on any error.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(_INSERT, [_params(user_id, r) for r in records])
            return len(records)
