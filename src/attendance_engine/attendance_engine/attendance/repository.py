from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceKey, AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_user(self, *, user_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_range(self, *, user_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Records with start <= class_date <= end."""

        raise NotImplementedError

    def exists(self, *, user_id: int, key: AttendanceKey) -> bool:
        raise NotImplementedError

    def create(self, *, user_id: int, record: AttendanceRecord) -> int:
        """Persist one record. Returns record_id."""

        raise NotImplementedError

    def bulk_create(self, *, user_id: int, records: Sequence[AttendanceRecord]) -> int:
        """Persist all records in one transaction (all or nothing).

        Returns the number of rows written.
        """

        raise NotImplementedError
