"""In-memory stand-ins for the MySQL repositories and the wall clock."""

from __future__ import annotations

from datetime import datetime, time

from src.attendance_engine.attendance_engine.attendance.model import AttendanceRecord
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus
from src.attendance_engine.attendance_engine.schedules.model import ScheduleSlot


class FakeClock:
    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def set(self, now: datetime) -> None:
        self.current = now


class FakeAttendanceRepo:
    def __init__(self, records=()):
        self.records = list(records)
        self.fail_bulk = False
        self.bulk_calls = 0

    def list_for_user(self, *, user_id):
        return list(self.records)

    def list_range(self, *, user_id, start, end):
        return [r for r in self.records if start <= r.class_date <= end]

    def exists(self, *, user_id, key):
        return any(r.key == key for r in self.records)

    def create(self, *, user_id, record):
        rid = len(self.records) + 1
        self.records.append(
            AttendanceRecord(
                record_id=rid,
                class_date=record.class_date,
                subject_key=record.subject_key,
                status=record.status,
                class_type=record.class_type,
                schedule_slot_id=record.schedule_slot_id,
                is_auto_marked=record.is_auto_marked,
            )
        )
        return rid

    def bulk_create(self, *, user_id, records):
        self.bulk_calls += 1
        if self.fail_bulk:
            raise ConnectionError("database unavailable")
        for r in records:
            self.create(user_id=user_id, record=r)
        return len(records)


class FakeScheduleRepo:
    def __init__(self, slots=(), off_days=(), period=None):
        self.slots = list(slots)
        self.off_days = list(off_days)
        self.period = period

    def list_slots(self, *, user_id):
        return list(self.slots)

    def list_off_days(self, *, user_id):
        return list(self.off_days)

    def get_current_period(self, *, user_id):
        return self.period


class FakeHolidayRepo:
    def __init__(self, holidays=()):
        self.holidays = list(holidays)

    def list_holidays(self, *, user_id):
        return list(self.holidays)


def slot(slot_id, weekday, subject, start, end, class_type="none"):
    return ScheduleSlot(
        slot_id=slot_id,
        day_of_week=weekday,
        subject_key=subject,
        start_time=time(*start),
        end_time=time(*end),
        class_type=class_type,
    )


def record(day, subject, status, slot_id=None, class_type="none"):
    return AttendanceRecord(
        record_id=None,
        class_date=day,
        subject_key=subject,
        status=AttendanceStatus(status),
        class_type=class_type,
        schedule_slot_id=slot_id,
    )
