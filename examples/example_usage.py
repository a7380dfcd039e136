"""Example: drive the calculators straight from plain data, no Flask or MySQL.

Controllers are a thin layer; every rule lives in the services and the
functional entry points below.
"""

from datetime import date, time

from src.attendance_engine.attendance_engine.attendance.aggregator import compute_stats
from src.attendance_engine.attendance_engine.attendance.model import AttendanceRecord
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, Weekday
from src.attendance_engine.attendance_engine.schedules.model import ScheduleSlot
from src.attendance_engine.attendance_engine.target.solver import solve


def main():
    slots = [
        ScheduleSlot("mon-math", Weekday.MONDAY, "math", time(9, 0), time(10, 0)),
        ScheduleSlot("mon-phys", Weekday.MONDAY, "physics", time(10, 0), time(11, 0), class_type="lab"),
        ScheduleSlot("wed-math", Weekday.WEDNESDAY, "math", time(9, 0), time(10, 0)),
    ]
    records = [
        AttendanceRecord(None, date(2024, 9, 2), "math", AttendanceStatus.ABSENT, schedule_slot_id="mon-math"),
    ]

    stats = compute_stats(records, slots, as_of=date(2024, 9, 12), term_start=date(2024, 9, 2))
    print(stats.to_dict())

    result = solve(
        stats.overall.present,
        stats.overall.total,
        90,
        date(2024, 9, 12),
        date(2024, 12, 20),
        slots,
    )
    print(result.to_dict())


if __name__ == "__main__":
    main()
