from datetime import date, time

from src.attendance_engine.attendance_engine.attendance.model import AttendanceKey
from src.attendance_engine.attendance_engine.automark.scanner import find_unmarked_slots

MONDAY = date(2024, 9, 16)


def test_scanner_respects_end_time_and_existing_keys(weekly_slots):
    monday_slots = [s for s in weekly_slots if s.slot_id.startswith("mon")]

    staged = find_unmarked_slots(
        monday_slots, day=MONDAY, now_time=time(12, 0), pending_keys=set(), persisted_keys=set()
    )
    assert [p.schedule_slot_id for p in staged] == ["mon-math", "mon-phys"]

    staged = find_unmarked_slots(
        monday_slots,
        day=MONDAY,
        now_time=time(12, 0),
        pending_keys={AttendanceKey("math", MONDAY, "mon-math")},
        persisted_keys={AttendanceKey("physics", MONDAY, "mon-phys")},
    )
    assert staged == []


def test_force_ignores_end_time(weekly_slots):
    monday_slots = [s for s in weekly_slots if s.slot_id.startswith("mon")]

    staged = find_unmarked_slots(
        monday_slots, day=MONDAY, now_time=time(8, 0), pending_keys=set(), persisted_keys=set(), force=True
    )

    assert len(staged) == 2
    assert staged[1].start_time == "10:00"
    assert staged[1].class_type == "lab"


def test_slotless_decision_claims_earliest_slot_of_its_subject(weekly_slots):
    monday_slots = [s for s in weekly_slots if s.slot_id.startswith("mon")]

    staged = find_unmarked_slots(
        monday_slots,
        day=MONDAY,
        now_time=time(12, 0),
        pending_keys=set(),
        persisted_keys={AttendanceKey("math", MONDAY, None), AttendanceKey("physics", date(2024, 9, 9), None)},
    )

    assert [p.schedule_slot_id for p in staged] == ["mon-phys"]
