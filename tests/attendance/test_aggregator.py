from datetime import date

from src.attendance_engine.attendance_engine.attendance.aggregator import (
    AttendanceAggregator,
    build_stats,
    compute_stats,
    is_day_fully_recorded,
)
from src.attendance_engine.attendance_engine.calendar_rules.model import Holiday
from src.attendance_engine.attendance_engine.calendar_rules.resolver import CalendarExclusionResolver
from src.attendance_engine.attendance_engine.core.enums import Weekday
from src.attendance_engine.attendance_engine.schedules.index import ScheduleIndex
from tests.fakes import record, slot

TERM_START = date(2024, 9, 2)  # Monday
AS_OF = date(2024, 9, 16)  # Monday, two full weeks later


def test_off_day_slot_is_not_counted():
    slots = [
        slot("mon-math", Weekday.MONDAY, "math", (9, 0), (10, 0)),
        slot("wed-math", Weekday.WEDNESDAY, "math", (9, 0), (10, 0)),
        slot("sat-math", Weekday.SATURDAY, "math", (9, 0), (10, 0)),
    ]
    records = [
        record(date(2024, 9, 2), "math", "present", "mon-math"),
        record(date(2024, 9, 4), "math", "absent", "wed-math"),
    ]

    stats = compute_stats(records, slots, as_of=date(2024, 9, 9), off_days=["saturday"])

    math = stats.subject("math")
    assert (math.present, math.absent, math.total, math.percentage) == (1, 1, 2, 50)


def test_unmarked_past_classes_count_as_present(weekly_slots):
    stats = compute_stats([], weekly_slots, as_of=AS_OF, term_start=TERM_START)

    assert stats.subject("math").total == 4
    assert stats.subject("physics").total == 2
    assert stats.subject("chemistry").total == 2
    assert stats.overall.total == 8
    assert stats.overall.percentage == 100


def test_backfill_stops_at_term_end(weekly_slots):
    stats = compute_stats(
        [], weekly_slots, as_of=date(2025, 1, 15), term_start=TERM_START, term_end=date(2024, 9, 20)
    )

    # Mondays 2, 9, 16 and Wednesdays 4, 11, 18.
    assert stats.subject("math").total == 6
    assert stats.overall.total == 12


def test_today_is_not_backfilled(weekly_slots):
    # AS_OF is a Monday; its classes are still undecided.
    stats = compute_stats([], weekly_slots, as_of=AS_OF, term_start=date(2024, 9, 16))

    assert stats.overall.total == 0
    assert stats.overall.percentage == 0
    assert stats.subjects == ()


def test_explicit_record_wins_over_backfill(weekly_slots):
    records = [record(date(2024, 9, 9), "physics", "absent", "mon-phys", class_type="lab")]

    stats = compute_stats(records, weekly_slots, as_of=AS_OF, term_start=TERM_START)

    physics = stats.subject("physics")
    assert (physics.present, physics.total, physics.percentage) == (1, 2, 50)
    assert stats.subject("math").total == 4


def test_slotless_record_claims_a_slot(weekly_slots):
    records = [record(date(2024, 9, 9), "math", "absent")]

    stats = compute_stats(records, weekly_slots, as_of=AS_OF, term_start=TERM_START)

    math = stats.subject("math")
    assert (math.present, math.total) == (3, 4)


def test_holiday_contributes_nothing(weekly_slots):
    records = [record(date(2024, 9, 4), "chemistry", "absent", "wed-chem")]

    stats = compute_stats(
        records,
        weekly_slots,
        as_of=AS_OF,
        term_start=TERM_START,
        holidays=[Holiday(date(2024, 9, 4), "Founders day")],
    )

    assert stats.subject("math").total == 3
    chem = stats.subject("chemistry")
    assert (chem.present, chem.total) == (1, 1)


def test_present_plus_absent_equals_total(weekly_slots):
    records = [
        record(date(2024, 9, 2), "math", "absent", "mon-math"),
        record(date(2024, 9, 11), "chemistry", "absent", "wed-chem"),
        record(date(2024, 9, 9), "physics", "absent", "mon-phys", class_type="lab"),
    ]

    stats = compute_stats(records, weekly_slots, as_of=AS_OF, term_start=TERM_START)

    for s in stats.subjects:
        assert s.present + s.absent == s.total
    assert stats.overall.total == sum(s.total for s in stats.subjects)
    assert stats.overall.present == sum(s.present for s in stats.subjects)
    assert stats.overall.percentage == 63  # 5 / 8 = 62.5


def test_class_type_breakdown(weekly_slots):
    records = [record(date(2024, 9, 9), "physics", "absent", "mon-phys", class_type="lab")]

    stats = compute_stats(records, weekly_slots, as_of=AS_OF, term_start=TERM_START)

    (lab,) = stats.subject("physics").class_types
    assert (lab.class_type, lab.present, lab.total) == ("lab", 1, 2)


def test_same_input_gives_same_stats(weekly_slots):
    records = [
        record("2024-09-02", "math", "absent", "mon-math"),
        record(date(2024, 9, 2), "math", "present", "mon-math"),  # duplicate key, first wins
    ]
    aggregator = AttendanceAggregator(ScheduleIndex(weekly_slots), CalendarExclusionResolver())

    first = aggregator.compute_stats(records, as_of=AS_OF, term_start=TERM_START)
    second = aggregator.compute_stats(records, as_of=AS_OF, term_start=TERM_START)

    assert first == second
    assert first.subject("math").present == 3


def test_build_stats_skips_empty_subjects():
    stats = build_stats({"math": (3, 4), "art": (0, 0)})

    assert [s.subject_key for s in stats.subjects] == ["math"]
    assert stats.overall.percentage == 75


def test_is_day_fully_recorded(weekly_slots):
    index = ScheduleIndex(weekly_slots)
    monday = date(2024, 9, 16)

    assert not is_day_fully_recorded(monday, index, [record(monday, "math", "present", "mon-math")])
    assert is_day_fully_recorded(
        monday,
        index,
        [record(monday, "math", "present", "mon-math"), record(monday, "physics", "absent", "mon-phys")],
    )
    assert not is_day_fully_recorded(date(2024, 9, 17), index, [])  # no classes on Tuesday
