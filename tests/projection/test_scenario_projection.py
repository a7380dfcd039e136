from datetime import date

import pytest

from src.attendance_engine.attendance_engine.attendance.aggregator import compute_stats
from src.attendance_engine.attendance_engine.attendance.service import AttendanceService
from src.attendance_engine.attendance_engine.calendar_rules.model import Holiday
from src.attendance_engine.attendance_engine.calendar_rules.resolver import CalendarExclusionResolver
from src.attendance_engine.attendance_engine.core.exceptions import (
    ComputationSkipped,
    InconsistentScheduleError,
    InvalidDateError,
)
from src.attendance_engine.attendance_engine.projection.service import ProjectionService, ScenarioProjector
from src.attendance_engine.attendance_engine.projection.strategies.absence_plan_strategy import AbsencePlanStrategy
from src.attendance_engine.attendance_engine.projection.strategies.per_subject_strategy import (
    PerSubjectAbsenceStrategy,
)
from src.attendance_engine.attendance_engine.projection.strategies.whole_day_strategy import WholeDayAbsenceStrategy
from src.attendance_engine.attendance_engine.schedules.index import ScheduleIndex
from tests.fakes import FakeAttendanceRepo, FakeHolidayRepo, FakeScheduleRepo, record

NEXT_MONDAY = date(2024, 9, 23)


@pytest.fixture
def baseline(weekly_slots):
    # math 4/4, physics 2/2, chemistry 2/2
    return compute_stats([], weekly_slots, as_of=date(2024, 9, 16), term_start=date(2024, 9, 2))


@pytest.fixture
def projector(weekly_slots):
    resolver = CalendarExclusionResolver(holidays=[Holiday(date(2024, 9, 25))], off_days=["saturday"])
    return ScenarioProjector(ScheduleIndex(weekly_slots), resolver)


def test_skipping_one_subject_leaves_the_others_alone(baseline, projector):
    result = projector.project(baseline, PerSubjectAbsenceStrategy({NEXT_MONDAY: ["physics"]}))

    assert result.projected.subject("physics").percentage == 67
    assert result.projected.subject("physics").percentage < baseline.subject("physics").percentage
    assert result.projected.subject("math") == baseline.subject("math")
    assert result.projected.subject("chemistry") == baseline.subject("chemistry")
    assert result.simulated_dates == (NEXT_MONDAY,)


def test_whole_day_adds_one_absence_per_subject(baseline, projector):
    result = projector.project(baseline, WholeDayAbsenceStrategy("2024-09-23"))

    assert result.projected.subject("math").total == 5
    assert result.projected.subject("math").percentage == 80
    assert result.projected.subject("physics").percentage == 67
    assert result.projected.subject("chemistry") == baseline.subject("chemistry")
    assert result.projected.overall.total == baseline.overall.total + 2


def test_whole_day_on_excluded_or_empty_day_is_skipped(baseline, projector):
    with pytest.raises(ComputationSkipped):
        projector.project(baseline, WholeDayAbsenceStrategy(date(2024, 9, 25)))  # holiday
    with pytest.raises(ComputationSkipped):
        projector.project(baseline, WholeDayAbsenceStrategy(date(2024, 9, 28)))  # off-day
    with pytest.raises(ComputationSkipped):
        projector.project(baseline, WholeDayAbsenceStrategy(date(2024, 9, 24)))  # no classes


def test_subject_not_scheduled_that_day_is_inconsistent(baseline, projector):
    with pytest.raises(InconsistentScheduleError):
        projector.project(baseline, PerSubjectAbsenceStrategy({NEXT_MONDAY: ["chemistry"]}))


def test_excluded_dates_in_selection_are_dropped(baseline, projector):
    result = projector.project(
        baseline,
        PerSubjectAbsenceStrategy({date(2024, 9, 25): ["math"], NEXT_MONDAY: ["math"]}),
    )
    assert result.projected.subject("math").total == 5

    with pytest.raises(ComputationSkipped):
        projector.project(baseline, PerSubjectAbsenceStrategy({date(2024, 9, 25): ["math"]}))


def test_absence_plan_walks_every_class_day(baseline, projector):
    strategy = AbsencePlanStrategy([NEXT_MONDAY], start_date=date(2024, 9, 17))

    result = projector.project(baseline, strategy)

    # Wed 18th attended, Mon 23rd missed.
    assert result.projected.subject("math").total == 6
    assert result.projected.subject("math").present == 5
    assert result.projected.subject("physics").percentage == 67
    assert result.projected.subject("chemistry").percentage == 100
    assert result.simulated_dates == (date(2024, 9, 18), NEXT_MONDAY)


def test_absence_plan_overrides_win(baseline, projector):
    strategy = AbsencePlanStrategy(
        [NEXT_MONDAY],
        start_date=date(2024, 9, 17),
        overrides={("2024-09-23", "mon-math"): "present", ("2024-09-18", "wed-chem"): "absent"},
    )

    result = projector.project(baseline, strategy)

    assert result.projected.subject("math").present == 6
    assert result.projected.subject("chemistry").present == 2
    assert result.projected.subject("chemistry").total == 3


def test_absence_plan_validation(baseline, projector):
    with pytest.raises(InvalidDateError):
        AbsencePlanStrategy([date(2024, 9, 16)], start_date=date(2024, 9, 17))
    with pytest.raises(ComputationSkipped):
        projector.project(baseline, AbsencePlanStrategy([], start_date=date(2024, 9, 17)))


def test_projection_service_uses_current_stats(weekly_slots, term, clock):
    attendance = AttendanceService(
        FakeAttendanceRepo(),
        FakeScheduleRepo(weekly_slots, period=term),
        FakeHolidayRepo(),
        clock=clock,
    )
    service = ProjectionService(attendance, clock=clock)

    result = service.project(1, "whole-day", {"date": "2024-09-23"})
    assert result.to_dict()["projected"]["overall"]["total"] == 10

    # Starts today (Mon 16th): today's two classes attended, next Monday's two missed.
    plan = service.project(1, "absence-plan", {"absent_dates": ["2024-09-23"]})
    assert plan.projected.subject("physics").total == 4
    assert plan.projected.subject("physics").present == 3


def test_projection_service_rejects_days_already_counted(weekly_slots, term, clock):
    attendance = AttendanceService(
        FakeAttendanceRepo([record(date(2024, 9, 9), "math", "present", "mon-math")]),
        FakeScheduleRepo(weekly_slots, period=term),
        FakeHolidayRepo(),
        clock=clock,
    )
    service = ProjectionService(attendance, clock=clock)

    with pytest.raises(InvalidDateError):
        service.project(1, "whole-day", {"date": "2024-09-09"})
    with pytest.raises(InvalidDateError):
        service.project(1, "per-subject", {"selection": {"2024-09-09": ["math"], "2024-09-23": ["math"]}})
    with pytest.raises(InvalidDateError):
        service.project(1, "absence-plan", {"start_date": "2024-09-11", "absent_dates": ["2024-09-23"]})

    # Today's classes are still undecided, so today can be projected.
    today = service.project(1, "whole-day", {"date": "2024-09-16"})
    assert today.projected.overall.total == today.baseline.overall.total + 2


def test_whole_day_holiday_reports_its_reason(baseline, weekly_slots):
    projector = ScenarioProjector(
        ScheduleIndex(weekly_slots), CalendarExclusionResolver(holidays=[Holiday(NEXT_MONDAY, "Founders day")])
    )

    with pytest.raises(ComputationSkipped, match="Founders day"):
        projector.project(baseline, WholeDayAbsenceStrategy(NEXT_MONDAY))
