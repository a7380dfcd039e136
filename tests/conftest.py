from __future__ import annotations

from datetime import date, datetime

import pytest

from src.attendance_engine.attendance_engine.core.enums import Weekday
from src.attendance_engine.attendance_engine.schedules.model import AcademicPeriod
from tests.fakes import FakeClock, slot


@pytest.fixture
def weekly_slots():
    """Mon: math 9-10, physics 10-12 (lab). Wed: math 9-10, chemistry 13-14."""

    return [
        slot("mon-math", Weekday.MONDAY, "math", (9, 0), (10, 0)),
        slot("mon-phys", Weekday.MONDAY, "physics", (10, 0), (12, 0), class_type="lab"),
        slot("wed-math", Weekday.WEDNESDAY, "math", (9, 0), (10, 0)),
        slot("wed-chem", Weekday.WEDNESDAY, "chemistry", (13, 0), (14, 0)),
    ]


@pytest.fixture
def term():
    return AcademicPeriod(semester="2024-fall", start_date=date(2024, 9, 2), end_date=date(2024, 12, 20))


@pytest.fixture
def clock():
    # Monday 2024-09-16, 11:00
    return FakeClock(datetime(2024, 9, 16, 11, 0))
