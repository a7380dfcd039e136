from datetime import date

import pytest

from src.attendance_engine.attendance_engine.attendance.service import AttendanceService
from src.attendance_engine.attendance_engine.automark.cache import InMemoryStagingCache
from src.attendance_engine.attendance_engine.automark.scheduler import AutoMarkRegistry, AutoMarkScheduler
from src.attendance_engine.attendance_engine.automark.service import AutoMarkService
from src.attendance_engine.attendance_engine.calendar_rules.model import Holiday
from src.attendance_engine.attendance_engine.container import Container
from src.attendance_engine.attendance_engine.main import create_app
from src.attendance_engine.attendance_engine.projection.service import ProjectionService
from src.attendance_engine.attendance_engine.target.service import TargetService
from tests.fakes import FakeAttendanceRepo, FakeHolidayRepo, FakeScheduleRepo


class NoopTimer:
    def __init__(self, delay, fn):
        pass

    def start(self):
        pass

    def cancel(self):
        pass


@pytest.fixture
def repo():
    return FakeAttendanceRepo()


@pytest.fixture
def app(weekly_slots, term, clock, repo, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    schedules = FakeScheduleRepo(weekly_slots, off_days=["saturday", "sunday"], period=term)
    holidays = FakeHolidayRepo([Holiday(date(2024, 9, 25), "Founders day")])

    def make_scheduler(user_id):
        service = AutoMarkService(user_id, repo, schedules, holidays, InMemoryStagingCache(), clock=clock)
        return AutoMarkScheduler(service, clock=clock, timer_factory=NoopTimer)

    registry = AutoMarkRegistry(make_scheduler)
    attendance = AttendanceService(
        repo,
        schedules,
        holidays,
        clock=clock,
        pending_source=lambda user_id: registry.get(user_id).service.pending_records(),
    )
    container = Container(
        conn=None,
        attendance_repo=repo,
        schedules_repo=schedules,
        holidays_repo=holidays,
        attendance_service=attendance,
        projection_service=ProjectionService(attendance, clock=clock),
        target_service=TargetService(attendance, clock=clock),
        automark=registry,
    )
    return create_app(container=container)


@pytest.fixture
def client(app):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = 7
    return client


def test_requires_login(app):
    resp = app.test_client().get("/api/attendance/stats")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_stats(client):
    resp = client.get("/api/attendance/stats")

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["stats"]["overall"] == {"present": 8, "absent": 0, "total": 8, "percentage": 100}


def test_record_then_duplicate(client):
    payload = {"subject_key": "math", "date": "2024-09-16", "status": "absent", "schedule_slot_id": "mon-math"}

    assert client.post("/api/attendance/records", json=payload).status_code == 201
    resp = client.post("/api/attendance/records", json=payload)
    assert resp.status_code == 400

    assert client.post("/api/attendance/records", json={**payload, "date": "16/09/2024"}).status_code == 400


def test_projection_errors_map_to_status_codes(client):
    resp = client.post("/api/projection/whole-day", json={"date": "2024-09-25"})
    assert resp.status_code == 200
    assert resp.get_json()["skipped"] is True
    assert "Founders day" in resp.get_json()["reason"]

    resp = client.post("/api/projection/whole-day", json={"date": "2024-09-09"})
    assert resp.status_code == 400

    resp = client.post("/api/projection/per-subject", json={"selection": {"2024-09-23": ["chemistry"]}})
    assert resp.status_code == 409

    resp = client.post("/api/projection/per-subject", json={"selection": {"2024-09-23": ["physics"]}})
    body = resp.get_json()
    assert resp.status_code == 200
    physics = [s for s in body["projection"]["projected"]["subjects"] if s["subject_key"] == "physics"][0]
    assert physics["percentage"] == 67


def test_target_uses_term_end(client):
    resp = client.post("/api/target", json={"target_pct": 80})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["target"]["achieved"] is True
    assert body["target"]["days_needed"] == 0


def test_automark_round_trip(client, repo):
    resp = client.post("/api/automark/enable")
    body = resp.get_json()
    assert body["state"] == "enabled"
    assert body["staged"] == 1

    resp = client.patch(
        "/api/automark/pending",
        json={"subject_key": "math", "date": "2024-09-16", "schedule_slot_id": "mon-math", "status": "absent"},
    )
    assert resp.get_json()["pending"]["status"] == "absent"

    repo.fail_bulk = True
    resp = client.post("/api/automark/flush")
    assert resp.status_code == 503
    assert resp.get_json()["pending_count"] == 1

    repo.fail_bulk = False
    resp = client.post("/api/automark/disable")
    body = resp.get_json()
    assert body["flush"]["uploaded"] == 1
    assert body["state"] == "disabled"
    assert body["pending"] == []


def test_manual_scan_requires_automark_enabled(client):
    resp = client.post("/api/automark/scan")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Auto-mark is disabled"
    assert client.get("/api/automark").get_json()["pending"] == []
