from datetime import date

from src.attendance_engine.attendance_engine.automark.cache import InMemoryStagingCache, JsonFileStagingCache
from src.attendance_engine.attendance_engine.automark.model import PendingAttendance
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus


def _entry(slot_id="mon-math", status=AttendanceStatus.PRESENT):
    return PendingAttendance(
        subject_key="math",
        class_date=date(2024, 9, 16),
        status=status,
        schedule_slot_id=slot_id,
        start_time="09:00",
        end_time="10:00",
    )


def test_json_cache_survives_a_new_instance(tmp_path):
    path = tmp_path / "staging" / "user-1.json"
    cache = JsonFileStagingCache(path)
    entry = _entry(status=AttendanceStatus.ABSENT)

    cache.save_pending({entry.key: entry})
    cache.set_enabled(True)
    cache.set_last_upload(date(2024, 9, 15))

    reopened = JsonFileStagingCache(path)
    assert reopened.load_pending() == {entry.key: entry}
    assert reopened.is_enabled()
    assert reopened.get_last_upload() == date(2024, 9, 15)
    assert not path.with_suffix(".json.tmp").exists()


def test_json_cache_defaults_and_corrupt_file(tmp_path):
    path = tmp_path / "user-2.json"
    cache = JsonFileStagingCache(path)

    assert cache.load_pending() == {}
    assert not cache.is_enabled()
    assert cache.get_last_upload() is None

    path.write_text("{not json", encoding="utf-8")
    assert cache.load_pending() == {}


def test_in_memory_cache_hands_out_copies():
    cache = InMemoryStagingCache()
    entry = _entry()
    cache.save_pending({entry.key: entry})

    loaded = cache.load_pending()
    loaded.clear()

    assert len(cache.load_pending()) == 1
