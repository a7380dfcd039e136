"""Client-side staging cache for auto-marked attendance.

Holds the pending map plus two scalars (last upload date, enabled flag) and
survives across sessions when file-backed.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from datetime import date
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol

from ..attendance.model import AttendanceKey
from ..common.datetime_utils import coerce_date
from .model import PendingAttendance

logger = logging.getLogger(__name__)

PendingMap = Dict[AttendanceKey, PendingAttendance]


class StagingCache(Protocol):
    def load_pending(self) -> PendingMap:
        raise NotImplementedError

    def save_pending(self, pending: Mapping[AttendanceKey, PendingAttendance]) -> None:
        """Replace the whole pending map in one write."""

        raise NotImplementedError

    def get_last_upload(self) -> Optional[date]:
        raise NotImplementedError

    def set_last_upload(self, value: date) -> None:
        raise NotImplementedError

    def is_enabled(self) -> bool:
        raise NotImplementedError

    def set_enabled(self, enabled: bool) -> None:
        raise NotImplementedError


class InMemoryStagingCache:
    def __init__(self):
        self._pending: PendingMap = {}
        self._last_upload: Optional[date] = None
        self._enabled = False

    def load_pending(self) -> PendingMap:
        return dict(self._pending)

    def save_pending(self, pending: Mapping[AttendanceKey, PendingAttendance]) -> None:
        self._pending = dict(pending)

    def get_last_upload(self) -> Optional[date]:
        return self._last_upload

    def set_last_upload(self, value: date) -> None:
        self._last_upload = value

    def is_enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)


class JsonFileStagingCache:
    """One JSON document per user, rewritten via temp file + os.replace."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not self._path.exists():
            return {"pending": [], "last_upload": None, "enabled": False}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError:
            logger.warning("Staging cache %s is corrupt; starting empty", self._path)
            return {"pending": [], "last_upload": None, "enabled": False}

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self._path)

    def _update(self, **changes) -> None:
        with self._lock:
            data = self._read()
            data.update(changes)
            self._write(data)

    def load_pending(self) -> PendingMap:
        with self._lock:
            items = [PendingAttendance.from_dict(d) for d in self._read().get("pending", [])]
        return {p.key: p for p in items}

    def save_pending(self, pending: Mapping[AttendanceKey, PendingAttendance]) -> None:
        self._update(pending=[p.to_dict() for p in pending.values()])

    def get_last_upload(self) -> Optional[date]:
        with self._lock:
            value = self._read().get("last_upload")
        return coerce_date(value) if value else None

    def set_last_upload(self, value: date) -> None:
        self._update(last_upload=value.isoformat())

    def is_enabled(self) -> bool:
        with self._lock:
            return bool(self._read().get("enabled", False))

    def set_enabled(self, enabled: bool) -> None:
        self._update(enabled=bool(enabled))
