from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Tuple

from ..attendance.model import AttendanceStats
from ..core.constants import DEFAULT_CLASS_TYPE
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class SimulatedClass:
    """One hypothetical future class outcome."""

    class_date: date
    subject_key: str
    status: AttendanceStatus
    class_type: str = DEFAULT_CLASS_TYPE


@dataclass(frozen=True)
class ProjectionResult:
    baseline: AttendanceStats
    projected: AttendanceStats
    simulated: Tuple[SimulatedClass, ...]

    @property
    def simulated_dates(self) -> Tuple[date, ...]:
        return tuple(sorted({c.class_date for c in self.simulated}))

    def to_dict(self) -> dict:
        return {
            "baseline": self.baseline.to_dict(),
            "projected": self.projected.to_dict(),
            "simulated_dates": [d.isoformat() for d in self.simulated_dates],
            "simulated_classes": len(self.simulated),
        }
