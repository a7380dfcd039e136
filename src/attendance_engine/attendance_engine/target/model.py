from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class TargetResult:
    """Outcome of the greedy day-by-day simulation."""

    days_needed: int
    attended_added: int
    classes_added: int
    final_pct: float
    achieved: bool
    current_pct: int
    target_pct: float
    reached_on: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "days_needed": self.days_needed,
            "attended_added": self.attended_added,
            "classes_added": self.classes_added,
            "final_pct": self.final_pct,
            "achieved": self.achieved,
            "current_pct": self.current_pct,
            "target_pct": self.target_pct,
            "reached_on": self.reached_on.isoformat() if self.reached_on else None,
        }
