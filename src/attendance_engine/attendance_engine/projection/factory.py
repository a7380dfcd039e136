from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional

from ..core.enums import ProjectionMode
from ..core.exceptions import ValidationError
from .strategies.absence_plan_strategy import AbsencePlanStrategy
from .strategies.base import ProjectionStrategy
from .strategies.per_subject_strategy import PerSubjectAbsenceStrategy
from .strategies.whole_day_strategy import WholeDayAbsenceStrategy


@dataclass
class ProjectionStrategyFactory:
    """Factory Pattern: build the scenario strategy from a request payload.

    ``today`` rejects scenarios for days already counted in current stats.
    """

    def for_request(
        self, mode: str | ProjectionMode, payload: Mapping[str, Any], *, today: Optional[date] = None
    ) -> ProjectionStrategy:
        try:
            mode = ProjectionMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown projection mode: {mode!r}") from None

        if mode == ProjectionMode.WHOLE_DAY:
            if not payload.get("date"):
                raise ValidationError("date is required")
            return WholeDayAbsenceStrategy(payload["date"], earliest=today)

        if mode == ProjectionMode.PER_SUBJECT:
            selection = payload.get("selection") or {}
            if not isinstance(selection, Mapping) or not all(
                isinstance(subjects, (list, tuple)) for subjects in selection.values()
            ):
                raise ValidationError("selection must map dates to subject lists")
            return PerSubjectAbsenceStrategy(selection, earliest=today)

        if not payload.get("start_date"):
            raise ValidationError("start_date is required")
        overrides = {}
        for item in payload.get("overrides") or ():
            try:
                overrides[(item["date"], item["slot_id"])] = item["status"]
            except (KeyError, TypeError):
                raise ValidationError("each override needs date, slot_id and status") from None
        return AbsencePlanStrategy(
            payload.get("absent_dates") or (),
            start_date=payload["start_date"],
            skip_start_date=bool(payload.get("skip_start_date", False)),
            overrides=overrides,
            earliest=today,
        )
