from __future__ import annotations

from typing import Iterable, Optional, Union

from ..common.datetime_utils import DateLike, coerce_date
from ..core.enums import Weekday
from .model import Holiday, OffDay


class CalendarExclusionResolver:
    """Decides whether a date counts toward attendance at all.

    A date is excluded when it is a holiday (exact day match) or falls on one
    of the weekly off-days. Excluded dates never contribute to any total.
    """

    def __init__(self, holidays: Iterable[Holiday] = (), off_days: Iterable[Union[OffDay, Weekday, str]] = ()):
        self._holidays = {coerce_date(h.holiday_date): h for h in holidays}
        self._off_days = frozenset(
            d.day_of_week if isinstance(d, OffDay) else Weekday.parse(d) for d in off_days
        )

    @property
    def off_days(self) -> frozenset:
        return self._off_days

    def is_holiday(self, value: DateLike) -> bool:
        return coerce_date(value) in self._holidays

    def is_off_day(self, value: DateLike) -> bool:
        return Weekday(coerce_date(value).weekday()) in self._off_days

    def is_excluded(self, value: DateLike) -> bool:
        day = coerce_date(value)
        return day in self._holidays or Weekday(day.weekday()) in self._off_days

    def holiday_reason(self, value: DateLike) -> Optional[str]:
        holiday = self._holidays.get(coerce_date(value))
        return holiday.reason if holiday else None
