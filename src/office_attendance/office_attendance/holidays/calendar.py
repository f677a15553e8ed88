from __future__ import annotations

from datetime import date

from ..common.datetime_utils import iter_days
from ..core.constants import SUNDAY_NAME, SUNDAY_WEEKDAY
from .model import HolidayStatus
from .repository import HolidayRepository


class HolidayCalendar:
    """Read-only lookup of non-working days: declared holidays plus every Sunday."""

    def __init__(self, holidays: HolidayRepository):
        self._holidays = holidays

    @staticmethod
    def is_sunday(day: date) -> bool:
        return day.weekday() == SUNDAY_WEEKDAY

    def status_for(self, day: date) -> HolidayStatus:
        holiday = self._holidays.get_by_date(day)
        return HolidayStatus(
            is_holiday=holiday is not None,
            name=holiday.name if holiday else None,
            is_sunday=self.is_sunday(day),
        )

    def names_between(self, start: date, end: date) -> dict[date, str]:
        """Every non-working day in ``[start, end]`` mapped to its display name."""

        names = {day: SUNDAY_NAME for day in iter_days(start, end) if self.is_sunday(day)}
        for holiday in self._holidays.list_range(start=start, end=end):
            names[holiday.holiday_date] = holiday.name
        return names
