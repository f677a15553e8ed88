from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Holiday:
    """Domain entity: an official office holiday."""

    holiday_id: int
    name: str
    holiday_date: date
    holiday_type: str = "Public"


@dataclass(frozen=True)
class HolidayStatus:
    """Whether a date is a non-working day, as surfaced by the admin daily view."""

    is_holiday: bool
    name: Optional[str]
    is_sunday: bool

    @property
    def is_non_working(self) -> bool:
        return self.is_holiday or self.is_sunday

    def to_dict(self) -> dict:
        return {"isHoliday": self.is_holiday, "name": self.name, "isSunday": self.is_sunday}
