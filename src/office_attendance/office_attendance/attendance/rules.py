from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from ..common.datetime_utils import get_zone, parse_wall_clock, to_local
from ..core.constants import DEFAULT_HALF_DAY_MIN_HOURS, DEFAULT_LATE_THRESHOLD


@dataclass(frozen=True)
class ClassificationRules:
    """Shift policy the classifiers run against.

    ``half_day_min_hours`` of ``None`` turns Half Day detection off.
    """

    late_threshold: time = DEFAULT_LATE_THRESHOLD
    half_day_min_hours: Optional[float] = DEFAULT_HALF_DAY_MIN_HOURS
    shift_zone: tzinfo = field(default=timezone.utc)

    @classmethod
    def from_settings(
        cls,
        *,
        late_threshold: str,
        half_day_min_hours: Optional[float],
        shift_timezone: str,
    ) -> "ClassificationRules":
        return cls(
            late_threshold=parse_wall_clock(late_threshold),
            half_day_min_hours=float(half_day_min_hours) if half_day_min_hours is not None else None,
            shift_zone=get_zone(shift_timezone),
        )


def is_pm(local_time: time) -> bool:
    """Afternoon half of a 12-hour clock; 12:00 noon belongs to PM."""
    return local_time.hour >= 12


def is_late(check_in_at: datetime, rules: ClassificationRules) -> bool:
    """Late when the shift-local check-in is PM, or strictly after the threshold.

    The PM rule holds for a strictly-morning shift and applies even when the
    configured threshold is later than noon.
    """

    local = to_local(check_in_at, rules.shift_zone).time().replace(microsecond=0)
    if is_pm(local):
        return True
    return local > rules.late_threshold


def is_short_day(check_in_at: datetime, check_out_at: datetime, rules: ClassificationRules) -> bool:
    if rules.half_day_min_hours is None:
        return False
    return (check_out_at - check_in_at) < timedelta(hours=rules.half_day_min_hours)
