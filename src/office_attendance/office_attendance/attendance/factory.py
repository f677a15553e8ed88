from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .rules import ClassificationRules, is_late, is_short_day
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    rules: ClassificationRules = field(default_factory=ClassificationRules)

    def for_checkin(self, *, check_in_at: datetime) -> AttendanceStrategy:
        if is_late(check_in_at, self.rules):
            return LateStrategy()
        return OnTimeStrategy()

    def for_checkout(self, *, check_in_at: datetime, check_out_at: datetime) -> AttendanceStrategy:
        if is_short_day(check_in_at, check_out_at, self.rules):
            return HalfDayStrategy()
        # Keeps whatever the check-in decided (Present or Late).
        return self.for_checkin(check_in_at=check_in_at)
