from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, check_in_at: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note="Late arrival")

    def decide_checkout(self, *, check_in_at: datetime, check_out_at: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
