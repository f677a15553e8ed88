from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class OnTimeStrategy(AttendanceStrategy):
    """Check-in at or before the late threshold."""

    def decide_checkin(self, *, check_in_at: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, check_in_at: datetime, check_out_at: datetime, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
