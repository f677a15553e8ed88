from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Checkout before the minimum worked hours were reached."""

    def decide_checkin(self, *, check_in_at: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, check_in_at: datetime, check_out_at: datetime, current: AttendanceStatus) -> StatusDecision:
        worked_minutes = int((check_out_at - check_in_at).total_seconds() // 60)
        return StatusDecision(
            status=AttendanceStatus.HALF_DAY,
            note=f"Worked {worked_minutes // 60}h {worked_minutes % 60:02d}m",
        )
