from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import as_utc, now_utc, utc_instant
from ..common.logger import get_logger
from ..core.constants import AUTO_ABSENT_REMARK, AUTO_CLOCK_OUT_REMARK, DEFAULT_AUTO_CLOCK_OUT_TIME
from ..core.exceptions import AttendanceConflictError
from ..holidays.calendar import HolidayCalendar
from .repository import AttendanceRepository
from .service import AttendanceService

log = get_logger("attendance.jobs")


class AttendanceJobs:
    """Daily housekeeping run from cron through the Flask CLI."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        service: AttendanceService,
        calendar: HolidayCalendar,
        *,
        auto_clock_out_time: time = DEFAULT_AUTO_CLOCK_OUT_TIME,
    ):
        self._attendance = attendance
        self._service = service
        self._calendar = calendar
        self._auto_clock_out_time = auto_clock_out_time

    def auto_clock_out(self, *, now: Optional[datetime] = None) -> int:
        """Close every session still open on today's UTC date at the configured time."""

        today = as_utc(now or now_utc()).date()
        closed = 0
        for record in self._attendance.list_open_sessions(today):
            at = utc_instant(today, self._auto_clock_out_time)
            if record.check_in_at and at < record.check_in_at:
                at = record.check_in_at
            try:
                self._service.close_session(record, at=at, remarks=AUTO_CLOCK_OUT_REMARK)
                closed += 1
            except AttendanceConflictError:
                # Employee clocked out between the listing and the update.
                log.info("auto clock-out skipped employee=%s", record.employee_id)
        log.info("auto clock-out done date=%s closed=%s", today, closed)
        return closed

    def auto_mark_absent(self, *, today: Optional[date] = None) -> int:
        today = today or now_utc().date()
        status = self._calendar.status_for(today)
        if status.is_non_working:
            log.info("auto-absent skipped date=%s (%s)", today, status.name or "Sunday")
            return 0

        inserted = self._attendance.mark_absent_missing(work_date=today, remarks=AUTO_ABSENT_REMARK)
        log.info("auto-absent done date=%s inserted=%s", today, inserted)
        return inserted
