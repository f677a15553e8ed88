from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import as_utc, month_range, now_utc
from ..common.logger import get_logger
from ..core.enums import SessionStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    NoActiveSessionError,
    NonWorkingDayError,
    ValidationError,
)
from ..holidays.calendar import HolidayCalendar
from ..leaves.service import LeaveLookup
from ..users.repository import UserRepository
from .classification import DEFAULT_RULES, classify
from .history import HistoryAggregator
from .model import AttendanceDay, DayStatusSnapshot, HistoryResult
from .repository import AttendanceRepository
from .rules import ClassificationRules

log = get_logger("attendance.service")


class AttendanceService:
    """Server side of the attendance session gateway.

    The only writer of attendance rows. Every transition is checked here and
    then written with a conditional statement, so the repository stays the
    final arbiter when two devices race.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        calendar: HolidayCalendar,
        leaves: LeaveLookup,
        *,
        rules: ClassificationRules = DEFAULT_RULES,
        aggregator: Optional[HistoryAggregator] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._calendar = calendar
        self._leaves = leaves
        self._rules = rules
        self._aggregator = aggregator or HistoryAggregator(rules=rules)

    @property
    def rules(self) -> ClassificationRules:
        return self._rules

    def _require_employee(self, employee_id: int) -> None:
        user = self._users.get_by_id(employee_id)
        if not user or not user.is_active:
            raise ValidationError("Employee not found")

    def check_in(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceDay:
        now = as_utc(now or now_utc()).replace(microsecond=0)
        today = now.date()
        self._require_employee(employee_id)

        holiday = self._calendar.status_for(today)
        if holiday.is_non_working:
            raise NonWorkingDayError(f"Today is a holiday ({holiday.name or 'Sunday'}), attendance is not tracked")
        if self._leaves.is_on_leave(employee_id, today):
            raise NonWorkingDayError("You are on approved leave today")

        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        if existing and existing.check_out_time is not None:
            raise AlreadyCheckedInError("Already clocked out for today")
        if existing and existing.check_in_time is not None:
            raise AlreadyCheckedInError("Already clocked in for today")

        status = classify(now, rules=self._rules)
        created = self._attendance.create_checkin(
            employee_id=employee_id,
            work_date=today,
            check_in_time=now.time(),
            status=status,
        )
        if not created:
            log.warning("check-in race lost employee=%s date=%s", employee_id, today)
            raise AlreadyCheckedInError("Already clocked in for today")

        log.info("check-in employee=%s at=%s status=%s", employee_id, now.isoformat(), status.value)
        return self._reload(employee_id, today)

    def check_out(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceDay:
        now = as_utc(now or now_utc()).replace(microsecond=0)
        today = now.date()

        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if not record or record.check_in_at is None:
            raise NoActiveSessionError("No clock-in record found for today")
        if record.check_out_time is not None:
            raise AlreadyCheckedOutError("Already clocked out for today")
        if now < record.check_in_at:
            raise ValidationError("Check-out cannot be earlier than check-in")

        return self._close_session(record, now, remarks=None)

    def close_session(self, record: AttendanceDay, *, at: datetime, remarks: Optional[str]) -> AttendanceDay:
        """Close an open session on behalf of the system (auto clock-out)."""

        return self._close_session(record, as_utc(at).replace(microsecond=0), remarks=remarks)

    def _close_session(self, record: AttendanceDay, at: datetime, *, remarks: Optional[str]) -> AttendanceDay:
        status = classify(record.check_in_at, at, rules=self._rules)
        updated = self._attendance.update_checkout(
            employee_id=record.employee_id,
            work_date=record.work_date,
            check_out_time=at.time(),
            status=status,
            remarks=remarks,
        )
        if not updated:
            log.warning("check-out race lost employee=%s date=%s", record.employee_id, record.work_date)
            raise AlreadyCheckedOutError("Already clocked out for today")

        log.info("check-out employee=%s at=%s status=%s", record.employee_id, at.isoformat(), status.value)
        return self._reload(record.employee_id, record.work_date)

    def _reload(self, employee_id: int, work_date: date) -> AttendanceDay:
        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if record is None:
            raise NoActiveSessionError("Attendance record disappeared")
        return record

    def today_status(self, employee_id: int, *, now: Optional[datetime] = None) -> DayStatusSnapshot:
        today = as_utc(now or now_utc()).date()
        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if record is None:
            return DayStatusSnapshot(status=SessionStatus.NOT_CLOCKED_IN)
        return DayStatusSnapshot(
            status=record.session_status,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
        )

    def history(
        self,
        employee_id: int,
        *,
        month: int,
        year: int,
        today: Optional[date] = None,
    ) -> HistoryResult:
        start, end = month_range(month, year)
        today = today or now_utc().date()
        records = self._attendance.list_for_employee(employee_id, start=start, end=end)
        return self._aggregator.aggregate(
            records,
            start=start,
            end=end,
            today=today,
            holidays=self._calendar.names_between(start, end),
            leave_dates=self._leaves.leave_dates(employee_id, start=start, end=end),
        )
