from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceDay, AttendanceLogRow, EmployeeDayRow


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceDay]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceDay]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: time,
        status: AttendanceStatus,
    ) -> bool:
        """Set the day's check-in only if none exists yet.

        Fills an ``Absent`` placeholder row when present. Returns False when
        another writer already recorded a check-in for that day.
        """

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_out_time: time,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> bool:
        """Set the day's check-out only while the session is open."""

        raise NotImplementedError

    def list_open_sessions(self, work_date: date) -> Sequence[AttendanceDay]:
        raise NotImplementedError

    def mark_absent_missing(self, *, work_date: date, remarks: str) -> int:
        """Insert ``Absent`` rows for active employees without a row; returns the count."""

        raise NotImplementedError

    def get_daily_rows(self, work_date: date) -> Sequence[EmployeeDayRow]:
        raise NotImplementedError

    def get_log_rows(self, *, start: date, end: date) -> Sequence[AttendanceLogRow]:
        raise NotImplementedError
