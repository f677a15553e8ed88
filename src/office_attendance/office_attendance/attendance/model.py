from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import format_wall_clock, utc_instant
from ..core.enums import AttendanceStatus, SessionStatus


@dataclass(frozen=True)
class AttendanceDay:
    """Domain entity: one employee's attendance for one work date.

    Times are UTC wall-clock values on the UTC ``work_date``; ``status`` is a
    cached classification and never the source of truth.
    """

    attendance_id: Optional[int]
    employee_id: int
    work_date: date
    check_in_time: Optional[time]
    check_out_time: Optional[time]
    status: AttendanceStatus
    remarks: Optional[str] = None

    @property
    def check_in_at(self) -> Optional[datetime]:
        if self.check_in_time is None:
            return None
        return utc_instant(self.work_date, self.check_in_time)

    @property
    def check_out_at(self) -> Optional[datetime]:
        if self.check_out_time is None:
            return None
        return utc_instant(self.work_date, self.check_out_time)

    @property
    def worked_duration(self) -> Optional[timedelta]:
        if self.check_in_at is None or self.check_out_at is None:
            return None
        return self.check_out_at - self.check_in_at

    @property
    def session_status(self) -> SessionStatus:
        if self.check_out_time is not None:
            return SessionStatus.CLOCKED_OUT
        if self.check_in_time is not None:
            return SessionStatus.CLOCKED_IN
        return SessionStatus.NOT_CLOCKED_IN


@dataclass(frozen=True)
class EmployeeDayRow:
    """Read-model for the admin daily view: every employee, with or without a record."""

    employee_id: int
    full_name: str
    designation: Optional[str]
    record: Optional[AttendanceDay]


@dataclass(frozen=True)
class AttendanceLogRow:
    """Read-model for the admin monthly log (record joined with its employee)."""

    full_name: str
    username: str
    designation: Optional[str]
    record: AttendanceDay


@dataclass(frozen=True)
class DayStatusSnapshot:
    """What the gateway reports about today's session."""

    status: SessionStatus
    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "checkInTime": format_wall_clock(self.check_in_time) if self.check_in_time else None,
            "checkOutTime": format_wall_clock(self.check_out_time) if self.check_out_time else None,
        }


@dataclass(frozen=True)
class HistoryRow:
    work_date: date
    check_in_at: Optional[datetime]
    check_out_at: Optional[datetime]
    total_hours: str
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.strftime("%Y-%m-%d"),
            "checkIn": self.check_in_at.strftime("%Y-%m-%dT%H:%M:%SZ") if self.check_in_at else None,
            "checkOut": self.check_out_at.strftime("%Y-%m-%dT%H:%M:%SZ") if self.check_out_at else None,
            "totalHours": self.total_hours,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class MonthlySummary:
    total_working_days: int = 0
    present_days: int = 0
    late_arrivals: int = 0
    leaves_taken: int = 0

    def to_dict(self) -> dict:
        return {
            "totalWorkingDays": self.total_working_days,
            "presentDays": self.present_days,
            "lateArrivals": self.late_arrivals,
            "leavesTaken": self.leaves_taken,
        }


@dataclass(frozen=True)
class HistoryResult:
    rows: list[HistoryRow]
    summary: MonthlySummary

    def to_dict(self) -> dict:
        return {"history": [r.to_dict() for r in self.rows], "stats": self.summary.to_dict()}
