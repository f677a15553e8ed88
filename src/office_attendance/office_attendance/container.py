from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from .attendance.admin_view import AdminAttendanceView
from .attendance.jobs import AttendanceJobs
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.rules import ClassificationRules
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_AUTO_CLOCK_OUT_TIME
from .database.connection import DBConfig, DatabaseConnection
from .holidays.calendar import HolidayCalendar
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveLookup
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    holidays_repo: HolidayRepository
    leaves_repo: LeaveRepository

    auth_service: AuthService
    attendance_service: AttendanceService
    admin_attendance_view: AdminAttendanceView
    attendance_jobs: AttendanceJobs

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    holidays_repo: HolidayRepository,
    leaves_repo: LeaveRepository,
    rules: Optional[ClassificationRules] = None,
    auto_clock_out_time: time = DEFAULT_AUTO_CLOCK_OUT_TIME,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""

    rules = rules or ClassificationRules()
    calendar = HolidayCalendar(holidays_repo)
    leaves = LeaveLookup(leaves_repo)

    attendance_service = AttendanceService(attendance_repo, users_repo, calendar, leaves, rules=rules)
    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        leaves_repo=leaves_repo,
        auth_service=AuthService(users_repo),
        attendance_service=attendance_service,
        admin_attendance_view=AdminAttendanceView(attendance_repo, calendar, leaves, rules=rules),
        attendance_jobs=AttendanceJobs(
            attendance_repo,
            attendance_service,
            calendar,
            auto_clock_out_time=auto_clock_out_time,
        ),
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    rules: Optional[ClassificationRules] = None,
    auto_clock_out_time: time = DEFAULT_AUTO_CLOCK_OUT_TIME,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return wire(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        rules=rules,
        auto_clock_out_time=auto_clock_out_time,
        conn=conn,
    )
