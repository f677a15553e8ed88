from __future__ import annotations

from datetime import date, time
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceDay, AttendanceLogRow, EmployeeDayRow
from .repository import AttendanceRepository

_COLUMNS = "a.attendance_id, a.user_id, a.work_date, a.check_in_time, a.check_out_time, a.status, a.remarks"


def _to_day(r: dict[str, Any]) -> AttendanceDay:
    return AttendanceDay(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=normalize_mysql_time(r.get("check_in_time")),
        check_out_time=normalize_mysql_time(r.get("check_out_time")),
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.user_id=%s AND a.work_date=%s
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_day(r) if r else None

    def list_for_employee(self, employee_id: int, *, start: date, end: date) -> Sequence[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.user_id=%s AND a.work_date BETWEEN %s AND %s
                ORDER BY a.work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_day(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: time,
        status: AttendanceStatus,
    ) -> bool:
        # Both statements only ever write when no check-in exists, so a zero
        # row count means another request won the race.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_in_time=%s, status=%s
                WHERE user_id=%s AND work_date=%s AND check_in_time IS NULL
                """,
                (check_in_time, status.value, int(employee_id), work_date),
            )
            if cur.rowcount == 1:
                return True

            cur.execute(
                """
                INSERT IGNORE INTO attendance(user_id, work_date, check_in_time, status)
                VALUES(%s, %s, %s, %s)
                """,
                (int(employee_id), work_date, check_in_time, status.value),
            )
            return cur.rowcount == 1

    def update_checkout(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_out_time: time,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out_time=%s, status=%s,
                    remarks = CASE
                        WHEN %s IS NULL THEN remarks
                        WHEN remarks IS NULL OR remarks = '' THEN %s
                        ELSE CONCAT(remarks, ' | ', %s)
                    END
                WHERE user_id=%s AND work_date=%s
                  AND check_in_time IS NOT NULL
                  AND check_out_time IS NULL
                  AND check_in_time <= %s
                """,
                (
                    check_out_time,
                    status.value,
                    remarks,
                    remarks,
                    remarks,
                    int(employee_id),
                    work_date,
                    check_out_time,
                ),
            )
            return cur.rowcount == 1

    def list_open_sessions(self, work_date: date) -> Sequence[AttendanceDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                JOIN users u ON u.user_id = a.user_id
                WHERE a.work_date=%s
                  AND a.check_in_time IS NOT NULL
                  AND a.check_out_time IS NULL
                  AND u.role NOT IN ('admin', 'super_admin')
                """,
                (work_date,),
            )
            return [_to_day(r) for r in fetchall(cur)]

    def mark_absent_missing(self, *, work_date: date, remarks: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance (user_id, work_date, status, remarks)
                SELECT u.user_id, %s, %s, %s
                FROM users u
                WHERE u.is_active = 1
                  AND u.role NOT IN ('admin', 'super_admin')
                """,
                (work_date, AttendanceStatus.ABSENT.value, remarks),
            )
            return int(cur.rowcount or 0)

    def get_daily_rows(self, work_date: date) -> Sequence[EmployeeDayRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT u.user_id AS employee_id, u.full_name, u.designation, {_COLUMNS}
                FROM users u
                LEFT JOIN attendance a ON a.user_id = u.user_id AND a.work_date = %s
                WHERE u.role NOT IN ('admin', 'super_admin') AND u.is_active = 1
                ORDER BY u.full_name ASC
                """,
                (work_date,),
            )
            return [
                EmployeeDayRow(
                    employee_id=int(r["employee_id"]),
                    full_name=r["full_name"],
                    designation=r.get("designation"),
                    record=_to_day(r) if r.get("attendance_id") is not None else None,
                )
                for r in fetchall(cur)
            ]

    def get_log_rows(self, *, start: date, end: date) -> Sequence[AttendanceLogRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT u.full_name, u.username, u.designation, {_COLUMNS}
                FROM attendance a
                JOIN users u ON u.user_id = a.user_id
                WHERE a.work_date BETWEEN %s AND %s
                ORDER BY a.work_date DESC, a.check_in_time DESC
                """,
                (start, end),
            )
            return [
                AttendanceLogRow(
                    full_name=r["full_name"],
                    username=r["username"],
                    designation=r.get("designation"),
                    record=_to_day(r),
                )
                for r in fetchall(cur)
            ]
