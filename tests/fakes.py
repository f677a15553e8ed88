"""In-memory repositories and a scripted gateway shared by the test modules."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date, time
from typing import Optional

from werkzeug.security import generate_password_hash

from src.office_attendance.office_attendance.attendance.model import AttendanceDay, AttendanceLogRow, EmployeeDayRow
from src.office_attendance.office_attendance.client.gateway import GatewayStatus, GatewayTransition
from src.office_attendance.office_attendance.core.enums import AttendanceStatus, Role
from src.office_attendance.office_attendance.holidays.model import Holiday
from src.office_attendance.office_attendance.leaves.model import LeaveSpan
from src.office_attendance.office_attendance.users.model import User


def make_user(user_id: int, username: str, *, role: Role = Role.EMPLOYEE, password: str = "pw", active: bool = True) -> User:
    return User(
        user_id=user_id,
        full_name=username.title(),
        username=username,
        password_hash=generate_password_hash(password),
        role=role,
        designation="Engineer" if role == Role.EMPLOYEE else "Manager",
        is_active=active,
    )


class InMemoryUsers:
    def __init__(self, *users: User):
        self.by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.username == username), None)


class InMemoryAttendance:
    """Mirrors the conditional writes of the MySQL repository."""

    def __init__(self, users: Optional[InMemoryUsers] = None):
        self.users = users or InMemoryUsers()
        self.rows: dict[tuple[int, date], AttendanceDay] = {}
        self._id = 0

    def add(self, record: AttendanceDay) -> AttendanceDay:
        if record.attendance_id is None:
            self._id += 1
            record = replace(record, attendance_id=self._id)
        self.rows[(record.employee_id, record.work_date)] = record
        return record

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceDay]:
        return self.rows.get((employee_id, work_date))

    def list_for_employee(self, employee_id: int, *, start: date, end: date):
        return sorted(
            (r for r in self.rows.values() if r.employee_id == employee_id and start <= r.work_date <= end),
            key=lambda r: r.work_date,
        )

    def create_checkin(self, *, employee_id: int, work_date: date, check_in_time: time, status: AttendanceStatus) -> bool:
        existing = self.rows.get((employee_id, work_date))
        if existing is not None:
            if existing.check_in_time is not None:
                return False
            self.rows[(employee_id, work_date)] = replace(existing, check_in_time=check_in_time, status=status)
            return True
        self.add(
            AttendanceDay(
                attendance_id=None,
                employee_id=employee_id,
                work_date=work_date,
                check_in_time=check_in_time,
                check_out_time=None,
                status=status,
            )
        )
        return True

    def update_checkout(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_out_time: time,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> bool:
        existing = self.rows.get((employee_id, work_date))
        if (
            existing is None
            or existing.check_in_time is None
            or existing.check_out_time is not None
            or existing.check_in_time > check_out_time
        ):
            return False
        merged = existing.remarks
        if remarks:
            merged = f"{merged} | {remarks}" if merged else remarks
        self.rows[(employee_id, work_date)] = replace(
            existing, check_out_time=check_out_time, status=status, remarks=merged
        )
        return True

    def list_open_sessions(self, work_date: date):
        return [
            r
            for r in self.rows.values()
            if r.work_date == work_date
            and r.check_in_time is not None
            and r.check_out_time is None
            and not self._is_admin(r.employee_id)
        ]

    def _is_admin(self, employee_id: int) -> bool:
        user = self.users.get_by_id(employee_id)
        return bool(user and user.role.is_admin)

    def _employees(self):
        return sorted(
            (u for u in self.users.by_id.values() if u.is_active and not u.role.is_admin),
            key=lambda u: u.full_name,
        )

    def mark_absent_missing(self, *, work_date: date, remarks: str) -> int:
        inserted = 0
        for user in self._employees():
            if (user.user_id, work_date) in self.rows:
                continue
            self.add(
                AttendanceDay(
                    attendance_id=None,
                    employee_id=user.user_id,
                    work_date=work_date,
                    check_in_time=None,
                    check_out_time=None,
                    status=AttendanceStatus.ABSENT,
                    remarks=remarks,
                )
            )
            inserted += 1
        return inserted

    def get_daily_rows(self, work_date: date):
        return [
            EmployeeDayRow(
                employee_id=u.user_id,
                full_name=u.full_name,
                designation=u.designation,
                record=self.rows.get((u.user_id, work_date)),
            )
            for u in self._employees()
        ]

    def get_log_rows(self, *, start: date, end: date):
        out = []
        for r in sorted(self.rows.values(), key=lambda r: (r.work_date, r.check_in_time or time.min), reverse=True):
            if not start <= r.work_date <= end:
                continue
            user = self.users.get_by_id(r.employee_id)
            out.append(
                AttendanceLogRow(full_name=user.full_name, username=user.username, designation=user.designation, record=r)
            )
        return out


class InMemoryHolidays:
    def __init__(self, *holidays: Holiday):
        self.by_date = {h.holiday_date: h for h in holidays}

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        return self.by_date.get(holiday_date)

    def list_range(self, *, start: date, end: date):
        return [h for d, h in sorted(self.by_date.items()) if start <= d <= end]


class InMemoryLeaves:
    def __init__(self, *spans: LeaveSpan):
        self.spans = list(spans)

    def list_approved(self, *, start: date, end: date, employee_id: Optional[int] = None):
        return [
            s
            for s in self.spans
            if s.start_date <= end
            and s.end_date >= start
            and (employee_id is None or s.employee_id == employee_id)
        ]


class ScriptedGateway:
    """Gateway double: counts calls, can block on an event or raise on demand."""

    def __init__(self, *, status: Optional[GatewayStatus] = None, check_in_time: str = "09:00:00"):
        self.status = status or GatewayStatus(status="not_clocked_in")
        self.check_in_time = check_in_time
        self.calls: dict[str, int] = {"get_status": 0, "check_in": 0, "check_out": 0}
        self.failures: dict[str, Exception] = {}
        self.release: Optional[asyncio.Event] = None

    async def _enter(self, name: str) -> None:
        self.calls[name] += 1
        if self.release is not None:
            await self.release.wait()
        if name in self.failures:
            raise self.failures[name]

    async def get_status(self) -> GatewayStatus:
        await self._enter("get_status")
        return self.status

    async def check_in(self) -> GatewayTransition:
        await self._enter("check_in")
        self.status = GatewayStatus(status="clocked_in", check_in_time=self.check_in_time)
        return GatewayTransition(message="Clock-in successful", check_in_time=self.check_in_time)

    async def check_out(self) -> GatewayTransition:
        await self._enter("check_out")
        self.status = GatewayStatus(status="clocked_out", check_in_time=self.check_in_time)
        return GatewayTransition(message="Clock-out successful", check_in_time=self.check_in_time, check_out_time="18:00:00")


class RecordingSink:
    def __init__(self):
        self.messages = []

    def notify(self, message, severity):
        self.messages.append((message, severity))
