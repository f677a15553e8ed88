from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

from src.office_attendance.office_attendance.attendance.model import AttendanceDay
from src.office_attendance.office_attendance.attendance.rules import ClassificationRules
from src.office_attendance.office_attendance.attendance.service import AttendanceService
from src.office_attendance.office_attendance.core.enums import AttendanceStatus, Role, SessionStatus
from src.office_attendance.office_attendance.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    AuthenticationError,
    NoActiveSessionError,
    NonWorkingDayError,
    ValidationError,
)
from src.office_attendance.office_attendance.holidays.calendar import HolidayCalendar
from src.office_attendance.office_attendance.holidays.model import Holiday
from src.office_attendance.office_attendance.leaves.model import LeaveSpan
from src.office_attendance.office_attendance.leaves.service import LeaveLookup
from src.office_attendance.office_attendance.users.service import AuthService
from tests.fakes import InMemoryAttendance, InMemoryHolidays, InMemoryLeaves, InMemoryUsers, make_user

RULES = ClassificationRules(late_threshold=time(9, 15), half_day_min_hours=7, shift_zone=timezone.utc)


def _service(*, holidays=(), leaves=(), attendance=None):
    users = InMemoryUsers(make_user(1, "alice"), make_user(2, "bob", active=False))
    attendance = attendance or InMemoryAttendance(users)
    svc = AttendanceService(
        attendance,
        users,
        HolidayCalendar(InMemoryHolidays(*holidays)),
        LeaveLookup(InMemoryLeaves(*leaves)),
        rules=RULES,
    )
    return svc, attendance


def test_auth_wrong_password_raises():
    users = InMemoryUsers(make_user(1, "alice", password="right"))

    with pytest.raises(AuthenticationError):
        AuthService(users).authenticate("alice", "wrong")


def test_auth_returns_session_user():
    users = InMemoryUsers(make_user(7, "root", role=Role.ADMIN, password="admin123"))

    s_user = AuthService(users).authenticate("root", "admin123")

    assert s_user.user_id == 7
    assert s_user.role == Role.ADMIN


def test_attendance_checkin_on_time(fixed_now):
    svc, repo = _service()

    record = svc.check_in(1, now=fixed_now)

    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in_time == time(9, 0)
    assert repo.get_for_employee_and_date(1, fixed_now.date()) == record


def test_second_checkin_is_rejected_and_keeps_first_instant(fixed_now):
    svc, repo = _service()
    svc.check_in(1, now=fixed_now)

    with pytest.raises(AlreadyCheckedInError, match="Already clocked in"):
        svc.check_in(1, now=fixed_now.replace(hour=10))

    assert repo.get_for_employee_and_date(1, fixed_now.date()).check_in_time == time(9, 0)


def test_clocked_out_day_is_terminal(fixed_now):
    svc, _ = _service()
    svc.check_in(1, now=fixed_now)
    svc.check_out(1, now=fixed_now.replace(hour=18))

    with pytest.raises(AlreadyCheckedInError, match="Already clocked out"):
        svc.check_in(1, now=fixed_now.replace(hour=19))
    with pytest.raises(AlreadyCheckedOutError):
        svc.check_out(1, now=fixed_now.replace(hour=20))


def test_checkout_reclassifies_short_day(fixed_now):
    svc, _ = _service()
    svc.check_in(1, now=fixed_now)

    record = svc.check_out(1, now=fixed_now.replace(hour=12))

    assert record.status == AttendanceStatus.HALF_DAY
    assert record.session_status == SessionStatus.CLOCKED_OUT


def test_checkout_without_checkin(fixed_now):
    svc, _ = _service()

    with pytest.raises(NoActiveSessionError):
        svc.check_out(1, now=fixed_now)


def test_checkout_before_checkin_is_invalid(fixed_now):
    svc, _ = _service()
    svc.check_in(1, now=fixed_now)

    with pytest.raises(ValidationError):
        svc.check_out(1, now=fixed_now.replace(hour=8))


def test_checkin_refused_on_holiday_sunday_and_leave(fixed_now):
    holiday = Holiday(holiday_id=1, name="Founders Day", holiday_date=fixed_now.date())
    svc, repo = _service(holidays=[holiday])
    with pytest.raises(NonWorkingDayError, match="Founders Day"):
        svc.check_in(1, now=fixed_now)

    svc, repo = _service()
    with pytest.raises(NonWorkingDayError):
        svc.check_in(1, now=datetime(2025, 1, 19, 9, 0, tzinfo=timezone.utc))

    svc, repo = _service(leaves=[LeaveSpan(employee_id=1, start_date=date(2025, 1, 14), end_date=date(2025, 1, 16))])
    with pytest.raises(NonWorkingDayError, match="leave"):
        svc.check_in(1, now=fixed_now)
    assert repo.rows == {}


def test_inactive_employee_cannot_check_in(fixed_now):
    svc, _ = _service()

    with pytest.raises(ValidationError):
        svc.check_in(2, now=fixed_now)


def test_checkin_fills_absent_placeholder(fixed_now):
    svc, repo = _service()
    repo.add(
        AttendanceDay(
            attendance_id=None,
            employee_id=1,
            work_date=fixed_now.date(),
            check_in_time=None,
            check_out_time=None,
            status=AttendanceStatus.ABSENT,
            remarks="System Auto-marked",
        )
    )

    record = svc.check_in(1, now=fixed_now.replace(hour=9, minute=20))

    assert record.status == AttendanceStatus.LATE
    assert record.attendance_id == 1
    assert len(repo.rows) == 1


def test_lost_checkin_race_surfaces_conflict(fixed_now):
    class RacingAttendance(InMemoryAttendance):
        def create_checkin(self, **kwargs):
            # another device wrote between the read and the write
            super().create_checkin(**{**kwargs, "check_in_time": time(8, 59)})
            return super().create_checkin(**kwargs)

    svc, repo = _service(attendance=RacingAttendance(InMemoryUsers(make_user(1, "alice"))))

    with pytest.raises(AlreadyCheckedInError):
        svc.check_in(1, now=fixed_now)
    assert repo.get_for_employee_and_date(1, fixed_now.date()).check_in_time == time(8, 59)


def test_today_status_reports_utc_wall_clock(fixed_now):
    svc, _ = _service()
    assert svc.today_status(1, now=fixed_now).to_dict() == {
        "status": "not_clocked_in",
        "checkInTime": None,
        "checkOutTime": None,
    }

    svc.check_in(1, now=fixed_now.replace(minute=5, second=30, microsecond=123))

    assert svc.today_status(1, now=fixed_now).to_dict() == {
        "status": "clocked_in",
        "checkInTime": "09:05:30",
        "checkOutTime": None,
    }
