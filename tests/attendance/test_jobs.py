from datetime import date, datetime, time, timezone

from src.office_attendance.office_attendance.attendance.jobs import AttendanceJobs
from src.office_attendance.office_attendance.attendance.rules import ClassificationRules
from src.office_attendance.office_attendance.attendance.service import AttendanceService
from src.office_attendance.office_attendance.core.enums import AttendanceStatus, Role
from src.office_attendance.office_attendance.holidays.calendar import HolidayCalendar
from src.office_attendance.office_attendance.leaves.service import LeaveLookup
from tests.fakes import InMemoryAttendance, InMemoryHolidays, InMemoryLeaves, InMemoryUsers, make_user

RULES = ClassificationRules(late_threshold=time(9, 15), half_day_min_hours=7, shift_zone=timezone.utc)


def _setup():
    users = InMemoryUsers(make_user(1, "alice"), make_user(2, "bob"), make_user(9, "boss", role=Role.ADMIN))
    attendance = InMemoryAttendance(users)
    calendar = HolidayCalendar(InMemoryHolidays())
    service = AttendanceService(attendance, users, calendar, LeaveLookup(InMemoryLeaves()), rules=RULES)
    jobs = AttendanceJobs(attendance, service, calendar, auto_clock_out_time=time(23, 30))
    return jobs, service, attendance


def test_auto_clock_out_closes_open_employee_sessions(fixed_now):
    jobs, service, attendance = _setup()
    service.check_in(1, now=fixed_now)
    service.check_in(2, now=fixed_now)
    service.check_out(2, now=fixed_now.replace(hour=18))
    service.check_in(9, now=fixed_now)

    closed = jobs.auto_clock_out(now=fixed_now.replace(hour=23, minute=30))

    assert closed == 1
    alice = attendance.get_for_employee_and_date(1, fixed_now.date())
    assert alice.check_out_time == time(23, 30)
    assert alice.remarks == "Auto Clock-out"
    assert alice.status == AttendanceStatus.PRESENT
    # admins are not tracked by the job
    assert attendance.get_for_employee_and_date(9, fixed_now.date()).check_out_time is None


def test_auto_clock_out_is_idempotent(fixed_now):
    jobs, service, _ = _setup()
    service.check_in(1, now=fixed_now)

    assert jobs.auto_clock_out(now=fixed_now.replace(hour=23, minute=30)) == 1
    assert jobs.auto_clock_out(now=fixed_now.replace(hour=23, minute=45)) == 0


def test_auto_clock_out_never_closes_before_checkin(fixed_now):
    jobs, service, attendance = _setup()
    service.check_in(1, now=fixed_now.replace(hour=23, minute=40))

    jobs.auto_clock_out(now=fixed_now.replace(hour=23, minute=50))

    record = attendance.get_for_employee_and_date(1, fixed_now.date())
    assert record.check_out_time == time(23, 40)
    assert record.status == AttendanceStatus.HALF_DAY


def test_auto_mark_absent_inserts_missing_rows(fixed_now):
    jobs, service, attendance = _setup()
    service.check_in(1, now=fixed_now)

    inserted = jobs.auto_mark_absent(today=fixed_now.date())

    assert inserted == 1
    bob = attendance.get_for_employee_and_date(2, fixed_now.date())
    assert bob.status == AttendanceStatus.ABSENT
    assert bob.remarks == "System Auto-marked"
    assert attendance.get_for_employee_and_date(9, fixed_now.date()) is None
    assert jobs.auto_mark_absent(today=fixed_now.date()) == 0


def test_auto_mark_absent_skips_sundays():
    jobs, _, attendance = _setup()

    assert jobs.auto_mark_absent(today=date(2025, 1, 19)) == 0
    assert attendance.rows == {}


def test_employee_can_still_clock_in_over_absent_placeholder(fixed_now):
    jobs, service, attendance = _setup()
    jobs.auto_mark_absent(today=fixed_now.date())

    record = service.check_in(2, now=datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc))

    assert record.status == AttendanceStatus.LATE
    assert record.check_in_time == time(10, 0)
