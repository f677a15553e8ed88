from __future__ import annotations

import importlib
from datetime import date, datetime, time, timezone
from types import SimpleNamespace

import pytest

from src.office_attendance.office_attendance.attendance import controller as attendance_controller
from src.office_attendance.office_attendance.attendance import jobs as attendance_jobs
from src.office_attendance.office_attendance.attendance import service as attendance_service
from src.office_attendance.office_attendance.attendance.controller import client_ip
from src.office_attendance.office_attendance.attendance.model import AttendanceDay
from src.office_attendance.office_attendance.attendance.rules import ClassificationRules
from src.office_attendance.office_attendance.container import wire
from src.office_attendance.office_attendance.core.enums import AttendanceStatus, Role
from src.office_attendance.office_attendance.main import create_app
from tests.fakes import InMemoryAttendance, InMemoryHolidays, InMemoryLeaves, InMemoryUsers, make_user

NOW = datetime(2025, 1, 15, 9, 5, 0, tzinfo=timezone.utc)


def _settings(**overrides):
    base = importlib.import_module("config.testing")
    values = {k: getattr(base, k) for k in dir(base) if k.isupper()}
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def frozen_clock(monkeypatch):
    monkeypatch.setattr(attendance_service, "now_utc", lambda: NOW)
    monkeypatch.setattr(attendance_controller, "now_utc", lambda: NOW)
    monkeypatch.setattr(attendance_jobs, "now_utc", lambda: NOW)
    return NOW


@pytest.fixture
def repos():
    users = InMemoryUsers(
        make_user(1, "alice", password="secret"),
        make_user(9, "boss", role=Role.ADMIN, password="admin123"),
    )
    return {
        "users_repo": users,
        "attendance_repo": InMemoryAttendance(users),
        "holidays_repo": InMemoryHolidays(),
        "leaves_repo": InMemoryLeaves(),
    }


def _client(repos, **settings):
    container = wire(**repos, rules=ClassificationRules(shift_zone=timezone.utc))
    app = create_app(container, settings=_settings(**settings))
    return app.test_client()


def _login(client, username, password):
    return client.post("/api/auth/login", json={"username": username, "password": password})


def test_endpoints_require_login(repos):
    client = _client(repos)

    assert client.get("/api/attendance/status").status_code == 401
    assert client.post("/api/attendance/check-in").status_code == 401


def test_login_rejects_bad_password(repos):
    client = _client(repos)

    resp = _login(client, "alice", "nope")

    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Invalid username or password"


def test_full_day_flow(repos, frozen_clock):
    client = _client(repos)
    assert _login(client, "alice", "secret").status_code == 200

    assert client.get("/api/attendance/status").get_json()["status"] == "not_clocked_in"

    resp = client.post("/api/attendance/check-in")
    assert resp.status_code == 201
    assert resp.get_json()["checkIn"] == "09:05:00"
    assert resp.get_json()["status"] == "Present"

    status = client.get("/api/attendance/status").get_json()
    assert status == {"status": "clocked_in", "checkInTime": "09:05:00", "checkOutTime": None}

    again = client.post("/api/attendance/check-in")
    assert again.status_code == 409
    assert again.get_json()["message"] == "Already clocked in for today"

    repos["attendance_repo"].rows.clear()
    missing = client.post("/api/attendance/check-out")
    assert missing.status_code == 404


def test_history_defaults_to_current_month(repos, frozen_clock):
    client = _client(repos)
    _login(client, "alice", "secret")
    client.post("/api/attendance/check-in")

    body = client.get("/api/attendance/history").get_json()

    assert body["history"][0]["date"] == "2025-01-15"
    assert body["history"][0]["checkIn"] == "2025-01-15T09:05:00Z"
    assert body["stats"]["presentDays"] == 1
    # 1..15 Jan 2025 minus Sundays 5 and 12
    assert body["stats"]["totalWorkingDays"] == 13


def test_history_rejects_bad_month(repos, frozen_clock):
    client = _client(repos)
    _login(client, "alice", "secret")

    assert client.get("/api/attendance/history?month=13&year=2025").status_code == 400


def test_clock_in_ip_allow_list(repos, frozen_clock):
    client = _client(repos, CLOCK_IN_ALLOWED_IPS=["10.0.0.5"])
    _login(client, "alice", "secret")

    denied = client.post("/api/attendance/check-in", headers={"X-Forwarded-For": "10.0.0.9"})
    assert denied.status_code == 403
    assert "10.0.0.9" in denied.get_json()["message"]

    allowed = client.post("/api/attendance/check-in", headers={"X-Forwarded-For": "::ffff:10.0.0.5, 172.16.0.1"})
    assert allowed.status_code == 201


def test_admin_bypasses_ip_allow_list(repos, frozen_clock):
    client = _client(repos, CLOCK_IN_ALLOWED_IPS=["10.0.0.5"])
    _login(client, "boss", "admin123")

    assert client.post("/api/attendance/check-in", headers={"X-Forwarded-For": "8.8.8.8"}).status_code == 201


def test_client_ip_normalisation():
    assert client_ip({"X-Forwarded-For": "::ffff:1.2.3.4, 5.6.7.8"}, "9.9.9.9") == "1.2.3.4"
    assert client_ip({}, "::1") == "127.0.0.1"
    assert client_ip({}, None) == ""


def test_admin_attendance_requires_admin(repos):
    client = _client(repos)
    _login(client, "alice", "secret")

    assert client.get("/api/admin/attendance?mode=daily&date=2025-01-15").status_code == 403


def test_admin_attendance_modes(repos, frozen_clock):
    client = _client(repos)
    _login(client, "alice", "secret")
    client.post("/api/attendance/check-in")
    client.post("/api/auth/logout")
    _login(client, "boss", "admin123")

    daily = client.get("/api/admin/attendance?mode=daily&date=2025-01-15").get_json()
    assert daily["holidayStatus"]["isSunday"] is False
    assert [row["name"] for row in daily["attendanceData"]] == ["Alice"]
    assert daily["attendanceData"][0]["checkIn"] == "9:05 AM"

    history = client.get("/api/admin/attendance?mode=history&month=1&year=2025").get_json()
    assert isinstance(history, list)
    assert history[0]["username"] == "alice"


@pytest.mark.parametrize(
    "query, message",
    [
        ("mode=daily", "Date is required for daily mode"),
        ("mode=daily&date=15-01-2025", "Invalid date, expected YYYY-MM-DD"),
        ("mode=history&month=1", "Month and Year are required for history mode"),
        ("mode=weekly", "Invalid mode. Use 'daily', 'history' or 'summary'."),
        ("mode=summary&year=2025", "Month and Year are required for summary mode"),
    ],
)
def test_admin_attendance_bad_input(repos, query, message):
    client = _client(repos)
    _login(client, "boss", "admin123")

    resp = client.get(f"/api/admin/attendance?{query}")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == message


def test_cli_jobs(repos, frozen_clock):
    container = wire(**repos, rules=ClassificationRules(shift_zone=timezone.utc))
    app = create_app(container, settings=_settings())
    container.attendance_service.check_in(1, now=NOW)

    runner = app.test_cli_runner()
    result = runner.invoke(args=["auto-clock-out"])

    assert result.exit_code == 0
    assert "1 session(s) closed" in result.output
    record = repos["attendance_repo"].get_for_employee_and_date(1, date(2025, 1, 15))
    assert record.check_out_time == time(23, 30)


def test_admin_summary_skips_non_working_days(repos, frozen_clock):
    client = _client(repos)
    _login(client, "alice", "secret")
    client.post("/api/attendance/check-in")
    repos["attendance_repo"].add(
        AttendanceDay(
            attendance_id=None,
            employee_id=1,
            work_date=date(2025, 1, 19),
            check_in_time=time(10, 0),
            check_out_time=time(18, 0),
            status=AttendanceStatus.LATE,
        )
    )
    client.post("/api/auth/logout")
    _login(client, "boss", "admin123")

    summary = client.get("/api/admin/attendance?mode=summary&month=1&year=2025").get_json()

    assert summary == {"present": 1, "absent": 0, "late": 0, "onLeave": 0, "holidayDays": 1}
