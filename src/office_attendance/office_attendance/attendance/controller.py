from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import format_wall_clock, now_utc, parse_iso_date
from ..common.guards import admin_required, login_required
from ..common.logger import get_logger
from ..common.validators import require_int_in_range
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError

log = get_logger("attendance.controller")


def client_ip(headers, remote_addr: str | None) -> str:
    """Caller IP as seen behind a proxy: first X-Forwarded-For entry, IPv4-mapped prefix dropped."""

    raw = headers.get("X-Forwarded-For") or remote_addr or ""
    ip = raw.split(",")[0].strip()
    if ip.startswith("::ffff:"):
        ip = ip[len("::ffff:"):]
    if ip == "::1":
        ip = "127.0.0.1"
    return ip


def register(app: Flask, container: Container) -> None:
    def _error(e: DomainError):
        return jsonify({"message": str(e)}), e.http_status

    def _server_error(action: str):
        log.exception("unexpected error during %s", action)
        return jsonify({"message": "Internal server error"}), 500

    def _wall(value):
        return format_wall_clock(value) if value else None

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    def attendance_status():
        try:
            snapshot = container.attendance_service.today_status(int(session["user_id"]))
        except DomainError as e:
            return _error(e)
        except Exception:
            return _server_error("status")
        return jsonify(snapshot.to_dict())

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def attendance_check_in():
        user_id = int(session["user_id"])
        allowed = app.config.get("CLOCK_IN_ALLOWED_IPS") or []
        if allowed and not Role(session.get("role", Role.EMPLOYEE.value)).is_admin:
            ip = client_ip(request.headers, request.remote_addr)
            if ip not in allowed:
                log.warning("check-in refused user=%s ip=%s", user_id, ip)
                return _error(AuthorizationError(f"Clock-in denied. Your IP ({ip}) is not authorized."))

        try:
            record = container.attendance_service.check_in(user_id)
        except DomainError as e:
            return _error(e)
        except Exception:
            return _server_error("check-in")
        return (
            jsonify(
                {
                    "message": "Clock-in successful",
                    "checkIn": _wall(record.check_in_time),
                    "checkOut": _wall(record.check_out_time),
                    "status": record.status.value,
                }
            ),
            201,
        )

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def attendance_check_out():
        try:
            record = container.attendance_service.check_out(int(session["user_id"]))
        except DomainError as e:
            return _error(e)
        except Exception:
            return _server_error("check-out")
        return (
            jsonify(
                {
                    "message": "Clock-out successful",
                    "checkIn": _wall(record.check_in_time),
                    "checkOut": _wall(record.check_out_time),
                    "status": record.status.value,
                }
            ),
            201,
        )

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        today = now_utc().date()
        try:
            month = require_int_in_range(request.args.get("month", today.month), "month", low=1, high=12)
            year = require_int_in_range(request.args.get("year", today.year), "year", low=2000, high=9999)
            result = container.attendance_service.history(int(session["user_id"]), month=month, year=year, today=today)
        except DomainError as e:
            return _error(e)
        except Exception:
            return _server_error("history")
        return jsonify(result.to_dict())

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        mode = request.args.get("mode")
        try:
            if mode == "daily":
                date_s = request.args.get("date")
                if not date_s:
                    return jsonify({"message": "Date is required for daily mode"}), 400
                try:
                    work_date = parse_iso_date(date_s)
                except ValueError:
                    return jsonify({"message": "Invalid date, expected YYYY-MM-DD"}), 400
                return jsonify(container.admin_attendance_view.daily(work_date).to_dict())

            if mode in ("history", "summary"):
                if not request.args.get("month") or not request.args.get("year"):
                    return jsonify({"message": f"Month and Year are required for {mode} mode"}), 400
                month = require_int_in_range(request.args["month"], "month", low=1, high=12)
                year = require_int_in_range(request.args["year"], "year", low=2000, high=9999)
                rows = container.admin_attendance_view.month(month=month, year=year)
                if mode == "summary":
                    return jsonify(container.admin_attendance_view.summarize_rows(rows).to_dict())
                return jsonify(rows)
        except DomainError as e:
            return _error(e)
        except Exception:
            return _server_error(f"admin attendance ({mode})")

        return jsonify({"message": "Invalid mode. Use 'daily', 'history' or 'summary'."}), 400

    @app.cli.command("auto-clock-out")
    def auto_clock_out_command():
        """Close sessions left open today at the configured auto clock-out time."""
        closed = container.attendance_jobs.auto_clock_out()
        print(f"Auto clock-out: {closed} session(s) closed")

    @app.cli.command("auto-mark-absent")
    def auto_mark_absent_command():
        """Insert Absent placeholders for employees without a record today."""
        inserted = container.attendance_jobs.auto_mark_absent()
        print(f"Auto-absent: {inserted} row(s) inserted")
