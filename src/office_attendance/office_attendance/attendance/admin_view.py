from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import format_12h, format_hours_minutes, month_range
from ..core.enums import AttendanceStatus
from ..holidays.calendar import HolidayCalendar
from ..holidays.model import HolidayStatus
from ..leaves.service import LeaveLookup
from .classification import DEFAULT_RULES, arrived_late, classify_day
from .model import AttendanceDay
from .repository import AttendanceRepository
from .rules import ClassificationRules


@dataclass(frozen=True)
class DailyView:
    rows: list[dict]
    holiday: HolidayStatus

    def to_dict(self) -> dict:
        return {"attendanceData": self.rows, "holidayStatus": self.holiday.to_dict()}


@dataclass
class DailyCounts:
    present: int = 0
    absent: int = 0
    late: int = 0
    on_leave: int = 0
    skipped_holidays: set[str] = field(default_factory=set)

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "onLeave": self.on_leave,
            "holidayDays": len(self.skipped_holidays),
        }


class AdminAttendanceView:
    """Admin read side: one date for everyone, or a month of raw log rows."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        calendar: HolidayCalendar,
        leaves: LeaveLookup,
        *,
        rules: ClassificationRules = DEFAULT_RULES,
    ):
        self._attendance = attendance
        self._calendar = calendar
        self._leaves = leaves
        self._rules = rules

    def _format_times(self, record: Optional[AttendanceDay]) -> dict:
        check_in = record.check_in_at if record else None
        check_out = record.check_out_at if record else None
        return {
            "checkIn": format_12h(check_in, self._rules.shift_zone) if check_in else "-",
            "checkOut": format_12h(check_out, self._rules.shift_zone) if check_out else "-",
            "hours": format_hours_minutes(record.worked_duration if record else None),
        }

    def daily(self, work_date: date) -> DailyView:
        holiday = self._calendar.status_for(work_date)
        if holiday.is_non_working:
            return DailyView(rows=[], holiday=holiday)

        on_leave = self._leaves.employees_on_leave(work_date)
        rows = []
        for r in self._attendance.get_daily_rows(work_date):
            status = classify_day(r.record, rules=self._rules, on_leave=r.employee_id in on_leave)
            rows.append(
                {
                    "id": r.employee_id,
                    "attendanceId": r.record.attendance_id if r.record else None,
                    "name": r.full_name,
                    "designation": r.designation,
                    "date": work_date.strftime("%Y-%m-%d"),
                    **self._format_times(r.record if status.counts_as_present else None),
                    "status": status.value,
                    "late": status.counts_as_present and arrived_late(r.record, rules=self._rules),
                }
            )
        return DailyView(rows=rows, holiday=holiday)

    def month(self, *, month: int, year: int) -> list[dict]:
        start, end = month_range(month, year)
        out = []
        for r in self._attendance.get_log_rows(start=start, end=end):
            status = classify_day(r.record, rules=self._rules)
            out.append(
                {
                    "id": r.record.attendance_id,
                    "employeeId": r.record.employee_id,
                    "name": r.full_name,
                    "username": r.username,
                    "designation": r.designation,
                    "date": r.record.work_date.strftime("%Y-%m-%d"),
                    **self._format_times(r.record),
                    "status": status.value,
                    "late": status.counts_as_present and arrived_late(r.record, rules=self._rules),
                    "remarks": r.record.remarks or "",
                }
            )
        return out

    def summarize_rows(self, rows: Iterable[dict]) -> DailyCounts:
        """Count a batch of view rows, dropping rows that fall on non-working days."""

        rows = list(rows)
        if not rows:
            return DailyCounts()
        dates = sorted({row["date"] for row in rows})
        start = date.fromisoformat(dates[0])
        end = date.fromisoformat(dates[-1])
        non_working = self._calendar.names_between(start, end)

        counts = DailyCounts()
        for row in rows:
            day = date.fromisoformat(row["date"])
            if day in non_working:
                counts.skipped_holidays.add(row["date"])
                continue
            status = AttendanceStatus(row["status"])
            if status.counts_as_present:
                counts.present += 1
                if row.get("late"):
                    counts.late += 1
            elif status == AttendanceStatus.ABSENT:
                counts.absent += 1
            elif status == AttendanceStatus.ON_LEAVE:
                counts.on_leave += 1
        return counts
