"""Folds daily attendance records into history rows and monthly statistics."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional

from ..common.datetime_utils import format_hours_minutes, iter_days
from ..core.enums import AttendanceStatus
from .classification import DEFAULT_RULES, arrived_late, classify_day
from .model import AttendanceDay, HistoryResult, HistoryRow, MonthlySummary
from .rules import ClassificationRules


class HistoryAggregator:
    def __init__(self, *, rules: ClassificationRules = DEFAULT_RULES):
        self._rules = rules

    def aggregate(
        self,
        records: Iterable[AttendanceDay],
        *,
        start: date,
        end: date,
        today: date,
        holidays: Mapping[date, str],
        leave_dates: Optional[set[date]] = None,
    ) -> HistoryResult:
        """Walk every calendar day in ``[start, min(end, today)]``.

        Non-working days (``holidays``, which includes Sundays) become Holiday
        rows and are not working days. A past working day with no record is
        Absent. Today without a record is still open: it counts as a working
        day but produces no row.
        """

        by_date = {r.work_date: r for r in records}
        leave_dates = leave_dates or set()
        last = min(end, today)

        rows: list[HistoryRow] = []
        working_days = present = late = leaves = 0

        for day in iter_days(start, last):
            record = by_date.get(day)
            holiday = day in holidays
            on_leave = day in leave_dates

            if not holiday:
                working_days += 1
            if record is None and not holiday and not on_leave and day == today:
                continue

            status = classify_day(record, rules=self._rules, holiday=holiday, on_leave=on_leave)
            if status.counts_as_present:
                present += 1
                if arrived_late(record, rules=self._rules):
                    late += 1
            elif status == AttendanceStatus.ON_LEAVE:
                leaves += 1

            tracked = record if status.counts_as_present else None
            rows.append(
                HistoryRow(
                    work_date=day,
                    check_in_at=tracked.check_in_at if tracked else None,
                    check_out_at=tracked.check_out_at if tracked else None,
                    total_hours=format_hours_minutes(tracked.worked_duration if tracked else None),
                    status=status,
                )
            )

        rows.reverse()
        return HistoryResult(
            rows=rows,
            summary=MonthlySummary(
                total_working_days=working_days,
                present_days=present,
                late_arrivals=late,
                leaves_taken=leaves,
            ),
        )
