from __future__ import annotations

from datetime import date

from ..common.datetime_utils import iter_days
from .repository import LeaveRepository


class LeaveLookup:
    """Answers "is this employee on approved leave" for attendance purposes."""

    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    def leave_dates(self, employee_id: int, *, start: date, end: date) -> set[date]:
        days: set[date] = set()
        for span in self._leaves.list_approved(start=start, end=end, employee_id=employee_id):
            days.update(d for d in iter_days(max(span.start_date, start), min(span.end_date, end)))
        return days

    def is_on_leave(self, employee_id: int, day: date) -> bool:
        return bool(self._leaves.list_approved(start=day, end=day, employee_id=employee_id))

    def employees_on_leave(self, day: date) -> set[int]:
        return {span.employee_id for span in self._leaves.list_approved(start=day, end=day)}
