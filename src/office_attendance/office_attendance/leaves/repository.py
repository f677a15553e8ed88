from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import LeaveSpan


class LeaveRepository(Protocol):
    def list_approved(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[LeaveSpan]:
        """Approved leaves overlapping ``[start, end]``."""

        raise NotImplementedError
