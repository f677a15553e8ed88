from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import LeaveSpan
from .repository import LeaveRepository


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_approved(self, *, start: date, end: date, employee_id: Optional[int] = None) -> Sequence[LeaveSpan]:
        clauses = ["status=%s", "start_date <= %s", "end_date >= %s"]
        params: list[object] = [LeaveStatus.APPROVED.value, end, start]
        if employee_id is not None:
            clauses.append("user_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, start_date, end_date
                FROM leaves
                WHERE {" AND ".join(clauses)}
                ORDER BY start_date ASC
                """,
                tuple(params),
            )
            return [
                LeaveSpan(employee_id=int(r["user_id"]), start_date=r["start_date"], end_date=r["end_date"])
                for r in fetchall(cur)
            ]
