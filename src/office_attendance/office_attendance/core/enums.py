from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    EMPLOYEE = "employee"

    @property
    def is_admin(self) -> bool:
        return self in {Role.ADMIN, Role.SUPER_ADMIN}


class AttendanceStatus(str, Enum):
    """Day status labels as shown to users and cached in the database."""

    PRESENT = "Present"
    LATE = "Late"
    HALF_DAY = "Half Day"
    ABSENT = "Absent"
    ON_LEAVE = "On Leave"
    HOLIDAY = "Holiday"

    @property
    def counts_as_present(self) -> bool:
        return self in {AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY}


class SessionStatus(str, Enum):
    """Today's clock state for one employee."""

    NOT_CLOCKED_IN = "not_clocked_in"
    CLOCKED_IN = "clocked_in"
    CLOCKED_OUT = "clocked_out"


class TransitionPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class Severity(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LeaveStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
