"""Pure status classification for attendance days.

Instants are the ground truth; every status shown to a user is rederived here
from the check-in and check-out instants plus externally supplied facts
(holiday, approved leave).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import as_utc
from ..core.enums import AttendanceStatus
from .factory import AttendanceStrategyFactory
from .model import AttendanceDay
from .rules import ClassificationRules, is_late

DEFAULT_RULES = ClassificationRules()


def classify(
    check_in_at: Optional[datetime],
    check_out_at: Optional[datetime] = None,
    *,
    rules: ClassificationRules = DEFAULT_RULES,
) -> AttendanceStatus:
    if check_in_at is None:
        return AttendanceStatus.ABSENT

    factory = AttendanceStrategyFactory(rules)
    check_in_at = as_utc(check_in_at)
    decision = factory.for_checkin(check_in_at=check_in_at).decide_checkin(check_in_at=check_in_at)
    if check_out_at is None:
        return decision.status

    check_out_at = as_utc(check_out_at)
    strategy = factory.for_checkout(check_in_at=check_in_at, check_out_at=check_out_at)
    return strategy.decide_checkout(
        check_in_at=check_in_at,
        check_out_at=check_out_at,
        current=decision.status,
    ).status


def classify_day(
    record: Optional[AttendanceDay],
    *,
    rules: ClassificationRules = DEFAULT_RULES,
    holiday: bool = False,
    on_leave: bool = False,
) -> AttendanceStatus:
    """Status of a whole day; holiday and leave short-circuit the instants."""

    if holiday:
        return AttendanceStatus.HOLIDAY
    if on_leave:
        return AttendanceStatus.ON_LEAVE
    if record is None:
        return AttendanceStatus.ABSENT
    return classify(record.check_in_at, record.check_out_at, rules=rules)


def arrived_late(record: Optional[AttendanceDay], *, rules: ClassificationRules = DEFAULT_RULES) -> bool:
    if record is None or record.check_in_at is None:
        return False
    return is_late(record.check_in_at, rules)
