from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_wall_clock(value: str) -> time:
    """Parse an ``HH:MM[:SS]`` wall-clock string.

    Raises ValueError for anything else, including out of range components.
    """

    parts = str(value).strip().split(":")
    if len(parts) not in (2, 3) or not all(p.strip().isdigit() for p in parts):
        raise ValueError(f"Invalid wall-clock time: {value!r}")
    numbers = [int(p) for p in parts]
    if len(numbers) == 2:
        numbers.append(0)
    return time(hour=numbers[0], minute=numbers[1], second=numbers[2])


def format_wall_clock(value: time) -> str:
    return value.strftime("%H:%M:%S")


def now_utc() -> datetime:
    """Current instant as an aware UTC datetime.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def as_utc(instant: datetime) -> datetime:
    """Normalise an instant to aware UTC. Naive values are taken as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def utc_instant(work_date: date, wall_clock: time) -> datetime:
    """Instant for a UTC wall-clock value on a UTC calendar date."""
    return datetime.combine(work_date, wall_clock.replace(tzinfo=None), tzinfo=timezone.utc)


def anchor_from_utc_wall_clock(wall_clock: time, *, now: datetime) -> datetime:
    """Rebuild today's check-in instant from a UTC wall-clock value.

    The gateway keys the day by the UTC calendar date, so the date part comes
    from ``now`` expressed in UTC, whatever zone ``now`` carries. The
    wall-clock is always read as UTC, never as the local zone.
    """

    today_utc = as_utc(now).date()
    return utc_instant(today_utc, wall_clock)


def get_zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def to_local(instant: datetime, zone: tzinfo) -> datetime:
    return as_utc(instant).astimezone(zone)


def format_hms(total_seconds: float) -> str:
    """Format seconds as ``HH:MM:SS``. Negative input clamps to zero."""
    seconds = max(int(total_seconds), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_hours_minutes(duration: Optional[timedelta]) -> str:
    """Format a worked duration the way history tables show it: ``7h 05m``."""
    if duration is None:
        return "0h 00m"
    minutes = max(int(duration.total_seconds() // 60), 0)
    return f"{minutes // 60}h {minutes % 60:02d}m"


def format_12h(instant: datetime, zone: tzinfo) -> str:
    """``9:05 AM`` style label in the given zone."""
    local = to_local(instant, zone)
    hour12 = local.hour % 12 or 12
    meridiem = "PM" if local.hour >= 12 else "AM"
    return f"{hour12}:{local.minute:02d} {meridiem}"


def month_range(month: int, year: int) -> tuple[date, date]:
    """First and last day of a month."""
    if not 1 <= int(month) <= 12:
        raise ValueError(f"Invalid month: {month!r}")
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


def iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
