"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_LATE_THRESHOLD = time(9, 15, 0)
DEFAULT_HALF_DAY_MIN_HOURS = 7.0
DEFAULT_SHIFT_TIMEZONE = "Asia/Kolkata"
DEFAULT_AUTO_CLOCK_OUT_TIME = time(23, 30, 0)

TICK_INTERVAL_SECONDS = 1.0
IDLE_DURATION_DISPLAY = "00:00:00"

DEFAULT_GATEWAY_TIMEOUT_SECONDS = 10.0

AUTO_ABSENT_REMARK = "System Auto-marked"
AUTO_CLOCK_OUT_REMARK = "Auto Clock-out"

SUNDAY_NAME = "Sunday"
SUNDAY_WEEKDAY = 6
