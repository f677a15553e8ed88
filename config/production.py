import os

from config import env_list, env_optional_float

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SHIFT_TIMEZONE = os.getenv("SHIFT_TIMEZONE", "Asia/Kolkata")
LATE_THRESHOLD = os.getenv("LATE_THRESHOLD", "09:15:00")
# Empty, "off" or "none" disables Half Day
HALF_DAY_MIN_HOURS = env_optional_float("HALF_DAY_MIN_HOURS", "7")
AUTO_CLOCK_OUT_TIME = os.getenv("AUTO_CLOCK_OUT_TIME", "23:30:00")

CLOCK_IN_ALLOWED_IPS = env_list("CLOCK_IN_ALLOWED_IPS")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None

GATEWAY_BASE_URL = os.getenv("GATEWAY_BASE_URL", "http://localhost:5000")
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "10"))
