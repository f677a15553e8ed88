import os

from config import env_list, env_optional_float

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also upsert demo admin/employee accounts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Shift policy
SHIFT_TIMEZONE = os.getenv("SHIFT_TIMEZONE", "Asia/Kolkata")
LATE_THRESHOLD = os.getenv("LATE_THRESHOLD", "09:15:00")
# Empty, "off" or "none" disables Half Day
HALF_DAY_MIN_HOURS = env_optional_float("HALF_DAY_MIN_HOURS", "7")
AUTO_CLOCK_OUT_TIME = os.getenv("AUTO_CLOCK_OUT_TIME", "23:30:00")

# Empty list disables the clock-in IP check
CLOCK_IN_ALLOWED_IPS = env_list("CLOCK_IN_ALLOWED_IPS")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE") or None

# Client library
GATEWAY_BASE_URL = os.getenv("GATEWAY_BASE_URL", "http://localhost:5000")
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "10"))
