import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "office_attendance_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

SHIFT_TIMEZONE = "UTC"
LATE_THRESHOLD = "09:15:00"
HALF_DAY_MIN_HOURS = 7.0
AUTO_CLOCK_OUT_TIME = "23:30:00"

CLOCK_IN_ALLOWED_IPS: list[str] = []

LOG_LEVEL = "WARNING"
LOG_FILE = None

GATEWAY_BASE_URL = "http://gateway.test"
GATEWAY_TIMEOUT_SECONDS = 2.0
