import os

from src.attendance_engine.attendance_engine.core.constants import DEFAULT_SHIFTS

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_engine_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# Client IPs always come from the socket under test
TRUSTED_PROXY_HOPS = 0

DEFAULT_ATTENDANCE_SETTINGS = {
    "shifts": DEFAULT_SHIFTS,
    "allowEarlyCheckIn": 0,
    "timezone": "UTC",
    "allowedIPs": [],
}

DEFAULT_WORKING_DAYS = (1, 2, 3, 4, 5)
