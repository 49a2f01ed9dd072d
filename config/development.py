import os

from src.attendance_engine.attendance_engine.core.constants import DEFAULT_SHIFTS, DEFAULT_TIMEZONE

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_engine"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Reverse proxies in front of the app; 0 means client IPs come from the socket
TRUSTED_PROXY_HOPS = int(os.getenv("TRUSTED_PROXY_HOPS", "0"))

# Used only when no settings are stored yet
DEFAULT_ATTENDANCE_SETTINGS = {
    "shifts": DEFAULT_SHIFTS,
    "allowEarlyCheckIn": int(os.getenv("ALLOW_EARLY_CHECKIN", "30")),
    "timezone": os.getenv("APP_TIMEZONE", DEFAULT_TIMEZONE),
    "allowedIPs": [],
}

# 0=Sunday .. 6=Saturday
DEFAULT_WORKING_DAYS = (1, 2, 3, 4, 5)
