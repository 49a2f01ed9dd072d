import os

from src.attendance_engine.attendance_engine.core.constants import DEFAULT_SHIFTS, DEFAULT_TIMEZONE

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_engine"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# Reverse proxies in front of the app; 0 means client IPs come from the socket
TRUSTED_PROXY_HOPS = int(os.getenv("TRUSTED_PROXY_HOPS", "0"))

DEFAULT_ATTENDANCE_SETTINGS = {
    "shifts": DEFAULT_SHIFTS,
    "allowEarlyCheckIn": int(os.getenv("ALLOW_EARLY_CHECKIN", "30")),
    "timezone": os.getenv("APP_TIMEZONE", DEFAULT_TIMEZONE),
    "allowedIPs": [ip for ip in os.getenv("ALLOWED_IPS", "").split(",") if ip.strip()],
}

DEFAULT_WORKING_DAYS = (1, 2, 3, 4, 5)
