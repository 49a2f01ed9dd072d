"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 15
MAX_PAGE_SIZE = 200
DEFAULT_HISTORY_LIMIT = 30

DEFAULT_TIMEZONE = "UTC"

# 0=Sunday .. 6=Saturday
DEFAULT_WORKING_DAYS = (1, 2, 3, 4, 5)

DEFAULT_SHIFTS = {
    "Morning": {
        "startHour": 9,
        "endHour": 17,
        "lateThresholdMinutes": 15,
        "earlyLeaveThresholdMinutes": 30,
        "noCheckoutLateMinutes": 60,
        "minHoursForPresent": 6,
    },
    "Evening": {
        "startHour": 14,
        "endHour": 22,
        "lateThresholdMinutes": 15,
        "earlyLeaveThresholdMinutes": 30,
        "noCheckoutLateMinutes": 60,
        "minHoursForPresent": 6,
    },
}
