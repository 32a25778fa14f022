"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TIME_SENTINEL = "--:--"

# Location acquisition (milliseconds)
LOCATION_CACHE_MAX_AGE_MS = 2 * 60 * 1000
CACHED_FIX_DELAY_MS = 300
FAST_FIX_TIMEOUT_MS = 2000
FAST_FIX_MAX_AGE_MS = 30000
PRECISE_FIX_TIMEOUT_MS = 10000
GPS_CHECK_TIMEOUT_MS = 3000
GPS_CHECK_MAX_AGE_MS = 10000
WARMUP_TIMEOUT_MS = 10000
WARMUP_MAX_AGE_MS = 60000
WARMUP_DISTANCE_FILTER_M = 50
LOGIN_FIX_TIMEOUT_MS = 5000

# Screen timers (seconds)
CLOCK_TICK_SECONDS = 1
LIVE_HOURS_TICK_SECONDS = 60
FOREGROUND_RECHECK_DELAY_SECONDS = 0.5

DEFAULT_REQUEST_TIMEOUT_SECONDS = 15
MIN_PASSWORD_LENGTH = 6

ANDROID_LOCATION_SETTINGS_INTENT = "android.settings.LOCATION_SOURCE_SETTINGS"


class StorageKeys:
    AUTH_TOKEN = "authToken"
    USER_ID = "userId"
    USER_NAME = "userName"
    USER_EMAIL = "userEmail"
    USER_ROLE = "userRole"
    EMPLOYEE_ID = "employeeId"
    DEPARTMENT = "department"

    SESSION = (AUTH_TOKEN, USER_ID, USER_NAME, USER_EMAIL, USER_ROLE, EMPLOYEE_ID, DEPARTMENT)


class Endpoints:
    LOGIN = "/api/auth/login"
    LOGOUT = "/api/auth/logout"
    PROFILE = "/api/auth/profile"
    CHECK_IN = "/api/attendance/checkin"
    CHECK_OUT = "/api/attendance/checkout"
    TODAY = "/api/attendance/today"


class Routes:
    LOGIN = "Login"
    TAB = "Tab"
    ATTENDANCE = "Attendence"
    PROFILE = "Profile"
