from __future__ import annotations

from enum import Enum, IntEnum


class WorkMode(str, Enum):
    """Declared work location for the day, chosen once before check-in."""

    WFH = "WFH"
    OFFICE = "Office"

    @property
    def label(self) -> str:
        return "Work from Home" if self is WorkMode.WFH else "In Office"


class AttendanceAction(str, Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class SubmitPhase(str, Enum):
    """States of one check-in/out submission."""

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    ACQUIRING_LOCATION = "ACQUIRING_LOCATION"
    SUBMITTING = "SUBMITTING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class PositionErrorCode(IntEnum):
    """W3C geolocation error codes reported by the platform."""

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


class DevicePlatform(str, Enum):
    ANDROID = "android"
    IOS = "ios"


class PermissionStatus(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    BLOCKED = "blocked"
    LIMITED = "limited"
    UNAVAILABLE = "unavailable"


class ToastType(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
    INFO = "info"


class AppState(str, Enum):
    ACTIVE = "active"
    BACKGROUND = "background"
    INACTIVE = "inactive"


class ServerErrorCode(str, Enum):
    """Business error codes returned in `code` of `success: false` payloads."""

    OUT_OF_OFFICE_RADIUS = "OUT_OF_OFFICE_RADIUS"
    OUT_OF_WFH_RADIUS = "OUT_OF_WFH_RADIUS"
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    ALREADY_CHECKED_OUT = "ALREADY_CHECKED_OUT"
    NOT_CHECKED_IN = "NOT_CHECKED_IN"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"

    @classmethod
    def parse(cls, value) -> "ServerErrorCode | None":
        try:
            return cls(value)
        except ValueError:
            return None


SESSION_EXPIRED_CODES = frozenset({ServerErrorCode.TOKEN_EXPIRED, ServerErrorCode.INVALID_TOKEN})
AUTH_FAILURE_CODES = frozenset(
    {
        ServerErrorCode.MISSING_CREDENTIALS,
        ServerErrorCode.INVALID_CREDENTIALS,
        ServerErrorCode.ACCOUNT_INACTIVE,
    }
)
