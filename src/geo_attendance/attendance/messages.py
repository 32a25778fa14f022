from __future__ import annotations

from typing import Any

from ..core.enums import AttendanceAction, ServerErrorCode
from ..core.exceptions import (
    LocationServiceOff,
    LocationError,
    ModeNotSelected,
    NetworkError,
    NotAuthenticated,
    PermissionRequired,
    ServerError,
    SessionExpired,
)

MODE_NOT_SELECTED = "Please select your work mode first"
PERMISSION_REQUIRED = "Permission Required - Tap to enable"
LOCATION_SERVICE_OFF = "Please turn on Location"
LOCATION_FAILED = "Unable to get your location. Please try again."
NETWORK_FAILED = "Unable to reach the server. Please check your internet connection."
SESSION_EXPIRED = "Your session has expired. Please login again."
NOT_AUTHENTICATED = "Not authenticated. Please login again."
GENERIC_FAILURE = "Something went wrong"


def _num(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return "?" if value is None else str(value)


def server_error_message(error: ServerError, action: AttendanceAction) -> str:
    payload = error.payload
    code = ServerErrorCode.parse(error.code)

    if code == ServerErrorCode.OUT_OF_OFFICE_RADIUS:
        return (
            f"You are {_num(payload.get('distance'))}m from the office. "
            f"Must be within {_num(payload.get('allowedRadius'))}m."
        )
    if code == ServerErrorCode.OUT_OF_WFH_RADIUS:
        return (
            f"You are {_num(payload.get('distance'))}m from your check-in location. "
            f"Must be within {_num(payload.get('allowedRadius'))}m."
        )

    label = {
        ServerErrorCode.ALREADY_CHECKED_IN: "You are already checked in today.",
        ServerErrorCode.ALREADY_CHECKED_OUT: "You have already checked out today.",
        ServerErrorCode.NOT_CHECKED_IN: "You have not checked in today.",
        ServerErrorCode.INVALID_CREDENTIALS: "Invalid email or password.",
        ServerErrorCode.ACCOUNT_INACTIVE: "Your account has been deactivated. Please contact HR.",
        ServerErrorCode.MISSING_CREDENTIALS: "Please enter email and password",
        ServerErrorCode.TOKEN_EXPIRED: SESSION_EXPIRED,
        ServerErrorCode.INVALID_TOKEN: SESSION_EXPIRED,
    }.get(code)
    if label:
        return label
    return error.message or f"Failed to {action.value}"


def error_message(error: Exception, action: AttendanceAction) -> str:
    """User-facing text for anything the orchestrator can fail with."""

    if isinstance(error, ModeNotSelected):
        return MODE_NOT_SELECTED
    if isinstance(error, PermissionRequired):
        return PERMISSION_REQUIRED
    if isinstance(error, LocationServiceOff):
        return LOCATION_SERVICE_OFF
    if isinstance(error, LocationError):
        return LOCATION_FAILED
    if isinstance(error, SessionExpired):
        return SESSION_EXPIRED
    if isinstance(error, ServerError):
        return server_error_message(error, action)
    if isinstance(error, NetworkError):
        return NETWORK_FAILED
    if isinstance(error, NotAuthenticated):
        return NOT_AUTHENTICATED
    return GENERIC_FAILURE
