from __future__ import annotations

from typing import Any, Mapping, Optional


class DomainError(Exception):
    """Base exception for client-side failures surfaced to the user."""


class ValidationError(DomainError):
    """Raised when local input is invalid or a local precondition fails."""


class ModeNotSelected(ValidationError):
    """Raised when check-in is attempted before a work mode was chosen."""


class NotAuthenticated(DomainError):
    """Raised when no auth token is stored."""


class LocationError(DomainError):
    """Base for location permission/availability/acquisition failures."""


class PermissionRequired(LocationError):
    """Location permission is not granted. Never retried automatically."""


class LocationServiceOff(LocationError):
    """Device location service (GPS) is switched off."""


class LocationTimeout(LocationError):
    """No fix arrived before the last tier's timeout."""


class LocationUnavailable(LocationError):
    """The platform could not produce a position."""


class NetworkError(DomainError):
    """Raised when the request fails in transport or the body is not JSON."""


class ServerError(DomainError):
    """Raised for `success: false` responses from the attendance server."""

    def __init__(self, code: Optional[str], message: Optional[str] = None, payload: Optional[Mapping[str, Any]] = None):
        super().__init__(message or code or "Request failed")
        self.code = code
        self.message = message
        self.payload = dict(payload or {})


class AuthenticationError(ServerError):
    """Raised when login credentials are rejected or the account is inactive."""


class SessionExpired(ServerError):
    """Raised when the server reports TOKEN_EXPIRED or INVALID_TOKEN."""
