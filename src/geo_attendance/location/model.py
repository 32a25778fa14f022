from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import PositionErrorCode


@dataclass(frozen=True)
class Position:
    """Raw fix reported by the platform geolocation API."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class LocationSample:
    """Device coordinates stamped with the time the fix was taken (ms epoch)."""

    latitude: float
    longitude: float
    accuracy: Optional[float]
    timestamp_ms: int

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp_ms


@dataclass(frozen=True)
class PositionOptions:
    enable_high_accuracy: bool = False
    timeout_ms: int = 10000
    maximum_age_ms: int = 0
    distance_filter_m: int = 0


class PositionError(Exception):
    """Error reported by the platform geolocation API (W3C codes)."""

    def __init__(self, code: PositionErrorCode, message: str = ""):
        super().__init__(message or code.name)
        self.code = PositionErrorCode(code)
        self.message = message or code.name


@dataclass(frozen=True)
class Availability:
    permitted: bool
    gps_on: bool

    @property
    def ok(self) -> bool:
        return self.permitted and self.gps_on


@dataclass(frozen=True)
class RetryPolicy:
    """Extra tiered-fetch rounds for transient GPS failures.

    The n-th retry waits `backoff_ms * n` before starting.
    """

    max_retries: int = 0
    backoff_ms: int = 2000
