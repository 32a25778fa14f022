from __future__ import annotations

from typing import Callable, Protocol

from .model import Position, PositionError, PositionOptions

SuccessCallback = Callable[[Position], None]
ErrorCallback = Callable[[PositionError], None]


class GeolocationBackend(Protocol):
    """Callback-style platform geolocation API.

    Callbacks may fire on any thread. `geolocation.request_position` and the
    `LocationService` warm-up watch hand them back to the event loop.
    """

    def get_current_position(self, on_success: SuccessCallback, on_error: ErrorCallback, options: PositionOptions) -> None:
        raise NotImplementedError

    def watch_position(self, on_success: SuccessCallback, on_error: ErrorCallback, options: PositionOptions) -> int:
        raise NotImplementedError

    def clear_watch(self, watch_id: int) -> None:
        raise NotImplementedError


class PermissionBackend(Protocol):
    async def has_location_permission(self) -> bool:
        raise NotImplementedError
