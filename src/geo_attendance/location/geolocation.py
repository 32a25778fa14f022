from __future__ import annotations

import asyncio

from ..core.enums import PositionErrorCode
from .backend import GeolocationBackend
from .model import Position, PositionError, PositionOptions


async def request_position(backend: GeolocationBackend, options: PositionOptions) -> Position:
    """Await one fix from a callback-style backend.

    The wait is bounded by `options.timeout_ms` regardless of whether the
    platform honours its own timeout; callbacks arriving after that are
    dropped. Raises PositionError (TIMEOUT on expiry).
    """

    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def _settle(outcome) -> None:
        if future.done():
            return
        if isinstance(outcome, BaseException):
            future.set_exception(outcome)
        else:
            future.set_result(outcome)

    def _deliver(outcome) -> None:
        if loop.is_closed():
            return
        loop.call_soon_threadsafe(_settle, outcome)

    backend.get_current_position(_deliver, _deliver, options)

    try:
        return await asyncio.wait_for(future, timeout=options.timeout_ms / 1000)
    except asyncio.TimeoutError as e:
        raise PositionError(PositionErrorCode.TIMEOUT, "Timeout") from e
