from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional

from ..common.datetime_utils import now_ms
from ..core.constants import (
    CACHED_FIX_DELAY_MS,
    FAST_FIX_MAX_AGE_MS,
    FAST_FIX_TIMEOUT_MS,
    LOCATION_CACHE_MAX_AGE_MS,
    PRECISE_FIX_TIMEOUT_MS,
    WARMUP_DISTANCE_FILTER_M,
    WARMUP_MAX_AGE_MS,
    WARMUP_TIMEOUT_MS,
)
from ..core.enums import PositionErrorCode
from ..core.exceptions import LocationTimeout, LocationUnavailable, PermissionRequired
from .backend import GeolocationBackend
from .geolocation import request_position
from .model import LocationSample, Position, PositionError, PositionOptions, RetryPolicy

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def _on_loop(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


FAST_FIX = PositionOptions(enable_high_accuracy=False, timeout_ms=FAST_FIX_TIMEOUT_MS, maximum_age_ms=FAST_FIX_MAX_AGE_MS)
PRECISE_FIX = PositionOptions(enable_high_accuracy=True, timeout_ms=PRECISE_FIX_TIMEOUT_MS, maximum_age_ms=0)
WARMUP_WATCH = PositionOptions(
    enable_high_accuracy=False,
    timeout_ms=WARMUP_TIMEOUT_MS,
    maximum_age_ms=WARMUP_MAX_AGE_MS,
    distance_filter_m=WARMUP_DISTANCE_FILTER_M,
)


class LocationService:
    """Obtains device coordinates with a tiered timeout strategy.

    Order of attempts:
    1. cached sample younger than `cache_max_age_ms`;
    2. low accuracy fix (2 s);
    3. high accuracy fresh fix (10 s, maximum_age 0).

    The cache is fed by every successful fix and by the background warm-up
    watch. One instance lives for one attendance screen.
    """

    def __init__(
        self,
        backend: GeolocationBackend,
        *,
        clock: Callable[[], int] = now_ms,
        cache_max_age_ms: int = LOCATION_CACHE_MAX_AGE_MS,
        cache_delay_ms: int = CACHED_FIX_DELAY_MS,
        retry: RetryPolicy | None = None,
    ):
        self._backend = backend
        self._clock = clock
        self._cache_max_age_ms = int(cache_max_age_ms)
        self._cache_delay_ms = int(cache_delay_ms)
        self._retry = retry or RetryPolicy()
        self._last_known: Optional[LocationSample] = None
        self._watch_id: Optional[int] = None
        self._watch_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def last_known(self) -> Optional[LocationSample]:
        return self._last_known

    @property
    def warming_up(self) -> bool:
        return self._watch_id is not None

    def fresh_cached(self) -> Optional[LocationSample]:
        sample = self._last_known
        if sample is None:
            return None
        if sample.age_ms(self._clock()) < self._cache_max_age_ms:
            return sample
        return None

    def _remember(self, position: Position) -> LocationSample:
        sample = LocationSample(
            latitude=float(position.latitude),
            longitude=float(position.longitude),
            accuracy=position.accuracy,
            timestamp_ms=self._clock(),
        )
        self._last_known = sample
        return sample

    async def acquire_location(
        self,
        *,
        progress: Optional[ProgressCallback] = None,
        retry: Optional[RetryPolicy] = None,
    ) -> LocationSample:
        """Return a usable sample or raise LocationTimeout/LocationUnavailable.

        PermissionRequired is raised as soon as the platform reports a denied
        permission and is never retried.
        """

        policy = retry or self._retry
        attempt = 0
        while True:
            try:
                return await self._acquire_once(progress)
            except (LocationTimeout, LocationUnavailable) as e:
                if attempt >= policy.max_retries:
                    raise
                attempt += 1
                logger.info("location attempt %s failed (%s), retrying", attempt, e)
                if progress:
                    progress(f"Retrying... ({attempt}/{policy.max_retries})")
                await asyncio.sleep(policy.backoff_ms * attempt / 1000)

    async def _acquire_once(self, progress: Optional[ProgressCallback]) -> LocationSample:
        cached = self.fresh_cached()
        if cached is not None:
            if progress:
                progress("Processing location...")
            if self._cache_delay_ms > 0:
                await asyncio.sleep(self._cache_delay_ms / 1000)
            return cached

        try:
            if progress:
                progress("Getting your location...")
            position = await request_position(self._backend, FAST_FIX)
            return self._remember(position)
        except PositionError as e:
            logger.debug("fast fix failed: %s", e.message)

        if progress:
            progress("Pinpointing location...")
        try:
            position = await request_position(self._backend, PRECISE_FIX)
        except PositionError as e:
            logger.warning("precise fix failed: %s", e.message)
            if e.code == PositionErrorCode.PERMISSION_DENIED:
                raise PermissionRequired(e.message) from e
            if e.code == PositionErrorCode.TIMEOUT:
                raise LocationTimeout(e.message) from e
            raise LocationUnavailable(e.message) from e
        return self._remember(position)

    async def single_fix(self, options: PositionOptions) -> Optional[LocationSample]:
        """One fix with the given options; None when it fails."""
        try:
            position = await request_position(self._backend, options)
        except PositionError as e:
            logger.warning("Location error: %s", e.message)
            return None
        return self._remember(position)

    # ---- warm-up watch ----

    def start_warmup(self) -> None:
        """(Re)start the background low-cost watch that keeps the cache warm."""
        self.stop_warmup()
        try:
            self._watch_loop = asyncio.get_running_loop()
        except RuntimeError:
            self._watch_loop = None
        self._watch_id = self._backend.watch_position(self._on_warmup_fix, self._on_warmup_error, WARMUP_WATCH)

    def stop_warmup(self) -> None:
        if self._watch_id is not None:
            self._backend.clear_watch(self._watch_id)
            self._watch_id = None
            self._watch_loop = None

    def _on_warmup_fix(self, position: Position) -> None:
        """Samples from another thread are applied on the loop that started the watch."""
        loop = self._watch_loop
        if loop is None or loop.is_closed() or _on_loop(loop):
            self._remember(position)
        else:
            loop.call_soon_threadsafe(self._remember, position)

    def _on_warmup_error(self, error: PositionError) -> None:
        logger.info("GPS warmup: %s", getattr(error, "message", error))

    @asynccontextmanager
    async def warmup(self) -> AsyncIterator["LocationService"]:
        self.start_warmup()
        try:
            yield self
        finally:
            self.stop_warmup()
