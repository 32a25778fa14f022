from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..common.timers import call_later
from ..core.constants import (
    ANDROID_LOCATION_SETTINGS_INTENT,
    FOREGROUND_RECHECK_DELAY_SECONDS,
    GPS_CHECK_MAX_AGE_MS,
    GPS_CHECK_TIMEOUT_MS,
)
from ..core.enums import AppState, DevicePlatform, PositionErrorCode
from ..core.exceptions import LocationServiceOff, PermissionRequired
from ..ui.presenter import Notifier, SettingsLauncher
from .backend import GeolocationBackend, PermissionBackend
from .geolocation import request_position
from .model import Availability, PositionError, PositionOptions
from .service import LocationService

logger = logging.getLogger(__name__)

GPS_CHECK = PositionOptions(enable_high_accuracy=False, timeout_ms=GPS_CHECK_TIMEOUT_MS, maximum_age_ms=GPS_CHECK_MAX_AGE_MS)


class AvailabilityGate:
    """Checks location permission and GPS availability before attendance actions.

    GPS-on detection is a heuristic: a short low-accuracy fix that reports
    POSITION_UNAVAILABLE is read as "GPS off"; any other outcome, including
    a timeout, is read as "GPS on". It is not a reliable detector.
    """

    def __init__(
        self,
        permissions: PermissionBackend,
        geolocation: GeolocationBackend,
        *,
        platform: DevicePlatform = DevicePlatform.ANDROID,
        notifier: Optional[Notifier] = None,
        settings: Optional[SettingsLauncher] = None,
        location: Optional[LocationService] = None,
    ):
        self._permissions = permissions
        self._geolocation = geolocation
        self._platform = DevicePlatform(platform)
        self._notifier = notifier
        self._settings = settings
        self._location = location
        self._pending: Optional[asyncio.Task] = None
        self.prompt_visible = False

    async def has_permission(self) -> bool:
        return bool(await self._permissions.has_location_permission())

    async def is_gps_enabled(self) -> bool:
        try:
            await request_position(self._geolocation, GPS_CHECK)
        except PositionError as e:
            return e.code != PositionErrorCode.POSITION_UNAVAILABLE
        return True

    async def check_availability(self) -> Availability:
        permitted = await self.has_permission()
        gps_on = await self.is_gps_enabled()
        return Availability(permitted=permitted, gps_on=gps_on)

    async def validate_or_raise(self) -> None:
        if not await self.has_permission():
            raise PermissionRequired("PERMISSION_REQUIRED")
        if not await self.is_gps_enabled():
            raise LocationServiceOff("GPS_OFF")

    async def refresh(self) -> Optional[Availability]:
        """Re-run both checks and toggle the settings prompt.

        On success the warm-up watch is (re)started. Failures of the checks
        themselves are logged; the previous prompt state is kept.
        """
        try:
            availability = await self.check_availability()
        except Exception:
            logger.exception("GPS check error")
            return None

        self._set_prompt(not availability.ok)
        if availability.ok and self._location is not None:
            self._location.start_warmup()
        return availability

    def on_app_state_change(self, state: str) -> Optional[asyncio.Task]:
        """Permission/GPS can change outside the app: recheck on foreground."""
        if AppState(state) != AppState.ACTIVE:
            return None
        self.cancel_pending()
        self._pending = call_later(FOREGROUND_RECHECK_DELAY_SECONDS, self.refresh)
        return self._pending

    def cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _set_prompt(self, visible: bool) -> None:
        self.prompt_visible = visible
        if self._notifier is not None:
            self._notifier.set_location_prompt(visible)

    async def open_location_settings(self) -> None:
        """Android: location-source deep link, generic settings as fallback."""
        if self._settings is None:
            return
        if self._platform == DevicePlatform.ANDROID:
            try:
                await self._settings.send_intent(ANDROID_LOCATION_SETTINGS_INTENT)
                return
            except Exception as e:
                logger.info("location settings intent refused (%s), opening settings", e)
        await self._settings.open_settings()

    async def open_app_settings(self) -> None:
        if self._settings is not None:
            await self._settings.open_settings()

    async def enable_location(self) -> None:
        """Handler of the prompt's "enable" button."""
        await self.open_location_settings()
        self._set_prompt(False)
