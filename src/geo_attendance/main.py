from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv

from .config import get_settings_module
from .container import Container, PlatformServices, build_container
from .core.constants import Routes
from .core.enums import DevicePlatform

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_app(platform_services: Optional[PlatformServices] = None, **adapters) -> Container:
    """Load settings and wire the client.

    Either pass a ready `PlatformServices`, or the device adapters as keyword
    arguments: `geolocation` is required; `permissions` may be replaced by
    the raw platform query (`android_check` or `ios_status`); `settings`,
    `notifier` and `navigator` default to the logging implementations.
    """
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)
    if getattr(settings, "DEBUG", False):
        logger.debug("settings=%s api=%s", settings_module, settings.API_BASE_URL)

    if platform_services is None:
        from .location.permissions import build_permission_backend
        from .ui.presenter import LoggingNavigator, LoggingNotifier, LoggingSettingsLauncher

        platform = DevicePlatform(str(getattr(settings, "PLATFORM", "android")).lower())
        permissions = adapters.get("permissions") or build_permission_backend(
            platform,
            android_check=adapters.get("android_check"),
            ios_status=adapters.get("ios_status"),
        )
        platform_services = PlatformServices(
            geolocation=adapters["geolocation"],
            permissions=permissions,
            settings=adapters.get("settings") or LoggingSettingsLauncher(),
            notifier=adapters.get("notifier") or LoggingNotifier(),
            navigator=adapters.get("navigator") or LoggingNavigator(Routes.LOGIN),
            platform=platform,
        )

    return build_container(
        api_config={
            "base_url": settings.API_BASE_URL,
            "timeout": getattr(settings, "REQUEST_TIMEOUT_SECONDS", 15),
        },
        platform=platform_services,
        storage_path=getattr(settings, "STORAGE_PATH", ""),
        device_timezone=getattr(settings, "DEVICE_TIMEZONE", ""),
        cache_delay_ms=getattr(settings, "CACHE_DELAY_MS", 300),
    )
