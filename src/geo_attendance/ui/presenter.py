from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from ..core.enums import ToastType

logger = logging.getLogger(__name__)

PressHandler = Callable[[], object]


class Notifier(Protocol):
    """Toasts, blocking alerts and the location-settings prompt."""

    def toast(
        self,
        message: str,
        *,
        type: ToastType = ToastType.INFO,
        duration_ms: int = 3000,
        on_press: Optional[PressHandler] = None,
    ) -> None:
        raise NotImplementedError

    def alert(self, title: str, message: str) -> None:
        raise NotImplementedError

    def set_location_prompt(self, visible: bool) -> None:
        raise NotImplementedError


class Navigator(Protocol):
    def navigate(self, route: str) -> None:
        raise NotImplementedError

    def reset(self, route: str) -> None:
        """Replace the whole navigation stack with `route`."""
        raise NotImplementedError


class SettingsLauncher(Protocol):
    async def open_settings(self) -> None:
        raise NotImplementedError

    async def send_intent(self, action: str) -> None:
        """Open a platform deep link; raises when the platform refuses it."""
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Headless notifier: everything goes to the log."""

    def __init__(self):
        self.prompt_visible = False

    def toast(self, message, *, type=ToastType.INFO, duration_ms=3000, on_press=None) -> None:
        level = logging.WARNING if type in (ToastType.DANGER, ToastType.WARNING) else logging.INFO
        logger.log(level, "[toast:%s] %s", ToastType(type).value, message)

    def alert(self, title: str, message: str) -> None:
        logger.warning("[alert] %s: %s", title, message)

    def set_location_prompt(self, visible: bool) -> None:
        self.prompt_visible = bool(visible)
        logger.info("[prompt] location settings prompt %s", "shown" if visible else "hidden")


class LoggingNavigator(Navigator):
    def __init__(self, initial_route: str):
        self.current_route = initial_route

    def navigate(self, route: str) -> None:
        logger.info("[nav] %s -> %s", self.current_route, route)
        self.current_route = route

    def reset(self, route: str) -> None:
        logger.info("[nav] reset to %s", route)
        self.current_route = route


class LoggingSettingsLauncher(SettingsLauncher):
    async def open_settings(self) -> None:
        logger.info("[settings] open app settings")

    async def send_intent(self, action: str) -> None:
        logger.info("[settings] intent %s", action)
