from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from geo_attendance.core.enums import PositionErrorCode, ToastType
from geo_attendance.location.model import Position, PositionError

IST = timezone(timedelta(hours=5, minutes=30))


class ManualClock:
    """Millisecond clock driven by the test."""

    def __init__(self, now_ms: int = 1_704_067_200_000):
        self.now = now_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeGeolocation:
    """Callback-style geolocation backend answering from a queue of outcomes.

    Each `get_current_position` call consumes one outcome (a Position or a
    PositionError). When the queue is empty `default` is used; with no
    default the platform reports POSITION_UNAVAILABLE.
    """

    def __init__(self, outcomes=(), default: Optional[Position] = None):
        self.outcomes = list(outcomes)
        self.default = default
        self.requests = []
        self.watches = {}
        self.cleared = []
        self._next_watch = 0

    def get_current_position(self, on_success, on_error, options) -> None:
        self.requests.append(options)
        if self.outcomes:
            outcome = self.outcomes.pop(0)
        else:
            outcome = self.default or PositionError(PositionErrorCode.POSITION_UNAVAILABLE, "No location provider")
        if isinstance(outcome, PositionError):
            on_error(outcome)
        else:
            on_success(outcome)

    def watch_position(self, on_success, on_error, options) -> int:
        self._next_watch += 1
        self.watches[self._next_watch] = (on_success, on_error, options)
        return self._next_watch

    def clear_watch(self, watch_id: int) -> None:
        self.cleared.append(watch_id)
        self.watches.pop(watch_id, None)

    def emit(self, position: Position) -> None:
        for on_success, _, _ in list(self.watches.values()):
            on_success(position)

    def emit_error(self, error: PositionError) -> None:
        for _, on_error, _ in list(self.watches.values()):
            on_error(error)


class FakePermissions:
    def __init__(self, granted: bool = True):
        self.granted = granted
        self.calls = 0

    async def has_location_permission(self) -> bool:
        self.calls += 1
        return self.granted


class FakeNotifier:
    def __init__(self):
        self.toasts = []
        self.alerts = []
        self.prompt_visible = False

    def toast(self, message, *, type=ToastType.INFO, duration_ms=3000, on_press=None) -> None:
        self.toasts.append({"message": message, "type": type, "duration_ms": duration_ms, "on_press": on_press})

    def alert(self, title, message) -> None:
        self.alerts.append((title, message))

    def set_location_prompt(self, visible) -> None:
        self.prompt_visible = visible

    @property
    def last_toast(self):
        return self.toasts[-1] if self.toasts else None


class FakeNavigator:
    def __init__(self, route: str = "Login"):
        self.current_route = route
        self.history = []

    def navigate(self, route) -> None:
        self.history.append(("navigate", route))
        self.current_route = route

    def reset(self, route) -> None:
        self.history.append(("reset", route))
        self.current_route = route


class FakeSettingsLauncher:
    def __init__(self, intent_fails: bool = False):
        self.intent_fails = intent_fails
        self.opened = 0
        self.intents = []

    async def open_settings(self) -> None:
        self.opened += 1

    async def send_intent(self, action) -> None:
        if self.intent_fails:
            raise RuntimeError("No activity found to handle intent")
        self.intents.append(action)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 1, 4, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def ist():
    return IST


@pytest.fixture
def ms_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def navigator() -> FakeNavigator:
    return FakeNavigator()


@pytest.fixture
def settings_launcher() -> FakeSettingsLauncher:
    return FakeSettingsLauncher()


@pytest.fixture
def here() -> Position:
    return Position(latitude=12.9716, longitude=77.5946, accuracy=12.0)


@pytest.fixture
def make_geolocation():
    def _make(*outcomes, default: Optional[Position] = None) -> FakeGeolocation:
        return FakeGeolocation(outcomes, default=default)

    return _make


@pytest.fixture
def make_permissions():
    return FakePermissions
