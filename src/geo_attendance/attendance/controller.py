from __future__ import annotations

import asyncio
import logging
from datetime import datetime, tzinfo
from typing import Callable, Optional

from ..common.datetime_utils import format_date, greeting_message, now_utc, to_device_time
from ..common.timers import IntervalTask
from ..core.constants import CLOCK_TICK_SECONDS, LIVE_HOURS_TICK_SECONDS, TIME_SENTINEL
from ..core.enums import WorkMode
from ..core.exceptions import ValidationError
from ..location.gate import AvailabilityGate
from ..location.service import LocationService
from ..storage.session_store import SessionStore
from ..ui.presenter import Notifier
from .model import AttendanceState, AttendanceStats, SubmitOutcome
from .reconciler import AttendanceReconciler
from .service import AttendanceService

logger = logging.getLogger(__name__)


class AttendanceScreen:
    """Attendance screen controller.

    Owns everything scoped to the screen's lifetime: the warm-up watch, the
    1 s clock and the 60 s live-hours timer. `unmount()` releases all of them.
    """

    def __init__(
        self,
        *,
        state: AttendanceState,
        reconciler: AttendanceReconciler,
        service: AttendanceService,
        gate: AvailabilityGate,
        location: LocationService,
        session: SessionStore,
        notifier: Notifier,
        device_tz: Optional[tzinfo] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.state = state
        self._reconciler = reconciler
        self._service = service
        self._gate = gate
        self._location = location
        self._session = session
        self._notifier = notifier
        self._device_tz = device_tz
        self._clock = clock

        self.user_name = "User"
        self.current_time = clock()
        self.live_total_hours = TIME_SENTINEL
        self.is_fetching_today = True
        self.show_dropdown = False
        self.mounted = False

        self._clock_timer = IntervalTask(CLOCK_TICK_SECONDS, self._tick_clock, name="attendance-clock")
        self._live_timer = IntervalTask(LIVE_HOURS_TICK_SECONDS, self._tick_live_hours, name="attendance-live-hours")

    # ---- lifecycle ----

    async def mount(self) -> None:
        self.mounted = True
        self._clock_timer.start()
        await self.focus()
        await self.load_today()
        await self._gate.refresh()
        if not self._location.warming_up:
            self._location.start_warmup()

    async def focus(self) -> None:
        try:
            self.user_name = await self._session.get_user_name()
        except Exception:
            logger.exception("Error loading user data")

    async def load_today(self) -> None:
        self.is_fetching_today = True
        try:
            await self._reconciler.reconcile_today()
        finally:
            self.is_fetching_today = False
        self._sync_live_timer()

    def unmount(self) -> None:
        self.mounted = False
        self._clock_timer.cancel()
        self._live_timer.cancel()
        self._gate.cancel_pending()
        self._location.stop_warmup()

    def on_app_state_change(self, app_state: str) -> Optional[asyncio.Task]:
        if not self.mounted:
            return None
        return self._gate.on_app_state_change(app_state)

    # ---- user actions ----

    def toggle_dropdown(self) -> None:
        if self.state.busy or self.state.mode_locked:
            self.show_dropdown = False
            return
        self.show_dropdown = not self.show_dropdown

    def select_mode(self, mode: WorkMode | str) -> Optional[WorkMode]:
        if self.state.busy:
            self.show_dropdown = False
            return None
        try:
            selected = self.state.select_mode(mode)
        except ValidationError as e:
            logger.info("mode change rejected: %s", e)
            return None
        finally:
            self.show_dropdown = False
        return selected

    async def press(self) -> Optional[SubmitOutcome]:
        """Ignored until today's record has loaded."""
        if self.is_fetching_today:
            return None
        outcome = await self._service.submit()
        self._sync_live_timer()
        return outcome

    async def enable_location(self) -> None:
        await self._gate.enable_location()

    # ---- display ----

    @property
    def stats(self) -> AttendanceStats:
        return self.state.stats

    @property
    def total_hours(self) -> str:
        if self.state.checked_in and self.state.stats.is_open:
            return self.live_total_hours
        return self.state.stats.total_hours

    @property
    def action_label(self) -> str:
        return "Check Out" if self.state.checked_in else "Check In"

    @property
    def is_loading(self) -> bool:
        return self.state.busy

    @property
    def loading_message(self) -> str:
        return self.state.loading_message

    @property
    def greeting(self) -> str:
        return greeting_message(to_device_time(self.current_time, self._device_tz))

    @property
    def date_text(self) -> str:
        return format_date(to_device_time(self.current_time, self._device_tz))

    @property
    def time_text(self) -> str:
        return to_device_time(self.current_time, self._device_tz).strftime("%I:%M:%S %p")

    @property
    def mode_label(self) -> Optional[str]:
        return self.state.work_mode.label if self.state.work_mode else None

    # ---- timers ----

    def _tick_clock(self) -> None:
        self.current_time = self._clock()

    def _tick_live_hours(self) -> None:
        self.live_total_hours = self.state.stats.with_live_total(self._clock()).total_hours

    def _sync_live_timer(self) -> None:
        if self.mounted and self.state.checked_in and self.state.stats.is_open:
            self._tick_live_hours()
            self._live_timer.start()
        else:
            self._live_timer.cancel()
            self.live_total_hours = TIME_SENTINEL
