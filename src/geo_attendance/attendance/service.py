from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Awaitable, Callable, Optional

from ..common.datetime_utils import format_time, now_utc
from ..core.enums import AttendanceAction, SubmitPhase, ToastType
from ..core.exceptions import (
    DomainError,
    LocationServiceOff,
    ModeNotSelected,
    NotAuthenticated,
    PermissionRequired,
    SessionExpired,
)
from ..location.gate import AvailabilityGate
from ..location.model import LocationSample
from ..location.service import LocationService
from ..storage.session_store import SessionStore
from ..ui.presenter import Notifier
from .messages import error_message
from .model import AttendanceResult, AttendanceState, AttendanceStats, SubmitOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

SessionExpiredHandler = Callable[[], Awaitable[None]]


class AttendanceService:
    """Use case: check in / check out from the attendance screen.

    One `submit()` runs Validating -> AcquiringLocation -> Submitting and ends
    in Success or Failed before returning to Idle. A second call while one is
    in flight is a no-op.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        session: SessionStore,
        gate: AvailabilityGate,
        location: LocationService,
        state: AttendanceState,
        notifier: Notifier,
        *,
        device_tz: Optional[tzinfo] = None,
        on_session_expired: Optional[SessionExpiredHandler] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._session = session
        self._gate = gate
        self._location = location
        self._state = state
        self._notifier = notifier
        self._device_tz = device_tz
        self._on_session_expired = on_session_expired
        self._clock = clock
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _set_loading(self, message: str) -> None:
        self._state.loading_message = message

    async def submit(self) -> Optional[SubmitOutcome]:
        if self._in_flight:
            logger.debug("submit ignored: already in flight")
            return None
        self._in_flight = True

        state = self._state
        action = state.next_action
        try:
            state.phase = SubmitPhase.VALIDATING
            self._set_loading("Processing...")
            if action == AttendanceAction.CHECK_IN and state.work_mode is None:
                raise ModeNotSelected("MODE_NOT_SELECTED")
            await self._gate.validate_or_raise()

            state.phase = SubmitPhase.ACQUIRING_LOCATION
            sample = await self._location.acquire_location(progress=self._set_loading)

            state.phase = SubmitPhase.SUBMITTING
            self._set_loading("Saving attendance...")
            result = await self._send(action, sample)

            self._apply(action, result)
            state.phase = SubmitPhase.SUCCESS
            message = self._success_message(action)
            self._notifier.toast(message, type=ToastType.SUCCESS)
            return SubmitOutcome(action=action, success=True, message=message)

        except DomainError as e:
            state.phase = SubmitPhase.FAILED
            logger.warning("Attendance %s failed: %r", action.value, e)
            message = error_message(e, action)
            await self._present_failure(e, message)
            return SubmitOutcome(action=action, success=False, message=message)

        except Exception:
            state.phase = SubmitPhase.FAILED
            logger.exception("Attendance %s failed", action.value)
            message = error_message(Exception(), action)
            self._notifier.toast(message, type=ToastType.DANGER, duration_ms=4000)
            return SubmitOutcome(action=action, success=False, message=message)

        finally:
            state.phase = SubmitPhase.IDLE
            self._set_loading("Processing...")
            self._in_flight = False

    async def _send(self, action: AttendanceAction, sample: LocationSample) -> AttendanceResult:
        token = await self._session.get_token()
        if not token:
            raise NotAuthenticated("Not authenticated. Please login again.")

        if action == AttendanceAction.CHECK_IN:
            return await self._attendance.check_in(
                token,
                latitude=sample.latitude,
                longitude=sample.longitude,
                work_mode=self._state.work_mode,
            )
        return await self._attendance.check_out(token, latitude=sample.latitude, longitude=sample.longitude)

    def _apply(self, action: AttendanceAction, result: AttendanceResult) -> None:
        """Update stats from the response's raw instants and flip the flag."""

        state = self._state
        previous = state.stats
        state.epoch += 1
        if action == AttendanceAction.CHECK_IN:
            check_in = result.check_in_instant
            if check_in is None:
                logger.warning("check-in response carried no checkInTime, using device clock")
                check_in = self._clock()
            check_out = result.check_out_instant
            state.stats = AttendanceStats.from_instants(check_in, check_out, self._device_tz)
            state.checked_in = True
            state.day_started = True
        else:
            check_in = result.check_in_instant or previous.check_in_instant
            check_out = result.check_out_instant
            if check_out is None:
                logger.warning("check-out response carried no checkOutTime, using device clock")
                check_out = self._clock()
            state.stats = AttendanceStats.from_instants(check_in, check_out, self._device_tz)
            state.checked_in = False

    def _success_message(self, action: AttendanceAction) -> str:
        stamp = format_time(self._clock(), self._device_tz)
        if action == AttendanceAction.CHECK_IN:
            return f"Checked in at {stamp}"
        return f"Checked out at {stamp}"

    async def _present_failure(self, error: DomainError, message: str) -> None:
        if isinstance(error, ModeNotSelected):
            self._notifier.toast(message, type=ToastType.WARNING)
        elif isinstance(error, PermissionRequired):
            self._notifier.toast(message, type=ToastType.DANGER, duration_ms=4000, on_press=self._gate.open_app_settings)
        elif isinstance(error, LocationServiceOff):
            self._notifier.toast(message, type=ToastType.DANGER, duration_ms=4000, on_press=self._gate.open_location_settings)
        elif isinstance(error, (SessionExpired, NotAuthenticated)):
            self._notifier.toast(message, type=ToastType.DANGER, duration_ms=4000)
            if self._on_session_expired is not None:
                await self._on_session_expired()
        else:
            self._notifier.toast(message, type=ToastType.DANGER, duration_ms=4000)
