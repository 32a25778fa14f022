from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Awaitable, Callable, Optional, Tuple

from ..core.exceptions import DomainError, SessionExpired
from ..storage.session_store import SessionStore
from .model import AttendanceState, AttendanceStats, TodayAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

SessionExpiredHandler = Callable[[], Awaitable[None]]


class AttendanceReconciler:
    """Merges the server's view of today's attendance into screen state.

    The server is authoritative for whether the user is checked in; display
    strings are rebuilt locally from its raw ISO instants.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        session: SessionStore,
        state: AttendanceState,
        *,
        device_tz: Optional[tzinfo] = None,
        on_session_expired: Optional[SessionExpiredHandler] = None,
    ):
        self._attendance = attendance
        self._session = session
        self._state = state
        self._device_tz = device_tz
        self._on_session_expired = on_session_expired

    async def reconcile_today(self) -> Tuple[AttendanceStats, bool]:
        """Fetch today's attendance and apply it.

        Never raises for network/server failures: they are logged and the
        current state is kept. A response is dropped when a submission was
        applied while it was in flight.
        """
        token = await self._session.get_token()
        if not token:
            return self._state.stats, self._state.checked_in

        epoch = self._state.epoch
        try:
            today = await self._attendance.get_today(token)
        except SessionExpired as e:
            logger.warning("Load today attendance: session expired (%s)", e.code)
            if self._on_session_expired is not None:
                await self._on_session_expired()
            return self._state.stats, self._state.checked_in
        except DomainError as e:
            logger.error("Load today attendance error: %s", e)
            return self._state.stats, self._state.checked_in

        if self._state.epoch != epoch:
            logger.info("Today attendance superseded by a submission, discarding")
            return self._state.stats, self._state.checked_in

        self.apply(today)
        return self._state.stats, self._state.checked_in

    def apply(self, today: TodayAttendance) -> None:
        state = self._state
        if state.busy:
            logger.debug("submission in progress, skipping reconcile")
            return

        state.checked_in = today.has_checked_in and not today.has_checked_out
        state.day_started = today.has_checked_in
        if today.work_mode is not None:
            state.work_mode = today.work_mode

        if today.has_record:
            stats = AttendanceStats.from_instants(today.check_in_instant, today.check_out_instant, self._device_tz)
        elif not today.has_checked_in:
            stats = AttendanceStats()
        else:
            return

        # Unchanged figures keep the current object.
        if stats != state.stats:
            state.stats = stats
