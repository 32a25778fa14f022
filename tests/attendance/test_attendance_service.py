from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from geo_attendance.attendance.model import AttendanceResult, AttendanceState, AttendanceStats
from geo_attendance.attendance.service import AttendanceService
from geo_attendance.core.enums import AttendanceAction, PositionErrorCode, SubmitPhase, ToastType, WorkMode
from geo_attendance.core.exceptions import ServerError, SessionExpired, ValidationError
from geo_attendance.location.gate import AvailabilityGate
from geo_attendance.location.model import PositionError
from geo_attendance.location.service import LocationService
from geo_attendance.storage.memory_storage import InMemoryStorage
from geo_attendance.storage.session_store import SessionStore


def _utc(hour, minute=0):
    return datetime(2024, 1, 1, hour, minute, tzinfo=timezone.utc)


class InMemoryAttendanceGateway:
    def __init__(self):
        self.check_ins = []
        self.check_outs = []
        self.result = AttendanceResult()
        self.error = None
        self.release = None

    async def _respond(self):
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.result

    async def check_in(self, token, *, latitude, longitude, work_mode):
        self.check_ins.append((token, latitude, longitude, work_mode))
        return await self._respond()

    async def check_out(self, token, *, latitude, longitude):
        self.check_outs.append((token, latitude, longitude))
        return await self._respond()


class Harness:
    def __init__(self, geo, permissions, notifier, ist, fixed_now, *, token="tok-1", state=None):
        self.gateway = InMemoryAttendanceGateway()
        self.geo = geo
        self.notifier = notifier
        self.expired = []
        self.state = state or AttendanceState()
        self.location = LocationService(geo, cache_delay_ms=0)
        self.gate = AvailabilityGate(permissions, geo, notifier=notifier, location=self.location)
        session = SessionStore(InMemoryStorage({"authToken": token} if token else {}))

        async def on_expired():
            self.expired.append(True)

        self.service = AttendanceService(
            self.gateway,
            session,
            self.gate,
            self.location,
            self.state,
            notifier,
            device_tz=ist,
            on_session_expired=on_expired,
            clock=lambda: fixed_now,
        )

    def submit(self):
        return asyncio.run(self.service.submit())


@pytest.fixture
def harness(make_geolocation, make_permissions, notifier, ist, fixed_now, here):
    def _make(*outcomes, granted=True, **kwargs):
        geo = make_geolocation(*outcomes, default=here)
        return Harness(geo, make_permissions(granted), notifier, ist, fixed_now, **kwargs)

    return _make


def test_check_in_success(harness, here):
    h = harness()
    h.state.select_mode(WorkMode.OFFICE)
    h.gateway.result = AttendanceResult(check_in_instant=_utc(3, 30))

    outcome = h.submit()

    assert outcome.success and outcome.action == AttendanceAction.CHECK_IN
    assert h.gateway.check_ins == [("tok-1", here.latitude, here.longitude, WorkMode.OFFICE)]
    assert h.state.checked_in is True
    assert h.state.stats.first_check_in == "09:00 AM"
    assert h.state.stats.total_hours == "--:--"
    assert h.state.phase == SubmitPhase.IDLE
    assert h.notifier.last_toast["message"] == "Checked in at 09:30 AM"
    assert h.notifier.last_toast["type"] == ToastType.SUCCESS


def test_check_in_without_mode_makes_no_calls(harness):
    h = harness()

    outcome = h.submit()

    assert outcome.success is False
    assert outcome.message == "Please select your work mode first"
    assert h.gateway.check_ins == []
    assert h.geo.requests == []
    assert h.notifier.last_toast["type"] == ToastType.WARNING


def test_second_press_while_in_flight_is_ignored(harness):
    h = harness()
    h.state.select_mode(WorkMode.WFH)
    h.gateway.result = AttendanceResult(check_in_instant=_utc(3, 30))

    async def run():
        h.gateway.release = asyncio.Event()
        first = asyncio.ensure_future(h.service.submit())
        for _ in range(100):
            if h.gateway.check_ins:
                break
            await asyncio.sleep(0)
        assert h.service.in_flight
        assert h.state.busy
        second = await h.service.submit()
        h.gateway.release.set()
        return await first, second

    first, second = asyncio.run(run())

    assert second is None
    assert first.success
    assert len(h.gateway.check_ins) == 1
    assert not h.service.in_flight


def test_out_of_radius_leaves_state_unchanged(harness):
    h = harness()
    h.state.select_mode(WorkMode.OFFICE)
    h.gateway.error = ServerError(
        "OUT_OF_OFFICE_RADIUS",
        "Out of range",
        {"success": False, "code": "OUT_OF_OFFICE_RADIUS", "distance": 120, "allowedRadius": 50},
    )

    outcome = h.submit()

    assert outcome.success is False
    assert outcome.message == "You are 120m from the office. Must be within 50m."
    assert h.state.checked_in is False
    assert h.state.stats == AttendanceStats()
    assert h.notifier.last_toast["type"] == ToastType.DANGER
    assert h.notifier.last_toast["duration_ms"] == 4000


def test_permission_denied_toast_opens_app_settings(harness):
    h = harness(granted=False)
    h.state.select_mode(WorkMode.OFFICE)

    outcome = h.submit()

    assert outcome.message == "Permission Required - Tap to enable"
    assert h.notifier.last_toast["on_press"] == h.gate.open_app_settings
    assert h.gateway.check_ins == []


def test_gps_off_toast_opens_location_settings(harness):
    h = harness(PositionError(PositionErrorCode.POSITION_UNAVAILABLE, "provider disabled"))
    h.state.select_mode(WorkMode.OFFICE)

    outcome = h.submit()

    assert outcome.message == "Please turn on Location"
    assert h.notifier.last_toast["on_press"] == h.gate.open_location_settings
    assert h.gateway.check_ins == []


def test_expired_session_is_invalidated(harness):
    h = harness()
    h.state.select_mode(WorkMode.OFFICE)
    h.gateway.error = SessionExpired("TOKEN_EXPIRED", "jwt expired")

    outcome = h.submit()

    assert outcome.message == "Your session has expired. Please login again."
    assert h.expired == [True]


def test_missing_token_is_treated_as_logged_out(harness):
    h = harness(token=None)
    h.state.select_mode(WorkMode.OFFICE)

    outcome = h.submit()

    assert outcome.message == "Not authenticated. Please login again."
    assert h.expired == [True]


def test_check_out_keeps_previous_check_in(harness, ist):
    state = AttendanceState(
        stats=AttendanceStats.from_instants(_utc(3, 30), None, ist),
        checked_in=True,
        work_mode=WorkMode.OFFICE,
        day_started=True,
    )
    h = harness(state=state)
    h.gateway.result = AttendanceResult(check_out_instant=_utc(12))

    outcome = h.submit()

    assert outcome.action == AttendanceAction.CHECK_OUT
    assert h.gateway.check_outs and not h.gateway.check_ins
    assert state.checked_in is False
    assert state.stats.first_check_in == "09:00 AM"
    assert state.stats.last_check_out == "05:30 PM"
    assert state.stats.total_hours == "08:30"
    assert h.notifier.last_toast["message"] == "Checked out at 09:30 AM"
    with pytest.raises(ValidationError):
        state.select_mode(WorkMode.WFH)


def test_check_in_without_instant_uses_device_clock(harness):
    h = harness()
    h.state.select_mode(WorkMode.OFFICE)

    h.submit()

    assert h.state.stats.first_check_in == "09:30 AM"


def test_unexpected_error_returns_to_idle(harness):
    h = harness()
    h.state.select_mode(WorkMode.OFFICE)
    h.gateway.error = RuntimeError("boom")

    outcome = h.submit()

    assert outcome.message == "Something went wrong"
    assert h.state.phase == SubmitPhase.IDLE
    assert not h.service.in_flight
