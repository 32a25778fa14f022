from __future__ import annotations

import asyncio
import threading

import pytest

from geo_attendance.core.enums import PositionErrorCode
from geo_attendance.core.exceptions import LocationTimeout, LocationUnavailable, PermissionRequired
from geo_attendance.location.geolocation import request_position
from geo_attendance.location.model import Position, PositionError, PositionOptions, RetryPolicy
from geo_attendance.location.service import FAST_FIX, PRECISE_FIX, WARMUP_WATCH, LocationService


def _timeout():
    return PositionError(PositionErrorCode.TIMEOUT, "Location request timed out")


def test_fresh_cached_sample_skips_the_platform(make_geolocation, ms_clock, here):
    geo = make_geolocation()
    svc = LocationService(geo, clock=ms_clock, cache_delay_ms=0)
    steps = []

    svc.start_warmup()
    geo.emit(here)
    ms_clock.advance(60_000)

    sample = asyncio.run(svc.acquire_location(progress=steps.append))

    assert (sample.latitude, sample.longitude) == (here.latitude, here.longitude)
    assert geo.requests == []
    assert steps == ["Processing location..."]


def test_cache_expires_after_two_minutes(make_geolocation, ms_clock, here):
    geo = make_geolocation(Position(1.0, 2.0, 30.0))
    svc = LocationService(geo, clock=ms_clock, cache_delay_ms=0)
    svc.start_warmup()
    geo.emit(here)
    ms_clock.advance(120_000)

    assert svc.fresh_cached() is None
    sample = asyncio.run(svc.acquire_location())

    assert (sample.latitude, sample.longitude) == (1.0, 2.0)
    assert geo.requests == [FAST_FIX]


def test_falls_back_to_precise_fix_when_fast_fix_fails(make_geolocation, ms_clock):
    geo = make_geolocation(_timeout(), Position(5.0, 6.0, 8.0))
    svc = LocationService(geo, clock=ms_clock, cache_delay_ms=0)
    steps = []

    sample = asyncio.run(svc.acquire_location(progress=steps.append))

    assert geo.requests == [FAST_FIX, PRECISE_FIX]
    assert PRECISE_FIX.enable_high_accuracy and PRECISE_FIX.maximum_age_ms == 0
    assert steps == ["Getting your location...", "Pinpointing location..."]
    assert sample.timestamp_ms == ms_clock.now
    assert svc.last_known == sample


@pytest.mark.parametrize(
    "code, expected",
    [
        (PositionErrorCode.TIMEOUT, LocationTimeout),
        (PositionErrorCode.POSITION_UNAVAILABLE, LocationUnavailable),
        (PositionErrorCode.PERMISSION_DENIED, PermissionRequired),
    ],
)
def test_precise_failure_maps_to_domain_error(make_geolocation, ms_clock, code, expected):
    geo = make_geolocation(_timeout(), PositionError(code, "failed"))
    svc = LocationService(geo, clock=ms_clock, cache_delay_ms=0)

    with pytest.raises(expected):
        asyncio.run(svc.acquire_location())


def test_retry_policy_runs_another_round(make_geolocation, ms_clock):
    geo = make_geolocation(_timeout(), _timeout(), Position(7.0, 8.0))
    svc = LocationService(geo, clock=ms_clock, cache_delay_ms=0)
    steps = []

    sample = asyncio.run(svc.acquire_location(progress=steps.append, retry=RetryPolicy(max_retries=1, backoff_ms=0)))

    assert (sample.latitude, sample.longitude) == (7.0, 8.0)
    assert len(geo.requests) == 3
    assert "Retrying... (1/1)" in steps


def test_permission_denied_is_never_retried(make_geolocation, ms_clock):
    denied = PositionError(PositionErrorCode.PERMISSION_DENIED, "denied")
    geo = make_geolocation(denied, denied, denied, denied)
    svc = LocationService(geo, clock=ms_clock, cache_delay_ms=0, retry=RetryPolicy(max_retries=2, backoff_ms=0))

    with pytest.raises(PermissionRequired):
        asyncio.run(svc.acquire_location())
    assert len(geo.requests) == 2


def test_single_fix_returns_none_on_error(make_geolocation, ms_clock):
    svc = LocationService(make_geolocation(_timeout()), clock=ms_clock)

    assert asyncio.run(svc.single_fix(FAST_FIX)) is None
    assert svc.last_known is None


def test_warmup_restart_clears_previous_watch(make_geolocation, ms_clock):
    geo = make_geolocation()
    svc = LocationService(geo, clock=ms_clock)

    svc.start_warmup()
    svc.start_warmup()

    assert geo.cleared == [1]
    assert list(geo.watches) == [2]
    assert geo.watches[2][2] == WARMUP_WATCH
    assert WARMUP_WATCH.distance_filter_m == 50


def test_warmup_errors_keep_the_watch(make_geolocation, ms_clock):
    geo = make_geolocation()
    svc = LocationService(geo, clock=ms_clock)
    svc.start_warmup()

    geo.emit_error(_timeout())

    assert svc.warming_up
    assert svc.last_known is None


def test_warmup_context_stops_watch(make_geolocation, ms_clock, here):
    geo = make_geolocation()
    svc = LocationService(geo, clock=ms_clock)

    async def run():
        async with svc.warmup():
            assert svc.warming_up
            geo.emit(here)

    asyncio.run(run())

    assert not svc.warming_up
    assert geo.watches == {}
    assert svc.last_known.latitude == here.latitude


def test_warmup_fix_from_worker_thread_lands_on_the_loop(make_geolocation, ms_clock, here):
    geo = make_geolocation()
    stamped_on = []

    def clock():
        stamped_on.append(threading.get_ident())
        return ms_clock()

    svc = LocationService(geo, clock=clock)

    async def run():
        async with svc.warmup():
            await asyncio.to_thread(geo.emit, here)
            await asyncio.sleep(0)
            return threading.get_ident()

    loop_thread = asyncio.run(run())

    assert stamped_on == [loop_thread]
    assert svc.last_known.latitude == here.latitude


class SilentGeolocation:
    def __init__(self):
        self.callbacks = []

    def get_current_position(self, on_success, on_error, options):
        self.callbacks.append((on_success, on_error))


def test_request_position_times_out_and_ignores_late_fix():
    backend = SilentGeolocation()

    async def run():
        with pytest.raises(PositionError) as err:
            await request_position(backend, PositionOptions(timeout_ms=10))
        on_success, _ = backend.callbacks[0]
        on_success(Position(1.0, 1.0))
        await asyncio.sleep(0)
        return err.value

    error = asyncio.run(run())
    assert error.code == PositionErrorCode.TIMEOUT
