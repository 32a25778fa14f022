from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .api.connection import ApiConfig, ApiConnection
from .attendance.controller import AttendanceScreen
from .attendance.http_attendance_repository import HttpAttendanceRepository
from .attendance.model import AttendanceState
from .attendance.reconciler import AttendanceReconciler
from .attendance.service import AttendanceService
from .common.datetime_utils import resolve_timezone
from .core.constants import CACHED_FIX_DELAY_MS, DEFAULT_REQUEST_TIMEOUT_SECONDS
from .core.enums import DevicePlatform
from .location.backend import GeolocationBackend, PermissionBackend
from .location.gate import AvailabilityGate
from .location.service import LocationService
from .storage.json_file_storage import JsonFileStorage
from .storage.memory_storage import InMemoryStorage
from .storage.repository import KeyValueStorage
from .storage.session_store import SessionStore
from .ui.presenter import Navigator, Notifier, SettingsLauncher
from .users.controller import LoginScreen, ProfileScreen
from .users.http_auth_repository import HttpAuthRepository
from .users.service import AuthService, ProfileService


@dataclass(frozen=True)
class PlatformServices:
    """Device integrations supplied by the host shell."""

    geolocation: GeolocationBackend
    permissions: PermissionBackend
    settings: SettingsLauncher
    notifier: Notifier
    navigator: Navigator
    platform: DevicePlatform = DevicePlatform.ANDROID


@dataclass(frozen=True)
class Container:
    conn: ApiConnection
    storage: KeyValueStorage
    session_store: SessionStore
    platform: PlatformServices

    attendance_repo: HttpAttendanceRepository
    auth_repo: HttpAuthRepository

    auth_service: AuthService
    profile_service: ProfileService

    device_tz: Optional[tzinfo] = None
    cache_delay_ms: int = CACHED_FIX_DELAY_MS

    def login_screen(self) -> LoginScreen:
        return LoginScreen(self.auth_service, self.platform.notifier, self.platform.navigator)

    def profile_screen(self) -> ProfileScreen:
        return ProfileScreen(self.profile_service, self.auth_service)

    def attendance_screen(self) -> AttendanceScreen:
        """Fresh location cache, gate, state and orchestrator per screen lifetime."""
        p = self.platform
        location = LocationService(p.geolocation, cache_delay_ms=self.cache_delay_ms)
        gate = AvailabilityGate(
            p.permissions,
            p.geolocation,
            platform=p.platform,
            notifier=p.notifier,
            settings=p.settings,
            location=location,
        )
        state = AttendanceState()
        reconciler = AttendanceReconciler(
            self.attendance_repo,
            self.session_store,
            state,
            device_tz=self.device_tz,
            on_session_expired=self.auth_service.invalidate_session,
        )
        service = AttendanceService(
            self.attendance_repo,
            self.session_store,
            gate,
            location,
            state,
            p.notifier,
            device_tz=self.device_tz,
            on_session_expired=self.auth_service.invalidate_session,
        )
        return AttendanceScreen(
            state=state,
            reconciler=reconciler,
            service=service,
            gate=gate,
            location=location,
            session=self.session_store,
            notifier=p.notifier,
            device_tz=self.device_tz,
        )


def build_container(
    *,
    api_config: dict,
    platform: PlatformServices,
    storage_path: str = "",
    device_timezone: str = "",
    cache_delay_ms: int = CACHED_FIX_DELAY_MS,
) -> Container:
    config = ApiConfig(
        base_url=str(api_config["base_url"]),
        timeout=float(api_config.get("timeout", DEFAULT_REQUEST_TIMEOUT_SECONDS)),
    )
    conn = ApiConnection.get_instance(config)

    storage: KeyValueStorage = JsonFileStorage(storage_path) if storage_path else InMemoryStorage()
    session_store = SessionStore(storage)

    attendance_repo = HttpAttendanceRepository(conn)
    auth_repo = HttpAuthRepository(conn)

    auth_service = AuthService(
        auth_repo,
        session_store,
        platform.navigator,
        location=LocationService(platform.geolocation, cache_delay_ms=0),
    )
    profile_service = ProfileService(auth_repo, session_store, auth_service, platform.navigator)

    return Container(
        conn=conn,
        storage=storage,
        session_store=session_store,
        platform=platform,
        attendance_repo=attendance_repo,
        auth_repo=auth_repo,
        auth_service=auth_service,
        profile_service=profile_service,
        device_tz=resolve_timezone(device_timezone),
        cache_delay_ms=int(cache_delay_ms),
    )
