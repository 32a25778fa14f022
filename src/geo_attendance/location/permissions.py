from __future__ import annotations

from typing import Awaitable, Callable

from ..core.enums import DevicePlatform, PermissionStatus
from .backend import PermissionBackend

ANDROID_FINE_LOCATION = "android.permission.ACCESS_FINE_LOCATION"
IOS_LOCATION_WHEN_IN_USE = "ios.permission.LOCATION_WHEN_IN_USE"


class AndroidPermissionBackend(PermissionBackend):
    """Fine location via the OS permission-check API."""

    def __init__(self, check: Callable[[str], Awaitable[bool]]):
        self._check = check

    async def has_location_permission(self) -> bool:
        return bool(await self._check(ANDROID_FINE_LOCATION))


class IosPermissionBackend(PermissionBackend):
    """When-in-use status query; only GRANTED counts."""

    def __init__(self, status: Callable[[str], Awaitable[str]]):
        self._status = status

    async def has_location_permission(self) -> bool:
        result = await self._status(IOS_LOCATION_WHEN_IN_USE)
        return result == PermissionStatus.GRANTED


def build_permission_backend(platform: DevicePlatform, *, android_check=None, ios_status=None) -> PermissionBackend:
    if platform == DevicePlatform.IOS:
        if ios_status is None:
            raise ValueError("ios_status query is required on iOS")
        return IosPermissionBackend(ios_status)
    if android_check is None:
        raise ValueError("android_check is required on Android")
    return AndroidPermissionBackend(android_check)
