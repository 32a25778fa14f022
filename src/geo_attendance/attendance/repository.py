from __future__ import annotations

from typing import Protocol

from ..core.enums import WorkMode
from .model import AttendanceResult, TodayAttendance


class AttendanceRepository(Protocol):
    """Remote attendance endpoints.

    Implementations raise NetworkError for transport/parse failures and a
    ServerError subclass for `success: false` payloads.
    """

    async def get_today(self, token: str) -> TodayAttendance:
        raise NotImplementedError

    async def check_in(self, token: str, *, latitude: float, longitude: float, work_mode: WorkMode) -> AttendanceResult:
        raise NotImplementedError

    async def check_out(self, token: str, *, latitude: float, longitude: float) -> AttendanceResult:
        raise NotImplementedError
