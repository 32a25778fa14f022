from __future__ import annotations

import logging

from ..api.client import api_call_async, ensure_success
from ..api.connection import ApiConnection
from ..core.constants import Endpoints
from ..core.enums import WorkMode
from ..core.exceptions import NetworkError
from .model import AttendanceResult, TodayAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class HttpAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    async def get_today(self, token: str) -> TodayAttendance:
        data = ensure_success(await api_call_async(self._conn, Endpoints.TODAY, "GET", token=token))
        logger.debug("Today attendance: %s", data)
        try:
            return TodayAttendance.from_payload(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise NetworkError("Invalid attendance payload") from e

    async def check_in(self, token: str, *, latitude: float, longitude: float, work_mode: WorkMode) -> AttendanceResult:
        body = {"latitude": latitude, "longitude": longitude, "workMode": WorkMode(work_mode).value}
        return await self._post(Endpoints.CHECK_IN, body, token)

    async def check_out(self, token: str, *, latitude: float, longitude: float) -> AttendanceResult:
        body = {"latitude": latitude, "longitude": longitude}
        return await self._post(Endpoints.CHECK_OUT, body, token)

    async def _post(self, endpoint: str, body: dict, token: str) -> AttendanceResult:
        logger.debug("request to %s: %s", endpoint, body)
        data = await api_call_async(self._conn, endpoint, "POST", body, token)
        logger.debug("response from %s: %s", endpoint, data)
        ensure_success(data)
        try:
            return AttendanceResult.from_payload(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise NetworkError("Invalid attendance payload") from e
