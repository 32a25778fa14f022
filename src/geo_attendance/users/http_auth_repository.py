from __future__ import annotations

import logging
from typing import Optional

from ..api.client import api_call_async, ensure_success
from ..api.connection import ApiConnection
from ..core.constants import Endpoints
from ..core.exceptions import NetworkError
from ..location.model import LocationSample
from .model import LoginResult, LoginWarnings, UserProfile
from .repository import AuthRepository

logger = logging.getLogger(__name__)


class HttpAuthRepository(AuthRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    async def login(self, email: str, password: str, location: Optional[LocationSample] = None) -> LoginResult:
        body = {
            "email": email,
            "password": password,
            "location": (
                {"latitude": location.latitude, "longitude": location.longitude, "accuracy": location.accuracy}
                if location
                else None
            ),
        }
        data = await api_call_async(self._conn, Endpoints.LOGIN, "POST", body)
        logger.debug("login response: success=%s code=%s", data.get("success"), data.get("code"))
        ensure_success(data)

        user = data.get("data") or {}
        token = user.get("token")
        if not token:
            raise NetworkError("Login response carried no token")
        return LoginResult(
            token=str(token),
            profile=UserProfile.from_payload(user),
            warnings=LoginWarnings.from_payload(data.get("warnings")),
        )

    async def get_profile(self, token: str) -> UserProfile:
        data = ensure_success(await api_call_async(self._conn, Endpoints.PROFILE, "GET", token=token))
        user = data.get("data")
        if not isinstance(user, dict):
            raise NetworkError("Profile response carried no data")
        return UserProfile.from_payload(user)

    async def logout(self, token: str) -> None:
        await api_call_async(self._conn, Endpoints.LOGOUT, "POST", {}, token)
