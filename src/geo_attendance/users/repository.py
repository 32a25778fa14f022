from __future__ import annotations

from typing import Optional, Protocol

from ..location.model import LocationSample
from .model import LoginResult, UserProfile


class AuthRepository(Protocol):
    """Remote auth endpoints.

    Note (DIP): services depend on this interface, not on the HTTP client.
    """

    async def login(self, email: str, password: str, location: Optional[LocationSample] = None) -> LoginResult:
        raise NotImplementedError

    async def get_profile(self, token: str) -> UserProfile:
        raise NotImplementedError

    async def logout(self, token: str) -> None:
        raise NotImplementedError
