from __future__ import annotations

from typing import Optional

from ..core.constants import StorageKeys
from ..users.model import UserProfile
from .repository import KeyValueStorage


class SessionStore:
    """Session values persisted under the fixed storage keys."""

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    async def get_token(self) -> Optional[str]:
        token = await self._storage.get_item(StorageKeys.AUTH_TOKEN)
        return token or None

    async def get_user_name(self, default: str = "User") -> str:
        name = await self._storage.get_item(StorageKeys.USER_NAME)
        return name or default

    async def save_login(self, token: str, profile: UserProfile) -> None:
        await self._storage.multi_set(
            [
                (StorageKeys.AUTH_TOKEN, token),
                (StorageKeys.USER_ID, profile.user_id),
                (StorageKeys.USER_NAME, profile.name),
                (StorageKeys.USER_EMAIL, profile.email),
                (StorageKeys.USER_ROLE, profile.role),
                (StorageKeys.EMPLOYEE_ID, profile.employee_id),
                (StorageKeys.DEPARTMENT, profile.department),
            ]
        )

    async def save_profile(self, profile: UserProfile) -> None:
        """Refresh cached profile fields; the token is left as is."""
        await self._storage.multi_set(
            [
                (StorageKeys.USER_NAME, profile.name),
                (StorageKeys.USER_EMAIL, profile.email),
                (StorageKeys.USER_ROLE, profile.role),
                (StorageKeys.EMPLOYEE_ID, profile.employee_id),
                (StorageKeys.DEPARTMENT, profile.department),
            ]
        )

    async def clear(self) -> None:
        await self._storage.multi_remove(list(StorageKeys.SESSION))
