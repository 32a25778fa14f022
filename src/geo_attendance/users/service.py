from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import LOGIN_FIX_TIMEOUT_MS, MIN_PASSWORD_LENGTH, Routes
from ..core.exceptions import DomainError, NetworkError, NotAuthenticated, ServerError, SessionExpired
from ..location.model import LocationSample, PositionOptions
from ..location.service import LocationService
from ..storage.session_store import SessionStore
from ..ui.presenter import Navigator
from .model import LoginResult, UserProfile
from .repository import AuthRepository

logger = logging.getLogger(__name__)

LOGIN_FIX = PositionOptions(enable_high_accuracy=True, timeout_ms=LOGIN_FIX_TIMEOUT_MS, maximum_age_ms=0)


class AuthService:
    """Use case: authenticate user (login) and keep the stored session valid."""

    def __init__(
        self,
        auth: AuthRepository,
        session: SessionStore,
        navigator: Navigator,
        location: Optional[LocationService] = None,
    ):
        self._auth = auth
        self._session = session
        self._navigator = navigator
        self._location = location

    @staticmethod
    def validate_credentials(email: str, password: str) -> Tuple[str, str]:
        email = require_email(email)
        require_non_empty(password, "Please enter your password")
        require_min_length(password, MIN_PASSWORD_LENGTH)
        return email, password

    async def _login_location(self) -> Optional[LocationSample]:
        """Location is optional for login and never blocks it."""
        if self._location is None:
            return None
        sample = await self._location.single_fix(LOGIN_FIX)
        logger.info("Location %s", "collected" if sample else "not available")
        return sample

    async def login(self, email: str, password: str) -> LoginResult:
        email, password = self.validate_credentials(email, password)
        location = await self._login_location()
        result = await self._auth.login(email, password, location)
        await self._session.save_login(result.token, result.profile)
        logger.info("User data saved to storage")
        return result

    async def restore_session(self) -> Optional[UserProfile]:
        """Validate a stored token against the profile endpoint.

        Returns the fresh profile, or None when there is no usable session.
        A rejected token clears storage; a network failure keeps it.
        """
        token = await self._session.get_token()
        if not token:
            return None
        try:
            profile = await self._auth.get_profile(token)
        except NetworkError as e:
            logger.warning("Session check failed (network): %s", e)
            return None
        except ServerError as e:
            logger.info("Session expired (%s), clearing storage", e.code)
            await self._session.clear()
            return None

        await self._session.save_profile(profile)
        return profile

    async def invalidate_session(self) -> None:
        await self._session.clear()
        self._navigator.reset(Routes.LOGIN)

    async def logout(self) -> None:
        """Best-effort server logout; local session is always cleared."""
        try:
            token = await self._session.get_token()
            if token:
                await self._auth.logout(token)
        except DomainError as e:
            logger.warning("Logout API failed, clearing local anyway: %s", e)
        finally:
            await self.invalidate_session()


class ProfileService:
    """Use case: show the signed-in user's profile."""

    def __init__(self, auth: AuthRepository, session: SessionStore, auth_service: AuthService, navigator: Navigator):
        self._auth = auth
        self._session = session
        self._auth_service = auth_service
        self._navigator = navigator

    async def load_profile(self) -> UserProfile:
        """Raises NotAuthenticated (after redirecting) when there is no session."""
        token = await self._session.get_token()
        if not token:
            self._navigator.reset(Routes.LOGIN)
            raise NotAuthenticated("No stored session")
        try:
            return await self._auth.get_profile(token)
        except SessionExpired:
            await self._auth_service.invalidate_session()
            raise
