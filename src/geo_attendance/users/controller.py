from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import Routes
from ..core.enums import ServerErrorCode, ToastType
from ..core.exceptions import (
    DomainError,
    NetworkError,
    NotAuthenticated,
    ServerError,
    SessionExpired,
    ValidationError,
)
from ..ui.presenter import Navigator, Notifier
from .model import LoginResult, UserProfile
from .service import AuthService, ProfileService

logger = logging.getLogger(__name__)


class LoginScreen:
    def __init__(self, auth_service: AuthService, notifier: Notifier, navigator: Navigator):
        self._auth = auth_service
        self._notifier = notifier
        self._navigator = navigator
        self.is_checking_auth = True
        self.is_loading = False
        self.loading_message = "Logging in..."

    async def mount(self) -> None:
        """Skip the form when a stored token is still valid."""
        try:
            profile = await self._auth.restore_session()
            if profile is not None:
                logger.info("Session valid, auto navigating")
                self._navigator.reset(Routes.TAB)
        finally:
            self.is_checking_auth = False

    async def login(self, email: str, password: str) -> Optional[LoginResult]:
        if self.is_loading:
            return None
        self.is_loading = True
        try:
            result = await self._auth.login(email, password)
        except ValidationError as e:
            self._notifier.toast(str(e), type=ToastType.WARNING)
            return None
        except ServerError as e:
            self._show_login_error(e)
            return None
        except NetworkError as e:
            logger.error("Login error: %s", e)
            self._notifier.toast("Login failed. Please check your internet connection.", type=ToastType.DANGER, duration_ms=4000)
            return None
        finally:
            self.is_loading = False
            self.loading_message = "Logging in..."

        self.loading_message = "Login successful!"
        if result.warnings.new_device:
            self._notifier.alert(
                "New Device Detected",
                "This device has been registered. If this wasn't you, contact support immediately.",
            )
        if result.warnings.suspicious_location:
            self._notifier.alert("Unusual Location", result.warnings.message or "Unusual login location detected.")
        self._notifier.toast(f"Welcome back, {result.profile.name}!", type=ToastType.SUCCESS)
        self._navigator.navigate(Routes.TAB)
        return result

    def _show_login_error(self, error: ServerError) -> None:
        code = ServerErrorCode.parse(error.code)
        if code == ServerErrorCode.ACCOUNT_INACTIVE:
            self._notifier.alert("Account Deactivated", "Your account has been deactivated. Please contact HR.")
        elif code == ServerErrorCode.MISSING_CREDENTIALS:
            self._notifier.toast("Please enter email and password", type=ToastType.WARNING)
        elif code == ServerErrorCode.INVALID_CREDENTIALS:
            self._notifier.toast("Invalid email or password.", type=ToastType.DANGER)
        else:
            self._notifier.toast(error.message or "Login failed. Please try again.", type=ToastType.DANGER)


class ProfileScreen:
    def __init__(self, profile_service: ProfileService, auth_service: AuthService):
        self._profiles = profile_service
        self._auth = auth_service
        self.profile: Optional[UserProfile] = None
        self.is_loading = True
        self.is_logging_out = False
        self.show_logout_modal = False

    async def mount(self) -> None:
        self.is_loading = True
        try:
            self.profile = await self._profiles.load_profile()
        except (NotAuthenticated, SessionExpired):
            self.profile = None
        except DomainError as e:
            logger.error("Load profile error: %s", e)
        finally:
            self.is_loading = False

    def request_logout(self) -> None:
        self.show_logout_modal = True

    def cancel_logout(self) -> None:
        self.show_logout_modal = False

    async def confirm_logout(self) -> None:
        self.is_logging_out = True
        try:
            await self._auth.logout()
        finally:
            self.is_logging_out = False
            self.show_logout_modal = False
