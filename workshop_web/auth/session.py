from dataclasses import dataclass

import structlog

from workshop_web.api.client import WorkshopAPI
from workshop_web.api.errors import APIError
from workshop_web.schemas.user import ProfileUpdateRequest, RegisterRequest, UserResponse
from workshop_web.utils.log_mask import mask_email

logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthResult:
    success: bool
    error: str | None = None


class AuthSession:
    """Current user and bearer token of one browser.

    Built from the token cookie on every request: ``load`` fetches the user
    (a failure logs the browser out), ``logout`` clears both fields. Routes
    read ``token`` afterwards to decide what the cookie should hold.
    """

    def __init__(self, api: WorkshopAPI, token: str | None = None):
        self._api = api.with_token(token)
        self.token = token
        self.user: UserResponse | None = None
        self.expired = False

    @property
    def api(self) -> WorkshopAPI:
        return self._api

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    async def load(self) -> UserResponse | None:
        if not self.token:
            return None
        try:
            self.user = await self._api.get_current_user()
        except APIError as exc:
            logger.warning("session_fetch_failed", status_code=exc.status_code)
            await self.logout()
            self.expired = True
        return self.user

    async def login(self, email: str, password: str) -> AuthResult:
        try:
            token = await self._api.login(email, password)
        except APIError as exc:
            logger.info("login_failed", email=mask_email(email), status_code=exc.status_code)
            return AuthResult(success=False, error=exc.user_message("Login failed", field="error"))

        self.token = token
        self._api = self._api.with_token(token)
        self.expired = False
        await self.load()
        if self.user is None:
            return AuthResult(success=False, error="Login failed")
        logger.info("login_succeeded", email=mask_email(email), role=self.user.role)
        return AuthResult(success=True)

    async def register(self, payload: RegisterRequest) -> AuthResult:
        try:
            await self._api.register(payload)
        except APIError as exc:
            return AuthResult(success=False, error=exc.user_message("Registration failed", field="error"))
        logger.info("registration_succeeded", email=mask_email(payload.email))
        return AuthResult(success=True)

    async def logout(self) -> None:
        """Tell the backend, then forget the token whatever it answered."""
        try:
            if self.token:
                await self._api.logout()
        except APIError as exc:
            logger.warning("logout_failed", status_code=exc.status_code)
        finally:
            self.token = None
            self.user = None
            self._api = self._api.with_token(None)

    async def update_profile(self, payload: ProfileUpdateRequest) -> AuthResult:
        try:
            self.user = await self._api.update_current_user(payload)
        except APIError as exc:
            return AuthResult(success=False, error=exc.user_message("Profile update failed", field="error"))
        logger.info("profile_updated", password_changed=payload.password is not None)
        return AuthResult(success=True)

    async def forgot_password(self, email: str) -> AuthResult:
        try:
            await self._api.forgot_password(email)
        except APIError as exc:
            return AuthResult(success=False, error=exc.user_message("Failed to send password reset link."))
        return AuthResult(success=True)
