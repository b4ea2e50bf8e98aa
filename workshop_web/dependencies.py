import httpx
import structlog
from fastapi import Depends, Request

from workshop_web.api.client import WorkshopAPI
from workshop_web.auth.session import AuthSession
from workshop_web.config import settings
from workshop_web.utils.log_mask import mask_token

logger = structlog.get_logger()


class LoginRequired(Exception):
    """Raised by pages that need a signed-in user; answered with a redirect to /login."""

    def __init__(self, clear_cookie: bool = False):
        self.clear_cookie = clear_cookie
        super().__init__("login required")


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_api(http: httpx.AsyncClient = Depends(get_http_client)) -> WorkshopAPI:
    return WorkshopAPI(http)


async def get_session(request: Request, api: WorkshopAPI = Depends(get_api)) -> AuthSession:
    """Session of the calling browser, loaded from its token cookie."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    session = AuthSession(api, token)
    await session.load()
    if session.expired:
        logger.info("session_expired", token=mask_token(token))
    return session


async def get_current_session(session: AuthSession = Depends(get_session)) -> AuthSession:
    """Like ``get_session`` but sends anonymous browsers to the login page."""
    if not session.is_authenticated:
        raise LoginRequired(clear_cookie=session.expired)
    return session
