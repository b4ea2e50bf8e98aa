import pytest

from tests.conftest import USERS
from workshop_web.api.client import WorkshopAPI
from workshop_web.auth.session import AuthSession
from workshop_web.schemas.user import ProfileUpdateRequest, RegisterRequest


@pytest.mark.asyncio
async def test_load_without_token_is_anonymous(api: WorkshopAPI, backend):
    session = AuthSession(api)
    assert await session.load() is None
    assert not session.is_authenticated
    assert not session.expired
    assert backend.requests == []


@pytest.mark.asyncio
async def test_load_fetches_current_user(api: WorkshopAPI):
    session = AuthSession(api, "cashier-token")
    user = await session.load()
    assert user.role == "cashier"
    assert session.is_authenticated


@pytest.mark.asyncio
async def test_failed_load_logs_the_session_out(api: WorkshopAPI, backend):
    session = AuthSession(api, "stale-token")
    await session.load()
    assert session.expired
    assert session.token is None
    assert session.user is None
    assert backend.calls("POST", "/user/logout")
    assert session.api.token is None


@pytest.mark.asyncio
async def test_login_stores_token_and_user(api: WorkshopAPI, backend):
    backend.on("POST", "/user/login", json={"data": {"token": "admin-token"}})
    session = AuthSession(api)
    result = await session.login("admin@workshop.test", "Secret123")
    assert result.success
    assert session.token == "admin-token"
    assert session.user.id == USERS["admin"]["id"]
    assert backend.calls("GET", "/user")[-1].headers["Authorization"] == "Bearer admin-token"


@pytest.mark.asyncio
async def test_login_failure_prefers_error_field(api: WorkshopAPI, backend):
    backend.on("POST", "/user/login", status=401, json={"error": "Invalid Credentials", "message": "Unauthorized"})
    session = AuthSession(api)
    result = await session.login("admin@workshop.test", "wrong-pass")
    assert not result.success
    assert result.error == "Invalid Credentials"
    assert session.token is None


@pytest.mark.asyncio
async def test_login_failure_fallback(api: WorkshopAPI, backend):
    backend.on("POST", "/user/login", status=500, json={})
    result = await AuthSession(api).login("admin@workshop.test", "Secret123")
    assert result.error == "Login failed"


@pytest.mark.asyncio
async def test_logout_clears_state_even_when_backend_fails(api: WorkshopAPI, backend):
    backend.on("POST", "/user/logout", status=500, json={"message": "down"})
    session = AuthSession(api, "admin-token")
    await session.load()
    await session.logout()
    assert session.token is None
    assert session.user is None
    assert not session.is_authenticated


@pytest.mark.asyncio
async def test_register_reports_backend_error(api: WorkshopAPI, backend):
    backend.on("POST", "/user/register", status=409, json={"error": "Email already registered"})
    payload = RegisterRequest(name="Ada", email="ada@workshop.test", phone="0812", password="Secret123")
    result = await AuthSession(api).register(payload)
    assert result.error == "Email already registered"


@pytest.mark.asyncio
async def test_update_profile_replaces_user(api: WorkshopAPI, backend):
    updated = dict(USERS["customer"], name="Renamed Customer")
    backend.on("PUT", "/user", json={"data": updated})
    session = AuthSession(api, "customer-token")
    await session.load()
    result = await session.update_profile(
        ProfileUpdateRequest(name="Renamed Customer", email=updated["email"], phone=updated["phone"])
    )
    assert result.success
    assert session.user.name == "Renamed Customer"


@pytest.mark.asyncio
async def test_forgot_password_failure_message(api: WorkshopAPI, backend):
    backend.on("POST", "/forgot-password", status=500, json={})
    result = await AuthSession(api).forgot_password("ada@workshop.test")
    assert result.error == "Failed to send password reset link."
