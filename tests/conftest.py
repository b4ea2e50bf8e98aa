import json
import os
from collections.abc import AsyncGenerator, Callable

os.environ.setdefault("APP_ENV", "development")
os.environ.setdefault("API_BASE_URL", "http://backend.test/api")
os.environ.setdefault("API_HEALTHCHECK_URL", "http://backend.test/healthcheck")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from workshop_web.api.client import WorkshopAPI, create_http_client
from workshop_web.dependencies import get_http_client
from workshop_web.main import app

USERS = {
    "admin": {
        "id": "u-admin",
        "name": "Ada Admin",
        "email": "admin@workshop.test",
        "phone": "081200000001",
        "role": "admin",
        "created_at": "2024-05-01T10:00:00+07:00",
    },
    "cashier": {
        "id": "u-cashier",
        "name": "Cash Ier",
        "email": "cashier@workshop.test",
        "phone": "081200000002",
        "role": "cashier",
        "created_at": "2024-05-01T10:00:00+07:00",
    },
    "mechanic": {
        "id": "u-mechanic",
        "name": "Mek Anik",
        "email": "mechanic@workshop.test",
        "phone": "081200000003",
        "role": "mechanic",
        "created_at": "2024-05-01T10:00:00+07:00",
    },
    "customer": {
        "id": "u-customer",
        "name": "Cus Tomer",
        "email": "customer@workshop.test",
        "phone": "081200000004",
        "role": "customer",
        "created_at": "2024-05-01T10:00:00+07:00",
    },
}

EMPTY_PAGE = {"data": [], "total_pages": 1, "total_data": 0}

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """In-process stand-in for the workshop REST API.

    ``GET /user`` answers from the bearer token (``<role>-token``). Other
    routes answer what ``on`` registered for them; unregistered reads return
    an empty page and unregistered writes a bare success message.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Handler | tuple[int, dict]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, json: dict | None = None, handler: Handler | None = None):
        self.routes[(method, path)] = handler or (status, json if json is not None else {})

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and _api_path(r) == path]

    def last_json(self, method: str, path: str) -> dict:
        return json.loads(self.calls(method, path)[-1].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = _api_path(request)
        route = self.routes.get((request.method, path))
        if callable(route):
            return route(request)
        if route is not None:
            status, body = route
            return httpx.Response(status, json=body)

        if request.method == "GET" and path == "/user":
            user = _user_for(request)
            if user is None:
                return httpx.Response(401, json={"message": "Unauthorized"})
            return httpx.Response(200, json={"data": user})
        if path == "/healthcheck":
            return httpx.Response(200, json={"status": "ok"})
        if request.method == "GET":
            return httpx.Response(200, json=EMPTY_PAGE)
        return httpx.Response(200, json={"message": "success"})


def _api_path(request: httpx.Request) -> str:
    path = request.url.path
    return path[len("/api"):] if path.startswith("/api/") else path


def _user_for(request: httpx.Request) -> dict | None:
    header = request.headers.get("Authorization", "")
    token = header.removeprefix("Bearer ")
    role = token.removesuffix("-token")
    return USERS.get(role) if token.endswith("-token") else None


def session_cookie(role: str) -> dict[str, str]:
    return {"Cookie": f"token={role}-token"}


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def api_http(backend: FakeBackend) -> AsyncGenerator[httpx.AsyncClient, None]:
    http = create_http_client(transport=httpx.MockTransport(backend))
    yield http
    await http.aclose()


@pytest.fixture
def api(api_http: httpx.AsyncClient) -> WorkshopAPI:
    return WorkshopAPI(api_http)


@pytest_asyncio.fixture
async def client(api_http: httpx.AsyncClient) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_http_client] = lambda: api_http

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_client(client: AsyncClient) -> AsyncClient:
    client.headers.update(session_cookie("admin"))
    return client


@pytest_asyncio.fixture
async def cashier_client(client: AsyncClient) -> AsyncClient:
    client.headers.update(session_cookie("cashier"))
    return client


@pytest_asyncio.fixture
async def mechanic_client(client: AsyncClient) -> AsyncClient:
    client.headers.update(session_cookie("mechanic"))
    return client


@pytest_asyncio.fixture
async def customer_client(client: AsyncClient) -> AsyncClient:
    client.headers.update(session_cookie("customer"))
    return client


def page(items: list[dict], total_pages: int = 1, total_data: int | None = None) -> dict:
    return {
        "data": items,
        "total_pages": total_pages,
        "total_data": len(items) if total_data is None else total_data,
    }


def vehicle_json(**overrides) -> dict:
    vehicle = {
        "id": "v-1",
        "user_id": "u-customer",
        "license_plate": "B 1234 XYZ",
        "brand": "Honda",
        "model": "Civic",
        "year": 2020,
        "color": "Red",
        "created_at": "2024-05-02T09:00:00+07:00",
    }
    vehicle.update(overrides)
    return vehicle


def service_json(**overrides) -> dict:
    service = {
        "id": "s-1",
        "name": "Oil Change",
        "description": "Engine oil and filter",
        "price": 250.0,
        "created_at": "2024-05-02T09:00:00+07:00",
    }
    service.update(overrides)
    return service


def booking_json(**overrides) -> dict:
    booking = {
        "id": "b-0001-aaaa-bbbb",
        "user_id": "u-customer",
        "vehicle_id": "v-1",
        "notes": "Strange noise",
        "status": "pending",
        "booking_date": "2024-06-01T09:00:00+07:00",
        "created_at": "2024-05-30T12:00:00+07:00",
        "services": [service_json()],
        "Vehicle": vehicle_json(),
    }
    booking.update(overrides)
    return booking


def work_order_json(**overrides) -> dict:
    work_order = {
        "id": "wo-0001-cccc",
        "booking_id": "b-0001-aaaa-bbbb",
        "customer_id": "u-customer",
        "vehicle_id": "v-1",
        "mechanic_id": "",
        "status": "pending",
        "notes": "",
        "created_at": "2024-06-01T10:00:00+07:00",
        "services": [
            {"id": "wos-1", "service_id": "s-1", "service_name": "Oil Change", "price": 250.0, "quantity": 1},
            {"id": "wos-2", "service_id": "s-2", "service_name": "Tire Rotation", "price": 100.0, "quantity": 2},
        ],
        "parts": [{"id": "wop-1", "sparepart_id": "p-1", "price": 75.5, "quantity": 2}],
    }
    work_order.update(overrides)
    return work_order
