from typing import Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from workshop_web.api.errors import APIError
from workshop_web.config import settings
from workshop_web.listing import ListQuery
from workshop_web.schemas.booking import BookingCreateRequest, BookingResponse, StatusUpdateRequest
from workshop_web.schemas.envelope import PageResponse
from workshop_web.schemas.service import ServiceForm, ServiceResponse
from workshop_web.schemas.user import (
    LoginData,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from workshop_web.schemas.vehicle import VehicleForm, VehicleResponse
from workshop_web.schemas.work_order import AssignMechanicRequest, WorkOrderCreateRequest, WorkOrderResponse

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


def create_http_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Build the pooled client shared by every request of the console."""
    return httpx.AsyncClient(
        base_url=settings.API_BASE_URL + "/",
        timeout=httpx.Timeout(settings.API_TIMEOUT_SECONDS),
        headers={"Accept": "application/json"},
        transport=transport,
    )


class WorkshopAPI:
    """Thin client for the workshop REST API.

    One instance is bound to one bearer token (or none before login). Every
    non-2xx answer and every transport failure surfaces as ``APIError``.
    """

    def __init__(self, http: httpx.AsyncClient, token: str | None = None):
        self._http = http
        self.token = token

    def with_token(self, token: str | None) -> "WorkshopAPI":
        return WorkshopAPI(self._http, token)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        request_id = structlog.contextvars.get_contextvars().get("request_id")
        if request_id:
            headers["X-Request-ID"] = request_id
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> dict[str, Any]:
        try:
            response = await self._http.request(
                method,
                path.lstrip("/"),
                params=params,
                json=json,
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            logger.warning("backend_unreachable", method=method, path=path, error=str(exc))
            raise APIError(None) from exc

        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if not response.is_success:
            logger.info(
                "backend_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise APIError(response.status_code, body)
        return body

    async def _page(self, path: str, model: type[ModelT], query: ListQuery) -> PageResponse[ModelT]:
        body = await self._request("GET", path, params=query.to_params())
        return PageResponse[model].model_validate(body)

    async def _lookup(self, path: str, model: type[ModelT], **filters: str) -> list[ModelT]:
        query = ListQuery(limit=settings.LOOKUP_LIMIT, filters=filters)
        return (await self._page(path, model, query)).data

    @staticmethod
    def _data(body: dict[str, Any], model: type[ModelT]) -> ModelT:
        return model.model_validate(body.get("data") or {})

    # Session

    async def login(self, email: str, password: str) -> str:
        body = await self._request(
            "POST", "/user/login", json=LoginRequest(email=email, password=password).model_dump()
        )
        return self._data(body, LoginData).token

    async def logout(self) -> None:
        await self._request("POST", "/user/logout")

    async def register(self, payload: RegisterRequest) -> dict[str, Any]:
        return await self._request("POST", "/user/register", json=payload.model_dump())

    async def forgot_password(self, email: str) -> None:
        await self._request("POST", "/forgot-password", json={"email": email})

    async def get_current_user(self) -> UserResponse:
        return self._data(await self._request("GET", "/user"), UserResponse)

    async def update_current_user(self, payload: ProfileUpdateRequest) -> UserResponse:
        body = await self._request("PUT", "/user", json=payload.model_dump(exclude_none=True))
        return self._data(body, UserResponse)

    # Users

    async def list_users(self, query: ListQuery) -> PageResponse[UserResponse]:
        return await self._page("/users", UserResponse, query)

    async def list_mechanics(self) -> list[UserResponse]:
        users = await self._lookup("/users", UserResponse, role="mechanic")
        return [user for user in users if user.role == "mechanic"]

    # Vehicles

    async def list_vehicles(self, query: ListQuery) -> PageResponse[VehicleResponse]:
        return await self._page("/vehicles", VehicleResponse, query)

    async def vehicle_options(self) -> list[VehicleResponse]:
        return await self._lookup("/vehicles", VehicleResponse)

    async def get_vehicle(self, vehicle_id: str) -> VehicleResponse:
        return self._data(await self._request("GET", f"/vehicle/{vehicle_id}"), VehicleResponse)

    async def create_vehicle(self, form: VehicleForm) -> None:
        await self._request("POST", "/vehicle", json=form.model_dump())

    async def update_vehicle(self, vehicle_id: str, form: VehicleForm) -> None:
        await self._request("PUT", f"/vehicle/{vehicle_id}", json=form.model_dump())

    async def delete_vehicle(self, vehicle_id: str) -> None:
        await self._request("DELETE", f"/vehicle/{vehicle_id}")

    # Services

    async def list_services(self, query: ListQuery) -> PageResponse[ServiceResponse]:
        return await self._page("/services", ServiceResponse, query)

    async def service_options(self) -> list[ServiceResponse]:
        return await self._lookup("/services", ServiceResponse)

    async def create_service(self, form: ServiceForm) -> None:
        await self._request("POST", "/service", json=form.model_dump())

    async def update_service(self, service_id: str, form: ServiceForm) -> None:
        await self._request("PUT", f"/service/{service_id}", json=form.model_dump())

    async def delete_service(self, service_id: str) -> None:
        await self._request("DELETE", f"/service/{service_id}")

    # Bookings

    async def list_bookings(self, query: ListQuery) -> PageResponse[BookingResponse]:
        return await self._page("/bookings", BookingResponse, query)

    async def booking_options(self) -> list[BookingResponse]:
        return await self._lookup("/bookings", BookingResponse)

    async def create_booking(self, payload: BookingCreateRequest) -> None:
        await self._request("POST", "/booking", json=payload.model_dump())

    async def update_booking_status(self, booking_id: str, status: str) -> None:
        await self._request(
            "PUT", f"/booking/{booking_id}/status", json=StatusUpdateRequest(status=status).model_dump()
        )

    # Work orders

    async def list_work_orders(self, query: ListQuery) -> PageResponse[WorkOrderResponse]:
        return await self._page("/work-order", WorkOrderResponse, query)

    async def get_work_order(self, work_order_id: str) -> WorkOrderResponse:
        return self._data(await self._request("GET", f"/work-order/{work_order_id}"), WorkOrderResponse)

    async def create_work_order(self, payload: WorkOrderCreateRequest) -> None:
        await self._request("POST", "/work-order", json=payload.model_dump())

    async def update_work_order_status(self, work_order_id: str, status: str) -> None:
        await self._request(
            "PUT", f"/work-order/{work_order_id}/status", json=StatusUpdateRequest(status=status).model_dump()
        )

    async def assign_mechanic(self, work_order_id: str, mechanic_id: str) -> None:
        await self._request(
            "PUT",
            f"/work-order/{work_order_id}/assign",
            json=AssignMechanicRequest(mechanic_id=mechanic_id).model_dump(),
        )
