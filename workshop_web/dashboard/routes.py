import asyncio
from dataclasses import dataclass, field

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from workshop_web.api.client import WorkshopAPI
from workshop_web.api.errors import APIError
from workshop_web.auth.session import AuthSession
from workshop_web.config import settings
from workshop_web.dependencies import get_current_session
from workshop_web.listing import ListQuery
from workshop_web.models.enums import BookingStatus
from workshop_web.schemas.booking import BookingResponse
from workshop_web.templating import render

logger = structlog.get_logger()
router = APIRouter()


@dataclass
class DashboardStats:
    total_bookings: int = 0
    pending_bookings: int = 0
    total_vehicles: int = 0
    total_services: int = 0
    recent_bookings: list[BookingResponse] = field(default_factory=list)


async def load_dashboard(api: WorkshopAPI) -> DashboardStats:
    """Headline numbers and the most recent bookings.

    ``pending_bookings`` only counts within the recent bookings page. Any
    failed fetch leaves every number at zero.
    """
    try:
        bookings, vehicles, services = await asyncio.gather(
            api.list_bookings(ListQuery(limit=settings.DASHBOARD_RECENT_BOOKINGS)),
            api.list_vehicles(ListQuery(limit=1)),
            api.list_services(ListQuery(limit=1)),
        )
    except APIError as exc:
        logger.warning("dashboard_fetch_failed", status_code=exc.status_code)
        return DashboardStats()

    return DashboardStats(
        total_bookings=bookings.total_data,
        pending_bookings=sum(1 for b in bookings.data if b.status == BookingStatus.PENDING.value),
        total_vehicles=vehicles.total_data,
        total_services=services.total_data,
        recent_bookings=bookings.data,
    )


@router.get("/")
async def index():
    return RedirectResponse("/dashboard", status_code=303)


@router.get("/dashboard")
async def dashboard(request: Request, session: AuthSession = Depends(get_current_session)):
    stats = await load_dashboard(session.api)
    return render(request, "dashboard.html", session, stats=stats)
