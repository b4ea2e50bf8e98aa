from datetime import timedelta, timezone

import structlog
from fastapi import APIRouter, Depends, Form, Query, Request
from pydantic import ValidationError

from workshop_web.api.errors import APIError
from workshop_web.auth.permissions import booking_capabilities
from workshop_web.auth.session import AuthSession
from workshop_web.bookings.window import (
    browser_timezone,
    clock_label,
    initial_booking_date,
    parse_form_datetime,
    parse_js_offset,
    selectable_slots,
    validate_booking_window,
)
from workshop_web.config import settings
from workshop_web.dependencies import get_current_session
from workshop_web.flash import flash_message, redirect_with_flash
from workshop_web.listing import ListQuery, PageView
from workshop_web.models.enums import BookingStatus
from workshop_web.schemas.booking import BookingCreateRequest
from workshop_web.templating import render

logger = structlog.get_logger()
router = APIRouter()

FORM_DATETIME_FORMAT = "%Y-%m-%dT%H:%M"
# Set by console.js on every page load
TZ_OFFSET_COOKIE = "tz_offset"


def _list_query(page: int | None, search: str | None, status: str | None) -> ListQuery:
    return ListQuery.from_request(page=page, search=search, status=status)


def _browser_offset(request: Request, submitted: str = "") -> int | None:
    """Offset posted with the form, else the one console.js left in its cookie."""
    offset = parse_js_offset(submitted)
    if offset is None:
        offset = parse_js_offset(request.cookies.get(TZ_OFFSET_COOKIE))
    return offset


def _empty_form(tz: timezone | None) -> dict:
    start = initial_booking_date(tz)
    return {
        "vehicle_id": "",
        "booking_date": start.strftime(FORM_DATETIME_FORMAT),
        "notes": "",
        "service_ids": [],
    }


def _slot_options(tz: timezone | None) -> list[str]:
    start = initial_booking_date(tz)
    days = (start.date(), start.date() + timedelta(days=1))
    return [
        slot.strftime(FORM_DATETIME_FORMAT)
        for day in days
        for slot in selectable_slots(day, start.tzinfo)
    ]


async def _render_bookings(
    request: Request,
    session: AuthSession,
    query: ListQuery,
    *,
    offset: int | None = None,
    form: dict | None = None,
    form_open: bool = False,
    error: str = "",
    success: str = "",
):
    """Fetch the requested page (plus form lookups) and render the screen."""
    capabilities = booking_capabilities(session.user)
    api = session.api
    tz = browser_timezone(offset)

    page = PageView(items=[], query=query)
    try:
        result = await api.list_bookings(query)
        page = PageView(items=result.data, query=query, total_pages=result.total_pages, total_data=result.total_data)
    except APIError as exc:
        error = error or exc.user_message("Failed to fetch bookings.")

    vehicles, services = [], []
    if capabilities.can_create:
        try:
            vehicles = await api.vehicle_options()
        except APIError as exc:
            error = error or exc.user_message("Failed to fetch vehicles.")
        try:
            services = await api.service_options()
        except APIError as exc:
            error = error or exc.user_message("Failed to fetch services.")

    return render(
        request,
        "bookings.html",
        session,
        page=page,
        caps=capabilities,
        vehicles=vehicles,
        services=services,
        form=form or _empty_form(tz),
        form_open=form_open,
        prefill_offset="" if tz is None else offset,
        lead_minutes=settings.BOOKING_MINIMUM_ADVANCE_MINUTES,
        opening_label=clock_label(settings.BOOKING_OPENING_HOUR),
        closing_label=clock_label(settings.BOOKING_CLOSING_HOUR),
        slot_options=_slot_options(tz),
        statuses=[status.value for status in BookingStatus],
        error=error,
        success=success,
    )


@router.get("")
async def list_bookings(
    request: Request,
    page: int | None = Query(None),
    search: str | None = Query(None),
    status: str | None = Query(None),
    flash: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    return await _render_bookings(
        request,
        session,
        _list_query(page, search, status),
        offset=_browser_offset(request),
        success=flash_message(flash),
    )


@router.post("")
async def create_booking(
    request: Request,
    vehicle_id: str = Form(""),
    booking_date: str = Form(""),
    tz_offset: str = Form(""),
    notes: str = Form(""),
    service_ids: list[str] = Form([]),
    session: AuthSession = Depends(get_current_session),
):
    query = ListQuery()
    offset = _browser_offset(request, tz_offset)
    form = {"vehicle_id": vehicle_id, "booking_date": booking_date, "notes": notes, "service_ids": service_ids}

    moment = parse_form_datetime(booking_date, offset)
    check = validate_booking_window(moment, service_ids)
    if not check.ok:
        return await _render_bookings(
            request, session, query, offset=offset, form=form, form_open=True, error=check.error
        )

    try:
        payload = BookingCreateRequest(
            vehicle_id=vehicle_id,
            booking_date=check.booking_date,
            notes=notes,
            service_ids=service_ids,
        )
    except ValidationError:
        return await _render_bookings(
            request, session, query, offset=offset, form=form, form_open=True, error="Please select a vehicle."
        )

    try:
        await session.api.create_booking(payload)
    except APIError as exc:
        return await _render_bookings(
            request,
            session,
            query,
            offset=offset,
            form=form,
            form_open=True,
            error=exc.user_message("Operation failed."),
        )

    logger.info("booking_created", vehicle_id=vehicle_id, booking_date=check.booking_date, services=len(service_ids))
    return redirect_with_flash("/bookings", "booking_created")


@router.post("/{booking_id}/status")
async def update_booking_status(
    request: Request,
    booking_id: str,
    new_status: str = Form(""),
    page: int | None = Query(None),
    search: str | None = Query(None),
    status: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = _list_query(page, search, status)
    offset = _browser_offset(request)
    if not new_status:
        return await _render_bookings(request, session, query, offset=offset, error="Status update failed.")
    try:
        await session.api.update_booking_status(booking_id, new_status)
    except APIError as exc:
        return await _render_bookings(
            request, session, query, offset=offset, error=exc.user_message("Status update failed.")
        )

    logger.info("booking_status_updated", booking_id=booking_id, status=new_status)
    return redirect_with_flash("/bookings", "booking_status_updated", query)


@router.post("/{booking_id}/cancel")
async def cancel_booking(
    request: Request,
    booking_id: str,
    page: int | None = Query(None),
    search: str | None = Query(None),
    status: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = _list_query(page, search, status)
    try:
        await session.api.update_booking_status(booking_id, BookingStatus.CANCELLED.value)
    except APIError as exc:
        return await _render_bookings(
            request,
            session,
            query,
            offset=_browser_offset(request),
            error=exc.user_message("Failed to cancel booking."),
        )

    logger.info("booking_cancelled", booking_id=booking_id)
    return redirect_with_flash("/bookings", "booking_cancelled", query)
