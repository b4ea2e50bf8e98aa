import structlog
from fastapi import APIRouter, Depends, Form, Query, Request
from pydantic import ValidationError

from workshop_web.api.errors import APIError
from workshop_web.auth.permissions import vehicle_capabilities
from workshop_web.auth.session import AuthSession
from workshop_web.dependencies import get_current_session
from workshop_web.flash import flash_message, redirect_with_flash
from workshop_web.listing import ListQuery, PageView
from workshop_web.schemas.vehicle import VehicleForm
from workshop_web.templating import render

logger = structlog.get_logger()
router = APIRouter()

_EMPTY_FORM = {"brand": "", "model": "", "year": "", "license_plate": "", "color": ""}


def _list_query(page: int | None, search: str | None) -> ListQuery:
    return ListQuery.from_request(page=page, search=search)


def _form_error(exc: ValidationError) -> str:
    fields = sorted({str(err["loc"][0]).replace("_", " ") for err in exc.errors() if err.get("loc")})
    return "Please check: " + ", ".join(fields) if fields else "Operation failed."


async def _render_vehicles(
    request: Request,
    session: AuthSession,
    query: ListQuery,
    *,
    form: dict | None = None,
    editing_id: str | None = None,
    form_open: bool = False,
    error: str = "",
    success: str = "",
):
    page = PageView(items=[], query=query)
    try:
        result = await session.api.list_vehicles(query)
        page = PageView(items=result.data, query=query, total_pages=result.total_pages, total_data=result.total_data)
    except APIError as exc:
        error = error or exc.user_message("Failed to fetch vehicles.")

    return render(
        request,
        "vehicles.html",
        session,
        page=page,
        caps=vehicle_capabilities(session.user),
        form=form or dict(_EMPTY_FORM),
        editing_id=editing_id,
        form_open=form_open,
        error=error,
        success=success,
    )


@router.get("")
async def list_vehicles(
    request: Request,
    page: int | None = Query(None),
    search: str | None = Query(None),
    edit: str | None = Query(None),
    flash: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = _list_query(page, search)
    if not edit:
        return await _render_vehicles(request, session, query, success=flash_message(flash))

    try:
        vehicle = await session.api.get_vehicle(edit)
    except APIError as exc:
        return await _render_vehicles(request, session, query, error=exc.user_message("Failed to fetch vehicles."))
    form = {
        "brand": vehicle.brand,
        "model": vehicle.model,
        "year": vehicle.year,
        "license_plate": vehicle.license_plate,
        "color": vehicle.color,
    }
    return await _render_vehicles(request, session, query, form=form, editing_id=vehicle.id, form_open=True)


@router.post("")
async def create_vehicle(
    request: Request,
    brand: str = Form(""),
    model: str = Form(""),
    year: str = Form(""),
    license_plate: str = Form(""),
    color: str = Form(""),
    session: AuthSession = Depends(get_current_session),
):
    query = ListQuery()
    form = {"brand": brand, "model": model, "year": year, "license_plate": license_plate, "color": color}
    try:
        payload = VehicleForm(**form)
    except ValidationError as exc:
        return await _render_vehicles(request, session, query, form=form, form_open=True, error=_form_error(exc))

    try:
        await session.api.create_vehicle(payload)
    except APIError as exc:
        return await _render_vehicles(
            request, session, query, form=form, form_open=True, error=exc.user_message("Operation failed.")
        )

    logger.info("vehicle_created", license_plate=payload.license_plate)
    return redirect_with_flash("/vehicles", "vehicle_created")


@router.post("/{vehicle_id}")
async def update_vehicle(
    request: Request,
    vehicle_id: str,
    brand: str = Form(""),
    model: str = Form(""),
    year: str = Form(""),
    license_plate: str = Form(""),
    color: str = Form(""),
    page: int | None = Query(None),
    search: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = _list_query(page, search)
    form = {"brand": brand, "model": model, "year": year, "license_plate": license_plate, "color": color}
    try:
        payload = VehicleForm(**form)
    except ValidationError as exc:
        return await _render_vehicles(
            request, session, query, form=form, editing_id=vehicle_id, form_open=True, error=_form_error(exc)
        )

    try:
        await session.api.update_vehicle(vehicle_id, payload)
    except APIError as exc:
        return await _render_vehicles(
            request,
            session,
            query,
            form=form,
            editing_id=vehicle_id,
            form_open=True,
            error=exc.user_message("Operation failed."),
        )

    logger.info("vehicle_updated", vehicle_id=vehicle_id)
    return redirect_with_flash("/vehicles", "vehicle_updated", query)


@router.post("/{vehicle_id}/delete")
async def delete_vehicle(
    request: Request,
    vehicle_id: str,
    page: int | None = Query(None),
    search: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = _list_query(page, search)
    try:
        await session.api.delete_vehicle(vehicle_id)
    except APIError as exc:
        return await _render_vehicles(request, session, query, error=exc.user_message("Delete failed."))

    logger.info("vehicle_deleted", vehicle_id=vehicle_id)
    return redirect_with_flash("/vehicles", "vehicle_deleted", query)
