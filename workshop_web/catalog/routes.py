import math

import structlog
from fastapi import APIRouter, Depends, Form, Query, Request
from pydantic import ValidationError

from workshop_web.api.errors import APIError
from workshop_web.auth.permissions import service_capabilities
from workshop_web.auth.session import AuthSession
from workshop_web.dependencies import get_current_session
from workshop_web.flash import flash_message, redirect_with_flash
from workshop_web.listing import ListQuery, PageView
from workshop_web.schemas.service import ServiceForm
from workshop_web.templating import render

logger = structlog.get_logger()
router = APIRouter()

INVALID_PRICE = "Price must be a number of zero or more."


def _parse_price(value: str) -> float | None:
    try:
        amount = float(value.replace(",", "").strip())
    except ValueError:
        return None
    # float() also reads "nan" and "inf"
    return amount if math.isfinite(amount) else None


def _build_form(name: str, description: str, price: str) -> tuple[ServiceForm | None, str]:
    """Parse the submitted fields; returns ``(form, "")`` or ``(None, message)``."""
    amount = _parse_price(price)
    if amount is None or amount < 0:
        return None, INVALID_PRICE
    try:
        return ServiceForm(name=name.strip(), description=description.strip(), price=amount), ""
    except ValidationError:
        return None, "Service name is required."


async def _render_services(
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
        result = await session.api.list_services(query)
        page = PageView(items=result.data, query=query, total_pages=result.total_pages, total_data=result.total_data)
    except APIError as exc:
        logger.warning("services_fetch_failed", status_code=exc.status_code)
        error = error or "Failed to fetch services"

    if form is None and editing_id:
        # No single-service endpoint; edit links only point at rows on this page
        service = next((item for item in page.items if item.id == editing_id), None)
        if service is not None:
            form = {"name": service.name, "description": service.description, "price": f"{service.price:g}"}
            form_open = True
        else:
            editing_id = None

    return render(
        request,
        "services.html",
        session,
        page=page,
        caps=service_capabilities(session.user),
        form=form or {"name": "", "description": "", "price": ""},
        editing_id=editing_id,
        form_open=form_open,
        error=error,
        success=success,
    )


@router.get("")
async def list_services(
    request: Request,
    page: int | None = Query(None),
    search: str | None = Query(None),
    edit: str | None = Query(None),
    flash: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = ListQuery.from_request(page=page, search=search)
    return await _render_services(request, session, query, editing_id=edit, success=flash_message(flash))


@router.post("")
async def create_service(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    session: AuthSession = Depends(get_current_session),
):
    query = ListQuery()
    form = {"name": name, "description": description, "price": price}
    payload, problem = _build_form(name, description, price)
    if payload is None:
        return await _render_services(request, session, query, form=form, form_open=True, error=problem)

    try:
        await session.api.create_service(payload)
    except APIError as exc:
        return await _render_services(
            request, session, query, form=form, form_open=True, error=exc.user_message("Operation failed", field="error")
        )

    logger.info("service_created", name=payload.name, price=payload.price)
    return redirect_with_flash("/services", "service_created")


@router.post("/{service_id}")
async def update_service(
    request: Request,
    service_id: str,
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    page: int | None = Query(None),
    search: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = ListQuery.from_request(page=page, search=search)
    form = {"name": name, "description": description, "price": price}
    payload, problem = _build_form(name, description, price)
    if payload is None:
        return await _render_services(
            request, session, query, form=form, editing_id=service_id, form_open=True, error=problem
        )

    try:
        await session.api.update_service(service_id, payload)
    except APIError as exc:
        return await _render_services(
            request,
            session,
            query,
            form=form,
            editing_id=service_id,
            form_open=True,
            error=exc.user_message("Operation failed", field="error"),
        )

    logger.info("service_updated", service_id=service_id)
    return redirect_with_flash("/services", "service_updated", query)


@router.post("/{service_id}/delete")
async def delete_service(
    request: Request,
    service_id: str,
    page: int | None = Query(None),
    search: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = ListQuery.from_request(page=page, search=search)
    try:
        await session.api.delete_service(service_id)
    except APIError as exc:
        return await _render_services(request, session, query, error=exc.user_message("Delete failed", field="error"))

    logger.info("service_deleted", service_id=service_id)
    return redirect_with_flash("/services", "service_deleted", query)
