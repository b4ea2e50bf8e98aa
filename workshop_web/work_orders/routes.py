import structlog
from fastapi import APIRouter, Depends, Form, Query, Request

from workshop_web.api.errors import APIError
from workshop_web.auth.permissions import work_order_capabilities
from workshop_web.auth.session import AuthSession
from workshop_web.dependencies import get_current_session
from workshop_web.flash import flash_message, redirect_with_flash
from workshop_web.listing import ListQuery, PageView
from workshop_web.models.enums import WorkOrderStatus
from workshop_web.schemas.work_order import WorkOrderCreateRequest
from workshop_web.templating import render
from workshop_web.work_orders.labels import load_labels

logger = structlog.get_logger()
router = APIRouter()

STATUSES = [status.value for status in WorkOrderStatus]


async def _render_list(
    request: Request,
    session: AuthSession,
    query: ListQuery,
    *,
    form: dict | None = None,
    form_open: bool = False,
    error: str = "",
    success: str = "",
):
    page = PageView(items=[], query=query)
    try:
        result = await session.api.list_work_orders(query)
        page = PageView(items=result.data, query=query, total_pages=result.total_pages, total_data=result.total_data)
    except APIError as exc:
        error = error or exc.user_message("Failed to fetch work orders", field="error")

    return render(
        request,
        "work_orders.html",
        session,
        page=page,
        caps=work_order_capabilities(session.user),
        labels=await load_labels(session.api),
        form=form or {"booking_id": "", "notes": ""},
        form_open=form_open,
        statuses=STATUSES,
        error=error,
        success=success,
    )


async def _render_detail(
    request: Request,
    session: AuthSession,
    work_order_id: str,
    *,
    error: str = "",
    flash: str | None = None,
):
    try:
        work_order = await session.api.get_work_order(work_order_id)
    except APIError as exc:
        return await _render_list(
            request,
            session,
            ListQuery(),
            error=error or exc.user_message("Failed to fetch work order details", field="error"),
        )

    return render(
        request,
        "work_order_detail.html",
        session,
        work_order=work_order,
        caps=work_order_capabilities(session.user),
        labels=await load_labels(session.api),
        statuses=STATUSES,
        error=error,
        success=flash_message(flash, status=work_order.status),
    )


@router.get("")
async def list_work_orders(
    request: Request,
    page: int | None = Query(None),
    status: str | None = Query(None),
    flash: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    query = ListQuery.from_request(page=page, status=status)
    return await _render_list(request, session, query, success=flash_message(flash))


@router.post("")
async def create_work_order(
    request: Request,
    booking_id: str = Form(""),
    notes: str = Form(""),
    session: AuthSession = Depends(get_current_session),
):
    query = ListQuery()
    form = {"booking_id": booking_id, "notes": notes}
    if not booking_id:
        return await _render_list(request, session, query, form=form, form_open=True, error="Please select a booking.")

    try:
        await session.api.create_work_order(WorkOrderCreateRequest(booking_id=booking_id, notes=notes.strip()))
    except APIError as exc:
        return await _render_list(
            request,
            session,
            query,
            form=form,
            form_open=True,
            error=exc.user_message("Failed to create work order", field="error"),
        )

    logger.info("work_order_created", booking_id=booking_id)
    return redirect_with_flash("/work-orders", "work_order_created")


@router.get("/{work_order_id}")
async def work_order_detail(
    request: Request,
    work_order_id: str,
    flash: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    return await _render_detail(request, session, work_order_id, flash=flash)


@router.post("/{work_order_id}/assign")
async def assign_mechanic(
    request: Request,
    work_order_id: str,
    mechanic_id: str = Form(""),
    session: AuthSession = Depends(get_current_session),
):
    if not mechanic_id:
        return await _render_detail(request, session, work_order_id, error="Please select a mechanic.")
    try:
        await session.api.assign_mechanic(work_order_id, mechanic_id)
    except APIError as exc:
        return await _render_detail(
            request, session, work_order_id, error=exc.user_message("Failed to assign mechanic", field="error")
        )

    logger.info("mechanic_assigned", work_order_id=work_order_id, mechanic_id=mechanic_id)
    return redirect_with_flash(f"/work-orders/{work_order_id}", "mechanic_assigned")


@router.post("/{work_order_id}/status")
async def update_work_order_status(
    request: Request,
    work_order_id: str,
    status: str = Form(""),
    session: AuthSession = Depends(get_current_session),
):
    if status not in STATUSES:
        return await _render_detail(request, session, work_order_id, error="Failed to update status")
    try:
        await session.api.update_work_order_status(work_order_id, status)
    except APIError as exc:
        return await _render_detail(
            request, session, work_order_id, error=exc.user_message("Failed to update status", field="error")
        )

    logger.info("work_order_status_updated", work_order_id=work_order_id, status=status)
    return redirect_with_flash(f"/work-orders/{work_order_id}", "work_order_status_updated")
