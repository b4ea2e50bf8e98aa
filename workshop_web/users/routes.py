import structlog
from fastapi import APIRouter, Depends, Query, Request

from workshop_web.api.errors import APIError
from workshop_web.auth.permissions import can_view_users
from workshop_web.auth.session import AuthSession
from workshop_web.dependencies import get_current_session
from workshop_web.listing import ListQuery, PageView
from workshop_web.models.enums import UserRole
from workshop_web.templating import render

logger = structlog.get_logger()
router = APIRouter()


@router.get("")
async def list_users(
    request: Request,
    page: int | None = Query(None),
    search: str | None = Query(None),
    role: str | None = Query(None),
    session: AuthSession = Depends(get_current_session),
):
    if not can_view_users(session.user):
        return render(request, "users.html", session, status_code=403, access_denied=True)

    query = ListQuery.from_request(page=page, search=search, role=role)
    page_view = PageView(items=[], query=query)
    try:
        result = await session.api.list_users(query)
        page_view = PageView(
            items=result.data, query=query, total_pages=result.total_pages, total_data=result.total_data
        )
    except APIError as exc:
        # The list just stays empty
        logger.warning("users_fetch_failed", status_code=exc.status_code)

    return render(
        request,
        "users.html",
        session,
        access_denied=False,
        page=page_view,
        roles=[r.value for r in UserRole],
    )
