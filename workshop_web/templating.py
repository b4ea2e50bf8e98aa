from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from workshop_web.auth.permissions import menu_items
from workshop_web.auth.session import AuthSession
from workshop_web.utils import formatting

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["date"] = formatting.format_date
templates.env.filters["datetime"] = formatting.format_datetime
templates.env.filters["price"] = formatting.format_price
templates.env.filters["short_id"] = formatting.short_id
templates.env.filters["wo_status"] = formatting.work_order_status_label
templates.env.globals["status_variant"] = formatting.status_variant
templates.env.globals["BOOKING_STATUS_VARIANTS"] = formatting.BOOKING_STATUS_VARIANTS
templates.env.globals["WORK_ORDER_STATUS_VARIANTS"] = formatting.WORK_ORDER_STATUS_VARIANTS
templates.env.globals["ROLE_VARIANTS"] = formatting.ROLE_VARIANTS


def render(
    request: Request,
    name: str,
    session: AuthSession | None = None,
    status_code: int = 200,
    **context,
):
    """Render a page; signed-in pages also get the user and the sidebar."""
    user = session.user if session is not None else None
    context.setdefault("error", "")
    context.setdefault("success", "")
    return templates.TemplateResponse(
        request,
        name,
        {"user": user, "menu": menu_items(user) if user else [], **context},
        status_code=status_code,
    )
