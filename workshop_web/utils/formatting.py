from datetime import datetime

from workshop_web.config import settings

BOOKING_STATUS_VARIANTS = {
    "pending": "warning",
    "confirmed": "info",
    "on progress": "primary",
    "completed": "success",
    "cancelled": "danger",
}

WORK_ORDER_STATUS_VARIANTS = {
    "pending": "warning",
    "in_progress": "info",
    "completed": "success",
    "cancelled": "danger",
}

ROLE_VARIANTS = {
    "admin": "danger",
    "cashier": "info",
    "customer": "success",
    "mechanic": "warning",
}


def format_date(value: datetime | None) -> str:
    """'Jun 1, 2024'."""
    if value is None:
        return "-"
    return f"{value:%b} {value.day}, {value.year}"


def format_datetime(value: datetime | None) -> str:
    """'01 Jun 2024 09:00 WIB', in the offset the backend returned."""
    if value is None:
        return "-"
    return f"{value:%d %b %Y %H:%M} {settings.DISPLAY_TIMEZONE_LABEL}".rstrip()


def format_price(value: float | None) -> str:
    """'$1,250.00'."""
    amount = value or 0.0
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def status_variant(status: str | None, variants: dict[str, str] = BOOKING_STATUS_VARIANTS) -> str:
    return variants.get(status or "", "secondary")


def work_order_status_label(status: str | None) -> str:
    """'in_progress' -> 'IN PROGRESS'."""
    return (status or "").replace("_", " ").upper()


def short_id(value: str | None) -> str:
    return (value or "")[:8]
