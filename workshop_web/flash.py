"""Success notices carried across a post/redirect/get.

A successful form post answers with a 303 to the screen it came from plus a
``flash`` key. The page looks the key up here, so only known notices are ever
shown and refreshing the page does not repeat the post.
"""
from urllib.parse import urlencode

from fastapi.responses import RedirectResponse

from workshop_web.listing import ListQuery

MESSAGES = {
    "booking_created": "Booking created successfully",
    "booking_status_updated": "Booking status updated successfully",
    "booking_cancelled": "Booking cancelled successfully",
    "vehicle_created": "Vehicle created successfully",
    "vehicle_updated": "Vehicle updated successfully",
    "vehicle_deleted": "Vehicle deleted successfully",
    "service_created": "Service created successfully",
    "service_updated": "Service updated successfully",
    "service_deleted": "Service deleted successfully",
    "work_order_created": "Work order created successfully",
    "mechanic_assigned": "Mechanic assigned successfully",
    "work_order_status_updated": "Work order status updated to {status}",
    "profile_updated": "Profile updated successfully",
}


def redirect_with_flash(path: str, key: str, query: ListQuery | None = None) -> RedirectResponse:
    """303 back to ``path``, keeping the list position of ``query``."""
    params = query.url_params() if query is not None else {}
    params["flash"] = key
    return RedirectResponse(f"{path}?{urlencode(params)}", status_code=303)


def flash_message(key: str | None, **values: str) -> str:
    template = MESSAGES.get(key or "")
    if template is None:
        return ""
    return template.format(**values) if values else template
