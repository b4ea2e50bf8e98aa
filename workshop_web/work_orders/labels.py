"""Reference data the work-order screens use to label ids."""
import asyncio
from dataclasses import dataclass, field

import structlog

from workshop_web.api.client import WorkshopAPI
from workshop_web.api.errors import APIError
from workshop_web.models.enums import BookingStatus
from workshop_web.schemas.booking import BookingResponse
from workshop_web.schemas.user import UserResponse
from workshop_web.schemas.vehicle import VehicleResponse
from workshop_web.utils.formatting import format_date, short_id

logger = structlog.get_logger()


@dataclass
class WorkOrderLabels:
    bookings: list[BookingResponse] = field(default_factory=list)
    vehicles: list[VehicleResponse] = field(default_factory=list)
    mechanics: list[UserResponse] = field(default_factory=list)

    def booking_label(self, booking_id: str | None) -> str:
        if any(booking.id == booking_id for booking in self.bookings):
            return f"Booking #{short_id(booking_id)}"
        return "N/A"

    def vehicle_label(self, vehicle_id: str | None) -> str:
        for vehicle in self.vehicles:
            if vehicle.id == vehicle_id:
                return f"{vehicle.brand} {vehicle.model} ({vehicle.license_plate})"
        return "N/A"

    def mechanic_name(self, mechanic_id: str | None) -> str:
        for mechanic in self.mechanics:
            if mechanic.id == mechanic_id:
                return mechanic.name
        return "Unassigned"

    def confirmed_bookings(self) -> list[BookingResponse]:
        """Bookings a new work order can be opened against."""
        return [booking for booking in self.bookings if booking.status == BookingStatus.CONFIRMED.value]

    def booking_option_label(self, booking: BookingResponse) -> str:
        return (
            f"Booking #{short_id(booking.id)} - {self.vehicle_label(booking.vehicle_id)}"
            f" - {format_date(booking.booking_date)}"
        )


async def _quietly(name: str, call) -> list:
    try:
        return await call
    except APIError as exc:
        logger.warning("lookup_fetch_failed", lookup=name, status_code=exc.status_code)
        return []


async def load_labels(api: WorkshopAPI) -> WorkOrderLabels:
    """Fetch bookings, vehicles and mechanics concurrently.

    A failed lookup only degrades labels to their placeholders.
    """
    bookings, vehicles, mechanics = await asyncio.gather(
        _quietly("bookings", api.booking_options()),
        _quietly("vehicles", api.vehicle_options()),
        _quietly("mechanics", api.list_mechanics()),
    )
    return WorkOrderLabels(bookings=bookings, vehicles=vehicles, mechanics=mechanics)
