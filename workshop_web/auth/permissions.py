"""Which controls each role gets to see.

These flags only decide what is rendered. The backend re-checks every
permission on its side; hiding a button here protects nothing.
"""
from dataclasses import dataclass

from workshop_web.models.enums import BookingStatus, UserRole
from workshop_web.schemas.user import UserResponse

_CANCELLABLE_BOOKING_STATUSES = {BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value}


def _role(user: UserResponse | None) -> str | None:
    return user.role if user is not None else None


def has_role(user: UserResponse | None, *roles: UserRole) -> bool:
    return _role(user) in {role.value for role in roles}


@dataclass(frozen=True)
class BookingCapabilities:
    can_create: bool
    can_update_status: bool
    can_cancel: bool

    @property
    def has_actions(self) -> bool:
        return self.can_update_status or self.can_cancel

    def can_update_status_of(self, status: str) -> bool:
        return self.can_update_status and status != BookingStatus.CANCELLED.value

    def can_cancel_booking(self, status: str) -> bool:
        return self.can_cancel and status in _CANCELLABLE_BOOKING_STATUSES


@dataclass(frozen=True)
class VehicleCapabilities:
    can_modify: bool
    show_owner: bool


@dataclass(frozen=True)
class ServiceCapabilities:
    can_modify: bool


@dataclass(frozen=True)
class WorkOrderCapabilities:
    can_create: bool
    can_assign: bool
    can_update_status: bool


def booking_capabilities(user: UserResponse | None) -> BookingCapabilities:
    return BookingCapabilities(
        can_create=has_role(user, UserRole.CUSTOMER, UserRole.ADMIN),
        can_update_status=has_role(user, UserRole.ADMIN, UserRole.CASHIER),
        can_cancel=has_role(user, UserRole.CUSTOMER),
    )


def vehicle_capabilities(user: UserResponse | None) -> VehicleCapabilities:
    return VehicleCapabilities(
        can_modify=has_role(user, UserRole.ADMIN, UserRole.CUSTOMER),
        show_owner=has_role(user, UserRole.ADMIN, UserRole.CASHIER),
    )


def service_capabilities(user: UserResponse | None) -> ServiceCapabilities:
    return ServiceCapabilities(can_modify=has_role(user, UserRole.ADMIN))


def work_order_capabilities(user: UserResponse | None) -> WorkOrderCapabilities:
    staff = has_role(user, UserRole.ADMIN, UserRole.CASHIER)
    return WorkOrderCapabilities(
        can_create=staff,
        can_assign=staff,
        can_update_status=staff or has_role(user, UserRole.MECHANIC),
    )


def can_view_users(user: UserResponse | None) -> bool:
    return has_role(user, UserRole.ADMIN, UserRole.CASHIER)


def menu_items(user: UserResponse | None) -> list[tuple[str, str]]:
    """Sidebar entries as ``(path, label)`` pairs."""
    items = [
        ("/dashboard", "Dashboard"),
        ("/bookings", "Bookings"),
        ("/vehicles", "Vehicles"),
        ("/services", "Services"),
        ("/work-orders", "Work Orders"),
    ]
    if can_view_users(user):
        items.append(("/users", "Users"))
    return items
