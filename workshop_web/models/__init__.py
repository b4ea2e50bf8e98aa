from workshop_web.models.enums import BookingStatus, UserRole, WorkOrderStatus

__all__ = [
    "UserRole",
    "BookingStatus",
    "WorkOrderStatus",
]
