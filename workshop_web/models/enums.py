import enum

# Values mirror the backend's string constants; "on progress" keeps its space.


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    CASHIER = "cashier"
    MECHANIC = "mechanic"
    CUSTOMER = "customer"


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ON_PROGRESS = "on progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkOrderStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
