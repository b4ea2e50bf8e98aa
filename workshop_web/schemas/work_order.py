from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from workshop_web.models.enums import WorkOrderStatus


class WorkOrderServiceLine(BaseModel):
    id: str | None = None
    service_id: str | None = None
    service_name: str = ""
    price: float = 0.0
    quantity: int = 1
    status: str = ""

    model_config = {"extra": "ignore"}

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class WorkOrderPartLine(BaseModel):
    id: str | None = None
    sparepart_id: str | None = None
    price: float = 0.0
    quantity: int = 1

    model_config = {"extra": "ignore"}

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


class WorkOrderResponse(BaseModel):
    id: str
    booking_id: str | None = None
    customer_id: str | None = None
    vehicle_id: str | None = None
    mechanic_id: str | None = None
    status: str = WorkOrderStatus.PENDING.value
    notes: str = ""
    created_at: datetime | None = None
    services: list[WorkOrderServiceLine] = []
    parts: list[WorkOrderPartLine] = []

    model_config = {"extra": "ignore"}

    @field_validator("services", "parts", mode="before")
    @classmethod
    def null_lines(cls, v):
        return v or []

    @field_validator("mechanic_id", mode="before")
    @classmethod
    def blank_mechanic(cls, v):
        return v or None

    @field_validator("notes", mode="before")
    @classmethod
    def null_notes(cls, v):
        return v or ""

    @property
    def total(self) -> float:
        """Sum of price x quantity over service and part lines."""
        return sum(line.subtotal for line in self.services) + sum(line.subtotal for line in self.parts)


class WorkOrderCreateRequest(BaseModel):
    booking_id: str = Field(min_length=1)
    notes: str = ""


class AssignMechanicRequest(BaseModel):
    mechanic_id: str = Field(min_length=1)
