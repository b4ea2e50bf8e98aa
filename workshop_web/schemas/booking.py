import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from workshop_web.models.enums import BookingStatus
from workshop_web.schemas.service import ServiceResponse
from workshop_web.schemas.vehicle import VehicleResponse

_WHITESPACE = re.compile(r"\s+")


class BookingResponse(BaseModel):
    id: str
    user_id: str | None = None
    vehicle_id: str | None = None
    notes: str = ""
    status: str = BookingStatus.PENDING.value
    booking_date: datetime | None = None
    created_at: datetime | None = None
    services: list[ServiceResponse] = []
    vehicle: VehicleResponse | None = Field(None, alias="Vehicle")

    model_config = {"extra": "ignore", "populate_by_name": True}

    @field_validator("services", mode="before")
    @classmethod
    def null_services(cls, v):
        return v or []

    @field_validator("notes", mode="before")
    @classmethod
    def null_notes(cls, v):
        return v or ""

    @property
    def vehicle_label(self) -> str:
        if self.vehicle is None:
            return "-"
        return f"{self.vehicle.model} - {_WHITESPACE.sub('', self.vehicle.license_plate)}"


class BookingCreateRequest(BaseModel):
    vehicle_id: str = Field(min_length=1)
    booking_date: str
    notes: str = ""
    service_ids: list[str] = Field(min_length=1)


class StatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1)
