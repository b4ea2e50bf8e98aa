from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from workshop_web.schemas.user import UserResponse


class VehicleResponse(BaseModel):
    id: str
    user_id: str | None = None
    license_plate: str = ""
    brand: str = ""
    model: str = ""
    year: str = ""
    color: str = ""
    created_at: datetime | None = None
    owner: UserResponse | None = Field(None, alias="User")

    model_config = {"extra": "ignore", "populate_by_name": True}

    @field_validator("year", mode="before")
    @classmethod
    def year_as_text(cls, v):
        return "" if v is None else str(v)

    @field_validator("owner", mode="before")
    @classmethod
    def drop_empty_owner(cls, v):
        # The backend serializes an unloaded relation as a zero-value object
        if isinstance(v, dict) and not v.get("id"):
            return None
        return v

    @property
    def label(self) -> str:
        return f"{self.license_plate} - {self.brand} {self.model}"


class VehicleForm(BaseModel):
    brand: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: str = Field(min_length=1, max_length=4)
    license_plate: str = Field(min_length=1, max_length=20)
    color: str = Field("", max_length=50)

    @field_validator("brand", "model", "year", "license_plate", "color", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v
