from datetime import datetime

from pydantic import BaseModel, Field


class ServiceResponse(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    price: float = 0.0
    created_at: datetime | None = None

    model_config = {"extra": "ignore"}


class ServiceForm(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field("", max_length=1000)
    price: float = Field(ge=0)
