from datetime import datetime

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: str
    name: str = ""
    email: str = ""
    phone: str | None = None
    role: str = ""
    created_at: datetime | None = None

    model_config = {"extra": "ignore"}


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginData(BaseModel):
    token: str

    model_config = {"extra": "ignore"}


class RegisterRequest(BaseModel):
    name: str = Field(max_length=100)
    email: str = Field(max_length=255)
    phone: str = Field(max_length=30)
    password: str = Field(max_length=64)


class ProfileUpdateRequest(BaseModel):
    """Body of ``PUT /user``; ``password`` is only sent when it changes."""
    name: str
    email: str
    phone: str
    password: str | None = None
