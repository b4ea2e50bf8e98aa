from typing import Generic, TypeVar

from pydantic import BaseModel, field_validator

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """Collection envelope: ``{data, total_pages, total_data}``."""
    data: list[T] = []
    total_pages: int = 1
    total_data: int = 0

    model_config = {"extra": "ignore"}

    @field_validator("data", mode="before")
    @classmethod
    def null_data(cls, v):
        return v or []

    @field_validator("total_pages", mode="before")
    @classmethod
    def at_least_one_page(cls, v):
        # An empty result reports zero pages; the pager still shows page 1
        return v or 1

    @field_validator("total_data", mode="before")
    @classmethod
    def null_total(cls, v):
        return v or 0
