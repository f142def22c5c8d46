"""Shared schema types: pagination and plain messages."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageRequest(BaseModel):
    page: int = Field(1, ge=1)
    items_per_page: int = Field(20, ge=1, le=100)


class PaginatedResponse(BaseModel, Generic[T]):
    items: list[T]
    page: int
    items_per_page: int
    total: int
    has_more: bool = False


class MessageResponse(BaseModel):
    message: str
