"""
Base schemas shared by every request/response model.
"""
from typing import Generic, TypeVar, List
from uuid import UUID
from pydantic import BaseModel, ConfigDict


T = TypeVar("T")


class BaseSchema(BaseModel):
    """Reads from ORM rows as well as dicts."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class IDSchema(BaseSchema):
    id: UUID


class PaginatedResponse(BaseSchema, Generic[T]):
    """One page of a listing plus the totals needed to page through it."""

    items: List[T]
    total: int
    page: int
    limit: int
    pages: int
