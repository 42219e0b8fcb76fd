"""Page-based listing for job lists and revision history.

Listings are requested with ``?page=&size=`` and answered with a ``Page``
whose wire form uses the same camelCase keys as every other schema.
"""

from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.schemas.base import BaseSchema

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PaginationParams(BaseSchema):
    """1-based page number and page size."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


def pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
) -> PaginationParams:
    """Dependency reading ``page`` and ``size`` from the query string."""
    return PaginationParams(page=page, size=size)


class Page(BaseSchema, Generic[T]):
    """One page of a listing plus the totals needed to render a pager."""

    items: list[T]
    total: int
    page: int
    size: int
    total_pages: int
    has_next: bool
    has_prev: bool

    def serialize(self, schema) -> dict[str, Any]:
        """Wire form of the page with every item rendered through ``schema``."""
        data = self.model_dump(by_alias=True, exclude={"items"})
        data["items"] = [
            schema.model_validate(item).model_dump(by_alias=True) for item in self.items
        ]
        return data


async def paginate(db: AsyncSession, query: Select, pagination: PaginationParams) -> Page[Any]:
    """Run ``query`` for one page; items are the ORM rows it selects.

    The total is counted over ``query`` with its ordering stripped.
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    result = await db.execute(query.offset(pagination.offset).limit(pagination.size))
    total_pages = (total + pagination.size - 1) // pagination.size

    return Page[Any](
        items=list(result.scalars().all()),
        total=total,
        page=pagination.page,
        size=pagination.size,
        total_pages=total_pages,
        has_next=pagination.page < total_pages,
        has_prev=pagination.page > 1,
    )
