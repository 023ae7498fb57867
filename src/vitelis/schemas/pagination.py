"""Pagination schemas for page-numbered listings."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic page of results.

    Pages are 1-based. ``total`` counts every matching row, so clients can
    render page controls without a second request.
    """

    items: list[T]
    total: int = Field(ge=0, description="Number of matching items across all pages.")
    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    has_more: bool = Field(
        default=False,
        description="Whether there are more items after this page.",
    )


def page_offset(page: int, limit: int) -> int:
    """Translate a 1-based page number into a row offset."""
    return (max(page, 1) - 1) * limit
