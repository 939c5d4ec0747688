"""
Pagination models shared by order and product listings.
"""

import math
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict


MAX_PAGE = 1_000_000
MAX_LIMIT = 1000


def _positive_int(value: Any, default: int, maximum: int) -> int:
    """Parse a query-string value, falling back to default when not a positive integer.

    Values above maximum are clamped so the derived offset stays within a
    64-bit bind parameter.
    """
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed < 1:
        return default
    return min(parsed, maximum)


class PageRequest(BaseModel):
    """Requested page window; offset is derived as (page - 1) * limit."""
    page: int = Field(default=1, ge=1, le=MAX_PAGE)
    limit: int = Field(default=10, ge=1, le=MAX_LIMIT)

    @classmethod
    def from_args(cls, page: Optional[Any] = None, limit: Optional[Any] = None,
                  default_limit: int = 10) -> "PageRequest":
        """Build a page request from raw query parameters."""
        return cls(
            page=_positive_int(page, 1, MAX_PAGE),
            limit=_positive_int(limit, default_limit, MAX_LIMIT),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationModel(BaseModel):
    """Pagination block returned alongside every listing."""
    model_config = ConfigDict(populate_by_name=True)

    total: int = Field(..., ge=0)
    page: int
    limit: int
    total_pages: int = Field(..., ge=0, alias="totalPages")

    @classmethod
    def build(cls, total: int, request: PageRequest) -> "PaginationModel":
        return cls(
            total=total,
            page=request.page,
            limit=request.limit,
            total_pages=math.ceil(total / request.limit),
        )
