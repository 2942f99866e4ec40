"""Pagination utilities for list endpoints."""

from dataclasses import dataclass

from fastapi import Query
from sqlalchemy.orm import Query as SQLAlchemyQuery

# Admin tables show a fixed page size
DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 15


@dataclass
class PaginationParams:
    """Pagination parameters from query string."""
    page: int
    per_page: int = DEFAULT_PER_PAGE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


def get_pagination(
    page: int = Query(DEFAULT_PAGE, ge=1, description="Page number (1-indexed)"),
) -> PaginationParams:
    """
    Pagination dependency.

    Usage:
        @router.get("/items")
        def list_items(pagination: PaginationParams = Depends(get_pagination)):
            ...
    """
    return PaginationParams(page=page)


def page_count(total: int, per_page: int) -> int:
    return (total + per_page - 1) // per_page if per_page > 0 else 0


def paginate_query(query: SQLAlchemyQuery, pagination: PaginationParams) -> tuple[list, int]:
    """
    Apply pagination to a SQLAlchemy query.

    Returns:
        Tuple of (items, total_count)
    """
    total = query.order_by(None).count()
    items = query.offset(pagination.offset).limit(pagination.per_page).all()
    return items, total


def paginated(items: list, total: int, pagination: PaginationParams) -> dict:
    """Build the items/total/page/perPage/pages payload."""
    return {
        "items": items,
        "total": total,
        "page": pagination.page,
        "per_page": pagination.per_page,
        "pages": page_count(total, pagination.per_page),
    }
