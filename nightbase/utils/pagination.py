"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
List endpoints return the ``PaginatedResponse`` shape built by ``build_page``.
"""

import math
from typing import Any, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def count_rows(db: AsyncSession, query: Select[Any]) -> int:
    """쿼리 결과의 전체 행 수 — COUNT over the query wrapped as a subquery."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    return (await db.execute(count_query)).scalar() or 0


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = 20,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Execute a paginated query, returning the page of ORM objects and the
    total count. Page numbers below 1 are treated as 1.

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수) (Items and total count)
    """
    page = max(page, 1)
    total: int = await count_rows(db, query)

    offset: int = (page - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().all()

    return items, total


def page_count(total: int, per_page: int) -> int:
    """전체 페이지 수 — ceil(total / per_page), 0 for an empty set."""
    return math.ceil(total / per_page) if per_page > 0 else 0


def build_page(items: list[Any], total: int, page: int, per_page: int) -> dict[str, Any]:
    """PaginatedResponse 딕셔너리를 구성합니다 — Build the paginated response dict."""
    return {
        "items": items,
        "total": total,
        "page": max(page, 1),
        "per_page": per_page,
        "pages": page_count(total, per_page),
    }
