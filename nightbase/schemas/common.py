"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across API domains:
pagination wrapper, generic messages and the UUID string type used by
request bodies.
"""

from typing import Annotated, Any
from uuid import UUID

from pydantic import AfterValidator, BaseModel


def _canonical_uuid(value: str) -> str:
    """UUID 형식 검증 후 정규화된 문자열을 반환합니다 (Raises ValueError, reported as 422)."""
    return str(UUID(value))


# 요청 본문의 UUID 문자열 — Malformed ids fail validation instead of reaching services
UUIDStr = Annotated[str, AfterValidator(_canonical_uuid)]


class PaginatedResponse(BaseModel):
    """페이지네이션 응답 스키마.

    Paginated response wrapper schema.
    Wraps a list of items with pagination metadata.

    Attributes:
        items: 항목 목록 (List of result items)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (Total number of pages)
    """

    items: list[Any]  # 결과 항목 목록 (List of items for the current page)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)
    pages: int = 0  # 전체 페이지 수 — ceil(total / per_page)


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for simple confirmations.

    Attributes:
        message: 응답 메시지 (Response message string)
    """

    message: str  # 응답 메시지 (Human-readable confirmation message)
