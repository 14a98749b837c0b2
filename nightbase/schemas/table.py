"""관리자 테이블 브라우저 및 대시보드 스키마 정의.

Admin table browser and dashboard Pydantic schema definitions.
Row values are raw JSON-compatible values; ``display`` holds the formatted
strings shown in the admin grid.
"""

from typing import Any

from pydantic import BaseModel


class TablePageResponse(BaseModel):
    """테이블 페이지 응답 스키마.

    Attributes:
        table: 테이블 이름 (Table name)
        label: 표시 라벨 (Japanese display label)
        columns: 정렬된 컬럼 목록 (Ordered column names, [] for an empty page)
        rows: 원본 행 값 (Raw row values)
        display: 표시용 문자열 (Formatted cell strings, same shape as rows)
        total: 필터 전 전체 행 수 (Unfiltered total row count)
        filtered_count: 필터 후 페이지 행 수 (Rows left on the page after filters)
        page: 현재 페이지 (Current page, 1-based)
        page_size: 페이지 크기 (Fixed page size)
        pages: 전체 페이지 수 (Total page count)
    """

    table: str
    label: str
    columns: list[str]
    rows: list[dict[str, Any]]
    display: list[dict[str, str]]
    total: int
    filtered_count: int
    page: int
    page_size: int
    pages: int


class RelationOption(BaseModel):
    """관계 컬럼 선택지 — One selectable referenced row."""

    id: str
    label: str


class TableCount(BaseModel):
    """테이블 행 수 — Row count of one browsable table."""

    table: str
    label: str
    count: int


class CountGroup(BaseModel):
    """대시보드 카테고리별 집계 — Tables of one sidebar group."""

    group: str  # 그룹 라벨 (Group label, e.g. "シフト")
    tables: list[TableCount]


class DashboardCountsResponse(BaseModel):
    """대시보드 집계 응답 — All groups plus the overall total."""

    groups: list[CountGroup]
    total: int
