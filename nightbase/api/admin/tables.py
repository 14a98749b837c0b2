"""관리자 테이블 브라우저 라우터 — 전 테이블 조회/추가/수정/삭제.

Admin Table Browser Router — Generic grid over every application table
(refresh tokens excluded) with relation options and CSV export.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import require_platform_admin
from nightbase.database import get_db
from nightbase.models.user import User
from nightbase.schemas.table import RelationOption, TablePageResponse
from nightbase.services.table_browser_service import table_browser_service

router: APIRouter = APIRouter()


@router.get("/{table}", response_model=TablePageResponse)
async def get_table_page(
    table: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
    page: Annotated[int, Query(ge=1)] = 1,
    id: Annotated[str | None, Query()] = None,
    filter: Annotated[list[str] | None, Query()] = None,
) -> TablePageResponse:
    """테이블 한 페이지 조회 (20건 고정).

    ``filter=column:value`` may repeat and applies to the fetched page only.
    """
    return await table_browser_service.get_page(db, table, page, id, filter)


@router.get("/{table}/export.csv")
async def export_table_csv(
    table: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
    page: Annotated[int, Query(ge=1)] = 1,
    filter: Annotated[list[str] | None, Query()] = None,
) -> Response:
    """현재 페이지를 CSV 로 내려받기."""
    content: str = await table_browser_service.export_csv(db, table, page, filter)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={table}.csv"},
    )


@router.get("/{table}/relation-options/{column}", response_model=list[RelationOption])
async def get_relation_options(
    table: str,
    column: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> list[RelationOption]:
    """관계 컬럼 선택지 (최대 500건)."""
    return await table_browser_service.relation_options(db, table, column)


@router.post("/{table}", status_code=201)
async def insert_row(
    table: str,
    data: Annotated[dict[str, Any], Body()],
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> dict[str, Any]:
    """행 추가 — 일시 컬럼은 표시 타임존 "YYYY-MM-DDTHH:MM" 입력."""
    result: dict[str, Any] = await table_browser_service.insert_row(db, table, data)
    await db.commit()
    return result


@router.patch("/{table}/{record_id}")
async def update_row(
    table: str,
    record_id: str,
    data: Annotated[dict[str, Any], Body()],
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> dict[str, Any]:
    result: dict[str, Any] = await table_browser_service.update_row(db, table, record_id, data)
    await db.commit()
    return result


@router.delete("/{table}/{record_id}", status_code=204)
async def delete_row(
    table: str,
    record_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> None:
    await table_browser_service.delete_row(db, table, record_id)
    await db.commit()
