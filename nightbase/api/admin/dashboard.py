"""관리자 대시보드 라우터 — 테이블 건수 집계 및 Excel 내보내기.

Admin Dashboard Router — Row counts of every browsable table grouped by
category, and the same counts as an xlsx download.
"""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import require_platform_admin
from nightbase.database import get_db
from nightbase.models.user import User
from nightbase.schemas.table import DashboardCountsResponse
from nightbase.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("/counts", response_model=DashboardCountsResponse)
async def get_counts(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> DashboardCountsResponse:
    """카테고리별 테이블 건수 조회."""
    return await dashboard_service.get_counts(db)


@router.get("/export")
async def export_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> StreamingResponse:
    """대시보드 집계를 Excel 파일로 내보냅니다."""
    excel_bytes: bytes = await dashboard_service.export_excel(db)
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=dashboard_export.xlsx"},
    )
