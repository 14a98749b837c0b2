"""관리자 매장 라우터 — 매장 CRUD 엔드포인트.

Admin Store Router — CRUD endpoints for store (tenant) management.
Platform administrators only.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import require_platform_admin
from nightbase.database import get_db
from nightbase.models.user import User
from nightbase.schemas.common import PaginatedResponse
from nightbase.schemas.store import StoreCreate, StoreResponse, StoreUpdate
from nightbase.services.store_service import store_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_stores(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
    search: Annotated[str | None, Query()] = None,
) -> dict:
    """매장 목록을 조회합니다 (이름 검색, 페이지네이션).

    List stores with an optional name search.
    """
    return await store_service.list_stores(db, page, per_page, search)


@router.get("/{store_id}", response_model=StoreResponse)
async def get_store(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> StoreResponse:
    return await store_service.get_store(db, store_id)


@router.post("", response_model=StoreResponse, status_code=201)
async def create_store(
    data: StoreCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> StoreResponse:
    """새 매장을 생성합니다 — 이름 중복 시 409."""
    result: StoreResponse = await store_service.create_store(db, data)
    await db.commit()
    return result


@router.put("/{store_id}", response_model=StoreResponse)
async def update_store(
    store_id: UUID,
    data: StoreUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> StoreResponse:
    """매장 정보를 수정합니다 (부분 업데이트)."""
    result: StoreResponse = await store_service.update_store(db, store_id, data)
    await db.commit()
    return result


@router.delete("/{store_id}", status_code=204)
async def delete_store(
    store_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_platform_admin)],
) -> None:
    """매장을 삭제합니다 — 하위 데이터는 CASCADE 로 함께 삭제."""
    await store_service.delete_store(db, store_id)
    await db.commit()
