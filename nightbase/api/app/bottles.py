"""앱 보틀 킵 라우터 — 보틀 킵 조회 및 관리.

App Bottle Keep Router — Bottle keeps of the caller's store. Reads are
open to every profile; mutations require staff or admin.
"""

from typing import Annotated, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import get_current_profile, require_manager
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.bottle import BottleKeepCreate, BottleKeepResponse, BottleKeepUpdate
from nightbase.services.bottle_service import bottle_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[BottleKeepResponse])
async def list_bottles(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
    remaining: Annotated[Literal["empty", "low", "half", "full"] | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
) -> list[BottleKeepResponse]:
    """보틀 킵 목록 — 잔량 필터와 메뉴명/소유자명 검색."""
    return await bottle_service.list_bottles(db, profile.store_id, remaining, search)


@router.get("/{bottle_id}", response_model=BottleKeepResponse)
async def get_bottle(
    bottle_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> BottleKeepResponse:
    return await bottle_service.get_bottle(db, profile.store_id, bottle_id)


@router.post("", response_model=BottleKeepResponse, status_code=201)
async def create_bottle(
    data: BottleKeepCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> BottleKeepResponse:
    """보틀 킵 생성 — 소유자는 같은 매장 프로필이어야 함."""
    result: BottleKeepResponse = await bottle_service.create_bottle(db, manager.store_id, data)
    await db.commit()
    return result


@router.put("/{bottle_id}", response_model=BottleKeepResponse)
async def update_bottle(
    bottle_id: UUID,
    data: BottleKeepUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> BottleKeepResponse:
    """보틀 킵 수정 — holder_profile_ids 를 주면 소유자 전체 교체."""
    result: BottleKeepResponse = await bottle_service.update_bottle(db, manager.store_id, bottle_id, data)
    await db.commit()
    return result


@router.delete("/{bottle_id}", status_code=204)
async def delete_bottle(
    bottle_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await bottle_service.delete_bottle(db, manager.store_id, bottle_id)
    await db.commit()
