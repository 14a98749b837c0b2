"""앱 매장 라우터 — 현재 프로필의 매장 정보.

App Store Router — The store of the caller's active profile.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import get_current_profile
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.store import StoreResponse
from nightbase.services.store_service import store_service

router: APIRouter = APIRouter()


@router.get("", response_model=StoreResponse)
async def get_current_store(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> StoreResponse:
    """현재 매장 조회."""
    return await store_service.get_store(db, profile.store_id)
