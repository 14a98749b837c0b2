"""앱 프로필 라우터 — 내 프로필 및 매장 프로필 관리.

App Profile Router — The caller's own profile (GET/PUT /profile) and the
store's profile list. Creating, editing and deleting other profiles
requires the staff or admin role.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import get_current_profile, require_manager
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.profile import MyProfileUpdate, ProfileCreate, ProfileResponse, ProfileUpdate
from nightbase.services.profile_service import profile_service

router: APIRouter = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_my_profile(
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> ProfileResponse:
    """내 프로필 조회."""
    return profile_service.get_my_profile(profile)


@router.put("/profile", response_model=ProfileResponse)
async def update_my_profile(
    data: MyProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> ProfileResponse:
    """내 프로필 수정 — 표시 항목만 (display fields only)."""
    result: ProfileResponse = await profile_service.update_my_profile(db, profile, data)
    await db.commit()
    return result


@router.get("/profiles", response_model=list[ProfileResponse])
async def list_profiles(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
    role: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
) -> list[ProfileResponse]:
    """매장 프로필 목록 (역할 필터, 이름 검색)."""
    return await profile_service.list_profiles(db, profile.store_id, role, search)


@router.get("/profiles/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> ProfileResponse:
    return await profile_service.get_profile(db, profile.store_id, profile_id)


@router.post("/profiles", response_model=ProfileResponse, status_code=201)
async def create_profile(
    data: ProfileCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> ProfileResponse:
    """프로필 생성 — 게스트 등 로그인 없는 프로필 (no linked user)."""
    result: ProfileResponse = await profile_service.create_profile(db, manager.store_id, data)
    await db.commit()
    return result


@router.put("/profiles/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: UUID,
    data: ProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> ProfileResponse:
    result: ProfileResponse = await profile_service.update_profile(db, manager.store_id, profile_id, data)
    await db.commit()
    return result


@router.delete("/profiles/{profile_id}", status_code=204)
async def delete_profile(
    profile_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    """프로필 삭제 — 자기 자신은 삭제 불가 (400)."""
    await profile_service.delete_profile(db, manager.store_id, profile_id, manager)
    await db.commit()
