"""앱 코멘트 라우터 — 대상별 코멘트 및 좋아요.

App Comment Router — Comments attached to bottle keeps, menus, profiles,
shift submissions and work records, with per-profile likes. Every
profile of the store may read and write; only authors edit or delete.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import get_current_profile
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentTargetType,
    CommentUpdate,
    LikeToggleResponse,
)
from nightbase.services.comment_service import comment_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[CommentResponse])
async def list_comments(
    target_type: Annotated[CommentTargetType, Query()],
    target_id: Annotated[UUID, Query()],
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> list[CommentResponse]:
    """대상의 코멘트 목록 (작성순)."""
    return await comment_service.list_comments(db, profile, target_type, target_id)


@router.post("", response_model=CommentResponse, status_code=201)
async def create_comment(
    data: CommentCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> CommentResponse:
    result: CommentResponse = await comment_service.create_comment(db, profile, data)
    await db.commit()
    return result


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: UUID,
    data: CommentUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> CommentResponse:
    """코멘트 수정 — 작성자만 (author only)."""
    result: CommentResponse = await comment_service.update_comment(db, profile, comment_id, data)
    await db.commit()
    return result


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> None:
    await comment_service.delete_comment(db, profile, comment_id)
    await db.commit()


@router.post("/{comment_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    comment_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> LikeToggleResponse:
    """좋아요 토글."""
    result: LikeToggleResponse = await comment_service.toggle_like(db, profile, comment_id)
    await db.commit()
    return result
