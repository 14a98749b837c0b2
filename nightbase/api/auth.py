"""공통 인증 라우터 — 토큰 갱신, 로그아웃, 내 정보, 프로필 전환.

Common Auth Router — Token refresh, logout, current user and profile
switching. Shared by both admin and app clients.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import get_current_user
from nightbase.database import get_db
from nightbase.models.user import User
from nightbase.schemas.auth import RefreshRequest, SwitchProfileRequest, TokenResponse, UserMeResponse
from nightbase.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """로그아웃 — 리프레시 토큰 폐기."""
    await auth_service.logout(db, data.refresh_token)
    await db.commit()


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    """현재 사용자와 보유 프로필 목록 조회."""
    return await auth_service.get_me(db, current_user)


@router.post("/switch-profile", response_model=TokenResponse)
async def switch_profile(
    data: SwitchProfileRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> TokenResponse:
    """활성 프로필 전환 — 본인 소유 프로필만 가능.

    Switch the active profile and issue a new token pair.
    """
    result: TokenResponse = await auth_service.switch_profile(db, current_user, UUID(data.profile_id))
    await db.commit()
    return result
