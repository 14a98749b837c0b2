"""FastAPI 의존성 주입 모듈 — 인증, 프로필 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Provides reusable dependencies for extracting the current user and active
profile from JWT and enforcing role-based access control on API endpoints.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    3. 페이로드의 "sub" 필드로 DB에서 사용자를 조회, 활성 상태 확인
       (User is fetched by "sub" and must be active)

Profile Flow (get_current_profile):
    1. users.current_profile_id 로 프로필 조회 (Profile loaded from the user row)
    2. 프로필이 사용자 소유인지 확인 (Profile must belong to the user)
    3. 이후 모든 앱 엔드포인트는 profile.store_id 범위로 동작
       (Every app endpoint is scoped to profile.store_id)
"""

from typing import Annotated, Awaitable, Callable
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.config import settings
from nightbase.database import get_db
from nightbase.models.user import MANAGER_ROLES, Profile, User
from nightbase.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — Authorization 헤더에서 JWT 토큰 추출
# (Extracts JWT token from Authorization: Bearer <token> header)
security: HTTPBearer = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.

    Raises:
        HTTPException(401): 토큰이 유효하지 않거나 만료됨 (Invalid or expired token)
        HTTPException(401): 사용자를 찾을 수 없거나 비활성 (User not found or inactive)
    """
    try:
        payload: dict = decode_token(credentials.credentials)
        # 토큰 타입 검증 — Reject refresh tokens used as access tokens
        if payload.get("type") != "access":
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")
        user_id: str | None = payload.get("sub")
        if user_id is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        user_uuid: UUID = UUID(user_id)
    except HTTPException:
        raise
    except (jwt.ExpiredSignatureError, jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    result = await db.execute(select(User).where(User.id == user_uuid))
    user: User | None = result.scalar_one_or_none()

    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return user


async def get_current_profile(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile:
    """현재 사용자가 선택한 프로필을 반환합니다.

    Return the user's currently selected profile.

    Raises:
        HTTPException(403): 선택된 프로필이 없거나 사용자 소유가 아님
                            (No current profile, or it no longer belongs to the user)
    """
    if current_user.current_profile_id is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No active profile")

    result = await db.execute(
        select(Profile).where(
            Profile.id == current_user.current_profile_id,
            Profile.user_id == current_user.id,
        )
    )
    profile: Profile | None = result.scalar_one_or_none()
    if profile is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No active profile")
    return profile


def require_roles(*roles: str) -> Callable[..., Awaitable[Profile]]:
    """매장 역할 기반 권한 검사 의존성 팩토리.

    Dependency factory enforcing that the current profile has one of
    ``roles``.

    Args:
        roles: 허용되는 역할 목록 (Allowed store roles)

    Returns:
        FastAPI 의존성 함수 — 프로필 반환 또는 403 발생
        (FastAPI dependency returning the Profile or raising 403)
    """
    async def _check(
        profile: Annotated[Profile, Depends(get_current_profile)],
    ) -> Profile:
        if profile.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return profile
    return _check


# 편의 의존성 — 매장 관리 권한 (staff 또는 admin)
require_manager = require_roles(*MANAGER_ROLES)


async def require_platform_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """플랫폼 관리자만 허용 — Allow only users flagged ``is_admin``."""
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


async def verify_cron_secret(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> None:
    """크론 호출 인증 — Bearer token must equal ``CRON_SECRET``.

    An empty secret disables the endpoint entirely.
    """
    if not settings.CRON_SECRET or credentials.credentials != settings.CRON_SECRET:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid cron secret")
