"""관리자 인증 라우터 — 플랫폼 관리자 로그인.

Admin Auth Router — Login for platform administrators (``users.is_admin``).
Common endpoints (refresh, logout, me) are in nightbase.api.auth.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.database import get_db
from nightbase.schemas.auth import LoginRequest, TokenResponse
from nightbase.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def admin_login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """관리자 로그인 — 플랫폼 관리자가 아니면 403.

    Admin login endpoint. Rejects users without the admin flag.
    """
    result: TokenResponse = await auth_service.admin_login(db, data)
    await db.commit()
    return result
