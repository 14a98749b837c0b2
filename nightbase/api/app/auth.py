"""앱 인증 라우터 — 이메일/비밀번호 로그인.

App Auth Router — Login for store members. Refresh, logout, me and
profile switching are shared in nightbase.api.auth.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.database import get_db
from nightbase.schemas.auth import LoginRequest, TokenResponse
from nightbase.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def app_login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """앱 로그인 — 비활성 계정은 401.

    App login endpoint. Selects the first owned profile when none is active.
    """
    result: TokenResponse = await auth_service.app_login(db, data)
    await db.commit()
    return result
