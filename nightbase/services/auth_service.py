"""인증 서비스 — 로그인, 토큰 갱신, 프로필 전환 비즈니스 로직.

Auth Service — Business logic for login, token refresh and profile switch.
Handles admin/app login separation, JWT token lifecycle, and current user
retrieval with all owned profiles.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.config import settings
from nightbase.models.user import Profile, User
from nightbase.repositories.auth_repository import auth_repository
from nightbase.schemas.auth import (
    LoginRequest,
    ProfileSummary,
    RefreshRequest,
    TokenResponse,
    UserMeResponse,
)
from nightbase.utils.exceptions import ForbiddenError, NotFoundError, UnauthorizedError
from nightbase.utils.jwt import create_access_token, create_refresh_token, decode_token
from nightbase.utils.password import verify_password
from nightbase.utils.timezone import ensure_utc


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Manages admin/app login flows, token refresh, profile switch and logout.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str | bool]:
        """JWT 토큰 페이로드를 생성합니다.

        Build the JWT token payload from the user row.

        Args:
            user: 사용자 모델 (User model instance)

        Returns:
            dict[str, str | bool]: JWT 페이로드 딕셔너리 (JWT payload dictionary)
        """
        payload: dict[str, str | bool] = {"sub": str(user.id), "admin": user.is_admin}
        if user.current_profile_id is not None:
            payload["profile"] = str(user.current_profile_id)
        return payload

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate access and refresh token pair for a user and persist the
        refresh token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 사용자 모델 (User model instance)

        Returns:
            TokenResponse: 토큰 응답 (Token response with access and refresh tokens)
        """
        payload: dict[str, str | bool] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        # 리프레시 토큰을 DB에 저장 — Persist refresh token to database
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def _authenticate(self, db: AsyncSession, data: LoginRequest) -> User:
        """이메일/비밀번호 검증 — Shared credential check for both logins."""
        user: User | None = await auth_repository.get_user_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")

        if not user.is_active:
            raise UnauthorizedError("Account is deactivated")
        return user

    async def app_login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """앱 로그인을 처리합니다.

        Process app login. When the user has no current profile yet, the
        oldest owned profile is selected.

        Raises:
            UnauthorizedError: 잘못된 인증 정보 또는 비활성 계정
                               (Invalid credentials or deactivated account)
        """
        user: User = await self._authenticate(db, data)

        if user.current_profile_id is None:
            profiles: list[Profile] = await auth_repository.get_user_profiles(db, user.id)
            if profiles:
                user.current_profile_id = profiles[0].id
                await db.flush()

        return await self._generate_tokens(db, user)

    async def admin_login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """관리자 로그인을 처리합니다.

        Process admin login. Only platform administrators may sign in.

        Raises:
            UnauthorizedError: 잘못된 인증 정보일 때 (Invalid credentials)
            ForbiddenError: 플랫폼 관리자가 아닐 때 (Not a platform admin)
        """
        user: User = await self._authenticate(db, data)
        if not user.is_admin:
            raise ForbiddenError("Admin access required")
        return await self._generate_tokens(db, user)

    async def refresh_tokens(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Issue a new token pair using a refresh token. The presented token is
        revoked (rotation).

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰일 때
                               (Invalid or expired refresh token)
        """
        # DB에서 리프레시 토큰 확인 — Verify refresh token in database
        db_token = await auth_repository.get_refresh_token(db, data.refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")

        # 만료 확인 — Check expiration
        if ensure_utc(db_token.expires_at) < datetime.now(timezone.utc):
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Refresh token has expired")

        # JWT 디코딩으로 사용자 정보 추출 — Extract user info from JWT
        try:
            payload: dict = decode_token(data.refresh_token)
        except Exception:
            await auth_repository.delete_refresh_token(db, data.refresh_token)
            raise UnauthorizedError("Invalid refresh token")

        user_id: str | None = payload.get("sub")
        if user_id is None or payload.get("type") != "refresh":
            raise UnauthorizedError("Invalid refresh token payload")

        result = await db.execute(select(User).where(User.id == UUID(user_id)))
        user: User | None = result.scalar_one_or_none()

        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")

        # 기존 리프레시 토큰 삭제 후 새 토큰 발급 — Delete old token and issue new pair
        await auth_repository.delete_refresh_token(db, data.refresh_token)
        return await self._generate_tokens(db, user)

    async def logout(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> None:
        """로그아웃 처리 — 리프레시 토큰을 삭제합니다."""
        await auth_repository.delete_refresh_token(db, refresh_token)

    async def switch_profile(
        self,
        db: AsyncSession,
        user: User,
        profile_id: UUID,
    ) -> TokenResponse:
        """현재 프로필을 전환하고 새 토큰 쌍을 발급합니다.

        Switch the user's current profile and issue a fresh token pair.

        Raises:
            NotFoundError: 사용자 소유 프로필이 아닐 때 (Profile not owned by the user)
        """
        result = await db.execute(
            select(Profile).where(Profile.id == profile_id, Profile.user_id == user.id)
        )
        profile: Profile | None = result.scalar_one_or_none()
        if profile is None:
            raise NotFoundError("Profile not found")

        user.current_profile_id = profile.id
        await db.flush()
        return await self._generate_tokens(db, user)

    async def get_me(
        self,
        db: AsyncSession,
        user: User,
    ) -> UserMeResponse:
        """현재 로그인한 사용자 정보와 프로필 목록을 반환합니다.

        Return the authenticated user with the current profile and every
        owned profile (including store names).
        """
        profiles: list[Profile] = await auth_repository.get_user_profiles(db, user.id)
        summaries: list[ProfileSummary] = [
            ProfileSummary(
                id=str(p.id),
                store_id=str(p.store_id),
                store_name=p.store.name,
                display_name=p.display_name,
                role=p.role,
            )
            for p in profiles
        ]
        current: ProfileSummary | None = next(
            (s for s in summaries if s.id == str(user.current_profile_id)), None
        )

        return UserMeResponse(
            id=str(user.id),
            email=user.email,
            display_name=user.display_name,
            is_admin=user.is_admin,
            current_profile=current,
            profiles=summaries,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
