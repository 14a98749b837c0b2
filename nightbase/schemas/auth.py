"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, token issuance/refresh, profile switching and current user info.
"""

from pydantic import BaseModel

from nightbase.schemas.common import UUIDStr


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema shared by admin and app authentication.
    Admin login additionally requires ``users.is_admin``.

    Attributes:
        email: 로그인 이메일 (Login email, case-insensitive)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    email: str  # 로그인 이메일 (Login email)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after successful login, token refresh or profile switch.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str  # JWT 액세스 토큰 — 만료: 30분 기본 (Access token, default TTL: 30min)
    refresh_token: str  # JWT 리프레시 토큰 — 만료: 7일 기본 (Refresh token, default TTL: 7 days)
    token_type: str = "bearer"  # 토큰 유형 — 항상 "bearer" (Token type for Authorization header)


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마 — Carries the current refresh token."""

    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)


class SwitchProfileRequest(BaseModel):
    """프로필 전환 요청 스키마 — The profile must belong to the caller."""

    profile_id: UUIDStr  # 전환할 프로필 UUID (Target profile UUID)


class ProfileSummary(BaseModel):
    """/me 응답에 포함되는 프로필 요약.

    Profile summary embedded in the /me response.
    """

    id: str  # 프로필 UUID 문자열 (Profile UUID as string)
    store_id: str  # 매장 UUID 문자열 (Store UUID as string)
    store_name: str  # 매장 이름 (Store name)
    display_name: str  # 표시 이름 (Display name)
    role: str  # 매장 역할 — guest|cast|staff|admin (Store role)


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /me).

    Current user info response schema for the /me endpoint.

    Attributes:
        id: 사용자 UUID (User unique identifier)
        email: 이메일 (Login email)
        display_name: 표시 이름 (Display name, nullable)
        is_admin: 플랫폼 관리자 여부 (Platform administrator flag)
        current_profile: 현재 프로필 (Active profile, null when none selected)
        profiles: 보유 프로필 목록 (All profiles of the user)
    """

    id: str
    email: str
    display_name: str | None
    is_admin: bool
    current_profile: ProfileSummary | None
    profiles: list[ProfileSummary] = []
