"""프로필 관련 Pydantic 요청/응답 스키마 정의.

Profile Pydantic request/response schema definitions.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

# 프로필 역할 — Store-level role literal
ProfileRole = Literal["guest", "cast", "staff", "admin"]


class ProfileCreate(BaseModel):
    """프로필 생성 요청 스키마.

    Profile creation request schema (staff/admin only).
    Guests are created without a login user.

    Attributes:
        display_name: 표시 이름 (Display name)
        display_name_kana: 표시 이름 가나 (Kana reading, optional)
        real_name: 본명 (Real name, optional)
        role: 매장 역할 (Store role, default "cast")
        phone_number: 전화번호 (Phone number, optional)
        status: 재적 상태 (Employment status label, optional)
        avatar_url: 아바타 URL (Avatar image URL, optional)
    """

    display_name: str = Field(..., min_length=1)  # 표시 이름 (Display name)
    display_name_kana: str | None = None  # 가나 읽기 (Kana reading)
    real_name: str | None = None  # 본명 (Real name)
    role: ProfileRole = "cast"  # 매장 역할 (Store role)
    phone_number: str | None = None  # 전화번호 (Phone number)
    status: str | None = None  # 재적 상태 (Employment status)
    avatar_url: str | None = None  # 아바타 URL (Avatar URL)


class ProfileUpdate(BaseModel):
    """프로필 수정 요청 스키마 (부분 업데이트) — Partial update by a manager."""

    display_name: str | None = Field(default=None, min_length=1)
    display_name_kana: str | None = None
    real_name: str | None = None
    role: ProfileRole | None = None
    phone_number: str | None = None
    status: str | None = None
    avatar_url: str | None = None


class MyProfileUpdate(BaseModel):
    """내 프로필 수정 요청 스키마.

    Self-service update of the caller's own display fields. Role and
    status stay manager-controlled.
    """

    display_name: str | None = Field(default=None, min_length=1)  # 표시 이름 (Display name)
    display_name_kana: str | None = None  # 가나 읽기 (Kana reading)
    phone_number: str | None = None  # 전화번호 (Phone number)
    avatar_url: str | None = None  # 아바타 URL (Avatar URL)


class ProfileResponse(BaseModel):
    """프로필 응답 스키마 — Profile response schema."""

    id: str  # 프로필 UUID 문자열 (Profile UUID as string)
    store_id: str  # 매장 UUID 문자열 (Store UUID as string)
    user_id: str | None  # 로그인 계정 UUID — 게스트는 None (Owning user, None for guests)
    display_name: str
    display_name_kana: str | None
    real_name: str | None
    role: str  # guest|cast|staff|admin
    phone_number: str | None
    status: str | None
    avatar_url: str | None
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)
