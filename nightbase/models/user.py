"""사용자 및 프로필 관련 SQLAlchemy ORM 모델 정의.

User and Profile SQLAlchemy ORM model definitions.
A ``User`` is a login identity; a ``Profile`` is a person inside one store
with a store-level role. One user may hold profiles in several stores and
works through whichever one is selected as ``current_profile_id``.
Guest profiles usually have no user at all.

Tables:
    - users: 로그인 계정 (Login identities)
    - profiles: 매장 내 인물 (People within a store: guest/cast/staff/admin)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nightbase.database import Base

# 프로필 역할 — Store-level roles, least to most privileged
PROFILE_ROLES: tuple[str, ...] = ("guest", "cast", "staff", "admin")
# 관리 권한 역할 — Roles allowed to manage store data
MANAGER_ROLES: tuple[str, ...] = ("staff", "admin")


class User(Base):
    """사용자 모델 — 로그인 계정 정보.

    User model — Login identity.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        email: 로그인 이메일 (Login email, globally unique)
        display_name: 표시 이름 (Display name)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        avatar_url: 아바타 이미지 URL (Avatar image URL)
        is_admin: 플랫폼 관리자 여부 (Platform administrator flag)
        is_active: 활성 상태 (Active status)
        current_profile_id: 현재 선택된 프로필 (Currently selected profile id)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        profiles: 이 사용자의 프로필 목록 (Profiles owned by this user)
        refresh_tokens: 리프레시 토큰 목록 (Active refresh tokens, cascade delete)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 이메일 — Login email (전체 고유, unique)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 표시 이름 — Display name
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 아바타 — Avatar image URL
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 플랫폼 관리자 — Grants access to /api/v1/admin
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    # 활성 상태 — Whether the account may log in
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 현재 프로필 — Selected profile (FK 없음: users ↔ profiles 순환 참조 회피)
    current_profile_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    profiles = relationship("Profile", back_populates="user")
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")


class Profile(Base):
    """프로필 모델 — 매장 내 인물(게스트/캐스트/스태프/관리자).

    Profile model — A person within a store.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        user_id: 로그인 계정 FK, 게스트는 보통 None (Owning user, usually None for guests)
        display_name: 표시 이름 (Display name, e.g. 源氏名 for cast)
        display_name_kana: 표시 이름 가나 (Reading of the display name)
        real_name: 본명 (Real name)
        role: 매장 역할 (guest | cast | staff | admin)
        phone_number: 전화번호 (Phone number)
        status: 재적 상태 (Employment status, e.g. "在籍中")
        avatar_url: 아바타 URL (Avatar image URL)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "profiles"

    # 프로필 고유 식별자 — Profile unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store (CASCADE: 매장 삭제 시 프로필도 삭제)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    # 로그인 계정 FK — Owning user (SET NULL: 계정 삭제 시 프로필은 유지)
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    # 표시 이름 — Display name
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 표시 이름 가나 — Kana reading for sorting/search
    display_name_kana: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 본명 — Real name (관리자만 열람, staff/admin only)
    real_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 매장 역할 — "guest" | "cast" | "staff" | "admin"
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="cast")
    # 전화번호 — Phone number
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 재적 상태 — Employment status label
    status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 아바타 — Avatar image URL
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_profiles_store_role", "store_id", "role"),
    )

    # 관계 — Relationships
    store = relationship("Store", back_populates="profiles")
    user = relationship("User", back_populates="profiles")
