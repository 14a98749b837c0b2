"""매장 관련 SQLAlchemy ORM 모델 정의.

Store SQLAlchemy ORM model definition.
A store (venue) is the tenant root: every other business row carries a
``store_id`` and is deleted together with its store.

Tables:
    - stores: 매장(테넌트) (Venue / tenant root)
"""

import uuid
from datetime import datetime, time, timezone

from sqlalchemy import Boolean, DateTime, Integer, String, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nightbase.database import Base


class Store(Base):
    """매장 모델 — 멀티테넌트의 최상위 엔티티.

    Store model — Top-level tenant entity.
    Holds venue metadata and the monthly AI credit balance used by the
    product image generator.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 매장 이름 (Store display name, unique)
        industry: 업종 (Industry, e.g. "キャバクラ")
        prefecture: 도도부현 (Prefecture)
        city: 시구정촌 (City)
        business_start_time: 영업 시작 시각 (Opening time)
        business_end_time: 영업 종료 시각 (Closing time)
        is_active: 활성 상태 (Active status flag)
        ai_credits: 남은 AI 생성 크레딧 (Remaining AI generation credits)
        ai_credits_reset_at: 크레딧 마지막 초기화 일시 (Last credit reset timestamp)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        profiles: 매장 소속 프로필 목록 (Profiles in this store, cascade delete)
    """

    __tablename__ = "stores"

    # 매장 고유 식별자 — Store unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 매장 이름 — Store display name (전체 고유, unique across the platform)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    # 업종 — Industry label shown in admin screens
    industry: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # 도도부현 — Prefecture (e.g. "東京都")
    prefecture: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 시구정촌 — City / ward
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # 영업 시작/종료 시각 — Business hours (local wall clock)
    business_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    business_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    # 활성 상태 — Whether the store is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # AI 크레딧 — Remaining image generation credits for this month
    ai_credits: Mapped[int] = mapped_column(Integer, default=30)
    # 크레딧 초기화 일시 — When credits were last reset (월 단위 초기화 판정용)
    ai_credits_reset_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    profiles = relationship("Profile", back_populates="store", cascade="all, delete-orphan")
