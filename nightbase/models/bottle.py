"""보틀 킵 관련 SQLAlchemy ORM 모델 정의.

Bottle keep SQLAlchemy ORM model definitions.
A bottle keep is a guest's opened bottle stored at the venue for later
visits; holders are the guest profiles allowed to drink from it.

Tables:
    - bottle_keeps: 보틀 킵 (Kept bottles with remaining-amount gauge)
    - bottle_keep_holders: 보틀 소유자 (Guest profiles holding a bottle)
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nightbase.database import Base


class BottleKeep(Base):
    """보틀 킵 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        menu_id: 보틀 메뉴 FK (Menu item of the bottle)
        remaining_amount: 남은 양 % (Remaining amount, 0-100)
        opened_at: 개봉 일시 (When the bottle was opened)
        expiration_date: 보관 기한 (Keep expiration date)
        memo: 메모 (Free text memo)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        menu: 보틀 메뉴 (Menu item)
        holders: 소유자 연결 목록 (Holder links, cascade delete)
    """

    __tablename__ = "bottle_keeps"

    # 보틀 고유 식별자 — Bottle keep unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    # 보틀 메뉴 FK — Menu item of the bottle (메뉴 삭제 시 보틀도 삭제)
    menu_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False)
    # 남은 양 — Remaining amount in percent (100 = unopened gauge)
    remaining_amount: Mapped[int] = mapped_column(Integer, default=100)
    # 개봉 일시 — Opened at (UTC)
    opened_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 보관 기한 — Expiration date of the keep (optional)
    expiration_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    # 메모 — Memo
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    menu = relationship("Menu")
    holders = relationship("BottleKeepHolder", back_populates="bottle_keep", cascade="all, delete-orphan")


class BottleKeepHolder(Base):
    """보틀 소유자 연결 모델 — Bottle ↔ guest profile link."""

    __tablename__ = "bottle_keep_holders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 보틀 FK — Bottle keep
    bottle_keep_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("bottle_keeps.id", ondelete="CASCADE"), nullable=False)
    # 소유자 프로필 FK — Holder profile (주로 guest)
    profile_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("bottle_keep_id", "profile_id", name="uq_bottle_keep_holder"),
    )

    bottle_keep = relationship("BottleKeep", back_populates="holders")
    profile = relationship("Profile")
