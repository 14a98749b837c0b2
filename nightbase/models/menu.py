"""메뉴 관련 SQLAlchemy ORM 모델 정의.

Menu SQLAlchemy ORM model definitions.

Tables:
    - menu_categories: 메뉴 카테고리 (Menu categories per store, ordered)
    - menus: 메뉴 항목 (Menu items with yen price)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nightbase.database import Base


class MenuCategory(Base):
    """메뉴 카테고리 모델.

    Menu category model — Groups menus and fixes their display order.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        name: 카테고리 이름 (Category name, unique per store)
        sort_order: 정렬 순서 (Display order, ascending)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "menu_categories"

    # 카테고리 고유 식별자 — Category unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    # 카테고리 이름 — Category name (e.g. "ボトル", "シャンパン")
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 정렬 순서 — Display order (0 = first)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("store_id", "name", name="uq_menu_category_store_name"),
    )

    menus = relationship("Menu", back_populates="category")


class Menu(Base):
    """메뉴 항목 모델.

    Menu item model. Prices are whole yen.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        category_id: 카테고리 FK (Category, nullable when the category is removed)
        name: 메뉴 이름 (Menu name)
        price: 가격(엔) (Price in yen)
        target_type: 주문 대상 (Who orders it: "guest" | "cast")
        cast_back_amount: 캐스트 백 금액 (Cast commission per order, yen)
        hide_from_slip: 전표 비표시 (Hidden from the bill slip)
        image_url: 이미지 URL (Menu image URL)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "menus"

    # 메뉴 고유 식별자 — Menu unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    # 카테고리 FK — SET NULL: 카테고리 삭제 시 메뉴는 미분류로 유지
    category_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("menu_categories.id", ondelete="SET NULL"), nullable=True)
    # 메뉴 이름 — Menu name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 가격 — Price in yen (0 이상)
    price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 주문 대상 — "guest" | "cast"
    target_type: Mapped[str] = mapped_column(String(20), default="guest")
    # 캐스트 백 — Commission paid to the cast per order
    cast_back_amount: Mapped[int] = mapped_column(Integer, default=0)
    # 전표 비표시 — Hide from the printed slip
    hide_from_slip: Mapped[bool] = mapped_column(Boolean, default=False)
    # 이미지 URL — Product image (uploaded or AI generated)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    category = relationship("MenuCategory", back_populates="menus")
