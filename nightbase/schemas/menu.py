"""메뉴 관련 Pydantic 요청/응답 스키마 정의.

Menu and menu category Pydantic request/response schema definitions.
Prices are whole yen and never negative.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from nightbase.schemas.common import UUIDStr

# 주문 대상 — Who orders the item
MenuTargetType = Literal["guest", "cast"]


# === 메뉴 카테고리 (Menu category) 스키마 ===

class MenuCategoryCreate(BaseModel):
    """메뉴 카테고리 생성 요청 스키마 — Name is unique per store."""

    name: str = Field(..., min_length=1)  # 카테고리 이름 (Category name)
    sort_order: int = 0  # 정렬 순서 (Display order)


class MenuCategoryUpdate(BaseModel):
    """메뉴 카테고리 수정 요청 스키마 (부분 업데이트)."""

    name: str | None = Field(default=None, min_length=1)
    sort_order: int | None = None


class MenuCategoryResponse(BaseModel):
    """메뉴 카테고리 응답 스키마."""

    id: str  # 카테고리 UUID 문자열 (Category UUID as string)
    name: str
    sort_order: int
    menu_count: int = 0  # 소속 메뉴 수 (Number of menus in the category)


# === 메뉴 (Menu) 스키마 ===

class MenuCreate(BaseModel):
    """메뉴 생성 요청 스키마.

    Menu creation request schema.

    Attributes:
        name: 메뉴 이름 (Menu name, non-blank)
        price: 가격(엔) (Price in yen, >= 0)
        category_id: 카테고리 UUID (Category, optional)
        target_type: 주문 대상 (guest | cast)
        cast_back_amount: 캐스트 백 금액 (Cast commission, >= 0)
        hide_from_slip: 전표 비표시 (Hide from the bill slip)
        image_url: 이미지 URL (Image URL, optional)
    """

    name: str = Field(..., min_length=1)  # 메뉴 이름 (Menu name)
    price: int = Field(..., ge=0)  # 가격 — 엔 단위 (Price in yen)
    category_id: UUIDStr | None = None  # 카테고리 UUID (Category UUID)
    target_type: MenuTargetType = "guest"  # 주문 대상 (Order target)
    cast_back_amount: int = Field(default=0, ge=0)  # 캐스트 백 (Cast commission)
    hide_from_slip: bool = False  # 전표 비표시 (Hidden from slip)
    image_url: str | None = None  # 이미지 URL (Image URL)


class MenuUpdate(BaseModel):
    """메뉴 수정 요청 스키마 (부분 업데이트) — Partial update."""

    name: str | None = Field(default=None, min_length=1)
    price: int | None = Field(default=None, ge=0)
    category_id: UUIDStr | None = None
    target_type: MenuTargetType | None = None
    cast_back_amount: int | None = Field(default=None, ge=0)
    hide_from_slip: bool | None = None
    image_url: str | None = None


class MenuResponse(BaseModel):
    """메뉴 응답 스키마 — Menu response with resolved category name."""

    id: str  # 메뉴 UUID 문자열 (Menu UUID as string)
    name: str
    price: int
    category_id: str | None
    category_name: str | None  # 카테고리 이름 — 조인된 값 (Category name, resolved)
    target_type: str
    cast_back_amount: int
    hide_from_slip: bool
    image_url: str | None
    created_at: datetime


class MenuBulkItem(BaseModel):
    """일괄 등록 항목 — One item of a bulk import, category given by name."""

    name: str = Field(..., min_length=1)  # 메뉴 이름 (Menu name)
    price: int = Field(..., ge=0)  # 가격 (Price in yen)
    category: str | None = None  # 카테고리 이름 — 없으면 생성 (Category name, created when missing)


class MenuBulkCreate(BaseModel):
    """메뉴 일괄 생성 요청 스키마.

    Bulk menu creation request, typically fed from AI menu extraction.
    All items are created in a single transaction.
    """

    items: list[MenuBulkItem] = Field(..., min_length=1)  # 등록할 항목 목록 (Items to create, at least 1)
