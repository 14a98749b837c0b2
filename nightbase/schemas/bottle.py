"""보틀 킵 관련 Pydantic 요청/응답 스키마 정의.

Bottle keep Pydantic request/response schema definitions.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from nightbase.schemas.common import UUIDStr


class BottleKeepCreate(BaseModel):
    """보틀 킵 생성 요청 스키마.

    Bottle keep creation request schema.

    Attributes:
        menu_id: 보틀 메뉴 UUID (Menu item of the bottle)
        remaining_amount: 남은 양 % (Remaining amount 0-100, default 100)
        opened_at: 개봉 일시 (Opened at, default now)
        expiration_date: 보관 기한 (Keep expiration date, optional)
        memo: 메모 (Memo, optional)
        holder_profile_ids: 소유자 프로필 UUID 목록 (Holder profiles)
    """

    menu_id: UUIDStr  # 보틀 메뉴 UUID (Menu UUID)
    remaining_amount: int = Field(default=100, ge=0, le=100)  # 남은 양 (Remaining %, 0-100)
    opened_at: datetime | None = None  # 개봉 일시 — 생략 시 현재 (Defaults to now)
    expiration_date: date | None = None  # 보관 기한 (Expiration date)
    memo: str | None = None  # 메모 (Memo)
    holder_profile_ids: list[UUIDStr] = []  # 소유자 프로필 목록 (Holder profile UUIDs)


class BottleKeepUpdate(BaseModel):
    """보틀 킵 수정 요청 스키마 (부분 업데이트).

    ``holder_profile_ids`` replaces all holders when given.
    """

    menu_id: UUIDStr | None = None
    remaining_amount: int | None = Field(default=None, ge=0, le=100)
    opened_at: datetime | None = None
    expiration_date: date | None = None
    memo: str | None = None
    holder_profile_ids: list[UUIDStr] | None = None  # 지정 시 소유자 전체 교체 (Replaces holders when set)


class BottleHolderResponse(BaseModel):
    """보틀 소유자 응답 스키마."""

    profile_id: str  # 소유자 프로필 UUID (Holder profile UUID)
    display_name: str  # 소유자 표시 이름 (Holder display name)


class BottleKeepResponse(BaseModel):
    """보틀 킵 응답 스키마 — Bottle keep with menu name and holders."""

    id: str  # 보틀 UUID 문자열 (Bottle keep UUID as string)
    menu_id: str
    menu_name: str  # 메뉴 이름 — 조인된 값 (Menu name, resolved)
    remaining_amount: int
    opened_at: datetime
    expiration_date: date | None
    memo: str | None
    holders: list[BottleHolderResponse] = []
    created_at: datetime
