"""매장 관련 Pydantic 요청/응답 스키마 정의.

Store Pydantic request/response schema definitions.
Business hours travel as "HH:MM" strings.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class StoreCreate(BaseModel):
    """매장 생성 요청 스키마.

    Store creation request schema (platform admin only).

    Attributes:
        name: 매장 이름 (Store name, unique)
        industry: 업종 (Industry label, optional)
        prefecture: 도도부현 (Prefecture, optional)
        city: 시구정촌 (City, optional)
        business_start_time: 영업 시작 "HH:MM" (Opening time, optional)
        business_end_time: 영업 종료 "HH:MM" (Closing time, optional)
    """

    name: str = Field(..., min_length=1)  # 매장 이름 (Store name)
    industry: str | None = None  # 업종 (Industry)
    prefecture: str | None = None  # 도도부현 (Prefecture)
    city: str | None = None  # 시구정촌 (City)
    business_start_time: str | None = None  # 영업 시작 "HH:MM" (Opening time)
    business_end_time: str | None = None  # 영업 종료 "HH:MM" (Closing time)


class StoreUpdate(BaseModel):
    """매장 수정 요청 스키마 (부분 업데이트) — Partial update."""

    name: str | None = Field(default=None, min_length=1)  # 변경할 매장 이름 (New name, optional)
    industry: str | None = None
    prefecture: str | None = None
    city: str | None = None
    business_start_time: str | None = None
    business_end_time: str | None = None
    is_active: bool | None = None  # 활성 상태 변경 (Activate/deactivate, optional)


class StoreResponse(BaseModel):
    """매장 응답 스키마.

    Store response schema returned from API.
    """

    id: str  # 매장 UUID 문자열 (Store UUID as string)
    name: str  # 매장 이름 (Store name)
    industry: str | None
    prefecture: str | None
    city: str | None
    business_start_time: str | None  # "HH:MM"
    business_end_time: str | None  # "HH:MM"
    is_active: bool  # 활성 상태 (Active flag)
    ai_credits: int  # 남은 AI 크레딧 (Remaining AI credits)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)
