"""SNS 연동 관련 Pydantic 요청/응답 스키마 정의.

SNS account, template, scheduled post and recurring schedule schemas.
OAuth tokens are accepted on connect and never returned.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from nightbase.schemas.common import UUIDStr

# 지원 플랫폼 — Platform literal
SnsPlatform = Literal["x"]


# === SNS 계정 (Account) 스키마 ===

class SnsAccountConnect(BaseModel):
    """SNS 계정 연동 요청 스키마.

    Stores tokens obtained by an OAuth exchange performed elsewhere.

    Attributes:
        platform: 플랫폼 (Platform key)
        account_name: 표시 이름 (Display handle)
        account_id: 플랫폼 사용자 ID (Platform user id)
        access_token: 액세스 토큰 (OAuth access token)
        refresh_token: 리프레시 토큰 (OAuth refresh token, optional)
        token_expires_at: 만료 일시 (Access token expiry, optional)
    """

    platform: SnsPlatform = "x"
    account_name: str | None = None
    account_id: str | None = None
    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    token_expires_at: datetime | None = None


class SnsAccountResponse(BaseModel):
    """SNS 계정 응답 스키마 — Tokens are never included."""

    id: str
    platform: str
    account_name: str | None
    account_id: str | None
    is_connected: bool
    token_expires_at: datetime | None


# === 템플릿 (Template) 스키마 ===

class SnsTemplateCreate(BaseModel):
    """SNS 템플릿 생성 요청 스키마."""

    name: str = Field(..., min_length=1)  # 템플릿 이름 (Template name)
    content: str = Field(..., min_length=1)  # 본문 — 변수 포함 가능 (Body with variables)
    template_type: Literal["text", "cast_list", "custom"] = "text"
    image_style: str | None = None


class SnsTemplateUpdate(BaseModel):
    """SNS 템플릿 수정 요청 스키마 (부분 업데이트)."""

    name: str | None = Field(default=None, min_length=1)
    content: str | None = Field(default=None, min_length=1)
    template_type: Literal["text", "cast_list", "custom"] | None = None
    image_style: str | None = None


class SnsTemplateResponse(BaseModel):
    """SNS 템플릿 응답 스키마."""

    id: str
    name: str
    content: str
    template_type: str
    image_style: str | None
    created_at: datetime


class TemplatePreviewRequest(BaseModel):
    """템플릿 미리보기 요청 — Render arbitrary content with today's variables."""

    content: str


class TemplatePreviewResponse(BaseModel):
    """템플릿 미리보기 결과."""

    content: str  # 변수 치환 결과 (Rendered content)


# === 예약 게시 (Scheduled post) 스키마 ===

class ScheduledPostCreate(BaseModel):
    """예약 게시물 생성 요청 스키마.

    Attributes:
        content: 본문 (Post text)
        image_url: 이미지 URL (Optional image)
        platforms: 대상 플랫폼 (Target platforms, at least one)
        scheduled_at: 예약 일시 (Due timestamp; naive values are UTC)
    """

    content: str = Field(..., min_length=1)
    image_url: str | None = None
    platforms: list[SnsPlatform] = Field(default=["x"], min_length=1)
    scheduled_at: datetime


class PostNowRequest(BaseModel):
    """즉시 게시 요청 스키마 — Publish immediately and record history."""

    content: str = Field(..., min_length=1)
    image_url: str | None = None
    platforms: list[SnsPlatform] = Field(default=["x"], min_length=1)


class ScheduledPostResponse(BaseModel):
    """예약/이력 게시물 응답 스키마."""

    id: str
    content: str
    image_url: str | None
    platforms: list[str]
    scheduled_at: datetime
    status: str  # pending|posted|failed
    error_message: str | None
    posted_at: datetime | None
    created_by: str | None
    created_at: datetime


# === 정기 게시 (Recurring schedule) 스키마 ===

class RecurringScheduleCreate(BaseModel):
    """정기 게시 생성 요청 스키마.

    ``template_id`` is required when ``content_type`` is "template".
    """

    name: str = Field(..., min_length=1)
    content_type: Literal["cast_list", "template"] = "cast_list"
    template_id: UUIDStr | None = None
    platforms: list[SnsPlatform] = Field(default=["x"], min_length=1)
    schedule_hour: int = Field(..., ge=0, le=23)  # 실행 시각 — 표시 타임존 기준 (Local hour)
    is_active: bool = True


class RecurringScheduleUpdate(BaseModel):
    """정기 게시 수정 요청 스키마 (부분 업데이트)."""

    name: str | None = Field(default=None, min_length=1)
    content_type: Literal["cast_list", "template"] | None = None
    template_id: UUIDStr | None = None
    platforms: list[SnsPlatform] | None = None
    schedule_hour: int | None = Field(default=None, ge=0, le=23)
    is_active: bool | None = None


class RecurringScheduleResponse(BaseModel):
    """정기 게시 응답 스키마."""

    id: str
    name: str
    content_type: str
    template_id: str | None
    platforms: list[str]
    schedule_hour: int
    is_active: bool
    last_run_at: datetime | None
    created_at: datetime


class DispatchResult(BaseModel):
    """디스패치 실행 결과 — Summary of one dispatch run."""

    enqueued: int  # 정기 게시로 생성된 게시물 수 (Posts enqueued by recurring schedules)
    processed: int  # 처리한 게시물 수 (Due posts processed)
    posted: int
    failed: int
    trimmed: int  # 정리된 이력 수 (History rows removed)
