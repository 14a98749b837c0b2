"""SNS 연동 관련 SQLAlchemy ORM 모델 정의.

SNS integration SQLAlchemy ORM model definitions.

Tables:
    - sns_accounts: 연동 계정 (Connected platform accounts, one per platform)
    - sns_templates: 게시 템플릿 (Post templates with variables)
    - sns_scheduled_posts: 예약/이력 게시물 (Queued and past posts)
    - sns_recurring_schedules: 정기 게시 (Daily posts at a fixed hour)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from nightbase.database import Base, JSONType

# 지원 플랫폼 — Supported platforms
SNS_PLATFORMS: tuple[str, ...] = ("x",)


class SnsAccount(Base):
    """SNS 계정 모델.

    Access/refresh tokens never leave the service layer.

    Attributes:
        platform: 플랫폼 (Platform key, "x")
        account_name: 표시 이름 (Display handle)
        account_id: 플랫폼 측 ID (Platform user id)
        access_token / refresh_token: OAuth 토큰 (OAuth tokens)
        token_expires_at: 액세스 토큰 만료 (Access token expiry)
        is_connected: 연동 여부 (Whether the account is usable)
    """

    __tablename__ = "sns_accounts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    platform: Mapped[str] = mapped_column(String(20), nullable=False)
    account_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    account_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 연동 여부 — 401 응답 시 False 로 전환
    is_connected: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("store_id", "platform", name="uq_sns_account_store_platform"),
    )


class SnsTemplate(Base):
    """SNS 게시 템플릿 모델.

    Content may contain the variables {日付}, {店舗名}, {出勤中キャスト},
    {出勤予定キャスト} and {出勤人数}.
    """

    __tablename__ = "sns_templates"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # 템플릿 종류 — "text" | "cast_list" | "custom"
    template_type: Mapped[str] = mapped_column(String(20), default="text")
    # 이미지 스타일 — Optional style hint for generated images
    image_style: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class SnsScheduledPost(Base):
    """예약 게시물 모델.

    Status flow: pending → posted | failed

    Attributes:
        content: 본문 (Post text)
        image_url: 첨부 이미지 (Optional image URL)
        platforms: 대상 플랫폼 목록 (JSON list, e.g. ["x"])
        scheduled_at: 예약 일시 (Due timestamp, UTC)
        status: 상태 (pending | posted | failed)
        error_message: 실패 사유 (Joined platform errors)
        posted_at: 게시 일시 (When dispatch finished)
        created_by: 작성자 프로필 (Creator, null for recurring runs)
    """

    __tablename__ = "sns_scheduled_posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    platforms: Mapped[list] = mapped_column(JSONType, default=lambda: ["x"])
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending")
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    posted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_sns_posts_status_scheduled", "status", "scheduled_at"),
    )


class SnsRecurringSchedule(Base):
    """정기 게시 스케줄 모델.

    Runs once per display-timezone day at ``schedule_hour``.

    Attributes:
        name: 이름 (Schedule name)
        content_type: 내용 종류 (cast_list | template)
        template_id: 템플릿 FK (Template used when content_type is template)
        platforms: 대상 플랫폼 목록 (JSON list)
        schedule_hour: 실행 시각 0-23 (Local hour)
        is_active: 활성 여부 (Enabled flag)
        last_run_at: 마지막 실행 (Last enqueue timestamp)
    """

    __tablename__ = "sns_recurring_schedules"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(20), default="cast_list")
    template_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("sns_templates.id", ondelete="SET NULL"), nullable=True)
    platforms: Mapped[list] = mapped_column(JSONType, default=lambda: ["x"])
    schedule_hour: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    last_run_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
