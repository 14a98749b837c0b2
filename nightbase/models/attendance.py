"""근태(출근 기록) 관련 SQLAlchemy ORM 모델 정의.

Attendance SQLAlchemy ORM model definition.
A work record is one planned or actual working day of a profile. Records are
created manually by a manager or automatically when a shift submission is
approved (``source="shift_request"``).

Status flow: scheduled → working → completed (or absent / cancelled)

Tables:
    - work_records: 출근 기록 (Planned and actual working days)
"""

import uuid
from datetime import date, datetime, time, timezone

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, String, Text, Time, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nightbase.database import Base

# 출근 기록 상태 — Work record statuses
WORK_RECORD_STATUSES: tuple[str, ...] = ("scheduled", "working", "completed", "absent", "cancelled")


class WorkRecord(Base):
    """출근 기록 모델.

    Work record model — Daily schedule and time card of a profile.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        profile_id: 프로필 FK (Working profile)
        work_date: 근무 날짜 (Work date, display-timezone calendar date)
        scheduled_start_time: 예정 시작 시각 (Scheduled start, wall clock)
        scheduled_end_time: 예정 종료 시각 (Scheduled end, wall clock)
        shift_request_id: 원본 모집 FK (Originating shift request)
        shift_submission_id: 원본 제출 FK (Originating submission)
        clock_in: 출근 시각 (Clock-in timestamp)
        clock_out: 퇴근 시각 (Clock-out timestamp)
        break_start: 휴식 시작 (Break start timestamp)
        break_end: 휴식 종료 (Break end timestamp)
        status: 상태 (scheduled | working | completed | absent | cancelled)
        source: 생성 경로 (shift_request | manual | timecard)
        approved_by: 승인자 프로필 (Approving manager)
        approved_at: 승인 일시 (Approval timestamp)
        note: 메모 (Note)
        forgot_clockout: 퇴근 누락 플래그 (Forgot to clock out)
    """

    __tablename__ = "work_records"

    # 출근 기록 고유 식별자 — Work record unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    # 프로필 FK — Working profile
    profile_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    # 근무 날짜 — Work date
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 예정 시각 — Scheduled hours
    scheduled_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    scheduled_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    # 원본 모집/제출 — Origin of an approved shift
    shift_request_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("shift_requests.id", ondelete="SET NULL"), nullable=True)
    shift_submission_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("shift_submissions.id", ondelete="SET NULL"), nullable=True)
    # 실제 출퇴근/휴식 — Actual time card (UTC)
    clock_in: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    clock_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    break_start: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    break_end: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 상태 — "scheduled" → "working" → "completed"
    status: Mapped[str] = mapped_column(String(20), default="scheduled")
    # 생성 경로 — "shift_request" | "manual" | "timecard"
    source: Mapped[str] = mapped_column(String(20), default="manual")
    # 승인자/승인 일시 — Approval audit
    approved_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 메모 — Note
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 퇴근 누락 — Set when the day ended without a clock-out
    forgot_clockout: Mapped[bool] = mapped_column(Boolean, default=False)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_work_records_store_date", "store_id", "work_date"),
        Index("ix_work_records_profile_date", "profile_id", "work_date"),
    )

    profile = relationship("Profile", foreign_keys=[profile_id])
