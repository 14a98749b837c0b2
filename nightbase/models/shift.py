"""시프트 모집/제출 관련 SQLAlchemy ORM 모델 정의.

Shift request and submission SQLAlchemy ORM model definitions.

Workflow:
    1. 매니저가 모집(ShiftRequest)과 대상 날짜(ShiftRequestDate)를 생성
       (A manager opens a request for a set of dates)
    2. 캐스트/스태프가 날짜별 가능 여부를 제출 — status "pending"
       (Targeted profiles submit per-date availability)
    3. 매니저가 승인("scheduled") 또는 거절("rejected")
       (Manager approves or rejects; approval creates a work record)
    4. 출근/퇴근에 따라 "working" → "completed"
       (Attendance moves approved submissions to working, then completed)

Tables:
    - shift_requests: 시프트 모집 (Calls for availability)
    - shift_request_dates: 모집 대상 날짜 (Dates of a request)
    - shift_submissions: 날짜별 제출 (Per-profile, per-date answers)
"""

import uuid
from datetime import date, datetime, time, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Index, String, Text, Time, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nightbase.database import Base, JSONType

# 제출 상태 — Submission statuses
SUBMISSION_PENDING = "pending"
SUBMISSION_REJECTED = "rejected"
# 승인 계열 상태 — Statuses that count as approved
APPROVED_STATUSES: tuple[str, ...] = ("scheduled", "working", "completed")


class ShiftRequest(Base):
    """시프트 모집 모델.

    Shift request model. ``status`` is the stored flag; the effective state
    is closed once ``deadline`` has passed even while the flag says "open".

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        title: 제목 (Title)
        description: 설명 (Description)
        deadline: 제출 마감 일시 (Submission deadline, UTC)
        status: 모집 상태 (open | closed)
        target_roles: 대상 역할 목록 (Target roles, ["cast", "staff"])
        target_profile_ids: 대상 프로필 ID 목록, 지정 시 역할보다 우선
                            (Explicit target profiles, overrides roles)
        created_by: 작성자 프로필 FK (Creator profile)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "shift_requests"

    # 모집 고유 식별자 — Shift request unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    # 제목 — Title (e.g. "3月前半シフト募集")
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    # 설명 — Optional description
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 마감 일시 — Deadline (UTC); 경과 시 자동으로 마감 취급
    deadline: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    # 모집 상태 — "open" | "closed"
    status: Mapped[str] = mapped_column(String(20), default="open")
    # 대상 역할 — JSON list of "cast" / "staff"
    target_roles: Mapped[list] = mapped_column(JSONType, default=lambda: ["cast"])
    # 대상 프로필 — JSON list of profile id strings, or null
    target_profile_ids: Mapped[list | None] = mapped_column(JSONType, nullable=True)
    # 작성자 — Creator profile (SET NULL on delete)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    dates = relationship(
        "ShiftRequestDate",
        back_populates="shift_request",
        cascade="all, delete-orphan",
        order_by="ShiftRequestDate.target_date",
    )


class ShiftRequestDate(Base):
    """모집 대상 날짜 모델 — One date of a shift request with default hours."""

    __tablename__ = "shift_request_dates"

    # 날짜 고유 식별자 — Request date unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 모집 FK — Parent shift request (CASCADE)
    shift_request_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shift_requests.id", ondelete="CASCADE"), nullable=False)
    # 대상 날짜 — Target work date
    target_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 기본 시작/종료 시각 — Default hours offered for the date
    default_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    default_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("shift_request_id", "target_date", name="uq_shift_request_date"),
    )

    shift_request = relationship("ShiftRequest", back_populates="dates")


class ShiftSubmission(Base):
    """시프트 제출 모델 — 프로필의 날짜별 응답.

    Shift submission model — A profile's answer for one request date.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        shift_request_id: 모집 FK (Parent request)
        shift_request_date_id: 모집 날짜 FK (Request date)
        profile_id: 제출자 프로필 FK (Submitting profile)
        work_date: 근무 날짜 (Work date, copied from the request date)
        availability: 가능 여부 (available | unavailable)
        preferred_start_time: 희망 시작 시각 (Preferred start)
        preferred_end_time: 희망 종료 시각 (Preferred end)
        approved_start_time: 확정 시작 시각 (Approved start)
        approved_end_time: 확정 종료 시각 (Approved end)
        status: 상태 (pending | scheduled | working | completed | rejected)
        note: 메모 (Note from the submitter)
        approved_by: 승인/거절한 프로필 (Deciding manager profile)
        approved_at: 승인/거절 일시 (Decision timestamp)
    """

    __tablename__ = "shift_submissions"

    # 제출 고유 식별자 — Submission unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    # 모집 FK — Parent request (CASCADE)
    shift_request_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shift_requests.id", ondelete="CASCADE"), nullable=False)
    # 모집 날짜 FK — Request date (CASCADE)
    shift_request_date_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shift_request_dates.id", ondelete="CASCADE"), nullable=False)
    # 제출자 FK — Submitting profile (CASCADE)
    profile_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    # 근무 날짜 — Work date
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    # 가능 여부 — "available" | "unavailable"
    availability: Mapped[str] = mapped_column(String(20), default="available")
    # 희망 시각 — Preferred hours
    preferred_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    preferred_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    # 확정 시각 — Approved hours (승인 시 설정)
    approved_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    approved_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    # 상태 — "pending" → "scheduled" → "working" → "completed", or "rejected"
    status: Mapped[str] = mapped_column(String(20), default=SUBMISSION_PENDING)
    # 메모 — Note
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 승인자 — Deciding manager profile
    approved_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    # 승인 일시 — Decision timestamp
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("shift_request_date_id", "profile_id", name="uq_submission_date_profile"),
        Index("ix_submissions_request_profile", "shift_request_id", "profile_id"),
    )

    profile = relationship("Profile", foreign_keys=[profile_id])
    request_date = relationship("ShiftRequestDate")
