"""시프트 모집/제출 관련 Pydantic 요청/응답 스키마 정의.

Shift request and submission Pydantic request/response schema definitions.
Times of day travel as "HH:MM" strings; dates as ISO "YYYY-MM-DD".
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from nightbase.schemas.common import UUIDStr

# 가능 여부 — Availability literal
Availability = Literal["available", "unavailable"]
# 모집 대상 역할 — Target role literal ("staff" also covers admins)
TargetRole = Literal["cast", "staff"]


# === 시프트 모집 (Shift request) 스키마 ===

class ShiftRequestDateInput(BaseModel):
    """모집 날짜 입력 스키마 — One date with optional default hours."""

    target_date: date  # 대상 날짜 (Target date)
    default_start_time: str | None = None  # 기본 시작 "HH:MM" (Default start)
    default_end_time: str | None = None  # 기본 종료 "HH:MM" (Default end)


class ShiftRequestCreate(BaseModel):
    """시프트 모집 생성 요청 스키마.

    Shift request creation schema. The request and all of its dates are
    created in one transaction.

    Attributes:
        title: 제목 (Title)
        description: 설명 (Description, optional)
        deadline: 마감 일시 (Submission deadline)
        target_roles: 대상 역할 (Target roles, default ["cast"])
        target_profile_ids: 대상 프로필 UUID 목록 (Explicit targets, optional)
        dates: 대상 날짜 목록 (At least one date, no duplicates)
    """

    title: str = Field(..., min_length=1)  # 제목 (Title)
    description: str | None = None  # 설명 (Description)
    deadline: datetime  # 마감 일시 — tz 없으면 UTC 로 간주 (Naive values are UTC)
    target_roles: list[TargetRole] = ["cast"]  # 대상 역할 (Target roles)
    target_profile_ids: list[UUIDStr] | None = None  # 대상 프로필 — 지정 시 역할보다 우선 (Overrides roles)
    dates: list[ShiftRequestDateInput] = []  # 대상 날짜 목록 (Dates of the request)


class ShiftRequestDateResponse(BaseModel):
    """모집 날짜 응답 스키마."""

    id: str  # 날짜 UUID 문자열 (Request date UUID as string)
    target_date: date
    default_start_time: str | None
    default_end_time: str | None


class ShiftRequestResponse(BaseModel):
    """시프트 모집 응답 스키마.

    ``status`` is the effective status: "closed" once the deadline passed.

    Attributes:
        id: 모집 UUID (Shift request identifier)
        status: 실효 상태 (Effective status: open | closed)
        date_count: 날짜 수 (Number of dates)
        pending_count: 미확인 제출 수 (Pending submissions)
        approved_count: 확정 제출 수 (Approved submissions)
        rejected_count: 거절 제출 수 (Rejected submissions)
    """

    id: str
    title: str
    description: str | None
    deadline: datetime
    status: str  # 실효 상태 — open|closed (Effective status)
    target_roles: list[str]
    target_profile_ids: list[str] | None
    created_by: str | None
    created_at: datetime
    date_count: int = 0
    pending_count: int = 0
    approved_count: int = 0
    rejected_count: int = 0


class ShiftRequestDetailResponse(ShiftRequestResponse):
    """시프트 모집 상세 응답 스키마 — Request with its dates."""

    dates: list[ShiftRequestDateResponse] = []


class RequestDateCounts(BaseModel):
    """모집 날짜별 제출 현황 — Submission counters of one request date."""

    shift_request_date_id: str
    target_date: date
    pending_count: int  # 미확인 (Submitted, not decided)
    not_submitted_count: int  # 미제출 대상자 (Targets without any submission)
    confirmed_count: int  # 확정 (scheduled/working/completed)


class ConflictCheckRequest(BaseModel):
    """기존 출근 기록과의 중복 확인 요청 스키마."""

    profile_ids: list[UUIDStr]  # 확인할 프로필 UUID 목록 (Profiles to check)
    dates: list[date]  # 확인할 날짜 목록 (Dates to check)


class ConflictItem(BaseModel):
    """중복 항목 — A profile that already works on a date."""

    profile_id: str
    profile_name: str
    work_date: date


# === 시프트 제출 (Shift submission) 스키마 ===

class SubmissionResponse(BaseModel):
    """시프트 제출 응답 스키마.

    Shift submission response schema with the submitter's name.
    """

    id: str  # 제출 UUID 문자열 (Submission UUID as string)
    shift_request_id: str
    shift_request_date_id: str
    profile_id: str
    profile_name: str  # 제출자 표시 이름 (Submitter display name)
    work_date: date
    availability: str  # available|unavailable
    preferred_start_time: str | None
    preferred_end_time: str | None
    approved_start_time: str | None
    approved_end_time: str | None
    status: str  # pending|scheduled|working|completed|rejected
    note: str | None
    approved_by: str | None
    approved_at: datetime | None


class ApproveSubmissionRequest(BaseModel):
    """제출 승인 요청 스키마.

    Both times are optional; missing values fall back to the preferred
    times, then to the request date defaults.
    """

    approved_start_time: str | None = None  # 확정 시작 "HH:MM" (Approved start)
    approved_end_time: str | None = None  # 확정 종료 "HH:MM" (Approved end)


class SubmissionTimeUpdate(BaseModel):
    """확정 시각 수정 요청 스키마 — Only for scheduled submissions."""

    approved_start_time: str  # 확정 시작 "HH:MM" (Approved start)
    approved_end_time: str  # 확정 종료 "HH:MM" (Approved end)


class BulkApproveResponse(BaseModel):
    """일괄 승인 결과 — Number of submissions approved."""

    count: int


# === 내 시프트 (My shifts) 스키마 ===

class SubmissionEntry(BaseModel):
    """날짜별 제출 입력 — One date of a preference submission."""

    shift_request_date_id: UUIDStr  # 모집 날짜 UUID (Request date UUID)
    availability: Availability = "available"  # 가능 여부 (Availability)
    preferred_start_time: str | None = None  # 희망 시작 "HH:MM" (Preferred start)
    preferred_end_time: str | None = None  # 희망 종료 "HH:MM" (Preferred end)
    note: str | None = None  # 메모 (Note)


class SubmitPreferencesRequest(BaseModel):
    """희망 시프트 일괄 제출 요청 스키마.

    Replace-all submission: the caller's pending rows for the request are
    replaced by ``entries``. Decided dates must not appear in ``entries``.
    """

    entries: list[SubmissionEntry]  # 제출 항목 목록 (Entries, one per date)


class MyRequestDate(BaseModel):
    """내 모집 날짜 상태 — Per-date status of the caller.

    ``status`` is one of pending, approved, rejected, not_submitted.
    """

    shift_request_date_id: str
    target_date: date
    default_start_time: str | None
    default_end_time: str | None
    status: str  # pending|approved|rejected|not_submitted
    submission_id: str | None = None
    availability: str | None = None
    preferred_start_time: str | None = None
    preferred_end_time: str | None = None
    approved_start_time: str | None = None
    approved_end_time: str | None = None
    note: str | None = None


class MyShiftRequestResponse(BaseModel):
    """내 시프트 모집 응답 스키마 — An open request visible to the caller."""

    id: str
    title: str
    description: str | None
    deadline: datetime
    dates: list[MyRequestDate] = []


class MyShiftResponse(BaseModel):
    """내 확정 시프트 응답 스키마 — One approved upcoming shift."""

    submission_id: str
    shift_request_id: str
    title: str  # 모집 제목 (Request title)
    work_date: date
    start_time: str | None  # 확정 시작 "HH:MM" (Approved start)
    end_time: str | None  # 확정 종료 "HH:MM" (Approved end)
    status: str  # scheduled|working|completed
