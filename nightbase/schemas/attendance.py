"""출근 기록(근태) 관련 Pydantic 요청/응답 스키마 정의.

Work record (attendance) Pydantic request/response schema definitions.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel

from nightbase.schemas.common import UUIDStr

# 출근 기록 상태 — Work record status literal
WorkRecordStatus = Literal["scheduled", "working", "completed", "absent", "cancelled"]


class WorkRecordCreate(BaseModel):
    """출근 기록 수동 생성 요청 스키마.

    Manual work record creation (staff/admin only). ``source`` is "manual".

    Attributes:
        profile_id: 대상 프로필 UUID (Working profile)
        work_date: 근무 날짜 (Work date)
        scheduled_start_time: 예정 시작 "HH:MM" (Scheduled start, optional)
        scheduled_end_time: 예정 종료 "HH:MM" (Scheduled end, optional)
        note: 메모 (Note, optional)
    """

    profile_id: UUIDStr  # 대상 프로필 UUID (Profile UUID)
    work_date: date  # 근무 날짜 (Work date)
    scheduled_start_time: str | None = None  # 예정 시작 (Scheduled start)
    scheduled_end_time: str | None = None  # 예정 종료 (Scheduled end)
    note: str | None = None  # 메모 (Note)


class WorkRecordUpdate(BaseModel):
    """출근 기록 수정 요청 스키마 (부분 업데이트).

    Partial update by a manager, including time card corrections.
    """

    scheduled_start_time: str | None = None
    scheduled_end_time: str | None = None
    clock_in: datetime | None = None  # 출근 시각 정정 (Corrected clock-in)
    clock_out: datetime | None = None  # 퇴근 시각 정정 (Corrected clock-out)
    break_start: datetime | None = None
    break_end: datetime | None = None
    status: WorkRecordStatus | None = None
    note: str | None = None
    forgot_clockout: bool | None = None


class WorkRecordResponse(BaseModel):
    """출근 기록 응답 스키마.

    Work record response schema with the profile name and computed
    working minutes (clock span minus break).
    """

    id: str  # 출근 기록 UUID 문자열 (Work record UUID as string)
    profile_id: str
    profile_name: str  # 프로필 표시 이름 (Profile display name)
    work_date: date
    scheduled_start_time: str | None
    scheduled_end_time: str | None
    shift_request_id: str | None
    shift_submission_id: str | None
    clock_in: datetime | None
    clock_out: datetime | None
    break_start: datetime | None
    break_end: datetime | None
    status: str
    source: str  # shift_request|manual|timecard
    note: str | None
    forgot_clockout: bool
    work_minutes: int | None = None  # 실 근무 분 — 퇴근 후 계산 (Net minutes once clocked out)


class CalendarDay(BaseModel):
    """캘린더 일별 집계 — Per-date counts of a month."""

    work_date: date
    scheduled_count: int
    working_count: int
    completed_count: int


class AutoClockoutResult(BaseModel):
    """자동 퇴근 처리 결과 — Summary of one auto clock-out run."""

    processed: int  # 종료된 기록 수 (Records closed)
    record_ids: list[str] = []  # 종료된 기록 UUID (Closed record UUIDs)
