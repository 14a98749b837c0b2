"""앱 출근 라우터 — 출근 기록 관리 및 본인 타임카드.

App Attendance Router — Manager-side work record management and the
monthly calendar, plus the self-service timecard (clock in, breaks,
clock out) for cast and staff.
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import require_manager, require_roles
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.attendance import CalendarDay, WorkRecordCreate, WorkRecordResponse, WorkRecordUpdate
from nightbase.services.attendance_service import attendance_service
from nightbase.utils.timezone import today_local

router: APIRouter = APIRouter()

# 타임카드 사용 가능 역할 — Roles that keep a timecard
require_worker = require_roles("cast", "staff", "admin")


@router.get("", response_model=list[WorkRecordResponse])
async def list_records(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
    work_date: Annotated[date | None, Query(alias="date")] = None,
    profile_id: Annotated[UUID | None, Query()] = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
) -> list[WorkRecordResponse]:
    """출근 기록 목록 — ``profile_id`` 가 있으면 프로필별, 없으면 날짜별 (기본 오늘).

    List records of one profile (optionally within a date range) or of a
    single business date.
    """
    if profile_id is not None:
        return await attendance_service.list_by_profile(db, manager.store_id, profile_id, date_from, date_to)
    if work_date is None:
        work_date = today_local()
    return await attendance_service.list_by_date(db, manager.store_id, work_date)


@router.get("/calendar", response_model=list[CalendarDay])
async def get_calendar(
    year: Annotated[int, Query()],
    month: Annotated[int, Query()],
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[CalendarDay]:
    """월간 캘린더 — 날짜별 예정/근무중/완료 건수."""
    return await attendance_service.get_calendar(db, manager.store_id, year, month)


# --- 본인 타임카드 (Self-service timecard) ---

@router.get("/me/today", response_model=WorkRecordResponse | None)
async def get_today(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(require_worker)],
) -> WorkRecordResponse | None:
    """오늘의 내 출근 기록 (없으면 null)."""
    return await attendance_service.get_today(db, profile)


@router.post("/me/clock-in", response_model=WorkRecordResponse)
async def clock_in(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(require_worker)],
) -> WorkRecordResponse:
    """출근 — 예정 기록이 없으면 타임카드 기록 생성."""
    result: WorkRecordResponse = await attendance_service.clock_in(db, profile)
    await db.commit()
    return result


@router.post("/me/break-start", response_model=WorkRecordResponse)
async def start_break(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(require_worker)],
) -> WorkRecordResponse:
    result: WorkRecordResponse = await attendance_service.start_break(db, profile)
    await db.commit()
    return result


@router.post("/me/break-end", response_model=WorkRecordResponse)
async def end_break(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(require_worker)],
) -> WorkRecordResponse:
    result: WorkRecordResponse = await attendance_service.end_break(db, profile)
    await db.commit()
    return result


@router.post("/me/clock-out", response_model=WorkRecordResponse)
async def clock_out(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(require_worker)],
) -> WorkRecordResponse:
    """퇴근 — 휴식 중이면 휴식 종료 후 퇴근 처리."""
    result: WorkRecordResponse = await attendance_service.clock_out(db, profile)
    await db.commit()
    return result


# --- 매니저 (Manager) ---

@router.post("", response_model=WorkRecordResponse, status_code=201)
async def create_record(
    data: WorkRecordCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> WorkRecordResponse:
    result: WorkRecordResponse = await attendance_service.create_record(db, manager, data)
    await db.commit()
    return result


@router.get("/{record_id}", response_model=WorkRecordResponse)
async def get_record(
    record_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> WorkRecordResponse:
    return await attendance_service.get_record(db, manager.store_id, record_id)


@router.put("/{record_id}", response_model=WorkRecordResponse)
async def update_record(
    record_id: UUID,
    data: WorkRecordUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> WorkRecordResponse:
    """출근 기록 수정 — 타임카드 정정 포함."""
    result: WorkRecordResponse = await attendance_service.update_record(db, manager.store_id, record_id, data)
    await db.commit()
    return result


@router.post("/{record_id}/cancel", response_model=WorkRecordResponse)
async def cancel_record(
    record_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> WorkRecordResponse:
    result: WorkRecordResponse = await attendance_service.cancel_record(db, manager.store_id, record_id)
    await db.commit()
    return result


@router.delete("/{record_id}", status_code=204)
async def delete_record(
    record_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await attendance_service.delete_record(db, manager.store_id, record_id)
    await db.commit()
