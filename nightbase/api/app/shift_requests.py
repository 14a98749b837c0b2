"""앱 시프트 모집 라우터 — 매니저용 모집 관리 및 제출 결정.

App Shift Request Router — Manager-side shift collection: requests and
their dates, submission review (approve/reject/revert), bulk approval and
schedule-conflict checks. Every endpoint requires staff or admin.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import require_manager
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.shift import (
    ApproveSubmissionRequest,
    BulkApproveResponse,
    ConflictCheckRequest,
    ConflictItem,
    RequestDateCounts,
    ShiftRequestCreate,
    ShiftRequestDetailResponse,
    ShiftRequestResponse,
    SubmissionResponse,
    SubmissionTimeUpdate,
)
from nightbase.services.shift_request_service import shift_request_service

router: APIRouter = APIRouter()


# --- 모집 (Requests) ---

@router.get("/shift-requests", response_model=list[ShiftRequestResponse])
async def list_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[ShiftRequestResponse]:
    """시프트 모집 목록 — 마감이 지난 모집은 closed 로 표시."""
    return await shift_request_service.list_requests(db, manager.store_id)


@router.post("/shift-requests", response_model=ShiftRequestDetailResponse, status_code=201)
async def create_request(
    data: ShiftRequestCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> ShiftRequestDetailResponse:
    """시프트 모집 생성 — 날짜 목록과 대상 역할/프로필 지정."""
    result: ShiftRequestDetailResponse = await shift_request_service.create_request(db, manager, data)
    await db.commit()
    return result


@router.post("/shift-requests/conflicts", response_model=list[ConflictItem])
async def check_conflicts(
    data: ConflictCheckRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[ConflictItem]:
    """기존 출근 기록과 겹치는 프로필 확인."""
    return await shift_request_service.check_conflicts(db, manager.store_id, data)


@router.get("/shift-requests/dates/{date_id}/submissions", response_model=list[SubmissionResponse])
async def list_date_submissions(
    date_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[SubmissionResponse]:
    return await shift_request_service.list_date_submissions(db, manager.store_id, date_id)


@router.post("/shift-requests/dates/{date_id}/approve-all", response_model=BulkApproveResponse)
async def approve_all(
    date_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> BulkApproveResponse:
    """해당 날짜의 미결정 "가능" 제출 일괄 승인."""
    count: int = await shift_request_service.approve_all(db, manager, date_id)
    await db.commit()
    return BulkApproveResponse(count=count)


@router.get("/shift-requests/{request_id}", response_model=ShiftRequestDetailResponse)
async def get_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> ShiftRequestDetailResponse:
    return await shift_request_service.get_request(db, manager.store_id, request_id)


@router.get("/shift-requests/{request_id}/date-counts", response_model=list[RequestDateCounts])
async def get_date_counts(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[RequestDateCounts]:
    """날짜별 제출 현황 집계."""
    return await shift_request_service.get_date_counts(db, manager.store_id, request_id)


@router.post("/shift-requests/{request_id}/close", response_model=ShiftRequestResponse)
async def close_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> ShiftRequestResponse:
    result: ShiftRequestResponse = await shift_request_service.close_request(db, manager.store_id, request_id)
    await db.commit()
    return result


@router.delete("/shift-requests/{request_id}", status_code=204)
async def delete_request(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await shift_request_service.delete_request(db, manager.store_id, request_id)
    await db.commit()


# --- 제출 결정 (Submission decisions) ---

@router.post("/shift-submissions/{submission_id}/approve", response_model=SubmissionResponse)
async def approve_submission(
    submission_id: UUID,
    data: ApproveSubmissionRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> SubmissionResponse:
    """제출 승인 — 출근 기록(scheduled)을 함께 생성."""
    result: SubmissionResponse = await shift_request_service.approve_submission(db, manager, submission_id, data)
    await db.commit()
    return result


@router.post("/shift-submissions/{submission_id}/reject", response_model=SubmissionResponse)
async def reject_submission(
    submission_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> SubmissionResponse:
    result: SubmissionResponse = await shift_request_service.reject_submission(db, manager, submission_id)
    await db.commit()
    return result


@router.post("/shift-submissions/{submission_id}/revert", response_model=SubmissionResponse)
async def revert_submission(
    submission_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> SubmissionResponse:
    """결정 취소 — 미결정 상태로 복원."""
    result: SubmissionResponse = await shift_request_service.revert_submission(db, manager, submission_id)
    await db.commit()
    return result


@router.patch("/shift-submissions/{submission_id}/time", response_model=SubmissionResponse)
async def update_submission_time(
    submission_id: UUID,
    data: SubmissionTimeUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> SubmissionResponse:
    result: SubmissionResponse = await shift_request_service.update_submission_time(db, manager, submission_id, data)
    await db.commit()
    return result
