"""앱 내 시프트 라우터 — 희망 제출 및 확정 시프트 조회.

App My-Shift Router — Requests targeting the caller, preference
submission and the caller's upcoming approved shifts.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import get_current_profile
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.shift import (
    MyRequestDate,
    MyShiftRequestResponse,
    MyShiftResponse,
    SubmissionEntry,
    SubmitPreferencesRequest,
)
from nightbase.services.shift_submission_service import shift_submission_service

router: APIRouter = APIRouter()


@router.get("/requests", response_model=list[MyShiftRequestResponse])
async def list_my_requests(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> list[MyShiftRequestResponse]:
    """나에게 열린 시프트 모집과 날짜별 제출 상태."""
    return await shift_submission_service.list_my_requests(db, profile)


@router.put("/requests/{request_id}", response_model=MyShiftRequestResponse)
async def submit_preferences(
    request_id: UUID,
    data: SubmitPreferencesRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> MyShiftRequestResponse:
    """희망 일괄 제출 — 미결정 제출을 모두 교체."""
    result: MyShiftRequestResponse = await shift_submission_service.submit_preferences(db, profile, request_id, data)
    await db.commit()
    return result


@router.post("/dates", response_model=MyRequestDate)
async def submit_date(
    data: SubmissionEntry,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> MyRequestDate:
    result: MyRequestDate = await shift_submission_service.submit_date(db, profile, data)
    await db.commit()
    return result


@router.get("", response_model=list[MyShiftResponse])
async def list_my_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> list[MyShiftResponse]:
    """오늘 이후 확정 시프트."""
    return await shift_submission_service.list_my_shifts(db, profile)
