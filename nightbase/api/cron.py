"""크론 라우터 — 외부 스케줄러가 호출하는 SNS 게시 및 자동 퇴근 배치.

Cron Router — Entry points for the external scheduler. Authenticated with
the shared ``CRON_SECRET`` bearer token instead of a user token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import verify_cron_secret
from nightbase.database import get_db
from nightbase.schemas.attendance import AutoClockoutResult
from nightbase.schemas.sns import DispatchResult
from nightbase.services.attendance_service import attendance_service
from nightbase.services.sns_dispatch_service import sns_dispatch_service

router: APIRouter = APIRouter()


@router.post(
    "/sns-dispatch",
    response_model=DispatchResult,
    dependencies=[Depends(verify_cron_secret)],
)
async def dispatch_sns(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> DispatchResult:
    """만기 예약 게시물과 이번 시각의 정기 게시를 처리합니다.

    Publish due scheduled posts and fire the recurring schedules of the
    current local hour.
    """
    result: DispatchResult = await sns_dispatch_service.dispatch(db)
    await db.commit()
    return result


@router.post(
    "/auto-clockout",
    response_model=AutoClockoutResult,
    dependencies=[Depends(verify_cron_secret)],
)
async def auto_clockout(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AutoClockoutResult:
    """영업일 전환 시각이 지난 미퇴근 기록을 퇴근 처리합니다 (forgot_clockout)."""
    result: AutoClockoutResult = await attendance_service.auto_clock_out(db)
    await db.commit()
    return result
