"""앱 SNS 라우터 — 계정 연동, 템플릿, 예약/즉시 게시, 정기 게시.

App SNS Router — Connected accounts, post templates, one-off scheduled
posts, immediate posting and recurring daily schedules. Every endpoint
requires staff or admin.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import require_manager
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.sns import (
    PostNowRequest,
    RecurringScheduleCreate,
    RecurringScheduleResponse,
    RecurringScheduleUpdate,
    ScheduledPostCreate,
    ScheduledPostResponse,
    SnsAccountConnect,
    SnsAccountResponse,
    SnsPlatform,
    SnsTemplateCreate,
    SnsTemplateResponse,
    SnsTemplateUpdate,
    TemplatePreviewRequest,
    TemplatePreviewResponse,
)
from nightbase.services.sns_service import sns_service

router: APIRouter = APIRouter()


# --- 계정 (Accounts) ---

@router.get("/accounts", response_model=list[SnsAccountResponse])
async def list_accounts(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[SnsAccountResponse]:
    return await sns_service.list_accounts(db, manager.store_id)


@router.post("/accounts", response_model=SnsAccountResponse)
async def connect_account(
    data: SnsAccountConnect,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> SnsAccountResponse:
    """계정 연동 — 플랫폼별 1개, 있으면 토큰 갱신."""
    result: SnsAccountResponse = await sns_service.connect_account(db, manager.store_id, data)
    await db.commit()
    return result


@router.delete("/accounts/{platform}", response_model=SnsAccountResponse)
async def disconnect_account(
    platform: SnsPlatform,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> SnsAccountResponse:
    """연동 해제 — 토큰 삭제, 계정 행은 유지."""
    result: SnsAccountResponse = await sns_service.disconnect_account(db, manager.store_id, platform)
    await db.commit()
    return result


# --- 템플릿 (Templates) ---

@router.get("/templates", response_model=list[SnsTemplateResponse])
async def list_templates(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[SnsTemplateResponse]:
    return await sns_service.list_templates(db, manager.store_id)


@router.post("/templates/preview", response_model=TemplatePreviewResponse)
async def preview_template(
    data: TemplatePreviewRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> TemplatePreviewResponse:
    """템플릿 변수 치환 미리보기 — 오늘 기준."""
    content: str = await sns_service.preview(db, manager.store_id, data.content)
    return TemplatePreviewResponse(content=content)


@router.post("/templates", response_model=SnsTemplateResponse, status_code=201)
async def create_template(
    data: SnsTemplateCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> SnsTemplateResponse:
    result: SnsTemplateResponse = await sns_service.create_template(db, manager.store_id, data)
    await db.commit()
    return result


@router.put("/templates/{template_id}", response_model=SnsTemplateResponse)
async def update_template(
    template_id: UUID,
    data: SnsTemplateUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> SnsTemplateResponse:
    result: SnsTemplateResponse = await sns_service.update_template(db, manager.store_id, template_id, data)
    await db.commit()
    return result


@router.delete("/templates/{template_id}", status_code=204)
async def delete_template(
    template_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await sns_service.delete_template(db, manager.store_id, template_id)
    await db.commit()


# --- 게시 (Posts) ---

@router.get("/posts/pending", response_model=list[ScheduledPostResponse])
async def list_pending_posts(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[ScheduledPostResponse]:
    """대기 중인 예약 게시물 (예약 시각순)."""
    return await sns_service.list_pending(db, manager.store_id)


@router.get("/posts/history", response_model=list[ScheduledPostResponse])
async def list_post_history(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[ScheduledPostResponse]:
    """게시 이력 (posted/failed, 최신순)."""
    return await sns_service.list_history(db, manager.store_id)


@router.post("/posts/now", response_model=ScheduledPostResponse)
async def post_now(
    data: PostNowRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> ScheduledPostResponse:
    """즉시 게시 — 결과(posted/failed)를 이력으로 기록."""
    result: ScheduledPostResponse = await sns_service.post_now(db, manager, data)
    await db.commit()
    return result


@router.post("/posts", response_model=ScheduledPostResponse, status_code=201)
async def create_post(
    data: ScheduledPostCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> ScheduledPostResponse:
    result: ScheduledPostResponse = await sns_service.create_post(db, manager, data)
    await db.commit()
    return result


@router.delete("/posts/{post_id}", status_code=204)
async def delete_post(
    post_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await sns_service.delete_post(db, manager.store_id, post_id)
    await db.commit()


# --- 정기 게시 (Recurring schedules) ---

@router.get("/recurring", response_model=list[RecurringScheduleResponse])
async def list_schedules(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[RecurringScheduleResponse]:
    return await sns_service.list_schedules(db, manager.store_id)


@router.post("/recurring", response_model=RecurringScheduleResponse, status_code=201)
async def create_schedule(
    data: RecurringScheduleCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> RecurringScheduleResponse:
    """정기 게시 생성 — 템플릿형은 template_id 필수."""
    result: RecurringScheduleResponse = await sns_service.create_schedule(db, manager, data)
    await db.commit()
    return result


@router.put("/recurring/{schedule_id}", response_model=RecurringScheduleResponse)
async def update_schedule(
    schedule_id: UUID,
    data: RecurringScheduleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> RecurringScheduleResponse:
    result: RecurringScheduleResponse = await sns_service.update_schedule(db, manager.store_id, schedule_id, data)
    await db.commit()
    return result


@router.post("/recurring/{schedule_id}/toggle", response_model=RecurringScheduleResponse)
async def toggle_schedule(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> RecurringScheduleResponse:
    result: RecurringScheduleResponse = await sns_service.toggle_schedule(db, manager.store_id, schedule_id)
    await db.commit()
    return result


@router.delete("/recurring/{schedule_id}", status_code=204)
async def delete_schedule(
    schedule_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await sns_service.delete_schedule(db, manager.store_id, schedule_id)
    await db.commit()
