"""SNS 서비스 — 계정 연동, 템플릿, 예약/즉시 게시, 정기 게시 관리.

SNS Service — Business logic for SNS accounts, templates, scheduled and
immediate posts, and recurring schedules. Publishing itself lives in
``sns_dispatch_service``.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.sns import SnsAccount, SnsRecurringSchedule, SnsScheduledPost, SnsTemplate
from nightbase.models.user import Profile
from nightbase.repositories.sns_repository import (
    sns_account_repository,
    sns_post_repository,
    sns_recurring_repository,
    sns_template_repository,
)
from nightbase.schemas.sns import (
    PostNowRequest,
    RecurringScheduleCreate,
    RecurringScheduleResponse,
    RecurringScheduleUpdate,
    ScheduledPostCreate,
    ScheduledPostResponse,
    SnsAccountConnect,
    SnsAccountResponse,
    SnsTemplateCreate,
    SnsTemplateResponse,
    SnsTemplateUpdate,
)
from nightbase.services.sns_dispatch_service import PlatformResult, sns_dispatch_service
from nightbase.utils.exceptions import BadRequestError, NotFoundError
from nightbase.utils.timezone import ensure_utc, now_utc


class SnsService:
    """SNS 관련 비즈니스 로직을 처리하는 서비스."""

    # --- 응답 변환 (Response conversion) ---

    def _account_response(self, account: SnsAccount) -> SnsAccountResponse:
        return SnsAccountResponse(
            id=str(account.id),
            platform=account.platform,
            account_name=account.account_name,
            account_id=account.account_id,
            is_connected=account.is_connected,
            token_expires_at=account.token_expires_at,
        )

    def _template_response(self, template: SnsTemplate) -> SnsTemplateResponse:
        return SnsTemplateResponse(
            id=str(template.id),
            name=template.name,
            content=template.content,
            template_type=template.template_type,
            image_style=template.image_style,
            created_at=template.created_at,
        )

    def _post_response(self, post: SnsScheduledPost) -> ScheduledPostResponse:
        return ScheduledPostResponse(
            id=str(post.id),
            content=post.content,
            image_url=post.image_url,
            platforms=list(post.platforms or []),
            scheduled_at=post.scheduled_at,
            status=post.status,
            error_message=post.error_message,
            posted_at=post.posted_at,
            created_by=str(post.created_by) if post.created_by else None,
            created_at=post.created_at,
        )

    def _schedule_response(self, schedule: SnsRecurringSchedule) -> RecurringScheduleResponse:
        return RecurringScheduleResponse(
            id=str(schedule.id),
            name=schedule.name,
            content_type=schedule.content_type,
            template_id=str(schedule.template_id) if schedule.template_id else None,
            platforms=list(schedule.platforms or []),
            schedule_hour=schedule.schedule_hour,
            is_active=schedule.is_active,
            last_run_at=schedule.last_run_at,
            created_at=schedule.created_at,
        )

    # --- 계정 (Accounts) ---

    async def list_accounts(self, db: AsyncSession, store_id: UUID) -> list[SnsAccountResponse]:
        """연동 계정 목록 — 토큰은 반환하지 않음 (tokens are never returned)."""
        accounts = await sns_account_repository.get_all(db, store_id, order_by=SnsAccount.platform)
        return [self._account_response(a) for a in accounts]

    async def connect_account(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: SnsAccountConnect,
    ) -> SnsAccountResponse:
        """OAuth 교환으로 받은 토큰을 저장합니다 — 플랫폼당 1계정, 있으면 갱신."""
        values: dict = {
            "account_name": data.account_name,
            "account_id": data.account_id,
            "access_token": data.access_token,
            "refresh_token": data.refresh_token,
            "token_expires_at": ensure_utc(data.token_expires_at),
            "is_connected": True,
        }
        account: SnsAccount | None = await sns_account_repository.get_by_platform(db, store_id, data.platform)
        if account is None:
            account = await sns_account_repository.create(
                db, {"store_id": store_id, "platform": data.platform, **values}
            )
        else:
            account = await sns_account_repository.update(db, account.id, values, store_id)
        return self._account_response(account)

    async def disconnect_account(self, db: AsyncSession, store_id: UUID, platform: str) -> SnsAccountResponse:
        """연동 해제 — 토큰을 지우고 is_connected=False.

        Raises:
            NotFoundError: 연동 계정이 없을 때 (No account for the platform)
        """
        account: SnsAccount | None = await sns_account_repository.get_by_platform(db, store_id, platform)
        if account is None:
            raise NotFoundError("SNS account not found")
        account.access_token = None
        account.refresh_token = None
        account.token_expires_at = None
        account.is_connected = False
        await db.flush()
        return self._account_response(account)

    # --- 템플릿 (Templates) ---

    async def list_templates(self, db: AsyncSession, store_id: UUID) -> list[SnsTemplateResponse]:
        templates = await sns_template_repository.get_all(db, store_id, order_by=SnsTemplate.created_at)
        return [self._template_response(t) for t in templates]

    async def create_template(self, db: AsyncSession, store_id: UUID, data: SnsTemplateCreate) -> SnsTemplateResponse:
        template: SnsTemplate = await sns_template_repository.create(db, {"store_id": store_id, **data.model_dump()})
        return self._template_response(template)

    async def update_template(
        self,
        db: AsyncSession,
        store_id: UUID,
        template_id: UUID,
        data: SnsTemplateUpdate,
    ) -> SnsTemplateResponse:
        template: SnsTemplate | None = await sns_template_repository.update(
            db, template_id, data.model_dump(exclude_unset=True), store_id
        )
        if template is None:
            raise NotFoundError("SNS template not found")
        return self._template_response(template)

    async def delete_template(self, db: AsyncSession, store_id: UUID, template_id: UUID) -> None:
        """템플릿 삭제 — 참조하는 정기 게시의 template_id 는 NULL 이 됩니다."""
        if not await sns_template_repository.delete(db, template_id, store_id):
            raise NotFoundError("SNS template not found")

    async def preview(self, db: AsyncSession, store_id: UUID, content: str) -> str:
        """템플릿 미리보기 — 오늘 기준 변수 치환 결과."""
        return await sns_dispatch_service.render_template(db, store_id, content)

    # --- 게시물 (Posts) ---

    async def list_pending(self, db: AsyncSession, store_id: UUID) -> list[ScheduledPostResponse]:
        return [self._post_response(p) for p in await sns_post_repository.get_pending(db, store_id)]

    async def list_history(self, db: AsyncSession, store_id: UUID) -> list[ScheduledPostResponse]:
        """게시 이력 (최신순, 최대 50건)."""
        return [self._post_response(p) for p in await sns_post_repository.get_history(db, store_id)]

    async def create_post(
        self,
        db: AsyncSession,
        profile: Profile,
        data: ScheduledPostCreate,
    ) -> ScheduledPostResponse:
        """예약 게시물 생성 — 지정 시각 이후 디스패치에서 게시됩니다."""
        post: SnsScheduledPost = await sns_post_repository.create(
            db,
            {
                "store_id": profile.store_id,
                "content": data.content,
                "image_url": data.image_url,
                "platforms": list(dict.fromkeys(data.platforms)),
                "scheduled_at": ensure_utc(data.scheduled_at),
                "status": "pending",
                "created_by": profile.id,
            },
        )
        return self._post_response(post)

    async def delete_post(self, db: AsyncSession, store_id: UUID, post_id: UUID) -> None:
        if not await sns_post_repository.delete(db, post_id, store_id):
            raise NotFoundError("Scheduled post not found")

    async def post_now(self, db: AsyncSession, profile: Profile, data: PostNowRequest) -> ScheduledPostResponse:
        """즉시 게시합니다.

        Publish immediately and keep the attempt in the post history. The
        outcome is reported through ``status`` and ``error_message``.

        Raises:
            BadRequestError: 연동된 계정이 하나도 없을 때 (No connected account)
        """
        accounts = await sns_account_repository.get_all(db, profile.store_id, filters={"is_connected": True})
        if not accounts:
            raise BadRequestError("No connected SNS account")

        platforms: list[str] = list(dict.fromkeys(data.platforms))
        results: list[PlatformResult] = await sns_dispatch_service.publish(
            db, profile.store_id, platforms, data.content
        )
        post = SnsScheduledPost(
            store_id=profile.store_id,
            content=data.content,
            image_url=data.image_url,
            platforms=platforms,
            scheduled_at=now_utc(),
            created_by=profile.id,
        )
        sns_dispatch_service.apply_results(post, results)
        db.add(post)
        await db.flush()
        await db.refresh(post)
        await sns_post_repository.trim_history(db)
        return self._post_response(post)

    # --- 정기 게시 (Recurring schedules) ---

    async def _check_template(self, db: AsyncSession, store_id: UUID, content_type: str, template_id: str | None) -> UUID | None:
        """정기 게시 템플릿 확인 — template 형식이면 매장 템플릿이 필요."""
        if content_type != "template":
            return UUID(template_id) if template_id else None
        if not template_id:
            raise BadRequestError("template_id is required for template schedules")
        template_uuid: UUID = UUID(template_id)
        if await sns_template_repository.get_by_id(db, template_uuid, store_id) is None:
            raise NotFoundError("SNS template not found")
        return template_uuid

    async def list_schedules(self, db: AsyncSession, store_id: UUID) -> list[RecurringScheduleResponse]:
        schedules = await sns_recurring_repository.get_all(db, store_id, order_by=SnsRecurringSchedule.schedule_hour)
        return [self._schedule_response(s) for s in schedules]

    async def create_schedule(
        self,
        db: AsyncSession,
        profile: Profile,
        data: RecurringScheduleCreate,
    ) -> RecurringScheduleResponse:
        template_id: UUID | None = await self._check_template(db, profile.store_id, data.content_type, data.template_id)
        schedule: SnsRecurringSchedule = await sns_recurring_repository.create(
            db,
            {
                "store_id": profile.store_id,
                "name": data.name,
                "content_type": data.content_type,
                "template_id": template_id,
                "platforms": list(dict.fromkeys(data.platforms)),
                "schedule_hour": data.schedule_hour,
                "is_active": data.is_active,
                "created_by": profile.id,
            },
        )
        return self._schedule_response(schedule)

    async def update_schedule(
        self,
        db: AsyncSession,
        store_id: UUID,
        schedule_id: UUID,
        data: RecurringScheduleUpdate,
    ) -> RecurringScheduleResponse:
        schedule: SnsRecurringSchedule | None = await sns_recurring_repository.get_by_id(db, schedule_id, store_id)
        if schedule is None:
            raise NotFoundError("Recurring schedule not found")

        update_data: dict = data.model_dump(exclude_unset=True)
        content_type: str = update_data.get("content_type") or schedule.content_type
        if "template_id" in update_data or "content_type" in update_data:
            template_id = update_data.get("template_id", str(schedule.template_id) if schedule.template_id else None)
            update_data["template_id"] = await self._check_template(db, store_id, content_type, template_id)
        for field in ("name", "content_type", "platforms", "schedule_hour", "is_active"):
            if field in update_data and update_data[field] is None:
                del update_data[field]

        schedule = await sns_recurring_repository.update(db, schedule_id, update_data, store_id)
        return self._schedule_response(schedule)

    async def toggle_schedule(self, db: AsyncSession, store_id: UUID, schedule_id: UUID) -> RecurringScheduleResponse:
        """활성/비활성 전환 — Flip ``is_active``."""
        schedule: SnsRecurringSchedule | None = await sns_recurring_repository.get_by_id(db, schedule_id, store_id)
        if schedule is None:
            raise NotFoundError("Recurring schedule not found")
        schedule.is_active = not schedule.is_active
        await db.flush()
        return self._schedule_response(schedule)

    async def delete_schedule(self, db: AsyncSession, store_id: UUID, schedule_id: UUID) -> None:
        if not await sns_recurring_repository.delete(db, schedule_id, store_id):
            raise NotFoundError("Recurring schedule not found")


# 싱글턴 인스턴스 — Singleton instance
sns_service: SnsService = SnsService()
