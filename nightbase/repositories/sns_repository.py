"""SNS 레포지토리 — 계정, 템플릿, 예약 게시물, 반복 스케줄 쿼리.

SNS Repository — Queries for SNS accounts, templates, scheduled posts and
recurring schedules, including the dispatch queue.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.sns import SnsAccount, SnsRecurringSchedule, SnsScheduledPost, SnsTemplate
from nightbase.repositories.base import BaseRepository

# 게시 이력 보관 수 — Posted history kept per store
HISTORY_LIMIT: int = 50


class SnsAccountRepository(BaseRepository[SnsAccount]):
    """SNS 계정 레포지토리."""

    def __init__(self) -> None:
        super().__init__(SnsAccount)

    async def get_by_platform(self, db: AsyncSession, store_id: UUID, platform: str) -> SnsAccount | None:
        result = await db.execute(
            select(SnsAccount).where(SnsAccount.store_id == store_id, SnsAccount.platform == platform)
        )
        return result.scalar_one_or_none()

    async def get_connected(self, db: AsyncSession, store_id: UUID, platform: str) -> SnsAccount | None:
        """연결된 계정 — Connected account of a platform, or None."""
        result = await db.execute(
            select(SnsAccount).where(
                SnsAccount.store_id == store_id,
                SnsAccount.platform == platform,
                SnsAccount.is_connected.is_(True),
            )
        )
        return result.scalar_one_or_none()


class SnsTemplateRepository(BaseRepository[SnsTemplate]):
    """SNS 템플릿 레포지토리."""

    def __init__(self) -> None:
        super().__init__(SnsTemplate)


class SnsScheduledPostRepository(BaseRepository[SnsScheduledPost]):
    """예약 게시물 레포지토리 — Scheduled post queue."""

    def __init__(self) -> None:
        super().__init__(SnsScheduledPost)

    async def get_pending(self, db: AsyncSession, store_id: UUID) -> list[SnsScheduledPost]:
        """대기 중 게시물 (예약 시각 순) — Pending posts, earliest first."""
        result = await db.execute(
            select(SnsScheduledPost)
            .where(SnsScheduledPost.store_id == store_id, SnsScheduledPost.status == "pending")
            .order_by(SnsScheduledPost.scheduled_at)
        )
        return list(result.scalars().all())

    async def get_history(self, db: AsyncSession, store_id: UUID, limit: int = HISTORY_LIMIT) -> list[SnsScheduledPost]:
        """게시 이력 (최신순) — Posted posts, newest first."""
        result = await db.execute(
            select(SnsScheduledPost)
            .where(SnsScheduledPost.store_id == store_id, SnsScheduledPost.status == "posted")
            .order_by(SnsScheduledPost.posted_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_due(self, db: AsyncSession, now: datetime, limit: int = 50) -> list[SnsScheduledPost]:
        """전 매장의 실행 대상 게시물.

        Pending posts of every store whose ``scheduled_at`` is not after
        ``now``, ordered by ``scheduled_at``.
        """
        result = await db.execute(
            select(SnsScheduledPost)
            .where(SnsScheduledPost.status == "pending", SnsScheduledPost.scheduled_at <= now)
            .order_by(SnsScheduledPost.scheduled_at)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def trim_history(self, db: AsyncSession, keep: int = HISTORY_LIMIT) -> int:
        """매장별 게시 이력을 최신 ``keep`` 건으로 정리합니다.

        Delete posted rows beyond the newest ``keep`` per store.

        Returns:
            int: 삭제된 행 수 (Number of deleted rows)
        """
        store_ids = (
            await db.execute(
                select(SnsScheduledPost.store_id)
                .where(SnsScheduledPost.status == "posted")
                .distinct()
            )
        ).scalars().all()

        trimmed: int = 0
        for store_id in store_ids:
            stale_ids = (
                await db.execute(
                    select(SnsScheduledPost.id)
                    .where(SnsScheduledPost.store_id == store_id, SnsScheduledPost.status == "posted")
                    .order_by(SnsScheduledPost.posted_at.desc())
                    .offset(keep)
                )
            ).scalars().all()
            if stale_ids:
                await db.execute(delete(SnsScheduledPost).where(SnsScheduledPost.id.in_(stale_ids)))
                trimmed += len(stale_ids)
        await db.flush()
        return trimmed


class SnsRecurringScheduleRepository(BaseRepository[SnsRecurringSchedule]):
    """반복 스케줄 레포지토리."""

    def __init__(self) -> None:
        super().__init__(SnsRecurringSchedule)

    async def get_active_for_hour(self, db: AsyncSession, hour: int) -> list[SnsRecurringSchedule]:
        """활성 스케줄 중 지정 시각 대상 — Active schedules of every store at ``hour``."""
        result = await db.execute(
            select(SnsRecurringSchedule).where(
                SnsRecurringSchedule.is_active.is_(True),
                SnsRecurringSchedule.schedule_hour == hour,
            )
        )
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instances
sns_account_repository: SnsAccountRepository = SnsAccountRepository()
sns_template_repository: SnsTemplateRepository = SnsTemplateRepository()
sns_post_repository: SnsScheduledPostRepository = SnsScheduledPostRepository()
sns_recurring_repository: SnsRecurringScheduleRepository = SnsRecurringScheduleRepository()
