"""출근 기록 레포지토리 — 근태 관련 DB 쿼리 담당.

Work Record Repository — Handles work record (attendance) database queries:
daily lists, per-profile history, today's record for self-service clocking,
monthly calendar counts and conflict detection.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nightbase.models.attendance import WorkRecord
from nightbase.models.user import Profile
from nightbase.repositories.base import BaseRepository

# 취소 상태 — Cancelled records are hidden from lists and conflicts
CANCELLED = "cancelled"


class WorkRecordRepository(BaseRepository[WorkRecord]):
    """출근 기록 레포지토리.

    Work record repository with date, profile and calendar queries.

    Extends:
        BaseRepository[WorkRecord]
    """

    def __init__(self) -> None:
        super().__init__(WorkRecord)

    def _with_profile(self) -> Select:
        return select(WorkRecord).options(selectinload(WorkRecord.profile))

    async def get_detail(self, db: AsyncSession, record_id: UUID, store_id: UUID) -> WorkRecord | None:
        result = await db.execute(
            self._with_profile().where(WorkRecord.id == record_id, WorkRecord.store_id == store_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_date(self, db: AsyncSession, store_id: UUID, work_date: date) -> list[WorkRecord]:
        """날짜별 출근 기록 (취소 제외).

        Records of one date in the store, cancelled ones excluded, ordered by
        scheduled start.
        """
        result = await db.execute(
            self._with_profile()
            .where(
                WorkRecord.store_id == store_id,
                WorkRecord.work_date == work_date,
                WorkRecord.status != CANCELLED,
            )
            .order_by(WorkRecord.scheduled_start_time.asc().nulls_last(), WorkRecord.created_at)
        )
        return list(result.scalars().all())

    async def get_by_profile(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[WorkRecord]:
        """프로필별 출근 기록 (최신순) — A profile's records, newest date first."""
        query: Select = self._with_profile().where(
            WorkRecord.store_id == store_id,
            WorkRecord.profile_id == profile_id,
        )
        if date_from is not None:
            query = query.where(WorkRecord.work_date >= date_from)
        if date_to is not None:
            query = query.where(WorkRecord.work_date <= date_to)
        result = await db.execute(query.order_by(WorkRecord.work_date.desc()))
        return list(result.scalars().all())

    async def get_today_for_profile(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_id: UUID,
        today: date,
    ) -> WorkRecord | None:
        """오늘의 출근 기록 (취소 제외, 가장 이른 예정 순).

        The caller's non-cancelled record of ``today``; the earliest
        scheduled one wins when several exist.
        """
        result = await db.execute(
            self._with_profile()
            .where(
                WorkRecord.store_id == store_id,
                WorkRecord.profile_id == profile_id,
                WorkRecord.work_date == today,
                WorkRecord.status != CANCELLED,
            )
            .order_by(WorkRecord.scheduled_start_time.asc().nulls_last(), WorkRecord.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_by_submission(self, db: AsyncSession, submission_id: UUID) -> WorkRecord | None:
        """제출 연결 출근 기록 — Record linked to a shift submission."""
        result = await db.execute(
            select(WorkRecord).where(WorkRecord.shift_submission_id == submission_id).limit(1)
        )
        return result.scalar_one_or_none()

    async def get_month_counts(
        self,
        db: AsyncSession,
        store_id: UUID,
        date_from: date,
        date_to: date,
    ) -> list[tuple[date, str, int]]:
        """월간 상태별 집계.

        Count records per (work_date, status) in ``[date_from, date_to]``.

        Returns:
            list[tuple[date, str, int]]: (근무일, 상태, 건수) 목록
        """
        result = await db.execute(
            select(WorkRecord.work_date, WorkRecord.status, func.count())
            .where(
                WorkRecord.store_id == store_id,
                WorkRecord.work_date >= date_from,
                WorkRecord.work_date <= date_to,
            )
            .group_by(WorkRecord.work_date, WorkRecord.status)
        )
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def get_conflicts(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_ids: Sequence[UUID],
        dates: Sequence[date],
    ) -> list[tuple[UUID, str | None, date]]:
        """이미 근무가 잡힌 프로필/날짜 조회.

        Profiles that already have a non-cancelled record on any of
        ``dates``.

        Returns:
            list[tuple[UUID, str | None, date]]: (프로필 ID, 표시 이름, 근무일)
        """
        if not profile_ids or not dates:
            return []
        result = await db.execute(
            select(WorkRecord.profile_id, Profile.display_name, WorkRecord.work_date)
            .join(Profile, Profile.id == WorkRecord.profile_id)
            .where(
                WorkRecord.store_id == store_id,
                WorkRecord.profile_id.in_(profile_ids),
                WorkRecord.work_date.in_(dates),
                WorkRecord.status != CANCELLED,
            )
            .order_by(WorkRecord.work_date, Profile.display_name)
        )
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def get_by_status_on_date(
        self,
        db: AsyncSession,
        store_id: UUID,
        work_date: date,
        statuses: Sequence[str],
        role: str | None = None,
    ) -> list[WorkRecord]:
        """상태/역할별 당일 기록 — Records of a date in the given statuses."""
        query: Select = (
            self._with_profile()
            .join(Profile, Profile.id == WorkRecord.profile_id)
            .where(
                WorkRecord.store_id == store_id,
                WorkRecord.work_date == work_date,
                WorkRecord.status.in_(statuses),
            )
        )
        if role is not None:
            query = query.where(Profile.role == role)
        result = await db.execute(query.order_by(WorkRecord.scheduled_start_time.asc().nulls_last()))
        return list(result.scalars().all())

    async def get_open_record(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_id: UUID,
        dates: Sequence[date],
    ) -> WorkRecord | None:
        """퇴근하지 않은 근무 중 기록 (최신 생성순).

        The newest record among ``dates`` that is clocked in but not yet
        clocked out. Yesterday is included by callers so a shift crossing
        midnight can still be closed.
        """
        result = await db.execute(
            select(WorkRecord)
            .where(
                WorkRecord.store_id == store_id,
                WorkRecord.profile_id == profile_id,
                WorkRecord.work_date.in_(dates),
                WorkRecord.status == "working",
                WorkRecord.clock_in.is_not(None),
                WorkRecord.clock_out.is_(None),
            )
            .order_by(WorkRecord.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_unclosed_before(self, db: AsyncSession, before: date) -> list[WorkRecord]:
        """전 매장의 퇴근 누락 후보 — Working records dated before ``before``."""
        result = await db.execute(
            select(WorkRecord)
            .where(
                WorkRecord.work_date < before,
                WorkRecord.status == "working",
                WorkRecord.clock_out.is_(None),
            )
            .order_by(WorkRecord.work_date, WorkRecord.created_at)
        )
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
work_record_repository: WorkRecordRepository = WorkRecordRepository()
