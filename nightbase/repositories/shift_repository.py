"""시프트 레포지토리 — 모집, 모집 날짜, 제출 쿼리.

Shift Repository — Queries for shift requests, request dates and
submissions.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nightbase.models.shift import (
    APPROVED_STATUSES,
    SUBMISSION_PENDING,
    SUBMISSION_REJECTED,
    ShiftRequest,
    ShiftRequestDate,
    ShiftSubmission,
)
from nightbase.repositories.base import BaseRepository


class ShiftRequestRepository(BaseRepository[ShiftRequest]):
    """시프트 모집 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(ShiftRequest)

    async def get_by_store(self, db: AsyncSession, store_id: UUID) -> list[ShiftRequest]:
        """매장의 모집 목록 (최신순, 날짜 포함) — Requests with dates, newest first."""
        result = await db.execute(
            select(ShiftRequest)
            .options(selectinload(ShiftRequest.dates))
            .where(ShiftRequest.store_id == store_id)
            .order_by(ShiftRequest.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_detail(self, db: AsyncSession, request_id: UUID, store_id: UUID) -> ShiftRequest | None:
        result = await db.execute(
            select(ShiftRequest)
            .options(selectinload(ShiftRequest.dates))
            .where(ShiftRequest.id == request_id, ShiftRequest.store_id == store_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_status_counts(
        self,
        db: AsyncSession,
        request_ids: Sequence[UUID],
    ) -> dict[UUID, dict[str, int]]:
        """모집별 제출 상태 집계.

        Count submissions per request, bucketed into pending / approved /
        rejected.

        Returns:
            dict[UUID, dict[str, int]]: {request_id: {"pending", "approved", "rejected"}}
        """
        counts: dict[UUID, dict[str, int]] = {
            rid: {"pending": 0, "approved": 0, "rejected": 0} for rid in request_ids
        }
        if not request_ids:
            return counts
        result = await db.execute(
            select(ShiftSubmission.shift_request_id, ShiftSubmission.status, func.count())
            .where(ShiftSubmission.shift_request_id.in_(request_ids))
            .group_by(ShiftSubmission.shift_request_id, ShiftSubmission.status)
        )
        for request_id, status, count in result.all():
            if status == SUBMISSION_PENDING:
                counts[request_id]["pending"] += count
            elif status == SUBMISSION_REJECTED:
                counts[request_id]["rejected"] += count
            elif status in APPROVED_STATUSES:
                counts[request_id]["approved"] += count
        return counts

    async def get_open_by_store(self, db: AsyncSession, store_id: UUID) -> list[ShiftRequest]:
        """저장 상태가 open 인 모집 — Requests whose stored status is open."""
        result = await db.execute(
            select(ShiftRequest)
            .options(selectinload(ShiftRequest.dates))
            .where(ShiftRequest.store_id == store_id, ShiftRequest.status == "open")
            .order_by(ShiftRequest.deadline)
        )
        return list(result.scalars().all())


class ShiftRequestDateRepository(BaseRepository[ShiftRequestDate]):
    """모집 날짜 레포지토리 — Queries for shift_request_dates."""

    def __init__(self) -> None:
        super().__init__(ShiftRequestDate)

    async def get_with_request(
        self,
        db: AsyncSession,
        date_id: UUID,
        store_id: UUID,
    ) -> ShiftRequestDate | None:
        """매장 범위 모집 날짜 — Request date with its request, scoped to the store."""
        result = await db.execute(
            select(ShiftRequestDate)
            .join(ShiftRequest, ShiftRequest.id == ShiftRequestDate.shift_request_id)
            .options(selectinload(ShiftRequestDate.shift_request))
            .where(ShiftRequestDate.id == date_id, ShiftRequest.store_id == store_id)
        )
        return result.scalar_one_or_none()


class ShiftSubmissionRepository(BaseRepository[ShiftSubmission]):
    """시프트 제출 레포지토리 — Queries for shift_submissions."""

    def __init__(self) -> None:
        super().__init__(ShiftSubmission)

    def _with_relations(self) -> Select:
        return select(ShiftSubmission).options(
            selectinload(ShiftSubmission.profile),
            selectinload(ShiftSubmission.request_date),
        )

    async def get_detail(self, db: AsyncSession, submission_id: UUID, store_id: UUID) -> ShiftSubmission | None:
        result = await db.execute(
            self._with_relations().where(
                ShiftSubmission.id == submission_id,
                ShiftSubmission.store_id == store_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_date(self, db: AsyncSession, date_id: UUID) -> list[ShiftSubmission]:
        """모집 날짜의 제출 목록 — Submissions of one request date, oldest first."""
        result = await db.execute(
            self._with_relations()
            .where(ShiftSubmission.shift_request_date_id == date_id)
            .order_by(ShiftSubmission.created_at)
        )
        return list(result.scalars().all())

    async def get_by_profile_and_request(
        self,
        db: AsyncSession,
        profile_id: UUID,
        request_ids: Sequence[UUID],
    ) -> list[ShiftSubmission]:
        """프로필의 모집별 제출 — A profile's submissions across requests."""
        if not request_ids:
            return []
        result = await db.execute(
            select(ShiftSubmission).where(
                ShiftSubmission.profile_id == profile_id,
                ShiftSubmission.shift_request_id.in_(request_ids),
            )
        )
        return list(result.scalars().all())

    async def get_profile_submission_for_date(
        self,
        db: AsyncSession,
        profile_id: UUID,
        date_id: UUID,
    ) -> ShiftSubmission | None:
        result = await db.execute(
            select(ShiftSubmission).where(
                ShiftSubmission.profile_id == profile_id,
                ShiftSubmission.shift_request_date_id == date_id,
            )
        )
        return result.scalar_one_or_none()

    async def delete_pending(
        self,
        db: AsyncSession,
        profile_id: UUID,
        request_id: UUID,
        date_ids: Sequence[UUID] | None = None,
    ) -> int:
        """미결정 제출 삭제 — Delete a profile's pending rows of a request.

        Args:
            date_ids: 지정 시 해당 날짜만 삭제 (Restrict to these dates when given)

        Returns:
            int: 삭제된 행 수 (Number of deleted rows)
        """
        stmt = delete(ShiftSubmission).where(
            ShiftSubmission.profile_id == profile_id,
            ShiftSubmission.shift_request_id == request_id,
            ShiftSubmission.status == SUBMISSION_PENDING,
        )
        if date_ids is not None:
            stmt = stmt.where(ShiftSubmission.shift_request_date_id.in_(date_ids))
        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount or 0

    async def get_pending_available(self, db: AsyncSession, date_id: UUID) -> list[ShiftSubmission]:
        """일괄 승인 대상 — Pending, available submissions of a request date."""
        result = await db.execute(
            self._with_relations().where(
                ShiftSubmission.shift_request_date_id == date_id,
                ShiftSubmission.status == SUBMISSION_PENDING,
                ShiftSubmission.availability == "available",
            )
        )
        return list(result.scalars().all())

    async def get_approved_upcoming(
        self,
        db: AsyncSession,
        profile_id: UUID,
        store_id: UUID,
        from_date: date,
    ) -> list[tuple[ShiftSubmission, str]]:
        """오늘 이후 확정 시프트 — Approved submissions from ``from_date``, with request titles."""
        result = await db.execute(
            select(ShiftSubmission, ShiftRequest.title)
            .join(ShiftRequest, ShiftRequest.id == ShiftSubmission.shift_request_id)
            .where(
                ShiftSubmission.profile_id == profile_id,
                ShiftSubmission.store_id == store_id,
                ShiftSubmission.status.in_(APPROVED_STATUSES),
                ShiftSubmission.work_date >= from_date,
            )
            .order_by(ShiftSubmission.work_date, ShiftSubmission.approved_start_time)
        )
        return [(row[0], row[1]) for row in result.all()]


# 싱글턴 인스턴스 — Singleton instances
shift_request_repository: ShiftRequestRepository = ShiftRequestRepository()
shift_request_date_repository: ShiftRequestDateRepository = ShiftRequestDateRepository()
shift_submission_repository: ShiftSubmissionRepository = ShiftSubmissionRepository()
