"""코멘트 레포지토리 — 코멘트 및 좋아요 DB 쿼리 담당.

Comment Repository — Comment and comment-like database queries.
"""

from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nightbase.models.comment import Comment, CommentLike
from nightbase.repositories.base import BaseRepository


class CommentRepository(BaseRepository[Comment]):
    """코멘트 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Comment)

    async def get_by_target(
        self,
        db: AsyncSession,
        store_id: UUID,
        target_column: str,
        target_id: UUID,
    ) -> list[Comment]:
        """대상별 코멘트 목록 (오래된 순, 작성자/좋아요 포함).

        Comments of one target, oldest first, with author and likes loaded.

        Args:
            target_column: 대상 컬럼명 (e.g. "target_menu_id")
            target_id: 대상 UUID (Target row UUID)
        """
        result = await db.execute(
            select(Comment)
            .options(selectinload(Comment.author), selectinload(Comment.likes))
            .where(
                Comment.store_id == store_id,
                getattr(Comment, target_column) == target_id,
            )
            .order_by(Comment.created_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_detail(self, db: AsyncSession, comment_id: UUID, store_id: UUID) -> Comment | None:
        result = await db.execute(
            select(Comment)
            .options(selectinload(Comment.author), selectinload(Comment.likes))
            .where(Comment.id == comment_id, Comment.store_id == store_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_like(self, db: AsyncSession, comment_id: UUID, profile_id: UUID) -> CommentLike | None:
        result = await db.execute(
            select(CommentLike).where(
                CommentLike.comment_id == comment_id,
                CommentLike.profile_id == profile_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_like(self, db: AsyncSession, comment_id: UUID, profile_id: UUID) -> CommentLike:
        like = CommentLike(comment_id=comment_id, profile_id=profile_id)
        db.add(like)
        await db.flush()
        return like

    async def remove_like(self, db: AsyncSession, comment_id: UUID, profile_id: UUID) -> None:
        await db.execute(
            delete(CommentLike).where(
                CommentLike.comment_id == comment_id,
                CommentLike.profile_id == profile_id,
            )
        )
        await db.flush()

    async def count_likes(self, db: AsyncSession, comment_id: UUID) -> int:
        result = await db.execute(
            select(func.count()).select_from(CommentLike).where(CommentLike.comment_id == comment_id)
        )
        return result.scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
comment_repository: CommentRepository = CommentRepository()
