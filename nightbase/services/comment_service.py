"""코멘트 서비스 — 코멘트 및 좋아요 비즈니스 로직.

Comment Service — Business logic for comments attached to bottle keeps,
menus, profiles, shift submissions and work records, and their likes.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.attendance import WorkRecord
from nightbase.models.bottle import BottleKeep
from nightbase.models.comment import COMMENT_TARGET_COLUMNS, Comment
from nightbase.models.menu import Menu
from nightbase.models.shift import ShiftSubmission
from nightbase.models.user import Profile
from nightbase.repositories.base import BaseRepository
from nightbase.repositories.bottle_repository import bottle_keep_repository
from nightbase.repositories.comment_repository import comment_repository
from nightbase.repositories.menu_repository import menu_repository
from nightbase.repositories.profile_repository import profile_repository
from nightbase.repositories.shift_repository import shift_submission_repository
from nightbase.repositories.work_record_repository import work_record_repository
from nightbase.schemas.comment import CommentCreate, CommentResponse, CommentUpdate, LikeToggleResponse
from nightbase.utils.exceptions import ForbiddenError, NotFoundError

# 대상 종류 → 레포지토리 — Repository used to check that a target exists
_TARGET_REPOSITORIES: dict[str, BaseRepository] = {
    "bottle_keep": bottle_keep_repository,
    "menu": menu_repository,
    "profile": profile_repository,
    "submission": shift_submission_repository,
    "work_record": work_record_repository,
}


class CommentService:
    """코멘트 관련 비즈니스 로직을 처리하는 서비스."""

    def _target_of(self, comment: Comment) -> tuple[str, str]:
        """코멘트의 대상 (종류, UUID) — The single target set on the row."""
        for target_type, column in COMMENT_TARGET_COLUMNS.items():
            value: UUID | None = getattr(comment, column)
            if value is not None:
                return target_type, str(value)
        return "", ""

    def _to_response(self, comment: Comment, viewer_id: UUID) -> CommentResponse:
        """코멘트 모델을 응답 스키마로 변환 — author and likes must be loaded."""
        target_type, target_id = self._target_of(comment)
        return CommentResponse(
            id=str(comment.id),
            content=comment.content,
            author_profile_id=str(comment.author_profile_id),
            author_name=comment.author.display_name if comment.author else "",
            author_avatar_url=comment.author.avatar_url if comment.author else None,
            target_type=target_type,
            target_id=target_id,
            like_count=len(comment.likes),
            user_has_liked=any(like.profile_id == viewer_id for like in comment.likes),
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )

    async def _get_comment(self, db: AsyncSession, store_id: UUID, comment_id: UUID) -> Comment:
        comment: Comment | None = await comment_repository.get_detail(db, comment_id, store_id)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    async def list_comments(
        self,
        db: AsyncSession,
        profile: Profile,
        target_type: str,
        target_id: UUID,
    ) -> list[CommentResponse]:
        """대상별 코멘트 목록 (오래된 순) — with like count and the caller's like."""
        comments: list[Comment] = await comment_repository.get_by_target(
            db, profile.store_id, COMMENT_TARGET_COLUMNS[target_type], target_id
        )
        return [self._to_response(c, profile.id) for c in comments]

    async def create_comment(
        self,
        db: AsyncSession,
        profile: Profile,
        data: CommentCreate,
    ) -> CommentResponse:
        """코멘트를 작성합니다.

        Raises:
            NotFoundError: 대상이 매장에 존재하지 않을 때 (Target not in the store)
        """
        target_id: UUID = UUID(data.target_id)
        target = await _TARGET_REPOSITORIES[data.target_type].get_by_id(db, target_id, profile.store_id)
        if target is None:
            raise NotFoundError("Comment target not found")

        comment: Comment = await comment_repository.create(
            db,
            {
                "store_id": profile.store_id,
                "author_profile_id": profile.id,
                "content": data.content,
                COMMENT_TARGET_COLUMNS[data.target_type]: target_id,
            },
        )
        return self._to_response(await self._get_comment(db, profile.store_id, comment.id), profile.id)

    async def update_comment(
        self,
        db: AsyncSession,
        profile: Profile,
        comment_id: UUID,
        data: CommentUpdate,
    ) -> CommentResponse:
        """코멘트를 수정합니다 — 작성자만 가능.

        Raises:
            ForbiddenError: 작성자가 아닐 때 (Caller is not the author)
        """
        comment: Comment = await self._get_comment(db, profile.store_id, comment_id)
        if comment.author_profile_id != profile.id:
            raise ForbiddenError("Only the author can edit this comment")
        comment.content = data.content
        await db.flush()
        return self._to_response(await self._get_comment(db, profile.store_id, comment_id), profile.id)

    async def delete_comment(self, db: AsyncSession, profile: Profile, comment_id: UUID) -> None:
        """코멘트를 삭제합니다 — 작성자만 가능."""
        comment: Comment = await self._get_comment(db, profile.store_id, comment_id)
        if comment.author_profile_id != profile.id:
            raise ForbiddenError("Only the author can delete this comment")
        await db.delete(comment)
        await db.flush()

    async def toggle_like(self, db: AsyncSession, profile: Profile, comment_id: UUID) -> LikeToggleResponse:
        """좋아요 토글 — 있으면 취소, 없으면 추가."""
        await self._get_comment(db, profile.store_id, comment_id)
        existing = await comment_repository.get_like(db, comment_id, profile.id)
        if existing is None:
            await comment_repository.add_like(db, comment_id, profile.id)
        else:
            await comment_repository.remove_like(db, comment_id, profile.id)
        return LikeToggleResponse(
            liked=existing is None,
            like_count=await comment_repository.count_likes(db, comment_id),
        )


# 싱글턴 인스턴스 — Singleton instance
comment_service: CommentService = CommentService()
