"""코멘트 관련 SQLAlchemy ORM 모델 정의.

Comment SQLAlchemy ORM model definitions.
A comment points at exactly one target (bottle keep, menu, profile,
shift submission or work record). Likes are unique per profile.

Tables:
    - comments: 코멘트 (Comments attached to one target)
    - comment_likes: 코멘트 좋아요 (Likes, one per profile per comment)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nightbase.database import Base

# 대상 타입 → 컬럼 매핑 — Target type to target column
COMMENT_TARGET_COLUMNS: dict[str, str] = {
    "bottle_keep": "target_bottle_keep_id",
    "menu": "target_menu_id",
    "profile": "target_profile_id",
    "submission": "target_submission_id",
    "work_record": "target_work_record_id",
}


class Comment(Base):
    """코멘트 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        author_profile_id: 작성자 프로필 FK (Author profile)
        content: 본문 (Body text)
        target_*_id: 대상 FK, 하나만 설정 (Exactly one target reference)
    """

    __tablename__ = "comments"

    # 코멘트 고유 식별자 — Comment unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    # 작성자 — Author profile
    author_profile_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    # 본문 — Body
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # 대상 — Targets (CASCADE: 대상 삭제 시 코멘트도 삭제)
    target_bottle_keep_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("bottle_keeps.id", ondelete="CASCADE"), nullable=True)
    target_menu_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("menus.id", ondelete="CASCADE"), nullable=True)
    target_profile_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True)
    target_submission_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("shift_submissions.id", ondelete="CASCADE"), nullable=True)
    target_work_record_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("work_records.id", ondelete="CASCADE"), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_comments_store_created", "store_id", "created_at"),
    )

    author = relationship("Profile", foreign_keys=[author_profile_id])
    likes = relationship("CommentLike", back_populates="comment", cascade="all, delete-orphan")


class CommentLike(Base):
    """코멘트 좋아요 모델 — Comment like, unique per (comment, profile)."""

    __tablename__ = "comment_likes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    comment_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    profile_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("comment_id", "profile_id", name="uq_comment_like"),
    )

    comment = relationship("Comment", back_populates="likes")
