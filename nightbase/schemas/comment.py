"""코멘트 관련 Pydantic 요청/응답 스키마 정의.

Comment Pydantic request/response schema definitions.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from nightbase.schemas.common import UUIDStr

# 코멘트 대상 종류 — Comment target type literal
CommentTargetType = Literal["bottle_keep", "menu", "profile", "submission", "work_record"]


class CommentCreate(BaseModel):
    """코멘트 생성 요청 스키마.

    Attributes:
        target_type: 대상 종류 (Target kind)
        target_id: 대상 UUID (Target row UUID, must exist in the store)
        content: 본문 (Body, non-blank)
    """

    target_type: CommentTargetType  # 대상 종류 (Target kind)
    target_id: UUIDStr  # 대상 UUID (Target UUID)
    content: str = Field(..., min_length=1)  # 본문 (Body)


class CommentUpdate(BaseModel):
    """코멘트 수정 요청 스키마 — Author only."""

    content: str = Field(..., min_length=1)


class CommentResponse(BaseModel):
    """코멘트 응답 스키마 — Comment with author and like state."""

    id: str  # 코멘트 UUID 문자열 (Comment UUID as string)
    content: str
    author_profile_id: str
    author_name: str  # 작성자 표시 이름 (Author display name)
    author_avatar_url: str | None
    target_type: str
    target_id: str
    like_count: int = 0  # 좋아요 수 (Number of likes)
    user_has_liked: bool = False  # 현재 프로필의 좋아요 여부 (Liked by the caller)
    created_at: datetime
    updated_at: datetime


class LikeToggleResponse(BaseModel):
    """좋아요 토글 결과 — State after the toggle."""

    liked: bool
    like_count: int
