"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations, relationship
resolution and the admin table browser.

Modules:
    store: 매장 (Store, the tenant root)
    user: 사용자 및 프로필 (User login identity and per-store Profile)
    token: 리프레시 토큰 (Refresh tokens)
    menu: 메뉴 및 카테고리 (Menus and categories)
    bottle: 보틀 킵 및 소유자 (Bottle keeps and holders)
    shift: 시프트 모집, 날짜, 제출 (Shift requests, dates, submissions)
    attendance: 출근 기록 (Work records)
    comment: 코멘트 및 좋아요 (Comments and likes)
    sns: SNS 계정, 템플릿, 예약/정기 게시 (SNS accounts, templates, posts, schedules)
    ai: AI 생성 이미지 (AI generated images)
"""

from nightbase.models.store import Store
from nightbase.models.user import Profile, User
from nightbase.models.token import RefreshToken
from nightbase.models.menu import Menu, MenuCategory
from nightbase.models.bottle import BottleKeep, BottleKeepHolder
from nightbase.models.shift import ShiftRequest, ShiftRequestDate, ShiftSubmission
from nightbase.models.attendance import WorkRecord
from nightbase.models.comment import Comment, CommentLike
from nightbase.models.sns import SnsAccount, SnsRecurringSchedule, SnsScheduledPost, SnsTemplate
from nightbase.models.ai import AiGeneratedImage

__all__ = [
    "Store",
    "User", "Profile",
    "RefreshToken",
    "MenuCategory", "Menu",
    "BottleKeep", "BottleKeepHolder",
    "ShiftRequest", "ShiftRequestDate", "ShiftSubmission",
    "WorkRecord",
    "Comment", "CommentLike",
    "SnsAccount", "SnsTemplate", "SnsScheduledPost", "SnsRecurringSchedule",
    "AiGeneratedImage",
]
