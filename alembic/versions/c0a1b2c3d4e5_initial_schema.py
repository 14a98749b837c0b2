"""initial_schema

Revision ID: c0a1b2c3d4e5
Revises:
Create Date: 2026-10-19 09:00:00.000000

Nightbase 초기 스키마: 매장, 사용자/프로필, 메뉴, 보틀 킵, 시프트 모집,
출근 기록, 코멘트, SNS, AI 이미지.
Initial Nightbase schema: stores, users/profiles, menus, bottle keeps,
shift requests, work records, comments, SNS and AI images.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


# revision identifiers, used by Alembic.
revision: str = 'c0a1b2c3d4e5'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _store_fk() -> sa.Column:
    return sa.Column('store_id', UUID(as_uuid=True), sa.ForeignKey('stores.id', ondelete='CASCADE'), nullable=False)


def _profile_fk(name: str, ondelete: str = 'SET NULL', nullable: bool = True) -> sa.Column:
    return sa.Column(name, UUID(as_uuid=True), sa.ForeignKey('profiles.id', ondelete=ondelete), nullable=nullable)


def upgrade() -> None:
    # stores — 매장 (tenant root)
    op.create_table(
        'stores',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('industry', sa.String(100), nullable=True),
        sa.Column('prefecture', sa.String(50), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('business_start_time', sa.Time(), nullable=True),
        sa.Column('business_end_time', sa.Time(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('ai_credits', sa.Integer(), server_default='30', nullable=False),
        sa.Column('ai_credits_reset_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        *_timestamps(),
    )

    # users / profiles — 로그인 계정과 매장 내 인물
    op.create_table(
        'users',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        sa.Column('is_admin', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('current_profile_id', UUID(as_uuid=True), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'profiles',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('display_name_kana', sa.String(255), nullable=True),
        sa.Column('real_name', sa.String(255), nullable=True),
        sa.Column('role', sa.String(20), server_default='cast', nullable=False),
        sa.Column('phone_number', sa.String(50), nullable=True),
        sa.Column('status', sa.String(50), nullable=True),
        sa.Column('avatar_url', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_profiles_store_role', 'profiles', ['store_id', 'role'])
    op.create_table(
        'refresh_tokens',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', UUID(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token', sa.String(512), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # menus — 메뉴와 카테고리
    op.create_table(
        'menu_categories',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('sort_order', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('store_id', 'name', name='uq_menu_category_store_name'),
    )
    op.create_table(
        'menus',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('category_id', UUID(as_uuid=True), sa.ForeignKey('menu_categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('price', sa.Integer(), server_default='0', nullable=False),
        sa.Column('target_type', sa.String(20), server_default='guest', nullable=False),
        sa.Column('cast_back_amount', sa.Integer(), server_default='0', nullable=False),
        sa.Column('hide_from_slip', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
        *_timestamps(),
    )

    # bottle keeps — 보틀 킵과 소유자
    op.create_table(
        'bottle_keeps',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('menu_id', UUID(as_uuid=True), sa.ForeignKey('menus.id', ondelete='CASCADE'), nullable=False),
        sa.Column('remaining_amount', sa.Integer(), server_default='100', nullable=False),
        sa.Column('opened_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('expiration_date', sa.Date(), nullable=True),
        sa.Column('memo', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'bottle_keep_holders',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('bottle_keep_id', UUID(as_uuid=True), sa.ForeignKey('bottle_keeps.id', ondelete='CASCADE'), nullable=False),
        _profile_fk('profile_id', ondelete='CASCADE', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('bottle_keep_id', 'profile_id', name='uq_bottle_keep_holder'),
    )

    # shift requests — 시프트 모집, 날짜, 제출
    op.create_table(
        'shift_requests',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('deadline', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), server_default='open', nullable=False),
        sa.Column('target_roles', JSONB(), nullable=False),
        sa.Column('target_profile_ids', JSONB(), nullable=True),
        _profile_fk('created_by'),
        *_timestamps(),
    )
    op.create_table(
        'shift_request_dates',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('shift_request_id', UUID(as_uuid=True), sa.ForeignKey('shift_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('target_date', sa.Date(), nullable=False),
        sa.Column('default_start_time', sa.Time(), nullable=True),
        sa.Column('default_end_time', sa.Time(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('shift_request_id', 'target_date', name='uq_shift_request_date'),
    )
    op.create_table(
        'shift_submissions',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('shift_request_id', UUID(as_uuid=True), sa.ForeignKey('shift_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('shift_request_date_id', UUID(as_uuid=True), sa.ForeignKey('shift_request_dates.id', ondelete='CASCADE'), nullable=False),
        _profile_fk('profile_id', ondelete='CASCADE', nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('availability', sa.String(20), server_default='available', nullable=False),
        sa.Column('preferred_start_time', sa.Time(), nullable=True),
        sa.Column('preferred_end_time', sa.Time(), nullable=True),
        sa.Column('approved_start_time', sa.Time(), nullable=True),
        sa.Column('approved_end_time', sa.Time(), nullable=True),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        _profile_fk('approved_by'),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('shift_request_date_id', 'profile_id', name='uq_submission_date_profile'),
    )
    op.create_index('ix_submissions_request_profile', 'shift_submissions', ['shift_request_id', 'profile_id'])

    # work_records — 출근 기록 (예정 + 타임카드)
    op.create_table(
        'work_records',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        _profile_fk('profile_id', ondelete='CASCADE', nullable=False),
        sa.Column('work_date', sa.Date(), nullable=False),
        sa.Column('scheduled_start_time', sa.Time(), nullable=True),
        sa.Column('scheduled_end_time', sa.Time(), nullable=True),
        sa.Column('shift_request_id', UUID(as_uuid=True), sa.ForeignKey('shift_requests.id', ondelete='SET NULL'), nullable=True),
        sa.Column('shift_submission_id', UUID(as_uuid=True), sa.ForeignKey('shift_submissions.id', ondelete='SET NULL'), nullable=True),
        sa.Column('clock_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('clock_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('break_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('break_end', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(20), server_default='scheduled', nullable=False),
        sa.Column('source', sa.String(20), server_default='manual', nullable=False),
        _profile_fk('approved_by'),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('forgot_clockout', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_work_records_store_date', 'work_records', ['store_id', 'work_date'])
    op.create_index('ix_work_records_profile_date', 'work_records', ['profile_id', 'work_date'])

    # comments — 코멘트와 좋아요
    op.create_table(
        'comments',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        _profile_fk('author_profile_id', ondelete='CASCADE', nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('target_bottle_keep_id', UUID(as_uuid=True), sa.ForeignKey('bottle_keeps.id', ondelete='CASCADE'), nullable=True),
        sa.Column('target_menu_id', UUID(as_uuid=True), sa.ForeignKey('menus.id', ondelete='CASCADE'), nullable=True),
        _profile_fk('target_profile_id', ondelete='CASCADE'),
        sa.Column('target_submission_id', UUID(as_uuid=True), sa.ForeignKey('shift_submissions.id', ondelete='CASCADE'), nullable=True),
        sa.Column('target_work_record_id', UUID(as_uuid=True), sa.ForeignKey('work_records.id', ondelete='CASCADE'), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_comments_store_created', 'comments', ['store_id', 'created_at'])
    op.create_table(
        'comment_likes',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        sa.Column('comment_id', UUID(as_uuid=True), sa.ForeignKey('comments.id', ondelete='CASCADE'), nullable=False),
        _profile_fk('profile_id', ondelete='CASCADE', nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('comment_id', 'profile_id', name='uq_comment_like'),
    )

    # sns — 계정, 템플릿, 게시물, 정기 게시
    op.create_table(
        'sns_accounts',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('platform', sa.String(20), nullable=False),
        sa.Column('account_name', sa.String(255), nullable=True),
        sa.Column('account_id', sa.String(255), nullable=True),
        sa.Column('access_token', sa.Text(), nullable=True),
        sa.Column('refresh_token', sa.Text(), nullable=True),
        sa.Column('token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_connected', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('store_id', 'platform', name='uq_sns_account_store_platform'),
    )
    op.create_table(
        'sns_templates',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('template_type', sa.String(20), server_default='text', nullable=False),
        sa.Column('image_style', sa.String(50), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'sns_scheduled_posts',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('platforms', JSONB(), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('posted_at', sa.DateTime(timezone=True), nullable=True),
        _profile_fk('created_by'),
        *_timestamps(),
    )
    op.create_index('ix_sns_posts_status_scheduled', 'sns_scheduled_posts', ['status', 'scheduled_at'])
    op.create_table(
        'sns_recurring_schedules',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('content_type', sa.String(20), server_default='cast_list', nullable=False),
        sa.Column('template_id', UUID(as_uuid=True), sa.ForeignKey('sns_templates.id', ondelete='SET NULL'), nullable=True),
        sa.Column('platforms', JSONB(), nullable=False),
        sa.Column('schedule_hour', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('last_run_at', sa.DateTime(timezone=True), nullable=True),
        _profile_fk('created_by'),
        *_timestamps(),
    )

    # ai_generated_images — AI 생성 이미지
    op.create_table(
        'ai_generated_images',
        sa.Column('id', UUID(as_uuid=True), primary_key=True),
        _store_fk(),
        sa.Column('prompt', sa.Text(), nullable=False),
        sa.Column('image_url', sa.Text(), nullable=False),
        sa.Column('image_type', sa.String(20), server_default='custom', nullable=False),
        sa.Column('size_width', sa.Integer(), server_default='1024', nullable=False),
        sa.Column('size_height', sa.Integer(), server_default='1024', nullable=False),
        sa.Column('model_used', sa.String(50), server_default='flux', nullable=False),
        sa.Column('credits_used', sa.Integer(), server_default='1', nullable=False),
        sa.Column('template_id', sa.String(100), nullable=True),
        sa.Column('template_name', sa.String(255), nullable=True),
        _profile_fk('created_by'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    for table in (
        'ai_generated_images',
        'sns_recurring_schedules',
        'sns_scheduled_posts',
        'sns_templates',
        'sns_accounts',
        'comment_likes',
        'comments',
        'work_records',
        'shift_submissions',
        'shift_request_dates',
        'shift_requests',
        'bottle_keep_holders',
        'bottle_keeps',
        'menus',
        'menu_categories',
        'refresh_tokens',
        'profiles',
        'users',
        'stores',
    ):
        op.drop_table(table)
