"""프로필 레포지토리 — 매장 내 프로필 CRUD 및 조회.

Profile Repository — Store-scoped profile queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.user import Profile
from nightbase.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """프로필 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the profiles table.
    """

    def __init__(self) -> None:
        super().__init__(Profile)

    async def get_by_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        role: str | None = None,
        search: str | None = None,
    ) -> list[Profile]:
        """매장의 프로필 목록을 조회합니다.

        Retrieve profiles of a store, optionally filtered by role and a
        case-insensitive name search (display name, kana or real name).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 ID (Store UUID)
            role: 역할 필터 (Role filter, optional)
            search: 이름 검색어 (Name search term, optional)

        Returns:
            list[Profile]: 표시 이름순 프로필 목록 (Profiles ordered by display name)
        """
        query: Select = select(Profile).where(Profile.store_id == store_id)
        if role is not None:
            query = query.where(Profile.role == role)
        if search:
            pattern: str = f"%{search}%"
            query = query.where(
                or_(
                    Profile.display_name.ilike(pattern),
                    Profile.display_name_kana.ilike(pattern),
                    Profile.real_name.ilike(pattern),
                )
            )
        result = await db.execute(query.order_by(Profile.display_name))
        return list(result.scalars().all())

    async def get_by_ids(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_ids: Sequence[UUID],
    ) -> list[Profile]:
        """매장 내 지정 프로필들 — Profiles of the store among ``profile_ids``."""
        if not profile_ids:
            return []
        result = await db.execute(
            select(Profile).where(Profile.store_id == store_id, Profile.id.in_(profile_ids))
        )
        return list(result.scalars().all())

    async def get_by_roles(
        self,
        db: AsyncSession,
        store_id: UUID,
        roles: Sequence[str],
    ) -> list[Profile]:
        """매장 내 역할별 프로필 — Profiles of the store having one of ``roles``."""
        result = await db.execute(
            select(Profile).where(Profile.store_id == store_id, Profile.role.in_(roles))
        )
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
profile_repository: ProfileRepository = ProfileRepository()
