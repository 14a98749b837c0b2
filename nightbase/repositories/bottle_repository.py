"""보틀 킵 레포지토리 — 보틀 킵 및 소유자 쿼리.

Bottle Keep Repository — Queries for bottle keeps and their holders.
"""

from uuid import UUID

from sqlalchemy import Select, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nightbase.models.bottle import BottleKeep, BottleKeepHolder
from nightbase.models.menu import Menu
from nightbase.models.user import Profile
from nightbase.repositories.base import BaseRepository

# 남은 양 필터 — Remaining-amount filter predicates
REMAINING_FILTERS = {
    "empty": lambda col: col == 0,
    "low": lambda col: col <= 30,
    "half": lambda col: col <= 50,
    "full": lambda col: col == 100,
}


class BottleKeepRepository(BaseRepository[BottleKeep]):
    """보틀 킵 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(BottleKeep)

    def _with_relations(self) -> Select:
        return select(BottleKeep).options(
            selectinload(BottleKeep.menu),
            selectinload(BottleKeep.holders).selectinload(BottleKeepHolder.profile),
        )

    async def get_by_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        remaining: str | None = None,
        search: str | None = None,
    ) -> list[BottleKeep]:
        """매장의 보틀 킵 목록을 조회합니다.

        Retrieve bottle keeps of a store, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 ID (Store UUID)
            remaining: 남은 양 필터 — empty|low|half|full (Remaining filter)
            search: 메뉴명 또는 소유자명 검색어 (Menu or holder name substring)

        Returns:
            list[BottleKeep]: 메뉴/소유자가 로드된 목록 (Bottles with menu and holders)
        """
        query: Select = self._with_relations().where(BottleKeep.store_id == store_id)

        if remaining in REMAINING_FILTERS:
            query = query.where(REMAINING_FILTERS[remaining](BottleKeep.remaining_amount))

        if search:
            pattern: str = f"%{search}%"
            menu_match = select(Menu.id).where(Menu.name.ilike(pattern))
            holder_match = (
                select(BottleKeepHolder.bottle_keep_id)
                .join(Profile, Profile.id == BottleKeepHolder.profile_id)
                .where(Profile.display_name.ilike(pattern))
            )
            query = query.where(
                or_(BottleKeep.menu_id.in_(menu_match), BottleKeep.id.in_(holder_match))
            )

        result = await db.execute(query.order_by(BottleKeep.opened_at.desc()))
        return list(result.scalars().unique().all())

    async def get_detail(self, db: AsyncSession, bottle_id: UUID, store_id: UUID) -> BottleKeep | None:
        # populate_existing: 소유자 교체 후 컬렉션을 다시 읽음 (reload holders after replacement)
        result = await db.execute(
            self._with_relations()
            .where(BottleKeep.id == bottle_id, BottleKeep.store_id == store_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def replace_holders(
        self,
        db: AsyncSession,
        bottle_id: UUID,
        profile_ids: list[UUID],
    ) -> None:
        """소유자 전체 교체 — Delete existing holder links and insert the new set."""
        await db.execute(delete(BottleKeepHolder).where(BottleKeepHolder.bottle_keep_id == bottle_id))
        for profile_id in dict.fromkeys(profile_ids):
            db.add(BottleKeepHolder(bottle_keep_id=bottle_id, profile_id=profile_id))
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
bottle_keep_repository: BottleKeepRepository = BottleKeepRepository()
