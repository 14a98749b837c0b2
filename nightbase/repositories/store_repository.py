"""매장 레포지토리 — 매장 CRUD 및 관련 쿼리.

Store Repository — CRUD and related queries for stores.
Stores are the tenant root, so queries here are never store-scoped.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.store import Store
from nightbase.repositories.base import BaseRepository


class StoreRepository(BaseRepository[Store]):
    """매장 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the stores table.
    """

    def __init__(self) -> None:
        super().__init__(Store)

    def list_query(self, search: str | None = None) -> Select:
        """매장 목록 쿼리 — Stores ordered by creation, optional name search.

        Args:
            search: 이름 부분 일치 검색어 (Case-insensitive name substring)

        Returns:
            Select: 페이지네이션 전 쿼리 (Query before pagination)
        """
        query: Select = select(Store).order_by(Store.created_at)
        if search:
            query = query.where(Store.name.ilike(f"%{search}%"))
        return query

    async def get_by_name(self, db: AsyncSession, name: str) -> Store | None:
        result = await db.execute(select(Store).where(Store.name == name))
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
store_repository: StoreRepository = StoreRepository()
