"""메뉴 레포지토리 — 메뉴 및 카테고리 CRUD 쿼리.

Menu Repository — CRUD and listing queries for menus and menu categories.
"""

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from nightbase.models.menu import Menu, MenuCategory
from nightbase.repositories.base import BaseRepository


class MenuCategoryRepository(BaseRepository[MenuCategory]):
    """메뉴 카테고리 레포지토리 — Queries for the menu_categories table."""

    def __init__(self) -> None:
        super().__init__(MenuCategory)

    async def get_by_store(self, db: AsyncSession, store_id: UUID) -> list[tuple[MenuCategory, int]]:
        """매장의 카테고리와 소속 메뉴 수 — Categories with menu counts, in display order."""
        menu_count = (
            select(func.count(Menu.id))
            .where(Menu.category_id == MenuCategory.id)
            .correlate(MenuCategory)
            .scalar_subquery()
        )
        query: Select = (
            select(MenuCategory, menu_count)
            .where(MenuCategory.store_id == store_id)
            .order_by(MenuCategory.sort_order, MenuCategory.name)
        )
        result = await db.execute(query)
        return [(row[0], row[1] or 0) for row in result.all()]

    async def get_by_name(self, db: AsyncSession, store_id: UUID, name: str) -> MenuCategory | None:
        result = await db.execute(
            select(MenuCategory).where(MenuCategory.store_id == store_id, MenuCategory.name == name)
        )
        return result.scalar_one_or_none()

    async def get_max_sort_order(self, db: AsyncSession, store_id: UUID) -> int:
        """최대 정렬 순서 — Highest sort_order in the store, -1 when empty."""
        result = await db.execute(
            select(func.max(MenuCategory.sort_order)).where(MenuCategory.store_id == store_id)
        )
        value: int | None = result.scalar()
        return value if value is not None else -1


class MenuRepository(BaseRepository[Menu]):
    """메뉴 레포지토리 — Queries for the menus table."""

    def __init__(self) -> None:
        super().__init__(Menu)

    async def get_by_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        category_id: UUID | None = None,
        search: str | None = None,
    ) -> list[Menu]:
        """매장의 메뉴 목록을 조회합니다.

        Retrieve menus of a store ordered by category sort order, then name.
        Uncategorized menus come last.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            store_id: 매장 ID (Store UUID)
            category_id: 카테고리 필터 (Category filter, optional)
            search: 이름 검색어 (Name substring, optional)

        Returns:
            list[Menu]: 카테고리가 로드된 메뉴 목록 (Menus with category loaded)
        """
        query: Select = (
            select(Menu)
            .options(selectinload(Menu.category))
            .outerjoin(MenuCategory, Menu.category_id == MenuCategory.id)
            .where(Menu.store_id == store_id)
        )
        if category_id is not None:
            query = query.where(Menu.category_id == category_id)
        if search:
            query = query.where(Menu.name.ilike(f"%{search}%"))
        query = query.order_by(
            MenuCategory.sort_order.is_(None),
            MenuCategory.sort_order,
            Menu.name,
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_detail(self, db: AsyncSession, menu_id: UUID, store_id: UUID) -> Menu | None:
        """카테고리가 로드된 메뉴 — Menu with its category eagerly loaded."""
        result = await db.execute(
            select(Menu)
            .options(selectinload(Menu.category))
            .where(Menu.id == menu_id, Menu.store_id == store_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instances
menu_category_repository: MenuCategoryRepository = MenuCategoryRepository()
menu_repository: MenuRepository = MenuRepository()
