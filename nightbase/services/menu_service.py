"""메뉴 서비스 — 메뉴 및 메뉴 카테고리 CRUD 비즈니스 로직.

Menu Service — Business logic for menus and menu categories, including the
bulk import used after AI menu extraction.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.menu import Menu, MenuCategory
from nightbase.repositories.menu_repository import menu_category_repository, menu_repository
from nightbase.schemas.menu import (
    MenuBulkCreate,
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuCreate,
    MenuResponse,
    MenuUpdate,
)
from nightbase.utils.exceptions import DuplicateError, NotFoundError


class MenuService:
    """메뉴 관련 비즈니스 로직을 처리하는 서비스.

    Service handling menu and category business logic, scoped to a store.
    """

    def _to_response(self, menu: Menu) -> MenuResponse:
        """메뉴 모델을 응답 스키마로 변환합니다 — category must be loaded."""
        return MenuResponse(
            id=str(menu.id),
            name=menu.name,
            price=menu.price,
            category_id=str(menu.category_id) if menu.category_id else None,
            category_name=menu.category.name if menu.category else None,
            target_type=menu.target_type,
            cast_back_amount=menu.cast_back_amount,
            hide_from_slip=menu.hide_from_slip,
            image_url=menu.image_url,
            created_at=menu.created_at,
        )

    def _category_response(self, category: MenuCategory, menu_count: int = 0) -> MenuCategoryResponse:
        return MenuCategoryResponse(
            id=str(category.id),
            name=category.name,
            sort_order=category.sort_order,
            menu_count=menu_count,
        )

    async def _check_category(self, db: AsyncSession, store_id: UUID, category_id: str | None) -> UUID | None:
        """카테고리가 같은 매장 소속인지 확인 — Resolve and validate a category id.

        Raises:
            NotFoundError: 다른 매장이거나 존재하지 않는 카테고리
                           (Category missing or from another store)
        """
        if category_id is None:
            return None
        category_uuid: UUID = UUID(category_id)
        category: MenuCategory | None = await menu_category_repository.get_by_id(db, category_uuid, store_id)
        if category is None:
            raise NotFoundError("Menu category not found")
        return category_uuid

    # --- 메뉴 카테고리 (Menu categories) ---

    async def list_categories(self, db: AsyncSession, store_id: UUID) -> list[MenuCategoryResponse]:
        """카테고리 목록 (정렬 순서, 메뉴 수 포함)."""
        rows = await menu_category_repository.get_by_store(db, store_id)
        return [self._category_response(category, count) for category, count in rows]

    async def create_category(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: MenuCategoryCreate,
    ) -> MenuCategoryResponse:
        """메뉴 카테고리를 생성합니다.

        Raises:
            DuplicateError: 같은 이름의 카테고리가 매장에 존재할 때
                            (A category with the same name exists in the store)
        """
        if await menu_category_repository.exists(db, {"store_id": store_id, "name": data.name}):
            raise DuplicateError("A menu category with this name already exists")
        category: MenuCategory = await menu_category_repository.create(
            db, {"store_id": store_id, "name": data.name, "sort_order": data.sort_order}
        )
        return self._category_response(category)

    async def update_category(
        self,
        db: AsyncSession,
        store_id: UUID,
        category_id: UUID,
        data: MenuCategoryUpdate,
    ) -> MenuCategoryResponse:
        """메뉴 카테고리를 수정합니다.

        Raises:
            NotFoundError: 카테고리를 찾을 수 없을 때 (Category not found)
            DuplicateError: 이름 중복 (Name already used in the store)
        """
        if data.name is not None:
            if await menu_category_repository.exists(
                db, {"store_id": store_id, "name": data.name}, exclude_id=category_id
            ):
                raise DuplicateError("A menu category with this name already exists")

        category: MenuCategory | None = await menu_category_repository.update(
            db, category_id, data.model_dump(exclude_unset=True), store_id
        )
        if category is None:
            raise NotFoundError("Menu category not found")
        return self._category_response(category)

    async def delete_category(self, db: AsyncSession, store_id: UUID, category_id: UUID) -> None:
        """메뉴 카테고리 삭제 — 소속 메뉴는 미분류가 됩니다 (menus become uncategorized)."""
        deleted: bool = await menu_category_repository.delete(db, category_id, store_id)
        if not deleted:
            raise NotFoundError("Menu category not found")

    # --- 메뉴 (Menus) ---

    async def list_menus(
        self,
        db: AsyncSession,
        store_id: UUID,
        category_id: UUID | None = None,
        search: str | None = None,
    ) -> list[MenuResponse]:
        """메뉴 목록 (카테고리 정렬 순서, 이름순)."""
        menus: list[Menu] = await menu_repository.get_by_store(db, store_id, category_id, search)
        return [self._to_response(m) for m in menus]

    async def get_menu(self, db: AsyncSession, store_id: UUID, menu_id: UUID) -> MenuResponse:
        menu: Menu | None = await menu_repository.get_detail(db, menu_id, store_id)
        if menu is None:
            raise NotFoundError("Menu not found")
        return self._to_response(menu)

    async def create_menu(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: MenuCreate,
    ) -> MenuResponse:
        """메뉴를 생성합니다.

        Create a menu item.

        Raises:
            NotFoundError: 카테고리가 매장에 없을 때 (Category not in the store)
        """
        category_id: UUID | None = await self._check_category(db, store_id, data.category_id)
        obj_data: dict = data.model_dump(exclude={"category_id"})
        menu: Menu = await menu_repository.create(
            db, {"store_id": store_id, "category_id": category_id, **obj_data}
        )
        return await self.get_menu(db, store_id, menu.id)

    async def update_menu(
        self,
        db: AsyncSession,
        store_id: UUID,
        menu_id: UUID,
        data: MenuUpdate,
    ) -> MenuResponse:
        """메뉴를 수정합니다 (부분 업데이트).

        Raises:
            NotFoundError: 메뉴 또는 카테고리를 찾을 수 없을 때
                           (Menu or category not found)
        """
        update_data: dict = data.model_dump(exclude_unset=True)
        if "category_id" in update_data:
            update_data["category_id"] = await self._check_category(db, store_id, update_data["category_id"])

        menu: Menu | None = await menu_repository.update(db, menu_id, update_data, store_id)
        if menu is None:
            raise NotFoundError("Menu not found")
        return await self.get_menu(db, store_id, menu_id)

    async def delete_menu(self, db: AsyncSession, store_id: UUID, menu_id: UUID) -> None:
        """메뉴 삭제 — 해당 메뉴의 보틀 킵도 함께 삭제됩니다 (bottles cascade)."""
        deleted: bool = await menu_repository.delete(db, menu_id, store_id)
        if not deleted:
            raise NotFoundError("Menu not found")

    async def bulk_create(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: MenuBulkCreate,
    ) -> list[MenuResponse]:
        """메뉴를 일괄 생성합니다.

        Create many menus at once. Categories are matched by name and
        created (appended to the end of the sort order) when missing.

        Returns:
            list[MenuResponse]: 생성된 메뉴 목록 (Created menus, input order)
        """
        categories: dict[str, UUID] = {}
        next_sort: int = await menu_category_repository.get_max_sort_order(db, store_id) + 1
        created_ids: list[UUID] = []

        for item in data.items:
            category_id: UUID | None = None
            name: str | None = item.category.strip() if item.category else None
            if name:
                if name not in categories:
                    category: MenuCategory | None = await menu_category_repository.get_by_name(db, store_id, name)
                    if category is None:
                        category = await menu_category_repository.create(
                            db, {"store_id": store_id, "name": name, "sort_order": next_sort}
                        )
                        next_sort += 1
                    categories[name] = category.id
                category_id = categories[name]

            menu: Menu = await menu_repository.create(
                db,
                {"store_id": store_id, "name": item.name, "price": item.price, "category_id": category_id},
            )
            created_ids.append(menu.id)

        return [await self.get_menu(db, store_id, menu_id) for menu_id in created_ids]


# 싱글턴 인스턴스 — Singleton instance
menu_service: MenuService = MenuService()
