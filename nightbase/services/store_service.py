"""매장 서비스 — 매장 CRUD 비즈니스 로직.

Store Service — Business logic for store CRUD operations.
Stores are managed by platform administrators; app users only read the
store of their current profile.
"""

from uuid import UUID

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.store import Store
from nightbase.repositories.store_repository import store_repository
from nightbase.schemas.store import StoreCreate, StoreResponse, StoreUpdate
from nightbase.utils.exceptions import DuplicateError, NotFoundError
from nightbase.utils.pagination import build_page
from nightbase.utils.timezone import format_hhmm, parse_time_field


class StoreService:
    """매장 관련 비즈니스 로직을 처리하는 서비스.

    Service handling store business logic.
    """

    def _to_response(self, store: Store) -> StoreResponse:
        """매장 모델을 응답 스키마로 변환합니다.

        Convert a Store model instance to a StoreResponse schema.
        """
        return StoreResponse(
            id=str(store.id),
            name=store.name,
            industry=store.industry,
            prefecture=store.prefecture,
            city=store.city,
            business_start_time=format_hhmm(store.business_start_time),
            business_end_time=format_hhmm(store.business_end_time),
            is_active=store.is_active,
            ai_credits=store.ai_credits,
            created_at=store.created_at,
        )

    async def list_stores(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
        search: str | None = None,
    ) -> dict:
        """매장 목록을 페이지네이션하여 조회합니다.

        List stores, paginated, with an optional name search.

        Returns:
            dict: PaginatedResponse 형식 딕셔너리 (Paginated response dict)
        """
        query: Select = store_repository.list_query(search)
        stores, total = await store_repository.get_paginated(db, query, page, per_page)
        return build_page([self._to_response(s) for s in stores], total, page, per_page)

    async def get_store(self, db: AsyncSession, store_id: UUID) -> StoreResponse:
        """매장 상세 조회.

        Raises:
            NotFoundError: 매장을 찾을 수 없을 때 (Store not found)
        """
        store: Store | None = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("Store not found")
        return self._to_response(store)

    async def create_store(self, db: AsyncSession, data: StoreCreate) -> StoreResponse:
        """새 매장을 생성합니다.

        Create a new store.

        Raises:
            DuplicateError: 같은 이름의 매장이 이미 존재할 때
                            (When a store with the same name already exists)
        """
        if await store_repository.exists(db, {"name": data.name}):
            raise DuplicateError("A store with this name already exists")

        store: Store = await store_repository.create(
            db,
            {
                "name": data.name,
                "industry": data.industry,
                "prefecture": data.prefecture,
                "city": data.city,
                "business_start_time": parse_time_field(data.business_start_time, "business_start_time"),
                "business_end_time": parse_time_field(data.business_end_time, "business_end_time"),
            },
        )
        return self._to_response(store)

    async def update_store(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: StoreUpdate,
    ) -> StoreResponse:
        """매장 정보를 수정합니다.

        Update an existing store.

        Raises:
            NotFoundError: 매장을 찾을 수 없을 때 (Store not found)
            DuplicateError: 같은 이름의 매장이 이미 존재할 때
                            (When a store with the same name already exists)
        """
        # 이름 변경 시 중복 확인 — Check name uniqueness if changing name
        if data.name is not None:
            if await store_repository.exists(db, {"name": data.name}, exclude_id=store_id):
                raise DuplicateError("A store with this name already exists")

        update_data: dict = data.model_dump(exclude_unset=True)
        for field in ("business_start_time", "business_end_time"):
            if field in update_data:
                update_data[field] = parse_time_field(update_data[field], field)

        store: Store | None = await store_repository.update(db, store_id, update_data)
        if store is None:
            raise NotFoundError("Store not found")
        return self._to_response(store)

    async def delete_store(self, db: AsyncSession, store_id: UUID) -> None:
        """매장을 삭제합니다 — 하위 데이터는 CASCADE 로 함께 삭제.

        Raises:
            NotFoundError: 매장을 찾을 수 없을 때 (Store not found)
        """
        deleted: bool = await store_repository.delete(db, store_id)
        if not deleted:
            raise NotFoundError("Store not found")


# 싱글턴 인스턴스 — Singleton instance
store_service: StoreService = StoreService()
