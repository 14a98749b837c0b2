"""보틀 킵 서비스 — 보틀 킵 및 소유자 관리 비즈니스 로직.

Bottle Keep Service — Business logic for kept bottles and their holders.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.bottle import BottleKeep
from nightbase.models.menu import Menu
from nightbase.models.user import Profile
from nightbase.repositories.bottle_repository import bottle_keep_repository
from nightbase.repositories.menu_repository import menu_repository
from nightbase.repositories.profile_repository import profile_repository
from nightbase.schemas.bottle import (
    BottleHolderResponse,
    BottleKeepCreate,
    BottleKeepResponse,
    BottleKeepUpdate,
)
from nightbase.utils.exceptions import BadRequestError, NotFoundError
from nightbase.utils.timezone import ensure_utc, now_utc


class BottleService:
    """보틀 킵 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, bottle: BottleKeep) -> BottleKeepResponse:
        """보틀 모델을 응답 스키마로 변환 — menu and holders must be loaded."""
        return BottleKeepResponse(
            id=str(bottle.id),
            menu_id=str(bottle.menu_id),
            menu_name=bottle.menu.name if bottle.menu else "",
            remaining_amount=bottle.remaining_amount,
            opened_at=bottle.opened_at,
            expiration_date=bottle.expiration_date,
            memo=bottle.memo,
            holders=[
                BottleHolderResponse(profile_id=str(h.profile_id), display_name=h.profile.display_name)
                for h in bottle.holders
            ],
            created_at=bottle.created_at,
        )

    async def _check_menu(self, db: AsyncSession, store_id: UUID, menu_id: str) -> UUID:
        """메뉴가 같은 매장 소속인지 확인 — Raises 404 for another store's menu."""
        menu_uuid: UUID = UUID(menu_id)
        menu: Menu | None = await menu_repository.get_by_id(db, menu_uuid, store_id)
        if menu is None:
            raise NotFoundError("Menu not found")
        return menu_uuid

    async def _check_holders(self, db: AsyncSession, store_id: UUID, holder_ids: list[str]) -> list[UUID]:
        """소유자 프로필이 모두 같은 매장 소속인지 확인.

        Raises:
            BadRequestError: 매장에 없는 프로필이 포함될 때
                             (A holder is not a profile of the store)
        """
        unique_ids: list[UUID] = list(dict.fromkeys(UUID(pid) for pid in holder_ids))
        profiles: list[Profile] = await profile_repository.get_by_ids(db, store_id, unique_ids)
        if len(profiles) != len(unique_ids):
            raise BadRequestError("Holders must be profiles of this store")
        return unique_ids

    async def list_bottles(
        self,
        db: AsyncSession,
        store_id: UUID,
        remaining: str | None = None,
        search: str | None = None,
    ) -> list[BottleKeepResponse]:
        """보틀 킵 목록 — ``remaining`` 은 empty|low|half|full."""
        bottles: list[BottleKeep] = await bottle_keep_repository.get_by_store(db, store_id, remaining, search)
        return [self._to_response(b) for b in bottles]

    async def get_bottle(self, db: AsyncSession, store_id: UUID, bottle_id: UUID) -> BottleKeepResponse:
        bottle: BottleKeep | None = await bottle_keep_repository.get_detail(db, bottle_id, store_id)
        if bottle is None:
            raise NotFoundError("Bottle keep not found")
        return self._to_response(bottle)

    async def create_bottle(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: BottleKeepCreate,
    ) -> BottleKeepResponse:
        """보틀 킵을 소유자와 함께 생성합니다.

        Create a bottle keep together with its holders.

        Raises:
            NotFoundError: 메뉴가 매장에 없을 때 (Menu not in the store)
            BadRequestError: 소유자가 매장 프로필이 아닐 때 (Foreign holder)
        """
        menu_id: UUID = await self._check_menu(db, store_id, data.menu_id)
        holder_ids: list[UUID] = await self._check_holders(db, store_id, data.holder_profile_ids)

        bottle: BottleKeep = await bottle_keep_repository.create(
            db,
            {
                "store_id": store_id,
                "menu_id": menu_id,
                "remaining_amount": data.remaining_amount,
                "opened_at": ensure_utc(data.opened_at) or now_utc(),
                "expiration_date": data.expiration_date,
                "memo": data.memo,
            },
        )
        if holder_ids:
            await bottle_keep_repository.replace_holders(db, bottle.id, holder_ids)
        return await self.get_bottle(db, store_id, bottle.id)

    async def update_bottle(
        self,
        db: AsyncSession,
        store_id: UUID,
        bottle_id: UUID,
        data: BottleKeepUpdate,
    ) -> BottleKeepResponse:
        """보틀 킵을 수정합니다.

        Partial update; ``holder_profile_ids`` replaces every holder when
        present in the payload.
        """
        update_data: dict = data.model_dump(exclude_unset=True)
        holder_input: list[str] | None = update_data.pop("holder_profile_ids", None)

        if update_data.get("menu_id") is not None:
            update_data["menu_id"] = await self._check_menu(db, store_id, update_data["menu_id"])
        elif "menu_id" in update_data:
            raise BadRequestError("menu_id cannot be null")

        bottle: BottleKeep | None = await bottle_keep_repository.update(db, bottle_id, update_data, store_id)
        if bottle is None:
            raise NotFoundError("Bottle keep not found")

        if holder_input is not None:
            holder_ids: list[UUID] = await self._check_holders(db, store_id, holder_input)
            await bottle_keep_repository.replace_holders(db, bottle_id, holder_ids)
        return await self.get_bottle(db, store_id, bottle_id)

    async def delete_bottle(self, db: AsyncSession, store_id: UUID, bottle_id: UUID) -> None:
        deleted: bool = await bottle_keep_repository.delete(db, bottle_id, store_id)
        if not deleted:
            raise NotFoundError("Bottle keep not found")


# 싱글턴 인스턴스 — Singleton instance
bottle_service: BottleService = BottleService()
