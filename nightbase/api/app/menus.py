"""앱 메뉴 라우터 — 메뉴 및 카테고리 CRUD, 일괄 등록.

App Menu Router — Menus and menu categories of the caller's store.
Reads are open to every profile; mutations require staff or admin.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import get_current_profile, require_manager
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.menu import (
    MenuBulkCreate,
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuCreate,
    MenuResponse,
    MenuUpdate,
)
from nightbase.services.menu_service import menu_service

router: APIRouter = APIRouter()


# --- 카테고리 (Categories) ---

@router.get("/menu-categories", response_model=list[MenuCategoryResponse])
async def list_categories(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> list[MenuCategoryResponse]:
    """카테고리 목록 (정렬 순서)."""
    return await menu_service.list_categories(db, profile.store_id)


@router.post("/menu-categories", response_model=MenuCategoryResponse, status_code=201)
async def create_category(
    data: MenuCategoryCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> MenuCategoryResponse:
    """카테고리 생성 — 매장 내 이름 중복 시 409."""
    result: MenuCategoryResponse = await menu_service.create_category(db, manager.store_id, data)
    await db.commit()
    return result


@router.put("/menu-categories/{category_id}", response_model=MenuCategoryResponse)
async def update_category(
    category_id: UUID,
    data: MenuCategoryUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> MenuCategoryResponse:
    result: MenuCategoryResponse = await menu_service.update_category(db, manager.store_id, category_id, data)
    await db.commit()
    return result


@router.delete("/menu-categories/{category_id}", status_code=204)
async def delete_category(
    category_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await menu_service.delete_category(db, manager.store_id, category_id)
    await db.commit()


# --- 메뉴 (Menus) ---

@router.get("/menus", response_model=list[MenuResponse])
async def list_menus(
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
    category_id: Annotated[UUID | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
) -> list[MenuResponse]:
    """메뉴 목록 — 카테고리 정렬 순서, 이름순."""
    return await menu_service.list_menus(db, profile.store_id, category_id, search)


@router.post("/menus/bulk", response_model=list[MenuResponse], status_code=201)
async def bulk_create_menus(
    data: MenuBulkCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[MenuResponse]:
    """메뉴 일괄 등록 — 없는 카테고리는 이름으로 생성."""
    result: list[MenuResponse] = await menu_service.bulk_create(db, manager.store_id, data)
    await db.commit()
    return result


@router.get("/menus/{menu_id}", response_model=MenuResponse)
async def get_menu(
    menu_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    profile: Annotated[Profile, Depends(get_current_profile)],
) -> MenuResponse:
    return await menu_service.get_menu(db, profile.store_id, menu_id)


@router.post("/menus", response_model=MenuResponse, status_code=201)
async def create_menu(
    data: MenuCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> MenuResponse:
    result: MenuResponse = await menu_service.create_menu(db, manager.store_id, data)
    await db.commit()
    return result


@router.put("/menus/{menu_id}", response_model=MenuResponse)
async def update_menu(
    menu_id: UUID,
    data: MenuUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> MenuResponse:
    result: MenuResponse = await menu_service.update_menu(db, manager.store_id, menu_id, data)
    await db.commit()
    return result


@router.delete("/menus/{menu_id}", status_code=204)
async def delete_menu(
    menu_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await menu_service.delete_menu(db, manager.store_id, menu_id)
    await db.commit()
