"""앱 AI 라우터 — 메뉴 추출, 홍보 문구, 시세 조사, 이미지 생성.

App AI Router — OpenAI-backed text helpers and credit-metered product
image generation. Every endpoint requires staff or admin.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.api.deps import require_manager
from nightbase.database import get_db
from nightbase.models.user import Profile
from nightbase.schemas.ai import (
    AiCreditsResponse,
    CopyGenerateRequest,
    CopyGenerateResponse,
    GeneratedImageResponse,
    ImageGenerateRequest,
    MenuExtractRequest,
    MenuExtractResponse,
    PriceResearchRequest,
    PriceResearchResponse,
)
from nightbase.services.ai_service import ai_service

router: APIRouter = APIRouter()


@router.post("/menu-extract", response_model=MenuExtractResponse)
async def extract_menu(
    data: MenuExtractRequest,
    manager: Annotated[Profile, Depends(require_manager)],
) -> MenuExtractResponse:
    """메뉴 사진에서 메뉴 항목 추출."""
    return await ai_service.extract_menu(data.image)


@router.post("/copy", response_model=CopyGenerateResponse)
async def generate_copy(
    data: CopyGenerateRequest,
    manager: Annotated[Profile, Depends(require_manager)],
) -> CopyGenerateResponse:
    return await ai_service.generate_copy(data)


@router.post("/price-research", response_model=PriceResearchResponse)
async def research_price(
    data: PriceResearchRequest,
    manager: Annotated[Profile, Depends(require_manager)],
) -> PriceResearchResponse:
    return await ai_service.research_price(data)


@router.get("/credits", response_model=AiCreditsResponse)
async def get_credits(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> AiCreditsResponse:
    """이번 달 남은 크레딧 — 월이 바뀌었으면 초기화."""
    result: AiCreditsResponse = await ai_service.get_credits(db, manager.store_id)
    await db.commit()
    return result


@router.get("/images", response_model=list[GeneratedImageResponse])
async def list_images(
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> list[GeneratedImageResponse]:
    return await ai_service.list_images(db, manager.store_id)


@router.post("/images", response_model=GeneratedImageResponse, status_code=201)
async def generate_image(
    data: ImageGenerateRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> GeneratedImageResponse:
    """상품 이미지 생성 — 성공 시 크레딧 1 차감."""
    result: GeneratedImageResponse = await ai_service.generate_image(db, manager, data)
    await db.commit()
    return result


@router.delete("/images/{image_id}", status_code=204)
async def delete_image(
    image_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    manager: Annotated[Profile, Depends(require_manager)],
) -> None:
    await ai_service.delete_image(db, manager.store_id, image_id)
    await db.commit()
