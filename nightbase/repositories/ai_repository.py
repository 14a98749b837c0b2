"""AI 생성 이미지 레포지토리 — AI generated image queries."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.ai import AiGeneratedImage
from nightbase.repositories.base import BaseRepository


class AiGeneratedImageRepository(BaseRepository[AiGeneratedImage]):
    """AI 생성 이미지 레포지토리."""

    def __init__(self) -> None:
        super().__init__(AiGeneratedImage)

    async def get_by_store(self, db: AsyncSession, store_id: UUID) -> list[AiGeneratedImage]:
        """매장의 생성 이미지 (최신순) — Generated images, newest first."""
        result = await db.execute(
            select(AiGeneratedImage)
            .where(AiGeneratedImage.store_id == store_id)
            .order_by(AiGeneratedImage.created_at.desc())
        )
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
ai_image_repository: AiGeneratedImageRepository = AiGeneratedImageRepository()
