"""AI 서비스 — 메뉴 추출, 홍보 문구, 시세 조사, 상품 이미지 생성.

AI Service — OpenAI chat completions for menu extraction, marketing copy
and price research, and Pollinations (Flux) image generation paid with
per-store monthly credits.
"""

import json
import logging
from datetime import datetime
from urllib.parse import quote
from uuid import UUID

import httpx
from openai import AsyncOpenAI, OpenAIError
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.config import settings
from nightbase.models.ai import AiGeneratedImage
from nightbase.models.store import Store
from nightbase.models.user import Profile
from nightbase.repositories.ai_repository import ai_image_repository
from nightbase.repositories.store_repository import store_repository
from nightbase.schemas.ai import (
    AiCreditsResponse,
    CopyGenerateRequest,
    CopyGenerateResponse,
    ExtractedMenuItem,
    GeneratedImageResponse,
    ImageGenerateRequest,
    MenuExtractResponse,
    PriceResearchRequest,
    PriceResearchResponse,
)
from nightbase.utils.exceptions import BadRequestError, ExternalServiceError, NotFoundError
from nightbase.utils.timezone import ensure_utc, now_utc, to_local

logger = logging.getLogger(__name__)

# 이미지 생성 모델 — Generator model passed to Pollinations
IMAGE_MODEL: str = "flux"

MENU_EXTRACT_PROMPT: str = (
    "あなたは飲食店のメニュー表を読み取るアシスタントです。"
    "画像からメニュー名・価格(円、整数)・カテゴリを抽出し、"
    '{"items": [{"name": "...", "price": 1000, "category": "..."}]} の形式のJSONのみを返してください。'
)
COPY_PROMPT: str = (
    "あなたはナイトクラブの広報担当です。SNSや店頭POPに使える短い宣伝文を日本語で作成してください。"
    '{"text": "..."} の形式のJSONのみを返してください。'
)
PRICE_PROMPT: str = (
    "あなたは日本のナイトクラブ業界の価格アナリストです。指定されたメニューの一般的な店頭価格(円)を推定し、"
    '{"min_price": 0, "max_price": 0, "average_price": 0, "comment": "..."} の形式のJSONのみを返してください。'
)


class ImageClient:
    """Pollinations 이미지 URL 생성 및 검증.

    ``transport`` can be replaced to run without network access.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.transport: httpx.AsyncBaseTransport | None = transport

    def build_url(self, prompt: str, width: int, height: int) -> str:
        return (
            f"{settings.IMAGE_GENERATION_URL}/{quote(prompt, safe='')}"
            f"?width={width}&height={height}&nologo=true&model={IMAGE_MODEL}"
        )

    async def verify(self, url: str) -> bool:
        """HEAD 요청으로 이미지 생성 가능 여부 확인."""
        async with httpx.AsyncClient(timeout=60.0, transport=self.transport, follow_redirects=True) as client:
            response: httpx.Response = await client.head(url)
        return response.status_code < 400


image_client: ImageClient = ImageClient()


class AiService:
    """AI 관련 비즈니스 로직을 처리하는 서비스."""

    def __init__(self) -> None:
        self._client: AsyncOpenAI | None = None

    def _openai(self) -> AsyncOpenAI:
        if not settings.OPENAI_API_KEY:
            raise ExternalServiceError("AI service is not configured")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        return self._client

    async def chat_json(self, system_prompt: str, user_content: str | list[dict]) -> dict:
        """Chat Completions 호출 후 JSON 객체로 파싱합니다.

        Raises:
            ExternalServiceError: API 오류 또는 JSON 이 아닌 응답 (API failure or malformed output)
        """
        try:
            completion = await self._openai().chat.completions.create(
                model=settings.OPENAI_MODEL,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
            )
        except OpenAIError as exc:
            logger.error("OpenAI request failed: %s", exc)
            raise ExternalServiceError("AI request failed") from exc

        raw: str = completion.choices[0].message.content or ""
        try:
            parsed = json.loads(raw)
        except ValueError as exc:
            logger.warning("OpenAI returned non-JSON output: %.200s", raw)
            raise ExternalServiceError("AI returned malformed output") from exc
        if not isinstance(parsed, dict):
            raise ExternalServiceError("AI returned malformed output")
        return parsed

    # --- 텍스트 (Text) ---

    async def extract_menu(self, image: str) -> MenuExtractResponse:
        """메뉴 사진에서 항목 추출 — ``image`` is a base64 data URL."""
        if not image.startswith("data:image/"):
            raise BadRequestError("image must be a base64 data URL")
        result: dict = await self.chat_json(
            MENU_EXTRACT_PROMPT,
            [
                {"type": "text", "text": "このメニュー表の内容を抽出してください。"},
                {"type": "image_url", "image_url": {"url": image}},
            ],
        )
        try:
            items = [ExtractedMenuItem.model_validate(item) for item in result.get("items", [])]
        except (TypeError, ValueError) as exc:
            raise ExternalServiceError("AI returned malformed output") from exc
        return MenuExtractResponse(items=items)

    async def generate_copy(self, data: CopyGenerateRequest) -> CopyGenerateResponse:
        lines: list[str] = [f"用途: {data.purpose}"]
        if data.tone:
            lines.append(f"トーン: {data.tone}")
        if data.keywords:
            lines.append(f"キーワード: {'、'.join(data.keywords)}")
        result: dict = await self.chat_json(COPY_PROMPT, "\n".join(lines))
        text = result.get("text")
        if not isinstance(text, str) or not text:
            raise ExternalServiceError("AI returned malformed output")
        return CopyGenerateResponse(text=text)

    async def research_price(self, data: PriceResearchRequest) -> PriceResearchResponse:
        """메뉴 시세 조사 — Estimated yen prices."""
        lines: list[str] = [f"メニュー: {data.name}"]
        if data.category:
            lines.append(f"カテゴリ: {data.category}")
        if data.region:
            lines.append(f"地域: {data.region}")
        result: dict = await self.chat_json(PRICE_PROMPT, "\n".join(lines))
        try:
            return PriceResearchResponse.model_validate(result)
        except ValueError as exc:
            raise ExternalServiceError("AI returned malformed output") from exc

    # --- 크레딧 (Credits) ---

    def _refresh_credits(self, store: Store) -> None:
        """달이 바뀌었으면 크레딧 초기화 — Month compared in the display timezone."""
        now: datetime = now_utc()
        reset_at: datetime | None = ensure_utc(store.ai_credits_reset_at)
        if reset_at is None or (to_local(reset_at).year, to_local(reset_at).month) != (to_local(now).year, to_local(now).month):
            store.ai_credits = settings.AI_MONTHLY_CREDITS
            store.ai_credits_reset_at = now

    async def _get_store(self, db: AsyncSession, store_id: UUID) -> Store:
        store: Store | None = await store_repository.get_by_id(db, store_id)
        if store is None:
            raise NotFoundError("Store not found")
        return store

    async def get_credits(self, db: AsyncSession, store_id: UUID) -> AiCreditsResponse:
        store: Store = await self._get_store(db, store_id)
        self._refresh_credits(store)
        await db.flush()
        return AiCreditsResponse(credits=store.ai_credits, monthly_credits=settings.AI_MONTHLY_CREDITS)

    # --- 이미지 (Images) ---

    def _image_response(self, image: AiGeneratedImage) -> GeneratedImageResponse:
        return GeneratedImageResponse(
            id=str(image.id),
            prompt=image.prompt,
            image_url=image.image_url,
            image_type=image.image_type,
            size_width=image.size_width,
            size_height=image.size_height,
            model_used=image.model_used,
            credits_used=image.credits_used,
            template_id=image.template_id,
            template_name=image.template_name,
            created_at=image.created_at,
        )

    async def generate_image(
        self,
        db: AsyncSession,
        profile: Profile,
        data: ImageGenerateRequest,
    ) -> GeneratedImageResponse:
        """상품 이미지를 생성합니다.

        Builds the Pollinations URL, checks it with a HEAD request and
        stores the result. One credit is consumed only on success.

        Raises:
            BadRequestError: 크레딧 부족 (No credits left this month)
            ExternalServiceError: 이미지 생성 실패 (Generator unavailable)
        """
        store: Store = await self._get_store(db, profile.store_id)
        self._refresh_credits(store)
        if store.ai_credits <= 0:
            raise BadRequestError("No AI credits left this month")

        url: str = image_client.build_url(data.prompt, data.width, data.height)
        try:
            ok: bool = await image_client.verify(url)
        except httpx.HTTPError as exc:
            logger.error("Image generation request failed: %s", exc)
            raise ExternalServiceError("Image generation failed") from exc
        if not ok:
            raise ExternalServiceError("Image generation failed")

        store.ai_credits -= 1
        image: AiGeneratedImage = await ai_image_repository.create(
            db,
            {
                "store_id": profile.store_id,
                "prompt": data.prompt,
                "image_url": url,
                "image_type": data.image_type,
                "size_width": data.width,
                "size_height": data.height,
                "model_used": IMAGE_MODEL,
                "credits_used": 1,
                "template_id": data.template_id,
                "template_name": data.template_name,
                "created_by": profile.id,
            },
        )
        logger.info("Generated image %s for store %s (%d credits left)", image.id, store.id, store.ai_credits)
        return self._image_response(image)

    async def list_images(self, db: AsyncSession, store_id: UUID) -> list[GeneratedImageResponse]:
        return [self._image_response(i) for i in await ai_image_repository.get_by_store(db, store_id)]

    async def delete_image(self, db: AsyncSession, store_id: UUID, image_id: UUID) -> None:
        if not await ai_image_repository.delete(db, image_id, store_id):
            raise NotFoundError("Generated image not found")


# 싱글턴 인스턴스 — Singleton instance
ai_service: AiService = AiService()
