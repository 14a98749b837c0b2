"""AI 기능 관련 Pydantic 요청/응답 스키마 정의.

AI feature Pydantic request/response schema definitions.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class MenuExtractRequest(BaseModel):
    """메뉴 사진 추출 요청 — Base64 data URL of a menu photograph."""

    image: str = Field(..., min_length=1)  # "data:image/jpeg;base64,..." 형식


class ExtractedMenuItem(BaseModel):
    """추출된 메뉴 항목."""

    name: str
    price: int
    category: str | None = None


class MenuExtractResponse(BaseModel):
    """메뉴 추출 결과."""

    items: list[ExtractedMenuItem] = []


class CopyGenerateRequest(BaseModel):
    """홍보 문구 생성 요청 스키마.

    Attributes:
        purpose: 용도 (e.g. "イベント告知")
        tone: 어조 (Tone, e.g. "高級感")
        keywords: 키워드 목록 (Keywords to include)
    """

    purpose: str = Field(..., min_length=1)
    tone: str | None = None
    keywords: list[str] = []


class CopyGenerateResponse(BaseModel):
    text: str


class PriceResearchRequest(BaseModel):
    """시세 조사 요청 — Menu item name with optional category and region."""

    name: str = Field(..., min_length=1)
    category: str | None = None
    region: str | None = None


class PriceResearchResponse(BaseModel):
    """시세 조사 결과 — Yen prices with a short comment."""

    min_price: int
    max_price: int
    average_price: int
    comment: str


class ImageGenerateRequest(BaseModel):
    """상품 이미지 생성 요청 스키마.

    Consumes one store AI credit per successful generation.
    """

    prompt: str = Field(..., min_length=1)
    image_type: Literal["poster", "pop", "menu", "sns", "custom"] = "custom"
    width: int = Field(default=1024, ge=64, le=2048)
    height: int = Field(default=1024, ge=64, le=2048)
    template_id: str | None = None
    template_name: str | None = None


class GeneratedImageResponse(BaseModel):
    """생성 이미지 응답 스키마."""

    id: str
    prompt: str
    image_url: str
    image_type: str
    size_width: int
    size_height: int
    model_used: str
    credits_used: int
    template_id: str | None
    template_name: str | None
    created_at: datetime


class AiCreditsResponse(BaseModel):
    """AI 크레딧 잔량 — Remaining credits after any monthly reset."""

    credits: int
    monthly_credits: int
