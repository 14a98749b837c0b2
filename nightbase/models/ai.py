"""AI 생성 이미지 모델 정의.

AI generated image SQLAlchemy ORM model definition.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from nightbase.database import Base


class AiGeneratedImage(Base):
    """AI 생성 이미지 모델.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        store_id: 소속 매장 FK (Parent store)
        prompt: 생성 프롬프트 (Prompt sent to the generator)
        image_url: 이미지 URL (Generated image URL)
        image_type: 용도 (poster | pop | menu | sns | custom)
        size_width / size_height: 픽셀 크기 (Pixel size)
        model_used: 사용 모델 (Generator model name)
        credits_used: 소비 크레딧 (Credits consumed)
        template_id / template_name: 사용 템플릿 (Optional design template)
        created_by: 생성자 프로필 (Creator profile)
    """

    __tablename__ = "ai_generated_images"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소속 매장 FK — Parent store
    store_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    # 용도 — Image purpose
    image_type: Mapped[str] = mapped_column(String(20), default="custom")
    size_width: Mapped[int] = mapped_column(Integer, default=1024)
    size_height: Mapped[int] = mapped_column(Integer, default=1024)
    model_used: Mapped[str] = mapped_column(String(50), default="flux")
    credits_used: Mapped[int] = mapped_column(Integer, default=1)
    template_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    template_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 생성자 — Creator profile (SET NULL on delete)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
