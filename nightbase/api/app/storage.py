"""스토리지 라우터 — S3 presigned 업로드 URL 발급.

Storage Router — Issues presigned S3 upload URLs for images of the
caller's store. Managers only.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from nightbase.api.deps import require_manager
from nightbase.models.user import Profile
from nightbase.services.storage_service import storage_service

router: APIRouter = APIRouter()


class PresignedUrlRequest(BaseModel):
    filename: str
    content_type: str
    folder: str = "menus"


class PresignedUrlResponse(BaseModel):
    upload_url: str
    file_url: str


@router.post("/presigned-url", response_model=PresignedUrlResponse)
async def create_presigned_url(
    data: PresignedUrlRequest,
    profile: Annotated[Profile, Depends(require_manager)],
) -> dict:
    """presigned upload URL을 생성합니다."""
    result = storage_service.generate_presigned_upload_url(
        store_id=profile.store_id,
        filename=data.filename,
        content_type=data.content_type,
        folder=data.folder,
    )
    return {"upload_url": result["upload_url"], "file_url": result["file_url"]}
