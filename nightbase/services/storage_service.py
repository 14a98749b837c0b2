"""스토리지 서비스 — S3 presigned 업로드 URL 발급.

Storage Service — Issues S3 presigned PUT URLs for menu, profile and
generated images. Uploads go straight from the client to the bucket.
"""

import logging
import uuid

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from nightbase.config import settings
from nightbase.utils.exceptions import BadRequestError, ExternalServiceError
from nightbase.utils.timezone import now_utc

logger = logging.getLogger(__name__)

# 업로드 허용 폴더 — Allowed key prefixes
UPLOAD_FOLDERS: tuple[str, ...] = ("menus", "profiles", "stores", "sns")
# 업로드 허용 MIME — Allowed image types
ALLOWED_CONTENT_TYPES: tuple[str, ...] = ("image/jpeg", "image/png", "image/webp", "image/gif")


class StorageService:
    """S3 presigned URL 발급 서비스."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(settings.AWS_ACCESS_KEY_ID and settings.AWS_S3_BUCKET)

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def _generate_key(self, store_id: uuid.UUID, filename: str, folder: str) -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        date_prefix = now_utc().strftime("%Y/%m")
        return f"{folder}/{store_id}/{date_prefix}/{uuid.uuid4().hex}.{ext}"

    def file_url(self, key: str) -> str:
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/{key}"

    def generate_presigned_upload_url(
        self,
        store_id: uuid.UUID,
        filename: str,
        content_type: str,
        folder: str = "menus",
        expires: int = 3600,
    ) -> dict[str, str]:
        """presigned PUT URL과 업로드 후 파일 URL을 반환합니다.

        Raises:
            BadRequestError: 미설정, 허용되지 않는 폴더/형식 (Storage not configured, bad folder or type)
            ExternalServiceError: URL 생성 실패 (Presigning failed)
        """
        if not self.is_configured:
            raise BadRequestError("Storage is not configured")
        if folder not in UPLOAD_FOLDERS:
            raise BadRequestError(f"Invalid folder: {folder}")
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise BadRequestError(f"Unsupported content type: {content_type}")

        key = self._generate_key(store_id, filename, folder)
        try:
            upload_url = self.client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": settings.AWS_S3_BUCKET,
                    "Key": key,
                    "ContentType": content_type,
                },
                ExpiresIn=expires,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Presigned URL generation failed for %s", key)
            raise ExternalServiceError("Could not create upload URL") from exc
        return {"upload_url": upload_url, "file_url": self.file_url(key), "key": key}


storage_service: StorageService = StorageService()
