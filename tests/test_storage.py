"""스토리지 API 테스트 — S3 presigned 업로드 URL 발급.

Presigning is computed locally by boto3, so no network access is needed.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import auth_header
from nightbase.config import settings
from nightbase.services.storage_service import storage_service

URL = "/api/v1/app/storage/presigned-url"
BUCKET = "nightbase-test"


@pytest.fixture
def s3_settings(monkeypatch) -> None:
    monkeypatch.setattr(settings, "AWS_ACCESS_KEY_ID", "AKIATESTKEY")
    monkeypatch.setattr(settings, "AWS_SECRET_ACCESS_KEY", "test-secret")
    monkeypatch.setattr(settings, "AWS_S3_BUCKET", BUCKET)
    monkeypatch.setattr(storage_service, "_client", None)


class TestPresignedUrl:
    """presigned URL 발급 테스트."""

    async def test_issue_url(self, client: AsyncClient, staff, store, s3_settings):
        res = await client.post(URL, json={
            "filename": "dom_perignon.JPG",
            "content_type": "image/jpeg",
        }, headers=auth_header(staff.token))
        assert res.status_code == 200
        data = res.json()
        assert f"{BUCKET}" in data["upload_url"]
        assert "X-Amz-Signature" in data["upload_url"]
        prefix = f"https://{BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/menus/{store.id}/"
        assert data["file_url"].startswith(prefix)
        assert data["file_url"].endswith(".jpg")

    async def test_invalid_folder(self, client: AsyncClient, staff, s3_settings):
        res = await client.post(URL, json={
            "filename": "a.png",
            "content_type": "image/png",
            "folder": "../secrets",
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_invalid_content_type(self, client: AsyncClient, staff, s3_settings):
        res = await client.post(URL, json={
            "filename": "a.pdf",
            "content_type": "application/pdf",
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_not_configured(self, client: AsyncClient, staff, monkeypatch):
        """S3 미설정 시 400."""
        monkeypatch.setattr(settings, "AWS_S3_BUCKET", "")
        res = await client.post(URL, json={
            "filename": "a.png",
            "content_type": "image/png",
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_cast_forbidden(self, client: AsyncClient, cast, s3_settings):
        res = await client.post(URL, json={
            "filename": "a.png",
            "content_type": "image/png",
        }, headers=auth_header(cast.token))
        assert res.status_code == 403
