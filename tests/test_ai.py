"""AI API 테스트 — 메뉴 추출, 문구 생성, 시세 조사, 이미지 생성과 크레딧.

AI API tests — OpenAI calls are replaced by a fake ``chat_json`` and the
image generator by an httpx MockTransport.
"""

from datetime import timedelta

import httpx
import pytest
from httpx import AsyncClient

from tests.conftest import auth_header
from nightbase.config import settings
from nightbase.services.ai_service import ai_service, image_client
from nightbase.utils.timezone import now_utc

URL = "/api/v1/app/ai"
MENU_PHOTO = "data:image/jpeg;base64,/9j/4AAQSkZJRg=="


@pytest.fixture
def fake_chat(monkeypatch) -> list[tuple[str, object]]:
    """OpenAI 대역 — Answers by prompt kind and records calls."""
    calls: list[tuple[str, object]] = []

    async def _chat_json(system_prompt: str, user_content) -> dict:
        calls.append((system_prompt, user_content))
        if "メニュー表" in system_prompt:
            return {"items": [
                {"name": "鏡月", "price": 6000, "category": "ボトル"},
                {"name": "チャージ", "price": 3000},
            ]}
        if "価格アナリスト" in system_prompt:
            return {"min_price": 5000, "max_price": 9000, "average_price": 7000, "comment": "都内相場"}
        return {"text": "今宵、特別なひとときを。"}

    monkeypatch.setattr(ai_service, "chat_json", _chat_json)
    return calls


@pytest.fixture
def image_status(monkeypatch) -> dict[str, int]:
    """이미지 생성기 대역 — HEAD status is controlled by the test."""
    state: dict[str, int] = {"status": 200}

    def _handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "HEAD"
        return httpx.Response(state["status"])

    monkeypatch.setattr(image_client, "transport", httpx.MockTransport(_handler))
    return state


class TestTextFeatures:
    """텍스트 AI 기능 테스트."""

    async def test_menu_extract(self, client: AsyncClient, staff, fake_chat):
        res = await client.post(f"{URL}/menu-extract", json={"image": MENU_PHOTO}, headers=auth_header(staff.token))
        assert res.status_code == 200
        items = res.json()["items"]
        assert items[0] == {"name": "鏡月", "price": 6000, "category": "ボトル"}
        assert items[1]["category"] is None

        _, content = fake_chat[0]
        assert content[1]["image_url"]["url"] == MENU_PHOTO

    async def test_menu_extract_requires_data_url(self, client: AsyncClient, staff, fake_chat):
        res = await client.post(f"{URL}/menu-extract", json={"image": "https://example.com/menu.jpg"}, headers=auth_header(staff.token))
        assert res.status_code == 400
        assert fake_chat == []

    async def test_copy(self, client: AsyncClient, staff, fake_chat):
        res = await client.post(f"{URL}/copy", json={
            "purpose": "イベント告知",
            "tone": "高級感",
            "keywords": ["シャンパン", "週末"],
        }, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["text"] == "今宵、特別なひとときを。"
        assert "キーワード: シャンパン、週末" in fake_chat[0][1]

    async def test_price_research(self, client: AsyncClient, staff, fake_chat):
        res = await client.post(f"{URL}/price-research", json={"name": "ドンペリ", "region": "新宿"}, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["average_price"] == 7000

    async def test_not_configured(self, client: AsyncClient, staff, monkeypatch):
        """API 키 미설정 시 502."""
        monkeypatch.setattr(settings, "OPENAI_API_KEY", "")
        res = await client.post(f"{URL}/copy", json={"purpose": "告知"}, headers=auth_header(staff.token))
        assert res.status_code == 502

    async def test_cast_forbidden(self, client: AsyncClient, cast, fake_chat):
        res = await client.post(f"{URL}/copy", json={"purpose": "告知"}, headers=auth_header(cast.token))
        assert res.status_code == 403


class TestImages:
    """이미지 생성 및 크레딧 테스트."""

    async def test_generate_consumes_credit(self, client: AsyncClient, staff, image_status):
        res = await client.post(f"{URL}/images", json={
            "prompt": "champagne tower, neon",
            "image_type": "poster",
            "width": 768,
        }, headers=auth_header(staff.token))
        assert res.status_code == 201
        data = res.json()
        assert data["image_url"].startswith(settings.IMAGE_GENERATION_URL)
        assert "width=768" in data["image_url"]
        assert data["model_used"] == "flux"

        credits = (await client.get(f"{URL}/credits", headers=auth_header(staff.token))).json()
        assert credits == {"credits": 29, "monthly_credits": 30}

        images = (await client.get(f"{URL}/images", headers=auth_header(staff.token))).json()
        assert [i["id"] for i in images] == [data["id"]]

    async def test_generator_failure_keeps_credit(self, client: AsyncClient, staff, image_status):
        """생성 실패 시 502, 크레딧은 소비되지 않음."""
        image_status["status"] = 500
        res = await client.post(f"{URL}/images", json={"prompt": "x"}, headers=auth_header(staff.token))
        assert res.status_code == 502
        credits = (await client.get(f"{URL}/credits", headers=auth_header(staff.token))).json()
        assert credits["credits"] == 30

    async def test_no_credits(self, client: AsyncClient, db, store, staff, image_status):
        store.ai_credits = 0
        store.ai_credits_reset_at = now_utc()
        await db.flush()
        res = await client.post(f"{URL}/images", json={"prompt": "x"}, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_monthly_reset(self, client: AsyncClient, db, store, staff):
        """지난달에 초기화된 크레딧은 조회 시 재충전."""
        store.ai_credits = 0
        store.ai_credits_reset_at = now_utc() - timedelta(days=40)
        await db.flush()
        credits = (await client.get(f"{URL}/credits", headers=auth_header(staff.token))).json()
        assert credits["credits"] == 30

    async def test_delete_image(self, client: AsyncClient, staff, outsider, image_status):
        image = (await client.post(f"{URL}/images", json={"prompt": "x"}, headers=auth_header(staff.token))).json()
        res = await client.delete(f"{URL}/images/{image['id']}", headers=auth_header(outsider.token))
        assert res.status_code == 404
        res = await client.delete(f"{URL}/images/{image['id']}", headers=auth_header(staff.token))
        assert res.status_code == 204
