"""SNS API 테스트 — 계정 연동, 템플릿, 예약/즉시 게시, 정기 게시, 크론 디스패치.

SNS API tests — Account connection, templates and preview, scheduled and
immediate posts, recurring schedules and the cron dispatch run. The X API
is replaced by an httpx MockTransport.
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from httpx import AsyncClient

from tests.conftest import auth_header
from nightbase.config import settings
from nightbase.services.sns_dispatch_service import x_client
from nightbase.utils.timezone import jp_date_label, now_utc, to_local, today_local

URL = "/api/v1/app/sns"
CRON_URL = "/api/v1/cron/sns-dispatch"
CRON_SECRET = "cron-secret-for-tests"


class FakeX:
    """X API 대역 — Records requests and answers with a fixed status."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.tweet_status: int = 201
        self.tweet_body: dict | None = None  # 지정 시 2xx 본문을 대체 (Overrides the success body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/2/oauth2/token":
            return httpx.Response(200, json={
                "access_token": "refreshed-token",
                "refresh_token": "next-refresh",
                "expires_in": 7200,
            })
        if self.tweet_status >= 400:
            return httpx.Response(self.tweet_status, json={"detail": "Unauthorized"})
        if self.tweet_body is not None:
            return httpx.Response(200, json=self.tweet_body)
        return httpx.Response(201, json={"data": {"id": "1790000000000000000"}})

    @property
    def tweets(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.url.path == "/2/tweets"]


@pytest.fixture
def fake_x(monkeypatch) -> FakeX:
    fake = FakeX()
    monkeypatch.setattr(x_client, "transport", httpx.MockTransport(fake.handler))
    return fake


@pytest.fixture
def cron_secret(monkeypatch) -> str:
    monkeypatch.setattr(settings, "CRON_SECRET", CRON_SECRET)
    return CRON_SECRET


async def _connect(client: AsyncClient, token: str, **extra) -> dict:
    res = await client.post(f"{URL}/accounts", json={
        "platform": "x",
        "account_name": "@club_luna",
        "access_token": "access-token",
        "refresh_token": "refresh-token",
        **extra,
    }, headers=auth_header(token))
    assert res.status_code == 200, res.text
    return res.json()


class TestAccounts:
    """SNS 계정 연동 테스트."""

    async def test_connect_hides_tokens(self, client: AsyncClient, staff):
        data = await _connect(client, staff.token)
        assert data["is_connected"] is True
        assert data["account_name"] == "@club_luna"
        assert "access_token" not in data
        assert "refresh_token" not in data

    async def test_reconnect_updates_single_account(self, client: AsyncClient, staff):
        """플랫폼당 1계정 — 재연동 시 갱신."""
        first = await _connect(client, staff.token)
        second = await _connect(client, staff.token, account_name="@luna_new")
        assert second["id"] == first["id"]

        res = await client.get(f"{URL}/accounts", headers=auth_header(staff.token))
        assert [a["account_name"] for a in res.json()] == ["@luna_new"]

    async def test_disconnect(self, client: AsyncClient, staff):
        await _connect(client, staff.token)
        res = await client.delete(f"{URL}/accounts/x", headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["is_connected"] is False

    async def test_disconnect_missing(self, client: AsyncClient, staff):
        res = await client.delete(f"{URL}/accounts/x", headers=auth_header(staff.token))
        assert res.status_code == 404

    async def test_cast_forbidden(self, client: AsyncClient, cast):
        res = await client.get(f"{URL}/accounts", headers=auth_header(cast.token))
        assert res.status_code == 403


class TestTemplates:
    """템플릿 및 미리보기 테스트."""

    async def test_crud(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/templates", json={
            "name": "本日の出勤",
            "content": "{日付} {出勤中キャスト}",
        }, headers=auth_header(staff.token))
        assert res.status_code == 201
        template = res.json()
        assert template["template_type"] == "text"

        res = await client.put(f"{URL}/templates/{template['id']}", json={"name": "出勤速報"}, headers=auth_header(staff.token))
        assert res.json()["name"] == "出勤速報"
        assert res.json()["content"] == "{日付} {出勤中キャスト}"

        res = await client.delete(f"{URL}/templates/{template['id']}", headers=auth_header(staff.token))
        assert res.status_code == 204
        assert (await client.get(f"{URL}/templates", headers=auth_header(staff.token))).json() == []

    async def test_preview_renders_variables(self, client: AsyncClient, staff, cast, cast2):
        """오늘 출근 예정/근무 중 캐스트로 변수 치환."""
        await client.post("/api/v1/app/attendance", json={
            "profile_id": str(cast2.profile.id),
            "work_date": today_local().isoformat(),
        }, headers=auth_header(staff.token))
        await client.post("/api/v1/app/attendance/me/clock-in", headers=auth_header(cast.token))

        res = await client.post(f"{URL}/templates/preview", json={
            "content": "{日付}|{店舗名}|{出勤中キャスト}|{出勤予定キャスト}|{出勤人数}",
        }, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["content"] == f"{jp_date_label(today_local())}|Club Luna|あやか|みゆ|1"

    async def test_preview_without_cast(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/templates/preview", json={
            "content": "{出勤中キャスト}/{出勤予定キャスト}/{出勤人数}",
        }, headers=auth_header(staff.token))
        assert res.json()["content"] == "（出勤情報なし）/（出勤予定なし）/0"


class TestPosts:
    """예약/즉시 게시 테스트."""

    async def test_schedule_and_delete(self, client: AsyncClient, staff):
        scheduled_at = (datetime.now(timezone.utc) + timedelta(hours=2)).isoformat()
        res = await client.post(f"{URL}/posts", json={
            "content": "今夜もお待ちしております",
            "scheduled_at": scheduled_at,
        }, headers=auth_header(staff.token))
        assert res.status_code == 201
        post = res.json()
        assert post["status"] == "pending"
        assert post["platforms"] == ["x"]

        pending = (await client.get(f"{URL}/posts/pending", headers=auth_header(staff.token))).json()
        assert [p["id"] for p in pending] == [post["id"]]

        res = await client.delete(f"{URL}/posts/{post['id']}", headers=auth_header(staff.token))
        assert res.status_code == 204
        assert (await client.get(f"{URL}/posts/pending", headers=auth_header(staff.token))).json() == []

    async def test_post_now(self, client: AsyncClient, staff, fake_x):
        await _connect(client, staff.token)
        res = await client.post(f"{URL}/posts/now", json={"content": "本日オープン"}, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["status"] == "posted"
        assert fake_x.tweets == [{"text": "本日オープン"}]

        history = (await client.get(f"{URL}/posts/history", headers=auth_header(staff.token))).json()
        assert [p["content"] for p in history] == ["本日オープン"]

    async def test_post_now_without_account(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/posts/now", json={"content": "x"}, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_post_now_rejected_token(self, client: AsyncClient, staff, fake_x):
        """401 응답 시 실패 기록, 계정은 연동 해제."""
        fake_x.tweet_status = 401
        await _connect(client, staff.token)
        res = await client.post(f"{URL}/posts/now", json={"content": "x"}, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["status"] == "failed"
        assert "x: Unauthorized" in res.json()["error_message"]

        accounts = (await client.get(f"{URL}/accounts", headers=auth_header(staff.token))).json()
        assert accounts[0]["is_connected"] is False

    async def test_post_now_success_without_tweet_id(self, client: AsyncClient, staff, fake_x):
        """2xx 라도 data.id 가 없으면 실패로 기록."""
        fake_x.tweet_body = {"errors": [{"message": "duplicate content"}]}
        await _connect(client, staff.token)
        res = await client.post(f"{URL}/posts/now", json={"content": "x"}, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["status"] == "failed"
        assert "Unexpected X response: 200" in res.json()["error_message"]

    async def test_expiring_token_is_refreshed(self, client: AsyncClient, staff, fake_x):
        expires = (datetime.now(timezone.utc) + timedelta(minutes=1)).isoformat()
        await _connect(client, staff.token, token_expires_at=expires)
        res = await client.post(f"{URL}/posts/now", json={"content": "x"}, headers=auth_header(staff.token))
        assert res.json()["status"] == "posted"

        paths = [r.url.path for r in fake_x.requests]
        assert paths == ["/2/oauth2/token", "/2/tweets"]
        assert fake_x.requests[1].headers["Authorization"] == "Bearer refreshed-token"


class TestRecurring:
    """정기 게시 테스트."""

    async def test_create_toggle_delete(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/recurring", json={
            "name": "毎日の出勤告知",
            "schedule_hour": 18,
        }, headers=auth_header(staff.token))
        assert res.status_code == 201
        schedule = res.json()
        assert schedule["content_type"] == "cast_list"
        assert schedule["is_active"] is True

        res = await client.post(f"{URL}/recurring/{schedule['id']}/toggle", headers=auth_header(staff.token))
        assert res.json()["is_active"] is False

        res = await client.put(f"{URL}/recurring/{schedule['id']}", json={"schedule_hour": 19}, headers=auth_header(staff.token))
        assert res.json()["schedule_hour"] == 19

        res = await client.delete(f"{URL}/recurring/{schedule['id']}", headers=auth_header(staff.token))
        assert res.status_code == 204

    async def test_template_type_requires_template(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/recurring", json={
            "name": "テンプレ",
            "content_type": "template",
            "schedule_hour": 18,
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_foreign_template(self, client: AsyncClient, staff, outsider):
        """다른 매장 템플릿은 404."""
        template = (await client.post(f"{URL}/templates", json={
            "name": "他店",
            "content": "x",
        }, headers=auth_header(outsider.token))).json()
        res = await client.post(f"{URL}/recurring", json={
            "name": "テンプレ",
            "content_type": "template",
            "template_id": template["id"],
            "schedule_hour": 18,
        }, headers=auth_header(staff.token))
        assert res.status_code == 404

    async def test_invalid_hour(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/recurring", json={"name": "x", "schedule_hour": 24}, headers=auth_header(staff.token))
        assert res.status_code == 422


class TestCronDispatch:
    """크론 디스패치 테스트."""

    async def test_requires_secret(self, client: AsyncClient, cron_secret):
        res = await client.post(CRON_URL, headers=auth_header("wrong"))
        assert res.status_code == 401
        res = await client.post(CRON_URL)
        assert res.status_code in (401, 403)

    async def test_disabled_without_secret(self, client: AsyncClient, monkeypatch):
        """CRON_SECRET 미설정 시 항상 401."""
        monkeypatch.setattr(settings, "CRON_SECRET", "")
        res = await client.post(CRON_URL, headers=auth_header(""))
        assert res.status_code in (401, 403)

    async def test_user_token_rejected(self, client: AsyncClient, cron_secret, owner):
        res = await client.post(CRON_URL, headers=auth_header(owner.token))
        assert res.status_code == 401

    async def test_dispatch_due_posts(self, client: AsyncClient, staff, cron_secret, fake_x):
        await _connect(client, staff.token)
        past = (datetime.now(timezone.utc) - timedelta(minutes=5)).isoformat()
        future = (datetime.now(timezone.utc) + timedelta(hours=5)).isoformat()
        await client.post(f"{URL}/posts", json={"content": "due", "scheduled_at": past}, headers=auth_header(staff.token))
        await client.post(f"{URL}/posts", json={"content": "later", "scheduled_at": future}, headers=auth_header(staff.token))

        res = await client.post(CRON_URL, headers=auth_header(cron_secret))
        assert res.status_code == 200
        data = res.json()
        assert data["processed"] == 1
        assert data["posted"] == 1
        assert data["failed"] == 0
        assert fake_x.tweets == [{"text": "due"}]

        pending = (await client.get(f"{URL}/posts/pending", headers=auth_header(staff.token))).json()
        assert [p["content"] for p in pending] == ["later"]
        history = (await client.get(f"{URL}/posts/history", headers=auth_header(staff.token))).json()
        assert history[0]["content"] == "due"
        assert history[0]["posted_at"] is not None

    async def test_disconnected_store_post_fails(self, client: AsyncClient, staff, cron_secret, fake_x):
        """연동 계정이 없으면 실패 처리."""
        past = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
        await client.post(f"{URL}/posts", json={"content": "due", "scheduled_at": past}, headers=auth_header(staff.token))

        data = (await client.post(CRON_URL, headers=auth_header(cron_secret))).json()
        assert data["failed"] == 1
        assert fake_x.tweets == []

    async def test_recurring_enqueued_once_per_day(self, client: AsyncClient, staff, cron_secret, fake_x):
        """현재 시각의 정기 게시는 하루 한 번만 큐잉."""
        await _connect(client, staff.token)
        await client.post(f"{URL}/recurring", json={
            "name": "出勤告知",
            "schedule_hour": to_local(now_utc()).hour,
        }, headers=auth_header(staff.token))

        data = (await client.post(CRON_URL, headers=auth_header(cron_secret))).json()
        assert data["enqueued"] == 1
        assert data["posted"] == 1
        assert fake_x.tweets[0]["text"].endswith("Club Luna")
        assert "（出勤予定なし）" in fake_x.tweets[0]["text"]

        data = (await client.post(CRON_URL, headers=auth_header(cron_secret))).json()
        assert data["enqueued"] == 0
        assert data["processed"] == 0

    async def test_malformed_success_body_marks_failed(self, client: AsyncClient, staff, cron_secret, fake_x):
        """본문이 이상한 2xx 응답은 실패 처리되고 다음 실행에서 재게시되지 않음."""
        fake_x.tweet_body = {"errors": [{"message": "temporary"}]}
        await _connect(client, staff.token)
        past = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
        await client.post(f"{URL}/posts", json={"content": "due", "scheduled_at": past}, headers=auth_header(staff.token))

        res = await client.post(CRON_URL, headers=auth_header(cron_secret))
        assert res.status_code == 200
        data = res.json()
        assert data["processed"] == 1
        assert data["failed"] == 1
        assert len(fake_x.tweets) == 1

        data = (await client.post(CRON_URL, headers=auth_header(cron_secret))).json()
        assert data["processed"] == 0
        assert len(fake_x.tweets) == 1
        assert (await client.get(f"{URL}/posts/pending", headers=auth_header(staff.token))).json() == []
