"""인증 API 테스트 — 로그인, 토큰 갱신, 로그아웃, /me, 프로필 전환.

Auth API tests — App and admin login, refresh rotation, logout, /me and
profile switching.
"""

from httpx import AsyncClient

from nightbase.models.user import Profile
from tests.conftest import TEST_PASSWORD, auth_header, make_token

AUTH = "/api/v1/auth"
APP_AUTH = "/api/v1/app/auth"
ADMIN_AUTH = "/api/v1/admin/auth"


async def _login(client: AsyncClient, email: str, url: str = APP_AUTH) -> dict:
    res = await client.post(f"{url}/login", json={"email": email, "password": TEST_PASSWORD})
    assert res.status_code == 200
    return res.json()


class TestAppLogin:
    """앱 로그인 테스트."""

    async def test_login_success(self, client: AsyncClient, cast):
        """앱 로그인 성공 — 토큰 쌍 발급."""
        data = await _login(client, "cast@luna.test")
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]

    async def test_login_email_case_insensitive(self, client: AsyncClient, cast):
        """이메일 대소문자 무시."""
        res = await client.post(f"{APP_AUTH}/login", json={
            "email": "CAST@Luna.Test",
            "password": TEST_PASSWORD,
        })
        assert res.status_code == 200

    async def test_login_wrong_password(self, client: AsyncClient, cast):
        """잘못된 비밀번호로 로그인 실패."""
        res = await client.post(f"{APP_AUTH}/login", json={
            "email": "cast@luna.test",
            "password": "wrong",
        })
        assert res.status_code == 401

    async def test_login_unknown_email(self, client: AsyncClient, store):
        res = await client.post(f"{APP_AUTH}/login", json={
            "email": "nobody@luna.test",
            "password": TEST_PASSWORD,
        })
        assert res.status_code == 401

    async def test_login_inactive_user(self, client: AsyncClient, db, cast):
        """비활성 계정 로그인 실패."""
        cast.user.is_active = False
        await db.flush()
        res = await client.post(f"{APP_AUTH}/login", json={
            "email": "cast@luna.test",
            "password": TEST_PASSWORD,
        })
        assert res.status_code == 401

    async def test_login_selects_first_profile(self, client: AsyncClient, db, cast):
        """현재 프로필이 없으면 첫 프로필을 선택."""
        cast.user.current_profile_id = None
        await db.flush()

        tokens = await _login(client, "cast@luna.test")
        res = await client.get(f"{AUTH}/me", headers=auth_header(tokens["access_token"]))
        assert res.status_code == 200
        assert res.json()["current_profile"]["id"] == str(cast.profile.id)


class TestAdminLogin:
    """관리자 로그인 테스트."""

    async def test_admin_login_success(self, client: AsyncClient, platform_admin):
        data = await _login(client, "root@nightbase.test", ADMIN_AUTH)
        assert data["access_token"]

    async def test_admin_login_non_admin_forbidden(self, client: AsyncClient, owner):
        """매장 관리자라도 플랫폼 관리자가 아니면 403."""
        res = await client.post(f"{ADMIN_AUTH}/login", json={
            "email": "owner@luna.test",
            "password": TEST_PASSWORD,
        })
        assert res.status_code == 403


class TestTokenLifecycle:
    """토큰 갱신 및 로그아웃 테스트."""

    async def test_refresh_rotates_token(self, client: AsyncClient, cast):
        """갱신 후 기존 리프레시 토큰은 재사용 불가."""
        tokens = await _login(client, "cast@luna.test")

        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 200
        assert res.json()["refresh_token"] != tokens["refresh_token"]

        reuse = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert reuse.status_code == 401

    async def test_refresh_invalid_token(self, client: AsyncClient, store):
        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": "not-a-token"})
        assert res.status_code == 401

    async def test_logout_revokes_refresh_token(self, client: AsyncClient, cast):
        """로그아웃 후 리프레시 불가."""
        tokens = await _login(client, "cast@luna.test")

        res = await client.post(f"{AUTH}/logout", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 204

        res = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401

    async def test_refresh_token_rejected_as_access(self, client: AsyncClient, cast):
        """리프레시 토큰으로 API 호출 시 401."""
        tokens = await _login(client, "cast@luna.test")
        res = await client.get(f"{AUTH}/me", headers=auth_header(tokens["refresh_token"]))
        assert res.status_code == 401

    async def test_no_token(self, client: AsyncClient):
        """인증 없이 호출 시 거부."""
        res = await client.get(f"{AUTH}/me")
        assert res.status_code in (401, 403)


class TestMeAndSwitch:
    """내 정보 조회와 프로필 전환 테스트."""

    async def test_me_lists_profiles(self, client: AsyncClient, cast, store):
        res = await client.get(f"{AUTH}/me", headers=auth_header(cast.token))
        assert res.status_code == 200
        data = res.json()
        assert data["email"] == "cast@luna.test"
        assert data["is_admin"] is False
        assert len(data["profiles"]) == 1
        assert data["profiles"][0]["store_name"] == "Club Luna"
        assert data["current_profile"]["role"] == "cast"

    async def test_switch_profile(self, client: AsyncClient, db, cast, other_store):
        """다른 매장의 본인 프로필로 전환."""
        second = Profile(store_id=other_store.id, user_id=cast.user.id, display_name="あやか(Sol)", role="staff")
        db.add(second)
        await db.flush()

        res = await client.post(
            f"{AUTH}/switch-profile",
            json={"profile_id": str(second.id)},
            headers=auth_header(cast.token),
        )
        assert res.status_code == 200

        me = await client.get(f"{AUTH}/me", headers=auth_header(res.json()["access_token"]))
        data = me.json()
        assert data["current_profile"]["id"] == str(second.id)
        assert data["current_profile"]["store_name"] == "Club Sol"
        assert len(data["profiles"]) == 2

    async def test_switch_to_foreign_profile(self, client: AsyncClient, cast, staff):
        """타인의 프로필로 전환 시 404."""
        res = await client.post(
            f"{AUTH}/switch-profile",
            json={"profile_id": str(staff.profile.id)},
            headers=auth_header(cast.token),
        )
        assert res.status_code == 404

    async def test_switch_to_malformed_profile_id(self, client: AsyncClient, cast):
        res = await client.post(
            f"{AUTH}/switch-profile",
            json={"profile_id": "not-a-uuid"},
            headers=auth_header(cast.token),
        )
        assert res.status_code == 422

    async def test_user_without_profile_cannot_use_app(self, client: AsyncClient, platform_admin):
        """프로필 없는 사용자는 앱 API 403."""
        res = await client.get("/api/v1/app/profile", headers=auth_header(make_token(platform_admin)))
        assert res.status_code == 403
