"""프로필 API 테스트 — 내 프로필과 매장 프로필 관리.

Profile API tests — Own profile read/update, store profile management
with role checks and tenant isolation.
"""

import uuid

from httpx import AsyncClient

from tests.conftest import auth_header, create_guest

URL = "/api/v1/app"


class TestMyProfile:
    """내 프로필 테스트."""

    async def test_get_my_profile(self, client: AsyncClient, cast, store):
        res = await client.get(f"{URL}/profile", headers=auth_header(cast.token))
        assert res.status_code == 200
        data = res.json()
        assert data["id"] == str(cast.profile.id)
        assert data["store_id"] == str(store.id)
        assert data["role"] == "cast"

    async def test_update_my_profile_ignores_role(self, client: AsyncClient, cast):
        """표시 항목만 수정 — role 은 무시."""
        res = await client.put(f"{URL}/profile", json={
            "display_name": "あやか♡",
            "phone_number": "090-0000-0000",
            "role": "admin",
        }, headers=auth_header(cast.token))
        assert res.status_code == 200
        data = res.json()
        assert data["display_name"] == "あやか♡"
        assert data["phone_number"] == "090-0000-0000"
        assert data["role"] == "cast"


class TestStoreProfiles:
    """매장 프로필 관리 테스트."""

    async def test_list_filters_by_role(self, client: AsyncClient, db, store, staff, cast, cast2):
        await create_guest(db, store)
        res = await client.get(f"{URL}/profiles", params={"role": "cast"}, headers=auth_header(cast.token))
        assert res.status_code == 200
        names = {p["display_name"] for p in res.json()}
        assert names == {"あやか", "みゆ"}

    async def test_list_search(self, client: AsyncClient, store, staff, cast, cast2):
        res = await client.get(f"{URL}/profiles", params={"search": "みゆ"}, headers=auth_header(staff.token))
        assert [p["display_name"] for p in res.json()] == ["みゆ"]

    async def test_list_is_store_scoped(self, client: AsyncClient, cast, outsider):
        """다른 매장 프로필은 보이지 않음."""
        res = await client.get(f"{URL}/profiles", headers=auth_header(cast.token))
        ids = {p["id"] for p in res.json()}
        assert str(outsider.profile.id) not in ids

    async def test_staff_creates_guest(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/profiles", json={
            "display_name": "佐藤様",
            "role": "guest",
        }, headers=auth_header(staff.token))
        assert res.status_code == 201
        data = res.json()
        assert data["role"] == "guest"
        assert data["user_id"] is None

    async def test_cast_cannot_create(self, client: AsyncClient, cast):
        """캐스트는 프로필 생성 불가 — 403."""
        res = await client.post(f"{URL}/profiles", json={"display_name": "X"}, headers=auth_header(cast.token))
        assert res.status_code == 403

    async def test_invalid_role_rejected(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/profiles", json={
            "display_name": "X",
            "role": "owner",
        }, headers=auth_header(staff.token))
        assert res.status_code == 422

    async def test_update_profile(self, client: AsyncClient, owner, cast):
        res = await client.put(f"{URL}/profiles/{cast.profile.id}", json={
            "role": "staff",
            "status": "休職中",
        }, headers=auth_header(owner.token))
        assert res.status_code == 200
        assert res.json()["role"] == "staff"
        assert res.json()["status"] == "休職中"

    async def test_get_other_store_profile(self, client: AsyncClient, owner, outsider):
        """다른 매장 프로필 조회 시 404."""
        res = await client.get(f"{URL}/profiles/{outsider.profile.id}", headers=auth_header(owner.token))
        assert res.status_code == 404

    async def test_delete_profile(self, client: AsyncClient, db, owner, store):
        guest = await create_guest(db, store)
        res = await client.delete(f"{URL}/profiles/{guest.id}", headers=auth_header(owner.token))
        assert res.status_code == 204

        res = await client.get(f"{URL}/profiles/{guest.id}", headers=auth_header(owner.token))
        assert res.status_code == 404

    async def test_cannot_delete_self(self, client: AsyncClient, owner):
        """자기 자신 삭제 시 400."""
        res = await client.delete(f"{URL}/profiles/{owner.profile.id}", headers=auth_header(owner.token))
        assert res.status_code == 400

    async def test_delete_nonexistent(self, client: AsyncClient, owner):
        res = await client.delete(f"{URL}/profiles/{uuid.uuid4()}", headers=auth_header(owner.token))
        assert res.status_code == 404


class TestCurrentStore:
    """현재 매장 조회 테스트."""

    async def test_get_store(self, client: AsyncClient, cast, store):
        res = await client.get(f"{URL}/store", headers=auth_header(cast.token))
        assert res.status_code == 200
        assert res.json()["name"] == "Club Luna"
        assert res.json()["ai_credits"] == 30
