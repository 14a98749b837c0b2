"""관리자 매장 CRUD API 테스트.

Admin store CRUD API tests — Platform-admin only store management with
pagination, search and name uniqueness.
"""

import uuid

from httpx import AsyncClient

from tests.conftest import auth_header

URL = "/api/v1/admin/stores"


class TestStoreCreate:
    """매장 생성 테스트."""

    async def test_create_store(self, client: AsyncClient, admin_token):
        """매장 생성 성공 — 영업시간 HH:MM."""
        res = await client.post(URL, json={
            "name": "Club Stella",
            "prefecture": "大阪府",
            "business_start_time": "20:00",
            "business_end_time": "1:00",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["name"] == "Club Stella"
        assert data["business_start_time"] == "20:00"
        assert data["business_end_time"] == "01:00"
        assert data["is_active"] is True

    async def test_create_store_duplicate_name(self, client: AsyncClient, store, admin_token):
        """같은 이름 매장 생성 시 409."""
        res = await client.post(URL, json={"name": "Club Luna"}, headers=auth_header(admin_token))
        assert res.status_code == 409

    async def test_create_store_invalid_time(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "name": "Bad Hours",
            "business_start_time": "25:99",
        }, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_create_store_store_admin_forbidden(self, client: AsyncClient, owner):
        """매장 admin 역할은 플랫폼 관리자가 아님 — 403."""
        res = await client.post(URL, json={"name": "X"}, headers=auth_header(owner.token))
        assert res.status_code == 403


class TestStoreRead:
    """매장 조회 테스트."""

    async def test_list_stores_paginated(self, client: AsyncClient, store, other_store, admin_token):
        res = await client.get(URL, params={"per_page": 1}, headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 2
        assert data["pages"] == 2
        assert len(data["items"]) == 1

    async def test_search_stores(self, client: AsyncClient, store, other_store, admin_token):
        res = await client.get(URL, params={"search": "sol"}, headers=auth_header(admin_token))
        names = [s["name"] for s in res.json()["items"]]
        assert names == ["Club Sol"]

    async def test_get_nonexistent_store(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404


class TestStoreUpdateDelete:
    """매장 수정/삭제 테스트."""

    async def test_update_store(self, client: AsyncClient, store, admin_token):
        res = await client.put(f"{URL}/{store.id}", json={
            "city": "渋谷区",
            "is_active": False,
        }, headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["city"] == "渋谷区"
        assert data["is_active"] is False
        assert data["name"] == "Club Luna"

    async def test_rename_to_existing_name(self, client: AsyncClient, store, other_store, admin_token):
        res = await client.put(f"{URL}/{store.id}", json={"name": "Club Sol"}, headers=auth_header(admin_token))
        assert res.status_code == 409

    async def test_delete_store(self, client: AsyncClient, store, admin_token):
        """매장 삭제 후 조회 시 404."""
        res = await client.delete(f"{URL}/{store.id}", headers=auth_header(admin_token))
        assert res.status_code == 204

        res2 = await client.get(f"{URL}/{store.id}", headers=auth_header(admin_token))
        assert res2.status_code == 404
