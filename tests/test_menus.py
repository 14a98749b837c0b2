"""메뉴 API 테스트 — 카테고리, 메뉴 CRUD, 일괄 등록.

Menu API tests — Category and menu CRUD, bulk creation and role checks.
"""

import uuid

from httpx import AsyncClient

from tests.conftest import auth_header

URL = "/api/v1/app"


async def _category(client: AsyncClient, token: str, name: str, sort_order: int = 0) -> dict:
    res = await client.post(f"{URL}/menu-categories", json={
        "name": name,
        "sort_order": sort_order,
    }, headers=auth_header(token))
    assert res.status_code == 201
    return res.json()


class TestMenuCategories:
    """메뉴 카테고리 테스트."""

    async def test_create_and_list(self, client: AsyncClient, staff, cast):
        await _category(client, staff.token, "シャンパン", 1)
        await _category(client, staff.token, "ボトル", 0)

        res = await client.get(f"{URL}/menu-categories", headers=auth_header(cast.token))
        assert res.status_code == 200
        assert [c["name"] for c in res.json()] == ["ボトル", "シャンパン"]

    async def test_duplicate_name(self, client: AsyncClient, staff):
        """같은 매장 내 이름 중복 시 409."""
        await _category(client, staff.token, "ボトル")
        res = await client.post(f"{URL}/menu-categories", json={"name": "ボトル"}, headers=auth_header(staff.token))
        assert res.status_code == 409

    async def test_same_name_in_other_store(self, client: AsyncClient, staff, outsider):
        """다른 매장에서는 같은 이름 허용."""
        await _category(client, staff.token, "ボトル")
        await _category(client, outsider.token, "ボトル")

    async def test_cast_cannot_create(self, client: AsyncClient, cast):
        res = await client.post(f"{URL}/menu-categories", json={"name": "X"}, headers=auth_header(cast.token))
        assert res.status_code == 403

    async def test_delete_category_keeps_menus(self, client: AsyncClient, staff):
        """카테고리 삭제 시 메뉴는 미분류로 남음."""
        category = await _category(client, staff.token, "フード")
        menu = await client.post(f"{URL}/menus", json={
            "name": "フルーツ盛り",
            "price": 5000,
            "category_id": category["id"],
        }, headers=auth_header(staff.token))

        res = await client.delete(f"{URL}/menu-categories/{category['id']}", headers=auth_header(staff.token))
        assert res.status_code == 204

        res = await client.get(f"{URL}/menus/{menu.json()['id']}", headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["category_id"] is None


class TestMenus:
    """메뉴 CRUD 테스트."""

    async def test_create_menu(self, client: AsyncClient, staff):
        category = await _category(client, staff.token, "シャンパン")
        res = await client.post(f"{URL}/menus", json={
            "name": "ドンペリ",
            "price": 80000,
            "category_id": category["id"],
            "cast_back_amount": 8000,
        }, headers=auth_header(staff.token))
        assert res.status_code == 201
        data = res.json()
        assert data["category_name"] == "シャンパン"
        assert data["target_type"] == "guest"
        assert data["hide_from_slip"] is False

    async def test_negative_price_rejected(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/menus", json={"name": "X", "price": -1}, headers=auth_header(staff.token))
        assert res.status_code == 422

    async def test_foreign_category_rejected(self, client: AsyncClient, staff, outsider):
        """다른 매장 카테고리 지정 시 404."""
        foreign = await _category(client, outsider.token, "ボトル")
        res = await client.post(f"{URL}/menus", json={
            "name": "X",
            "price": 100,
            "category_id": foreign["id"],
        }, headers=auth_header(staff.token))
        assert res.status_code == 404

    async def test_update_menu(self, client: AsyncClient, staff):
        created = (await client.post(f"{URL}/menus", json={"name": "ビール", "price": 1000}, headers=auth_header(staff.token))).json()
        category = await _category(client, staff.token, "ドリンク")

        res = await client.put(f"{URL}/menus/{created['id']}", json={
            "price": 1200,
            "category_id": category["id"],
        }, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["price"] == 1200
        assert res.json()["category_name"] == "ドリンク"

    async def test_search_menus(self, client: AsyncClient, staff, cast):
        for name in ("ビール", "ハイボール", "ウーロン茶"):
            await client.post(f"{URL}/menus", json={"name": name, "price": 800}, headers=auth_header(staff.token))
        res = await client.get(f"{URL}/menus", params={"search": "ボール"}, headers=auth_header(cast.token))
        assert [m["name"] for m in res.json()] == ["ハイボール"]

    async def test_menus_are_store_scoped(self, client: AsyncClient, staff, outsider):
        created = (await client.post(f"{URL}/menus", json={"name": "ビール", "price": 1000}, headers=auth_header(staff.token))).json()
        res = await client.get(f"{URL}/menus/{created['id']}", headers=auth_header(outsider.token))
        assert res.status_code == 404

    async def test_delete_menu(self, client: AsyncClient, staff):
        created = (await client.post(f"{URL}/menus", json={"name": "ビール", "price": 1000}, headers=auth_header(staff.token))).json()
        res = await client.delete(f"{URL}/menus/{created['id']}", headers=auth_header(staff.token))
        assert res.status_code == 204
        res = await client.delete(f"{URL}/menus/{uuid.uuid4()}", headers=auth_header(staff.token))
        assert res.status_code == 404


class TestBulkCreate:
    """메뉴 일괄 등록 테스트."""

    async def test_bulk_creates_missing_categories(self, client: AsyncClient, staff):
        """없는 카테고리는 이름으로 생성, 있는 카테고리는 재사용."""
        existing = await _category(client, staff.token, "ボトル", 5)

        res = await client.post(f"{URL}/menus/bulk", json={"items": [
            {"name": "鏡月", "price": 6000, "category": "ボトル"},
            {"name": "モエ", "price": 30000, "category": "シャンパン"},
            {"name": "クリュッグ", "price": 90000, "category": "シャンパン"},
            {"name": "チャージ", "price": 3000},
        ]}, headers=auth_header(staff.token))
        assert res.status_code == 201
        data = res.json()
        assert [m["name"] for m in data] == ["鏡月", "モエ", "クリュッグ", "チャージ"]
        assert data[0]["category_id"] == existing["id"]
        assert data[1]["category_id"] == data[2]["category_id"]
        assert data[3]["category_id"] is None

        categories = (await client.get(f"{URL}/menu-categories", headers=auth_header(staff.token))).json()
        by_name = {c["name"]: c for c in categories}
        assert by_name["シャンパン"]["sort_order"] == 6
        assert by_name["シャンパン"]["menu_count"] == 2

    async def test_bulk_requires_items(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/menus/bulk", json={"items": []}, headers=auth_header(staff.token))
        assert res.status_code == 422
