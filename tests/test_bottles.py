"""보틀 킵 API 테스트 — 생성, 소유자 교체, 잔량 필터, 검색.

Bottle keep API tests — Creation with holders, holder replacement,
remaining-amount filters, search and tenant checks.
"""

from httpx import AsyncClient

from tests.conftest import auth_header, create_guest

URL = "/api/v1/app/bottles"
MENUS = "/api/v1/app/menus"


async def _menu(client: AsyncClient, token: str, name: str = "鏡月") -> str:
    res = await client.post(MENUS, json={"name": name, "price": 6000}, headers=auth_header(token))
    assert res.status_code == 201
    return res.json()["id"]


class TestBottleCreate:
    """보틀 킵 생성 테스트."""

    async def test_create_with_holders(self, client: AsyncClient, db, store, staff):
        guest = await create_guest(db, store, "田中様")
        menu_id = await _menu(client, staff.token)

        res = await client.post(URL, json={
            "menu_id": menu_id,
            "remaining_amount": 80,
            "expiration_date": "2026-12-31",
            "holder_profile_ids": [str(guest.id), str(guest.id)],
        }, headers=auth_header(staff.token))
        assert res.status_code == 201
        data = res.json()
        assert data["menu_name"] == "鏡月"
        assert data["remaining_amount"] == 80
        assert data["holders"] == [{"profile_id": str(guest.id), "display_name": "田中様"}]

    async def test_foreign_holder_rejected(self, client: AsyncClient, staff, outsider):
        """다른 매장 프로필은 소유자 불가 — 400."""
        menu_id = await _menu(client, staff.token)
        res = await client.post(URL, json={
            "menu_id": menu_id,
            "holder_profile_ids": [str(outsider.profile.id)],
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_foreign_menu_rejected(self, client: AsyncClient, staff, outsider):
        menu_id = await _menu(client, outsider.token)
        res = await client.post(URL, json={"menu_id": menu_id}, headers=auth_header(staff.token))
        assert res.status_code == 404

    async def test_remaining_out_of_range(self, client: AsyncClient, staff):
        menu_id = await _menu(client, staff.token)
        res = await client.post(URL, json={"menu_id": menu_id, "remaining_amount": 120}, headers=auth_header(staff.token))
        assert res.status_code == 422

    async def test_malformed_ids(self, client: AsyncClient, staff):
        """UUID 형식이 아닌 메뉴/소유자 ID 는 422."""
        res = await client.post(URL, json={"menu_id": "not-a-uuid"}, headers=auth_header(staff.token))
        assert res.status_code == 422

        menu_id = await _menu(client, staff.token)
        res = await client.post(URL, json={
            "menu_id": menu_id,
            "holder_profile_ids": ["not-a-uuid"],
        }, headers=auth_header(staff.token))
        assert res.status_code == 422

    async def test_cast_cannot_create(self, client: AsyncClient, staff, cast):
        menu_id = await _menu(client, staff.token)
        res = await client.post(URL, json={"menu_id": menu_id}, headers=auth_header(cast.token))
        assert res.status_code == 403


class TestBottleUpdate:
    """보틀 킵 수정 테스트."""

    async def test_replace_holders(self, client: AsyncClient, db, store, staff):
        """holder_profile_ids 지정 시 전체 교체."""
        first = await create_guest(db, store, "田中様")
        second = await create_guest(db, store, "鈴木様")
        menu_id = await _menu(client, staff.token)
        created = (await client.post(URL, json={
            "menu_id": menu_id,
            "holder_profile_ids": [str(first.id)],
        }, headers=auth_header(staff.token))).json()

        res = await client.put(f"{URL}/{created['id']}", json={
            "holder_profile_ids": [str(second.id)],
            "remaining_amount": 40,
        }, headers=auth_header(staff.token))
        assert res.status_code == 200
        data = res.json()
        assert data["remaining_amount"] == 40
        assert [h["display_name"] for h in data["holders"]] == ["鈴木様"]

    async def test_update_without_holders_keeps_them(self, client: AsyncClient, db, store, staff):
        guest = await create_guest(db, store)
        menu_id = await _menu(client, staff.token)
        created = (await client.post(URL, json={
            "menu_id": menu_id,
            "holder_profile_ids": [str(guest.id)],
        }, headers=auth_header(staff.token))).json()

        res = await client.put(f"{URL}/{created['id']}", json={"memo": "ロック"}, headers=auth_header(staff.token))
        assert res.json()["memo"] == "ロック"
        assert len(res.json()["holders"]) == 1


class TestBottleList:
    """보틀 킵 목록 테스트."""

    async def test_remaining_filters(self, client: AsyncClient, staff, cast):
        menu_id = await _menu(client, staff.token)
        for amount in (0, 25, 50, 100):
            await client.post(URL, json={"menu_id": menu_id, "remaining_amount": amount}, headers=auth_header(staff.token))

        async def amounts(remaining: str) -> set[int]:
            res = await client.get(URL, params={"remaining": remaining}, headers=auth_header(cast.token))
            return {b["remaining_amount"] for b in res.json()}

        assert await amounts("empty") == {0}
        assert await amounts("low") == {0, 25}
        assert await amounts("half") == {0, 25, 50}
        assert await amounts("full") == {100}

    async def test_search_by_holder_name(self, client: AsyncClient, db, store, staff):
        guest = await create_guest(db, store, "田中様")
        first = await _menu(client, staff.token, "鏡月")
        second = await _menu(client, staff.token, "山崎")
        await client.post(URL, json={"menu_id": first, "holder_profile_ids": [str(guest.id)]}, headers=auth_header(staff.token))
        await client.post(URL, json={"menu_id": second}, headers=auth_header(staff.token))

        res = await client.get(URL, params={"search": "田中"}, headers=auth_header(staff.token))
        assert [b["menu_name"] for b in res.json()] == ["鏡月"]

        res = await client.get(URL, params={"search": "山崎"}, headers=auth_header(staff.token))
        assert [b["menu_name"] for b in res.json()] == ["山崎"]

    async def test_delete_menu_removes_bottles(self, client: AsyncClient, staff):
        """메뉴 삭제 시 보틀도 삭제."""
        menu_id = await _menu(client, staff.token)
        bottle = (await client.post(URL, json={"menu_id": menu_id}, headers=auth_header(staff.token))).json()

        await client.delete(f"{MENUS}/{menu_id}", headers=auth_header(staff.token))
        res = await client.get(f"{URL}/{bottle['id']}", headers=auth_header(staff.token))
        assert res.status_code == 404
