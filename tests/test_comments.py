"""코멘트 API 테스트 — 대상별 코멘트, 작성자 권한, 좋아요 토글.

Comment API tests — Per-target comments, author-only edit/delete and the
like toggle.
"""

import uuid

from httpx import AsyncClient

from tests.conftest import auth_header, create_guest

URL = "/api/v1/app/comments"


async def _comment(client: AsyncClient, token: str, target_type: str, target_id, content: str = "いつもありがとう") -> dict:
    res = await client.post(URL, json={
        "target_type": target_type,
        "target_id": str(target_id),
        "content": content,
    }, headers=auth_header(token))
    assert res.status_code == 201, res.text
    return res.json()


class TestComments:
    """코멘트 CRUD 테스트."""

    async def test_comment_on_profile(self, client: AsyncClient, db, store, cast):
        guest = await create_guest(db, store)
        data = await _comment(client, cast.token, "profile", guest.id)
        assert data["author_name"] == "あやか"
        assert data["target_type"] == "profile"
        assert data["target_id"] == str(guest.id)
        assert data["like_count"] == 0

    async def test_list_by_target(self, client: AsyncClient, db, store, cast, staff):
        """대상별 목록은 오래된 순."""
        guest = await create_guest(db, store)
        other = await create_guest(db, store, "鈴木様")
        await _comment(client, cast.token, "profile", guest.id, "一件目")
        await _comment(client, staff.token, "profile", guest.id, "二件目")
        await _comment(client, staff.token, "profile", other.id, "別の人")

        res = await client.get(URL, params={"target_type": "profile", "target_id": str(guest.id)}, headers=auth_header(cast.token))
        assert res.status_code == 200
        assert [c["content"] for c in res.json()] == ["一件目", "二件目"]

    async def test_missing_target(self, client: AsyncClient, cast):
        res = await client.post(URL, json={
            "target_type": "menu",
            "target_id": str(uuid.uuid4()),
            "content": "x",
        }, headers=auth_header(cast.token))
        assert res.status_code == 404

    async def test_other_store_target(self, client: AsyncClient, cast, outsider):
        """다른 매장 대상에는 작성 불가."""
        res = await client.post(URL, json={
            "target_type": "profile",
            "target_id": str(outsider.profile.id),
            "content": "x",
        }, headers=auth_header(cast.token))
        assert res.status_code == 404

    async def test_invalid_target_type(self, client: AsyncClient, cast):
        res = await client.post(URL, json={
            "target_type": "table",
            "target_id": str(uuid.uuid4()),
            "content": "x",
        }, headers=auth_header(cast.token))
        assert res.status_code == 422

    async def test_empty_content(self, client: AsyncClient, cast):
        res = await client.post(URL, json={
            "target_type": "profile",
            "target_id": str(cast.profile.id),
            "content": "",
        }, headers=auth_header(cast.token))
        assert res.status_code == 422

    async def test_author_edits(self, client: AsyncClient, cast):
        comment = await _comment(client, cast.token, "profile", cast.profile.id)
        res = await client.put(f"{URL}/{comment['id']}", json={"content": "修正"}, headers=auth_header(cast.token))
        assert res.status_code == 200
        assert res.json()["content"] == "修正"

    async def test_non_author_cannot_edit_or_delete(self, client: AsyncClient, cast, owner):
        """관리자라도 작성자가 아니면 403."""
        comment = await _comment(client, cast.token, "profile", cast.profile.id)
        res = await client.put(f"{URL}/{comment['id']}", json={"content": "x"}, headers=auth_header(owner.token))
        assert res.status_code == 403
        res = await client.delete(f"{URL}/{comment['id']}", headers=auth_header(owner.token))
        assert res.status_code == 403

    async def test_delete(self, client: AsyncClient, cast):
        comment = await _comment(client, cast.token, "profile", cast.profile.id)
        res = await client.delete(f"{URL}/{comment['id']}", headers=auth_header(cast.token))
        assert res.status_code == 204
        res = await client.get(URL, params={"target_type": "profile", "target_id": str(cast.profile.id)}, headers=auth_header(cast.token))
        assert res.json() == []

    async def test_other_store_cannot_see_comment(self, client: AsyncClient, cast, outsider):
        comment = await _comment(client, cast.token, "profile", cast.profile.id)
        res = await client.post(f"{URL}/{comment['id']}/like", headers=auth_header(outsider.token))
        assert res.status_code == 404


class TestLikes:
    """좋아요 토글 테스트."""

    async def test_toggle(self, client: AsyncClient, cast, cast2):
        comment = await _comment(client, cast.token, "profile", cast.profile.id)

        res = await client.post(f"{URL}/{comment['id']}/like", headers=auth_header(cast2.token))
        assert res.json() == {"liked": True, "like_count": 1}
        res = await client.post(f"{URL}/{comment['id']}/like", headers=auth_header(cast.token))
        assert res.json() == {"liked": True, "like_count": 2}

        listed = (await client.get(URL, params={"target_type": "profile", "target_id": str(cast.profile.id)}, headers=auth_header(cast2.token))).json()
        assert listed[0]["like_count"] == 2
        assert listed[0]["user_has_liked"] is True

        res = await client.post(f"{URL}/{comment['id']}/like", headers=auth_header(cast2.token))
        assert res.json() == {"liked": False, "like_count": 1}
