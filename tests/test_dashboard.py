"""관리자 대시보드 테스트 — 테이블 건수 집계 및 Excel 내보내기."""

from io import BytesIO

from httpx import AsyncClient
from openpyxl import load_workbook

from tests.conftest import auth_header

URL = "/api/v1/admin/dashboard"


class TestDashboard:
    """대시보드 집계 테스트."""

    async def test_counts_grouped(self, client: AsyncClient, admin_token, owner, cast, other_store):
        res = await client.get(f"{URL}/counts", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        groups = {g["group"]: {t["table"]: t["count"] for t in g["tables"]} for g in data["groups"]}
        assert groups["ユーザー"] == {"users": 3, "profiles": 2}
        assert groups["店舗"] == {"stores": 2}
        assert groups["AI"] == {"ai_generated_images": 0}
        assert data["total"] == 7

    async def test_excel_export(self, client: AsyncClient, admin_token, owner):
        res = await client.get(f"{URL}/export", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert "spreadsheetml" in res.headers["content-type"]

        ws = load_workbook(BytesIO(res.content)).active
        assert ws.title == "テーブル件数"
        assert [c.value for c in ws[1]] == ["カテゴリ", "テーブル", "名前", "件数"]
        rows = {row[1]: row[3] for row in ws.iter_rows(min_row=2, values_only=True) if row[1]}
        assert rows["users"] == 2
        assert rows["stores"] == 1

    async def test_requires_platform_admin(self, client: AsyncClient, owner):
        res = await client.get(f"{URL}/counts", headers=auth_header(owner.token))
        assert res.status_code == 403
