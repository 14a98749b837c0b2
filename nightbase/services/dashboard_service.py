"""대시보드 서비스 — 관리자 대시보드 집계 비즈니스 로직.

Dashboard Service — Row counts of every browsable table grouped by the
admin sidebar categories, and the same counts exported as an xlsx workbook.
"""

from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.schemas.table import CountGroup, DashboardCountsResponse, TableCount
from nightbase.services.table_browser_service import TABLE_GROUPS, table_browser_service
from nightbase.utils.timezone import now_utc, to_local


class DashboardService:
    """대시보드 서비스.

    Dashboard aggregation service for admin dashboard views.
    """

    async def get_counts(self, db: AsyncSession) -> DashboardCountsResponse:
        """카테고리별 테이블 행 수 집계."""
        counts: dict[str, int] = await table_browser_service.count_all(db)
        groups: list[CountGroup] = [
            CountGroup(
                group=group_label,
                tables=[TableCount(table=table, label=label, count=counts[table]) for table, label in tables],
            )
            for group_label, tables in TABLE_GROUPS
        ]
        return DashboardCountsResponse(groups=groups, total=sum(counts.values()))

    async def export_excel(self, db: AsyncSession) -> bytes:
        """대시보드 집계를 Excel 파일로 내보내기."""
        data: DashboardCountsResponse = await self.get_counts(db)

        wb = Workbook()
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_fill = PatternFill(start_color="2D3436", end_color="2D3436", fill_type="solid")

        ws = wb.active
        ws.title = "テーブル件数"
        for col_idx, h in enumerate(["カテゴリ", "テーブル", "名前", "件数"], 1):
            cell = ws.cell(row=1, column=col_idx, value=h)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")

        for group in data.groups:
            for table in group.tables:
                ws.append([group.group, table.table, table.label, table.count])
        ws.append(["合計", "", "", data.total])
        ws.cell(row=ws.max_row, column=1).font = Font(bold=True)
        ws.append([])
        ws.append(["出力日時", to_local(now_utc()).strftime("%Y/%m/%d %H:%M")])

        for i, w in enumerate([18, 28, 20, 10], 1):
            ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = w

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()


# 싱글턴 인스턴스
dashboard_service: DashboardService = DashboardService()
