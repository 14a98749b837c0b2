"""관리자 테이블 브라우저 서비스 — 전 테이블 조회/편집 및 표시 변환.

Admin Table Browser Service — Generic read/insert/update/delete over every
application table through SQLAlchemy Core, with Japanese labels, column
ordering, relation labels and display formatting for the admin grid.
Values written to datetime columns are entered in the display timezone.
"""

import csv
import io
import json
import re
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, Integer, Numeric, Table, Time, Uuid, delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

import nightbase.models  # noqa: F401  모든 테이블 메타데이터 등록 (Register every table)
from nightbase.database import Base
from nightbase.schemas.table import RelationOption, TablePageResponse
from nightbase.utils.exceptions import BadRequestError, NotFoundError
from nightbase.utils.pagination import count_rows, page_count
from nightbase.utils.timezone import ensure_utc, format_local_datetime, local_input_to_utc, parse_date, parse_hhmm

# 고정 페이지 크기 — Fixed page size of the grid
PAGE_SIZE: int = 20
# 관계 선택지 최대 수 — Max options returned for a relation column
RELATION_OPTION_LIMIT: int = 500
# 표시 문자열 최대 길이 — Longer strings are truncated
DISPLAY_MAX_LENGTH: int = 50

# 사이드바 그룹 — (group label, [(table, label)]) in display order
TABLE_GROUPS: list[tuple[str, list[tuple[str, str]]]] = [
    ("ユーザー", [("users", "ユーザー"), ("profiles", "プロフィール")]),
    ("店舗", [("stores", "店舗")]),
    ("シフト", [
        ("shift_requests", "シフト希望"),
        ("shift_request_dates", "シフト希望日"),
        ("shift_submissions", "シフト提出"),
    ]),
    ("勤怠", [("work_records", "勤怠記録")]),
    ("メニュー・ボトル", [
        ("menu_categories", "メニューカテゴリ"),
        ("menus", "メニュー"),
        ("bottle_keeps", "ボトルキープ"),
        ("bottle_keep_holders", "ボトル所有者"),
    ]),
    ("コメント", [("comments", "コメント"), ("comment_likes", "コメントいいね")]),
    ("SNS", [
        ("sns_accounts", "SNSアカウント"),
        ("sns_templates", "SNSテンプレート"),
        ("sns_scheduled_posts", "SNS予約投稿"),
        ("sns_recurring_schedules", "SNS定期投稿"),
    ]),
    ("AI", [("ai_generated_images", "AI生成画像")]),
]

TABLE_LABELS: dict[str, str] = {table: label for _, tables in TABLE_GROUPS for table, label in tables}

# 그리드/편집에서 숨기는 컬럼 — Secrets never shown or written through the browser
HIDDEN_COLUMNS: set[str] = {"password_hash", "access_token", "refresh_token"}

RelationKey = tuple[str, str, str | None]

# 관계 컬럼 — column -> (table, display column, secondary column)
RELATION_CONFIG: dict[str, RelationKey] = {
    "store_id": ("stores", "name", None),
    "user_id": ("users", "email", None),
    "profile_id": ("profiles", "display_name", "role"),
    "author_profile_id": ("profiles", "display_name", None),
    "target_profile_id": ("profiles", "display_name", None),
    "current_profile_id": ("profiles", "display_name", None),
    "created_by": ("profiles", "display_name", None),
    "approved_by": ("profiles", "display_name", None),
    "category_id": ("menu_categories", "name", None),
    "menu_id": ("menus", "name", "price"),
    "target_menu_id": ("menus", "name", "price"),
    "bottle_keep_id": ("bottle_keeps", "id", None),
    "target_bottle_keep_id": ("bottle_keeps", "id", None),
    "shift_request_id": ("shift_requests", "title", None),
    "shift_request_date_id": ("shift_request_dates", "target_date", None),
    "shift_submission_id": ("shift_submissions", "id", None),
    "target_submission_id": ("shift_submissions", "id", None),
    "target_work_record_id": ("work_records", "id", None),
    "comment_id": ("comments", "content", None),
    "template_id": ("sns_templates", "name", None),
}
# 이름만 같고 관계가 아닌 컬럼 — Same-named columns that are plain values
_RELATION_EXCLUDES: set[tuple[str, str]] = {("ai_generated_images", "template_id")}

# 불리언 표시 라벨 — column -> (true label, false label)
BOOLEAN_LABELS: dict[str, tuple[str, str]] = {
    "is_active": ("有効", "無効"),
    "is_connected": ("接続済み", "未接続"),
    "is_admin": ("管理者", "一般"),
    "hide_from_slip": ("非表示", "表示"),
    "forgot_clockout": ("打刻忘れ", "-"),
}
_DEFAULT_BOOLEAN_LABELS: tuple[str, str] = ("はい", "いいえ")

# 테이블별 우선 컬럼 — Columns shown first, in this order
PRIORITY_COLUMNS: dict[str, list[str]] = {
    "users": ["display_name", "email", "is_admin", "is_active", "avatar_url", "created_at"],
    "profiles": ["display_name", "real_name", "role", "phone_number", "status", "store_id", "user_id", "avatar_url"],
    "stores": ["name", "industry", "prefecture", "city", "business_start_time", "business_end_time", "is_active", "ai_credits"],
    "shift_requests": ["title", "description", "deadline", "status", "target_roles", "created_by"],
    "shift_request_dates": ["target_date", "default_start_time", "default_end_time", "shift_request_id"],
    "shift_submissions": [
        "work_date", "availability", "preferred_start_time", "preferred_end_time", "status", "note",
        "approved_start_time", "approved_end_time", "profile_id",
    ],
    "work_records": [
        "work_date", "profile_id", "status", "clock_in", "clock_out", "break_start", "break_end",
        "scheduled_start_time", "scheduled_end_time", "source",
    ],
    "menu_categories": ["name", "sort_order", "store_id"],
    "menus": ["name", "price", "category_id", "target_type", "cast_back_amount", "hide_from_slip", "image_url", "store_id"],
    "bottle_keeps": ["menu_id", "remaining_amount", "opened_at", "expiration_date", "store_id"],
    "bottle_keep_holders": ["profile_id", "bottle_keep_id"],
    "comments": ["content", "author_profile_id", "target_profile_id", "target_bottle_keep_id", "store_id"],
    "comment_likes": ["comment_id", "profile_id", "created_at"],
    "sns_accounts": ["platform", "account_name", "account_id", "is_connected", "token_expires_at", "store_id"],
    "sns_templates": ["name", "content", "template_type", "image_style", "store_id"],
    "sns_scheduled_posts": ["content", "scheduled_at", "platforms", "status", "image_url", "error_message", "created_by", "store_id"],
    "sns_recurring_schedules": [
        "name", "content_type", "platforms", "schedule_hour", "is_active", "last_run_at", "template_id",
        "created_by", "store_id",
    ],
    "ai_generated_images": ["prompt", "image_type", "image_url", "size_width", "size_height", "credits_used", "store_id"],
}

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def get_table(table_name: str) -> Table:
    """브라우저 대상 테이블 — Raises 404 for unknown or excluded tables."""
    if table_name not in TABLE_LABELS or table_name not in Base.metadata.tables:
        raise NotFoundError(f"Unknown table: {table_name}")
    return Base.metadata.tables[table_name]


def sort_columns(columns: list[str], table_name: str) -> list[str]:
    """우선 컬럼을 앞으로, 나머지는 원래 순서대로."""
    priority: list[str] = [c for c in PRIORITY_COLUMNS.get(table_name, []) if c in columns]
    return priority + [c for c in columns if c not in priority]


def relation_of(table_name: str, column: str) -> RelationKey | None:
    if (table_name, column) in _RELATION_EXCLUDES:
        return None
    return RELATION_CONFIG.get(column)


def _raw_value(value: Any) -> Any:
    """JSON 응답용 원본 값 — JSON-compatible raw value."""
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, Decimal):
        return float(value)
    return value


def _short_id(value: str) -> str:
    return f"{value[:8]}..."


def _relation_label(display: Any, secondary: Any) -> str:
    label: str = str(_raw_value(display))
    if _UUID_RE.match(label):
        label = _short_id(label)
    if secondary is None:
        return label
    if isinstance(secondary, (int, float, Decimal)) and not isinstance(secondary, bool):
        return f"{label} (¥{int(secondary):,})"
    return f"{label} ({secondary})"


def _matches(value: Any, needle: str) -> bool:
    """필터 일치 — null matches "null"/"-", others by case-insensitive substring."""
    if value is None:
        return needle.lower() in ("null", "-")
    if isinstance(value, (dict, list)):
        text: str = json.dumps(value, ensure_ascii=False)
    else:
        text = str(value)
    return needle.lower() in text.lower()


def _parse_filters(filters: list[str]) -> list[tuple[str, str]]:
    parsed: list[tuple[str, str]] = []
    for item in filters:
        column, sep, value = item.partition(":")
        if not sep or not column:
            raise BadRequestError(f"Invalid filter: {item}")
        parsed.append((column, value))
    return parsed


class TableBrowserService:
    """관리자 테이블 브라우저 비즈니스 로직."""

    def _visible_columns(self, table: Table) -> list[str]:
        return [c.name for c in table.columns if c.name not in HIDDEN_COLUMNS]

    async def _relation_labels(
        self,
        db: AsyncSession,
        table_name: str,
        columns: list[str],
        rows: list[dict[str, Any]],
    ) -> dict[RelationKey, dict[str, str]]:
        """페이지 행이 참조하는 행의 라벨.

        One query per relation config (referenced table, display column and
        secondary column), so two columns pointing at the same table can
        still render differently.

        Returns:
            dict[RelationKey, dict[str, str]]: {관계 설정: {id: 라벨}} (Labels by relation config)
        """
        wanted: dict[RelationKey, set[uuid.UUID]] = {}
        for column in columns:
            relation = relation_of(table_name, column)
            if relation is None:
                continue
            for row in rows:
                value = row.get(column)
                if value is None:
                    continue
                try:
                    wanted.setdefault(relation, set()).add(uuid.UUID(str(value)))
                except ValueError:
                    continue

        cache: dict[RelationKey, dict[str, str]] = {}
        for relation, ids in wanted.items():
            ref_table_name, display_col, secondary_col = relation
            ref_table: Table = Base.metadata.tables[ref_table_name]
            selected = [ref_table.c.id, ref_table.c[display_col]]
            if secondary_col:
                selected.append(ref_table.c[secondary_col])
            result = await db.execute(select(*selected).where(ref_table.c.id.in_(ids)))
            cache[relation] = {
                str(row[0]): _relation_label(row[1], row[2] if secondary_col else None) for row in result.all()
            }
        return cache

    def _display_value(
        self,
        table_name: str,
        column: str,
        value: Any,
        labels: dict[RelationKey, dict[str, str]],
    ) -> str:
        if value is None:
            return "-"
        if isinstance(value, bool):
            true_label, false_label = BOOLEAN_LABELS.get(column, _DEFAULT_BOOLEAN_LABELS)
            return true_label if value else false_label
        relation = relation_of(table_name, column)
        if relation is not None:
            label: str | None = labels.get(relation, {}).get(str(value))
            if label is not None:
                return label
        if isinstance(value, uuid.UUID):
            return _short_id(str(value))
        if isinstance(value, datetime):
            return format_local_datetime(value)
        if isinstance(value, date):
            return value.strftime("%Y/%m/%d")
        if isinstance(value, time):
            return value.strftime("%H:%M")
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        text: str = str(value)
        if _UUID_RE.match(text):
            return _short_id(text)
        if len(text) > DISPLAY_MAX_LENGTH:
            return f"{text[:DISPLAY_MAX_LENGTH]}..."
        return text

    async def get_page(
        self,
        db: AsyncSession,
        table_name: str,
        page: int = 1,
        record_id: str | None = None,
        filters: list[str] | None = None,
    ) -> TablePageResponse:
        """테이블 한 페이지를 조회합니다.

        Rows are ordered by ``created_at`` desc (nulls last) when the table
        has it. ``record_id`` fetches that single row. Filters apply to the
        fetched page only; ``total`` stays the unfiltered count.

        Raises:
            NotFoundError: 알 수 없는 테이블 (Unknown table)
            BadRequestError: 잘못된 필터 또는 ID (Malformed filter or id)
        """
        table: Table = get_table(table_name)
        page = max(page, 1)
        visible: list[str] = self._visible_columns(table)
        query = select(*[table.c[name] for name in visible])
        if record_id is not None:
            query = query.where(table.c.id == self._parse_uuid(record_id, "id"))
        elif "created_at" in table.c:
            query = query.order_by(table.c.created_at.desc().nulls_last())

        total: int = await count_rows(db, query)
        result = await db.execute(query.offset((page - 1) * PAGE_SIZE).limit(PAGE_SIZE))
        rows: list[dict[str, Any]] = [dict(row._mapping) for row in result.all()]

        columns: list[str] = sort_columns(list(rows[0].keys()), table_name) if rows else []
        for column, needle in _parse_filters(filters or []):
            if column not in visible:
                raise BadRequestError(f"Unknown column: {column}")
            rows = [row for row in rows if _matches(_raw_value(row.get(column)), needle)]

        labels: dict[RelationKey, dict[str, str]] = await self._relation_labels(db, table_name, columns, rows)
        return TablePageResponse(
            table=table_name,
            label=TABLE_LABELS[table_name],
            columns=columns,
            rows=[{c: _raw_value(row[c]) for c in columns} for row in rows],
            display=[{c: self._display_value(table_name, c, row[c], labels) for c in columns} for row in rows],
            total=total,
            filtered_count=len(rows),
            page=page,
            page_size=PAGE_SIZE,
            pages=page_count(total, PAGE_SIZE),
        )

    async def export_csv(
        self,
        db: AsyncSession,
        table_name: str,
        page: int = 1,
        filters: list[str] | None = None,
    ) -> str:
        """현재 페이지를 CSV 로 — null 은 빈 칸, 특수문자는 큰따옴표 처리."""
        page_data: TablePageResponse = await self.get_page(db, table_name, page, None, filters)
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(page_data.columns)
        for row in page_data.rows:
            writer.writerow([self._csv_value(row[c]) for c in page_data.columns])
        return buffer.getvalue()

    def _csv_value(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    async def relation_options(self, db: AsyncSession, table_name: str, column: str) -> list[RelationOption]:
        """관계 컬럼 선택지 — Up to 500 rows ordered by the display column."""
        table: Table = get_table(table_name)
        relation = relation_of(table_name, column) if column in table.c else None
        if relation is None:
            raise BadRequestError(f"Column is not a relation: {column}")
        ref_table_name, display_col, secondary_col = relation
        ref_table: Table = Base.metadata.tables[ref_table_name]
        selected = [ref_table.c.id, ref_table.c[display_col]]
        if secondary_col:
            selected.append(ref_table.c[secondary_col])
        result = await db.execute(
            select(*selected).order_by(ref_table.c[display_col]).limit(RELATION_OPTION_LIMIT)
        )
        return [
            RelationOption(id=str(row[0]), label=_relation_label(row[1], row[2] if secondary_col else None))
            for row in result.all()
        ]

    # --- 쓰기 (Writes) ---

    def _parse_uuid(self, value: Any, column: str) -> uuid.UUID:
        try:
            return uuid.UUID(str(value))
        except ValueError:
            raise BadRequestError(f"Invalid value for {column}")

    def _convert(self, table: Table, column: str, value: Any) -> Any:
        """입력 값을 컬럼 타입으로 변환 — 잘못된 값은 400.

        Datetime columns take display-local ``YYYY-MM-DDTHH:MM`` input.
        """
        if value is None or value == "":
            return None
        col_type = table.c[column].type
        try:
            if isinstance(col_type, Uuid):
                return uuid.UUID(str(value))
            if isinstance(col_type, DateTime):
                return local_input_to_utc(str(value))
            if isinstance(col_type, Date):
                return parse_date(str(value))
            if isinstance(col_type, Time):
                return parse_hhmm(str(value))
            if isinstance(col_type, Boolean):
                if isinstance(value, bool):
                    return value
                if str(value).lower() in ("true", "1"):
                    return True
                if str(value).lower() in ("false", "0"):
                    return False
                raise ValueError(value)
            if isinstance(col_type, Integer):
                if isinstance(value, bool):
                    raise ValueError(value)
                return int(value)
            if isinstance(col_type, (Numeric, Float)):
                return float(value)
            if isinstance(col_type, JSON):
                return json.loads(value) if isinstance(value, str) else value
        except (TypeError, ValueError):
            raise BadRequestError(f"Invalid value for {column}")
        return value

    def _prepare(self, table: Table, data: dict[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for column, value in data.items():
            if column not in table.c or column in HIDDEN_COLUMNS:
                raise BadRequestError(f"Unknown column: {column}")
            values[column] = self._convert(table, column, value)
        return values

    async def _fetch_row(self, db: AsyncSession, table: Table, record_id: uuid.UUID) -> dict[str, Any]:
        visible: list[str] = self._visible_columns(table)
        result = await db.execute(select(*[table.c[n] for n in visible]).where(table.c.id == record_id))
        row = result.first()
        if row is None:
            raise NotFoundError("Record not found")
        return {k: _raw_value(v) for k, v in row._mapping.items()}

    async def insert_row(self, db: AsyncSession, table_name: str, data: dict[str, Any]) -> dict[str, Any]:
        """행을 추가합니다 — Missing ``id`` is generated."""
        table: Table = get_table(table_name)
        values: dict[str, Any] = self._prepare(table, data)
        if values.get("id") is None:
            values["id"] = uuid.uuid4()
        try:
            async with db.begin_nested():
                await db.execute(insert(table).values(**values))
        except IntegrityError as exc:
            raise BadRequestError(f"Constraint violation: {exc.orig}")
        return await self._fetch_row(db, table, values["id"])

    async def update_row(
        self,
        db: AsyncSession,
        table_name: str,
        record_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        table: Table = get_table(table_name)
        row_id: uuid.UUID = self._parse_uuid(record_id, "id")
        values: dict[str, Any] = self._prepare(table, data)
        values.pop("id", None)
        if not values:
            raise BadRequestError("No values to update")
        try:
            async with db.begin_nested():
                result = await db.execute(update(table).where(table.c.id == row_id).values(**values))
        except IntegrityError as exc:
            raise BadRequestError(f"Constraint violation: {exc.orig}")
        if result.rowcount == 0:
            raise NotFoundError("Record not found")
        return await self._fetch_row(db, table, row_id)

    async def delete_row(self, db: AsyncSession, table_name: str, record_id: str) -> None:
        table: Table = get_table(table_name)
        row_id: uuid.UUID = self._parse_uuid(record_id, "id")
        result = await db.execute(delete(table).where(table.c.id == row_id))
        if result.rowcount == 0:
            raise NotFoundError("Record not found")

    async def count_all(self, db: AsyncSession) -> dict[str, int]:
        """브라우저 대상 전 테이블의 행 수 — Row count per browsable table."""
        counts: dict[str, int] = {}
        for table_name in TABLE_LABELS:
            table: Table = Base.metadata.tables[table_name]
            counts[table_name] = (await db.execute(select(func.count()).select_from(table))).scalar() or 0
        return counts


# 싱글턴 인스턴스 — Singleton instance
table_browser_service: TableBrowserService = TableBrowserService()
