"""타임존 및 날짜/시간 변환 유틸리티 모듈.

Timezone and date/time conversion helpers.
Storage is always UTC; the venue-facing "today", the admin table browser and
SNS template dates use ``settings.DISPLAY_TIMEZONE`` (Asia/Tokyo by default)
through ``zoneinfo``, so offsets follow the tz database instead of a fixed +9h.
"""

import re
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from nightbase.config import settings
from nightbase.utils.exceptions import BadRequestError

# 표시용 요일 — Short Japanese weekday names, Monday first (date.weekday() order)
_JP_WEEKDAYS: tuple[str, ...] = ("月", "火", "水", "木", "金", "土", "日")

# datetime-local 입력 형식 — "YYYY-MM-DDTHH:MM" with optional seconds
_LOCAL_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_HHMM_RE = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")


def display_tz() -> ZoneInfo:
    """표시 타임존 — The configured display timezone."""
    return ZoneInfo(settings.DISPLAY_TIMEZONE)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """naive datetime을 UTC로 간주하여 tz-aware로 변환합니다.

    Treat naive datetimes as UTC. Some drivers (SQLite) drop tzinfo on
    round-trip even for ``DateTime(timezone=True)`` columns.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_local(value: datetime) -> datetime:
    """UTC 시각을 표시 타임존으로 변환 — Convert to the display timezone."""
    return ensure_utc(value).astimezone(display_tz())


def today_local() -> date:
    """표시 타임존 기준 오늘 날짜 — Today's date in the display timezone."""
    return now_utc().astimezone(display_tz()).date()


def local_wall_clock_to_utc(day: date, at: time) -> datetime:
    """표시 타임존의 날짜·시각을 UTC 로 변환 — A local wall-clock moment in UTC."""
    return datetime.combine(day, at, tzinfo=display_tz()).astimezone(timezone.utc)


def local_input_to_utc(value: str) -> datetime:
    """datetime-local 문자열을 UTC datetime으로 변환합니다.

    Parse a ``YYYY-MM-DDTHH:MM`` value entered in the display timezone and
    return it as an aware UTC datetime. Values carrying their own offset
    (``...Z`` or ``+09:00``) are honored as-is.

    Raises:
        ValueError: 형식이 잘못된 경우 (Malformed input)
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if _LOCAL_DATETIME_RE.match(text):
        parsed = datetime.fromisoformat(text)
        return parsed.replace(tzinfo=display_tz()).astimezone(timezone.utc)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid datetime value: {value!r}") from exc
    if parsed.tzinfo is None:
        raise ValueError(f"Invalid datetime value: {value!r}")
    return parsed.astimezone(timezone.utc)


def parse_date(value: str) -> date:
    """YYYY-MM-DD 문자열을 date로 — Strict ISO date parsing."""
    if not _DATE_RE.match(value.strip()):
        raise ValueError(f"Invalid date value: {value!r}")
    return date.fromisoformat(value.strip())


def format_local_datetime(value: datetime) -> str:
    """표시용 일시 문자열 — ``YYYY/MM/DD HH:MM`` in the display timezone."""
    return to_local(value).strftime("%Y/%m/%d %H:%M")


def parse_hhmm(value: str | None) -> time | None:
    """'HH:MM' 문자열을 time 객체로 변환 — Parse "HH:MM" (or "HH:MM:SS")."""
    if value is None or value == "":
        return None
    if not _HHMM_RE.match(value):
        raise ValueError(f"Invalid time value: {value!r}")
    parts = value.split(":")
    return time(int(parts[0]), int(parts[1]))


def format_hhmm(value: time | None) -> str | None:
    """time 객체를 'HH:MM' 문자열로 변환 — Format as "HH:MM"."""
    if value is None:
        return None
    return value.strftime("%H:%M")


def jp_date_label(day: date) -> str:
    """SNS 템플릿용 날짜 라벨 — ``M月D日(曜)``."""
    return f"{day.month}月{day.day}日({_JP_WEEKDAYS[day.weekday()]})"


def parse_time_field(value: str | None, field: str) -> time | None:
    """요청 필드의 'HH:MM' 값을 파싱 — 잘못된 형식은 400.

    Parse an "HH:MM" request field, turning malformed input into a 400.
    """
    try:
        return parse_hhmm(value)
    except ValueError:
        raise BadRequestError(f"Invalid time format for {field}")
