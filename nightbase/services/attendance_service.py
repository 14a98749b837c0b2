"""근태 서비스 — 출근 기록 관리 및 셀프 타임카드 비즈니스 로직.

Attendance Service — Business logic for work records: manager CRUD, the
monthly calendar, and self-service clock in / break / clock out. Clocking
moves the linked shift submission along (working, then completed). The
cron-driven auto clock-out closes records left open past the day switch.
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.config import settings
from nightbase.models.attendance import WorkRecord
from nightbase.models.shift import ShiftSubmission
from nightbase.models.user import Profile
from nightbase.repositories.profile_repository import profile_repository
from nightbase.repositories.shift_repository import shift_submission_repository
from nightbase.repositories.work_record_repository import work_record_repository
from nightbase.schemas.attendance import AutoClockoutResult, CalendarDay, WorkRecordCreate, WorkRecordResponse, WorkRecordUpdate
from nightbase.utils.exceptions import BadRequestError, NotFoundError
from nightbase.utils.timezone import (
    ensure_utc,
    format_hhmm,
    local_wall_clock_to_utc,
    now_utc,
    parse_hhmm,
    parse_time_field,
    today_local,
)

logger = logging.getLogger(__name__)


def work_minutes(record: WorkRecord) -> int | None:
    """실 근무 분 — (퇴근 - 출근) - 휴식, 퇴근 전이면 None."""
    clock_in: datetime | None = ensure_utc(record.clock_in)
    clock_out: datetime | None = ensure_utc(record.clock_out)
    if clock_in is None or clock_out is None:
        return None
    total: timedelta = clock_out - clock_in
    break_start: datetime | None = ensure_utc(record.break_start)
    break_end: datetime | None = ensure_utc(record.break_end)
    if break_start is not None and break_end is not None and break_end > break_start:
        total -= break_end - break_start
    return max(int(total.total_seconds() // 60), 0)


class AttendanceService:
    """근태 관련 비즈니스 로직을 처리하는 서비스.

    Service handling work record business logic.
    """

    def _to_response(self, record: WorkRecord) -> WorkRecordResponse:
        """출근 기록 모델을 응답 스키마로 변환 — profile must be loaded."""
        return WorkRecordResponse(
            id=str(record.id),
            profile_id=str(record.profile_id),
            profile_name=record.profile.display_name if record.profile else "",
            work_date=record.work_date,
            scheduled_start_time=format_hhmm(record.scheduled_start_time),
            scheduled_end_time=format_hhmm(record.scheduled_end_time),
            shift_request_id=str(record.shift_request_id) if record.shift_request_id else None,
            shift_submission_id=str(record.shift_submission_id) if record.shift_submission_id else None,
            clock_in=record.clock_in,
            clock_out=record.clock_out,
            break_start=record.break_start,
            break_end=record.break_end,
            status=record.status,
            source=record.source,
            note=record.note,
            forgot_clockout=record.forgot_clockout,
            work_minutes=work_minutes(record),
        )

    async def _get_record(self, db: AsyncSession, store_id: UUID, record_id: UUID) -> WorkRecord:
        record: WorkRecord | None = await work_record_repository.get_detail(db, record_id, store_id)
        if record is None:
            raise NotFoundError("Work record not found")
        return record

    async def _move_submission(self, db: AsyncSession, record: WorkRecord, status: str) -> None:
        """연결된 시프트 제출 상태 이동 — Move the linked submission to ``status``."""
        if record.shift_submission_id is None:
            return
        submission: ShiftSubmission | None = await shift_submission_repository.get_by_id(
            db, record.shift_submission_id, record.store_id
        )
        if submission is not None:
            submission.status = status
            await db.flush()

    # --- 매니저 (Manager) ---

    async def list_by_date(self, db: AsyncSession, store_id: UUID, work_date: date) -> list[WorkRecordResponse]:
        """날짜별 출근 기록 (취소 제외)."""
        records: list[WorkRecord] = await work_record_repository.get_by_date(db, store_id, work_date)
        return [self._to_response(r) for r in records]

    async def list_by_profile(
        self,
        db: AsyncSession,
        store_id: UUID,
        profile_id: UUID,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[WorkRecordResponse]:
        """프로필별 출근 기록 (최신 날짜순)."""
        records: list[WorkRecord] = await work_record_repository.get_by_profile(
            db, store_id, profile_id, date_from, date_to
        )
        return [self._to_response(r) for r in records]

    async def get_record(self, db: AsyncSession, store_id: UUID, record_id: UUID) -> WorkRecordResponse:
        return self._to_response(await self._get_record(db, store_id, record_id))

    async def create_record(
        self,
        db: AsyncSession,
        manager: Profile,
        data: WorkRecordCreate,
    ) -> WorkRecordResponse:
        """출근 기록을 수동으로 생성합니다.

        Raises:
            NotFoundError: 매장에 없는 프로필 (Profile not in the store)
        """
        profile_id: UUID = UUID(data.profile_id)
        if await profile_repository.get_by_id(db, profile_id, manager.store_id) is None:
            raise NotFoundError("Profile not found")

        record: WorkRecord = await work_record_repository.create(
            db,
            {
                "store_id": manager.store_id,
                "profile_id": profile_id,
                "work_date": data.work_date,
                "scheduled_start_time": parse_time_field(data.scheduled_start_time, "scheduled_start_time"),
                "scheduled_end_time": parse_time_field(data.scheduled_end_time, "scheduled_end_time"),
                "status": "scheduled",
                "source": "manual",
                "approved_by": manager.id,
                "approved_at": now_utc(),
                "note": data.note,
            },
        )
        return await self.get_record(db, manager.store_id, record.id)

    async def update_record(
        self,
        db: AsyncSession,
        store_id: UUID,
        record_id: UUID,
        data: WorkRecordUpdate,
    ) -> WorkRecordResponse:
        """출근 기록을 수정합니다 (부분 업데이트, 타임카드 정정 포함).

        Naive datetimes are taken as UTC.
        """
        update_data: dict = data.model_dump(exclude_unset=True)
        for field in ("scheduled_start_time", "scheduled_end_time"):
            if field in update_data:
                update_data[field] = parse_time_field(update_data[field], field)
        for field in ("clock_in", "clock_out", "break_start", "break_end"):
            if field in update_data:
                update_data[field] = ensure_utc(update_data[field])
        if update_data.get("status", "") is None or update_data.get("forgot_clockout", False) is None:
            raise BadRequestError("status and forgot_clockout cannot be null")

        record: WorkRecord | None = await work_record_repository.update(db, record_id, update_data, store_id)
        if record is None:
            raise NotFoundError("Work record not found")
        return await self.get_record(db, store_id, record_id)

    async def cancel_record(self, db: AsyncSession, store_id: UUID, record_id: UUID) -> WorkRecordResponse:
        """출근 기록 취소 — status 를 cancelled 로 변경."""
        record: WorkRecord = await self._get_record(db, store_id, record_id)
        record.status = "cancelled"
        await db.flush()
        return self._to_response(record)

    async def delete_record(self, db: AsyncSession, store_id: UUID, record_id: UUID) -> None:
        deleted: bool = await work_record_repository.delete(db, record_id, store_id)
        if not deleted:
            raise NotFoundError("Work record not found")

    async def get_calendar(self, db: AsyncSession, store_id: UUID, year: int, month: int) -> list[CalendarDay]:
        """월간 캘린더 집계.

        Per date of the month, the number of scheduled, working and
        completed records. Dates without any of these are omitted.

        Raises:
            BadRequestError: 잘못된 연월 (Invalid year or month)
        """
        if not 1 <= month <= 12 or not 1 <= year <= 9999:
            raise BadRequestError("Invalid year or month")
        first: date = date(year, month, 1)
        last: date = date(year, month, calendar.monthrange(year, month)[1])

        days: dict[date, dict[str, int]] = {}
        for work_date, status, count in await work_record_repository.get_month_counts(db, store_id, first, last):
            if status not in ("scheduled", "working", "completed"):
                continue
            days.setdefault(work_date, {"scheduled": 0, "working": 0, "completed": 0})[status] += count

        return [
            CalendarDay(
                work_date=day,
                scheduled_count=counts["scheduled"],
                working_count=counts["working"],
                completed_count=counts["completed"],
            )
            for day, counts in sorted(days.items())
        ]

    # --- 셀프 타임카드 (Self-service time card) ---

    async def get_today(self, db: AsyncSession, profile: Profile) -> WorkRecordResponse | None:
        """오늘(표시 타임존)의 내 출근 기록."""
        record: WorkRecord | None = await work_record_repository.get_today_for_profile(
            db, profile.store_id, profile.id, today_local()
        )
        return self._to_response(record) if record else None

    async def _get_open(self, db: AsyncSession, profile: Profile) -> WorkRecord:
        today: date = today_local()
        record: WorkRecord | None = await work_record_repository.get_open_record(
            db, profile.store_id, profile.id, [today - timedelta(days=1), today]
        )
        if record is None:
            raise BadRequestError("Not clocked in")
        return record

    async def clock_in(self, db: AsyncSession, profile: Profile) -> WorkRecordResponse:
        """출근 처리합니다.

        Clock in on today's scheduled record. Without a record for today a
        walk-in record (``source="timecard"``) is created.

        Raises:
            BadRequestError: 이미 출근했을 때 (Already clocked in today)
        """
        today: date = today_local()
        record: WorkRecord | None = await work_record_repository.get_today_for_profile(
            db, profile.store_id, profile.id, today
        )
        if record is not None and record.status != "scheduled":
            raise BadRequestError("Already clocked in")

        now: datetime = now_utc()
        if record is None:
            record = await work_record_repository.create(
                db,
                {
                    "store_id": profile.store_id,
                    "profile_id": profile.id,
                    "work_date": today,
                    "clock_in": now,
                    "status": "working",
                    "source": "timecard",
                },
            )
        else:
            record.clock_in = now
            record.status = "working"
            await db.flush()
            await self._move_submission(db, record, "working")
        return await self.get_record(db, profile.store_id, record.id)

    async def start_break(self, db: AsyncSession, profile: Profile) -> WorkRecordResponse:
        """휴식 시작 — Raises 400 when a break was already taken."""
        record: WorkRecord = await self._get_open(db, profile)
        if record.break_start is not None:
            raise BadRequestError("Break already started")
        record.break_start = now_utc()
        await db.flush()
        return await self.get_record(db, profile.store_id, record.id)

    async def end_break(self, db: AsyncSession, profile: Profile) -> WorkRecordResponse:
        """휴식 종료 — Raises 400 without an ongoing break."""
        record: WorkRecord = await self._get_open(db, profile)
        if record.break_start is None or record.break_end is not None:
            raise BadRequestError("Not on break")
        record.break_end = now_utc()
        await db.flush()
        return await self.get_record(db, profile.store_id, record.id)

    async def clock_out(self, db: AsyncSession, profile: Profile) -> WorkRecordResponse:
        """퇴근 처리합니다.

        Clock out of the open record of today or yesterday. An ongoing break
        ends at the same time.

        Raises:
            BadRequestError: 출근 기록이 없을 때 (Not clocked in)
        """
        record: WorkRecord = await self._get_open(db, profile)
        now: datetime = now_utc()
        if record.break_start is not None and record.break_end is None:
            record.break_end = now
        record.clock_out = now
        record.status = "completed"
        await db.flush()
        await self._move_submission(db, record, "completed")
        return await self.get_record(db, profile.store_id, record.id)

    # --- 크론 (Cron) ---

    async def auto_clock_out(self, db: AsyncSession) -> AutoClockoutResult:
        """퇴근 누락 기록을 영업일 전환 시각으로 일괄 퇴근 처리합니다.

        A record still ``working`` once ``DAY_SWITCH_TIME`` of the day after
        its ``work_date`` (display timezone) has passed is clocked out at that
        cutoff and flagged ``forgot_clockout``. An ongoing break ends at the
        cutoff as well, and the linked shift submission moves to completed.
        Records whose cutoff is still ahead are left open.
        """
        switch_time: time = parse_hhmm(settings.DAY_SWITCH_TIME) or time(5)
        now: datetime = now_utc()
        closed: list[str] = []
        for record in await work_record_repository.get_unclosed_before(db, today_local()):
            cutoff: datetime = local_wall_clock_to_utc(record.work_date + timedelta(days=1), switch_time)
            if cutoff > now:
                continue
            clock_in: datetime | None = ensure_utc(record.clock_in)
            clock_out: datetime = max(cutoff, clock_in) if clock_in else cutoff
            if record.break_start is not None and record.break_end is None:
                record.break_end = max(clock_out, ensure_utc(record.break_start))
            record.clock_out = clock_out
            record.status = "completed"
            record.forgot_clockout = True
            await db.flush()
            await self._move_submission(db, record, "completed")
            closed.append(str(record.id))

        logger.info("Auto clock-out closed %d work records", len(closed))
        return AutoClockoutResult(processed=len(closed), record_ids=closed)


# 싱글턴 인스턴스 — Singleton instance
attendance_service: AttendanceService = AttendanceService()
