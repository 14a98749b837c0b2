"""내 시프트 서비스 — 캐스트/스태프 측 희망 제출 비즈니스 로직.

Shift Submission Service — Staff-side ("my shifts") business logic: open
requests visible to the caller with a per-date status, replace-all and
single-date preference submission, and the caller's upcoming approved
shifts.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.shift import (
    APPROVED_STATUSES,
    SUBMISSION_PENDING,
    ShiftRequest,
    ShiftRequestDate,
    ShiftSubmission,
)
from nightbase.models.user import Profile
from nightbase.repositories.shift_repository import (
    shift_request_date_repository,
    shift_request_repository,
    shift_submission_repository,
)
from nightbase.schemas.shift import (
    MyRequestDate,
    MyShiftRequestResponse,
    MyShiftResponse,
    SubmissionEntry,
    SubmitPreferencesRequest,
)
from nightbase.services.shift_request_service import effective_status, is_targeted
from nightbase.utils.exceptions import BadRequestError, ForbiddenError, NotFoundError
from nightbase.utils.timezone import format_hhmm, parse_time_field, today_local


def display_status(submission: ShiftSubmission | None) -> str:
    """날짜별 표시 상태.

    pending → "pending", rejected → "rejected", scheduled/working/completed
    → "approved", no submission → "not_submitted".
    """
    if submission is None:
        return "not_submitted"
    if submission.status in APPROVED_STATUSES:
        return "approved"
    return submission.status


class ShiftSubmissionService:
    """내 시프트 관련 비즈니스 로직을 처리하는 서비스."""

    def _date_status(
        self,
        request_date: ShiftRequestDate,
        submission: ShiftSubmission | None,
    ) -> MyRequestDate:
        result = MyRequestDate(
            shift_request_date_id=str(request_date.id),
            target_date=request_date.target_date,
            default_start_time=format_hhmm(request_date.default_start_time),
            default_end_time=format_hhmm(request_date.default_end_time),
            status=display_status(submission),
        )
        if submission is not None:
            result.submission_id = str(submission.id)
            result.availability = submission.availability
            result.preferred_start_time = format_hhmm(submission.preferred_start_time)
            result.preferred_end_time = format_hhmm(submission.preferred_end_time)
            result.approved_start_time = format_hhmm(submission.approved_start_time)
            result.approved_end_time = format_hhmm(submission.approved_end_time)
            result.note = submission.note
        return result

    def _request_status(
        self,
        request: ShiftRequest,
        submissions: list[ShiftSubmission],
    ) -> MyShiftRequestResponse:
        by_date: dict[UUID, ShiftSubmission] = {s.shift_request_date_id: s for s in submissions}
        return MyShiftRequestResponse(
            id=str(request.id),
            title=request.title,
            description=request.description,
            deadline=request.deadline,
            dates=[self._date_status(d, by_date.get(d.id)) for d in request.dates],
        )

    def _check_open(self, request: ShiftRequest, profile: Profile) -> None:
        """제출 가능 여부 확인.

        Raises:
            ForbiddenError: 모집 대상이 아닐 때 (Caller is not targeted)
            BadRequestError: 마감된 모집일 때 (Request closed or past deadline)
        """
        if not is_targeted(request, profile):
            raise ForbiddenError("This shift request is not open to you")
        if effective_status(request) != "open":
            raise BadRequestError("This shift request is closed")

    def _build_submission(
        self,
        profile: Profile,
        request: ShiftRequest,
        request_date: ShiftRequestDate,
        entry: SubmissionEntry,
    ) -> ShiftSubmission:
        return ShiftSubmission(
            store_id=profile.store_id,
            shift_request_id=request.id,
            shift_request_date_id=request_date.id,
            profile_id=profile.id,
            work_date=request_date.target_date,
            availability=entry.availability,
            preferred_start_time=parse_time_field(entry.preferred_start_time, "preferred_start_time"),
            preferred_end_time=parse_time_field(entry.preferred_end_time, "preferred_end_time"),
            status=SUBMISSION_PENDING,
            note=entry.note,
        )

    async def list_my_requests(self, db: AsyncSession, profile: Profile) -> list[MyShiftRequestResponse]:
        """나에게 열린 모집 목록 (날짜별 상태 포함).

        Open, not yet expired requests that target the caller, each with
        the caller's per-date status. Guests always get an empty list.
        """
        if profile.role == "guest":
            return []
        requests: list[ShiftRequest] = [
            r
            for r in await shift_request_repository.get_open_by_store(db, profile.store_id)
            if effective_status(r) == "open" and is_targeted(r, profile)
        ]
        submissions: list[ShiftSubmission] = await shift_submission_repository.get_by_profile_and_request(
            db, profile.id, [r.id for r in requests]
        )
        grouped: dict[UUID, list[ShiftSubmission]] = {}
        for submission in submissions:
            grouped.setdefault(submission.shift_request_id, []).append(submission)
        return [self._request_status(r, grouped.get(r.id, [])) for r in requests]

    async def submit_preferences(
        self,
        db: AsyncSession,
        profile: Profile,
        request_id: UUID,
        data: SubmitPreferencesRequest,
    ) -> MyShiftRequestResponse:
        """모집 전체 희망을 제출합니다 (replace-all).

        The caller's pending rows for the request are deleted and ``entries``
        inserted. Decided rows never change; an entry for a decided date
        rejects the whole payload. Runs inside the request's transaction.

        Raises:
            NotFoundError: 매장에 없는 모집 (Request not in the store)
            ForbiddenError: 모집 대상이 아닐 때 (Caller is not targeted)
            BadRequestError: 마감, 다른 모집의 날짜, 중복 날짜, 결정된 날짜 포함
                             (Closed request, foreign date, duplicate or decided date)
        """
        request: ShiftRequest | None = await shift_request_repository.get_detail(db, request_id, profile.store_id)
        if request is None:
            raise NotFoundError("Shift request not found")
        self._check_open(request, profile)

        dates: dict[str, ShiftRequestDate] = {str(d.id): d for d in request.dates}
        entry_date_ids: list[str] = [e.shift_request_date_id for e in data.entries]
        if any(date_id not in dates for date_id in entry_date_ids):
            raise BadRequestError("Date does not belong to this shift request")
        if len(set(entry_date_ids)) != len(entry_date_ids):
            raise BadRequestError("Duplicate dates in submission")

        existing: list[ShiftSubmission] = await shift_submission_repository.get_by_profile_and_request(
            db, profile.id, [request.id]
        )
        decided: set[str] = {str(s.shift_request_date_id) for s in existing if s.status != SUBMISSION_PENDING}
        if decided.intersection(entry_date_ids):
            raise BadRequestError("Decided dates cannot be changed")

        await shift_submission_repository.delete_pending(db, profile.id, request.id)
        for entry in data.entries:
            db.add(self._build_submission(profile, request, dates[entry.shift_request_date_id], entry))
        await db.flush()

        submissions: list[ShiftSubmission] = await shift_submission_repository.get_by_profile_and_request(
            db, profile.id, [request.id]
        )
        return self._request_status(request, submissions)

    async def submit_date(
        self,
        db: AsyncSession,
        profile: Profile,
        entry: SubmissionEntry,
    ) -> MyRequestDate:
        """단일 날짜의 희망을 제출합니다 — 해당 날짜만 교체.

        Raises:
            NotFoundError: 매장에 없는 모집 날짜 (Date not in the store)
            BadRequestError: 마감되었거나 이미 결정된 날짜 (Closed or decided)
        """
        request_date: ShiftRequestDate | None = await shift_request_date_repository.get_with_request(
            db, UUID(entry.shift_request_date_id), profile.store_id
        )
        if request_date is None:
            raise NotFoundError("Shift request date not found")
        request: ShiftRequest = request_date.shift_request
        self._check_open(request, profile)

        current: ShiftSubmission | None = await shift_submission_repository.get_profile_submission_for_date(
            db, profile.id, request_date.id
        )
        if current is not None and current.status != SUBMISSION_PENDING:
            raise BadRequestError("Decided dates cannot be changed")

        await shift_submission_repository.delete_pending(db, profile.id, request.id, [request_date.id])
        submission: ShiftSubmission = self._build_submission(profile, request, request_date, entry)
        db.add(submission)
        await db.flush()
        return self._date_status(request_date, submission)

    async def list_my_shifts(self, db: AsyncSession, profile: Profile) -> list[MyShiftResponse]:
        """오늘(표시 타임존) 이후의 확정 시프트 목록."""
        rows = await shift_submission_repository.get_approved_upcoming(
            db, profile.id, profile.store_id, today_local()
        )
        return [
            MyShiftResponse(
                submission_id=str(submission.id),
                shift_request_id=str(submission.shift_request_id),
                title=title,
                work_date=submission.work_date,
                start_time=format_hhmm(submission.approved_start_time),
                end_time=format_hhmm(submission.approved_end_time),
                status=submission.status,
            )
            for submission, title in rows
        ]


# 싱글턴 인스턴스 — Singleton instance
shift_submission_service: ShiftSubmissionService = ShiftSubmissionService()
