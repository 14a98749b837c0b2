"""시프트 모집 서비스 — 매니저 측 모집 관리 및 제출 심사 비즈니스 로직.

Shift Request Service — Manager-side business logic: opening requests with
their dates, monitoring submissions, conflict checks and the review actions
(approve, reject, revert, approve all, time change). Every review action
keeps the linked work record in sync.
"""

from datetime import datetime, time
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.models.attendance import WorkRecord
from nightbase.models.shift import (
    APPROVED_STATUSES,
    SUBMISSION_PENDING,
    SUBMISSION_REJECTED,
    ShiftRequest,
    ShiftRequestDate,
    ShiftSubmission,
)
from nightbase.models.user import Profile
from nightbase.repositories.profile_repository import profile_repository
from nightbase.repositories.shift_repository import (
    shift_request_date_repository,
    shift_request_repository,
    shift_submission_repository,
)
from nightbase.repositories.work_record_repository import work_record_repository
from nightbase.schemas.shift import (
    ApproveSubmissionRequest,
    ConflictCheckRequest,
    ConflictItem,
    RequestDateCounts,
    ShiftRequestCreate,
    ShiftRequestDateResponse,
    ShiftRequestDetailResponse,
    ShiftRequestResponse,
    SubmissionResponse,
    SubmissionTimeUpdate,
)
from nightbase.utils.exceptions import BadRequestError, NotFoundError
from nightbase.utils.timezone import ensure_utc, format_hhmm, now_utc, parse_time_field

# 이름 없는 프로필 표시 — Fallback label for a profile without a name
NO_NAME: str = "名前なし"


def target_role_of(profile: Profile) -> str | None:
    """모집 대상 판정용 역할 — admin/staff → "staff", cast → "cast", guest → None."""
    if profile.role in ("admin", "staff"):
        return "staff"
    if profile.role == "cast":
        return "cast"
    return None


def is_targeted(request: ShiftRequest, profile: Profile) -> bool:
    """프로필이 모집 대상인지 판정합니다.

    A request targets a profile when the profile id is listed in
    ``target_profile_ids``; without an explicit list the profile's mapped
    role must be in ``target_roles``. Guests are never targeted.
    """
    if profile.role == "guest":
        return False
    if request.target_profile_ids:
        return str(profile.id) in request.target_profile_ids
    return target_role_of(profile) in (request.target_roles or [])


def effective_status(request: ShiftRequest) -> str:
    """실효 상태 — closed 플래그이거나 마감이 지났으면 "closed"."""
    if request.status == "closed":
        return "closed"
    if ensure_utc(request.deadline) <= now_utc():
        return "closed"
    return "open"


def submission_to_response(submission: ShiftSubmission) -> SubmissionResponse:
    """제출 모델을 응답 스키마로 변환 — profile must be loaded."""
    return SubmissionResponse(
        id=str(submission.id),
        shift_request_id=str(submission.shift_request_id),
        shift_request_date_id=str(submission.shift_request_date_id),
        profile_id=str(submission.profile_id),
        profile_name=(submission.profile.display_name if submission.profile else None) or NO_NAME,
        work_date=submission.work_date,
        availability=submission.availability,
        preferred_start_time=format_hhmm(submission.preferred_start_time),
        preferred_end_time=format_hhmm(submission.preferred_end_time),
        approved_start_time=format_hhmm(submission.approved_start_time),
        approved_end_time=format_hhmm(submission.approved_end_time),
        status=submission.status,
        note=submission.note,
        approved_by=str(submission.approved_by) if submission.approved_by else None,
        approved_at=submission.approved_at,
    )


class ShiftRequestService:
    """시프트 모집 관련 비즈니스 로직을 처리하는 서비스.

    Service handling shift request business logic on the manager side.
    """

    def _date_response(self, request_date: ShiftRequestDate) -> ShiftRequestDateResponse:
        return ShiftRequestDateResponse(
            id=str(request_date.id),
            target_date=request_date.target_date,
            default_start_time=format_hhmm(request_date.default_start_time),
            default_end_time=format_hhmm(request_date.default_end_time),
        )

    def _to_response(
        self,
        request: ShiftRequest,
        counts: dict[str, int] | None = None,
    ) -> ShiftRequestResponse:
        """모집 모델을 응답 스키마로 변환합니다 — dates must be loaded."""
        counts = counts or {}
        return ShiftRequestResponse(
            id=str(request.id),
            title=request.title,
            description=request.description,
            deadline=request.deadline,
            status=effective_status(request),
            target_roles=list(request.target_roles or []),
            target_profile_ids=request.target_profile_ids,
            created_by=str(request.created_by) if request.created_by else None,
            created_at=request.created_at,
            date_count=len(request.dates),
            pending_count=counts.get("pending", 0),
            approved_count=counts.get("approved", 0),
            rejected_count=counts.get("rejected", 0),
        )

    async def _get_request(self, db: AsyncSession, store_id: UUID, request_id: UUID) -> ShiftRequest:
        request: ShiftRequest | None = await shift_request_repository.get_detail(db, request_id, store_id)
        if request is None:
            raise NotFoundError("Shift request not found")
        return request

    async def _get_submission(self, db: AsyncSession, store_id: UUID, submission_id: UUID) -> ShiftSubmission:
        submission: ShiftSubmission | None = await shift_submission_repository.get_detail(db, submission_id, store_id)
        if submission is None:
            raise NotFoundError("Submission not found")
        return submission

    async def resolve_targets(self, db: AsyncSession, request: ShiftRequest) -> list[Profile]:
        """모집 대상 프로필 목록 — Every profile of the store the request targets."""
        if request.target_profile_ids:
            ids: list[UUID] = [UUID(pid) for pid in request.target_profile_ids]
            profiles: list[Profile] = await profile_repository.get_by_ids(db, request.store_id, ids)
        else:
            roles: list[str] = []
            if "cast" in (request.target_roles or []):
                roles.append("cast")
            if "staff" in (request.target_roles or []):
                roles.extend(["staff", "admin"])
            profiles = await profile_repository.get_by_roles(db, request.store_id, roles) if roles else []
        return [p for p in profiles if is_targeted(request, p)]

    # --- 모집 관리 (Request management) ---

    async def list_requests(self, db: AsyncSession, store_id: UUID) -> list[ShiftRequestResponse]:
        """모집 목록 (최신순) — with date counts and submission counts."""
        requests: list[ShiftRequest] = await shift_request_repository.get_by_store(db, store_id)
        counts = await shift_request_repository.get_status_counts(db, [r.id for r in requests])
        return [self._to_response(r, counts.get(r.id)) for r in requests]

    async def get_request(self, db: AsyncSession, store_id: UUID, request_id: UUID) -> ShiftRequestDetailResponse:
        """모집 상세 (날짜 포함).

        Raises:
            NotFoundError: 매장에 없는 모집 (Request not in the store)
        """
        request: ShiftRequest = await self._get_request(db, store_id, request_id)
        counts = await shift_request_repository.get_status_counts(db, [request.id])
        base: ShiftRequestResponse = self._to_response(request, counts.get(request.id))
        return ShiftRequestDetailResponse(
            **base.model_dump(),
            dates=[self._date_response(d) for d in request.dates],
        )

    async def create_request(
        self,
        db: AsyncSession,
        profile: Profile,
        data: ShiftRequestCreate,
    ) -> ShiftRequestDetailResponse:
        """시프트 모집을 대상 날짜와 함께 생성합니다.

        Create a shift request together with its dates. The caller's
        router commits once, so the request and its dates are stored
        atomically.

        Raises:
            BadRequestError: 날짜가 없거나 중복될 때, 대상 프로필이 매장에 없을 때
                             (No dates, duplicate dates, or foreign target profiles)
        """
        if not data.dates:
            raise BadRequestError("At least one date is required")
        target_dates = [d.target_date for d in data.dates]
        if len(set(target_dates)) != len(target_dates):
            raise BadRequestError("Duplicate dates are not allowed")
        if not data.target_profile_ids and not data.target_roles:
            raise BadRequestError("Either target roles or target profiles are required")

        target_profile_ids: list[str] | None = None
        if data.target_profile_ids:
            unique_ids: list[UUID] = list(dict.fromkeys(UUID(pid) for pid in data.target_profile_ids))
            found: list[Profile] = await profile_repository.get_by_ids(db, profile.store_id, unique_ids)
            if len(found) != len(unique_ids):
                raise BadRequestError("Target profiles must belong to this store")
            target_profile_ids = [str(pid) for pid in unique_ids]

        # tz 없는 마감은 UTC 로 간주 — Naive deadlines are taken as UTC
        deadline: datetime = ensure_utc(data.deadline)

        request = ShiftRequest(
            store_id=profile.store_id,
            title=data.title,
            description=data.description,
            deadline=deadline,
            status="open",
            target_roles=list(dict.fromkeys(data.target_roles)),
            target_profile_ids=target_profile_ids,
            created_by=profile.id,
        )
        request.dates = [
            ShiftRequestDate(
                target_date=d.target_date,
                default_start_time=parse_time_field(d.default_start_time, "default_start_time"),
                default_end_time=parse_time_field(d.default_end_time, "default_end_time"),
            )
            for d in data.dates
        ]
        db.add(request)
        await db.flush()
        return await self.get_request(db, profile.store_id, request.id)

    async def close_request(self, db: AsyncSession, store_id: UUID, request_id: UUID) -> ShiftRequestResponse:
        """모집을 마감합니다 — Set the stored status to closed."""
        request: ShiftRequest = await self._get_request(db, store_id, request_id)
        request.status = "closed"
        await db.flush()
        return self._to_response(request)

    async def delete_request(self, db: AsyncSession, store_id: UUID, request_id: UUID) -> None:
        """모집 삭제 — 날짜와 제출은 CASCADE, 출근 기록은 연결만 해제."""
        deleted: bool = await shift_request_repository.delete(db, request_id, store_id)
        if not deleted:
            raise NotFoundError("Shift request not found")

    # --- 제출 현황 (Submission monitoring) ---

    async def list_date_submissions(
        self,
        db: AsyncSession,
        store_id: UUID,
        date_id: UUID,
    ) -> list[SubmissionResponse]:
        """모집 날짜의 제출 목록 — Submissions of one request date."""
        request_date: ShiftRequestDate | None = await shift_request_date_repository.get_with_request(
            db, date_id, store_id
        )
        if request_date is None:
            raise NotFoundError("Shift request date not found")
        submissions: list[ShiftSubmission] = await shift_submission_repository.get_by_date(db, date_id)
        return [submission_to_response(s) for s in submissions]

    async def get_date_counts(
        self,
        db: AsyncSession,
        store_id: UUID,
        request_id: UUID,
    ) -> list[RequestDateCounts]:
        """모집 날짜별 제출 현황을 집계합니다.

        For each date of the request: submitted-but-undecided count,
        targeted profiles without any submission, and confirmed count.
        """
        request: ShiftRequest = await self._get_request(db, store_id, request_id)
        target_ids: set[UUID] = {p.id for p in await self.resolve_targets(db, request)}

        counts: list[RequestDateCounts] = []
        for request_date in request.dates:
            submissions: list[ShiftSubmission] = await shift_submission_repository.get_by_date(db, request_date.id)
            submitted: set[UUID] = {s.profile_id for s in submissions}
            counts.append(
                RequestDateCounts(
                    shift_request_date_id=str(request_date.id),
                    target_date=request_date.target_date,
                    pending_count=sum(1 for s in submissions if s.status == SUBMISSION_PENDING),
                    not_submitted_count=len(target_ids - submitted),
                    confirmed_count=sum(1 for s in submissions if s.status in APPROVED_STATUSES),
                )
            )
        return counts

    async def check_conflicts(
        self,
        db: AsyncSession,
        store_id: UUID,
        data: ConflictCheckRequest,
    ) -> list[ConflictItem]:
        """기존 출근 기록과의 중복 확인.

        Return the profiles that already have a non-cancelled work record
        on any of the given dates.
        """
        rows = await work_record_repository.get_conflicts(
            db, store_id, [UUID(pid) for pid in data.profile_ids], data.dates
        )
        return [
            ConflictItem(profile_id=str(profile_id), profile_name=name or NO_NAME, work_date=work_date)
            for profile_id, name, work_date in rows
        ]

    # --- 제출 심사 (Submission review) ---

    async def _sync_work_record(
        self,
        db: AsyncSession,
        submission: ShiftSubmission,
        manager: Profile,
    ) -> WorkRecord:
        """승인된 제출의 출근 기록 생성/갱신.

        Create the work record linked to an approved submission, or bring
        the existing one back to ``scheduled`` with the approved times.
        """
        record: WorkRecord | None = await work_record_repository.get_by_submission(db, submission.id)
        if record is None:
            record = WorkRecord(
                store_id=submission.store_id,
                profile_id=submission.profile_id,
                work_date=submission.work_date,
                shift_request_id=submission.shift_request_id,
                shift_submission_id=submission.id,
                source="shift_request",
            )
            db.add(record)
        record.scheduled_start_time = submission.approved_start_time
        record.scheduled_end_time = submission.approved_end_time
        record.status = "scheduled"
        record.approved_by = manager.id
        record.approved_at = submission.approved_at
        await db.flush()
        return record

    async def _cancel_work_record(self, db: AsyncSession, submission_id: UUID) -> None:
        """연결된 출근 기록 취소 — Cancel the work record linked to a submission."""
        record: WorkRecord | None = await work_record_repository.get_by_submission(db, submission_id)
        if record is not None and record.status != "cancelled":
            record.status = "cancelled"
            await db.flush()

    async def _approve(
        self,
        db: AsyncSession,
        submission: ShiftSubmission,
        manager: Profile,
        start: time | None = None,
        end: time | None = None,
    ) -> None:
        """제출 1건 승인 처리 — 시각은 지정값, 희망 시각, 날짜 기본값 순으로 결정."""
        request_date: ShiftRequestDate | None = submission.request_date
        default_start: time | None = request_date.default_start_time if request_date else None
        default_end: time | None = request_date.default_end_time if request_date else None

        submission.approved_start_time = start or submission.preferred_start_time or default_start
        submission.approved_end_time = end or submission.preferred_end_time or default_end
        submission.status = "scheduled"
        submission.approved_by = manager.id
        submission.approved_at = now_utc()
        await db.flush()
        await self._sync_work_record(db, submission, manager)

    async def approve_submission(
        self,
        db: AsyncSession,
        manager: Profile,
        submission_id: UUID,
        data: ApproveSubmissionRequest,
    ) -> SubmissionResponse:
        """제출을 승인합니다.

        Approve a pending submission and create (or update) its work record.

        Raises:
            NotFoundError: 매장에 없는 제출 (Submission not in the store)
            BadRequestError: 미결정 상태가 아니거나 불가 제출일 때
                             (Not pending, or the submission says unavailable)
        """
        submission: ShiftSubmission = await self._get_submission(db, manager.store_id, submission_id)
        if submission.status != SUBMISSION_PENDING:
            raise BadRequestError("Only pending submissions can be approved")
        if submission.availability != "available":
            raise BadRequestError("Unavailable submissions cannot be approved")

        await self._approve(
            db,
            submission,
            manager,
            parse_time_field(data.approved_start_time, "approved_start_time"),
            parse_time_field(data.approved_end_time, "approved_end_time"),
        )
        return submission_to_response(await self._get_submission(db, manager.store_id, submission_id))

    async def reject_submission(
        self,
        db: AsyncSession,
        manager: Profile,
        submission_id: UUID,
    ) -> SubmissionResponse:
        """제출을 거절합니다 — 연결된 출근 기록은 취소.

        Raises:
            BadRequestError: 미결정 상태가 아닐 때 (Not pending)
        """
        submission: ShiftSubmission = await self._get_submission(db, manager.store_id, submission_id)
        if submission.status != SUBMISSION_PENDING:
            raise BadRequestError("Only pending submissions can be rejected")

        submission.status = SUBMISSION_REJECTED
        submission.approved_by = manager.id
        submission.approved_at = now_utc()
        await db.flush()
        await self._cancel_work_record(db, submission.id)
        return submission_to_response(await self._get_submission(db, manager.store_id, submission_id))

    async def revert_submission(
        self,
        db: AsyncSession,
        manager: Profile,
        submission_id: UUID,
    ) -> SubmissionResponse:
        """결정을 되돌려 미결정 상태로 복원합니다.

        Revert a decided submission to pending: approval data is cleared and
        the linked work record cancelled.

        Raises:
            BadRequestError: 이미 미결정 상태일 때 (Already pending)
        """
        submission: ShiftSubmission = await self._get_submission(db, manager.store_id, submission_id)
        if submission.status == SUBMISSION_PENDING:
            raise BadRequestError("Submission is already pending")

        submission.status = SUBMISSION_PENDING
        submission.approved_start_time = None
        submission.approved_end_time = None
        submission.approved_by = None
        submission.approved_at = None
        await db.flush()
        await self._cancel_work_record(db, submission.id)
        return submission_to_response(await self._get_submission(db, manager.store_id, submission_id))

    async def approve_all(self, db: AsyncSession, manager: Profile, date_id: UUID) -> int:
        """모집 날짜의 미결정 "가능" 제출을 일괄 승인합니다.

        Returns:
            int: 승인된 제출 수 (Number of approved submissions)
        """
        request_date: ShiftRequestDate | None = await shift_request_date_repository.get_with_request(
            db, date_id, manager.store_id
        )
        if request_date is None:
            raise NotFoundError("Shift request date not found")

        submissions: list[ShiftSubmission] = await shift_submission_repository.get_pending_available(db, date_id)
        for submission in submissions:
            await self._approve(db, submission, manager)
        return len(submissions)

    async def update_submission_time(
        self,
        db: AsyncSession,
        manager: Profile,
        submission_id: UUID,
        data: SubmissionTimeUpdate,
    ) -> SubmissionResponse:
        """확정 시프트의 시각을 변경합니다 — 출근 기록 예정 시각도 함께 변경.

        Raises:
            BadRequestError: scheduled 상태가 아닐 때 (Not scheduled)
        """
        submission: ShiftSubmission = await self._get_submission(db, manager.store_id, submission_id)
        if submission.status != "scheduled":
            raise BadRequestError("Only scheduled submissions can be changed")

        submission.approved_start_time = parse_time_field(data.approved_start_time, "approved_start_time")
        submission.approved_end_time = parse_time_field(data.approved_end_time, "approved_end_time")
        await db.flush()

        record: WorkRecord | None = await work_record_repository.get_by_submission(db, submission.id)
        if record is not None:
            record.scheduled_start_time = submission.approved_start_time
            record.scheduled_end_time = submission.approved_end_time
            await db.flush()
        return submission_to_response(await self._get_submission(db, manager.store_id, submission_id))


# 싱글턴 인스턴스 — Singleton instance
shift_request_service: ShiftRequestService = ShiftRequestService()
