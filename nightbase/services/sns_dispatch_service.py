"""SNS 투고 디스패치 서비스 — X API 호출, 템플릿 렌더링, 크론 실행.

SNS Dispatch Service — Publishing to X (token refresh, tweet creation),
template variable rendering, and the cron-driven dispatch run that
enqueues recurring posts, publishes due posts and trims history.
"""

import base64
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from uuid import UUID

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from nightbase.config import settings
from nightbase.models.sns import SnsAccount, SnsRecurringSchedule, SnsScheduledPost, SnsTemplate
from nightbase.models.store import Store
from nightbase.repositories.sns_repository import (
    sns_account_repository,
    sns_post_repository,
    sns_recurring_repository,
    sns_template_repository,
)
from nightbase.repositories.store_repository import store_repository
from nightbase.repositories.work_record_repository import work_record_repository
from nightbase.schemas.sns import DispatchResult
from nightbase.utils.timezone import ensure_utc, jp_date_label, now_utc, to_local, today_local

logger = logging.getLogger(__name__)

# 한 번에 처리할 예약 게시물 수 — Due posts handled per run
DISPATCH_BATCH_SIZE: int = 50
# 토큰 갱신 여유 — Refresh tokens expiring within this window
TOKEN_REFRESH_MARGIN: timedelta = timedelta(minutes=5)

# 출근 정보 없음 표시 — Placeholders for empty cast lists
NO_WORKING_CAST: str = "（出勤情報なし）"
NO_SCHEDULED_CAST: str = "（出勤予定なし）"

# 정기 게시 cast_list 기본 문구 — Body used by "cast_list" recurring schedules
CAST_LIST_TEMPLATE: str = "{日付} 本日の出勤予定\n{出勤予定キャスト}\n\n{店舗名}"


class XApiError(Exception):
    """X API 호출 실패 — Raised for a failed token refresh or tweet."""


@dataclass
class PlatformResult:
    """플랫폼별 게시 결과 — Outcome of one platform of one post."""

    platform: str
    success: bool
    error: str | None = None


class XClient:
    """X(Twitter) API v2 클라이언트.

    Thin async client over httpx. ``transport`` can be replaced to run
    without network access.
    """

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.transport: httpx.AsyncBaseTransport | None = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=settings.X_API_BASE_URL, timeout=15.0, transport=self.transport)

    async def refresh_token(self, refresh_token: str) -> dict:
        """리프레시 토큰으로 새 액세스 토큰을 발급받습니다.

        Raises:
            XApiError: 갱신 실패 (Token refresh failed)
        """
        credentials: str = base64.b64encode(
            f"{settings.X_CLIENT_ID}:{settings.X_CLIENT_SECRET}".encode()
        ).decode()
        async with self._client() as client:
            response: httpx.Response = await client.post(
                "/2/oauth2/token",
                data={"grant_type": "refresh_token", "refresh_token": refresh_token},
                headers={"Authorization": f"Basic {credentials}"},
            )
        if response.status_code != 200:
            raise XApiError("Token refresh failed")
        try:
            tokens: dict = response.json()
        except ValueError as exc:
            raise XApiError("Token refresh returned an invalid body") from exc
        if not isinstance(tokens, dict) or not tokens.get("access_token"):
            raise XApiError("Token refresh returned no access token")
        return tokens

    async def create_tweet(self, access_token: str, text: str) -> httpx.Response:
        async with self._client() as client:
            return await client.post(
                "/2/tweets",
                json={"text": text},
                headers={"Authorization": f"Bearer {access_token}"},
            )


x_client: XClient = XClient()


def _error_detail(response: httpx.Response) -> str:
    """X 오류 응답 메시지 — ``detail`` of the JSON body, or the status code."""
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    return detail or f"X API error: {response.status_code}"


class SnsDispatchService:
    """SNS 게시 및 디스패치 비즈니스 로직을 처리하는 서비스."""

    async def _valid_x_token(self, db: AsyncSession, account: SnsAccount) -> str:
        """만료 5분 이내면 토큰을 갱신하고 유효한 액세스 토큰을 반환합니다.

        Raises:
            XApiError: 리프레시 토큰이 없거나 갱신 실패 (No refresh token or refresh failed)
        """
        expires_at: datetime | None = ensure_utc(account.token_expires_at)
        if expires_at is not None and expires_at - now_utc() < TOKEN_REFRESH_MARGIN:
            if not account.refresh_token:
                raise XApiError("No refresh token")
            tokens: dict = await x_client.refresh_token(account.refresh_token)
            account.access_token = tokens["access_token"]
            account.refresh_token = tokens.get("refresh_token") or account.refresh_token
            account.token_expires_at = now_utc() + timedelta(seconds=int(tokens.get("expires_in", 7200)))
            await db.flush()
            logger.info("Refreshed X token for account %s", account.id)
        return account.access_token or ""

    async def post_to_x(self, db: AsyncSession, account: SnsAccount, content: str) -> str:
        """X 에 게시하고 트윗 ID 를 반환합니다.

        A 401 marks the account disconnected.

        Raises:
            XApiError: 게시 실패 (Tweet creation failed)
        """
        access_token: str = await self._valid_x_token(db, account)
        response: httpx.Response = await x_client.create_tweet(access_token, content)
        if response.status_code >= 400:
            if response.status_code == 401:
                account.is_connected = False
                await db.flush()
                logger.warning("X account %s rejected the token; marked disconnected", account.id)
            raise XApiError(_error_detail(response))
        # 2xx 이지만 data.id 가 없는 응답도 실패 (A success status without data.id is a failure)
        try:
            return str(response.json()["data"]["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise XApiError(f"Unexpected X response: {response.status_code}") from exc

    async def publish(
        self,
        db: AsyncSession,
        store_id: UUID,
        platforms: list[str],
        content: str,
    ) -> list[PlatformResult]:
        """각 플랫폼에 게시합니다 — One result per platform; never raises."""
        results: list[PlatformResult] = []
        for platform in platforms:
            account: SnsAccount | None = await sns_account_repository.get_connected(db, store_id, platform)
            if account is None:
                results.append(PlatformResult(platform, False, "Account not connected"))
                continue
            try:
                if platform == "x":
                    await self.post_to_x(db, account, content)
                    results.append(PlatformResult(platform, True))
                else:
                    results.append(PlatformResult(platform, False, "Unsupported platform"))
            except (XApiError, httpx.HTTPError) as exc:
                logger.warning("Posting to %s failed for store %s: %s", platform, store_id, exc)
                results.append(PlatformResult(platform, False, str(exc) or "投稿に失敗しました"))
        return results

    def apply_results(self, post: SnsScheduledPost, results: list[PlatformResult]) -> None:
        """게시 결과 반영 — failed only when every platform failed."""
        if results and all(not r.success for r in results):
            post.status = "failed"
            post.error_message = ", ".join(f"{r.platform}: {r.error}" for r in results if r.error)
        else:
            post.status = "posted"
            post.error_message = None
            post.posted_at = now_utc()

    async def render_template(self, db: AsyncSession, store_id: UUID, content: str) -> str:
        """템플릿 변수를 오늘(표시 타임존) 기준으로 치환합니다.

        Variables: {日付} {店舗名} {出勤中キャスト} {出勤予定キャスト} {出勤人数}.
        """
        today: date = today_local()
        store: Store | None = await store_repository.get_by_id(db, store_id)
        working = await work_record_repository.get_by_status_on_date(db, store_id, today, ["working"], role="cast")
        scheduled = await work_record_repository.get_by_status_on_date(db, store_id, today, ["scheduled"], role="cast")
        working_names: list[str] = [r.profile.display_name for r in working if r.profile]
        scheduled_names: list[str] = [r.profile.display_name for r in scheduled if r.profile]

        result: str = content
        result = result.replace("{日付}", jp_date_label(today))
        result = result.replace("{店舗名}", store.name if store else "")
        result = result.replace("{出勤中キャスト}", "、".join(working_names) or NO_WORKING_CAST)
        result = result.replace("{出勤予定キャスト}", "、".join(scheduled_names) or NO_SCHEDULED_CAST)
        result = result.replace("{出勤人数}", str(len(working_names)))
        return result

    async def _recurring_content(self, db: AsyncSession, schedule: SnsRecurringSchedule) -> str | None:
        if schedule.content_type == "template":
            if schedule.template_id is None:
                return None
            template: SnsTemplate | None = await sns_template_repository.get_by_id(
                db, schedule.template_id, schedule.store_id
            )
            if template is None:
                return None
            return await self.render_template(db, schedule.store_id, template.content)
        return await self.render_template(db, schedule.store_id, CAST_LIST_TEMPLATE)

    async def enqueue_recurring(self, db: AsyncSession, now: datetime) -> int:
        """현재 표시 시각에 해당하는 정기 게시를 큐에 넣습니다.

        Active schedules whose hour equals the current display hour and
        which have not run today get one pending post due now.

        Returns:
            int: 생성된 게시물 수 (Number of enqueued posts)
        """
        local_now: datetime = to_local(now)
        enqueued: int = 0
        for schedule in await sns_recurring_repository.get_active_for_hour(db, local_now.hour):
            last_run: datetime | None = ensure_utc(schedule.last_run_at)
            if last_run is not None and to_local(last_run).date() == local_now.date():
                continue
            content: str | None = await self._recurring_content(db, schedule)
            if content is None:
                logger.warning("Recurring schedule %s has no usable template; skipped", schedule.id)
                continue
            db.add(
                SnsScheduledPost(
                    store_id=schedule.store_id,
                    content=content,
                    platforms=list(schedule.platforms or ["x"]),
                    scheduled_at=now,
                    status="pending",
                    created_by=schedule.created_by,
                )
            )
            schedule.last_run_at = now
            enqueued += 1
        await db.flush()
        return enqueued

    async def dispatch(self, db: AsyncSession) -> DispatchResult:
        """크론 디스패치 1회 실행.

        1. 정기 게시 큐잉 (Enqueue recurring posts)
        2. 실행 시각이 된 게시물 최대 50건 게시 (Publish up to 50 due posts)
        3. 매장별 게시 이력 50건으로 정리 (Trim posted history to 50 per store)
        """
        now: datetime = now_utc()
        enqueued: int = await self.enqueue_recurring(db, now)

        posted: int = 0
        failed: int = 0
        due: list[SnsScheduledPost] = await sns_post_repository.get_due(db, now, DISPATCH_BATCH_SIZE)
        for post in due:
            results: list[PlatformResult] = await self.publish(db, post.store_id, list(post.platforms or []), post.content)
            self.apply_results(post, results)
            if post.status == "posted":
                posted += 1
            else:
                failed += 1
            # 게시물마다 커밋 — X 에 나간 결과는 이후 실패와 무관하게 유지 (Keep sent posts marked even if a later post fails)
            await db.commit()

        trimmed: int = await sns_post_repository.trim_history(db)
        logger.info(
            "SNS dispatch: enqueued=%d processed=%d posted=%d failed=%d trimmed=%d",
            enqueued, len(due), posted, failed, trimmed,
        )
        return DispatchResult(enqueued=enqueued, processed=len(due), posted=posted, failed=failed, trimmed=trimmed)


# 싱글턴 인스턴스 — Singleton instance
sns_dispatch_service: SnsDispatchService = SnsDispatchService()
