"""근태 API 테스트 — 출근 기록 관리, 캘린더, 셀프 타임카드.

Attendance API tests — Manager work record CRUD, monthly calendar and the
self-service timecard (clock in, break, clock out).
"""

import uuid
from datetime import datetime, time, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from tests.conftest import auth_header
from nightbase.config import settings
from nightbase.models.attendance import WorkRecord
from nightbase.utils.timezone import ensure_utc, local_wall_clock_to_utc, today_local

URL = "/api/v1/app/attendance"
AUTO_CLOCKOUT_URL = "/api/v1/cron/auto-clockout"
CRON_SECRET = "cron-secret-for-tests"


@pytest.fixture
def cron_secret(monkeypatch) -> str:
    monkeypatch.setattr(settings, "CRON_SECRET", CRON_SECRET)
    monkeypatch.setattr(settings, "DAY_SWITCH_TIME", "05:00")
    return CRON_SECRET


async def _create_record(client: AsyncClient, token: str, profile_id, work_date: str, **extra) -> dict:
    res = await client.post(URL, json={
        "profile_id": str(profile_id),
        "work_date": work_date,
        **extra,
    }, headers=auth_header(token))
    assert res.status_code == 201, res.text
    return res.json()


class TestWorkRecordManagement:
    """매니저 출근 기록 관리 테스트."""

    async def test_create_manual_record(self, client: AsyncClient, staff, cast):
        today = today_local().isoformat()
        data = await _create_record(
            client, staff.token, cast.profile.id, today,
            scheduled_start_time="20:00", scheduled_end_time="1:00", note="同伴",
        )
        assert data["status"] == "scheduled"
        assert data["source"] == "manual"
        assert data["profile_name"] == "あやか"
        assert data["scheduled_end_time"] == "01:00"
        assert data["work_minutes"] is None

    async def test_list_defaults_to_today(self, client: AsyncClient, staff, cast, cast2):
        today = today_local()
        await _create_record(client, staff.token, cast.profile.id, today.isoformat(), scheduled_start_time="21:00")
        await _create_record(client, staff.token, cast2.profile.id, today.isoformat(), scheduled_start_time="20:00")
        await _create_record(client, staff.token, cast.profile.id, (today + timedelta(days=1)).isoformat())

        res = await client.get(URL, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert [r["profile_name"] for r in res.json()] == ["みゆ", "あやか"]

    async def test_list_by_profile(self, client: AsyncClient, staff, cast):
        """profile_id 지정 시 최신 날짜순."""
        for day in ("2026-03-01", "2026-03-05", "2026-04-01"):
            await _create_record(client, staff.token, cast.profile.id, day)
        res = await client.get(URL, params={
            "profile_id": str(cast.profile.id),
            "date_from": "2026-03-01",
            "date_to": "2026-03-31",
        }, headers=auth_header(staff.token))
        assert [r["work_date"] for r in res.json()] == ["2026-03-05", "2026-03-01"]

    async def test_foreign_profile(self, client: AsyncClient, staff, outsider):
        res = await client.post(URL, json={
            "profile_id": str(outsider.profile.id),
            "work_date": "2026-03-01",
        }, headers=auth_header(staff.token))
        assert res.status_code == 404

    async def test_malformed_profile_id(self, client: AsyncClient, staff):
        res = await client.post(URL, json={
            "profile_id": "not-a-uuid",
            "work_date": "2026-03-01",
        }, headers=auth_header(staff.token))
        assert res.status_code == 422

    async def test_cast_forbidden(self, client: AsyncClient, cast):
        """캐스트는 관리 엔드포인트 사용 불가."""
        res = await client.get(URL, headers=auth_header(cast.token))
        assert res.status_code == 403
        res = await client.post(URL, json={
            "profile_id": str(cast.profile.id),
            "work_date": "2026-03-01",
        }, headers=auth_header(cast.token))
        assert res.status_code == 403

    async def test_correct_timecard(self, client: AsyncClient, staff, cast):
        """타임카드 정정 시 실 근무 분 계산 (휴식 제외)."""
        record = await _create_record(client, staff.token, cast.profile.id, "2026-03-01")
        res = await client.put(f"{URL}/{record['id']}", json={
            "clock_in": "2026-03-01T11:00:00Z",
            "clock_out": "2026-03-01T16:30:00Z",
            "break_start": "2026-03-01T13:00:00Z",
            "break_end": "2026-03-01T13:30:00Z",
            "status": "completed",
        }, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["status"] == "completed"
        assert res.json()["work_minutes"] == 300

    async def test_invalid_status(self, client: AsyncClient, staff, cast):
        record = await _create_record(client, staff.token, cast.profile.id, "2026-03-01")
        res = await client.put(f"{URL}/{record['id']}", json={"status": "done"}, headers=auth_header(staff.token))
        assert res.status_code == 422

    async def test_cancel_hides_from_date_list(self, client: AsyncClient, staff, cast):
        record = await _create_record(client, staff.token, cast.profile.id, "2026-03-01")
        res = await client.post(f"{URL}/{record['id']}/cancel", headers=auth_header(staff.token))
        assert res.json()["status"] == "cancelled"

        res = await client.get(URL, params={"date": "2026-03-01"}, headers=auth_header(staff.token))
        assert res.json() == []

    async def test_delete_record(self, client: AsyncClient, staff, cast):
        record = await _create_record(client, staff.token, cast.profile.id, "2026-03-01")
        res = await client.delete(f"{URL}/{record['id']}", headers=auth_header(staff.token))
        assert res.status_code == 204
        res = await client.get(f"{URL}/{record['id']}", headers=auth_header(staff.token))
        assert res.status_code == 404

    async def test_other_store_record(self, client: AsyncClient, staff, cast, outsider):
        record = await _create_record(client, staff.token, cast.profile.id, "2026-03-01")
        res = await client.get(f"{URL}/{record['id']}", headers=auth_header(outsider.token))
        assert res.status_code == 404
        res = await client.delete(f"{URL}/{uuid.uuid4()}", headers=auth_header(staff.token))
        assert res.status_code == 404


class TestCalendar:
    """월간 캘린더 테스트."""

    async def test_month_counts(self, client: AsyncClient, staff, cast, cast2):
        await _create_record(client, staff.token, cast.profile.id, "2026-03-01")
        await _create_record(client, staff.token, cast2.profile.id, "2026-03-01")
        done = await _create_record(client, staff.token, cast.profile.id, "2026-03-15")
        await client.put(f"{URL}/{done['id']}", json={"status": "completed"}, headers=auth_header(staff.token))
        cancelled = await _create_record(client, staff.token, cast.profile.id, "2026-03-20")
        await client.post(f"{URL}/{cancelled['id']}/cancel", headers=auth_header(staff.token))
        await _create_record(client, staff.token, cast.profile.id, "2026-04-01")

        res = await client.get(f"{URL}/calendar", params={"year": 2026, "month": 3}, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json() == [
            {"work_date": "2026-03-01", "scheduled_count": 2, "working_count": 0, "completed_count": 0},
            {"work_date": "2026-03-15", "scheduled_count": 0, "working_count": 0, "completed_count": 1},
        ]

    async def test_invalid_month(self, client: AsyncClient, staff):
        res = await client.get(f"{URL}/calendar", params={"year": 2026, "month": 13}, headers=auth_header(staff.token))
        assert res.status_code == 400


class TestTimecard:
    """셀프 타임카드 테스트."""

    async def test_walk_in_full_day(self, client: AsyncClient, cast):
        """예정 없이 출근하면 timecard 기록 생성, 휴식, 퇴근까지."""
        headers = auth_header(cast.token)
        assert (await client.get(f"{URL}/me/today", headers=headers)).json() is None

        res = await client.post(f"{URL}/me/clock-in", headers=headers)
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "working"
        assert data["source"] == "timecard"
        assert data["work_date"] == today_local().isoformat()

        assert (await client.post(f"{URL}/me/clock-in", headers=headers)).status_code == 400
        assert (await client.post(f"{URL}/me/break-end", headers=headers)).status_code == 400
        assert (await client.post(f"{URL}/me/break-start", headers=headers)).status_code == 200
        assert (await client.post(f"{URL}/me/break-start", headers=headers)).status_code == 400

        res = await client.post(f"{URL}/me/clock-out", headers=headers)
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "completed"
        assert data["break_end"] is not None
        assert data["work_minutes"] == 0

        assert (await client.post(f"{URL}/me/clock-out", headers=headers)).status_code == 400

    async def test_clock_out_without_clock_in(self, client: AsyncClient, cast):
        res = await client.post(f"{URL}/me/clock-out", headers=auth_header(cast.token))
        assert res.status_code == 400

    async def test_clock_in_uses_scheduled_record(self, client: AsyncClient, staff, cast):
        record = await _create_record(client, staff.token, cast.profile.id, today_local().isoformat())
        res = await client.post(f"{URL}/me/clock-in", headers=auth_header(cast.token))
        assert res.json()["id"] == record["id"]
        assert res.json()["source"] == "manual"

    async def test_clock_moves_shift_submission(self, client: AsyncClient, staff, cast):
        """확정 시프트 출근/퇴근 시 제출 상태가 working → completed."""
        app = "/api/v1/app"
        request = (await client.post(f"{app}/shift-requests", json={
            "title": "本日",
            "deadline": (datetime.now(timezone.utc) + timedelta(days=1)).isoformat(),
            "dates": [{"target_date": today_local().isoformat(), "default_start_time": "20:00"}],
        }, headers=auth_header(staff.token))).json()
        date_id = request["dates"][0]["id"]
        await client.put(f"{app}/my-shifts/requests/{request['id']}", json={
            "entries": [{"shift_request_date_id": date_id}],
        }, headers=auth_header(cast.token))
        await client.post(f"{app}/shift-requests/dates/{date_id}/approve-all", headers=auth_header(staff.token))

        await client.post(f"{URL}/me/clock-in", headers=auth_header(cast.token))
        shifts = (await client.get(f"{app}/my-shifts", headers=auth_header(cast.token))).json()
        assert shifts[0]["status"] == "working"

        await client.post(f"{URL}/me/clock-out", headers=auth_header(cast.token))
        shifts = (await client.get(f"{app}/my-shifts", headers=auth_header(cast.token))).json()
        assert shifts[0]["status"] == "completed"

    async def test_staff_has_timecard(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/me/clock-in", headers=auth_header(staff.token))
        assert res.status_code == 200


class TestAutoClockout:
    """영업일 전환 시 자동 퇴근 테스트."""

    async def test_requires_secret(self, client: AsyncClient, cron_secret, owner):
        res = await client.post(AUTO_CLOCKOUT_URL, headers=auth_header(owner.token))
        assert res.status_code == 401

    async def test_closes_forgotten_record_at_cutoff(self, client: AsyncClient, db, store, staff, cast, cron_secret):
        """전날 이전의 미퇴근 기록은 전환 시각으로 퇴근, 진행 중 휴식도 종료."""
        work_date = today_local() - timedelta(days=2)
        cutoff = local_wall_clock_to_utc(work_date + timedelta(days=1), time(5))
        record = WorkRecord(
            store_id=store.id,
            profile_id=cast.profile.id,
            work_date=work_date,
            clock_in=cutoff - timedelta(hours=6),
            break_start=cutoff - timedelta(hours=1),
            status="working",
            source="timecard",
        )
        db.add(record)
        await db.flush()

        res = await client.post(AUTO_CLOCKOUT_URL, headers=auth_header(cron_secret))
        assert res.status_code == 200
        assert res.json() == {"processed": 1, "record_ids": [str(record.id)]}

        data = (await client.get(f"{URL}/{record.id}", headers=auth_header(staff.token))).json()
        assert data["status"] == "completed"
        assert data["forgot_clockout"] is True
        assert ensure_utc(datetime.fromisoformat(data["clock_out"])) == cutoff
        assert ensure_utc(datetime.fromisoformat(data["break_end"])) == cutoff
        assert data["work_minutes"] == 300

        res = await client.post(AUTO_CLOCKOUT_URL, headers=auth_header(cron_secret))
        assert res.json()["processed"] == 0

    async def test_todays_record_stays_open(self, client: AsyncClient, staff, cast, cron_secret):
        """오늘 출근한 기록은 건드리지 않음."""
        await client.post(f"{URL}/me/clock-in", headers=auth_header(cast.token))

        res = await client.post(AUTO_CLOCKOUT_URL, headers=auth_header(cron_secret))
        assert res.json()["processed"] == 0
        today = (await client.get(f"{URL}/me/today", headers=auth_header(cast.token))).json()
        assert today["status"] == "working"
        assert today["forgot_clockout"] is False

    async def test_completes_linked_submission(self, client: AsyncClient, db, staff, cast, cron_secret):
        """확정 시프트의 미퇴근 기록은 제출 상태도 completed."""
        app = "/api/v1/app"
        request = (await client.post(f"{app}/shift-requests", json={
            "title": "本日",
            "deadline": (datetime.now(timezone.utc) + timedelta(days=1)).isoformat(),
            "dates": [{"target_date": today_local().isoformat(), "default_start_time": "20:00"}],
        }, headers=auth_header(staff.token))).json()
        date_id = request["dates"][0]["id"]
        await client.put(f"{app}/my-shifts/requests/{request['id']}", json={
            "entries": [{"shift_request_date_id": date_id}],
        }, headers=auth_header(cast.token))
        await client.post(f"{app}/shift-requests/dates/{date_id}/approve-all", headers=auth_header(staff.token))
        record = (await client.post(f"{URL}/me/clock-in", headers=auth_header(cast.token))).json()

        # 전날 이전 기록으로 이동 — Move the open record back so its cutoff has passed
        await db.execute(
            update(WorkRecord)
            .where(WorkRecord.id == uuid.UUID(record["id"]))
            .values(work_date=today_local() - timedelta(days=2))
        )

        res = await client.post(AUTO_CLOCKOUT_URL, headers=auth_header(cron_secret))
        assert res.json()["processed"] == 1
        shifts = (await client.get(f"{app}/my-shifts", headers=auth_header(cast.token))).json()
        assert shifts[0]["status"] == "completed"
