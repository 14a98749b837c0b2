"""시프트 모집 API 테스트 — 모집 생성, 희망 제출, 승인/거절, 일괄 승인.

Shift request API tests — Opening requests, preference submission,
approve / reject / revert with work record sync, bulk approval, date counts
and conflict checks.
"""

from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

from tests.conftest import auth_header
from nightbase.utils.timezone import today_local

URL = "/api/v1/app"


def _future_deadline(days: int = 7) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _day(offset: int) -> str:
    return (today_local() + timedelta(days=offset)).isoformat()


async def _open_request(client: AsyncClient, token: str, **overrides) -> dict:
    """두 날짜짜리 모집 생성 — Opens a two-date request for casts."""
    payload: dict = {
        "title": "来週のシフト募集",
        "deadline": _future_deadline(),
        "dates": [
            {"target_date": _day(1), "default_start_time": "20:00", "default_end_time": "1:00"},
            {"target_date": _day(2)},
        ],
    }
    payload.update(overrides)
    res = await client.post(f"{URL}/shift-requests", json=payload, headers=auth_header(token))
    assert res.status_code == 201, res.text
    return res.json()


async def _submit(client: AsyncClient, token: str, request: dict, entries: list[dict]) -> dict:
    res = await client.put(
        f"{URL}/my-shifts/requests/{request['id']}",
        json={"entries": entries},
        headers=auth_header(token),
    )
    assert res.status_code == 200, res.text
    return res.json()


async def _submissions(client: AsyncClient, token: str, date_id: str) -> list[dict]:
    res = await client.get(f"{URL}/shift-requests/dates/{date_id}/submissions", headers=auth_header(token))
    assert res.status_code == 200
    return res.json()


class TestShiftRequestManagement:
    """모집 관리 테스트."""

    async def test_create_request(self, client: AsyncClient, staff):
        data = await _open_request(client, staff.token)
        assert data["status"] == "open"
        assert data["target_roles"] == ["cast"]
        assert data["date_count"] == 2
        assert data["created_by"] == str(staff.profile.id)
        first = data["dates"][0]
        assert first["default_start_time"] == "20:00"
        assert first["default_end_time"] == "01:00"

    async def test_requires_dates(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/shift-requests", json={
            "title": "空",
            "deadline": _future_deadline(),
            "dates": [],
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_duplicate_dates(self, client: AsyncClient, staff):
        """같은 날짜 중복 시 400."""
        res = await client.post(f"{URL}/shift-requests", json={
            "title": "重複",
            "deadline": _future_deadline(),
            "dates": [{"target_date": _day(1)}, {"target_date": _day(1)}],
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_invalid_default_time(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/shift-requests", json={
            "title": "不正",
            "deadline": _future_deadline(),
            "dates": [{"target_date": _day(1), "default_start_time": "25:99"}],
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_foreign_target_profile(self, client: AsyncClient, staff, outsider):
        """다른 매장 프로필 지정 시 400."""
        res = await client.post(f"{URL}/shift-requests", json={
            "title": "指名",
            "deadline": _future_deadline(),
            "target_profile_ids": [str(outsider.profile.id)],
            "dates": [{"target_date": _day(1)}],
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_cast_forbidden(self, client: AsyncClient, cast):
        res = await client.get(f"{URL}/shift-requests", headers=auth_header(cast.token))
        assert res.status_code == 403

    async def test_past_deadline_reads_closed(self, client: AsyncClient, staff):
        """마감이 지난 모집은 closed 로 표시."""
        await _open_request(client, staff.token, deadline=_future_deadline(-1))
        res = await client.get(f"{URL}/shift-requests", headers=auth_header(staff.token))
        assert [r["status"] for r in res.json()] == ["closed"]

    async def test_close_request(self, client: AsyncClient, staff):
        request = await _open_request(client, staff.token)
        res = await client.post(f"{URL}/shift-requests/{request['id']}/close", headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json()["status"] == "closed"

    async def test_other_store_cannot_see(self, client: AsyncClient, staff, outsider):
        request = await _open_request(client, staff.token)
        res = await client.get(f"{URL}/shift-requests/{request['id']}", headers=auth_header(outsider.token))
        assert res.status_code == 404

    async def test_delete_request(self, client: AsyncClient, staff):
        request = await _open_request(client, staff.token)
        res = await client.delete(f"{URL}/shift-requests/{request['id']}", headers=auth_header(staff.token))
        assert res.status_code == 204
        res = await client.get(f"{URL}/shift-requests/{request['id']}", headers=auth_header(staff.token))
        assert res.status_code == 404

    async def test_malformed_target_profile_id(self, client: AsyncClient, staff):
        """UUID 형식이 아닌 대상 프로필은 422."""
        res = await client.post(f"{URL}/shift-requests", json={
            "title": "指名",
            "deadline": _future_deadline(),
            "target_profile_ids": ["not-a-uuid"],
            "dates": [{"target_date": _day(1)}],
        }, headers=auth_header(staff.token))
        assert res.status_code == 422


class TestMyShiftRequests:
    """캐스트 측 희망 제출 테스트."""

    async def test_targeted_cast_sees_request(self, client: AsyncClient, staff, cast):
        request = await _open_request(client, staff.token)
        res = await client.get(f"{URL}/my-shifts/requests", headers=auth_header(cast.token))
        assert res.status_code == 200
        data = res.json()
        assert [r["id"] for r in data] == [request["id"]]
        assert {d["status"] for d in data[0]["dates"]} == {"not_submitted"}

    async def test_staff_not_targeted_by_cast_request(self, client: AsyncClient, staff):
        """cast 대상 모집은 스태프에게 보이지 않음."""
        await _open_request(client, staff.token)
        res = await client.get(f"{URL}/my-shifts/requests", headers=auth_header(staff.token))
        assert res.json() == []

    async def test_explicit_targets_override_roles(self, client: AsyncClient, staff, cast, cast2):
        await _open_request(client, staff.token, target_profile_ids=[str(cast2.profile.id)])
        assert (await client.get(f"{URL}/my-shifts/requests", headers=auth_header(cast.token))).json() == []
        assert len((await client.get(f"{URL}/my-shifts/requests", headers=auth_header(cast2.token))).json()) == 1

    async def test_submit_replaces_pending(self, client: AsyncClient, staff, cast):
        """재제출 시 미결정 제출을 모두 교체."""
        request = await _open_request(client, staff.token)
        first_id, second_id = (d["id"] for d in request["dates"])

        await _submit(client, cast.token, request, [
            {"shift_request_date_id": first_id, "preferred_start_time": "21:00"},
            {"shift_request_date_id": second_id, "availability": "unavailable"},
        ])
        data = await _submit(client, cast.token, request, [
            {"shift_request_date_id": first_id, "preferred_start_time": "22:00", "note": "遅れます"},
        ])
        by_id = {d["shift_request_date_id"]: d for d in data["dates"]}
        assert by_id[first_id]["status"] == "pending"
        assert by_id[first_id]["preferred_start_time"] == "22:00"
        assert by_id[first_id]["note"] == "遅れます"
        assert by_id[second_id]["status"] == "not_submitted"

    async def test_foreign_date_rejected(self, client: AsyncClient, staff, cast):
        request = await _open_request(client, staff.token)
        other = await _open_request(client, staff.token, title="別の募集")
        res = await client.put(f"{URL}/my-shifts/requests/{request['id']}", json={
            "entries": [{"shift_request_date_id": other["dates"][0]["id"]}],
        }, headers=auth_header(cast.token))
        assert res.status_code == 400

    async def test_not_targeted_forbidden(self, client: AsyncClient, staff):
        """대상이 아닌 프로필의 제출은 403."""
        request = await _open_request(client, staff.token)
        res = await client.put(f"{URL}/my-shifts/requests/{request['id']}", json={
            "entries": [{"shift_request_date_id": request["dates"][0]["id"]}],
        }, headers=auth_header(staff.token))
        assert res.status_code == 403

    async def test_closed_request_rejects_submission(self, client: AsyncClient, staff, cast):
        request = await _open_request(client, staff.token)
        await client.post(f"{URL}/shift-requests/{request['id']}/close", headers=auth_header(staff.token))
        res = await client.post(f"{URL}/my-shifts/dates", json={
            "shift_request_date_id": request["dates"][0]["id"],
        }, headers=auth_header(cast.token))
        assert res.status_code == 400

    async def test_submit_single_date(self, client: AsyncClient, staff, cast):
        request = await _open_request(client, staff.token)
        res = await client.post(f"{URL}/my-shifts/dates", json={
            "shift_request_date_id": request["dates"][1]["id"],
            "preferred_start_time": "19:30",
            "preferred_end_time": "0:00",
        }, headers=auth_header(cast.token))
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "pending"
        assert data["preferred_end_time"] == "00:00"

    async def test_malformed_date_id(self, client: AsyncClient, staff, cast):
        """UUID 형식이 아닌 모집 날짜 ID 는 422."""
        request = await _open_request(client, staff.token)
        res = await client.post(f"{URL}/my-shifts/dates", json={
            "shift_request_date_id": "not-a-uuid",
        }, headers=auth_header(cast.token))
        assert res.status_code == 422

        res = await client.put(f"{URL}/my-shifts/requests/{request['id']}", json={
            "entries": [{"shift_request_date_id": "not-a-uuid"}],
        }, headers=auth_header(cast.token))
        assert res.status_code == 422


class TestSubmissionReview:
    """제출 심사 테스트 — 승인 시 출근 기록 동기화."""

    async def test_approve_creates_work_record(self, client: AsyncClient, staff, cast):
        """승인 시각은 희망 시각, 없으면 날짜 기본값."""
        request = await _open_request(client, staff.token)
        date_id = request["dates"][0]["id"]
        await _submit(client, cast.token, request, [
            {"shift_request_date_id": date_id, "preferred_end_time": "2:00"},
        ])
        submission = (await _submissions(client, staff.token, date_id))[0]
        assert submission["profile_name"] == "あやか"

        res = await client.post(
            f"{URL}/shift-submissions/{submission['id']}/approve",
            json={},
            headers=auth_header(staff.token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "scheduled"
        assert data["approved_start_time"] == "20:00"
        assert data["approved_end_time"] == "02:00"
        assert data["approved_by"] == str(staff.profile.id)

        records = (await client.get(f"{URL}/attendance", params={"date": _day(1)}, headers=auth_header(staff.token))).json()
        assert len(records) == 1
        assert records[0]["shift_submission_id"] == submission["id"]
        assert records[0]["scheduled_start_time"] == "20:00"
        assert records[0]["source"] == "shift_request"

    async def test_explicit_approval_times(self, client: AsyncClient, staff, cast):
        request = await _open_request(client, staff.token)
        date_id = request["dates"][1]["id"]
        await _submit(client, cast.token, request, [{"shift_request_date_id": date_id}])
        submission = (await _submissions(client, staff.token, date_id))[0]

        res = await client.post(f"{URL}/shift-submissions/{submission['id']}/approve", json={
            "approved_start_time": "21:00",
            "approved_end_time": "23:30",
        }, headers=auth_header(staff.token))
        assert res.json()["approved_start_time"] == "21:00"
        assert res.json()["approved_end_time"] == "23:30"

    async def test_unavailable_cannot_be_approved(self, client: AsyncClient, staff, cast):
        request = await _open_request(client, staff.token)
        date_id = request["dates"][0]["id"]
        await _submit(client, cast.token, request, [{"shift_request_date_id": date_id, "availability": "unavailable"}])
        submission = (await _submissions(client, staff.token, date_id))[0]

        res = await client.post(f"{URL}/shift-submissions/{submission['id']}/approve", json={}, headers=auth_header(staff.token))
        assert res.status_code == 400

    async def test_reject_then_revert(self, client: AsyncClient, staff, cast):
        """거절 후 되돌리면 다시 pending."""
        request = await _open_request(client, staff.token)
        date_id = request["dates"][0]["id"]
        await _submit(client, cast.token, request, [{"shift_request_date_id": date_id}])
        submission = (await _submissions(client, staff.token, date_id))[0]

        res = await client.post(f"{URL}/shift-submissions/{submission['id']}/reject", headers=auth_header(staff.token))
        assert res.json()["status"] == "rejected"

        res = await client.post(f"{URL}/shift-submissions/{submission['id']}/reject", headers=auth_header(staff.token))
        assert res.status_code == 400

        res = await client.post(f"{URL}/shift-submissions/{submission['id']}/revert", headers=auth_header(staff.token))
        assert res.json()["status"] == "pending"
        assert res.json()["approved_by"] is None

    async def test_revert_cancels_work_record(self, client: AsyncClient, staff, cast):
        request = await _open_request(client, staff.token)
        date_id = request["dates"][0]["id"]
        await _submit(client, cast.token, request, [{"shift_request_date_id": date_id}])
        submission = (await _submissions(client, staff.token, date_id))[0]
        await client.post(f"{URL}/shift-submissions/{submission['id']}/approve", json={}, headers=auth_header(staff.token))

        await client.post(f"{URL}/shift-submissions/{submission['id']}/revert", headers=auth_header(staff.token))
        records = (await client.get(f"{URL}/attendance", params={"date": _day(1)}, headers=auth_header(staff.token))).json()
        assert records == []

    async def test_decided_date_cannot_be_resubmitted(self, client: AsyncClient, staff, cast):
        """결정된 날짜를 포함한 재제출은 400."""
        request = await _open_request(client, staff.token)
        date_id = request["dates"][0]["id"]
        await _submit(client, cast.token, request, [{"shift_request_date_id": date_id}])
        submission = (await _submissions(client, staff.token, date_id))[0]
        await client.post(f"{URL}/shift-submissions/{submission['id']}/approve", json={}, headers=auth_header(staff.token))

        res = await client.put(f"{URL}/my-shifts/requests/{request['id']}", json={
            "entries": [{"shift_request_date_id": date_id}],
        }, headers=auth_header(cast.token))
        assert res.status_code == 400

    async def test_update_time_syncs_record(self, client: AsyncClient, staff, cast):
        request = await _open_request(client, staff.token)
        date_id = request["dates"][0]["id"]
        await _submit(client, cast.token, request, [{"shift_request_date_id": date_id}])
        submission = (await _submissions(client, staff.token, date_id))[0]

        res = await client.patch(f"{URL}/shift-submissions/{submission['id']}/time", json={
            "approved_start_time": "21:00",
            "approved_end_time": "0:00",
        }, headers=auth_header(staff.token))
        assert res.status_code == 400

        await client.post(f"{URL}/shift-submissions/{submission['id']}/approve", json={}, headers=auth_header(staff.token))
        res = await client.patch(f"{URL}/shift-submissions/{submission['id']}/time", json={
            "approved_start_time": "21:00",
            "approved_end_time": "0:00",
        }, headers=auth_header(staff.token))
        assert res.status_code == 200
        records = (await client.get(f"{URL}/attendance", params={"date": _day(1)}, headers=auth_header(staff.token))).json()
        assert records[0]["scheduled_start_time"] == "21:00"
        assert records[0]["scheduled_end_time"] == "00:00"

    async def test_approve_all_and_my_shifts(self, client: AsyncClient, staff, cast, cast2):
        """일괄 승인은 '가능' 제출만, 확정 시프트에 표시."""
        request = await _open_request(client, staff.token)
        date_id = request["dates"][0]["id"]
        await _submit(client, cast.token, request, [{"shift_request_date_id": date_id}])
        await _submit(client, cast2.token, request, [{"shift_request_date_id": date_id, "availability": "unavailable"}])

        res = await client.post(f"{URL}/shift-requests/dates/{date_id}/approve-all", headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json() == {"count": 1}

        shifts = (await client.get(f"{URL}/my-shifts", headers=auth_header(cast.token))).json()
        assert len(shifts) == 1
        assert shifts[0]["title"] == "来週のシフト募集"
        assert shifts[0]["work_date"] == _day(1)
        assert shifts[0]["start_time"] == "20:00"

        assert (await client.get(f"{URL}/my-shifts", headers=auth_header(cast2.token))).json() == []

    async def test_review_other_store_submission(self, client: AsyncClient, staff, cast, outsider):
        request = await _open_request(client, staff.token)
        date_id = request["dates"][0]["id"]
        await _submit(client, cast.token, request, [{"shift_request_date_id": date_id}])
        submission = (await _submissions(client, staff.token, date_id))[0]

        res = await client.post(f"{URL}/shift-submissions/{submission['id']}/approve", json={}, headers=auth_header(outsider.token))
        assert res.status_code == 404


class TestMonitoring:
    """제출 현황 및 중복 확인 테스트."""

    async def test_date_counts(self, client: AsyncClient, staff, cast, cast2):
        request = await _open_request(client, staff.token)
        first_id, second_id = (d["id"] for d in request["dates"])
        await _submit(client, cast.token, request, [
            {"shift_request_date_id": first_id},
            {"shift_request_date_id": second_id},
        ])
        submission = (await _submissions(client, staff.token, first_id))[0]
        await client.post(f"{URL}/shift-submissions/{submission['id']}/approve", json={}, headers=auth_header(staff.token))

        res = await client.get(f"{URL}/shift-requests/{request['id']}/date-counts", headers=auth_header(staff.token))
        assert res.status_code == 200
        by_id = {c["shift_request_date_id"]: c for c in res.json()}
        assert by_id[first_id]["confirmed_count"] == 1
        assert by_id[first_id]["pending_count"] == 0
        assert by_id[first_id]["not_submitted_count"] == 1
        assert by_id[second_id]["pending_count"] == 1

        summary = (await client.get(f"{URL}/shift-requests", headers=auth_header(staff.token))).json()[0]
        assert summary["approved_count"] == 1
        assert summary["pending_count"] == 1

    async def test_conflicts(self, client: AsyncClient, staff, cast, cast2):
        """기존 출근 기록과 겹치는 프로필만 반환."""
        await client.post(f"{URL}/attendance", json={
            "profile_id": str(cast.profile.id),
            "work_date": _day(3),
        }, headers=auth_header(staff.token))

        res = await client.post(f"{URL}/shift-requests/conflicts", json={
            "profile_ids": [str(cast.profile.id), str(cast2.profile.id)],
            "dates": [_day(3), _day(4)],
        }, headers=auth_header(staff.token))
        assert res.status_code == 200
        assert res.json() == [{
            "profile_id": str(cast.profile.id),
            "profile_name": "あやか",
            "work_date": _day(3),
        }]

    async def test_conflicts_malformed_profile_id(self, client: AsyncClient, staff):
        res = await client.post(f"{URL}/shift-requests/conflicts", json={
            "profile_ids": ["zzz"],
            "dates": [_day(3)],
        }, headers=auth_header(staff.token))
        assert res.status_code == 422
