"""사용자 API 테스트: 목록, 프로필, 삭제, 급여 기록.

User API tests: admin listing and detail, own profile, hard delete and
salary record creation.
"""

import uuid

from httpx import AsyncClient

from staffing.models.history import ActionHistory, SalaryRecord
from staffing.models.notification import Notification
from staffing.models.site import RosterEntry, Site
from staffing.models.token import RefreshToken
from staffing.models.user import User
from tests.conftest import PASSWORD, auth_header, break_notifications, count_rows, create_user, reload

URL = "/api/v1/users"


class TestListUsers:
    """사용자 목록."""

    async def test_list_with_filters(self, client: AsyncClient, db, admin_token, chef, cashier):
        res = await client.get(URL, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["total"] == 3

        res = await client.get(f"{URL}?role=Cashier", headers=auth_header(admin_token))
        assert [u["username"] for u in res.json()["items"]] == ["cashier"]

        res = await client.get(f"{URL}?search=CHEF", headers=auth_header(admin_token))
        assert [u["username"] for u in res.json()["items"]] == ["chef"]

    async def test_filter_by_availability(self, client: AsyncClient, admin_token, kitchen, chef, cashier):
        await client.post(
            f"/api/v1/kitchens/{kitchen.id}/assign-users",
            json={"userIds": [str(chef.id)], "shiftType": "Morning"},
            headers=auth_header(admin_token),
        )
        res = await client.get(f"{URL}?is_available=false", headers=auth_header(admin_token))
        assert [u["username"] for u in res.json()["items"]] == ["chef"]

    async def test_list_requires_admin(self, client: AsyncClient, chef_token):
        res = await client.get(URL, headers=auth_header(chef_token))
        assert res.status_code == 403

    async def test_get_user_detail(self, client: AsyncClient, admin_token, chef):
        res = await client.get(f"{URL}/{chef.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["email"] == "chef@staffing.io"
        assert data["is_available"] is True
        assert "password_hash" not in data

    async def test_get_unknown_user(self, client: AsyncClient, admin_token):
        res = await client.get(f"{URL}/{uuid.uuid4()}", headers=auth_header(admin_token))
        assert res.status_code == 404


class TestProfile:
    """본인 프로필."""

    async def test_get_profile(self, client: AsyncClient, chef_token, chef):
        res = await client.get(f"{URL}/profile", headers=auth_header(chef_token))
        assert res.status_code == 200
        assert res.json()["id"] == str(chef.id)

    async def test_update_profile_fields(self, client: AsyncClient, chef_token):
        res = await client.put(f"{URL}/profile", json={
            "nationality": "Korean",
            "visa_status": "Work",
            "visa_expiry_date": "2027-03-01",
        }, headers=auth_header(chef_token))
        assert res.status_code == 200
        data = res.json()
        assert data["nationality"] == "Korean"
        assert data["visa_expiry_date"] == "2027-03-01"

    async def test_duplicate_email(self, client: AsyncClient, chef_token, cashier):
        res = await client.put(f"{URL}/profile", json={"email": "cashier@staffing.io"}, headers=auth_header(chef_token))
        assert res.status_code == 409

    async def test_profile_cannot_change_availability(self, client: AsyncClient, db, chef_token, chef):
        """is_available 등 파생 필드는 프로필로 변경 불가."""
        res = await client.put(f"{URL}/profile", json={
            "is_available": False,
            "kitchen_id": str(uuid.uuid4()),
        }, headers=auth_header(chef_token))
        assert res.status_code == 200
        user = await reload(db, User, chef.id)
        assert user.is_available is True
        assert user.kitchen_id is None

    async def test_password_change_revokes_refresh_tokens(self, client: AsyncClient, db, chef):
        login = await client.post("/api/v1/auth/login", json={"email": chef.email, "password": PASSWORD})
        tokens = login.json()
        assert await count_rows(db, RefreshToken, user_id=chef.id) == 1

        res = await client.put(
            f"{URL}/profile",
            json={"password": "brand-new-pass"},
            headers=auth_header(tokens["access_token"]),
        )
        assert res.status_code == 200
        assert await count_rows(db, RefreshToken, user_id=chef.id) == 0

        res = await client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
        assert res.status_code == 401
        res = await client.post("/api/v1/auth/login", json={"email": chef.email, "password": "brand-new-pass"})
        assert res.status_code == 200


class TestDeleteUser:
    """사용자 영구 삭제."""

    async def test_delete_removes_rosters_and_records(self, client: AsyncClient, db, admin_token, kitchen, chef):
        await client.post(
            f"/api/v1/kitchens/{kitchen.id}/assign-users",
            json={"userIds": [str(chef.id)], "shiftType": "Morning"},
            headers=auth_header(admin_token),
        )
        version: int = (await reload(db, Site, kitchen.id)).version

        res = await client.delete(f"{URL}/{chef.id}", headers=auth_header(admin_token))
        assert res.status_code == 200

        assert await reload(db, User, chef.id) is None
        assert await count_rows(db, RosterEntry, site_id=kitchen.id) == 0
        assert await count_rows(db, ActionHistory, user_id=chef.id) == 0
        assert await count_rows(db, Notification, user_id=chef.id) == 0
        assert (await reload(db, Site, kitchen.id)).version > version

    async def test_cannot_delete_self(self, client: AsyncClient, admin_token, admin_user):
        res = await client.delete(f"{URL}/{admin_user.id}", headers=auth_header(admin_token))
        assert res.status_code == 403

    async def test_delete_requires_admin(self, client: AsyncClient, db, chef_token):
        other = await create_user(db, "other")
        res = await client.delete(f"{URL}/{other.id}", headers=auth_header(chef_token))
        assert res.status_code == 403


class TestSalaryRecords:
    """급여 기록 생성."""

    async def test_create_salary_record_notifies(self, client: AsyncClient, db, admin_token, chef):
        res = await client.post(f"{URL}/{chef.id}/salary", json={
            "date": "2026-09-30",
            "amount": "2500.50",
            "status": "Paid",
            "notes": "September",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["amount"] == 2500.5
        assert data["status"] == "Paid"

        assert await count_rows(db, SalaryRecord, user_id=chef.id) == 1
        assert await count_rows(db, Notification, user_id=chef.id, type="salary", reference_type="salary_record") == 1

    async def test_amount_must_be_positive(self, client: AsyncClient, admin_token, chef):
        res = await client.post(f"{URL}/{chef.id}/salary", json={
            "date": "2026-09-30",
            "amount": "0",
        }, headers=auth_header(admin_token))
        assert res.status_code == 422

    async def test_unknown_user(self, client: AsyncClient, admin_token):
        res = await client.post(f"{URL}/{uuid.uuid4()}/salary", json={
            "date": "2026-09-30",
            "amount": "10",
        }, headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_notification_failure_keeps_record(
        self, client: AsyncClient, db, admin_token, chef, monkeypatch
    ):
        """알림 실패는 급여 기록을 되돌리지 않음."""
        break_notifications(monkeypatch)
        res = await client.post(f"{URL}/{chef.id}/salary", json={
            "date": "2026-09-30",
            "amount": "100",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        assert await count_rows(db, SalaryRecord, user_id=chef.id) == 1
        assert await count_rows(db, Notification, user_id=chef.id) == 0
