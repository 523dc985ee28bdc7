"""알림 API 테스트.

Notification API tests: list, unread count, mark read, mark all read and
admin send.
"""

import uuid

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.notification import Notification
from tests.conftest import auth_header

URL = "/api/v1/notifications"


@pytest_asyncio.fixture
async def notifications(db: AsyncSession, chef):
    """테스트용 알림 데이터를 생성합니다."""
    notifs = []
    for i in range(3):
        n = Notification(user_id=chef.id, type="admin", message=f"Test notification {i}", is_read=False)
        db.add(n)
        notifs.append(n)
    await db.commit()
    for n in notifs:
        await db.refresh(n)
    return notifs


class TestNotifications:
    """본인 알림 API."""

    async def test_list_notifications(self, client: AsyncClient, chef_token, notifications):
        res = await client.get(URL, headers=auth_header(chef_token))
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 3
        assert {n["message"] for n in data["items"]} == {f"Test notification {i}" for i in range(3)}

    async def test_other_users_notifications_hidden(self, client: AsyncClient, admin_token, notifications):
        res = await client.get(URL, headers=auth_header(admin_token))
        assert res.json()["total"] == 0

    async def test_mark_read_and_unread_count(self, client: AsyncClient, chef_token, notifications):
        res = await client.get(f"{URL}/unread-count", headers=auth_header(chef_token))
        assert res.json()["unread_count"] == 3

        res = await client.put(f"{URL}/{notifications[0].id}/read", headers=auth_header(chef_token))
        assert res.status_code == 200

        res = await client.get(f"{URL}/unread-count", headers=auth_header(chef_token))
        assert res.json()["unread_count"] == 2
        res = await client.get(f"{URL}?unread_only=true", headers=auth_header(chef_token))
        assert res.json()["total"] == 2

    async def test_mark_read_not_owned(self, client: AsyncClient, admin_token, notifications):
        """타인 알림 읽음 처리 시 404."""
        res = await client.put(f"{URL}/{notifications[0].id}/read", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_mark_read_unknown(self, client: AsyncClient, chef_token):
        res = await client.put(f"{URL}/{uuid.uuid4()}/read", headers=auth_header(chef_token))
        assert res.status_code == 404

    async def test_mark_all_read(self, client: AsyncClient, chef_token, notifications):
        res = await client.patch(f"{URL}/read-all", headers=auth_header(chef_token))
        assert res.status_code == 200
        assert res.json()["message"].startswith("3 ")

        res = await client.get(f"{URL}/unread-count", headers=auth_header(chef_token))
        assert res.json()["unread_count"] == 0

    async def test_notifications_no_auth(self, client: AsyncClient):
        res = await client.get(URL)
        assert res.status_code in (401, 403)


class TestAdminSend:
    """관리자 알림 발송."""

    async def test_send(self, client: AsyncClient, admin_token, chef_token, chef):
        res = await client.post(URL, json={
            "user_id": str(chef.id),
            "message": "Please check the new rota",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        assert res.json()["type"] == "admin"

        res = await client.get(URL, headers=auth_header(chef_token))
        assert res.json()["items"][0]["message"] == "Please check the new rota"

    async def test_send_to_unknown_user(self, client: AsyncClient, admin_token):
        res = await client.post(URL, json={
            "user_id": str(uuid.uuid4()),
            "message": "hello",
        }, headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_send_requires_admin(self, client: AsyncClient, chef_token, chef):
        res = await client.post(URL, json={
            "user_id": str(chef.id),
            "message": "hello",
        }, headers=auth_header(chef_token))
        assert res.status_code == 403


class TestInboxFilters:
    """유형 필터와 유형별 미읽음 수."""

    async def test_filter_by_type_links_site(
        self, client: AsyncClient, admin_token, chef_token, kitchen, chef, notifications
    ):
        res = await client.post(
            f"/api/v1/kitchens/{kitchen.id}/assign-users",
            json={"userIds": [str(chef.id)], "shiftType": "Morning"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200

        res = await client.get(f"{URL}?type=assignment", headers=auth_header(chef_token))
        data = res.json()
        assert data["total"] == 1
        assert data["items"][0]["reference_type"] == "kitchen"
        assert data["items"][0]["reference_id"] == str(kitchen.id)

        res = await client.get(f"{URL}/unread-count", headers=auth_header(chef_token))
        assert res.json() == {"unread_count": 4, "by_type": {"admin": 3, "assignment": 1}}

    async def test_unknown_type_rejected(self, client: AsyncClient, chef_token):
        res = await client.get(f"{URL}?type=gossip", headers=auth_header(chef_token))
        assert res.status_code == 422
