"""근무지 API 테스트: 주방/매장 CRUD, 소프트 삭제 연쇄, 복구, 이미지.

Site API tests: kitchen/shop CRUD, soft-delete cascade, restore,
operating-shift changes and image upload.
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import IntegrityError

from staffing.models.history import ActionHistory, AvailabilityHistory
from staffing.models.notification import Notification
from staffing.models.site import RosterEntry, Site
from staffing.models.user import User
from tests.conftest import auth_header, break_notifications, count_rows, create_site, create_user, reload

KITCHENS = "/api/v1/kitchens"
SHOPS = "/api/v1/shops"

# 1x1 PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


class TestCreateSite:
    """근무지 생성."""

    async def test_create_kitchen(self, client: AsyncClient, admin_token):
        res = await client.post(KITCHENS, json={
            "name": "North Kitchen",
            "address": "1 North Rd",
            "operatingShifts": ["Morning", "Night", "Morning"],
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        data = res.json()
        assert data["kind"] == "kitchen"
        assert data["operating_shifts"] == ["Morning", "Night"]
        assert data["is_deleted"] is False

    async def test_duplicate_name_case_insensitive(self, client: AsyncClient, admin_token, kitchen):
        res = await client.post(KITCHENS, json={
            "name": "central kitchen",
            "address": "elsewhere",
        }, headers=auth_header(admin_token))
        assert res.status_code == 409

    async def test_same_name_allowed_across_kinds(self, client: AsyncClient, admin_token, kitchen):
        """주방과 매장은 이름 공간이 분리됨."""
        res = await client.post(SHOPS, json={
            "name": "Central Kitchen",
            "address": "shop side",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201

    async def test_non_admin_forbidden(self, client: AsyncClient, chef_token):
        res = await client.post(KITCHENS, json={"name": "X", "address": "Y"}, headers=auth_header(chef_token))
        assert res.status_code == 403

    async def test_missing_fields(self, client: AsyncClient, admin_token):
        res = await client.post(KITCHENS, json={"name": "No address"}, headers=auth_header(admin_token))
        assert res.status_code == 422

    async def test_name_index_catches_racing_create(self, client: AsyncClient, admin_token, kitchen, monkeypatch):
        """사전 중복 검사를 통과해도 DB 고유 인덱스가 409로 막음."""
        from staffing.repositories.site_repository import site_repository

        async def _no_clash(*args, **kwargs) -> bool:
            return False

        monkeypatch.setattr(site_repository, "name_exists", _no_clash)
        res = await client.post(KITCHENS, json={
            "name": "CENTRAL KITCHEN",
            "address": "racing",
        }, headers=auth_header(admin_token))
        assert res.status_code == 409
        assert res.json()["detail"] == "Resource already exists"

    async def test_name_index_ignores_deleted_sites(self, db, kitchen):
        """삭제된 근무지 이름은 인덱스 대상이 아님."""
        kitchen.is_deleted = True
        await db.commit()
        again = await create_site(db, "Central Kitchen")
        assert again.id != kitchen.id

    async def test_name_index_rejects_live_duplicate(self, db, kitchen):
        db.add(Site(kind="kitchen", name="Central KITCHEN", address="dup", operating_shifts=[]))
        with pytest.raises(IntegrityError):
            await db.commit()
        await db.rollback()


class TestListAndDetail:
    """근무지 조회."""

    async def test_list_hides_deleted_and_other_kind(self, client: AsyncClient, db, chef_token, kitchen, shop):
        gone = await create_site(db, "Old Kitchen")
        gone.is_deleted = True
        await db.commit()

        res = await client.get(KITCHENS, headers=auth_header(chef_token))
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 1
        assert [s["id"] for s in data["items"]] == [str(kitchen.id)]

        res = await client.get(f"{KITCHENS}?include_deleted=true", headers=auth_header(chef_token))
        assert res.json()["total"] == 2

    async def test_search_by_name_or_address(self, client: AsyncClient, db, chef_token, kitchen):
        await create_site(db, "Bakery")
        res = await client.get(f"{KITCHENS}?search=central", headers=auth_header(chef_token))
        assert [s["name"] for s in res.json()["items"]] == ["Central Kitchen"]
        res = await client.get(f"{KITCHENS}?search=bakery street", headers=auth_header(chef_token))
        assert [s["name"] for s in res.json()["items"]] == ["Bakery"]

    async def test_pagination(self, client: AsyncClient, db, chef_token):
        for i in range(3):
            await create_site(db, f"Kitchen {i}")
        res = await client.get(f"{KITCHENS}?page=2&per_page=2", headers=auth_header(chef_token))
        data = res.json()
        assert data["total"] == 3
        assert data["page"] == 2
        assert len(data["items"]) == 1

    async def test_detail_not_found(self, client: AsyncClient, chef_token):
        res = await client.get(f"{KITCHENS}/{uuid.uuid4()}", headers=auth_header(chef_token))
        assert res.status_code == 404

    async def test_list_requires_auth(self, client: AsyncClient):
        res = await client.get(KITCHENS)
        assert res.status_code in (401, 403)


class TestUpdateSite:
    """근무지 수정."""

    async def test_rename(self, client: AsyncClient, admin_token, kitchen):
        res = await client.put(f"{KITCHENS}/{kitchen.id}", json={"name": "Main Kitchen"}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["name"] == "Main Kitchen"
        assert res.json()["address"] == kitchen.address

    async def test_rename_to_taken_name(self, client: AsyncClient, db, admin_token, kitchen):
        await create_site(db, "Taken")
        res = await client.put(f"{KITCHENS}/{kitchen.id}", json={"name": "TAKEN"}, headers=auth_header(admin_token))
        assert res.status_code == 409

    async def test_null_name_rejected(self, client: AsyncClient, admin_token, kitchen):
        res = await client.put(f"{KITCHENS}/{kitchen.id}", json={"name": None}, headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_dropping_shift_unassigns_its_roster(self, client: AsyncClient, db, admin_token, kitchen, chef):
        """운영 시프트에서 빠진 시프트의 인원은 해제됨."""
        await client.post(
            f"{KITCHENS}/{kitchen.id}/assign-users",
            json={"userIds": [str(chef.id)], "shiftType": "Afternoon"},
            headers=auth_header(admin_token),
        )
        res = await client.put(
            f"{KITCHENS}/{kitchen.id}",
            json={"operatingShifts": ["Morning"]},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        assert res.json()["operating_shifts"] == ["Morning"]

        user = await reload(db, User, chef.id)
        assert user.kitchen_id is None
        assert user.is_available is True
        assert await count_rows(db, RosterEntry, site_id=kitchen.id) == 0
        assert await count_rows(db, ActionHistory, user_id=chef.id, action="UnassignedFromKitchen") == 1


class TestDeleteSite:
    """소프트 삭제 연쇄 처리."""

    async def test_delete_releases_every_user(self, client: AsyncClient, db, admin_token, kitchen):
        """3명 배정 → 삭제 시 참조 3건 해제, 이력 3+3건, 알림 3건."""
        users = [await create_user(db, f"cook{i}") for i in range(3)]
        await client.post(
            f"{KITCHENS}/{kitchen.id}/assign-users",
            json={"userIds": [str(u.id) for u in users[:2]], "shiftType": "Morning"},
            headers=auth_header(admin_token),
        )
        await client.post(
            f"{KITCHENS}/{kitchen.id}/assign-users",
            json={"userIds": [str(users[2].id)], "shiftType": "Afternoon"},
            headers=auth_header(admin_token),
        )
        history_before: int = await count_rows(db, AvailabilityHistory)
        actions_before: int = await count_rows(db, ActionHistory)
        notices_before: int = await count_rows(db, Notification)

        res = await client.delete(f"{KITCHENS}/{kitchen.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert "3 users" in res.json()["message"]

        for u in users:
            user = await reload(db, User, u.id)
            assert user.kitchen_id is None
            assert user.is_available is True
        assert await count_rows(db, AvailabilityHistory) == history_before + 3
        assert await count_rows(db, ActionHistory) == actions_before + 3
        assert await count_rows(db, Notification, type="site_deleted") == 3
        assert await count_rows(db, Notification) == notices_before + 3
        assert await count_rows(db, RosterEntry, site_id=kitchen.id) == 0

        site = await reload(db, Site, kitchen.id)
        assert site is not None
        assert site.is_deleted is True

    async def test_deleted_site_hidden(self, client: AsyncClient, admin_token, kitchen):
        await client.delete(f"{KITCHENS}/{kitchen.id}", headers=auth_header(admin_token))
        res = await client.get(f"{KITCHENS}/{kitchen.id}", headers=auth_header(admin_token))
        assert res.status_code == 404
        res = await client.delete(f"{KITCHENS}/{kitchen.id}", headers=auth_header(admin_token))
        assert res.status_code == 404

    async def test_delete_empty_site(self, client: AsyncClient, db, admin_token, shop):
        res = await client.delete(f"{SHOPS}/{shop.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert await count_rows(db, Notification) == 0

    async def test_notification_failure_keeps_site_live(
        self, client: AsyncClient, db, admin_token, kitchen, chef, monkeypatch
    ):
        """알림 실패 시 삭제 전체가 취소: 사이트, 참조, 로스터 유지."""
        await client.post(
            f"{KITCHENS}/{kitchen.id}/assign-users",
            json={"userIds": [str(chef.id)], "shiftType": "Morning"},
            headers=auth_header(admin_token),
        )
        actions_before: int = await count_rows(db, ActionHistory, user_id=chef.id)
        break_notifications(monkeypatch)

        res = await client.delete(f"{KITCHENS}/{kitchen.id}", headers=auth_header(admin_token))
        assert res.status_code == 500

        assert (await reload(db, Site, kitchen.id)).is_deleted is False
        assert (await reload(db, User, chef.id)).kitchen_id == kitchen.id
        assert await count_rows(db, RosterEntry, site_id=kitchen.id) == 1
        assert await count_rows(db, ActionHistory, user_id=chef.id) == actions_before


class TestRestoreSite:
    """복구."""

    async def test_restore(self, client: AsyncClient, admin_token, kitchen):
        await client.delete(f"{KITCHENS}/{kitchen.id}", headers=auth_header(admin_token))
        res = await client.put(f"{KITCHENS}/{kitchen.id}/restore", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["is_deleted"] is False

        res = await client.get(f"{KITCHENS}/{kitchen.id}", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert all(team == [] for team in res.json()["teams"].values())

    async def test_restore_live_site(self, client: AsyncClient, admin_token, kitchen):
        res = await client.put(f"{KITCHENS}/{kitchen.id}/restore", headers=auth_header(admin_token))
        assert res.status_code == 400

    async def test_restore_when_name_reused(self, client: AsyncClient, admin_token, kitchen):
        await client.delete(f"{KITCHENS}/{kitchen.id}", headers=auth_header(admin_token))
        res = await client.post(KITCHENS, json={
            "name": "Central Kitchen",
            "address": "new place",
        }, headers=auth_header(admin_token))
        assert res.status_code == 201
        res = await client.put(f"{KITCHENS}/{kitchen.id}/restore", headers=auth_header(admin_token))
        assert res.status_code == 409


class TestSiteImage:
    """이미지 업로드."""

    async def test_upload_image(self, client: AsyncClient, admin_token, kitchen):
        res = await client.post(
            f"{KITCHENS}/{kitchen.id}/image",
            files={"file": ("front.png", PNG_BYTES, "image/png")},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        image: str = res.json()["image"]
        assert image.startswith("/uploads/kitchens/")
        assert image.endswith(".png")

        served = await client.get(image)
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    async def test_reject_non_image(self, client: AsyncClient, admin_token, kitchen):
        res = await client.post(
            f"{KITCHENS}/{kitchen.id}/image",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400
