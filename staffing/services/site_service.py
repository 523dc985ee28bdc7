"""근무지 서비스: 주방/매장 CRUD 비즈니스 로직.

Site Service: Business logic for kitchen and shop CRUD. Kitchens and
shops behave the same; every method takes the ``kind`` from the router.
Changes that touch rosters are delegated to the assignment coordinator.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.site import Site
from staffing.models.user import User
from staffing.repositories.site_repository import site_repository
from staffing.schemas.site import (
    AssignUsersRequest,
    AssignUsersResponse,
    SiteCreate,
    SiteDetailResponse,
    SiteResponse,
    SiteUpdate,
    TeamMemberResponse,
)
from staffing.services.assignment_service import RosterChange, assignment_service, kind_label
from staffing.services.storage_service import storage_service
from staffing.utils.exceptions import BadRequestError, DuplicateError, NotFoundError

logger = logging.getLogger(__name__)


class SiteService:
    """근무지 관련 비즈니스 로직을 처리하는 서비스.

    Service handling kitchen/shop business logic.
    """

    def _to_response(self, site: Site) -> SiteResponse:
        """근무지 모델을 응답 스키마로 변환합니다.

        Convert a Site model instance to a SiteResponse schema.
        """
        return SiteResponse(
            id=str(site.id),
            kind=site.kind,
            name=site.name,
            address=site.address,
            operating_shifts=list(site.operating_shifts or []),
            image=site.image,
            is_deleted=site.is_deleted,
            version=site.version,
            created_at=site.created_at,
        )

    async def _get_or_404(
        self,
        db: AsyncSession,
        kind: str,
        site_id: UUID,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Site:
        site: Site | None = await site_repository.get_site(
            db, site_id, kind, include_deleted=include_deleted, for_update=for_update
        )
        if site is None:
            raise NotFoundError(f"{kind_label(kind)} not found")
        return site

    async def list_sites(
        self,
        db: AsyncSession,
        kind: str,
        search: str | None = None,
        include_deleted: bool = False,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[SiteResponse], int]:
        """근무지 목록을 조회합니다.

        List sites of one kind with optional name/address search.

        Returns:
            tuple[list[SiteResponse], int]: (근무지 목록, 전체 개수)
        """
        sites, total = await site_repository.get_list(
            db, kind, search=search, include_deleted=include_deleted, page=page, per_page=per_page
        )
        return [self._to_response(s) for s in sites], total

    async def get_site(
        self,
        db: AsyncSession,
        kind: str,
        site_id: UUID,
    ) -> SiteDetailResponse:
        """근무지 상세 정보를 시프트별 팀과 함께 조회합니다.

        Retrieve site detail with the team of every operated shift.

        Raises:
            NotFoundError: 근무지를 찾을 수 없을 때 (Site not found or deleted)
        """
        site: Site = await self._get_or_404(db, kind, site_id)
        teams_by_shift: dict[str, list[User]] = await site_repository.get_team_members(db, site.id)

        teams: dict[str, list[TeamMemberResponse]] = {shift: [] for shift in site.operating_shifts or []}
        for shift, members in teams_by_shift.items():
            teams[shift] = [
                TeamMemberResponse(
                    id=str(u.id),
                    username=u.username,
                    email=u.email,
                    role=u.role,
                    image=u.image,
                    is_available=u.is_available,
                )
                for u in members
            ]
        return SiteDetailResponse(**self._to_response(site).model_dump(), teams=teams)

    async def create_site(
        self,
        db: AsyncSession,
        kind: str,
        data: SiteCreate,
    ) -> SiteResponse:
        """새 근무지를 생성합니다.

        Create a new kitchen or shop.

        Raises:
            DuplicateError: 같은 이름의 근무지가 이미 존재할 때
                            (When a live site of this kind already has the name)
        """
        if await site_repository.name_exists(db, kind, data.name):
            raise DuplicateError(f"{kind_label(kind)} with this name already exists")

        site: Site = await site_repository.create(
            db,
            {
                "kind": kind,
                "name": data.name,
                "address": data.address,
                "operating_shifts": [s.value for s in data.operating_shifts],
            },
        )
        logger.info("Created %s %s", kind, site.id)
        return self._to_response(site)

    async def update_site(
        self,
        db: AsyncSession,
        kind: str,
        site_id: UUID,
        data: SiteUpdate,
    ) -> SiteResponse:
        """근무지를 수정합니다.

        Update a site. Shifts dropped from ``operating_shifts`` are emptied
        first through the coordinator, so their users are unassigned with
        the usual history entries and notifications.

        Raises:
            NotFoundError: 근무지를 찾을 수 없을 때 (Site not found)
            DuplicateError: 이름이 중복될 때 (Name clash)
        """
        site: Site = await self._get_or_404(db, kind, site_id, for_update=True)
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        if update_data.get("name") is not None and await site_repository.name_exists(
            db, kind, update_data["name"], exclude_id=site.id
        ):
            raise DuplicateError(f"{kind_label(kind)} with this name already exists")

        for field in ("name", "address", "operating_shifts"):
            if field in update_data and update_data[field] is None:
                raise BadRequestError(f"{field} cannot be null")

        if "operating_shifts" in update_data:
            new_shifts: list[str] = [s.value for s in data.operating_shifts or []]
            removed: list[str] = [s for s in site.operating_shifts or [] if s not in new_shifts]
            for shift_type in removed:
                await assignment_service.apply_roster(db, site, shift_type, [])
            update_data["operating_shifts"] = new_shifts

        updated: Site = await site_repository.update(db, site, update_data)
        return self._to_response(updated)

    async def delete_site(
        self,
        db: AsyncSession,
        kind: str,
        site_id: UUID,
    ) -> int:
        """근무지를 소프트 삭제합니다.

        Soft-delete a site: mark it deleted and release every user that
        references it.

        Returns:
            int: 해제된 사용자 수 (Number of released users)
        """
        site: Site = await self._get_or_404(db, kind, site_id, for_update=True)
        site.is_deleted = True
        released: list[User] = await assignment_service.release_site(db, site)
        await db.flush()
        return len(released)

    async def restore_site(
        self,
        db: AsyncSession,
        kind: str,
        site_id: UUID,
    ) -> SiteResponse:
        """소프트 삭제된 근무지를 복구합니다. 로스터는 비어 있는 상태로 복구됩니다.

        Restore a soft-deleted site with empty rosters.

        Raises:
            NotFoundError: 근무지를 찾을 수 없을 때 (Site not found)
            BadRequestError: 삭제되지 않은 근무지 (Site is not deleted)
            DuplicateError: 같은 이름의 근무지가 살아 있을 때 (Name now taken)
        """
        site: Site = await self._get_or_404(db, kind, site_id, include_deleted=True, for_update=True)
        if not site.is_deleted:
            raise BadRequestError(f"{kind_label(kind)} is not deleted")
        if await site_repository.name_exists(db, kind, site.name, exclude_id=site.id):
            raise DuplicateError(f"{kind_label(kind)} with this name already exists")
        restored: Site = await site_repository.update(db, site, {"is_deleted": False})
        return self._to_response(restored)

    async def assign_users(
        self,
        db: AsyncSession,
        kind: str,
        site_id: UUID,
        data: AssignUsersRequest,
    ) -> AssignUsersResponse:
        """시프트 로스터를 설정합니다: Set the roster of one shift."""
        change: RosterChange = await assignment_service.set_shift_roster(
            db, kind, site_id, data.shift_type.value, data.user_ids
        )
        message: str = (
            f"{kind_label(kind)} {data.shift_type.value} roster updated"
            if change.changed
            else f"{kind_label(kind)} {data.shift_type.value} roster unchanged"
        )
        return AssignUsersResponse(
            message=message,
            site_id=str(change.site_id),
            shift_type=change.shift_type,
            roster=[str(uid) for uid in change.roster],
            assigned=[str(uid) for uid in change.assigned],
            unassigned=[str(uid) for uid in change.unassigned],
        )

    async def upload_image(
        self,
        db: AsyncSession,
        kind: str,
        site_id: UUID,
        filename: str,
        data: bytes,
        content_type: str | None,
    ) -> str:
        """근무지 이미지를 저장하고 경로를 기록합니다."""
        site: Site = await self._get_or_404(db, kind, site_id)
        location: str = await storage_service.save_image(filename, data, content_type, f"{kind}s")
        await site_repository.update(db, site, {"image": location})
        return location


# 싱글턴 인스턴스: Singleton instance
site_service: SiteService = SiteService()
