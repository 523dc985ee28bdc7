"""근무지 레포지토리: 주방/매장 및 시프트 로스터 쿼리.

Site Repository: Queries for kitchens, shops and their shift rosters.
Roster rows are always read ordered by ``position`` so a roster comes back
in the order it was set.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.site import RosterEntry, Site
from staffing.models.user import User
from staffing.repositories.base import BaseRepository


class SiteRepository(BaseRepository[Site]):
    """근무지 테이블 및 로스터 테이블 레포지토리.

    Repository for the sites table and the roster_entries table.
    """

    def __init__(self) -> None:
        super().__init__(Site)

    async def get_site(
        self,
        db: AsyncSession,
        site_id: UUID,
        kind: str,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Site | None:
        """종류를 확인하며 근무지를 조회합니다.

        Retrieve a site of the given kind. Soft-deleted sites are hidden
        unless ``include_deleted`` is set. ``for_update`` takes a row lock so
        that concurrent roster changes on the same site serialize.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            site_id: 근무지 ID (Site UUID)
            kind: 근무지 종류 (kitchen | shop)
            include_deleted: 삭제된 근무지 포함 여부 (Include soft-deleted sites)
            for_update: 행 잠금 여부 (Lock the row with SELECT ... FOR UPDATE)

        Returns:
            Site | None: 근무지 또는 None (Site or None)
        """
        query: Select = select(Site).where(Site.id == site_id, Site.kind == kind)
        if not include_deleted:
            query = query.where(Site.is_deleted.is_(False))
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_list(
        self,
        db: AsyncSession,
        kind: str,
        search: str | None = None,
        include_deleted: bool = False,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Site], int]:
        """근무지 목록을 페이지네이션하여 조회합니다.

        Retrieve a paginated list of sites of one kind, ordered by name.
        """
        query: Select = select(Site).where(Site.kind == kind)
        if not include_deleted:
            query = query.where(Site.is_deleted.is_(False))
        if search:
            pattern: str = f"%{search}%"
            query = query.where(or_(Site.name.ilike(pattern), Site.address.ilike(pattern)))
        query = query.order_by(Site.name)
        return await self.get_paginated(db, query, page, per_page)

    async def name_exists(
        self,
        db: AsyncSession,
        kind: str,
        name: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        """삭제되지 않은 같은 종류의 근무지 중 이름 중복 여부를 확인합니다."""
        query: Select = select(func.count()).select_from(Site).where(
            Site.kind == kind,
            func.lower(Site.name) == name.lower(),
            Site.is_deleted.is_(False),
        )
        if exclude_id is not None:
            query = query.where(Site.id != exclude_id)
        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def touch(self, db: AsyncSession, site: Site) -> None:
        """근무지 버전을 증가시킵니다: Force an UPDATE so the version bumps."""
        site.updated_at = datetime.now(timezone.utc)
        await db.flush()

    # ------------------------------------------------------------------
    # 로스터: Roster entries
    # ------------------------------------------------------------------

    async def get_roster(
        self,
        db: AsyncSession,
        site_id: UUID,
        shift_type: str,
    ) -> list[UUID]:
        """시프트 로스터의 사용자 ID 목록을 순서대로 조회합니다.

        Return the ordered user ids rostered on one shift of a site.
        """
        query: Select = (
            select(RosterEntry.user_id)
            .where(RosterEntry.site_id == site_id, RosterEntry.shift_type == shift_type)
            .order_by(RosterEntry.position)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_team_members(
        self,
        db: AsyncSession,
        site_id: UUID,
    ) -> dict[str, list[User]]:
        """시프트별 팀원 목록을 조회합니다.

        Return every roster of a site as ``{shift_type: [User, ...]}``.
        """
        query: Select = (
            select(RosterEntry.shift_type, User)
            .join(User, User.id == RosterEntry.user_id)
            .where(RosterEntry.site_id == site_id)
            .order_by(RosterEntry.shift_type, RosterEntry.position)
        )
        result = await db.execute(query)
        teams: dict[str, list[User]] = defaultdict(list)
        for shift_type, user in result.all():
            teams[shift_type].append(user)
        return dict(teams)

    async def get_user_shifts(
        self,
        db: AsyncSession,
        site_id: UUID,
        user_id: UUID,
        exclude_shift: str | None = None,
    ) -> list[str]:
        """사용자가 이 근무지에서 배정된 시프트 목록을 조회합니다.

        Return the shift types of ``site_id`` whose roster lists the user,
        optionally ignoring one shift.
        """
        query: Select = select(RosterEntry.shift_type).where(
            RosterEntry.site_id == site_id,
            RosterEntry.user_id == user_id,
        )
        if exclude_shift is not None:
            query = query.where(RosterEntry.shift_type != exclude_shift)
        result = await db.execute(query.order_by(RosterEntry.shift_type))
        return list(result.scalars().all())

    async def replace_roster(
        self,
        db: AsyncSession,
        site_id: UUID,
        shift_type: str,
        user_ids: Sequence[UUID],
    ) -> None:
        """시프트 로스터를 주어진 순서의 목록으로 교체합니다.

        Replace the roster of one shift with ``user_ids`` in order.
        """
        await db.execute(
            delete(RosterEntry).where(
                RosterEntry.site_id == site_id,
                RosterEntry.shift_type == shift_type,
            )
        )
        db.add_all(
            RosterEntry(site_id=site_id, shift_type=shift_type, user_id=user_id, position=index)
            for index, user_id in enumerate(user_ids)
        )
        await db.flush()

    async def remove_user_from_site(
        self,
        db: AsyncSession,
        site_id: UUID,
        user_id: UUID,
    ) -> list[str]:
        """근무지의 모든 시프트에서 사용자를 제거하고 제거된 시프트를 반환합니다.

        Remove the user from every shift roster of a site. Returns the shift
        types the user was removed from.
        """
        shifts: list[str] = await self.get_user_shifts(db, site_id, user_id)
        if shifts:
            await db.execute(
                delete(RosterEntry).where(
                    RosterEntry.site_id == site_id,
                    RosterEntry.user_id == user_id,
                )
            )
            await db.flush()
        return shifts

    async def remove_user_everywhere(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> list[UUID]:
        """모든 근무지 로스터에서 사용자를 제거합니다.

        Remove the user from every roster. Returns the affected site ids.
        """
        result = await db.execute(
            select(RosterEntry.site_id).where(RosterEntry.user_id == user_id).distinct()
        )
        site_ids: list[UUID] = list(result.scalars().all())
        if site_ids:
            await db.execute(delete(RosterEntry).where(RosterEntry.user_id == user_id))
            await db.flush()
        return site_ids

    async def clear_rosters(
        self,
        db: AsyncSession,
        site_id: UUID,
        shift_type: str | None = None,
    ) -> None:
        """근무지 로스터를 비웁니다 (특정 시프트만 지정 가능).

        Drop every roster row of a site, or only those of one shift.
        """
        stmt = delete(RosterEntry).where(RosterEntry.site_id == site_id)
        if shift_type is not None:
            stmt = stmt.where(RosterEntry.shift_type == shift_type)
        await db.execute(stmt)
        await db.flush()


# 싱글턴 인스턴스: Singleton instance
site_repository: SiteRepository = SiteRepository()
