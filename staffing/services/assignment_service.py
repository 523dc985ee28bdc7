"""배정 조정 서비스: 시프트 로스터, 수동 가용성, 근무지 삭제 연쇄 처리.

Assignment coordinator. Every operation here mutates users, rosters,
history and notifications together inside the caller's session; the router
commits once the service returns, so either all of it lands or none of it.

Rules kept by this module:
    - 로스터에 있는 사용자는 해당 근무지를 참조 (rostered users point back at the site)
    - 사용자는 한 번에 한 근무지에만 소속 (one site per user, several shifts allowed)
    - 변경된 사용자마다 가용성 이력 1건, 행동 이력 1건, 알림 1건
      (one availability entry, one action entry and one notification per changed user)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.enums import ActionType, AvailabilityStatus, SiteKind
from staffing.models.site import Site
from staffing.models.user import User
from staffing.repositories.history_repository import (
    action_history_repository,
    availability_history_repository,
)
from staffing.repositories.site_repository import site_repository
from staffing.repositories.user_repository import user_repository
from staffing.services.availability import availability_status, refresh_availability
from staffing.services.notification_service import notification_service
from staffing.utils.exceptions import BadRequestError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)

# 근무지 종류별 사용자 참조 컬럼: User column referencing each site kind
_REFERENCE_ATTR: dict[str, str] = {
    SiteKind.KITCHEN: "kitchen_id",
    SiteKind.SHOP: "shop_id",
}

_ASSIGN_ACTION: dict[str, ActionType] = {
    SiteKind.KITCHEN: ActionType.ASSIGNED_TO_KITCHEN,
    SiteKind.SHOP: ActionType.ASSIGNED_TO_SHOP,
}

_UNASSIGN_ACTION: dict[str, ActionType] = {
    SiteKind.KITCHEN: ActionType.UNASSIGNED_FROM_KITCHEN,
    SiteKind.SHOP: ActionType.UNASSIGNED_FROM_SHOP,
}


@dataclass
class RosterChange:
    """로스터 변경 결과: Outcome of a roster change."""

    site_id: UUID
    shift_type: str
    roster: list[UUID] = field(default_factory=list)
    assigned: list[UUID] = field(default_factory=list)
    unassigned: list[UUID] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.assigned or self.unassigned)


def _site_details(site: Site, shift_type: str | None = None, **extra: Any) -> dict[str, Any]:
    """행동 이력 details 구성: JSON-safe details payload."""
    details: dict[str, Any] = {
        "site_id": str(site.id),
        "site_kind": site.kind,
        "site_name": site.name,
    }
    if shift_type is not None:
        details["shift_type"] = shift_type
    details.update(extra)
    return details


def kind_label(kind: str) -> str:
    """사람이 읽는 종류 이름: "Kitchen" / "Shop"."""
    return kind.capitalize()


class AssignmentService:
    """배정 조정 서비스.

    Coordinates roster changes with user site references, derived
    availability, audit history and notifications.
    """

    def _record(
        self,
        db: AsyncSession,
        user: User,
        action: str,
        reason: str,
        details: dict[str, Any],
    ) -> None:
        """가용성 재계산 후 이력 2건을 세션에 추가: Stage both history entries."""
        refresh_availability(user)
        availability_history_repository.append(db, user.id, availability_status(user), reason)
        action_history_repository.append(db, user.id, action, details)

    async def set_shift_roster(
        self,
        db: AsyncSession,
        kind: str,
        site_id: UUID,
        shift_type: str,
        user_ids: Sequence[UUID],
    ) -> RosterChange:
        """근무지 시프트의 배정 인원을 원하는 목록으로 맞춥니다.

        Make the roster of ``(site, shift_type)`` equal to ``user_ids``.

        Duplicate ids collapse with their first occurrence kept. Users leaving
        the roster keep their site reference while another shift of the same
        site still lists them. If any newly added user is not eligible the
        whole call fails before anything is written.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            kind: 근무지 종류 (kitchen | shop)
            site_id: 근무지 ID (Site UUID)
            shift_type: 시프트 유형 (Shift type)
            user_ids: 원하는 배정 인원 순서 목록 (Desired roster, in order)

        Returns:
            RosterChange: 배정/해제된 사용자 목록 (Assigned and unassigned users)

        Raises:
            NotFoundError: 근무지 또는 사용자가 없을 때 (Site or user not found)
            BadRequestError: 운영하지 않는 시프트일 때 (Shift not operated by the site)
            ConflictError: 배정 불가능한 사용자가 있을 때 (A user is not eligible)
        """
        site: Site | None = await site_repository.get_site(db, site_id, kind, for_update=True)
        if site is None:
            raise NotFoundError(f"{kind_label(kind)} not found")
        if shift_type not in (site.operating_shifts or []):
            raise BadRequestError(f"{kind_label(kind)} does not operate the {shift_type} shift")
        return await self.apply_roster(db, site, shift_type, user_ids)

    async def apply_roster(
        self,
        db: AsyncSession,
        site: Site,
        shift_type: str,
        user_ids: Sequence[UUID],
    ) -> RosterChange:
        """잠금된 근무지에 로스터를 적용합니다 (시프트 검증 없음).

        Apply a roster to an already-locked site without checking the shift
        against ``operating_shifts``; site updates use it to empty shifts
        that are being removed.
        """
        desired: list[UUID] = list(dict.fromkeys(user_ids))
        current: list[UUID] = await site_repository.get_roster(db, site.id, shift_type)
        change: RosterChange = RosterChange(site_id=site.id, shift_type=shift_type, roster=desired)

        if desired == current:
            return change

        desired_set: set[UUID] = set(desired)
        current_set: set[UUID] = set(current)
        change.assigned = [uid for uid in desired if uid not in current_set]
        change.unassigned = [uid for uid in current if uid not in desired_set]

        users: dict[UUID, User] = await user_repository.get_by_ids_for_update(
            db, [*change.assigned, *change.unassigned]
        )
        missing: list[UUID] = [uid for uid in change.assigned if uid not in users]
        if missing:
            raise NotFoundError(f"User not found: {', '.join(str(uid) for uid in missing)}")

        # 1단계: 전체 검증: Validate every newcomer before touching anything
        for uid in change.assigned:
            user: User = users[uid]
            if user.manual_availability == AvailabilityStatus.UNAVAILABLE:
                raise ConflictError(f"User {user.username} is marked unavailable")
            if user.site_id is not None and user.site_id != site.id:
                raise ConflictError(f"User {user.username} is already assigned to another site")

        # 다른 시프트 조회는 수정 전에 끝냄 (autoflush 방지)
        # Read the remaining shifts before mutating any user
        remaining: dict[UUID, list[str]] = {}
        for uid in change.unassigned:
            remaining[uid] = await site_repository.get_user_shifts(
                db, site.id, uid, exclude_shift=shift_type
            )

        ref_attr: str = _REFERENCE_ATTR[site.kind]
        label: str = f"{site.kind} '{site.name}'"
        changed: list[User] = []

        # 2단계: 해제: Unassign, keeping the reference while another shift lists the user
        for uid in change.unassigned:
            user = users[uid]
            other_shifts: list[str] = remaining[uid]
            if not other_shifts:
                setattr(user, ref_attr, None)
            self._record(
                db, user, _UNASSIGN_ACTION[site.kind],
                f"Unassigned from {shift_type} shift at {label}",
                _site_details(site, shift_type, remaining_shifts=other_shifts),
            )
            changed.append(user)

        # 3단계: 배정: Assign
        for uid in change.assigned:
            user = users[uid]
            setattr(user, ref_attr, site.id)
            self._record(
                db, user, _ASSIGN_ACTION[site.kind],
                f"Assigned to {shift_type} shift at {label}",
                _site_details(site, shift_type),
            )
            changed.append(user)

        await user_repository.save_all(db, changed)
        await site_repository.replace_roster(db, site.id, shift_type, desired)
        await site_repository.touch(db, site)

        for uid in change.unassigned:
            await notification_service.notify_roster_change(db, uid, site, shift_type, assigned=False)
        for uid in change.assigned:
            await notification_service.notify_roster_change(db, uid, site, shift_type, assigned=True)

        logger.info(
            "Roster %s/%s %s: +%d -%d",
            site.kind, site.id, shift_type, len(change.assigned), len(change.unassigned),
        )
        return change

    async def set_manual_availability(
        self,
        db: AsyncSession,
        user_id: UUID,
        is_available: bool,
        reason: str | None = None,
    ) -> User:
        """관리자 수동 가용성 설정.

        Set (``is_available=False``) or clear (``is_available=True``) the
        manual Unavailable override. A user made unavailable is taken off
        every roster of their site and loses the site reference. Exactly one
        availability entry, one action entry and one notification are written.

        Raises:
            NotFoundError: 사용자가 없을 때 (User not found)
        """
        users: dict[UUID, User] = await user_repository.get_by_ids_for_update(db, [user_id])
        user: User | None = users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")

        make_unavailable: bool = not is_available
        manual: str | None = AvailabilityStatus.UNAVAILABLE if make_unavailable else None
        details: dict[str, Any] = {
            "manual_availability": manual,
            "reason": reason,
            "removed_shifts": [],
        }

        # 로스터 정리를 먼저 수행: Roster cleanup happens before the user row changes
        held_site_id: UUID | None = user.site_id
        if make_unavailable and held_site_id is not None:
            site: Site | None = await site_repository.get_by_id(db, held_site_id)
            details["removed_shifts"] = await site_repository.remove_user_from_site(db, held_site_id, user.id)
            details["site_id"] = str(held_site_id)
            if site is not None:
                details["site_kind"] = site.kind
                details["site_name"] = site.name
                await site_repository.touch(db, site)

        user.manual_availability = manual
        if make_unavailable:
            user.kitchen_id = None
            user.shop_id = None

        self._record(
            db, user, ActionType.AVAILABILITY_UPDATED,
            reason or ("Marked unavailable by admin" if make_unavailable else "Manual override cleared"),
            details,
        )
        await user_repository.save_all(db, [user])
        requested: str = AvailabilityStatus.AVAILABLE if is_available else AvailabilityStatus.UNAVAILABLE
        await notification_service.notify_availability(db, user.id, requested, reason)

        logger.info("Manual availability for %s set to %s", user.id, requested)
        return user

    async def release_site(
        self,
        db: AsyncSession,
        site: Site,
    ) -> list[User]:
        """근무지 소프트 삭제 연쇄 처리.

        Soft-delete cascade: drop every roster of the site and clear the
        reference of every user pointing at it. One history entry of each
        kind and one notification per released user.

        Returns:
            list[User]: 해제된 사용자 목록 (Released users)
        """
        users: list[User] = await user_repository.get_by_site(db, site.id)
        await site_repository.clear_rosters(db, site.id)

        ref_attr: str = _REFERENCE_ATTR[site.kind]
        for user in users:
            setattr(user, ref_attr, None)
            self._record(
                db, user, _UNASSIGN_ACTION[site.kind],
                f"{kind_label(site.kind)} '{site.name}' was deleted",
                _site_details(site, site_deleted=True),
            )
        await user_repository.save_all(db, users)

        for user in users:
            await notification_service.notify_site_deleted(db, user.id, site)

        logger.info("Released %d users from deleted %s %s", len(users), site.kind, site.id)
        return users


# 싱글턴 인스턴스: Singleton instance
assignment_service: AssignmentService = AssignmentService()
