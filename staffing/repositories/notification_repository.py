"""알림 레포지토리: 사용자 알림함 조회와 근무지/급여 연결 알림 저장.

Notification Repository: inbox queries for one user, and inserts that link a
notification back to the site or salary record that caused it.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.enums import NotificationType
from staffing.models.notification import Notification
from staffing.models.site import Site
from staffing.repositories.base import BaseRepository

# 급여 기록 참조 유형: reference_type for salary notices (sites use their kind)
SALARY_RECORD_REFERENCE: str = "salary_record"


class NotificationRepository(BaseRepository[Notification]):
    """알림 레포지토리.

    Every query is scoped to one recipient; nobody reads another user's inbox.
    """

    def __init__(self) -> None:
        super().__init__(Notification)

    def _inbox(
        self,
        user_id: UUID,
        notification_type: NotificationType | None = None,
        unread_only: bool = False,
    ) -> Select:
        query: Select = select(Notification).where(Notification.user_id == user_id)
        if notification_type is not None:
            query = query.where(Notification.type == notification_type)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        return query

    async def get_inbox(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: NotificationType | None = None,
        unread_only: bool = False,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """알림함을 최신순으로 조회합니다.

        Page through a user's inbox, newest first, optionally narrowed to one
        notification type (e.g. only roster changes).

        Returns:
            tuple[Sequence[Notification], int]: (알림 목록, 전체 개수)
        """
        query: Select = self._inbox(user_id, notification_type, unread_only).order_by(
            Notification.created_at.desc()
        )
        return await self.get_paginated(db, query, page, per_page)

    async def count_unread_by_type(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> dict[str, int]:
        """유형별 미읽음 개수: Unread counts keyed by notification type.

        Types with nothing unread are absent from the result.
        """
        result = await db.execute(
            select(Notification.type, func.count())
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .group_by(Notification.type)
        )
        return {row[0]: row[1] for row in result.all()}

    async def mark_read(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_id: UUID | None = None,
    ) -> int:
        """읽음 처리: Mark one notification (or the whole inbox) as read.

        Args:
            notification_id: None이면 전체 미읽음 알림 (None marks every unread one)

        Returns:
            int: 읽음 처리된 개수. 0이면 해당 사용자의 알림이 아님
                 (Rows changed; 0 means the id is not in this user's inbox)
        """
        stmt = update(Notification).where(Notification.user_id == user_id)
        if notification_id is not None:
            stmt = stmt.where(Notification.id == notification_id)
        else:
            stmt = stmt.where(Notification.is_read.is_(False))
        result = await db.execute(stmt.values(is_read=True))
        await db.flush()
        return result.rowcount

    async def add(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: NotificationType,
        message: str,
        site: Site | None = None,
        salary_record_id: UUID | None = None,
    ) -> Notification:
        """알림 저장: Insert a notification, linked to its source when given.

        A site reference is stored as ``(site.kind, site.id)`` so clients can
        deep-link to ``/kitchens/{id}`` or ``/shops/{id}``.
        """
        notification: Notification = Notification(user_id=user_id, type=notification_type, message=message)
        if site is not None:
            notification.reference_type = site.kind
            notification.reference_id = site.id
        elif salary_record_id is not None:
            notification.reference_type = SALARY_RECORD_REFERENCE
            notification.reference_id = salary_record_id
        db.add(notification)
        await db.flush()
        await db.refresh(notification)
        return notification


# 싱글턴 인스턴스: Singleton instance
notification_repository: NotificationRepository = NotificationRepository()
