"""알림 서비스: 알림 비즈니스 로직.

Notification Service: Business logic for notification management.
Handles notification reads, read/unread operations, and the messages
produced by roster changes, availability overrides and salary records.

Two delivery modes exist:
    - ``notify``: 호출자의 트랜잭션 안에서 생성 (strict, fails the caller)
    - ``notify_best_effort``: 주 트랜잭션 커밋 후 별도 세션에서 생성,
      실패는 로그만 남김 (own session after commit, failures are logged)
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from staffing.database import async_session
from staffing.models.enums import NotificationType
from staffing.models.notification import Notification
from staffing.models.site import Site
from staffing.repositories.notification_repository import notification_repository
from staffing.repositories.user_repository import user_repository
from staffing.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class NotificationService:
    """알림 서비스.

    Notification service providing shared read/unread operations
    and creation of domain notifications.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session) -> None:
        # 베스트 에포트 알림 전용 세션 팩토리: Session factory for best-effort delivery
        self.session_factory: async_sessionmaker[AsyncSession] = session_factory

    # --- 공통 조회/읽음 처리 (Shared read/unread operations) ---

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: NotificationType | None = None,
        unread_only: bool = False,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """사용자의 알림 목록을 페이지네이션하여 조회합니다.

        List paginated notifications for a user, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            notification_type: 알림 유형 필터 (Only this notification type)
            unread_only: 읽지 않은 알림만 (Only unread notifications)
            page: 페이지 번호 (Page number)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Notification], int]: (알림 목록, 전체 개수)
                                                 (List of notifications, total count)
        """
        return await notification_repository.get_inbox(
            db, user_id, notification_type, unread_only, page, per_page
        )

    async def get_unread_counts(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> tuple[int, dict[str, int]]:
        """읽지 않은 알림 수: (total, per-type breakdown)."""
        by_type: dict[str, int] = await notification_repository.count_unread_by_type(db, user_id)
        return sum(by_type.values()), by_type

    async def mark_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        user_id: UUID,
    ) -> None:
        """단일 알림을 읽음 처리합니다.

        Mark a single notification as read.

        Raises:
            NotFoundError: 본인 알림이 아니거나 없을 때 (Not found or not owned by the user)
        """
        if not await notification_repository.mark_read(db, user_id, notification_id):
            raise NotFoundError("Notification not found")

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """사용자의 모든 읽지 않은 알림을 읽음 처리합니다.

        Returns:
            int: 읽음 처리된 알림 수 (Count of notifications marked as read)
        """
        return await notification_repository.mark_read(db, user_id)

    # --- 생성 (Creation) ---

    async def notify(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: NotificationType,
        message: str,
        site: Site | None = None,
        salary_record_id: UUID | None = None,
    ) -> Notification:
        """호출자의 트랜잭션 안에서 알림을 생성합니다.

        Create a notification inside the caller's transaction. A failure here
        propagates and aborts the caller's whole mutation.
        """
        return await notification_repository.add(
            db, user_id, notification_type, message, site=site, salary_record_id=salary_record_id
        )

    async def notify_best_effort(
        self,
        user_id: UUID,
        notification_type: NotificationType,
        message: str,
        salary_record_id: UUID | None = None,
    ) -> Notification | None:
        """별도 세션에서 알림을 생성하고 실패 시 로그만 남깁니다.

        Create a notification in its own session and commit it. Intended to
        run after the primary mutation has committed; a failure is logged and
        ``None`` is returned instead of raising.
        """
        try:
            async with self.session_factory() as session:
                notification: Notification = await self.notify(
                    session, user_id, notification_type, message, salary_record_id=salary_record_id
                )
                await session.commit()
                return notification
        except SQLAlchemyError:
            logger.exception("Best-effort notification for user %s failed", user_id)
            return None

    async def send_admin_notification(
        self,
        db: AsyncSession,
        user_id: UUID,
        message: str,
    ) -> Notification:
        """관리자가 특정 사용자에게 알림을 직접 발송합니다.

        Send an admin-authored notification to a user.

        Raises:
            NotFoundError: 대상 사용자가 없을 때 (Recipient not found)
        """
        if await user_repository.get_by_id(db, user_id) is None:
            raise NotFoundError("User not found")
        return await self.notify(db, user_id, NotificationType.ADMIN, message)

    async def notify_roster_change(
        self,
        db: AsyncSession,
        user_id: UUID,
        site: Site,
        shift_type: str,
        assigned: bool,
    ) -> Notification:
        """시프트 배정/해제 알림: Assignment or unassignment notice."""
        if assigned:
            message: str = f"You have been assigned to the {shift_type} shift at {site.kind} '{site.name}'."
            notification_type: NotificationType = NotificationType.ASSIGNMENT
        else:
            message = f"You have been unassigned from the {shift_type} shift at {site.kind} '{site.name}'."
            notification_type = NotificationType.UNASSIGNMENT
        return await self.notify(db, user_id, notification_type, message, site=site)

    async def notify_site_deleted(
        self,
        db: AsyncSession,
        user_id: UUID,
        site: Site,
    ) -> Notification:
        """근무지 삭제로 인한 해제 알림: Site deletion notice."""
        message: str = f"You have been unassigned because {site.kind} '{site.name}' was deleted."
        return await self.notify(db, user_id, NotificationType.SITE_DELETED, message, site=site)

    async def notify_availability(
        self,
        db: AsyncSession,
        user_id: UUID,
        status: str,
        reason: str | None,
    ) -> Notification:
        """수동 가용성 변경 알림: Manual availability notice."""
        message: str = f"Your availability has been updated to {status}."
        if reason:
            message += f" Reason: {reason}"
        return await self.notify(db, user_id, NotificationType.AVAILABILITY, message)


# 싱글턴 인스턴스: Singleton instance
notification_service: NotificationService = NotificationService()
