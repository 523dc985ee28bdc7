"""알림 라우터: 알림 조회, 읽음 처리, 관리자 발송.

Notification Router: API endpoints for notification management.
Provides list, unread count, mark read, mark all read and admin send.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.api.deps import get_current_user, require_admin
from staffing.config import settings
from staffing.database import get_db
from staffing.models.enums import NotificationType
from staffing.models.notification import Notification
from staffing.models.user import User
from staffing.schemas.common import MessageResponse, PaginatedResponse
from staffing.schemas.notification import (
    NotificationCreate,
    NotificationResponse,
    UnreadCountResponse,
)
from staffing.services.notification_service import notification_service

router: APIRouter = APIRouter()


def _to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=str(n.id),
        type=n.type,
        message=n.message,
        reference_type=n.reference_type,
        reference_id=str(n.reference_id) if n.reference_id else None,
        is_read=n.is_read,
        created_at=n.created_at,
    )


@router.get("", response_model=PaginatedResponse)
async def list_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    unread_only: Annotated[bool, Query(description="읽지 않은 알림만")] = False,
    notification_type: Annotated[NotificationType | None, Query(alias="type", description="알림 유형 필터")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=settings.MAX_PAGE_SIZE)] = settings.DEFAULT_PAGE_SIZE,
) -> dict:
    """사용자의 알림 목록을 조회합니다.

    List notifications for the current user, newest first.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)
        unread_only: 읽지 않은 알림만 (Only unread notifications)
        notification_type: 알림 유형 필터 (Only this type, e.g. assignment)
        page: 페이지 번호 (Page number)
        per_page: 페이지당 항목 수 (Items per page)

    Returns:
        dict: 페이지네이션된 알림 목록 (Paginated notification list)
    """
    notifications, total = await notification_service.list_notifications(
        db,
        user_id=current_user.id,
        notification_type=notification_type,
        unread_only=unread_only,
        page=page,
        per_page=per_page,
    )
    return {
        "items": [_to_response(n) for n in notifications],
        "total": total,
        "page": page,
        "per_page": per_page,
    }


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> UnreadCountResponse:
    """읽지 않은 알림 수를 조회합니다: total plus a per-type breakdown."""
    total, by_type = await notification_service.get_unread_counts(db, user_id=current_user.id)
    return UnreadCountResponse(unread_count=total, by_type=by_type)


@router.patch("/read-all", response_model=MessageResponse)
async def mark_all_read(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """모든 읽지 않은 알림을 읽음 처리합니다.

    Mark all unread notifications as read.
    """
    count: int = await notification_service.mark_all_read(db, user_id=current_user.id)
    await db.commit()
    return {"message": f"{count} notifications marked as read"}


@router.put("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """단일 알림을 읽음 처리합니다.

    Mark a single notification as read. Other users' notifications are
    reported as not found.
    """
    await notification_service.mark_read(db, notification_id=notification_id, user_id=current_user.id)
    await db.commit()
    return {"message": "Notification marked as read"}


@router.post("", response_model=NotificationResponse, status_code=201)
async def send_notification(
    data: NotificationCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> NotificationResponse:
    """관리자 알림 발송: Admin sends a message to one user."""
    notification: Notification = await notification_service.send_admin_notification(
        db, data.user_id, data.message
    )
    await db.commit()
    return _to_response(notification)
