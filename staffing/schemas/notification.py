"""알림 관련 Pydantic 요청/응답 스키마 정의.

Notification Pydantic request/response schema definitions.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class NotificationResponse(BaseModel):
    """알림 응답 스키마.

    Notification response schema.
    Uses polymorphic reference_type + reference_id for deep-linking
    to the source entity in the client app.

    Attributes:
        id: 알림 UUID (Notification unique identifier)
        type: 알림 유형 (Notification type)
        message: 알림 메시지 (Human-readable message)
        reference_type: 참조 엔티티 유형 (Source entity type, nullable)
        reference_id: 참조 엔티티 UUID (Source entity UUID, nullable)
        is_read: 읽음 여부 (Read status flag)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: str  # 알림 UUID 문자열 (Notification UUID as string)
    type: str  # 알림 유형: "assignment"|"unassignment"|"availability"|"site_deleted"|"salary"|"admin"
    message: str  # 알림 메시지 (Display message)
    reference_type: str | None  # 참조 엔티티 유형: 딥링크용 (Entity type for deep-linking)
    reference_id: str | None  # 참조 엔티티 UUID: 딥링크용 (Entity UUID for deep-linking)
    is_read: bool  # 읽음 여부 (Read flag)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)


class NotificationCreate(BaseModel):
    """관리자 알림 발송 요청 스키마: Admin notification request."""

    user_id: UUID  # 수신자 UUID (Recipient)
    message: str = Field(..., min_length=1, max_length=1000)  # 메시지 (Message)


class UnreadCountResponse(BaseModel):
    unread_count: int  # 읽지 않은 알림 수 (Unread notification count)
    by_type: dict[str, int] = {}  # 유형별 미읽음 수 (Unread count per notification type)
