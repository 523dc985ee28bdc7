"""알림 관련 SQLAlchemy ORM 모델 정의.

Notification SQLAlchemy ORM model definitions.
Each notification can point back at the entity that triggered it via
reference_type and reference_id.

Tables:
    - notifications: 사용자 알림 (User notifications with polymorphic references)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from staffing.database import Base


class Notification(Base):
    """알림 모델: 사용자에게 전달되는 시스템 알림.

    Notification model: System notifications delivered to users.

    Notification Types (type 필드 값):
        - "assignment": 시프트 배정 알림 (Assigned to a shift)
        - "unassignment": 시프트 해제 알림 (Removed from a shift)
        - "availability": 가용성 변경 알림 (Manual availability changed)
        - "site_deleted": 근무지 삭제로 인한 해제 (Unassigned because the site was deleted)
        - "salary": 급여 기록 알림 (New salary record)
        - "admin": 관리자 직접 발송 (Sent by an admin)

    Reference Types (reference_type 필드 값):
        - "kitchen" / "shop": sites 테이블 참조 (Links to sites table)
        - "salary_record": SalaryRecord 참조 (Links to salary_records table)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 수신자 FK (Recipient user foreign key)
        type: 알림 유형 (Notification type, see above)
        message: 알림 메시지 (Human-readable notification message)
        reference_type: 참조 엔티티 유형 (Referenced entity kind)
        reference_id: 참조 엔티티 ID (Referenced entity UUID)
        is_read: 읽음 여부 (Whether the user has read this notification)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "notifications"

    # 알림 고유 식별자: Notification unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 수신자 FK: Target user who receives this notification
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 알림 유형: NotificationType value
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    # 알림 메시지: Human-readable message displayed to the user
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    # 참조 엔티티 유형: Polymorphic reference: kitchen | shop | salary_record
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # 참조 엔티티 ID: Polymorphic reference: UUID of the source entity
    reference_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    # 읽음 여부: False=미읽음, True=읽음 (Unread by default)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    # 생성 일시: Notification creation timestamp (UTC, immutable)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
