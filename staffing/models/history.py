"""이력 SQLAlchemy ORM 모델 정의.

History SQLAlchemy ORM model definitions. Entries are append-only audit
records referencing the user by id.

Tables:
    - availability_history: 가용성 변경 이력 (Availability change log)
    - action_history: 행동 이력 (Assignment / availability actions)
    - salary_records: 급여 기록 (Salary payments)
"""

import uuid
from datetime import date as date_type, datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from staffing.database import Base


class AvailabilityHistory(Base):
    """가용성 이력: 사용자 가용성이 바뀔 때마다 한 건씩 기록.

    Availability history entry, appended whenever a user's availability is
    recomputed by an assignment, unassignment or manual override.

    Attributes:
        user_id: 사용자 FK (Owner user)
        date: 기록 시각 (When the change happened, UTC)
        status: 상태 (Available | Unavailable)
        reason: 사유 (Free-text reason)
    """

    __tablename__ = "availability_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 사용자 FK: Owner user
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 기록 시각: Change timestamp (UTC)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 상태: AvailabilityStatus value
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    # 사유: Why availability changed
    reason: Mapped[str | None] = mapped_column(String(1000), nullable=True)


class ActionHistory(Base):
    """행동 이력: 배정/해제/가용성 변경 작업의 감사 기록.

    Action history entry. ``details`` carries the site id and name, the
    shift type and any extra context of the action.
    """

    __tablename__ = "action_history"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 기록 시각: Action timestamp (UTC)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 행동: ActionType value
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    # 상세: Structured details (site, shift, reason, removed shifts)
    details: Mapped[dict] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=dict)


class SalaryRecord(Base):
    """급여 기록: 관리자가 등록하는 급여 지급 내역.

    Salary record created by an admin for a user.
    """

    __tablename__ = "salary_records"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 지급일: Pay date
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    # 금액: Amount paid or due
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # 상태: SalaryStatus value (Pending | Paid)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Pending")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
