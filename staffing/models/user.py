"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
A user is assigned to at most one site at a time (kitchen or shop) and
carries a cached ``is_available`` flag derived from the manual override and
the site references.

Tables:
    - users: 사용자 계정 및 프로필 (User accounts with staffing profile)
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from staffing.database import Base


class User(Base):
    """사용자 모델: 직원 계정 및 근무지 배정 정보.

    User model: Employee account and site assignment state.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        username: 로그인 아이디 (Username, globally unique)
        email: 이메일 (Email address, globally unique, used for login)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        role: 역할 (Admin | Chef | Cashier | Cleaner | TraineeChef | Driver)
        manual_availability: 관리자 수동 설정 (Admin override, "Unavailable" or NULL)
        kitchen_id: 배정된 주방 FK (Assigned kitchen, mutually exclusive with shop_id)
        shop_id: 배정된 매장 FK (Assigned shop, mutually exclusive with kitchen_id)
        is_available: 파생 가용성 캐시 (Cached derived availability)
        version: 낙관적 잠금 버전 (Optimistic locking counter)

    Constraints:
        ck_user_single_site: 주방과 매장 동시 배정 금지 (Never both kitchen and shop)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자: User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 로그인 아이디: Username (전역 고유, globally unique)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    # 이메일: Email address (로그인 식별자, login identifier)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 비밀번호 해시: bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할: UserRole value
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    # 수동 가용성: "Unavailable" when an admin has overridden, NULL otherwise
    manual_availability: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # 배정 주방: Kitchen reference (SET NULL: 하드 삭제 대비)
    kitchen_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("sites.id", ondelete="SET NULL"), nullable=True)
    # 배정 매장: Shop reference
    shop_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("sites.id", ondelete="SET NULL"), nullable=True)
    # 파생 가용성: Derived availability, written only by refresh_availability()
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # 프로필 이미지 경로: Stored image path or URL
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 비자 상태: Visa status text
    visa_status: Mapped[str | None] = mapped_column(String(100), nullable=True)
    visa_expiry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sex: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # 급여: Base salary amount
    salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    # 버전: Optimistic locking counter (동시 수정 시 StaleDataError)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # 생성 일시: Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시: Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("kitchen_id IS NULL OR shop_id IS NULL", name="ck_user_single_site"),
    )

    __mapper_args__ = {"version_id_col": version}

    # 관계: Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def site_id(self) -> uuid.UUID | None:
        """현재 배정된 근무지 ID: Whichever site reference is set."""
        return self.kitchen_id or self.shop_id
