"""근무지 및 시프트 로스터 SQLAlchemy ORM 모델 정의.

Site and shift roster SQLAlchemy ORM model definitions.
Kitchens and shops share one table, distinguished by ``kind``. The
per-shift team of a site lives in ``roster_entries``, one row per
(site, shift, user) with a ``position`` giving the roster order.

Tables:
    - sites: 주방/매장 (Kitchens and shops, soft-deletable)
    - roster_entries: 시프트별 배정 인원 (Per-shift rostered users)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from staffing.database import Base


class Site(Base):
    """근무지 모델: 주방 또는 매장.

    Site model: A kitchen or a shop.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        kind: 종류 (kitchen | shop)
        name: 이름 (Display name, unique per kind among live sites)
        address: 주소 (Street address)
        operating_shifts: 운영 시프트 목록 (JSON list of ShiftType values)
        image: 이미지 경로 (Stored image path or URL)
        is_deleted: 소프트 삭제 여부 (Soft delete flag)
        version: 낙관적 잠금 버전 (Optimistic locking counter)
    """

    __tablename__ = "sites"

    # 근무지 고유 식별자: Site unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 종류: "kitchen" or "shop"
    kind: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    # 이름: Site display name
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 주소: Street address
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    # 운영 시프트: Operating shift types, e.g. ["Morning", "Night"]
    operating_shifts: Mapped[list] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)
    # 이미지: Stored image path or URL
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 소프트 삭제: Soft-deleted sites are hidden and reject assignments
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # 버전: Optimistic locking counter, bumped on every roster change
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # 생성 일시: Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시: Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        # 살아 있는 근무지 이름 중복 방지: Case-insensitive unique name among live sites
        Index(
            "uq_sites_kind_lower_name_live",
            "kind",
            text("lower(name)"),
            unique=True,
            postgresql_where=text("NOT is_deleted"),
            sqlite_where=text("NOT is_deleted"),
        ),
    )
    __mapper_args__ = {"version_id_col": version}


class RosterEntry(Base):
    """시프트 로스터 항목: 근무지의 특정 시프트에 배정된 사용자.

    Roster entry: One user rostered on one shift of one site.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        site_id: 근무지 FK (Site foreign key)
        shift_type: 시프트 유형 (ShiftType value)
        user_id: 사용자 FK (Rostered user)
        position: 로스터 내 순서 (0-based order within the roster)

    Constraints:
        uq_roster_site_shift_user: 같은 시프트에 중복 배정 금지
    """

    __tablename__ = "roster_entries"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 근무지 FK: Parent site (CASCADE: 근무지 삭제 시 로스터도 삭제)
    site_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    shift_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # 사용자 FK: Rostered user
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # 순서: Order within the (site, shift) roster
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("site_id", "shift_type", "user_id", name="uq_roster_site_shift_user"),
    )
