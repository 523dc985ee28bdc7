"""SQLAlchemy ORM 모델 패키지: 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package: Central import point for all domain models.
Importing from this package registers every table with the metadata, which
Alembic and ``Base.metadata.create_all`` rely on.

Modules:
    enums: 역할, 시프트, 상태 값 (Role, shift and status values)
    site: 근무지 및 시프트 로스터 (Sites and roster entries)
    user: 사용자 (Users)
    history: 가용성/행동 이력, 급여 기록 (Availability/action history, salary records)
    notification: 알림 (User notifications)
    token: 리프레시 토큰 (Refresh tokens)
"""

from staffing.models.site import Site, RosterEntry
from staffing.models.user import User
from staffing.models.history import AvailabilityHistory, ActionHistory, SalaryRecord
from staffing.models.notification import Notification
from staffing.models.token import RefreshToken

__all__ = [
    "Site", "RosterEntry",
    "User",
    "AvailabilityHistory", "ActionHistory", "SalaryRecord",
    "Notification",
    "RefreshToken",
]
