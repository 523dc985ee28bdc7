"""사용자 레포지토리: 사용자 CRUD 및 가용성 유지 쿼리.

User Repository: CRUD queries for users. Every insert and update of a user
goes through this repository, which recomputes ``is_available`` right
before flushing.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.history import ActionHistory, AvailabilityHistory, SalaryRecord
from staffing.models.notification import Notification
from staffing.models.token import RefreshToken
from staffing.models.user import User
from staffing.repositories.base import BaseRepository
from staffing.services.availability import refresh_availability


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        """UserRepository를 초기화합니다.

        Initialize the UserRepository with the User model.
        """
        super().__init__(User)

    def _before_flush(self, obj: User) -> None:
        # 모든 삽입/수정 직전 가용성 재계산: is_available is never written elsewhere
        refresh_availability(obj)

    async def save_all(
        self,
        db: AsyncSession,
        users: Sequence[User],
    ) -> None:
        """여러 사용자를 한 번의 flush로 저장합니다.

        Recompute availability for every given user and persist them all in
        a single flush.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            users: 저장할 사용자 목록 (Users to persist)
        """
        for user in users:
            self._before_flush(user)
            db.add(user)
        await db.flush()

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다: Look up a user by email."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_ids_for_update(
        self,
        db: AsyncSession,
        user_ids: Sequence[UUID],
    ) -> dict[UUID, User]:
        """여러 사용자를 행 잠금과 함께 조회합니다.

        Load several users with ``SELECT ... FOR UPDATE`` (a no-op on
        backends without row locks), keyed by id.
        """
        if not user_ids:
            return {}
        query: Select = (
            select(User)
            .where(User.id.in_(user_ids))
            .order_by(User.id)
            .with_for_update()
        )
        result = await db.execute(query)
        return {user.id: user for user in result.scalars().all()}

    async def get_by_site(
        self,
        db: AsyncSession,
        site_id: UUID,
    ) -> list[User]:
        """근무지를 참조하는 모든 사용자를 잠금과 함께 조회합니다.

        Retrieve (and lock) every user whose kitchen or shop reference points
        at the given site.
        """
        query: Select = (
            select(User)
            .where(or_(User.kitchen_id == site_id, User.shop_id == site_id))
            .order_by(User.username)
            .with_for_update()
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_list(
        self,
        db: AsyncSession,
        search: str | None = None,
        role: str | None = None,
        is_available: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[User], int]:
        """사용자 목록을 필터와 페이지네이션으로 조회합니다.

        Retrieve a filtered, paginated list of users.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            search: 사용자명/이메일 부분 검색어 (Substring match on username or email)
            role: 역할 필터 (Role filter)
            is_available: 가용성 필터 (Availability filter)
            page: 페이지 번호 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[User], int]: (사용자 목록, 전체 개수)
        """
        query: Select = select(User)
        if search:
            pattern: str = f"%{search}%"
            query = query.where(or_(User.username.ilike(pattern), User.email.ilike(pattern)))
        if role is not None:
            query = query.where(User.role == role)
        if is_available is not None:
            query = query.where(User.is_available == is_available)
        query = query.order_by(User.created_at, User.username)
        return await self.get_paginated(db, query, page, per_page)

    async def delete_with_records(
        self,
        db: AsyncSession,
        user: User,
    ) -> None:
        """사용자와 소유 기록(이력, 급여, 알림, 토큰)을 함께 삭제합니다.

        Delete the user's own records and then the user row. Roster rows are
        removed separately by the site repository.
        """
        for model in (AvailabilityHistory, ActionHistory, SalaryRecord, Notification, RefreshToken):
            await db.execute(delete(model).where(model.user_id == user.id))
        await db.delete(user)
        await db.flush()


# 싱글턴 인스턴스: Singleton instance
user_repository: UserRepository = UserRepository()
