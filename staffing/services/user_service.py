"""사용자 서비스: 사용자 조회, 프로필, 삭제, 가용성 비즈니스 로직.

User Service: Business logic for user listing, profile edits, hard
delete and admin availability overrides. Site references and
``is_available`` are never edited here; they change only through the
assignment coordinator.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.user import User
from staffing.repositories.auth_repository import auth_repository
from staffing.repositories.site_repository import site_repository
from staffing.repositories.user_repository import user_repository
from staffing.schemas.user import AvailabilityUpdateRequest, ProfileUpdate, UserResponse
from staffing.services.assignment_service import assignment_service
from staffing.services.storage_service import storage_service
from staffing.utils.exceptions import DuplicateError, ForbiddenError, NotFoundError
from staffing.utils.password import hash_password

logger = logging.getLogger(__name__)


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user business logic.
    """

    def to_response(self, user: User) -> UserResponse:
        """사용자 모델을 응답 스키마로 변환합니다.

        Convert a User model instance to a UserResponse schema.
        """
        return UserResponse(
            id=str(user.id),
            username=user.username,
            email=user.email,
            role=user.role,
            is_available=user.is_available,
            manual_availability=user.manual_availability,
            kitchen_id=str(user.kitchen_id) if user.kitchen_id else None,
            shop_id=str(user.shop_id) if user.shop_id else None,
            image=user.image,
            visa_status=user.visa_status,
            visa_expiry_date=user.visa_expiry_date,
            nationality=user.nationality,
            sex=user.sex,
            salary=float(user.salary) if user.salary is not None else None,
            created_at=user.created_at,
        )

    async def _get_or_404(self, db: AsyncSession, user_id: UUID) -> User:
        user: User | None = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(
        self,
        db: AsyncSession,
        search: str | None = None,
        role: str | None = None,
        is_available: bool | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[UserResponse], int]:
        """사용자 목록을 필터와 함께 조회합니다.

        List users with optional search, role and availability filters.

        Returns:
            tuple[list[UserResponse], int]: (사용자 목록, 전체 개수)
        """
        users, total = await user_repository.get_list(
            db, search=search, role=role, is_available=is_available, page=page, per_page=per_page
        )
        return [self.to_response(u) for u in users], total

    async def get_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> UserResponse:
        """사용자 상세를 조회합니다.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        return self.to_response(await self._get_or_404(db, user_id))

    async def update_profile(
        self,
        db: AsyncSession,
        user: User,
        data: ProfileUpdate,
    ) -> UserResponse:
        """본인 프로필을 수정합니다.

        Update the caller's own profile. A password change revokes every
        refresh token of the user.

        Raises:
            DuplicateError: 사용자명 또는 이메일이 이미 사용 중일 때
                            (Username or email already taken)
        """
        update_data: dict[str, Any] = data.model_dump(exclude_unset=True)

        username: str | None = update_data.get("username")
        if username is not None and await user_repository.exists(db, exclude_id=user.id, username=username):
            raise DuplicateError("Username already exists")
        email: str | None = update_data.get("email")
        if email is not None and await user_repository.exists(db, exclude_id=user.id, email=email):
            raise DuplicateError("Email already exists")

        # null 로 지울 수 없는 필드: Required columns ignore explicit nulls
        for field in ("username", "email", "password"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)

        password: str | None = update_data.pop("password", None)
        if password is not None:
            update_data["password_hash"] = hash_password(password)
            await auth_repository.revoke_user_tokens(db, user.id)

        updated: User = await user_repository.update(db, user, update_data)
        return self.to_response(updated)

    async def upload_profile_image(
        self,
        db: AsyncSession,
        user: User,
        filename: str,
        data: bytes,
        content_type: str | None,
    ) -> str:
        """프로필 이미지를 저장합니다: Store the caller's profile image."""
        location: str = await storage_service.save_image(filename, data, content_type, "users")
        await user_repository.update(db, user, {"image": location})
        return location

    async def delete_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        current_user: User,
    ) -> None:
        """사용자를 영구 삭제합니다.

        Hard-delete a user: take them off every roster, then remove their
        history, salary, notification and token records and the user row.

        Raises:
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
            ForbiddenError: 본인 계정 삭제 시도 (Admins cannot delete themselves)
        """
        if user_id == current_user.id:
            raise ForbiddenError("You cannot delete your own account")
        user: User = await self._get_or_404(db, user_id)

        site_ids: list[UUID] = await site_repository.remove_user_everywhere(db, user.id)
        for site_id in site_ids:
            site = await site_repository.get_by_id(db, site_id)
            if site is not None:
                await site_repository.touch(db, site)

        await user_repository.delete_with_records(db, user)
        logger.info("Deleted user %s (removed from %d sites)", user_id, len(site_ids))

    async def set_availability(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: AvailabilityUpdateRequest,
    ) -> UserResponse:
        """관리자 수동 가용성 설정: Admin availability override."""
        user: User = await assignment_service.set_manual_availability(
            db, user_id, data.is_available, data.reason
        )
        return self.to_response(user)


# 싱글턴 인스턴스: Singleton instance
user_service: UserService = UserService()
