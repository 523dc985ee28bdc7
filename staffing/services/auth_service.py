"""인증 서비스: 로그인, 회원가입, 토큰 갱신 비즈니스 로직.

Auth Service: Business logic for login, registration, token refresh and
logout. Refresh tokens are stored so they can be rotated and revoked.
"""

import logging
from datetime import datetime, timezone

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.enums import UserRole
from staffing.models.token import RefreshToken
from staffing.models.user import User
from staffing.repositories.auth_repository import auth_repository
from staffing.repositories.user_repository import user_repository
from staffing.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest, TokenResponse
from staffing.utils.exceptions import DuplicateError, ForbiddenError, UnauthorizedError
from staffing.utils.jwt import create_access_token, create_refresh_token, decode_token
from staffing.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """타임존 없는 값은 UTC로 간주: SQLite returns naive datetimes."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    """

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        """JWT 토큰 페이로드를 생성합니다: Build the JWT payload."""
        return {"sub": str(user.id), "role": user.role}

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성합니다.

        Generate an access/refresh token pair and persist the refresh token.
        Earlier refresh tokens of the user are discarded.
        """
        payload: dict[str, str] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token, expires_at = create_refresh_token(payload)

        await auth_repository.replace_user_token(db, user.id, refresh_token, expires_at)

        return TokenResponse(access_token=access_token, refresh_token=refresh_token)

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> User:
        """새 사용자를 등록합니다.

        Register a non-admin user. New users start with no site and no
        manual override, so they are available.

        Raises:
            ForbiddenError: Admin 역할 요청 시 (Admin role requested)
            DuplicateError: 사용자명 또는 이메일 중복 (Username or email taken)
        """
        if data.role == UserRole.ADMIN:
            raise ForbiddenError("Admin accounts cannot be self-registered")
        if await user_repository.exists(db, username=data.username):
            raise DuplicateError("Username already exists")
        if await user_repository.exists(db, email=data.email):
            raise DuplicateError("Email already exists")

        user: User = await user_repository.create(
            db,
            {
                "username": data.username,
                "email": data.email,
                "password_hash": hash_password(data.password),
                "role": data.role.value,
            },
        )
        logger.info("Registered user %s (%s)", user.id, user.role)
        return user

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """이메일과 비밀번호로 로그인합니다.

        Raises:
            UnauthorizedError: 자격 증명이 틀렸을 때 (Invalid credentials)
        """
        user: User | None = await user_repository.get_by_email(db, data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid email or password")
        return await self._generate_tokens(db, user)

    async def refresh_tokens(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Issue a new token pair using a stored refresh token. The old token is
        consumed.

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰일 때
                               (Invalid or expired refresh token)
        """
        # 저장된 토큰을 소비 (재사용 불가): Consume the stored token, it is single use
        stored: RefreshToken | None = await auth_repository.consume(db, data.refresh_token)
        if stored is None:
            raise UnauthorizedError("Invalid refresh token")
        if _as_utc(stored.expires_at) < datetime.now(timezone.utc):
            raise UnauthorizedError("Refresh token has expired")

        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid refresh token")
        if payload.get("type") != "refresh" or payload.get("sub") != str(stored.user_id):
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.get_by_id(db, stored.user_id)
        if user is None:
            raise UnauthorizedError("User not found")
        return await self._generate_tokens(db, user)

    async def logout(
        self,
        db: AsyncSession,
        refresh_token: str,
    ) -> None:
        """로그아웃 처리: 리프레시 토큰을 폐기합니다. 알 수 없는 토큰은 무시."""
        await auth_repository.consume(db, refresh_token)


# 싱글턴 인스턴스: Singleton instance
auth_service: AuthService = AuthService()
