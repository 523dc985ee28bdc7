"""FastAPI 의존성 주입 모듈: 인증 및 권한 검사.

FastAPI dependency injection module: Authentication and authorization.
Provides reusable dependencies for extracting the current user from JWT
and restricting admin-only endpoints.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    4. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (User is fetched from DB using payload "sub" field)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.database import get_db
from staffing.models.enums import UserRole
from staffing.models.user import User
from staffing.repositories.user_repository import user_repository
from staffing.utils.exceptions import ForbiddenError, UnauthorizedError
from staffing.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기: Authorization 헤더에서 JWT 토큰 추출
# (Extracts JWT token from Authorization: Bearer <token> header)
security: HTTPBearer = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)

    Returns:
        User: 인증된 사용자 ORM 인스턴스 (Authenticated user ORM instance)

    Raises:
        UnauthorizedError: 토큰이 유효하지 않거나 만료됨, 또는 사용자 없음
                           (Invalid/expired token or unknown user)
    """
    try:
        payload: dict = decode_token(credentials.credentials)
        user_id: UUID = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Invalid or expired token")

    # 토큰 타입 검증: Reject refresh tokens used as access tokens
    if payload.get("type") != "access":
        raise UnauthorizedError("Invalid token type")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """관리자 전용 엔드포인트 의존성: Admin-only dependency.

    Raises:
        ForbiddenError: Admin 역할이 아닐 때 (Caller is not an Admin)
    """
    if current_user.role != UserRole.ADMIN:
        raise ForbiddenError("Admin privileges required")
    return current_user
