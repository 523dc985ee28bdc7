"""인증 라우터: 회원가입, 로그인, 토큰 갱신, 로그아웃.

Auth Router: Registration, login, token refresh, logout and current-user
endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.api.deps import get_current_user
from staffing.database import get_db
from staffing.models.user import User
from staffing.schemas.auth import LoginRequest, RefreshRequest, RegisterRequest, TokenResponse
from staffing.schemas.user import UserResponse
from staffing.services.auth_service import auth_service
from staffing.services.user_service import user_service

router: APIRouter = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserResponse:
    """회원가입: Admin 이외 역할의 계정 생성.

    Self-registration for non-admin roles.
    """
    user: User = await auth_service.register(db, data)
    await db.commit()
    return user_service.to_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """이메일 로그인: Email/password login."""
    result: TokenResponse = await auth_service.login(db, data)
    await db.commit()
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신: 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair using a refresh token.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", status_code=204)
async def logout(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """로그아웃: 리프레시 토큰 폐기."""
    await auth_service.logout(db, data.refresh_token)
    await db.commit()


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    """현재 사용자 프로필 조회: Current user's profile."""
    return user_service.to_response(current_user)
