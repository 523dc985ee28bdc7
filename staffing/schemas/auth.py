"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, registration and token issuance/refresh.
"""

from pydantic import BaseModel, EmailStr, Field

from staffing.models.enums import UserRole


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema. Users sign in with their email address.

    Attributes:
        email: 이메일 (Login email)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    email: EmailStr  # 로그인 이메일 (Login email)
    password: str  # 비밀번호: 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Self-registration request schema. The Admin role cannot be chosen here;
    admins are created by the seed command.

    Attributes:
        username: 사용자 아이디 (Desired username)
        email: 이메일 (Email address)
        password: 비밀번호 (Plain text, will be bcrypt-hashed on server)
        role: 역할 (Requested non-admin role)
    """

    username: str = Field(..., min_length=3, max_length=100)  # 사용자 아이디: 전역 고유 (Globally unique)
    email: EmailStr  # 이메일: 전역 고유 (Globally unique)
    password: str = Field(..., min_length=6, max_length=128)  # 비밀번호: 서버에서 bcrypt 해싱
    role: UserRole  # 역할: Admin 불가 (Admin is rejected)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    JWT token issuance response schema.
    Returned after successful login or token refresh.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str  # JWT 액세스 토큰: 만료: 60분 기본 (Access token, default TTL: 60min)
    refresh_token: str  # JWT 리프레시 토큰: 만료: 7일 기본 (Refresh token, default TTL: 7 days)
    token_type: str = "bearer"  # 토큰 유형: 항상 "bearer" (Token type for Authorization header)


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마.

    Refresh token request schema, used by refresh and logout.

    Attributes:
        refresh_token: 기존 리프레시 토큰 (Existing refresh token)
    """

    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)
