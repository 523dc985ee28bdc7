"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.

JWT Payload Structure:
    {
        "sub": "user_uuid",         # 사용자 ID (User identifier)
        "role": "Chef",             # 역할 (UserRole value)
        "jti": "hex",               # 토큰 고유값: 같은 초에 발급된 토큰도 구분
        "exp": 1234567890,          # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"|"refresh"  # 토큰 유형 (Token type discriminator)
    }
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from staffing.config import settings


def _encode(data: dict[str, Any], expires_in: timedelta, token_type: str) -> tuple[str, datetime]:
    """공통 인코딩: Sign a payload and return it with its expiry."""
    expire: datetime = datetime.now(timezone.utc) + expires_in
    to_encode: dict[str, Any] = {**data, "exp": expire, "type": token_type, "jti": uuid.uuid4().hex}
    token: str = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, expire


def create_access_token(data: dict[str, Any]) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate an access token. Expires after
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES (default: 60 min).

    Example:
        token = create_access_token({"sub": str(user.id), "role": user.role})
    """
    token, _ = _encode(
        data, timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES), "access"
    )
    return token


def create_refresh_token(data: dict[str, Any]) -> tuple[str, datetime]:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a refresh token and return it together with its expiry so the
    caller can persist both.

    Returns:
        tuple[str, datetime]: (토큰 문자열, 만료 일시) (Token string, expiry)
    """
    return _encode(
        data, timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS), "refresh"
    )


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
