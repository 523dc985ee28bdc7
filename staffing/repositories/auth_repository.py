"""인증 레포지토리: 사용자당 하나의 유효한 리프레시 토큰 관리.

Auth Repository: refresh-token storage. A user holds at most one live
refresh token; logging in replaces it, refreshing consumes it, and a
password change revokes it.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.models.token import RefreshToken


class AuthRepository:
    """리프레시 토큰 저장소."""

    async def replace_user_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """기존 토큰을 폐기하고 새 토큰 하나를 저장합니다.

        Store ``token`` as the user's only refresh token. Any token issued to
        an earlier login stops working.
        """
        await self.revoke_user_tokens(db, user_id)
        stored: RefreshToken = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        db.add(stored)
        await db.flush()
        return stored

    async def consume(
        self,
        db: AsyncSession,
        token: str,
    ) -> RefreshToken | None:
        """토큰을 꺼내면서 삭제합니다 (1회용).

        Look up a stored refresh token and delete it in the same transaction.
        The row is locked first so two concurrent refreshes cannot both use
        it. Returns ``None`` for unknown or already used tokens.
        """
        result = await db.execute(
            select(RefreshToken).where(RefreshToken.token == token).with_for_update()
        )
        stored: RefreshToken | None = result.scalar_one_or_none()
        if stored is not None:
            await db.delete(stored)
            await db.flush()
        return stored

    async def revoke_user_tokens(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """사용자의 모든 리프레시 토큰 폐기: Returns how many were revoked."""
        result = await db.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
        await db.flush()
        return result.rowcount


# 싱글턴 인스턴스: Singleton instance
auth_repository: AuthRepository = AuthRepository()
