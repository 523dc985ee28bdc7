"""초기 데이터 시드 스크립트: 관리자 계정 생성.

Seed script: Creates the initial Admin account from the ``ADMIN_*``
settings. Admins cannot self-register, so this is how the first one
comes into existence. The app also runs :func:`ensure_admin` on startup
when ``ADMIN_EMAIL`` is set.

Usage:
    python -m staffing.seed
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from staffing.config import settings
from staffing.database import Base, async_session, engine
from staffing.models.enums import UserRole
from staffing.models import User
from staffing.repositories.user_repository import user_repository
from staffing.utils.password import hash_password

logger = logging.getLogger(__name__)


async def ensure_admin(db: AsyncSession) -> User | None:
    """관리자 계정이 없으면 생성합니다.

    Create the configured Admin user unless an Admin already exists.

    Idempotent: 이미 관리자가 있으면 건너뜁니다 (Skips when an Admin exists).

    Returns:
        User | None: 새로 만든 관리자, 건너뛴 경우 None (New admin, or None if skipped)
    """
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        logger.info("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin bootstrap")
        return None

    result = await db.execute(select(User.id).where(User.role == UserRole.ADMIN).limit(1))
    if result.scalar_one_or_none() is not None:
        return None

    admin: User = await user_repository.create(
        db,
        {
            "username": settings.ADMIN_USERNAME,
            "email": settings.ADMIN_EMAIL,
            "password_hash": hash_password(settings.ADMIN_PASSWORD),
            "role": UserRole.ADMIN.value,
        },
    )
    logger.info("Created initial admin %s", admin.email)
    return admin


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Create missing tables from ORM metadata, then the initial Admin.
    """
    # 테이블 생성: DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        admin: User | None = await ensure_admin(db)
        await db.commit()

    if admin is None:
        print("Admin already present or not configured. Skipping.")
    else:
        print(f"Seeded admin user: {admin.username} <{admin.email}>")


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(seed())
