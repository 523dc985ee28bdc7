"""테스트 인프라: 테스트별 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure: Per-test database, session and httpx client fixtures.
Every test gets a fresh SQLite file through aiosqlite; set
``TEST_DATABASE_URL`` to run against PostgreSQL instead. Each request opens
its own session, so a failed request rolls back exactly like production.
"""

import os
import tempfile

# 앱 설정은 임포트 시점에 로드되므로 먼저 환경을 고정
_UPLOADS_TMP = tempfile.mkdtemp(prefix="staffing-uploads-")
os.environ.setdefault("LOCAL_UPLOADS_DIR", _UPLOADS_TMP)
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_EMAIL"] = ""
os.environ["AXIOM_API_TOKEN"] = ""
os.environ["AWS_ACCESS_KEY_ID"] = ""

from collections.abc import AsyncGenerator  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import func, select  # noqa: E402
from sqlalchemy.exc import OperationalError  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool  # noqa: E402

from staffing.database import Base, get_db  # noqa: E402
from staffing.main import app  # noqa: E402
from staffing.models import *  # noqa: F401,F403,E402: register all models with metadata
from staffing.models.site import Site  # noqa: E402
from staffing.models.user import User  # noqa: E402
from staffing.services.notification_service import notification_service  # noqa: E402
from staffing.utils.jwt import create_access_token  # noqa: E402
from staffing.utils.password import hash_password  # noqa: E402

PASSWORD = "secret123!"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 스키마를 새로 만듭니다."""
    url: str = os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    eng = create_async_engine(url, poolclass=NullPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """테스트 엔진용 세션 팩토리: 베스트 에포트 알림도 같은 DB를 사용."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    original = notification_service.session_factory
    notification_service.session_factory = factory
    yield factory
    notification_service.session_factory = original


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """픽스처 데이터 준비와 결과 확인용 세션. 준비 데이터는 커밋해야 요청에서 보입니다."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트: 요청마다 새 세션을 엽니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_user(
    db: AsyncSession,
    username: str,
    role: str = "Chef",
    **fields: Any,
) -> User:
    """사용자를 생성하고 커밋합니다."""
    user = User(
        username=username,
        email=f"{username}@staffing.io",
        password_hash=hash_password(PASSWORD),
        role=role,
        **fields,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_site(
    db: AsyncSession,
    name: str,
    kind: str = "kitchen",
    shifts: list[str] | None = None,
) -> Site:
    """근무지를 생성하고 커밋합니다."""
    site = Site(
        kind=kind,
        name=name,
        address=f"{name} street 1",
        operating_shifts=shifts if shifts is not None else ["Morning", "Afternoon"],
    )
    db.add(site)
    await db.commit()
    await db.refresh(site)
    return site


async def count_rows(db: AsyncSession, model: type, **filters: Any) -> int:
    """조건에 맞는 행 수: 캐시를 비우고 DB에서 다시 읽습니다."""
    db.expire_all()
    query = select(func.count()).select_from(model)
    for name, value in filters.items():
        query = query.where(getattr(model, name) == value)
    return (await db.execute(query)).scalar() or 0


async def reload(db: AsyncSession, model: type, obj_id: Any) -> Any:
    """요청이 커밋한 최신 상태로 다시 읽습니다."""
    db.expire_all()
    return await db.get(model, obj_id)


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    return await create_user(db, "admin", role="Admin")


@pytest_asyncio.fixture
async def chef(db: AsyncSession) -> User:
    return await create_user(db, "chef")


@pytest_asyncio.fixture
async def cashier(db: AsyncSession) -> User:
    return await create_user(db, "cashier", role="Cashier")


@pytest_asyncio.fixture
async def kitchen(db: AsyncSession) -> Site:
    return await create_site(db, "Central Kitchen")


@pytest_asyncio.fixture
async def shop(db: AsyncSession) -> Site:
    return await create_site(db, "Harbour Shop", kind="shop", shifts=["Morning", "Night"])


def make_token(user: User) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user.id), "role": user.role})


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user)


@pytest.fixture
def chef_token(chef) -> str:
    return make_token(chef)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def break_notifications(monkeypatch) -> None:
    """이후 알림 생성이 DB 오류로 실패하도록 합니다.

    Make every notification insert fail with a driver error, both inside a
    request transaction and in the best-effort session.
    """
    async def _fail(*args: Any, **kwargs: Any) -> None:
        raise OperationalError("INSERT INTO notifications", {}, Exception("notifications table unavailable"))

    monkeypatch.setattr(notification_service, "notify", _fail)
