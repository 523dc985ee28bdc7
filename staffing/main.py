"""FastAPI 애플리케이션 엔트리포인트: 미들웨어, 예외 처리기, 라우터 등록.

FastAPI application entry point: Middleware, exception handlers and
router registration. Configures logging and bootstraps the initial admin
on startup.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm.exc import StaleDataError

from staffing.config import settings
from staffing.database import async_session
from staffing.middleware.axiom_logging import AxiomLoggingMiddleware
from staffing.seed import ensure_admin
from staffing.services.storage_service import uploads_dir
from staffing.utils.exceptions import DuplicateError, TransactionConflictError

logger = logging.getLogger(__name__)

# 재시도 가능한 DB 오류: serialization_failure / deadlock_detected, SQLite lock contention
_RETRYABLE_ERROR_CODES: frozenset[str] = frozenset({"40001", "40P01", "SQLITE_BUSY", "SQLITE_LOCKED"})
# 고유 제약 위반: unique_violation
_UNIQUE_VIOLATION_CODES: frozenset[str] = frozenset({"23505", "SQLITE_CONSTRAINT_UNIQUE"})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """앱 시작/종료 훅: 로깅 설정 및 초기 관리자 생성."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if settings.ADMIN_EMAIL:
        async with async_session() as db:
            await ensure_admin(db)
            await db.commit()
    yield


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# 요청 로깅 미들웨어: Access log + Axiom request logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어: Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_code(exc: DBAPIError) -> str | None:
    """드라이버 예외의 오류 코드: SQLSTATE (asyncpg / psycopg) or the sqlite3 error name."""
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None) or getattr(orig, "sqlite_errorname", None)


@app.exception_handler(StaleDataError)
async def stale_data_handler(request: Request, exc: StaleDataError) -> Response:
    """동시 수정 충돌: version_id_col mismatch, the client should retry."""
    logger.warning("Stale data on %s %s: %s", request.method, request.url.path, exc)
    return await http_exception_handler(request, TransactionConflictError())


@app.exception_handler(DBAPIError)
async def dbapi_error_handler(request: Request, exc: DBAPIError) -> Response:
    """직렬화 실패, 교착 상태, 고유 제약 위반은 409, 그 외 DB 오류는 500."""
    code: str | None = _error_code(exc)
    if code in _RETRYABLE_ERROR_CODES:
        logger.warning("Retryable transaction failure on %s %s", request.method, request.url.path)
        return await http_exception_handler(request, TransactionConflictError())
    if code in _UNIQUE_VIOLATION_CODES:
        logger.warning("Unique violation on %s %s", request.method, request.url.path)
        return await http_exception_handler(request, DuplicateError())
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# 로컬 업로드 파일 제공: Serve locally stored images (S3 mode returns absolute URLs)
_uploads = uploads_dir()
_uploads.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=_uploads), name="uploads")


# ---------------------------------------------------------------------------
# 라우터 등록: Router registration
# ---------------------------------------------------------------------------
from staffing.api import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
