"""인프라 테스트: 예외 처리기, 요청 로깅, 헬스 체크.

Infrastructure tests: concurrency error mapping, request logging with
masking, and the health endpoint.
"""

import logging

from httpx import AsyncClient
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError
from starlette.requests import Request

from staffing.main import dbapi_error_handler, stale_data_handler
from staffing.middleware.axiom_logging import mask_sensitive


def _request() -> Request:
    return Request({"type": "http", "method": "PUT", "path": "/api/v1/kitchens/x", "query_string": b"", "headers": []})


class _DriverError(Exception):
    def __init__(self, sqlstate: str) -> None:
        super().__init__(sqlstate)
        self.sqlstate = sqlstate


class _SqliteError(Exception):
    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.sqlite_errorname = name


class TestConflictHandlers:
    """동시성 충돌 → 409."""

    async def test_stale_data_maps_to_409(self):
        res = await stale_data_handler(_request(), StaleDataError("version mismatch"))
        assert res.status_code == 409
        assert res.headers["retry-after"] == "1"

    async def test_serialization_failure_maps_to_409(self):
        exc = DBAPIError("UPDATE users", {}, _DriverError("40001"))
        res = await dbapi_error_handler(_request(), exc)
        assert res.status_code == 409

    async def test_deadlock_maps_to_409(self):
        exc = DBAPIError("UPDATE sites", {}, _DriverError("40P01"))
        res = await dbapi_error_handler(_request(), exc)
        assert res.status_code == 409

    async def test_other_db_error_is_500(self):
        exc = DBAPIError("SELECT 1", {}, _DriverError("42P01"))
        res = await dbapi_error_handler(_request(), exc)
        assert res.status_code == 500

    async def test_unique_violation_maps_to_409(self):
        exc = IntegrityError("INSERT INTO sites", {}, _DriverError("23505"))
        res = await dbapi_error_handler(_request(), exc)
        assert res.status_code == 409
        assert "retry-after" not in res.headers

    async def test_sqlite_busy_maps_to_409(self):
        exc = OperationalError("UPDATE sites", {}, _SqliteError("SQLITE_BUSY"))
        res = await dbapi_error_handler(_request(), exc)
        assert res.status_code == 409
        assert res.headers["retry-after"] == "1"


class TestRequestLogging:
    """요청 로깅."""

    def test_mask_sensitive_nested(self):
        masked = mask_sensitive({"email": "a@b.io", "password": "x", "nested": [{"refresh_token": "t"}]})
        assert masked == {"email": "a@b.io", "password": "***", "nested": [{"refresh_token": "***"}]}

    async def test_access_log_written(self, client: AsyncClient, caplog):
        with caplog.at_level(logging.INFO, logger="staffing.access"):
            res = await client.post("/api/v1/auth/login", json={"email": "x@staffing.io", "password": "nope"})
        assert res.status_code == 401
        records = [r for r in caplog.records if r.name == "staffing.access"]
        assert len(records) == 1
        event = records[0].event
        assert event["status_code"] == 401
        assert event["request_body"]["password"] == "***"
        assert event["error"] == "Invalid email or password"

    async def test_health_not_logged(self, client: AsyncClient, caplog):
        with caplog.at_level(logging.INFO, logger="staffing.access"):
            res = await client.get("/health")
        assert res.json() == {"status": "ok"}
        assert not [r for r in caplog.records if r.name == "staffing.access"]


class TestAdminBootstrap:
    """초기 관리자 생성."""

    async def test_creates_admin_once(self, db, monkeypatch):
        from staffing.config import settings
        from staffing.seed import ensure_admin

        monkeypatch.setattr(settings, "ADMIN_EMAIL", "root@staffing.io")
        monkeypatch.setattr(settings, "ADMIN_PASSWORD", "root-pass-1")

        admin = await ensure_admin(db)
        await db.commit()
        assert admin is not None
        assert admin.role == "Admin"
        assert admin.is_available is True

        assert await ensure_admin(db) is None

    async def test_skipped_without_credentials(self, db, monkeypatch):
        from staffing.config import settings
        from staffing.seed import ensure_admin

        monkeypatch.setattr(settings, "ADMIN_EMAIL", "")
        assert await ensure_admin(db) is None
