"""요청 로깅 미들웨어: 액세스 로그 및 Axiom 전송.

Request logging middleware. Every request produces one structured event
(method, path, status, duration, masked body, error reason). The event is
always written to the ``staffing.access`` logger and, when Axiom is
configured, shipped to the Axiom dataset as well.
Sensitive fields (password, token, secret) are masked before logging.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from staffing.config import settings

access_logger = logging.getLogger("staffing.access")

# 마스킹 대상 필드 패턴: Fields to mask in request bodies and query strings
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_key|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로: Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_MAX_ERROR_LEN = 500


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 재귀 마스킹: Recursively mask sensitive keys in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


async def _read_json_body(request: Request) -> Any:
    """JSON 요청 본문을 읽어 마스킹합니다. 업로드 등 비 JSON 본문은 표시만 합니다."""
    content_type: str = request.headers.get("content-type", "")
    if not content_type.startswith("application/json"):
        return "(non-json body)" if content_type else None
    body: bytes = await request.body()
    if not body:
        return None
    try:
        return mask_sensitive(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(invalid json body)"


async def _extract_error(response: Response) -> tuple[Response, str]:
    """에러 응답 본문에서 사유를 꺼내고 소비한 본문으로 응답을 다시 만듭니다.

    Pull the ``detail`` out of an error response. The body iterator is
    consumed, so a new response carrying the same bytes is returned.
    """
    chunks: list[bytes] = []
    async for chunk in response.body_iterator:
        chunks.append(chunk if isinstance(chunk, bytes) else chunk.encode("utf-8"))
    raw: bytes = b"".join(chunks)

    try:
        detail: Any = json.loads(raw).get("detail", "")
    except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
        detail = raw.decode("utf-8", errors="replace")
    error: str = detail if isinstance(detail, str) else json.dumps(detail, default=str)

    rebuilt = Response(
        content=raw,
        status_code=response.status_code,
        headers=dict(response.headers),
        media_type=response.media_type,
    )
    return rebuilt, error[:_MAX_ERROR_LEN]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청을 로깅하는 미들웨어.

    Middleware that logs every API request to the access logger and, when
    configured, to Axiom.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._dataset: str = settings.AXIOM_DATASET
        self._client: AxiomClient | None = None
        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start: float = time.perf_counter()
        event: dict[str, Any] = {"method": request.method, "path": request.url.path}
        if request.query_params:
            event["query_params"] = mask_sensitive(dict(request.query_params))
        if request.method in ("POST", "PUT", "PATCH"):
            body: Any = await _read_json_body(request)
            if body is not None:
                event["request_body"] = body

        status_code: int = 500
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            if status_code >= 400:
                response, event["error"] = await _extract_error(response)
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["status_code"] = status_code
            event["duration_ms"] = round((time.perf_counter() - start) * 1000, 2)
            self._emit(event)

        return response

    def _emit(self, event: dict[str, Any]) -> None:
        """이벤트를 액세스 로거와 Axiom으로 전송: Write the event to every sink."""
        level: int = logging.WARNING if event["status_code"] >= 500 else logging.INFO
        access_logger.log(
            level,
            "%s %s %s %.2fms",
            event["method"],
            event["path"],
            event["status_code"],
            event["duration_ms"],
            extra={"event": event},
        )
        if self._client is None:
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            # 로깅 실패가 요청 처리에 영향주지 않도록: Never break a request on log failure
            access_logger.warning("Axiom ingest failed for %s %s", event["method"], event["path"], exc_info=True)
