"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API call to Axiom: method, path, params,
masked request body, status code, duration, error reason and the calling
user/profile taken from the bearer token. Base64 image payloads (AI menu
extraction) are replaced by a short marker.
"""

import json
import logging
import re
import time
from typing import Any

import jwt
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from nightbase.config import settings
from nightbase.utils.jwt import decode_token

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request/response bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_key|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

_DATA_URL_PREFIX = "data:"


def _mask(data: Any, depth: int = 0) -> Any:
    """민감 필드 마스킹, data URL 축약 — Mask secrets and shorten data URLs."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else _mask(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask(item, depth + 1) for item in data[:20]]
    if isinstance(data, str):
        if data.startswith(_DATA_URL_PREFIX):
            return f"(data url, {len(data)} chars)"
        if len(data) > 2000:
            return data[:2000] + "...(truncated)"
    return data


def _actor(request: Request) -> dict[str, str]:
    """Bearer 토큰에서 사용자/프로필 ID 추출 — Best effort, never raises."""
    header: str = request.headers.get("authorization", "")
    if not header.lower().startswith("bearer "):
        return {}
    try:
        payload: dict[str, Any] = decode_token(header[7:])
    except jwt.PyJWTError:
        return {}
    actor: dict[str, str] = {}
    if payload.get("sub"):
        actor["user_id"] = str(payload["sub"])
    if payload.get("profile"):
        actor["profile_id"] = str(payload["profile"])
    return actor


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Passes requests straight through when Axiom is not configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body_bytes: bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return _mask(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS or not self._client:
            return await call_next(request)

        start_time = time.time()
        request_body: Any = await self._read_body(request)

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract error detail from error responses
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                try:
                    detail = json.loads(resp_body).get("detail")
                    error_detail = detail if isinstance(detail, str) else json.dumps(detail, ensure_ascii=False)
                except (json.JSONDecodeError, UnicodeDecodeError, AttributeError):
                    error_detail = resp_body.decode("utf-8", errors="replace")
                error_detail = error_detail[:500]

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            log_event: dict[str, Any] = {
                "service": settings.APP_NAME,
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
                **_actor(request),
            }
            if request.query_params:
                log_event["query_params"] = _mask(dict(request.query_params))
            if request.path_params:
                log_event["path_params"] = dict(request.path_params)
            if request_body is not None:
                log_event["request_body"] = request_body
            if error_detail:
                log_event["error"] = error_detail

            try:
                self._client.ingest_events(self._dataset, [log_event])
            except Exception:
                # 로깅 실패는 요청에 영향 없음 — Log failures never fail the request
                logger.warning("Axiom ingest failed for %s %s", request.method, request.url.path, exc_info=True)

        return response
