from __future__ import annotations

import json
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
REQUEST_ID_HEADER = "X-Request-Id"

request_logger = logging.getLogger("marketplace.request")


def configure_logging(level: str = "INFO") -> None:
    """Service loggers share one text handler; request lines are bare JSON."""
    service_root = logging.getLogger("marketplace")
    if not service_root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        service_root.addHandler(handler)
    service_root.setLevel(level)

    if not request_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        request_logger.addHandler(handler)
    request_logger.setLevel(logging.INFO)
    request_logger.propagate = False


def _level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def _client_ip(request: Request) -> str | None:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def request_log_line(request: Request, request_id: str, status: int, duration_ms: int) -> str:
    return json.dumps(
        {
            "event": "http_request",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": status,
            "duration_ms": duration_ms,
            "tenant": request.headers.get("x-tenant-id") or request.headers.get("x-tenant"),
            "client_ip": _client_ip(request),
        },
        ensure_ascii=True,
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One JSON line per request, tagged with the tenant header and a request id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed = int((time.perf_counter() - started) * 1000)
            request_logger.exception(request_log_line(request, request_id, 500, elapsed))
            raise

        elapsed = int((time.perf_counter() - started) * 1000)
        request_logger.log(
            _level_for_status(response.status_code),
            request_log_line(request, request_id, response.status_code, elapsed),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
