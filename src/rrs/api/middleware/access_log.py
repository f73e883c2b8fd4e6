from __future__ import annotations

import logging
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("rrs.api.access")

HTTP_REQUESTS_TOTAL = Counter(
    "rrs_http_requests_total",
    "HTTP requests served, labelled by route template.",
    ["method", "route", "status_code"],
)
HTTP_REQUEST_SECONDS = Histogram(
    "rrs_http_request_duration_seconds",
    "HTTP request latency in seconds, labelled by route template.",
    ["method", "route"],
)


def _route_label(request: Request) -> str:
    # Route template such as /v1/reservations/{reservation_id}, never the raw path.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


def _observe(request: Request, status_code: int, started: float) -> float:
    elapsed = time.perf_counter() - started
    route = _route_label(request)
    HTTP_REQUESTS_TOTAL.labels(
        method=request.method, route=route, status_code=str(status_code)
    ).inc()
    HTTP_REQUEST_SECONDS.labels(method=request.method, route=route).observe(elapsed)
    return round(elapsed * 1000, 2)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One structured log line and one metrics sample per request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_error",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": 500,
                    "duration_ms": _observe(request, 500, started),
                },
            )
            raise

        logger.info(
            "request_complete",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": _observe(request, response.status_code, started),
            },
        )
        return response
