from __future__ import annotations

from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-Id"
MAX_REQUEST_ID_LENGTH = 128

_current_request_id: ContextVar[str | None] = ContextVar("rrs_request_id", default=None)


def get_request_id() -> str | None:
    return _current_request_id.get()


def _caller_request_id(request: Request) -> str | None:
    supplied = request.headers.get(REQUEST_ID_HEADER, "").strip()
    if not supplied or len(supplied) > MAX_REQUEST_ID_LENGTH:
        return None
    return supplied


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Binds a request id for logs, error bodies and events; echoes it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _caller_request_id(request) or f"req_{uuid4().hex}"
        request.state.request_id = request_id
        token = _current_request_id.set(request_id)
        try:
            response = await call_next(request)
        finally:
            _current_request_id.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
