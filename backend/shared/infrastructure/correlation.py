"""
Request correlation IDs.

Each request gets an ID, taken from ``X-Request-ID`` when the client sent a
usable one and generated otherwise. It is echoed in the response header and
stamped on every log record emitted while the request is handled.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs end up in logs; accept only short token-like values
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value: str | None) -> str:
    if header_value and _VALID_REQUEST_ID.match(header_value):
        return header_value
    return uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Bind the request ID to the context for the duration of the request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        token = request_id_var.set(request_id)
        try:
            request.state.request_id = request_id
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            request_id_var.reset(token)


class CorrelationIdFilter:
    """Logging filter that sets ``record.request_id`` ("-" outside a request)."""

    def filter(self, record) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True
