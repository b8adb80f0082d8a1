"""Request-scoped middleware."""
from __future__ import annotations

import re
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from brightlight.core.context import request_id_ctx_var

REQUEST_ID_HEADER = "X-Request-Id"

# Inbound ids end up in logs and trace metadata.
_ACCEPTED_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(inbound: str | None) -> str:
    """Reuse a well-formed caller id, otherwise mint a fresh one."""
    if inbound and _ACCEPTED_REQUEST_ID.match(inbound):
        return inbound
    return uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id to request.state and the logging context, and echo it back."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        token = request_id_ctx_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx_var.reset(token)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
