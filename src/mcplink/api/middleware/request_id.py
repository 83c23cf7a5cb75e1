"""Request ID middleware."""

import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from mcplink.logging.logger import MCPLinkLogger

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    """Request ID of the request being handled, if any."""
    return request_id_var.get()


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag every request with an ID and echo it in the response.

    A caller-supplied ``X-Request-ID`` is kept; otherwise a UUID4 is issued.
    """

    def __init__(self, app, logger: MCPLinkLogger | None = None):
        super().__init__(app)
        self._logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        start_time = time.monotonic()
        try:
            request.state.request_id = request_id
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            if self._logger:
                self._logger.debug(
                    "api",
                    f"{request.method} {request.url.path} -> {response.status_code}",
                    request_id=request_id,
                    duration_ms=int((time.monotonic() - start_time) * 1000),
                )
            return response
        finally:
            request_id_var.reset(token)
