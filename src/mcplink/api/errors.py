"""REST API error handlers.

Every error response has the body ``{"error": {...}}`` and carries the
request ID both in the body and in the ``X-Request-ID`` header.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mcplink.api.middleware.request_id import REQUEST_ID_HEADER, get_request_id
from mcplink.errors import MCPLinkError, get_error_factory


def _request_id(request: Request) -> str | None:
    # Handlers for unhandled exceptions run outside the middleware's context
    return getattr(request.state, "request_id", None) or get_request_id()


def _error_response(request: Request, status_code: int, error: dict[str, Any]) -> JSONResponse:
    request_id = _request_id(request)
    error["request_id"] = request_id
    headers = {REQUEST_ID_HEADER: request_id} if request_id else None
    return JSONResponse(status_code=status_code, content={"error": error}, headers=headers)


def setup_error_handlers(app: FastAPI) -> None:
    """Configure error handlers for the FastAPI app."""

    @app.exception_handler(MCPLinkError)
    async def mcplink_error_handler(request: Request, exc: MCPLinkError) -> JSONResponse:
        """Handle mcplink errors with their own HTTP status."""
        logger = request.app.state.logger
        if logger and exc.http_status >= 500:
            logger.error("api", f"{request.method} {request.url.path} failed: {exc}", code=exc.code)
        return _error_response(request, exc.http_status, exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if isinstance(exc.detail, dict):
            return _error_response(request, exc.status_code, dict(exc.detail))
        return _error_response(
            request,
            exc.status_code,
            {
                "code": f"HTTP_{exc.status_code}",
                "category": "SYSTEM",
                "message": str(exc.detail),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed or incomplete request bodies are a 400."""
        errors = exc.errors()
        first_error = errors[0] if errors else {"msg": "Validation error"}
        location = ".".join(str(part) for part in first_error.get("loc", ()))
        message = first_error.get("msg", "Validation error")
        return _error_response(
            request,
            400,
            {
                "code": "VALIDATION_ERROR",
                "category": "CONFIG",
                "message": f"{location}: {message}" if location else message,
                "detail": str(errors),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Remote protocol failures and anything unexpected."""
        error = get_error_factory().from_exception(exc)
        logger = request.app.state.logger
        if logger:
            logger.error("api", f"{request.method} {request.url.path} failed: {error}")
        return _error_response(request, error.http_status, error.to_dict())
