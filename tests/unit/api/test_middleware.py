"""Tests for REST API middleware."""

from collections.abc import Callable
from typing import Any

from fastapi import FastAPI, Request
from starlette.testclient import TestClient

from mcplink.api.middleware import RequestIDMiddleware, get_request_id
from mcplink.logging import MCPLinkLogger


def create_test_app(logger: MCPLinkLogger | None = None) -> FastAPI:
    """Create a minimal test app."""
    app = FastAPI()

    @app.get("/test")
    async def test_endpoint(request: Request) -> dict:
        return {
            "request_id": getattr(request.state, "request_id", None),
            "context_id": get_request_id(),
        }

    app.add_middleware(RequestIDMiddleware, logger=logger)
    return app


class TestRequestIDMiddleware:
    """Tests for RequestIDMiddleware."""

    def test_adds_request_id(self) -> None:
        """Test that middleware adds request ID to request state."""
        client = TestClient(create_test_app())

        response = client.get("/test")
        assert response.status_code == 200
        data = response.json()
        assert data["request_id"]
        assert data["context_id"] == data["request_id"]

    def test_adds_request_id_header(self) -> None:
        """Test that middleware adds X-Request-ID header to response."""
        client = TestClient(create_test_app())

        response = client.get("/test")
        assert response.headers["X-Request-ID"] == response.json()["request_id"]

    def test_uses_provided_request_id(self) -> None:
        """Test that middleware uses provided X-Request-ID header."""
        client = TestClient(create_test_app())

        custom_id = "custom-request-id-123"
        response = client.get("/test", headers={"X-Request-ID": custom_id})
        assert response.headers["X-Request-ID"] == custom_id
        assert response.json()["request_id"] == custom_id

    def test_unique_ids(self) -> None:
        """Test that each request gets its own ID."""
        client = TestClient(create_test_app())

        first = client.get("/test").headers["X-Request-ID"]
        second = client.get("/test").headers["X-Request-ID"]
        assert first != second

    def test_context_cleared_after_request(self) -> None:
        client = TestClient(create_test_app())
        client.get("/test")
        assert get_request_id() is None

    def test_logs_request(
        self,
        json_logger: MCPLinkLogger,
        log_records: Callable[[], list[dict[str, Any]]],
    ) -> None:
        """Test that each request is logged at debug level with its ID."""
        client = TestClient(create_test_app(json_logger))

        client.get("/test", headers={"X-Request-ID": "abc"})

        records = [r for r in log_records() if r["component"] == "api"]
        assert len(records) == 1
        assert records[0]["level"] == "DEBUG"
        assert records[0]["message"] == "GET /test -> 200"
        assert records[0]["request_id"] == "abc"
        assert records[0]["duration_ms"] >= 0
