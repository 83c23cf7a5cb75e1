"""Error registry for creating errors from templates."""

from typing import Any

from .errors import (
    ConfigurationError,
    ConnectFailedError,
    ConnectTimeoutError,
    ErrorCategory,
    ErrorTemplate,
    MCPLinkError,
    NotConnectedError,
    TeardownError,
)


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code.

        Args:
            code: Error code to look up

        Returns:
            ErrorTemplate if found, None otherwise
        """
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        """List all registered error codes."""
        return list(self._templates.keys())

    def create(self, code: str, context: dict[str, Any] | None = None) -> MCPLinkError:
        """Create error instance from template + context.

        Args:
            code: Error code
            context: Context variables for template interpolation

        Returns:
            Instance of the template's error class

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        message = self._interpolate(template.message_template, context)
        # An explicit detail in the context overrides the template's
        detail = context.get("detail") or self._interpolate(template.detail_template, context)
        suggestion = self._interpolate(template.suggestion_template, context)

        if message is None:
            message = f"Error {code}"

        return template.error_class(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            retryable=template.default_retryable,
            http_status=template.default_http_status,
            server_id=context.get("server_id"),
        )

    def _interpolate(self, template: str | None, context: dict[str, Any]) -> str | None:
        """Safe string interpolation.

        Returns the template unchanged when a placeholder has no value.
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except KeyError:
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # CONFIG Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.CONFIG,
            error_class=ConfigurationError,
            message_template="Invalid configuration",
            detail_template="The configuration is missing required fields or has a bad value",
            suggestion_template="Fix the server definition and try again",
            default_retryable=False,
            default_http_status=400,
        )

        # CONNECTION Errors
        self._templates["CONNECT_FAILED"] = ErrorTemplate(
            code="CONNECT_FAILED",
            category=ErrorCategory.CONNECTION,
            error_class=ConnectFailedError,
            message_template="Failed to connect to MCP server '{server_id}'",
            detail_template="The transport could not be opened or the handshake was rejected",
            suggestion_template="Check that the server command or URL is reachable, then reconnect",
            default_retryable=True,
            default_http_status=502,
        )

        self._templates["CONNECT_TIMEOUT"] = ErrorTemplate(
            code="CONNECT_TIMEOUT",
            category=ErrorCategory.CONNECTION,
            error_class=ConnectTimeoutError,
            message_template="Connecting to MCP server '{server_id}' timed out after {timeout_seconds}s",
            detail_template="timeout",
            suggestion_template="Increase the connect timeout or check if the server is stuck",
            default_retryable=True,
            default_http_status=504,
        )

        self._templates["NOT_CONNECTED"] = ErrorTemplate(
            code="NOT_CONNECTED",
            category=ErrorCategory.CONNECTION,
            error_class=NotConnectedError,
            message_template="MCP server '{server_id}' is not connected",
            detail_template="There is no live connection for this server",
            suggestion_template="Connect the server before using its tools, prompts or resources",
            default_retryable=False,
            default_http_status=409,
        )

        self._templates["TEARDOWN_FAILED"] = ErrorTemplate(
            code="TEARDOWN_FAILED",
            category=ErrorCategory.CONNECTION,
            error_class=TeardownError,
            message_template="Error while disconnecting MCP server '{server_id}'",
            detail_template="The connection was closed but teardown reported an error",
            default_retryable=False,
            default_http_status=500,
        )

        # SYSTEM Errors
        self._templates["INTERNAL_ERROR"] = ErrorTemplate(
            code="INTERNAL_ERROR",
            category=ErrorCategory.SYSTEM,
            message_template="Internal error",
            detail_template="{detail}",
            default_retryable=False,
            default_http_status=500,
        )
