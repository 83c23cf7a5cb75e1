"""Error factory for creating MCPLinkErrors from any exception type."""

from typing import Any

from .errors import MCPLinkError
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates MCPLinkErrors from codes or from arbitrary exceptions."""

    def __init__(self, registry: ErrorRegistry | None = None):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
        """
        self.registry = registry or ErrorRegistry()

    def from_exception(
        self,
        error: Exception,
        server_id: str | None = None,
        default_code: str = "INTERNAL_ERROR",
        **context: Any,
    ) -> MCPLinkError:
        """Convert any exception to MCPLinkError.

        MCPLinkErrors pass through. Everything else, timeouts included, maps
        to ``default_code`` with the exception text as detail; connect
        timeouts are raised as CONNECT_TIMEOUT by the connection itself.

        Args:
            error: Exception to convert
            server_id: Optional server identifier
            default_code: Code used for unrecognized exceptions
            **context: Additional context variables

        Returns:
            MCPLinkError instance
        """
        if isinstance(error, MCPLinkError):
            if server_id and not error.server_id:
                error.server_id = server_id
            return error

        merged: dict[str, Any] = {"server_id": server_id, **context}
        merged["detail"] = describe_exception(error)
        return self.registry.create(default_code, merged)

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> MCPLinkError:
        """Create MCPLinkError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            **kwargs: Additional context variables

        Returns:
            MCPLinkError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context)


def describe_exception(error: BaseException) -> str:
    """Human-readable description of an exception, never empty."""
    if isinstance(error, BaseExceptionGroup) and error.exceptions:
        # anyio task groups wrap transport failures
        return describe_exception(error.exceptions[0])
    text = str(error)
    return text if text else type(error).__name__


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> MCPLinkError:
    """Convenience function to create error.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        MCPLinkError instance
    """
    return get_error_factory().create(code, context)
