"""Domain-specific exceptions — framework-independent.

Two families matter to the HTTP layer: ``UserError`` (client-caused, 400)
and every other ``ApplicationError`` (500 with message and data). Anything
outside this hierarchy is treated as an unclassified failure.
"""

from typing import Any


class ApplicationError(Exception):
    """Recognised application failure carrying a message and structured data."""

    def __init__(self, message: str, data: dict[str, Any] | None = None):
        self.message = message
        self.data = data or {}
        super().__init__(message)


class UserError(ApplicationError):
    """Raised when the caller sent a missing or malformed request."""


class ToolNotFoundError(ApplicationError):
    """Raised when the model asks for a function that is not registered."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(
            f"Function '{tool_name}' is not available",
            data={"function": tool_name},
        )


class FunctionArgumentsError(ApplicationError):
    """Raised when accumulated function-call arguments are not a JSON object."""

    def __init__(self, tool_name: str, arguments: str, reason: str):
        self.tool_name = tool_name
        self.arguments = arguments
        super().__init__(
            f"Invalid arguments for function '{tool_name}': {reason}",
            data={"function": tool_name, "arguments": arguments},
        )


class ToolExecutionError(ApplicationError):
    """Raised when a registered tool fails while being invoked."""

    def __init__(self, tool_name: str, error: Exception):
        self.tool_name = tool_name
        self.error = error
        super().__init__(
            f"Function '{tool_name}' failed",
            data={"function": tool_name, "error_type": type(error).__name__},
        )


class MaxTurnsExceededError(ApplicationError):
    """Raised when the conversation keeps requesting functions past the turn limit."""

    def __init__(self, max_turns: int):
        self.max_turns = max_turns
        super().__init__(
            "Maximum function-call turns exceeded",
            data={"max_turns": max_turns},
        )


class ChatProviderError(ApplicationError):
    """Raised when a chat provider returns an error.

    The upstream detail stays on ``detail`` for logging; the public message
    is generic so provider internals are not echoed to the caller.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.detail = message
        super().__init__(
            "Chat completion request failed",
            data={"provider": provider, "status_code": status_code},
        )

    def __str__(self) -> str:
        return f"[{self.provider}] {self.status_code}: {self.detail}"
