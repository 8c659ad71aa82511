"""
Exception hierarchy for llmkit.

Every error the library raises derives from :class:`LLMKitError`:

- ``ValidationError``: bad caller input, detected before any network call
- ``APIError``: the vendor rejected or failed the call
- ``ToolNotFoundError`` / ``MaxIterationsExceededError``: fatal to one
  ``Agent.chat`` call
- ``CancelledError``: the caller's cancellation event was set
- ``ToolValidationError``: a tool definition is malformed
"""

from __future__ import annotations

from typing import Iterable


class LLMKitError(Exception):
    """Base exception for all llmkit errors."""

    pass


class ValidationError(LLMKitError):
    """Raised when caller input is invalid. Never involves the network."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"validation: {field} - {message}")


class APIError(LLMKitError):
    """
    Raised when a provider rejects or fails a request.

    Attributes:
        provider: Provider name ("anthropic", "openai", ...).
        status_code: HTTP status returned by the vendor.
        type: Vendor-reported error type string (may be empty).
        message: Human-readable message; falls back to the raw response body.
        retryable: True for 429 and 5xx responses. The library never retries
            by itself; this is a hint for the caller.
        retry_after: Seconds from the ``Retry-After`` header, 0 if absent.
    """

    def __init__(
        self,
        provider: str,
        status_code: int,
        message: str,
        *,
        type: str = "",
        retryable: bool = False,
        retry_after: float = 0,
    ):
        self.provider = provider
        self.status_code = status_code
        self.type = type
        self.message = message
        self.retryable = retryable
        self.retry_after = retry_after
        super().__init__(f"{provider}: {message} ({status_code})")


class ToolNotFoundError(LLMKitError):
    """Raised when the model requests a tool that is not registered."""

    def __init__(self, tool_name: str, available: Iterable[str] = ()):
        self.tool_name = tool_name
        self.available = list(available)
        message = f"unknown tool: {tool_name}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class MaxIterationsExceededError(LLMKitError):
    """Raised when the tool loop hits its iteration ceiling without an answer."""

    def __init__(self, max_iterations: int):
        self.max_iterations = max_iterations
        super().__init__(f"exceeded max tool iterations ({max_iterations})")


class CancelledError(LLMKitError):
    """Raised when the caller's cancellation event is set mid-operation."""


class ToolValidationError(LLMKitError):
    """Raised when a tool definition is invalid."""

    def __init__(self, tool_name: str, param_name: str, issue: str, suggestion: str = ""):
        self.tool_name = tool_name
        self.param_name = param_name
        self.issue = issue
        self.suggestion = suggestion

        message = f"\n{'='*60}\n"
        message += f"❌ Tool Validation Error: '{tool_name}'\n"
        message += f"{'='*60}\n\n"
        message += f"Parameter: {param_name}\n"
        message += f"Issue: {issue}\n"
        if suggestion:
            message += f"\n💡 Suggestion: {suggestion}\n"
        message += f"\n{'='*60}\n"

        super().__init__(message)


__all__ = [
    "LLMKitError",
    "ValidationError",
    "APIError",
    "ToolNotFoundError",
    "MaxIterationsExceededError",
    "CancelledError",
    "ToolValidationError",
]
