"""
PicoClaw Errors - Exception hierarchy for the agent runtime

Provider and runtime errors are hard failures that propagate to the caller.
Tool errors are absorbed by ToolRegistry.execute() into an error ToolResult.
"""

from enum import IntEnum
from typing import Optional


class ErrorCode(IntEnum):
    """Numeric error codes, grouped by subsystem"""
    CONFIG_NOT_FOUND = 1001
    CONFIG_INVALID = 1002

    PROVIDER_NOT_FOUND = 4001
    PROVIDER_UNAVAILABLE = 4002
    PROVIDER_INVALID_RESPONSE = 4004

    TOOL_NOT_FOUND = 5001
    TOOL_EXECUTION_FAILED = 5002

    INTERNAL_ERROR = 9001
    RUNTIME_CAPACITY = 9002
    RUNTIME_SHUTDOWN_TIMEOUT = 9003


class PicoClawError(Exception):
    """Base class for all PicoClaw errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        text = f"[{int(self.code)}] {self.message}"
        if self.context:
            text += f" ({self.context})"
        return text


class ConfigError(PicoClawError):
    """Configuration file missing or invalid."""
    code = ErrorCode.CONFIG_INVALID


# ---------------------------------------------------------------------------
# Provider errors
# ---------------------------------------------------------------------------

class ProviderError(PicoClawError):
    """Base class for LLM provider failures."""
    code = ErrorCode.PROVIDER_UNAVAILABLE


class ProviderUnsupportedError(ProviderError):
    """Raised when no adapter exists for the configured provider name."""
    code = ErrorCode.PROVIDER_NOT_FOUND

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class ProviderHTTPError(ProviderError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str, provider: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error {status_code}: {body}", context=provider)


class ProviderRequestError(ProviderError):
    """The HTTP request never produced a response (connect, timeout, ...)."""


class ProviderMalformedResponseError(ProviderError):
    """Provider returned a payload without usable content or tool calls."""
    code = ErrorCode.PROVIDER_INVALID_RESPONSE


# ---------------------------------------------------------------------------
# Tool errors (absorbed into ToolResult at the registry boundary)
# ---------------------------------------------------------------------------

class ToolNotFoundError(PicoClawError):
    code = ErrorCode.TOOL_NOT_FOUND

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tool '{name}' not found")

    def __str__(self) -> str:
        return self.message


class ToolExecutionError(PicoClawError):
    """Raised by tool implementations to report a failure message to the LLM."""
    code = ErrorCode.TOOL_EXECUTION_FAILED

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Runtime errors
# ---------------------------------------------------------------------------

class RuntimeCapacityError(PicoClawError):
    """TaskPool admission control rejected a spawn."""
    code = ErrorCode.RUNTIME_CAPACITY

    def __init__(self, active: int, max_concurrent: int):
        self.active = active
        self.max_concurrent = max_concurrent
        super().__init__(f"Task pool at capacity: {active}/{max_concurrent}")


class ShutdownTimeoutError(PicoClawError):
    """Graceful shutdown gave up with tasks still running. Advisory."""
    code = ErrorCode.RUNTIME_SHUTDOWN_TIMEOUT

    def __init__(self, remaining: int):
        self.remaining = remaining
        super().__init__(f"Graceful shutdown timeout: {remaining} tasks still active")
