"""
Custom exception hierarchy for cachecore.

All exceptions inherit from CacheError, which provides optional context
for structured error handling and logging.
"""

from __future__ import annotations

from typing import Any


class CacheError(Exception):
    """Base exception for all cachecore errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class InvalidArgumentError(CacheError, ValueError):
    """Raised when a caller passes an argument of an unsupported kind.

    Examples:
        - A non-string cache key
        - A tag containing a reserved character
        - expires_after() with something other than None, int or timedelta

    Context should include:
        - argument: Name of the offending argument
        - type: Type name of the value received
    """

    pass


class ContractViolationError(CacheError):
    """Raised when a deferred producer returns a malformed load result.

    Context should include:
        - key: The cache key being hydrated
        - reason: What was wrong with the result
    """

    pass
