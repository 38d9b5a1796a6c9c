"""Error taxonomy for request construction and API calls."""

from __future__ import annotations


class BuildError(ValueError):
    """Base class for errors raised by request builders and ``validate()``."""


class MissingFieldError(BuildError):
    """A required builder field was never set."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field} is required")


class ConstraintViolationError(BuildError):
    """A populated field violates a documented bound."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(reason)


class ApiError(Exception):
    """Base class for API-related errors."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiAuthError(ApiError):
    """Authentication/authorization error."""


class ApiRateLimitError(ApiError):
    """Rate limit exceeded."""


class ApiTimeoutError(ApiError):
    """Network timeout."""


class ApiServerError(ApiError):
    """5xx server error."""


class ApiClientError(ApiError):
    """4xx client-side error not covered by other errors."""


class ApiResponseParseError(ApiError):
    """Raised when a response body cannot be decoded into the expected model."""


class BatchTimeoutError(ApiError):
    """A batch did not reach a terminal status before the wait deadline."""


class FileOperationError(Exception):
    """Local file read/write failure during batch helpers."""


__all__ = [
    "ApiAuthError",
    "ApiClientError",
    "ApiError",
    "ApiRateLimitError",
    "ApiResponseParseError",
    "ApiServerError",
    "ApiTimeoutError",
    "BatchTimeoutError",
    "BuildError",
    "ConstraintViolationError",
    "FileOperationError",
    "MissingFieldError",
]
