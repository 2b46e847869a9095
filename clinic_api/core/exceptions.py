"""Custom application exceptions."""

from typing import Any


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        errors: list[dict[str, Any]] | None = None,
    ):
        """Initialize exception with message, status code and optional field errors."""
        self.message = message
        self.status_code = status_code
        self.errors = errors
        super().__init__(self.message)


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(
        self,
        message: str = "Bad request",
        errors: list[dict[str, Any]] | None = None,
    ):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400, errors=errors)


class UnauthorizedException(AppException):
    """Unauthorized access exception."""

    def __init__(self, message: str = "Unauthorized. Admin access required."):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class ConflictException(AppException):
    """Conflict exception."""

    def __init__(self, message: str = "Conflict"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class RateLimitException(AppException):
    """Rate limit exceeded exception."""

    def __init__(self, message: str = "Too many requests"):
        """Initialize with 429 status code."""
        super().__init__(message, status_code=429)
