"""Errors raised by the API layer and their response shape."""

from typing import Any


class AppError(Exception):
    """Base class for client-visible errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BadRequestError(AppError):
    """Raised when a request is missing required fields."""

    def __init__(self, message: str = "Missing required fields"):
        super().__init__(message, status_code=400)


def to_body(error: AppError) -> dict[str, Any]:
    """Error envelope: {"status": <code>, "message": <message>}."""
    return {"status": error.status_code, "message": error.message}
