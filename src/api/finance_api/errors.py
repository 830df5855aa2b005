"""API error type rendered as a structured ``{error, message}`` body."""

from __future__ import annotations


class ApiError(Exception):
    """An error with a client-facing status code and body."""

    def __init__(self, status_code: int, error: str, message: str) -> None:
        super().__init__(f"{status_code} {error}: {message}")
        self.status_code = status_code
        self.error = error
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "message": self.message}


class ValidationError(ApiError):
    """400 — the request is missing or has a malformed required field."""

    def __init__(self, error: str, message: str) -> None:
        super().__init__(400, error, message)


class InternalError(ApiError):
    """500 — an unexpected failure; the message never carries internals."""

    def __init__(self, error: str = "Internal server error", message: str = "An unexpected error occurred") -> None:
        super().__init__(500, error, message)
