# app/core/errors.py
"""
Application error taxonomy.

Every error raised by the services layer derives from AppError and carries the
HTTP status, a stable machine-readable code and a client-safe message. The
handlers registered in app.main turn them into the common error envelope:

    {"success": false, "error": {"code": ..., "message": ...}}
"""
from typing import Optional


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    code: str = "SERVER_ERROR"
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(AppError):
    """
    Malformed or missing input, detected before any side effect.

    `fields` is a list of {"field": ..., "message": ...} entries.
    """

    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Invalid request"

    def __init__(self, fields: list[dict], message: Optional[str] = None):
        super().__init__(message)
        self.fields = fields

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["fields"] = self.fields
        return data


class DuplicateEmail(AppError):
    status_code = 400
    code = "DUPLICATE_EMAIL"
    message = "User already exists"


class InvalidLogin(AppError):
    status_code = 401
    code = "INVALID_CREDENTIALS"
    message = "Invalid credentials"


class Unauthorized(AppError):
    # Single externally visible outcome for every auth failure
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Please authenticate."


class MissingCredential(Unauthorized):
    pass


class InvalidCredential(Unauthorized):
    pass


class NotFound(AppError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Not found"


class Conflict(AppError):
    status_code = 409
    code = "CONFLICT"
    message = "The resource was modified concurrently"


class UpstreamError(AppError):
    """The assistant provider call failed or returned a non-success status."""

    status_code = 502
    code = "UPSTREAM_ERROR"
    message = "Assistant provider request failed"

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class Inconsistency(AppError):
    """
    Remote and local state diverged (e.g. local write failed after the
    provider accepted a create). The client only sees a generic 500.
    """

    status_code = 500
    code = "SERVER_ERROR"
    message = "Server error"

    def __init__(self, detail: str):
        super().__init__()
        self.detail = detail

    def __str__(self) -> str:
        return self.detail
