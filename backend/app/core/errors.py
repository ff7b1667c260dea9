from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised at startup when the process cannot be configured. Never mapped to a response."""


class AppError(Exception):
    status_code = 500
    default_detail = "internal_error"
    headers: dict[str, str] | None = None

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(AppError):
    status_code = 404
    default_detail = "Not found"


class Unauthorized(AppError):
    status_code = 401
    default_detail = "Unauthorized"
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(AppError):
    status_code = 403
    default_detail = "The user is not authorized to access this resource"


class Conflict(AppError):
    status_code = 409
    default_detail = "Conflict"


class ValidationFailed(AppError):
    status_code = 400
    default_detail = "Bad Request, validation failed"
