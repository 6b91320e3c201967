"""
Domain errors raised by handlers, dependencies and routes.

Each error carries the HTTP status it maps to. `main.create_app` registers a
single exception handler that renders any AppError as `{"detail": message}`.
"""


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed, missing or duplicate input."""

    status_code = 422
    default_message = "The given data was invalid."


class InvalidCredentials(AppError):
    # Never say which of email/password was wrong
    status_code = 422
    default_message = "The provided credentials are incorrect."


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Unauthenticated."
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(AppError):
    status_code = 403
    default_message = "This action is unauthorized."


class NotFound(AppError):
    status_code = 404
    default_message = "Resource not found"
