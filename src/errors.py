"""Service-layer errors.

Each error carries the HTTP status the API boundary answers with; the handler
in src.main turns them into JSON responses.
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    # Field-level problems, same shape as request validation errors
    errors: list[dict[str, str]] | None = None

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"

    def __init__(self, detail: str | None = None, field: str | None = None):
        super().__init__(detail)
        if field is not None:
            self.errors = [{"field": field, "message": self.detail}]


class InvalidCredentials(AppError):
    """Wrong email/password pair, or wrong current password on profile update."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid credentials"


class InvalidToken(AppError):
    """Bearer token is expired, malformed, badly signed, or names no user."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid authentication credentials"


class NotFoundError(AppError):
    """Resource is missing or not owned by the caller."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Already exists"


class OneTimeCodeError(AppError):
    """A password-reset code could not be accepted."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid or expired code"


class CodeNotFound(OneTimeCodeError):
    default_detail = "Code not found or expired"


class CodeExpired(OneTimeCodeError):
    default_detail = "Code has expired"


class CodeAttemptsExhausted(OneTimeCodeError):
    default_detail = "Too many failed attempts. Please request a new code."


class CodeMismatch(OneTimeCodeError):
    def __init__(self, attempts_remaining: int):
        self.attempts_remaining = attempts_remaining
        super().__init__(f"Incorrect code. {attempts_remaining} attempts remaining.")
