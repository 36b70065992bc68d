"""
Custom exceptions for MiniFlix operations.

Each exception carries the HTTP status and the short error code the web layer
reports for it, so use cases can raise them without knowing about HTTP.
"""


class MiniFlixError(Exception):
    """Base exception for all MiniFlix errors."""

    status_code = 500
    error_code = "internal"

    def __init__(self, message: str | None = None, *, error_code: str | None = None) -> None:
        super().__init__(message or self.error_code)
        if error_code is not None:
            self.error_code = error_code


class Unauthenticated(MiniFlixError):
    """Raised when a request carries no valid identity."""

    status_code = 401
    error_code = "not_authenticated"


class InvalidCredentials(MiniFlixError):
    """Raised when a username/password pair does not verify."""

    status_code = 401
    error_code = "invalid"


class NotFound(MiniFlixError):
    """Raised when a media file is missing or its path escapes the media directory."""

    status_code = 404
    error_code = "not_found"


class BadRequest(MiniFlixError):
    """Raised when required request fields are missing or invalid."""

    status_code = 400
    error_code = "missing"


class UserExists(MiniFlixError):
    """Raised when registering a username that is already taken."""

    status_code = 409
    error_code = "user_exists"


class StorageUnavailable(MiniFlixError):
    """Raised when the progress database cannot be reached."""

    status_code = 503
    error_code = "storage_unavailable"
