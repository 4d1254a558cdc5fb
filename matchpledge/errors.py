"""Typed failures raised by the services and mapped to responses in main.py."""


class AppError(Exception):
    """Base class. `error` is the public label; the message may carry detail."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.error)
        self.message = message or self.error


# --- 400 -------------------------------------------------------------

class InvalidRequest(AppError):
    status_code = 400
    error = "Invalid request"


class InvalidUserData(InvalidRequest):
    error = "Invalid user data"


class ImageTooLarge(InvalidRequest):
    error = "Image too large"


class InvalidImageFormat(InvalidRequest):
    error = "Invalid image format"


class NoImageProvided(InvalidRequest):
    error = "No image provided"


# --- 401 / 404 / 409 -------------------------------------------------

class Unauthorized(AppError):
    status_code = 401
    error = "Unauthorized"


class NotFound(AppError):
    status_code = 404
    error = "Not found"


class PostNotFound(NotFound):
    error = "Post not found"


class Conflict(AppError):
    status_code = 409
    error = "Conflict"


# --- 500 -------------------------------------------------------------

class StorageError(AppError):
    error = "IO error"


class CredentialError(AppError):
    error = "Credential processing error"
