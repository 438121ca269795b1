"""
Application Errors

Services raise these instead of FastAPI's HTTPException so the business
logic stays usable outside a request (seed scripts, tests). The exception
handlers registered in main.py turn every AppError into the standard
response envelope:

    {"success": false, "data": null, "error": "<message>", "message": null}

Status mapping:
- InvalidInputError  -> 400  malformed or missing input
- UnauthorizedError  -> 401  missing/invalid token, bad credentials
- ForbiddenError     -> 403  authenticated but not the owner
- NotFoundError      -> 404  absent, or not owned by the caller
- ConflictError      -> 409  duplicate account, list name, or membership
- UpstreamError      -> 500  the external book catalog failed
"""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map to an HTTP status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class UpstreamError(AppError):
    """The external book catalog returned an error or could not be reached."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Book catalog unavailable"
