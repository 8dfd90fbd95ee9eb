# core/errors.py
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


# ========================================
# ❗ Error taxonomy
# ========================================
class AppError(Exception):
    """Base class for errors that map to a user-safe HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
    headers = None

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class WeakPassword(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Password must be at least 6 characters"


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"
    headers = {"WWW-Authenticate": "Bearer"}


class ExpiredToken(Unauthorized):
    default_message = "Token has expired"


class InvalidSignature(Unauthorized):
    default_message = "Invalid token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class DuplicateEntry(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Entry already exists"


class ConflictingSubscription(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "An active subscription already exists. Cancel it before activating a new plan."


class AlreadySeeded(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Packages already seeded"


# ========================================
# 🌐 HTTP mapping
# ========================================
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("❌ %s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=exc.headers,
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Raw driver messages stay in the logs
    logger.error("❌ Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
