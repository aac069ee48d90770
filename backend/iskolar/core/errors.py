"""
Domain error taxonomy and the FastAPI handlers that turn it into JSON.

Every error leaves the API as ``{"success": false, "message": ...}``.
Server-side failures only expose their detail outside production.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from iskolar.core.config import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again later."


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ConfigurationError(AppError):
    message = "Server is not configured"


# ─── Client errors ───

class ValidationError(AppError):
    status_code = 400
    message = "Invalid input"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class AccountNotFound(NotFoundError):
    message = "User not found"


class ConflictError(AppError):
    # Duplicate registrations are reported as 400
    status_code = 400
    message = "Conflict"


class DuplicateEmail(ConflictError):
    message = "Email already registered"


# ─── Auth errors ───

class AuthError(AppError):
    status_code = 401
    message = "Authentication required"


class InvalidCredentials(AuthError):
    status_code = 400
    message = "Invalid email or password"


class MissingToken(AuthError):
    status_code = 401
    message = "Access token required"


class InvalidToken(AuthError):
    status_code = 403
    message = "Invalid or expired token"


class PermissionDenied(AuthError):
    status_code = 403
    message = "You don't have permission to perform this action"


class OtpNotFound(AuthError):
    status_code = 400
    message = "No OTP found for this email. Please request a new one."


class OtpExpired(AuthError):
    status_code = 400
    message = "OTP has expired. Please request a new one."


class OtpMismatch(AuthError):
    status_code = 400
    message = "Invalid OTP"


class OtpNotVerified(AuthError):
    status_code = 400
    message = "OTP not verified. Please verify your OTP first."


# ─── Server errors ───

class InternalError(AppError):
    status_code = 500


class NotificationError(InternalError):
    message = "Failed to send email"


class StorageError(InternalError):
    message = "Failed to store file"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        message = exc.message if settings.is_development else GENERIC_ERROR_MESSAGE
        return _error_response(exc.status_code, message)
    return _error_response(exc.status_code, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return _error_response(400, ValidationError.message)
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    if first.get("type") == "missing":
        message = f"{field} is required" if field else "All fields are required"
    else:
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return _error_response(400, message)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = f"Error: {exc}" if settings.is_development else GENERIC_ERROR_MESSAGE
    return _error_response(500, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
