"""
Custom exceptions and error handlers for consistent error responses.

Provides standardized error codes and global exception handlers.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import Any, Dict, Iterable, Optional
from valet_backend.app.core.logging_config import get_logger

logger = get_logger(__name__)


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, error_code: str, status_code: int = 500, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


# 400

class InvalidInputError(AppException):
    """Raised when request input is missing or malformed."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


# 401

class AuthenticationError(AppException):
    """Raised for authentication failures."""

    def __init__(self, message: str = "Authentication failed", error_code: str = "ERR_AUTH_001"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_401_UNAUTHORIZED
        )


class InvalidCredentialsError(AuthenticationError):
    def __init__(self):
        super().__init__(message="Invalid credentials.", error_code="ERR_AUTH_001")


class InvalidTokenError(AuthenticationError):
    def __init__(self, message: str = "Invalid token."):
        super().__init__(message=message, error_code="ERR_AUTH_002")


class TokenExpiredError(AuthenticationError):
    def __init__(self):
        super().__init__(message="Token expired.", error_code="ERR_AUTH_003")


class PrincipalInactiveError(AuthenticationError):
    """Token is valid but its principal was disabled or removed after issuance."""

    def __init__(self):
        super().__init__(message="Invalid token. User not found or inactive.", error_code="ERR_AUTH_004")


# 403

class AuthorizationError(AppException):
    """Raised when user doesn't have permission to perform an action."""

    def __init__(self, message: str = "Insufficient permissions", error_code: str = "ERR_PERM_001", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class RoleNotAllowedError(AuthorizationError):
    """Raised when the principal's role is not in the endpoint's whitelist."""

    def __init__(self, allowed_roles: Iterable[str]):
        names = [getattr(role, "value", role) for role in allowed_roles]
        super().__init__(
            message=f"Access denied. Required role: {' or '.join(names)}",
            error_code="ERR_PERM_001",
            details={"allowed_roles": names}
        )


class LocationNotAssignedError(AuthorizationError):
    """Raised when a referenced location is outside the caller's scope."""

    def __init__(self, location_id: Optional[str] = None, no_locations: bool = False):
        if no_locations:
            message = "No locations assigned to this user."
        else:
            message = "Access denied. Location not assigned to this user."
        super().__init__(
            message=message,
            error_code="ERR_PERM_002",
            details={"location_id": location_id}
        )


class DriverLoginNotAllowedError(AuthorizationError):
    def __init__(self):
        super().__init__(
            message="Driver login is available only through mobile app.",
            error_code="ERR_PERM_003"
        )


# 404

class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None, message: str = None):
        if message is None:
            message = f"{resource} not found."
            if resource_id:
                message = f"{resource} with ID {resource_id} not found."
        super().__init__(
            message=message,
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id}
        )


# 409

class ConflictError(AppException):
    """Raised when a write collides with an existing identifier, email or phone."""

    def __init__(self, message: str, error_code: str = "ERR_CONFLICT_001", details: Dict[str, Any] = None):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )


class DuplicateIdentifierError(ConflictError):
    """Generated identifier kept colliding after all retry attempts."""

    def __init__(self, message: str, identifier: Optional[str] = None, attempts: int = 1):
        super().__init__(
            message=message,
            error_code="ERR_CONFLICT_002",
            details={"identifier": identifier, "attempts": attempts, "retryable": True}
        )


class IdentifierSpaceExhaustedError(ConflictError):
    """The yearly sequence would overflow its fixed zero-padded width."""

    def __init__(self, scope: str, year_suffix: str, width: int):
        super().__init__(
            message=f"{scope} ID sequence exhausted for year {year_suffix}.",
            error_code="ERR_CONFLICT_003",
            details={"scope": scope, "year": year_suffix, "width": width}
        )


# 500

class InternalError(AppException):
    def __init__(self, message: str = "An internal server error occurred"):
        super().__init__(
            message=message,
            error_code="ERR_INTERNAL_SERVER",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


# Global Exception Handlers

def _error_body(error_code: str, message: str, details: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "success": False,
        "error_code": error_code,
        "message": message,
        "details": details
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_code, exc.message, exc.details),
        headers=headers
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    # Map status code to error code
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        409: "ERR_CONFLICT",
        500: "ERR_INTERNAL_SERVER"
    }

    error_code = error_code_map.get(exc.status_code, "ERR_UNKNOWN")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(error_code, exc.detail, {}),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors (reported as 400)."""
    errors = exc.errors()
    message = "Validation error"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid value for {field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("ERR_VALIDATION", message, {"errors": [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors
        ]})
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("ERR_INTERNAL_SERVER", "An internal server error occurred", {})
    )
