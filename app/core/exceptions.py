"""Error taxonomy for the laundry backend.

Services raise these exceptions; the HTTP layer turns each ``ErrorCode`` into a
status code (see ``app.api.errors``). Nothing in here knows about HTTP.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable codes returned to clients in ``data.error_code``."""

    # General
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"
    FORBIDDEN_ACCESS = "FORBIDDEN_ACCESS"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    DUPLICATE_DATA = "DUPLICATE_DATA"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    # Authentication
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"


class LaundryException(Exception):
    """Base exception for the laundry backend."""

    error_code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None, errors=None):
        self.detail = detail or self.default_detail
        self.errors = errors
        super().__init__(self.detail)


# Authentication
class InvalidCredentialsError(LaundryException):
    """Unknown username or wrong password. The two are never distinguished."""

    error_code = ErrorCode.INVALID_CREDENTIALS
    default_detail = "Invalid username or password"


class AccountInactiveError(LaundryException):
    error_code = ErrorCode.ACCOUNT_INACTIVE
    default_detail = "Your account is inactive"


class InvalidTokenError(LaundryException):
    """Raised for refresh tokens that are unknown and access tokens that fail validation."""

    error_code = ErrorCode.INVALID_TOKEN
    default_detail = "Invalid or revoked token"


class MalformedTokenError(InvalidTokenError):
    default_detail = "Malformed token"


class BadSignatureError(InvalidTokenError):
    default_detail = "Token signature is invalid"


class AccessTokenExpiredError(InvalidTokenError):
    default_detail = "Token has expired"


class TokenExpiredError(LaundryException):
    """Refresh token is past its expiry; the client must log in again."""

    error_code = ErrorCode.TOKEN_EXPIRED
    default_detail = "Session expired, please login again"


class UserNotFoundError(LaundryException):
    error_code = ErrorCode.USER_NOT_FOUND
    default_detail = "User account not found"


class UnauthorizedError(LaundryException):
    """Missing credentials, or an attempt to act on another user's session."""

    error_code = ErrorCode.UNAUTHORIZED_ACCESS
    default_detail = "Unauthorized"


class TokenRevokedError(UnauthorizedError):
    default_detail = "Token has been logged out"


class ForbiddenError(LaundryException):
    error_code = ErrorCode.FORBIDDEN_ACCESS
    default_detail = "You do not have permission to perform this action"


# Resources
class NotFoundError(LaundryException):
    error_code = ErrorCode.RESOURCE_NOT_FOUND

    def __init__(self, resource: str = "Resource", detail: str | None = None):
        super().__init__(detail or f"{resource} not found")


class DuplicateError(LaundryException):
    error_code = ErrorCode.DUPLICATE_DATA
    default_detail = "User data already exists"


class ValidationError(LaundryException):
    error_code = ErrorCode.VALIDATION_ERROR
    default_detail = "Invalid input"


# Server
class StorageError(LaundryException):
    """Persistence failure. The detail is generic; the cause is logged, not returned."""

    error_code = ErrorCode.INTERNAL_SERVER_ERROR
    default_detail = "An unexpected error occurred"
