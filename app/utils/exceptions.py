from fastapi import status


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES: machine-readable constants for client switch/case
# ═══════════════════════════════════════════════════════════════════════════════
class ErrorCode:
    VALIDATION_ERROR        = "VALIDATION_ERROR"
    REQUEST_INVALID         = "REQUEST_INVALID"
    UNAUTHORIZED            = "UNAUTHORIZED"
    TOKEN_EXPIRED           = "TOKEN_EXPIRED"
    FORBIDDEN               = "FORBIDDEN"
    NOT_FOUND               = "NOT_FOUND"
    DUPLICATE_ENTRY         = "DUPLICATE_ENTRY"
    TRANSFER_CONFLICT       = "TRANSFER_CONFLICT"
    ACCOUNT_INACTIVE        = "ACCOUNT_INACTIVE"
    INTERNAL_SERVER_ERROR   = "INTERNAL_SERVER_ERROR"


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════
class AppException(Exception):
    """
    Base exception for all application-level errors.
    Carries a machine-readable error_code and the HTTP status the error
    handler should answer with. Services raise these without knowing about
    the transport; app/middleware/error_handler.py renders them.
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str,
        details: list | None = None,
        field: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message     = message
        self.error_code  = error_code
        self.details     = details
        self.field       = field


# ═══════════════════════════════════════════════════════════════════════════════
# DOMAIN EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class NotFoundException(AppException):
    def __init__(self, resource: str = "Resource"):
        super().__init__(status.HTTP_404_NOT_FOUND, f"{resource} not found", ErrorCode.NOT_FOUND)


class ValidationException(AppException):
    """A business rule was violated. The message is shown to the caller as-is."""
    def __init__(self, message: str, field: str | None = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, message, ErrorCode.VALIDATION_ERROR, field=field)


class DuplicateEntryException(ValidationException):
    def __init__(self, message: str = "Record already exists", field: str | None = None):
        super().__init__(message, field=field)
        self.error_code = ErrorCode.DUPLICATE_ENTRY


class ConflictException(AppException):
    """Another transaction changed the vehicle first; the caller must re-read and retry."""
    def __init__(self, message: str = "The vehicle was modified by a concurrent transfer. Reload and retry."):
        super().__init__(status.HTTP_409_CONFLICT, message, ErrorCode.TRANSFER_CONFLICT)


# ═══════════════════════════════════════════════════════════════════════════════
# AUTHENTICATION EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class UnauthorizedException(AppException):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message, ErrorCode.UNAUTHORIZED)


class TokenExpiredException(AppException):
    def __init__(self):
        super().__init__(status.HTTP_401_UNAUTHORIZED, "Access token has expired", ErrorCode.TOKEN_EXPIRED)


class ForbiddenException(AppException):
    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(status.HTTP_403_FORBIDDEN, message, ErrorCode.FORBIDDEN)


class AccountInactiveException(AppException):
    def __init__(self):
        super().__init__(
            status.HTTP_403_FORBIDDEN,
            "Your account has been deactivated. Contact admin.",
            ErrorCode.ACCOUNT_INACTIVE,
        )
