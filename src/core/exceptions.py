"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization errors (403)
    ACCESS_DENIED = "ACCESS_DENIED"

    # Not found errors (404)
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    HORSE_NOT_FOUND = "HORSE_NOT_FOUND"
    PROFESSIONAL_NOT_FOUND = "PROFESSIONAL_NOT_FOUND"
    ADDRESS_NOT_FOUND = "ADDRESS_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    UNIQUE_VIOLATION = "UNIQUE_VIOLATION"
    DUPLICATE_PROFESSIONAL = "DUPLICATE_PROFESSIONAL"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Gateway errors (502/503)
    GATEWAY_ERROR = "GATEWAY_ERROR"
    PROCEDURE_UNAVAILABLE = "PROCEDURE_UNAVAILABLE"
    NETWORK_ERROR = "NETWORK_ERROR"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AccessDeniedError(AppException):
    """The actor is not allowed to perform the operation.

    Raised by client-side ownership checks and by the gateway's row-level
    security. Never retried.
    """

    def __init__(self, message: str = "Insufficient rights", details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.ACCESS_DENIED,
            message=message,
            status_code=403,
            details=details,
        )


class ValidationError(AppException):
    """Input rejected before (or by) the write."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )
        self.field = field


class RecordNotFoundError(AppException):
    """A single-row fetch matched zero rows."""

    def __init__(
        self,
        entity: str = "record",
        record_id: str = "",
        error_code: ErrorCode = ErrorCode.RECORD_NOT_FOUND,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=f"{entity.capitalize()} not found: {record_id}" if record_id else f"{entity.capitalize()} not found",
            status_code=404,
            details={f"{entity}_id": record_id} if record_id else None,
        )


class HorseNotFoundError(RecordNotFoundError):
    """Horse not found."""

    def __init__(self, horse_id: str) -> None:
        super().__init__("horse", horse_id, ErrorCode.HORSE_NOT_FOUND)


class ProfessionalNotFoundError(RecordNotFoundError):
    """Professional not found."""

    def __init__(self, professional_id: str) -> None:
        super().__init__("professional", professional_id, ErrorCode.PROFESSIONAL_NOT_FOUND)


class AddressNotFoundError(RecordNotFoundError):
    """Address not found."""

    def __init__(self, address_id: str) -> None:
        super().__init__("address", address_id, ErrorCode.ADDRESS_NOT_FOUND)


class ProfileNotFoundError(RecordNotFoundError):
    """Profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__("profile", user_id, ErrorCode.PROFILE_NOT_FOUND)


class UniqueViolationError(AppException):
    """The gateway rejected an insert because of a unique constraint."""

    def __init__(self, message: str = "Record already exists", constraint: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.UNIQUE_VIOLATION,
            message=message,
            status_code=409,
            details={"constraint": constraint} if constraint else None,
        )
        self.constraint = constraint


class DuplicateProfessionalError(AppException):
    """A professional with the same email or phone exists but cannot be read back."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_PROFESSIONAL,
            message="This professional already exists (same email or phone)",
            status_code=409,
        )


class GatewayError(AppException):
    """Unexpected error reported by the remote data gateway."""

    def __init__(
        self,
        message: str,
        gateway_code: str | None = None,
        http_status: int | None = None,
        error_code: ErrorCode = ErrorCode.GATEWAY_ERROR,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=502,
            details={"gateway_code": gateway_code, "http_status": http_status},
        )
        self.gateway_code = gateway_code
        self.http_status = http_status


class ProcedureUnavailableError(GatewayError):
    """A remote procedure is not exposed by the gateway."""

    def __init__(self, function: str) -> None:
        super().__init__(
            message=f"Remote procedure unavailable: {function}",
            gateway_code="PGRST202",
            http_status=404,
            error_code=ErrorCode.PROCEDURE_UNAVAILABLE,
        )
        self.function = function


class NetworkError(AppException):
    """The gateway could not be reached."""

    def __init__(self, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.NETWORK_ERROR,
            message=message,
            status_code=503,
        )
