"""Translation of Supabase SDK errors into application exceptions."""

import re

import structlog
from supabase import AuthError, AuthRetryableError, PostgrestAPIError, StorageException

from core.exceptions import (
    AccessDeniedError,
    AppException,
    GatewayError,
    NetworkError,
    ProcedureUnavailableError,
    RecordNotFoundError,
    UniqueViolationError,
    ValidationError,
)

logger = structlog.get_logger()

UNIQUE_VIOLATION = "23505"
NO_ROWS = "PGRST116"
VALIDATION_CODES = frozenset({"23502", "23514", "22P02", "22007", "22001"})
# Missing, invalid or expired JWT; bare HTTP statuses come back as the code
UNAUTHENTICATED_CODES = frozenset({"PGRST301", "PGRST302", "PGRST303", "401"})
FORBIDDEN_CODES = frozenset({"42501", "403"})
UNKNOWN_FUNCTION_CODES = frozenset({"PGRST202", "404"})

_CONSTRAINT = re.compile(r'constraint "([^"]+)"')


def translate_api_error(exc: PostgrestAPIError, function: str | None = None) -> AppException:
    """Map a PostgREST error onto the application exception taxonomy.

    ``function`` names the remote procedure when the request was an RPC, so
    that a missing procedure can be told apart from other 404s.
    """
    code = str(exc.code or "")
    message = exc.message or "Gateway request failed"
    logger.warning("gateway_error", gateway_code=code or None, function=function)

    if code == UNIQUE_VIOLATION:
        match = _CONSTRAINT.search(message)
        return UniqueViolationError(message, match.group(1) if match else None)
    if code in UNAUTHENTICATED_CODES:
        return AccessDeniedError("You must be logged in")
    if code in FORBIDDEN_CODES:
        return AccessDeniedError(message)
    if code == NO_ROWS:
        return RecordNotFoundError()
    if code in VALIDATION_CODES:
        return ValidationError(message)
    if function and code in UNKNOWN_FUNCTION_CODES:
        return ProcedureUnavailableError(function)
    return GatewayError(message, gateway_code=code or None)


def storage_status(exc: StorageException) -> str:
    """HTTP status reported by the Storage API, as a string."""
    status = getattr(exc, "status", None)
    if status is None and exc.args and isinstance(exc.args[0], dict):
        status = exc.args[0].get("statusCode")
    return str(status or "")


def translate_storage_error(exc: StorageException) -> AppException:
    status = storage_status(exc)
    message = getattr(exc, "message", None) or str(exc)
    logger.warning("storage_error", http_status=status or None)

    if status == "401":
        return AccessDeniedError("You must be logged in")
    if status == "403":
        return AccessDeniedError(message)
    return GatewayError(
        message,
        gateway_code=getattr(exc, "code", None),
        http_status=int(status) if status.isdigit() else None,
    )


def translate_auth_error(exc: AuthError) -> AppException:
    """Errors of the auth API that the caller does not handle itself."""
    if isinstance(exc, AuthRetryableError):
        logger.warning("auth_unreachable", error=exc.message)
        return NetworkError(f"Auth service unreachable: {exc.message}")
    status = getattr(exc, "status", None)
    logger.warning("auth_gateway_error", http_status=status)
    return GatewayError(exc.message, gateway_code=getattr(exc, "code", None), http_status=status)
