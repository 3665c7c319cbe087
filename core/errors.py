from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException


class ErrorCode(str, Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_PRICING_INPUT = "INVALID_PRICING_INPUT"
    INVALID_SERVICE_CONFIGURATION = "INVALID_SERVICE_CONFIGURATION"
    GEOCODING_PROVIDER_ERROR = "GEOCODING_PROVIDER_ERROR"
    TOO_MANY_REQUESTS = "TOO_MANY_REQUESTS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class PricingError(ValueError):
    """Base class for errors raised by the pricing core.

    The core never catches these itself; the caller decides how to present them.
    """

    code: ErrorCode = ErrorCode.INVALID_PRICING_INPUT

    def __init__(self, message: str, *, field: str | None = None, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details


class InvalidInput(PricingError):
    code = ErrorCode.INVALID_PRICING_INPUT


class InvalidServiceConfiguration(PricingError):
    code = ErrorCode.INVALID_SERVICE_CONFIGURATION


class AppException(HTTPException):
    def __init__(
        self,
        *,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        detail = {
            "message": message,
            "code": code.value,
            "details": details,
        }
        super().__init__(status_code=status_code, detail=detail, headers=headers)


def pricing_error_to_app_exception(exc: PricingError) -> AppException:
    details: dict[str, Any] = {}
    if exc.field:
        details["field"] = exc.field
    if exc.details is not None:
        details["context"] = exc.details
    return AppException(
        status_code=422,
        code=exc.code,
        message=exc.message,
        details=details or None,
    )


def too_many_requests(retry_after_seconds: int, group: str) -> AppException:
    return AppException(
        status_code=429,
        code=ErrorCode.TOO_MANY_REQUESTS,
        message="Too Many Requests",
        details={"retry_after_seconds": retry_after_seconds, "group": group},
        headers={"Retry-After": str(retry_after_seconds)},
    )
