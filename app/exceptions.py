# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Two kinds of errors reach the caller:
# - SupplyChainException subclasses: expected failures with their own status
#   code and a structured body
# - Anything else: logged server-side, answered with a fixed generic 500
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class SupplyChainException(Exception):
    """
    Base exception for the Supply Chain API.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPPLY_CHAIN_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "message": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Record Exceptions
# =============================================================================

class RecordNotFoundError(SupplyChainException):
    """Raised when a users/products/batches row doesn't exist."""

    def __init__(self, resource: str, record_id: str):
        super().__init__(
            message=f"{resource} not found: {record_id}",
            code="RECORD_NOT_FOUND",
            status_code=404,
            details={"resource": resource, "id": record_id}
        )


class MissingFieldError(SupplyChainException):
    """Raised when a create request lacks a required field."""

    def __init__(self, field: str):
        super().__init__(
            message=f"Missing required field: {field}",
            code="MISSING_FIELD",
            status_code=400,
            details={"field": field}
        )


class InvalidFieldError(SupplyChainException):
    """Raised when a field is present but malformed, e.g. an ID that isn't a UUID."""

    def __init__(self, field: str, expected: str):
        super().__init__(
            message=f"Invalid value for {field}: expected {expected}",
            code="INVALID_FIELD",
            status_code=400,
            details={"field": field}
        )


# =============================================================================
# Request Body Exceptions
# =============================================================================

class InvalidRequestBodyError(SupplyChainException):
    """Raised when a JSON body cannot be decoded."""

    def __init__(self, content_type: str):
        super().__init__(
            message="Request body could not be parsed",
            code="INVALID_BODY",
            status_code=400,
            details={"content_type": content_type}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def supply_chain_exception_handler(
    request: Request,
    exc: SupplyChainException
) -> JSONResponse:
    """Convert SupplyChainException to JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Last-resort handler for errors raised by route handlers.

    The traceback goes to the server log; the caller only ever sees the
    fixed generic message.
    """
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"message": GENERIC_ERROR_MESSAGE}
    )
