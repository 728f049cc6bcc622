"""Error handling middleware and exception handlers."""

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from wallet_ledger.domain.exceptions import (
    ConcurrencyConflictException,
    DomainException,
    NotFoundException,
    PermissionDeniedException,
    UnsupportedOperationException,
    ValidationFailedException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)

REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def _error_body(code: str, message: str, details: Optional[Any] = None) -> dict:
    content = {
        "error": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if details:
        content["details"] = details
    return content


def _field_name(loc) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in REQUEST_LOCATIONS and len(parts) > 1:
        parts = parts[1:]
    return ".".join(parts)


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses. Handlers are
    matched on the exception's MRO, so the specific ones win over the
    DomainException fallback.
    """

    @app.exception_handler(NotFoundException)
    async def not_found_handler(
        request: Request,
        exc: NotFoundException,
    ) -> JSONResponse:
        """Handle account, category and transaction not found errors."""
        return JSONResponse(status_code=404, content=_error_body(exc.code, exc.message))

    @app.exception_handler(PermissionDeniedException)
    async def permission_denied_handler(
        request: Request,
        exc: PermissionDeniedException,
    ) -> JSONResponse:
        logger.warning(
            "permission_denied",
            request_id=get_request_id(),
            user_id=exc.user_id,
            resource_type=exc.resource_type,
        )
        return JSONResponse(status_code=403, content=_error_body(exc.code, exc.message))

    @app.exception_handler(UnsupportedOperationException)
    async def unsupported_operation_handler(
        request: Request,
        exc: UnsupportedOperationException,
    ) -> JSONResponse:
        return JSONResponse(status_code=422, content=_error_body(exc.code, exc.message))

    @app.exception_handler(ValidationFailedException)
    async def validation_failed_handler(
        request: Request,
        exc: ValidationFailedException,
    ) -> JSONResponse:
        """Handle invalid amounts, dates, descriptions and period filters."""
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.code, exc.message, exc.details),
        )

    @app.exception_handler(ConcurrencyConflictException)
    async def concurrency_conflict_handler(
        request: Request,
        exc: ConcurrencyConflictException,
    ) -> JSONResponse:
        """Handle a balance write that lost every retry."""
        logger.error(
            "concurrency_conflict",
            request_id=get_request_id(),
            account_token=exc.account_token,
        )
        return JSONResponse(
            status_code=409,
            content=_error_body(exc.code, "Account is busy. Please try again."),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Reshape FastAPI's request validation errors into the standard body."""
        details = [
            {"field": _field_name(error.get("loc", ())), "reason": error.get("msg", "invalid")}
            for error in exc.errors()
        ]
        message = "; ".join(f"{d['field']}: {d['reason']}" for d in details)
        return JSONResponse(
            status_code=400,
            content=_error_body("VALIDATION_FAILED", message or "Request validation failed", details),
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return JSONResponse(status_code=400, content=_error_body(exc.code, exc.message))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred."),
        )
