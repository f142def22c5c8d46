"""RFC 7807 Problem Details error handling.

Domain errors raised by services map onto a small taxonomy. Missing or
insufficient privilege is always reported as 401, never 403.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

ACCESS_DENIED = "Access denied"
UNEXPECTED_ERROR = "Could not complete the request"


class ProblemDetailError(Exception):
    """Raise for RFC 7807 problem+json responses."""

    def __init__(
        self,
        status: int,
        title: str,
        detail: str,
        error_type: str | None = None,
    ):
        super().__init__(detail)
        self.status = status
        self.title = title
        self.detail = detail
        self.error_type = error_type or "about:blank"


class NotFoundError(ProblemDetailError):
    def __init__(self, detail: str):
        super().__init__(404, "Not Found", detail)


class AccessDeniedError(ProblemDetailError):
    """Unknown caller and caller without privilege look the same."""

    def __init__(self, detail: str = ACCESS_DENIED):
        super().__init__(401, "Unauthorized", detail)


class InvalidInputError(ProblemDetailError):
    def __init__(self, detail: str):
        super().__init__(400, "Validation Error", detail)


class BusinessRuleError(ProblemDetailError):
    def __init__(self, detail: str):
        super().__init__(400, "Business Rule Violation", detail)


class PaymentGatewayError(Exception):
    """The payment gateway rejected or failed a call."""


class StorageError(Exception):
    """The object store rejected or failed a call."""


async def problem_detail_handler(request: Request, exc: ProblemDetailError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status,
        content={
            "type": exc.error_type,
            "title": exc.title,
            "status": exc.status,
            "detail": exc.detail,
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "type": "about:blank",
            "title": exc.detail if isinstance(exc.detail, str) else "Error",
            "status": exc.status_code,
            "detail": exc.detail,
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "type": "about:blank",
            "title": "Validation Error",
            "status": 422,
            "detail": exc.errors(),
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Storage, gateway and database failures: log and answer a static 500."""
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "type": "about:blank",
            "title": "Internal Server Error",
            "status": 500,
            "detail": UNEXPECTED_ERROR,
            "instance": str(request.url.path),
        },
        media_type="application/problem+json",
    )
