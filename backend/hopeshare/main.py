"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hopeshare.api.router import api_router
from hopeshare.core.config import settings
from hopeshare.core.exceptions import (
    PaymentGatewayError,
    ProblemDetailError,
    StorageError,
    http_exception_handler,
    problem_detail_handler,
    unexpected_error_handler,
    validation_exception_handler,
)
from hopeshare.core.middleware.cors import get_cors_config
from hopeshare.core.middleware.request_id import RequestIdMiddleware

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="HopeShare API",
    version="0.1.0",
    docs_url=None if settings.ENVIRONMENT == "production" else "/docs",
    openapi_url=None if settings.ENVIRONMENT == "production" else "/openapi.json",
)

# Middleware (last added = first executed)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(CORSMiddleware, **get_cors_config())

# Exception handlers (RFC 7807)
app.add_exception_handler(ProblemDetailError, problem_detail_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
for error_class in (SQLAlchemyError, PaymentGatewayError, StorageError):
    app.add_exception_handler(error_class, unexpected_error_handler)

# Routes
app.include_router(api_router)
