from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from billing.core.errors import BillingError, InvalidInput, LoginRequired

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LoginRequired)
    async def login_required_handler(request: Request, exc: LoginRequired):
        logger.debug("redirecting to login: path=%s reason=%s", request.url.path, exc.message)
        return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)

    @app.exception_handler(BillingError)
    async def billing_error_handler(request: Request, exc: BillingError):
        logger.warning(
            "request failed: %s",
            exc.message,
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = jsonable_encoder(exc.errors())
        logger.warning("validation error on %s: %s", request.url.path, details)
        error = InvalidInput("request validation failed", details=details)
        return JSONResponse(status_code=error.http_status, content=error.to_response())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s", request.url.path, extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal server error", "code": "internal"},
        )
