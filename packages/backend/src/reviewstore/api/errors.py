"""Global exception handlers.

Learn: Routes and services raise ReviewStoreError subclasses and never build
error responses themselves. The handlers here turn them into one envelope:

    {"error": {"code": "...", "message": "..."}}

- ReviewStoreError        → its own status and code
- RequestValidationError  → 400 validation_error, field locations only
                            (submitted values, passwords included, are not echoed)
- SQLAlchemyError / other → 500 internal_error; details go to the log only
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from reviewstore.errors import InternalError, ReviewStoreError, UnauthenticatedError

logger = structlog.get_logger()


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(ReviewStoreError, review_store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, unexpected_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)


async def review_store_error_handler(request: Request, exc: ReviewStoreError):
    if exc.http_status >= 500:
        logger.error("request.failed", path=request.url.path, code=exc.code, exc_info=exc)
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": {
                "code": "validation_error",
                "message": "Invalid request",
                "fields": fields,
            }
        },
    )


async def unexpected_error_handler(request: Request, exc: Exception):
    """Catch-all — never leaks internal details."""
    logger.error(
        "request.unhandled_exception",
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=InternalError().to_response(),
    )
