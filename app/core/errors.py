from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import StorefrontError, ValidationError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse
from app.core.config import settings

logger = get_logger(__name__)

# Leading location parts FastAPI adds to request validation errors
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_from_location(loc) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _request_extra(request: Request) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "client": request.client.host if request.client else "unknown"
    }


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(StorefrontError)
    async def storefront_exception_handler(request: Request, exc: StorefrontError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__}: {exc.message}", extra=_request_extra(request))
            content = ErrorResponse(
                error="An internal error occurred. Please try again later.",
                code=exc.code
            )
        else:
            if exc.status_code in (401, 403):
                logger.warning(
                    f"Access denied ({exc.code}): {request.method} {request.url.path}",
                    extra=_request_extra(request)
                )
            content = ErrorResponse(
                error=exc.message,
                code=exc.code,
                field=exc.field if isinstance(exc, ValidationError) else None,
                details=exc.details
            )
        return JSONResponse(status_code=exc.status_code, content=content.model_dump())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handles standard HTTP exceptions (404, 405, etc.)
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail),
                code="HTTP_ERROR",
                details=None
            ).model_dump()
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """
        Handles Pydantic validation errors as 400 with the first failing field.
        """
        details = [
            {"field": _field_from_location(error.get("loc", ())), "message": error.get("msg", "")}
            for error in exc.errors()
        ]
        first = details[0] if details else {"field": "body", "message": "Invalid request"}
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(
                error=f"{first['field']}: {first['message']}",
                code="VALIDATION_ERROR",
                field=first["field"],
                details=details
            ).model_dump()
        )

    @app.exception_handler(PyMongoError)
    async def storage_exception_handler(request: Request, exc: PyMongoError):
        """
        Database failures never leak driver detail to the client.
        """
        logger.error(
            f"Database error: {str(exc)}",
            extra=_request_extra(request),
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="An internal error occurred. Please try again later.",
                code="INTERNAL_ERROR"
            ).model_dump()
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception: {str(exc)}",
            extra=_request_extra(request),
            exc_info=True
        )

        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=message,
                code="INTERNAL_ERROR",
                details=None
            ).model_dump()
        )
