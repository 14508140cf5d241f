"""Translate domain and request errors into ``{"error": "..."}`` responses.

| Raised                         | Status |
|--------------------------------|--------|
| HTTPException                  | its own status (401 for missing identity) |
| RequestValidationError         | 400 |
| ValidationError, ConflictError | 400 |
| ObjectNotFoundError            | 404 |
| anything else                  | 500, logged with traceback |
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api.schemas import ErrorResponse
from storefront.shared.errors import ConflictError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Error interno del servidor"


def error_message(exc, default):
    """Pick a single human-readable message out of a domain exception."""
    messages = getattr(exc, "messages", None)
    if messages is None and exc.args:
        messages = exc.args[0]

    if isinstance(messages, dict):
        for errors in messages.values():
            if isinstance(errors, list | tuple):
                if errors:
                    return str(errors[0])
            elif errors:
                return str(errors)
        return default

    return str(messages) if messages else default


def _error(status_code, message):
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        fields = sorted({str(error["loc"][-1]) for error in exc.errors() if error.get("loc")})
        message = "Faltan datos requeridos o son inválidos"
        if fields:
            message = f"{message}: {', '.join(fields)}"
        return _error(400, message)

    @app.exception_handler(ConflictError)
    async def conflict_error(request: Request, exc: ConflictError):
        logger.info("request_conflict", path=request.url.path, messages=exc.messages)
        return _error(400, error_message(exc, "El recurso ya existe"))

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return _error(400, error_message(exc, "Datos inválidos"))

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_error(request: Request, exc: ObjectNotFoundError):
        return _error(404, error_message(exc, "No encontrado"))

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path, method=request.method)
        return _error(500, INTERNAL_ERROR_MESSAGE)
