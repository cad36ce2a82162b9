"""Exception handlers rendering every failure as a JSON error envelope."""

import logging

import fastapi
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from components.core import schemas
from components.core.exceptions import LoanServiceError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, errors=None, headers=None) -> JSONResponse:
    body = schemas.ErrorResponse(message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body, exclude_none=True),
        headers=headers,
    )


async def loan_service_error_handler(request: Request, exc: LoanServiceError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.errors)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "Error de validación", errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Error no controlado en %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor")


def register_exception_handlers(app: fastapi.FastAPI) -> None:
    app.add_exception_handler(LoanServiceError, loan_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
