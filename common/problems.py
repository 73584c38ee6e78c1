"""
5dpapa Backend - Problem Documents
====================================
Maps the ShopError taxonomy (and framework errors) to RFC 7807 JSON bodies.
Registered once on the app; the security pipeline renders its own errors
through problem_response() as well.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import PROBLEM_TYPE_BASE
from common.exceptions import (
    ShopError, Internal, ValidationFailed, NotFound, MethodNotAllowed, Unauthenticated, Forbidden,
)

logger = logging.getLogger("fivepapa.errors")

PROBLEM_MEDIA_TYPE = "application/problem+json"


def problem_response(error: ShopError, request: Request) -> JSONResponse:
    body = {
        "type": f"{PROBLEM_TYPE_BASE}/{error.slug}",
        "title": error.title,
        "status": error.status_code,
        "detail": error.message,
        "instance": request.url.path,
    }
    if isinstance(error, ValidationFailed) and error.errors:
        body["errors"] = error.errors
    return JSONResponse(body, status_code=error.status_code, media_type=PROBLEM_MEDIA_TYPE)


def _field_name(loc) -> str:
    """('body', 'password') -> 'password'; ('query', 'enabled') -> 'enabled'."""
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


async def shop_error_handler(request: Request, exc: ShopError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return problem_response(exc, request)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for err in exc.errors():
        field = _field_name(err.get("loc", ()))
        errors.setdefault(field, err.get("msg", "invalid value"))
    return problem_response(ValidationFailed(errors), request)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Framework-level HTTP errors (unknown route, wrong method, ...)."""
    if exc.status_code == 404:
        error = NotFound(f"No handler found for {request.method} {request.url.path}")
    elif exc.status_code == 405:
        error = MethodNotAllowed(f"Request method '{request.method}' is not supported")
    elif exc.status_code == 401:
        error = Unauthenticated()
    elif exc.status_code == 403:
        error = Forbidden()
    elif exc.status_code == 400:
        error = ValidationFailed(message=str(exc.detail))
    else:
        error = Internal()
    return problem_response(error, request)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return problem_response(Internal(), request)


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ShopError, shop_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
