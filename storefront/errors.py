"""Service-layer errors.

Raised by the Auth and Catalog services when a request cannot be honoured.
The app translates them into a JSON envelope::

    {"error": {"kind": "NotFound", "message": "Product not found"}}
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    kind = 'Internal'
    message = 'Internal server error'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    @property
    def public_kind(self) -> str:
        return self.kind


class InvalidInput(StorefrontError):
    status_code = HTTPStatus.BAD_REQUEST
    kind = 'InvalidInput'
    message = 'Invalid input'


class DuplicateEmail(StorefrontError):
    status_code = HTTPStatus.CONFLICT
    kind = 'DuplicateEmail'
    message = 'Email already registered'


class InvalidCredentials(StorefrontError):
    """Unknown email or wrong password. Both cases look the same."""

    status_code = HTTPStatus.UNAUTHORIZED
    kind = 'InvalidCredentials'
    message = 'Incorrect email or password'


class Unauthenticated(StorefrontError):
    status_code = HTTPStatus.UNAUTHORIZED
    kind = 'Unauthenticated'
    message = 'Could not validate credentials'


class InvalidToken(Unauthenticated):
    """Malformed, expired, tampered or revoked token.

    Reported to callers exactly like a missing token.
    """

    kind = 'InvalidToken'

    def __init__(self, reason: str | None = None):
        # reason is for logs only, the public message never changes
        super().__init__()
        self.reason = reason

    @property
    def public_kind(self) -> str:
        return Unauthenticated.kind


class NotFound(StorefrontError):
    status_code = HTTPStatus.NOT_FOUND
    kind = 'NotFound'
    message = 'Not found'


class Internal(StorefrontError):
    pass


_KIND_BY_STATUS = {
    HTTPStatus.BAD_REQUEST: InvalidInput.kind,
    HTTPStatus.UNAUTHORIZED: Unauthenticated.kind,
    HTTPStatus.NOT_FOUND: NotFound.kind,
    HTTPStatus.METHOD_NOT_ALLOWED: 'MethodNotAllowed',
    HTTPStatus.SERVICE_UNAVAILABLE: 'Unavailable',
}


def error_body(kind: str, message: str) -> dict:
    return {'error': {'kind': kind, 'message': message}}


def error_response(exc: StorefrontError) -> JSONResponse:
    headers = None
    if exc.status_code == HTTPStatus.UNAUTHORIZED:
        headers = {'WWW-Authenticate': 'Bearer'}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.public_kind, exc.message),
        headers=headers,
    )


def describe_validation_error(errors) -> str:
    """Short message for the first failing field, without the input value."""
    if not errors:
        return InvalidInput.message
    first = errors[0]
    loc = [str(part) for part in first.get('loc', ()) if part not in ('body', 'query', 'path')]
    field = '.'.join(loc)
    msg = first.get('msg', 'invalid value')
    return f'{field}: {msg}' if field else msg


async def storefront_error_handler(request: Request, exc: StorefrontError):
    if isinstance(exc, InvalidToken) and exc.reason:
        logger.info(f"Rejected token on {request.url.path}: {exc.reason}")
    return error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(InvalidInput(describe_validation_error(exc.errors())))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    kind = _KIND_BY_STATUS.get(exc.status_code, 'Error')
    message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(kind, message),
        headers=getattr(exc, 'headers', None),
    )


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Persistence failure on {request.method} {request.url.path}", exc_info=exc)
    return error_response(Internal())


async def unhandled_error_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return error_response(Internal())


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
