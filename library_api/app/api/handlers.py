"""
Exception handlers mapping failures to HTTP responses.

* ``LibraryError`` subclasses are the caller's fault: 400 with the
  error message and kind.
* Request bodies or query strings that do not fit the schemas: 400
  ``invalid_input``.
* Unknown routes, and known paths asked for with a method they do not
  serve: 404 with a generic body.
* Anything else: logged with its traceback and answered with an
  opaque 500.  Internal details never reach the response body.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from library_api.app.core.errors import InvalidInput, LibraryError

logger = logging.getLogger(__name__)

INVALID_REQUEST = "Invalid request parameters"
ENDPOINT_NOT_FOUND = "endpoint not found"
SERVER_ERROR = "Server error!"


async def library_error_handler(request: Request, exc: LibraryError) -> JSONResponse:
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug("%s %s failed validation: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=InvalidInput(INVALID_REQUEST).to_dict(),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": ENDPOINT_NOT_FOUND})
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": SERVER_ERROR},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LibraryError, library_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
