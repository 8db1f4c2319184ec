"""Exception types and HTTP error handlers.

Domain errors
-------------
- AmountParseError: numeric text that is malformed or out of range. The
  pattern catalog skips these silently.
- HttpError / RateFetchError: remote rate source unreachable or returned a
  non-2xx / malformed payload. Propagated to the caller of ``get_rates``.
- StorageError: persisted cache / settings store failure. Logged by callers
  and treated as a cache miss or no-op.
- UnsupportedCurrencyError: conversion requested for a code missing from the
  current rate table.

"No match" is not an error: detection simply returns nothing.
"""

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("currency_lens.errors")


class CurrencyLensError(Exception):
    pass


class AmountParseError(CurrencyLensError, ValueError):
    pass


class HttpError(CurrencyLensError):
    pass


class RateFetchError(HttpError):
    pass


class StorageError(CurrencyLensError):
    pass


class UnsupportedCurrencyError(CurrencyLensError):
    def __init__(self, code: str):
        super().__init__(f"unsupported currency: {code}")
        self.code = code


def not_found_handler(request: Request, exc):  # type: ignore
    if getattr(exc, "status_code", 404) != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": exc.detail},
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": f"No route for {request.method} {request.url.path}",
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    # ctx may hold the raw exception object raised by a validator
    errors = [{k: v for k, v in e.items() if k != "ctx"} for e in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(errors),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
