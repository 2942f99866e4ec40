"""Domain exceptions and their JSON error responses.

Every error body carries a human-readable ``message``; validation failures
add an ``errors`` map of field name -> list of messages.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from syariahos.core.structured_logging import build_log_context

logger = logging.getLogger(__name__)


class FieldValidationError(Exception):
    """Service-level validation failure tied to request fields (422)."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        first = next(iter(errors.values()))
        super().__init__(first[0] if first else "The given data was invalid.")

    @classmethod
    def single(cls, field: str, message: str) -> "FieldValidationError":
        return cls({field: [message]})


class BusinessRuleError(Exception):
    """A request that is well-formed but violates a business rule (422)."""


class NotFoundError(Exception):
    """Resource absent or not owned by the caller (404)."""


class UpstreamServiceError(Exception):
    """An external dependency timed out or answered with an error (503)."""


def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query"/"path" prefix pydantic adds
    parts = [str(p) for p in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts) or "request"


def _validation_payload(errors: dict[str, list[str]]) -> dict:
    first = next(iter(errors.values()), ["The given data was invalid."])
    return {"message": first[0], "errors": errors}


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(tuple(error.get("loc", ()))), []).append(
            error.get("msg", "Invalid value")
        )
    return JSONResponse(status_code=422, content=_validation_payload(errors))


async def field_validation_handler(
    request: Request, exc: FieldValidationError
) -> JSONResponse:
    return JSONResponse(status_code=422, content=_validation_payload(exc.errors))


async def business_rule_handler(request: Request, exc: BusinessRuleError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"message": str(exc)})


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": str(exc) or "Not found"})


async def upstream_handler(request: Request, exc: UpstreamServiceError) -> JSONResponse:
    logger.warning(
        "Upstream dependency failed",
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return JSONResponse(status_code=503, content={"message": str(exc)})


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"message": "Too many requests. Please try again later."},
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return JSONResponse(status_code=500, content={"message": "Server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(FieldValidationError, field_validation_handler)
    app.add_exception_handler(BusinessRuleError, business_rule_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(UpstreamServiceError, upstream_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
