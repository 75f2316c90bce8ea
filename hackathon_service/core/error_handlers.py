# hackathon_service/core/error_handlers.py
import logging
from collections import defaultdict

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from hackathon_service.core.exceptions import AppError, ValidationFailed

logger = logging.getLogger(__name__)


def error_envelope(message: str, field_errors: dict | None = None) -> dict:
    body = {"success": False, "error": message}
    if field_errors:
        body["fieldErrors"] = field_errors
    return body


def field_errors_from_pydantic(errors: list[dict], skip_prefix: tuple = ()) -> dict:
    """
    Groups pydantic error entries by their dotted field path.

    ``skip_prefix`` drops leading location parts such as ``("body",)`` that
    FastAPI adds to request validation errors.
    """
    grouped = defaultdict(list)
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        while loc and loc[0] in skip_prefix:
            loc = loc[1:]
        path = ".".join(loc) or "__root__"
        message = err.get("msg", "Invalid value")
        # pydantic prefixes custom ValueError messages
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        grouped[path].append(message)
    return dict(grouped)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            f"{exc.category} on {request.method} {request.url.path}: {exc.message}"
        )
    else:
        logger.info(
            f"{exc.category} on {request.method} {request.url.path}: {exc.message}"
        )
    field_errors = exc.field_errors if isinstance(exc, ValidationFailed) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.message, field_errors),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    field_errors = field_errors_from_pydantic(exc.errors(), skip_prefix=("body", "query", "path"))
    failure = ValidationFailed(field_errors)
    logger.info(f"Request validation failed on {request.url.path}: {failure.message}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_envelope(failure.message, field_errors),
    )


async def rate_limit_error_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_envelope("Too many requests. Please wait a moment before trying again."),
    )
