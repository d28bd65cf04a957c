"""Exception handlers that keep every error response in the `{success, message}` envelope."""

import logging

import pydantic
from fastapi import Request, status
from fastapi.responses import JSONResponse

from submissions_api.schemas import ErrorResponse
from submissions_api.services.submission_service import SubmissionValidationError

logger = logging.getLogger(__name__)


class InvalidRequestBodyError(ValueError):
    """The request body could not be decoded into form fields."""


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


async def handle_submission_validation_errors(request: Request, exc: SubmissionValidationError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def handle_invalid_request_body(request: Request, exc: InvalidRequestBodyError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Report field type errors (e.g. a number where a string is expected) as a 400."""
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in errors
    ) or "Invalid request"
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of a route as a generic 500."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Error processing {request.method} {request.url.path}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
