"""
Maps use case results onto HTTP responses.

Every expected failure leaves the API as an ErrorResponseDTO body, the same
shape the global 500 handler returns.
"""

from typing import Optional, TypeVar

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from src.application.dtos.dtos import ErrorResponseDTO
from src.domain.result import Ok, Err, ErrorKind, Result


T = TypeVar("T")

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.REFRESH_INVALID: 401,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.CONFLICT: 409,
    ErrorKind.FORBIDDEN: 403,
}


class ApiError(HTTPException):
    """HTTPException carrying a machine-readable error code."""

    def __init__(self, status_code: int, error: str, message: str, headers: Optional[dict] = None):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.error = error


def error_response(status_code: int, error: str, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponseDTO(error=error, message=message).model_dump(),
        headers=headers,
    )


def err_response(err: Err) -> JSONResponse:
    return error_response(STATUS_BY_KIND.get(err.kind, 400), err.kind.value, err.message or err.kind.value)


def to_http_exception(err: Err) -> ApiError:
    return ApiError(STATUS_BY_KIND.get(err.kind, 400), err.kind.value, err.message or err.kind.value)


def unwrap(result: Result[T]) -> T:
    """Return the value of an Ok, or raise the ApiError matching an Err."""
    if isinstance(result, Ok):
        return result.value
    raise to_http_exception(result)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPExceptions (ours and FastAPI's own 404/405) as ErrorResponseDTO."""
    return error_response(
        exc.status_code,
        getattr(exc, "error", "http_error"),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )
