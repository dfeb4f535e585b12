"""Global exception handlers for the FastAPI application.

Every failure is turned into the ``ErrorResponse`` envelope here and nowhere
else. Operational errors keep the status code bound to their class, store
constraint violations become 400s, unmatched routes become 404s and anything
unexpected becomes a 500.
"""

import re
import traceback
from collections.abc import Mapping, Sequence
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from sqlalchemy.exc import DataError, IntegrityError
from starlette.exceptions import HTTPException

from product_api.api.constants import INTERNAL_ERROR_MESSAGE, INVALID_QUERY_MESSAGE
from product_api.api.schemas.errors import ErrorResponse
from product_api.api.utils.responses import ORJSONResponse
from product_api.core.config import get_settings
from product_api.core.context import RequestContext
from product_api.core.error_context import sanitize_error_context, sanitize_headers
from product_api.core.exceptions import ErrorCode, ProductAPIError
from product_api.infrastructure.database.models import Product
from product_api.products.validation import PAYLOAD_FIELDS

HTTP_ERROR_CODES: dict[int, ErrorCode] = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
}

STORE_VALUE_DISPLAY_LENGTH = 50


def build_error_response(
    status_code: int,
    message: str,
    *,
    error_code: str,
    errors: list[str] | None = None,
    stack: str | None = None,
) -> ORJSONResponse:
    """Render the error envelope.

    Args:
        status_code: HTTP status of the response.
        message: Human-readable error message.
        error_code: Machine-readable error code.
        errors: Optional list of individual problems.
        stack: Optional traceback (internal errors outside production only).

    Returns:
        ORJSONResponse: The JSON error response.
    """
    error_response = ErrorResponse(
        message=message,
        errors=errors or None,
        error_code=error_code,
        correlation_id=RequestContext.get_correlation_id(),
        request_id=RequestContext.get_request_id(),
        stack=stack,
    )

    return ORJSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _describe_path(request: Request) -> str:
    if request.url.query:
        return f"{request.url.path}?{request.url.query}"
    return request.url.path


async def product_api_error_handler(request: Request, exc: Exception) -> Response:
    """Handle ``ProductAPIError`` subclasses.

    Args:
        request: The FastAPI request that caused the exception
        exc: The ProductAPIError exception to handle

    Returns:
        Response: ORJSONResponse with the error's own status code

    Raises:
        TypeError: If exc is not a ProductAPIError instance
    """
    if not isinstance(exc, ProductAPIError):
        raise TypeError(f"Expected ProductAPIError, got {type(exc).__name__}")

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
        },
    )
    if not exc.is_expected:
        error_context["request_headers"] = sanitize_headers(dict(request.headers))

    log = logger.warning if exc.is_expected else logger.error
    log(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        severity=exc.severity.value,
        **error_context,
    )

    return build_error_response(
        exc.status_code,
        exc.message,
        error_code=exc.error_code,
        errors=exc.errors,
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI ``RequestValidationError`` (malformed query parameters).

    Args:
        request: The FastAPI request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: 400 ORJSONResponse with one message per offending parameter

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    messages: list[str] = []
    for error in exc.errors():
        # loc is e.g. ("query", "page"); drop the location kind
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:]) or "request"
        messages.append(f"{field_name}: {error.get('msg', 'Invalid value')}")

    logger.warning(
        "Request validation failed",
        status_code=status.HTTP_400_BAD_REQUEST,
        **sanitize_error_context(
            exc,
            {
                "path": str(request.url.path),
                "method": request.method,
                "validation_errors": messages,
            },
        ),
    )

    return build_error_response(
        status.HTTP_400_BAD_REQUEST,
        INVALID_QUERY_MESSAGE,
        error_code=ErrorCode.VALIDATION_ERROR.value,
        errors=messages,
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette ``HTTPException`` (unmatched routes, wrong methods).

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse keeping the exception's status code

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    default_code = (
        ErrorCode.VALIDATION_ERROR
        if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
        else ErrorCode.INTERNAL_ERROR
    )
    error_code = HTTP_ERROR_CODES.get(exc.status_code, default_code)

    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Cannot find {_describe_path(request)} on this server"
    else:
        message = str(exc.detail)

    logger.warning(
        "HTTP exception",
        **sanitize_error_context(
            exc,
            {
                "status": exc.status_code,
                "method": request.method,
                "path": str(request.url.path),
                "detail": exc.detail,
            },
        ),
    )

    response = build_error_response(
        exc.status_code, message, error_code=error_code.value
    )
    # Keep the Allow header on 405 responses
    if exc.headers:
        response.headers.update(exc.headers)
    return response


def _bound_rows(exc: IntegrityError | DataError) -> list[Mapping[str, Any]]:
    params = exc.params
    if isinstance(params, Mapping):
        return [params]
    if isinstance(params, Sequence) and not isinstance(params, str):
        return [row for row in params if isinstance(row, Mapping)]
    return []


def _offending_column(exc: IntegrityError | DataError) -> str | None:
    """Name the ``products`` column a rejected write tripped over, if possible.

    Tried in order: the column the driver reports (asyncpg), a column named in
    the driver message or constraint name, the primary key for unique
    violations, then a bound string longer than its column allows.
    """
    table = Product.__table__
    columns = [column.name for column in table.columns]

    reported = getattr(getattr(exc.orig, "__cause__", None), "column_name", None)
    if reported in columns:
        return reported

    detail = str(exc.orig).lower()
    for column in columns:
        # Underscores separate words in constraint names
        if re.search(rf"(?<![a-z]){re.escape(column)}(?![a-z])", detail):
            return column
    if re.search(r"unique|duplicate key", detail):
        return next(iter(table.primary_key.columns)).name

    for row in _bound_rows(exc):
        for column in table.columns:
            max_length = getattr(column.type, "length", None)
            value = row.get(column.name)
            if max_length and isinstance(value, str) and len(value) > max_length:
                return column.name
    return None


def describe_store_error(exc: IntegrityError | DataError) -> str:
    """Reword a store rejection as ``Invalid <field>[: <value>]``.

    Falls back to a generic message when no column can be identified; the raw
    driver text is never returned.
    """
    column = _offending_column(exc)
    if column is None:
        if isinstance(exc, IntegrityError):
            return "Product data violates a store constraint"
        return "Product data contains an invalid value"

    field = PAYLOAD_FIELDS.get(column, column)
    value = next((row[column] for row in _bound_rows(exc) if column in row), None)
    if value is None:
        return f"Invalid {field}"

    shown = str(value)
    if len(shown) > STORE_VALUE_DISPLAY_LENGTH:
        shown = shown[: STORE_VALUE_DISPLAY_LENGTH - 3] + "..."
    return f"Invalid {field}: {shown}"


async def store_error_handler(request: Request, exc: Exception) -> Response:
    """Handle writes rejected by the store (constraint violations, bad values).

    Args:
        request: The FastAPI request that caused the exception
        exc: The IntegrityError or DataError raised by SQLAlchemy

    Returns:
        Response: 400 ORJSONResponse naming the rejected field

    Raises:
        TypeError: If exc is not an IntegrityError or DataError instance
    """
    if not isinstance(exc, IntegrityError | DataError):
        raise TypeError(f"Expected IntegrityError or DataError, got {type(exc).__name__}")

    message = describe_store_error(exc)

    logger.warning(
        "Store rejected write: {detail}",
        detail=str(exc.orig).splitlines()[0] if exc.orig is not None else message,
        method=request.method,
        path=str(request.url.path),
    )

    return build_error_response(
        status.HTTP_400_BAD_REQUEST,
        message,
        error_code=ErrorCode.VALIDATION_ERROR.value,
        errors=[message],
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle anything not covered by a more specific handler.

    In production only a generic message is returned; elsewhere the exception
    message and its traceback are included to ease debugging.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: 500 ORJSONResponse
    """
    settings = get_settings()

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
        },
    )

    logger.exception(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        **error_context,
    )

    if settings.is_production:
        message = INTERNAL_ERROR_MESSAGE
        stack = None
    else:
        message = str(exc) or f"Internal server error: {type(exc).__name__}"
        stack = "".join(traceback.format_exception(exc))

    return build_error_response(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        message,
        error_code=ErrorCode.INTERNAL_ERROR.value,
        stack=stack,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ProductAPIError, product_api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, store_error_handler)
    app.add_exception_handler(DataError, store_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
