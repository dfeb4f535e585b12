"""Operational error taxonomy for consistent error handling.

Every anticipated failure the service produces is one of three operational
errors, each bound to a fixed HTTP status code:

- **NotFoundError** (404): a referenced product or route does not exist
- **ValidationError** (400): a payload, query parameter or store write is invalid
- **AuthenticationError** (401): the API key is missing or wrong

Anything that is not a ``ProductAPIError`` is an unexpected internal failure
and is rendered as a 500 by the generic exception handler.

Each error carries an ``ErrorCode`` for programmatic handling, a ``Severity``
that drives the log level, optional structured ``context`` and an optional
original ``cause``.
"""

import traceback
from enum import Enum
from http import HTTPStatus
from typing import Any, ClassVar


class ErrorCode(Enum):
    """Standardized error codes returned in error envelopes."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """The API key is missing or does not match."""

    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    """The route exists but does not accept the request method."""


class Severity(Enum):
    """Severity levels used to pick the log level for an error."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ProductAPIError(Exception):
    """Base class for operational errors.

    Subclasses bind ``status_code``, a default ``error_code`` and a
    ``severity``; the exception handlers rely only on these attributes.

    Args:
        message: Human-readable error message
        errors: Ordered list of individual problems (e.g. one per field)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    status_code: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR
    default_error_code: ClassVar[ErrorCode] = ErrorCode.INTERNAL_ERROR
    severity: ClassVar[Severity] = Severity.MEDIUM

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = self.default_error_code.value
        self.message = message
        self.errors = list(errors) if errors else []
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time for debug output
        self.stack_trace = traceback.format_stack()[:-1]

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (bad input, missing id).

        Returns:
            bool: True for LOW or MEDIUM severity.
        """
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        errors_str = f", errors={self.errors}" if self.errors else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', status_code={self.status_code}{errors_str})"
        )


class ValidationError(ProductAPIError):
    """Raised when a payload, query parameter or store write is invalid."""

    status_code = HTTPStatus.BAD_REQUEST
    default_error_code = ErrorCode.VALIDATION_ERROR
    severity = Severity.LOW


class NotFoundError(ProductAPIError):
    """Raised when a product id or a route does not exist."""

    status_code = HTTPStatus.NOT_FOUND
    default_error_code = ErrorCode.NOT_FOUND
    severity = Severity.LOW


class AuthenticationError(ProductAPIError):
    """Raised when the API key is missing or incorrect."""

    status_code = HTTPStatus.UNAUTHORIZED
    default_error_code = ErrorCode.UNAUTHORIZED
    severity = Severity.HIGH
