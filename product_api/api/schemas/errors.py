"""Error envelope returned by every failing request.

Every error, whatever its origin, is rendered with the same shape so clients
can rely on ``status == "error"`` and a human-readable ``message``. The
optional ``errors`` list holds one entry per problem (e.g. per invalid field)
and ``stack`` is only populated for internal errors outside production.
"""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "status": "error",
                    "message": "Validation failed",
                    "errors": [
                        "Name is required and must be a non-empty string",
                        "Price must be a non-negative number",
                    ],
                    "errorCode": "VALIDATION_ERROR",
                    "correlationId": "550e8400-e29b-41d4-a716-446655440000",
                    "requestId": "req-660e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2024-06-14T12:00:00+00:00",
                },
                {
                    "status": "error",
                    "message": "Product with id 42 not found",
                    "errorCode": "NOT_FOUND",
                    "correlationId": "550e8400-e29b-41d4-a716-446655440001",
                    "requestId": "req-660e8400-e29b-41d4-a716-446655440001",
                    "timestamp": "2024-06-14T12:00:01+00:00",
                },
            ]
        },
    )

    status: Literal["error"] = "error"

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid API key", "Product with id 42 not found"],
    )

    errors: list[str] | None = Field(
        default=None,
        description="Individual problems, e.g. one message per invalid field",
        examples=[["Price must be a non-negative number"]],
    )

    error_code: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["VALIDATION_ERROR", "NOT_FOUND", "UNAUTHORIZED"],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    request_id: str | None = Field(
        default=None,
        description="Unique identifier of this request",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )

    stack: str | None = Field(
        default=None,
        description="Traceback of an internal error (never sent in production)",
    )
