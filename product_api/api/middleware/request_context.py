"""Request context middleware for correlation and request IDs.

The correlation ID is taken from the ``X-Correlation-ID`` header when the
caller sends one and generated otherwise; the request ID is always fresh.
Both are stored in contextvars, bound to every Loguru record emitted while
the request is processed, echoed back as response headers and cleared once
the response is complete.
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from product_api.api.constants import CORRELATION_ID_HEADER, REQUEST_ID_HEADER
from product_api.core.context import (
    RequestContext,
    generate_correlation_id,
    generate_request_id,
)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Set up request-scoped identifiers for logging and error envelopes."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request with context management.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: Response with correlation and request ID headers.
        """
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        )
        request_id = generate_request_id()

        RequestContext.set_correlation_id(correlation_id)
        RequestContext.set_request_id(request_id)

        # contextualize scopes the binding to this request only
        with logger.contextualize(correlation_id=correlation_id, request_id=request_id):
            response = await call_next(request)

            response.headers[CORRELATION_ID_HEADER] = correlation_id
            response.headers[REQUEST_ID_HEADER] = request_id

        # Errors escaping call_next keep the ids for the outermost 500 handler
        RequestContext.clear()
        return response
