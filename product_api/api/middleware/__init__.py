"""FastAPI middleware and exception handlers.

- **RequestContextMiddleware**: Correlation and request IDs for every request
- **RequestLoggingMiddleware**: Structured request/response logging with timing
- **error_handler**: Exception handlers rendering the error envelope

Request context runs first so that every log line and error envelope carries
the request identifiers.
"""
