"""API-related constants."""

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Error messages
INTERNAL_ERROR_MESSAGE = "An internal server error occurred"
INVALID_QUERY_MESSAGE = "Invalid query parameters"
MALFORMED_JSON_MESSAGE = "Request body must be valid JSON"

# Routes
PRODUCTS_PREFIX = "/api/products"
