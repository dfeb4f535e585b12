"""API key authentication for mutating endpoints.

The key travels in the header named by ``settings.api_key_header`` (``api-key``
by default) and is compared in constant time with ``settings.api_key``. When
no key is configured every request is rejected.
"""

import secrets
from typing import Annotated, Final

from fastapi import Depends, Request
from loguru import logger

from product_api.core.config import Settings, get_settings
from product_api.core.exceptions import AuthenticationError

MISSING_API_KEY_MESSAGE: Final[str] = (
    "API key is required. Please provide api-key in headers."
)
INVALID_API_KEY_MESSAGE: Final[str] = "Invalid API key"


def verify_api_key(provided: str | None, settings: Settings) -> None:
    """Check ``provided`` against the configured API key.

    Args:
        provided: Header value sent by the client, if any.
        settings: Application settings holding the expected key.

    Raises:
        AuthenticationError: If the key is missing, wrong, or no key is
            configured on the server.
    """
    if not provided:
        raise AuthenticationError(MISSING_API_KEY_MESSAGE)

    if settings.api_key is None:
        logger.warning("API_KEY is not configured; rejecting authenticated request")
        raise AuthenticationError(INVALID_API_KEY_MESSAGE)

    expected = settings.api_key.get_secret_value()
    if not secrets.compare_digest(provided.encode(), expected.encode()):
        raise AuthenticationError(INVALID_API_KEY_MESSAGE)


async def require_api_key(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Dependency guarding create, update and delete routes."""
    verify_api_key(request.headers.get(settings.api_key_header), settings)
