"""FastAPI dependency injection for database sessions and repositories.

Each request gets its own session, committed when the handler returns and
rolled back when it raises. ``DatabaseSession`` and ``ProductRepositoryDep``
are ``Annotated`` aliases so route signatures stay short.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.infrastructure.database.repository import ProductRepository
from product_api.infrastructure.database.session import get_async_session


async def get_db() -> AsyncGenerator[AsyncSession]:
    """Provide a request-scoped database session.

    Yields:
        AsyncGenerator[AsyncSession]: Session committed on success or rolled
                                     back on error.
    """
    async with get_async_session() as session:
        logger.debug("Providing database session for request")
        try:
            yield session
        finally:
            logger.debug("Database session dependency completed")


DatabaseSession = Annotated[AsyncSession, Depends(get_db)]


def get_product_repository(db: DatabaseSession) -> ProductRepository:
    """Build a product repository bound to the request session."""
    return ProductRepository(db)


ProductRepositoryDep = Annotated[ProductRepository, Depends(get_product_repository)]
