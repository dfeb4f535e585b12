"""Async database access for the product catalog.

Core components:
- **base**: Declarative base and timestamp columns
- **models**: The ``Product`` table
- **session**: Async engine and session management
- **repository**: Product queries and aggregates
- **dependencies**: FastAPI dependency injection helpers
- **seed**: Sample data for an empty store

PostgreSQL is reached through asyncpg; SQLite through aiosqlite.
"""

from product_api.infrastructure.database.base import Base, TimestampedModel
from product_api.infrastructure.database.dependencies import (
    DatabaseSession,
    ProductRepositoryDep,
    get_db,
    get_product_repository,
)
from product_api.infrastructure.database.models import Product
from product_api.infrastructure.database.repository import ProductRepository
from product_api.infrastructure.database.seed import FIXTURE_PRODUCTS, seed_products
from product_api.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_database_engine,
    create_tables,
    get_async_session,
    get_engine,
    get_session_factory,
)

__all__ = [
    "FIXTURE_PRODUCTS",
    "Base",
    "DatabaseSession",
    "Product",
    "ProductRepository",
    "ProductRepositoryDep",
    "TimestampedModel",
    "check_database_connection",
    "close_database",
    "create_database_engine",
    "create_tables",
    "get_async_session",
    "get_db",
    "get_engine",
    "get_product_repository",
    "get_session_factory",
    "seed_products",
]
