"""Sample catalog data loaded into an empty store at startup."""

from typing import Final

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from product_api.infrastructure.database.models import Product
from product_api.infrastructure.database.repository import ProductRepository

FIXTURE_PRODUCTS: Final[tuple[dict[str, str | float | bool], ...]] = (
    {
        "id": "1",
        "name": "Laptop",
        "price": 1200,
        "category": "electronics",
        "in_stock": True,
    },
    {
        "id": "2",
        "name": "Smartphone",
        "price": 800,
        "category": "electronics",
        "in_stock": True,
    },
    {
        "id": "3",
        "name": "Coffee Maker",
        "price": 50,
        "category": "kitchen",
        "in_stock": False,
    },
    {
        "id": "4",
        "name": "Wireless Mouse",
        "price": 25,
        "category": "electronics",
        "in_stock": True,
    },
    {
        "id": "5",
        "name": "Blender",
        "price": 80,
        "category": "kitchen",
        "in_stock": True,
    },
)


async def seed_products(session: AsyncSession) -> int:
    """Insert the fixture products if the store holds no products.

    Args:
        session: Session to write with. The caller owns the transaction.

    Returns:
        int: Number of products inserted (0 when the store was not empty).
    """
    repository = ProductRepository(session)

    existing = await repository.count()
    if existing > 0:
        logger.info("Skipping seed, store already holds {} products", existing)
        return 0

    await repository.add_all([Product(**fixture) for fixture in FIXTURE_PRODUCTS])

    logger.info("Seeded {} sample products", len(FIXTURE_PRODUCTS))
    return len(FIXTURE_PRODUCTS)
