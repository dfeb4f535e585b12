"""Repository for product persistence.

``ProductRepository`` is the only component that talks to the store. It
exposes the operations the API needs: count and find with equality filters,
fetch by id, insert, find-and-update, find-and-delete, name search and the
grouped aggregates used by the statistics endpoint.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger
from sqlalchemy import Row, case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from product_api.core.exceptions import ValidationError
from product_api.core.types import StoreFilters
from product_api.infrastructure.database.models import Product


class ProductRepository:
    """Async CRUD, search and aggregation over the ``products`` table.

    Args:
        session: The async SQLAlchemy session to use for operations.

    Example:
        async with get_async_session() as session:
            repository = ProductRepository(session)
            laptops = await repository.search_by_name("laptop")
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    def _conditions(self, filters: StoreFilters) -> list[ColumnElement[bool]]:
        """Turn column/value pairs into equality conditions.

        Args:
            filters: Mapping of Product attribute name to required value.

        Returns:
            list[ColumnElement[bool]]: WHERE clause conditions.
        """
        conditions: list[ColumnElement[bool]] = []
        for field, value in filters.items():
            if hasattr(Product, field):
                conditions.append(getattr(Product, field) == value)
            else:
                logger.warning("Ignoring filter on non-existent field '{}'", field)
        return conditions

    async def get_by_id(self, product_id: str) -> Product | None:
        """Retrieve a product by its id.

        Args:
            product_id: The product id.

        Returns:
            Product | None: The product if found, None otherwise.
        """
        logger.debug("Fetching product by ID: {}", product_id)
        return await self.session.get(Product, product_id)

    async def exists(self, product_id: str) -> bool:
        """Check whether a product with the given id exists."""
        stmt = select(func.count()).select_from(Product).where(Product.id == product_id)
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def count(self, filters: StoreFilters | None = None) -> int:
        """Count products matching ``filters`` (all products when empty).

        Args:
            filters: Optional equality filters.

        Returns:
            int: Number of matching products.
        """
        stmt = (
            select(func.count())
            .select_from(Product)
            .where(*self._conditions(filters or {}))
        )
        result = await self.session.execute(stmt)
        count_value = result.scalar() or 0

        logger.debug("Counted {} products with filters: {}", count_value, filters)
        return count_value

    async def find(
        self,
        filters: StoreFilters | None = None,
        *,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Product]:
        """Find products matching ``filters`` sorted by name.

        Args:
            filters: Optional equality filters.
            skip: Number of matching products to skip.
            limit: Maximum number of products to return (no limit when None).

        Returns:
            list[Product]: The matching page of products.
        """
        logger.debug(
            "Finding products - filters: {}, skip: {}, limit: {}", filters, skip, limit
        )

        stmt = (
            select(Product)
            .where(*self._conditions(filters or {}))
            .order_by(Product.name, Product.id)
            .offset(skip)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search_by_name(self, term: str) -> list[Product]:
        """Case-insensitive substring search on product names.

        ``%`` and ``_`` in ``term`` are matched literally.

        Args:
            term: Text to look for.

        Returns:
            list[Product]: All matching products sorted by name.
        """
        stmt = (
            select(Product)
            .where(Product.name.icontains(term, autoescape=True))
            .order_by(Product.name, Product.id)
        )
        result = await self.session.execute(stmt)
        products = list(result.scalars().all())

        logger.debug("Search for '{}' matched {} products", term, len(products))
        return products

    async def create(self, product: Product) -> Product:
        """Insert a new product.

        Args:
            product: The product to insert, with its id already assigned.

        Returns:
            Product: The stored product with store-generated timestamps.

        Raises:
            ValidationError: If the id is already taken or the store rejects
                the row.
        """
        if await self.exists(product.id):
            msg = f"Product with id {product.id} already exists"
            raise ValidationError(msg, errors=[msg], context={"product_id": product.id})

        self.session.add(product)
        try:
            await self.session.flush()
        except IntegrityError as e:
            # Lost a race against a concurrent insert of the same id
            await self.session.rollback()
            msg = f"Product with id {product.id} already exists"
            raise ValidationError(
                msg, errors=[msg], context={"product_id": product.id}, cause=e
            ) from e

        await self.session.refresh(product)

        logger.info("Created product with ID: {}", product.id)
        return product

    async def update(
        self, product_id: str, data: Mapping[str, object]
    ) -> Product | None:
        """Apply a partial update to a product.

        Args:
            product_id: Id of the product to update.
            data: Attribute name to new value; absent attributes are untouched.

        Returns:
            Product | None: The updated product, or None if the id is unknown.
        """
        product = await self.get_by_id(product_id)
        if product is None:
            logger.debug("Product not found for update - ID: {}", product_id)
            return None

        for key, value in data.items():
            setattr(product, key, value)

        await self.session.flush()
        await self.session.refresh(product)

        logger.info("Updated product ID {} - fields: {}", product_id, list(data.keys()))
        return product

    async def delete(self, product_id: str) -> Product | None:
        """Delete a product and return it.

        Args:
            product_id: Id of the product to delete.

        Returns:
            Product | None: The deleted product, or None if the id is unknown.
        """
        product = await self.get_by_id(product_id)
        if product is None:
            logger.debug("Product not found for deletion - ID: {}", product_id)
            return None

        await self.session.delete(product)
        await self.session.flush()

        logger.info("Deleted product with ID: {}", product_id)
        return product

    async def add_all(self, products: Sequence[Product]) -> None:
        """Bulk insert products (used by seeding)."""
        self.session.add_all(products)
        await self.session.flush()

    async def summarize(self) -> Row[Any]:
        """Collection-wide counts and price statistics in a single query.

        Returns:
            Row: ``total``, ``in_stock``, ``out_of_stock``, ``average_price``,
                ``min_price`` and ``max_price``. Price values are None for an
                empty collection.
        """
        stmt = select(
            func.count().label("total"),
            func.coalesce(func.sum(case((Product.in_stock, 1), else_=0)), 0).label(
                "in_stock"
            ),
            func.coalesce(func.sum(case((Product.in_stock, 0), else_=1)), 0).label(
                "out_of_stock"
            ),
            func.avg(Product.price).label("average_price"),
            func.min(Product.price).label("min_price"),
            func.max(Product.price).label("max_price"),
        ).select_from(Product)
        result = await self.session.execute(stmt)
        return result.one()

    async def category_breakdown(self) -> Sequence[Row[Any]]:
        """Per-category count, average price and total price.

        Returns:
            Sequence[Row]: ``category``, ``product_count``, ``average_price`` and
                ``total_value`` rows, largest categories first.
        """
        product_count = func.count().label("product_count")
        stmt = (
            select(
                Product.category,
                product_count,
                func.avg(Product.price).label("average_price"),
                func.sum(Product.price).label("total_value"),
            )
            .group_by(Product.category)
            .order_by(product_count.desc(), Product.category)
        )
        result = await self.session.execute(stmt)
        return result.all()
