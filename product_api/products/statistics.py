"""Collection-wide product statistics.

Computed on every request from two aggregate queries: one for the overall
counts and price range, one grouped by category.
"""

from dataclasses import dataclass

from loguru import logger

from product_api.core.observability import trace_operation
from product_api.infrastructure.database.repository import ProductRepository


@dataclass(frozen=True, slots=True)
class PriceStatistics:
    average_price: float | None
    min_price: float | None
    max_price: float | None


@dataclass(frozen=True, slots=True)
class CategoryStatistics:
    category: str
    count: int
    average_price: float
    total_value: float


@dataclass(frozen=True, slots=True)
class ProductStatistics:
    """Aggregates over all products.

    ``in_stock + out_of_stock == total_products`` always holds since
    ``in_stock`` is never null.
    """

    total_products: int
    in_stock: int
    out_of_stock: int
    price_statistics: PriceStatistics
    category_breakdown: list[CategoryStatistics]


def _as_float(value: float | None) -> float | None:
    return None if value is None else float(value)


async def compute_statistics(repository: ProductRepository) -> ProductStatistics:
    """Compute the current statistics for the product collection.

    Args:
        repository: Repository bound to the request session.

    Returns:
        ProductStatistics: Counts, price range and per-category breakdown.
            Price statistics are all None for an empty collection.
    """
    with trace_operation("products.statistics") as span:
        summary = await repository.summarize()
        breakdown = await repository.category_breakdown()

        span.set_attribute("products.total", int(summary.total))
        span.set_attribute("products.categories", len(breakdown))

    statistics = ProductStatistics(
        total_products=int(summary.total),
        in_stock=int(summary.in_stock),
        out_of_stock=int(summary.out_of_stock),
        price_statistics=PriceStatistics(
            average_price=_as_float(summary.average_price),
            min_price=_as_float(summary.min_price),
            max_price=_as_float(summary.max_price),
        ),
        category_breakdown=[
            CategoryStatistics(
                category=row.category,
                count=int(row.product_count),
                average_price=float(row.average_price),
                total_value=float(row.total_value),
            )
            for row in breakdown
        ],
    )

    logger.debug(
        "Computed statistics - total: {}, categories: {}",
        statistics.total_products,
        len(statistics.category_breakdown),
    )
    return statistics
