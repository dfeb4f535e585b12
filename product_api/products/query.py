"""Translate list and search query strings into repository calls.

Listing supports exact ``category`` and ``inStock`` filters plus page/limit
pagination; results are ordered by name. Search matches a case-insensitive
substring of the product name across the whole collection.
"""

import math
from dataclasses import dataclass, field
from typing import Final

from product_api.core.exceptions import ValidationError
from product_api.core.types import StoreFilters
from product_api.infrastructure.database.models import Product
from product_api.infrastructure.database.repository import ProductRepository

DEFAULT_PAGE: Final[int] = 1
DEFAULT_LIMIT: Final[int] = 10
# LIMIT and OFFSET are bound as signed 64-bit integers by the store drivers
MAX_ROW_BOUND: Final[int] = 2**63 - 1

SEARCH_QUERY_REQUIRED_MESSAGE: Final[str] = (
    'Search query parameter "q" is required'
)


@dataclass(frozen=True, slots=True)
class ListQuery:
    """Store-level parameters for one page of a product listing."""

    filters: StoreFilters = field(default_factory=dict)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True, slots=True)
class Pagination:
    current_page: int
    total_pages: int
    total_products: int
    limit: int


@dataclass(frozen=True, slots=True)
class ProductPage:
    products: list[Product]
    pagination: Pagination


@dataclass(frozen=True, slots=True)
class SearchResult:
    query: str
    products: list[Product]


def build_list_query(
    *,
    category: str | None = None,
    in_stock: str | None = None,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
) -> ListQuery:
    """Build a ``ListQuery`` from raw query-string values.

    Args:
        category: Exact category to match; ignored when empty.
        in_stock: ``"true"`` selects in-stock products, any other present value
            selects out-of-stock ones.
        page: 1-based page number.
        limit: Page size, at least 1.

    Returns:
        ListQuery: Filters and pagination for the repository.

    Raises:
        ValidationError: If ``page`` or ``limit`` is out of range, or the
            resulting offset does not fit the store's integer range.
    """
    violations: list[str] = []
    if page < 1:
        violations.append("Page must be a positive integer")
    if limit < 1:
        violations.append("Limit must be a positive integer")
    elif limit > MAX_ROW_BOUND:
        violations.append("Limit is too large")
    if not violations and (page - 1) * limit > MAX_ROW_BOUND:
        violations.append("Page is too large for the given limit")
    if violations:
        raise ValidationError(
            "Invalid query parameters",
            errors=violations,
            context={"page": page, "limit": limit},
        )

    filters: StoreFilters = {}
    if category:
        filters["category"] = category
    if in_stock is not None:
        filters["in_stock"] = in_stock == "true"

    return ListQuery(filters=filters, page=page, limit=limit)


def paginate(query: ListQuery, total: int) -> Pagination:
    """Pagination metadata for ``total`` matching products."""
    return Pagination(
        current_page=query.page,
        total_pages=math.ceil(total / query.limit),
        total_products=total,
        limit=query.limit,
    )


def build_search_term(q: str | None) -> str:
    """Validate the ``q`` parameter.

    Raises:
        ValidationError: If ``q`` is missing or blank.
    """
    if q is None or not q.strip():
        raise ValidationError(SEARCH_QUERY_REQUIRED_MESSAGE)
    return q


async def list_products(repository: ProductRepository, query: ListQuery) -> ProductPage:
    """Fetch one page of products with its pagination metadata.

    The total is counted against the filters alone, so it does not depend on
    the requested page.
    """
    total = await repository.count(query.filters)
    products = await repository.find(query.filters, skip=query.skip, limit=query.limit)
    return ProductPage(products=products, pagination=paginate(query, total))


async def search_products(repository: ProductRepository, q: str | None) -> SearchResult:
    """Run a name search for ``q`` over the whole collection."""
    term = build_search_term(q)
    return SearchResult(query=term, products=await repository.search_by_name(term))
