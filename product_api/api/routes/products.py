"""Product endpoints under ``/api/products``.

Reads are public. Create, update and delete require the API key; the key is
checked before the request body is read or validated.
"""

import uuid
from typing import Annotated, Any

import orjson
from fastapi import APIRouter, Depends, Query, Request, status

from product_api.api.constants import MALFORMED_JSON_MESSAGE, PRODUCTS_PREFIX
from product_api.api.schemas.products import (
    PaginationOut,
    ProductListResponse,
    ProductMutationResponse,
    ProductOut,
    ProductResponse,
    ProductSearchResponse,
    StatisticsOut,
    StatisticsResponse,
)
from product_api.api.security import require_api_key
from product_api.core.exceptions import NotFoundError, ValidationError
from product_api.infrastructure.database.dependencies import ProductRepositoryDep
from product_api.infrastructure.database.models import Product
from product_api.products import query as product_query
from product_api.products.statistics import compute_statistics
from product_api.products.validation import validate_product_payload

router = APIRouter(prefix=PRODUCTS_PREFIX, tags=["products"])


def _not_found(product_id: str) -> NotFoundError:
    return NotFoundError(
        f"Product with id {product_id} not found", context={"product_id": product_id}
    )


async def read_json_body(request: Request) -> Any:  # noqa: ANN401 - decoded JSON
    """Decode the request body; an empty body counts as ``{}``.

    Raises:
        ValidationError: If the body is not valid JSON.
    """
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return orjson.loads(body)
    except orjson.JSONDecodeError as e:
        raise ValidationError(
            MALFORMED_JSON_MESSAGE, errors=[MALFORMED_JSON_MESSAGE], cause=e
        ) from e


async def validated_create_payload(
    body: Annotated[Any, Depends(read_json_body)],
) -> dict[str, Any]:
    return validate_product_payload(body)


async def validated_update_payload(
    body: Annotated[Any, Depends(read_json_body)],
) -> dict[str, Any]:
    return validate_product_payload(body, partial=True)


@router.get("")
async def list_products(
    repository: ProductRepositoryDep,
    category: Annotated[str | None, Query()] = None,
    in_stock: Annotated[str | None, Query(alias="inStock")] = None,
    page: Annotated[int, Query()] = product_query.DEFAULT_PAGE,
    limit: Annotated[int, Query()] = product_query.DEFAULT_LIMIT,
) -> ProductListResponse:
    """List products, optionally filtered by category and stock, one page at a time."""
    list_query = product_query.build_list_query(
        category=category, in_stock=in_stock, page=page, limit=limit
    )
    result = await product_query.list_products(repository, list_query)

    return ProductListResponse(
        results=len(result.products),
        pagination=PaginationOut.model_validate(result.pagination),
        data=[ProductOut.model_validate(p) for p in result.products],
    )


@router.get("/search")
async def search_products(
    repository: ProductRepositoryDep,
    q: Annotated[str | None, Query()] = None,
) -> ProductSearchResponse:
    """Search products whose name contains ``q`` (case-insensitive)."""
    result = await product_query.search_products(repository, q)

    return ProductSearchResponse(
        results=len(result.products),
        search_query=result.query,
        data=[ProductOut.model_validate(p) for p in result.products],
    )


@router.get("/statistics")
async def get_statistics(repository: ProductRepositoryDep) -> StatisticsResponse:
    """Counts, price range and per-category breakdown over all products."""
    statistics = await compute_statistics(repository)
    return StatisticsResponse(data=StatisticsOut.model_validate(statistics))


@router.get("/{product_id}")
async def get_product(
    product_id: str, repository: ProductRepositoryDep
) -> ProductResponse:
    product = await repository.get_by_id(product_id)
    if product is None:
        raise _not_found(product_id)
    return ProductResponse(data=ProductOut.model_validate(product))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_api_key)],
)
async def create_product(
    payload: Annotated[dict[str, Any], Depends(validated_create_payload)],
    repository: ProductRepositoryDep,
) -> ProductMutationResponse:
    """Create a product; a random id is assigned when none is given."""
    payload.setdefault("id", str(uuid.uuid4()))
    product = await repository.create(Product(**payload))

    return ProductMutationResponse(
        message="Product created successfully",
        data=ProductOut.model_validate(product),
    )


@router.put("/{product_id}", dependencies=[Depends(require_api_key)])
async def update_product(
    product_id: str,
    payload: Annotated[dict[str, Any], Depends(validated_update_payload)],
    repository: ProductRepositoryDep,
) -> ProductMutationResponse:
    """Partially update a product; fields absent from the body are kept."""
    product = await repository.update(product_id, payload)
    if product is None:
        raise _not_found(product_id)

    return ProductMutationResponse(
        message="Product updated successfully",
        data=ProductOut.model_validate(product),
    )


@router.delete("/{product_id}", dependencies=[Depends(require_api_key)])
async def delete_product(
    product_id: str, repository: ProductRepositoryDep
) -> ProductMutationResponse:
    """Delete a product and return it."""
    product = await repository.delete(product_id)
    if product is None:
        raise _not_found(product_id)

    return ProductMutationResponse(
        message="Product deleted successfully",
        data=ProductOut.model_validate(product),
    )
