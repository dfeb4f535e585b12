"""Response envelopes for the product endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ProductOut(CamelModel):
    id: str
    name: str
    price: float
    category: str
    in_stock: bool
    created_at: datetime
    updated_at: datetime


class PaginationOut(CamelModel):
    current_page: int
    total_pages: int
    total_products: int
    limit: int


class ProductListResponse(CamelModel):
    status: Literal["success"] = "success"
    results: int = Field(..., description="Number of products in this page")
    pagination: PaginationOut
    data: list[ProductOut]


class ProductSearchResponse(CamelModel):
    status: Literal["success"] = "success"
    results: int = Field(..., description="Number of matching products")
    search_query: str
    data: list[ProductOut]


class ProductResponse(CamelModel):
    status: Literal["success"] = "success"
    data: ProductOut


class ProductMutationResponse(CamelModel):
    """Envelope for create, update and delete results."""

    status: Literal["success"] = "success"
    message: str
    data: ProductOut


class PriceStatisticsOut(CamelModel):
    average_price: float | None
    min_price: float | None
    max_price: float | None


class CategoryStatisticsOut(CamelModel):
    category: str
    count: int
    average_price: float
    total_value: float


class StatisticsOut(CamelModel):
    total_products: int
    in_stock: int
    out_of_stock: int
    price_statistics: PriceStatisticsOut
    category_breakdown: list[CategoryStatisticsOut]


class StatisticsResponse(CamelModel):
    status: Literal["success"] = "success"
    data: StatisticsOut


class RootResponse(CamelModel):
    status: Literal["success"] = "success"
    message: str
    endpoints: dict[str, str]


class HealthResponse(CamelModel):
    status: Literal["healthy", "degraded"]
    database: bool
