"""ORM model for the product catalog."""

from sqlalchemy import Boolean, CheckConstraint, Float, String, true
from sqlalchemy.orm import Mapped, mapped_column

from product_api.infrastructure.database.base import TimestampedModel

ID_MAX_LENGTH = 64
NAME_MAX_LENGTH = 255
CATEGORY_MAX_LENGTH = 100


class Product(TimestampedModel):
    """A catalog product.

    ``id`` is a caller-chosen or generated string key, unique by virtue of
    being the primary key and never changed after insert.
    """

    __tablename__ = "products"
    __table_args__ = (CheckConstraint("price >= 0", name="price_non_negative"),)

    id: Mapped[str] = mapped_column(String(ID_MAX_LENGTH), primary_key=True)
    name: Mapped[str] = mapped_column(
        String(NAME_MAX_LENGTH), nullable=False, index=True
    )
    price: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(
        String(CATEGORY_MAX_LENGTH), nullable=False, index=True
    )
    in_stock: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id!r}, name={self.name!r})>"
