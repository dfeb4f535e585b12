"""SQLAlchemy declarative base and shared timestamp columns.

- **Base**: declarative base configured with constraint naming conventions
- **TimestampedModel**: abstract model adding store-managed ``created_at`` and
  ``updated_at`` columns

Timestamps are filled by the database (``server_default``/``onupdate``) so
clients can never set them.
"""

from datetime import datetime

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from product_api.infrastructure.constants import NAMING_CONVENTION


class Base(DeclarativeBase):
    """Declarative base with naming conventions for all constraints."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class TimestampedModel(Base):
    """Abstract base model carrying creation and modification timestamps."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Timestamp when the record was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        doc="Timestamp when the record was last updated (UTC)",
    )
