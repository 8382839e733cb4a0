"""Product ORM — catalog item; served with the full CRUD variant (clone enabled).

Invariants:
    - sku is an alpha-dash slug (normalized by the schema, not the database)
    - category_id is optional and indexed

Design Decisions:
    - sku not unique: cloning a product must succeed without a rename step
"""

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crudflow.db.base import Base, CreatedAtMixin, IntegerKeyMixin


class Product(IntegerKeyMixin, CreatedAtMixin, Base):
    """Catalog product."""
    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    category: Mapped["Category | None"] = relationship(
        "Category", back_populates="products",
    )
