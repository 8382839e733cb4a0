"""Category ORM — groups products; served with the base CRUD variant.

Invariants:
    - name is non-nullable, at most 100 chars
    - Deleting a category leaves its products uncategorized (FK ON DELETE SET NULL)
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crudflow.db.base import Base, CreatedAtMixin, IntegerKeyMixin


class Category(IntegerKeyMixin, CreatedAtMixin, Base):
    """Product category."""
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    products: Mapped[list["Product"]] = relationship(
        "Product", back_populates="category", passive_deletes=True,
    )
