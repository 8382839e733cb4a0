"""Declarative Base — shared metadata and column mixins for the catalog tables.

Invariants:
    - Every ORM model inherits from Base, so Alembic sees one MetaData
    - Constraint and index names are deterministic (naming convention below),
      which keeps hand-written migrations and autogenerate in agreement

Design Decisions:
    - created_at lives in a mixin: it is audit data, never part of a CRUD schema
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class IntegerKeyMixin:
    """Autoincrement integer primary key, assigned by the database on insert."""
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class CreatedAtMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
