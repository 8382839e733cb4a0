"""ORM Models — SQLAlchemy declarative models for the catalog resources.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every model has an integer `id` primary key assigned by the database

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from crudflow.models.category import Category  # noqa: F401
from crudflow.models.product import Product  # noqa: F401
