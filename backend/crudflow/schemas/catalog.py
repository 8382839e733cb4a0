"""Catalog Schemas — Category and Product entities with field-level validation.

Invariants:
    - id is optional on input; persistence assigns it, the route overwrites it on update
    - name fields are stripped and must be non-empty
    - ProductModel.sku is normalized to an alpha-dash slug and must stay non-empty
    - ProductModel.price >= 0

Design Decisions:
    - field_validator for side-effect-free transforms (strip, slug) — keeps models pure
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from crudflow.core.slugs import is_alpha_dash, to_alpha_dash


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("cannot be empty or whitespace")
    return v


class CategoryModel(BaseModel):
    """Category entity."""
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)


class ProductModel(BaseModel):
    """Product entity."""
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    name: str = Field(min_length=1, max_length=200)
    sku: str = Field(min_length=1, max_length=100)
    price: float = Field(ge=0)
    category_id: int | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v: str) -> str:
        slug = to_alpha_dash(v)
        if not is_alpha_dash(slug):
            raise ValueError("sku must contain letters, digits or dashes")
        return slug
