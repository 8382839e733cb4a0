"""Catalog schema validation — Category and Product field rules.

Invariants:
    - id optional everywhere (persistence assigns it)
    - names stripped, non-empty, length-capped
    - sku normalized to alpha-dash; a sku with nothing left is rejected
    - price >= 0
"""

import pytest
from pydantic import ValidationError

from crudflow.core.identity import Identifiable
from crudflow.schemas.catalog import CategoryModel, ProductModel


# --- CategoryModel ------------------------------------------------------------

def test_category_id_is_optional():
    assert CategoryModel(name="Tools").id is None


def test_category_name_is_stripped():
    assert CategoryModel(name="  Tools ").name == "Tools"


def test_category_whitespace_name_rejected():
    with pytest.raises(ValidationError):
        CategoryModel(name="   ")


def test_category_description_max_length():
    with pytest.raises(ValidationError):
        CategoryModel(name="Tools", description="x" * 501)


# --- ProductModel -------------------------------------------------------------

def test_product_sku_normalized():
    assert ProductModel(name="Saw", sku=" Saw 12 in ", price=5).sku == "saw-12-in"


def test_product_sku_with_no_usable_characters_rejected():
    with pytest.raises(ValidationError) as exc_info:
        ProductModel(name="Saw", sku="###", price=5)
    assert exc_info.value.errors()[0]["loc"] == ("sku",)


def test_product_negative_price_rejected():
    with pytest.raises(ValidationError):
        ProductModel(name="Saw", sku="saw", price=-0.01)


def test_product_free_is_allowed():
    assert ProductModel(name="Sticker", sku="sticker", price=0).price == 0


def test_product_id_is_mutable():
    product = ProductModel(id=1, name="Saw", sku="saw", price=5)
    product.id = 9
    assert product.id == 9


def test_product_reads_from_orm_attributes():
    class Row:
        id = 4
        name = "Level"
        sku = "level"
        price = 18.0
        category_id = None

    assert ProductModel.model_validate(Row(), from_attributes=True).id == 4


def test_schemas_satisfy_identity_contract():
    assert isinstance(CategoryModel(name="Tools"), Identifiable)
    assert isinstance(ProductModel(name="Saw", sku="saw", price=5), Identifiable)
