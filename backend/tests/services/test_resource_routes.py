"""JSON API Routes — /api/v1/products and /api/v1/categories through the resource adapter.

Tests cover:
    - 200 list/get, 201 create/clone, 204 delete
    - PUT uses the path id, never the body id
    - Missing ids and disabled actions share the 404 envelope
    - Invalid bodies answer 400 with VALIDATION_ERROR details
    - A disabled create/update answers 404 before the body is validated
"""

from sqlalchemy import select

from crudflow.api.routes import catalog
from crudflow.core.domain_types import CrudAction
from crudflow.models.category import Category
from crudflow.models.product import Product


async def test_list_products(client, seed_product):
    res = await client.get("/api/v1/products")

    assert res.status_code == 200
    body = res.json()
    assert [p["sku"] for p in body] == ["hammer-01"]
    assert body[0]["category_id"] == seed_product.category_id


async def test_get_product(client, seed_product):
    res = await client.get(f"/api/v1/products/{seed_product.id}")

    assert res.status_code == 200
    assert res.json()["name"] == "Hammer"


async def test_get_missing_is_404_envelope(client):
    res = await client.get("/api/v1/products/404")

    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["context"]["entity_id"] == "404"


async def test_create_returns_201_with_new_id(client, test_db):
    res = await client.post(
        "/api/v1/products",
        json={"id": 500, "name": "Chisel", "sku": "Chisel 12", "price": 8.5},
    )

    assert res.status_code == 201
    body = res.json()
    assert body["id"] != 500
    assert body["sku"] == "chisel-12"
    row = await test_db.get(Product, body["id"])
    assert row.name == "Chisel"


async def test_create_invalid_body_is_400(client, test_db):
    res = await client.post(
        "/api/v1/products", json={"name": "", "sku": "x", "price": -1},
    )

    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    fields = {d["field"] for d in error["details"]}
    assert {"body.name", "body.price"} <= fields
    assert (await test_db.execute(select(Product))).first() is None


async def test_put_uses_path_id(client, test_db, seed_product):
    other = Product(name="Other", sku="other", price=1)
    test_db.add(other)
    await test_db.commit()

    res = await client.put(
        f"/api/v1/products/{seed_product.id}",
        json={"id": other.id, "name": "Claw Hammer", "sku": "hammer-01", "price": 14},
    )

    assert res.status_code == 200
    assert res.json()["id"] == seed_product.id
    test_db.expire_all()
    assert (await test_db.get(Product, seed_product.id)).name == "Claw Hammer"
    assert (await test_db.get(Product, other.id)).name == "Other"


async def test_put_missing_is_404(client):
    res = await client.put(
        "/api/v1/products/999", json={"name": "Ghost", "sku": "ghost", "price": 1},
    )

    assert res.status_code == 404


async def test_delete_returns_204(client, test_db, seed_product):
    res = await client.delete(f"/api/v1/products/{seed_product.id}")

    assert res.status_code == 204
    assert res.content == b""
    test_db.expire_all()
    assert (await test_db.execute(select(Product))).first() is None


async def test_delete_missing_is_404(client):
    res = await client.delete("/api/v1/products/999")

    assert res.status_code == 404


async def test_clone_returns_201_copy(client, seed_product):
    res = await client.post(f"/api/v1/products/{seed_product.id}/clone")

    assert res.status_code == 201
    body = res.json()
    assert body["id"] != seed_product.id
    assert body["sku"] == "hammer-01"


async def test_category_clone_disabled_is_404(client, seed_category):
    res = await client.post(f"/api/v1/categories/{seed_category.id}/clone")

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_disabled_and_missing_are_indistinguishable(client, seed_product):
    catalog.product_api.config.disable(CrudAction.GET)

    disabled = await client.get(f"/api/v1/products/{seed_product.id}")
    catalog.product_api.config.enable(CrudAction.GET)
    missing = await client.get("/api/v1/products/999")

    assert disabled.status_code == missing.status_code == 404
    assert disabled.json()["error"]["code"] == missing.json()["error"]["code"]
    assert "disabled" not in disabled.text


async def test_disabled_delete_keeps_row(client, test_db, seed_product):
    catalog.product_api.config.disable(CrudAction.DELETE)

    res = await client.delete(f"/api/v1/products/{seed_product.id}")

    assert res.status_code == 404
    test_db.expire_all()
    assert await test_db.get(Product, seed_product.id) is not None


async def test_api_and_views_have_independent_toggles(client, seed_product):
    catalog.product_views.config.disable(CrudAction.LIST)

    assert (await client.get("/api/v1/products")).status_code == 200
    assert (await client.get("/products")).status_code == 404


async def test_unknown_category_reference_is_400(client, test_db):
    res = await client.post(
        "/api/v1/products",
        json={"name": "Orphan", "sku": "orphan", "price": 1, "category_id": 404},
    )

    assert res.status_code == 400
    assert res.json()["error"]["message"] == "category_id 404 does not exist"
    assert (await test_db.execute(select(Product))).first() is None


async def test_disabled_create_with_invalid_body_is_404(client, test_db):
    catalog.category_api.config.disable(CrudAction.CREATE)

    res = await client.post("/api/v1/categories", json={"name": ""})

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert (await test_db.execute(select(Category))).first() is None


async def test_disabled_update_with_invalid_body_is_404(client, test_db, seed_category):
    catalog.category_api.config.disable(CrudAction.UPDATE)

    res = await client.put(f"/api/v1/categories/{seed_category.id}", json={})

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
    test_db.expire_all()
    assert (await test_db.get(Category, seed_category.id)).name == "Tools"
