"""Catalog Routes — Category and Product served through both presentation flows.

Invariants:
    - Each router owns its own dispatcher (and therefore its own toggles)
    - Categories use the base variant: Clone off, Create → Index
    - Products use the full variant: Clone on, Create → Details of the new product
    - The product form hook always lists categories fresh (no caching)

Design Decisions:
    - Dispatchers are module-level so operators/tests can flip toggles between requests
      (ADR: single-process uvicorn; toggles are per-process state, last write wins)
    - Services share the process-wide session_scope; no request-scoped DI needed
"""

from typing import Any

from crudflow.api.resource_adapter import build_resource_router
from crudflow.api.templating import templates
from crudflow.api.view_adapter import build_view_router
from crudflow.core.crud_config import CrudConfig
from crudflow.core.dispatch_result import ModelState
from crudflow.models.category import Category
from crudflow.models.product import Product
from crudflow.schemas.catalog import CategoryModel, ProductModel
from crudflow.services.crud_dispatcher import CrudDispatcher
from crudflow.services.sqlalchemy_crud import SqlAlchemyCrudService

category_service = SqlAlchemyCrudService(Category, CategoryModel, resource="Category")
product_service = SqlAlchemyCrudService(
    Product, ProductModel, resource="Product",
    references={"category_id": Category},
)


async def product_form_choices(state: ModelState | None) -> dict[str, Any]:
    """Dropdown options for the product create/edit form."""
    categories = await category_service.read_all()
    return {"choices": {"category_id": [(c.id, c.name) for c in categories]}}


# ─── Dispatchers (one per controller) ───────────────────────────

category_views = CrudDispatcher(
    category_service, CrudConfig.base(), resource="categories",
)
category_api = CrudDispatcher(
    category_service, CrudConfig.base(), resource="categories",
)
product_views = CrudDispatcher(
    product_service,
    CrudConfig.full(on_prepare_form=product_form_choices),
    resource="products",
)
product_api = CrudDispatcher(
    product_service, CrudConfig.full(), resource="products",
)


# ─── Routers ────────────────────────────────────────────────────

category_view_router = build_view_router(
    category_views, templates, CategoryModel,
    name="categories", prefix="/categories", title="Category",
)
product_view_router = build_view_router(
    product_views, templates, ProductModel,
    name="products", prefix="/products", title="Product",
)
category_api_router = build_resource_router(
    category_api, CategoryModel,
    name="categories", prefix="/api/v1/categories", title="Category",
)
product_api_router = build_resource_router(
    product_api, ProductModel,
    name="products", prefix="/api/v1/products", title="Product",
)
