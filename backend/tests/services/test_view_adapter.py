"""View Response Adapter — redirect policy and 404 packaging on a standalone app.

Tests cover:
    - Full variant: create redirects to Details of the new id
    - Base variant: create redirects to Index (no id)
    - Edit and clone redirect to Details, delete to Index
    - NotFound becomes a 404 envelope regardless of reason
    - Domain errors without a field are left to the boundary handler
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from crudflow.api.error_handlers import register_error_handlers
from crudflow.api.templating import templates
from crudflow.api.view_adapter import build_view_router
from crudflow.config import Settings
from crudflow.core.crud_config import CrudConfig
from crudflow.core.errors import DomainValidationError
from crudflow.schemas.catalog import CategoryModel
from crudflow.services.crud_dispatcher import CrudDispatcher
from tests.services.fake_crud_service import InMemoryCrudService


def _app(config: CrudConfig, service: InMemoryCrudService) -> FastAPI:
    app = FastAPI()
    app.include_router(build_view_router(
        CrudDispatcher(service, config, resource="widgets"),
        templates, CategoryModel,
        name="widgets", prefix="/widgets", title="Widget",
    ))
    register_error_handlers(app, templates, Settings())
    return app


@pytest.fixture
def service():
    return InMemoryCrudService(CategoryModel(id=3, name="Bolts"), next_id=7)


async def _post(app: FastAPI, path: str, data: dict | None = None):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        return await c.post(path, data=data or {})


async def test_full_variant_create_redirects_to_new_details(service):
    res = await _post(_app(CrudConfig.full(), service), "/widgets/create", {"name": "Nuts"})

    assert res.status_code == 303
    assert res.headers["location"] == "http://test/widgets/7"
    assert service.rows[7].name == "Nuts"


async def test_base_variant_create_redirects_to_index(service):
    res = await _post(_app(CrudConfig.base(), service), "/widgets/create", {"name": "Nuts"})

    assert res.status_code == 303
    assert res.headers["location"] == "http://test/widgets"


async def test_edit_redirects_to_details(service):
    res = await _post(
        _app(CrudConfig.base(), service), "/widgets/3/edit", {"name": "Screws"},
    )

    assert res.headers["location"] == "http://test/widgets/3"


async def test_clone_redirects_to_details_of_copy(service):
    res = await _post(_app(CrudConfig.full(), service), "/widgets/3/clone")

    assert res.status_code == 303
    assert res.headers["location"] == "http://test/widgets/7"


async def test_delete_redirects_to_index(service):
    res = await _post(_app(CrudConfig.full(), service), "/widgets/3/delete")

    assert res.headers["location"] == "http://test/widgets"
    assert service.rows == {}


@pytest.mark.parametrize("config,path", [
    (CrudConfig.full(), "/widgets/99/clone"),
    (CrudConfig.base(), "/widgets/3/clone"),
])
async def test_not_found_reasons_look_the_same(service, config, path):
    res = await _post(_app(config, service), path)

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert "reason" not in res.text


class _RejectingService(InMemoryCrudService):
    async def create(self, entity):
        raise DomainValidationError("widget quota reached")


async def test_domain_error_without_field_is_400():
    service = _RejectingService()

    res = await _post(_app(CrudConfig.full(), service), "/widgets/create", {"name": "Nuts"})

    assert res.status_code == 400
    assert res.json()["error"]["message"] == "widget quota reached"
    assert service.rows == {}
