"""Error Handlers — boundary translation of faults, framework errors and content negotiation.

Tests cover:
    - Unhandled faults → 500; exception text only in development
    - 401/403 reported as 404 when mask_access_errors is on, untouched otherwise
    - DatabaseError → 503 envelope
    - Browser requests get the HTML error page, /api/ requests get JSON
"""

import pytest
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient

from crudflow.api.error_handlers import register_error_handlers
from crudflow.api.templating import templates
from crudflow.config import Settings
from crudflow.core.errors import DatabaseError


def _app(**settings) -> FastAPI:
    app = FastAPI()

    @app.get("/api/boom")
    async def boom():
        raise ValueError("secret connection string")

    @app.get("/api/forbidden")
    async def forbidden():
        raise HTTPException(status_code=403, detail="Forbidden")

    @app.get("/api/db")
    async def db_down():
        raise DatabaseError("Connection or operational error", "execute")

    register_error_handlers(app, templates, Settings(**settings))
    return app


async def _get(app: FastAPI, path: str):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        return await c.get(path)


async def test_fault_hidden_in_production():
    res = await _get(_app(environment="production"), "/api/boom")

    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert "detail" not in error
    assert "secret" not in res.text


async def test_fault_detail_shown_in_development():
    res = await _get(_app(environment="development"), "/api/boom")

    assert res.status_code == 500
    assert res.json()["error"]["detail"] == "ValueError: secret connection string"


@pytest.mark.parametrize("masked,expected", [(True, 404), (False, 403)])
async def test_access_errors_masking(masked, expected):
    res = await _get(_app(mask_access_errors=masked), "/api/forbidden")

    assert res.status_code == expected


async def test_database_error_is_503():
    res = await _get(_app(), "/api/db")

    assert res.status_code == 503
    assert res.json()["error"]["code"] == "DATABASE_ERROR"


async def test_unknown_page_renders_html_for_browsers(client):
    res = await client.get("/no-such-page", headers={"accept": "text/html"})

    assert res.status_code == 404
    assert "text/html" in res.headers["content-type"]
    assert "<h1>404</h1>" in res.text


async def test_api_paths_always_answer_json(client):
    res = await client.get("/api/v1/products/999", headers={"accept": "text/html"})

    assert res.status_code == 404
    assert res.headers["content-type"].startswith("application/json")
