"""HTTPS Middleware — redirect remote plain-http traffic, leave local and proxied-https alone."""

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from crudflow.api.middleware import require_secure_connection


def _app() -> FastAPI:
    app = FastAPI()
    app.middleware("http")(require_secure_connection)

    @app.post("/things")
    async def things():
        return {"ok": True}

    return app


async def _post(client_addr, headers=None, base_url="http://shop.example"):
    transport = ASGITransport(app=_app(), client=client_addr)
    async with AsyncClient(transport=transport, base_url=base_url) as c:
        return await c.post("/things?x=1", headers=headers or {})


async def test_remote_http_is_redirected_preserving_method():
    res = await _post(("203.0.113.5", 40000))

    assert res.status_code == 308
    assert res.headers["location"] == "https://shop.example/things?x=1"


async def test_loopback_client_passes():
    res = await _post(("127.0.0.1", 40000))

    assert res.status_code == 200


async def test_ipv6_loopback_passes():
    res = await _post(("::1", 40000))

    assert res.status_code == 200


async def test_forwarded_https_passes():
    res = await _post(("203.0.113.5", 40000), {"x-forwarded-proto": "https"})

    assert res.status_code == 200


async def test_direct_https_passes():
    res = await _post(("203.0.113.5", 40000), base_url="https://shop.example")

    assert res.status_code == 200
