"""Tests for the Starlette binding.

Uses ``httpx.ASGITransport`` to test Starlette in-process without
starting a real server.
"""

import httpx
import pytest
from ccip.envelope import decode_call_data, encode_call_data
from ccip.signature import parse_signature
from gateway.pipeline import Gateway
from gateway.server import create_app

ADDR = parse_signature("function addr(bytes32 namehash) view returns (address)")
NODE = bytes(31) + b"\x01"


@pytest.fixture
def client(resolver_app):
    """In-process async test client."""
    transport = httpx.ASGITransport(app=resolver_app)  # type: ignore[arg-type]
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest.mark.anyio
async def test_post_addr(client):
    resp = await client.post("/", json={"data": encode_call_data(ADDR.encode_call([NODE]))})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    (address,) = ADDR.decode_outputs(decode_call_data(resp.json()["data"]))
    assert address == "0x1111111111111111111111111111111111111111"


@pytest.mark.anyio
async def test_get_not_allowed(client):
    resp = await client.get("/")
    assert resp.status_code == 405


@pytest.mark.anyio
async def test_parse_error(client):
    resp = await client.post(
        "/",
        content=b"not json",
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["kind"] == "MalformedEnvelope"


@pytest.mark.anyio
async def test_short_data(client):
    resp = await client.post("/", json={"data": "0x0102"})
    assert resp.status_code == 400
    assert resp.json()["kind"] == "MalformedData"
    assert resp.json()["message"]


@pytest.mark.anyio
async def test_unknown_function(client):
    resp = await client.post("/", json={"data": "0xdeadbeef"})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_cors_preflight(client):
    resp = await client.options(
        "/",
        headers={
            "Origin": "https://app.example",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"


@pytest.mark.anyio
async def test_custom_path():
    app = create_app(Gateway(), path="/lookup", allow_origins=())
    transport = httpx.ASGITransport(app=app)  # type: ignore[arg-type]
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        assert (await client.post("/lookup", json={"data": "0xdeadbeef"})).status_code == 404
        assert (await client.post("/", json={"data": "0xdeadbeef"})).status_code == 404
        assert (await client.get("/lookup")).status_code == 405
