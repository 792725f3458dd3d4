"""Shared fixtures: an in-memory resolver and clients wired to it in-process."""

import httpx
import pytest
from gateway.server import create_app
from reader.client import GatewayClient
from resolver.handlers import build_gateway
from resolver.records import RecordStore


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store():
    s = RecordStore(":memory:")
    s.seed_examples()
    yield s
    s.close()


@pytest.fixture
def resolver_app(store):
    return create_app(build_gateway(store))


@pytest.fixture
async def make_reader():
    """Factory for GatewayClients whose transport is an in-process ASGI app."""
    clients = []

    def _make(app) -> GatewayClient:
        transport = httpx.ASGITransport(app=app)  # type: ignore[arg-type]
        client = GatewayClient.__new__(GatewayClient)
        client.base_url = "http://test"
        client.path = "/"
        client.max_retries = 3
        client._client = httpx.AsyncClient(transport=transport, base_url="http://test")
        clients.append(client)
        return client

    yield _make
    for client in clients:
        await client.close()


@pytest.fixture
async def reader(make_reader, resolver_app):
    return make_reader(resolver_app)
