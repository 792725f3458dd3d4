"""Integration tests: full roundtrip from reader through the resolver.

Uses httpx.ASGITransport for a realistic HTTP test without processes.
"""

import pytest
from gateway.server import create_app
from reader.client import GatewayCallError
from resolver.handlers import ADDR_SIGNATURE, TEXT_SIGNATURE, build_gateway
from resolver.records import RecordStore

NODE = bytes(31) + b"\x05"


@pytest.fixture
def file_store(tmp_path):
    s = RecordStore(str(tmp_path / "resolver.db"))
    yield s
    s.close()


@pytest.fixture
async def client(make_reader, file_store):
    return make_reader(create_app(build_gateway(file_store)))


@pytest.mark.anyio
async def test_full_roundtrip(client, file_store):
    """Reader → gateway → SQLite → gateway → reader."""
    file_store.set_addr(NODE, "0x" + "ab" * 20)
    file_store.set_text(NODE, "description", "integration")

    (address,) = await client.call(ADDR_SIGNATURE, [NODE])
    assert address.lower() == "0x" + "ab" * 20
    assert await client.call(TEXT_SIGNATURE, [NODE, "description"]) == ("integration",)


@pytest.mark.anyio
async def test_updates_are_visible(client, file_store):
    file_store.set_text(NODE, "url", "https://one.example")
    assert await client.call(TEXT_SIGNATURE, [NODE, "url"]) == ("https://one.example",)
    file_store.set_text(NODE, "url", "https://two.example")
    assert await client.call(TEXT_SIGNATURE, [NODE, "url"]) == ("https://two.example",)


@pytest.mark.anyio
async def test_sequential_calls_are_independent(client, file_store):
    """Multiple calls should not share state."""
    file_store.set_text(NODE, "a", "1")
    file_store.set_text(NODE, "b", "2")
    r1 = await client.call(TEXT_SIGNATURE, [NODE, "a"])
    r2 = await client.call(TEXT_SIGNATURE, [NODE, "b"])
    assert r1 == ("1",)
    assert r2 == ("2",)


@pytest.mark.anyio
async def test_error_does_not_corrupt_connection(client, file_store):
    """A failed call should not break subsequent calls."""
    file_store.set_text(NODE, "still", "works")

    with pytest.raises(GatewayCallError):
        await client.call("function nonexistent() view returns ()")

    assert await client.call(TEXT_SIGNATURE, [NODE, "still"]) == ("works",)
