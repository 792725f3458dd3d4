"""Example resolver handlers: ``addr`` and ``text``.

Both are plain functions: the gateway runs them in a worker thread, so
the blocking SQLite lookups do not stall the event loop.
"""

from __future__ import annotations

import logging

from gateway.binder import CallRequest
from gateway.config import GatewayConfig
from gateway.pipeline import Gateway

from resolver.records import RecordStore

log = logging.getLogger(__name__)

ZERO_ADDRESS = "0x" + "00" * 20

ADDR_SIGNATURE = "function addr(bytes32 namehash) view returns (address)"
TEXT_SIGNATURE = "function text(bytes32 namehash, string key) view returns (string)"


def build_gateway(store: RecordStore, config: GatewayConfig | None = None) -> Gateway:
    """Create a gateway answering ``addr`` and ``text`` from *store*."""
    gateway = Gateway(config)

    @gateway.handler(ADDR_SIGNATURE)
    def addr(request: CallRequest) -> list:
        """Return the address for a namehash, or the zero address."""
        node = request.find("namehash")
        if node is None:
            raise ValueError("namehash parameter not found")
        address = store.addr(node.as_bytes32())
        return [address or ZERO_ADDRESS]

    @gateway.handler(TEXT_SIGNATURE)
    def text(request: CallRequest) -> list:
        """Return a text record, or the empty string."""
        node = request.find("namehash")
        if node is None:
            raise ValueError("namehash parameter not found")
        key = request.find("key")
        if key is None:
            raise ValueError("key parameter not found")
        value = store.text(node.as_bytes32(), key.as_str())
        return [value or ""]

    return gateway
