"""Reader client: thin CCIP-Read gateway consumer.

* ``call_raw(data, sender)``        → raw result bytes
* ``call(signature, args, sender)`` → decoded output tuple

Uses ``httpx.AsyncClient`` with connection pooling.
**Never** imports from ``gateway``.

Run directly against a local resolver for a quick demo::

    python -m reader.client
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from ccip.envelope import (
    INTERNAL_ERROR,
    CallEnvelope,
    ErrorEnvelope,
    ResultEnvelope,
    encode_call_data,
)
from ccip.signature import MethodDescriptor, parse_signature

from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential, retry_if_exception_type

log = logging.getLogger(__name__)


class GatewayCallError(Exception):
    """Raised when the gateway answers with a non-200 status."""

    def __init__(self, status: int, error: ErrorEnvelope) -> None:
        self.status = status
        self.error = error
        super().__init__(f"[{status} {error.kind}] {error.message}")

    @property
    def kind(self) -> str:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message


class GatewayClient:
    """Thin async client that POSTs CCIP-Read envelopes over HTTP.

    Parameters
    ----------
    base_url : str
        Gateway origin, e.g. ``http://127.0.0.1:8080``.
    path : str
        Endpoint path the gateway serves.
    timeout : float
        Default request timeout in seconds.
    max_retries : int
        Max connection-level retries.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8080",
        path: str = "/",
        timeout: float = 30.0,
        max_retries: int = 3,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.path = path
        self.max_retries = max_retries
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
        )

    # -- Lifecycle -----------------------------------------------------

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # -- Internal retry helper -----------------------------------------

    def _get_retrier(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=0.5, max=10),
            retry=retry_if_exception_type((httpx.NetworkError, httpx.TimeoutException)),
            reraise=True,
        )

    # -- Calls ---------------------------------------------------------

    async def call_raw(self, data: bytes, sender: str | None = None) -> bytes:
        """POST *data* and return the gateway's raw result bytes.

        Raises ``GatewayCallError`` if the gateway answers with an error.
        """
        payload = CallEnvelope(data=encode_call_data(data), sender=sender).to_dict()

        log.debug("ccip → 0x%s (%d bytes)", data[:4].hex(), len(data))

        async for attempt in self._get_retrier():
            with attempt:
                resp = await self._client.post(self.path, json=payload)

        if resp.status_code != 200:
            try:
                error = ErrorEnvelope.from_dict(resp.json())
            except ValueError:
                error = ErrorEnvelope(kind=INTERNAL_ERROR, message=resp.text)
            raise GatewayCallError(resp.status_code, error)

        return ResultEnvelope.from_dict(resp.json()).data

    async def call(
        self,
        signature: str | MethodDescriptor,
        args: Sequence[Any] = (),
        sender: str | None = None,
    ) -> tuple[Any, ...]:
        """Encode a call to *signature*, send it, and decode the outputs."""
        if isinstance(signature, MethodDescriptor):
            descriptor = signature
        else:
            descriptor = parse_signature(signature)
        result = await self.call_raw(descriptor.encode_call(args), sender=sender)
        return descriptor.decode_outputs(result)


# ── Demo entrypoint ──────────────────────────────────────────────────


async def _demo() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    node = bytes(31) + b"\x01"
    async with GatewayClient() as client:
        print("── addr ──")
        (address,) = await client.call(
            "function addr(bytes32 namehash) view returns (address)", [node]
        )
        print(f"  result: {address}")

        print("── text ──")
        (value,) = await client.call(
            "function text(bytes32 namehash, string key) view returns (string)",
            [node, "email"],
        )
        print(f"  result: {value!r}")

        print("── done ──")


if __name__ == "__main__":
    import anyio

    anyio.run(_demo)
