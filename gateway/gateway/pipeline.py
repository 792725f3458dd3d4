"""CCIP-Read request pipeline.

``Gateway.handle`` turns one request body into one ``GatewayResponse``::

    envelope → hex data → sender check → selector lookup → input decode
             → bind → handler → output encode → response envelope

Every failure short-circuits the remaining steps and is reported as a
``GatewayError`` kind/status pair; nothing raised here reaches the transport.
"""

from __future__ import annotations

import inspect
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

from anyio import to_thread
from ccip.envelope import SELECTOR_SIZE, CallEnvelope, ResultEnvelope, decode_call_data
from ccip.signature import MethodDescriptor, parse_signature
from eth_abi.exceptions import DecodingError, EncodingError

from gateway.binder import CallRequest, bind
from gateway.config import GatewayConfig
from gateway.dispatcher import HandlerFn, Registration, SelectorTable
from gateway.errors import (
    GatewayError,
    HandlerError,
    InputDecodeError,
    InternalError,
    MalformedData,
    MalformedEnvelope,
    OutputEncodeError,
    Unauthorized,
)

log = logging.getLogger(__name__)


@dataclass(slots=True)
class GatewayResponse:
    """Transport-neutral result: an HTTP status and a JSON-able body."""

    status: int
    payload: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status == 200

    # -- Factories -----------------------------------------------------
    @classmethod
    def success(cls, data: bytes) -> "GatewayResponse":
        return cls(status=200, payload=ResultEnvelope(data).to_dict())

    @classmethod
    def fail(cls, error: GatewayError) -> "GatewayResponse":
        return cls(status=error.status, payload=error.to_envelope().to_dict())


class Gateway:
    """Owns one selector table and serves calls against it.

    Usage::

        gateway = Gateway()

        @gateway.handler("function addr(bytes32 namehash) view returns (address)")
        def addr(request):
            return [ZERO_ADDRESS]

        response = await gateway.handle(body)
    """

    def __init__(self, config: GatewayConfig | None = None) -> None:
        self.config = config or GatewayConfig()
        self._table = SelectorTable()

    # -- Registration --------------------------------------------------
    def register(self, signature: str | MethodDescriptor, handler: HandlerFn) -> MethodDescriptor:
        """Register *handler* for *signature*.

        Signature and duplicate-selector errors are raised here, at setup
        time, never deferred to a request.
        """
        if isinstance(signature, MethodDescriptor):
            descriptor = signature
        else:
            descriptor = parse_signature(signature)
        self._table.register(descriptor, handler)
        return descriptor

    def handler(self, signature: str | MethodDescriptor) -> Callable[[HandlerFn], HandlerFn]:
        """Decorator that registers *fn* under *signature*."""

        def decorator(fn: HandlerFn) -> HandlerFn:
            self.register(signature, fn)
            return fn

        return decorator

    # -- Introspection -------------------------------------------------
    @property
    def methods(self) -> list[MethodDescriptor]:
        return self._table.methods

    def lookup(self, selector: bytes) -> Registration:
        return self._table.lookup(selector)

    # -- Serving -------------------------------------------------------
    async def handle(self, body: bytes | str) -> GatewayResponse:
        """Run one request body through the pipeline."""
        try:
            data = await self._process(body)
        except GatewayError as exc:
            log.info("ccip ✗ %s %s: %s", exc.status, exc.kind, exc.message)
            return GatewayResponse.fail(exc)
        except Exception as exc:
            log.exception("unexpected pipeline error")
            return GatewayResponse.fail(InternalError(f"Internal error: {exc}"))
        return GatewayResponse.success(data)

    async def _process(self, body: bytes | str) -> bytes:
        envelope = self._decode_envelope(body)
        call_data = self._decode_call_data(envelope.data)
        self._check_sender(envelope.sender)

        entry = self._table.lookup(call_data[:SELECTOR_SIZE])
        descriptor = entry.descriptor
        log.info("ccip ← %s(sender=%s)", descriptor.canonical_signature, envelope.sender)

        values = self._decode_inputs(descriptor, call_data[SELECTOR_SIZE:])
        request = CallRequest(
            descriptor=descriptor,
            inputs=bind(descriptor.inputs, values),
            sender=envelope.sender,
        )
        outputs = await self._invoke(entry, request)
        return self._encode_outputs(descriptor, outputs)

    # -- Steps ---------------------------------------------------------
    @staticmethod
    def _decode_envelope(body: bytes | str) -> CallEnvelope:
        try:
            raw = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
            raise MalformedEnvelope("failed to parse request body") from exc
        try:
            return CallEnvelope.from_dict(raw)
        except ValueError as exc:
            raise MalformedEnvelope(str(exc)) from exc

    @staticmethod
    def _decode_call_data(hexstr: str) -> bytes:
        try:
            data = decode_call_data(hexstr)
        except ValueError as exc:
            raise MalformedData(f"invalid data field: {exc}") from exc
        if len(data) < SELECTOR_SIZE:
            raise MalformedData("data field too short")
        return data

    def _check_sender(self, sender: str | None) -> None:
        validator = self.config.sender_validator
        if validator is None or sender is None:
            return
        try:
            accepted = validator(sender)
        except Exception as exc:
            log.warning("sender validator rejected %s: %s", sender, exc)
            raise Unauthorized("unauthorized sender") from exc
        if not accepted:
            log.warning("rejected sender %s", sender)
            raise Unauthorized("unauthorized sender")

    @staticmethod
    def _decode_inputs(descriptor: MethodDescriptor, payload: bytes) -> tuple[Any, ...]:
        try:
            return descriptor.decode_inputs(payload)
        except (DecodingError, ValueError, OverflowError) as exc:
            raise InputDecodeError(f"failed to unpack input parameters: {exc}") from exc

    async def _invoke(self, entry: Registration, request: CallRequest) -> Any:
        handler = entry.handler
        try:
            if inspect.iscoroutinefunction(handler):
                result = await handler(request)
            else:
                result = await to_thread.run_sync(handler, request)
                if inspect.isawaitable(result):
                    result = await result
        except Exception as exc:
            log.exception("handler error for %s", entry.descriptor.canonical_signature)
            if self.config.expose_handler_errors:
                raise HandlerError(f"handler error: {exc}") from exc
            raise HandlerError("handler error") from exc
        return result

    def _encode_outputs(self, descriptor: MethodDescriptor, outputs: Any) -> bytes:
        if outputs is None:
            outputs = ()
        if not isinstance(outputs, (list, tuple)):
            raise OutputEncodeError(
                f"handler must return a list or tuple, got {type(outputs).__name__}"
            )
        encoder = self.config.output_encoder
        if encoder is not None:
            try:
                data = encoder(outputs)
            except Exception as exc:
                raise OutputEncodeError(f"output encoder failed: {exc}") from exc
        else:
            try:
                data = descriptor.encode_outputs(outputs)
            except (EncodingError, TypeError, ValueError, OverflowError) as exc:
                raise OutputEncodeError(f"failed to pack output parameters: {exc}") from exc
        if not isinstance(data, (bytes, bytearray)):
            raise OutputEncodeError("output encoder must return bytes")
        return bytes(data)
