"""Request-time failures.

Each error carries the wire ``kind`` and HTTP ``status`` it is surfaced as.
Raising one anywhere in the pipeline ends that request and nothing else.
"""

from __future__ import annotations

from ccip.envelope import (
    DECODE_MISMATCH,
    HANDLER_ERROR,
    INPUT_DECODE_ERROR,
    INTERNAL_ERROR,
    MALFORMED_DATA,
    MALFORMED_ENVELOPE,
    OUTPUT_ENCODE_ERROR,
    STATUS_BY_KIND,
    UNAUTHORIZED,
    UNKNOWN_FUNCTION,
    ErrorEnvelope,
)


class GatewayError(Exception):
    kind = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def status(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(kind=self.kind, message=self.message)


class MalformedEnvelope(GatewayError):
    kind = MALFORMED_ENVELOPE


class MalformedData(GatewayError):
    kind = MALFORMED_DATA


class Unauthorized(GatewayError):
    kind = UNAUTHORIZED


class UnknownFunction(GatewayError):
    """Raised when no handler is registered for the requested selector."""

    kind = UNKNOWN_FUNCTION

    def __init__(self, selector: bytes) -> None:
        self.selector = bytes(selector)
        super().__init__(f"function not found: 0x{self.selector.hex()}")


class InputDecodeError(GatewayError):
    kind = INPUT_DECODE_ERROR


class DecodeMismatch(GatewayError):
    kind = DECODE_MISMATCH


class HandlerError(GatewayError):
    kind = HANDLER_ERROR


class OutputEncodeError(GatewayError):
    kind = OUTPUT_ENCODE_ERROR


class InternalError(GatewayError):
    kind = INTERNAL_ERROR
