"""CCIP-Read wire-format models.

Pure data with no I/O or business logic.  Both the gateway and the reader
client import these for serialisation only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from eth_utils import decode_hex, is_0x_prefixed, is_address, to_checksum_address

# ── Error kinds ──────────────────────────────────────────────────────
MALFORMED_ENVELOPE = "MalformedEnvelope"
MALFORMED_DATA = "MalformedData"
UNAUTHORIZED = "Unauthorized"
UNKNOWN_FUNCTION = "UnknownFunction"
INPUT_DECODE_ERROR = "InputDecodeError"
DECODE_MISMATCH = "DecodeMismatch"
HANDLER_ERROR = "HandlerError"
OUTPUT_ENCODE_ERROR = "OutputEncodeError"
INTERNAL_ERROR = "InternalError"

STATUS_BY_KIND: dict[str, int] = {
    MALFORMED_ENVELOPE: 400,
    MALFORMED_DATA: 400,
    UNAUTHORIZED: 401,
    UNKNOWN_FUNCTION: 404,
    INPUT_DECODE_ERROR: 400,
    DECODE_MISMATCH: 500,
    HANDLER_ERROR: 500,
    OUTPUT_ENCODE_ERROR: 500,
    INTERNAL_ERROR: 500,
}

SELECTOR_SIZE = 4


def decode_call_data(hexstr: str) -> bytes:
    """Decode a ``0x``-prefixed hex string; raises ``ValueError`` on bad input."""
    if not is_0x_prefixed(hexstr):
        raise ValueError("data must be 0x-prefixed hex")
    if len(hexstr) % 2:
        raise ValueError("data has an odd number of hex digits")
    return decode_hex(hexstr)


def encode_call_data(data: bytes) -> str:
    return "0x" + data.hex()


# ── Models ───────────────────────────────────────────────────────────
@dataclass(slots=True)
class CallEnvelope:
    """Inbound request body: ``{"data": "0x…", "sender": "0x…"}``.

    ``sender`` is optional; an empty string is treated as absent.  A
    supplied sender is normalised to its EIP-55 checksum form.
    """

    data: str
    sender: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"data": self.data}
        if self.sender is not None:
            d["sender"] = self.sender
        return d

    @classmethod
    def from_dict(cls, raw: Any) -> "CallEnvelope":
        """Parse a raw JSON value; raises ``ValueError`` on bad input."""
        if not isinstance(raw, dict):
            raise ValueError("request must be a JSON object")
        data = raw.get("data")
        if not isinstance(data, str):
            raise ValueError("missing or invalid 'data' field")
        sender = raw.get("sender")
        if sender is None or sender == "":
            return cls(data=data)
        if not isinstance(sender, str) or not is_address(sender):
            raise ValueError("'sender' must be a 20-byte hex address")
        return cls(data=data, sender=to_checksum_address(sender))


@dataclass(slots=True)
class ResultEnvelope:
    """Outbound success body."""

    data: bytes

    def to_dict(self) -> dict[str, Any]:
        return {"data": encode_call_data(self.data)}

    @classmethod
    def from_dict(cls, raw: Any) -> "ResultEnvelope":
        if not isinstance(raw, dict) or not isinstance(raw.get("data"), str):
            raise ValueError("response must be a JSON object with a 'data' string")
        return cls(data=decode_call_data(raw["data"]))


@dataclass(slots=True)
class ErrorEnvelope:
    """Outbound failure body.  ``message`` is what EIP-3668 clients display."""

    kind: str
    message: str

    @property
    def status(self) -> int:
        return STATUS_BY_KIND.get(self.kind, 500)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}

    @classmethod
    def from_dict(cls, raw: Any) -> "ErrorEnvelope":
        if not isinstance(raw, dict):
            return cls(kind=INTERNAL_ERROR, message=str(raw))
        return cls(
            kind=str(raw.get("kind", INTERNAL_ERROR)),
            message=str(raw.get("message", "")),
        )
