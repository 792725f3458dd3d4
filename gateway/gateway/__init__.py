"""gateway: CCIP-Read selector dispatch and request pipeline."""

from gateway.binder import BoundValue, CallRequest, ValueTypeError, bind
from gateway.config import GatewayConfig, OutputEncoder, SenderValidator, allow_senders
from gateway.dispatcher import (
    DuplicateSelector,
    HandlerFn,
    Registration,
    RegistrationError,
    SelectorTable,
)
from gateway.errors import (
    DecodeMismatch,
    GatewayError,
    HandlerError,
    InputDecodeError,
    InternalError,
    MalformedData,
    MalformedEnvelope,
    OutputEncodeError,
    Unauthorized,
    UnknownFunction,
)
from gateway.pipeline import Gateway, GatewayResponse

__all__ = [
    "Gateway",
    "GatewayResponse",
    "GatewayConfig",
    "SenderValidator",
    "OutputEncoder",
    "allow_senders",
    "SelectorTable",
    "Registration",
    "HandlerFn",
    "RegistrationError",
    "DuplicateSelector",
    "CallRequest",
    "BoundValue",
    "ValueTypeError",
    "bind",
    "GatewayError",
    "MalformedEnvelope",
    "MalformedData",
    "Unauthorized",
    "UnknownFunction",
    "InputDecodeError",
    "DecodeMismatch",
    "HandlerError",
    "OutputEncodeError",
    "InternalError",
]
