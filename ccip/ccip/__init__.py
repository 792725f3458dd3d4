"""ccip: signature grammar and CCIP-Read wire-format models."""

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
    CallEnvelope,
    ErrorEnvelope,
    ResultEnvelope,
    decode_call_data,
    encode_call_data,
)
from ccip.signature import (
    InvalidParameterType,
    InvalidSignature,
    MethodDescriptor,
    Parameter,
    SignatureError,
    parse_signature,
)

__all__ = [
    "CallEnvelope",
    "ResultEnvelope",
    "ErrorEnvelope",
    "decode_call_data",
    "encode_call_data",
    "STATUS_BY_KIND",
    "MALFORMED_ENVELOPE",
    "MALFORMED_DATA",
    "UNAUTHORIZED",
    "UNKNOWN_FUNCTION",
    "INPUT_DECODE_ERROR",
    "DECODE_MISMATCH",
    "HANDLER_ERROR",
    "OUTPUT_ENCODE_ERROR",
    "INTERNAL_ERROR",
    "MethodDescriptor",
    "Parameter",
    "parse_signature",
    "SignatureError",
    "InvalidSignature",
    "InvalidParameterType",
]
