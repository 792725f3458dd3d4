"""Tests for binding decoded values to parameters."""

import pytest
from ccip.signature import Parameter, parse_signature
from gateway.binder import BoundValue, CallRequest, ValueTypeError, bind
from gateway.errors import DecodeMismatch

TEXT = parse_signature("function text(bytes32 namehash, string key) view returns (string)")
NODE = bytes(31) + b"\x01"


class TestBind:
    def test_round_trip_by_name(self):
        values = (NODE, "email")
        request = CallRequest(TEXT, bind(TEXT.inputs, values))
        assert tuple(request.find(p.name).value for p in TEXT.inputs) == values
        assert request.values == values

    def test_preserves_order_and_types(self):
        bound = bind(TEXT.inputs, (NODE, "url"))
        assert [(b.name, b.type) for b in bound] == [("namehash", "bytes32"), ("key", "string")]

    def test_arity_mismatch(self):
        with pytest.raises(DecodeMismatch) as exc_info:
            bind(TEXT.inputs, (NODE,))
        assert exc_info.value.status == 500

    def test_empty(self):
        assert bind((), ()) == ()


class TestCallRequest:
    def test_unknown_name_is_none(self):
        request = CallRequest(TEXT, bind(TEXT.inputs, (NODE, "email")))
        assert request.find("missing") is None
        assert request.get("missing") is None
        assert request.get("missing", "fallback") == "fallback"

    def test_duplicate_names_first_wins(self):
        params = (Parameter("x", "uint256"), Parameter("x", "uint256"))
        d = parse_signature("function f(uint256 x, uint256 y) view returns ()")
        request = CallRequest(d, bind(params, (1, 2)))
        assert request.find("x").value == 1
        assert request.as_dict() == {"x": 1}

    def test_sender(self):
        request = CallRequest(TEXT, bind(TEXT.inputs, (NODE, "k")), sender="0xabc")
        assert request.sender == "0xabc"


class TestBoundValue:
    def test_bytes32(self):
        assert BoundValue("n", "bytes32", NODE).as_bytes32() == NODE

    def test_bytes32_wrong_length(self):
        with pytest.raises(ValueTypeError):
            BoundValue("n", "bytes", b"\x01").as_bytes32()

    def test_str_mismatch(self):
        bound = BoundValue("n", "bytes32", NODE)
        with pytest.raises(ValueTypeError) as exc_info:
            bound.as_str()
        assert exc_info.value.bound is bound
        assert isinstance(exc_info.value, TypeError)

    def test_int_rejects_bool(self):
        assert BoundValue("v", "uint256", 5).as_int() == 5
        with pytest.raises(ValueTypeError):
            BoundValue("v", "bool", True).as_int()

    def test_bool(self):
        assert BoundValue("v", "bool", False).as_bool() is False

    def test_address(self):
        lower = "0x" + "ab" * 20
        assert BoundValue("a", "address", lower).as_address().lower() == lower
        with pytest.raises(ValueTypeError):
            BoundValue("a", "address", "0x1234").as_address()

    def test_tuple(self):
        assert BoundValue("xs", "uint256[]", (1, 2)).as_tuple() == (1, 2)
        with pytest.raises(ValueTypeError):
            BoundValue("xs", "uint256", 1).as_tuple()
