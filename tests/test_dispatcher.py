"""Tests for the selector dispatch table."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from ccip.signature import parse_signature
from gateway.dispatcher import (
    DuplicateSelector,
    RegistrationError,
    SelectorTable,
    selector_key,
)
from gateway.errors import UnknownFunction

ADDR = parse_signature("function addr(bytes32 namehash) view returns (address)")
TEXT = parse_signature("function text(bytes32 namehash, string key) view returns (string)")


def noop(request):
    return []


class TestRegister:
    def test_register_and_lookup(self):
        table = SelectorTable()
        table.register(ADDR, noop)
        entry = table.lookup(bytes.fromhex("3b3b57de"))
        assert entry.descriptor is ADDR
        assert entry.handler is noop

    def test_duplicate_selector_rejected(self):
        table = SelectorTable()
        table.register(ADDR, noop)
        other = parse_signature("function addr(bytes32 node) view returns (bytes32)")

        def replacement(request):
            return []

        with pytest.raises(DuplicateSelector) as exc_info:
            table.register(other, replacement)
        assert exc_info.value.existing is ADDR
        assert isinstance(exc_info.value, RegistrationError)
        # first registration stays in place
        assert table.lookup(ADDR.selector).handler is noop

    def test_not_callable(self):
        table = SelectorTable()
        with pytest.raises(RegistrationError):
            table.register(ADDR, "not a function")  # type: ignore[arg-type]
        assert len(table) == 0

    def test_concurrent_registration(self):
        table = SelectorTable()
        descriptors = [
            parse_signature(f"function f{i}(uint256) view returns (uint256)") for i in range(64)
        ]
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda d: table.register(d, noop), descriptors))
        assert len(table) == 64
        assert all(table.is_registered(d.selector) for d in descriptors)


class TestLookup:
    def test_unknown_selector(self):
        table = SelectorTable()
        table.register(ADDR, noop)
        with pytest.raises(UnknownFunction) as exc_info:
            table.lookup(b"\xde\xad\xbe\xef")
        assert exc_info.value.status == 404
        assert exc_info.value.selector == b"\xde\xad\xbe\xef"

    def test_methods(self):
        table = SelectorTable()
        table.register(ADDR, noop)
        table.register(TEXT, noop)
        assert {d.canonical_signature for d in table.methods} == {
            "addr(bytes32)",
            "text(bytes32,string)",
        }
        assert table.is_registered(TEXT.selector)
        assert not table.is_registered(b"\x00\x00\x00\x00")


class TestSelectorKey:
    def test_big_endian(self):
        assert selector_key(b"\x00\x00\x01\x00") == 256

    def test_wrong_size(self):
        with pytest.raises(ValueError):
            selector_key(b"\x01\x02\x03")
