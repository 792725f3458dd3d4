"""Selector dispatch table.

Maps 4-byte function selectors to ``(descriptor, handler)`` pairs, nothing
more.  The table is written during setup and read on every request.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Sequence, Union

from ccip.envelope import SELECTOR_SIZE
from ccip.signature import MethodDescriptor

from gateway.binder import CallRequest
from gateway.errors import UnknownFunction

log = logging.getLogger(__name__)

# Type alias for a CCIP-Read handler: (request) -> outputs, sync or async
HandlerResult = Union[Sequence[Any], None]
HandlerFn = Callable[[CallRequest], Union[HandlerResult, Awaitable[HandlerResult]]]


class RegistrationError(Exception):
    """Raised when a handler cannot be added to the table."""


class DuplicateSelector(RegistrationError):
    def __init__(self, descriptor: MethodDescriptor, existing: MethodDescriptor) -> None:
        self.descriptor = descriptor
        self.existing = existing
        super().__init__(
            f"selector {descriptor.selector_hex} for {descriptor.canonical_signature} "
            f"is already registered by {existing.signature!r}"
        )


@dataclass(frozen=True, slots=True)
class Registration:
    descriptor: MethodDescriptor
    handler: HandlerFn


def selector_key(selector: bytes) -> int:
    if len(selector) != SELECTOR_SIZE:
        raise ValueError(f"selector must be {SELECTOR_SIZE} bytes, got {len(selector)}")
    return int.from_bytes(selector, "big")


class SelectorTable:
    """A selector → handler mapping.

    Writers serialise on a lock and publish a fresh read-only snapshot,
    so ``lookup`` never blocks and never observes a half-applied write.

    Usage::

        table = SelectorTable()
        table.register(parse_signature("function addr(bytes32) view returns (address)"), fn)
        entry = table.lookup(call_data[:4])
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Mapping[int, Registration] = MappingProxyType({})

    # -- Registration --------------------------------------------------
    def register(self, descriptor: MethodDescriptor, handler: HandlerFn) -> Registration:
        """Add *handler* under *descriptor*'s selector.

        Raises ``DuplicateSelector`` if the selector is already taken; the
        first registration for a selector is final.
        """
        if not callable(handler):
            raise RegistrationError(f"handler for {descriptor.canonical_signature} is not callable")
        key = selector_key(descriptor.selector)
        entry = Registration(descriptor=descriptor, handler=handler)
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                raise DuplicateSelector(descriptor, existing.descriptor)
            entries = dict(self._entries)
            entries[key] = entry
            self._entries = MappingProxyType(entries)
        log.debug(
            "registered %s %s → %s",
            descriptor.selector_hex,
            descriptor.canonical_signature,
            getattr(handler, "__qualname__", repr(handler)),
        )
        return entry

    # -- Lookup --------------------------------------------------------
    def lookup(self, selector: bytes) -> Registration:
        """Return the registration for *selector*.

        Raises ``UnknownFunction`` if the selector is not registered.
        """
        entry = self._entries.get(selector_key(selector))
        if entry is None:
            raise UnknownFunction(selector)
        return entry

    # -- Introspection -------------------------------------------------
    @property
    def methods(self) -> list[MethodDescriptor]:
        return [entry.descriptor for entry in self._entries.values()]

    def is_registered(self, selector: bytes) -> bool:
        return selector_key(selector) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
