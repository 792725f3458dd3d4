"""Pairs decoded call values with their declared parameters.

Handlers receive a ``CallRequest`` and look inputs up by name::

    node = request.find("namehash")
    if node is None:
        raise ValueError("namehash parameter not found")
    namehash = node.as_bytes32()

A missing name is an ordinary outcome (``None``), never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from ccip.signature import MethodDescriptor, Parameter
from eth_utils import is_address, to_checksum_address

from gateway.errors import DecodeMismatch


class ValueTypeError(TypeError):
    """A bound value was read as a shape it does not have."""

    def __init__(self, bound: "BoundValue", wanted: str) -> None:
        self.bound = bound
        self.wanted = wanted
        super().__init__(
            f"parameter {bound.name!r} ({bound.type}) holds "
            f"{type(bound.value).__name__}, not {wanted}"
        )


@dataclass(frozen=True, slots=True)
class BoundValue:
    """One decoded input: the runtime shape of ``value`` follows ``type``."""

    name: str
    type: str
    value: Any

    # -- Typed accessors -----------------------------------------------
    def as_bytes32(self) -> bytes:
        if isinstance(self.value, (bytes, bytearray)) and len(self.value) == 32:
            return bytes(self.value)
        raise ValueTypeError(self, "bytes32")

    def as_bytes(self) -> bytes:
        if isinstance(self.value, (bytes, bytearray)):
            return bytes(self.value)
        raise ValueTypeError(self, "bytes")

    def as_address(self) -> str:
        if isinstance(self.value, str) and is_address(self.value):
            return to_checksum_address(self.value)
        raise ValueTypeError(self, "address")

    def as_int(self) -> int:
        # bool is an int subclass but never what an integer parameter decodes to
        if isinstance(self.value, int) and not isinstance(self.value, bool):
            return self.value
        raise ValueTypeError(self, "int")

    def as_bool(self) -> bool:
        if isinstance(self.value, bool):
            return self.value
        raise ValueTypeError(self, "bool")

    def as_str(self) -> str:
        if isinstance(self.value, str):
            return self.value
        raise ValueTypeError(self, "str")

    def as_tuple(self) -> tuple[Any, ...]:
        if isinstance(self.value, (tuple, list)):
            return tuple(self.value)
        raise ValueTypeError(self, "tuple")


def bind(parameters: Sequence[Parameter], values: Sequence[Any]) -> tuple[BoundValue, ...]:
    """Pair *values* positionally with *parameters*.

    Raises ``DecodeMismatch`` if the counts differ.
    """
    if len(values) != len(parameters):
        raise DecodeMismatch(
            f"decoded {len(values)} values for {len(parameters)} parameters"
        )
    return tuple(
        BoundValue(name=p.name, type=p.type, value=v) for p, v in zip(parameters, values)
    )


@dataclass(slots=True)
class CallRequest:
    """One inbound call, owned by the request that created it."""

    descriptor: MethodDescriptor
    inputs: tuple[BoundValue, ...] = ()
    sender: str | None = None
    _by_name: dict[str, BoundValue] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self._by_name = {}
        for bound in self.inputs:
            self._by_name.setdefault(bound.name, bound)

    def find(self, name: str) -> BoundValue | None:
        """First input declared as *name*, or ``None``."""
        return self._by_name.get(name)

    def get(self, name: str, default: Any = None) -> Any:
        bound = self._by_name.get(name)
        return default if bound is None else bound.value

    @property
    def values(self) -> tuple[Any, ...]:
        return tuple(b.value for b in self.inputs)

    def as_dict(self) -> dict[str, Any]:
        return {name: bound.value for name, bound in self._by_name.items()}
