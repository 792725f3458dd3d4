"""Human-readable function signature parser.

Turns ``function addr(bytes32 node) view returns (address)`` into a
``MethodDescriptor`` whose selector routes incoming calls.  Only the
input types contribute to the selector, so parameter names are optional
and default to ``a``, ``b``, ``c`` … by position.

Grammar (whitespace-tolerant)::

    function NAME ( PARAMS ) [external|public] (pure|view) returns ( PARAMS ) [;]

where each parameter is ``TYPE`` or ``TYPE NAME``.
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass, field
from typing import Any, Sequence

from eth_abi import decode, encode, is_encodable_type
from eth_abi.exceptions import ABITypeError, ParseError
from eth_abi.grammar import normalize, parse
from eth_utils import function_signature_to_4byte_selector

MUTABILITIES = ("pure", "view")
VISIBILITIES = ("external", "public")

_NAME_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")
_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


# ── Errors ───────────────────────────────────────────────────────────
class SignatureError(ValueError):
    """Base class for setup-time signature failures."""


class InvalidSignature(SignatureError):
    """The text does not match the signature grammar."""

    def __init__(self, reason: str, column: int | None = None) -> None:
        self.reason = reason
        self.column = column
        where = f" (column {column})" if column is not None else ""
        super().__init__(f"invalid function signature: {reason}{where}")


class InvalidParameterType(SignatureError):
    """A parameter type is not understood by the ABI codec."""

    def __init__(self, token: str, column: int | None = None) -> None:
        self.token = token
        self.column = column
        where = f" (column {column})" if column is not None else ""
        super().__init__(f"invalid parameter type: {token!r}{where}")


# ── Models ───────────────────────────────────────────────────────────
@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    type: str

    def __str__(self) -> str:
        return f"{self.type} {self.name}"


@dataclass(frozen=True, slots=True)
class MethodDescriptor:
    """Immutable description of one callable function.

    ``selector`` is derived from ``canonical_signature`` on construction;
    two descriptors with the same name and input types share a selector.
    """

    name: str
    mutability: str
    inputs: tuple[Parameter, ...] = ()
    outputs: tuple[Parameter, ...] = ()
    selector: bytes = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not _NAME_RE.fullmatch(self.name):
            raise ValueError(f"invalid function name: {self.name!r}")
        if self.mutability not in MUTABILITIES:
            raise ValueError(f"unsupported mutability: {self.mutability!r}")
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))
        object.__setattr__(
            self, "selector", function_signature_to_4byte_selector(self.canonical_signature)
        )

    # -- Derived views -------------------------------------------------
    @property
    def input_types(self) -> tuple[str, ...]:
        return tuple(p.type for p in self.inputs)

    @property
    def output_types(self) -> tuple[str, ...]:
        return tuple(p.type for p in self.outputs)

    @property
    def canonical_signature(self) -> str:
        """``name(type,type,…)``: the exact string hashed into the selector."""
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def signature(self) -> str:
        ins = ", ".join(str(p) for p in self.inputs)
        outs = ", ".join(str(p) for p in self.outputs)
        return f"function {self.name}({ins}) {self.mutability} returns ({outs})"

    @property
    def selector_hex(self) -> str:
        return "0x" + self.selector.hex()

    # -- Codec helpers -------------------------------------------------
    def encode_call(self, values: Sequence[Any]) -> bytes:
        """Selector followed by the ABI-encoded *values*."""
        return self.selector + encode(list(self.input_types), list(values))

    def decode_inputs(self, data: bytes) -> tuple[Any, ...]:
        return tuple(decode(list(self.input_types), data))

    def encode_outputs(self, values: Sequence[Any]) -> bytes:
        return encode(list(self.output_types), list(values))

    def decode_outputs(self, data: bytes) -> tuple[Any, ...]:
        return tuple(decode(list(self.output_types), data))


# ── Type validation ──────────────────────────────────────────────────
def canonical_type(token: str, column: int | None = None) -> str:
    """Return the canonical ABI spelling of *token* (``uint`` → ``uint256``).

    Raises ``InvalidParameterType`` if the codec cannot encode the type.
    """
    try:
        abi_type = parse(normalize(token))
        abi_type.validate()
    except (ParseError, ABITypeError) as exc:
        raise InvalidParameterType(token, column) from exc
    canonical = abi_type.to_type_str()
    if not is_encodable_type(canonical):
        raise InvalidParameterType(token, column)
    return canonical


def default_name(index: int) -> str:
    if index < len(string.ascii_lowercase):
        return string.ascii_lowercase[index]
    return f"p{index}"


# ── Scanner ──────────────────────────────────────────────────────────
class _Scanner:
    """Cursor over the signature text; errors carry 1-based columns."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, reason: str, pos: int | None = None) -> InvalidSignature:
        return InvalidSignature(reason, column=(self.pos if pos is None else pos) + 1)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_ws(self) -> bool:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1
        return self.pos > start

    def require_ws(self, after: str) -> None:
        if not self.skip_ws():
            raise self.error(f"expected whitespace after {after!r}")

    def word(self) -> str:
        m = _WORD_RE.match(self.text, self.pos)
        if m is None:
            raise self.error("expected a keyword")
        self.pos = m.end()
        return m.group()

    def keyword(self, expected: str) -> None:
        m = _WORD_RE.match(self.text, self.pos)
        if m is None or m.group() != expected:
            raise self.error(f"expected {expected!r}")
        self.pos = m.end()

    def name(self) -> str:
        m = _WORD_RE.match(self.text, self.pos)
        if m is None or not _NAME_RE.fullmatch(m.group()):
            raise self.error("expected a function name")
        self.pos = m.end()
        return m.group()

    def group(self) -> tuple[str, int]:
        """Consume a balanced ``( … )``; return its body and the body's offset."""
        if self.peek() != "(":
            raise self.error("expected '('")
        start = self.pos
        depth = 0
        for i in range(start, len(self.text)):
            ch = self.text[i]
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    self.pos = i + 1
                    return self.text[start + 1 : i], start + 1
        raise self.error("unbalanced parentheses", start)


def _split_entries(body: str, offset: int) -> list[tuple[str, int]]:
    """Split *body* on top-level commas, keeping each entry's offset."""
    if not body.strip():
        return []
    entries: list[tuple[str, int]] = []
    depth = 0
    start = 0
    for i, ch in enumerate(body):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif ch == "," and depth == 0:
            entries.append((body[start:i], offset + start))
            start = i + 1
    entries.append((body[start:], offset + start))
    return entries


def _tokens(entry: str) -> list[str]:
    """Split on top-level whitespace; whitespace inside a tuple type is dropped."""
    tokens: list[str] = []
    current: list[str] = []
    depth = 0
    for ch in entry:
        if ch.isspace():
            if depth == 0 and current:
                tokens.append("".join(current))
                current = []
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens


def _parse_parameters(body: str, offset: int, first_index: int) -> tuple[Parameter, ...]:
    params: list[Parameter] = []
    for position, (entry, at) in enumerate(_split_entries(body, offset)):
        column = at + len(entry) - len(entry.lstrip()) + 1
        tokens = _tokens(entry)
        if not tokens:
            raise InvalidSignature("empty parameter entry", column)
        if len(tokens) > 2:
            raise InvalidSignature(f"malformed parameter {entry.strip()!r}", column)
        if len(tokens) == 2:
            name = tokens[1]
            if not _NAME_RE.fullmatch(name):
                raise InvalidSignature(f"invalid parameter name {name!r}", column)
        else:
            name = default_name(first_index + position)
        params.append(Parameter(name=name, type=canonical_type(tokens[0], column)))
    return tuple(params)


# ── Entry point ──────────────────────────────────────────────────────
def parse_signature(text: str) -> MethodDescriptor:
    """Parse a human-readable signature into a ``MethodDescriptor``.

    Raises ``InvalidSignature`` for text outside the grammar and
    ``InvalidParameterType`` for a type the ABI codec does not support.
    """
    if not isinstance(text, str):
        raise InvalidSignature("signature must be a string")

    s = _Scanner(text)
    s.skip_ws()
    s.keyword("function")
    s.require_ws("function")
    name = s.name()
    s.skip_ws()
    input_body, input_offset = s.group()
    s.require_ws(")")

    word_at = s.pos
    mutability = s.word()
    if mutability in VISIBILITIES:
        s.require_ws(mutability)
        word_at = s.pos
        mutability = s.word()
    if mutability not in MUTABILITIES:
        raise s.error(f"expected 'pure' or 'view', got {mutability!r}", word_at)
    s.require_ws(mutability)

    s.keyword("returns")
    s.skip_ws()
    output_body, output_offset = s.group()
    s.skip_ws()
    if s.peek() == ";":
        s.pos += 1
        s.skip_ws()
    if not s.at_end():
        raise s.error("unexpected trailing input")

    inputs = _parse_parameters(input_body, input_offset, 0)
    outputs = _parse_parameters(output_body, output_offset, len(inputs))
    return MethodDescriptor(name=name, mutability=mutability, inputs=inputs, outputs=outputs)
