"""Gateway configuration.

One field per recognised option; everything is optional and the defaults
give an open gateway that encodes outputs with the registered ABI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from eth_utils import is_address, to_checksum_address

log = logging.getLogger(__name__)

# (sender) -> True to accept.  Receives an EIP-55 checksum address.
SenderValidator = Callable[[str], bool]
# (outputs) -> raw bytes; replaces the default ABI encoding of outputs.
OutputEncoder = Callable[[Sequence[Any]], bytes]


def allow_senders(*addresses: str) -> SenderValidator:
    """Build a validator that accepts only *addresses* (case-insensitive)."""
    allowed = set()
    for address in addresses:
        if not is_address(address):
            raise ValueError(f"not a valid address: {address!r}")
        allowed.add(to_checksum_address(address))
    frozen = frozenset(allowed)

    def validate(sender: str) -> bool:
        return to_checksum_address(sender) in frozen

    return validate


@dataclass(slots=True)
class GatewayConfig:
    """Construction-time options for a ``Gateway``.

    Parameters
    ----------
    sender_validator : callable, optional
        Called with the request's ``sender`` when one is supplied;
        returning ``False`` rejects the request with 401.
    output_encoder : callable, optional
        Replaces the default ABI encoding of handler outputs.
    gateways : sequence of str
        Pre-approved sender addresses.  Shorthand for
        ``sender_validator=allow_senders(*gateways)``; non-members are
        rejected.
    expose_handler_errors : bool
        Include the handler's exception text in 500 responses.
    """

    sender_validator: SenderValidator | None = None
    output_encoder: OutputEncoder | None = None
    gateways: Sequence[str] = ()
    expose_handler_errors: bool = True

    def __post_init__(self) -> None:
        if self.gateways and self.sender_validator is not None:
            raise ValueError("configure either 'gateways' or 'sender_validator', not both")
        if self.gateways:
            self.sender_validator = allow_senders(*self.gateways)
            log.debug("sender allow-list: %d address(es)", len(self.gateways))
