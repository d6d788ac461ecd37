"""Hand-off of encoded payloads to an external broadcaster.

The encoder never sends anything. Callers inject whatever implements
:class:`Broadcaster` (typically an RPC client calling ``omni_sendrawtx``) and
pass it the fields of a :class:`BroadcastRequest`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .encoding import decode_payload, payload_from_hex
from .errors import ErrorCode, ValidationError
from .registry import schema_for
from .types import ReferenceRule, TransactionKind


class Broadcaster(Protocol):
    def broadcast(
        self, sender_address: str, payload_hex: str, reference_address: Optional[str] = None
    ) -> str:
        """Wrap the payload in a base-chain transaction, send it and return its txid."""
        ...


@dataclass(frozen=True)
class BroadcastRequest:
    sender_address: str
    payload_hex: str
    kind: TransactionKind
    reference_address: Optional[str] = None


def _address(value: object, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(ErrorCode.INVALID_ADDRESS, f"{name} must be a non-empty string")
    return value.strip()


def prepare_broadcast(
    sender_address: str, payload_hex: str, reference_address: Optional[str] = None
) -> BroadcastRequest:
    """Check a payload against its kind's reference-address rule."""
    sender = _address(sender_address, "sender_address")
    decoded = decode_payload(payload_from_hex(payload_hex))
    rule = schema_for(decoded.kind).reference

    reference = None
    if reference_address is not None:
        reference = _address(reference_address, "reference_address")

    if rule == ReferenceRule.REQUIRED and reference is None:
        raise ValidationError(ErrorCode.INVALID_ADDRESS, f"{decoded.kind.value} requires a reference address")
    if rule == ReferenceRule.NONE and reference is not None:
        raise ValidationError(ErrorCode.INVALID_ADDRESS, f"{decoded.kind.value} takes no reference address")

    return BroadcastRequest(
        sender_address=sender,
        payload_hex=payload_hex.lower(),
        kind=decoded.kind,
        reference_address=reference,
    )
