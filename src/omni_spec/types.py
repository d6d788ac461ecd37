"""Core types for the Omni payload specs.

Tracks the transaction surface exposed by Omni Core's
`omni_createpayload_*` RPCs: sends, the traditional DEx, the MetaDEx,
property issuance, crowdsales and managed-property administration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict


class TransactionKind(Enum):
    SIMPLE_SEND = "simple_send"
    SEND_TO_OWNERS = "send_to_owners"
    SEND_ALL = "send_all"
    DEX_SELL = "dex_sell"
    DEX_ACCEPT = "dex_accept"
    METADEX_TRADE = "metadex_trade"
    CANCEL_TRADES_BY_PRICE = "cancel_trades_by_price"
    CANCEL_TRADES_BY_PAIR = "cancel_trades_by_pair"
    CANCEL_ALL_TRADES = "cancel_all_trades"
    CROWDSALE_CREATE = "crowdsale_create"
    CLOSE_CROWDSALE = "close_crowdsale"
    FIXED_PROPERTY_CREATE = "fixed_property_create"
    MANAGED_PROPERTY_CREATE = "managed_property_create"
    GRANT = "grant"
    REVOKE = "revoke"
    CHANGE_ISSUER = "change_issuer"


class Ecosystem(IntEnum):
    MAIN = 1
    TEST = 2


class PropertyType(IntEnum):
    INDIVISIBLE = 1
    DIVISIBLE = 2


class DexAction(IntEnum):
    NEW = 1
    UPDATE = 2
    CANCEL = 3


class FieldCodec(Enum):
    UINT8 = "uint8"
    UINT16 = "uint16be"
    UINT32 = "uint32be"
    UINT64 = "uint64be"
    INT8 = "int8"
    BOOL = "bool1"
    CSTRING = "cstring"

    @property
    def width(self) -> int | None:
        """Fixed byte width, or None for NUL-terminated strings."""
        return _CODEC_WIDTHS[self]


_CODEC_WIDTHS = {
    FieldCodec.UINT8: 1,
    FieldCodec.UINT16: 2,
    FieldCodec.UINT32: 4,
    FieldCodec.UINT64: 8,
    FieldCodec.INT8: 1,
    FieldCodec.BOOL: 1,
    FieldCodec.CSTRING: None,
}


class ReferenceRule(Enum):
    """Whether the broadcast carries a reference (recipient) output."""

    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


@dataclass(frozen=True)
class DecodedPayload:
    kind: TransactionKind
    version: int
    fields: Dict[str, Any] = field(default_factory=dict)
