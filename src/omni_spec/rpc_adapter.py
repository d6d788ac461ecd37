"""Map payload builder calls onto Omni Core JSON-RPC parameters.

Scope: the `omni_createpayload_*` family (used by the conformance harness to
ask a reference node for the same payload) and `omni_sendrawtx`.
Amounts are passed as plain decimal strings, as Omni Core expects.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, List, Mapping, Tuple

from .amounts import to_decimal
from .broadcast import BroadcastRequest
from .codecs import string_bytes
from .errors import ErrorCode, ValidationError
from .types import TransactionKind


def _plain(value: Any, key: str) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _amount_str(value: Any, key: str) -> str:
    return format(to_decimal(value, key), "f")


def _text(value: Any, key: str) -> str:
    return string_bytes(value, name=key).decode("utf-8")


_INT = _plain
_STR = _text
_AMT = _amount_str

_PROPERTY_INFO: List[Tuple[str, Callable[[Any, str], Any]]] = [
    ("ecosystem", _INT),
    ("property_type", _INT),
    ("previous_id", _INT),
    ("category", _STR),
    ("subcategory", _STR),
    ("name", _STR),
    ("url", _STR),
    ("data", _STR),
]

_TRADE: List[Tuple[str, Callable[[Any, str], Any]]] = [
    ("property_for_sale", _INT),
    ("amount_for_sale", _AMT),
    ("property_desired", _INT),
    ("amount_desired", _AMT),
]

RPC_METHODS: Mapping[TransactionKind, Tuple[str, List[Tuple[str, Callable[[Any, str], Any]]]]] = {
    TransactionKind.SIMPLE_SEND: ("omni_createpayload_simplesend", [("property_id", _INT), ("amount", _AMT)]),
    TransactionKind.SEND_TO_OWNERS: ("omni_createpayload_sto", [("property_id", _INT), ("amount", _AMT)]),
    TransactionKind.SEND_ALL: ("omni_createpayload_sendall", [("ecosystem", _INT)]),
    TransactionKind.DEX_SELL: (
        "omni_createpayload_dexsell",
        [
            ("property_id", _INT),
            ("amount_for_sale", _AMT),
            ("amount_desired", _AMT),
            ("payment_window", _INT),
            ("min_accept_fee", _AMT),
            ("action", _INT),
        ],
    ),
    TransactionKind.DEX_ACCEPT: ("omni_createpayload_dexaccept", [("property_id", _INT), ("amount", _AMT)]),
    TransactionKind.METADEX_TRADE: ("omni_createpayload_trade", _TRADE),
    TransactionKind.CANCEL_TRADES_BY_PRICE: ("omni_createpayload_canceltradesbyprice", _TRADE),
    TransactionKind.CANCEL_TRADES_BY_PAIR: (
        "omni_createpayload_canceltradesbypair",
        [("property_for_sale", _INT), ("property_desired", _INT)],
    ),
    TransactionKind.CANCEL_ALL_TRADES: ("omni_createpayload_cancelalltrades", [("ecosystem", _INT)]),
    TransactionKind.FIXED_PROPERTY_CREATE: (
        "omni_createpayload_issuancefixed",
        _PROPERTY_INFO + [("amount", _AMT)],
    ),
    TransactionKind.CROWDSALE_CREATE: (
        "omni_createpayload_issuancecrowdsale",
        _PROPERTY_INFO
        + [
            ("property_desired", _INT),
            ("tokens_per_unit", _AMT),
            ("deadline", _INT),
            ("early_bird_bonus", _INT),
            ("issuer_bonus", _INT),
        ],
    ),
    TransactionKind.CLOSE_CROWDSALE: ("omni_createpayload_closecrowdsale", [("property_id", _INT)]),
    TransactionKind.MANAGED_PROPERTY_CREATE: ("omni_createpayload_issuancemanaged", _PROPERTY_INFO),
    TransactionKind.GRANT: (
        "omni_createpayload_grant",
        [("property_id", _INT), ("amount", _AMT), ("memo", _STR)],
    ),
    TransactionKind.REVOKE: (
        "omni_createpayload_revoke",
        [("property_id", _INT), ("amount", _AMT), ("memo", _STR)],
    ),
    TransactionKind.CHANGE_ISSUER: ("omni_createpayload_changeissuer", [("property_id", _INT)]),
}


def to_rpc_request(kind: TransactionKind, call: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    """Return ``(method, params)`` for the Omni Core RPC building the same payload.

    ``call`` holds the keyword arguments of the matching ``create_*_payload``
    builder. Property types are not sent; the node looks them up itself.
    Optional trailing parameters (the grant/revoke memo) are dropped when
    absent or None.
    """
    entry = RPC_METHODS.get(kind)
    if entry is None:
        raise ValidationError(ErrorCode.INVALID_TYPE, f"unknown transaction kind: {kind!r}")
    method, layout = entry

    params: List[Any] = []
    for key, convert in layout:
        value = call.get(key)
        if value is None:
            if key == "memo":
                break
            raise ValidationError(ErrorCode.INVALID_ARGUMENT, f"missing {key} for {method}")
        params.append(convert(value, key))
    return method, params


def send_raw_tx_params(request: BroadcastRequest) -> List[str]:
    """Params for ``omni_sendrawtx``: fromaddress, rawtransaction[, referenceaddress]."""
    params = [request.sender_address, request.payload_hex]
    if request.reference_address is not None:
        params.append(request.reference_address)
    return params
