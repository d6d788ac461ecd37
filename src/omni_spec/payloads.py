"""Typed payload builders, one per transaction kind.

Each builder validates its arguments, scales decimal amounts into base units,
encodes the payload and returns it as lowercase hex. Property divisibility is
supplied by the caller; nothing here looks anything up.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Dict, Mapping, Optional, Type, TypeVar

from .amounts import AmountLike, scale_amount
from .codecs import string_bytes
from .config import (
    MAX_BONUS_PERCENT,
    MAX_PAYMENT_WINDOW,
    MAX_PROPERTY_ID,
    MIN_PAYMENT_WINDOW,
    OMNI_PROPERTY_TMSC,
    TEST_ECO_PROPERTY_1,
    UINT64_MAX,
)
from .encoding import encode_payload, payload_hex
from .errors import ErrorCode, ValidationError, invalid
from .types import DexAction, Ecosystem, PropertyType, TransactionKind

E = TypeVar("E", Ecosystem, PropertyType, DexAction)


def _enum(enum_cls: Type[E], value: Any, code: ErrorCode, name: str) -> E:
    if isinstance(value, bool) or not isinstance(value, int):
        raise invalid(code, f"{name} must be an integer enum value")
    try:
        return enum_cls(int(value))
    except ValueError:
        raise invalid(code, f"invalid {name}: {value}") from None


def _ecosystem(value: Any) -> Ecosystem:
    return _enum(Ecosystem, value, ErrorCode.INVALID_ECOSYSTEM, "ecosystem")


def _property_type(value: Any, name: str = "property_type") -> PropertyType:
    return _enum(PropertyType, value, ErrorCode.INVALID_PROPERTY_TYPE, name)


def _action(value: Any) -> DexAction:
    return _enum(DexAction, value, ErrorCode.INVALID_ACTION, "action")


def _int_in_range(value: Any, name: str, low: int, high: int, code: ErrorCode = ErrorCode.INVALID_RANGE) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise invalid(code, f"{name} must be an integer")
    if not (low <= value <= high):
        raise invalid(code, f"{name} must be within {low}-{high}")
    return int(value)


def _property_id(value: Any, name: str = "property_id") -> int:
    return _int_in_range(value, name, 1, MAX_PROPERTY_ID, ErrorCode.INVALID_PROPERTY)


def _previous_id(value: Any) -> int:
    return _int_in_range(value, "previous_id", 0, MAX_PROPERTY_ID, ErrorCode.INVALID_PROPERTY)


def ecosystem_of(property_id: int) -> Ecosystem:
    """Ecosystem a property identifier lives in."""
    if property_id == OMNI_PROPERTY_TMSC or property_id >= TEST_ECO_PROPERTY_1:
        return Ecosystem.TEST
    return Ecosystem.MAIN


def _positive(units: int, name: str) -> int:
    if units <= 0:
        raise invalid(ErrorCode.INVALID_AMOUNT, f"{name} must be positive")
    return units


def _amount(amount: AmountLike, property_type: PropertyType, name: str = "amount") -> int:
    return _positive(scale_amount(amount, property_type, name), name)


def _text(value: Any, name: str) -> str:
    data = string_bytes(value, name=name)
    return data.decode("utf-8")


def _property_info(
    ecosystem: Any,
    property_type: Any,
    previous_id: Any,
    category: Any,
    subcategory: Any,
    name: Any,
    url: Any,
    data: Any,
) -> Dict[str, Any]:
    info = {
        "ecosystem": int(_ecosystem(ecosystem)),
        "property_type": int(_property_type(property_type)),
        "previous_id": _previous_id(previous_id),
        "category": _text(category, "category"),
        "subcategory": _text(subcategory, "subcategory"),
        "name": _text(name, "name"),
        "url": _text(url, "url"),
        "data": _text(data, "data"),
    }
    if not info["name"]:
        raise invalid(ErrorCode.INVALID_STRING, "property name must not be empty")
    return info


def _trade_pair(property_for_sale: Any, property_desired: Any) -> tuple[int, int]:
    for_sale = _property_id(property_for_sale, "property_for_sale")
    desired = _property_id(property_desired, "property_desired")
    if for_sale == desired:
        raise invalid(ErrorCode.INVALID_PROPERTY, "property for sale and desired property must differ")
    if ecosystem_of(for_sale) != ecosystem_of(desired):
        raise invalid(ErrorCode.INVALID_ECOSYSTEM, "properties must be in the same ecosystem")
    return for_sale, desired


def _hex(kind: TransactionKind, args: Mapping[str, Any]) -> str:
    return payload_hex(encode_payload(kind, args))


# --- Sends ---


def create_simple_send_payload(property_id: int, amount: AmountLike, property_type: PropertyType) -> str:
    """Simple send (type 0): transfer ``amount`` of ``property_id`` to the reference address."""
    ptype = _property_type(property_type)
    return _hex(
        TransactionKind.SIMPLE_SEND,
        {"property_id": _property_id(property_id), "amount": _amount(amount, ptype)},
    )


def create_send_to_owners_payload(property_id: int, amount: AmountLike, property_type: PropertyType) -> str:
    """Send to owners (type 3): distribute ``amount`` pro rata to all holders."""
    ptype = _property_type(property_type)
    return _hex(
        TransactionKind.SEND_TO_OWNERS,
        {"property_id": _property_id(property_id), "amount": _amount(amount, ptype)},
    )


def create_send_all_payload(ecosystem: Ecosystem) -> str:
    """Send all (type 4): transfer every token of ``ecosystem`` to the reference address."""
    return _hex(TransactionKind.SEND_ALL, {"ecosystem": int(_ecosystem(ecosystem))})


# --- Traditional DEx ---


def create_dex_sell_payload(
    property_id: int,
    amount_for_sale: AmountLike,
    amount_desired: AmountLike,
    payment_window: int,
    min_accept_fee: AmountLike,
    action: DexAction,
    property_type: PropertyType = PropertyType.DIVISIBLE,
) -> str:
    """DEx sell offer (type 20, version 1).

    ``amount_desired`` and ``min_accept_fee`` are bitcoin amounts. ``action``
    is one of NEW, UPDATE or CANCEL; a cancel may carry zero amounts and a zero
    payment window.
    """
    act = _action(action)
    ptype = _property_type(property_type)
    pid = _property_id(property_id)
    window = _int_in_range(payment_window, "payment_window", 0, MAX_PAYMENT_WINDOW)
    for_sale = scale_amount(amount_for_sale, ptype, "amount_for_sale")
    desired = scale_amount(amount_desired, PropertyType.DIVISIBLE, "amount_desired")
    fee = scale_amount(min_accept_fee, PropertyType.DIVISIBLE, "min_accept_fee")
    if act != DexAction.CANCEL:
        _positive(for_sale, "amount_for_sale")
        _positive(desired, "amount_desired")
        if window < MIN_PAYMENT_WINDOW:
            raise invalid(
                ErrorCode.INVALID_RANGE,
                f"payment_window must be within {MIN_PAYMENT_WINDOW}-{MAX_PAYMENT_WINDOW}",
            )
    return _hex(
        TransactionKind.DEX_SELL,
        {
            "property_id": pid,
            "amount_for_sale": for_sale,
            "amount_desired": desired,
            "payment_window": window,
            "min_accept_fee": fee,
            "action": int(act),
        },
    )


def create_dex_accept_payload(
    property_id: int, amount: AmountLike, property_type: PropertyType = PropertyType.DIVISIBLE
) -> str:
    """DEx accept (type 22): accept ``amount`` from the offer at the reference address."""
    ptype = _property_type(property_type)
    return _hex(
        TransactionKind.DEX_ACCEPT,
        {"property_id": _property_id(property_id), "amount": _amount(amount, ptype)},
    )


# --- MetaDEx ---


def _trade_args(
    property_for_sale: int,
    amount_for_sale: AmountLike,
    property_desired: int,
    amount_desired: AmountLike,
    type_for_sale: PropertyType,
    type_desired: PropertyType,
) -> Dict[str, Any]:
    for_sale, desired = _trade_pair(property_for_sale, property_desired)
    return {
        "property_for_sale": for_sale,
        "amount_for_sale": _amount(amount_for_sale, _property_type(type_for_sale, "type_for_sale"), "amount_for_sale"),
        "property_desired": desired,
        "amount_desired": _amount(amount_desired, _property_type(type_desired, "type_desired"), "amount_desired"),
    }


def create_trade_payload(
    property_for_sale: int,
    amount_for_sale: AmountLike,
    property_desired: int,
    amount_desired: AmountLike,
    type_for_sale: PropertyType,
    type_desired: PropertyType,
) -> str:
    """MetaDEx trade (type 25)."""
    return _hex(
        TransactionKind.METADEX_TRADE,
        _trade_args(property_for_sale, amount_for_sale, property_desired, amount_desired, type_for_sale, type_desired),
    )


def create_cancel_trades_by_price_payload(
    property_for_sale: int,
    amount_for_sale: AmountLike,
    property_desired: int,
    amount_desired: AmountLike,
    type_for_sale: PropertyType,
    type_desired: PropertyType,
) -> str:
    """MetaDEx cancel-price (type 26): cancel offers at exactly this unit price."""
    return _hex(
        TransactionKind.CANCEL_TRADES_BY_PRICE,
        _trade_args(property_for_sale, amount_for_sale, property_desired, amount_desired, type_for_sale, type_desired),
    )


def create_cancel_trades_by_pair_payload(property_for_sale: int, property_desired: int) -> str:
    for_sale, desired = _trade_pair(property_for_sale, property_desired)
    return _hex(
        TransactionKind.CANCEL_TRADES_BY_PAIR,
        {"property_for_sale": for_sale, "property_desired": desired},
    )


def create_cancel_all_trades_payload(ecosystem: Ecosystem) -> str:
    return _hex(TransactionKind.CANCEL_ALL_TRADES, {"ecosystem": int(_ecosystem(ecosystem))})


# --- Issuance ---


def create_issuance_fixed_payload(
    ecosystem: Ecosystem,
    property_type: PropertyType,
    previous_id: int,
    category: str,
    subcategory: str,
    name: str,
    url: str,
    data: str,
    amount: AmountLike,
) -> str:
    """Fixed-supply issuance (type 50)."""
    args = _property_info(ecosystem, property_type, previous_id, category, subcategory, name, url, data)
    args["amount"] = _amount(amount, PropertyType(args["property_type"]))
    return _hex(TransactionKind.FIXED_PROPERTY_CREATE, args)


def create_issuance_crowdsale_payload(
    ecosystem: Ecosystem,
    property_type: PropertyType,
    previous_id: int,
    category: str,
    subcategory: str,
    name: str,
    url: str,
    data: str,
    property_desired: int,
    tokens_per_unit: AmountLike,
    deadline: int,
    early_bird_bonus: int,
    issuer_bonus: int,
) -> str:
    """Crowdsale issuance (type 51).

    ``tokens_per_unit`` is expressed in units of the new property;
    ``deadline`` is a UNIX timestamp; both bonuses are percentages.
    """
    args = _property_info(ecosystem, property_type, previous_id, category, subcategory, name, url, data)
    desired = _property_id(property_desired, "property_desired")
    if ecosystem_of(desired) != args["ecosystem"]:
        raise invalid(ErrorCode.INVALID_ECOSYSTEM, "desired property must be in the crowdsale ecosystem")
    args["property_desired"] = desired
    args["tokens_per_unit"] = _amount(tokens_per_unit, PropertyType(args["property_type"]), "tokens_per_unit")
    args["deadline"] = _int_in_range(deadline, "deadline", 0, UINT64_MAX)
    args["early_bird_bonus"] = _int_in_range(early_bird_bonus, "early_bird_bonus", 0, MAX_BONUS_PERCENT)
    args["issuer_bonus"] = _int_in_range(issuer_bonus, "issuer_bonus", 0, MAX_BONUS_PERCENT)
    return _hex(TransactionKind.CROWDSALE_CREATE, args)


def create_close_crowdsale_payload(property_id: int) -> str:
    return _hex(TransactionKind.CLOSE_CROWDSALE, {"property_id": _property_id(property_id)})


def create_issuance_managed_payload(
    ecosystem: Ecosystem,
    property_type: PropertyType,
    previous_id: int,
    category: str,
    subcategory: str,
    name: str,
    url: str,
    data: str,
) -> str:
    """Managed-supply issuance (type 54)."""
    args = _property_info(ecosystem, property_type, previous_id, category, subcategory, name, url, data)
    return _hex(TransactionKind.MANAGED_PROPERTY_CREATE, args)


# --- Managed property administration ---


def _memo(memo: Optional[str]) -> Optional[str]:
    if memo is None:
        return None
    return _text(memo, "memo")


def create_grant_payload(
    property_id: int, amount: AmountLike, property_type: PropertyType, memo: Optional[str] = ""
) -> str:
    """Grant (type 55). ``memo=None`` omits the memo field entirely."""
    ptype = _property_type(property_type)
    return _hex(
        TransactionKind.GRANT,
        {"property_id": _property_id(property_id), "amount": _amount(amount, ptype), "memo": _memo(memo)},
    )


def create_revoke_payload(
    property_id: int, amount: AmountLike, property_type: PropertyType, memo: Optional[str] = ""
) -> str:
    """Revoke (type 56). ``memo=None`` omits the memo field entirely."""
    ptype = _property_type(property_type)
    return _hex(
        TransactionKind.REVOKE,
        {"property_id": _property_id(property_id), "amount": _amount(amount, ptype), "memo": _memo(memo)},
    )


def create_change_issuer_payload(property_id: int) -> str:
    return _hex(TransactionKind.CHANGE_ISSUER, {"property_id": _property_id(property_id)})


BUILDERS: Mapping[TransactionKind, Callable[..., str]] = {
    TransactionKind.SIMPLE_SEND: create_simple_send_payload,
    TransactionKind.SEND_TO_OWNERS: create_send_to_owners_payload,
    TransactionKind.SEND_ALL: create_send_all_payload,
    TransactionKind.DEX_SELL: create_dex_sell_payload,
    TransactionKind.DEX_ACCEPT: create_dex_accept_payload,
    TransactionKind.METADEX_TRADE: create_trade_payload,
    TransactionKind.CANCEL_TRADES_BY_PRICE: create_cancel_trades_by_price_payload,
    TransactionKind.CANCEL_TRADES_BY_PAIR: create_cancel_trades_by_pair_payload,
    TransactionKind.CANCEL_ALL_TRADES: create_cancel_all_trades_payload,
    TransactionKind.CROWDSALE_CREATE: create_issuance_crowdsale_payload,
    TransactionKind.CLOSE_CROWDSALE: create_close_crowdsale_payload,
    TransactionKind.FIXED_PROPERTY_CREATE: create_issuance_fixed_payload,
    TransactionKind.MANAGED_PROPERTY_CREATE: create_issuance_managed_payload,
    TransactionKind.GRANT: create_grant_payload,
    TransactionKind.REVOKE: create_revoke_payload,
    TransactionKind.CHANGE_ISSUER: create_change_issuer_payload,
}


def create_payload(kind: TransactionKind, **call: Any) -> str:
    """Dispatch a keyword call to the builder for ``kind``."""
    builder = BUILDERS.get(kind)
    if builder is None:
        raise ValidationError(ErrorCode.INVALID_TYPE, f"unknown transaction kind: {kind!r}")
    try:
        inspect.signature(builder).bind(**call)
    except TypeError as exc:
        raise ValidationError(ErrorCode.INVALID_ARGUMENT, f"bad arguments for {kind.value}: {exc}") from exc
    return builder(**call)
