"""Helpers to serialize/deserialize payload fixtures."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Tuple

from omni_spec.amounts import to_decimal
from omni_spec.types import TransactionKind

# Builder keyword arguments that carry decimal amounts. They are stored as
# plain decimal strings so fixtures never depend on float formatting.
AMOUNT_KEYS = frozenset({
    "amount",
    "amount_for_sale",
    "amount_desired",
    "min_accept_fee",
    "tokens_per_unit",
})


def call_to_json(call: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in call.items():
        if key in AMOUNT_KEYS and value is not None:
            out[key] = format(to_decimal(value, key), "f")
        elif isinstance(value, Enum):
            out[key] = value.value
        elif isinstance(value, (bytes, bytearray)):
            out[key] = bytes(value).decode("utf-8")
        else:
            out[key] = value
    return out


def call_from_json(data: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in data.items():
        if key in AMOUNT_KEYS and value is not None:
            out[key] = Decimal(str(value))
        else:
            out[key] = value
    return out


def vector_to_json(
    name: str, kind: TransactionKind, call: Mapping[str, Any], expected_hex: str
) -> dict[str, Any]:
    return {
        "name": name,
        "kind": kind.value,
        "call": call_to_json(call),
        "expected_hex": expected_hex,
    }


def vector_from_json(data: Mapping[str, Any]) -> Tuple[str, TransactionKind, dict[str, Any], str]:
    return (
        data["name"],
        TransactionKind(data["kind"]),
        call_from_json(data.get("call", {})),
        data["expected_hex"],
    )
