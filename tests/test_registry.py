"""Transaction kind registry tests."""

from __future__ import annotations

import dataclasses

import pytest

from omni_spec.errors import ValidationError
from omni_spec.registry import REGISTRY, REGISTRY_BY_HEADER, schema_for
from omni_spec.types import FieldCodec, ReferenceRule, TransactionKind

_MESSAGE_TYPES = {
    TransactionKind.SIMPLE_SEND: 0,
    TransactionKind.SEND_TO_OWNERS: 3,
    TransactionKind.SEND_ALL: 4,
    TransactionKind.DEX_SELL: 20,
    TransactionKind.DEX_ACCEPT: 22,
    TransactionKind.METADEX_TRADE: 25,
    TransactionKind.CANCEL_TRADES_BY_PRICE: 26,
    TransactionKind.CANCEL_TRADES_BY_PAIR: 27,
    TransactionKind.CANCEL_ALL_TRADES: 28,
    TransactionKind.FIXED_PROPERTY_CREATE: 50,
    TransactionKind.CROWDSALE_CREATE: 51,
    TransactionKind.CLOSE_CROWDSALE: 53,
    TransactionKind.MANAGED_PROPERTY_CREATE: 54,
    TransactionKind.GRANT: 55,
    TransactionKind.REVOKE: 56,
    TransactionKind.CHANGE_ISSUER: 70,
}


def test_every_kind_registered() -> None:
    assert set(REGISTRY) == set(TransactionKind)
    assert len(REGISTRY_BY_HEADER) == len(TransactionKind)


@pytest.mark.parametrize("kind", list(TransactionKind), ids=lambda k: k.value)
def test_message_types(kind: TransactionKind) -> None:
    schema = schema_for(kind)
    assert schema.kind == kind
    assert schema.message_type == _MESSAGE_TYPES[kind]
    assert REGISTRY_BY_HEADER[(schema.version, schema.message_type)] is schema


def test_only_dex_sell_uses_version_one() -> None:
    versions = {kind: schema.version for kind, schema in REGISTRY.items()}
    assert versions.pop(TransactionKind.DEX_SELL) == 1
    assert set(versions.values()) == {0}


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        REGISTRY[TransactionKind.SIMPLE_SEND] = REGISTRY[TransactionKind.REVOKE]  # type: ignore[index]
    with pytest.raises(dataclasses.FrozenInstanceError):
        schema_for(TransactionKind.SIMPLE_SEND).message_type = 1  # type: ignore[misc]


def test_field_orders() -> None:
    assert schema_for(TransactionKind.DEX_SELL).field_names == (
        "property_id",
        "amount_for_sale",
        "amount_desired",
        "payment_window",
        "min_accept_fee",
        "action",
    )
    crowdsale = schema_for(TransactionKind.CROWDSALE_CREATE).field_names
    assert crowdsale[:8] == schema_for(TransactionKind.MANAGED_PROPERTY_CREATE).field_names
    assert crowdsale[8:] == ("property_desired", "tokens_per_unit", "deadline", "early_bird_bonus", "issuer_bonus")


def test_bonuses_are_signed_bytes() -> None:
    fields = {f.name: f.codec for f in schema_for(TransactionKind.CROWDSALE_CREATE).fields}
    assert fields["early_bird_bonus"] == FieldCodec.INT8
    assert fields["issuer_bonus"] == FieldCodec.INT8
    assert fields["property_type"] == FieldCodec.UINT16


def test_only_memo_is_optional() -> None:
    optional = {
        (kind, f.name) for kind, schema in REGISTRY.items() for f in schema.fields if f.optional
    }
    assert optional == {(TransactionKind.GRANT, "memo"), (TransactionKind.REVOKE, "memo")}


def test_fixed_sizes() -> None:
    assert schema_for(TransactionKind.SIMPLE_SEND).fixed_size == 16
    assert schema_for(TransactionKind.SEND_ALL).fixed_size == 5
    assert schema_for(TransactionKind.DEX_SELL).fixed_size == 34
    assert schema_for(TransactionKind.CLOSE_CROWDSALE).fixed_size == 8
    assert schema_for(TransactionKind.CHANGE_ISSUER).fixed_size == 8
    assert schema_for(TransactionKind.FIXED_PROPERTY_CREATE).fixed_size is None
    assert schema_for(TransactionKind.GRANT).fixed_size is None


def test_reference_rules() -> None:
    rules = {kind: schema.reference for kind, schema in REGISTRY.items()}
    assert rules.pop(TransactionKind.SIMPLE_SEND) == ReferenceRule.REQUIRED
    assert rules.pop(TransactionKind.SEND_ALL) == ReferenceRule.REQUIRED
    assert rules.pop(TransactionKind.DEX_ACCEPT) == ReferenceRule.REQUIRED
    assert rules.pop(TransactionKind.CHANGE_ISSUER) == ReferenceRule.REQUIRED
    assert rules.pop(TransactionKind.GRANT) == ReferenceRule.OPTIONAL
    assert set(rules.values()) == {ReferenceRule.NONE}


def test_schema_for_rejects_non_kind() -> None:
    with pytest.raises(ValidationError):
        schema_for("simple_send")  # type: ignore[arg-type]
