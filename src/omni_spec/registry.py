"""Transaction kind registry: message type, version and ordered field schema.

The registry is the single source of truth for field order. It is built once
at import and exposed read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from .config import HEADER_SIZE
from .errors import ErrorCode, ValidationError
from .types import FieldCodec, ReferenceRule, TransactionKind


@dataclass(frozen=True)
class FieldSpec:
    name: str
    codec: FieldCodec
    optional: bool = False


@dataclass(frozen=True)
class KindSchema:
    kind: TransactionKind
    message_type: int
    version: int
    fields: Tuple[FieldSpec, ...]
    reference: ReferenceRule = ReferenceRule.NONE

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def fixed_size(self) -> int | None:
        """Total payload size when every field has a fixed width."""
        size = HEADER_SIZE
        for f in self.fields:
            if f.codec.width is None or f.optional:
                return None
            size += f.codec.width
        return size


_U8 = FieldCodec.UINT8
_U16 = FieldCodec.UINT16
_U32 = FieldCodec.UINT32
_U64 = FieldCodec.UINT64
_I8 = FieldCodec.INT8
_STR = FieldCodec.CSTRING


def _f(name: str, codec: FieldCodec, optional: bool = False) -> FieldSpec:
    return FieldSpec(name=name, codec=codec, optional=optional)


_PROPERTY_INFO = (
    _f("ecosystem", _U8),
    _f("property_type", _U16),
    _f("previous_id", _U32),
    _f("category", _STR),
    _f("subcategory", _STR),
    _f("name", _STR),
    _f("url", _STR),
    _f("data", _STR),
)

_TRADE = (
    _f("property_for_sale", _U32),
    _f("amount_for_sale", _U64),
    _f("property_desired", _U32),
    _f("amount_desired", _U64),
)

_SCHEMAS = (
    KindSchema(
        TransactionKind.SIMPLE_SEND, 0, 0,
        (_f("property_id", _U32), _f("amount", _U64)),
        ReferenceRule.REQUIRED,
    ),
    KindSchema(
        TransactionKind.SEND_TO_OWNERS, 3, 0,
        (_f("property_id", _U32), _f("amount", _U64)),
    ),
    KindSchema(
        TransactionKind.SEND_ALL, 4, 0,
        (_f("ecosystem", _U8),),
        ReferenceRule.REQUIRED,
    ),
    KindSchema(
        TransactionKind.DEX_SELL, 20, 1,
        (
            _f("property_id", _U32),
            _f("amount_for_sale", _U64),
            _f("amount_desired", _U64),
            _f("payment_window", _U8),
            _f("min_accept_fee", _U64),
            _f("action", _U8),
        ),
    ),
    KindSchema(
        TransactionKind.DEX_ACCEPT, 22, 0,
        (_f("property_id", _U32), _f("amount", _U64)),
        ReferenceRule.REQUIRED,
    ),
    KindSchema(TransactionKind.METADEX_TRADE, 25, 0, _TRADE),
    KindSchema(TransactionKind.CANCEL_TRADES_BY_PRICE, 26, 0, _TRADE),
    KindSchema(
        TransactionKind.CANCEL_TRADES_BY_PAIR, 27, 0,
        (_f("property_for_sale", _U32), _f("property_desired", _U32)),
    ),
    KindSchema(
        TransactionKind.CANCEL_ALL_TRADES, 28, 0,
        (_f("ecosystem", _U8),),
    ),
    KindSchema(
        TransactionKind.FIXED_PROPERTY_CREATE, 50, 0,
        _PROPERTY_INFO + (_f("amount", _U64),),
    ),
    KindSchema(
        TransactionKind.CROWDSALE_CREATE, 51, 0,
        _PROPERTY_INFO
        + (
            _f("property_desired", _U32),
            _f("tokens_per_unit", _U64),
            _f("deadline", _U64),
            _f("early_bird_bonus", _I8),
            _f("issuer_bonus", _I8),
        ),
    ),
    KindSchema(
        TransactionKind.CLOSE_CROWDSALE, 53, 0,
        (_f("property_id", _U32),),
    ),
    KindSchema(TransactionKind.MANAGED_PROPERTY_CREATE, 54, 0, _PROPERTY_INFO),
    KindSchema(
        TransactionKind.GRANT, 55, 0,
        (_f("property_id", _U32), _f("amount", _U64), _f("memo", _STR, optional=True)),
        ReferenceRule.OPTIONAL,
    ),
    KindSchema(
        TransactionKind.REVOKE, 56, 0,
        (_f("property_id", _U32), _f("amount", _U64), _f("memo", _STR, optional=True)),
    ),
    KindSchema(
        TransactionKind.CHANGE_ISSUER, 70, 0,
        (_f("property_id", _U32),),
        ReferenceRule.REQUIRED,
    ),
)


def _build_registry() -> Tuple[
    Mapping[TransactionKind, KindSchema], Mapping[Tuple[int, int], KindSchema]
]:
    by_kind: dict[TransactionKind, KindSchema] = {}
    by_header: dict[Tuple[int, int], KindSchema] = {}
    for schema in _SCHEMAS:
        if schema.kind in by_kind:
            raise AssertionError(f"duplicate schema for {schema.kind.value}")
        header = (schema.version, schema.message_type)
        if header in by_header:
            raise AssertionError(f"duplicate header {header} for {schema.kind.value}")
        seen_optional = False
        for f in schema.fields:
            if seen_optional and not f.optional:
                raise AssertionError(f"{schema.kind.value}: optional field must be trailing")
            seen_optional = seen_optional or f.optional
        by_kind[schema.kind] = schema
        by_header[header] = schema
    missing = set(TransactionKind) - set(by_kind)
    if missing:
        raise AssertionError(f"missing schemas: {sorted(k.value for k in missing)}")
    return MappingProxyType(by_kind), MappingProxyType(by_header)


REGISTRY, REGISTRY_BY_HEADER = _build_registry()


def schema_for(kind: TransactionKind) -> KindSchema:
    if not isinstance(kind, TransactionKind):
        raise ValidationError(ErrorCode.INVALID_TYPE, f"unknown transaction kind: {kind!r}")
    return REGISTRY[kind]
