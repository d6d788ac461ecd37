"""Wire-format encoding of Omni payloads.

Payload layout:
[version:2][message_type:2][field_1]...[field_n]

No padding, length prefix or checksum. Integers are big-endian, strings are
NUL-terminated UTF-8.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .codecs import Reader, Writer
from .config import HEADER_SIZE
from .errors import DecodingError, ErrorCode, ValidationError
from .registry import REGISTRY_BY_HEADER, FieldSpec, schema_for
from .types import DecodedPayload, FieldCodec, TransactionKind

logger = logging.getLogger(__name__)


def _write_field(w: Writer, spec: FieldSpec, value: Any) -> None:
    codec = spec.codec
    if codec == FieldCodec.UINT8:
        w.write_u8(value, spec.name)
    elif codec == FieldCodec.UINT16:
        w.write_u16(value, spec.name)
    elif codec == FieldCodec.UINT32:
        w.write_u32(value, spec.name)
    elif codec == FieldCodec.UINT64:
        w.write_u64(value, spec.name)
    elif codec == FieldCodec.INT8:
        w.write_i8(value, spec.name)
    elif codec == FieldCodec.BOOL:
        w.write_bool(value, spec.name)
    elif codec == FieldCodec.CSTRING:
        w.write_cstring(value, name=spec.name)
    else:
        raise ValidationError(ErrorCode.NOT_IMPLEMENTED, f"no writer for codec {codec}")


def _read_field(r: Reader, spec: FieldSpec) -> Any:
    codec = spec.codec
    if codec == FieldCodec.UINT8:
        return r.read_u8(spec.name)
    if codec == FieldCodec.UINT16:
        return r.read_u16(spec.name)
    if codec == FieldCodec.UINT32:
        return r.read_u32(spec.name)
    if codec == FieldCodec.UINT64:
        return r.read_u64(spec.name)
    if codec == FieldCodec.INT8:
        return r.read_i8(spec.name)
    if codec == FieldCodec.BOOL:
        return r.read_bool(spec.name)
    if codec == FieldCodec.CSTRING:
        return r.read_cstring(name=spec.name)
    raise DecodingError(ErrorCode.NOT_IMPLEMENTED, f"no reader for codec {codec}")


def encode_payload(kind: TransactionKind, args: Mapping[str, Any]) -> bytes:
    """Encode already validated wire values for ``kind``.

    ``args`` maps schema field names to integers / strings. Optional fields may
    be omitted or set to None. The buffer is only returned once every field has
    been written.
    """
    schema = schema_for(kind)

    unexpected = set(args) - set(schema.field_names)
    if unexpected:
        raise ValidationError(
            ErrorCode.INVALID_ARGUMENT,
            f"unexpected fields for {kind.value}: {sorted(unexpected)}",
        )

    w = Writer(bytearray())
    w.write_u16(schema.version, "version")
    w.write_u16(schema.message_type, "message_type")

    for spec in schema.fields:
        value = args.get(spec.name)
        if value is None:
            if spec.optional:
                continue
            raise ValidationError(ErrorCode.INVALID_ARGUMENT, f"missing field {spec.name} for {kind.value}")
        _write_field(w, spec, value)

    payload = bytes(w.buf)
    logger.debug(f"encoded {kind.value} payload ({len(payload)} bytes)")
    return payload


def decode_payload(data: bytes) -> DecodedPayload:
    """Decode a payload back into its kind and wire values."""
    if not isinstance(data, (bytes, bytearray)):
        raise DecodingError(ErrorCode.INVALID_FORMAT, "payload must be bytes")
    if len(data) < HEADER_SIZE:
        raise DecodingError(ErrorCode.TRUNCATED, "payload shorter than header")

    r = Reader(bytes(data))
    version = r.read_u16("version")
    message_type = r.read_u16("message_type")
    schema = REGISTRY_BY_HEADER.get((version, message_type))
    if schema is None:
        raise DecodingError(
            ErrorCode.UNKNOWN_MESSAGE_TYPE,
            f"unknown message type {message_type} (version {version})",
        )

    fields: dict[str, Any] = {}
    for spec in schema.fields:
        if spec.optional and r.at_end():
            continue
        fields[spec.name] = _read_field(r, spec)

    if not r.at_end():
        raise DecodingError(ErrorCode.TRAILING_DATA, f"{r.remaining()} trailing bytes")

    logger.debug(f"decoded {schema.kind.value} payload ({len(data)} bytes)")
    return DecodedPayload(kind=schema.kind, version=version, fields=fields)


def payload_hex(payload: bytes) -> str:
    """Lowercase hex with no prefix."""
    return bytes(payload).hex()


def payload_from_hex(value: str) -> bytes:
    if not isinstance(value, str):
        raise DecodingError(ErrorCode.INVALID_FORMAT, "payload hex must be a string")
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise DecodingError(ErrorCode.INVALID_FORMAT, "payload is not valid hex") from None
