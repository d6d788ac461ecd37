"""Negative wire format tests: malformed bytes that fail to decode.

Each case is recorded under payloads/decode_negative.json so a decoder in any
language can be checked against the same rejections.
"""

from __future__ import annotations

import pytest

from omni_spec.encoding import decode_payload, payload_from_hex
from omni_spec.errors import DecodingError, ErrorCode

_GROUP = "payloads/decode_negative.json"

_SIMPLE_SEND = "0000" "0000" "00000001" "0000000005f5e100"
_FIXED = "0000" "0032" "01" "0002" "00000000" "00" "00" "466f6f00" "00" "00" "000000174876e800"


def _truncate(hex_str: str, byte_length: int) -> str:
    raw = bytes.fromhex(hex_str)
    return raw[:byte_length].hex()


def _mutate(hex_str: str, offset: int, new_byte: int) -> str:
    raw = bytearray(bytes.fromhex(hex_str))
    raw[offset] = new_byte
    return raw.hex()


def _expect_failure(vector_test_group, name: str, payload: str, code: ErrorCode) -> None:
    with pytest.raises(DecodingError) as exc:
        decode_payload(payload_from_hex(payload))
    assert exc.value.code == code
    vector_test_group(
        _GROUP,
        {
            "name": name,
            "input": {"payload_hex": payload},
            "expected": {"error": code.name, "error_code": int(code)},
        },
    )


def test_empty_payload(vector_test_group) -> None:
    _expect_failure(vector_test_group, "empty_payload", "", ErrorCode.TRUNCATED)


def test_header_truncated(vector_test_group) -> None:
    _expect_failure(vector_test_group, "header_truncated", "000000", ErrorCode.TRUNCATED)


def test_unknown_message_type(vector_test_group) -> None:
    _expect_failure(vector_test_group, "unknown_message_type", "0000ffff", ErrorCode.UNKNOWN_MESSAGE_TYPE)


def test_dex_sell_with_version_zero(vector_test_group) -> None:
    payload = (
        "0000" "0014" "00000001" "0000000008f0d180" "00000000047868c0" "19" "0000000000002710" "01"
    )
    _expect_failure(vector_test_group, "dex_sell_version_zero", payload, ErrorCode.UNKNOWN_MESSAGE_TYPE)


def test_simple_send_with_unknown_version(vector_test_group) -> None:
    payload = _mutate(_SIMPLE_SEND, 1, 0x05)
    _expect_failure(vector_test_group, "simple_send_version_5", payload, ErrorCode.UNKNOWN_MESSAGE_TYPE)


def test_amount_truncated(vector_test_group) -> None:
    payload = _truncate(_SIMPLE_SEND, 12)
    _expect_failure(vector_test_group, "simple_send_amount_truncated", payload, ErrorCode.TRUNCATED)


def test_trailing_byte(vector_test_group) -> None:
    _expect_failure(vector_test_group, "simple_send_trailing_byte", _SIMPLE_SEND + "00", ErrorCode.TRAILING_DATA)


def test_string_missing_terminator(vector_test_group) -> None:
    # Header, ecosystem, type, previous id, two empty strings, then "Foo" unterminated.
    payload = _truncate(_FIXED, 4 + 1 + 2 + 4 + 2 + 3)
    _expect_failure(vector_test_group, "fixed_name_unterminated", payload, ErrorCode.TRUNCATED)


def test_string_invalid_utf8(vector_test_group) -> None:
    payload = "0000" "0036" "01" "0002" "00000000" "00" "00" "ff00" "00" "00"
    _expect_failure(vector_test_group, "managed_name_invalid_utf8", payload, ErrorCode.INVALID_FORMAT)


def test_string_too_long(vector_test_group) -> None:
    payload = "0000" "0036" "01" "0002" "00000000" "00" "00" + "41" * 256 + "00" "00" "00"
    _expect_failure(vector_test_group, "managed_name_too_long", payload, ErrorCode.INVALID_FORMAT)


def test_not_hex() -> None:
    with pytest.raises(DecodingError) as exc:
        payload_from_hex("zz")
    assert exc.value.code == ErrorCode.INVALID_FORMAT


def test_memo_is_optional_on_decode() -> None:
    decoded = decode_payload(payload_from_hex("0000" "0037" "00000003" "00000000000003e8"))
    assert decoded.fields == {"property_id": 3, "amount": 1000}
