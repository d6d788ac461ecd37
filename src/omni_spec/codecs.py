"""Primitive field codecs for Omni payloads.

All multi-byte integers are big-endian. Strings are UTF-8 followed by a single
NUL byte.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import INT8_MAX, INT8_MIN, MAX_STRING_LENGTH
from .errors import DecodingError, EncodingOverflow, ErrorCode, ValidationError


def _require_int(name: str, v: object) -> int:
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValidationError(ErrorCode.INVALID_ARGUMENT, f"{name} must be an integer")
    return v


def _write_uint(buf: bytearray, name: str, v: object, size: int) -> None:
    value = _require_int(name, v)
    if not (0 <= value < 1 << (8 * size)):
        raise EncodingOverflow(ErrorCode.OVERFLOW, f"{name} does not fit {size * 8}-bit unsigned field")
    buf.extend(value.to_bytes(size, "big", signed=False))


def string_bytes(value: object, max_len: int = MAX_STRING_LENGTH, name: str = "string") -> bytes:
    """Validate a string field and return its UTF-8 bytes (no terminator)."""
    if isinstance(value, str):
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError:
            raise ValidationError(ErrorCode.INVALID_STRING, f"{name} is not valid UTF-8") from None
    elif isinstance(value, (bytes, bytearray)):
        data = bytes(value)
        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError(ErrorCode.INVALID_STRING, f"{name} is not valid UTF-8") from None
    else:
        raise ValidationError(ErrorCode.INVALID_STRING, f"{name} must be str or bytes")
    if b"\x00" in data:
        raise ValidationError(ErrorCode.INVALID_STRING, f"{name} must not contain NUL")
    if len(data) > max_len:
        raise ValidationError(ErrorCode.INVALID_STRING, f"{name} exceeds {max_len} bytes")
    return data


@dataclass
class Writer:
    buf: bytearray

    def write_u8(self, v: int, name: str = "uint8") -> None:
        _write_uint(self.buf, name, v, 1)

    def write_u16(self, v: int, name: str = "uint16") -> None:
        _write_uint(self.buf, name, v, 2)

    def write_u32(self, v: int, name: str = "uint32") -> None:
        _write_uint(self.buf, name, v, 4)

    def write_u64(self, v: int, name: str = "uint64") -> None:
        _write_uint(self.buf, name, v, 8)

    def write_i8(self, v: int, name: str = "int8") -> None:
        value = _require_int(name, v)
        if not (INT8_MIN <= value <= INT8_MAX):
            raise EncodingOverflow(ErrorCode.OVERFLOW, f"{name} does not fit 8-bit signed field")
        self.buf.extend(value.to_bytes(1, "big", signed=True))

    def write_bool(self, v: bool, name: str = "bool") -> None:
        if not isinstance(v, bool):
            raise ValidationError(ErrorCode.INVALID_ARGUMENT, f"{name} must be a bool")
        self.buf.append(1 if v else 0)

    def write_cstring(self, v: str, max_len: int = MAX_STRING_LENGTH, name: str = "string") -> None:
        data = string_bytes(v, max_len, name)
        self.buf.extend(data)
        self.buf.append(0)

    def write_bytes(self, b: bytes) -> None:
        self.buf.extend(b)


@dataclass
class Reader:
    data: bytes
    pos: int = 0

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def _take(self, size: int, name: str) -> bytes:
        if self.remaining() < size:
            raise DecodingError(ErrorCode.TRUNCATED, f"{name} truncated at offset {self.pos}")
        chunk = self.data[self.pos:self.pos + size]
        self.pos += size
        return chunk

    def read_u8(self, name: str = "uint8") -> int:
        return int.from_bytes(self._take(1, name), "big", signed=False)

    def read_u16(self, name: str = "uint16") -> int:
        return int.from_bytes(self._take(2, name), "big", signed=False)

    def read_u32(self, name: str = "uint32") -> int:
        return int.from_bytes(self._take(4, name), "big", signed=False)

    def read_u64(self, name: str = "uint64") -> int:
        return int.from_bytes(self._take(8, name), "big", signed=False)

    def read_i8(self, name: str = "int8") -> int:
        return int.from_bytes(self._take(1, name), "big", signed=True)

    def read_bool(self, name: str = "bool") -> bool:
        value = self.read_u8(name)
        if value not in (0, 1):
            raise DecodingError(ErrorCode.INVALID_FORMAT, f"{name} must be 0 or 1")
        return value == 1

    def read_cstring(self, max_len: int = MAX_STRING_LENGTH, name: str = "string") -> str:
        end = self.data.find(b"\x00", self.pos)
        if end < 0:
            raise DecodingError(ErrorCode.TRUNCATED, f"{name} missing NUL terminator")
        raw = self.data[self.pos:end]
        if len(raw) > max_len:
            raise DecodingError(ErrorCode.INVALID_FORMAT, f"{name} exceeds {max_len} bytes")
        try:
            value = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise DecodingError(ErrorCode.INVALID_FORMAT, f"{name} is not valid UTF-8") from None
        self.pos = end + 1
        return value
