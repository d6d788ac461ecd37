"""Omni payload error codes and exceptions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorCategory(IntEnum):
    SUCCESS = 0x00
    VALIDATION = 0x01
    PRECISION = 0x02
    RESOURCE = 0x03
    FORMAT = 0x04
    INTERNAL = 0xFF


class ErrorCode(IntEnum):
    # Success
    SUCCESS = 0x0000

    # Validation
    INVALID_TYPE = 0x0100
    INVALID_AMOUNT = 0x0101
    INVALID_PROPERTY = 0x0102
    INVALID_ECOSYSTEM = 0x0103
    INVALID_PROPERTY_TYPE = 0x0104
    INVALID_ACTION = 0x0105
    INVALID_STRING = 0x0106
    INVALID_RANGE = 0x0107
    INVALID_ADDRESS = 0x0108
    INVALID_ARGUMENT = 0x0109

    # Precision
    PRECISION_LOSS = 0x0200

    # Resource
    OVERFLOW = 0x0300

    # Format
    INVALID_FORMAT = 0x0400
    INVALID_VERSION = 0x0401
    UNKNOWN_MESSAGE_TYPE = 0x0402
    TRUNCATED = 0x0403
    TRAILING_DATA = 0x0404

    # Internal
    INTERNAL_ERROR = 0xFF00
    NOT_IMPLEMENTED = 0xFF01
    UNKNOWN = 0xFFFF


@dataclass(frozen=True)
class SpecError(Exception):
    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.name}({self.code:#06x}): {self.message}"

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory(int(self.code) >> 8)


# Allow Python's Exception machinery to set __traceback__/__context__/__cause__
# while keeping dataclass fields frozen (Python 3.13 contextlib compat).
_EXCEPTION_ATTRS = frozenset(("__traceback__", "__context__", "__cause__"))
_frozen_setattr = SpecError.__setattr__


def _spec_error_setattr(self: SpecError, name: str, value: object) -> None:
    if name in _EXCEPTION_ATTRS:
        object.__setattr__(self, name, value)
    else:
        _frozen_setattr(self, name, value)


SpecError.__setattr__ = _spec_error_setattr  # type: ignore[method-assign]


class ValidationError(SpecError):
    """An argument is outside its valid domain."""


class PrecisionLoss(SpecError):
    """A decimal amount has more fractional digits than the property allows."""


class EncodingOverflow(SpecError):
    """A value does not fit its fixed-width field."""


class DecodingError(SpecError):
    """A byte sequence is not a well-formed payload."""


def invalid(code: ErrorCode, message: str) -> ValidationError:
    return ValidationError(code=code, message=message)
