"""Decimal amount <-> base unit conversion.

Divisible properties carry 8 fractional digits; indivisible properties are
counted in whole units. Scaling uses exact rational arithmetic so the result
never depends on the active decimal context or the process locale.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from .config import COIN_DECIMALS, COIN_VALUE, UINT64_MAX
from .errors import EncodingOverflow, ErrorCode, PrecisionLoss, ValidationError
from .types import PropertyType

AmountLike = Union[Decimal, int, str]

# Any value with a larger decimal exponent is at least 10**20 > UINT64_MAX.
_MAX_ADJUSTED_EXPONENT = len(str(UINT64_MAX)) - 1


def to_decimal(amount: AmountLike, name: str = "amount") -> Decimal:
    """Coerce a boundary amount to a finite Decimal.

    Floats are refused: their binary expansion is not the amount the caller
    wrote.
    """
    if isinstance(amount, bool):
        raise ValidationError(ErrorCode.INVALID_AMOUNT, f"{name} must be a decimal amount")
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, int):
        value = Decimal(amount)
    elif isinstance(amount, str):
        try:
            value = Decimal(amount.strip())
        except InvalidOperation:
            raise ValidationError(ErrorCode.INVALID_AMOUNT, f"{name} is not a decimal number: {amount!r}") from None
    else:
        raise ValidationError(ErrorCode.INVALID_AMOUNT, f"{name} must be Decimal, int or str")
    if not value.is_finite():
        raise ValidationError(ErrorCode.INVALID_AMOUNT, f"{name} must be finite")
    return value


def _fraction_digits(value: Decimal) -> int:
    """Significant fractional digits, ignoring trailing zeros."""
    _, digits, exponent = value.as_tuple()
    trailing = 0
    for digit in reversed(digits):
        if digit:
            break
        trailing += 1
    return max(0, -(exponent + trailing))


def scale_amount(amount: AmountLike, property_type: PropertyType, name: str = "amount") -> int:
    value = to_decimal(amount, name)
    if value.is_signed() and value != 0:
        raise ValidationError(ErrorCode.INVALID_AMOUNT, f"{name} must not be negative")
    if property_type not in (PropertyType.DIVISIBLE, PropertyType.INDIVISIBLE):
        raise ValidationError(ErrorCode.INVALID_PROPERTY_TYPE, "unknown property type")
    if value == 0:
        return 0

    # Range and digit checks come first so the exact arithmetic below only
    # ever sees numbers of at most ~28 digits.
    if value.adjusted() > _MAX_ADJUSTED_EXPONENT:
        raise EncodingOverflow(ErrorCode.OVERFLOW, f"{name} does not fit 64-bit unsigned field")
    fraction = _fraction_digits(value)
    if property_type == PropertyType.DIVISIBLE and fraction > COIN_DECIMALS:
        raise PrecisionLoss(
            ErrorCode.PRECISION_LOSS,
            f"{name} has more than {COIN_DECIMALS} fractional digits",
        )
    if property_type == PropertyType.INDIVISIBLE and fraction > 0:
        raise ValidationError(ErrorCode.INVALID_AMOUNT, f"{name} must be integral for an indivisible property")

    numerator, denominator = value.as_integer_ratio()
    if property_type == PropertyType.DIVISIBLE:
        scaled = numerator * COIN_VALUE // denominator
    else:
        scaled = numerator // denominator

    if scaled > UINT64_MAX:
        raise EncodingOverflow(ErrorCode.OVERFLOW, f"{name} does not fit 64-bit unsigned field")
    return scaled


def unscale_amount(units: int, property_type: PropertyType) -> Decimal:
    """Inverse of :func:`scale_amount` for a decoded base-unit count."""
    if isinstance(units, bool) or not isinstance(units, int) or not (0 <= units <= UINT64_MAX):
        raise ValidationError(ErrorCode.INVALID_AMOUNT, "units must be a uint64")
    if property_type == PropertyType.DIVISIBLE:
        return Decimal(units).scaleb(-COIN_DECIMALS)
    if property_type == PropertyType.INDIVISIBLE:
        return Decimal(units)
    raise ValidationError(ErrorCode.INVALID_PROPERTY_TYPE, "unknown property type")
