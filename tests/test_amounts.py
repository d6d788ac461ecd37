"""Decimal amount scaling tests."""

from __future__ import annotations

import time
from decimal import Decimal, localcontext

import pytest

from omni_spec.amounts import scale_amount, to_decimal, unscale_amount
from omni_spec.config import UINT64_MAX
from omni_spec.errors import EncodingOverflow, ErrorCode, PrecisionLoss, ValidationError
from omni_spec.types import PropertyType

DIV = PropertyType.DIVISIBLE
INDIV = PropertyType.INDIVISIBLE


def test_divisible_scales_by_1e8() -> None:
    assert scale_amount(Decimal("1.00000000"), DIV) == 100_000_000
    assert scale_amount("0.00000001", DIV) == 1
    assert scale_amount(3, DIV) == 300_000_000
    assert scale_amount("0", DIV) == 0


def test_divisible_rejects_ninth_decimal() -> None:
    with pytest.raises(PrecisionLoss) as exc:
        scale_amount("0.000000001", DIV)
    assert exc.value.code == ErrorCode.PRECISION_LOSS


def test_divisible_accepts_trailing_zero_digits() -> None:
    assert scale_amount("1.5000000000", DIV) == 150_000_000


def test_indivisible_requires_whole_units() -> None:
    assert scale_amount(3, INDIV) == 3
    assert scale_amount(Decimal("3.0"), INDIV) == 3
    with pytest.raises(ValidationError) as exc:
        scale_amount("3.5", INDIV)
    assert exc.value.code == ErrorCode.INVALID_AMOUNT


def test_upper_bound() -> None:
    assert scale_amount("184467440737.09551615", DIV) == UINT64_MAX
    with pytest.raises(EncodingOverflow):
        scale_amount("184467440737.09551616", DIV)
    assert scale_amount(UINT64_MAX, INDIV) == UINT64_MAX
    with pytest.raises(EncodingOverflow):
        scale_amount(UINT64_MAX + 1, INDIV)


@pytest.mark.parametrize("amount", ["-1", Decimal("-0.5"), 1.5, True, "NaN", "Infinity", "1,5", "abc", None])
def test_rejects_bad_amounts(amount) -> None:
    with pytest.raises(ValidationError):
        scale_amount(amount, DIV)


def test_scaling_ignores_decimal_context() -> None:
    with localcontext() as ctx:
        ctx.prec = 5
        assert scale_amount("123456.78901234", DIV) == 12_345_678_901_234


def test_unscale_divisible() -> None:
    value = unscale_amount(100_000_000, DIV)
    assert value == Decimal(1)
    assert str(value) == "1.00000000"
    assert scale_amount(unscale_amount(12_345, DIV), DIV) == 12_345


def test_unscale_indivisible() -> None:
    assert unscale_amount(42, INDIV) == Decimal(42)


def test_unscale_rejects_out_of_range() -> None:
    with pytest.raises(ValidationError):
        unscale_amount(-1, DIV)


def test_to_decimal_strips_whitespace() -> None:
    assert to_decimal(" 2.5 ") == Decimal("2.5")


@pytest.mark.parametrize(
    "amount, property_type, error",
    [
        ("1E+20000000", DIV, EncodingOverflow),
        ("1E+20000000", INDIV, EncodingOverflow),
        ("1E+200000000", DIV, EncodingOverflow),
        ("1E-20000000", DIV, PrecisionLoss),
        ("1E-20000000", INDIV, ValidationError),
        ("1E-200000000", DIV, PrecisionLoss),
    ],
)
def test_extreme_exponents_fail_fast(amount, property_type, error) -> None:
    start = time.monotonic()
    with pytest.raises(error):
        scale_amount(amount, property_type)
    assert time.monotonic() - start < 1.0


def test_extreme_exponent_of_zero_is_zero() -> None:
    assert scale_amount("0E+20000000", DIV) == 0
    assert scale_amount("0E-20000000", INDIV) == 0


def test_long_fraction_past_context_precision() -> None:
    with pytest.raises(PrecisionLoss):
        scale_amount("1.000000000000000000000000000001", DIV)
    assert scale_amount("1E+3", INDIV) == 1000
