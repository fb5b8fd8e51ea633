"""Tests for SafeInt safe arithmetic wrapper."""

import pytest

from cpswap.safe_int import (
    U64_MAX,
    U128_MAX,
    DivisionByZero,
    Overflow,
    S,
    SafeInt,
    SafeIntError,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_invalid_type_raises(self):
        """SafeInt rejects strings, floats and bools."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for SafeInt arithmetic operations."""

    def test_add(self):
        assert (S(10) + S(5)).value == 15
        assert (S(10) + 5).value == 15

    def test_sub(self):
        assert (S(10) - 3).value == 7

    def test_sub_underflow_raises(self):
        """Negative differences raise instead of wrapping."""
        with pytest.raises(Underflow):
            S(3) - 10

    def test_mul(self):
        assert (S(6) * 7).value == 42

    def test_floordiv(self):
        assert (S(10) // 3).value == 3

    def test_floordiv_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(10) // 0

    def test_ceiling_div(self):
        """ceiling_div rounds up only when there is a remainder."""
        assert S(10).ceiling_div(3).value == 4
        assert S(9).ceiling_div(3).value == 3
        assert S(0).ceiling_div(3).value == 0

    def test_ceiling_div_by_zero_raises(self):
        with pytest.raises(DivisionByZero):
            S(10).ceiling_div(0)

    def test_min(self):
        assert S(10).min(3).value == 3
        assert S(3).min(10).value == 3

    def test_sqrt_rounds_down(self):
        assert S(100).sqrt().value == 10
        assert S(99).sqrt().value == 9
        assert S(10_000_000_000 * 10_000_000_000).sqrt().value == 10_000_000_000

    def test_sqrt_negative_raises(self):
        with pytest.raises(Underflow):
            S(-1).sqrt()


class TestSafeIntBounds:
    """Tests for u64/u128 range checks."""

    def test_to_u64_at_max(self):
        assert S(U64_MAX).to_u64() == U64_MAX

    def test_to_u64_overflow_raises(self):
        with pytest.raises(Overflow):
            S(U64_MAX + 1).to_u64()

    def test_to_u64_negative_raises(self):
        with pytest.raises(Overflow):
            S(-1).to_u64()

    def test_to_u128_overflow_raises(self):
        with pytest.raises(Overflow):
            S(U128_MAX + 1).to_u128()

    def test_checked_u128_keeps_wrapper(self):
        result = (S(U64_MAX) * U64_MAX).checked_u128()
        assert isinstance(result, SafeInt)
        assert result.value == U64_MAX * U64_MAX

    def test_u64_product_fits_u128(self):
        """The largest product of two u64 amounts is a valid u128."""
        assert U64_MAX * U64_MAX <= U128_MAX

    def test_errors_are_arithmetic_errors(self):
        """All SafeInt failures share a base class usable in except clauses."""
        for error in (DivisionByZero, Underflow, Overflow):
            assert issubclass(error, SafeIntError)
            assert issubclass(error, ArithmeticError)


class TestSafeIntComparison:
    """Tests for comparison with ints and SafeInts."""

    def test_equality(self):
        assert S(5) == 5
        assert S(5) == S(5)
        assert S(5) != 6

    def test_ordering(self):
        assert S(5) < 6
        assert S(5) <= S(5)
        assert S(6) > 5
        assert S(6) >= S(6)

    def test_bool(self):
        assert not S(0)
        assert S(1)
