"""Checked integer arithmetic for token amounts.

Token amounts are u64 and every intermediate product fits in u128. Python
ints never overflow on their own, so the widths are enforced explicitly:
wrap the inputs with ``S``, compute, then narrow the result with
``to_u64`` (or keep it wrapped with ``checked_u128``).

    numerator = (S(amount) * reserve_out).checked_u128()
    out = (numerator // (S(reserve_in) + amount)).to_u64()

Subtraction below zero, division by zero and values past their width
raise a SafeIntError instead of producing an amount the ledger could
never hold.
"""

from __future__ import annotations

from math import isqrt

U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1


class SafeIntError(ArithmeticError):
    """Checked arithmetic failed."""


class DivisionByZero(SafeIntError):
    """Divisor is zero."""


class Underflow(SafeIntError):
    """Result would be negative."""


class Overflow(SafeIntError):
    """Result does not fit the requested width."""


def _check_width(value: int, maximum: int, width: str) -> int:
    if value < 0:
        raise Overflow(f"{width} cannot hold negative value {value}")
    if value > maximum:
        raise Overflow(f"{value} exceeds {width} max {maximum}")
    return value


def _unwrap(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


class SafeInt:
    """Non-negative integer whose operators fail instead of going negative.

    Addition and multiplication are unbounded; widths are checked when the
    value is narrowed with ``to_u64`` / ``to_u128`` / ``checked_u128``.
    """

    __slots__ = ("_value",)

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value._value
        elif not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"SafeInt wraps int, got {type(value).__name__}")
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"S({self._value})"

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _unwrap(other))

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _unwrap(other))

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Raises Underflow when ``other`` is larger."""
        rhs = _unwrap(other)
        if rhs > self._value:
            raise Underflow(f"{self._value} - {rhs} is negative")
        return SafeInt(self._value - rhs)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Division rounded down. Raises DivisionByZero."""
        divisor = _unwrap(other)
        if divisor == 0:
            raise DivisionByZero(f"{self._value} // 0")
        return SafeInt(self._value // divisor)

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Division rounded up. Raises DivisionByZero."""
        divisor = _unwrap(other)
        if divisor == 0:
            raise DivisionByZero(f"ceil({self._value} / 0)")
        return SafeInt(-(-self._value // divisor))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _unwrap(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _unwrap(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _unwrap(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _unwrap(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _unwrap(other)

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _unwrap(other)))

    def sqrt(self) -> SafeInt:
        """Integer square root, rounded down."""
        if self._value < 0:
            raise Underflow(f"sqrt of negative value {self._value}")
        return SafeInt(isqrt(self._value))

    def to_u64(self) -> int:
        """Unwrap as a token amount. Raises Overflow outside 0..2^64-1."""
        return _check_width(self._value, U64_MAX, "u64")

    def to_u128(self) -> int:
        """Unwrap as an intermediate product. Raises Overflow outside 0..2^128-1."""
        return _check_width(self._value, U128_MAX, "u128")

    def checked_u128(self) -> SafeInt:
        """Check the u128 width and stay wrapped for further arithmetic."""
        return SafeInt(self.to_u128())


S = SafeInt
