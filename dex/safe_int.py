"""Checked integer arithmetic for reserves, shares and token amounts.

Ledger quantities are non-negative integers that must fit in a uint256 slot.
Wrapping operands in S() turns the silent failure modes of plain int math
into exceptions at the point they happen:

    S(reserve) - S(amount_out)      # Underflow if amount_out > reserve
    S(amount) * S(supply) // S(0)   # DivisionByZero
    (S(reserve) + S(amount_in)).to_uint256()  # Uint256Overflow past 2**256-1

Multiplication and addition are unbounded until to_uint256() is called, so
intermediate products (amount_in * fee * reserve_out) never overflow early.
"""

from __future__ import annotations

import math
from functools import total_ordering

UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Base class for checked arithmetic failures."""

    pass


class DivisionByZero(SafeIntError):
    pass


class Underflow(SafeIntError):
    """An operation would produce a negative quantity."""

    pass


class Uint256Overflow(SafeIntError):
    """A quantity falls outside [0, 2**256 - 1]."""

    pass


def _unwrap(operand: SafeInt | int) -> int:
    return operand._value if isinstance(operand, SafeInt) else operand


def _checked_sub(left: int, right: int) -> SafeInt:
    if right > left:
        raise Underflow(f"Underflow: {left} - {right} = {left - right}")
    return SafeInt(left - right)


def _checked_floordiv(left: int, right: int) -> SafeInt:
    if right == 0:
        raise DivisionByZero(f"Division by zero: {left} // 0")
    return SafeInt(left // right)


@total_ordering
class SafeInt:
    """Integer with checked subtraction, division and uint256 conversion.

    Mixes freely with plain ints on either side of an operator. Bools are
    rejected so that a stray flag never turns into an amount.
    """

    __slots__ = ("_value",)

    def __init__(self, value: int | SafeInt) -> None:
        if isinstance(value, SafeInt):
            value = value._value
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value: int = value

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"S({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def __bool__(self) -> bool:
        return self._value != 0

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _unwrap(other))

    __radd__ = __add__

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _unwrap(other))

    __rmul__ = __mul__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        return _checked_sub(self._value, _unwrap(other))

    def __rsub__(self, other: int) -> SafeInt:
        return _checked_sub(other, self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        return _checked_floordiv(self._value, _unwrap(other))

    def __rfloordiv__(self, other: int) -> SafeInt:
        return _checked_floordiv(other, self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _unwrap(other)
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _unwrap(other)

    def isqrt(self) -> SafeInt:
        """Floor square root; used to size the first liquidity mint."""
        if self._value < 0:
            raise Underflow(f"Square root of negative value: {self._value}")
        return SafeInt(math.isqrt(self._value))

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _unwrap(other)))

    def to_uint256(self) -> int:
        """Return the plain int, raising Uint256Overflow outside the uint256 range."""
        if not 0 <= self._value <= UINT256_MAX:
            raise Uint256Overflow(f"Value outside uint256 range: {self._value}")
        return self._value


# Short alias used throughout the pricing and pool code
S = SafeInt
