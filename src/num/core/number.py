"""
Numeric tower for num: a 64-bit integer or a double.

Arithmetic between two integers stays integral and wraps like native
two's-complement arithmetic; pairing an integer with a real promotes both
to real. Operators that only make sense on integers (``%``, ``&``, ``|``)
refuse real operands instead of promoting them.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from decimal import Decimal

from num.core.errors import ErrorKind

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
_MODULUS = 2**64


def wrap_int64(value: int) -> int:
    """Reduce an arbitrary Python int to the signed 64-bit range."""
    value %= _MODULUS
    if value > INT64_MAX:
        value -= _MODULUS
    return value


class NumberError(ArithmeticError):
    """Arithmetic failure, converted to an ExpressionError by the evaluator."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class Number:
    """An immutable Integer or Real value."""

    __slots__ = ("value",)

    value: int | float

    def __init__(self, value: int | float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Number requires int or float, got {type(value).__name__}")
        if isinstance(value, int):
            value = wrap_int64(value)
        object.__setattr__(self, "value", value)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Number is immutable")

    @classmethod
    def integer(cls, value: int) -> Number:
        return cls(int(value))

    @classmethod
    def real(cls, value: float) -> Number:
        return cls(float(value))

    @property
    def is_real(self) -> bool:
        return isinstance(self.value, float)

    @property
    def is_integer(self) -> bool:
        return isinstance(self.value, int)

    def __bool__(self) -> bool:
        return self.value != 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Number):
            return NotImplemented
        return self.is_real == other.is_real and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.is_real, self.value))

    def __repr__(self) -> str:
        kind = "Real" if self.is_real else "Integer"
        return f"{kind}({self.value!r})"

    def to_source(self) -> str:
        """Render as text the tokenizer reads back to the same value."""
        if self.is_integer:
            text = str(abs(self.value))
        else:
            text = format(Decimal(repr(abs(self.value))), "f")
            if "." not in text:
                text += ".0"
        return f"(-{text})" if self.value < 0 else text

    # -- Operators --

    def negate(self) -> Number:
        return Number(-self.value)

    def add(self, other: Number) -> Number:
        return _arith(self, other, lambda a, b: a + b)

    def sub(self, other: Number) -> Number:
        return _arith(self, other, lambda a, b: a - b)

    def mul(self, other: Number) -> Number:
        return _arith(self, other, lambda a, b: a * b)

    def div(self, other: Number) -> Number:
        if other.value == 0:
            raise NumberError(ErrorKind.DIVIDE_BY_ZERO, "Division by zero")
        if self.is_integer and other.is_integer:
            return Number(_trunc_div(self.value, other.value))
        return Number(float(self.value) / float(other.value))

    def mod(self, other: Number) -> Number:
        a, b = _require_integers("%", self, other)
        if b == 0:
            raise NumberError(ErrorKind.DIVIDE_BY_ZERO, "Modulo by zero")
        remainder = abs(a) % abs(b)
        return Number(-remainder if a < 0 else remainder)

    def power(self, other: Number) -> Number:
        if self.is_integer and other.is_integer and other.value >= 0:
            return Number(pow(self.value, other.value, _MODULUS))
        if self.is_integer and other.is_integer and self.value == 0:
            raise NumberError(ErrorKind.DIVIDE_BY_ZERO, "Zero raised to a negative power")
        try:
            return Number(math.pow(float(self.value), float(other.value)))
        except ValueError as e:
            raise NumberError(ErrorKind.DOMAIN, f"Math domain error in '**': {e}") from e
        except OverflowError as e:
            raise NumberError(ErrorKind.DOMAIN, "Result of '**' out of range") from e

    def bit_and(self, other: Number) -> Number:
        a, b = _require_integers("&", self, other)
        return Number(a & b)

    def bit_or(self, other: Number) -> Number:
        a, b = _require_integers("|", self, other)
        return Number(a | b)

    def eq(self, other: Number) -> Number:
        return _compare(self, other, lambda a, b: a == b)

    def ne(self, other: Number) -> Number:
        return _compare(self, other, lambda a, b: a != b)

    def lt(self, other: Number) -> Number:
        return _compare(self, other, lambda a, b: a < b)

    def gt(self, other: Number) -> Number:
        return _compare(self, other, lambda a, b: a > b)

    def le(self, other: Number) -> Number:
        return _compare(self, other, lambda a, b: a <= b)

    def ge(self, other: Number) -> Number:
        return _compare(self, other, lambda a, b: a >= b)


TRUE = Number(1)
FALSE = Number(0)


def _promote(left: Number, right: Number) -> tuple[int | float, int | float]:
    if left.is_real or right.is_real:
        return float(left.value), float(right.value)
    return left.value, right.value


def _arith(
    left: Number, right: Number, fn: Callable[[int | float, int | float], int | float]
) -> Number:
    a, b = _promote(left, right)
    return Number(fn(a, b))


def _compare(left: Number, right: Number, fn: Callable[[int | float, int | float], bool]) -> Number:
    a, b = _promote(left, right)
    return TRUE if fn(a, b) else FALSE


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _require_integers(symbol: str, left: Number, right: Number) -> tuple[int, int]:
    if left.is_real or right.is_real:
        raise NumberError(
            ErrorKind.DOMAIN,
            f"Operator '{symbol}' requires integer operands",
        )
    return int(left.value), int(right.value)
