"""Operator table and arithmetic primitives.

Results follow IEEE-754 double semantics rather than Python's: division by
zero and out-of-domain powers give inf/nan instead of raising, so no
arithmetic outcome is ever reported as a syntax error.
"""

from __future__ import annotations

import math
import operator
from typing import Callable

ADDITIVE = frozenset("+-")
MULTIPLICATIVE = frozenset("*/")
POWER = "^"
OPERATORS = frozenset("+-*/^")

# Precedence classes, higher binds tighter. Left-to-right within a class,
# including "^": 2 ^ 3 ^ 2 == (2 ^ 3) ^ 2.
_PRECEDENCE: dict[str, int] = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
    "^": 3,
}


def precedence(op: str) -> int:
    """Precedence class of an operator; 0 for anything else."""
    return _PRECEDENCE.get(op, 0)


def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x) and int(x) % 2 == 1


def divide(a: float, b: float) -> float:
    """a / b with x/0 -> ±inf and 0/0 -> nan."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def power(a: float, b: float) -> float:
    """Real exponentiation with C pow() special values.

    math.pow already follows C99 for infinities and nan inputs; the
    exceptions it raises are mapped back to the values pow() returns.
    """
    try:
        return math.pow(a, b)
    except OverflowError:
        if a < 0 and _is_odd_integer(b):
            return -math.inf
        return math.inf
    except ValueError:
        if a == 0:
            # 0 ^ negative is a pole
            return math.copysign(math.inf, a) if _is_odd_integer(b) else math.inf
        # negative base, non-integer exponent
        return math.nan


_PRIMITIVES: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": divide,
    "^": power,
}


def apply(op: str, a: float, b: float) -> float:
    """Apply a binary operator symbol to two operands."""
    try:
        fn = _PRIMITIVES[op]
    except KeyError:
        raise ValueError(f"Unexpected operator {op!r}") from None
    return fn(a, b)
