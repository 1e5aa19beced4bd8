"""
arithmetic.py - Checked Unsigned Fixed-Point Arithmetic

Python ints never wrap, so overflow has to be detected explicitly. Every
helper here raises ArithmeticOverflow when a result leaves [0, MAX_AMOUNT]
instead of silently producing a value the stored balances could not hold.

Division truncates toward zero (floor division on non-negative ints).
"""

from __future__ import annotations

from .core import MAX_AMOUNT, ArithmeticOverflow


def checked_add(a: int, b: int) -> int:
    result = a + b
    if result > MAX_AMOUNT:
        raise ArithmeticOverflow(f"addition overflow: {a} + {b}")
    return result


def checked_sub(a: int, b: int) -> int:
    if b > a:
        raise ArithmeticOverflow(f"subtraction underflow: {a} - {b}")
    return a - b


def checked_mul(a: int, b: int) -> int:
    result = a * b
    if result > MAX_AMOUNT:
        raise ArithmeticOverflow(f"multiplication overflow: {a} * {b}")
    return result


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    Compute a * b // denominator with the intermediate product range-checked.

    Args:
        a: First factor
        b: Second factor
        denominator: Positive divisor

    Returns:
        The truncated quotient

    Raises:
        ArithmeticOverflow: If a * b exceeds MAX_AMOUNT
        ZeroDivisionError: If denominator is zero
    """
    if denominator == 0:
        raise ZeroDivisionError("mul_div denominator is zero")
    return checked_mul(a, b) // denominator
