# Author      : Tyson Limato
# Date        : 2025-7-2
# File Name   : exact_arith.py
from enum import Enum

from gmpy2 import mpz, mpq


def _check_bounds(m: int, n: int):
    if m < 0 or n < 0:
        raise ValueError(f"range bounds must be unsigned, got [{m}, {n}]")


# ------------------ Range Reductions ------------------
def range_sum(m: int, n: int) -> mpq:
    """
    Exact m + (m+1) + ... + n, accumulated left to right starting at 0.

    An empty range (m > n) gives 0.
    """
    _check_bounds(m, n)
    p = mpz(0)
    for i in range(m, n + 1):
        p += i
    return mpq(p)


def range_product(m: int, n: int) -> mpq:
    """
    Exact m * (m+1) * ... * n, accumulated left to right starting at 1.

    An empty range (m > n) gives 1, so range_product(1, 0) == 0! == 1.
    """
    _check_bounds(m, n)
    p = mpz(1)
    for i in range(m, n + 1):
        p *= i
    return mpq(p)


def factorial(n: int) -> mpq:
    return range_product(1, n)


def power(base: int, exponent: int) -> mpq:
    """Exact base ** exponent."""
    _check_bounds(base, exponent)
    return mpq(mpz(base) ** exponent)


# ------------------ Reduction Modes ------------------
class ReductionMode(Enum):
    """
    The two supported reductions.

    SUM uses identity 0 and +, PRODUCT (factorial) uses identity 1 and *.
    Both operators are associative and commutative, so partial results can
    be combined in whatever order they arrive.
    """
    SUM = "sum"
    PRODUCT = "product"

    def identity(self) -> mpq:
        return mpq(0) if self is ReductionMode.SUM else mpq(1)

    def combine(self, acc: mpq, value: mpq) -> mpq:
        if self is ReductionMode.SUM:
            return acc + value
        return acc * value

    def reduce(self, first: int, last: int) -> mpq:
        if self is ReductionMode.SUM:
            return range_sum(first, last)
        return range_product(first, last)
