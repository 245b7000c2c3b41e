# Author      : Tyson Limato
# Date        : 2025-7-5
# File Name   : verifier.py
import time
import warnings
from dataclasses import dataclass

import gmpy2
from gmpy2 import mpz, mpq

from errors import VerificationMismatch
from exact_arith import ReductionMode, range_product

UINT64_MAX = 2**64 - 1

# below this n the factorial fits an unsigned 64-bit word (20! < 2**64)
FIXED_WIDTH_LIMIT = 21
# below this n the factorial is recomputed sequentially
SEQUENTIAL_LIMIT = 50


@dataclass(frozen=True)
class VerificationOutcome:
    ok: bool
    method: str
    expected: object
    elapsed: float

    @property
    def label(self) -> str:
        return "OK" if self.ok else "WRONG"


def fixed_width_factorial(n: int) -> int:
    """
    n! in unsigned 64-bit arithmetic, computed iteratively.

    Raises OverflowError as soon as a multiplication would leave the
    64-bit range.
    """
    acc = 1
    for i in range(2, n + 1):
        if acc > UINT64_MAX // i:
            raise OverflowError(f"{n}! does not fit in 64 bits")
        acc *= i
    return acc


def closed_form_sum(n: int) -> mpq:
    """n(n+1)/2, halving whichever factor is even before multiplying."""
    if n % 2:
        return mpq(mpz((n + 1) // 2) * n)
    return mpq(mpz(n // 2) * (n + 1))


def expected_value(mode: ReductionMode, n: int):
    """Return (expected value, name of the method used)."""
    if mode is ReductionMode.SUM:
        return closed_form_sum(n), "closed form"
    if n < FIXED_WIDTH_LIMIT:
        return mpq(fixed_width_factorial(n)), "fixed-width factorial"
    if n < SEQUENTIAL_LIMIT:
        return range_product(1, n), "sequential product"
    return mpq(gmpy2.fac(n)), "gmpy2.fac"


def verify(mode: ReductionMode, n: int, result) -> VerificationOutcome:
    """
    Compare `result` against an independently computed value for [1..n].

    Never raises on a mismatch: the outcome is returned with ok=False and a
    VerificationMismatch warning is issued.
    """
    start = time.time()
    expected, method = expected_value(mode, n)
    elapsed = time.time() - start

    ok = (mpq(result) == expected)
    if not ok:
        warnings.warn(
            f"{mode.value} over [1..{n}] disagrees with {method}",
            VerificationMismatch, stacklevel=2)
    return VerificationOutcome(ok=ok, method=method, expected=expected, elapsed=elapsed)
