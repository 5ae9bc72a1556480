# -----------------------------------------------------------------------------
#  factorize.py
#  Trial-division factorizer and checked 64-bit arithmetic
# -----------------------------------------------------------------------------

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable
from functools import lru_cache
from math import isqrt

import gmpy2
from sympy import isprime

from primefactors.context import U64_MAX, FactorList, PrimeFactor
from primefactors.errors import CalculationAbortedError, InvalidInputError, Uint64OverflowError
from primefactors.runtime import CFG

# progress(fraction) -> truthy to abort
ProgressCallback = Callable[[float], "bool | None"]

_U64_BITS = 64


def check_u64(value: object, label: str = "value") -> int:
    """
    Coerce value to a Python int inside the unsigned 64-bit domain.
    Negative or non-integral values are invalid input; values above
    2**64 - 1 overflow.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{label} must be an integer, not bool")
    try:
        v = operator.index(value)
    except TypeError:
        raise InvalidInputError(f"{label} must be an integer, got {type(value).__name__}") from None
    if v < 0:
        raise InvalidInputError(f"{label} must be non-negative, got {v}")
    if v > U64_MAX:
        raise Uint64OverflowError(f"{label} {v} exceeds the unsigned 64-bit range")
    return v


@lru_cache(maxsize=1024)
def is_prime(n: int) -> bool:
    """Process-wide cache for primality (SymPy isprime is deterministic below 2**64)."""
    return bool(isprime(int(n)))


def report_progress(progress: ProgressCallback | None, fraction: float) -> None:
    """Call the progress callback, raising CalculationAbortedError if it asks to stop."""
    if progress is None:
        return
    if progress(min(max(fraction, 0.0), 1.0)):
        raise CalculationAbortedError("calculation aborted by progress callback")


def factorize(n: int, *, progress: ProgressCallback | None = None) -> FactorList:
    """
    Prime factorization of n by trial division.

    Divides out 2, then odd candidates up to isqrt(remaining); whatever is
    left above 1 is prime. Factors come out strictly ascending by base.

    >>> [str(f) for f in factorize(360)]
    ['2^3', '3^2', '5']
    >>> factorize(1)
    ()
    """
    n = check_u64(n, "n")
    if n == 0:
        raise InvalidInputError("0 has no prime factorization")

    factors: list[PrimeFactor] = []
    remaining = n

    e = 0
    while remaining & 1 == 0:
        remaining >>= 1
        e += 1
    if e:
        factors.append(PrimeFactor(2, e))

    interval = max(1, int(CFG("FACTORING.PROGRESS_INTERVAL", 65_536)))
    bound = isqrt(remaining)
    p = 3
    steps = 0
    while p <= bound:
        if remaining % p == 0:
            e = 0
            while remaining % p == 0:
                remaining //= p
                e += 1
            factors.append(PrimeFactor(p, e))
            bound = isqrt(remaining)
        p += 2
        steps += 1
        if progress is not None and steps % interval == 0:
            report_progress(progress, p / bound if bound else 1.0)

    if remaining > 1:
        factors.append(PrimeFactor(remaining, 1))

    report_progress(progress, 1.0)
    return tuple(factors)


def checked_pow(base: int, exponent: int) -> int:
    """base**exponent, raising Uint64OverflowError outside the 64-bit domain."""
    if base < 2 or exponent == 0:
        return 1 if exponent == 0 else base
    # 2**64 already overflows, so larger exponents never need evaluating
    if exponent >= _U64_BITS:
        raise Uint64OverflowError(f"{base}^{exponent} exceeds the unsigned 64-bit range")
    term = gmpy2.mpz(base) ** exponent
    if term > U64_MAX:
        raise Uint64OverflowError(f"{base}^{exponent} exceeds the unsigned 64-bit range")
    return int(term)


def product_of(factors: Iterable[PrimeFactor]) -> int:
    """Product of base**exponent over factors, with 64-bit overflow detection."""
    acc = gmpy2.mpz(1)
    for f in factors:
        acc *= checked_pow(f.base, f.exponent)
        if acc > U64_MAX:
            raise Uint64OverflowError("product of factors exceeds the unsigned 64-bit range")
    return int(acc)
