# src/primefactors/session.py
from __future__ import annotations

from collections.abc import Iterable, MutableSequence
from itertools import compress
from math import isqrt
from time import perf_counter
from typing import Any

from primefactors.context import FactorList, PrimeFactor
from primefactors.errors import BufferTooSmallError, InvalidInputError
from primefactors.factorize import (
    ProgressCallback,
    check_u64,
    factorize,
    is_prime,
    product_of,
    report_progress,
)
from primefactors.fmt import format_duration
from primefactors.runtime import CFG, debug


_PAIR = 2


class Calculator:
    """
    Shared part of the calculators: one read-only input value, a result that
    is computed on first use and cached for the lifetime of the object, and
    the two-call retrieval protocol over that result.

    Not safe for concurrent use; give each thread its own calculator.
    """

    def __init__(self, value: int, *, progress: ProgressCallback | None = None):
        self._value = check_u64(value, "value")
        self._progress = progress
        self._result: tuple[Any, ...] | None = None

    @property
    def value(self) -> int:
        return self._value

    @property
    def is_calculated(self) -> bool:
        return self._result is not None

    def set_progress_callback(self, callback: ProgressCallback | None) -> None:
        self._progress = callback

    def _compute(self) -> tuple[Any, ...]:
        raise NotImplementedError

    def calculate(self) -> None:
        """Run the calculation now. A no-op once the result is cached."""
        if self._result is not None:
            return
        t0 = perf_counter()
        result = self._compute()
        self._result = result
        debug(f"{type(self).__name__}({self._value}): {len(result)} entries "
              f"in {format_duration(perf_counter() - t0)}")

    def _entries(self) -> tuple[Any, ...]:
        self.calculate()
        return self._result  # type: ignore[return-value]

    def query_count(self) -> int:
        """Number of entries fill() will write."""
        return len(self._entries())

    def fill(self, capacity: int, buffer: MutableSequence[Any] | None = None) -> int:
        """
        Two-call sizing protocol.

        capacity == 0           -> nothing written, returns the needed count
        0 < capacity < needed   -> BufferTooSmallError, nothing written
        capacity >= needed      -> buffer[0:needed] written, returns needed;
                                   slots past needed are left as they were
        """
        capacity = check_u64(capacity, "capacity")
        entries = self._entries()
        needed = len(entries)

        if capacity == 0:
            return needed
        if buffer is None:
            raise InvalidInputError("a buffer is required when capacity is non-zero")
        if capacity > len(buffer):
            raise InvalidInputError(f"capacity {capacity} exceeds the buffer length {len(buffer)}")
        if capacity < needed:
            raise BufferTooSmallError(capacity, needed)

        for i, entry in enumerate(entries):
            buffer[i] = entry
        return needed

    def __repr__(self) -> str:
        state = "calculated" if self.is_calculated else "pending"
        return f"{type(self).__name__}(value={self._value}, {state})"


class FactorizationSession(Calculator):
    """Prime factorization of one value n >= 1, plus verification of candidate lists."""

    def __init__(self, value: int, *, progress: ProgressCallback | None = None):
        super().__init__(value, progress=progress)
        if self._value == 0:
            raise InvalidInputError("0 has no prime factorization")

    def _compute(self) -> FactorList:
        return factorize(self._value, progress=self._progress)

    @property
    def factors(self) -> FactorList:
        return self._entries()

    def check_factors(self, candidate: Iterable[PrimeFactor | tuple[int, int]]) -> bool:
        """
        True iff every base is prime, no base repeats and the product of
        base**exponent equals the session value. Order does not matter.

        Any mismatch is False. Only a product that leaves the 64-bit domain
        raises (Uint64OverflowError).
        """
        entries: list[PrimeFactor] = []
        seen: set[int] = set()
        for item in candidate:
            f = _as_factor(item)
            if f is None or f.base in seen:
                return False
            seen.add(f.base)
            entries.append(f)

        if not all(is_prime(f.base) for f in entries):
            return False
        return product_of(entries) == self._value


def _as_factor(item: object) -> PrimeFactor | None:
    """Normalize a candidate entry; None if it cannot be a prime factor."""
    if isinstance(item, PrimeFactor):
        base, exponent = item.base, item.exponent
    elif isinstance(item, (tuple, list)) and len(item) == _PAIR:
        base, exponent = item
    else:
        return None
    if not all(isinstance(x, int) and not isinstance(x, bool) for x in (base, exponent)):
        return None
    if base < 2 or exponent < 1:
        return None
    return item if isinstance(item, PrimeFactor) else PrimeFactor(base, exponent)


class SieveSession(Calculator):
    """All primes <= value (Sieve of Eratosthenes), through the same retrieval protocol."""

    def __init__(self, value: int, *, progress: ProgressCallback | None = None):
        super().__init__(value, progress=progress)
        limit = int(CFG("SIEVE.MAX_VALUE", 10**8))
        if self._value > limit:
            raise InvalidInputError(
                f"sieve value {self._value} exceeds SIEVE.MAX_VALUE ({limit})"
            )

    def _compute(self) -> tuple[int, ...]:
        n = self._value
        if n < 2:
            report_progress(self._progress, 1.0)
            return ()

        sieve = bytearray([1]) * (n + 1)
        sieve[0] = sieve[1] = 0
        root = isqrt(n)
        for p in range(2, root + 1):
            if sieve[p]:
                sieve[p * p::p] = bytes(len(range(p * p, n + 1, p)))
                if self._progress is not None:
                    report_progress(self._progress, p / root)

        report_progress(self._progress, 1.0)
        return tuple(compress(range(n + 1), sieve))

    @property
    def primes(self) -> tuple[int, ...]:
        return self._entries()
