# src/primefactors/api.py
"""
Flat boundary operations.

These mirror the component library's exported functions: a caller owns
the buffers, passes an explicit capacity, and gets the needed count back.
Counts and capacities are 64-bit; width=32 is accepted for callers of the
older 32-bit signature and only narrows the range that is accepted.
"""

from __future__ import annotations

from collections.abc import MutableSequence, Sequence
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from primefactors.context import U32_MAX, U64_MAX, FactorList, PrimeFactor
from primefactors.errors import InvalidInputError
from primefactors.factorize import ProgressCallback, check_u64
from primefactors.factorize import factorize as _factorize
from primefactors.runtime import CFG
from primefactors.session import FactorizationSession, SieveSession

_WIDTH_MAX = {32: U32_MAX, 64: U64_MAX}
_VERSION_PARTS = 3


def count_width(width: int | None = None) -> int:
    """Resolve the count field width: explicit value, else WIRE.COUNT_WIDTH, else 64."""
    w = width if width is not None else CFG("WIRE.COUNT_WIDTH", 64)
    try:
        w = int(w)
    except (TypeError, ValueError):
        raise InvalidInputError(f"count width must be 32 or 64, got {w!r}") from None
    if w not in _WIDTH_MAX:
        raise InvalidInputError(f"count width must be 32 or 64, got {w}")
    return w


def check_count(value: int, width: int, label: str) -> int:
    v = check_u64(value, label)
    if v > _WIDTH_MAX[width]:
        raise InvalidInputError(f"{label} {v} does not fit a {width}-bit count field")
    return v


def get_version() -> tuple[int, int, int]:
    """(major, minor, micro) of the installed package; (0, 0, 0) when not installed."""
    try:
        raw = _pkg_version("primefactors")
    except PackageNotFoundError:
        return (0, 0, 0)
    nums: list[int] = []
    for part in raw.split(".")[:_VERSION_PARTS]:
        digits = "".join(ch for ch in part if ch.isdigit())
        nums.append(int(digits) if digits else 0)
    while len(nums) < _VERSION_PARTS:
        nums.append(0)
    return nums[0], nums[1], nums[2]


def factorize(n: int) -> FactorList:
    return _factorize(n)


def create_factorization_calculator(n: int, *, progress: ProgressCallback | None = None) -> FactorizationSession:
    return FactorizationSession(n, progress=progress)


def create_sieve_calculator(n: int, *, progress: ProgressCallback | None = None) -> SieveSession:
    return SieveSession(n, progress=progress)


def get_prime_factors(
    session: FactorizationSession,
    capacity: int,
    buffer: MutableSequence[PrimeFactor] | None = None,
    *,
    width: int | None = None,
) -> int:
    """
    Two-call sizing protocol. Call with capacity 0 to learn the needed
    count, allocate, then call again. Returns the needed count.
    """
    w = count_width(width)
    capacity = check_count(capacity, w, "capacity")
    return check_count(session.fill(capacity, buffer), w, "needed count")


def check_prime_factors(
    session: FactorizationSession,
    capacity: int,
    buffer: Sequence[PrimeFactor] | None,
    *,
    width: int | None = None,
) -> bool:
    """Verify the first `capacity` entries of buffer against the session value."""
    w = count_width(width)
    capacity = check_count(capacity, w, "capacity")
    if capacity == 0:
        return session.check_factors(())
    if buffer is None or capacity > len(buffer):
        raise InvalidInputError("capacity exceeds the supplied buffer")
    return session.check_factors(buffer[:capacity])


def get_primes(
    sieve: SieveSession,
    capacity: int,
    buffer: MutableSequence[int] | None = None,
    *,
    width: int | None = None,
) -> int:
    w = count_width(width)
    capacity = check_count(capacity, w, "capacity")
    return check_count(sieve.fill(capacity, buffer), w, "needed count")
