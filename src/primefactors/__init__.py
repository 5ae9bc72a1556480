from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("primefactors")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .context import U64_MAX, FactorList, PrimeFactor
from .errors import (
    BufferTooSmallError,
    CalculationAbortedError,
    InvalidInputError,
    PrimesError,
    Uint64OverflowError,
)
from .factorize import factorize, is_prime
from .runtime import APPLY, CFG
from .session import FactorizationSession, SieveSession

__all__ = [
    "APPLY",
    "CFG",
    "U64_MAX",
    "BufferTooSmallError",
    "CalculationAbortedError",
    "FactorList",
    "FactorizationSession",
    "InvalidInputError",
    "PrimeFactor",
    "PrimesError",
    "SieveSession",
    "Uint64OverflowError",
    "__version__",
    "factorize",
    "is_prime",
]
