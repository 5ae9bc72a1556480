# src/primefactors/errors.py
from __future__ import annotations

# Numeric codes follow the component library's error table.
ERROR_SUCCESS = 0
ERROR_INVALIDPARAM = 2
ERROR_BUFFERTOOSMALL = 4
ERROR_GENERICEXCEPTION = 5
ERROR_CALCULATIONABORTED = 10
ERROR_OVERFLOW = 11


class PrimesError(Exception):
    """Base class for every error raised by primefactors."""
    code = ERROR_GENERICEXCEPTION


class InvalidInputError(PrimesError, ValueError):
    """A value outside the domain of the operation (e.g. factorize(0))."""
    code = ERROR_INVALIDPARAM


class BufferTooSmallError(PrimesError):
    """Non-zero capacity smaller than the needed count. Nothing was written."""
    code = ERROR_BUFFERTOOSMALL

    def __init__(self, capacity: int, needed: int):
        super().__init__(f"buffer capacity {capacity} is smaller than the needed count {needed}")
        self.capacity = capacity
        self.needed = needed


class CalculationAbortedError(PrimesError):
    code = ERROR_CALCULATIONABORTED


class Uint64OverflowError(PrimesError, OverflowError):
    """Arithmetic would leave the unsigned 64-bit domain."""
    code = ERROR_OVERFLOW


class UserInputError(InvalidInputError):
    pass
