# src/primefactors/context.py
from __future__ import annotations

from dataclasses import dataclass

U64_MAX = (1 << 64) - 1
U32_MAX = (1 << 32) - 1


@dataclass(frozen=True)
class PrimeFactor:
    base: int       # prime >= 2
    exponent: int   # >= 1

    def value(self) -> int:
        return self.base ** self.exponent

    def __str__(self) -> str:
        return f"{self.base}^{self.exponent}" if self.exponent > 1 else f"{self.base}"


# Ascending by base, one entry per distinct prime.
FactorList = tuple[PrimeFactor, ...]
