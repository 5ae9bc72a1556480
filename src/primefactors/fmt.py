# src/primefactors/fmt.py
from __future__ import annotations

from collections.abc import Iterable, Sequence

from primefactors.context import PrimeFactor


def format_factorization(factors: Iterable[PrimeFactor]) -> str:
    """
    Turn [PrimeFactor(2, 3), PrimeFactor(3, 1), ...] into: 2^3 × 3 × 5^2
    """
    parts = [str(f) for f in sorted(factors, key=lambda f: f.base)]
    return " × ".join(parts) if parts else "1"


def format_primes(primes: Sequence[int], *, limit: int = 40) -> str:
    """Comma list of primes, shortened to head ... tail past `limit` entries."""
    if len(primes) <= limit:
        return ", ".join(map(str, primes))
    half = max(1, limit // 2)
    head = ", ".join(map(str, primes[:half]))
    tail = ", ".join(map(str, primes[-half:]))
    return f"{head}, … ({len(primes) - 2 * half} more) …, {tail}"


def format_hex(data: bytes, *, width: int = 16) -> str:
    """Hex dump, `width` bytes per line."""
    lines = []
    for off in range(0, len(data), width):
        chunk = data[off:off + width]
        lines.append(f"{off:08x}  {chunk.hex(' ')}")
    return "\n".join(lines)


def format_duration(seconds: float) -> str:
    """ms if <1s; s with millis if <60s; else mm:ss.mmm (and hh:mm:ss.mmm if ≥1h)."""
    MAX_SECONDS = 60
    if seconds < 1:
        ms = round(seconds * 1000)
        return f"{ms} ms"
    if seconds < MAX_SECONDS:
        return f"{seconds:.3f} s"
    m, s = divmod(seconds, MAX_SECONDS)
    if m < MAX_SECONDS:
        return f"{int(m)}:{s:06.3f}"               # mm:ss.mmm
    h, m = divmod(int(m), MAX_SECONDS)
    return f"{h}:{m:02d}:{s:06.3f}"                # hh:mm:ss.mmm
