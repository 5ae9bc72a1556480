# src/primefactors/wire.py
"""
Flat binary layout for PrimeFactor arrays.

Each entry is two unsigned 64-bit integers, {base, exponent}, with no
padding and no header. Byte order comes from WIRE.BYTE_ORDER (default
little-endian) unless given explicitly.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable
from functools import lru_cache

from primefactors.api import check_count, count_width
from primefactors.context import PrimeFactor
from primefactors.errors import BufferTooSmallError, InvalidInputError
from primefactors.factorize import check_u64
from primefactors.runtime import CFG
from primefactors.session import FactorizationSession

ENTRY_SIZE = 16

_ORDER_PREFIX = {"little": "<", "big": ">"}


@lru_cache(maxsize=2)
def _entry_struct(byte_order: str) -> struct.Struct:
    return struct.Struct(_ORDER_PREFIX[byte_order] + "QQ")


def _resolve_order(byte_order: str | None) -> struct.Struct:
    order = str(byte_order or CFG("WIRE.BYTE_ORDER", "little")).lower()
    if order not in _ORDER_PREFIX:
        raise InvalidInputError(f"byte order must be 'little' or 'big', got {order!r}")
    return _entry_struct(order)


def pack_factors(factors: Iterable[PrimeFactor], *, byte_order: str | None = None) -> bytes:
    st = _resolve_order(byte_order)
    out = bytearray()
    for f in factors:
        out += st.pack(check_u64(f.base, "base"), check_u64(f.exponent, "exponent"))
    return bytes(out)


def unpack_factors(data: bytes | bytearray | memoryview, *, byte_order: str | None = None) -> list[PrimeFactor]:
    st = _resolve_order(byte_order)
    if len(data) % ENTRY_SIZE:
        raise InvalidInputError(f"binary factor data must be a multiple of {ENTRY_SIZE} bytes, got {len(data)}")
    return [PrimeFactor(base, exp) for base, exp in st.iter_unpack(data)]


def fill_binary(
    session: FactorizationSession,
    capacity: int,
    buffer: bytearray | memoryview | None,
    *,
    width: int | None = None,
    byte_order: str | None = None,
) -> int:
    """
    Binary flavour of get_prime_factors(): `capacity` counts entries, and
    the buffer must hold at least capacity * ENTRY_SIZE writable bytes.
    Same all-or-nothing rules and count width; bytes past the written
    entries are untouched.
    """
    st = _resolve_order(byte_order)
    w = count_width(width)
    capacity = check_count(capacity, w, "capacity")
    needed = check_count(session.query_count(), w, "needed count")
    if capacity == 0:
        return needed
    if buffer is None:
        raise InvalidInputError("a buffer is required when capacity is non-zero")

    view = memoryview(buffer)
    if view.readonly:
        raise InvalidInputError("buffer is read-only")
    view = view.cast("B")
    if capacity * ENTRY_SIZE > view.nbytes:
        raise InvalidInputError(f"capacity {capacity} exceeds the buffer size of {view.nbytes // ENTRY_SIZE} entries")
    if capacity < needed:
        raise BufferTooSmallError(capacity, needed)

    for i, f in enumerate(session.factors):
        st.pack_into(view, i * ENTRY_SIZE, f.base, f.exponent)
    return needed
