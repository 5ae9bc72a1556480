# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import re

from primefactors.context import PrimeFactor
from primefactors.errors import UserInputError

_THIN_SPACES = ("\u2009", "\u202f", "\u00a0")
_GROUPED_RE = re.compile(r"[+-]?\d{1,3}(?:[ ,]\d{3})+")
_POWER_RE = re.compile(r"([+-]?\d[\d_]*)\s*(?:\^|\*\*)\s*(\d[\d_]*)")
_FACTOR_RE = re.compile(r"(\d[\d_]*)(?:[\^:](\d[\d_]*))?")

# Largest result bit length a typed power may produce before we refuse it
_MAX_POWER_BITS = 256


def _parse_int_literal(text: str) -> int | None:
    """Accepts: 42  -7  1_000_000  0xFF  0b1010  1,000,000  1 000 000
       Rejects: 3.14  1,23  12.34.56  0xG1"""
    s = text.strip()
    if not s:
        return None

    for ch in _THIN_SPACES:
        s = s.replace(ch, " ")

    if s.lower().startswith(("0x", "0b", "0o")):
        try:
            return int(s.replace("_", ""), 0)
        except ValueError:
            return None

    if re.fullmatch(r"[+-]?\d[\d_]*", s):
        try:
            return int(s.replace("_", ""))
        except ValueError:
            return None

    if _GROUPED_RE.fullmatch(s):
        return int(re.sub(r"[ ,]", "", s))

    return None


def parse_int(text: str | None) -> int | None:
    """
    Parse a typed integer: a literal (see _parse_int_literal) or a power
    a^b / a**b. Returns None when the text is not a number at all (so the
    caller can treat it as a command or profile name).
    """
    if text is None:
        return None
    n = _parse_int_literal(text)
    if n is not None:
        return n

    m = _POWER_RE.fullmatch(text.strip())
    if not m:
        return None
    base = int(m.group(1).replace("_", ""))
    exp = int(m.group(2).replace("_", ""))
    if abs(base) > 1 and abs(base).bit_length() * exp > _MAX_POWER_BITS:
        raise UserInputError(f"Invalid input: {text.strip()} is far outside the 64-bit range.")
    return base ** exp


def parse_factor_list(text: str) -> list[PrimeFactor]:
    """
    Parse a factor list typed by a user. Accepted spellings:

    >>> [str(f) for f in parse_factor_list("2^3 × 3^2 × 5")]
    ['2^3', '3^2', '5']
    >>> [str(f) for f in parse_factor_list("2:3, 3:2, 5")]
    ['2^3', '3^2', '5']

    '*', 'x' and '·' also separate entries; '**' is read as '^'.
    An empty string is the empty list.
    """
    s = text.replace("**", "^")
    s = re.sub(r"\s*([\^:])\s*", r"\1", s)
    for sep in "×·*,;xX":
        s = s.replace(sep, " ")

    factors: list[PrimeFactor] = []
    for tok in s.split():
        m = _FACTOR_RE.fullmatch(tok)
        if not m:
            raise UserInputError(f"Invalid input: cannot read factor {tok!r} (expected p or p^e).")
        base = int(m.group(1).replace("_", ""))
        exp = int(m.group(2).replace("_", "")) if m.group(2) else 1
        factors.append(PrimeFactor(base, exp))
    return factors


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out
