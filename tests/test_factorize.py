# tests/test_factorize.py
"""
Tests for the trial-division factorizer and the checked 64-bit arithmetic.

Run: pytest -v
"""

from __future__ import annotations

import random

import pytest
from sympy import factorint, isprime

from primefactors import U64_MAX, PrimeFactor, factorize
from primefactors.errors import (
    ERROR_INVALIDPARAM,
    ERROR_OVERFLOW,
    CalculationAbortedError,
    InvalidInputError,
    Uint64OverflowError,
)
from primefactors.factorize import check_u64, checked_pow, is_prime, product_of
from primefactors.progress import Progress

# ---------- helpers -----------------------------------------------------------


def _pairs(factors) -> list[tuple[int, int]]:
    return [(f.base, f.exponent) for f in factors]


def _assert_well_formed(n: int, factors) -> None:
    bases = [f.base for f in factors]
    assert bases == sorted(set(bases)), f"{n}: bases not strictly ascending: {bases}"
    assert all(isprime(b) for b in bases), f"{n}: composite base in {bases}"
    assert all(f.exponent >= 1 for f in factors)
    assert product_of(factors) == n


# ---------- concrete cases ----------------------------------------------------

TEST_CASES = [
    (1,     []),
    (2,     [(2, 1)]),
    (97,    [(97, 1)]),
    (360,   [(2, 3), (3, 2), (5, 1)]),
    (1024,  [(2, 10)]),
    (1001,  [(7, 1), (11, 1), (13, 1)]),
    (9699690, [(2, 1), (3, 1), (5, 1), (7, 1), (11, 1), (13, 1), (17, 1), (19, 1)]),
    (10007 * 10009, [(10007, 1), (10009, 1)]),
    (600851475143, [(71, 1), (839, 1), (1471, 1), (6857, 1)]),
    (2**63, [(2, 63)]),
    (U64_MAX, [(3, 1), (5, 1), (17, 1), (257, 1), (641, 1), (65537, 1), (6700417, 1)]),
]

TEST_IDS = [str(n) for n, _ in TEST_CASES]


@pytest.mark.parametrize("n,expected", TEST_CASES, ids=TEST_IDS)
def test_factorize_known_values(n, expected):
    got = factorize(n)
    assert isinstance(got, tuple)
    assert _pairs(got) == expected
    _assert_well_formed(n, got)


def test_factorize_one_is_empty():
    assert factorize(1) == ()


def test_prime_factor_str():
    assert str(PrimeFactor(2, 3)) == "2^3"
    assert str(PrimeFactor(5, 1)) == "5"
    assert PrimeFactor(3, 2).value() == 9


# ---------- properties --------------------------------------------------------


def test_factorize_matches_sympy_on_random_inputs():
    """Product, ordering and primality over a fixed random sample of [2, 10**12]."""
    rng = random.Random(360)
    sample = [rng.randint(2, 10**12) for _ in range(25)] + [10**12, 10**12 + 39, 999_999_999_989]
    for n in sample:
        got = factorize(n)
        _assert_well_formed(n, got)
        assert dict(_pairs(got)) == factorint(n), n


def test_factorize_small_range_exhaustive():
    for n in range(2, 5000):
        _assert_well_formed(n, factorize(n))


# ---------- errors ------------------------------------------------------------


def test_factorize_zero_is_invalid_input():
    with pytest.raises(InvalidInputError) as exc:
        factorize(0)
    assert exc.value.code == ERROR_INVALIDPARAM
    assert isinstance(exc.value, ValueError)


@pytest.mark.parametrize("bad", [-1, -360, 1.5, "360", True, None])
def test_factorize_rejects_values_outside_the_domain(bad):
    with pytest.raises(InvalidInputError):
        factorize(bad)


def test_factorize_above_u64_overflows():
    with pytest.raises(Uint64OverflowError) as exc:
        factorize(U64_MAX + 1)
    assert exc.value.code == ERROR_OVERFLOW
    assert isinstance(exc.value, OverflowError)


def test_check_u64_accepts_index_types():
    class Idx:
        def __index__(self):
            return 42

    assert check_u64(Idx()) == 42
    assert check_u64(U64_MAX) == U64_MAX


# ---------- checked arithmetic ------------------------------------------------

@pytest.mark.parametrize("base,exp,expected", [
    (2, 63, 2**63),
    (3, 40, 3**40),
    (7, 1, 7),
    (5, 0, 1),
    (U64_MAX, 1, U64_MAX),
])
def test_checked_pow_in_range(base, exp, expected):
    assert checked_pow(base, exp) == expected


@pytest.mark.parametrize("base,exp", [(2, 64), (3, 41), (2, 10**18), (U64_MAX, 2)])
def test_checked_pow_overflow(base, exp):
    with pytest.raises(Uint64OverflowError):
        checked_pow(base, exp)


def test_product_of_overflow():
    with pytest.raises(Uint64OverflowError):
        product_of([PrimeFactor(2, 40), PrimeFactor(3, 30)])


def test_is_prime():
    assert is_prime(97)
    assert is_prime(6700417)
    assert not is_prime(1)
    assert not is_prime(561)


# ---------- progress callback -------------------------------------------------

def test_progress_is_reported_and_ends_at_one(apply_settings):
    apply_settings({"FACTORING": {"PROGRESS_INTERVAL": 1}})
    seen: list[float] = []
    got = factorize(10007 * 10009, progress=lambda f: seen.append(f))
    assert _pairs(got) == [(10007, 1), (10009, 1)]
    assert len(seen) > 1
    assert all(0.0 <= f <= 1.0 for f in seen)
    assert seen[-1] == 1.0


def test_progress_interval_limits_calls(apply_settings):
    apply_settings({"FACTORING": {"PROGRESS_INTERVAL": 10**9}})
    seen: list[float] = []
    factorize(10007 * 10009, progress=seen.append)
    assert seen == [1.0]


def test_progress_abort_raises(apply_settings):
    apply_settings({"FACTORING": {"PROGRESS_INTERVAL": 1}})
    with pytest.raises(CalculationAbortedError):
        factorize(97, progress=lambda f: True)


def test_progress_bar_is_a_callback_that_never_aborts(apply_settings, capsys):
    apply_settings({"FACTORING": {"PROGRESS_INTERVAL": 1}})
    bar = Progress("factoring", enabled=True)
    assert factorize(10007 * 10009, progress=bar) == (PrimeFactor(10007, 1), PrimeFactor(10009, 1))
    bar.done()
    assert "factoring" in capsys.readouterr().out
