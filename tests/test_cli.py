# tests/test_cli.py
"""
End-to-end tests of the command line entry point.

Run: pytest -v
"""

from __future__ import annotations

import pytest

from primefactors import config as CONFIG
from primefactors.cli import EXIT_CHECK_FAILED, EXIT_OK, EXIT_USER_ERROR, _apply_profile, _resolve_inputs, main
from primefactors.runtime import current
from primefactors.workspace import ensure_workspace_seeded


def test_factor_one_number(capsys):
    assert main(["360"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "360 = 2^3 × 3^2 × 5" in out
    assert "Distinct primes:" in out


def test_quiet_prints_only_the_result(capsys):
    assert main(["97", "--quiet"]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "97 = 97"


def test_factor_one(capsys):
    assert main(["1", "--quiet"]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "1 = 1"


def test_check_valid_and_invalid(capsys):
    assert main(["360", "--check", "2^3 × 3^2 × 5", "--quiet"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "VALID" in out and "INVALID" not in out

    assert main(["360", "--check", "2^2*3^2*5", "--quiet"]) == EXIT_CHECK_FAILED
    assert "INVALID" in capsys.readouterr().out


def test_check_overflow_is_a_user_error(capsys):
    assert main(["360", "--check", "2^40 × 3^30"]) == EXIT_USER_ERROR
    assert "64-bit" in capsys.readouterr().err


@pytest.mark.parametrize("argv,needle", [
    (["0"], "no prime factorization"),
    (["18446744073709551616"], "64-bit"),
    (["360", "--check", "2^x"], "cannot read factor"),
])
def test_errors_map_to_exit_code_2(capsys, argv, needle):
    assert main(argv) == EXIT_USER_ERROR
    assert needle in capsys.readouterr().err


def test_sieve(capsys):
    assert main(["100", "--sieve"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "25 primes ≤ 100" in out
    assert "97" in out


def test_wire_dump(capsys):
    assert main(["360", "--wire"]) == EXIT_OK
    out = capsys.readouterr().out
    assert "48 bytes" in out
    assert "02 00 00 00 00 00 00 00 03 00 00 00 00 00 00 00" in out


def test_explicit_profile_is_remembered(capsys):
    assert main(["legacy32", "360", "--quiet"]) == EXIT_OK
    assert CONFIG.read_current_profile() == "legacy32"
    assert main(["active"]) == EXIT_OK
    assert "legacy32" in capsys.readouterr().out


def test_unknown_profile(capsys):
    assert main(["nosuchprofile", "5"]) == EXIT_USER_ERROR
    err = capsys.readouterr().err
    assert "Unknown profile" in err
    assert "default" in err


@pytest.mark.parametrize("cmd", [["init"], ["init", "overwrite"], ["where"], ["profiles"]])
def test_commands(capsys, cmd):
    assert main(cmd) == EXIT_OK
    assert capsys.readouterr().out


def test_resolve_inputs():
    assert _resolve_inputs([]) == (None, None)
    assert _resolve_inputs(["360"]) == (None, 360)
    assert _resolve_inputs(["legacy32"]) == ("legacy32", None)
    assert _resolve_inputs(["legacy32", "2^10"]) == ("legacy32", 1024)
    assert _resolve_inputs(["12", "legacy32"]) == (None, 12)


def test_wire_dump_with_legacy_counts(capsys):
    assert main(["legacy32", "360", "--wire"]) == EXIT_OK
    assert "48 bytes" in capsys.readouterr().out


def test_profile_with_bad_sieve_bound_is_a_user_error(capsys):
    root, _ = ensure_workspace_seeded()
    (root / "profiles" / "bad.toml").write_text('[SIEVE]\nMAX_VALUE = "lots"\n', encoding="utf-8")
    assert main(["bad", "100", "--sieve"]) == EXIT_USER_ERROR
    assert "SIEVE.MAX_VALUE" in capsys.readouterr().err


def test_debug_lines_describe_the_applied_profile(capsys):
    ensure_workspace_seeded()
    current().debug = True
    _apply_profile("legacy32")
    err = capsys.readouterr().err
    assert "[debug]" in err
    assert "active profile: legacy32" in err
    assert "WIRE.COUNT_WIDTH" in err

    current().debug = False
    _apply_profile("default")
    assert capsys.readouterr().err == ""


def test_interactive_loop(capsys, monkeypatch):
    answers = iter([
        "sieve 30",
        "360 = 2^3 × 3^2 × 5",
        "hist",
        "nonsense",
        "legacy32",
        "q",
    ])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    assert main([]) == EXIT_OK
    out = capsys.readouterr().out
    assert "10 primes ≤ 30" in out
    assert "360 = 2^3 × 3^2 × 5" in out
    assert "VALID" in out
    assert "n=360" in out
    assert "Invalid input" in out
    assert "Applied profile: legacy32" in out
    assert CONFIG.read_current_profile() == "legacy32"


def test_interactive_loop_ends_on_eof(capsys, monkeypatch):
    def _eof(prompt=""):
        raise EOFError
    monkeypatch.setattr("builtins.input", _eof)
    assert main(["legacy32"]) == EXIT_OK
    assert "Prime Factors v" in capsys.readouterr().out
