# src/primefactors/cli.py

"""
Prime Factors - factorization, verification and sieving of 64-bit integers

Description:
    Factors an unsigned 64-bit integer by trial division, retrieves the
    factors through the two-call buffer protocol, optionally verifies a
    typed factor list against it, lists primes up to n, or dumps the flat
    binary layout of the factor list.

usage: see primefactors -h
"""

from __future__ import annotations

import argparse
import faulthandler
import sys
import textwrap
import time
import traceback
from importlib.resources import files as pkg_files
from typing import NamedTuple

from colorama import Fore, Style
from colorama import init as colorama_init

from primefactors import __version__ as _ver
from primefactors import config as CONFIG
from primefactors.api import check_prime_factors, count_width, get_prime_factors, get_primes
from primefactors.errors import PrimesError
from primefactors.fmt import format_factorization, format_hex, format_primes
from primefactors.progress import Progress
from primefactors.runtime import APPLY, CFG, debug, ensure_runtime_deps
from primefactors.runtime import current as _rt_current
from primefactors.session import FactorizationSession, SieveSession
from primefactors.utility import flatten_dotted, parse_factor_list, parse_int, typename
from primefactors.wire import ENTRY_SIZE, fill_binary
from primefactors.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USER_ERROR = 2
EXIT_CHECK_FAILED = 3
EXIT_ABORTED = 130

_COMMANDS = {"init", "where", "profiles", "active"}


# In memory session history
class HistoryItem(NamedTuple):
    n: int
    profile: str | None
    timestamp: float


_HISTORY: list[HistoryItem] = []


def add_to_history(n: int, profile: str | None = None) -> None:
    _HISTORY.append(HistoryItem(n=n, profile=profile, timestamp=time.time()))


def get_history() -> list[HistoryItem]:
    return list(_HISTORY)


def _install_loud_error_handlers(enabled: bool) -> None:
    if not enabled:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if msg.startswith("Invalid input:"):
        msg = msg.replace("Invalid input:", f"{Fore.RED}Invalid input:{Style.RESET_ALL}", 1)
    elif not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _resolve_inputs(items: list[str]) -> tuple[str | None, int | None]:
    """Return (profile_or_command, number) from the first two positionals.

    Rules:
      - one item: number if it parses, else profile/command
      - two items: first non-numeric is the profile, first numeric the number
    """
    if not items:
        return None, None
    if len(items) == 1:
        n = parse_int(items[0])
        return (None, n) if n is not None else (items[0], None)

    a, b = items[0], items[1]
    na, nb = parse_int(a), parse_int(b)
    if na is not None:
        return None, na
    return a, nb


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit profile argument
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _apply_profile(name: str) -> None:
    selected = CONFIG.load_settings(name)
    debug_flag = _rt_current().debug
    APPLY(selected)
    # --debug on the command line wins over the profile
    _rt_current().debug = _rt_current().debug or debug_flag

    debug(f"active profile: {selected.name}")
    if selected._source:
        debug(f"profile file: {selected._source}")
    flat = flatten_dotted(selected.as_dict())
    for k in sorted(flat, key=str.lower):
        v = CFG(k, None)
        debug(f"  {k:.<40} {v!r} ({typename(v)})")


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init        Create the workspace and copy the packaged profiles if missing.
      init overwrite
                  Replace the workspace profiles with the packaged ones.
      profiles    List the available profiles.
      active      Show the last used profile.
      where       Show the workspace and package paths.

    factor lists for --check:
      "2^3 × 3^2 × 5"   "2^3*3^2*5"   "2:3,3:2,5"
    """)

    p = argparse.ArgumentParser(
        prog="primefactors",
        description="Prime Factors — factorization and verification of 64-bit integers",
        usage=(
            "primefactors [[profile] [integer]] [--check FACTORS] [--sieve] [--wire]\n"
            "                    [--width {32,64}] [--quiet] [--debug]\n"
            "       primefactors -h | --help\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="[[profile] integer]]",
                   help="optional profile name followed by an integer to factor")
    p.add_argument("--check", metavar="FACTORS", default=None,
                   help="verify a factor list against the integer (exit 3 if it does not match)")
    p.add_argument("--sieve", action="store_true", help="list all primes up to the integer instead")
    p.add_argument("--wire", action="store_true", help="also print the binary layout of the factor list")
    p.add_argument("--width", type=int, choices=(32, 64), default=None,
                   help="count field width (default: WIRE.COUNT_WIDTH from the profile)")
    p.add_argument("--quiet", action="store_true", help="only print the result line, no progress")
    p.add_argument("--debug", action="store_true", help="show [debug] trace info and full tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except PrimesError as e:
        _print_user_error(str(e))
        return EXIT_USER_ERROR
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return EXIT_ABORTED
    except Exception as e:
        if "--debug" in (argv if argv is not None else sys.argv):
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return EXIT_ERROR


def _make_progress(label: str, quiet: bool) -> Progress:
    enabled = not quiet and bool(_rt_current().show_progress) and sys.stdout.isatty()
    return Progress(label, enabled=enabled)


def run_factorization(n: int, *, check: str | None, wire: bool, width: int | None, quiet: bool) -> int:
    """Factor n, print it, and optionally verify `check` / dump the wire layout."""
    w = count_width(width)
    candidate = parse_factor_list(check) if check is not None else None

    progress = _make_progress(f"factoring {n}", quiet)
    session = FactorizationSession(n, progress=progress)
    try:
        # two-call protocol: size query, then fill
        needed = get_prime_factors(session, 0, None, width=w)
        buf = [None] * needed
        get_prime_factors(session, needed, buf, width=w)
    finally:
        progress.done()

    print(f"{n} = {format_factorization(buf)}")
    if not quiet:
        print(f"  {Fore.YELLOW}Distinct primes:{Style.RESET_ALL} {needed}")
        print(f"  {Fore.YELLOW}Prime factors (with multiplicity):{Style.RESET_ALL} "
              f"{sum(f.exponent for f in buf)}")

    if wire:
        data = bytearray(needed * ENTRY_SIZE)
        fill_binary(session, needed, data, width=w)
        print(f"  {Fore.YELLOW}Wire ({len(data)} bytes, {CFG('WIRE.BYTE_ORDER', 'little')}-endian):{Style.RESET_ALL}")
        print(textwrap.indent(format_hex(bytes(data)), "    ") if data else "    (empty)")

    if candidate is None:
        return EXIT_OK

    ok = check_prime_factors(session, len(candidate), candidate, width=w)
    shown = format_factorization(candidate)
    if ok:
        print(f"Check {shown}: {Fore.GREEN}VALID{Style.RESET_ALL}")
        return EXIT_OK
    print(f"Check {shown}: {Fore.RED}INVALID{Style.RESET_ALL}")
    return EXIT_CHECK_FAILED


def run_sieve(n: int, *, width: int | None, quiet: bool) -> int:
    w = count_width(width)
    progress = _make_progress(f"sieving up to {n}", quiet)
    sieve = SieveSession(n, progress=progress)
    try:
        needed = get_primes(sieve, 0, None, width=w)
        buf = [0] * needed
        get_primes(sieve, needed, buf, width=w)
    finally:
        progress.done()

    print(f"{needed} primes ≤ {n}")
    if not quiet and buf:
        print(textwrap.fill(format_primes(buf), width=100, initial_indent="  ", subsequent_indent="  "))
    return EXIT_OK


def _run_command(cmd: str, items: list[str]) -> int:
    if cmd == "init":
        overwrite = len(items) > 1 and items[1] == "overwrite"
        ws, copied = seed_workspace(overwrite=overwrite)
        note = " (overwrote existing files)" if overwrite else ""
        print(f"Workspace ready at: {ws}{note}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return EXIT_OK
    if cmd == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('primefactors')}")
        return EXIT_OK
    if cmd == "profiles":
        for name, desc in CONFIG.list_profiles_with_descriptions():
            print(f"  {Fore.CYAN}{name:<16}{Style.RESET_ALL} {desc}")
        return EXIT_OK
    print(f"Active profile: {CONFIG.read_current_profile() or 'default'}")
    return EXIT_OK


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_args(argv)
    _rt_current().debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if not ensure_runtime_deps(strict=True):
        return EXIT_ERROR

    ensure_workspace_seeded()

    profile, n = _resolve_inputs(args.items)

    if profile in _COMMANDS:
        return _run_command(profile, args.items)

    if profile and not CONFIG.has_profile(profile):
        print(f"Unknown profile: '{profile}'", file=sys.stderr)
        names = [nm for nm, _ in CONFIG.list_profiles_with_descriptions()]
        print("Available profiles:", ", ".join(names), file=sys.stderr)
        return EXIT_USER_ERROR

    profile_name = _select_profile_name(profile)
    _apply_profile(profile_name)
    if profile:
        CONFIG.write_current_profile(profile_name)

    if n is not None:
        if args.sieve:
            return run_sieve(n, width=args.width, quiet=args.quiet)
        return run_factorization(n, check=args.check, wire=args.wire, width=args.width, quiet=args.quiet)

    if args.check is not None or args.sieve:
        parser.error("--check and --sieve need an integer")

    return _repl(profile_name, args)


def _repl(profile_name: str, args: argparse.Namespace) -> int:
    print(f"{Fore.YELLOW}{Style.BRIGHT}Prime Factors v{_ver}{Style.RESET_ALL}")

    current_profile = profile_name
    while True:
        try:
            prompt = f"\nProfile: {current_profile} — Enter an integer or profile (h=Help, q=Quit): "
            user_input = input(prompt).strip()
            low = user_input.lower()
            if low in {"", "q", "quit"}:
                break

            if low in {"h", "help"}:
                print("  <integer>            factor it (e.g. 360, 2^40, 1_000_003)")
                print("  <integer> = <list>   verify a factor list, e.g. 360 = 2^3 × 3^2 × 5")
                print("  sieve <integer>      primes up to the integer")
                print("  p                    list profiles;  <profile> switches profile")
                print("  hist                 history of this session")
                continue

            if low in {"p", "profiles"}:
                _run_command("profiles", [])
                continue

            if low in {"hist", "history"}:
                hist = get_history()
                if not hist:
                    print("History is empty.")
                for item in hist:
                    ts = time.strftime("%H:%M:%S", time.localtime(item.timestamp))
                    print(f"{ts}  n={item.n:<22}  profile={item.profile or '-'}")
                continue

            if low.startswith("sieve"):
                n = parse_int(user_input[5:])
                if n is None:
                    print("Usage: sieve <integer>")
                    continue
                run_sieve(n, width=args.width, quiet=args.quiet)
                continue

            number_part, _, check_part = user_input.partition("=")
            n = parse_int(number_part)
            if n is not None:
                check = check_part.strip() if check_part else None
                run_factorization(n, check=check, wire=args.wire, width=args.width, quiet=args.quiet)
                add_to_history(n, current_profile)
                continue

            if CONFIG.has_profile(user_input):
                _apply_profile(user_input)
                CONFIG.write_current_profile(user_input)
                current_profile = user_input
                print(f"Applied profile: {current_profile}")
                continue

            print(f"{Fore.RED}Invalid input: {Style.RESET_ALL}'{user_input}'. Type H for help.")
        except PrimesError as e:
            _print_user_error(str(e))
        except (EOFError, KeyboardInterrupt):
            print()
            break
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
