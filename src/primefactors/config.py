from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomllib as toml

from primefactors.errors import UserInputError
from primefactors.workspace import ensure_workspace_seeded, workspace_dir

_WIDTHS = (32, 64)
_BYTE_ORDERS = ("little", "big")


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [PROFILE] section).
    .as_dict() feeds runtime.apply().

      - name:        resolved profile name (file stem if not given in [PROFILE])
      - description: one-line description from [PROFILE] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return _profiles_dir() / f"{name}.toml"


# --- I/O -------------------------------------------------------------------

def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except (OSError, toml.TOMLDecodeError) as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [PROFILE] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get("PROFILE") or {}
    data = {k: v for k, v in raw.items() if k != "PROFILE"}
    name = str(meta.get("name") or fallback_name)
    description = " ".join(str(meta.get("description") or "").split()) or "(no description)"
    return data, name, description


def _validate(data: dict[str, Any], path: Path) -> None:
    wire = data.get("WIRE") or {}
    width = wire.get("COUNT_WIDTH", 64)
    if width not in _WIDTHS:
        raise UserInputError(f"{path.name}: WIRE.COUNT_WIDTH must be 32 or 64, got {width!r}.")
    order = wire.get("BYTE_ORDER", "little")
    if order not in _BYTE_ORDERS:
        raise UserInputError(f"{path.name}: WIRE.BYTE_ORDER must be 'little' or 'big', got {order!r}.")
    interval = (data.get("FACTORING") or {}).get("PROGRESS_INTERVAL", 1)
    if not isinstance(interval, int) or isinstance(interval, bool) or interval < 1:
        raise UserInputError(f"{path.name}: FACTORING.PROGRESS_INTERVAL must be a positive integer.")
    max_value = (data.get("SIEVE") or {}).get("MAX_VALUE", 1)
    if not isinstance(max_value, int) or isinstance(max_value, bool) or max_value < 1:
        raise UserInputError(f"{path.name}: SIEVE.MAX_VALUE must be a positive integer, got {max_value!r}.")
    behaviour = data.get("BEHAVIOUR") or {}
    for key in ("DEBUG", "SHOW_PROGRESS"):
        if not isinstance(behaviour.get(key, False), bool):
            raise UserInputError(f"{path.name}: BEHAVIOUR.{key} must be true or false, got {behaviour[key]!r}.")


# --- Public API ------------------------------------------------------------

def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """
    Return [(name, description), ...] for all profiles.
    Unreadable profiles are listed by file name.
    """
    ensure_workspace_seeded()
    items: list[tuple[str, str]] = []
    for p in _profiles_dir().glob("*.toml"):
        try:
            _, nm, desc = _split_profile_data(_load_toml(p), p.stem)
        except UserInputError:
            nm, desc = p.stem, "(unreadable)"
        items.append((nm, desc))
    return sorted(items, key=lambda t: t[0].lower())


def has_profile(name: str) -> bool:
    return _profile_path(name).exists()


def load_settings(name: str | None) -> Settings:
    """
    Load a profile by name (default 'default'), strip the [PROFILE] metadata,
    validate the known keys and return Settings.
    """
    if not name:
        name = "default"

    path = _profile_path(name)
    if not path.exists():
        raise UserInputError(f"Profile '{name}' not found at {path}")

    raw = _load_toml(path)
    data, resolved_name, description = _split_profile_data(raw, path.stem)
    _validate(data, path)

    return Settings(
        data=data,
        name=resolved_name,
        description=description,
        _source=path,
    )


def _current_profile_path() -> Path:
    p = _profiles_dir()
    p.mkdir(parents=True, exist_ok=True)
    return p / ".current"


def read_current_profile() -> str | None:
    try:
        s = _current_profile_path().read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return s[:-5] if s.lower().endswith(".toml") else (s or None)


def write_current_profile(name: str) -> None:
    nm = (name or "").strip()
    if nm.lower().endswith(".toml"):
        nm = nm[:-5]
    _current_profile_path().write_text(nm, encoding="utf-8")
