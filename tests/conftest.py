# tests/conftest.py
from __future__ import annotations

import pytest

from primefactors.runtime import APPLY, reset


@pytest.fixture(autouse=True)
def _isolated_runtime(tmp_path, monkeypatch):
    """Fresh runtime settings and a throwaway workspace for every test."""
    monkeypatch.setenv("PRIMEFACTORS_HOME", str(tmp_path / "workspace"))
    reset()
    yield
    reset()


@pytest.fixture
def apply_settings():
    """Install a settings dict into the runtime, e.g. {"WIRE": {"COUNT_WIDTH": 32}}."""
    return APPLY
