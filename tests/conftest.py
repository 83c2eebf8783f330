"""Shared pytest fixtures for primary-theme tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_fixture(fixtures_dir: Path) -> Callable[[str], dict[str, Any]]:
    """Return a loader for JSON fixtures by file name."""

    def _load(name: str) -> dict[str, Any]:
        return json.loads((fixtures_dir / name).read_text(encoding="utf-8"))

    return _load
