"""Shared pytest fixtures for check_dir tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

# =============================================================================
# Directory Fixtures
# =============================================================================


def populate(directory: Path, files: int = 0, subdirs: int = 0) -> Path:
    """Create directory with the given number of files and subdirectories."""
    directory.mkdir(parents=True, exist_ok=True)
    for i in range(files):
        (directory / f"file_{i:03d}.txt").write_text("x")
    for i in range(subdirs):
        (directory / f"sub_{i:03d}").mkdir()
    return directory


@pytest.fixture
def make_dir(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating a populated directory under tmp_path.

    Usage:
        target = make_dir("spool", files=5, subdirs=1)
    """

    def _make(name: str, files: int = 0, subdirs: int = 0) -> Path:
        return populate(tmp_path / name, files=files, subdirs=subdirs)

    return _make


@pytest.fixture(autouse=True)
def clean_check_dir_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CHECK_DIR_* variables from the outer environment out of tests."""
    for key in list(os.environ):
        if key.startswith("CHECK_DIR_"):
            monkeypatch.delenv(key)
