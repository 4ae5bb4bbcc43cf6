"""Shared test fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from reclaim.settings import Settings


@pytest.fixture
def isolate_settings(tmp_path, monkeypatch):
    """Point the settings file at a temp directory and drop the cached instance."""
    config_home = tmp_path / "config"
    config_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setattr(Settings, "_instance", None)
    return config_home / "reclaim" / "settings.json"


@pytest.fixture
def make_tree(tmp_path):
    """Build a directory tree from a {relative_path: size_in_bytes} mapping.

    A value of None creates an empty directory instead of a file.
    """

    def _make(layout: dict[str, int | None], root: Path | None = None) -> Path:
        root = root or tmp_path / "root"
        root.mkdir(parents=True, exist_ok=True)
        for rel, size in layout.items():
            target = root / rel
            if size is None:
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(b"x" * size)
        return root

    return _make


@pytest.fixture
def non_utf8_tree(make_tree):
    """A root holding ``caf\\xe9/menu.txt``, a directory named with Latin-1 bytes.

    Returns (root, directory). Skips where the filesystem refuses such names.
    """
    root = make_tree({})
    directory = root / os.fsdecode(b"caf\xe9")
    try:
        directory.mkdir()
    except (OSError, UnicodeError):
        pytest.skip("filesystem rejects names that are not valid UTF-8")
    (directory / "menu.txt").write_bytes(b"x" * 3)
    return root, directory
