"""Small helpers for paths and human-readable output."""

from __future__ import annotations

import os
from pathlib import Path

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def bytes_to_human(size_bytes: int) -> str:
    """Format a byte count with binary units, e.g. 1536 -> '1.50 KB'."""
    sign = "-" if size_bytes < 0 else ""
    value = float(abs(size_bytes))
    if value < 1024:
        return f"{sign}{abs(size_bytes)} B"
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{sign}{value:.2f} {_SIZE_UNITS[unit]}"


def format_elapsed(seconds: float) -> str:
    """'250 ms', '4.2s' or '2m 5s'."""
    if seconds < 1:
        return f"{round(seconds * 1000)} ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}m {rest:.0f}s"


def shorten_path(path: str, width: int = 60) -> str:
    """Keep the tail of a long path, e.g. '...project/node_modules/react'."""
    if len(path) <= width:
        return path
    return "..." + path[len(path) - (width - 3):]


def display_path(path: Path | str) -> str:
    """Printable form of a path whose name may not be valid UTF-8.

    Undecodable bytes become U+FFFD, so the result can go to any UTF-8
    stream. Use the real path for anything that touches the filesystem.
    """
    return os.fsencode(path).decode("utf-8", "replace")
