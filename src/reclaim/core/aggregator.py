"""Bottom-up roll-up of direct directory stats into subtree totals."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping

Stats = tuple[int, int]  # (file_count, size_bytes)


def build_children_index(paths: Iterable[Path]) -> dict[Path, list[Path]]:
    """Map each path to the known paths whose immediate parent it is."""
    known = set(paths)
    children: dict[Path, list[Path]] = {}
    for path in known:
        parent = path.parent
        if parent != path and parent in known:
            children.setdefault(parent, []).append(path)
    return children


def aggregate(direct: Mapping[Path, Stats]) -> dict[Path, Stats]:
    """Compute cumulative (file_count, size_bytes) for every directory.

    A directory's cumulative total is its own direct stats plus the
    cumulative totals of its immediate children. Directories are processed
    deepest first so every child is final before its parent reads it.
    """
    children = build_children_index(direct)
    cumulative: dict[Path, Stats] = {}
    for path in sorted(direct, key=lambda p: len(p.parts), reverse=True):
        file_count, size_bytes = direct[path]
        for child in children.get(path, ()):
            child_files, child_size = cumulative[child]
            file_count += child_files
            size_bytes += child_size
        cumulative[path] = (file_count, size_bytes)
    return cumulative
