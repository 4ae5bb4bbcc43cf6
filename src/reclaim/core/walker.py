"""Filesystem walk that reports per-entry failures as values."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """A file or directory reached by the walk."""

    path: Path
    is_dir: bool
    size_bytes: int = 0


@dataclass(frozen=True, slots=True)
class WalkIssue:
    """An entry that could not be listed or read."""

    path: Path
    reason: str


WalkResult = WalkEntry | WalkIssue


def walk(root: Path) -> Iterator[WalkResult]:
    """Walk *root* depth-first, yielding each directory before its contents.

    The root is yielded first. Symbolic links below the root are neither
    followed nor reported. Failures never raise: they come back as
    :class:`WalkIssue` items and the walk carries on with the next entry.
    """
    try:
        st = os.stat(root)
    except OSError as e:
        yield WalkIssue(root, _reason(e))
        return

    if stat.S_ISREG(st.st_mode):
        yield WalkEntry(root, is_dir=False, size_bytes=st.st_size)
        return
    if not stat.S_ISDIR(st.st_mode):
        return

    yield WalkEntry(root, is_dir=True)
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        subdirs: list[Path] = []
        try:
            with os.scandir(current) as it:
                for entry in it:
                    path = Path(entry.path)
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            yield WalkEntry(path, is_dir=True)
                            subdirs.append(path)
                        elif entry.is_file(follow_symlinks=False):
                            size = entry.stat(follow_symlinks=False).st_size
                            yield WalkEntry(path, is_dir=False, size_bytes=size)
                    except OSError as e:
                        yield WalkIssue(path, _reason(e))
        except OSError as e:
            yield WalkIssue(current, _reason(e))
        stack.extend(reversed(subdirs))


def subtree_totals(path: Path, issues: list[WalkIssue] | None = None) -> tuple[int, int]:
    """Count and size every file strictly beneath *path*.

    Returns:
        (file_count, size_bytes) tuple. Unreadable entries contribute
        nothing; they are appended to *issues* when a list is given.
    """
    file_count = 0
    size_bytes = 0
    for item in walk(path):
        if isinstance(item, WalkIssue):
            log.debug("Skipping unreadable entry %s: %s", item.path, item.reason)
            if issues is not None:
                issues.append(item)
        elif not item.is_dir and item.path != path:
            file_count += 1
            size_bytes += item.size_bytes
    return file_count, size_bytes


def _reason(error: OSError) -> str:
    return error.strerror or str(error)
