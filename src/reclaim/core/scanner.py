"""Directory tree scanner.

The scan runs in three passes:

1. Walk the whole tree once. Register every directory with its
   classification and add each file to its immediate parent, unless the
   file lives inside a temporary directory.
2. Re-walk each temporary directory and store the size of its entire
   subtree as that directory's own stats.
3. Roll the direct stats up into cumulative totals, deepest first.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from reclaim.core.aggregator import aggregate
from reclaim.core.classifier import classify
from reclaim.core.walker import WalkEntry, WalkIssue, subtree_totals, walk
from reclaim.models.entry import DirectoryEntry, EntryType, ScanConfig

if TYPE_CHECKING:
    from reclaim.core.progress import ScanProgress

log = logging.getLogger(__name__)


class ScanError(Exception):
    """Raised when a scan cannot be performed."""


class PathNotFoundError(ScanError):
    """Raised when the scan root does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Path not found: {path}")
        self.path = path


@dataclass(slots=True)
class _DirStats:
    entry_type: EntryType
    file_count: int = 0
    size_bytes: int = 0


class DirectoryScanner:
    """Scans one directory tree and keeps track of unreadable entries."""

    def __init__(self, config: ScanConfig, progress: ScanProgress | None = None) -> None:
        self.config = config
        self.root = Path(os.path.abspath(config.root_path))
        self.progress = progress
        self.issues: list[WalkIssue] = []
        self._stats: dict[Path, _DirStats] = {}
        self._temp_dirs: list[Path] = []
        # Whether a directory is, or sits below, a temporary directory.
        # The root counts too when its own name is temporary.
        self._within_temp: dict[Path, bool] = {}

    def run(self) -> list[DirectoryEntry]:
        """Scan the tree and return entries sorted by cumulative size, largest first.

        Raises:
            PathNotFoundError: If the root does not exist.
        """
        if not self.root.exists():
            raise PathNotFoundError(self.root)

        self.issues.clear()
        self._stats.clear()
        self._temp_dirs.clear()
        self._within_temp.clear()

        self._walk_tree()
        self._summarize_temp_dirs()
        entries = self._build_entries()

        if self.config.temp_only:
            entries = [e for e in entries if e.entry_type is EntryType.TEMP]
        entries.sort(key=lambda e: e.cumulative_size_bytes, reverse=True)

        log.info(
            "Scanned %s: %d directories (%d temporary), %d unreadable entries",
            self.root,
            len(self._stats),
            len(self._temp_dirs),
            len(self.issues),
        )
        return entries

    # ── pass 1 ───────────────────────────────────────────────────────────

    def _walk_tree(self) -> None:
        for item in walk(self.root):
            if isinstance(item, WalkIssue):
                log.info("Cannot access %s: %s", item.path, item.reason)
                self.issues.append(item)
            elif item.is_dir:
                self._register_directory(item.path)
            else:
                self._count_file(item)

    def _register_directory(self, path: Path) -> None:
        if path not in self._stats:
            entry_type = classify(path.name)
            self._stats[path] = _DirStats(entry_type)
            if entry_type is EntryType.TEMP:
                self._temp_dirs.append(path)

        self._within_temp[path] = (
            self._stats[path].entry_type is EntryType.TEMP
            or self._within_temp.get(path.parent, False)
        )

        if self.progress is not None:
            self.progress.record_directory(path)

    def _count_file(self, item: WalkEntry) -> None:
        if self.progress is not None:
            self.progress.record_file(item.path)

        parent = item.path.parent
        if self._within_temp.get(parent, False):
            return  # summed in pass 2

        stats = self._stats.get(parent)
        if stats is None:
            stats = self._stats[parent] = _DirStats(EntryType.NORMAL)
        stats.file_count += 1
        stats.size_bytes += item.size_bytes

    # ── pass 2 ───────────────────────────────────────────────────────────

    def _summarize_temp_dirs(self) -> None:
        for temp_dir in self._temp_dirs:
            file_count, size_bytes = subtree_totals(temp_dir, self.issues)
            stats = self._stats[temp_dir]
            stats.file_count = file_count
            stats.size_bytes = size_bytes
            log.debug("Temporary directory %s: %d files, %d bytes", temp_dir, file_count, size_bytes)

    # ── pass 3 ───────────────────────────────────────────────────────────

    def _build_entries(self) -> list[DirectoryEntry]:
        cumulative = aggregate({path: (s.file_count, s.size_bytes) for path, s in self._stats.items()})
        entries: list[DirectoryEntry] = []
        for path, stats in self._stats.items():
            cum_files, cum_size = cumulative[path]
            entries.append(
                DirectoryEntry(
                    path=path,
                    file_count=stats.file_count,
                    size_bytes=stats.size_bytes,
                    cumulative_file_count=cum_files,
                    cumulative_size_bytes=cum_size,
                    entry_type=stats.entry_type,
                )
            )
        return entries


def scan(config: ScanConfig, progress: ScanProgress | None = None) -> list[DirectoryEntry]:
    """Scan ``config.root_path`` and return one entry per directory.

    Per-entry access errors are skipped. The only failure is a missing
    root, signalled with :class:`PathNotFoundError` before any traversal.
    """
    return DirectoryScanner(config, progress).run()
