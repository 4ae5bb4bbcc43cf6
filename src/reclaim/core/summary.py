"""Ranked scan summary."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from reclaim.models.entry import DirectoryEntry

DEFAULT_TOP_COUNT = 20


@dataclass(slots=True)
class ScanSummary:
    """Headline numbers and the largest directories of a scan."""

    directory_count: int
    root_entry: DirectoryEntry | None
    temp_count: int
    temp_size_bytes: int
    top: list[DirectoryEntry] = field(default_factory=list)


def summarize(
    entries: list[DirectoryEntry],
    root_path: Path,
    top: int = DEFAULT_TOP_COUNT,
) -> ScanSummary:
    """Summarize entries that are already sorted largest first.

    ``root_entry`` is None when the root is absent from *entries*, e.g.
    after a temp-only filter or when a snapshot from elsewhere is loaded.
    """
    root = Path(os.path.abspath(root_path))
    root_entry = next((e for e in entries if e.path == root), None)
    temp = [e for e in entries if e.is_temp]
    return ScanSummary(
        directory_count=len(entries),
        root_entry=root_entry,
        temp_count=len(temp),
        temp_size_bytes=sum(e.cumulative_size_bytes for e in temp),
        top=entries[:max(top, 0)],
    )
