"""Multi-select model behind the interactive clean prompt."""

from __future__ import annotations

from pathlib import Path

from reclaim.models.entry import DirectoryEntry

MIN_SIZE_BYTES = 1024 * 1024  # 1 MB


class SelectionSession:
    """Tracks which of the candidate directories the user picked.

    Only entries at or above *min_size_bytes* (cumulative) are candidates,
    listed largest first. Indices are zero-based positions in
    :attr:`entries`; out-of-range indices are ignored.
    """

    def __init__(self, entries: list[DirectoryEntry], min_size_bytes: int = MIN_SIZE_BYTES) -> None:
        candidates = [e for e in entries if e.cumulative_size_bytes >= min_size_bytes]
        candidates.sort(key=lambda e: e.cumulative_size_bytes, reverse=True)
        self.entries = candidates
        self.min_size_bytes = min_size_bytes
        self._selected: set[int] = set()

    def __len__(self) -> int:
        return len(self.entries)

    def toggle(self, index: int) -> None:
        if not 0 <= index < len(self.entries):
            return
        if index in self._selected:
            self._selected.remove(index)
        else:
            self._selected.add(index)

    def select_all(self) -> None:
        self._selected = set(range(len(self.entries)))

    def clear(self) -> None:
        self._selected.clear()

    def is_selected(self, index: int) -> bool:
        return index in self._selected

    @property
    def selected_count(self) -> int:
        return len(self._selected)

    def selected_paths(self) -> list[Path]:
        """Selected paths in list order."""
        return [e.path for i, e in enumerate(self.entries) if i in self._selected]

    @property
    def selected_size_bytes(self) -> int:
        return sum(e.cumulative_size_bytes for i, e in enumerate(self.entries) if i in self._selected)

    @property
    def total_size_bytes(self) -> int:
        return sum(e.cumulative_size_bytes for e in self.entries)


def parse_selection(raw: str, count: int) -> list[int]:
    """Turn '1,3,5-7' into zero-based indices, dropping anything out of range."""
    indices: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        start, sep, end = part.partition("-")
        if sep:
            if not (start.strip().isdecimal() and end.strip().isdecimal()):
                continue
            first, last = int(start), int(end)
            if first > last:
                first, last = last, first
        elif part.isdecimal():
            first = last = int(part)
        else:
            continue
        for number in range(max(first, 1), min(last, count) + 1):
            if number - 1 not in indices:
                indices.append(number - 1)
    return indices
