"""Directory entry dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class EntryType(Enum):
    """Whether a directory holds regenerable artifacts or ordinary content."""

    NORMAL = "normal"
    TEMP = "temp"

    @property
    def label(self) -> str:
        """Record-serialization name, e.g. 'Temp'."""
        return self.value.capitalize()

    @classmethod
    def from_label(cls, label: str) -> EntryType:
        for member in cls:
            if member.label == label:
                return member
        raise ValueError(f"Unknown entry type: {label!r}")


@dataclass(frozen=True)
class ScanConfig:
    """What to scan and whether to keep only temporary directories."""

    root_path: Path
    temp_only: bool = False


@dataclass(slots=True)
class DirectoryEntry:
    """Space usage of a single directory.

    ``file_count``/``size_bytes`` cover files directly inside the directory,
    except for temporary directories where they cover the whole subtree.
    The ``cumulative_*`` fields include every descendant directory.
    """

    path: Path
    file_count: int = 0
    size_bytes: int = 0
    cumulative_file_count: int = 0
    cumulative_size_bytes: int = 0
    entry_type: EntryType = EntryType.NORMAL

    @property
    def is_temp(self) -> bool:
        return self.entry_type is EntryType.TEMP

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "file_count": self.file_count,
            "size_bytes": self.size_bytes,
            "cumulative_file_count": self.cumulative_file_count,
            "cumulative_size_bytes": self.cumulative_size_bytes,
            "entry_type": self.entry_type.label,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DirectoryEntry:
        """Build an entry from a record produced by :meth:`to_dict`.

        Raises KeyError for a missing field and ValueError/TypeError for a
        field of the wrong kind.
        """
        counts = {}
        for name in ("file_count", "size_bytes", "cumulative_file_count", "cumulative_size_bytes"):
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be an unsigned integer, got {value!r}")
            counts[name] = value
        path = data["path"]
        if not isinstance(path, str):
            raise TypeError(f"path must be a string, got {path!r}")
        return cls(path=Path(path), entry_type=EntryType.from_label(data["entry_type"]), **counts)
