"""Reclaim data models."""

from reclaim.models.entry import DirectoryEntry, EntryType, ScanConfig
from reclaim.models.report import DeletionReport

__all__ = [
    "DeletionReport",
    "DirectoryEntry",
    "EntryType",
    "ScanConfig",
]
