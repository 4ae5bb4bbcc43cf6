"""CSV and JSON snapshots of scan results."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable

from reclaim.models.entry import DirectoryEntry, EntryType

log = logging.getLogger(__name__)

CSV_COLUMNS = ("path", "files", "size_bytes", "cumulative_files", "cumulative_size_bytes", "type")
LEGACY_CSV_COLUMNS = ("path", "files", "size_bytes", "type")
_CUMULATIVE_COLUMNS = ("cumulative_files", "cumulative_size_bytes")

_MAX_UNSIGNED = 2**64 - 1

# Paths that are not valid UTF-8 are written back as their original bytes.
_FS_ERRORS = "surrogateescape"


class SnapshotError(Exception):
    """Raised when a snapshot cannot be read or written."""


class MissingColumnError(SnapshotError):
    """Raised when a CSV snapshot lacks a required column."""

    def __init__(self, column: str) -> None:
        super().__init__(f"Missing required column: {column}")
        self.column = column


class SnapshotParseError(SnapshotError):
    """Raised for a row or record that cannot be decoded.

    ``line`` is the 1-based CSV line (the header is line 1) or the 0-based
    index of the JSON record.
    """

    def __init__(self, line: int, field: str | None, message: str) -> None:
        where = f"line {line}" if field is None else f"line {line}, field '{field}'"
        super().__init__(f"Parse error at {where}: {message}")
        self.line = line
        self.field = field
        self.message = message


# ── CSV ──────────────────────────────────────────────────────────────────

def write_csv(entries: Iterable[DirectoryEntry], path: Path, legacy: bool = False) -> None:
    """Write entries as CSV.

    With ``legacy=True`` the four-column schema without cumulative totals
    is written.
    """
    columns = LEGACY_CSV_COLUMNS if legacy else CSV_COLUMNS
    count = 0
    with open(path, "w", newline="", encoding="utf-8", errors=_FS_ERRORS) as f:
        writer = csv.writer(f)
        writer.writerow(columns)
        for entry in entries:
            row = {
                "path": str(entry.path),
                "files": entry.file_count,
                "size_bytes": entry.size_bytes,
                "cumulative_files": entry.cumulative_file_count,
                "cumulative_size_bytes": entry.cumulative_size_bytes,
                "type": entry.entry_type.value,
            }
            writer.writerow([row[c] for c in columns])
            count += 1
    log.info("Wrote %d entries to %s", count, path)


def read_csv(path: Path) -> list[DirectoryEntry]:
    """Read a CSV snapshot in either schema.

    The schema is picked from the header: the cumulative columns are read
    when both are present, otherwise the cumulative totals are set equal
    to the direct ones.

    Raises:
        MissingColumnError: A required column is absent from the header.
        SnapshotParseError: A row is short or holds an invalid value.
        OSError: The file cannot be opened.
    """
    with open(path, newline="", encoding="utf-8", errors=_FS_ERRORS) as f:
        reader = csv.reader(f)
        header = next(reader, [])
        index = {name.strip(): i for i, name in enumerate(header)}

        for column in LEGACY_CSV_COLUMNS:
            if column not in index:
                raise MissingColumnError(column)
        has_cumulative = all(c in index for c in _CUMULATIVE_COLUMNS)
        columns = CSV_COLUMNS if has_cumulative else LEGACY_CSV_COLUMNS
        width = max(index[c] for c in columns) + 1

        entries: list[DirectoryEntry] = []
        for row in reader:
            line = reader.line_num
            if not row:
                continue
            if len(row) < width:
                raise SnapshotParseError(line, None, f"Expected {width} columns, found {len(row)}")

            file_count = _parse_unsigned(row[index["files"]], line, "files")
            size_bytes = _parse_unsigned(row[index["size_bytes"]], line, "size_bytes")
            if has_cumulative:
                cum_files = _parse_unsigned(row[index["cumulative_files"]], line, "cumulative_files")
                cum_size = _parse_unsigned(row[index["cumulative_size_bytes"]], line, "cumulative_size_bytes")
            else:
                cum_files, cum_size = file_count, size_bytes

            raw_type = row[index["type"]]
            try:
                entry_type = EntryType(raw_type)
            except ValueError:
                raise SnapshotParseError(line, "type", f"Invalid entry type: {raw_type!r}") from None

            entries.append(
                DirectoryEntry(
                    path=Path(row[index["path"]]),
                    file_count=file_count,
                    size_bytes=size_bytes,
                    cumulative_file_count=cum_files,
                    cumulative_size_bytes=cum_size,
                    entry_type=entry_type,
                )
            )

    log.info("Read %d entries from %s (%s schema)", len(entries), path, "current" if has_cumulative else "legacy")
    return entries


def _parse_unsigned(value: str, line: int, field: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise SnapshotParseError(line, field, f"Invalid unsigned integer: {value!r}")
    number = int(value)
    if number > _MAX_UNSIGNED:
        raise SnapshotParseError(line, field, f"Value out of range: {value}")
    return number


# ── JSON ─────────────────────────────────────────────────────────────────

def write_json(entries: Iterable[DirectoryEntry], path: Path) -> None:
    """Write entries as a JSON array of records."""
    data = [e.to_dict() for e in entries]
    with open(path, "w", encoding="utf-8", errors=_FS_ERRORS) as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
    log.info("Wrote %d entries to %s", len(data), path)


def read_json(path: Path) -> list[DirectoryEntry]:
    """Read a JSON snapshot written by :func:`write_json`.

    Raises:
        SnapshotParseError: The document or one of its records is invalid.
        OSError: The file cannot be opened.
    """
    with open(path, encoding="utf-8", errors=_FS_ERRORS) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotParseError(e.lineno, None, e.msg) from e

    if not isinstance(data, list):
        raise SnapshotParseError(0, None, "Expected a JSON array of records")

    entries: list[DirectoryEntry] = []
    for i, record in enumerate(data):
        if not isinstance(record, dict):
            raise SnapshotParseError(i, None, "Expected a JSON object")
        try:
            entries.append(DirectoryEntry.from_dict(record))
        except KeyError as e:
            raise SnapshotParseError(i, e.args[0], "Missing field") from e
        except (TypeError, ValueError) as e:
            raise SnapshotParseError(i, None, str(e)) from e
    log.info("Read %d entries from %s", len(entries), path)
    return entries


# ── dispatch ─────────────────────────────────────────────────────────────

def save_snapshot(entries: Iterable[DirectoryEntry], path: Path) -> None:
    """Write a snapshot, as JSON for a ``.json`` path and CSV otherwise."""
    if Path(path).suffix.lower() == ".json":
        write_json(entries, path)
    else:
        write_csv(entries, path)


def load_snapshot(path: Path) -> list[DirectoryEntry]:
    """Read a snapshot, as JSON for a ``.json`` path and CSV otherwise."""
    if Path(path).suffix.lower() == ".json":
        return read_json(path)
    return read_csv(path)
