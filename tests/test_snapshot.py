"""Tests for CSV and JSON snapshots."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from reclaim.core.scanner import scan
from reclaim.models.entry import DirectoryEntry, EntryType, ScanConfig
from reclaim.snapshot import (
    CSV_COLUMNS,
    MissingColumnError,
    SnapshotError,
    SnapshotParseError,
    load_snapshot,
    read_csv,
    read_json,
    save_snapshot,
    write_csv,
    write_json,
)


def _entries() -> list[DirectoryEntry]:
    return [
        DirectoryEntry(Path("/work"), 2, 10, 40, 5012, EntryType.NORMAL),
        DirectoryEntry(Path("/work/node_modules"), 30, 5002, 30, 5002, EntryType.TEMP),
        DirectoryEntry(Path("/work/dir, with \"quotes\""), 0, 0, 0, 0, EntryType.NORMAL),
    ]


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestCsvRoundTrip:
    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_current_schema(self, tmp_path, count):
        entries = _entries()[:count]
        target = tmp_path / "scan.csv"
        write_csv(entries, target)
        assert read_csv(target) == entries

    def test_header(self, tmp_path):
        target = tmp_path / "scan.csv"
        write_csv([], target)
        assert target.read_text(encoding="utf-8").splitlines() == [",".join(CSV_COLUMNS)]

    def test_legacy_schema_drops_cumulative(self, tmp_path):
        target = tmp_path / "old.csv"
        write_csv(_entries(), target, legacy=True)

        loaded = read_csv(target)
        assert [e.path for e in loaded] == [e.path for e in _entries()]
        for entry in loaded:
            assert entry.cumulative_file_count == entry.file_count
            assert entry.cumulative_size_bytes == entry.size_bytes


class TestReadCsv:
    def test_legacy_file(self, tmp_path):
        target = _write(tmp_path / "old.csv", "path,files,size_bytes,type\n/a,3,300,temp\n/b,1,5,normal\n")
        assert read_csv(target) == [
            DirectoryEntry(Path("/a"), 3, 300, 3, 300, EntryType.TEMP),
            DirectoryEntry(Path("/b"), 1, 5, 1, 5, EntryType.NORMAL),
        ]

    def test_columns_in_any_order(self, tmp_path):
        target = _write(
            tmp_path / "x.csv",
            "type,cumulative_size_bytes,path,size_bytes,cumulative_files,files\nnormal,9,/a,4,2,1\n",
        )
        assert read_csv(target) == [DirectoryEntry(Path("/a"), 1, 4, 2, 9, EntryType.NORMAL)]

    def test_only_one_cumulative_column_uses_legacy(self, tmp_path):
        target = _write(tmp_path / "x.csv", "path,files,size_bytes,cumulative_files,type\n/a,1,4,99,normal\n")
        assert read_csv(target)[0].cumulative_file_count == 1

    def test_blank_lines_skipped(self, tmp_path):
        target = _write(tmp_path / "x.csv", "path,files,size_bytes,type\n\n/a,1,1,normal\n\n")
        assert len(read_csv(target)) == 1

    def test_missing_column_before_rows(self, tmp_path):
        target = _write(tmp_path / "x.csv", "path,files,type\n/a,not-a-number,normal\n")
        with pytest.raises(MissingColumnError) as excinfo:
            read_csv(target)
        assert excinfo.value.column == "size_bytes"
        assert str(excinfo.value) == "Missing required column: size_bytes"

    def test_empty_file(self, tmp_path):
        target = _write(tmp_path / "x.csv", "")
        with pytest.raises(MissingColumnError):
            read_csv(target)

    def test_non_numeric_value(self, tmp_path):
        target = _write(tmp_path / "x.csv", "path,files,size_bytes,type\n/a,1,1,normal\n/b,abc,1,normal\n")
        with pytest.raises(SnapshotParseError) as excinfo:
            read_csv(target)
        assert excinfo.value.line == 3
        assert excinfo.value.field == "files"
        assert "line 3" in str(excinfo.value)

    @pytest.mark.parametrize("value", ["-1", "+1", " 1", "1.0", "", "١"])
    def test_rejects_signed_or_odd_numbers(self, tmp_path, value):
        target = _write(tmp_path / "x.csv", f"path,files,size_bytes,type\n/a,1,{value},normal\n")
        with pytest.raises(SnapshotParseError) as excinfo:
            read_csv(target)
        assert excinfo.value.field == "size_bytes"

    def test_value_beyond_64_bits(self, tmp_path):
        target = _write(tmp_path / "x.csv", f"path,files,size_bytes,type\n/a,1,{2**64},normal\n")
        with pytest.raises(SnapshotParseError):
            read_csv(target)

    def test_largest_64_bit_value(self, tmp_path):
        target = _write(tmp_path / "x.csv", f"path,files,size_bytes,type\n/a,1,{2**64 - 1},normal\n")
        assert read_csv(target)[0].size_bytes == 2**64 - 1

    def test_invalid_type(self, tmp_path):
        target = _write(tmp_path / "x.csv", "path,files,size_bytes,type\n/a,1,1,Temp\n")
        with pytest.raises(SnapshotParseError) as excinfo:
            read_csv(target)
        assert excinfo.value.field == "type"

    def test_short_row(self, tmp_path):
        target = _write(tmp_path / "x.csv", "path,files,size_bytes,type\n/a,1\n")
        with pytest.raises(SnapshotParseError) as excinfo:
            read_csv(target)
        assert excinfo.value.line == 2
        assert "Expected 4 columns, found 2" in str(excinfo.value)

    def test_parse_error_is_snapshot_error(self):
        assert issubclass(SnapshotParseError, SnapshotError)
        assert issubclass(MissingColumnError, SnapshotError)


class TestJson:
    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_round_trip(self, tmp_path, count):
        entries = _entries()[:count]
        target = tmp_path / "scan.json"
        write_json(entries, target)
        assert read_json(target) == entries

    def test_record_layout(self, tmp_path):
        target = tmp_path / "scan.json"
        write_json(_entries()[1:2], target)
        assert json.loads(target.read_text(encoding="utf-8")) == [
            {
                "path": "/work/node_modules",
                "file_count": 30,
                "size_bytes": 5002,
                "cumulative_file_count": 30,
                "cumulative_size_bytes": 5002,
                "entry_type": "Temp",
            }
        ]

    def test_invalid_document(self, tmp_path):
        target = _write(tmp_path / "x.json", "[\n{\n")
        with pytest.raises(SnapshotParseError):
            read_json(target)

    def test_not_an_array(self, tmp_path):
        target = _write(tmp_path / "x.json", '{"path": "/a"}')
        with pytest.raises(SnapshotParseError) as excinfo:
            read_json(target)
        assert excinfo.value.line == 0

    def test_missing_field(self, tmp_path):
        record = _entries()[0].to_dict()
        del record["size_bytes"]
        target = _write(tmp_path / "x.json", json.dumps([_entries()[1].to_dict(), record]))
        with pytest.raises(SnapshotParseError) as excinfo:
            read_json(target)
        assert excinfo.value.line == 1
        assert excinfo.value.field == "size_bytes"

    @pytest.mark.parametrize("field, value", [("file_count", -1), ("size_bytes", "12"), ("size_bytes", True), ("entry_type", "temp")])
    def test_bad_values(self, tmp_path, field, value):
        record = _entries()[0].to_dict()
        record[field] = value
        target = _write(tmp_path / "x.json", json.dumps([record]))
        with pytest.raises(SnapshotParseError):
            read_json(target)


class TestDispatch:
    def test_json_suffix(self, tmp_path):
        target = tmp_path / "scan.JSON"
        save_snapshot(_entries(), target)
        assert target.read_text(encoding="utf-8").lstrip().startswith("[")
        assert load_snapshot(target) == _entries()

    def test_other_suffix_is_csv(self, tmp_path):
        target = tmp_path / "scan.txt"
        save_snapshot(_entries(), target)
        assert target.read_text(encoding="utf-8").startswith("path,")
        assert load_snapshot(target) == _entries()


class TestNonUtf8Names:
    def test_csv_round_trip(self, non_utf8_tree, tmp_path):
        root, directory = non_utf8_tree
        entries = scan(ScanConfig(root))
        target = tmp_path / "scan.csv"

        write_csv(entries, target)

        assert b"caf\xe9" in target.read_bytes()
        assert read_csv(target) == entries
        assert directory in {e.path for e in read_csv(target)}

    def test_legacy_csv(self, non_utf8_tree, tmp_path):
        root, directory = non_utf8_tree
        target = tmp_path / "old.csv"
        write_csv(scan(ScanConfig(root)), target, legacy=True)
        assert directory in {e.path for e in read_csv(target)}

    def test_json_round_trip(self, non_utf8_tree, tmp_path):
        root, directory = non_utf8_tree
        entries = scan(ScanConfig(root))
        target = tmp_path / "scan.json"

        write_json(entries, target)

        assert b"caf\xe9" in target.read_bytes()
        assert read_json(target) == entries
