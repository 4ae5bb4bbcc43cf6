"""CLI interface for Reclaim."""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path

import click

from reclaim.core.deletion import delete_directories
from reclaim.core.progress import ProgressSnapshot, scan_with_progress
from reclaim.core.scanner import ScanError
from reclaim.core.selection import SelectionSession, parse_selection
from reclaim.core.summary import summarize
from reclaim.models.entry import DirectoryEntry, ScanConfig
from reclaim.settings import Settings
from reclaim.snapshot import SnapshotError, load_snapshot, save_snapshot, write_csv
from reclaim.utils import bytes_to_human, display_path, format_elapsed, shorten_path


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """Reclaim: find the directories eating your disk."""
    _setup_logging(verbose)


def _path_argument(func):
    return click.argument(
        "path", required=False, default=".", type=click.Path(file_okay=False, path_type=Path)
    )(func)


def _source_options(func):
    func = click.option(
        "--input", "-i", "input_file", default=None,
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Load a previous snapshot (.json or CSV) instead of scanning",
    )(func)
    func = click.option(
        "--temp-only", "-t", is_flag=True,
        help="Keep only temporary directories (node_modules, .venv, target, ...)",
    )(func)
    return func


def _load_entries(path: Path, input_file: Path | None, temp_only: bool) -> list[DirectoryEntry]:
    """Scan *path*, or read *input_file* when given. Status goes to stderr."""
    if input_file is not None:
        try:
            entries = load_snapshot(input_file)
        except (SnapshotError, OSError) as e:
            _fail(f"Cannot read snapshot {input_file}: {e}")
        click.echo(f"Loaded {len(entries):,} entries from {input_file}", err=True)
        if temp_only:
            entries = [e for e in entries if e.is_temp]
            click.echo(f"Filtered to {len(entries):,} temporary directories", err=True)
        return entries

    settings = Settings.instance()
    interval = settings.get_int("progress.interval_ms") / 1000
    config = ScanConfig(root_path=path, temp_only=temp_only)
    interactive = sys.stderr.isatty()

    def on_tick(snapshot: ProgressSnapshot, frame: str) -> None:
        if not interactive:
            return
        click.echo(
            f"\r{click.style(frame, fg='green', bold=True)} Scanning "
            f"{snapshot.dirs_scanned:,} dirs, {snapshot.files_scanned:,} files  "
            f"{click.style(shorten_path(display_path(snapshot.current_path), 50), fg='bright_black')}\x1b[K",
            nl=False,
            err=True,
        )

    started = time.monotonic()
    try:
        entries = scan_with_progress(config, on_tick=on_tick, interval=interval)
    except ScanError as e:
        _fail(display_path(str(e)))
    if interactive:
        click.echo("\r\x1b[K", nl=False, err=True)

    elapsed = format_elapsed(time.monotonic() - started)
    click.echo(
        f"{click.style('✓', fg='green')} Scan complete! Found {len(entries):,} directories in {elapsed}",
        err=True,
    )
    return entries


def _entry_line(entry: DirectoryEntry) -> str:
    marker = "🗑 " if entry.is_temp else "📁"
    path = click.style(display_path(entry.path), fg="red" if entry.is_temp else None)
    size = click.style(bytes_to_human(entry.cumulative_size_bytes), fg="yellow")
    return f"{marker} {path} — {size} ({entry.cumulative_file_count:,} files)"


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@_path_argument
@_source_options
@click.option(
    "--output", "-o", "output_file", default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save the results as a snapshot (.json for JSON, otherwise CSV)",
)
@click.option("--legacy-csv", is_flag=True, help="Write the 4-column CSV schema without cumulative totals")
@click.option("--top", "top_count", type=click.IntRange(min=0), default=None, help="Number of directories to list")
@click.option("--json", "as_json", is_flag=True, help="Output entries as JSON records")
def scan(
    path: Path,
    input_file: Path | None,
    temp_only: bool,
    output_file: Path | None,
    legacy_csv: bool,
    top_count: int | None,
    as_json: bool,
) -> None:
    """Report how much space each directory uses (never deletes)."""
    entries = _load_entries(path, input_file, temp_only)

    if output_file is not None:
        try:
            if legacy_csv:
                write_csv(entries, output_file, legacy=True)
            else:
                save_snapshot(entries, output_file)
        except OSError as e:
            _fail(f"Cannot write snapshot {output_file}: {e}")
        click.echo(f"Results saved to {output_file}", err=True)

    if as_json:
        # Same bytes as a JSON snapshot, including names that are not UTF-8.
        document = json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False)
        click.echo(document.encode("utf-8", "surrogateescape"))
        return

    if top_count is None:
        top_count = Settings.instance().get_int("summary.top_count")
    _print_summary(entries, path, top_count)


def _print_summary(entries: list[DirectoryEntry], root_path: Path, top_count: int) -> None:
    if not entries:
        click.echo("No directories found.")
        return

    summary = summarize(entries, root_path, top=top_count)
    click.echo(f"\n{click.style('📊 Scan Summary', fg='cyan', bold=True)}\n")

    root = summary.root_entry
    if root is not None:
        click.echo(f"  Root:              {display_path(root.path)}")
        click.echo(
            f"  Directories:       {click.style(f'{summary.directory_count:,}', fg='yellow', bold=True)}"
            f"  |  Files: {click.style(f'{root.cumulative_file_count:,}', fg='blue', bold=True)}"
            f"  |  Size: {click.style(bytes_to_human(root.cumulative_size_bytes), fg='green', bold=True)}"
        )
    else:
        click.echo(f"  Directories:       {click.style(f'{summary.directory_count:,}', fg='yellow', bold=True)}")
    click.echo(
        f"  Temp directories:  {click.style(f'{summary.temp_count:,}', fg='red', bold=True)}"
        f"  |  Temp size: {click.style(bytes_to_human(summary.temp_size_bytes), fg='red', bold=True)}"
    )

    if summary.top:
        click.echo(f"\n  Top {len(summary.top)} largest directories:\n")
        for rank, entry in enumerate(summary.top, 1):
            click.echo(f"  {click.style(f'{rank:2}.', fg='bright_black')} {_entry_line(entry)}")
    click.echo()


# ── clean ────────────────────────────────────────────────────────────────

@main.command()
@_path_argument
@_source_options
@click.option(
    "--min-size", type=click.IntRange(min=0), default=None,
    help="Only offer directories at least this many bytes (default 1 MB)",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without doing it")
def clean(
    path: Path,
    input_file: Path | None,
    temp_only: bool,
    min_size: int | None,
    yes: bool,
    dry_run: bool,
) -> None:
    """Pick directories and delete them."""
    entries = _load_entries(path, input_file, temp_only)

    if min_size is None:
        min_size = Settings.instance().get_int("interactive.min_size_bytes")
    session = SelectionSession(entries, min_size_bytes=min_size)
    if not len(session):
        click.echo(f"No directories of {bytes_to_human(min_size)} or more to clean.")
        return

    if not _interactive_select(session):
        click.echo("Nothing selected.")
        return

    paths = session.selected_paths()
    click.echo(f"\n{click.style('⚠  Directories to delete:', fg='red', bold=True)}\n")
    for selected in paths:
        click.echo(f"  🗑  {display_path(selected)}")
    click.echo(f"\nTotal: {click.style(bytes_to_human(session.selected_size_bytes), fg='green', bold=True)}\n")

    if dry_run:
        click.echo("(dry run — nothing was deleted)")
        return

    if not yes:
        click.echo(click.style("This action cannot be undone!", fg="red", bold=True))
        answer = click.prompt("Type 'yes' to confirm deletion", default="", show_default=False)
        if answer.strip() != "yes":
            click.echo("Deletion cancelled.")
            return

    click.echo(f"\n{click.style('🧹', bold=True)} Deleting...\n")

    def on_deleted(deleted: Path, error: str | None) -> None:
        if error is None:
            click.echo(f"  {click.style('✓', fg='green')} {display_path(deleted)}")
        else:
            click.echo(f"  {click.style('✗', fg='red')} {display_path(deleted)} — {error}")

    report = delete_directories(paths, on_deleted=on_deleted)

    color = "green" if not report.failed else "yellow"
    click.echo(f"\n{click.style('Deletion complete', fg=color, bold=True)}")
    click.echo(f"  Deleted:     {report.success_count}")
    click.echo(f"  Failed:      {report.failure_count}")
    click.echo(f"  Space freed: {click.style(bytes_to_human(report.total_freed_bytes), fg='green', bold=True)}\n")


def _print_selection(session: SelectionSession) -> None:
    click.echo()
    for i, entry in enumerate(session.entries):
        box = click.style("[x]", fg="green", bold=True) if session.is_selected(i) else "[ ]"
        click.echo(f"  {box} {click.style(f'{i + 1:3}.', fg='bright_black')} {_entry_line(entry)}")
    click.echo()


def _print_selection_status(session: SelectionSession) -> None:
    click.echo(
        f"Total: {len(session):,} dirs ({bytes_to_human(session.total_size_bytes)})"
        f"  |  Selected: {click.style(str(session.selected_count), fg='green')}"
        f" ({click.style(bytes_to_human(session.selected_size_bytes), fg='green')})"
    )


def _interactive_select(session: SelectionSession) -> bool:
    """Let the user pick directories. Returns False if nothing was chosen."""
    click.echo(f"\nDirectories of {bytes_to_human(session.min_size_bytes)} or more, largest first:")
    _print_selection(session)
    help_text = "Toggle numbers/ranges (1,3,5-7), a=all, c=clear, l=list, d=done, q=quit"

    while True:
        _print_selection_status(session)
        raw = click.prompt(help_text, default="d", show_default=False).strip().lower()
        match raw:
            case "d" | "done":
                return session.selected_count > 0
            case "q" | "quit":
                session.clear()
                return False
            case "a":
                session.select_all()
            case "c":
                session.clear()
            case "l":
                _print_selection(session)
            case _:
                indices = parse_selection(raw, len(session))
                if not indices:
                    click.echo(f"Nothing matched '{raw}'.")
                for index in indices:
                    session.toggle(index)
