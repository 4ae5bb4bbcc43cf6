"""Scan progress counters shared between the scanning worker and the UI."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from reclaim.core.scanner import scan
from reclaim.models.entry import DirectoryEntry, ScanConfig

log = logging.getLogger(__name__)

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

# Seconds between UI refreshes while a scan is running.
DEFAULT_INTERVAL = 0.08


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """Point-in-time copy of the progress counters."""

    files_scanned: int = 0
    dirs_scanned: int = 0
    current_path: str = ""


class ScanProgress:
    """Lock-guarded counters written by the scanner and read by the UI.

    Only the scanning thread calls the ``record_*`` methods; readers take
    a :meth:`snapshot` and never hold the lock themselves.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._files = 0
        self._dirs = 0
        self._current = ""

    def record_directory(self, path: Path) -> None:
        with self._lock:
            self._dirs += 1
            self._current = str(path)

    def record_file(self, path: Path) -> None:
        with self._lock:
            self._files += 1
            self._current = str(path.parent)

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(self._files, self._dirs, self._current)


TickCallback = Callable[[ProgressSnapshot, str], None]  # (snapshot, spinner_frame)


def scan_with_progress(
    config: ScanConfig,
    on_tick: TickCallback,
    interval: float = DEFAULT_INTERVAL,
) -> list[DirectoryEntry]:
    """Run a scan on a worker thread while calling *on_tick* periodically.

    The scan cannot be cancelled and has no timeout. Any exception raised
    by the scan (including :class:`~reclaim.core.scanner.PathNotFoundError`)
    is re-raised here once the worker has finished.
    """
    progress = ScanProgress()
    outcome: dict[str, object] = {}

    def do_scan() -> None:
        try:
            outcome["entries"] = scan(config, progress=progress)
        except Exception as exc:
            outcome["error"] = exc

    worker = threading.Thread(target=do_scan, name="reclaim-scan", daemon=True)
    worker.start()

    frame = 0
    while worker.is_alive():
        on_tick(progress.snapshot(), SPINNER_FRAMES[frame])
        frame = (frame + 1) % len(SPINNER_FRAMES)
        time.sleep(interval)
    worker.join()

    if "error" in outcome:
        raise outcome["error"]  # type: ignore[misc]
    log.debug("Scan worker finished: %s", progress.snapshot())
    return outcome["entries"]  # type: ignore[return-value]
