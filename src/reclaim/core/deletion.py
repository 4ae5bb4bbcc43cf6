"""Recursive deletion of selected directories."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Callable, Iterable

from reclaim.core.walker import subtree_totals
from reclaim.models.report import DeletionReport

log = logging.getLogger(__name__)

DeletedCallback = Callable[[Path, str | None], None]  # (path, error or None)


def delete_directories(
    paths: Iterable[Path],
    on_deleted: DeletedCallback | None = None,
) -> DeletionReport:
    """Remove each directory tree and report what happened.

    A failure on one path is recorded in the report and never stops the
    remaining deletions. Freed bytes are measured just before removal, and
    a partially removed tree is measured again to count what did go.
    """
    report = DeletionReport()

    for path in paths:
        path = Path(path)
        _, size = subtree_totals(path)
        try:
            shutil.rmtree(path)
        except OSError as e:
            reason = e.strerror or str(e)
            report.failed.append((path, reason))
            # rmtree may have removed part of the tree before failing.
            _, remaining = subtree_totals(path)
            report.total_freed_bytes += max(size - remaining, 0)
            log.warning("Failed to delete %s: %s", path, reason)
            if on_deleted:
                on_deleted(path, reason)
            continue

        report.successful.append(path)
        report.total_freed_bytes += size
        log.info("Deleted %s (%d bytes)", path, size)
        if on_deleted:
            on_deleted(path, None)

    return report
