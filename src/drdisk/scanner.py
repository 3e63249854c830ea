"""Concurrent size and modification-time scanning for drdisk."""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional

from drdisk.errors import InvalidScanRootError, UnreadableScanRootError
from drdisk.models import ChildEntry, EntryStatus, ScanSnapshot, SizeReport, Thresholds
from drdisk.walker import modified_time, size_on_disk, walk_files

log = logging.getLogger(__name__)

ProgressListener = Callable[[int, int], None]  # (completed, total)


class ScanProgress:
    """Thread-safe counter of children processed during one scan."""

    def __init__(self, total: int = 0, listener: ProgressListener | None = None) -> None:
        self.total = total
        self._listener = listener
        self._completed = 0
        self._lock = threading.Lock()

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def increment(self) -> int:
        """Record one finished child and notify the listener."""
        with self._lock:
            self._completed += 1
            completed = self._completed
        if self._listener:
            self._listener(completed, self.total)
        return completed


def list_children(root: Path) -> list[ChildEntry]:
    """
    List the immediate children of a directory.

    Args:
        root: Directory to list

    Returns:
        ChildEntry per child, in directory order

    Raises:
        InvalidScanRootError: If root does not exist or is not a directory
        UnreadableScanRootError: If root cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        raise InvalidScanRootError(root)

    children = []
    try:
        with os.scandir(root) as entries:
            for entry in entries:
                try:
                    is_directory = entry.is_dir()
                except OSError:
                    is_directory = False
                children.append(ChildEntry(path=Path(entry.path), is_directory=is_directory))
    except OSError as e:
        raise UnreadableScanRootError(root, e.strerror or str(e)) from e
    return children


def aggregate_entry(entry: ChildEntry) -> SizeReport:
    """
    Measure one child entry.

    Files are measured with a single stat; directories are walked and reduced
    to the sum of file sizes and the most recent file modification time.
    Read errors never propagate: they degrade the report instead.

    Args:
        entry: Child to measure

    Returns:
        SizeReport for the entry
    """
    if not entry.is_directory:
        try:
            st = os.stat(entry.path)
        except OSError as e:
            log.debug("Cannot read %s: %s", entry.path, e)
            return SizeReport(
                path=entry.path,
                is_directory=False,
                status=EntryStatus.UNREADABLE,
                error=str(e),
            )
        return SizeReport(
            path=entry.path,
            is_directory=False,
            total_bytes_on_disk=size_on_disk(st),
            latest_modified=modified_time(st),
        )

    total_size = 0
    latest_modified = None
    skipped = 0

    def count_skipped(path: Path, exc: OSError) -> None:
        nonlocal skipped
        skipped += 1

    for record in walk_files(entry.path, on_error=count_skipped):
        total_size += record.size_on_disk
        if latest_modified is None or record.modified > latest_modified:
            latest_modified = record.modified

    return SizeReport(
        path=entry.path,
        is_directory=True,
        total_bytes_on_disk=total_size,
        latest_modified=latest_modified,
        status=EntryStatus.PARTIAL if skipped else EntryStatus.OK,
        skipped_count=skipped,
    )


def sort_reports(reports: list[SizeReport]) -> list[SizeReport]:
    """Sort by size descending; equal sizes keep their encounter order."""
    return sorted(reports, key=lambda r: r.total_bytes_on_disk, reverse=True)


def compute_thresholds(denominator: int, from_capacity: bool) -> Thresholds:
    """
    Derive color thresholds from the percentage denominator.

    Disk capacity uses 1% (red) and 0.1% (yellow); a snapshot total uses
    10% and 1%.
    """
    if from_capacity:
        return Thresholds(red=denominator // 100, yellow=denominator // 1000)
    return Thresholds(red=denominator // 10, yellow=denominator // 100)


def _measure(entry: ChildEntry, progress: ScanProgress) -> SizeReport:
    try:
        return aggregate_entry(entry)
    except Exception as e:
        log.warning("Failed to measure %s: %s", entry.path, e)
        return SizeReport(
            path=entry.path,
            is_directory=entry.is_directory,
            status=EntryStatus.UNREADABLE,
            error=str(e),
        )
    finally:
        progress.increment()


def scan_directory(
    root: Path,
    capacity: Optional[int] = None,
    progress: ScanProgress | None = None,
    progress_callback: ProgressListener | None = None,
) -> ScanSnapshot:
    """
    Scan every immediate child of a directory in parallel.

    One worker is started per child. All workers are joined before the
    results are read, then sorted by size.

    Args:
        root: Directory to scan
        capacity: Optional disk capacity to use as percentage denominator
        progress: Optional progress counter; its total is set to the child count
        progress_callback: Optional callback(completed, total), used when no
            progress counter is given

    Returns:
        ScanSnapshot with sorted reports, denominator and thresholds

    Raises:
        InvalidScanRootError: If root does not exist or is not a directory
        UnreadableScanRootError: If root cannot be listed
    """
    root = Path(root)
    started = time.monotonic()
    children = list_children(root)

    if progress is None:
        progress = ScanProgress(listener=progress_callback)
    progress.total = len(children)

    reports: list[SizeReport] = []
    if children:
        with ThreadPoolExecutor(max_workers=len(children)) as executor:
            futures = [executor.submit(_measure, child, progress) for child in children]
        reports = [future.result() for future in futures]

    reports = sort_reports(reports)

    if capacity is not None:
        denominator = capacity
        source = "capacity"
    else:
        denominator = sum(r.total_bytes_on_disk for r in reports)
        source = "snapshot"

    log.info(
        "Scanned %d entries in %s in %.2fs",
        len(reports),
        root,
        time.monotonic() - started,
    )

    return ScanSnapshot(
        root=root,
        reports=reports,
        denominator=denominator,
        denominator_source=source,
        thresholds=compute_thresholds(denominator, from_capacity=capacity is not None),
    )
