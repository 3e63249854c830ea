"""Recursive file enumeration with on-disk sizes.

The walker never aborts because of a single entry: anything that cannot be
read is skipped, logged at debug level and reported to an optional callback.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Generator, NamedTuple

log = logging.getLogger(__name__)

ErrorCallback = Callable[[Path, OSError], None]


class FileRecord(NamedTuple):
    """A regular file found during a walk."""

    path: Path
    size_on_disk: int
    modified: datetime


def size_on_disk(st: os.stat_result) -> int:
    """Allocated bytes for a stat result.

    Uses st_blocks (512-byte units) where the platform reports it, so sparse
    files and block rounding are accounted for. Falls back to st_size.
    """
    blocks = getattr(st, "st_blocks", None)
    if blocks is None:
        return st.st_size
    return blocks * 512


def modified_time(st: os.stat_result) -> datetime:
    return datetime.fromtimestamp(st.st_mtime)


def _skip(path: Path, exc: OSError, on_error: ErrorCallback | None) -> None:
    log.debug("Skipping %s: %s", path, exc)
    if on_error:
        on_error(path, exc)


def walk_files(
    root: Path,
    on_error: ErrorCallback | None = None,
) -> Generator[FileRecord, None, None]:
    """
    Yield every regular file below root.

    Directories are descended without following symlinks. Symlinks to files
    are measured through the link; broken links are skipped.

    Args:
        root: Directory to walk
        on_error: Optional callback(path, exc) for every skipped entry

    Yields:
        FileRecord for each readable file, in no particular order
    """
    pending = [Path(root)]
    while pending:
        directory = pending.pop()
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    entry_path = Path(entry.path)
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            pending.append(entry_path)
                            continue
                        if not entry.is_file():
                            if entry.is_symlink():
                                # Dangling links raise here and count as skipped
                                entry.stat()
                            continue
                        st = entry.stat()
                    except OSError as e:
                        _skip(entry_path, e, on_error)
                        continue
                    yield FileRecord(entry_path, size_on_disk(st), modified_time(st))
        except OSError as e:
            _skip(directory, e, on_error)
