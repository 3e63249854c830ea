"""Disk capacity lookup for drdisk."""

import logging
import os
from pathlib import Path

import psutil

from drdisk.errors import CapacityLookupError
from drdisk.models import DiskUsage

log = logging.getLogger(__name__)


def _is_within(path: Path, mount_point: Path) -> bool:
    return path == mount_point or mount_point in path.parents


def find_mount_point(path: Path) -> str | None:
    """
    Find the mount point that contains a path.

    The longest matching mount point wins, so nested mounts resolve to the
    innermost disk.

    Args:
        path: Path to look up (canonicalized first)

    Returns:
        Mount point path, or None if no mounted partition matches
    """
    canonical = Path(path).resolve()
    best: str | None = None
    best_len = -1
    for partition in psutil.disk_partitions(all=True):
        mount_point = partition.mountpoint
        if not mount_point:
            continue
        if not _is_within(canonical, Path(os.path.abspath(mount_point))):
            continue
        if len(mount_point) > best_len:
            best, best_len = mount_point, len(mount_point)
    return best


def get_disk_usage(path: Path) -> DiskUsage:
    """
    Get usage of the disk that holds a path.

    Raises:
        CapacityLookupError: If no mount matches or its usage cannot be read
    """
    mount_point = find_mount_point(path)
    if mount_point is None:
        raise CapacityLookupError(path)

    try:
        usage = psutil.disk_usage(mount_point)
    except OSError as e:
        log.debug("Cannot read usage of %s: %s", mount_point, e)
        raise CapacityLookupError(path) from e

    log.info("Using capacity of %s (%d bytes) for %s", mount_point, usage.total, path)
    return DiskUsage(
        total_bytes=usage.total,
        used_bytes=usage.used,
        free_bytes=usage.free,
        mount_point=mount_point,
    )


def get_disk_capacity(path: Path) -> int:
    """Total capacity in bytes of the disk that holds a path."""
    return get_disk_usage(path).total_bytes
