"""Data models for drdisk."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class EntryStatus(str, Enum):
    """How completely an entry could be measured."""

    OK = "ok"  # Every file was read
    PARTIAL = "partial"  # Some descendants were skipped
    UNREADABLE = "unreadable"  # The entry's own metadata could not be read


class Classification(str, Enum):
    """Size classification of an entry relative to the snapshot thresholds."""

    RED = "red"
    YELLOW = "yellow"
    DEFAULT = "default"


class ChildEntry(BaseModel):
    """One immediate child of the scan root."""

    path: Path = Field(..., description="Absolute path of the child")
    is_directory: bool = Field(False, description="Whether the child is a directory")


class SizeReport(BaseModel):
    """Aggregated size and modification time of one child entry."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Absolute path of the entry")
    is_directory: bool = Field(False, description="Whether the entry is a directory")
    total_bytes_on_disk: int = Field(0, ge=0, description="Total allocated bytes")
    latest_modified: Optional[datetime] = Field(
        None, description="Most recent modification time, None if nothing was readable"
    )
    status: EntryStatus = Field(EntryStatus.OK, description="Measurement status")
    skipped_count: int = Field(0, description="Descendants skipped because they could not be read")
    error: Optional[str] = Field(None, description="Error message if the entry was unreadable")

    @property
    def name(self) -> str:
        """Final path component."""
        return self.path.name or str(self.path)

    @property
    def is_degraded(self) -> bool:
        """Whether any part of this entry could not be measured."""
        return self.status != EntryStatus.OK


class Thresholds(BaseModel):
    """Byte thresholds used for color classification."""

    model_config = ConfigDict(frozen=True)

    red: int = Field(..., description="Sizes above this are RED")
    yellow: int = Field(..., description="Sizes above this (and not RED) are YELLOW")

    def classify(self, size_bytes: int) -> Classification:
        if size_bytes > self.red:
            return Classification.RED
        if size_bytes > self.yellow:
            return Classification.YELLOW
        return Classification.DEFAULT


class ScanSnapshot(BaseModel):
    """Complete, sorted result of scanning one directory."""

    root: Path = Field(..., description="Directory that was scanned")
    timestamp: datetime = Field(default_factory=datetime.now)
    reports: list[SizeReport] = Field(default_factory=list)
    denominator: int = Field(0, description="Reference total for percentages")
    denominator_source: Literal["capacity", "snapshot"] = "snapshot"
    thresholds: Thresholds

    @property
    def total_bytes(self) -> int:
        """Sum of all reported sizes."""
        return sum(r.total_bytes_on_disk for r in self.reports)

    @property
    def degraded_reports(self) -> list[SizeReport]:
        """Reports that could not be measured completely."""
        return [r for r in self.reports if r.is_degraded]

    def percentage(self, report: SizeReport) -> float:
        """Share of the denominator, 0 when the denominator is 0.

        The raw ratio is kept, so a capacity smaller than the snapshot total
        produces values above 100.
        """
        if self.denominator <= 0:
            return 0.0
        return report.total_bytes_on_disk / self.denominator * 100

    def classify(self, report: SizeReport) -> Classification:
        return self.thresholds.classify(report.total_bytes_on_disk)


class DiskUsage(BaseModel):
    """Usage information for the disk holding a path."""

    total_bytes: int = Field(..., description="Total disk size in bytes")
    used_bytes: int = Field(..., description="Used space in bytes")
    free_bytes: int = Field(..., description="Free space in bytes")
    mount_point: str = Field("/", description="Mount point")

    @property
    def used_percent(self) -> float:
        """Percentage of disk used."""
        return (self.used_bytes / self.total_bytes) * 100 if self.total_bytes > 0 else 0


class Session(BaseModel):
    """State of an interactive session.

    Navigation produces a new Session rather than mutating this one.
    """

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Canonical directory currently inspected")
    capacity: Optional[int] = Field(
        None, description="Disk capacity used as percentage denominator, if enabled"
    )

    def with_path(self, path: Path) -> "Session":
        return self.model_copy(update={"path": path})
