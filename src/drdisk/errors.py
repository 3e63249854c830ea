"""Exceptions raised by drdisk."""


class DrDiskError(Exception):
    """Base class for drdisk errors."""


class InvalidScanRootError(DrDiskError, NotADirectoryError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(f"Provided path is not a directory: {path}")


class CapacityLookupError(DrDiskError):
    """No mounted disk could be matched to the given path."""

    def __init__(self, path) -> None:
        self.path = path
        super().__init__(
            "Could not determine disk space for the given path. "
            "Try running without --total-disk-color."
        )


class UnreadableScanRootError(DrDiskError, PermissionError):
    """The scan root is a directory but its contents cannot be listed."""

    def __init__(self, path, reason: str = "") -> None:
        self.path = path
        message = f"Cannot read directory: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
