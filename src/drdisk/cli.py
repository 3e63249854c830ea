"""CLI interface for drdisk."""

import logging
from pathlib import Path
from typing import Optional

import typer

from drdisk import __version__
from drdisk.config import load_config
from drdisk.disks import get_disk_capacity
from drdisk.display import console, show_error
from drdisk.errors import DrDiskError, InvalidScanRootError
from drdisk.models import Session
from drdisk.session import run_shell, scan_and_display

log = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="drdisk",
    help="Interactive disk usage inspector - find what is eating your disk",
    add_completion=False,
)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"drdisk version {__version__}")
        raise typer.Exit()


def build_session(path: Path, total_disk_color: bool) -> Session:
    """
    Create the initial session for a path.

    Raises:
        InvalidScanRootError: If path is missing or not a directory
        CapacityLookupError: If total disk color is requested but no disk matches
    """
    try:
        canonical = path.resolve(strict=True)
    except OSError as e:
        raise InvalidScanRootError(path) from e
    if not canonical.is_dir():
        raise InvalidScanRootError(canonical)

    capacity = get_disk_capacity(canonical) if total_disk_color else None
    return Session(path=canonical, capacity=capacity)


@app.command()
def main(
    path: Path = typer.Argument(Path("."), help="The path to the directory to scan"),
    total_disk_color: bool = typer.Option(
        False,
        "--total-disk-color",
        help="Use total disk space for color thresholds instead of current view's total size",
    ),
    once: bool = typer.Option(
        False, "--once", help="Run the tool once and exit, without entering interactive mode."
    ),
    verbose: int = typer.Option(
        0, "--verbose", "-V", count=True, help="Increase verbosity (-V info, -VV debug)"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="Config file (default: $DRDISK_CONFIG or ~/.drdisk/config.json)"
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Show what uses space in a directory and navigate into it."""
    config = load_config(config_file)
    _setup_logging(verbose or config.verbosity)

    try:
        session = build_session(path, total_disk_color or config.total_disk_color)
        log.debug("Starting in %s (capacity: %s)", session.path, session.capacity)
        if once:
            scan_and_display(session)
        else:
            run_shell(session)
    except DrDiskError as e:
        show_error(str(e))
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
