"""Rich terminal display for drdisk."""

from datetime import datetime
from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from drdisk.models import Classification, ScanSnapshot, SizeReport

console = Console()


def classification_color(classification: Classification) -> str:
    """Get the color used for a size classification."""
    colors = {
        Classification.RED: "red",
        Classification.YELLOW: "yellow",
        Classification.DEFAULT: "green",
    }
    return colors.get(classification, "white")


def format_size(size_bytes: int) -> str:
    """Format bytes to human-readable string (decimal units)."""
    if size_bytes >= 1000**4:
        return f"{size_bytes / (1000**4):.1f} TB"
    elif size_bytes >= 1000**3:
        return f"{size_bytes / (1000**3):.1f} GB"
    elif size_bytes >= 1000**2:
        return f"{size_bytes / (1000**2):.1f} MB"
    elif size_bytes >= 1000:
        return f"{size_bytes / 1000:.1f} KB"
    else:
        return f"{size_bytes} B"


def format_percentage(percentage: float) -> str:
    return f"{percentage:.2f}"


def format_relative_time(modified: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Describe how long ago something was modified, using the largest whole unit."""
    if modified is None:
        return "N/A"

    now = now or datetime.now()
    seconds = int((now - modified).total_seconds())
    if seconds <= 0:
        return "just now"

    days, remainder = divmod(seconds, 86400)
    if days > 0:
        return f"{days} days ago"
    hours = remainder // 3600
    if hours > 0:
        return f"{hours} hours ago"
    minutes = remainder // 60
    if minutes > 0:
        return f"{minutes} minutes ago"
    return "just now"


def format_name(report: SizeReport) -> Text:
    """Entry name, directories in blue with a trailing slash."""
    if report.is_directory:
        return Text(f"{report.name}/", style="blue")
    return Text(report.name)


def show_snapshot(snapshot: ScanSnapshot, now: Optional[datetime] = None) -> None:
    """Display the sorted summary table for a scan."""
    now = now or datetime.now()

    console.print(Text.assemble("Summary for: ", (str(snapshot.root), "bold")))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Last Touched", justify="right")

    for report in snapshot.reports:
        color = classification_color(snapshot.classify(report))
        table.add_row(
            format_name(report),
            Text(format_size(report.total_bytes_on_disk), style=color),
            Text(format_percentage(snapshot.percentage(report)), style=color),
            format_relative_time(report.latest_modified, now),
        )

    console.print(table)

    if not snapshot.reports:
        console.print("[dim]Directory is empty[/dim]")

    degraded = snapshot.degraded_reports
    if degraded:
        console.print(
            f"[yellow]! {len(degraded)} entries could not be read completely; "
            f"sizes shown may be low[/yellow]"
        )


def show_scanning_progress() -> Progress:
    """Create progress bar for scanning."""
    return Progress(
        SpinnerColumn(style="green"),
        TimeElapsedColumn(),
        BarColumn(complete_style="cyan", finished_style="blue"),
        TextColumn("{task.completed}/{task.total}"),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=False,
    )


def show_error(message: str) -> None:
    console.print(Text(message, style="red"))
