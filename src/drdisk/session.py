"""Interactive navigation shell for drdisk."""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Optional

from rich.markup import escape
from rich.text import Text

from drdisk.display import console, show_error, show_scanning_progress, show_snapshot
from drdisk.errors import InvalidScanRootError, UnreadableScanRootError
from drdisk.models import ScanSnapshot, Session
from drdisk.scanner import scan_directory

try:
    import readline
except ImportError:  # Windows without pyreadline: plain input, no completion
    readline = None

log = logging.getLogger(__name__)

COMMANDS = ["q", "quit", "..", "up", "help"]
HELP_TEXT = "Commands: cd <dir>, .., up, q, quit, help"


class CommandKind(str, Enum):
    """Kinds of shell input."""

    CD = "cd"
    UP = "up"
    QUIT = "quit"
    HELP = "help"
    RESCAN = "rescan"  # Empty line
    UNKNOWN = "unknown"


class Command(NamedTuple):
    kind: CommandKind
    argument: str = ""


class CommandOutcome(NamedTuple):
    """Result of applying a command to a session."""

    session: Session
    message: Optional[str] = None
    quit: bool = False


def parse_command(line: str) -> Command:
    """Parse one line of shell input."""
    text = line.strip()
    if text in ("q", "quit"):
        return Command(CommandKind.QUIT)
    if text in ("..", "up"):
        return Command(CommandKind.UP)
    if text == "help":
        return Command(CommandKind.HELP)
    if text.startswith("cd "):
        return Command(CommandKind.CD, text[3:].strip())
    if not text:
        return Command(CommandKind.RESCAN)
    return Command(CommandKind.UNKNOWN, text)


def change_directory(session: Session, target: str) -> CommandOutcome:
    """
    Navigate to a directory relative to the session path (or absolute).

    Returns:
        Outcome with a new session on success, or the unchanged session and
        a not-found message
    """
    new_path = session.path / os.path.expanduser(target)
    if not new_path.is_dir():
        return CommandOutcome(session, f"Directory not found: {target}")
    return CommandOutcome(session.with_path(new_path.resolve()))


def go_up(session: Session) -> CommandOutcome:
    """Navigate to the parent directory; the filesystem root stays put."""
    return CommandOutcome(session.with_path(session.path.parent))


def apply_command(session: Session, command: Command) -> CommandOutcome:
    if command.kind == CommandKind.QUIT:
        return CommandOutcome(session, quit=True)
    if command.kind == CommandKind.UP:
        return go_up(session)
    if command.kind == CommandKind.CD:
        return change_directory(session, command.argument)
    if command.kind == CommandKind.HELP:
        return CommandOutcome(session, HELP_TEXT)
    if command.kind == CommandKind.UNKNOWN:
        return CommandOutcome(
            session,
            f"Unknown command: {command.argument}. Type 'help' for a list of commands.",
        )
    return CommandOutcome(session)


def complete_line(line: str, entries: list[str]) -> list[str]:
    """
    Completion candidates for a partially typed line.

    Candidates are whole lines: 'cd <partial>' completes against entry names,
    anything else against the command list.
    """
    if line.startswith("cd "):
        partial = line[3:]
        return [f"cd {entry}" for entry in entries if entry.startswith(partial)]

    candidates = []
    if "cd".startswith(line):
        candidates.append("cd ")
    candidates.extend(cmd for cmd in COMMANDS if cmd.startswith(line))
    return candidates


def child_names(path: Path) -> list[str]:
    """Names of the immediate children of a directory, for completion."""
    try:
        with os.scandir(path) as entries:
            return sorted(entry.name for entry in entries)
    except OSError as e:
        log.debug("Cannot list %s for completion: %s", path, e)
        return []


class ShellCompleter:
    """readline completer over the current directory's children."""

    def __init__(self) -> None:
        self.entries: list[str] = []
        self._matches: list[str] = []

    def complete(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            self._matches = complete_line(text, self.entries)
        if state < len(self._matches):
            return self._matches[state]
        return None

    def install(self) -> None:
        if readline is None:
            return
        readline.set_completer(self.complete)
        # The whole line is one completion word
        readline.set_completer_delims("")
        if "libedit" in (readline.__doc__ or ""):
            readline.parse_and_bind("bind ^I rl_complete")
        else:
            readline.parse_and_bind("tab: complete")


def read_line(prompt: str) -> str:
    """Read one line of input.

    With readline active the prompt goes through input() so line editing
    knows its width; otherwise rich prints it.
    """
    if readline is not None:
        return input(prompt)
    return console.input(Text(prompt))


def scan_and_display(session: Session) -> ScanSnapshot:
    """Scan the session directory with a progress bar and show the summary."""
    with show_scanning_progress() as progress:
        task = progress.add_task(
            f"Calculating sizes for {escape(str(session.path))}...", total=None
        )

        def update_progress(completed: int, total: int) -> None:
            progress.update(task, completed=completed, total=total)

        snapshot = scan_directory(
            session.path,
            capacity=session.capacity,
            progress_callback=update_progress,
        )
        progress.update(
            task,
            completed=len(snapshot.reports),
            total=len(snapshot.reports),
            description="Scan complete!",
        )

    show_snapshot(snapshot)
    return snapshot


def run_shell(session: Session) -> Session:
    """
    Scan, display and read commands until the user quits.

    Returns:
        The session as it was when the loop ended

    Raises:
        InvalidScanRootError: If the current directory stops being a directory
    """
    completer = ShellCompleter()
    completer.install()

    while True:
        if not session.path.is_dir():
            raise InvalidScanRootError(session.path)

        try:
            scan_and_display(session)
        except UnreadableScanRootError as e:
            show_error(str(e))
        completer.entries = child_names(session.path)

        try:
            line = read_line(f"{session.path}> ")
        except KeyboardInterrupt:
            console.print("Ctrl-C")
            break
        except EOFError:
            console.print("Ctrl-D")
            break

        outcome = apply_command(session, parse_command(line))
        if outcome.message:
            console.print(Text(outcome.message))
        if outcome.quit:
            break
        if outcome.session.path != session.path:
            log.info("Navigated to %s", outcome.session.path)
        session = outcome.session

    return session
