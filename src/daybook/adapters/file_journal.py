"""File-based journal storage adapter."""

import logging
import threading
from datetime import date
from pathlib import Path
from typing import Callable, TypeVar

from daybook.core.days import extract_day_content, update_day_content
from daybook.core.entries import Entry, EntryType, Line, RawLine, parse_lines, serialize_lines
from daybook.core.filters import Filter, FilterEntry, collect_filtered_entries
from daybook.core.projection import ProjectedEntry, collect_projected_entries
from daybook.errors import ProjectJournalError
from daybook.ports.journal_store import JournalSlot

logger = logging.getLogger(__name__)

PROJECT_DIR_NAME = ".daybook"
PROJECT_JOURNAL_NAME = "journal.md"

T = TypeVar("T")


class JournalContext:
    """
    The active journal selection: a global path, an optional project path,
    and which one is in use.

    Shared by everything that touches storage; reads and switches go
    through a single lock.
    """

    def __init__(
        self,
        global_path: Path | str,
        project_path: Path | str | None = None,
        active: JournalSlot = JournalSlot.GLOBAL,
    ):
        self._lock = threading.RLock()
        self._global_path = Path(global_path).expanduser()
        self._project_path = Path(project_path).expanduser() if project_path else None
        self._active = active

    @property
    def global_path(self) -> Path:
        with self._lock:
            return self._global_path

    @property
    def project_path(self) -> Path | None:
        with self._lock:
            return self._project_path

    @property
    def active_slot(self) -> JournalSlot:
        with self._lock:
            return self._active

    def set_active_slot(self, slot: JournalSlot) -> None:
        with self._lock:
            logger.debug(f"Switching active journal to {slot.value}")
            self._active = slot

    def active_path(self) -> Path:
        """Path of the active journal. A missing project path falls back to global."""
        with self._lock:
            if self._active is JournalSlot.PROJECT and self._project_path is not None:
                return self._project_path
            return self._global_path


class FileJournalStore:
    """
    File-based journal storage.

    Implements JournalStore protocol. The whole journal lives in one
    markdown file; every read loads the full file and every write
    rewrites it.
    """

    def __init__(self, context: JournalContext | Path | str):
        if not isinstance(context, JournalContext):
            context = JournalContext(context)
        self.context = context

    @property
    def path(self) -> Path:
        return self.context.active_path()

    # ============== Whole document ==============

    def load_journal(self) -> str:
        """Read the whole journal. Returns an empty string if it does not exist."""
        path = self.path
        if not path.exists():
            return ""
        logger.debug(f"Loading journal {path}")
        return path.read_text()

    def save_journal(self, content: str) -> None:
        """Write the whole journal, creating parent directories."""
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Saving journal {path}")
        path.write_text(content)

    def switch_journal(self, slot: JournalSlot) -> None:
        self.context.set_active_slot(slot)

    # ============== Day sections ==============

    def load_day(self, target_date: date) -> str:
        return extract_day_content(self.load_journal(), target_date)

    def save_day(self, target_date: date, content: str) -> None:
        """Replace one day's section. Blank content removes the day."""
        journal = self.load_journal()
        self.save_journal(update_day_content(journal, target_date, content))

    def load_day_lines(self, target_date: date) -> list[Line]:
        return parse_lines(self.load_day(target_date))

    def save_day_lines(self, target_date: date, lines: list[Line]) -> None:
        self.save_day(target_date, serialize_lines(lines))

    def append_entry(self, target_date: date, entry: Entry) -> int:
        """Add an entry at the end of a day, creating the day. Returns its line index."""
        lines = self.load_day_lines(target_date)
        lines.append(entry)
        self.save_day_lines(target_date, lines)
        return len(lines) - 1

    # ============== Line-indexed mutation ==============

    def mutate_entry(self, target_date: date, line_index: int, operation: Callable[[Entry], T]) -> T | None:
        """
        Apply an operation to the entry at a line index and save the day.

        Returns the operation's result. None means nothing changed and the
        file is left as it was: the index is out of range, points at a raw
        line, or the operation itself returned None.
        """
        lines = self.load_day_lines(target_date)
        if not 0 <= line_index < len(lines):
            return None
        line = lines[line_index]
        if not isinstance(line, Entry):
            return None
        result = operation(line)
        if result is not None:
            self.save_day_lines(target_date, lines)
        return result

    def update_entry_content(self, target_date: date, line_index: int, content: str) -> bool:
        """
        Replace the text of the line at an index.

        For an entry this is the text after its prefix; a raw line is
        replaced whole. Returns False if the index is out of range.
        """
        lines = self.load_day_lines(target_date)
        if not 0 <= line_index < len(lines):
            return False
        line = lines[line_index]
        if isinstance(line, Entry):
            line.content = content
        else:
            lines[line_index] = RawLine(content)
        self.save_day_lines(target_date, lines)
        return True

    def toggle_entry_complete(self, target_date: date, line_index: int) -> bool:
        """Toggle completion of the task at an index. Returns False if there is no task there."""

        def toggle(entry: Entry) -> bool | None:
            if not entry.is_task:
                return None
            entry.toggle_complete()
            return True

        return self.mutate_entry(target_date, line_index, toggle) is not None

    def cycle_entry_type(self, target_date: date, line_index: int) -> EntryType | None:
        """Cycle the type of the entry at an index. Returns the new type."""

        def cycle(entry: Entry) -> EntryType:
            entry.cycle_type()
            return entry.entry_type

        return self.mutate_entry(target_date, line_index, cycle)

    def delete_entry(self, target_date: date, line_index: int) -> bool:
        """Delete the line at an index, whatever kind of line it is."""
        lines = self.load_day_lines(target_date)
        if not 0 <= line_index < len(lines):
            return False
        del lines[line_index]
        self.save_day_lines(target_date, lines)
        return True

    # ============== Queries ==============

    def collect_projected_entries(self, target_date: date) -> list[ProjectedEntry]:
        """Later and recurring entries from other days that land on a date."""
        return collect_projected_entries(self.load_journal(), target_date)

    def collect_filtered_entries(self, filter_: Filter, today: date | None = None) -> list[FilterEntry]:
        """All entries matching a filter. An invalid filter never reads the file."""
        if not filter_.is_valid:
            return []
        return collect_filtered_entries(self.load_journal(), filter_, today)


# ============== Project journals ==============


def find_git_root(start: Path | None = None) -> Path | None:
    """Nearest directory at or above start (default: cwd) that contains .git."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        if (directory / ".git").exists():
            return directory
    return None


def detect_project_journal(start: Path | None = None) -> Path | None:
    """
    Locate the project journal, if one exists.

    Inside a git repository only the repository root is checked;
    otherwise the working directory is.
    """
    root = find_git_root(start) or (start or Path.cwd())
    journal = root / PROJECT_DIR_NAME / PROJECT_JOURNAL_NAME
    return journal if journal.exists() else None


def create_project_journal(start: Path | None = None) -> Path:
    """Create an empty project journal at the git root and return its path."""
    root = find_git_root(start)
    if root is None:
        raise ProjectJournalError("Not in a git repository")

    journal = root / PROJECT_DIR_NAME / PROJECT_JOURNAL_NAME
    journal.parent.mkdir(parents=True, exist_ok=True)
    if not journal.exists():
        journal.write_text("")
        logger.info(f"Created project journal {journal}")
    add_to_gitignore(root)
    return journal


def add_to_gitignore(root: Path) -> None:
    """Add the project directory to the repository's .gitignore once."""
    gitignore = root / ".gitignore"
    line = f"{PROJECT_DIR_NAME}/"

    if not gitignore.exists():
        gitignore.write_text(f"{line}\n")
        return

    content = gitignore.read_text()
    if any(existing.strip() == line for existing in content.splitlines()):
        return
    if content and not content.endswith("\n"):
        content += "\n"
    gitignore.write_text(f"{content}{line}\n")
