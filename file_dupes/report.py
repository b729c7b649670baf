"""
Turns duplicate groups into the tab-separated report, plus the spinner shown
on stderr while a scan runs.
"""

import os
from datetime import datetime, timezone
from typing import Generator, Iterable, NamedTuple, Optional, TextIO

from rich.color import ColorSystem
from rich.style import Style

from file_dupes.errors import TimestampFormatError
from file_dupes.file_index import DuplicateGroup
from file_dupes.logger import Logger

REPORT_HEADER = "Group\tPath\tLast Modified"

_ODD_GROUP_STYLE = Style.parse("black on white")
_EVEN_GROUP_STYLE = Style.parse("bright_white on black")

class DuplicateRow(NamedTuple):
    """One line of the report: a member of a duplicate group."""
    group_id: int
    path: str
    mtime: int

def display_path(path: str) -> str:
    """
    Makes `path` safe to print. Bytes of a file name that don't decode are
    shown as `\\xNN` escapes instead of failing on a strict UTF-8 stream.
    """
    return os.fsencode(path).decode("utf-8", errors="backslashreplace")

def format_mtime(mtime: int) -> str:
    """
    Renders seconds since the epoch as a UTC time, e.g.
    `2024-03-01 12:30:00+00:00`.

    Raises:
        TimestampFormatError:
          `mtime` is outside the range a calendar date can hold.
    """
    try:
        return datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat(sep=" ")
    except (OverflowError, OSError, ValueError) as err:
        raise TimestampFormatError(mtime) from err

def group_rows(groups: Iterable[DuplicateGroup]) -> Generator[DuplicateRow, None, None]:
    """Flattens `groups` into one `DuplicateRow` per member, in report order."""
    for group in groups:
        for member in group.members:
            yield DuplicateRow(group.group_id, member.path, member.mtime)

def format_row(row: DuplicateRow, logger: Optional[Logger]=None) -> str:
    """
    Renders `row` as a tab-separated report line.

    A row whose mtime can't be formatted is listed as `invalid mtime <n>` and a
    warning is logged; the rest of the report is unaffected.
    """
    path = display_path(row.path)
    try:
        timestamp = format_mtime(row.mtime)
    except TimestampFormatError as err:
        if logger is not None:
            logger.warn(f"Corrupt metadata for '{path}': {err}")
        timestamp = f"invalid mtime {row.mtime}"
    return f"{row.group_id}\t{path}\t{timestamp}"

def report_lines(groups: Iterable[DuplicateGroup],
                 logger: Optional[Logger]=None
                ) -> Generator[str, None, None]:
    """Yields the report header, then one line per duplicate group member."""
    yield REPORT_HEADER
    for row in group_rows(groups):
        yield format_row(row, logger)

def write_report(groups: Iterable[DuplicateGroup],
                 stream: TextIO,
                 color: bool=False,
                 logger: Optional[Logger]=None
                ) -> None:
    """
    Writes the report to `stream`.

    With `color`, groups alternate between black-on-white (odd ids) and
    bright-white-on-black (even ids). The header is never styled.
    """
    stream.write(REPORT_HEADER + "\n")
    for row in group_rows(groups):
        line = format_row(row, logger)
        if color:
            style = _EVEN_GROUP_STYLE if row.group_id % 2 == 0 else _ODD_GROUP_STYLE
            line = style.render(line, color_system=ColorSystem.STANDARD)
        stream.write(line + "\n")
    stream.flush()

class Spinner:
    """
    Draws a rotating `Loading: |` indicator, rewritten in place on `stream`.

    Pass the instance as a `Scanner` progress callback. Call `clear` before
    anything else is written to the same terminal.
    """
    FRAMES = ("|", "/", "-", "\\")

    def __init__(self, stream: TextIO, enabled: bool=True) -> None:
        self._stream = stream
        self._enabled = bool(enabled)
        self._drawn = False

    def __call__(self, count: int) -> None:
        if not self._enabled:
            return
        self._stream.write(f"Loading: {self.FRAMES[count % len(self.FRAMES)]}\r")
        self._stream.flush()
        self._drawn = True

    def clear(self) -> None:
        """Erases the spinner line, if it was ever drawn."""
        if self._drawn:
            self._stream.write(" " * 10 + "\r")
            self._stream.flush()
            self._drawn = False
