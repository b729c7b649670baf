"""Exceptions raised while scanning and reporting duplicate files."""

from pathlib import Path


class FileDupesError(Exception):
    """Base class for every error raised by this package."""


class UsageError(FileDupesError, ValueError):
    """The tool was invoked with invalid options or config values."""


class TraversalError(FileDupesError):
    """
    A filesystem entry couldn't be read during a scan.

    Attributes:
        path:
          The path of the entry that failed.
        cause:
          The underlying `OSError`.
    """
    def __init__(self, path: str | Path, cause: OSError) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Couldn't read '{self.path}': {cause}")


class RootPathError(TraversalError):
    """The root directory of a scan is missing or unreadable. Always fatal."""


class TimestampFormatError(FileDupesError, ValueError):
    """A stored mtime can't be represented as a calendar time."""
    def __init__(self, mtime: int) -> None:
        self.mtime = mtime
        super().__init__(f"mtime out of range: {mtime}")
