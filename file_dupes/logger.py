"""
This module reports what happens during a scan to the console and, optionally,
to a log file on disk.
"""

from pathlib import Path
import time
import sys
from traceback import format_exception
from typing import Optional, TextIO

class Logger:
    """
    Logs info from program runtime.

    Entries are classified as `log`, `warn`, or `error`, depending on severity.
    Warnings and errors are always written to `stream`; plain `log` entries
    only when `verbose` is set. If a `log_file` is given, every entry is also
    written there with a timestamp. When used with Python's `with` syntax, any
    Exceptions raised inside of the `with` block are logged (but not caught).

    Attributes:
        verbose:
          A `bool` representing whether `log` entries reach `stream`. This
          attribute can be changed even after the class is inited.
        warnings:
          A list of every warning logged so far, without prefixes.
    """
    def __init__(self,
                 stream: Optional[TextIO]=None,
                 log_file: Optional[Path]=None,
                 log_exception: bool=True,
                 verbose: bool=False
                ) -> None:
        """
        Inits a Logger.

        Arguments:
            stream:
              Where console output goes. Defaults to `sys.stderr`, so stdout
              stays reserved for the report.
            log_file:
              A `Path` object representing where to store a log file, or
              `None` to skip writing one.
            log_exception:
              A `bool` representing whether to log exceptions that occur within
              the `with` block the `Logger` is instantiated from.
            verbose:
              See `Logger.verbose`.

        Raises:
            FileExistsError:
              The `log_file` given already exists.
        """
        if log_file is not None and not isinstance(log_file, Path):
            raise TypeError("Log file must be of type path.")
        if log_file is not None and log_file.exists():
            raise FileExistsError(f"Log file path already exists. Won't clobber. {log_file}")

        self._stream = stream if stream is not None else sys.stderr
        self._verbose = bool(verbose)
        self._log_exception = bool(log_exception)
        self._closed = False
        self._warnings: list[str] = []

        self._fd = None
        if log_file is not None:
            self._fd = log_file.open(mode="xt", encoding="utf8", errors="backslashreplace")
            self._fd.write(f"[{get_time()}] START OF LOG\n")

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if self._closed:
            return

        if exc_type and self._log_exception:
            tb = format_exception(exc_type, exc_value, traceback)
            self._write_file("ERROR: " + "".join(tb))
            self._write_file("ERROR: Closing due to uncaught exception.\n")
        self.close()

    def _write_file(self, text: str) -> None:
        if self._fd is not None:
            self._fd.write(f"[{get_time()}] {text}")

    def _write(self, text: str, to_stream: bool) -> None:
        """Lets us write to log without any severity prefixes."""
        if self._closed:
            raise ValueError("Can't write to log because it is already closed.")

        self._write_file(text)
        if to_stream:
            self._stream.write(text)
            self._stream.flush()

    @property
    def verbose(self) -> bool:
        """A `bool` representing whether `log` entries reach the stream."""
        return self._verbose

    @verbose.setter
    def verbose(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError("verbose must be a bool.")
        self._verbose = value

    @property
    def warnings(self) -> list[str]:
        """Every warning logged so far."""
        return list(self._warnings)

    def log(self, text: str) -> None:
        """Logs text."""
        self._write(text + "\n", self._verbose)

    def warn(self, text: str) -> None:
        """Logs a warning."""
        self._warnings.append(text)
        self._write("WARNING: " + text + "\n", True)

    def error(self, text: str) -> None:
        """Logs an error."""
        self._write("ERROR: " + text + "\n", True)

    def close(self) -> None:
        """Close the log file, if there is one."""
        if self._closed:
            return

        if self._fd is not None:
            self._fd.write(f"[{get_time()}] END OF LOG\n")
            self._fd.close()
        self._closed = True

def get_time() -> str:
    """Returns the current time in a nicely formatted string."""
    return time.strftime("%Y-%m-%d %H:%M:%S")
