"""
Walks a directory tree, hashes every regular file, and feeds the results into
a `FileIndex`.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Generator, Optional

from file_dupes import utils
from file_dupes.errors import TraversalError
from file_dupes.file_index import FileIndex
from file_dupes.file_record import FileRecord
from file_dupes.logger import Logger

ON_ERROR_ABORT = "abort"
ON_ERROR_SKIP = "skip"

class ScanSummary:
    """
    Counts what happened during one scan.

    Attributes:
        files_indexed:
          Number of records produced.
        files_skipped:
          Number of entries dropped because of an I/O error. Always 0 when the
          scan aborts on errors.
        warnings:
          One message per skipped entry.
    """
    def __init__(self) -> None:
        self.files_indexed = 0
        self.files_skipped = 0
        self.warnings: list[str] = []

    def __repr__(self) -> str:
        return (f"ScanSummary(files_indexed={self.files_indexed}, "
                f"files_skipped={self.files_skipped})")

class Scanner:
    """
    Produces a `FileRecord` for every regular file below a root directory.

    Attributes:
        root:
          The directory being scanned.
        on_error:
          `"abort"` to stop at the first unreadable entry by raising a
          `TraversalError`, or `"skip"` to log a warning and carry on.
        workers:
          Number of threads hashing files. With 1, everything happens on the
          calling thread.
        summary:
          The `ScanSummary` of the current or most recent scan.
    """
    def __init__(self,
                 root: str | Path,
                 on_error: str=ON_ERROR_ABORT,
                 workers: int=1,
                 logger: Optional[Logger]=None,
                 progress: Optional[Callable[[int], None]]=None
                ) -> None:
        """
        Args:
            root:
              Directory to scan. Record paths are `root` joined with the names
              found below it, so a relative root gives relative paths.
            on_error:
              See `Scanner.on_error`.
            workers:
              See `Scanner.workers`.
            logger:
              Where skipped entries are reported. Optional.
            progress:
              Called with the running count after every indexed file.
        """
        if not isinstance(root, (str, Path)):
            raise TypeError("root must be a str or pathlib.Path object.")
        if on_error not in (ON_ERROR_ABORT, ON_ERROR_SKIP):
            raise ValueError(f"Invalid on_error policy: {on_error}")
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise ValueError("workers must be a positive integer.")
        if progress is not None and not callable(progress):
            raise TypeError("progress must be a function.")

        self._root = root
        self._on_error = on_error
        self._workers = workers
        self._logger = logger
        self._progress = progress
        self._summary = ScanSummary()

    def scan(self) -> Generator[FileRecord, None, None]:
        """
        Yields a hashed `FileRecord` for each regular file below the root.

        Raises:
            RootPathError:
              The root isn't a readable directory, whatever the policy.
            TraversalError:
              An entry couldn't be read and the policy is `"abort"`.
        """
        self._summary = ScanSummary()
        if self._logger is not None:
            self._logger.log(f"Scanning '{self._root}'...")

        paths = utils.walk_files(self._root, self._handle_error)
        if self._workers == 1:
            results = map(_read_record, paths)
            yield from self._collect(results)
        else:
            # `map` walks the whole tree on this thread before hashing starts,
            # so walk errors are handled here and never inside a worker.
            with ThreadPoolExecutor(max_workers=self._workers) as pool:
                yield from self._collect(pool.map(_read_record, paths))

    def scan_into(self, index: FileIndex) -> ScanSummary:
        """Adds every scanned record to `index`. Returns the `ScanSummary`."""
        if not isinstance(index, FileIndex):
            raise TypeError("index must be a FileIndex object.")

        for record in self.scan():
            index.add_file(record)

        if self._logger is not None:
            self._logger.log(f"Files indexed: {self._summary.files_indexed}")
            self._logger.log(f"Files skipped: {self._summary.files_skipped}")
        return self._summary

    def _collect(self, results) -> Generator[FileRecord, None, None]:
        for path, record, err in results:
            if err is not None:
                self._handle_error(TraversalError(path, err))
                continue

            self._summary.files_indexed += 1
            if self._progress is not None:
                self._progress(self._summary.files_indexed)
            yield record

    def _handle_error(self, error: TraversalError) -> None:
        if self._on_error == ON_ERROR_ABORT:
            raise error

        self._summary.files_skipped += 1
        self._summary.warnings.append(str(error))
        if self._logger is not None:
            self._logger.warn(f"Skipping: {error}")

    @property
    def root(self) -> str | Path:
        """The directory being scanned."""
        return self._root

    @property
    def on_error(self) -> str:
        """The error policy, `"abort"` or `"skip"`."""
        return self._on_error

    @property
    def workers(self) -> int:
        """Number of hashing threads."""
        return self._workers

    @property
    def summary(self) -> ScanSummary:
        """The `ScanSummary` of the current or most recent scan."""
        return self._summary

def _read_record(path: str) -> tuple[str, Optional[FileRecord], Optional[OSError]]:
    """Stats and hashes `path`, returning the error instead of raising it."""
    try:
        record = FileRecord(path)
        record.hash # Reads the file now, on this thread.
    except OSError as err:
        return path, None, err
    return path, record, None
