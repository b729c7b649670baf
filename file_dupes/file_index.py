"""
Holds scanned file metadata in a transient SQLite index and answers the
duplicate query.
"""

import os
import sqlite3
from pathlib import Path
from typing import Generator, NamedTuple, Optional

from file_dupes.file_record import FileRecord, DbFileRecord

_DUPLICATE_ROWS_SQL = """
    SELECT path, size, mtime, hash FROM files WHERE hash IN (
        SELECT hash FROM files GROUP BY hash HAVING COUNT(*) > 1
    ) ORDER BY hash ASC, path ASC
"""

class DuplicateGroup(NamedTuple):
    """Files that share one content hash, ordered by path."""
    group_id: int
    hash: int
    members: list[DbFileRecord]

class FileIndex:
    """
    An in-memory index of `FileRecord`s keyed by path.

    The index lives in a `:memory:` SQLite connection and is gone once it is
    closed. Adding a file whose path is already present replaces the old
    record.

    Attributes:
        is_closed:
          Whether `close` has been called.
    """

    def __init__(self) -> None:
        self._conn: Optional[sqlite3.Connection] = sqlite3.connect(":memory:")
        self._conn.row_factory = sqlite3.Row
        self._is_closed = False
        self._bootstrap()

    def __enter__(self) -> "FileIndex":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def add_file(self, record: FileRecord) -> None:
        """Inserts `record`, replacing any record with the same path."""
        self._assert_open()
        if not isinstance(record, FileRecord):
            raise TypeError("File given isn't a FileRecord object.")

        self._conn.execute(
            "INSERT OR REPLACE INTO files (path, size, mtime, hash) VALUES (:path, :size, :mtime, :hash)",
            record.as_sql_dict()
        )

    def get_file(self, file: FileRecord | str | Path) -> DbFileRecord | None:
        """Finds the record stored under the path of `file`."""
        self._assert_open()
        cur = self._conn.execute("SELECT * FROM files WHERE path = ?", (self._path_key(file),))
        result = cur.fetchone()
        cur.close()
        if result is None:
            return None
        return DbFileRecord(result)

    def does_exist(self, file: FileRecord | str | Path) -> bool:
        """Checks whether a record is stored under the path of `file`."""
        self._assert_open()
        cur = self._conn.execute("SELECT 1 FROM files WHERE path = ?", (self._path_key(file),))
        result = cur.fetchone()
        cur.close()
        return result is not None

    def count(self) -> int:
        """Number of records in the index."""
        self._assert_open()
        (total,) = self._conn.execute("SELECT COUNT(*) FROM files").fetchone()
        return total

    def get_all_files(self) -> Generator[DbFileRecord, None, None]:
        """Yields every record, ordered by path."""
        self._assert_open()
        cur = self._conn.execute("SELECT * FROM files ORDER BY path ASC")
        try:
            for row in cur:
                yield DbFileRecord(row)
        finally:
            cur.close()

    def duplicate_rows(self) -> Generator[DbFileRecord, None, None]:
        """
        Yields every record whose hash is shared with at least one other
        record.

        Rows come ordered by hash (as an unsigned number), then by path
        (byte-wise). Records with a unique hash are never yielded.
        """
        self._assert_open()
        cur = self._conn.execute(_DUPLICATE_ROWS_SQL)
        try:
            for row in cur:
                yield DbFileRecord(row)
        finally:
            cur.close()

    def duplicate_groups(self) -> Generator[DuplicateGroup, None, None]:
        """
        Groups `duplicate_rows` into numbered `DuplicateGroup`s.

        Group numbers start at 1 and go up by one each time the hash changes
        from the previous row. This only works because the rows are already
        sorted by hash.
        """
        previous_hash: Optional[int] = None
        group_id = 0
        members: list[DbFileRecord] = []

        for record in self.duplicate_rows():
            if record.hash != previous_hash:
                if members:
                    yield DuplicateGroup(group_id, previous_hash, members)
                previous_hash, group_id, members = record.hash, group_id + 1, []
            members.append(record)

        if members:
            yield DuplicateGroup(group_id, previous_hash, members)

    def close(self) -> None:
        """Closes the index, discarding everything in it."""
        if self._is_closed:
            return

        self._conn.close()
        self._conn = None
        self._is_closed = True

    def _bootstrap(self) -> None:
        # Paths and hashes are blobs so comparisons are plain byte order.
        self._conn.execute("""
            CREATE TABLE files (
                path blob primary key not null,
                size int not null,
                mtime int not null,
                hash blob not null
            );
        """)
        self._conn.execute("CREATE INDEX idx_files_size ON files (size)")
        self._conn.execute("CREATE INDEX idx_files_hash ON files (hash)")

    def _assert_open(self) -> None:
        if self._is_closed:
            raise ValueError("Can't use the index because it is already closed.")

    @staticmethod
    def _path_key(file: FileRecord | str | Path) -> bytes:
        if isinstance(file, FileRecord):
            return os.fsencode(file.path)
        if isinstance(file, (str, Path)):
            return os.fsencode(file)
        raise TypeError("File given isn't a FileRecord, str or Path.")

    @property
    def is_closed(self) -> bool:
        """Whether the index has been closed."""
        return self._is_closed
