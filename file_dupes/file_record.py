"""
Captures the metadata of scanned files.

This module contains classes that give consistent access to a file's path,
size, modification time and content hash, whether the file was just read from
disk or pulled back out of a `FileIndex`.
"""

import os
import stat
from pathlib import Path
from typing import Mapping, Optional

from file_dupes import utils

class FileRecord:
    """
    Abstracts a file on disk into an object containing its metadata.

    The size and mtime are read when the object is created. The hash requires
    reading the whole file, so it is only computed on first access and cached
    afterwards.

    Attributes:
        path:
          The path of the file exactly as it was given (not resolved), so
          records of a relative scan keep relative paths.
        size:
          File size in bytes.
        mtime:
          Last modification time, in whole seconds since the UNIX epoch.
        hash:
          An `int` holding the unsigned 64-bit XXH64 digest of the contents.
    """
    def __init__(self, path: str | Path) -> None:
        """
        Stats the file at `path`.

        Raises:
            TypeError:
              `path` isn't a `str` or `Path`.
            FileNotFoundError:
              Nothing exists at `path`, or it isn't a regular file.
            OSError:
              The file's metadata couldn't be read.
        """
        if not isinstance(path, (str, Path)):
            raise TypeError("Path argument must be a str or pathlib.Path object.")

        self._path = os.fspath(path)
        file_stat = os.stat(self._path)
        if not stat.S_ISREG(file_stat.st_mode):
            raise FileNotFoundError(f"Given path '{self._path}' is not a file.")

        self._size = file_stat.st_size
        # Floor division keeps pre-epoch mtimes rounding down, like st_mtime.
        self._mtime = file_stat.st_mtime_ns // 1_000_000_000
        self._hash: Optional[int] = None

    def as_sql_dict(self) -> dict:
        """
        Returns the metadata as a dict of `FileIndex` column values.

        The path is stored as its filesystem bytes and the hash as 8 big-endian
        bytes, so SQLite's byte-wise comparison orders both columns the way
        the duplicate report needs. Reads the file if it hasn't been hashed
        yet.
        """
        return {
            "path": os.fsencode(self.path),
            "size": self.size,
            "mtime": self.mtime,
            "hash": utils.hash_to_bytes(self.hash)
        }

    @property
    def hash(self) -> int:
        """The XXH64 digest of the file's contents."""
        if self._hash is None:
            self._hash = utils.hash_file(self._path)
        return self._hash

    @property
    def path(self) -> str:
        """The path of the file."""
        return self._path

    @property
    def size(self) -> int:
        """The size of the file in bytes."""
        return self._size

    @property
    def mtime(self) -> int:
        """The time of last modification of the file in seconds."""
        return self._mtime

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileRecord):
            return NotImplemented
        return (self.path, self.size, self.mtime, self.hash) == \
               (other.path, other.size, other.mtime, other.hash)

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(path={self.path!r}, size={self.size}, "
                f"mtime={self.mtime}, hash={self._hash!r})")

class DbFileRecord(FileRecord):
    """
    Creates a record from precomputed metadata.

    This is the inverse of `FileRecord.as_sql_dict`: it is built from a row of
    a `FileIndex` and never accesses the filesystem.
    """
    def __init__(self, row: Mapping) -> None:
        """
        Inits a `DbFileRecord` from a mapping with `path`, `size`, `mtime`
        and `hash` keys, in the form produced by `FileRecord.as_sql_dict`.
        """
        row = dict(row)
        if not isinstance(row.get("path"), (bytes, str)):
            raise TypeError("row['path'] wasn't bytes or a string.")
        if not isinstance(row.get("hash"), bytes):
            raise TypeError("row['hash'] wasn't of type bytes.")
        if not isinstance(row.get("size"), int):
            raise TypeError("row['size'] wasn't of type int.")
        if not isinstance(row.get("mtime"), int):
            raise TypeError("row['mtime'] wasn't of type int.")

        self._path = os.fsdecode(row["path"])
        self._hash = utils.hash_from_bytes(row["hash"])
        self._size = row["size"]
        self._mtime = row["mtime"]

    # A DbFileRecord always has its hash already.
    @property
    def hash(self) -> int:
        """See base class."""
        return self._hash
