"""Common utils"""

import os
from pathlib import Path
from typing import Callable, Generator

import xxhash

from file_dupes.errors import RootPathError, TraversalError

CHUNK_SIZE = 4096
HASH_SEED = 0
HASH_BYTES = 8

def hash_bytes(data: bytes) -> int:
    """Returns the seeded XXH64 digest of `data` as an unsigned int."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("Data to hash must be bytes-like.")
    return xxhash.xxh64_intdigest(data, seed=HASH_SEED)

def hash_file(path: str | Path, chunk_size: int=CHUNK_SIZE) -> int:
    """
    Streams the file at `path` through a seeded XXH64 hasher.

    The digest only depends on the file's bytes, so any `chunk_size` gives the
    same result as `hash_bytes` over the whole content.

    Raises:
        OSError:
          The file couldn't be opened or read.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive.")

    hasher = xxhash.xxh64(seed=HASH_SEED)
    with open(path, mode="rb") as f:
        while True:
            data = f.read(chunk_size)
            if data:
                hasher.update(data)
            else:
                break
    return hasher.intdigest()

def hash_to_bytes(file_hash: int) -> bytes:
    """Big-endian encoding, so byte order sorts like the unsigned value."""
    return file_hash.to_bytes(HASH_BYTES, "big")

def hash_from_bytes(raw: bytes) -> int:
    """Inverse of `hash_to_bytes`."""
    if not isinstance(raw, bytes) or len(raw) != HASH_BYTES:
        raise ValueError(f"A stored hash must be {HASH_BYTES} bytes.")
    return int.from_bytes(raw, "big")

def _list_dir(path: str) -> list[os.DirEntry]:
    with os.scandir(path) as it:
        return list(it)

def walk_files(root: str | Path,
               error_handler: Callable[[TraversalError], None]
              ) -> Generator[str, None, None]:
    """
    Yields the path of every regular file below `root`, depth first.

    Entries are visited in the order the platform enumerates them. A
    subdirectory is fully walked before its later siblings. Pending
    directories live on an explicit stack, so deep trees can't exhaust the
    interpreter's recursion limit. Sockets, FIFOs, devices and dangling
    symlinks are skipped.

    Arguments:
        root:
          Directory to walk. Yielded paths are `root` joined with entry names.
        error_handler:
          Called with a `TraversalError` whenever a directory below `root`
          can't be listed or an entry's type can't be determined. It may raise
          to abort the walk.

    Raises:
        RootPathError:
          `root` itself isn't a readable directory.
    """
    if not callable(error_handler):
        raise TypeError("error_handler must be a function.")

    root = os.fspath(root)
    try:
        pending = [iter(_list_dir(root))]
    except OSError as err:
        raise RootPathError(root, err) from err

    while pending:
        entry = next(pending[-1], None)
        if entry is None:
            pending.pop()
            continue

        try:
            if entry.is_dir():
                pending.append(iter(_list_dir(entry.path)))
                continue
            is_file = entry.is_file()
        except OSError as err:
            error_handler(TraversalError(entry.path, err))
            continue

        if is_file:
            yield entry.path
