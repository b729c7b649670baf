import os
from pathlib import Path

from file_dupes import utils
from file_dupes.file_record import DbFileRecord

def make_tree(root: Path, files: dict[str, bytes], mtime: int | None=None) -> list[Path]:
    """
    Creates every file in `files` (relative path -> content) below `root`.
    If `mtime` is given, it is set on every file created.
    """
    created = []
    for rel_path, content in files.items():
        path = Path(root, rel_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        created.append(path)
    return created

def make_record(path: str, file_hash: int, size: int=1, mtime: int=0) -> DbFileRecord:
    """Builds a record without touching the disk."""
    return DbFileRecord({
        "path": os.fsencode(path),
        "size": size,
        "mtime": mtime,
        "hash": utils.hash_to_bytes(file_hash)
    })
