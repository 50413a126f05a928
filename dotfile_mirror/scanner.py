"""Tree walking and content hashing."""

import logging
import os
from pathlib import Path
from typing import Iterable

import xxhash

from .models import Store

logger = logging.getLogger(__name__)


def compute_file_hash(file_path: Path, chunk_size: int = 65536) -> str:
    """Compute hash of a file using xxhash (fast hashing algorithm)."""
    hasher = xxhash.xxh64()
    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)
    return hasher.hexdigest()


def child_files(folder_path: Path) -> list[Path]:
    """
    List every non-directory entry below a folder, hidden ones included.

    Symlinks to directories count as directories and are not descended into.
    Entries are sorted per directory so repeated runs list files in the same
    order.
    """
    files = []
    for root, dirnames, filenames in os.walk(folder_path):
        dirnames.sort()
        for filename in sorted(filenames):
            files.append(Path(root) / filename)
    return files


def expand(path: Path) -> list[Path]:
    """
    Expand a path into the files it names.

    A directory yields every file beneath it. A file, or a path that does not
    exist, yields itself; callers decide whether absence is an error.
    """
    path = Path(path)
    if path.is_dir():
        files = child_files(path)
        logger.debug("Expanded %s into %d files", path, len(files))
        return files
    return [path]


def walk_stores(stores: Iterable[Store]) -> list[Path]:
    """List every file currently held under any store root."""
    files = []
    for store in stores:
        if not store.store_root.is_dir():
            logger.debug("Store %s has no files yet: %s", store.name, store.store_root)
            continue
        files.extend(child_files(store.store_root))
    return files
