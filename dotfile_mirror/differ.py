"""Content comparison between a store file and its live counterpart."""

import difflib
import os
from pathlib import Path

from .errors import NotAFileError
from .scanner import compute_file_hash

N_LINES_DIFF_CONTEXT = 3


def files_identical(path_a: Path, path_b: Path) -> bool:
    """Check whether two files hold the same bytes."""
    if os.path.getsize(path_a) != os.path.getsize(path_b):
        return False
    return compute_file_hash(path_a) == compute_file_hash(path_b)


def _read_lines(path: Path) -> list[bytes]:
    if os.path.isdir(path):
        raise NotAFileError(Path(path))
    with open(path, 'rb') as f:
        return f.readlines()


def compute_diff(path_a: Path, path_b: Path) -> str:
    """
    Produce a unified diff from path_a to path_b.

    Both files must exist. Returns an empty string exactly when the files
    have the same lines. Lines are compared as raw bytes, so files that differ
    only in undecodable bytes still produce a diff; those bytes are shown
    as replacement characters.

    Raises:
        NotAFileError: if either path is a directory
    """
    lines_a = _read_lines(path_a)
    lines_b = _read_lines(path_b)
    if files_identical(path_a, path_b):
        return ""

    diff_lines = difflib.diff_bytes(
        difflib.unified_diff,
        lines_a,
        lines_b,
        fromfile=os.fsencode(path_a),
        tofile=os.fsencode(path_b),
        n=N_LINES_DIFF_CONTEXT,
    )

    output = []
    for line in diff_lines:
        if not line.endswith(b"\n"):
            line += b"\n\\ No newline at end of file\n"
        output.append(line)
    return b"".join(output).decode("utf-8", errors="replace")
