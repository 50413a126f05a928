"""Copying files between the live and store trees."""

import logging
import os
import shutil
from pathlib import Path

from .errors import CopyError

logger = logging.getLogger(__name__)


def copy_file(src: Path, dst: Path) -> None:
    """
    Copy a file's bytes, creating parent directories if needed.

    An existing destination is overwritten. Permissions and timestamps are
    not carried over.

    Raises:
        CopyError: if the source cannot be read or the destination written
    """
    try:
        os.makedirs(os.path.dirname(dst), exist_ok=True)
        shutil.copyfile(src, dst)
    except (OSError, shutil.Error) as e:
        raise CopyError(Path(src), Path(dst), e) from e
    logger.debug("Copied %s -> %s", src, dst)
