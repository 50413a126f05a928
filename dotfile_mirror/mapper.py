"""Mapping between live paths and their store counterparts."""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from .errors import ConfigError, UnresolvedPathError
from .models import PathPair, Store

logger = logging.getLogger(__name__)


def _offset(path: Path, root: Path) -> Optional[Path]:
    """Return path relative to root, or None if root is not an ancestor.

    Membership is decided on whole path segments, so ``/home/al`` does not
    contain ``/home/alice``.
    """
    try:
        return path.relative_to(root)
    except ValueError:
        return None


def _nested(a: Path, b: Path) -> bool:
    return _offset(a, b) is not None or _offset(b, a) is not None


def normalize(path) -> Path:
    """Expand ``~`` and make a path absolute without following symlinks."""
    return Path(os.path.abspath(os.path.expanduser(str(path))))


class PathMapper:
    """Resolve any path to its (live, store) pair across registered stores."""

    def __init__(self, stores: Iterable[Store]):
        self.stores = [
            Store(store.name, normalize(store.store_root), normalize(store.live_root))
            for store in stores
        ]
        self._validate()

    def _validate(self) -> None:
        for store in self.stores:
            if store.store_root == store.live_root:
                raise ConfigError(
                    f"store {store.name}: store root and live root are both {store.live_root}"
                )
            for other in self.stores:
                if _offset(store.live_root, other.store_root) is not None:
                    raise ConfigError(
                        f"store {store.name}: live root {store.live_root} is inside "
                        f"the store root of {other.name}"
                    )

        for i, first in enumerate(self.stores):
            for second in self.stores[i + 1:]:
                if _nested(first.store_root, second.store_root):
                    raise ConfigError(
                        f"stores {first.name} and {second.name} have overlapping store roots"
                    )
                if _nested(first.live_root, second.live_root):
                    raise ConfigError(
                        f"stores {first.name} and {second.name} have overlapping live roots"
                    )

    def resolve(self, path) -> PathPair:
        """
        Return the PathPair a path belongs to.

        Store roots are checked before live roots, since a store tree usually
        lives inside a live tree (under the home directory).

        Raises:
            UnresolvedPathError: if no registered store claims the path
        """
        path = normalize(path)

        for store in self.stores:
            rel = _offset(path, store.store_root)
            if rel is not None:
                logger.debug("%s is in store %s at %s", path, store.name, rel)
                return PathPair(live=store.live_root / rel, store=path)

        for store in self.stores:
            rel = _offset(path, store.live_root)
            if rel is not None:
                logger.debug("%s is in live tree %s at %s", path, store.name, rel)
                return PathPair(live=path, store=store.store_root / rel)

        raise UnresolvedPathError(path)
