"""Exceptions raised by the mirror engine."""

from pathlib import Path


class MirrorError(Exception):
    """Base class for all errors reported to the user."""


class UsageError(MirrorError):
    """A command was invoked without the arguments it needs."""


class ConfigError(MirrorError):
    """The store registry is inconsistent."""


class PathNotFoundError(MirrorError):
    """A named path does not exist on the side a command needs."""


class UnresolvedPathError(MirrorError):
    """A path is under neither a live tree nor a store tree."""

    def __init__(self, path: Path):
        super().__init__(f"path {path} is not under any known tree")
        self.path = path


class CopyError(MirrorError):
    """A file could not be copied between trees."""

    def __init__(self, src: Path, dst: Path, error: OSError):
        super().__init__(f"could not copy from {src} to {dst}: {error}")
        self.src = src
        self.dst = dst
        self.error = error


class NotAFileError(MirrorError):
    """A path that should be a file is a directory."""

    def __init__(self, path: Path):
        super().__init__(f"path {path} is a directory, not a file")
        self.path = path
