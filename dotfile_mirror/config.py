"""Configuration for the mirror engine.

The engine never reads the environment itself. ``load_config`` is the single
place where ``HOME`` and the ``DOTFILE_MIRROR_*`` variables are consulted.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .models import Store

# Name of the store subdirectory holding the user's home tree
HOME_STORE_NAME = "home"

DEFAULT_MERGE_COMMAND = "vimdiff %s %h"

# Placeholders in the merge command template
STORE_PLACEHOLDER = "%s"
LIVE_PLACEHOLDER = "%h"

CONFIG_DIR_ENV = "DOTFILE_MIRROR_DIR"
MERGE_COMMAND_ENV = "DOTFILE_MIRROR_MERGE"


def _absolute(path) -> Path:
    return Path(os.path.abspath(os.path.expanduser(str(path))))


@dataclass
class Config:
    """Explicit settings passed into the engine."""
    config_dir: Path
    home_dir: Path
    merge_command: str = DEFAULT_MERGE_COMMAND
    stores: list[Store] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.config_dir = _absolute(self.config_dir)
        self.home_dir = _absolute(self.home_dir)
        if not self.stores:
            self.stores = [
                Store(
                    name=HOME_STORE_NAME,
                    store_root=self.config_dir / HOME_STORE_NAME,
                    live_root=self.home_dir,
                )
            ]
        self.stores = [
            Store(store.name, _absolute(store.store_root), _absolute(store.live_root))
            for store in self.stores
        ]


def load_config(
    config_dir: Optional[str] = None,
    home_dir: Optional[str] = None,
    merge_command: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    Build a Config from explicit values, falling back to the environment.

    Args:
        config_dir: Directory holding the store trees
        home_dir: Live root for the home store
        merge_command: External merge template with %s and %h placeholders
        environ: Environment mapping (defaults to os.environ)
    """
    if environ is None:
        environ = os.environ

    home = home_dir or environ.get("HOME") or str(Path.home())
    config = (
        config_dir
        or environ.get(CONFIG_DIR_ENV)
        or os.path.join(home, ".config", "dotfile-mirror")
    )
    merge = merge_command or environ.get(MERGE_COMMAND_ENV) or DEFAULT_MERGE_COMMAND

    return Config(config_dir=Path(config), home_dir=Path(home), merge_command=merge)
