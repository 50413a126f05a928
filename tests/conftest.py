"""Shared test fixtures."""

import tempfile
from pathlib import Path

import pytest

from dotfile_mirror.config import Config
from dotfile_mirror.engine import SyncEngine
from dotfile_mirror.models import PathPair, Store


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def home(temp_dir):
    """Create a live home tree with a few dotfiles."""
    home = temp_dir / "home"
    home.mkdir()

    (home / "file1").write_text("file1\n")
    (home / ".vimrc").write_text("set number\n")
    (home / "dir").mkdir()
    (home / "dir" / "file1").write_text("dir/file1\n")
    (home / "dir" / "subdir").mkdir()
    (home / "dir" / "subdir" / "file1").write_text("dir/subdir/file1\n")

    return home


@pytest.fixture
def config(temp_dir, home):
    """Config with the store nested inside the home tree."""
    return Config(
        config_dir=home / ".config" / "dotfile-mirror",
        home_dir=home,
        merge_command="vimdiff %s %h",
    )


@pytest.fixture
def store_root(config):
    return config.config_dir / "home"


@pytest.fixture
def engine(config):
    return SyncEngine(config)


@pytest.fixture
def sample_store(temp_dir):
    """A standalone Store whose trees are not nested."""
    return Store(
        name="home",
        store_root=temp_dir / "store" / "home",
        live_root=temp_dir / "live",
    )


@pytest.fixture
def sample_pair(temp_dir):
    """A path pair with neither side created yet."""
    return PathPair(live=temp_dir / "live" / "a.txt", store=temp_dir / "store" / "a.txt")
