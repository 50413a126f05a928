"""Tests for dotfile_mirror.mapper module."""

import os
from pathlib import Path

import pytest

from dotfile_mirror.errors import ConfigError, UnresolvedPathError
from dotfile_mirror.mapper import PathMapper, normalize
from dotfile_mirror.models import PathPair, Store


class TestResolve:
    """Tests for PathMapper.resolve."""

    def test_live_path_maps_to_store(self, sample_store):
        mapper = PathMapper([sample_store])
        pair = mapper.resolve(sample_store.live_root / "dir" / "file1")

        assert pair == PathPair(
            live=sample_store.live_root / "dir" / "file1",
            store=sample_store.store_root / "dir" / "file1",
        )

    def test_store_path_maps_to_live(self, sample_store):
        mapper = PathMapper([sample_store])
        pair = mapper.resolve(sample_store.store_root / ".bashrc")

        assert pair.live == sample_store.live_root / ".bashrc"
        assert pair.store == sample_store.store_root / ".bashrc"

    def test_root_maps_to_other_root(self, sample_store):
        mapper = PathMapper([sample_store])

        assert mapper.resolve(sample_store.live_root).store == sample_store.store_root
        assert mapper.resolve(sample_store.store_root).live == sample_store.live_root

    def test_round_trip(self, sample_store):
        mapper = PathMapper([sample_store])
        for rel in ["a", ".hidden", "x/y/z.conf"]:
            pair = mapper.resolve(sample_store.live_root / rel)
            assert mapper.resolve(pair.store) == pair
            assert mapper.resolve(pair.live) == pair

    def test_structural_mirroring(self, sample_store):
        mapper = PathMapper([sample_store])
        pair = mapper.resolve(sample_store.live_root / "x" / "y" / "z.conf")

        assert (pair.live.relative_to(sample_store.live_root)
                == pair.store.relative_to(sample_store.store_root))

    def test_unknown_path_fails(self, sample_store, temp_dir):
        mapper = PathMapper([sample_store])

        with pytest.raises(UnresolvedPathError) as exc_info:
            mapper.resolve(temp_dir / "elsewhere" / "file")
        assert "not under any known tree" in str(exc_info.value)

    def test_string_prefix_is_not_membership(self, sample_store, temp_dir):
        mapper = PathMapper([sample_store])

        with pytest.raises(UnresolvedPathError):
            mapper.resolve(temp_dir / "live2" / "file")

    def test_store_nested_in_live_tree(self, config):
        mapper = PathMapper(config.stores)
        stored = config.config_dir / "home" / ".vimrc"

        pair = mapper.resolve(stored)

        assert pair.live == config.home_dir / ".vimrc"
        assert pair.store == stored

    def test_relative_path_uses_cwd(self, sample_store, monkeypatch):
        sample_store.live_root.mkdir(parents=True)
        monkeypatch.chdir(sample_store.live_root)
        mapper = PathMapper([sample_store])

        pair = mapper.resolve("notes.txt")

        assert pair.store == sample_store.store_root / "notes.txt"

    def test_dot_segments_normalized(self, sample_store):
        mapper = PathMapper([sample_store])
        path = str(sample_store.live_root / "a" / ".." / "b")

        assert mapper.resolve(path).store == sample_store.store_root / "b"

    def test_first_store_checked_by_store_root(self, temp_dir):
        # The second store's store root sits inside the first live tree
        home = Store("home", temp_dir / "cfg" / "home", temp_dir)
        work = Store("work", temp_dir / "cfg" / "work", temp_dir.parent / "work-live")
        mapper = PathMapper([home, work])

        pair = mapper.resolve(temp_dir / "cfg" / "work" / "notes")

        assert pair.live == temp_dir.parent / "work-live" / "notes"

    def test_second_store_live_root(self, temp_dir):
        first = Store("first", temp_dir / "s1", temp_dir / "l1")
        second = Store("second", temp_dir / "s2", temp_dir / "l2")
        mapper = PathMapper([first, second])

        assert mapper.resolve(temp_dir / "l2" / "f").store == temp_dir / "s2" / "f"


class TestValidation:
    """Tests for store registry validation."""

    def test_same_store_and_live_root(self, temp_dir):
        with pytest.raises(ConfigError):
            PathMapper([Store("bad", temp_dir, temp_dir)])

    def test_overlapping_live_roots(self, temp_dir):
        first = Store("first", temp_dir / "s1", temp_dir / "live")
        second = Store("second", temp_dir / "s2", temp_dir / "live" / "nested")

        with pytest.raises(ConfigError):
            PathMapper([first, second])

    def test_overlapping_store_roots(self, temp_dir):
        first = Store("first", temp_dir / "store", temp_dir / "l1")
        second = Store("second", temp_dir / "store", temp_dir / "l2")

        with pytest.raises(ConfigError):
            PathMapper([first, second])

    def test_live_root_inside_other_store_root(self, temp_dir):
        first = Store("first", temp_dir / "s1", temp_dir / "l1")
        second = Store("second", temp_dir / "s2", temp_dir / "s1" / "live")

        with pytest.raises(ConfigError) as exc_info:
            PathMapper([first, second])

        assert "inside the store root of first" in str(exc_info.value)

    def test_live_root_inside_own_store_root(self, temp_dir):
        with pytest.raises(ConfigError):
            PathMapper([Store("bad", temp_dir / "s", temp_dir / "s" / "live")])

    def test_store_root_inside_live_root_allowed(self, config):
        mapper = PathMapper(config.stores)
        assert mapper.stores == config.stores

    def test_unnormalized_roots_still_resolve(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        mapper = PathMapper([Store("home", Path("store"), Path("live") / ".")])

        pair = mapper.resolve(temp_dir / "live" / "f")

        assert pair.store == temp_dir / "store" / "f"


class TestNormalize:
    """Tests for normalize function."""

    def test_expands_user(self, monkeypatch, temp_dir):
        monkeypatch.setenv("HOME", str(temp_dir))
        assert normalize("~/x") == temp_dir / "x"

    def test_absolute_path_unchanged(self, temp_dir):
        assert normalize(temp_dir / "x") == temp_dir / "x"

    def test_returns_absolute(self):
        assert os.path.isabs(normalize("relative"))
