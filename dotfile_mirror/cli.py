"""Command-line interface for dotfile mirror."""

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional

from .config import Config, load_config
from .engine import SyncEngine
from .errors import MirrorError, PathNotFoundError, UsageError


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="dotfile-mirror",
        description="Mirror selected files between your home directory and a store.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s add ~/.vimrc ~/.config/git
  %(prog)s diff
  %(prog)s merge ~/.bashrc
  %(prog)s -c ./dotfiles get .vimrc
        """
    )

    parser.add_argument(
        "--config-dir", "-c",
        help="Directory holding the store (default: ~/.config/dotfile-mirror)"
    )
    parser.add_argument(
        "--home-dir", "-H",
        help="Live home directory to mirror (default: $HOME)"
    )
    parser.add_argument(
        "--merge-command", "-m",
        help="Merge command; %%s is replaced by the store path, %%h by the live path"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug details to stderr"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Copy files from the live tree into the store")
    add.add_argument("paths", nargs="*")

    get = subparsers.add_parser("get", help="Copy files from the store into the live tree")
    get.add_argument("paths", nargs="*")

    diff = subparsers.add_parser("diff", help="Show differences (all stored files if none given)")
    diff.add_argument("paths", nargs="*")

    merge = subparsers.add_parser("merge", help="Interactively reconcile differences")
    merge.add_argument("paths", nargs="*")

    cd = subparsers.add_parser("cd", help="Open a shell in the store directory")
    cd.add_argument("subdir", nargs="?")

    clone = subparsers.add_parser("clone", help="Clone a store from a repository")
    clone.add_argument("origin", nargs="?")

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr; debug level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def open_shell(config: Config, subdir: Optional[str], shell: str) -> None:
    """Start an interactive shell inside the config directory."""
    os.makedirs(config.config_dir, exist_ok=True)
    cd_dir = config.config_dir / subdir if subdir else config.config_dir
    if not cd_dir.is_dir():
        raise PathNotFoundError(f"directory {subdir} doesn't exist")

    print(f"creating shell in {cd_dir}, type exit or ctrl-D to exit")
    subprocess.run([shell], cwd=cd_dir, check=False)
    print("shell exited")


def clone_store(origin: Optional[str]) -> None:
    """Cloning a store from a remote repository is not supported yet."""
    if not origin:
        raise UsageError("must supply a repository to clone")
    raise MirrorError(f"cloning {origin} is not supported yet")


def run_command(args: argparse.Namespace, config: Config) -> None:
    """Dispatch a parsed command."""
    if args.command == "cd":
        open_shell(config, args.subdir, os.environ.get("SHELL", "/bin/sh"))
        return
    if args.command == "clone":
        clone_store(args.origin)
        return

    engine = SyncEngine(config)
    handlers = {
        "add": engine.add,
        "get": engine.get,
        "diff": engine.diff,
        "merge": engine.merge,
    }
    handlers[args.command](args.paths)


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)

    config = load_config(
        config_dir=args.config_dir,
        home_dir=args.home_dir,
        merge_command=args.merge_command,
    )

    try:
        run_command(args, config)
    except MirrorError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except (KeyboardInterrupt, EOFError):
        print("\n\nInterrupted! Files copied so far have been kept.")
        sys.exit(1)
