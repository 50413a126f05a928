"""Core sync logic: add, get, diff and merge between live and store trees."""

import logging
import re
import shlex
import subprocess
from pathlib import Path
from typing import Callable, Iterable, Optional

from tqdm import tqdm

from .config import Config, LIVE_PLACEHOLDER, STORE_PLACEHOLDER
from .copier import copy_file
from .differ import compute_diff
from .errors import PathNotFoundError, UsageError
from .mapper import PathMapper
from .models import MergeAction, MergeState, MissingSide, PathPair
from .scanner import expand, walk_stores

logger = logging.getLogger(__name__)

# Answers accepted at the merge prompt (case-sensitive)
PROMPT_ACTIONS = {
    "d": MergeAction.SHOW_DIFF,
    "a": MergeAction.ADD_TO_STORE,
    "h": MergeAction.ADD_TO_STORE,
    "g": MergeAction.GET_FROM_STORE,
    "S": MergeAction.GET_FROM_STORE,
    "m": MergeAction.EXTERNAL_MERGE,
    "n": MergeAction.SKIP,
    "s": MergeAction.SKIP,
}

# State reached from Prompting after each action
TRANSITIONS = {
    MergeAction.SHOW_DIFF: MergeState.PROMPTING,
    MergeAction.ADD_TO_STORE: MergeState.RESOLVED,
    MergeAction.GET_FROM_STORE: MergeState.RESOLVED,
    MergeAction.EXTERNAL_MERGE: MergeState.RESOLVED,
    MergeAction.SKIP: MergeState.SKIPPED,
}

PROMPT_USAGE = "please answer with a, d, g, h, m, n, s or S"

MISSING_LABELS = {
    MissingSide.LIVE_MISSING: "live tree",
    MissingSide.STORE_MISSING: "store",
    MissingSide.BOTH_MISSING: "live tree or store",
}

# Both placeholders are filled in a single pass over each token
PLACEHOLDER_RE = re.compile("|".join(re.escape(p) for p in (STORE_PLACEHOLDER, LIVE_PLACEHOLDER)))

# Show a progress bar when copying at least this many files
PROGRESS_THRESHOLD = 2


def build_merge_argv(template: str, store_path: Path, live_path: Path) -> list[str]:
    """Split a merge command template and fill in both file paths."""
    values = {STORE_PLACEHOLDER: str(store_path), LIVE_PLACEHOLDER: str(live_path)}
    return [PLACEHOLDER_RE.sub(lambda m: values[m.group(0)], token)
            for token in shlex.split(template)]


def _unique(pairs: Iterable[PathPair]) -> list[PathPair]:
    seen = set()
    result = []
    for pair in pairs:
        if pair not in seen:
            seen.add(pair)
            result.append(pair)
    return result


class SyncEngine:
    """Runs sync commands against the stores registered in a Config."""

    def __init__(self, config: Config, prompt: Optional[Callable[[str], str]] = None):
        self.config = config
        self.mapper = PathMapper(config.stores)
        self.prompt = prompt

    # ------------------------------------------------------------------
    # Target resolution
    # ------------------------------------------------------------------

    def _expand_side(self, pair: PathPair, side: str) -> list[PathPair]:
        """Resolve every file below one side of a pair.

        Files that resolve to the other side are dropped, which keeps the
        store tree out of a listing of the live directory containing it.
        """
        pairs = []
        for path in expand(getattr(pair, side)):
            resolved = self.mapper.resolve(path)
            if getattr(resolved, side) == path:
                pairs.append(resolved)
        return pairs

    def resolve_targets(self, paths: list[str], sides: tuple[str, ...]) -> list[PathPair]:
        """
        Resolve command arguments to the path pairs they imply.

        With no arguments, every file held in any store is targeted.
        """
        if not paths:
            files = walk_stores(self.mapper.stores)
            return _unique(self.mapper.resolve(path) for path in files)

        pairs = []
        for path in paths:
            pair = self.mapper.resolve(path)
            for side in sides:
                pairs.extend(self._expand_side(pair, side))
        return _unique(pairs)

    def _report_directory(self, pair: PathPair) -> bool:
        """Print a notice when one side of a pair is a directory."""
        if pair.live.is_dir():
            print(f"{pair.live}: is a directory in live tree, skipping")
            return True
        if pair.store.is_dir():
            print(f"{pair.live}: is a directory in store, skipping")
            return True
        return False

    def _copy_all(self, pairs: list[PathPair], to_store: bool, desc: str) -> None:
        with tqdm(pairs, desc=desc, unit="file",
                  disable=len(pairs) < PROGRESS_THRESHOLD) as pbar:
            for pair in pbar:
                if to_store:
                    copy_file(pair.live, pair.store)
                else:
                    copy_file(pair.store, pair.live)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add(self, paths: list[str]) -> None:
        """Copy live files into the store, overwriting stored copies."""
        if not paths:
            raise UsageError("add command requires paths")

        pairs = []
        for path in paths:
            pair = self.mapper.resolve(path)
            if not pair.live.exists():
                raise PathNotFoundError(f"path {path} does not exist")
            pairs.extend(self._expand_side(pair, "live"))
        pairs = _unique(pairs)

        self._copy_all(pairs, to_store=True, desc="Adding")
        print(f"Added {len(pairs)} file(s) to store")

    def get(self, paths: list[str]) -> None:
        """Copy stored files back out to the live tree."""
        if not paths:
            raise UsageError("get command requires paths")

        pairs = []
        for path in paths:
            pair = self.mapper.resolve(path)
            if not pair.store.exists():
                raise PathNotFoundError(f"path {path} does not exist in storage")
            pairs.extend(self._expand_side(pair, "store"))
        pairs = _unique(pairs)

        self._copy_all(pairs, to_store=False, desc="Restoring")
        print(f"Restored {len(pairs)} file(s) from store")

    def diff(self, paths: list[str]) -> None:
        """Print a diff for every target whose store and live copies differ."""
        for pair in self.resolve_targets(paths, ("live", "store")):
            missing = pair.missing_side()
            if missing is not MissingSide.BOTH_PRESENT:
                print(f"{pair.live}: missing from {MISSING_LABELS[missing]}")
                continue
            if self._report_directory(pair):
                continue

            diff_text = compute_diff(pair.store, pair.live)
            if diff_text:
                print(f"{pair.live}:")
                print(diff_text)

    def merge(self, paths: list[str]) -> None:
        """Bring store and live copies into agreement, asking when both exist."""
        for pair in self.resolve_targets(paths, ("live", "store")):
            missing = pair.missing_side()
            if missing is MissingSide.STORE_MISSING:
                print(f"{pair.live}: creating in store from live tree")
                copy_file(pair.live, pair.store)
            elif missing is MissingSide.LIVE_MISSING:
                print(f"{pair.live}: creating in live tree from store")
                copy_file(pair.store, pair.live)
            elif missing is MissingSide.BOTH_MISSING:
                print(f"{pair.live}: does not exist in live tree or store")
            elif not self._report_directory(pair):
                self.reconcile(pair)

    # ------------------------------------------------------------------
    # Interactive reconciliation
    # ------------------------------------------------------------------

    def _ask(self, question: str) -> str:
        read = self.prompt or input
        return read(question).strip()

    def reconcile(self, pair: PathPair) -> MergeState:
        """
        Prompt until the user resolves or skips a differing pair.

        Returns immediately with RESOLVED when the files already match. After
        an external merge the files are not compared again.
        """
        diff_text = compute_diff(pair.store, pair.live)
        if not diff_text:
            return MergeState.RESOLVED

        state = MergeState.PROMPTING
        while state is MergeState.PROMPTING:
            answer = self._ask(
                f"{pair.live}: show [d]iff, [m]erge, [a]dd to store (h), "
                f"[g]et from store (S), skip [n]ext? "
            )
            action = PROMPT_ACTIONS.get(answer)
            if action is None:
                print(PROMPT_USAGE)
                continue
            state = self._apply(action, pair, diff_text)

        logger.debug("%s reconciled: %s", pair.live, state.value)
        return state

    def _apply(self, action: MergeAction, pair: PathPair, diff_text: str) -> MergeState:
        if action is MergeAction.SHOW_DIFF:
            print(diff_text)
        elif action is MergeAction.ADD_TO_STORE:
            copy_file(pair.live, pair.store)
        elif action is MergeAction.GET_FROM_STORE:
            copy_file(pair.store, pair.live)
        elif action is MergeAction.EXTERNAL_MERGE:
            if not self.run_merge_tool(pair):
                return MergeState.PROMPTING
        return TRANSITIONS[action]

    def run_merge_tool(self, pair: PathPair) -> bool:
        """
        Run the configured merge command on a pair and wait for it to exit.

        The exit status is not inspected. Returns False only when the command
        could not be started.
        """
        argv = build_merge_argv(self.config.merge_command, pair.store, pair.live)
        logger.debug("Running merge command: %s", argv)
        try:
            subprocess.run(argv, check=False)
        except OSError as e:
            print(f"Could not run merge command: {e}")
            return False
        return True
