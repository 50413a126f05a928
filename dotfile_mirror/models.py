"""Data models for the mirror engine."""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class MissingSide(Enum):
    """Which sides of a path pair are absent on disk."""
    BOTH_PRESENT = "both_present"
    LIVE_MISSING = "live_missing"
    STORE_MISSING = "store_missing"
    BOTH_MISSING = "both_missing"


class MergeState(Enum):
    """States of the interactive reconciliation loop."""
    PROMPTING = "prompting"
    RESOLVED = "resolved"
    SKIPPED = "skipped"


class MergeAction(Enum):
    """Actions a user can pick at the merge prompt."""
    SHOW_DIFF = "show_diff"
    ADD_TO_STORE = "add_to_store"
    GET_FROM_STORE = "get_from_store"
    EXTERNAL_MERGE = "external_merge"
    SKIP = "skip"


@dataclass(frozen=True)
class Store:
    """A registered mapping between a store subtree and a live subtree."""
    name: str
    store_root: Path
    live_root: Path


@dataclass(frozen=True)
class PathPair:
    """The live and store locations of one logical file."""
    live: Path
    store: Path

    def missing_side(self) -> MissingSide:
        """Classify which sides exist right now (never cached)."""
        live_exists = os.path.exists(self.live)
        store_exists = os.path.exists(self.store)

        if live_exists and store_exists:
            return MissingSide.BOTH_PRESENT
        if store_exists:
            return MissingSide.LIVE_MISSING
        if live_exists:
            return MissingSide.STORE_MISSING
        return MissingSide.BOTH_MISSING
