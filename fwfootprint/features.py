# ─── features.py ──────────────────────────────────────────────────────────
"""
Feature classification.

A feature is a user-defined bucket matched by path substrings:

    {"name": "net", "folders": ["subsys/net"], "excludes": ["lib/http"],
     "children": [{"name": "ipv6", "folders": ["ip/ipv6"]}]}

Features may overlap. A symbol is counted once per matching feature, so it can
land in a parent and in any number of its children, or in several root
features at the same time. The per-feature sums can therefore exceed the total
of the matched symbols.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from .tree import parent_of

log = logging.getLogger(__name__)

# folder/file.ext/symbol  or the synthetic ":/symbol"
_NAMED_SYMBOL_RE = re.compile(r".*\.[a-zA-Z]+/.*")
_UNCLASSIFIED_RE = re.compile(r"^:/")


# ────────────────────── Feature definition ─────────────────────

@dataclass
class FeatureSpec:
    """
    One node of the feature forest.

    Attributes:
        name: Label used in the report
        folders: Include filters, any one must be a substring of the path
        excludes: Exclude filters, none may be a substring of the path
        children: Nested features, classified independently of this one
        size: Accumulated bytes, filled by classify()
    """
    name: str = ""
    folders: Tuple[str, ...] = ()
    excludes: Tuple[str, ...] = ()
    children: List["FeatureSpec"] = field(default_factory=list)
    size: int = 0

    def __post_init__(self):
        self.folders = tuple(self.folders)
        self.excludes = tuple(self.excludes)
        if not self.name:
            self.name = ", ".join(self.folders) or "(unnamed)"

    def matches(self, path: str) -> bool:
        """True if `path` hits an include filter and no exclude filter."""
        if not any(inc in path for inc in self.folders):
            return False
        return not any(exc in path for exc in self.excludes)

    def reset(self):
        self.size = 0
        for child in self.children:
            child.reset()

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, "FeatureSpec"]]:
        yield depth, self
        for child in self.children:
            yield from child.walk(depth + 1)


def iter_matches(path: str, features: Iterable[FeatureSpec]) -> Iterator[FeatureSpec]:
    """Yield every feature in the forest matched by `path`, depth first."""
    for feature in features:
        if feature.matches(path):
            yield feature
        # children are checked whatever the parent's result was
        yield from iter_matches(path, feature.children)


def classify(path: str, size: int, features: Iterable[FeatureSpec]) -> int:
    """Add `size` once to every matching feature; return how many matched."""
    matched = 0
    for feature in iter_matches(path, features):
        feature.size += size
        matched += 1
    return matched


def reset_features(features: Iterable[FeatureSpec]):
    for feature in features:
        feature.reset()


# ────────────────────── Uncategorized symbols ──────────────────

def is_symbol_path(path: str) -> bool:
    """
    True for paths that point at a single symbol.

    `drivers/spi/spi.c/spi_init` and `:/z_main_stack` qualify, while pure
    aggregates like `drivers/spi` or `drivers/spi/spi.c` do not and are left
    out of the uncategorized report.
    """
    return bool(_NAMED_SYMBOL_RE.match(path) or _UNCLASSIFIED_RE.match(path))


def categorize(tree: dict, features: List[FeatureSpec]) -> List[Tuple[str, int]]:
    """
    Classify every symbol node of `tree` against the feature forest.

    Only leaves are classified: under a dotted directory such as
    `modules/hal.nordic` the folder and file nodes look like symbol paths too,
    and would count the same bytes again. The forest accumulators are reset
    first. Returns the `(path, size)` of symbols that matched no feature at
    all, sorted by path.
    """
    reset_features(features)
    parents = {parent_of(path) for path in tree}
    uncategorized = []
    for path, size in sorted(tree.items()):
        if path in parents or not is_symbol_path(path):
            continue
        if classify(path, size, features) == 0:
            uncategorized.append((path, size))
    log.debug("%d symbol(s) matched no feature", len(uncategorized))
    return uncategorized
