# ─── tree.py ──────────────────────────────────────────────────────────────
"""
Cumulative size tree keyed by `/`-joined path prefixes, and its pruning.

A symbol at `drivers/spi/spi.c/spi_init` adds its size to the root key,
`drivers`, `drivers/spi`, `drivers/spi/spi.c` and `drivers/spi/spi.c/spi_init`.
The tree is a plain dict, rebuilt for every report.
"""

from __future__ import annotations
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from .symbols import SymbolRecord

# not a name a source directory gets, unlike "root" (/root/app/main.c)
ROOT = ":root"
OTHER = "(other)"

PARENT_DIVISOR = 25                # nodes under parents smaller than total/25 are hidden
SIBLING_DIVISOR = 35               # nodes smaller than total/35 go to "(other)"

PathTree = Dict[str, int]


# ────────────────────── Building ───────────────────────────────

def insert(tree: PathTree, path: str, size: int):
    """Add `size` to the root and to every prefix of `path`."""
    tree[ROOT] = tree.get(ROOT, 0) + size
    cur = None
    for part in path.split("/"):
        if not part:
            continue
        cur = part if cur is None else cur + "/" + part
        tree[cur] = tree.get(cur, 0) + size


def build_tree(records: Iterable[SymbolRecord]) -> PathTree:
    tree = {ROOT: 0}
    for rec in records:
        insert(tree, rec.source_path, rec.size)
    return tree


def build_tree_from_sizes(sizes: Dict[str, int]) -> PathTree:
    """Same as build_tree() for plain `{path: size}` pairs."""
    tree = {ROOT: 0}
    for path, size in sizes.items():
        insert(tree, path, size)
    return tree


# ────────────────────── Queries ────────────────────────────────

def parent_of(path: str) -> Optional[str]:
    if path == ROOT:
        return None
    if "/" not in path:
        return ROOT
    return path.rsplit("/", 1)[0]


def children_of(tree: PathTree, node: Optional[str]) -> List[str]:
    return [e for e in tree if parent_of(e) == node]


def siblings_of(tree: PathTree, node: str) -> List[str]:
    """Children of the node's parent, the node itself included."""
    return children_of(tree, parent_of(node))


def max_sibling_size(tree: PathTree, node: str) -> Optional[int]:
    """Largest sibling size, or None when there are no siblings to compare."""
    siblings = siblings_of(tree, node)
    if not siblings:
        return None
    return max(tree[e] for e in siblings)


# ────────────────────── Pruning ────────────────────────────────

def thresholds(total: int) -> Tuple[float, float]:
    """(min_parent_size, min_sibling_size) for a binary of `total` bytes."""
    return total / PARENT_DIVISOR, total / SIBLING_DIVISOR


def restore_ancestors(nodes: Dict[str, int]) -> PathTree:
    """
    Re-create ancestors missing from a flat `{path: size}` map.

    A missing ancestor gets the sum of its nearest present descendants, so a
    map that already went through prune() can be pruned again.
    """
    tree = dict(nodes)
    missing = defaultdict(int)
    for path, size in nodes.items():
        parent = parent_of(path)
        while parent is not None and parent not in nodes:
            missing[parent] += size
            parent = parent_of(parent)
    tree.update(missing)
    return tree


def prune(nodes: Dict[str, int], min_parent_size: float, min_sibling_size: float) -> Dict[str, int]:
    """
    Reduce a full tree to its significant leaves.

    1. drop the root and nodes whose parent is smaller than `min_parent_size`
    2. drop nodes whose largest sibling is smaller than `min_sibling_size`
    3. keep what has no remaining children
    4. fold leaves smaller than `min_sibling_size` into `<parent>/(other)`

    The result is flat: it is meant to be rendered as is.
    """
    tree = restore_ancestors(nodes)

    # siblings share a parent, so the largest sibling is the largest child of it
    largest_child = {}
    for e, size in tree.items():
        parent = parent_of(e)
        if parent is not None and size > largest_child.get(parent, float("-inf")):
            largest_child[parent] = size

    kept = {}
    for e, size in tree.items():
        parent = parent_of(e)
        if parent is None:
            continue
        if tree[parent] < min_parent_size:
            continue
        biggest = largest_child.get(parent)
        if biggest is not None and biggest < min_sibling_size:
            continue
        kept[e] = size

    parents = {parent_of(e) for e in kept}
    leaves = {e: size for e, size in kept.items() if e not in parents}

    result = defaultdict(int)
    for e, size in leaves.items():
        if size < min_sibling_size:
            result[parent_of(e) + "/" + OTHER] += size
        else:
            result[e] += size
    return dict(result)


def summarize(tree: PathTree, total: int) -> Dict[str, int]:
    """prune() with the thresholds derived from the binary size."""
    return prune(tree, *thresholds(total))
