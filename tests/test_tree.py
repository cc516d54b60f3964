import random

import pytest

from fwfootprint.symbols import SymbolRecord, load_symbol_paths
from fwfootprint.tree import (ROOT, build_tree, build_tree_from_sizes, children_of, insert,
                              max_sibling_size, parent_of, prune, restore_ancestors,
                              siblings_of, summarize, thresholds)

from conftest import EXAMPLE_SYMBOLS


def test_example_tree_values(example_tree):
    expected = {
        "a": 160,
        "a/b": 150,
        "a/b/x.c": 100,
        "a/b/x.c/sym1": 100,
        "a/b/y.c": 50,
        "a/c": 10,
    }
    for key, value in expected.items():
        assert example_tree[key] == value
    assert example_tree[ROOT] == 160


def test_insert_starts_root_at_zero():
    tree = {}
    insert(tree, "drivers/spi.c/spi_init", 12)
    insert(tree, "drivers/i2c.c/i2c_init", 8)
    assert tree == {
        ROOT: 20,
        "drivers": 20,
        "drivers/spi.c": 12,
        "drivers/spi.c/spi_init": 12,
        "drivers/i2c.c": 8,
        "drivers/i2c.c/i2c_init": 8,
    }


def test_insert_skips_empty_segments():
    tree = {}
    insert(tree, "/lib//libc.a/memcpy", 4)
    assert "" not in tree
    assert tree["lib/libc.a/memcpy"] == 4


def test_build_tree_from_records():
    records = [
        SymbolRecord("main", 40, "text", "app/main.c/main"),
        SymbolRecord("z_idle_stack", 320, "noinit", ":/z_idle_stack"),
    ]
    tree = build_tree(records)
    assert tree[ROOT] == 360
    assert tree[":"] == 320
    assert tree["app/main.c"] == 40


def test_every_node_is_sum_of_symbols_below_it():
    rng = random.Random(7)
    segments = ["kernel", "drivers", "lib", "spi", "sched.c", "uart.c", "os"]
    sizes = {}
    for i in range(200):
        depth = rng.randint(1, 4)
        path = "/".join(rng.choice(segments) for _ in range(depth)) + f"/sym{i}.c/s{i}"
        sizes[path] = rng.randint(1, 500)
    tree = build_tree_from_sizes(sizes)

    assert tree[ROOT] == sum(sizes.values())
    for node, value in tree.items():
        if node == ROOT:
            continue
        below = sum(s for p, s in sizes.items() if p == node or p.startswith(node + "/"))
        assert value == below


def test_parent_of():
    assert parent_of(ROOT) is None
    assert parent_of("a") == ROOT
    assert parent_of("a/b/x.c") == "a/b"


def test_children_and_siblings(example_tree):
    assert sorted(children_of(example_tree, "a")) == ["a/b", "a/c"]
    assert children_of(example_tree, None) == [ROOT]
    assert sorted(siblings_of(example_tree, "a/b/x.c")) == ["a/b/x.c", "a/b/y.c"]
    assert max_sibling_size(example_tree, "a/b/y.c") == 100


def test_max_sibling_size_without_siblings():
    assert max_sibling_size({ROOT: 0}, "ghost/node") is None


def test_thresholds():
    assert thresholds(3500) == (140, 100)


def test_prune_example(example_tree):
    pruned = prune(example_tree, min_parent_size=120, min_sibling_size=60)
    assert pruned == {
        "a/b/x.c": 100,
        "a/b/(other)": 50,
        "a/(other)": 10,
    }
    assert not any(k.startswith("a/c/") for k in pruned)


def test_prune_is_idempotent(example_tree):
    once = prune(example_tree, 120, 60)
    assert prune(once, 120, 60) == once


def test_prune_idempotent_on_larger_tree():
    rng = random.Random(3)
    dirs = ["kernel", "drivers/serial", "drivers/spi", "subsys/net/ip", "lib/libc", "arch/arm"]
    sizes = {}
    for i in range(300):
        sizes[f"{rng.choice(dirs)}/f{i % 17}.c/s{i}"] = rng.randint(1, 2000)
    tree = build_tree_from_sizes(sizes)
    once = summarize(tree, tree[ROOT])
    assert once
    assert summarize(once, tree[ROOT]) == once


def test_prune_never_keeps_root(example_tree):
    assert ROOT not in prune(example_tree, 0, 0)


def test_restore_ancestors_fills_missing_parents():
    tree = restore_ancestors({"a/b/x.c": 100, "a/b/(other)": 50, "a/(other)": 10})
    assert tree["a/b"] == 150
    assert tree["a"] == 160
    assert tree[ROOT] == 160


def test_restore_ancestors_keeps_existing_values(example_tree):
    assert restore_ancestors(example_tree) == example_tree


@pytest.mark.parametrize("total", [0, 1])
def test_summarize_tiny_totals(example_tree, total):
    # with (almost) no thresholds nothing is hidden, only leaves remain
    pruned = summarize(example_tree, total)
    assert sum(pruned.values()) == sum(EXAMPLE_SYMBOLS.values())


def test_source_under_root_home_is_not_the_tree_root():
    paths = load_symbol_paths("00001000 00000010 T main\t/root/app/main.c:3\n")
    assert paths["main"] == "root/app/main.c/main"
    tree = build_tree([SymbolRecord("main", 16, "text", paths["main"])])
    assert tree[ROOT] == 16
    assert tree["root"] == 16
    assert parent_of("root") == ROOT
    assert prune(tree, 0, 0) == {"root/app/main.c/main": 16}
