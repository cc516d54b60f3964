import json

import pytest

from fwfootprint.config import load_features, parse_features
from fwfootprint.errors import FeatureConfigError
from fwfootprint.features import FeatureSpec, categorize, classify, is_symbol_path, iter_matches
from fwfootprint.tree import build_tree_from_sizes

from conftest import EXAMPLE_SYMBOLS


def test_include_and_exclude():
    feature = FeatureSpec(folders={"a/b"}, excludes={"x.c"})
    assert feature.matches("a/b/y.c/sym2")
    assert not feature.matches("a/b/x.c/sym1")
    assert not feature.matches("a/c/z.c/sym3")


def test_size_added_once_per_feature():
    feature = FeatureSpec(name="ab", folders=["a", "a/b", "b"])
    assert classify("a/b/y.c/sym2", 50, [feature]) == 1
    assert feature.size == 50


def test_children_classified_even_if_parent_misses():
    child = FeatureSpec(name="spi", folders=["drivers/spi"])
    parent = FeatureSpec(name="kernel", folders=["kernel/"], children=[child])
    assert classify("drivers/spi/spi.c/spi_init", 64, [parent]) == 1
    assert parent.size == 0
    assert child.size == 64


def test_overlapping_features_all_count():
    child = FeatureSpec(name="spi", folders=["drivers/spi"])
    parent = FeatureSpec(name="drivers", folders=["drivers/"], children=[child])
    other_root = FeatureSpec(name="bus", folders=["spi"])
    forest = [parent, other_root]

    assert classify("drivers/spi/spi.c/spi_init", 64, forest) == 3
    assert [f.name for f in iter_matches("drivers/spi/spi.c/spi_init", forest)] == \
        ["drivers", "spi", "bus"]
    # overlapping features may sum to more than what was classified
    assert parent.size + child.size + other_root.size == 192


def test_iter_matches_is_pure():
    feature = FeatureSpec(folders=["a/"])
    list(iter_matches("a/b/x.c/sym1", [feature]))
    assert feature.size == 0


def test_disjoint_features_total_matches_symbols(example_tree):
    forest = [FeatureSpec(name="b", folders=["a/b/"]), FeatureSpec(name="c", folders=["a/c/"])]
    categorize(example_tree, forest)
    assert sum(f.size for f in forest) == sum(EXAMPLE_SYMBOLS.values())


def test_is_symbol_path():
    assert is_symbol_path("a/c/z.c/sym3")
    assert is_symbol_path(":/z_main_stack")
    assert is_symbol_path("lib/libc.a/memcpy")
    assert not is_symbol_path("a/c")
    assert not is_symbol_path("a/c/z.c")
    assert not is_symbol_path("root")


def test_uncategorized_report(example_tree):
    feature = FeatureSpec(folders={"a/b"}, excludes={"x.c"})
    uncategorized = categorize(example_tree, [feature])
    paths = [p for p, _ in uncategorized]
    assert ("a/c/z.c/sym3", 10) in uncategorized
    assert "a/b/x.c/sym1" in paths
    assert "a/b/y.c/sym2" not in paths
    assert "a/c" not in paths
    assert feature.size == 50


def test_categorize_resets_accumulators(example_tree):
    feature = FeatureSpec(folders=["a/"])
    categorize(example_tree, [feature])
    categorize(example_tree, [feature])
    assert feature.size == 160


def test_unnamed_feature_gets_a_label():
    assert FeatureSpec(folders=["kernel"]).name == "kernel"


def test_parse_features():
    forest = parse_features([
        {"name": "net", "folders": ["subsys/net"], "excludes": ["lib/http"],
         "children": [{"name": "ipv6", "folders": ["ip/ipv6"]}]},
        {"folders": ["kernel"]},
    ])
    assert [f.name for f in forest] == ["net", "kernel"]
    assert forest[0].excludes == ("lib/http",)
    assert forest[0].children[0].name == "ipv6"
    assert forest[1].children == []


def test_parse_single_feature_object():
    assert len(parse_features({"folders": ["x"]})) == 1


@pytest.mark.parametrize("bad", [
    "nope",
    [{"name": "x"}],
    [{"folders": "kernel"}],
    [{"folders": ["k"], "excludes": [1]}],
    [{"folders": ["k"], "children": {}}],
    [{"folders": ["k"], "children": [42]}],
])
def test_parse_features_rejects_bad_input(bad):
    with pytest.raises(FeatureConfigError):
        parse_features(bad)


def test_load_features(tmp_path):
    path = tmp_path / "features.json"
    path.write_text(json.dumps([{"name": "k", "folders": ["kernel"]}]))
    assert load_features(path)[0].folders == ("kernel",)


def test_load_features_errors(tmp_path):
    with pytest.raises(FeatureConfigError):
        load_features(tmp_path / "missing.json")
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(FeatureConfigError):
        load_features(broken)


def test_dotted_directory_counted_once():
    tree = build_tree_from_sizes({"modules/hal.nordic/drivers/x.c/f": 10})
    feature = FeatureSpec(folders=["hal.nordic"])
    assert categorize(tree, [feature]) == []
    assert feature.size == 10


def test_dotted_directory_uncategorized_lists_symbol_only():
    tree = build_tree_from_sizes({
        "modules/hal.nordic/drivers/x.c/f": 10,
        "modules/hal.nordic/drivers/y.c/g": 6,
    })
    assert categorize(tree, [FeatureSpec(folders=["kernel/"])]) == [
        ("modules/hal.nordic/drivers/x.c/f", 10),
        ("modules/hal.nordic/drivers/y.c/g", 6),
    ]
