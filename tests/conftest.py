import pytest

from fwfootprint.tree import build_tree_from_sizes

EXAMPLE_SYMBOLS = {
    "a/b/x.c/sym1": 100,
    "a/b/y.c/sym2": 50,
    "a/c/z.c/sym3": 10,
}


@pytest.fixture
def example_tree():
    return build_tree_from_sizes(EXAMPLE_SYMBOLS)
