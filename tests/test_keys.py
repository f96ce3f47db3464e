from hypothesis import given, strategies as st

from bitree.avl import AVLTree
from bitree.base import Tree
from bitree.keys import default_key


def test_default_key():
    assert default_key(None) == 0
    assert default_key(42) == 42
    assert default_key("abc") == hash("abc")


@given(st.lists(st.integers()))
def test_add_uses_value_hash(values):
    tree = AVLTree()
    for v in values:
        tree.add(v)

    assert list(tree) == sorted(set(hash(v) for v in values))


def test_add_with_custom_key_func():
    tree = Tree(key_func=len)

    assert tree.add("ab") is None
    assert tree.add("xyz") is None
    assert tree.add("cd") == "ab"
    assert dict(tree) == {2: "cd", 3: "xyz"}


def test_add_none_lands_on_zero():
    tree = AVLTree()

    assert tree.add(None) is None
    assert 0 in tree
    assert tree[0] is None
