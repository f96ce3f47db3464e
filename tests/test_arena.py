import pytest

from bitree.arena import NIL, NodeArena
from bitree.avl import AVLTree
from bitree.base import Tree

from test_tree import verify_tree_integrity


def test_allocate_sets_depth_from_parent():
    arena = NodeArena()

    root = arena.allocate(10, "a")
    child = arena.allocate(5, "b", root)
    grandchild = arena.allocate(7, "c", child)

    assert (root, child, grandchild) == (0, 1, 2)
    assert arena.depth[root] == 1
    assert arena.depth[child] == 2
    assert arena.depth[grandchild] == 3
    assert arena.parent[root] == NIL
    assert arena.parent[grandchild] == child
    assert arena.left[child] == NIL and arena.right[child] == NIL
    assert len(arena) == 3


def test_arena_grows_when_full():
    arena = NodeArena(capacity=2)

    prev = NIL
    for k in range(5):
        prev = arena.allocate(k, str(k), prev)

    assert arena.capacity == 8
    assert len(arena) == 5
    assert arena.keys == [0, 1, 2, 3, 4]
    assert list(arena.depth[:5]) == [1, 2, 3, 4, 5]
    assert list(arena.parent[:5]) == [NIL, 0, 1, 2, 3]
    assert all(arena.left[5:] == NIL)


def test_arena_rejects_empty_capacity():
    with pytest.raises(ValueError):
        NodeArena(capacity=0)


@pytest.mark.parametrize("tree_type", [Tree, AVLTree])
def test_tree_outgrows_initial_capacity(tree_type):
    tree = tree_type(capacity=1)
    keys = [8, 4, 12, 2, 6, 10, 14, 1, 3, 5, 7, 9, 11, 13, 15]

    for k in keys:
        tree[k] = -k

    assert tree._arena.capacity == 16
    verify_tree_integrity(tree, {k: -k for k in keys})
