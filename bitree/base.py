from __future__ import annotations

import logging
import operator
from collections.abc import ItemsView, KeysView, Mapping, ValuesView
from typing import Callable, Generic, Iterator, List, Optional, Tuple, Type, TypeVar

from .arena import NIL, NodeArena
from .keys import default_key

logger = logging.getLogger(__name__)

V = TypeVar("V")


class TreeNode(Generic[V]):
    """A handle onto one node slot of a tree's arena.

    Handles are created on demand and carry no state of their own, so two
    handles compare equal whenever they refer to the same slot of the same
    tree.
    """

    __slots__ = ("_tree", "_index")

    def __init__(self, tree: Tree[V], index: int):
        self._tree: Tree[V] = tree
        self._index: int = int(index)

    @property
    def _arena(self) -> NodeArena:
        return self._tree._arena

    @property
    def key(self) -> int:
        """The key associated with this node.

        This property is immutable.
        """
        return self._arena.keys[self._index]

    @property
    def value(self) -> V:
        return self._arena.values[self._index]

    @value.setter
    def value(self, val: V):
        self._arena.values[self._index] = val

    @property
    def depth(self) -> int:
        """1-based distance from the root."""
        return int(self._arena.depth[self._index])

    @property
    def parent(self) -> Optional[TreeNode[V]]:
        return self._tree._node(self._arena.parent[self._index])

    @property
    def left(self) -> Optional[TreeNode[V]]:
        return self._tree._node(self._arena.left[self._index])

    @property
    def right(self) -> Optional[TreeNode[V]]:
        return self._tree._node(self._arena.right[self._index])

    def describe(self) -> Tuple[int, Optional[int], Optional[int]]:
        """Return this node's key along with the keys of its children."""
        left = self.left
        right = self.right
        return (
            self.key,
            None if left is None else left.key,
            None if right is None else right.key,
        )

    def _set_left_child(self, child: Optional[TreeNode[V]]):
        arena = self._arena
        if child is None:
            arena.left[self._index] = NIL
        else:
            arena.left[self._index] = child._index
            arena.parent[child._index] = self._index

    def _set_right_child(self, child: Optional[TreeNode[V]]):
        arena = self._arena
        if child is None:
            arena.right[self._index] = NIL
        else:
            arena.right[self._index] = child._index
            arena.parent[child._index] = self._index

    def _is_left_child(self) -> bool:
        parent = self._arena.parent[self._index]
        return (parent != NIL) and (self._arena.left[parent] == self._index)

    def _is_right_child(self) -> bool:
        parent = self._arena.parent[self._index]
        return (parent != NIL) and (self._arena.right[parent] == self._index)

    def _sibling(self) -> Optional[TreeNode[V]]:
        parent = self.parent
        if parent is None:
            return None
        elif self._is_left_child():
            return parent.right
        else:
            return parent.left

    def _iter_subtree(self) -> Iterator[int]:
        # Pre-order, so every parent is yielded before its children.
        arena = self._arena
        stack: List[int] = [self._index]
        while stack:
            index = stack.pop()
            yield index
            if arena.right[index] != NIL:
                stack.append(arena.right[index])
            if arena.left[index] != NIL:
                stack.append(arena.left[index])

    def _repair_depth(self):
        arena = self._arena
        for index in self._iter_subtree():
            parent = arena.parent[index]
            if parent == NIL:
                arena.depth[index] = 1
            else:
                arena.depth[index] = arena.depth[parent] + 1

    def _rotate(self):
        """Move this node above its parent.

        A left child performs a right rotation around its parent, a right
        child a left rotation. Depths are recomputed for the whole subtree
        that now hangs from this node.
        """
        parent: Optional[TreeNode[V]] = self.parent
        assert parent is not None, "cannot rotate the root node {}".format(self.key)
        gp: Optional[TreeNode[V]] = parent.parent
        parent_was_left = parent._is_left_child()

        if self._is_left_child():
            # Right rotation:
            parent._set_left_child(self.right)
            self._set_right_child(parent)
        else:
            # Left rotation:
            parent._set_right_child(self.left)
            self._set_left_child(parent)

        if gp is not None:
            if parent_was_left:
                gp._set_left_child(self)
            else:
                gp._set_right_child(self)
        else:
            self._arena.parent[self._index] = NIL
            self._tree._root = self._index
            logger.debug("node %d is the new root", self.key)

        self._repair_depth()

    def _find_node(self, key: int) -> TreeNode[V]:
        arena = self._arena
        index = self._index
        while index != NIL:
            node_key = arena.keys[index]
            if key == node_key:
                return self._tree._node(index)
            elif key < node_key:
                index = arena.left[index]
            else:
                index = arena.right[index]

        raise KeyError(key)

    def _insert_node(self, key: int, val: V) -> Tuple[bool, TreeNode[V]]:
        arena = self._arena
        index = self._index

        while True:
            node_key = arena.keys[index]
            if key == node_key:
                return (False, self._tree._node(index))

            if key < node_key:
                if arena.left[index] == NIL:
                    new_index = arena.allocate(key, val, index)
                    arena.left[index] = new_index
                    break
                index = arena.left[index]
            else:
                if arena.right[index] == NIL:
                    new_index = arena.allocate(key, val, index)
                    arena.right[index] = new_index
                    break
                index = arena.right[index]

        new_node = self._tree._node(new_index)
        new_node._repair_insert()
        return (True, new_node)

    def _print_recursive(self, level: int) -> str:
        ret = ""
        left = self.left
        if left is not None:
            ret = left._print_recursive(level + 1)

        ret += ("    " * level) + self._print_node() + "\n"

        right = self.right
        if right is not None:
            ret += right._print_recursive(level + 1)

        return ret

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, TreeNode)
            and other._tree is self._tree
            and other._index == self._index
        )

    def __hash__(self) -> int:
        return hash((id(self._tree), self._index))

    def __str__(self) -> str:
        key, left_key, right_key = self.describe()
        return "{} L({}), R({})".format(
            key,
            "null" if left_key is None else left_key,
            "null" if right_key is None else right_key,
        )

    def __repr__(self) -> str:
        return "{}({})".format(self.__class__.__name__, self)

    # methods for subclasses to override:

    def _print_node(self) -> str:
        return str(self.key)

    def _repair_insert(self):
        pass


class Tree(Generic[V], Mapping):
    """An ordered map from integer keys to values.

    The base class performs plain binary-search-tree insertion; subclasses
    add balancing by supplying a node class that overrides
    ``_repair_insert``.
    """

    def __init__(
        self,
        node_class: Type[TreeNode] = TreeNode,
        key_func: Callable[[V], int] = default_key,
        capacity: int = 16,
    ):
        self._node_cls: Type[TreeNode] = node_class
        self._key_func: Callable[[V], int] = key_func
        self._arena: NodeArena = NodeArena(capacity)
        self._root: int = NIL

    def _node(self, index: int) -> Optional[TreeNode[V]]:
        if index == NIL:
            return None
        return self._node_cls(self, index)

    @property
    def root(self) -> Optional[TreeNode[V]]:
        return self._node(self._root)

    def get_node(self, key: int) -> TreeNode[V]:
        """Directly retrieve a node within this tree.

        Raises KeyError if the tree does not contain the given key, including
        keys that are not integers and so can never be stored.
        """
        try:
            key = operator.index(key)
        except TypeError:
            raise KeyError(key) from None
        if self._root == NIL:
            raise KeyError(key)
        return self.root._find_node(key)

    def get_or_insert_node(self, key: int, val: V) -> Tuple[bool, TreeNode[V]]:
        """Retrieve a node within this tree, inserting a new node holding
        ``val`` if one does not exist for the given key.

        Returns a tuple containing:
            - Whether a new node was inserted or not
            - The (possibly newly-inserted) node for the given key
        """
        key = operator.index(key)
        if self._root == NIL:
            self._root = self._arena.allocate(key, val)
            return (True, self.root)
        return self.root._insert_node(key, val)

    def insert(self, key: int, val: V) -> Optional[V]:
        """Insert ``val`` under ``key``.

        Returns the value previously stored under ``key``, or None if the
        key is new. Updating an existing key never changes the tree's shape.
        """
        created, node = self.get_or_insert_node(key, val)
        if created:
            return None

        old_val = node.value
        node.value = val
        return old_val

    def add(self, val: V) -> Optional[V]:
        """Insert ``val`` under the key derived from it by the tree's key
        function.
        """
        return self.insert(self._key_func(val), val)

    def _first_node(self) -> TreeNode[V]:
        node = self.root
        if node is None:
            raise IndexError("Tree is empty")
        while node.left is not None:
            node = node.left
        return node

    def _last_node(self) -> TreeNode[V]:
        node = self.root
        if node is None:
            raise IndexError("Tree is empty")
        while node.right is not None:
            node = node.right
        return node

    def min(self) -> Tuple[int, V]:
        node = self._first_node()
        return (node.key, node.value)

    def max(self) -> Tuple[int, V]:
        node = self._last_node()
        return (node.key, node.value)

    def height(self) -> int:
        n = len(self._arena)
        if n == 0:
            return 0
        return int(self._arena.depth[:n].max())

    def _iter_indices(self, reverse: bool = False) -> Iterator[int]:
        arena = self._arena
        near, far = (arena.right, arena.left) if reverse else (arena.left, arena.right)

        stack: List[int] = []
        index = self._root
        while stack or index != NIL:
            while index != NIL:
                stack.append(index)
                index = near[index]
            index = stack.pop()
            yield index
            index = far[index]

    def nodes(self, reverse: bool = False) -> Iterator[TreeNode[V]]:
        for index in self._iter_indices(reverse):
            yield self._node_cls(self, index)

    def _iter_keys(self, reverse: bool = False) -> Iterator[int]:
        for index in self._iter_indices(reverse):
            yield self._arena.keys[index]

    def _iter_values(self, reverse: bool = False) -> Iterator[V]:
        for index in self._iter_indices(reverse):
            yield self._arena.values[index]

    def _iter_items(self, reverse: bool = False) -> Iterator[Tuple[int, V]]:
        for index in self._iter_indices(reverse):
            yield (self._arena.keys[index], self._arena.values[index])

    def keys(self) -> TreeKeysView:
        return TreeKeysView(self)

    def values(self) -> TreeValuesView:
        return TreeValuesView(self)

    def items(self) -> TreeItemsView:
        return TreeItemsView(self)

    def print(self) -> str:
        if self._root != NIL:
            return self.root._print_recursive(0)
        else:
            return "<empty tree>"

    def __getitem__(self, key: int) -> V:
        return self.get_node(key).value

    def __setitem__(self, key: int, val: V):
        self.insert(key, val)

    def __contains__(self, key: int) -> bool:
        try:
            self.get_node(key)
            return True
        except KeyError:
            return False

    def __iter__(self) -> Iterator[int]:
        return self._iter_keys()

    def __reversed__(self) -> Iterator[int]:
        return self._iter_keys(reverse=True)

    def __len__(self) -> int:
        return len(self._arena)


# Views iterate in key order and support reversed().


class TreeKeysView(KeysView):
    __slots__ = ()

    def __reversed__(self) -> Iterator[int]:
        return self._mapping._iter_keys(reverse=True)


class TreeValuesView(ValuesView):
    __slots__ = ()

    def __iter__(self) -> Iterator:
        return self._mapping._iter_values()

    def __reversed__(self) -> Iterator:
        return self._mapping._iter_values(reverse=True)


class TreeItemsView(ItemsView):
    __slots__ = ()

    def __iter__(self) -> Iterator[Tuple[int, object]]:
        return self._mapping._iter_items()

    def __reversed__(self) -> Iterator[Tuple[int, object]]:
        return self._mapping._iter_items(reverse=True)
