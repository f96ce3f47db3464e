from __future__ import annotations

import logging
from typing import Callable, TypeVar

from .base import Tree, TreeNode
from .keys import default_key

logger = logging.getLogger(__name__)

V = TypeVar("V")


class AVLTree(Tree):
    """Self-balancing ordered map.

    Balance is judged by comparing the deepest absolute node depth reached
    on each side of a node, with a missing side counting as the node's own
    depth. A rebalance walk is only started when a new node is the sole
    child of its parent.
    """

    def __init__(self, key_func: Callable[[V], int] = default_key, capacity: int = 16):
        super().__init__(AVLNode, key_func, capacity)

    def balance_factor(self, key: int) -> int:
        return self.get_node(key).balance_factor()


class AVLNode(TreeNode):
    __slots__ = ()

    def _max_depth(self) -> int:
        indices = list(self._iter_subtree())
        return int(self._arena.depth[indices].max())

    def balance_factor(self) -> int:
        """Left depth measure minus right depth measure.

        The measure of a present child is the greatest depth found anywhere
        in its subtree; a missing child contributes this node's own depth.
        """
        depth = self.depth
        left = self.left
        right = self.right
        left_depth = depth if left is None else left._max_depth()
        right_depth = depth if right is None else right._max_depth()
        return left_depth - right_depth

    def _rotate_left(self):
        right = self.right
        assert right is not None, "left rotation at {} without a right child".format(
            self.key
        )
        logger.debug("rotating left at %d", self.key)
        right._rotate()

    def _rotate_right(self):
        left = self.left
        assert left is not None, "right rotation at {} without a left child".format(
            self.key
        )
        logger.debug("rotating right at %d", self.key)
        left._rotate()

    def _rebalance(self):
        # Every step moves to a strictly shallower position, so the walk
        # ends once it has passed the root.
        node = self
        while node is not None:
            balance = node.balance_factor()

            if balance < -1:
                right = node.right
                if right.right is None:
                    if right.left is not None:
                        right._rotate_right()
                elif right.right.left is not None:
                    right.right._rotate_right()
                node._rotate_left()
                # continue above the subtree top that took node's place
                node = node.parent
            elif balance > 1:
                left = node.left
                if left.left is None:
                    if left.right is not None:
                        left._rotate_left()
                elif left.left.right is not None:
                    left.left._rotate_left()
                node._rotate_right()
                node = node.parent

            node = node.parent

    def _repair_insert(self):
        parent = self.parent
        if parent is None or self._sibling() is not None:
            # Filling the second slot of a parent leaves its depth unchanged.
            return

        grandparent = parent.parent
        if grandparent is not None:
            logger.debug(
                "rebalancing from %d after inserting %d", grandparent.key, self.key
            )
            grandparent._rebalance()

    def _print_node(self) -> str:
        return "{}: {:2d}".format(self.key, self.balance_factor())
