from __future__ import annotations

import logging
from typing import Any, List

import numpy as np

logger = logging.getLogger(__name__)

NIL = -1


class NodeArena(object):
    """Dense storage for tree nodes.

    Links (parent, left, right) and depths live in parallel numpy arrays
    indexed by node slot; an absent link is stored as ``NIL``. Keys and
    values are kept in plain lists so that keys stay arbitrary-precision
    Python integers and values can be any object.

    Slots are handed out sequentially and never reclaimed.
    """

    def __init__(self, capacity: int = 16):
        if capacity < 1:
            raise ValueError("Arena capacity must be at least 1")

        self.parent: np.ndarray = np.full(capacity, NIL, dtype=np.int64)
        self.left: np.ndarray = np.full(capacity, NIL, dtype=np.int64)
        self.right: np.ndarray = np.full(capacity, NIL, dtype=np.int64)
        self.depth: np.ndarray = np.zeros(capacity, dtype=np.int64)
        self.keys: List[int] = []
        self.values: List[Any] = []

    @property
    def capacity(self) -> int:
        return self.parent.shape[0]

    def allocate(self, key: int, value: Any, parent: int = NIL) -> int:
        """Store a new leaf node and return its slot index.

        The depth is derived from the parent: 1 for a parentless node,
        otherwise one more than the parent's depth. The caller is
        responsible for linking the slot into the parent's left or right
        field.
        """
        index = len(self.keys)
        if index == self.capacity:
            self._grow()

        self.keys.append(key)
        self.values.append(value)
        self.parent[index] = parent
        self.left[index] = NIL
        self.right[index] = NIL
        if parent == NIL:
            self.depth[index] = 1
        else:
            self.depth[index] = self.depth[parent] + 1

        return index

    def _grow(self):
        old = self.capacity
        new = old * 2
        logger.debug("growing node arena from %d to %d slots", old, new)

        pad = np.full(new - old, NIL, dtype=np.int64)
        self.parent = np.concatenate((self.parent, pad))
        self.left = np.concatenate((self.left, pad))
        self.right = np.concatenate((self.right, pad))
        self.depth = np.concatenate((self.depth, np.zeros(new - old, dtype=np.int64)))

    def __len__(self) -> int:
        return len(self.keys)
