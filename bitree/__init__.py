from . import arena
from . import base
from . import avl
from . import keys

from .arena import NIL, NodeArena
from .base import Tree, TreeNode
from .avl import AVLTree, AVLNode
from .keys import default_key

__all__ = [
    "NIL",
    "NodeArena",
    "Tree",
    "TreeNode",
    "AVLTree",
    "AVLNode",
    "default_key",
]
