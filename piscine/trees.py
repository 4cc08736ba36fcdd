"""Binary trees of toys: balance check and zigzag traversal."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TreeNode:
    has_toy: bool = False
    left: TreeNode | None = None
    right: TreeNode | None = None


def count_toys(root: TreeNode | None) -> int:
    """Number of nodes holding a toy in the tree rooted at ``root``."""
    total = 0
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        total += node.has_toy
        stack.extend(child for child in (node.left, node.right) if child is not None)
    return total


def are_toys_balanced(root: TreeNode | None) -> bool:
    """True when the left and right subtrees hold the same number of toys."""
    if root is None:
        return True
    return count_toys(root.left) == count_toys(root.right)


def unroll_garland(root: TreeNode | None) -> list[bool]:
    """Zigzag level-order traversal.

    The first level below the root is read left to right, the next one
    right to left, and so on.
    """
    result: list[bool] = []
    level = [root] if root is not None else []
    depth = 0
    while level:
        values = [node.has_toy for node in level]
        if depth % 2 == 0:
            values.reverse()
        result.extend(values)
        level = [
            child
            for node in level
            for child in (node.left, node.right)
            if child is not None
        ]
        depth += 1
    return result