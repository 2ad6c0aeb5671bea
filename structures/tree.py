"""
tree.py — Binary Search Tree Node
==================================
Immutable node of a persistent BST.

Design decisions:
  - TreeNode is frozen.  Every mutation in algorithms.bst builds new
    nodes along the touched root-to-leaf path and shares the untouched
    subtrees (path copying).  A tree a caller still holds is never
    changed underneath them.
  - No parent back-reference: traversals walk down from the root with an
    explicit stack, so a child never needs to know who owns it.
  - `value` is any totally ordered key; the visualizer uses ints.
  - to_dict() is flat, one record per node in pre-order, each naming its
    children by value.  A degenerate chain of any depth serialises (and
    goes through json.dumps) without nesting.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class TreeNode:
    value: Any
    left:  Optional["TreeNode"] = None
    right: Optional["TreeNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def with_left(self, left: Optional["TreeNode"]) -> "TreeNode":
        return replace(self, left=left)

    def with_right(self, right: Optional["TreeNode"]) -> "TreeNode":
        return replace(self, right=right)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        nodes: List[Dict[str, Any]] = []
        stack = [self]
        while stack:
            node = stack.pop()
            nodes.append({
                "value": node.value,
                "left":  node.left.value if node.left else None,
                "right": node.right.value if node.right else None,
            })
            if node.right:
                stack.append(node.right)
            if node.left:
                stack.append(node.left)
        return {"root": self.value, "nodes": nodes}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["TreeNode"]:
        if data is None:
            return None
        # pre-order reversed: both children of a record are built before it
        built: Dict[Any, "TreeNode"] = {}
        for record in reversed(data["nodes"]):
            left, right = record.get("left"), record.get("right")
            built[record["value"]] = cls(
                value=record["value"],
                left=built[left] if left is not None else None,
                right=built[right] if right is not None else None,
            )
        return built[data["root"]]

    def __repr__(self) -> str:
        left  = self.left.value if self.left else None
        right = self.right.value if self.right else None
        return f"TreeNode(value={self.value!r}, left={left!r}, right={right!r})"
