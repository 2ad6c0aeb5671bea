"""
bst.py — Binary Search Tree
============================
Insert / search / delete over a persistent tree of TreeNode.

Every operation takes the current root and returns the new one.  Nodes
are immutable; a mutation rebuilds only the nodes on the path it walked
and shares everything else.  When nothing changes (duplicate insert,
delete of an absent value) the very same root object comes back, so a
caller can tell "deleted" from "not found" with an identity check.

No operation recurses.  A descent records the (node, side) pairs it
passed on an explicit path, and _rebuild() walks that path back up to
copy the ancestors.  A degenerate chain (ascending inserts) is therefore
as safe as a balanced tree, however deep it gets.

`log` is an optional callable receiving one human-readable line per
decision, in the order the descent makes them.

The BST is not animated: its operations run to completion in one call.
search() still records the visited path so the host can highlight it.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from structures.tree import TreeNode


Log = Optional[Callable[[str], None]]
Path = List[Tuple[TreeNode, str]]      # (ancestor, "left" | "right"), root first

VERTICAL_STEP = 80      # units between levels
ROOT_Y        = 50
MIN_SPACING   = 150
LAYOUT_WIDTH  = 800


def _noop(_: str) -> None:
    pass


def _rebuild(path: Path, child: Optional[TreeNode]) -> Optional[TreeNode]:
    """Copy every ancestor on `path`, bottom-up, hanging `child` where the descent left off."""
    for node, side in reversed(path):
        child = node.with_left(child) if side == "left" else node.with_right(child)
    return child


def _descend(root: Optional[TreeNode], value: Any, log: Callable[[str], None]) -> Tuple[Optional[TreeNode], Path]:
    """Walk towards `value`; returns the matching node (or None) and the ancestors passed."""
    path: Path = []
    node = root
    while node is not None and value != node.value:
        if value < node.value:
            log(f"Comparing {value} < {node.value}, going left")
            path.append((node, "left"))
            node = node.left
        else:
            log(f"Comparing {value} > {node.value}, going right")
            path.append((node, "right"))
            node = node.right
    return node, path


# ---------------------------------------------------------------------------
# Insert
# ---------------------------------------------------------------------------
def insert(root: Optional[TreeNode], value: Any, log: Log = None) -> TreeNode:
    """Insert `value`; a duplicate is logged and leaves the tree untouched."""
    log = log or _noop
    found, path = _descend(root, value, log)
    if found is not None:
        log(f"⚠️ Node {value} already exists")
        return root

    log(f"✅ Inserted node {value}")
    return _rebuild(path, TreeNode(value))


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SearchResult:
    found: bool
    path:  Tuple[Any, ...]      # values of the visited nodes, root first

    def __bool__(self) -> bool:
        return self.found


def search(root: Optional[TreeNode], value: Any, log: Log = None) -> SearchResult:
    log  = log or _noop
    path: List[Any] = []
    node = root
    while node is not None:
        path.append(node.value)
        if value == node.value:
            log(f"✅ Found node {value}")
            return SearchResult(True, tuple(path))
        if value < node.value:
            log(f"Searching {value} < {node.value}, going left")
            node = node.left
        else:
            log(f"Searching {value} > {node.value}, going right")
            node = node.right

    log(f"❌ Node {value} not found")
    return SearchResult(False, tuple(path))


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------
def delete(root: Optional[TreeNode], value: Any, log: Log = None) -> Optional[TreeNode]:
    """
    Three cases once the node is found:
      • leaf            → removed
      • one child       → replaced by that child
      • two children    → takes the in-order successor's value, then the
                          successor is deleted from the right subtree
    """
    log = log or _noop
    target, path = _descend(root, value, log)
    if target is None:
        log(f"❌ Node {value} not found for deletion")
        return root

    log(f"Found node {value} to delete")
    if target.is_leaf:
        log(f"Deleting leaf node {value}")
        replacement = None
    elif target.left is None:
        log(f"Replacing node {value} with right child")
        replacement = target.right
    elif target.right is None:
        log(f"Replacing node {value} with left child")
        replacement = target.left
    else:
        successor = min_node(target.right)
        log(f"Found successor {successor.value} for node {value}")
        # the successor has no left child, so this inner delete stops at one of the first two cases
        right = delete(target.right, successor.value, log)
        replacement = TreeNode(successor.value, target.left, right)

    return _rebuild(path, replacement)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------
def min_node(node: TreeNode) -> TreeNode:
    while node.left is not None:
        node = node.left
    return node


def inorder(root: Optional[TreeNode]) -> List[Any]:
    out: List[Any] = []
    stack: List[TreeNode] = []
    node = root
    while stack or node is not None:
        while node is not None:
            stack.append(node)
            node = node.left
        node = stack.pop()
        out.append(node.value)
        node = node.right
    return out


def depth(root: Optional[TreeNode]) -> int:
    """Number of levels; 0 for an empty tree."""
    deepest = 0
    stack = [(root, 1)] if root is not None else []
    while stack:
        node, level = stack.pop()
        deepest = max(deepest, level)
        for child in (node.left, node.right):
            if child is not None:
                stack.append((child, level + 1))
    return deepest


def size(root: Optional[TreeNode]) -> int:
    count = 0
    stack = [root] if root is not None else []
    while stack:
        node = stack.pop()
        count += 1
        stack.extend(c for c in (node.left, node.right) if c is not None)
    return count


def to_dict(root: Optional[TreeNode]) -> Optional[Dict[str, Any]]:
    return root.to_dict() if root else None


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NodePosition:
    value:  Any
    x:      float
    y:      float
    depth:  int
    parent: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "x": self.x, "y": self.y, "depth": self.depth, "parent": self.parent}


def layout(root: Optional[TreeNode]) -> List[NodePosition]:
    """
    Coordinates for every node, pre-order.  The root sits at (0, ROOT_Y);
    children sit ±spacing to the side and VERTICAL_STEP lower, and the
    spacing halves at every level.  The starting spacing is
    max(MIN_SPACING, LAYOUT_WIDTH / tree depth).  Depends on shape only.
    """
    if root is None:
        return []

    positions: List[NodePosition] = []
    base = max(MIN_SPACING, LAYOUT_WIDTH / depth(root))

    # (node, x, y, spacing, level, parent value); right pushed first so left pops first
    stack = [(root, 0.0, float(ROOT_Y), base, 0, None)]
    while stack:
        node, x, y, spacing, level, parent = stack.pop()
        positions.append(NodePosition(node.value, x, y, level, parent))
        if node.right is not None:
            stack.append((node.right, x + spacing, y + VERTICAL_STEP, spacing / 2, level + 1, node.value))
        if node.left is not None:
            stack.append((node.left, x - spacing, y + VERTICAL_STEP, spacing / 2, level + 1, node.value))
    return positions
