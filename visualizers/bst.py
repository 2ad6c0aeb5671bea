"""
Binary search tree experiment.

The visualizer holds the current root of a persistent tree and swaps it
for whatever the algorithm returns.  An unchanged root object means the
operation was a no-op (duplicate insert, value not found).
"""

import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from algorithms import bst
from config import Settings
from structures.tree import TreeNode
from visualizers.base import Visualizer


class BSTVisualizer(Visualizer):
    kind = "bst"

    def __init__(
        self,
        values: Optional[Iterable[Any]] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(settings, clock)
        self._root: Optional[TreeNode] = None
        for v in values or ():
            self.insert(v)

    @property
    def root(self) -> Optional[TreeNode]:
        return self._root

    def insert(self, value: Any) -> bool:
        self.highlight.clear()
        new_root = bst.insert(self._root, value, self.log)
        inserted = new_root is not self._root
        self._root = new_root
        return inserted

    def search(self, value: Any) -> bool:
        result = bst.search(self._root, value, self.log)
        self.highlight.show(result.path, self.settings.highlight_seconds)
        return result.found

    def delete(self, value: Any) -> bool:
        self.highlight.clear()
        new_root = bst.delete(self._root, value, self.log)
        deleted = new_root is not self._root
        self._root = new_root
        return deleted

    def values(self) -> List[Any]:
        return bst.inorder(self._root)

    def layout(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in bst.layout(self._root)]

    def reset(self) -> None:
        super().reset()
        self._root = None

    def get_snapshot(self) -> Dict[str, Any]:
        return {
            "experiment":  self.kind,
            "tree":        bst.to_dict(self._root),
            "values":      self.values(),
            "size":        bst.size(self._root),
            "depth":       bst.depth(self._root),
            "layout":      self.layout(),
            "highlighted": self.highlight.items,
            "log":         self.log.lines(),
        }
