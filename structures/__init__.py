"""
structures/
-----------
Core data layer.  Public API:

    from structures import TreeNode
    from structures import Process, TimelineEntry, default_processes
    from structures import HashEntry
"""

from structures.tree       import TreeNode
from structures.process    import Process, TimelineEntry, default_processes, color_for
from structures.hash_entry import HashEntry

__all__ = [
    "TreeNode",
    "Process",   "TimelineEntry", "default_processes", "color_for",
    "HashEntry",
]
