"""
visualizers/
------------
One stateful engine per experiment.

    from visualizers import create, capture
    viz = create("sorting", values=[5, 2, 9])
"""

from typing import Any, Dict, Type

from visualizers.base       import Visualizer, SteppableVisualizer
from visualizers.bst        import BSTVisualizer
from visualizers.sorting    import SortingVisualizer
from visualizers.scheduling import SchedulingVisualizer
from visualizers.hash_table import HashTableVisualizer, InsertResult
from visualizers.tcp        import TCPVisualizer
from visualizers.submission import capture


VISUALIZERS: Dict[str, Type[Visualizer]] = {
    BSTVisualizer.kind:        BSTVisualizer,
    SortingVisualizer.kind:    SortingVisualizer,
    SchedulingVisualizer.kind: SchedulingVisualizer,
    HashTableVisualizer.kind:  HashTableVisualizer,
    TCPVisualizer.kind:        TCPVisualizer,
}


def create(kind: str, **kwargs: Any) -> Visualizer:
    cls = VISUALIZERS.get(kind)
    if cls is None:
        raise ValueError(f"Unknown experiment: {kind}")
    return cls(**kwargs)


__all__ = [
    "Visualizer",
    "SteppableVisualizer",
    "BSTVisualizer",
    "SortingVisualizer",
    "SchedulingVisualizer",
    "HashTableVisualizer",
    "InsertResult",
    "TCPVisualizer",
    "VISUALIZERS",
    "create",
    "capture",
]
