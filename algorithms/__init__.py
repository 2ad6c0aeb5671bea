"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every steppable algorithm the lab knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "bubble": AlgoInfo(key, label, fn, pseudocode, family, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine and the visualizers both
consume it, so adding a new steppable algorithm is: write the generator,
add one entry here.

The BST and hash table operations are not in the registry; they are
immediate (one call, one result) rather than steppable runs.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Dict, Optional

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms.sorting    import (bubble_sort, insertion_sort, quick_sort,
                                   BUBBLE_PSEUDOCODE, INSERTION_PSEUDOCODE, QUICK_PSEUDOCODE)
from algorithms.scheduling import (fcfs, sjf, round_robin,
                                   FCFS_PSEUDOCODE, SJF_PSEUDOCODE, RR_PSEUDOCODE)
from algorithms.tcp        import tcp_handshake, PSEUDOCODE as _tcp_pc


SORTING    = "sorting"
SCHEDULING = "scheduling"
PROTOCOL   = "protocol"


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:               str                    # registry key, e.g. "bubble"
    label:             str                    # human label, e.g. "Bubble Sort"
    fn:                Callable               # the generator function
    pseudocode:        List[str]              # lines for the side-panel
    family:            str                    # SORTING / SCHEDULING / PROTOCOL
    tags:              List[str] = field(default_factory=list)
    preemptive:        bool     = False       # scheduling only
    complexity_time:   str      = ""
    complexity_space:  str      = ""
    description:       str      = ""          # one-liner for the UI card

    def to_dict(self) -> Dict[str, object]:
        return {
            "key":              self.key,
            "label":            self.label,
            "family":           self.family,
            "tags":             list(self.tags),
            "preemptive":       self.preemptive,
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
            "pseudocode":       list(self.pseudocode),
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bubble": AlgoInfo(
        key="bubble", label="Bubble Sort", fn=bubble_sort, pseudocode=BUBBLE_PSEUDOCODE,
        family=SORTING, tags=["in-place", "stable"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Repeatedly swaps adjacent out-of-order pairs. The largest value bubbles to the end.",
    ),

    "insertion": AlgoInfo(
        key="insertion", label="Insertion Sort", fn=insertion_sort, pseudocode=INSERTION_PSEUDOCODE,
        family=SORTING, tags=["in-place", "stable", "adaptive"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Grows a sorted prefix, sliding each new value left into place.",
    ),

    "quick": AlgoInfo(
        key="quick", label="Quick Sort", fn=quick_sort, pseudocode=QUICK_PSEUDOCODE,
        family=SORTING, tags=["in-place", "divide-and-conquer"],
        complexity_time="O(n log n) avg, O(n²) worst", complexity_space="O(log n)",
        description="Lomuto partition around the last element, then recurse on both sides.",
    ),

    "fcfs": AlgoInfo(
        key="fcfs", label="First Come First Serve", fn=fcfs, pseudocode=FCFS_PSEUDOCODE,
        family=SCHEDULING, tags=["non-preemptive"],
        description="Runs processes in arrival order, each to completion.",
    ),

    "sjf": AlgoInfo(
        key="sjf", label="Shortest Job First", fn=sjf, pseudocode=SJF_PSEUDOCODE,
        family=SCHEDULING, tags=["non-preemptive"],
        description="Among arrived processes, runs the shortest burst to completion.",
    ),

    "rr": AlgoInfo(
        key="rr", label="Round Robin", fn=round_robin, pseudocode=RR_PSEUDOCODE,
        family=SCHEDULING, tags=["preemptive", "time-sliced"], preemptive=True,
        description="Cycles through ready processes, giving each a fixed quantum.",
    ),

    "tcp_handshake": AlgoInfo(
        key="tcp_handshake", label="TCP Three-Way Handshake", fn=tcp_handshake, pseudocode=_tcp_pc,
        family=PROTOCOL, tags=["networking"],
        description="SYN, SYN-ACK, ACK: how a TCP connection is opened.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_family(family: str) -> List[AlgoInfo]:
    return [a for a in REGISTRY.values() if a.family == family]


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "SORTING",
    "SCHEDULING",
    "PROTOCOL",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_family",
]
