"""
hashing.py — Linear Probing
============================
The hash function and probe sequences behind the hash table experiment.

The hash is a position-weighted character sum:

    hash(key) = Σ ord(key[i]) · (i + 1)   (mod capacity)

It is deliberately simple so students can work it out by hand.  It is
not collision resistant and should never be used for anything else.

Probing walks hash(key), hash(key)+1, … (mod capacity) and is bounded to
`capacity` probes, so a full table is detected instead of looping.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from structures.hash_entry import HashEntry


Log = Optional[Callable[[str], None]]
Slots = Sequence[Optional[HashEntry]]


def _noop(_: str) -> None:
    pass


def position_hash(key: str, capacity: int) -> int:
    h = 0
    for i, ch in enumerate(key):
        h = (h + ord(ch) * (i + 1)) % capacity
    return h


@dataclass(frozen=True)
class ProbeResult:
    """
    index   : Slot the probe settled on (None when nothing was found).
    probes  : Slots stepped past before settling.
    visited : Every slot index examined, in order.
    """

    index:   Optional[int]
    probes:  int
    visited: Tuple[int, ...]

    @property
    def collided(self) -> bool:
        return self.probes > 0


def probe_for_insert(slots: Slots, key: str, start: int, log: Log = None) -> ProbeResult:
    """
    First slot that is empty or already holds `key`.  Returns index None
    if every slot was probed without success (table full).
    """
    log      = log or _noop
    capacity = len(slots)
    index    = start
    probes   = 0
    visited: List[int] = [index]

    while slots[index] is not None and slots[index].key != key:
        probes += 1
        log(f"⚠️ Collision at index {index}, probing...")
        index = (index + 1) % capacity
        if probes >= capacity:
            return ProbeResult(None, probes, tuple(visited))
        visited.append(index)

    return ProbeResult(index, probes, tuple(visited))


def probe_for_search(slots: Slots, key: str, start: int, log: Log = None) -> ProbeResult:
    """Stops at the matching key (hit) or the first empty slot (miss)."""
    log      = log or _noop
    capacity = len(slots)
    index    = start
    probes   = 0
    visited: List[int] = []

    while slots[index] is not None:
        visited.append(index)
        if slots[index].key == key:
            return ProbeResult(index, probes, tuple(visited))
        probes += 1
        log(f"Checking index {index}...")
        index = (index + 1) % capacity
        if probes >= capacity:
            break

    return ProbeResult(None, probes, tuple(visited))
