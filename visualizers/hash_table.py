"""
Hash table experiment: fixed capacity, open addressing, linear probing.

delete() clears a slot by index and does not leave a tombstone.  A key
that collided past the cleared slot can become unreachable to search()
afterwards.  See DESIGN.md before changing it.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from algorithms.hashing import position_hash, probe_for_insert, probe_for_search
from config import Settings
from structures.hash_entry import HashEntry
from visualizers.base import Visualizer


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsertResult:
    ok:      bool
    index:   Optional[int]
    probes:  int
    updated: bool = False       # key was already present, value replaced


@dataclass(frozen=True)
class SearchResult:
    found:  bool
    index:  Optional[int]
    probes: int


class HashTableVisualizer(Visualizer):
    kind = "hash-table"

    def __init__(
        self,
        capacity: Optional[int] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(settings, clock)
        self.capacity = capacity or self.settings.hash_capacity
        self._slots: List[Optional[HashEntry]] = [None] * self.capacity
        self.operations = self._zero_counts()

    @staticmethod
    def _zero_counts() -> Dict[str, int]:
        return {"insertions": 0, "deletions": 0, "searches": 0, "collisions": 0}

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def hash(self, key: str) -> int:
        h = position_hash(key, self.capacity)
        self.log.append(f'Hash("{key}") = {h}')
        return h

    def insert(self, key: str, value: str) -> InsertResult:
        self.highlight.clear()
        probe = probe_for_insert(self._slots, key, self.hash(key), self.log)

        if probe.index is None:
            self.log.append("❌ Table is full, cannot insert")
            logger.warning("hash-table: insert of %r failed, table full", key)
            return InsertResult(False, None, probe.probes)

        idx = probe.index
        updated = self._slots[idx] is not None
        self._slots[idx] = HashEntry(key=key, value=value, index=idx)

        if probe.collided:
            self.operations["collisions"] += 1
        self.operations["insertions"] += 1
        self.highlight.show([idx], self.settings.highlight_seconds)

        if updated:
            self.log.append(f'✏️ Updated "{key}": "{value}" at index {idx}')
        else:
            self.log.append(f'✅ Inserted "{key}": "{value}" at index {idx}')
        return InsertResult(True, idx, probe.probes, updated)

    def search(self, key: str) -> SearchResult:
        self.highlight.clear()
        probe = probe_for_search(self._slots, key, self.hash(key), self.log)

        if probe.index is None:
            self.log.append(f'❌ Key "{key}" not found')
            return SearchResult(False, None, probe.probes)

        self.operations["searches"] += 1
        self.highlight.show([probe.index], self.settings.search_highlight_seconds)
        self.log.append(f'✅ Found "{key}" at index {probe.index}')
        return SearchResult(True, probe.index, probe.probes)

    def delete(self, index: int) -> bool:
        self.highlight.clear()
        if not 0 <= index < self.capacity or self._slots[index] is None:
            return False
        key = self._slots[index].key
        self._slots[index] = None
        self.operations["deletions"] += 1
        self.log.append(f'🗑️ Deleted key "{key}" from index {index}')
        return True

    def reset(self) -> None:
        super().reset()
        self._slots = [None] * self.capacity
        self.operations = self._zero_counts()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def slots(self) -> List[Optional[HashEntry]]:
        return list(self._slots)

    @property
    def occupied(self) -> int:
        return sum(1 for s in self._slots if s is not None)

    @property
    def load_factor(self) -> float:
        return self.occupied / self.capacity

    def get_snapshot(self) -> Dict[str, Any]:
        return {
            "experiment":  self.kind,
            "capacity":    self.capacity,
            "slots":       [s.to_dict() if s else None for s in self._slots],
            "load_factor": self.load_factor,
            "operations":  dict(self.operations),
            "highlighted": self.highlight.items,
            "log":         self.log.lines(),
        }
