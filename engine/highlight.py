"""
highlight.py — Ephemeral Highlight
===================================
"Currently highlighted" elements (a search path, the slot just written,
the pair being compared).  A highlight disappears after its display
duration or as soon as the next operation replaces or clears it,
whichever comes first.

The clock is injectable so tests can move time forward by hand.
"""

import time
from typing import Any, Callable, Iterable, List, Optional


class Highlight:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._items: List[Any] = []
        self._expires_at: Optional[float] = None

    def show(self, items: Iterable[Any], duration: Optional[float] = None) -> None:
        """Replace the highlight.  duration=None keeps it until the next change."""
        self._items = list(items)
        self._expires_at = None if duration is None else self._clock() + duration

    def clear(self) -> None:
        self._items = []
        self._expires_at = None

    @property
    def items(self) -> List[Any]:
        if self._expires_at is not None and self._clock() >= self._expires_at:
            self.clear()
        return list(self._items)

    def __bool__(self) -> bool:
        return bool(self.items)
