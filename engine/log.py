"""
log.py — Event Log
===================
The append-only, human-readable log every visualizer keeps.  It is the
part of the state students read line by line and the part that ends up
in a submission, so it is plain strings only.

The log is a ring buffer: once `maxlen` lines are held, the oldest line
drops off.  Every line is mirrored to the `logging` module at DEBUG.
"""

import logging
from collections import deque
from typing import Deque, Iterator, List, Optional


logger = logging.getLogger(__name__)


class EventLog:
    def __init__(self, maxlen: Optional[int] = 500, name: str = "lab"):
        self._lines: Deque[str] = deque(maxlen=maxlen)
        self.name = name
        self.dropped = 0        # lines pushed out by the ring buffer

    def append(self, line: str) -> None:
        if self._lines.maxlen is not None and len(self._lines) == self._lines.maxlen:
            self.dropped += 1
        self._lines.append(line)
        logger.debug("[%s] %s", self.name, line)

    __call__ = append

    def extend(self, lines) -> None:
        for line in lines:
            self.append(line)

    def lines(self) -> List[str]:
        return list(self._lines)

    def tail(self, n: int) -> List[str]:
        if n <= 0:
            return []
        return list(self._lines)[-n:]

    def truncate(self, keep: int) -> None:
        """Drop everything but the newest `keep` lines."""
        while len(self._lines) > max(keep, 0):
            self._lines.popleft()
            self.dropped += 1

    def clear(self) -> None:
        self._lines.clear()
        self.dropped = 0

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._lines))
