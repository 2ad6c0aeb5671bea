"""
Sorting experiment: one integer array, one algorithm per run.

The algorithm generator sorts the visualizer's own list in place, so a
cancelled run leaves the array exactly as the last applied step left it.
"sorted" and "comparing" are presentation state derived from the steps
and are kept apart from the array itself.
"""

import logging
import random
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from algorithms import SORTING
from algorithms.step import Step
from config import Settings
from visualizers.base import SteppableVisualizer


logger = logging.getLogger(__name__)


class SortingVisualizer(SteppableVisualizer):
    kind              = "sorting"
    family            = SORTING
    default_algorithm = "bubble"

    def __init__(
        self,
        values: Optional[Iterable[int]] = None,
        algorithm: Optional[str] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
        seed: Optional[int] = None,
    ):
        super().__init__(algorithm, settings, clock)
        self._rng = random.Random(seed)
        self._array:  List[int] = []
        self._sorted: List[int] = []
        if values is None:
            self.shuffle()
        else:
            self.set_array(values)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def set_array(self, values: Iterable[int]) -> bool:
        if self.is_running:
            logger.warning("sorting: array change rejected mid-run")
            return False
        self._stepper.reset()
        self._array  = list(values)
        self._sorted = []
        self._last   = None
        self.highlight.clear()
        self.log.append(f"📥 Loaded array of {len(self._array)} values")
        return True

    def shuffle(self, size: Optional[int] = None) -> bool:
        size = self.settings.array_size if size is None else size
        values = [self._rng.randint(self.settings.array_min, self.settings.array_max) for _ in range(size)]
        if not self.set_array(values):
            return False
        self.log.append("🎲 Generated new random array")
        return True

    @property
    def array(self) -> List[int]:
        return list(self._array)

    @property
    def sorted_indices(self) -> List[int]:
        return sorted(self._sorted)

    @property
    def comparing(self) -> List[int]:
        return self.highlight.items

    # ------------------------------------------------------------------
    # Run hooks
    # ------------------------------------------------------------------
    def _make_generator(self):
        return self.info.fn(self._array)

    def _prepare_run(self) -> None:
        self._sorted = []
        self.highlight.clear()

    def _apply(self, step: Step) -> None:
        self._sorted = list(step.state.get("sorted", self._sorted))
        self.highlight.show(step.highlighted)

    def reset(self) -> None:
        super().reset()
        self.shuffle()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def get_snapshot(self) -> Dict[str, Any]:
        snap = self._base_snapshot()
        snap.update({
            "array":     list(self._array),
            "sorted":    self.sorted_indices,
            "comparing": self.comparing,
        })
        return snap
