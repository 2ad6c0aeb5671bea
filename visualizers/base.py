"""
base.py — Visualizer Base Classes
==================================
Every experiment owns one Visualizer instance.  The instance is the only
writer of its state; the host reads it back through get_snapshot(),
which always returns a fresh plain structure (dicts, lists, strings,
numbers, None), never a live internal container.

SteppableVisualizer adds the run lifecycle for experiments driven
through a Stepper (sorting, CPU scheduling, TCP handshake):

    start()  →  step() / tick() …  →  completed
                    cancel()       →  cancelled

Per-step side effects (log lines, highlight, derived presentation state)
are applied as each step is PULLED from the algorithm, so rewinding the
Stepper's buffer never replays them.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generator, Iterator, Optional

from algorithms import get_algorithm, AlgoInfo
from algorithms.step import Step
from config import Settings, DEFAULT_SETTINGS
from engine.highlight import Highlight
from engine.log import EventLog
from engine.stepper import Stepper, StepperState


logger = logging.getLogger(__name__)


class Visualizer(ABC):
    kind: str = ""

    def __init__(self, settings: Optional[Settings] = None, clock: Callable[[], float] = time.monotonic):
        self.settings  = settings or DEFAULT_SETTINGS
        self.log       = EventLog(maxlen=self.settings.log_limit, name=self.kind)
        self.highlight = Highlight(clock)
        self._clock    = clock

    def reset(self) -> None:
        self.log.clear()
        self.highlight.clear()

    @abstractmethod
    def get_snapshot(self) -> Dict[str, Any]:
        """Inert copy of the current state for the host / a submission."""


class SteppableVisualizer(Visualizer):
    family:            str = ""
    default_algorithm: str = ""

    def __init__(
        self,
        algorithm: Optional[str] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(settings, clock)
        self.algorithm = self._lookup(algorithm or self.default_algorithm).key
        self._stepper  = Stepper(name=self.kind, speed=self.settings.default_speed, clock=clock)
        self._last: Optional[Step] = None

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------
    def select_algorithm(self, key: str) -> bool:
        info = self._lookup(key)
        if self._stepper.is_active:
            logger.warning("%s: cannot switch to %s mid-run", self.kind, key)
            return False
        self.algorithm = info.key
        return True

    def start(self) -> bool:
        if self._stepper.is_active:
            logger.warning("%s: start rejected, run already %s", self.kind, self.status)
            return False
        self._last = None
        self._prepare_run()
        return self._stepper.start(self._observe(self._make_generator()))

    def step(self) -> Optional[Step]:
        """Pull and apply exactly one step; None once the run is over."""
        if not self._stepper.next_step():
            return None
        return self._stepper.current_step

    def back(self) -> Optional[Step]:
        """
        Move the replay cursor one buffered step back.  Only the returned
        Step looks into the past; the live state is not rolled back.
        """
        if not self._stepper.prev_step():
            return None
        return self._stepper.current_step

    def goto(self, index: int) -> Optional[Step]:
        """Move the replay cursor to step `index`, pulling forward when it is not buffered yet."""
        if not self._stepper.goto_step(index):
            return None
        return self._stepper.current_step

    def tick(self) -> bool:
        return self._stepper.tick()

    def pause(self) -> None:
        self._stepper.pause()

    def play(self) -> None:
        self._stepper.play()

    def toggle_play(self) -> None:
        self._stepper.toggle_play()

    def set_speed(self, preset: str) -> None:
        self._stepper.set_speed(preset)

    def set_speed_seconds(self, seconds: float) -> None:
        self._stepper.set_speed_value(seconds)

    @property
    def speed(self) -> float:
        return self._stepper.speed

    def cancel(self) -> bool:
        """Stop the active run at the current step boundary.  State is kept as is."""
        if not self._stepper.is_active:
            return False
        self._stepper.cancel()
        # the cursor may sit behind the newest buffered step; the cancel is seen on the next pull
        self._stepper.jump_to_end()
        self.highlight.clear()
        self.log.append("⏹️ Run cancelled")
        self._on_cancel()
        return True

    def run_to_completion(self) -> StepperState:
        if not self._stepper.is_active and not self.start():
            return self._stepper.state
        self._stepper.jump_to_end()
        return self._stepper.state

    def reset(self) -> None:
        self._stepper.reset()
        self._last = None
        super().reset()

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def status(self) -> str:
        return self._stepper.state.value

    @property
    def is_running(self) -> bool:
        return self._stepper.is_active

    @property
    def info(self) -> AlgoInfo:
        return self._lookup(self.algorithm)

    @property
    def counters(self) -> Dict[str, Any]:
        return dict(self._last.metrics) if self._last else {}

    @property
    def current_step(self) -> Optional[Step]:
        return self._last

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------
    @abstractmethod
    def _make_generator(self) -> Generator[Step, None, None]:
        """A fresh algorithm generator over this visualizer's own state."""

    def _prepare_run(self) -> None:
        pass

    def _apply(self, step: Step) -> None:
        pass

    def _on_cancel(self) -> None:
        pass

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _lookup(self, key: str) -> AlgoInfo:
        info = get_algorithm(key)
        if info is None or info.family != self.family:
            raise ValueError(f"Unknown algorithm: {key}")
        return info

    def _observe(self, steps: Generator[Step, None, None]) -> Iterator[Step]:
        try:
            for step in steps:
                if step.message:
                    self.log.append(step.message)
                self._last = step
                self._apply(step)
                yield step
        finally:
            steps.close()

    def _base_snapshot(self) -> Dict[str, Any]:
        return {
            "experiment": self.kind,
            "algorithm":  self.algorithm,
            "status":     self.status,
            "counters":   self.counters,
            "log":        self.log.lines(),
        }
