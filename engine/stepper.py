"""
stepper.py — Step-by-Step Playback Engine
==========================================
The Stepper is the ONLY object a host drives during a steppable run.
It owns the generator, buffers every Step it has seen (enabling rewind
without re-running), and exposes a start/play/pause/cancel/next/speed API.

State machine:
    IDLE     →  start()             →  RUNNING
    RUNNING  →  pause()             →  PAUSED
    PAUSED   →  play()              →  RUNNING
    RUNNING | PAUSED  →  (generator exhausted)          →  COMPLETED
    RUNNING | PAUSED  →  cancel() + next step boundary  →  CANCELLED
    any      →  reset()             →  IDLE

Only one run is active at a time: start() while RUNNING or PAUSED is
rejected and returns False.  Nothing is queued.

Cancellation is cooperative.  cancel() only raises a flag; the flag is
looked at before the next step would be pulled, and the generator is
closed there.  Whatever the algorithm did up to its last yield stays
done.

Pacing belongs to the host: tick() advances at most one step when
`speed` seconds have passed.  Algorithms themselves never sleep.

Thread safety:
  This class is NOT thread-safe.  The host must call next_step() / tick()
  from a single thread (or an async event loop).
"""

import logging
import time
from enum import Enum
from typing import Generator, Optional, Callable, List

from algorithms.step import Step


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class StepperState(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ACTIVE_STATES = (StepperState.RUNNING, StepperState.PAUSED)


# ---------------------------------------------------------------------------
# Speed presets (seconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1.0,    # teaching mode
    "medium": 0.5,
    "fast":   0.15,   # demo mode
    "turbo":  0.05,
}


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper:
    """
    Attributes:
        state       : Current StepperState.
        steps       : List of all Steps pulled so far (buffer for rewind).
        current_idx : Index into `steps` that is currently displayed.
        speed       : Seconds between auto-advance ticks.
        on_step     : Optional callback(Step) fired every time the current step changes.
                      The host hooks its re-render here.
        name        : Label used in log records.
    """

    def __init__(
        self,
        on_step: Optional[Callable[[Step], None]] = None,
        speed: str = "medium",
        clock: Callable[[], float] = time.monotonic,
        name: str = "run",
    ):
        self._generator:  Optional[Generator[Step, None, None]] = None
        self.steps:       List[Step]    = []
        self.current_idx: int           = -1
        self.state:       StepperState  = StepperState.IDLE
        self.speed:       float         = SPEED_PRESETS.get(speed, SPEED_PRESETS["medium"])
        self.on_step:     Optional[Callable[[Step], None]] = on_step
        self.name:        str           = name

        self._cancel_requested: bool = False
        self._clock = clock
        self._last_tick: float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, generator: Generator[Step, None, None]) -> bool:
        """Attach a fresh algorithm generator.  Rejected while a run is active."""
        if self.is_active:
            logger.warning("%s: start rejected, a run is already %s", self.name, self.state.value)
            generator.close()
            return False

        self._generator        = generator
        self.steps             = []
        self.current_idx       = -1
        self._cancel_requested = False
        self.state             = StepperState.RUNNING
        self._last_tick        = self._clock()
        logger.info("%s: run started", self.name)
        return True

    def reset(self) -> None:
        """Back to IDLE, dropping the generator and the step buffer."""
        self._close()
        self.steps             = []
        self.current_idx       = -1
        self._cancel_requested = False
        self.state             = StepperState.IDLE

    def cancel(self) -> None:
        """
        Ask the run to stop at the next step boundary.  A host stepping
        by hand calls next_step() afterwards to let the run observe it;
        inside jump_to_end() the loop observes it on its own.
        """
        if self.is_active:
            self._cancel_requested = True

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_step(self) -> bool:
        """Advance one step forward.  Returns False if the run is over."""
        target = self.current_idx + 1
        if target >= len(self.steps):
            if not self._fetch_next():
                return False
        self._goto(target)
        return True

    def prev_step(self) -> bool:
        """Rewind one buffered step.  Returns False if already at start."""
        if self.current_idx <= 0:
            return False
        self._goto(self.current_idx - 1)
        return True

    def goto_step(self, idx: int) -> bool:
        """Jump to an arbitrary step index, pulling forward if needed."""
        while idx >= len(self.steps):
            if not self._fetch_next():
                break
        if 0 <= idx < len(self.steps):
            self._goto(idx)
            return True
        return False

    def rewind(self) -> None:
        """Jump back to step 0."""
        if self.steps:
            self._goto(0)

    def jump_to_end(self) -> None:
        """Pull until the generator is exhausted or a cancel is observed."""
        while self._fetch_next():
            pass
        if self.steps:
            self._goto(len(self.steps) - 1)

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        if self.state != StepperState.PAUSED:
            return
        self.state      = StepperState.RUNNING
        self._last_tick = self._clock()

    def pause(self) -> None:
        if self.state == StepperState.RUNNING:
            self.state = StepperState.PAUSED

    def toggle_play(self) -> None:
        if self.state == StepperState.RUNNING:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """
        Call periodically (e.g. every 50 ms).  If running and enough
        time has elapsed, advances one step.  Returns True if a step
        was taken.
        """
        if self.state != StepperState.RUNNING:
            return False
        now = self._clock()
        if now - self._last_tick >= self.speed:
            self._last_tick = now
            return self.next_step()
        return False

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        self.speed = SPEED_PRESETS.get(preset, SPEED_PRESETS["medium"])

    def set_speed_value(self, seconds: float) -> None:
        self.speed = max(0.02, seconds)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_step(self) -> Optional[Step]:
        if 0 <= self.current_idx < len(self.steps):
            return self.steps[self.current_idx]
        return None

    @property
    def total_steps_fetched(self) -> int:
        return len(self.steps)

    @property
    def is_active(self) -> bool:
        return self.state in ACTIVE_STATES

    @property
    def is_finished(self) -> bool:
        return self.state in (StepperState.COMPLETED, StepperState.CANCELLED)

    @property
    def is_running(self) -> bool:
        return self.state == StepperState.RUNNING

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _fetch_next(self) -> bool:
        """Pull one Step from the generator into the buffer."""
        if self._generator is None:
            return False
        if self._cancel_requested:
            self._close()
            self.state = StepperState.CANCELLED
            logger.info("%s: run cancelled after %d steps", self.name, len(self.steps))
            return False
        try:
            step = next(self._generator)
        except StopIteration:
            self._generator = None
            self.state = StepperState.COMPLETED
            logger.info("%s: run completed in %d steps", self.name, len(self.steps))
            return False
        self.steps.append(step)
        if step.is_final:
            self._close()
            self.state = StepperState.COMPLETED
            logger.info("%s: run completed in %d steps", self.name, len(self.steps))
        return True

    def _goto(self, idx: int) -> None:
        self.current_idx = idx
        self._notify(self.steps[idx] if 0 <= idx < len(self.steps) else None)

    def _notify(self, step: Optional[Step]) -> None:
        if self.on_step and step is not None:
            self.on_step(step)

    def _close(self) -> None:
        if self._generator is not None:
            self._generator.close()
            self._generator = None
