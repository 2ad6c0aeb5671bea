"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete steppable run (all Steps), then computes the
analytics a host shows next to the animation and in Comparison Mode.

Usage:
    rec = Recorder()
    rec.start("quick", values=[5, 3, 8, 1])
    rec.run_to_completion()          # exhausts the generator
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # serialisable snapshot for save/replay

Comparison Mode:
    The host holds two Recorders (one per algorithm), runs both to
    completion on the SAME input, then calls compare(rec1, rec2).

Inputs are copied before the run starts: a Recorder never sorts the
caller's list or touches the caller's Process objects.
"""

import copy
import logging
import sys
import time
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any

from algorithms import get_algorithm, AlgoInfo
from algorithms.step import Step
from engine.stepper import Stepper, StepperState


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass — what the analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:          str             = ""
    algo_label:        str             = ""
    family:            str             = ""
    status:            str             = ""
    total_steps:       int             = 0          # number of Steps yielded
    comparisons:       int             = 0
    swaps:             int             = 0
    time_units:        int             = 0          # scheduling: executed CPU units
    idle_units:        int             = 0
    avg_waiting_time:  Optional[float] = None       # scheduling only
    wall_time_ms:      float           = 0.0        # wall-clock time to run to completion
    memory_bytes:      int             = 0          # approx size of the step buffer


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_steps:       str = ""   # which run needed fewer steps
    winner_comparisons: str = ""
    winner_swaps:       str = ""
    winner_waiting:     str = ""   # lower average waiting time

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps       : Full list of Steps from the run.
        metrics     : Computed RunMetrics (available after run_to_completion).
        stepper     : The underlying Stepper (if you want live step-by-step access).
    """

    def __init__(self):
        self.steps:     List[Step]           = []
        self.metrics:   Optional[RunMetrics] = None
        self.stepper:   Optional[Stepper]    = None

        self._algo_info:  Optional[AlgoInfo] = None
        self._inputs:     Dict[str, Any]     = {}
        self._start_time: float              = 0.0

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algo_key: str, **inputs: Any) -> None:
        """Initialise the generator and stepper for this run."""
        info = get_algorithm(algo_key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algo_key}")

        self._algo_info = info
        self._inputs    = copy.deepcopy(inputs)
        self.steps      = []
        self.metrics    = None

        gen = info.fn(**copy.deepcopy(inputs))

        # wrap in a Stepper (but we'll drive it manually for recording)
        self.stepper = Stepper(name=f"recorder:{algo_key}")
        self.stepper.start(gen)

    def run_to_completion(self) -> RunMetrics:
        """Exhaust the generator, record every step, compute metrics."""
        if self.stepper is None:
            raise RuntimeError("Call start() first.")

        self._start_time = time.monotonic()

        # pull every step
        self.stepper.jump_to_end()
        self.steps = list(self.stepper.steps)

        wall_ms = (time.monotonic() - self._start_time) * 1000

        # --- compute metrics ---
        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_info.key if self._algo_info else "",
            "inputs":   _plain(self._inputs),
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "steps":    [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        last = self.steps[-1] if self.steps else None
        counters = last.metrics if last else {}

        avg_wait = None
        if last and "metrics" in last.state:
            avg_wait = last.state["metrics"].get("avg_waiting_time")

        # approximate memory: sizeof the steps buffer
        mem = sys.getsizeof(self.steps)
        for s in self.steps:
            mem += sys.getsizeof(s)

        status = self.stepper.state.value if self.stepper else StepperState.IDLE.value
        logger.debug("recorded %s: %d steps, %s", info.key if info else "?", len(self.steps), status)

        return RunMetrics(
            algo_key=info.key if info else "",
            algo_label=info.label if info else "",
            family=info.family if info else "",
            status=status,
            total_steps=len(self.steps),
            comparisons=counters.get("comparisons", 0),
            swaps=counters.get("swaps", 0),
            time_units=counters.get("time_units", 0),
            idle_units=counters.get("idle_units", 0),
            avg_waiting_time=avg_wait,
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
        )


def _plain(value: Any) -> Any:
    """Inputs as JSON-friendly data (Process objects become dicts)."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key, lower_is_better=True):
        if l_val is None or r_val is None:
            return ""
        if l_val == r_val:
            return "tie"
        if lower_is_better:
            return l_key if l_val < r_val else r_key
        return l_key if l_val > r_val else r_key

    return ComparisonResult(
        left=l,
        right=r,
        winner_steps=winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
        winner_comparisons=winner(l.comparisons, r.comparisons, l.algo_label, r.algo_label),
        winner_swaps=winner(l.swaps, r.swaps, l.algo_label, r.algo_label),
        winner_waiting=winner(l.avg_waiting_time, r.avg_waiting_time, l.algo_label, r.algo_label),
    )
