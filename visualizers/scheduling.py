"""
CPU scheduling experiment: a process set, one policy per run, and the
unit-by-unit timeline the Gantt chart is drawn from.

The process list held here is the template.  Each run hands it to the
scheduler, which works on fresh copies, so the template's burst and
arrival times are never touched.  Metrics are only reported for a run
that completed; a cancelled run keeps its partial timeline but has no
metrics.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from algorithms import SCHEDULING
from algorithms.scheduling import ScheduleMetrics, compute_metrics
from algorithms.step import Step
from config import Settings
from engine.stepper import StepperState
from structures.process import Process, TimelineEntry, default_processes
from visualizers.base import SteppableVisualizer


logger = logging.getLogger(__name__)

ProcessDef = Union[Process, Dict[str, Any]]


class SchedulingVisualizer(SteppableVisualizer):
    kind              = "cpu-scheduling"
    family            = SCHEDULING
    default_algorithm = "fcfs"

    def __init__(
        self,
        processes: Optional[Iterable[ProcessDef]] = None,
        algorithm: Optional[str] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(algorithm, settings, clock)
        self._processes:    List[Process]       = default_processes()
        self._timeline:     List[TimelineEntry] = []
        self._current_time: int                 = 0
        if processes is not None:
            self.set_processes(processes)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def set_processes(self, processes: Iterable[ProcessDef]) -> bool:
        """Replace the process set.  Raises ValueError on a repeated name."""
        if self.is_running:
            logger.warning("cpu-scheduling: process change rejected mid-run")
            return False
        procs = []
        for i, p in enumerate(processes):
            procs.append(p.fresh_copy() if isinstance(p, Process) else Process.from_dict(p, i))
        names = [p.name for p in procs]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate process name: {', '.join(duplicates)}")
        self._processes = procs
        self._clear_run()
        return True

    def add_process(self, burst_time: int, arrival_time: int = 0, name: Optional[str] = None) -> Optional[Process]:
        """
        Append one process.  Without a name the first free P<n> is used;
        an explicit name already in the set raises ValueError.
        """
        if self.is_running:
            logger.warning("cpu-scheduling: add_process rejected mid-run")
            return None
        taken = {p.name for p in self._processes}
        if name and name in taken:
            raise ValueError(f"Duplicate process name: {name}")
        next_id = max((p.id for p in self._processes), default=0) + 1
        while not name and f"P{next_id}" in taken:
            next_id += 1
        proc = Process(id=next_id, name=name or f"P{next_id}", burst_time=burst_time, arrival_time=arrival_time)
        self._processes.append(proc)
        self._clear_run()
        self.log.append(f"➕ Added {proc.name} (Burst: {burst_time}, Arrival: {arrival_time})")
        return proc

    @property
    def processes(self) -> List[Process]:
        return [p.fresh_copy() for p in self._processes]

    @property
    def timeline(self) -> List[TimelineEntry]:
        return list(self._timeline)

    @property
    def current_time(self) -> int:
        return self._current_time

    def metrics(self) -> ScheduleMetrics:
        if self._stepper.state != StepperState.COMPLETED:
            return ScheduleMetrics()
        return compute_metrics(self._processes, self._timeline)

    # ------------------------------------------------------------------
    # Run hooks
    # ------------------------------------------------------------------
    def _make_generator(self):
        info = self.info
        if info.preemptive:
            return info.fn(self._processes, timeline=self._timeline, quantum=self.settings.rr_quantum)
        return info.fn(self._processes, timeline=self._timeline)

    def _prepare_run(self) -> None:
        self._timeline     = []
        self._current_time = 0
        self.log.clear()
        self.highlight.clear()

    def _apply(self, step: Step) -> None:
        self._current_time = step.state.get("clock", self._current_time)
        self.highlight.show(step.highlighted)
        if step.is_final:
            self.log.append("📊 Performance Metrics:")
            self.log.extend(
                f"{s.name}: Waiting Time = {s.waiting_time}, Turnaround Time = {s.turnaround_time}"
                for s in compute_metrics(self._processes, self._timeline).per_process
            )

    def reset(self) -> None:
        super().reset()
        self._processes = default_processes()
        self._clear_run()

    def _clear_run(self) -> None:
        self._stepper.reset()
        self._last         = None
        self._timeline     = []
        self._current_time = 0
        self.highlight.clear()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def get_snapshot(self) -> Dict[str, Any]:
        metrics = self.metrics()
        stats = {s.name: s for s in metrics.per_process}

        processes = []
        for p in self._processes:
            row = p.to_dict()
            s = stats.get(p.name)
            row["waiting_time"]    = s.waiting_time if s else None
            row["turnaround_time"] = s.turnaround_time if s else None
            processes.append(row)

        snap = self._base_snapshot()
        snap.update({
            "processes":    processes,
            "timeline":     [e.to_dict() for e in self._timeline],
            "current_time": self._current_time,
            "running":      self.highlight.items,
            "metrics":      metrics.to_dict(),
        })
        return snap
