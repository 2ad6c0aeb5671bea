"""
scheduling.py — CPU Scheduling
===============================
Generator-based FCFS, non-preemptive SJF and Round Robin over a set of
Process templates.  Each generator works on fresh copies of the templates
and yields a Step at:

  1. A process is picked                 →  StepKind.DISPATCH
  2. One unit of CPU time executes       →  StepKind.EXECUTE (one TimelineEntry appended)
  3. The clock moves with nothing ready  →  StepKind.IDLE
  4. A quantum expires (Round Robin)     →  StepKind.PREEMPT
  5. A process finishes its burst        →  StepKind.COMPLETE
  6. Final step                          →  StepKind.DONE, with the metrics

Every EXECUTE step is a suspension point, so the host decides how long a
unit of CPU time "lasts" on screen.  Nothing in here sleeps.

The timeline list is append-only during a run and is the only input to
compute_metrics().  Idle ticks never produce an entry, so the timeline
length always equals the total burst of the process set.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional

from algorithms.step import Step, StepBuilder, StepKind
from structures.process import Process, TimelineEntry


DEFAULT_QUANTUM = 2

FCFS_PSEUDOCODE: List[str] = [
    "def FCFS(processes):",                                   # 0
    "    sort processes by arrival time",                     # 1
    "    clock ← 0",                                          # 2
    "    for p in processes:",                                # 3
    "        if clock < p.arrival: clock ← p.arrival",        # 4
    "        run p for p.burst units",                        # 5
    "        p completes at clock",                           # 6
]

SJF_PSEUDOCODE: List[str] = [
    "def SJF(processes):",                                    # 0
    "    clock ← 0",                                          # 1
    "    while processes remain:",                            # 2
    "        ready ← {p : p.arrival ≤ clock}",                # 3
    "        if ready is empty: clock ← clock + 1; continue", # 4
    "        p ← shortest burst in ready",                    # 5
    "        run p for p.burst units",                        # 6
    "        p completes at clock",                           # 7
]

RR_PSEUDOCODE: List[str] = [
    "def RoundRobin(processes, quantum):",                    # 0
    "    clock ← 0",                                          # 1
    "    while any p.remaining > 0:",                         # 2
    "        for p in processes:",                            # 3
    "            if p.remaining > 0 and p.arrival ≤ clock:",  # 4
    "                run p for min(quantum, p.remaining)",    # 5
    "                if p.remaining = 0: p completes",        # 6
    "                else: p waits for its next turn",        # 7
    "        if nothing ran: clock ← clock + 1",              # 8
]


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------
@dataclass
class ProcessStats:
    name:            str
    arrival_time:    int
    burst_time:      int
    completion_time: int
    turnaround_time: int
    waiting_time:    int

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class ScheduleMetrics:
    avg_waiting_time:    Optional[float]     = None
    avg_turnaround_time: Optional[float]     = None
    throughput:          Optional[float]     = None     # processes per unit time
    cpu_utilization:     Optional[float]     = None     # 0..1
    total_time:          int                 = 0
    per_process:         List[ProcessStats]  = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avg_waiting_time":    self.avg_waiting_time,
            "avg_turnaround_time": self.avg_turnaround_time,
            "throughput":          self.throughput,
            "cpu_utilization":     self.cpu_utilization,
            "total_time":          self.total_time,
            "per_process":         [s.to_dict() for s in self.per_process],
        }


def compute_metrics(processes: List[Process], timeline: List[TimelineEntry]) -> ScheduleMetrics:
    """
    Derive every scheduling metric from the timeline alone.

    completion = last unit the process appears in + 1
    turnaround = completion - arrival
    waiting    = turnaround - burst

    A process with a zero burst never appears and completes on arrival.
    With an empty timeline every aggregate is None.
    """
    if not timeline:
        return ScheduleMetrics()

    total_time = max(e.time for e in timeline) + 1
    last_unit: Dict[str, int] = {}
    for e in timeline:
        last_unit[e.process] = max(last_unit.get(e.process, e.time), e.time)

    stats: List[ProcessStats] = []
    for p in processes:
        completion = last_unit[p.name] + 1 if p.name in last_unit else p.arrival_time
        turnaround = completion - p.arrival_time
        stats.append(ProcessStats(
            name=p.name,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            completion_time=completion,
            turnaround_time=turnaround,
            waiting_time=turnaround - p.burst_time,
        ))

    count = len(stats)
    return ScheduleMetrics(
        avg_waiting_time=sum(s.waiting_time for s in stats) / count if count else None,
        avg_turnaround_time=sum(s.turnaround_time for s in stats) / count if count else None,
        throughput=count / total_time,
        cpu_utilization=len(timeline) / total_time,
        total_time=total_time,
        per_process=stats,
    )


# ---------------------------------------------------------------------------
# FCFS
# ---------------------------------------------------------------------------
def fcfs(
    processes: List[Process],
    timeline: Optional[List[TimelineEntry]] = None,
) -> Generator[Step, None, None]:
    """First Come First Serve: stable sort by arrival, each burst runs contiguously."""
    timeline = timeline if timeline is not None else []
    procs    = [p.fresh_copy() for p in processes]
    order    = sorted(procs, key=lambda p: p.arrival_time)
    sb       = StepBuilder(time_units=0, idle_units=0, dispatches=0)
    clock    = 0

    sb.pseudocode_line = 1
    yield sb.emit(StepKind.START, "📋 Starting FCFS (First Come First Serve) Scheduling",
                  **_state(clock, None, procs, timeline))

    for p in order:
        if clock < p.arrival_time:
            sb.bump("idle_units", p.arrival_time - clock)
            clock = p.arrival_time
            sb.highlight()
            sb.pseudocode_line = 4
            yield sb.emit(StepKind.IDLE, f"💤 CPU idle until time {clock}", **_state(clock, None, procs, timeline))

        sb.pseudocode_line = 5
        yield from _dispatch(sb, p, f"⚙️ Executing {p.name} (Burst: {p.burst_time})", clock, procs, timeline)
        for _ in range(p.burst_time):
            yield from _execute(sb, p, clock, procs, timeline)
            clock += 1

        sb.pseudocode_line = 6
        yield from _complete(sb, p, clock, procs, timeline)

    yield from _finish(sb, processes, clock, procs, timeline)


# ---------------------------------------------------------------------------
# SJF (non-preemptive)
# ---------------------------------------------------------------------------
def sjf(
    processes: List[Process],
    timeline: Optional[List[TimelineEntry]] = None,
) -> Generator[Step, None, None]:
    """Shortest Job First; ties go to the process listed first."""
    timeline  = timeline if timeline is not None else []
    procs     = [p.fresh_copy() for p in processes]
    remaining = list(procs)
    sb        = StepBuilder(time_units=0, idle_units=0, dispatches=0)
    clock     = 0

    sb.pseudocode_line = 1
    yield sb.emit(StepKind.START, "📊 Starting SJF (Shortest Job First) Scheduling",
                  **_state(clock, None, procs, timeline))

    while remaining:
        available = [p for p in remaining if p.arrival_time <= clock]
        if not available:
            clock += 1
            sb.bump("idle_units")
            sb.highlight()
            sb.pseudocode_line = 4
            yield sb.emit(StepKind.IDLE, f"💤 No process ready, clock advances to {clock}",
                          **_state(clock, None, procs, timeline))
            continue

        # min() keeps the first of equal bursts, i.e. input order
        p = min(available, key=lambda proc: proc.burst_time)

        sb.pseudocode_line = 6
        yield from _dispatch(sb, p, f"⚙️ Executing {p.name} (Burst: {p.burst_time})", clock, procs, timeline)
        for _ in range(p.burst_time):
            yield from _execute(sb, p, clock, procs, timeline)
            clock += 1

        sb.pseudocode_line = 7
        yield from _complete(sb, p, clock, procs, timeline)
        remaining.remove(p)

    yield from _finish(sb, processes, clock, procs, timeline)


# ---------------------------------------------------------------------------
# Round Robin
# ---------------------------------------------------------------------------
def round_robin(
    processes: List[Process],
    timeline: Optional[List[TimelineEntry]] = None,
    quantum: int = DEFAULT_QUANTUM,
) -> Generator[Step, None, None]:
    """
    Cyclic scan over the process list in input order, giving every ready,
    unfinished process up to `quantum` units per visit.  A full scan that
    finds nothing ready advances the clock by one idle unit.
    """
    if quantum < 1:
        raise ValueError(f"quantum must be >= 1, got {quantum}")

    timeline = timeline if timeline is not None else []
    procs    = [p.fresh_copy() for p in processes]
    sb       = StepBuilder(time_units=0, idle_units=0, dispatches=0, preemptions=0)
    clock    = 0

    sb.pseudocode_line = 1
    yield sb.emit(StepKind.START, f"🔄 Starting Round Robin Scheduling (Quantum: {quantum})",
                  **_state(clock, None, procs, timeline))

    while any(p.remaining_time > 0 for p in procs):
        ran = False
        for p in procs:
            if p.remaining_time <= 0 or p.arrival_time > clock:
                continue
            ran   = True
            slice_ = min(quantum, p.remaining_time)

            sb.pseudocode_line = 5
            yield from _dispatch(sb, p, f"⚙️ Executing {p.name} for {slice_} units", clock, procs, timeline)
            for _ in range(slice_):
                yield from _execute(sb, p, clock, procs, timeline)
                clock += 1

            if p.remaining_time == 0:
                sb.pseudocode_line = 6
                yield from _complete(sb, p, clock, procs, timeline)
            else:
                sb.bump("preemptions")
                sb.pseudocode_line = 7
                yield sb.emit(StepKind.PREEMPT, f"⏸️ {p.name} paused ({p.remaining_time} units remaining)",
                              **_state(clock, None, procs, timeline))

        if not ran:
            clock += 1
            sb.bump("idle_units")
            sb.highlight()
            sb.pseudocode_line = 8
            yield sb.emit(StepKind.IDLE, f"💤 No process ready, clock advances to {clock}",
                          **_state(clock, None, procs, timeline))

    yield from _finish(sb, processes, clock, procs, timeline)


# ---------------------------------------------------------------------------
# Helpers shared by the three policies
# ---------------------------------------------------------------------------
def _state(clock: int, running: Optional[str], procs: List[Process], timeline: List[TimelineEntry]) -> Dict[str, Any]:
    return {
        "clock":           clock,
        "running":         running,
        "remaining":       {p.name: p.remaining_time for p in procs},
        "timeline_length": len(timeline),
    }


def _dispatch(sb, p, message, clock, procs, timeline) -> Generator[Step, None, None]:
    sb.bump("dispatches")
    sb.highlight(p.name)
    yield sb.emit(StepKind.DISPATCH, message, **_state(clock, p.name, procs, timeline))


def _execute(sb, p, clock, procs, timeline) -> Generator[Step, None, None]:
    entry = TimelineEntry(process=p.name, time=clock, color=p.color)
    timeline.append(entry)
    p.remaining_time -= 1
    sb.bump("time_units")
    sb.highlight(p.name)
    yield sb.emit(StepKind.EXECUTE, "", entry=entry.to_dict(), **_state(clock + 1, p.name, procs, timeline))


def _complete(sb, p, clock, procs, timeline) -> Generator[Step, None, None]:
    sb.highlight(p.name)
    yield sb.emit(StepKind.COMPLETE, f"✅ {p.name} completed at time {clock}", **_state(clock, None, procs, timeline))


def _finish(sb, templates, clock, procs, timeline) -> Generator[Step, None, None]:
    metrics = compute_metrics(templates, timeline)
    sb.highlight()
    yield sb.emit(StepKind.DONE, "🏁 Scheduling completed!", is_final=True,
                  metrics=metrics.to_dict(), **_state(clock, None, procs, timeline))
