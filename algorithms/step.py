"""
step.py — Algorithm Step Snapshot
==================================
Every steppable algorithm is a generator that yields Step objects.
A Step is a frozen-in-time picture of everything a host needs to render
one frame or append one line to the event log:

    • What kind of atomic event just happened (compare, swap, one unit
      of CPU time, a packet on the wire, …)
    • Which elements are highlighted right now
    • The algorithm state *after* the event (array, timeline tail, …)
    • Which line of pseudocode is executing
    • A human-readable log line

Design decisions:
  - Step is a plain frozen dataclass. It is a SNAPSHOT. The algorithm
    generator is the only writer; the stepper / visualizers are readers.
  - `state` and `metrics` are built from fresh containers on every
    emit(), so no two steps share a mutable object and nothing in a
    Step aliases the live algorithm data.
  - A generator suspends only after a whole atomic event, never in the
    middle of one. Whatever state a consumer sees at a suspension point
    is valid.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple, Any, Iterable
import copy


class StepKind(Enum):
    START       = "start"
    COMPARE     = "compare"
    SWAP        = "swap"
    PIVOT       = "pivot"
    MARK_SORTED = "mark_sorted"
    DISPATCH    = "dispatch"      # scheduler picked a process
    EXECUTE     = "execute"       # one unit of CPU time
    IDLE        = "idle"          # clock advanced with nothing to run
    PREEMPT     = "preempt"       # quantum expired, process goes back in line
    COMPLETE    = "complete"      # a process finished its burst
    PACKET      = "packet"
    DONE        = "done"


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number     : 0-based index of this step in the run.
        kind            : StepKind of the atomic event.
        message         : Log line for this event ("" when silent).
        highlighted     : Indices / names the renderer should emphasise.
        state           : Plain dict describing the algorithm state after the event.
        pseudocode_line : 0-based index into the algorithm's PSEUDOCODE.
        metrics         : Running tally: comparisons, swaps, time_units, …
        is_final        : True on the very last step of a run.
    """

    step_number:      int               = 0
    kind:             StepKind          = StepKind.START
    message:          str               = ""
    highlighted:      Tuple[Any, ...]   = ()
    state:            Dict[str, Any]    = field(default_factory=dict)
    pseudocode_line:  int               = 0
    metrics:          Dict[str, Any]    = field(default_factory=dict)
    is_final:         bool              = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_number":     self.step_number,
            "kind":            self.kind.value,
            "message":         self.message,
            "highlighted":     list(self.highlighted),
            "state":           copy.deepcopy(self.state),
            "pseudocode_line": self.pseudocode_line,
            "metrics":         dict(self.metrics),
            "is_final":        self.is_final,
        }


# ---------------------------------------------------------------------------
# Convenience builder so algorithms don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Mutable scratch-pad that algorithms use to construct Steps cleanly.
    The builder also owns the step counter, so a generator only has to
    call emit().

    Usage inside an algorithm generator:
        sb = StepBuilder(comparisons=0, swaps=0)
        sb.compare(j, j + 1)
        sb.pseudocode_line = 3
        yield sb.emit(StepKind.COMPARE, f"Comparing {a[j]} and {a[j + 1]}", array=a)
    """

    def __init__(self, **counters: int):
        self.step_no:         int              = 0
        self.highlighted:     List[Any]        = []
        self.sorted:          List[int]        = []
        self.pseudocode_line: int              = 0
        self.metrics:         Dict[str, Any]   = dict(counters)

    # -- helpers --
    def highlight(self, *items: Any) -> None:
        self.highlighted = list(items)

    def compare(self, *indices: int) -> None:
        self.highlight(*indices)
        self.bump("comparisons")

    def swap(self, i: int, j: int) -> None:
        self.highlight(i, j)
        self.bump("swaps")

    def bump(self, counter: str, by: int = 1) -> None:
        self.metrics[counter] = self.metrics.get(counter, 0) + by

    def mark_sorted(self, indices: Iterable[int]) -> None:
        for idx in indices:
            if idx not in self.sorted:
                self.sorted.append(idx)

    def emit(self, kind: StepKind, message: str = "", is_final: bool = False, **state: Any) -> Step:
        """Build a Step from the current scratch state and advance the counter."""
        if "sorted" not in state and self.sorted:
            state["sorted"] = sorted(self.sorted)
        step = Step(
            step_number=self.step_no,
            kind=kind,
            message=message,
            highlighted=tuple(self.highlighted),
            state=copy.deepcopy(state),
            pseudocode_line=self.pseudocode_line,
            metrics=dict(self.metrics),
            is_final=is_final,
        )
        self.step_no += 1
        return step
