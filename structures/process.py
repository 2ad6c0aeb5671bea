"""
process.py — Scheduling Data Model
===================================
Process definitions and the per-unit execution timeline.

Design decisions:
  - A Process passed in by the host is a TEMPLATE.  Schedulers call
    fresh_copy() at the start of every run and only ever decrement
    remaining_time on the copy, so successive runs over the same
    definitions never see each other's progress.
  - The timeline (one TimelineEntry per executed unit) is the only
    source for waiting / turnaround numbers.  remaining_time is
    bookkeeping for the scheduler and is never read by the metrics.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# Colour tags the renderer maps onto its palette, cycled by process order.
COLOR_TAGS = ("primary", "secondary", "accent", "success", "warning", "info", "muted", "destructive")


def color_for(index: int) -> str:
    return COLOR_TAGS[index % len(COLOR_TAGS)]


@dataclass
class Process:
    """
    Attributes:
        id              : Stable integer identity (1-based in the default set).
        name            : Label shown on the Gantt chart, e.g. "P1".
        burst_time      : Total CPU units required.  Never changed by a run.
        arrival_time    : Clock tick at which the process becomes eligible.
        color           : Colour tag for the timeline.
        remaining_time  : Units still to execute (run bookkeeping only).
    """

    id:             int
    name:           str
    burst_time:     int
    arrival_time:   int = 0
    color:          Optional[str] = None
    remaining_time: int = field(init=False)

    def __post_init__(self) -> None:
        if self.burst_time < 0:
            raise ValueError(f"burst_time must be >= 0, got {self.burst_time}")
        if self.arrival_time < 0:
            raise ValueError(f"arrival_time must be >= 0, got {self.arrival_time}")
        if self.color is None:
            self.color = color_for(self.id - 1)
        self.remaining_time = self.burst_time

    def fresh_copy(self) -> "Process":
        """A copy with remaining_time reset to the full burst."""
        return Process(
            id=self.id,
            name=self.name,
            burst_time=self.burst_time,
            arrival_time=self.arrival_time,
            color=self.color,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id":           self.id,
            "name":         self.name,
            "burst_time":   self.burst_time,
            "arrival_time": self.arrival_time,
            "color":        self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Process":
        return cls(
            id=data.get("id", index + 1),
            name=data.get("name") or f"P{index + 1}",
            burst_time=int(data["burst_time"]),
            arrival_time=int(data.get("arrival_time", 0)),
            color=data.get("color"),
        )


@dataclass(frozen=True)
class TimelineEntry:
    process: str
    time:    int
    color:   str

    def to_dict(self) -> Dict[str, Any]:
        return {"process": self.process, "time": self.time, "color": self.color}


# The set the CPU scheduling experiment opens with.
def default_processes() -> List[Process]:
    return [
        Process(id=1, name="P1", burst_time=6, arrival_time=0),
        Process(id=2, name="P2", burst_time=4, arrival_time=1),
        Process(id=3, name="P3", burst_time=5, arrival_time=2),
        Process(id=4, name="P4", burst_time=3, arrival_time=3),
    ]
